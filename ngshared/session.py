"""Session handle: the single safe entry point to libngspice.

libngspice is a process-wide singleton, so NgSpice is too: the first
construction in a process initializes the engine and every later one
raises DoubleInitError.

Example:
    ```python
    class Recorder(Callbacks):
        def __init__(self):
            self.lines = []

        def send_char(self, text):
            self.lines.append(text)

    with NgSpice(Recorder()) as spice:
        spice.circuit([".title t", "R1 a b 10k", "V1 a b dc(5)", ".end"])
        spice.command("op")
        plot = spice.current_plot()
        vectors = spice.vectors(plot)
    ```
"""

import atexit
import ctypes
import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from ngshared import guard as _guard
from ngshared.bindings import NgSpiceLibrary
from ngshared.callbacks import Callbacks
from ngshared.config import CIRC_STATUS_FAILURE, STATUS_OK
from ngshared.errors import (
    CommandError,
    DoubleInitError,
    InitError,
    SessionClosedError,
    SessionExitedError,
    VectorNotFoundError,
)
from ngshared.trampolines import (
    context_token,
    controlled_exit_trampoline,
    inert_exit_trampoline,
    send_char_trampoline,
)
from ngshared.utils.library import load_library
from ngshared.vectors import VectorInfo, copy_vector_info, encode, read_string, read_string_array

logger = logging.getLogger(__name__)

__all__ = ["NgSpice"]


class NgSpice:
    """Owning handle to the engine's global state.

    Args:
        callbacks: receiver for engine output and exit notification.
            Defaults to a no-op Callbacks.
        library: loaded NgSpiceLibrary (or any object exposing the same
            entry points), or a path to libngspice. When omitted the
            library is located with load_library().

    Raises:
        DoubleInitError: the engine was already initialized in this process
        InitError: ngSpice_Init reported failure

    The engine keeps this object's address for its callbacks, so the
    session stays referenced by the process-wide guard until close() is
    called (explicitly, via ``with``, or at interpreter exit). If the engine
    exited on its own it may still hold the address, and the session then
    stays referenced for the remaining life of the process.

    Commands are not thread-safe; serialize access to a session yourself.

    A SystemExit or KeyboardInterrupt raised by a callback cannot cross the
    engine; it is re-raised from command() or circuit() once the engine
    call returns.
    """

    def __init__(
        self,
        callbacks: Optional[Callbacks] = None,
        library: Optional[Union[NgSpiceLibrary, str, Path]] = None,
    ):
        self.callbacks = callbacks if callbacks is not None else Callbacks()
        self._exited = False
        self._initiated = False
        self._closed = False
        self._deferred: Optional[BaseException] = None

        guard = _guard.ENGINE_GUARD
        if guard.initialized:
            raise DoubleInitError()

        if library is None or isinstance(library, (str, Path)):
            library = load_library(library)
        self.library = library

        def init_call():
            status = self.library.ngSpice_Init(
                send_char_trampoline,
                None,
                controlled_exit_trampoline,
                None,
                None,
                None,
                context_token(self),
            )
            if status != STATUS_OK:
                raise InitError(status)

        if not guard.initialize(self, init_call):
            raise DoubleInitError()

        self._initiated = True
        self._guard = guard
        atexit.register(self.close)
        logger.info(f"Initialized ngspice session using {self.library!r}")

    @property
    def exited(self) -> bool:
        """True once the engine has signalled controlled exit."""
        return self._exited

    @property
    def initiated(self) -> bool:
        """True iff this session performed the process's initialization."""
        return self._initiated

    @property
    def closed(self) -> bool:
        return self._closed

    def _raise_deferred(self) -> None:
        """Re-raise a SystemExit/KeyboardInterrupt a callback raised during the last engine call."""
        exc, self._deferred = self._deferred, None
        if exc is not None:
            raise exc

    def _ensure_usable(self, operation: str) -> None:
        if self._closed:
            raise SessionClosedError(operation)
        if self._exited:
            raise SessionExitedError(operation)

    # -- Command issuing ----------------------------------------------------

    def command(self, text: str) -> None:
        """Run one ngspice command synchronously.

        Engine output produced by the command reaches ``callbacks.send_char``
        before this returns.

        Raises:
            SessionExitedError: the engine already exited (programming error)
            EncodingError: ``text`` cannot be passed as a C string
            CommandError: the engine reported failure
        """
        self._ensure_usable(f"run command {text!r}")
        buffer = ctypes.create_string_buffer(encode(text))
        logger.debug(f"ngSpice_Command({text!r})")
        status = self.library.ngSpice_Command(buffer)
        self._raise_deferred()
        if status != STATUS_OK:
            logger.warning(f"ngspice command {text!r} failed with status {status}")
            raise CommandError(text, status)

    def circuit(self, lines: Union[Sequence[str], str]) -> None:
        """Load a netlist, given as lines without a terminator.

        A single string is split into lines. The netlist is passed through
        verbatim.

        Raises:
            SessionExitedError: the engine already exited (programming error)
            EncodingError: a line cannot be passed as a C string
            CommandError: the engine rejected the circuit
        """
        self._ensure_usable("load a circuit")
        if isinstance(lines, str):
            lines = lines.splitlines()
        lines = list(lines)

        encoded = [encode(line) for line in lines]
        # ngspice wants an empty line and a NULL after the netlist
        encoded.append(b"")
        array = (ctypes.c_char_p * (len(encoded) + 1))(*encoded, None)

        logger.debug(f"ngSpice_Circ with {len(lines)} lines")
        status = self.library.ngSpice_Circ(array)
        self._raise_deferred()
        if status == CIRC_STATUS_FAILURE:
            title = lines[0] if lines else "<empty circuit>"
            logger.warning(f"ngspice failed to load circuit {title!r}")
            raise CommandError(title, status)

    # -- Result querying ----------------------------------------------------

    def current_plot(self) -> str:
        """Name of the engine's current plot (result set).

        Raises:
            NoResultError: the engine has no current plot
            EncodingError: the name cannot be decoded
        """
        self._ensure_usable("query the current plot")
        return read_string(self.library.ngSpice_CurPlot(), "current plot")

    def all_plots(self) -> List[str]:
        """Names of all plots, in engine order."""
        self._ensure_usable("query plots")
        return read_string_array(self.library.ngSpice_AllPlots())

    def all_vecs(self, plot_name: str) -> List[str]:
        """Names of all vectors in ``plot_name``, in engine order."""
        self._ensure_usable(f"query vectors of {plot_name!r}")
        buffer = ctypes.create_string_buffer(encode(plot_name))
        return read_string_array(self.library.ngSpice_AllVecs(buffer))

    def vector_info(self, name: str) -> VectorInfo:
        """Copy one vector, addressed as ``"<plot>.<vector>"``.

        Complex vectors come back with empty ``data`` and ``is_complex``
        set; converting complex samples is not supported.

        Raises:
            VectorNotFoundError: the engine has no such vector
            VectorLengthError: the engine reported a negative length
            EncodingError: the name cannot cross the boundary
        """
        self._ensure_usable(f"query vector {name!r}")
        buffer = ctypes.create_string_buffer(encode(name))
        record = self.library.ngGet_Vec_Info(buffer)
        if not record:
            raise VectorNotFoundError(name)
        return copy_vector_info(record.contents)

    def vectors(self, plot_name: str) -> Dict[str, VectorInfo]:
        """Copy every vector of ``plot_name``, keyed by vector name."""
        return {
            vec: self.vector_info(f"{plot_name}.{vec}")
            for vec in self.all_vecs(plot_name)
        }

    # -- Teardown -----------------------------------------------------------

    def close(self) -> None:
        """Release the engine.

        If the engine never exited, it is re-initialized with no output
        callback, an inert exit callback and no context, so it stops
        referring to this session. Safe to call more than once.
        """
        if self._closed or not self._initiated:
            return
        self._closed = True
        atexit.unregister(self.close)

        if self._exited:
            # The engine may still hold our context; keep the pin
            logger.info("ngspice already exited; leaving session pinned")
            return

        logger.info("Releasing ngspice")
        self.library.ngSpice_Init(None, None, inert_exit_trampoline, None, None, None, None)
        self._guard.release(self)

    def __enter__(self) -> "NgSpice":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def __repr__(self) -> str:
        if self._closed:
            state = "closed"
        elif self._exited:
            state = "exited"
        else:
            state = "running"
        return f"<NgSpice {state} callbacks={type(self.callbacks).__name__}>"
