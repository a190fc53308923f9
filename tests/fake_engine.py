"""Pure-Python stand-in for libngspice used by the unit tests.

FakeEngine exposes the same entry points as NgSpiceLibrary, under their C
names, and behaves like the shared library at the boundary:

- callbacks are invoked through the CFUNCTYPE objects the session hands to
  ngSpice_Init, with the context pointer it supplied
- strings and arrays are returned as raw addresses / ctypes pointers into
  buffers the fake owns, just like engine-owned memory

Supported commands:
    echo <text>   emits "stdout <text>"
    op            creates a new plot "opN" with one vector per circuit node
    quit          fires the controlled-exit callback
Anything listed in ``fail_commands`` returns status 1.
"""

import ctypes
import sys
from ctypes import POINTER, c_double, c_void_p
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from ngshared.bindings import NgComplex, VectorInfoStruct
from ngshared.callbacks import Callbacks


def _as_bytes(arg) -> bytes:
    if isinstance(arg, bytes):
        return arg
    return arg.value


@dataclass
class FakeVector:
    name: bytes
    data: Sequence[float] = ()
    is_complex: bool = False
    length: Optional[int] = None


@dataclass
class FakePlot:
    name: bytes
    vectors: List[FakeVector] = field(default_factory=list)


class FakeEngine:
    """Scriptable replacement for a loaded libngspice."""

    def __init__(self):
        self.init_calls = []
        self.commands: List[str] = []
        self.circuits: List[List[Optional[bytes]]] = []
        self.fail_commands = set()
        self.init_status = 0
        self.circ_status = 0

        self.send_char = None
        self.controlled_exit = None
        self.context = None

        self.circuit_lines: List[str] = []
        self.plots: List[FakePlot] = [FakePlot(b"const", [FakeVector(b"pi", [3.141592653589793])])]
        self.current: Optional[bytes] = b"const"
        self.null_plot_array = False
        self._op_count = 0
        # Buffers handed out to the caller; kept alive like engine memory
        self._owned = []

    # -- Helpers used by tests ----------------------------------------------

    def emit(self, text: bytes) -> None:
        """Send one output line through the registered SendChar callback."""
        if not self.send_char:
            return
        buf = ctypes.create_string_buffer(text)
        self.send_char(ctypes.cast(buf, c_void_p), 0, self.context)

    def emit_null(self) -> None:
        if self.send_char:
            self.send_char(None, 0, self.context)

    def exit(self, status: int = 0, unload: bool = True, quit: bool = True) -> None:
        if self.controlled_exit:
            self.controlled_exit(status, unload, quit, 0, self.context)

    def add_plot(self, plot: FakePlot, make_current: bool = True) -> None:
        self.plots.insert(0, plot)
        if make_current:
            self.current = plot.name

    def _keep(self, obj):
        self._owned.append(obj)
        return obj

    def _string(self, text: bytes) -> int:
        return ctypes.addressof(self._keep(ctypes.create_string_buffer(text)))

    def _string_array(self, items: Sequence[bytes]):
        array = self._keep((c_void_p * (len(items) + 1))(*[self._string(s) for s in items], None))
        return ctypes.cast(array, POINTER(c_void_p))

    def _find_plot(self, name: bytes) -> Optional[FakePlot]:
        for plot in self.plots:
            if plot.name == name:
                return plot
        return None

    # -- libngspice entry points --------------------------------------------

    def ngSpice_Init(self, send_char, send_stat, controlled_exit, send_data, send_init_data,
                     bg_thread_running, context):
        self.init_calls.append((send_char, controlled_exit, context))
        self.send_char = send_char
        self.controlled_exit = controlled_exit
        self.context = context
        return self.init_status

    def ngSpice_Command(self, buffer) -> int:
        text = _as_bytes(buffer).decode("utf-8")
        self.commands.append(text)
        if text in self.fail_commands:
            self.emit(f"stderr Error: {text} failed".encode())
            return 1

        verb, _, rest = text.partition(" ")
        if verb == "echo":
            self.emit(f"stdout {rest}".encode())
        elif verb == "op":
            if not self.circuit_lines:
                self.emit(b"stderr Error: there aren't any circuits loaded.")
                return 1
            self._run_op()
        elif verb == "quit":
            self.exit(0, True, True)
        return 0

    def _run_op(self) -> None:
        self._op_count += 1
        nodes = []
        for line in self.circuit_lines:
            tokens = line.split()
            if not tokens or tokens[0].startswith(".") or tokens[0].startswith("*"):
                continue
            for node in tokens[1:3]:
                if node not in ("0", "gnd") and node not in nodes:
                    nodes.append(node)
        vectors = [FakeVector(node.encode(), [float(i + 1)]) for i, node in enumerate(nodes)]
        self.add_plot(FakePlot(f"op{self._op_count}".encode(), vectors))

    def ngSpice_Circ(self, array) -> int:
        lines = []
        i = 0
        while True:
            entry = array[i]
            lines.append(entry)
            if entry is None:
                break
            i += 1
        self.circuits.append(lines)
        if self.circ_status == 0:
            self.circuit_lines = [line.decode("utf-8") for line in lines if line]
        return self.circ_status

    def ngSpice_CurPlot(self) -> Optional[int]:
        if self.current is None:
            return None
        return self._string(self.current)

    def ngSpice_AllPlots(self):
        if self.null_plot_array:
            return POINTER(c_void_p)()
        return self._string_array([plot.name for plot in self.plots])

    def ngSpice_AllVecs(self, buffer):
        plot = self._find_plot(_as_bytes(buffer))
        if plot is None:
            return POINTER(c_void_p)()
        return self._string_array([vec.name for vec in plot.vectors])

    def ngGet_Vec_Info(self, buffer):
        plot_name, sep, vec_name = _as_bytes(buffer).partition(b".")
        if not sep:
            plot_name, vec_name = self.current, plot_name
        plot = self._find_plot(plot_name)
        vector = None
        if plot is not None:
            vector = next((v for v in plot.vectors if v.name == vec_name), None)
        if vector is None:
            return POINTER(VectorInfoStruct)()

        n = len(vector.data)
        info = VectorInfoStruct()
        info.v_name = vector.name
        info.v_length = n if vector.length is None else vector.length
        if vector.is_complex:
            values = self._keep((NgComplex * n)(*[NgComplex(float(v), 0.0) for v in vector.data]))
            info.v_compdata = ctypes.cast(values, POINTER(NgComplex))
        else:
            values = self._keep((c_double * n)(*vector.data))
            info.v_realdata = ctypes.cast(values, POINTER(c_double))
        return ctypes.pointer(self._keep(info))


class RecordingCallbacks(Callbacks):
    """Callbacks that remember everything they receive.

    ``on_exit`` runs inside controlled_exit when set, which lets tests act
    from within the exit handler.
    """

    def __init__(self, on_exit=None):
        self.lines: List[str] = []
        self.exits = []
        self.on_exit = on_exit

    def send_char(self, text: str) -> None:
        self.lines.append(text)

    def controlled_exit(self, status: int, unload: bool, quit: bool) -> None:
        self.exits.append((status, unload, quit))
        if self.on_exit is not None:
            self.on_exit()


class RaisingCallbacks(Callbacks):
    def send_char(self, text: str) -> None:
        raise RuntimeError(f"boom on {text}")

    def controlled_exit(self, status: int, unload: bool, quit: bool) -> None:
        raise RuntimeError("boom on exit")


class ExitingCallbacks(Callbacks):
    """Honours ``quit`` by exiting the interpreter, as a CLI host would."""

    def controlled_exit(self, status: int, unload: bool, quit: bool) -> None:
        if quit:
            sys.exit(status)


class InterruptingCallbacks(Callbacks):
    def send_char(self, text: str) -> None:
        raise KeyboardInterrupt
