"""Exceptions raised by the ngspice session layer.

Two families of errors:

- ``NgSpiceError`` subclasses are recoverable, data-driven failures (a bad
  command, text that cannot cross the boundary, a vector that does not exist).
- ``SessionStateError`` subclasses report misuse of a session handle, such as
  issuing commands after the engine exited. They derive from ``RuntimeError``
  so that ``except NgSpiceError`` never swallows them.
"""

from typing import Optional

__all__ = [
    "NgSpiceError",
    "DoubleInitError",
    "InitError",
    "CommandError",
    "EncodingError",
    "NoResultError",
    "VectorLengthError",
    "VectorNotFoundError",
    "NgSpiceLibraryNotFoundError",
    "SessionStateError",
    "SessionExitedError",
    "SessionClosedError",
]


class NgSpiceError(Exception):
    """Base class for typed ngspice failures."""

    pass


class DoubleInitError(NgSpiceError):
    """The engine was already initialized in this process.

    libngspice keeps a single global state, so only the first session
    constructed in a process may talk to it.
    """

    def __init__(self, message: str = "ngspice has already been initialized in this process"):
        super().__init__(message)


class InitError(NgSpiceError):
    """ngSpice_Init returned a non-zero status."""

    def __init__(self, status: int):
        self.status = status
        super().__init__(f"ngSpice_Init failed with status {status}")


class CommandError(NgSpiceError):
    """The engine reported failure for a command or circuit load."""

    def __init__(self, command: str, status: int):
        self.command = command
        self.status = status
        super().__init__(f"ngspice rejected {command!r} (status {status})")


class EncodingError(NgSpiceError, ValueError):
    """Text could not be encoded for, or decoded from, the engine."""

    pass


class NoResultError(NgSpiceError):
    """The engine returned a null pointer where a result was expected.

    ngSpice_CurPlot does this when there is no current plot.
    """

    pass


class VectorLengthError(NgSpiceError, OverflowError):
    """Engine-reported vector length cannot be used as a buffer size."""

    def __init__(self, name: str, length: int):
        self.name = name
        self.length = length
        super().__init__(f"Vector {name!r} reports invalid length {length}")


class VectorNotFoundError(NgSpiceError, KeyError):
    """ngGet_Vec_Info returned no record for the requested vector."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Vector not found: {self.name!r}"


class NgSpiceLibraryNotFoundError(NgSpiceError, OSError):
    """The libngspice shared library could not be located or loaded."""

    def __init__(self, message: str, tried: Optional[list] = None):
        self.tried = list(tried or [])
        super().__init__(message)


class SessionStateError(RuntimeError):
    """A session handle was used in a state that forbids the operation."""

    pass


class SessionExitedError(SessionStateError):
    """The engine signalled controlled exit; the session can no longer be driven."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"ngspice has exited; cannot {operation}")


class SessionClosedError(SessionStateError):
    """The session was closed and released the engine."""

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"session is closed; cannot {operation}")
