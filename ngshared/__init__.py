"""ngshared: a safe session layer over the ngspice shared library"""

import logging

from ngshared.bindings import NgSpiceLibrary
from ngshared.callbacks import Callbacks, LoggingCallbacks
from ngshared.errors import (
    CommandError,
    DoubleInitError,
    EncodingError,
    InitError,
    NoResultError,
    NgSpiceError,
    NgSpiceLibraryNotFoundError,
    SessionClosedError,
    SessionExitedError,
    SessionStateError,
    VectorLengthError,
    VectorNotFoundError,
)
from ngshared.session import NgSpice
from ngshared.utils.library import find_ngspice_library, load_library
from ngshared.vectors import VectorInfo

__version__ = "0.1.0"


logger = logging.getLogger("ngshared")

__all__ = [
    "NgSpice",
    "Callbacks",
    "LoggingCallbacks",
    "VectorInfo",
    "NgSpiceLibrary",
    "find_ngspice_library",
    "load_library",
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
    "__version__",
]
