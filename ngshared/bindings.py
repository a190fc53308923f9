"""ctypes declarations for the libngspice shared-library interface.

Mirrors the public header ``sharedspice.h``. Only declarations live here:
structure layouts, callback prototypes and the argument/return types of the
entry points the session uses. Nothing in this module calls into the engine.

Reference: ngspice manual, chapter "ngspice as shared library"
"""

import ctypes
import logging
from ctypes import (
    CFUNCTYPE, POINTER, Structure, c_bool, c_char_p, c_double, c_int, c_short, c_void_p,
)
from pathlib import Path
from typing import Optional, Union

logger = logging.getLogger(__name__)

__all__ = [
    "NgComplex",
    "VectorInfoStruct",
    "VecValues",
    "VecValuesAll",
    "VecInfo",
    "VecInfoAll",
    "SendChar",
    "SendStat",
    "ControlledExit",
    "SendData",
    "SendInitData",
    "BGThreadRunning",
    "NgSpiceLibrary",
    "declare_functions",
]


# Structures (ctypes definitions matching sharedspice.h)

class NgComplex(Structure):
    _fields_ = [
        ("cx_real", c_double),
        ("cx_imag", c_double),
    ]


class VectorInfoStruct(Structure):
    """``struct vector_info`` returned by ngGet_Vec_Info.

    Exactly one of ``v_realdata``/``v_compdata`` is non-null.
    """
    _fields_ = [
        ("v_name", c_char_p),
        ("v_type", c_int),
        ("v_flags", c_short),
        ("v_realdata", POINTER(c_double)),
        ("v_compdata", POINTER(NgComplex)),
        ("v_length", c_int),
    ]


class VecValues(Structure):
    _fields_ = [
        ("name", c_char_p),
        ("creal", c_double),
        ("cimag", c_double),
        ("is_scale", c_bool),
        ("is_complex", c_bool),
    ]


class VecValuesAll(Structure):
    _fields_ = [
        ("veccount", c_int),
        ("vecindex", c_int),
        ("vecsa", POINTER(POINTER(VecValues))),
    ]


class VecInfo(Structure):
    _fields_ = [
        ("number", c_int),
        ("vecname", c_char_p),
        ("is_real", c_bool),
        ("pdvec", c_void_p),
        ("pdvecscale", c_void_p),
    ]


class VecInfoAll(Structure):
    _fields_ = [
        ("name", c_char_p),
        ("title", c_char_p),
        ("date", c_char_p),
        ("type", c_char_p),
        ("veccount", c_int),
        ("vecs", POINTER(POINTER(VecInfo))),
    ]


# Callback prototypes. Every callback returns int and receives the
# library ident plus the opaque user pointer given to ngSpice_Init.
# Text arguments are declared as c_void_p so the raw pointer reaches the
# callback undecoded; the trampoline does the decoding itself.
SendChar = CFUNCTYPE(c_int, c_void_p, c_int, c_void_p)
SendStat = CFUNCTYPE(c_int, c_void_p, c_int, c_void_p)
ControlledExit = CFUNCTYPE(c_int, c_int, c_bool, c_bool, c_int, c_void_p)
SendData = CFUNCTYPE(c_int, POINTER(VecValuesAll), c_int, c_int, c_void_p)
SendInitData = CFUNCTYPE(c_int, POINTER(VecInfoAll), c_int, c_void_p)
BGThreadRunning = CFUNCTYPE(c_int, c_bool, c_int, c_void_p)


def declare_functions(lib: ctypes.CDLL) -> None:
    """Attach argtypes/restype to the entry points of a loaded libngspice."""
    lib.ngSpice_Init.restype = c_int
    lib.ngSpice_Init.argtypes = [
        SendChar, SendStat, ControlledExit, SendData, SendInitData, BGThreadRunning, c_void_p,
    ]

    lib.ngSpice_Command.restype = c_int
    lib.ngSpice_Command.argtypes = [c_char_p]

    lib.ngSpice_Circ.restype = c_int
    lib.ngSpice_Circ.argtypes = [POINTER(c_char_p)]

    # Strings are returned as raw pointers so decoding errors surface in the
    # session instead of inside ctypes
    lib.ngSpice_CurPlot.restype = c_void_p
    lib.ngSpice_CurPlot.argtypes = []

    lib.ngSpice_AllPlots.restype = POINTER(c_void_p)
    lib.ngSpice_AllPlots.argtypes = []

    lib.ngSpice_AllVecs.restype = POINTER(c_void_p)
    lib.ngSpice_AllVecs.argtypes = [c_char_p]

    lib.ngGet_Vec_Info.restype = POINTER(VectorInfoStruct)
    lib.ngGet_Vec_Info.argtypes = [c_char_p]


class NgSpiceLibrary:
    """A loaded libngspice with its entry points declared.

    Exposes the seven entry points used by the session under their C names,
    so any object providing the same attributes can stand in for it.
    """

    def __init__(self, library: Union[str, Path, ctypes.CDLL]):
        if isinstance(library, ctypes.CDLL):
            self.lib = library
            self.path: Optional[Path] = Path(library._name) if library._name else None
        else:
            self.path = Path(library)
            self.lib = ctypes.CDLL(str(library))

        declare_functions(self.lib)
        logger.debug(f"Declared libngspice entry points from {self.path}")

        self.ngSpice_Init = self.lib.ngSpice_Init
        self.ngSpice_Command = self.lib.ngSpice_Command
        self.ngSpice_Circ = self.lib.ngSpice_Circ
        self.ngSpice_CurPlot = self.lib.ngSpice_CurPlot
        self.ngSpice_AllPlots = self.lib.ngSpice_AllPlots
        self.ngSpice_AllVecs = self.lib.ngSpice_AllVecs
        self.ngGet_Vec_Info = self.lib.ngGet_Vec_Info

    def __repr__(self) -> str:
        return f"NgSpiceLibrary({str(self.path)!r})"
