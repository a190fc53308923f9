"""Copy engine-owned result data into Python objects.

Everything returned by libngspice query functions stays owned by the
engine and may be freed or rewritten by the next command, so the helpers
here always copy before returning.
"""

import ctypes
import logging
from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np

from ngshared.bindings import VectorInfoStruct
from ngshared.config import ENCODING
from ngshared.errors import EncodingError, NoResultError, VectorLengthError

logger = logging.getLogger(__name__)

__all__ = [
    "VectorInfo",
    "encode",
    "decode",
    "read_string",
    "read_string_array",
    "copy_vector_info",
]


@dataclass(frozen=True, eq=False)
class VectorInfo:
    """Snapshot of one result vector at query time.

    ``data`` holds a private float64 copy of the real samples. Complex
    vectors are not converted: ``data`` is empty and ``is_complex`` is True.
    """

    name: str
    data: np.ndarray = field(default_factory=lambda: np.zeros(0, dtype=np.float64))
    is_complex: bool = False

    def __len__(self) -> int:
        return len(self.data)


def encode(text: str) -> bytes:
    """Encode text for the engine, rejecting what a C string cannot carry."""
    if "\0" in text:
        raise EncodingError(f"Embedded NUL character in {text!r}")
    try:
        return text.encode(ENCODING)
    except UnicodeEncodeError as e:
        raise EncodingError(f"Cannot encode {text!r} as {ENCODING}: {e}") from e


def decode(raw: bytes) -> str:
    try:
        return raw.decode(ENCODING)
    except UnicodeDecodeError as e:
        raise EncodingError(f"Engine returned undecodable text {raw!r}: {e}") from e


def read_string(address: Optional[int], what: str = "string") -> str:
    """Copy and decode a NUL-terminated string owned by the engine.

    Raises NoResultError for a null pointer, EncodingError for bad text.
    """
    if not address:
        raise NoResultError(f"Engine returned no {what}")
    return decode(ctypes.string_at(address))


def read_string_array(array) -> List[str]:
    """Copy a NULL-terminated ``char**`` owned by the engine.

    Stops at the first null entry, which is the only terminator the engine
    provides. A null array yields an empty list.
    """
    strings: List[str] = []
    if not array:
        return strings
    i = 0
    while array[i]:
        strings.append(read_string(array[i]))
        i += 1
    return strings


def copy_vector_info(info: VectorInfoStruct) -> VectorInfo:
    """Build a VectorInfo from an engine ``vector_info`` record."""
    if info.v_name is None:
        raise NoResultError("Engine returned a vector without a name")
    name = decode(info.v_name)

    length = info.v_length
    if length < 0:
        raise VectorLengthError(name, length)

    if info.v_realdata:
        if length == 0:
            return VectorInfo(name=name)
        samples = np.ctypeslib.as_array(info.v_realdata, shape=(length,))
        return VectorInfo(name=name, data=np.array(samples, dtype=np.float64, copy=True))

    # Complex samples are not converted
    logger.debug(f"Vector {name} holds complex data; returning no samples")
    return VectorInfo(name=name, is_complex=bool(info.v_compdata))
