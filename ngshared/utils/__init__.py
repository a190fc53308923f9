"""Utilities for locating and loading libngspice."""

from ngshared.utils.library import find_ngspice_library, load_library

__all__ = ["find_ngspice_library", "load_library"]
