"""Locate and load the libngspice shared library.

Provides functions to:
- Find libngspice from the environment, the system loader or common paths
- Load it with its entry points declared
"""

import ctypes
import ctypes.util
import logging
import os
from pathlib import Path
from typing import List, Optional, Union

from ngshared.bindings import NgSpiceLibrary
from ngshared.config import LIBRARY_ENV_VAR, LIBRARY_NAME, LIBRARY_NAMES, SEARCH_PATHS
from ngshared.errors import NgSpiceLibraryNotFoundError

logger = logging.getLogger(__name__)

__all__ = [
    "find_ngspice_library",
    "load_library",
]


def find_ngspice_library() -> Optional[str]:
    """Find the libngspice shared library in standard locations.

    Checks in order:
    1. NGSPICE_LIBRARY_PATH environment variable
    2. The platform loader via ctypes.util.find_library
    3. Common installation paths

    Returns:
        A path or loader name suitable for ctypes.CDLL, or None if not found
    """
    env_path = os.environ.get(LIBRARY_ENV_VAR)
    if env_path:
        path = Path(env_path).expanduser().resolve()
        if path.is_file():
            return str(path)
        logger.warning(f"{LIBRARY_ENV_VAR} points to a missing file: {env_path}")

    found = ctypes.util.find_library(LIBRARY_NAME)
    if found:
        return found

    for directory in SEARCH_PATHS:
        for name in LIBRARY_NAMES:
            path = Path(directory) / name
            if path.exists():
                return str(path)

    return None


def _candidates(path: Optional[Union[str, Path]]) -> List[str]:
    if path is not None:
        return [str(path)]
    found = find_ngspice_library()
    candidates = [found] if found else []
    # Let the dynamic loader have a go with the bare sonames too
    candidates.extend(name for name in LIBRARY_NAMES if name not in candidates)
    return candidates


def load_library(path: Optional[Union[str, Path]] = None) -> NgSpiceLibrary:
    """Load libngspice and declare its entry points.

    Args:
        path: Explicit library path. When omitted, find_ngspice_library()
            is consulted, then the bare platform sonames.

    Returns:
        NgSpiceLibrary ready to be handed to a session

    Raises:
        NgSpiceLibraryNotFoundError: if no candidate could be loaded
    """
    tried = []
    for candidate in _candidates(path):
        tried.append(candidate)
        try:
            lib = ctypes.CDLL(candidate)
        except OSError as e:
            logger.debug(f"Could not load {candidate}: {e}")
            continue
        logger.info(f"Loaded libngspice from {candidate}")
        return NgSpiceLibrary(lib)

    raise NgSpiceLibraryNotFoundError(
        f"libngspice not found (tried: {', '.join(tried) or 'nothing'}); "
        f"set {LIBRARY_ENV_VAR} to the shared library path",
        tried=tried,
    )
