"""Default configuration values for the ngspice shared-library session.

This module centralizes constants used at the boundary with libngspice.
"""

import sys

# Text encoding used for every string crossing the engine boundary
ENCODING = "utf-8"

# ngSpice_Command returns 0 on success, anything else is a failure
STATUS_OK = 0

# ngSpice_Circ reports failure with 1 (other values are treated as success)
CIRC_STATUS_FAILURE = 1

# Value returned from every callback handed to the engine
CALLBACK_OK = 0

# Environment variable that overrides library discovery
LIBRARY_ENV_VAR = "NGSPICE_LIBRARY_PATH"

# Name passed to ctypes.util.find_library
LIBRARY_NAME = "ngspice"

# Shared library file names tried directly, per platform
if sys.platform == "win32":
    LIBRARY_NAMES = ("libngspice-0.dll", "ngspice.dll")
elif sys.platform == "darwin":
    LIBRARY_NAMES = ("libngspice.0.dylib", "libngspice.dylib")
else:
    LIBRARY_NAMES = ("libngspice.so.0", "libngspice.so")

# Common installation directories searched last
SEARCH_PATHS = (
    "/usr/local/lib",
    "/usr/lib",
    "/usr/lib/x86_64-linux-gnu",
    "/usr/lib/aarch64-linux-gnu",
    "/opt/homebrew/lib",  # macOS Homebrew ARM
    "/opt/local/lib",  # MacPorts
)
