"""Callback capability set a session forwards engine notifications to."""

import logging
from typing import List, Optional

__all__ = ["Callbacks", "LoggingCallbacks"]

engine_logger = logging.getLogger("ngshared.engine")


class Callbacks:
    """Receiver for engine output and the exit notification.

    Subclass and override what you need; the defaults do nothing. Both
    methods are called synchronously from inside the command that caused
    them, on the thread that issued it.
    """

    def send_char(self, text: str) -> None:
        """Called once per line of engine output, e.g. ``"stdout hello"``."""

    def controlled_exit(self, status: int, unload: bool, quit: bool) -> None:
        """Called exactly once, when the engine terminates itself.

        Args:
            status: engine exit code
            unload: the engine asks to be unloaded from the process
            quit: the host process should quit as well
        """


class LoggingCallbacks(Callbacks):
    """Callbacks that record engine output and forward it to logging.

    Lines starting with ``stderr`` are logged as warnings, everything else
    at debug level.
    """

    def __init__(self):
        self.lines: List[str] = []
        self.exit_status: Optional[int] = None

    def send_char(self, text: str) -> None:
        self.lines.append(text)
        if text.startswith("stderr"):
            engine_logger.warning(text)
        else:
            engine_logger.debug(text)

    def controlled_exit(self, status: int, unload: bool, quit: bool) -> None:
        self.exit_status = status
        engine_logger.info(f"ngspice exited with status {status} (unload={unload}, quit={quit})")
