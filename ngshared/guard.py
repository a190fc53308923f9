"""Process-wide, exactly-once gate around ngSpice_Init.

libngspice keeps one global state per process. Calling ngSpice_Init a second
time would rebind the engine's callbacks to whatever context the new caller
supplies, so only the first session ever gets to initialize it.
"""

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

__all__ = ["InitGuard", "ENGINE_GUARD"]


class InitGuard:
    """Exactly-once initialization gate.

    The winning session is pinned here: the engine holds its address as the
    callback context, so it must stay alive for as long as the engine can
    call back into it.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._initialized = False
        self._pinned: Optional[Any] = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def pinned(self) -> Optional[Any]:
        """The session currently kept alive for the engine, if any."""
        return self._pinned

    def initialize(self, session: Any, init_call: Callable[[], Any]) -> bool:
        """Run ``init_call`` if nobody has yet.

        Returns True for the first caller in the process, False for every
        later one; ``init_call`` is never invoked for the latter. If
        ``init_call`` raises, the gate stays consumed.
        """
        with self._lock:
            if self._initialized:
                logger.debug("ngspice already initialized; refusing second initialization")
                return False
            self._initialized = True
            # Pin before the engine can see the context
            self._pinned = session
            init_call()
            return True

    def release(self, session: Any) -> None:
        """Drop the pin once the engine no longer refers to ``session``."""
        with self._lock:
            if self._pinned is session:
                self._pinned = None


ENGINE_GUARD = InitGuard()
