"""Callback trampolines handed to ngSpice_Init.

These are the only functions the engine calls directly. Each one recovers
the owning session from the opaque context pointer and forwards to the
session's Callbacks.

Rules for everything in this module:

- NEVER let a Python exception escape into the engine. ctypes cannot
  propagate it and the engine has no error channel for callbacks.
- Always return CALLBACK_OK.
- SystemExit and KeyboardInterrupt are held on the session and re-raised
  by the session once the engine call has returned.
- The CFUNCTYPE objects are module-level so they live as long as the
  process; the engine may keep calling them after any session is gone.
"""

import ctypes
import logging
from typing import Any, Optional

from ngshared.bindings import ControlledExit, SendChar
from ngshared.config import CALLBACK_OK, ENCODING

logger = logging.getLogger(__name__)

__all__ = [
    "context_token",
    "recover_session",
    "on_output",
    "on_exit",
    "send_char_trampoline",
    "controlled_exit_trampoline",
    "inert_exit_trampoline",
]


def context_token(session: Any) -> int:
    """Address handed to the engine as the callback context."""
    return id(session)


def recover_session(context: Optional[int]) -> Optional[Any]:
    """Turn the engine's context pointer back into the session object.

    UNSAFE: this reinterprets a raw address as a Python object. It is only
    valid while the session is alive, which InitGuard guarantees by pinning
    it for as long as the engine holds the token.
    """
    if not context:
        return None
    return ctypes.cast(context, ctypes.py_object).value


def _defer(session: Any, exc: BaseException, name: str) -> None:
    """Hold SystemExit/KeyboardInterrupt until the engine call returns.

    The session re-raises it from the command that triggered the callback.
    Only the first one is kept.
    """
    logger.warning(f"{name} callback raised {type(exc).__name__}; deferring until the engine returns")
    if getattr(session, "_deferred", None) is None:
        session._deferred = exc


def on_output(raw_text: Optional[int], ident: int, context: Optional[int]) -> int:
    """SendChar: forward one line of engine output to ``callbacks.send_char``.

    Undecodable lines are dropped; output is best-effort telemetry.
    """
    if not raw_text:
        return CALLBACK_OK
    try:
        text = ctypes.string_at(raw_text).decode(ENCODING)
    except UnicodeDecodeError:
        logger.debug("Dropped engine output line that is not valid text")
        return CALLBACK_OK

    session = recover_session(context)
    if session is None:
        return CALLBACK_OK
    try:
        session.callbacks.send_char(text)
    except Exception:
        logger.exception("send_char callback raised; ignoring")
    except BaseException as e:
        _defer(session, e, "send_char")
    return CALLBACK_OK


def on_exit(status: int, unload: bool, quit: bool, ident: int, context: Optional[int]) -> int:
    """ControlledExit: mark the session exited, then notify the callbacks.

    The flag is set first so that a command issued from inside the user's
    exit handler already sees the session as exited.
    """
    session = recover_session(context)
    if session is None:
        return CALLBACK_OK
    session._exited = True
    logger.info(f"ngspice requested exit (status={status}, unload={unload}, quit={quit})")
    try:
        session.callbacks.controlled_exit(int(status), bool(unload), bool(quit))
    except Exception:
        logger.exception("controlled_exit callback raised; ignoring")
    except BaseException as e:
        _defer(session, e, "controlled_exit")
    return CALLBACK_OK


def _inert_exit(status: int, unload: bool, quit: bool, ident: int, context: Optional[int]) -> int:
    return CALLBACK_OK


send_char_trampoline = SendChar(on_output)
controlled_exit_trampoline = ControlledExit(on_exit)
# Installed on teardown so the engine never reaches a released session
inert_exit_trampoline = ControlledExit(_inert_exit)
