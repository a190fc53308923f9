"""Pytest configuration for ngshared tests

Unit tests drive sessions against FakeEngine (tests/fake_engine.py), which
calls the real ctypes trampolines. Each such test gets its own InitGuard, so
the once-per-process rule can be exercised repeatedly without touching the
process-wide guard used by the real-library tests.

Also provides:
- requires_ngspice: skip marker for tests that need libngspice installed
"""

import pytest

import ngshared.guard
from ngshared.guard import InitGuard
from ngshared.session import NgSpice
from ngshared.utils.library import find_ngspice_library

from fake_engine import FakeEngine, RecordingCallbacks


requires_ngspice = pytest.mark.skipif(
    find_ngspice_library() is None,
    reason="libngspice not found (set NGSPICE_LIBRARY_PATH to run)",
)


@pytest.fixture
def fresh_guard(monkeypatch):
    """Replace the process-wide guard with an unused one."""
    guard = InitGuard()
    monkeypatch.setattr(ngshared.guard, "ENGINE_GUARD", guard)
    return guard


@pytest.fixture
def engine():
    return FakeEngine()


@pytest.fixture
def recorder():
    return RecordingCallbacks()


@pytest.fixture
def spice(fresh_guard, engine, recorder):
    """A session bound to a FakeEngine, closed after the test."""
    session = NgSpice(recorder, library=engine)
    yield session
    session.close()
