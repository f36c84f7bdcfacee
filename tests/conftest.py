"""Shared fixtures for the session store test suite."""

from __future__ import annotations

import pytest

from session_store import FileDriver, Manager, SessionCodec

TEST_KEY = "0123456789abcdef0123456789abcdef"


class FakeClock:
    """Controllable replacement for time.time."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def driver(tmp_path, clock) -> FileDriver:
    return FileDriver(tmp_path / "sessions", minutes=120, clock=clock)


@pytest.fixture
def codec() -> SessionCodec:
    return SessionCodec(TEST_KEY, max_age=120 * 60)


@pytest.fixture
def manager(tmp_path):
    m = Manager(key=TEST_KEY, files_path=tmp_path / "sessions")
    yield m
    m.close()
