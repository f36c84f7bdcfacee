"""Free list of reusable Session shells."""

from __future__ import annotations

import threading
from typing import Callable

from .session import Session


class SessionPool:
    """Thread-safe free list. ``release`` always resets before reuse."""

    def __init__(self, factory: Callable[[], Session] = Session, max_size: int = 128) -> None:
        self._factory = factory
        self._max_size = max_size
        self._free: list[Session] = []
        self._lock = threading.Lock()

    def acquire(self) -> Session:
        with self._lock:
            if self._free:
                return self._free.pop()
        return self._factory()

    def release(self, session: Session) -> None:
        session.reset()
        with self._lock:
            if len(self._free) >= self._max_size:
                return
            if any(pooled is session for pooled in self._free):
                return
            self._free.append(session)

    def __len__(self) -> int:
        with self._lock:
            return len(self._free)
