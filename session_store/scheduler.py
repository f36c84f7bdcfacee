"""Cancellable periodic background tasks."""

from __future__ import annotations

import logging
import threading
from typing import Callable

logger = logging.getLogger(__name__)


class PeriodicTask:
    """Runs ``func`` every ``interval`` seconds on a daemon thread until stopped.

    Exceptions raised by ``func`` are logged and the schedule continues.
    """

    def __init__(self, func: Callable[[], None], interval: float, name: str = "periodic-task") -> None:
        if interval <= 0:
            raise ValueError("interval must be positive")
        self._func = func
        self.interval = interval
        self.name = name
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name=self.name)
        self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        self._stop.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self._func()
            except Exception:
                logger.exception("%s failed; retrying next interval", self.name)
