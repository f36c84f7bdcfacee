"""Driver registry, GC scheduling and session construction."""

from __future__ import annotations

import logging
import os
import threading

from .codec import SessionCodec
from .config import SessionSettings
from .driver import Driver, FileDriver
from .errors import (
    ConfigurationError,
    DriverAlreadyExistsError,
    DriverNotSetError,
    DriverNotSupportedError,
    RegistrySealedError,
)
from .pool import SessionPool
from .scheduler import PeriodicTask
from .session import Session

logger = logging.getLogger(__name__)

DEFAULT_DRIVER = "default"


class Manager:
    """Builds sessions bound to registered drivers and sweeps those drivers.

    Drivers are registered during setup. The first ``build_session`` call
    seals the registry; registering after that raises RegistrySealedError.

    Usage::

        manager = Manager(key=secret, lifetime=120, gc_interval=30)
        session = manager.build_session("session")
        session.set_id(cookie_value).start()
        ...
        session.save()
        manager.release_session(session)
        manager.close()
    """

    def __init__(
        self,
        key: str,
        lifetime: int = 120,
        gc_interval: int = 30,
        disable_default_driver: bool = False,
        files_path: str | os.PathLike[str] | None = None,
        pool_size: int = 128,
    ) -> None:
        for label, value in (("lifetime", lifetime), ("gc_interval", gc_interval)):
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{label} must be a positive number of minutes")

        self.lifetime = lifetime
        self.gc_interval = gc_interval
        self.codec = SessionCodec(key, max_age=lifetime * 60)
        self._drivers: dict[str, Driver] = {}
        self._gc_tasks: dict[str, PeriodicTask] = {}
        self._lock = threading.Lock()
        self._sealed = False
        self._closed = False
        self._pool = SessionPool(max_size=pool_size)

        if not disable_default_driver:
            self.extend(DEFAULT_DRIVER, FileDriver(files_path, lifetime))

    @classmethod
    def from_settings(cls, settings: SessionSettings) -> Manager:
        return cls(
            key=settings.key,
            lifetime=settings.lifetime,
            gc_interval=settings.gc_interval,
            disable_default_driver=settings.disable_default_driver,
            files_path=settings.files_path or None,
        )

    @property
    def lifetime_seconds(self) -> int:
        return self.lifetime * 60

    def build_session(
        self, name: str, driver: str | None = None, session_id: str | None = None
    ) -> Session:
        """Return a pooled session bound to ``driver`` (default driver if None)."""
        handler = self.driver(driver)
        with self._lock:
            self._sealed = True
        return self.acquire_session().bind(name, self.codec, handler, session_id)

    def extend(self, name: str, driver: Driver) -> None:
        """Register ``driver`` under ``name`` and start its GC schedule."""
        if not name:
            raise DriverNotSetError()
        with self._lock:
            if self._closed:
                raise ConfigurationError("manager is closed")
            if self._sealed:
                raise RegistrySealedError(
                    f"cannot register driver [{name}] after sessions have been built"
                )
            if name in self._drivers:
                raise DriverAlreadyExistsError(name)
            self._drivers[name] = driver
            task = PeriodicTask(
                lambda: driver.gc(self.lifetime_seconds),
                interval=self.gc_interval * 60,
                name=f"session-gc-{name}",
            )
            self._gc_tasks[name] = task
        task.start()
        logger.info("Session driver [%s] registered (%s)", name, type(driver).__name__)

    def driver(self, name: str | None = None) -> Driver:
        if name is None:
            name = DEFAULT_DRIVER
        if name == "":
            raise DriverNotSetError()
        handler = self._drivers.get(name)
        if handler is None:
            raise DriverNotSupportedError(name)
        return handler

    @property
    def drivers(self) -> dict[str, Driver]:
        return dict(self._drivers)

    def acquire_session(self) -> Session:
        return self._pool.acquire()

    def release_session(self, session: Session) -> None:
        """Reset ``session`` and return it to the pool. Do not use it afterwards."""
        self._pool.release(session)

    def close(self) -> None:
        """Stop every GC schedule, then close every driver."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            tasks = list(self._gc_tasks.values())
            drivers = list(self._drivers.items())
            self._gc_tasks.clear()

        for task in tasks:
            task.stop()
        for name, driver in drivers:
            try:
                driver.close()
            except Exception:
                logger.exception("Failed to close session driver [%s]", name)
        logger.info("Session manager closed")

    def __enter__(self) -> Manager:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
