"""Exceptions raised by the session store."""

from __future__ import annotations


class SessionError(Exception):
    """Base class for session store errors."""


class ConfigurationError(SessionError, ValueError):
    """Invalid setup: bad key, bad lifetimes, bad driver registration."""


class DriverNotSetError(ConfigurationError):
    def __init__(self) -> None:
        super().__init__("driver is not set")


class DriverNotSupportedError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"driver [{name}] not supported")
        self.name = name


class DriverAlreadyExistsError(ConfigurationError):
    def __init__(self, name: str) -> None:
        super().__init__(f"driver [{name}] already exists")
        self.name = name


class RegistrySealedError(ConfigurationError):
    """Raised when a driver is registered after sessions have been built."""


class SessionNotFoundError(SessionError, KeyError):
    """No live record for the id: it never existed or it has expired."""

    def __init__(self, session_id: str) -> None:
        super().__init__(f"session [{session_id}] not found")
        self.session_id = session_id

    def __str__(self) -> str:
        return self.args[0]


class DecodeError(SessionError):
    """Token was tampered with, expired, or minted for another namespace."""


class SessionNotStartedError(SessionError):
    def __init__(self) -> None:
        super().__init__("session has not been started")
