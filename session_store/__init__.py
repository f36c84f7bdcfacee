"""Server-side sessions backed by pluggable storage drivers."""

from .codec import SessionCodec
from .config import SessionSettings, get_settings, override_settings
from .driver import Driver, FileDriver
from .errors import (
    ConfigurationError,
    DecodeError,
    DriverAlreadyExistsError,
    DriverNotSetError,
    DriverNotSupportedError,
    RegistrySealedError,
    SessionError,
    SessionNotFoundError,
    SessionNotStartedError,
)
from .ids import generate_session_id, is_valid_id
from .manager import DEFAULT_DRIVER, Manager
from .middleware import SessionMiddleware
from .pool import SessionPool
from .session import Session

__all__ = [
    "DEFAULT_DRIVER",
    "ConfigurationError",
    "DecodeError",
    "Driver",
    "DriverAlreadyExistsError",
    "DriverNotSetError",
    "DriverNotSupportedError",
    "FileDriver",
    "Manager",
    "RegistrySealedError",
    "Session",
    "SessionCodec",
    "SessionError",
    "SessionMiddleware",
    "SessionNotFoundError",
    "SessionNotStartedError",
    "SessionPool",
    "SessionSettings",
    "generate_session_id",
    "get_settings",
    "is_valid_id",
    "override_settings",
]
