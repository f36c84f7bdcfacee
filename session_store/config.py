"""Session store configuration via environment variables."""

from pydantic import field_validator
from pydantic_settings import BaseSettings

from .codec import KEY_LENGTH


class SessionSettings(BaseSettings):
    key: str
    lifetime: int = 120  # minutes; record expiry and cookie Max-Age
    gc_interval: int = 30  # minutes between GC sweeps
    disable_default_driver: bool = False
    files_path: str = ""  # empty = <tmpdir>/session_store
    cookie_name: str = "session"
    https_only: bool = True
    same_site: str = "lax"

    @field_validator("key")
    @classmethod
    def _check_key(cls, value: str) -> str:
        if len(value) != KEY_LENGTH:
            raise ValueError(f"key must be {KEY_LENGTH} characters long")
        return value

    @field_validator("lifetime", "gc_interval")
    @classmethod
    def _check_minutes(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be a positive number of minutes")
        return value

    @property
    def lifetime_seconds(self) -> int:
        return self.lifetime * 60

    model_config = {"env_prefix": "SESSION_", "case_sensitive": False}


settings: SessionSettings | None = None


def get_settings() -> SessionSettings:
    global settings
    if settings is None:
        settings = SessionSettings()
    return settings


def override_settings(s: SessionSettings | None) -> None:
    """For testing: inject a SessionSettings instance (None to reset)."""
    global settings
    settings = s
