"""Tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from session_store import SessionSettings, get_settings, override_settings

from conftest import TEST_KEY


@pytest.fixture(autouse=True)
def _reset_settings():
    override_settings(None)
    yield
    override_settings(None)


def test_defaults():
    s = SessionSettings(key=TEST_KEY)
    assert s.lifetime == 120
    assert s.gc_interval == 30
    assert s.lifetime_seconds == 7200
    assert s.cookie_name == "session"
    assert s.https_only is True
    assert s.disable_default_driver is False


def test_reads_environment(monkeypatch):
    monkeypatch.setenv("SESSION_KEY", TEST_KEY)
    monkeypatch.setenv("SESSION_LIFETIME", "15")
    monkeypatch.setenv("SESSION_DISABLE_DEFAULT_DRIVER", "true")
    s = get_settings()
    assert s.key == TEST_KEY
    assert s.lifetime == 15
    assert s.disable_default_driver is True
    assert get_settings() is s


def test_override_settings():
    s = SessionSettings(key=TEST_KEY, lifetime=5)
    override_settings(s)
    assert get_settings() is s


def test_rejects_bad_key():
    with pytest.raises(ValidationError):
        SessionSettings(key="too-short")


@pytest.mark.parametrize("field", ["lifetime", "gc_interval"])
def test_rejects_non_positive_minutes(field):
    with pytest.raises(ValidationError):
        SessionSettings(key=TEST_KEY, **{field: 0})
