"""Tests for the signed session codec."""

import time
from unittest.mock import patch

import pytest

from session_store import ConfigurationError, DecodeError, SessionCodec

from conftest import TEST_KEY


def test_encode_decode(codec):
    token = codec.encode("session", {"user_id": 42, "roles": ["admin"], "nested": {"a": 1}})
    assert codec.decode("session", token) == {"user_id": 42, "roles": ["admin"], "nested": {"a": 1}}


def test_wrong_namespace_fails(codec):
    token = codec.encode("session", {"user_id": 42})
    with pytest.raises(DecodeError):
        codec.decode("other", token)


def test_tampered_token_fails(codec):
    token = codec.encode("session", {"user_id": 42})
    with pytest.raises(DecodeError):
        codec.decode("session", token[:-2] + "xx")


def test_garbage_and_empty_fail(codec):
    with pytest.raises(DecodeError):
        codec.decode("session", "garbage-value")
    with pytest.raises(DecodeError):
        codec.decode("session", "")


def test_other_key_fails(codec):
    other = SessionCodec("x" * 32, max_age=60)
    with pytest.raises(DecodeError):
        codec.decode("session", other.encode("session", {"a": 1}))


def test_expired_token_fails():
    codec = SessionCodec(TEST_KEY, max_age=60)
    with patch("time.time", return_value=time.time() - 120):
        token = codec.encode("session", {"a": 1})
    with pytest.raises(DecodeError):
        codec.decode("session", token)


@pytest.mark.parametrize("key", ["", "short", "x" * 31, "x" * 33])
def test_bad_key_length(key):
    with pytest.raises(ConfigurationError):
        SessionCodec(key, max_age=60)
