"""Session id generation and validation."""

from __future__ import annotations

import secrets
import string

ID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
ID_LENGTH = 32

_ALPHABET_SET = frozenset(ID_ALPHABET)


def generate_session_id() -> str:
    return "".join(secrets.choice(ID_ALPHABET) for _ in range(ID_LENGTH))


def is_valid_id(value: str | None) -> bool:
    """True when ``value`` has the exact shape of a generated id."""
    if not isinstance(value, str) or len(value) != ID_LENGTH:
        return False
    return all(ch in _ALPHABET_SET for ch in value)
