"""Signed, time-limited encoding of session payloads.

The codec is the only place that turns attribute dicts and session ids into
strings that leave the process. The namespace (the session name) is used as
the itsdangerous salt, so a token minted under one name never decodes under
another.
"""

from __future__ import annotations

from typing import Any

from itsdangerous import BadData, URLSafeTimedSerializer

from .errors import ConfigurationError, DecodeError

KEY_LENGTH = 32


class SessionCodec:
    """Sign-and-serialize codec shared by every session a manager builds."""

    def __init__(self, key: str, max_age: int) -> None:
        if not isinstance(key, str) or len(key) != KEY_LENGTH:
            raise ConfigurationError(f"session key must be {KEY_LENGTH} characters long")
        if max_age <= 0:
            raise ConfigurationError("codec max_age must be positive")
        self._key = key
        self.max_age = max_age
        self._serializers: dict[str, URLSafeTimedSerializer] = {}

    def _serializer(self, namespace: str) -> URLSafeTimedSerializer:
        serializer = self._serializers.get(namespace)
        if serializer is None:
            serializer = URLSafeTimedSerializer(self._key, salt=namespace)
            self._serializers[namespace] = serializer
        return serializer

    def encode(self, namespace: str, value: Any) -> str:
        return self._serializer(namespace).dumps(value)

    def decode(self, namespace: str, token: str) -> Any:
        """Return the value stored in ``token``.

        Raises DecodeError if the signature is bad, the token is older than
        ``max_age`` seconds, or the payload cannot be parsed.
        """
        if not token:
            raise DecodeError("empty token")
        try:
            return self._serializer(namespace).loads(token, max_age=self.max_age)
        except BadData as e:
            raise DecodeError(str(e)) from e
