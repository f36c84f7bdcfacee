"""Per-request session state: attribute bag, flash data, id lifecycle.

A Session is owned by exactly one request at a time. It holds references to
the driver and codec supplied by the Manager; it never owns them.

Flash data uses two lists stored alongside the attributes:

* ``_flash.new`` holds keys flashed during the current cycle.
* ``_flash.old`` holds keys that are removed on the next ``save``.

Every ``save`` drops the ``_flash.old`` keys, then moves ``_flash.new`` into
``_flash.old``. A flashed value is therefore readable during the request
that follows the one that set it, and gone after that request saves.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable

from .codec import SessionCodec
from .driver.base import Driver
from .errors import DecodeError, SessionNotFoundError, SessionNotStartedError
from .ids import generate_session_id, is_valid_id

logger = logging.getLogger(__name__)

TOKEN_KEY = "_token"
FLASH_OLD_KEY = "_flash.old"
FLASH_NEW_KEY = "_flash.new"


class Session:
    def __init__(
        self,
        name: str = "",
        codec: SessionCodec | None = None,
        driver: Driver | None = None,
        session_id: str | None = None,
    ) -> None:
        self._name = name
        self._codec = codec
        self._driver = driver
        self._attributes: dict[str, Any] = {}
        self._started = False
        self._id = ""
        self.set_id(session_id)

    # ── Identity ──────────────────────────────────────────────────────────

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    def driver(self) -> Driver | None:
        return self._driver

    @property
    def is_started(self) -> bool:
        return self._started

    def set_id(self, session_id: str | None) -> Session:
        """Use ``session_id`` if it looks like a generated id, else a fresh one."""
        self._id = session_id if is_valid_id(session_id) else generate_session_id()
        return self

    def set_name(self, name: str) -> Session:
        self._name = name
        return self

    def bind(self, name: str, codec: SessionCodec, driver: Driver, session_id: str | None = None) -> Session:
        """Attach a pooled shell to a driver and codec for a new request."""
        self._name = name
        self._codec = codec
        self._driver = driver
        self._attributes = {}
        self._started = False
        return self.set_id(session_id)

    def reset(self) -> None:
        """Drop all request state so the shell can be reused."""
        self._attributes = {}
        self._id = ""
        self._name = ""
        self._codec = None
        self._driver = None
        self._started = False

    # ── Attribute bag ─────────────────────────────────────────────────────

    def all(self) -> dict[str, Any]:
        return self._attributes

    def exists(self, key: str) -> bool:
        return key in self._attributes

    def missing(self, key: str) -> bool:
        return not self.exists(key)

    def has(self, key: str) -> bool:
        """True if ``key`` is present and not None."""
        return self._attributes.get(key) is not None

    def get(self, key: str, default: Any = None) -> Any:
        return self._attributes.get(key, default)

    def put(self, key: str, value: Any) -> Session:
        self._attributes[key] = value
        return self

    def forget(self, *keys: str) -> Session:
        for key in keys:
            self._attributes.pop(key, None)
        return self

    def only(self, keys: Iterable[str]) -> dict[str, Any]:
        return {key: self._attributes[key] for key in keys if key in self._attributes}

    def pull(self, key: str, default: Any = None) -> Any:
        return self._attributes.pop(key, default)

    def remove(self, key: str) -> Any:
        return self.pull(key)

    def flush(self) -> Session:
        self._attributes = {}
        return self

    def token(self) -> str | None:
        return self.get(TOKEN_KEY)

    # ── Flash data ────────────────────────────────────────────────────────

    def flash(self, key: str, value: Any) -> Session:
        """Store ``value`` until the end of the next request cycle."""
        self.put(key, value)
        self.put(FLASH_NEW_KEY, self._flash_list(FLASH_NEW_KEY) + [key])
        self._remove_from_old_flash_data(key)
        return self

    def now(self, key: str, value: Any) -> Session:
        """Store ``value`` for the current request cycle only."""
        self.put(key, value)
        self.put(FLASH_OLD_KEY, self._flash_list(FLASH_OLD_KEY) + [key])
        return self

    def keep(self, *keys: str) -> Session:
        self._merge_new_flashes(keys)
        self._remove_from_old_flash_data(*keys)
        return self

    def reflash(self) -> Session:
        self._merge_new_flashes(self._flash_list(FLASH_OLD_KEY))
        self.put(FLASH_OLD_KEY, [])
        return self

    def _flash_list(self, key: str) -> list[str]:
        return [str(item) for item in self.get(key) or []]

    def _merge_new_flashes(self, keys: Iterable[str]) -> None:
        values = self._flash_list(FLASH_NEW_KEY)
        for key in keys:
            if key not in values:
                values.append(key)
        self.put(FLASH_NEW_KEY, values)

    def _remove_from_old_flash_data(self, *keys: str) -> None:
        self.put(FLASH_OLD_KEY, [item for item in self._flash_list(FLASH_OLD_KEY) if item not in keys])

    def _aged_attributes(self) -> dict[str, Any]:
        """Attributes as they look after this cycle's flash data expires."""
        expired = set(self._flash_list(FLASH_OLD_KEY))
        aged = {key: value for key, value in self._attributes.items() if key not in expired}
        aged[FLASH_OLD_KEY] = self._flash_list(FLASH_NEW_KEY)
        aged[FLASH_NEW_KEY] = []
        return aged

    # ── Lifecycle ─────────────────────────────────────────────────────────

    def start(self) -> bool:
        """Load persisted attributes and make sure a CSRF token exists."""
        self._load_session()
        if not self.has(TOKEN_KEY):
            self._regenerate_token()
        self._started = True
        return self._started

    def save(self) -> None:
        """Age flash data, then encode and write the attributes.

        Ageing is applied only once the write succeeds. On a backend error the
        session is left untouched and still started, so ``save`` can be retried.
        """
        if not self._started:
            raise SessionNotStartedError()
        aged = self._aged_attributes()
        data = self._require_codec().encode(self._name, aged)
        self._require_driver().write(self._id, data)
        self._attributes = aged
        self._started = False

    def regenerate(self, destroy: bool = False) -> None:
        """Move the attributes to a new id, optionally deleting the old record."""
        self._migrate(destroy)
        self._regenerate_token()

    def invalidate(self) -> None:
        """Drop every attribute and move to a new id, deleting the old record."""
        self.flush()
        self._migrate(True)

    def _load_session(self) -> None:
        data = self._read_from_driver()
        if data:
            self._attributes.update(data)

    def _read_from_driver(self) -> dict[str, Any] | None:
        try:
            value = self._require_driver().read(self._id)
        except SessionNotFoundError:
            logger.debug("No stored session for id %s...", self._id[:6])
            return None
        except Exception as e:
            logger.warning("Unreadable session %s..., starting empty: %s", self._id[:6], e)
            return None
        try:
            data = self._require_codec().decode(self._name, value)
        except DecodeError as e:
            logger.debug("Discarding undecodable session %s...: %s", self._id[:6], e)
            return None
        return data if isinstance(data, dict) else None

    def _migrate(self, destroy: bool) -> None:
        if destroy:
            self._require_driver().destroy(self._id)
        self.set_id(generate_session_id())

    def _regenerate_token(self) -> None:
        self.put(TOKEN_KEY, generate_session_id())

    def _require_driver(self) -> Driver:
        if self._driver is None:
            raise RuntimeError("session is not bound to a driver")
        return self._driver

    def _require_codec(self) -> SessionCodec:
        if self._codec is None:
            raise RuntimeError("session is not bound to a codec")
        return self._codec

    def __repr__(self) -> str:
        return f"Session(name={self._name!r}, id={self._id[:6]!r}..., started={self._started})"
