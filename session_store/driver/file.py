"""Local filesystem session driver."""

from __future__ import annotations

import logging
import os
import tempfile
import threading
import time
from pathlib import Path
from typing import Callable

from ..errors import DecodeError, SessionNotFoundError

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY = "session_store"


class FileDriver:
    """Stores one file per session under a root directory.

    A record's age is its file modification time. Expired records are
    reported as missing by ``read`` but stay on disk until ``gc`` removes
    them. One lock serializes every operation on the root.
    """

    def __init__(
        self,
        path: str | os.PathLike[str] | None = None,
        minutes: int = 120,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not path:
            path = Path(tempfile.gettempdir()) / DEFAULT_DIRECTORY
        self.path = Path(path)
        self.minutes = minutes
        self._clock = clock
        self._lock = threading.Lock()

    def _file_path(self, session_id: str) -> Path:
        if not session_id or session_id in (".", "..") or os.sep in session_id or (
            os.altsep and os.altsep in session_id
        ):
            raise ValueError(f"invalid session id for file storage: {session_id!r}")
        return self.path / session_id

    def read(self, session_id: str) -> str:
        path = self._file_path(session_id)
        with self._lock:
            try:
                modified = path.stat().st_mtime
            except FileNotFoundError:
                raise SessionNotFoundError(session_id) from None
            if modified <= self._clock() - self.minutes * 60:
                raise SessionNotFoundError(session_id)
            try:
                return path.read_text(encoding="utf-8")
            except UnicodeDecodeError as e:
                raise DecodeError(f"session [{session_id}] is not valid UTF-8") from e

    def write(self, session_id: str, data: str) -> None:
        path = self._file_path(session_id)
        with self._lock:
            self.path.mkdir(parents=True, exist_ok=True)
            path.write_text(data, encoding="utf-8")
            now = self._clock()
            os.utime(path, (now, now))

    def destroy(self, session_id: str) -> None:
        path = self._file_path(session_id)
        with self._lock:
            path.unlink(missing_ok=True)

    def gc(self, max_lifetime: int) -> None:
        with self._lock:
            if not self.path.exists():
                return
            cutoff = self._clock() - max_lifetime
            removed = 0
            for root, _dirs, files in os.walk(self.path, onerror=_raise):
                for name in files:
                    path = Path(root) / name
                    try:
                        if path.stat().st_mtime < cutoff:
                            path.unlink()
                            removed += 1
                    except FileNotFoundError:
                        continue
            if removed:
                logger.info("Session GC: removed %d expired record(s) from %s", removed, self.path)

    def close(self) -> None:
        pass


def _raise(error: OSError) -> None:
    raise error
