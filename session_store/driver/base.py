"""Session storage driver contract."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class Driver(Protocol):
    """Protocol every session storage backend implements.

    Records are opaque strings keyed by session id. Drivers may be called
    from several request threads and from the GC thread at once, so each
    implementation is responsible for its own locking.
    """

    def read(self, session_id: str) -> str:
        """Return the stored record.

        Raises SessionNotFoundError if it is missing or older than the
        driver's lifetime.
        """
        ...

    def write(self, session_id: str, data: str) -> None:
        """Store ``data``, replacing any previous record and refreshing its age."""
        ...

    def destroy(self, session_id: str) -> None:
        """Remove a record. Removing a missing record is not an error."""
        ...

    def gc(self, max_lifetime: int) -> None:
        """Remove every record last written more than ``max_lifetime`` seconds ago."""
        ...

    def close(self) -> None:
        """Release backend resources. Called once at shutdown."""
        ...
