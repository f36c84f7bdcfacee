"""ASGI middleware that runs the session lifecycle around each request.

The cookie carries only the session id, signed through the manager's codec
with the cookie name as namespace. Attributes live in the driver. The session
is started before the app runs, saved when the response starts (so a rotated
id reaches the cookie), and returned to the manager's pool afterwards.
"""

from __future__ import annotations

import logging

from starlette.concurrency import run_in_threadpool
from starlette.datastructures import MutableHeaders
from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from .config import SessionSettings
from .errors import DecodeError
from .manager import Manager
from .session import Session

logger = logging.getLogger(__name__)

COOKIE_NAME = "session"


class SessionMiddleware:
    """Server-side session middleware.

    Cookie options come from ``settings`` when it is given; explicit keyword
    arguments win over it. WebSocket connections get a started session that
    is saved when the connection handler returns (no cookie is written).
    """

    def __init__(
        self,
        app: ASGIApp,
        manager: Manager,
        driver: str | None = None,
        cookie_name: str | None = None,
        https_only: bool | None = None,
        same_site: str | None = None,
        path: str = "/",
        settings: SessionSettings | None = None,
    ) -> None:
        self.app = app
        self.manager = manager
        self.driver = driver
        self.cookie_name = _pick(cookie_name, settings and settings.cookie_name, COOKIE_NAME)
        self.https_only = _pick(https_only, settings and settings.https_only, True)
        self.same_site = _pick(same_site, settings and settings.same_site, "lax")
        self.path = path

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] not in ("http", "websocket") or "session" in scope.get("state", {}):
            await self.app(scope, receive, send)
            return

        session = self.manager.build_session(self.cookie_name, self.driver)
        try:
            session.set_id(self._load_session_id(HTTPConnection(scope)))
            await run_in_threadpool(session.start)

            scope["state"] = scope.get("state", {})
            scope["state"]["session"] = session

            async def send_wrapper(message: Message) -> None:
                if message["type"] == "http.response.start":
                    await self._save(session)
                    headers = MutableHeaders(scope=message)
                    headers.append("set-cookie", self._make_cookie(session.id))
                await send(message)

            await self.app(scope, receive, send_wrapper)

            if scope["type"] == "websocket":
                await self._save(session)
        finally:
            scope.get("state", {}).pop("session", None)
            self.manager.release_session(session)

    async def _save(self, session: Session) -> None:
        if not session.is_started:
            return
        try:
            await run_in_threadpool(session.save)
        except Exception:
            logger.exception("Session save failed for %r", session)

    def _load_session_id(self, conn: HTTPConnection) -> str | None:
        raw = conn.cookies.get(self.cookie_name)
        if not raw:
            return None
        try:
            value = self.manager.codec.decode(self.cookie_name, raw)
        except DecodeError:
            return None
        return value if isinstance(value, str) else None

    def _make_cookie(self, session_id: str) -> str:
        parts = [
            f"{self.cookie_name}={self.manager.codec.encode(self.cookie_name, session_id)}",
            f"Max-Age={self.manager.lifetime_seconds}",
            f"Path={self.path}",
            "HttpOnly",
            f"SameSite={self.same_site}",
        ]
        if self.https_only:
            parts.append("Secure")
        return "; ".join(parts)


def _pick(*values):
    """First value that is not None."""
    return next(value for value in values if value is not None)
