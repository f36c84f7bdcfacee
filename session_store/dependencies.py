"""FastAPI dependency injection: session access and CSRF."""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Request

from .session import Session

CSRF_HEADER = "x-csrf-token"


def get_session(request: Request) -> Session:
    """Get the started session from request state."""
    return request.state.session


def require_csrf(request: Request) -> None:
    """Require an X-CSRF-Token header matching the session token."""
    token = get_session(request).token()
    supplied = request.headers.get(CSRF_HEADER, "")
    if not token or not secrets.compare_digest(supplied, token):
        raise HTTPException(
            status_code=403,
            detail={
                "error": "CSRF validation failed",
                "message": "Missing or invalid X-CSRF-Token header",
            },
        )
