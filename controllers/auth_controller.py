"""Single-administrator session authentication."""

from __future__ import annotations

import logging
from typing import Any, Dict

import bcrypt
from fastapi import HTTPException, Request

from utils.settings import Settings

LOGGER = logging.getLogger(__name__)


def verify_credentials(settings: Settings, username: str, password: str) -> bool:
    """Check a username/password pair against the configured administrator."""
    if username != settings.admin_username:
        return False
    try:
        return bcrypt.checkpw(password.encode(), settings.admin_password_hash.encode())
    except ValueError:
        LOGGER.error("ADMIN_PASSWORD_HASH is not a valid bcrypt hash")
        return False


def is_authenticated(request: Request) -> bool:
    return bool(request.session.get("authenticated"))


async def require_auth(request: Request) -> None:
    """Dependency rejecting requests without an authenticated session."""
    if not is_authenticated(request):
        raise HTTPException(status_code=401, detail="Authentication required")


async def login(request: Request, username: str, password: str) -> Dict[str, Any]:
    """Mark the session authenticated when the credentials match.

    Raises:
        HTTPException(401) on invalid credentials.
    """
    settings: Settings = request.app.state.settings
    if not verify_credentials(settings, username, password):
        LOGGER.warning("Failed login attempt for user %r", username)
        raise HTTPException(status_code=401, detail="Invalid credentials")

    request.session["authenticated"] = True
    return {"success": True, "message": "Login successful"}


async def logout(request: Request) -> Dict[str, Any]:
    request.session.clear()
    return {"success": True, "message": "Logged out successfully"}
