"""Signed session tokens and the request -> participant adapter."""

from __future__ import annotations

import hmac
import secrets
from datetime import datetime, timedelta, timezone
from hashlib import sha256
from typing import Optional

from fastapi import Request

from draftduel.errors import UnauthenticatedError
from draftduel.settings import Settings


SESSION_COOKIE = "draftduel_session"


def _sign(secret: str, base: str) -> str:
    return hmac.new(secret.encode("utf-8"), base.encode("utf-8"), sha256).hexdigest()


def create_session_token(user_id: str, *, secret: str, now: Optional[datetime] = None) -> str:
    """Create a signed session token for ``user_id``.

    Format: ``user_id:timestamp:nonce:signature`` where the signature is
    HMAC-SHA256 over ``user_id:timestamp:nonce``.
    """

    if not user_id or ":" in user_id:
        raise ValueError("user_id must be non-empty and must not contain ':'")
    ts = int((now or datetime.now(tz=timezone.utc)).timestamp())
    nonce = secrets.token_hex(16)
    base = f"{user_id}:{ts}:{nonce}"
    return f"{base}:{_sign(secret, base)}"


def parse_session_token(
    token: str,
    *,
    secret: str,
    ttl_days: int,
    now: Optional[datetime] = None,
) -> Optional[str]:
    """Return the user id of a valid token, else None."""

    parts = token.split(":")
    if len(parts) != 4:
        return None
    user_id, ts_str, nonce, sig = parts
    if not user_id or not nonce:
        return None
    if not hmac.compare_digest(_sign(secret, f"{user_id}:{ts_str}:{nonce}"), sig):
        return None
    try:
        ts = int(ts_str)
    except ValueError:
        return None

    created_at = datetime.fromtimestamp(ts, tz=timezone.utc)
    if created_at < (now or datetime.now(tz=timezone.utc)) - timedelta(days=ttl_days):
        return None
    return user_id


def _request_token(request: Request) -> Optional[str]:
    header = request.headers.get("authorization", "")
    scheme, _, value = header.partition(" ")
    if scheme.lower() == "bearer" and value.strip():
        return value.strip()
    return request.cookies.get(SESSION_COOKIE)


def current_participant(request: Request) -> str:
    """FastAPI dependency resolving the caller; fails closed when no valid session is presented."""

    settings: Settings = request.app.state.settings
    token = _request_token(request)
    if not token:
        raise UnauthenticatedError("Not authenticated")
    user_id = parse_session_token(
        token,
        secret=settings.session_secret,
        ttl_days=settings.session_ttl_days,
    )
    if user_id is None:
        raise UnauthenticatedError("Invalid or expired session")
    return user_id
