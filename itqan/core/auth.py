"""Session cookie helpers.

Browser session flow:
    1. First request without a valid cookie → a new session id is minted and
       sent back as a signed JWT in the ``itqan_session`` cookie.
    2. Every later request carries the cookie; the session id scopes the
       server-side storage (user record, profile flag, provider tokens).

Identity itself is never asserted by this cookie: it only names the storage
bucket. Authentication state always comes from the provider tokens inside it.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import jwt

from itqan.core.config import get_settings

_ISSUER = "itqan-web"
_ALGORITHM = "HS256"


def new_session_id() -> str:
    return uuid.uuid4().hex


def create_session_token(session_id: str) -> str:
    settings = get_settings()
    now = datetime.now(timezone.utc)
    expire = now + timedelta(days=settings.session_lifetime_days)
    payload = {
        "sid": session_id,
        "iat": now,
        "exp": expire,
        "iss": _ISSUER,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=_ALGORITHM)


def decode_session_token(token: str | None) -> str | None:
    """Return the session id carried by *token*, or None when missing/invalid/expired."""
    if not token:
        return None
    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[_ALGORITHM],
            options={"require": ["sid", "exp", "iss"]},
            issuer=_ISSUER,
        )
    except jwt.InvalidTokenError:
        return None
    sid = payload.get("sid")
    return sid if isinstance(sid, str) and sid else None
