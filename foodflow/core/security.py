# foodflow/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Optional

from fastapi import Depends, Header
from jose import JWTError, jwt

from ..deps import app_settings
from .config import Settings
from .errors import Unauthenticated


def create_token(sub: str, settings: Settings, minutes: Optional[int] = None) -> str:
    """Mint a bearer token. Used by seeding and tests; there is no login route."""
    now = datetime.now(timezone.utc)
    ttl = minutes if minutes is not None else settings.access_ttl_min
    payload = {"sub": sub, "iat": now, "exp": now + timedelta(minutes=ttl)}
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_alg)


def decode_token(token: str, settings: Settings) -> Optional[str]:
    try:
        data = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_alg])
        return data.get("sub")
    except JWTError:
        return None


async def get_user_id(
    authorization: str | None = Header(default=None),
    settings: Settings = Depends(app_settings),
) -> str:
    if not authorization or not authorization.lower().startswith("bearer "):
        raise Unauthenticated("Missing token")
    sub = decode_token(authorization.split(" ", 1)[1].strip(), settings)
    if not sub:
        raise Unauthenticated("Invalid token")
    return sub
