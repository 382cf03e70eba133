from __future__ import annotations

from collections.abc import Generator
import json
import time
import urllib.request

from fastapi import Header, HTTPException
from jose import jwt
from jose.exceptions import JWTError
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import NotFoundError
from app.core.settings import settings
from app.db.session import SessionLocal
from app.models.player import Player


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_player(db: Session, external_id: str) -> Player:
    """Return the calling player, creating the row on first sight."""
    external_id = (external_id or "").strip()
    player = db.execute(select(Player).where(Player.external_id == external_id)).scalars().one_or_none()
    if player:
        return player

    player = Player(external_id=external_id)
    db.add(player)
    db.flush()
    return player


def resolve_player(db: Session, external_id: str) -> Player:
    """Look up an existing player by external id; unknown ids are not created."""
    player = db.execute(
        select(Player).where(Player.external_id == (external_id or "").strip())
    ).scalars().one_or_none()
    if not player:
        raise NotFoundError("User not found")
    return player


_JWKS_CACHE: dict | None = None
_JWKS_CACHE_UNTIL: float = 0


def _get_jwks() -> dict:
    global _JWKS_CACHE, _JWKS_CACHE_UNTIL

    if _JWKS_CACHE and time.time() < _JWKS_CACHE_UNTIL:
        return _JWKS_CACHE

    if not settings.AUTH0_DOMAIN:
        raise RuntimeError("AUTH0_DOMAIN not configured")

    url = f"https://{settings.AUTH0_DOMAIN}/.well-known/jwks.json"
    with urllib.request.urlopen(url, timeout=5) as resp:
        data = json.loads(resp.read().decode("utf-8"))

    _JWKS_CACHE = data
    _JWKS_CACHE_UNTIL = time.time() + 3600
    return data


def _decode_token(token: str) -> dict:
    try:
        kid = jwt.get_unverified_header(token).get("kid")
        key = next((k for k in _get_jwks().get("keys", []) if k.get("kid") == kid), None)
        if not key:
            raise HTTPException(status_code=401, detail="Unable to find signing key")

        return jwt.decode(
            token,
            key,
            algorithms=["RS256"],
            audience=settings.AUTH0_AUDIENCE,
            issuer=f"https://{settings.AUTH0_DOMAIN}/",
        )
    except JWTError:
        raise HTTPException(status_code=401, detail="Invalid token")


def get_current_user_id(
    authorization: str | None = Header(default=None),
    x_user_id: str | None = Header(default=None),
) -> str:
    # Identity is owned by Auth0; without it configured the X-User-Id header is trusted (dev/tests).
    if not (settings.AUTH0_DOMAIN and settings.AUTH0_AUDIENCE):
        return x_user_id or "dev-user"

    if not authorization:
        raise HTTPException(status_code=401, detail="Missing Authorization header")

    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token or " " in token:
        raise HTTPException(status_code=401, detail="Invalid Authorization header")

    sub = _decode_token(token).get("sub")
    if not sub:
        raise HTTPException(status_code=401, detail="Token missing sub")
    return str(sub)
