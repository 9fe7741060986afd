"""Authentication: bcrypt password hashing and per-user JWT tokens."""

from datetime import datetime, timedelta, timezone

import bcrypt
from fastapi import Depends, HTTPException, Request
from jose import JWTError, jwt

from playrate.config import settings
from playrate.database import fetch_one

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a password against its hash."""
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def create_access_token(user_id: int, expires_days: int | None = None) -> str:
    """Create a JWT access token for a user."""
    if expires_days is None:
        expires_days = settings.token_expiry_days
    expire = datetime.now(timezone.utc) + timedelta(days=expires_days)
    payload = {
        "sub": str(user_id),
        "exp": expire,
    }
    return jwt.encode(payload, settings.secret_key, algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """Decode and validate a JWT token. Raises JWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])


async def require_user(request: Request) -> dict:
    """FastAPI dependency resolving the bearer token to a user row.

    The returned dict has no password hash.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header or not auth_header.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    token = auth_header.split(" ", 1)[1]
    try:
        payload = decode_token(token)
        user_id = int(payload["sub"])
    except (JWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Not authorized, token failed")

    user = await fetch_one(
        "SELECT id, name, email, is_admin FROM users WHERE id = ?", (user_id,)
    )
    if user is None:
        raise HTTPException(status_code=401, detail="Not authorized, user not found")
    user["is_admin"] = bool(user["is_admin"])
    return user


async def require_admin(user: dict = Depends(require_user)) -> dict:
    """FastAPI dependency that only lets administrators through."""
    if not user["is_admin"]:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return user
