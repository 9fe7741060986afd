"""User accounts: registration, login, profile edits and deletion cleanup."""

import logging

import aiosqlite

from playrate.auth import hash_password, verify_password
from playrate.database import fetch_all, fetch_one, get_db
from playrate.errors import ConflictError, NotFoundError
from playrate.services.rating_service import recompute_game_rating
from playrate.services.review_service import delete_user_reviews

logger = logging.getLogger(__name__)

_PUBLIC_COLUMNS = "id, name, email, is_admin, created_at, updated_at"


def _public(row: dict | None) -> dict | None:
    if row is None:
        return None
    user = dict(row)
    user["is_admin"] = bool(user["is_admin"])
    return user


async def get_user(user_id: int) -> dict | None:
    """Get a user by ID without the password hash."""
    row = await fetch_one(f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE id = ?", (user_id,))
    return _public(row)


async def require_user_record(user_id: int) -> dict:
    user = await get_user(user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


async def get_user_by_email(email: str) -> dict | None:
    row = await fetch_one(f"SELECT {_PUBLIC_COLUMNS} FROM users WHERE email = ?", (email.lower(),))
    return _public(row)


async def list_users() -> list[dict]:
    rows = await fetch_all(f"SELECT {_PUBLIC_COLUMNS} FROM users ORDER BY id ASC")
    return [_public(row) for row in rows]


async def create_user(name: str, email: str, password: str, is_admin: bool = False) -> dict:
    """Register a user. Raises ConflictError if the email is taken."""
    if await get_user_by_email(email):
        raise ConflictError("User already exists")

    db = await get_db()
    cursor = await db.execute(
        """INSERT INTO users (name, email, password_hash, is_admin)
           VALUES (?, ?, ?, ?)""",
        (name, email.lower(), hash_password(password), int(is_admin)),
    )
    await db.commit()
    return await get_user(cursor.lastrowid)


async def authenticate(email: str, password: str) -> dict | None:
    """Return the user if the credentials match, else None."""
    row = await fetch_one("SELECT * FROM users WHERE email = ?", (email.lower(),))
    if row is None or not verify_password(password, row["password_hash"]):
        return None
    return _public({k: v for k, v in row.items() if k != "password_hash"})


async def _update_user(user_id: int, **fields) -> dict:
    await require_user_record(user_id)

    updates = {k: v for k, v in fields.items() if v is not None}
    if "email" in updates:
        updates["email"] = updates["email"].lower()
    if "is_admin" in updates:
        updates["is_admin"] = int(updates["is_admin"])
    if not updates:
        return await get_user(user_id)

    set_clauses = [f"{key} = ?" for key in updates] + ["updated_at = datetime('now')"]
    db = await get_db()
    try:
        await db.execute(
            f"UPDATE users SET {', '.join(set_clauses)} WHERE id = ?",
            list(updates.values()) + [user_id],
        )
    except aiosqlite.IntegrityError:
        raise ConflictError("Email already exists")
    await db.commit()
    return await get_user(user_id)


async def update_profile(
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> dict:
    """Self-service profile edit. Review display names refresh on the next review."""
    return await _update_user(
        user_id,
        name=name,
        email=email,
        password_hash=hash_password(password) if password else None,
    )


async def admin_update_user(
    user_id: int,
    name: str | None = None,
    email: str | None = None,
    is_admin: bool | None = None,
) -> dict:
    return await _update_user(user_id, name=name, email=email, is_admin=is_admin)


async def delete_user(user_id: int) -> int:
    """Delete a user after removing their reviews from every game.

    Reviewed games get their review count resynced. Every game the user
    reviewed or played is recomputed once the user and their ledger are
    gone, so the result reflects only the remaining players. Returns the
    number of games touched.
    """
    await require_user_record(user_id)

    played = await fetch_all("SELECT game_id FROM play_time WHERE user_id = ?", (user_id,))

    db = await get_db()
    try:
        reviewed = await delete_user_reviews(user_id)
        await db.execute("DELETE FROM play_time WHERE user_id = ?", (user_id,))
        await db.execute("DELETE FROM users WHERE id = ?", (user_id,))
    except Exception:
        await db.rollback()
        raise
    await db.commit()

    game_ids = sorted(set(reviewed) | {row["game_id"] for row in played})
    for game_id in game_ids:
        await recompute_game_rating(game_id)

    logger.info(
        "Deleted user %d, removed reviews on %d games, recomputed %d games",
        user_id, len(reviewed), len(game_ids),
    )
    return len(game_ids)
