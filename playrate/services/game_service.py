"""Game catalog service: CRUD, search and deletion cleanup."""

import json
import logging
import math

from playrate.config import settings
from playrate.database import fetch_all, fetch_one, get_db
from playrate.errors import NotFoundError
from playrate.services.playtime_service import delete_game_entries

logger = logging.getLogger(__name__)

# Columns a client may set directly; anything else goes into `extra`
_GAME_FIELDS = (
    "name",
    "image",
    "brand",
    "category",
    "description",
    "disable_rating",
    "disable_commenting",
)


def _row_to_game(row: dict) -> dict:
    game = dict(row)
    game["category"] = json.loads(game["category"])
    game["extra"] = json.loads(game["extra"] or "{}")
    game["disable_rating"] = bool(game["disable_rating"])
    game["disable_commenting"] = bool(game["disable_commenting"])
    return game


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


async def get_game(game_id: int) -> dict | None:
    """Get a single game by ID."""
    row = await fetch_one("SELECT * FROM games WHERE id = ?", (game_id,))
    return _row_to_game(row) if row else None


async def require_game(game_id: int) -> dict:
    game = await get_game(game_id)
    if game is None:
        raise NotFoundError("Product not found")
    return game


async def list_all_games() -> list[dict]:
    rows = await fetch_all("SELECT * FROM games ORDER BY id ASC")
    return [_row_to_game(row) for row in rows]


async def list_games(keyword: str | None = None, page: int = 1) -> dict:
    """One page of games, optionally filtered by a case-insensitive name match.

    Returns {products, page, pages}.
    """
    page = max(page, 1)
    page_size = settings.page_size

    where = ""
    params: list = []
    if keyword:
        where = "WHERE name LIKE ? ESCAPE '\\'"
        params.append(f"%{_escape_like(keyword)}%")

    db = await get_db()
    cursor = await db.execute(f"SELECT COUNT(*) FROM games {where}", params)
    count = (await cursor.fetchone())[0]

    rows = await fetch_all(
        f"SELECT * FROM games {where} ORDER BY id ASC LIMIT ? OFFSET ?",
        params + [page_size, page_size * (page - 1)],
    )
    return {
        "products": [_row_to_game(row) for row in rows],
        "page": page,
        "pages": math.ceil(count / page_size),
    }


async def create_game(
    owner_id: int | None,
    name: str,
    image: str,
    brand: str,
    category: list[str],
    description: str,
    disable_rating: bool = False,
    disable_commenting: bool = False,
    extra: dict | None = None,
) -> dict:
    """Create a game with a zero rating and no reviews."""
    db = await get_db()
    cursor = await db.execute(
        """INSERT INTO games (owner_id, name, image, brand, category, description,
                              extra, disable_rating, disable_commenting)
           VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)""",
        (
            owner_id,
            name,
            image,
            brand,
            json.dumps(category),
            description,
            json.dumps(extra or {}),
            int(disable_rating),
            int(disable_commenting),
        ),
    )
    await db.commit()
    logger.info("Created game %d (%s)", cursor.lastrowid, name)
    return await get_game(cursor.lastrowid)


async def update_game(game_id: int, extra: dict | None = None, **fields) -> dict:
    """Update game fields. Only non-None values are written.

    ``extra`` keys are merged into the stored extra fields. Changing the
    disable flags does not touch the rating.
    """
    game = await require_game(game_id)

    updates = {k: v for k, v in fields.items() if k in _GAME_FIELDS and v is not None}
    if "category" in updates:
        updates["category"] = json.dumps(updates["category"])
    for flag in ("disable_rating", "disable_commenting"):
        if flag in updates:
            updates[flag] = int(updates[flag])
    if extra:
        updates["extra"] = json.dumps({**game["extra"], **extra})

    if not updates:
        return game

    set_clauses = [f"{key} = ?" for key in updates] + ["updated_at = datetime('now')"]
    values = list(updates.values()) + [game_id]

    db = await get_db()
    await db.execute(
        f"UPDATE games SET {', '.join(set_clauses)} WHERE id = ?",
        values,
    )
    await db.commit()
    return await get_game(game_id)


async def delete_game(game_id: int) -> int:
    """Delete a game after removing every user's playtime entry for it.

    Its reviews go with it. Returns the number of users whose ledger was
    cleaned up.
    """
    await require_game(game_id)

    db = await get_db()
    try:
        affected_users = await delete_game_entries(game_id)
        await db.execute("DELETE FROM reviews WHERE game_id = ?", (game_id,))
        await db.execute("DELETE FROM games WHERE id = ?", (game_id,))
    except Exception:
        await db.rollback()
        raise
    await db.commit()

    logger.info("Deleted game %d, cleaned playtime of %d users", game_id, affected_users)
    return affected_users
