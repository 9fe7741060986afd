"""Playtime ledger: minutes each user has accumulated on each game."""

import logging

from playrate.database import fetch_all, fetch_one, get_db
from playrate.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def validate_minutes(minutes) -> int:
    """Return ``minutes`` if it is a positive integer, else raise ValidationError."""
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        raise ValidationError("Valid playtime value is required")
    return minutes


async def record_play(user_id: int, game_id: int, minutes: int) -> int:
    """Add ``minutes`` to the user's ledger entry for a game.

    Creates the entry on first play. Returns the cumulative time for the pair.
    Does not touch the game's rating; callers schedule a recompute.
    """
    validate_minutes(minutes)

    if await fetch_one("SELECT id FROM games WHERE id = ?", (game_id,)) is None:
        raise NotFoundError("Game not found")
    if await fetch_one("SELECT id FROM users WHERE id = ?", (user_id,)) is None:
        raise NotFoundError("User not found")

    db = await get_db()
    await db.execute(
        """INSERT INTO play_time (user_id, game_id, time) VALUES (?, ?, ?)
           ON CONFLICT(user_id, game_id) DO UPDATE SET
               time = time + excluded.time,
               updated_at = datetime('now')""",
        (user_id, game_id, minutes),
    )
    await db.commit()

    total = await get_play_time(user_id, game_id)
    logger.info("User %d played game %d for %d min (total %d)", user_id, game_id, minutes, total)
    return total


async def get_play_time(user_id: int, game_id: int) -> int:
    """Cumulative minutes for a (user, game) pair, 0 if never played."""
    row = await fetch_one(
        "SELECT time FROM play_time WHERE user_id = ? AND game_id = ?",
        (user_id, game_id),
    )
    return row["time"] if row else 0


async def get_game_play_times(game_id: int) -> dict[int, int]:
    """Map of user id -> minutes for everyone who has played a game."""
    rows = await fetch_all(
        "SELECT user_id, time FROM play_time WHERE game_id = ?", (game_id,)
    )
    return {row["user_id"]: row["time"] for row in rows}


async def list_user_play_times(user_id: int) -> list[dict]:
    """Ledger rows for a user, most played first."""
    return await fetch_all(
        """SELECT game_id, time FROM play_time
           WHERE user_id = ?
           ORDER BY time DESC, game_id ASC""",
        (user_id,),
    )


async def delete_game_entries(game_id: int) -> int:
    """Remove every user's ledger entry for a game. Returns rows removed.

    Does not commit; the caller finishes the transaction.
    """
    db = await get_db()
    cursor = await db.execute("DELETE FROM play_time WHERE game_id = ?", (game_id,))
    return cursor.rowcount
