"""Weighted rating aggregation.

A game's public rating is the playtime-weighted average of its players'
ratings::

    rating = sum(time_u * rating_u) / sum(time_u)

The sum runs over every user with time recorded on the game. A player
without a positive rating still adds their time to the denominator, so
silent players pull the rating towards 0. No playtime at all gives 0.

After a play or review request the recompute is handed to FastAPI's
``BackgroundTasks`` and runs once the response has been sent. Until it
finishes, ``games.rating`` can lag the write that was just committed. A
failed recompute is logged and left for the next play/review event to fix.
"""

import logging
from collections.abc import Mapping

import aiosqlite
from fastapi import BackgroundTasks

from playrate.database import fetch_all, fetch_one, get_db
from playrate.errors import AggregationFailure, NotFoundError, ServiceError
from playrate.services.playtime_service import get_game_play_times

logger = logging.getLogger(__name__)


def compute_weighted_rating(
    play_times: Mapping[int, int],
    ratings: Mapping[int, int | None],
) -> float:
    """Playtime-weighted average of ratings.

    ``play_times`` maps user id -> minutes on the game, ``ratings`` maps
    user id -> that user's review rating (None when the review has no
    rating). Ratings from users with no recorded time are ignored.
    """
    total_play_time = 0
    weighted_sum = 0

    for user_id, time in play_times.items():
        total_play_time += time
        rating = ratings.get(user_id)
        if time > 0 and rating is not None and rating > 0:
            weighted_sum += time * rating

    if total_play_time <= 0:
        return 0.0
    return weighted_sum / total_play_time


async def recompute_game_rating(game_id: int) -> float:
    """Recompute and store a game's weighted rating. Returns the new value."""
    try:
        game = await fetch_one("SELECT id FROM games WHERE id = ?", (game_id,))
        if game is None:
            raise NotFoundError(f"Game {game_id} not found")

        play_times = await get_game_play_times(game_id)
        rows = await fetch_all(
            "SELECT user_id, rating FROM reviews WHERE game_id = ?", (game_id,)
        )
        ratings = {row["user_id"]: row["rating"] for row in rows}

        rating = compute_weighted_rating(play_times, ratings)

        db = await get_db()
        await db.execute(
            "UPDATE games SET rating = ?, updated_at = datetime('now') WHERE id = ?",
            (rating, game_id),
        )
        await db.commit()
    except aiosqlite.Error as e:
        raise AggregationFailure(game_id, str(e)) from e

    logger.info("Updated weighted rating for game %d to %.4f", game_id, rating)
    return rating


async def run_rating_recompute(game_id: int) -> None:
    """Detached recompute: logs failures instead of raising them."""
    try:
        await recompute_game_rating(game_id)
    except ServiceError as e:
        logger.error("Background rating update for game %d failed: %s", game_id, e.message)
    except Exception:
        logger.exception("Background rating update for game %d crashed", game_id)


def schedule_rating_recompute(background_tasks: BackgroundTasks, game_id: int) -> None:
    """Queue a recompute to run after the current response is sent."""
    background_tasks.add_task(run_rating_recompute, game_id)
