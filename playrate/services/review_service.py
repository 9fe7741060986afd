"""Review store: one rating/comment slot per (game, user)."""

import logging

from playrate.config import settings
from playrate.database import fetch_all, fetch_one, get_db
from playrate.errors import NotFoundError
from playrate.models.review import OMITTED
from playrate.services.eligibility import check_review_eligibility, normalize_comment
from playrate.services.playtime_service import get_play_time

logger = logging.getLogger(__name__)


async def get_review(game_id: int, user_id: int) -> dict | None:
    return await fetch_one(
        "SELECT * FROM reviews WHERE game_id = ? AND user_id = ?",
        (game_id, user_id),
    )


async def list_game_reviews(game_id: int) -> list[dict]:
    """Reviews for a game in submission order."""
    return await fetch_all(
        "SELECT * FROM reviews WHERE game_id = ? ORDER BY created_at ASC, id ASC",
        (game_id,),
    )


async def list_user_reviews(user_id: int) -> list[dict]:
    """Every review a user wrote, with the game's name, image and category."""
    return await fetch_all(
        """SELECT r.*, g.name AS game_name, g.image AS game_image,
                  g.category AS game_category
           FROM reviews r
           JOIN games g ON g.id = r.game_id
           WHERE r.user_id = ?
           ORDER BY r.id ASC""",
        (user_id,),
    )


async def sync_review_count(game_id: int) -> int:
    """Set games.num_reviews to the number of review rows. Returns the count."""
    db = await get_db()
    cursor = await db.execute("SELECT COUNT(*) FROM reviews WHERE game_id = ?", (game_id,))
    count = (await cursor.fetchone())[0]
    await db.execute(
        "UPDATE games SET num_reviews = ?, updated_at = datetime('now') WHERE id = ?",
        (count, game_id),
    )
    await db.commit()
    return count


async def upsert_review(
    game_id: int,
    user_id: int,
    display_name: str,
    rating=OMITTED,
    comment=OMITTED,
) -> tuple[dict, bool]:
    """Create or merge the user's review for a game.

    Only fields that were submitted are written; the author name is always
    refreshed. Returns ``(review, created)``. Eligibility must already have
    been checked.
    """
    comment = normalize_comment(comment)
    db = await get_db()
    existing = await get_review(game_id, user_id)

    # Omitted fields are left out of the conflict update so they keep their value
    set_clauses = ["name = excluded.name", "updated_at = datetime('now')"]
    if rating is not OMITTED:
        set_clauses.append("rating = excluded.rating")
    if comment is not OMITTED:
        set_clauses.append("comment = excluded.comment")

    await db.execute(
        f"""INSERT INTO reviews (game_id, user_id, name, rating, comment)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(game_id, user_id) DO UPDATE SET {', '.join(set_clauses)}""",
        (
            game_id,
            user_id,
            display_name,
            None if rating is OMITTED else rating,
            None if comment is OMITTED else comment,
        ),
    )
    await db.commit()

    await sync_review_count(game_id)
    review = await get_review(game_id, user_id)
    return review, existing is None


async def submit_review(game_id: int, user_id: int, rating=OMITTED, comment=OMITTED) -> tuple[dict, bool]:
    """Gate and apply a review submission from a user.

    Raises the gate's ValidationError/EligibilityDenied without writing
    anything when the submission is refused.
    """
    game = await fetch_one(
        "SELECT id, disable_rating, disable_commenting FROM games WHERE id = ?",
        (game_id,),
    )
    if game is None:
        raise NotFoundError("Product not found")
    user = await fetch_one("SELECT id, name FROM users WHERE id = ?", (user_id,))
    if user is None:
        raise NotFoundError("User not found")

    existing = await get_review(game_id, user_id)
    play_time = await get_play_time(user_id, game_id)

    verdict = check_review_eligibility(
        play_time,
        game,
        rating=rating,
        comment=comment,
        existing=existing,
        required_minutes=settings.required_play_minutes,
    )
    if not verdict:
        raise verdict.to_error()

    review, created = await upsert_review(game_id, user_id, user["name"], rating, comment)
    logger.info(
        "%s review by user %d on game %d",
        "Added" if created else "Updated", user_id, game_id,
    )
    return review, created


async def delete_user_reviews(user_id: int) -> list[int]:
    """Remove a user's reviews everywhere. Returns the affected game ids.

    Review counts are resynced; ratings are left to the caller. Does not
    commit; the caller finishes the transaction.
    """
    rows = await fetch_all("SELECT game_id FROM reviews WHERE user_id = ?", (user_id,))
    game_ids = [row["game_id"] for row in rows]
    if not game_ids:
        return []

    db = await get_db()
    await db.execute("DELETE FROM reviews WHERE user_id = ?", (user_id,))
    placeholders = ", ".join("?" for _ in game_ids)
    await db.execute(
        f"""UPDATE games
            SET num_reviews = (SELECT COUNT(*) FROM reviews WHERE reviews.game_id = games.id),
                updated_at = datetime('now')
            WHERE id IN ({placeholders})""",
        game_ids,
    )
    return game_ids
