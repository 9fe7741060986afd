"""Read-only views that join the playtime ledger with reviews."""

import json

from playrate.errors import NotFoundError
from playrate.services.game_service import get_game, list_all_games, require_game
from playrate.services.playtime_service import get_game_play_times, list_user_play_times
from playrate.services.review_service import list_game_reviews, list_user_reviews
from playrate.services.user_service import require_user_record


def _reviews_by_playtime(reviews: list[dict], play_times: dict[int, int]) -> list[dict]:
    """Attach each reviewer's playtime and sort the longest players first."""
    entries = [
        {
            "user": {"id": r["user_id"], "name": r["name"]},
            "rating": r["rating"],
            "comment": r["comment"],
            "user_play_time": play_times.get(r["user_id"], 0),
            "created_at": r["created_at"],
            "updated_at": r["updated_at"],
        }
        for r in reviews
    ]
    # sorted() is stable, so equal playtimes keep submission order
    return sorted(entries, key=lambda e: e["user_play_time"], reverse=True)


def _average_rating(reviews: list[dict]) -> tuple[float, int]:
    ratings = [r["rating"] for r in reviews if r["rating"]]
    if not ratings:
        return 0.0, 0
    return sum(ratings) / len(ratings), len(ratings)


def _game_summary(game: dict) -> dict:
    return {
        "id": game["id"],
        "name": game["name"],
        "image": game["image"],
        "category": game["category"],
        "brand": game["brand"],
        "rating": game["rating"],
    }


async def get_game_detail(game_id: int) -> dict:
    """A game with its reviews ordered by reviewer playtime."""
    game = await require_game(game_id)
    play_times = await get_game_play_times(game_id)
    game["reviews"] = _reviews_by_playtime(await list_game_reviews(game_id), play_times)
    return game


async def list_detailed_games() -> list[dict]:
    """Every game with total playtime and playtime-ordered reviews.

    Extra fields are flattened into each entry.
    """
    detailed = []
    for game in await list_all_games():
        play_times = await get_game_play_times(game["id"])
        reviews = await list_game_reviews(game["id"])
        extra = game.pop("extra")
        entry = {
            **{k: v for k, v in extra.items() if k not in game},
            **game,
            "play_time": sum(play_times.values()),
            "reviews": _reviews_by_playtime(reviews, play_times),
        }
        detailed.append(entry)
    return detailed


async def get_game_comments(game_id: int) -> dict:
    game = await require_game(game_id)
    play_times = await get_game_play_times(game_id)
    comments = _reviews_by_playtime(await list_game_reviews(game_id), play_times)
    return {
        "game_id": game["id"],
        "game_name": game["name"],
        "comments": comments,
    }


async def get_user_stats(user_id: int) -> dict:
    """Total playtime plus the average of the ratings the user has given."""
    await require_user_record(user_id)
    ledger = await list_user_play_times(user_id)
    average, count = _average_rating(await list_user_reviews(user_id))
    return {
        "total_play_time": sum(entry["time"] for entry in ledger),
        "average_rating": average,
        "rating_count": count,
    }


async def _most_played(user_id: int) -> dict | None:
    # Ledger is already ordered by time desc
    for entry in await list_user_play_times(user_id):
        game = await get_game(entry["game_id"])
        if game is not None:
            return {"game": _game_summary(game), "play_time": entry["time"]}
    return None


async def get_most_played_game(user_id: int) -> dict:
    await require_user_record(user_id)
    most_played = await _most_played(user_id)
    if most_played is None:
        raise NotFoundError("No games played yet")
    return most_played


async def get_user_comments(user_id: int) -> list[dict]:
    """The user's non-empty comments with game info, longest played first."""
    await require_user_record(user_id)
    play_times = {e["game_id"]: e["time"] for e in await list_user_play_times(user_id)}
    comments = [
        {
            "game_id": r["game_id"],
            "game_name": r["game_name"],
            "game_image": r["game_image"],
            "category": json.loads(r["game_category"]),
            "comment": r["comment"],
            "rating": r["rating"],
            "play_time": play_times.get(r["game_id"], 0),
            "created_at": r["created_at"],
        }
        for r in await list_user_reviews(user_id)
        if r["comment"]
    ]
    return sorted(comments, key=lambda c: c["play_time"], reverse=True)


async def get_user_dashboard(user_id: int) -> dict:
    """Everything the profile dashboard shows in one document."""
    user = await require_user_record(user_id)
    ledger = await list_user_play_times(user_id)
    average, count = _average_rating(await list_user_reviews(user_id))
    comments = await get_user_comments(user_id)

    played_games = []
    for entry in ledger:
        game = await get_game(entry["game_id"])
        if game is not None:
            played_games.append({"game": _game_summary(game), "play_time": entry["time"]})

    return {
        "user": {"id": user["id"], "name": user["name"], "email": user["email"]},
        "stats": {
            "total_play_time": sum(entry["time"] for entry in ledger),
            "average_rating": average,
            "rating_count": count,
            "games_played_count": len(ledger),
            "comments_count": len(comments),
        },
        "most_played_game": played_games[0] if played_games else None,
        "comments": comments,
        "played_games": played_games,
    }


async def get_user_page(user_id: int) -> dict:
    user = await require_user_record(user_id)
    stats = await get_user_stats(user_id)
    return {
        "user_name": user["name"],
        "average_rating": stats["average_rating"],
        "total_play_time": stats["total_play_time"],
        "most_played_game": await _most_played(user_id),
        "comments": await get_user_comments(user_id),
    }
