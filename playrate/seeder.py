"""Load sample users, games and interactions into the database.

Usage:
    python -m playrate.seeder            # wipe and import sample data
    python -m playrate.seeder --destroy  # wipe only
"""

import argparse
import asyncio
import logging
import sys

from playrate.config import settings
from playrate.database import close_db, get_db, init_db
from playrate.models.review import OMITTED
from playrate.services.eligibility import check_review_eligibility
from playrate.services.game_service import create_game, get_game, list_all_games
from playrate.services.playtime_service import record_play
from playrate.services.rating_service import recompute_game_rating
from playrate.services.review_service import get_review, upsert_review
from playrate.services.user_service import create_user

logger = logging.getLogger("playrate.seeder")

SAMPLE_PASSWORD = "password123"

SAMPLE_USERS = [
    ("Admin User", "admin@example.com", True),
    ("Alice Wonderland", "alice@example.com", False),
    ("Bob The Builder", "bob@example.com", False),
    ("Charlie Chaplin", "charlie@example.com", False),
    ("Diana Prince", "diana@example.com", False),
    ("Ethan Hunt", "ethan@example.com", False),
    ("Fiona Shrek", "fiona@example.com", False),
    ("George Jetson", "george@example.com", False),
    ("Hannah Montana", "hannah@example.com", False),
    ("Ian Malcolm", "ian@example.com", False),
    ("Jane Doe", "jane@example.com", False),
]

SAMPLE_GAMES = [
    {
        "name": "Cyber Odyssey",
        "image": "https://loremflickr.com/320/240/cyberpunk,rpg?random=1",
        "brand": "Neon Dreams Studio",
        "category": ["RPG", "Sci-Fi", "Open World"],
        "description": "Explore a vast cyberpunk city, upgrade your augments, and unravel a corporate conspiracy.",
        "extra": {"release_date": "2024-10-20", "developer": "Neon Dreams Dev Team"},
    },
    {
        "name": "Pixel Racers Turbo",
        "image": "https://loremflickr.com/320/240/racing,arcade?random=2",
        "brand": "RetroRev Games",
        "category": ["Racing", "Arcade"],
        "description": "High-octane retro racing with power-ups and crazy tracks.",
        "extra": {"platform": ["PC", "Console"]},
    },
    {
        "name": "Mystic Forest Chronicles",
        "image": "https://loremflickr.com/320/240/fantasy,puzzle?random=3",
        "brand": "Enchanted Pixels",
        "category": ["Adventure", "Puzzle", "Fantasy"],
        "description": "Solve ancient puzzles and navigate a magical forest to lift a curse.",
        "extra": {"voice_acting": True},
    },
    {
        "name": "Galactic Command",
        "image": "https://loremflickr.com/320/240/strategy,space?random=4",
        "brand": "Stellar Forge Inc.",
        "category": ["Strategy", "Sci-Fi", "4X"],
        "description": "Lead your civilization to galactic dominance through diplomacy, warfare, and exploration.",
    },
    {
        "name": "Zombie Survival Pro",
        "image": "https://loremflickr.com/320/240/zombie,survival?random=5",
        "brand": "Apocalypse Interactive",
        "category": ["Survival", "Horror", "Action"],
        "description": "Scavenge, build, and survive against hordes of the undead.",
    },
    {
        "name": "Cooking Mania Deluxe",
        "image": "https://loremflickr.com/320/240/cooking,simulation?random=6",
        "brand": "Culinary Coders",
        "category": ["Simulation", "Casual"],
        "description": "Run your own restaurant and become a master chef.",
    },
    {
        "name": "Stealth Ops: Shadow Protocol",
        "image": "https://loremflickr.com/320/240/stealth,action?random=7",
        "brand": "Ghost Works",
        "category": ["Stealth", "Action"],
        "description": "Infiltrate enemy bases using gadgets and cunning.",
    },
    {
        "name": "Fantasy Football Manager 2025",
        "image": "https://loremflickr.com/320/240/football,manager?random=8",
        "brand": "SportSim Studios",
        "category": ["Simulation", "Sports", "Management"],
        "description": "Manage your fantasy football team to victory.",
    },
    {
        "name": "Platformer Pete's Big Jump",
        "image": "https://loremflickr.com/320/240/platformer,indie?random=9",
        "brand": "JumpJoy Creations",
        "category": ["Platformer", "Indie"],
        "description": "Classic platforming action with challenging levels.",
    },
    {
        "name": "Detective Noir: The Rainy City Case",
        "image": "https://loremflickr.com/320/240/detective,noir?random=10",
        "brand": "Shadowplay Games",
        "category": ["Adventure", "Point-and-Click", "Mystery"],
        "description": "Solve a complex murder case in a rain-soaked city.",
        "extra": {"soundtrack_included": True},
    },
    {
        "name": "Arena Fighters Ultimate",
        "image": "https://loremflickr.com/320/240/fighting,arena?random=11",
        "brand": "Combat Kings",
        "category": ["Fighting", "Action"],
        "description": "Choose your fighter and battle in intense arena combat.",
    },
]

# (user email, game name, minutes, rating, comment); OMITTED = not submitted
SAMPLE_INTERACTIONS = [
    ("alice@example.com", "Cyber Odyssey", 120, 5, "Amazing open world!"),
    ("alice@example.com", "Pixel Racers Turbo", 70, 4, "Fun retro racer."),
    ("alice@example.com", "Mystic Forest Chronicles", 90, OMITTED, OMITTED),
    ("alice@example.com", "Galactic Command", 150, OMITTED, OMITTED),
    ("bob@example.com", "Cyber Odyssey", 80, 4, "Solid RPG mechanics."),
    ("bob@example.com", "Zombie Survival Pro", 200, 5, "Intense survival!"),
    ("bob@example.com", "Cooking Mania Deluxe", 65, 3, OMITTED),
    ("bob@example.com", "Stealth Ops: Shadow Protocol", 110, OMITTED, OMITTED),
    ("charlie@example.com", "Mystic Forest Chronicles", 180, 5, "Beautiful game, loved the puzzles."),
    ("charlie@example.com", "Galactic Command", 250, 4, "Deep strategy, very engaging."),
    ("charlie@example.com", "Pixel Racers Turbo", 95, 3, "A bit repetitive."),
    ("charlie@example.com", "Zombie Survival Pro", 75, OMITTED, OMITTED),
    ("diana@example.com", "Cooking Mania Deluxe", 130, 4, "Cute and addictive."),
    ("diana@example.com", "Stealth Ops: Shadow Protocol", 85, OMITTED, OMITTED),
    ("ethan@example.com", "Cyber Odyssey", 60, 3, OMITTED),
]


async def destroy_data() -> None:
    db = await get_db()
    for table in ("reviews", "play_time", "games", "users"):
        await db.execute(f"DELETE FROM {table}")
    await db.commit()
    logger.info("Data cleared")


async def simulate_interaction(user: dict, game_id: int, minutes: int, rating, comment) -> bool:
    """Play a game, then review it if the gate allows. Returns True if reviewed."""
    total = await record_play(user["id"], game_id, minutes)
    if rating is OMITTED and comment is OMITTED:
        return False

    game = await get_game(game_id)
    existing = await get_review(game_id, user["id"])
    verdict = check_review_eligibility(
        total,
        game,
        rating=rating,
        comment=comment,
        existing=existing,
        required_minutes=settings.required_play_minutes,
    )
    if not verdict:
        logger.info("Skipped review %s -> %s: %s", user["name"], game["name"], verdict.message)
        return False

    await upsert_review(game_id, user["id"], user["name"], rating, comment)
    logger.info(
        "Simulated interaction: %s -> %s (time %d, rating %s, comment %s)",
        user["name"], game["name"], minutes, rating, "yes" if comment is not OMITTED else "no",
    )
    return True


async def import_data() -> dict:
    """Wipe the database and load the sample catalog. Returns counts."""
    await destroy_data()

    users = {}
    for name, email, is_admin in SAMPLE_USERS:
        users[email] = await create_user(name, email, SAMPLE_PASSWORD, is_admin=is_admin)
    logger.info("%d users imported", len(users))

    admin = users["admin@example.com"]
    games = {}
    for data in SAMPLE_GAMES:
        game = await create_game(owner_id=admin["id"], **data)
        games[game["name"]] = game
    logger.info("%d games imported", len(games))

    reviews = 0
    for email, game_name, minutes, rating, comment in SAMPLE_INTERACTIONS:
        if await simulate_interaction(users[email], games[game_name]["id"], minutes, rating, comment):
            reviews += 1

    for game in await list_all_games():
        await recompute_game_rating(game["id"])
    logger.info("Recalculated weighted ratings for all games")

    return {"users": len(users), "games": len(games), "reviews": reviews}


async def _main(destroy: bool) -> None:
    await init_db()
    try:
        if destroy:
            await destroy_data()
        else:
            await import_data()
    finally:
        await close_db()


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Seed the PlayRate database with sample data.")
    parser.add_argument("--destroy", action="store_true", help="only delete existing data")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(_main(args.destroy))
    return 0


if __name__ == "__main__":
    sys.exit(main())
