"""Shared test fixtures for all test modules."""

import os
import tempfile

import pytest

# ── Environment overrides (must be set before importing playrate modules) ────
_tmp = tempfile.mkdtemp(prefix="pr_pytest_")
os.environ["PLAYRATE_DATA_DIR"] = _tmp
os.environ["PLAYRATE_DB_PATH"] = os.path.join(_tmp, "test.db")
os.environ["PLAYRATE_SECRET_KEY"] = "pytest-secret-key"
os.environ["PLAYRATE_REQUIRED_PLAY_MINUTES"] = "60"
os.environ["PLAYRATE_PAGE_SIZE"] = "10"


@pytest.fixture
async def fresh_db(tmp_path):
    """Point the app at an empty database for one test."""
    import playrate.database as db_mod
    from playrate.config import settings

    original_db_path = settings.db_path
    settings.db_path = tmp_path / "playrate_test.db"

    if db_mod._db is not None:
        await db_mod.close_db()
    await db_mod.init_db()

    yield await db_mod.get_db()

    await db_mod.close_db()
    settings.db_path = original_db_path


@pytest.fixture
def make_user(fresh_db):
    """Factory creating users with unique emails."""
    from playrate.services.user_service import create_user

    counter = {"n": 0}

    async def _make(name: str | None = None, is_admin: bool = False) -> dict:
        counter["n"] += 1
        name = name or f"Player {counter['n']}"
        return await create_user(
            name, f"player{counter['n']}@example.com", "password123", is_admin=is_admin
        )

    return _make


@pytest.fixture
def make_game(fresh_db):
    """Factory creating games with sensible defaults."""
    from playrate.services.game_service import create_game

    async def _make(name: str = "Test Game", **overrides) -> dict:
        fields = {
            "owner_id": None,
            "name": name,
            "image": "https://example.com/cover.png",
            "brand": "Test Studio",
            "category": ["Action"],
            "description": "A game for tests.",
        }
        fields.update(overrides)
        return await create_game(**fields)

    return _make
