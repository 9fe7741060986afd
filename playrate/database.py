"""SQLite database connection management and initialization."""

import aiosqlite

from playrate.config import settings
from playrate.migrations.runner import run_migrations

# Global connection reference
_db: aiosqlite.Connection | None = None


async def get_db() -> aiosqlite.Connection:
    """Get the database connection. Raises if not initialized."""
    if _db is None:
        raise RuntimeError("Database not initialized. Call init_db() first.")
    return _db


async def init_db() -> None:
    """Initialize the database connection and run migrations."""
    global _db

    # Ensure data directory exists
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)

    _db = await aiosqlite.connect(str(settings.db_path))

    # Enable WAL mode for better read concurrency
    await _db.execute("PRAGMA journal_mode=WAL")
    # Enable foreign keys
    await _db.execute("PRAGMA foreign_keys=ON")
    # Reasonable busy timeout for concurrent access
    await _db.execute("PRAGMA busy_timeout=5000")

    await _db.commit()

    await run_migrations(_db)


async def close_db() -> None:
    """Close the database connection."""
    global _db
    if _db is not None:
        await _db.close()
        _db = None


async def fetch_one(query: str, params: tuple | list = ()) -> dict | None:
    """Run a query and return the first row as a dict, or None."""
    db = await get_db()
    cursor = await db.execute(query, params)
    columns = [desc[0] for desc in cursor.description]
    row = await cursor.fetchone()
    if row is None:
        return None
    return dict(zip(columns, row))


async def fetch_all(query: str, params: tuple | list = ()) -> list[dict]:
    """Run a query and return every row as a dict."""
    db = await get_db()
    cursor = await db.execute(query, params)
    columns = [desc[0] for desc in cursor.description]
    rows = await cursor.fetchall()
    return [dict(zip(columns, row)) for row in rows]
