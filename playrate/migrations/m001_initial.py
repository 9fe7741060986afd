"""Initial database schema.

Creates the users, games, play_time and reviews tables with their indexes.
"""

import aiosqlite


async def upgrade(db: aiosqlite.Connection) -> None:
    """Create the initial database schema."""

    # ── Users table ──────────────────────────────────────────────────────
    await db.execute("""
        CREATE TABLE users (
            id              INTEGER PRIMARY KEY AUTOINCREMENT,
            name            TEXT NOT NULL,
            email           TEXT NOT NULL UNIQUE,
            password_hash   TEXT NOT NULL,
            is_admin        INTEGER NOT NULL DEFAULT 0,
            created_at      TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at      TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)

    # ── Games table ──────────────────────────────────────────────────────
    # category and extra hold JSON (list of genres / free-form object)
    await db.execute("""
        CREATE TABLE games (
            id                  INTEGER PRIMARY KEY AUTOINCREMENT,
            owner_id            INTEGER REFERENCES users(id) ON DELETE SET NULL,
            name                TEXT NOT NULL,
            image               TEXT NOT NULL,
            brand               TEXT NOT NULL,
            category            TEXT NOT NULL,
            description         TEXT NOT NULL,
            extra               TEXT NOT NULL DEFAULT '{}',
            rating              REAL NOT NULL DEFAULT 0,
            num_reviews         INTEGER NOT NULL DEFAULT 0,
            disable_rating      INTEGER NOT NULL DEFAULT 0,
            disable_commenting  INTEGER NOT NULL DEFAULT 0,
            created_at          TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at          TEXT NOT NULL DEFAULT (datetime('now'))
        )
    """)
    await db.execute("CREATE INDEX idx_games_name ON games(name)")

    # ── Playtime ledger ──────────────────────────────────────────────────
    await db.execute("""
        CREATE TABLE play_time (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            game_id     INTEGER NOT NULL REFERENCES games(id) ON DELETE CASCADE,
            time        INTEGER NOT NULL CHECK (time > 0),
            created_at  TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at  TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE (user_id, game_id)
        )
    """)
    await db.execute("CREATE INDEX idx_play_time_game_id ON play_time(game_id)")

    # ── Reviews table ────────────────────────────────────────────────────
    await db.execute("""
        CREATE TABLE reviews (
            id          INTEGER PRIMARY KEY AUTOINCREMENT,
            game_id     INTEGER NOT NULL REFERENCES games(id) ON DELETE CASCADE,
            user_id     INTEGER NOT NULL REFERENCES users(id) ON DELETE CASCADE,
            name        TEXT NOT NULL,
            rating      INTEGER CHECK (rating IS NULL OR rating BETWEEN 1 AND 5),
            comment     TEXT,
            created_at  TEXT NOT NULL DEFAULT (datetime('now')),
            updated_at  TEXT NOT NULL DEFAULT (datetime('now')),
            UNIQUE (game_id, user_id)
        )
    """)
    await db.execute("CREATE INDEX idx_reviews_user_id ON reviews(user_id)")

    await db.commit()
