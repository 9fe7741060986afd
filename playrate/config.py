"""Application configuration via environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """PlayRate application settings loaded from environment variables."""

    # Required
    secret_key: str = "change-me-to-a-random-string"

    # Data paths
    data_dir: Path = Path("/data")
    db_path: Path = Path("/data/playrate.db")

    # Server
    host: str = "0.0.0.0"
    port: int = 8000

    # Authentication
    token_expiry_days: int = 30

    # CORS (comma-separated extra origins, in addition to localhost defaults)
    cors_origins: str = ""

    # Reviews need this much accumulated playtime (minutes) on the game
    required_play_minutes: int = 60

    # Catalog pagination
    page_size: int = 10

    model_config = {
        "env_prefix": "PLAYRATE_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


# Singleton instance
settings = Settings()
