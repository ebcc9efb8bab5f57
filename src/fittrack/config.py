"""Application settings."""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Default data directory (repo root / data)
DATA_DIR = Path(__file__).parent.parent.parent / "data"


class Settings(BaseSettings):
    # Single local user when no identity is supplied
    default_user_id: str = "local"

    # Storage
    data_dir: Path = DATA_DIR
    db_name: str = "fittrack.db"

    # Store hard limit is 500 operations per batch; cascades stay below it
    store_max_batch_operations: int = 500
    cascade_batch_ceiling: int = 450

    # Analytics
    analytics_cache_ttl_seconds: int = 300

    # Logging
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="FITTRACK_", env_file=".env", extra="ignore"
    )


settings = Settings()
