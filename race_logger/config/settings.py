"""Environment-driven settings for the race logger.

Every value can be set through the environment or a local ``.env`` file.
"""

import os
from pathlib import Path

from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Local development database, next to the package
DEV_DATABASE_PATH = Path(__file__).resolve().parent.parent.parent / "race_logger.db"


def default_database_url() -> str:
    """DATABASE_URL from the environment, else the local SQLite file.

    SQLite is for a single laptop at the finish line only: referee tablets
    reporting concurrently need PostgreSQL.
    """
    configured = os.getenv("DATABASE_URL", "")
    if not configured:
        url = f"sqlite:///{DEV_DATABASE_PATH}"
        logger.warning(f"DATABASE_URL not set, using local SQLite database {url} (development only)")
        return url

    if configured.startswith("sqlite") and os.getenv("RACE_LOGGER_ENV", "").lower() == "production":
        logger.error("SQLite configured with RACE_LOGGER_ENV=production; point DATABASE_URL at PostgreSQL")
    return configured


class Settings(BaseSettings):
    database_url: str = Field(
        default_factory=default_database_url,
        validation_alias="DATABASE_URL",
    )
    redis_url: str = Field(default="redis://localhost:6379/0", validation_alias="REDIS_URL")
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: str | None = Field(default=None, validation_alias="LOG_FILE")
    broadcast_enabled: bool = Field(
        default=False,
        validation_alias="BROADCAST_ENABLED",
        description="Publish change notifications to Redis after repository writes",
    )
    broadcast_channel_prefix: str = Field(
        default="race_logger",
        validation_alias="BROADCAST_CHANNEL_PREFIX",
        description="Prefix for Redis pub/sub channel names",
    )
    magic_link_expiration_hours: int = Field(
        default=24,
        validation_alias="MAGIC_LINK_EXPIRATION_HOURS",
        description="Lifetime of newly issued magic links",
    )
    location_order_step: int = Field(
        default=10,
        validation_alias="LOCATION_ORDER_STEP",
        description="Gap between display_order values when appending locations",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Unknown level names fall back to INFO rather than failing start-up."""
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            logger.warning(f"LOG_LEVEL {value!r} is not one of {', '.join(LOG_LEVELS)}, using INFO")
            return "INFO"
        return level

    @field_validator("magic_link_expiration_hours", "location_order_step")
    @classmethod
    def validate_positive(cls, value: int) -> int:
        """Reject zero or negative durations and steps."""
        if value <= 0:
            raise ValueError("must be a positive integer")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()
