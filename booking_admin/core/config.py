# booking_admin/core/config.py
import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Load .env file only if not in CI
if not os.getenv("CI"):
    env_path = Path(__file__).resolve().parents[2] / ".env"
    logger.debug(f"[CONFIG] Looking for .env at: {env_path}")
    load_dotenv(env_path)


PRODUCTION_ENVIRONMENTS = {"prod", "production"}


class Settings(BaseSettings):
    """Runtime settings for the admin integrity backend."""

    environment: str = Field(default="development", alias="ENVIRONMENT")
    database_url: str = Field(
        default="sqlite:///./booking_admin.db",
        alias="DATABASE_URL",
        description="SQLAlchemy URL for the blocked-date and audit tables",
    )
    database_echo: bool = Field(default=False, alias="DATABASE_ECHO")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    audit_page_size: int = Field(
        default=20,
        alias="AUDIT_PAGE_SIZE",
        description="Default page size for the audit log viewer",
    )
    audit_max_page_size: int = Field(default=200, alias="AUDIT_MAX_PAGE_SIZE")
    blocked_range_max_days: int = Field(
        default=366,
        alias="BLOCKED_RANGE_MAX_DAYS",
        description="Longest inclusive range accepted by a single block-range request",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    @field_validator("database_url")
    @classmethod
    def _normalize_database_url(cls, value: str) -> str:
        # Hosted providers still hand out the legacy scheme
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql://", 1)
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        normalized = (value or "INFO").strip().upper()
        if normalized not in logging.getLevelNamesMapping():
            logger.warning("Invalid LOG_LEVEL=%s; defaulting to INFO", value)
            return "INFO"
        return normalized

    @field_validator("audit_page_size", "audit_max_page_size", "blocked_range_max_days")
    @classmethod
    def _require_positive(cls, value: int) -> int:
        if value < 1:
            raise ValueError("must be a positive integer")
        return value

    @property
    def is_production(self) -> bool:
        return self.environment.strip().lower() in PRODUCTION_ENVIRONMENTS

    def get_database_url(self) -> str:
        return self.database_url


settings = Settings()
