"""Application configuration from environment variables."""

import logging
from typing import Optional

from pydantic import ConfigDict, Field
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Pydantic automatically loads values from:
    1. OS environment variables (at instantiation time)
    2. .env file (if present)
    """

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",  # Allow extra fields in .env file
    )

    # Database
    database_url: str = Field(
        default="sqlite:///./rentdesk.db",
        description="SQLAlchemy connection string",
    )
    database_echo: bool = Field(default=False, description="Log SQL queries")

    # Management login (single administrator)
    admin_username: str = Field(default="admin", description="Management login name")
    admin_password: str = Field(default="admin@123", description="Management password")
    cookie_max_age: int = Field(default=86400, description="Role cookie lifetime in seconds")

    # Stripe checkout
    stripe_secret_key: str = Field(default="", description="Stripe API secret key")
    stripe_webhook_secret: str = Field(default="", description="Stripe webhook signing secret")
    payment_currency: str = Field(default="inr", description="ISO currency for checkout")

    # Public address used in redirect and document URLs
    base_url: str = Field(default="http://localhost:8000", description="Public base URL")

    # Document blob store
    storage_dir: str = Field(default="storage/tenant-docs", description="Document directory")
    storage_url_prefix: str = Field(default="/files", description="URL path serving documents")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: str = Field(default="logs/server.log", description="Server log file")

    # API
    api_title: str = Field(default="RentDesk API", description="API title")
    api_version: str = Field(default="0.1.0", description="API version")

    @property
    def storage_public_url(self) -> str:
        return f"{self.base_url.rstrip('/')}{self.storage_url_prefix}"


# Lazy loader to ensure environment is loaded before instantiation
_settings_instance: Optional[Settings] = None


def get_settings() -> Settings:
    """Get or create the settings instance."""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = Settings()
        logger.debug("Loaded settings (database_url=%s)", _settings_instance.database_url)
    return _settings_instance


__all__ = ["Settings", "get_settings"]
