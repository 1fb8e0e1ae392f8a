"""
Application configuration using Pydantic settings.
"""

import logging

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Ledger"
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./data/ledger.sqlite"

    # Listing
    default_list_limit: int = 50
    max_list_limit: int = 500
    max_bulk_transaction_ids: int = 100

    # Validation policy
    reject_past_start_dates: bool = False

    # Seed data
    demo_user_id: str = "a22002ba-8d08-41d4-8c07-62784123244a"
    demo_user_email: str = "demo@example.com"

    # CORS
    frontend_url: str = "http://localhost:5173"

    model_config = SettingsConfigDict(
        env_prefix="LEDGER_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )


def configure_logging(level: str) -> None:
    """Apply the configured log level to the root logger."""
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Global settings instance
settings = Settings()
