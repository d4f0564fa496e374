"""
Settings — environment-driven configuration.

Every field can be overridden with a TOYBOX_-prefixed environment variable,
e.g. TOYBOX_DATABASE_URL=sqlite+aiosqlite:///shop.db
"""

from __future__ import annotations

import logging
from decimal import Decimal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="TOYBOX_", env_file=".env", extra="ignore")

    database_url: str = "sqlite+aiosqlite:///toybox.db"
    sql_echo: bool = False

    # Pricing
    vat_rate: Decimal = Decimal("0.20")
    currency: str = "GBP"

    # Image uploads (checked before handing bytes to object storage)
    max_image_bytes: int = 5 * 1024 * 1024

    # Inventory compare-and-swap attempts per line before giving up
    stock_cas_attempts: int = 5

    log_level: str = "INFO"


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)-7s %(name)s: %(message)s",
    )
    if settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)


__all__ = ("Settings", "configure_logging")
