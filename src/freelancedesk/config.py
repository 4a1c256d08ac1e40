"""Environment-based configuration.

Settings are read from environment variables when requested, so tests can
override them with monkeypatch. CLI options take precedence over these.
"""

import logging
import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path

DEFAULT_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


@dataclass(frozen=True)
class Settings:
    """Runtime settings for freelancedesk."""

    db_path: str
    log_level: str
    currency: str
    payment_terms: int
    default_tax_rate: Decimal


def default_db_path() -> str:
    """Return ~/.freelancedesk/freelancedesk.db."""
    return str(Path.home() / ".freelancedesk" / "freelancedesk.db")


def get_settings() -> Settings:
    """Read settings from the environment.

    Environment variables:
        FREELANCEDESK_DB_PATH: SQLite database file
        FREELANCEDESK_LOG_LEVEL: Logging level name (default WARNING)
        FREELANCEDESK_CURRENCY: Currency code for new invoices (default INR)
        FREELANCEDESK_PAYMENT_TERMS: Days until an invoice is due when the
            client has no terms of its own (default 30)
        FREELANCEDESK_TAX_RATE: Tax percent for new invoices (default 0)
    """
    return Settings(
        db_path=os.environ.get("FREELANCEDESK_DB_PATH") or default_db_path(),
        log_level=os.environ.get("FREELANCEDESK_LOG_LEVEL", "WARNING").upper(),
        currency=os.environ.get("FREELANCEDESK_CURRENCY", "INR").upper(),
        payment_terms=int(os.environ.get("FREELANCEDESK_PAYMENT_TERMS", "30")),
        default_tax_rate=Decimal(os.environ.get("FREELANCEDESK_TAX_RATE", "0")),
    )


def configure_logging(level: str) -> None:
    """Configure the root logger once for CLI use."""
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: '{level}'")
    logging.basicConfig(level=numeric_level, format=DEFAULT_LOG_FORMAT)
