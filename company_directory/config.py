"""Configuration settings for the company directory."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml
from dotenv import load_dotenv

from .currency import EXCHANGE_RATES

load_dotenv()

DEFAULT_DATABASE_URL = "sqlite:///./companies.db"


@dataclass
class Settings:
    """Unified settings with YAML override support."""

    # Currency amounts are typed in (from environment)
    default_currency: str = field(
        default_factory=lambda: os.environ.get("COMPANY_DIRECTORY_CURRENCY", "USD")
    )

    database_url: str = field(
        default_factory=lambda: os.environ.get("DATABASE_URL", DEFAULT_DATABASE_URL)
    )

    # Listing
    page_size: int = 12
    max_page_size: int = 100
    search_limit: int = 10  # Quick search results

    # Units per USD, merged over the built-in table
    exchange_rates: dict = field(default_factory=dict)

    def rates(self) -> dict:
        """Built-in exchange rates with configured overrides applied."""
        merged = dict(EXCHANGE_RATES)
        merged.update(self.exchange_rates or {})
        return merged


def load_config(path: Optional[str] = None) -> Settings:
    """
    Load settings from YAML file with environment overrides.

    Priority: environment > config file > defaults

    Args:
        path: Path to YAML config file (optional)

    Returns:
        Settings instance with merged configuration
    """
    settings = Settings()

    if path:
        config_path = Path(path)
        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            for key, value in data.items():
                if hasattr(settings, key):
                    setattr(settings, key, value)

    # Environment overrides (always win)
    if os.environ.get("COMPANY_DIRECTORY_CURRENCY"):
        settings.default_currency = os.environ["COMPANY_DIRECTORY_CURRENCY"]
    if os.environ.get("DATABASE_URL"):
        settings.database_url = os.environ["DATABASE_URL"]

    settings.default_currency = settings.default_currency.upper()

    return settings
