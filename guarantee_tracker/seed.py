#!/usr/bin/env python3
"""Seed reference data

Inserts the default display currencies when the currency table is empty.

Run with: python -m guarantee_tracker.seed
"""

from typing import List

from .currency import CurrencyInfo, CurrencyManager
from .logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_CURRENCIES = [
    ("TRY", "Turkish Lira", "₺"),
    ("USD", "US Dollar", "$"),
    ("EUR", "Euro", "€"),
    ("IQD", "Iraqi Dinar", "IQD"),
    ("GBP", "British Pound", "£"),
]


def seed_default_currencies(manager: CurrencyManager) -> List[CurrencyInfo]:
    """Create the default currencies unless any currency already exists"""
    if manager.count() > 0:
        return []

    created = [
        manager.create(code=code, name=name, symbol=symbol)
        for code, name, symbol in DEFAULT_CURRENCIES
    ]
    logger.info("Seeded %d default currencies", len(created))
    return created


def main():
    from .config import get_config
    from .logging_config import setup_logging
    from .system import get_tracker_system

    config = get_config()
    setup_logging(config.log_level, config.log_format, config.log_file)
    created = seed_default_currencies(get_tracker_system().currencies)
    print(f"Seeded {len(created)} currencies")


if __name__ == "__main__":
    main()
