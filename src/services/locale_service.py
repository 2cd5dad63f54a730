"""Locale service for currency and date formatting on dashboards.

Uses babel. Configuration:
    LOCALE env var (default: en_IN) - determines currency and number formatting

Example:
    >>> from src.services.locale_service import format_amount
    >>> format_amount(10000)
    '₹10,000.00'
"""

import logging
import os
from datetime import date
from decimal import Decimal

from babel import Locale, UnknownLocaleError
from babel.dates import format_date as babel_format_date
from babel.numbers import (
    format_currency as babel_format_currency,
)
from babel.numbers import (
    format_decimal as babel_format_decimal,
)
from babel.numbers import (
    get_territory_currencies,
)

logger = logging.getLogger(__name__)

# Default locale if LOCALE env var is invalid or missing
DEFAULT_LOCALE = "en_IN"
DEFAULT_CURRENCY = "INR"


def _get_locale() -> str:
    """Get locale from environment with validation and fallback."""
    locale_str = os.getenv("LOCALE", DEFAULT_LOCALE)
    try:
        Locale.parse(locale_str)
        return locale_str
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Invalid LOCALE '{locale_str}': {e}. Falling back to '{DEFAULT_LOCALE}'")
        return DEFAULT_LOCALE


def _get_currency_from_locale(locale_str: str) -> str:
    """Derive currency code from locale territory (e.g. en_IN -> INR)."""
    try:
        territory = Locale.parse(locale_str).territory
        if territory:
            currencies = get_territory_currencies(territory)
            if currencies:
                return currencies[0]
    except (UnknownLocaleError, ValueError) as e:
        logger.warning(f"Could not derive currency from locale '{locale_str}': {e}")

    return DEFAULT_CURRENCY


# Module-level constants (computed once at import)
LOCALE = _get_locale()
CURRENCY = _get_currency_from_locale(LOCALE)


def format_amount(amount: float | Decimal, include_symbol: bool = True) -> str:
    """Format monetary amount according to locale.

    Example:
        >>> format_amount(Decimal("150000"))
        '₹1,50,000.00'
        >>> format_amount(1234.5, include_symbol=False)
        '1,234.5'
    """
    if include_symbol:
        return babel_format_currency(Decimal(str(amount)), CURRENCY, locale=LOCALE)
    return babel_format_decimal(Decimal(str(amount)), locale=LOCALE)


def format_month(year: int, month: int) -> str:
    """Format a billing month (e.g. 'March 2024')."""
    return babel_format_date(date(year, month, 1), format="MMMM yyyy", locale=LOCALE)


__all__ = [
    "LOCALE",
    "CURRENCY",
    "format_amount",
    "format_month",
]
