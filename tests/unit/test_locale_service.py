"""Tests for locale-aware amount and month formatting."""

from decimal import Decimal
from unittest.mock import patch

from src.services import locale_service


def test_default_locale_is_indian_rupee() -> None:
    with patch.dict("os.environ", {}, clear=True):
        assert locale_service._get_locale() == "en_IN"
    assert locale_service._get_currency_from_locale("en_IN") == "INR"


def test_invalid_locale_falls_back() -> None:
    with patch.dict("os.environ", {"LOCALE": "xx_NOPE"}):
        assert locale_service._get_locale() == "en_IN"


def test_currency_from_other_locale() -> None:
    assert locale_service._get_currency_from_locale("de_DE") == "EUR"


def test_format_amount_uses_locale_grouping() -> None:
    with patch.object(locale_service, "LOCALE", "en_IN"), patch.object(locale_service, "CURRENCY", "INR"):
        assert locale_service.format_amount(Decimal("150000")) == "₹1,50,000.00"
        assert locale_service.format_amount(Decimal("150000"), include_symbol=False) == "1,50,000"


def test_format_month() -> None:
    with patch.object(locale_service, "LOCALE", "en_IN"):
        assert locale_service.format_month(2024, 3) == "March 2024"
