"""Tests for display formatters and settings validation."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from reimburse.config import Settings
from reimburse.formatters import format_currency, format_date, format_percentage


class TestFormatCurrency:
    def test_integer(self):
        assert format_currency(82000) == "82,000"

    def test_decimal_whole(self):
        assert format_currency(Decimal("49200.00")) == "49,200"

    def test_fractional(self):
        assert format_currency(Decimal("1366.67")) == "1,366.67"

    def test_small(self):
        assert format_currency(Decimal("750")) == "750"

    def test_none(self):
        assert format_currency(None) == "-"


class TestFormatDate:
    def test_date(self):
        assert format_date(date(2027, 3, 15)) == "15/03/2027"

    def test_none(self):
        assert format_date(None) == "-"


class TestFormatPercentage:
    def test_whole(self):
        assert format_percentage(40) == "40%"

    def test_none(self):
        assert format_percentage(None) == "-"


class TestSettings:
    def test_log_level_normalised(self):
        assert Settings(log_level="info").log_level == "INFO"

    def test_log_level_rejected(self):
        with pytest.raises(ValidationError):
            Settings(log_level="verbose")

    def test_is_production(self):
        assert Settings(environment="production").is_production is True
        assert Settings(environment="development").is_production is False
