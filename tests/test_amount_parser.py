"""Tests for amount parsing."""

from decimal import Decimal

import pytest

from bizsplit.domain.errors import ValidationError
from bizsplit.utils.amount_parser import parse_amount, parse_currency_input


class TestParseCurrencyInput:
    """Tests for digits-as-cents input parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("R$ 1.234,56", "1234.56"),
            ("1500", "15.00"),
            ("7", "0.07"),
            ("12.5", "1.25"),
            ("-300", "3.00"),
            ("000", "0"),
        ],
    )
    def test_digits_are_cents(self, text, expected):
        assert parse_currency_input(text) == Decimal(expected)

    @pytest.mark.parametrize("text", ["", "R$", "abc", None])
    def test_no_digits(self, text):
        with pytest.raises(ValidationError):
            parse_currency_input(text)


class TestParseAmount:
    """Tests for plain decimal amount parsing."""

    @pytest.mark.parametrize(
        "text,expected",
        [
            ("123.45", "123.45"),
            ("R$123.45", "123.45"),
            ("R$ 1,234.56", "1234.56"),
            ("$10", "10"),
            ("-50", "-50"),
            ("(75.10)", "-75.10"),
            ("  8000  ", "8000"),
        ],
    )
    def test_valid(self, text, expected):
        assert parse_amount(text) == Decimal(expected)

    @pytest.mark.parametrize("text", ["", "   ", "abc", "12..3", "NaN", "Infinity"])
    def test_invalid(self, text):
        with pytest.raises(ValidationError):
            parse_amount(text)

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError):
            parse_amount("nope")
