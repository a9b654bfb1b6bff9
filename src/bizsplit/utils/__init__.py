"""Utility functions for bizsplit."""

from bizsplit.utils.date_parser import parse_occurred_at
from bizsplit.utils.amount_parser import parse_amount, parse_currency_input
from bizsplit.utils.formatting import (
    format_currency,
    format_date,
    format_percentage,
    format_runway,
)

__all__ = [
    "parse_occurred_at",
    "parse_amount",
    "parse_currency_input",
    "format_currency",
    "format_date",
    "format_percentage",
    "format_runway",
]
