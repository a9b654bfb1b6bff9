"""Display formatting helpers."""

from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP

CURRENCY_SYMBOL = "R$"
RUNWAY_DISPLAY_CAP = Decimal("12")
HIDDEN_VALUE = "••••••"


def format_currency(value: Decimal) -> str:
    """Format an amount in Brazilian style, e.g. ``R$ 1.234,56``."""
    cents = Decimal(value).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    text = f"{abs(cents):,.2f}"
    # 1,234.56 -> 1.234,56
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    sign = "-" if cents < 0 else ""
    return f"{sign}{CURRENCY_SYMBOL} {text}"


def format_percentage(value: Decimal) -> str:
    """Format a percentage with one decimal, e.g. ``10.0%``."""
    return f"{Decimal(value):.1f}%"


def format_date(moment: datetime) -> str:
    """Format a timestamp as day/month."""
    return moment.strftime("%d/%m")


def format_runway(months: Decimal) -> str:
    """Format runway months, capping the display at ``12+``."""
    if months > RUNWAY_DISPLAY_CAP:
        return "12+"
    return f"{months:.1f}"
