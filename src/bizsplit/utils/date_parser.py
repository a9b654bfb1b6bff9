"""Date parsing utilities."""

from datetime import datetime, timedelta, UTC
from dateutil import parser as date_parser


def parse_occurred_at(date_str: str) -> datetime:
    """Parse the moment a ledger entry happened.

    Supports:
    - "now", "today" (current moment)
    - "yesterday" (same time one day ago)
    - Absolute dates and timestamps: "2024-01-15", "2024-01-15T10:30", etc.

    Naive results are taken as UTC.

    Args:
        date_str: Date string

    Returns:
        Timezone-aware datetime

    Raises:
        ValueError: If date string cannot be parsed
    """
    text = date_str.strip().lower()
    now = datetime.now(UTC)

    relative = {
        "now": now,
        "today": now,
        "yesterday": now - timedelta(days=1),
    }
    if text in relative:
        return relative[text]

    try:
        parsed = date_parser.parse(date_str.strip())
    except (ValueError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
