"""
Parsing and formatting of the published date shown in the post settings menu.
"""

from datetime import datetime
from typing import Optional, Tuple

from dateutil import parser as dateutil_parser

DISPLAY_DATE_FORMAT = "%d %b %y @ %H:%M"
DISPLAY_DATE_HINT = "DD MMM YY @ HH:mm (e.g. 6 Dec 14 @ 15:00)"

# (strptime format, has two digit year, has year)
PARSE_DATE_FORMATS: Tuple[Tuple[str, bool, bool], ...] = (
    ("%d %b %y @ %H:%M", True, True),
    ("%d %b %y %H:%M", True, True),
    ("%d %b %Y @ %H:%M", False, True),
    ("%d %b %Y %H:%M", False, True),
    ("%d/%m/%y @ %H:%M", True, True),
    ("%d/%m/%y %H:%M", True, True),
    ("%d/%m/%Y @ %H:%M", False, True),
    ("%d/%m/%Y %H:%M", False, True),
    ("%d-%m-%y @ %H:%M", True, True),
    ("%d-%m-%y %H:%M", True, True),
    ("%d-%m-%Y @ %H:%M", False, True),
    ("%d-%m-%Y %H:%M", False, True),
    ("%Y-%m-%d @ %H:%M", False, True),
    ("%Y-%m-%d %H:%M", False, True),
    ("%d %b @ %H:%M", False, False),
    ("%d %b %H:%M", False, False),
)


def parse_date_string(value: Optional[str], now: Optional[datetime] = None) -> Optional[datetime]:
    """
    Parse a user typed date.

    Args:
        value: Text such as "6 Dec 14 @ 15:00"
        now: Reference time used to fill in a missing year

    Returns:
        A naive local datetime, or None when the text is not a valid calendar date
    """
    if not value or not value.strip():
        return None

    text = " ".join(value.split())
    now = now or datetime.now()

    for fmt, two_digit_year, has_year in PARSE_DATE_FORMATS:
        candidate = text if has_year else f"{text} {now.year}"
        try:
            parsed = datetime.strptime(candidate, fmt if has_year else f"{fmt} %Y")
        except ValueError:
            continue

        if two_digit_year:
            # Two digit years always land in this century
            parsed = parsed.replace(year=2000 + parsed.year % 100)
        return parsed

    try:
        parsed = dateutil_parser.isoparse(text)
    except (ValueError, OverflowError):
        return None

    return to_local_naive(parsed)


def to_local_naive(value: datetime) -> datetime:
    """Drop tzinfo after converting an aware datetime to local time."""
    if value.tzinfo is not None:
        return value.astimezone().replace(tzinfo=None)
    return value


def format_date(value: Optional[datetime]) -> str:
    """Format a datetime the way the settings menu displays it."""
    if value is None:
        return ""
    return to_local_naive(value).strftime(DISPLAY_DATE_FORMAT)


def hours_until(value: datetime, now: Optional[datetime] = None) -> int:
    """Whole hours from now until value, truncated toward zero. Negative for past dates."""
    now = now or datetime.now()
    delta = to_local_naive(value) - now
    return int(delta.total_seconds() / 3600)


def is_same_minute(first: Optional[datetime], second: Optional[datetime]) -> bool:
    """Compare two dates at the resolution the display format shows."""
    if first is None or second is None:
        return False
    return (to_local_naive(first).replace(second=0, microsecond=0)
            == to_local_naive(second).replace(second=0, microsecond=0))
