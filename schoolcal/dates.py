"""
Date helpers.

Two string formats are in play:
- display format  YYYY-MM-DD  (form fields, saved search, output)
- compact format  YYYYMMDD    (NEIS request parameters and AA_YMD in responses)
"""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Optional, Tuple

DEFAULT_RANGE_DAYS = 14

_SEPARATORS = str.maketrans("", "", "-./")


def format_display_date(date_str: str) -> str:
    """
    Convert 'YYYYMMDD' to 'YYYY-MM-DD'.

    Anything that is not exactly 8 characters long is returned unchanged.
    """
    if len(date_str) != 8:
        return date_str
    return f"{date_str[0:4]}-{date_str[4:6]}-{date_str[6:8]}"


def to_api_date(date_str: str) -> str:
    """
    Convert a display date to the compact NEIS format by dropping separators.
    """
    return date_str.strip().translate(_SEPARATORS)


def default_date_range(today: Optional[date] = None) -> Tuple[str, str]:
    """
    Return (today, today + 14 days) in display format.
    """
    start = today or date.today()
    end = start + timedelta(days=DEFAULT_RANGE_DAYS)
    return start.isoformat(), end.isoformat()


def parse_display_date(text: str) -> str:
    """
    Validate a 'YYYY-MM-DD' string and return it normalized.
    Raises ValueError for invalid dates.
    """
    return datetime.strptime(text.strip(), "%Y-%m-%d").date().isoformat()
