"""Date parsing and formatting utilities."""

from __future__ import annotations
import logging
from datetime import datetime, date
from typing import Optional
import pandas as pd
from dateutil import parser as date_parser


logger = logging.getLogger(__name__)


def parse_date_any(x) -> Optional[datetime]:
    """Parse a reporting/assessment date from the formats the APIs return."""
    if x is None:
        return None

    if isinstance(x, datetime):
        return x.replace(tzinfo=None)
    elif isinstance(x, date):
        return datetime.combine(x, datetime.min.time())

    if isinstance(x, str):
        x = x.strip()
        if not x:
            return None

        try:
            # ISO date first (fastest)
            if len(x) == 10 and x.count('-') == 2:
                return datetime.fromisoformat(x)

            # dateutil handles timestamps with offsets ("2024-01-01T10:00:00.000Z")
            return date_parser.parse(x, fuzzy=False).replace(tzinfo=None)
        except (ValueError, OverflowError):
            pass
    elif isinstance(x, float) and pd.isna(x):
        return None

    logger.warning(f"Could not parse date: {x}")
    return None


def to_iso_date(x) -> Optional[str]:
    """Normalize any parseable date to 'YYYY-MM-DD', or None."""
    parsed = parse_date_any(x)
    if parsed is None:
        return None
    return parsed.date().isoformat()


def is_monday(x) -> bool:
    """Check whether a date falls on a Monday (start of a reporting week)."""
    parsed = parse_date_any(x)
    return parsed is not None and parsed.weekday() == 0


def week_key(x) -> Optional[str]:
    """ISO year-week key ('2024-W01') used to reject duplicate weekly statuses."""
    parsed = parse_date_any(x)
    if parsed is None:
        return None
    iso_year, iso_week, _ = parsed.isocalendar()
    return f"{iso_year}-W{iso_week:02d}"


def format_date_safe(date_obj, format_str: str = '%Y-%m-%d') -> str:
    """Safely format a date-like value to string."""
    parsed = parse_date_any(date_obj)
    if parsed is None:
        return "N/A"
    return parsed.strftime(format_str)
