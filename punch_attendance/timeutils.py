"""
Time and calendar parsing helpers shared by the pipeline stages.

Every helper fails open: unparsable input yields ``None`` (or is passed
through untouched) instead of raising.
"""

import warnings
from datetime import date, datetime, time
from functools import lru_cache
from typing import Iterable, List, Optional, Union

import pandas as pd

DateLike = Union[str, date, datetime, None]


def parse_time(time_str) -> Optional[int]:
    """Parse an "HH:MM" string into minutes since midnight."""
    if not time_str or not isinstance(time_str, str):
        return None
    parts = time_str.strip().split(':')
    if len(parts) < 2:
        return None
    hours, minutes = parts[0].strip(), parts[1].strip()
    if not (hours.isdigit() and minutes.isdigit()):
        return None
    return int(hours) * 60 + int(minutes)


def format_time_ampm(time_str) -> str:
    """
    Format "HH:MM" as a 12-hour clock string ("09:40 AM").
    Empty values become "", unparsable values are returned as-is.
    """
    if time_str is None:
        return ""
    text = str(time_str).strip()
    minutes = parse_time(text)
    if minutes is None or minutes >= 24 * 60:
        return text
    return time(minutes // 60, minutes % 60).strftime("%I:%M %p")


@lru_cache(maxsize=4096)
def _parse_date_text(text: str) -> Optional[date]:
    with warnings.catch_warnings():
        warnings.simplefilter("ignore")
        try:
            parsed = pd.to_datetime(text, errors='coerce')
        except (ValueError, TypeError, OverflowError):
            return None
    if parsed is None or pd.isna(parsed):
        return None
    return parsed.date()


def parse_date(value: DateLike) -> Optional[date]:
    """Parse a free-form date value into a calendar date (no timezone shift)."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    return _parse_date_text(text)


def date_key(value: DateLike) -> Optional[str]:
    """Local calendar key "YYYY-MM-DD" for a date value."""
    parsed = parse_date(value)
    return parsed.strftime("%Y-%m-%d") if parsed else None


def sort_dates(values: Iterable[DateLike]) -> List:
    """
    Chronological sort by calendar value. Unparsable values keep their input
    order and follow the dated ones.
    """
    values = list(values)
    dated = [value for value in values if parse_date(value) is not None]
    undated = [value for value in values if parse_date(value) is None]
    return sorted(dated, key=parse_date) + undated
