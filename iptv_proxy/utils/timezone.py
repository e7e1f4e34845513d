"""
Date and Time utilities

This module handles all date/time conversions used by the pipeline: parsing the
remote API's ISO8601 timestamps, building the API query window, and rendering
XMLTV schedule times.
"""
from datetime import datetime, timedelta, timezone
import logging


logger = logging.getLogger(__name__)

API_TIME_FORMAT = "%Y-%m-%d %H:%M:%S.000%z"
XMLTV_TIME_FORMAT = "%Y%m%d%H%M%S %z"


class DateFormatError(ValueError):
    """Raised when date format is invalid"""
    pass


def _normalize_iso8601_string(date_str: str) -> str:
    """Normalize ISO8601 string by replacing 'Z' with '+00:00'

    Args:
        date_str: ISO8601 datetime string

    Returns:
        Normalized string with explicit timezone offset
    """
    return date_str.replace('Z', '+00:00') if date_str.endswith('Z') else date_str


def parse_iso8601_to_utc(date_str: str) -> datetime:
    """
    Parse ISO8601 date string and convert to UTC datetime

    This is the single source of truth for date parsing across the application.

    Args:
        date_str: ISO8601 datetime string (e.g., '2025-10-09T00:00:00Z' or '2025-10-09T00:00:00.000+01:00')

    Returns:
        Timezone-aware datetime in UTC

    Raises:
        DateFormatError: If the date string format is invalid
    """
    try:
        normalized = _normalize_iso8601_string(date_str)
        dt = datetime.fromisoformat(normalized)
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)
    except (ValueError, AttributeError, TypeError) as e:
        raise DateFormatError(f"Invalid ISO8601 datetime format: '{date_str}'") from e


def calculate_query_window(now: datetime, hours: int) -> tuple[str, str]:
    """
    Calculate the start/stop query parameters for the channel API

    Both bounds are truncated to the hour, matching what the API caches on.

    Args:
        now: Timezone-aware reference time
        hours: Look-ahead window in hours

    Returns:
        Tuple of (start, stop) formatted as 'YYYY-MM-DD HH:00:00.000+0000'
    """
    start = now.replace(minute=0, second=0, microsecond=0)
    stop = start + timedelta(hours=hours)
    return start.strftime(API_TIME_FORMAT), stop.strftime(API_TIME_FORMAT)


def format_xmltv_time(dt: datetime) -> str:
    """Render a datetime in XMLTV form, e.g. '20080715003000 +0000'"""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.strftime(XMLTV_TIME_FORMAT)
