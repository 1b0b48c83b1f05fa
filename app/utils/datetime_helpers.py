"""
Date/time formatting helpers for API responses.
"""

from datetime import datetime, timezone
from typing import Optional, Union
from zoneinfo import ZoneInfo

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"


def format_to_local_time(value: Union[datetime, str, None], tz_name: str) -> Optional[str]:
    """
    Render a UTC timestamp in the given timezone as "YYYY-MM-DD HH:MM:SS".

    Naive datetimes and ISO strings without an offset are treated as UTC.

    Args:
        value: Firestore timestamp, datetime or ISO-8601 string
        tz_name: IANA timezone name (e.g. "Asia/Colombo")

    Returns:
        Formatted string, or None if value is empty
    """
    if value is None or value == "":
        return None

    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))

    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)

    return value.astimezone(ZoneInfo(tz_name)).strftime(DISPLAY_FORMAT)
