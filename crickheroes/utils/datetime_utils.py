"""
Datetime utility functions.
"""

from datetime import datetime, timedelta
import pytz


def utcnow() -> datetime:
    """
    Get current UTC datetime using pytz.UTC.

    Returns:
        Current UTC datetime with pytz timezone information
    """
    return datetime.now(pytz.UTC)


def utc_iso_in(minutes: int = 0) -> str:
    """
    ISO timestamp for a point `minutes` from now (negative values are in the past).

    Always carries microseconds so stored timestamps compare correctly as strings.
    """
    return (utcnow() + timedelta(minutes=minutes)).isoformat(timespec="microseconds")
