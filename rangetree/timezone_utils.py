"""
Timezone utilities for datetime ranges.

Naive and aware datetimes cannot be compared, so ranges over time are
normalised to UTC before they go into a RangeTree and converted back to
local time for display.
"""

from datetime import date, datetime, time as dt_time
import time as _time
from typing import Union
import pytz

from .range import Range


# Default timezone - can be overridden by config
_local_timezone_name: str = "UTC"


def set_timezone(timezone_name: str):
    """Set the local timezone used for naive datetimes."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured local timezone.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback: try system timezone name
        try:
            return pytz.timezone(_time.tzname[0])
        except pytz.UnknownTimeZoneError:
            # Last resort: fixed offset of the current system zone
            if _time.localtime().tm_isdst:
                offset_seconds = -_time.altzone
            else:
                offset_seconds = -_time.timezone
            return pytz.FixedOffset(offset_seconds // 60)


def to_utc_datetime(value: Union[datetime, date]) -> datetime:
    """
    Convert a local datetime (or date) to UTC.

    Args:
        value: A datetime, or a date which is read as local midnight.
            Naive datetimes are assumed to be in the local timezone.

    Returns:
        A timezone-aware datetime in UTC.
    """
    if not isinstance(value, datetime):
        value = datetime.combine(value, dt_time.min)
    if value.tzinfo is None:
        local_dt = get_local_timezone().localize(value)
        return local_dt.astimezone(pytz.UTC)
    return value.astimezone(pytz.UTC)


def to_local_datetime(dt: datetime) -> datetime:
    """
    Convert an aware datetime to the local timezone.

    If input has no tzinfo, returns it unchanged.
    """
    if dt.tzinfo is not None:
        return dt.astimezone(get_local_timezone())
    return dt


def utc_range(start: Union[datetime, date], end: Union[datetime, date]) -> Range[datetime]:
    """Build a Range whose endpoints are both aware UTC datetimes."""
    return Range(to_utc_datetime(start), to_utc_datetime(end))


def local_range(range_: Range[datetime]) -> Range[datetime]:
    """Convert both endpoints of a UTC range to the local timezone."""
    return Range(to_local_datetime(range_.start), to_local_datetime(range_.end))
