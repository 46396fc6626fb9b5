"""
Conversion between wall-clock in/out times and the stored ``H.mm`` duration.

``H.mm`` is not a decimal number of hours: the two digits after the dot are
minutes (00-59), so ``"9.30"`` is nine and a half hours and ``"9.75"`` is
invalid.  Internally durations are ``timedelta`` values; the string form only
exists at the storage and API boundary.
"""
import re
from datetime import time, timedelta
from typing import Optional

from worklog.core.exceptions import ValidationError

CLOCK_PATTERN = re.compile(r"^([01]?[0-9]|2[0-3]):([0-5][0-9])$")
WORKING_HOUR_PATTERN = re.compile(r"^(\d+)\.(\d{2})$")

ZERO_WORKING_HOUR = "0.00"
MINUTES_PER_DAY = 24 * 60


def parse_clock(value: str) -> time:
    """Parse an ``HH:mm`` wall-clock string."""
    match = CLOCK_PATTERN.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid time '{value}', expected HH:mm")
    return time(int(match.group(1)), int(match.group(2)))


def minutes_between(in_time: str, out_time: str) -> int:
    """Minutes from in_time to out_time, wrapping past midnight for overnight shifts."""
    start = parse_clock(in_time)
    end = parse_clock(out_time)
    diff = (end.hour * 60 + end.minute) - (start.hour * 60 + start.minute)
    if diff < 0:
        diff += MINUTES_PER_DAY
    return diff


def format_working_hour(duration: timedelta) -> str:
    total_minutes = int(duration.total_seconds() // 60)
    if total_minutes < 0:
        raise ValidationError("Working hour cannot be negative")
    return f"{total_minutes // 60}.{total_minutes % 60:02d}"


def compute_working_hour(in_time: str, out_time: str) -> str:
    """
    compute_working_hour("09:00", "17:30") -> "8.30"
    compute_working_hour("22:00", "06:00") -> "8.00"
    """
    return format_working_hour(timedelta(minutes=minutes_between(in_time, out_time)))


def parse_working_hour(value: Optional[str]) -> timedelta:
    """Parse a stored ``H.mm`` value; empty values count as zero."""
    if value is None or str(value).strip() == "":
        return timedelta(0)
    match = WORKING_HOUR_PATTERN.match(str(value).strip())
    if not match:
        raise ValidationError(f"Invalid working hour '{value}', expected H.mm")
    hours, minutes = int(match.group(1)), int(match.group(2))
    if minutes >= 60:
        raise ValidationError(f"Invalid working hour '{value}', minutes must be below 60")
    return timedelta(hours=hours, minutes=minutes)


def to_decimal_hours(duration: timedelta) -> float:
    return round(duration.total_seconds() / 3600, 2)
