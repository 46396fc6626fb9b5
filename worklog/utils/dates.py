import calendar
import re
from datetime import date, datetime, timedelta
from typing import Tuple

from worklog.core.exceptions import ValidationError

MONTH_PATTERN = re.compile(r"^(\d{4})-(\d{2})$")


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime((value or "").strip(), "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date '{value}', expected YYYY-MM-DD")


def parse_month(value: str) -> Tuple[int, int]:
    """Parse YYYY-MM into (year, month)."""
    match = MONTH_PATTERN.match((value or "").strip())
    if not match:
        raise ValidationError(f"Invalid month '{value}', expected YYYY-MM")
    year, month = int(match.group(1)), int(match.group(2))
    if not 1 <= month <= 12 or year < 1:
        raise ValidationError(f"Invalid month '{value}', expected YYYY-MM")
    return year, month


def month_of(day: date) -> str:
    return day.strftime("%Y-%m")


def month_bounds(month: str) -> Tuple[date, date]:
    """First and last calendar day of a YYYY-MM month."""
    year, month_num = parse_month(month)
    first = date(year, month_num, 1)
    last = date(year, month_num, calendar.monthrange(year, month_num)[1])
    return first, last


def days_in_month(month: str) -> int:
    year, month_num = parse_month(month)
    return calendar.monthrange(year, month_num)[1]


def count_weekday(month: str, weekday: int = calendar.SUNDAY) -> int:
    first, last = month_bounds(month)
    count = 0
    day = first
    while day <= last:
        if day.weekday() == weekday:
            count += 1
        day += timedelta(days=1)
    return count
