"""Map calendar dates onto the sweeping schedule's weekday and week-of-month fields"""
import math
from datetime import date
from typing import Dict, Optional, Union

# Weekday codes as they appear in the schedule data (note the 4-letter "Tues")
WEEKDAY_CODES: Dict[str, str] = {
    "monday": "Mon",
    "tuesday": "Tues",
    "wednesday": "Wed",
    "thursday": "Thu",
    "friday": "Fri",
    "saturday": "Sat",
    "sunday": "Sun",
}

# date.weekday() index -> full weekday name
_WEEKDAY_NAMES = (
    "monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday",
)

DateLike = Union[date, str]


def parse_local_date(value: DateLike) -> date:
    """
    Parse a YYYY-MM-DD string as a local calendar date.

    Built from its components so no timezone conversion can shift the day.
    A date (or datetime) passes through as its calendar date.
    """
    if isinstance(value, date):
        return date(value.year, value.month, value.day)
    year, month, day = (int(part) for part in str(value).strip().split("-"))
    return date(year, month, day)


def weekday_code_for_name(day_name: str) -> Optional[str]:
    """'Tuesday' -> 'Tues'. None for an unknown name."""
    return WEEKDAY_CODES.get(day_name.strip().lower())


def weekday_label(value: DateLike) -> str:
    return WEEKDAY_CODES[_WEEKDAY_NAMES[parse_local_date(value).weekday()]]


def week_of_month(value: DateLike) -> int:
    """Day-of-month bucket: days 1-7 -> 1, 8-14 -> 2, ..., 29-31 -> 5"""
    return math.ceil(parse_local_date(value).day / 7)
