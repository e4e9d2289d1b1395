"""Presentation helpers for schedule hours and distances"""
import math

# Metres per degree, used only for the rough "~N meters away" hint
METERS_PER_DEGREE = 111320


def format_hour(hour: float) -> str:
    """0 -> '12:00 AM', 9 -> '9:00 AM', 12 -> '12:00 PM', 13.5 -> '1:00 PM'"""
    hour = math.floor(hour)
    if hour < 12:
        return "12:00 AM" if hour == 0 else f"{hour}:00 AM"
    return "12:00 PM" if hour == 12 else f"{hour - 12}:00 PM"


def format_window(from_hour: float, to_hour: float) -> str:
    return f"{format_hour(from_hour)} - {format_hour(to_hour)}"


def approx_meters(distance_degrees: float) -> int:
    return round(distance_degrees * METERS_PER_DEGREE)
