"""Decide whether a sweeping rule is in force at a given date and hour"""
import math
from typing import Iterable, List

from .calendar import DateLike, parse_local_date, week_of_month, weekday_label
from .models import MatchedSegment, ScheduleSegment


def is_active(segment: ScheduleSegment, target_date: DateLike, target_hour: float) -> bool:
    """
    True when the date falls on the rule's weekday and week-of-month and the
    floored hour lies in [from_hour, to_hour).

    The holidays flag is not consulted.
    """
    day = parse_local_date(target_date)
    if weekday_label(day) != segment.week_day:
        return False
    if not segment.runs_in_week(week_of_month(day)):
        return False
    hour = math.floor(target_hour)
    return segment.from_hour <= hour < segment.to_hour


def classify(
    matches: Iterable[MatchedSegment],
    target_date: DateLike,
    target_hour: float
) -> List[MatchedSegment]:
    """Classified copies of matches, keeping any distance already attached"""
    day = parse_local_date(target_date)
    return [
        MatchedSegment.classified(
            m.segment,
            is_active=is_active(m.segment, day, target_hour),
            distance=m.distance,
        )
        for m in matches
    ]


def is_active_now(segment: ScheduleSegment, now_hour: float) -> bool:
    """Hour-only check for rules already known to run today"""
    hour = math.floor(now_hour)
    return segment.from_hour <= hour < segment.to_hour
