"""Browse filters for narrowing the full schedule by day, week and hours"""
from typing import Iterable, List, Optional, Sequence

from .calendar import weekday_code_for_name
from .models import ScheduleSegment


def filter_by_day(segments: Sequence[ScheduleSegment], day_name: Optional[str]) -> List[ScheduleSegment]:
    """Keep rules for a weekday given by full name, e.g. 'tuesday'"""
    if not day_name:
        return list(segments)
    code = weekday_code_for_name(day_name)
    if code is None:
        return []
    return [s for s in segments if s.week_day == code]


def filter_by_weeks(segments: Sequence[ScheduleSegment], weeks: Optional[Iterable[int]]) -> List[ScheduleSegment]:
    """Keep rules that run in any of the given week-of-month occurrences"""
    weeks = list(weeks or [])
    if not weeks:
        return list(segments)
    return [s for s in segments if any(s.runs_in_week(w) for w in weeks)]


def filter_by_time(
    segments: Sequence[ScheduleSegment],
    start_hour: Optional[int],
    end_hour: Optional[int]
) -> List[ScheduleSegment]:
    """Keep rules whose whole window fits inside [start_hour, end_hour]"""
    if start_hour is None or end_hour is None:
        return list(segments)
    return [s for s in segments if s.from_hour >= start_hour and s.to_hour <= end_hour]


def apply_filters(
    segments: Sequence[ScheduleSegment],
    day_name: Optional[str] = None,
    weeks: Optional[Iterable[int]] = None,
    start_hour: Optional[int] = None,
    end_hour: Optional[int] = None
) -> List[ScheduleSegment]:
    filtered = filter_by_day(segments, day_name)
    filtered = filter_by_weeks(filtered, weeks)
    if start_hour is not None or end_hour is not None:
        filtered = filter_by_time(
            filtered,
            start_hour if start_hour is not None else 0,
            end_hour if end_hour is not None else 23,
        )
    return filtered
