"""Query orchestrator combining calendar, matching, classification and grouping"""
import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence, Union

from config import (
    TODAY_RADIUS_DEGREES,
    TODAY_NEARBY_LIMIT,
    TODAY_MAX_CANDIDATES,
    SEARCH_RADIUS_DEGREES,
    SEARCH_NEARBY_LIMIT,
)
from .activity import classify
from .calendar import DateLike, parse_local_date, week_of_month, weekday_label
from .grouping import group_by_status, group_similar_segments, sort_status_groups
from .models import Coordinate, MatchedSegment, ScheduleSegment, SimilarityGroup, StatusGroup
from .proximity import SpatialIndex, find_nearby
from .street_names import match_by_street_name

logger = logging.getLogger(__name__)


@dataclass
class ScheduleQuery:
    """A lookup request as produced by the search form or geocoder"""
    coordinates: Optional[Coordinate] = None
    street_name: Optional[str] = None
    target_date: Optional[DateLike] = None
    target_hour: Optional[float] = None

    @property
    def is_timed(self) -> bool:
        return self.target_date is not None or self.target_hour is not None


def _nearby(
    segments: Sequence[ScheduleSegment],
    point: Coordinate,
    radius: float,
    limit: Optional[int],
    index: Optional[SpatialIndex]
) -> List[MatchedSegment]:
    if index is not None:
        return index.find_nearby(point, radius, limit)
    return find_nearby(segments, point, radius, limit)


def today_schedule(
    segments: Sequence[ScheduleSegment],
    point: Optional[Coordinate] = None,
    street_name: Optional[str] = None,
    today: Optional[date] = None
) -> List[SimilarityGroup]:
    """
    Sweeping that runs today near a point or on a street.

    A street name is tried first; an empty match falls back to proximity.
    With neither, the first rules running today are returned.
    """
    today = parse_local_date(today or date.today())
    day_code = weekday_label(today)
    week = week_of_month(today)
    todays = [s for s in segments if s.week_day == day_code and s.runs_in_week(week)]
    logger.debug(f"{len(todays)} rules run on {day_code} of week {week}")

    candidates: List[MatchedSegment] = []
    if street_name and street_name.strip():
        candidates = [MatchedSegment.plain(s) for s in match_by_street_name(todays, street_name)]
        if not candidates:
            logger.info(f"No street match for '{street_name}', falling back to proximity")

    if not candidates:
        if point is not None:
            candidates = find_nearby(todays, point, TODAY_RADIUS_DEGREES, TODAY_NEARBY_LIMIT)
        else:
            candidates = [MatchedSegment.plain(s) for s in todays]

    return group_similar_segments(candidates[:TODAY_MAX_CANDIDATES])


def search_at_datetime(
    segments: Sequence[ScheduleSegment],
    point: Optional[Coordinate],
    street_name: Optional[str],
    target_date: DateLike,
    target_hour: float,
    index: Optional[SpatialIndex] = None
) -> List[StatusGroup]:
    """
    Every rule near a point and/or on a street, flagged active or not at
    target_date/target_hour, grouped by block and sorted active-first.
    """
    target_day = parse_local_date(target_date)

    candidates: Dict[str, MatchedSegment] = {}
    if street_name and street_name.strip():
        for segment in match_by_street_name(segments, street_name):
            candidates.setdefault(segment.id, MatchedSegment.plain(segment))
    street_count = len(candidates)

    if point is not None:
        for match in _nearby(segments, point, SEARCH_RADIUS_DEGREES, SEARCH_NEARBY_LIMIT, index):
            candidates.setdefault(match.segment.id, match)

    logger.info(
        f"Search {target_day.isoformat()} {target_hour}: {street_count} street matches, "
        f"{len(candidates) - street_count} nearby"
    )

    classified = classify(candidates.values(), target_day, target_hour)
    return sort_status_groups(group_by_status(classified))


def run_query(
    segments: Sequence[ScheduleSegment],
    query: ScheduleQuery,
    now: Optional[datetime] = None,
    index: Optional[SpatialIndex] = None
) -> List[Union[SimilarityGroup, StatusGroup]]:
    """Dispatch a query to the today or date/time search shape"""
    now = now or datetime.now()
    if not query.is_timed:
        return today_schedule(segments, query.coordinates, query.street_name, today=now.date())

    target_date = query.target_date if query.target_date is not None else now.date()
    target_hour = query.target_hour if query.target_hour is not None else now.hour
    return search_at_datetime(
        segments, query.coordinates, query.street_name, target_date, target_hour, index=index
    )
