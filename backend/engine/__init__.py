"""In-memory street cleaning query engine"""
from .calendar import weekday_label, week_of_month, parse_local_date
from .models import (
    ScheduleSegment,
    MatchedSegment,
    MatchKind,
    SimilarityGroup,
    StatusGroup,
    feature_collection,
)
from .proximity import find_nearby, SpatialIndex
from .street_names import match_by_street_name
from .activity import is_active
from .grouping import group_similar_segments, group_by_status, sort_status_groups
from .schedule_query import ScheduleQuery, today_schedule, search_at_datetime, run_query

__all__ = [
    "weekday_label",
    "week_of_month",
    "parse_local_date",
    "ScheduleSegment",
    "MatchedSegment",
    "MatchKind",
    "SimilarityGroup",
    "StatusGroup",
    "feature_collection",
    "find_nearby",
    "SpatialIndex",
    "match_by_street_name",
    "is_active",
    "group_similar_segments",
    "group_by_status",
    "sort_status_groups",
    "ScheduleQuery",
    "today_schedule",
    "search_at_datetime",
    "run_query",
]
