"""
Merge matched segments into display groups.

Two policies:
- similarity: one entry per corridor and sweeping window, used for the
  "what's swept today" list
- status: one entry per corridor/limits/active-status, used for a search at
  an explicit date and hour, collecting the block sides it covers

Both keep first-seen order. The first member of a group is its
representative for every field that is not part of the key.
"""
import math
from typing import Dict, List, Sequence, Tuple

from .models import MatchedSegment, SimilarityGroup, StatusGroup

SimilarityKey = Tuple[str, int, int]
StatusKey = Tuple[str, str, bool]


def group_similar_segments(matches: Sequence[MatchedSegment]) -> List[SimilarityGroup]:
    """Group by (corridor, from_hour, to_hour)"""
    order: List[SimilarityKey] = []
    seeds: Dict[SimilarityKey, MatchedSegment] = {}
    limits: Dict[SimilarityKey, List[str]] = {}

    for match in matches:
        segment = match.segment
        key = (segment.corridor, segment.from_hour, segment.to_hour)
        if key not in seeds:
            order.append(key)
            seeds[key] = match
            limits[key] = []
        limits[key].append(segment.limits)

    return [
        SimilarityGroup(
            representative=seeds[key],
            count=len(limits[key]),
            all_limits=tuple(limits[key]),
        )
        for key in order
    ]


def group_by_status(matches: Sequence[MatchedSegment]) -> List[StatusGroup]:
    """
    Group classified matches by (corridor, limits, is_active).

    Unclassified matches are treated as inactive.
    """
    order: List[StatusKey] = []
    members: Dict[StatusKey, List[MatchedSegment]] = {}
    sides: Dict[StatusKey, List[str]] = {}

    for match in matches:
        segment = match.segment
        active = bool(match.is_active) if match.is_classified else False
        key = (segment.corridor, segment.limits, active)
        if key not in members:
            order.append(key)
            members[key] = []
            sides[key] = []
        members[key].append(match)
        if segment.block_side not in sides[key]:
            sides[key].append(segment.block_side)

    return [
        StatusGroup(
            representative=members[key][0],
            is_active=key[2],
            count=len(members[key]),
            sides=tuple(sides[key]),
            segments=tuple(members[key]),
        )
        for key in order
    ]


def sort_status_groups(groups: Sequence[StatusGroup]) -> List[StatusGroup]:
    """Active groups first, then nearest first; groups without a distance keep their order last"""
    return sorted(
        groups,
        key=lambda g: (
            not g.is_active,
            g.distance if g.distance is not None else math.inf,
        ),
    )
