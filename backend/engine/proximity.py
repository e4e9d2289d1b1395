"""
Proximity search over schedule segments.

Distances are planar Euclidean distances in raw longitude/latitude degrees,
measured from the query point to the nearest vertex of each segment's line.
There is no geodesic correction: at San Francisco's latitude one degree of
longitude is ~88 km and one of latitude ~111 km, which is close enough for
"within a block or two" lookups.
"""
import logging
import math
from typing import List, Optional, Sequence

from shapely.geometry import MultiPoint, box
from shapely.strtree import STRtree

from .models import Coordinate, MatchedSegment, ScheduleSegment

logger = logging.getLogger(__name__)


def vertex_distance(segment: ScheduleSegment, point: Coordinate) -> Optional[float]:
    """Minimum planar distance from point to any vertex, or None without geometry"""
    if not segment.coordinates:
        return None
    target_lng, target_lat = point
    return min(
        math.sqrt((lng - target_lng) ** 2 + (lat - target_lat) ** 2)
        for lng, lat in segment.coordinates
    )


def _rank(
    candidates: Sequence[ScheduleSegment],
    point: Coordinate,
    radius_degrees: float,
    limit: Optional[int]
) -> List[MatchedSegment]:
    matches = []
    for segment in candidates:
        distance = vertex_distance(segment, point)
        if distance is not None and distance <= radius_degrees:
            matches.append(MatchedSegment.plain(segment, distance=distance))

    matches.sort(key=lambda m: m.distance)
    if limit is not None:
        matches = matches[:limit]
    return matches


def find_nearby(
    segments: Sequence[ScheduleSegment],
    point: Coordinate,
    radius_degrees: float = 0.001,
    limit: Optional[int] = 10
) -> List[MatchedSegment]:
    """
    Segments with a vertex within radius_degrees of point, closest first.

    Segments without coordinates are skipped. limit=None returns every match.
    """
    return _rank(segments, point, radius_degrees, limit)


class SpatialIndex:
    """
    STRtree over segment vertices for repeated lookups against the same data.

    The tree only narrows the candidate set to segments whose bounding box
    touches the search square; ranking uses the same vertex rule as
    find_nearby, so results are identical.

    Building the tree costs more than one linear scan, so it is meant for
    long-lived callers that query the same segments many times; one-shot
    lookups such as the CLI use find_nearby directly.
    """

    def __init__(self, segments: Sequence[ScheduleSegment]):
        self.segments = [s for s in segments if s.coordinates]
        self.tree = STRtree([MultiPoint(list(s.coordinates)) for s in self.segments])
        skipped = len(segments) - len(self.segments)
        if skipped:
            logger.debug(f"Spatial index skipped {skipped} segments without geometry")

    def __len__(self) -> int:
        return len(self.segments)

    def find_nearby(
        self,
        point: Coordinate,
        radius_degrees: float = 0.001,
        limit: Optional[int] = 10
    ) -> List[MatchedSegment]:
        if not self.segments:
            return []
        lng, lat = point
        search_box = box(lng - radius_degrees, lat - radius_degrees,
                         lng + radius_degrees, lat + radius_degrees)
        # Keep original input order so ties sort the same way as the linear scan
        hits = sorted(int(i) for i in self.tree.query(search_box))
        return _rank([self.segments[i] for i in hits], point, radius_degrees, limit)
