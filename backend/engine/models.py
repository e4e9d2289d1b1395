"""Value objects shared by the street cleaning query engine"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from shapely.geometry import LineString, Point, mapping

Coordinate = Tuple[float, float]  # (lng, lat)


@dataclass(frozen=True)
class ScheduleSegment:
    """One street sweeping rule for a single block side"""
    id: str
    cnn: str
    corridor: str
    limits: str
    block_side: str
    week_day: str  # Mon, Tues, Wed, Thu, Fri, Sat, Sun
    from_hour: int
    to_hour: int
    week1: bool = False
    week2: bool = False
    week3: bool = False
    week4: bool = False
    week5: bool = False
    holidays: bool = False
    coordinates: Optional[Tuple[Coordinate, ...]] = None
    schedule_description: str = ""

    @property
    def full_name(self) -> str:
        return f"{self.corridor} ({self.limits})"

    @property
    def has_geometry(self) -> bool:
        return bool(self.coordinates)

    def runs_in_week(self, week: int) -> bool:
        """Whether the rule applies in the given week-of-month occurrence (1-5)"""
        flags = (self.week1, self.week2, self.week3, self.week4, self.week5)
        if 1 <= week <= len(flags):
            return flags[week - 1]
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "cnn": self.cnn,
            "corridor": self.corridor,
            "limits": self.limits,
            "blockSide": self.block_side,
            "fullName": self.full_name,
            "scheduleDescription": self.schedule_description,
            "weekDay": self.week_day,
            "fromHour": self.from_hour,
            "toHour": self.to_hour,
            "weeks": [w for w in range(1, 6) if self.runs_in_week(w)],
            "holidays": self.holidays,
            "coordinates": [list(c) for c in self.coordinates] if self.coordinates else None,
        }


class MatchKind(Enum):
    PLAIN = "plain"
    CLASSIFIED = "classified"


@dataclass(frozen=True)
class MatchedSegment:
    """
    A segment returned by a matcher.

    PLAIN matches carry no activity status. CLASSIFIED matches always carry
    is_active. Either kind carries distance only when found by proximity.
    """
    segment: ScheduleSegment
    kind: MatchKind = MatchKind.PLAIN
    distance: Optional[float] = None
    is_active: Optional[bool] = None

    @classmethod
    def plain(cls, segment: ScheduleSegment, distance: Optional[float] = None) -> "MatchedSegment":
        return cls(segment=segment, kind=MatchKind.PLAIN, distance=distance)

    @classmethod
    def classified(
        cls,
        segment: ScheduleSegment,
        is_active: bool,
        distance: Optional[float] = None
    ) -> "MatchedSegment":
        return cls(segment=segment, kind=MatchKind.CLASSIFIED, distance=distance, is_active=is_active)

    @property
    def is_classified(self) -> bool:
        return self.kind is MatchKind.CLASSIFIED


def _segment_feature(segment: ScheduleSegment, properties: Dict[str, Any]) -> Dict[str, Any]:
    """GeoJSON Feature for a segment's line (null geometry when absent)"""
    geometry = None
    if segment.coordinates:
        if len(segment.coordinates) == 1:
            geometry = mapping(Point(segment.coordinates[0]))
        else:
            geometry = mapping(LineString(segment.coordinates))
    return {"type": "Feature", "geometry": geometry, "properties": properties}


@dataclass(frozen=True)
class SimilarityGroup:
    """Blocks of one corridor swept in the same time window"""
    representative: MatchedSegment
    count: int
    all_limits: Tuple[str, ...]

    @property
    def segment(self) -> ScheduleSegment:
        return self.representative.segment

    @property
    def distance(self) -> Optional[float]:
        return self.representative.distance

    @property
    def display_name(self) -> str:
        if self.count > 1:
            return f"{self.segment.corridor} ({self.count} blocks)"
        return self.segment.full_name

    @property
    def display_limits(self) -> str:
        if self.count > 1:
            more = "; +more" if len(self.all_limits) > 2 else ""
            return f"Multiple blocks: {'; '.join(self.all_limits[:2])}{more}"
        return self.segment.limits

    def to_dict(self) -> Dict[str, Any]:
        data = self.segment.to_dict()
        data.update({
            "fullName": self.display_name,
            "limits": self.display_limits,
            "count": self.count,
            "allLimits": list(self.all_limits),
            "distance": self.distance,
        })
        return data

    def to_feature(self) -> Dict[str, Any]:
        return _segment_feature(self.segment, {
            "name": self.display_name,
            "limits": self.display_limits,
            "fromHour": self.segment.from_hour,
            "toHour": self.segment.to_hour,
            "count": self.count,
        })


# Fixed labels for the source's BlockSide values
SIDE_LABELS: Dict[str, str] = {
    "North": "N side",
    "NorthEast": "NE side",
    "East": "E side",
    "SouthEast": "SE side",
    "South": "S side",
    "SouthWest": "SW side",
    "West": "W side",
    "NorthWest": "NW side",
}


def side_label(block_side: str) -> str:
    return SIDE_LABELS.get(block_side, block_side)


@dataclass(frozen=True)
class StatusGroup:
    """Block sides of one corridor/limits pair sharing the same active status"""
    representative: MatchedSegment
    is_active: bool
    count: int
    sides: Tuple[str, ...]
    segments: Tuple[MatchedSegment, ...] = field(default_factory=tuple)

    @property
    def segment(self) -> ScheduleSegment:
        return self.representative.segment

    @property
    def distance(self) -> Optional[float]:
        return self.representative.distance

    @property
    def display_name(self) -> str:
        name = f"{self.segment.corridor} ({self.segment.limits})"
        if len(self.sides) > 1:
            name += f" [{'/'.join(side_label(s) for s in self.sides)}]"
        return name

    def to_dict(self) -> Dict[str, Any]:
        data = self.segment.to_dict()
        data.update({
            "fullName": self.display_name,
            "isActive": self.is_active,
            "count": self.count,
            "sides": list(self.sides),
            "segmentIds": [m.segment.id for m in self.segments],
            "distance": self.distance,
        })
        return data

    def to_feature(self) -> Dict[str, Any]:
        return _segment_feature(self.segment, {
            "name": self.display_name,
            "isActive": self.is_active,
            "fromHour": self.segment.from_hour,
            "toHour": self.segment.to_hour,
            "count": self.count,
        })


def feature_collection(groups: List[Any]) -> Dict[str, Any]:
    """Wrap grouped results as a GeoJSON FeatureCollection for map layers"""
    return {
        "type": "FeatureCollection",
        "features": [g.to_feature() for g in groups],
    }
