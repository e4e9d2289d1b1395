"""Transform raw street sweeping rows into ScheduleSegment objects"""
import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple

from shapely import wkt
from shapely.errors import ShapelyError
from shapely.geometry import LineString, MultiLineString, shape

from engine.models import ScheduleSegment

logger = logging.getLogger(__name__)

TRUE_FLAGS = {"1", "true", "t", "y", "yes"}


def load_csv(path: Path) -> List[Dict[str, str]]:
    """Read a DataSF CSV export into row dicts"""
    with open(path, newline="", encoding="utf-8-sig") as f:
        rows = list(csv.DictReader(f))
    logger.info(f"Read {len(rows)} rows from {Path(path).name}")
    return rows


class SweepingDataTransformer:
    """
    Converts rows from either source into immutable schedule segments.

    CSV exports use PascalCase headers and WKT in 'Line'; the SODA JSON API
    uses lowercase keys and a GeoJSON geometry in 'line'.
    """

    def __init__(self):
        self.stats = {
            "segments": 0,
            "dropped_geometry": 0,
            "errors": 0
        }

    def transform_records(self, rows: Iterable[Dict[str, Any]]) -> List[ScheduleSegment]:
        rows = list(rows)
        logger.info(f"Transforming {len(rows)} street sweeping rows")
        segments = []

        for index, row in enumerate(rows):
            raw_line = self._field(row, "Line")
            coordinates = self._parse_line(raw_line)
            if coordinates is None:
                logger.warning(f"Dropping row {index}: unusable geometry {str(raw_line)[:60]!r}")
                self.stats["dropped_geometry"] += 1
                continue

            try:
                segments.append(self._build_segment(row, coordinates))
            except (ValueError, TypeError) as e:
                logger.error(f"Error transforming row {index}: {e}")
                self.stats["errors"] += 1

        self.stats["segments"] = len(segments)
        logger.info(
            f"Transformed {len(segments)} segments "
            f"({self.stats['dropped_geometry']} without geometry, {self.stats['errors']} errors)"
        )
        return segments

    def _build_segment(self, row: Dict[str, Any], coordinates: Tuple[Tuple[float, float], ...]) -> ScheduleSegment:
        return ScheduleSegment(
            id=str(self._field(row, "BlockSweepID") or ""),
            cnn=str(self._field(row, "CNN") or ""),
            corridor=str(self._field(row, "Corridor") or "").strip(),
            limits=str(self._field(row, "Limits") or "").strip(),
            block_side=str(self._field(row, "BlockSide") or "").strip(),
            week_day=str(self._field(row, "WeekDay") or "").strip(),
            from_hour=self._parse_hour(self._field(row, "FromHour")),
            to_hour=self._parse_hour(self._field(row, "ToHour")),
            week1=self._parse_flag(self._field(row, "Week1")),
            week2=self._parse_flag(self._field(row, "Week2")),
            week3=self._parse_flag(self._field(row, "Week3")),
            week4=self._parse_flag(self._field(row, "Week4")),
            week5=self._parse_flag(self._field(row, "Week5")),
            holidays=self._parse_flag(self._field(row, "Holidays")),
            coordinates=coordinates,
            schedule_description=str(self._field(row, "FullName") or "").strip(),
        )

    def _field(self, row: Dict[str, Any], name: str) -> Any:
        """Look up a column by its CSV header or its API (lowercase) key"""
        value = row.get(name)
        if value is None:
            value = row.get(name.lower())
        return value

    def _parse_line(self, raw: Any) -> Optional[Tuple[Tuple[float, float], ...]]:
        """WKT string or GeoJSON dict -> ((lng, lat), ...), None if unusable"""
        if not raw:
            return None
        try:
            geom = wkt.loads(raw) if isinstance(raw, str) else shape(raw)
        except (ShapelyError, ValueError, TypeError, KeyError, AttributeError) as e:
            logger.debug(f"Geometry parse failed: {e}")
            return None

        if isinstance(geom, LineString):
            coords = list(geom.coords)
        elif isinstance(geom, MultiLineString):
            coords = [c for line in geom.geoms for c in line.coords]
        else:
            return None

        if not coords:
            return None
        return tuple((float(c[0]), float(c[1])) for c in coords)

    def _parse_hour(self, value: Any) -> int:
        if value is None or str(value).strip() == "":
            raise ValueError("missing hour")
        return int(float(value))

    def _parse_flag(self, value: Any) -> bool:
        if isinstance(value, bool):
            return value
        if value is None:
            return False
        text = str(value).strip().lower()
        try:
            return float(text) != 0
        except ValueError:
            return text in TRUE_FLAGS

    def to_record(self, segment: ScheduleSegment) -> Dict[str, Any]:
        """Segment -> API-shaped row, readable again by transform_records"""
        record = {
            "blocksweepid": segment.id,
            "cnn": segment.cnn,
            "corridor": segment.corridor,
            "limits": segment.limits,
            "blockside": segment.block_side,
            "fullname": segment.schedule_description,
            "weekday": segment.week_day,
            "fromhour": segment.from_hour,
            "tohour": segment.to_hour,
            "holidays": int(segment.holidays),
            "line": {"type": "LineString", "coordinates": [list(c) for c in segment.coordinates or ()]},
        }
        for week in range(1, 6):
            record[f"week{week}"] = int(segment.runs_in_week(week))
        return record

    def get_stats(self) -> Dict[str, int]:
        return self.stats.copy()
