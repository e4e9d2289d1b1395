"""Validate transformed street sweeping data for quality and completeness"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Dict, List, Sequence
from datetime import datetime

from engine.calendar import WEEKDAY_CODES
from engine.models import ScheduleSegment

logger = logging.getLogger(__name__)


@dataclass
class ValidationResult:
    """Result of data validation"""
    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Dict[str, Any] = field(default_factory=dict)

    def add_error(self, message: str):
        self.errors.append(message)
        self.is_valid = False

    def add_warning(self, message: str):
        self.warnings.append(message)


class ScheduleValidator:
    """
    Validates street sweeping segments before they are published.

    Odd rows (inverted hours, no weeks) are reported but passed through
    unchanged; only a broken dataset as a whole is rejected.
    """

    KNOWN_WEEKDAY_CODES = frozenset(WEEKDAY_CODES.values())

    # SF bounding box
    SF_BOUNDS = {
        "min_lat": 37.6398,
        "max_lat": 37.9298,
        "min_lon": -123.1738,
        "max_lon": -122.2818,
    }

    # The full city schedule has ~37k rows
    MIN_SEGMENTS = 10000

    # Share of rows with unknown weekday codes that fails the dataset
    MAX_BAD_WEEKDAY_RATIO = 0.1

    def validate_segments(self, segments: Sequence[ScheduleSegment]) -> ValidationResult:
        result = ValidationResult(is_valid=True)

        if not segments:
            result.add_error("No street sweeping segments")
            return result

        if len(segments) < self.MIN_SEGMENTS:
            result.add_warning(
                f"Low segment count: {len(segments)} (expected >= {self.MIN_SEGMENTS})"
            )

        bad_weekdays: Counter = Counter()
        bad_hours = 0
        inverted_hours = 0
        no_weeks = 0
        outside_bounds = 0

        for segment in segments:
            if segment.week_day not in self.KNOWN_WEEKDAY_CODES:
                bad_weekdays[segment.week_day] += 1

            if not (0 <= segment.from_hour <= 23 and 0 <= segment.to_hour <= 23):
                bad_hours += 1
            elif segment.from_hour >= segment.to_hour:
                inverted_hours += 1

            if not any(segment.runs_in_week(w) for w in range(1, 6)):
                no_weeks += 1

            if segment.coordinates:
                lon, lat = segment.coordinates[0]
                if not self._is_in_sf_bounds(lat, lon):
                    outside_bounds += 1

        duplicates = [
            seg_id for seg_id, count in Counter(s.id for s in segments).items()
            if seg_id and count > 1
        ]

        unknown_total = sum(bad_weekdays.values())
        if unknown_total:
            codes = ", ".join(sorted(bad_weekdays))
            result.add_warning(f"{unknown_total} segments with unknown weekday codes: {codes}")
            if unknown_total > len(segments) * self.MAX_BAD_WEEKDAY_RATIO:
                result.add_error(f"Too many segments with unknown weekday codes ({unknown_total})")

        if bad_hours:
            result.add_warning(f"{bad_hours} segments with hours outside 0-23")
        if inverted_hours:
            result.add_warning(f"{inverted_hours} segments with from_hour >= to_hour")
        if no_weeks:
            result.add_warning(f"{no_weeks} segments not scheduled in any week")
        if outside_bounds:
            result.add_warning(f"{outside_bounds} segments outside SF bounds")
        if duplicates:
            result.add_warning(f"{len(duplicates)} duplicate segment IDs (e.g. {duplicates[0]})")

        result.stats = {
            "segments_count": len(segments),
            "corridors_count": len({s.corridor for s in segments}),
            "validation_time": datetime.utcnow().isoformat(),
        }

        logger.info(
            f"Validation complete: valid={result.is_valid}, "
            f"errors={len(result.errors)}, warnings={len(result.warnings)}"
        )

        return result

    def _is_in_sf_bounds(self, lat: float, lon: float) -> bool:
        """Check if coordinate is within San Francisco bounds"""
        return (
            self.SF_BOUNDS["min_lat"] <= lat <= self.SF_BOUNDS["max_lat"] and
            self.SF_BOUNDS["min_lon"] <= lon <= self.SF_BOUNDS["max_lon"]
        )

    def validate_incremental(
        self,
        new_segments: Sequence[ScheduleSegment],
        existing_segments: Sequence[ScheduleSegment]
    ) -> ValidationResult:
        """
        Compare a fresh download with the previous snapshot to catch
        truncated or duplicated exports.
        """
        result = ValidationResult(is_valid=True)

        existing_count = len(existing_segments)
        if existing_count > 0:
            change = abs(len(new_segments) - existing_count) / existing_count
            if change > 0.2:  # More than 20% change
                result.add_warning(
                    f"Significant segment count change: {existing_count} -> {len(new_segments)}"
                )

        return result
