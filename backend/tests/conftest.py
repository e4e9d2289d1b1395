"""Shared fixtures for engine and pipeline tests"""
import pytest

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from engine.models import ScheduleSegment


def build_segment(**overrides) -> ScheduleSegment:
    """A Monday 8-10 AM, week 2 rule on Market St unless overridden"""
    fields = {
        "id": "1",
        "cnn": "8753101",
        "corridor": "Market St",
        "limits": "Larkin St - Polk St",
        "block_side": "North",
        "week_day": "Mon",
        "from_hour": 8,
        "to_hour": 10,
        "week2": True,
        "coordinates": ((-122.4194, 37.7749), (-122.4184, 37.7755)),
    }
    fields.update(overrides)
    return ScheduleSegment(**fields)


@pytest.fixture
def make_segment():
    return build_segment
