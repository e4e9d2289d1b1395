"""Tests for the query orchestrator"""
import pytest
from datetime import date, datetime

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

from conftest import build_segment
from engine.models import SimilarityGroup, StatusGroup
from engine.proximity import SpatialIndex
from engine.schedule_query import ScheduleQuery, run_query, search_at_datetime, today_schedule

MONDAY_WEEK_2 = date(2025, 8, 11)
HERE = (-122.4194, 37.7749)


def _market_blocks():
    return [
        build_segment(id="1", limits="A-B", coordinates=((-122.4194, 37.7749), (-122.4190, 37.7752))),
        build_segment(id="2", limits="B-C", coordinates=((-122.4189, 37.7753), (-122.4185, 37.7756))),
    ]


class TestTodaySchedule:
    """Sweeping that runs today"""

    def test_groups_nearby_blocks(self):
        groups = today_schedule(_market_blocks(), point=HERE, today=MONDAY_WEEK_2)
        assert len(groups) == 1
        assert isinstance(groups[0], SimilarityGroup)
        assert groups[0].display_name == "Market St (2 blocks)"
        assert groups[0].distance == pytest.approx(0.0)

    def test_other_days_excluded(self):
        segments = _market_blocks() + [build_segment(id="tue", week_day="Tues", limits="C-D")]
        groups = today_schedule(segments, point=HERE, today=MONDAY_WEEK_2)
        assert groups[0].count == 2

    def test_other_weeks_excluded(self):
        assert today_schedule(_market_blocks(), point=HERE, today=date(2025, 8, 4)) == []

    def test_outside_tight_radius(self):
        far = (-122.4300, 37.7749)
        assert today_schedule(_market_blocks(), point=far, today=MONDAY_WEEK_2) == []

    def test_street_name_first(self):
        segments = _market_blocks() + [
            build_segment(id="v", corridor="Valencia St", limits="15th-16th", coordinates=((-122.4216, 37.7648),)),
        ]
        groups = today_schedule(segments, point=HERE, street_name="valencia street", today=MONDAY_WEEK_2)
        assert [g.segment.corridor for g in groups] == ["Valencia St"]
        assert groups[0].distance is None

    def test_street_name_miss_falls_back_to_proximity(self):
        groups = today_schedule(_market_blocks(), point=HERE, street_name="Lombard St", today=MONDAY_WEEK_2)
        assert groups[0].display_name == "Market St (2 blocks)"

    def test_street_name_without_point(self):
        segments = [build_segment(coordinates=None)]
        groups = today_schedule(segments, street_name="Market Street", today=MONDAY_WEEK_2)
        assert len(groups) == 1

    def test_no_point_no_street(self):
        segments = [
            build_segment(id=str(i), corridor=f"Street {i:02d}", coordinates=None) for i in range(30)
        ]
        groups = today_schedule(segments, today=MONDAY_WEEK_2)
        assert len(groups) == 20

    def test_cap_applies_before_grouping(self):
        segments = [
            build_segment(id=f"m{i}", limits=f"Block {i}", coordinates=((HERE[0] + i * 0.00001, HERE[1]),))
            for i in range(25)
        ]
        groups = today_schedule(segments, point=HERE, today=MONDAY_WEEK_2)
        # proximity keeps the closest 10
        assert groups[0].count == 10


class TestSearchAtDateTime:
    """Explicit date/hour search"""

    def test_scenario_active(self):
        groups = search_at_datetime(_market_blocks(), HERE, None, MONDAY_WEEK_2, 9)
        assert len(groups) == 2
        assert all(isinstance(g, StatusGroup) for g in groups)
        assert all(g.is_active for g in groups)

    def test_scenario_after_window(self):
        groups = search_at_datetime(_market_blocks(), HERE, None, "2025-08-11", 11)
        assert [g.is_active for g in groups] == [False, False]

    def test_merges_block_sides(self):
        segments = [
            build_segment(id="n", block_side="North"),
            build_segment(id="s", block_side="South"),
        ]
        groups = search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9)
        assert len(groups) == 1
        assert groups[0].display_name == "Market St (Larkin St - Polk St) [N side/S side]"

    def test_active_sorted_first(self):
        segments = [
            build_segment(id="later", limits="A-B", from_hour=12, to_hour=14),
            build_segment(id="now", limits="B-C", coordinates=((HERE[0] + 0.002, HERE[1]),)),
        ]
        groups = search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9)
        assert [g.segment.id for g in groups] == ["now", "later"]

    def test_wide_radius(self):
        segments = [build_segment(coordinates=((HERE[0] + 0.007, HERE[1]),))]
        assert len(search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9)) == 1
        far = [build_segment(coordinates=((HERE[0] + 0.009, HERE[1]),))]
        assert search_at_datetime(far, HERE, None, MONDAY_WEEK_2, 9) == []

    def test_full_set_not_prefiltered(self):
        segments = [build_segment(week_day="Wed")]
        groups = search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9)
        assert len(groups) == 1
        assert groups[0].is_active is False

    def test_union_dedupes_by_id_street_first(self):
        segments = _market_blocks() + [
            build_segment(id="v", corridor="Valencia St", limits="X-Y", coordinates=((-122.4216, 37.7648),)),
        ]
        groups = search_at_datetime(segments, HERE, "Market St", MONDAY_WEEK_2, 9)
        ids = [m.segment.id for g in groups for m in g.segments]
        assert sorted(ids) == ["1", "2"]
        # street matches win duplicates, so they carry no distance
        assert all(g.distance is None for g in groups)

    def test_street_and_nearby_union(self):
        segments = _market_blocks() + [
            build_segment(id="v", corridor="Valencia St", limits="X-Y", coordinates=((-122.4216, 37.7648),)),
        ]
        groups = search_at_datetime(segments, HERE, "Valencia St", MONDAY_WEEK_2, 9)
        ids = sorted(m.segment.id for g in groups for m in g.segments)
        assert ids == ["1", "2", "v"]

    def test_no_point(self):
        groups = search_at_datetime(_market_blocks(), None, "Market St", MONDAY_WEEK_2, 9)
        assert len(groups) == 2

    def test_nothing_found(self):
        assert search_at_datetime(_market_blocks(), None, None, MONDAY_WEEK_2, 9) == []

    def test_index_gives_same_result(self):
        segments = _market_blocks()
        plain = search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9)
        indexed = search_at_datetime(segments, HERE, None, MONDAY_WEEK_2, 9, index=SpatialIndex(segments))
        assert [g.display_name for g in indexed] == [g.display_name for g in plain]


class TestRunQuery:
    """Mode dispatch"""

    def setup_method(self):
        self.now = datetime(2025, 8, 11, 9, 30)

    def test_untimed_query_is_today(self):
        groups = run_query(_market_blocks(), ScheduleQuery(coordinates=HERE), now=self.now)
        assert isinstance(groups[0], SimilarityGroup)

    def test_timed_query(self):
        query = ScheduleQuery(coordinates=HERE, target_date="2025-08-11", target_hour=11)
        groups = run_query(_market_blocks(), query, now=self.now)
        assert all(isinstance(g, StatusGroup) for g in groups)
        assert not any(g.is_active for g in groups)

    def test_missing_date_uses_today(self):
        query = ScheduleQuery(coordinates=HERE, target_hour=9)
        groups = run_query(_market_blocks(), query, now=self.now)
        assert all(g.is_active for g in groups)

    def test_missing_hour_uses_current_hour(self):
        query = ScheduleQuery(coordinates=HERE, target_date=date(2025, 8, 11))
        groups = run_query(_market_blocks(), query, now=datetime(2025, 8, 11, 10, 0))
        assert not any(g.is_active for g in groups)

    def test_index_reused_across_queries(self):
        segments = _market_blocks()
        index = SpatialIndex(segments)
        for hour in (7, 9, 11):
            query = ScheduleQuery(coordinates=HERE, target_date=MONDAY_WEEK_2, target_hour=hour)
            indexed = run_query(segments, query, now=self.now, index=index)
            plain = run_query(segments, query, now=self.now)
            assert [g.to_dict() for g in indexed] == [g.to_dict() for g in plain]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
