"""Tests for the refresh pipeline and lookup CLI using local files only"""
import json
import pytest

# Add parent directory to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent))

import lookup
import pipeline
from conftest import build_segment
from engine.models import MatchedSegment
from engine.grouping import group_by_status, group_similar_segments
from test_transformer import CSV_ROW
from transforms import SweepingDataTransformer


def transformer_record(row):
    """CSV row -> API-shaped row as DataSF returns it"""
    transformer = SweepingDataTransformer()
    return transformer.to_record(transformer.transform_records([row])[0])


def _write_csv(path: Path, rows):
    header = ",".join(CSV_ROW.keys())
    lines = [header] + [",".join(f'"{row[k]}"' for k in CSV_ROW) for row in rows]
    path.write_text("\n".join(lines) + "\n", encoding="utf-8")


@pytest.fixture
def local_paths(tmp_path, monkeypatch):
    csv_path = tmp_path / "schedule.csv"
    output_dir = tmp_path / "output"
    output_dir.mkdir()
    monkeypatch.setattr(pipeline, "LOCAL_SCHEDULE_CSV", csv_path)
    monkeypatch.setattr(pipeline, "OUTPUT_DIR", output_dir)
    return csv_path, output_dir


class TestScheduleDataPipeline:
    """Local CSV -> snapshot"""

    @pytest.mark.asyncio
    async def test_run_writes_snapshot(self, local_paths):
        csv_path, output_dir = local_paths
        _write_csv(csv_path, [CSV_ROW, dict(CSV_ROW, BlockSweepID="2", Line="bad")])

        assert await pipeline.run_pipeline(use_local=True)

        latest = pipeline.latest_snapshot_path()
        assert latest.exists()
        records = pipeline.read_snapshot(latest)
        assert [r["blocksweepid"] for r in records] == ["1640782"]

    @pytest.mark.asyncio
    async def test_validation_failure_writes_nothing(self, local_paths):
        csv_path, output_dir = local_paths
        _write_csv(csv_path, [dict(CSV_ROW, Line="bad")])

        assert not await pipeline.run_pipeline(use_local=True)
        assert list(output_dir.iterdir()) == []

    @pytest.mark.asyncio
    async def test_load_segments_prefers_snapshot(self, local_paths):
        csv_path, _ = local_paths
        _write_csv(csv_path, [CSV_ROW])
        assert await pipeline.run_pipeline(use_local=True)

        _write_csv(csv_path, [CSV_ROW, dict(CSV_ROW, BlockSweepID="2")])
        segments = pipeline.load_segments()

        assert [s.id for s in segments] == ["1640782"]

    @pytest.mark.asyncio
    async def test_sample_run_validates_without_writing(self, local_paths, monkeypatch):
        csv_path, output_dir = local_paths
        _write_csv(csv_path, [CSV_ROW])
        requested = []

        class FakeFetcher:
            async def __aenter__(self):
                return self

            async def __aexit__(self, *exc):
                return False

            def get_source_name(self):
                return "fake"

            async def fetch_sample(self, limit=100):
                requested.append(limit)
                return [transformer_record(CSV_ROW)]

        monkeypatch.setattr(pipeline, "SweepingFetcher", FakeFetcher)

        assert await pipeline.run_pipeline(sample_size=5)
        assert requested == [5]
        assert list(output_dir.iterdir()) == []

    def test_load_segments_from_csv(self, local_paths):
        csv_path, _ = local_paths
        _write_csv(csv_path, [CSV_ROW])
        assert len(pipeline.load_segments()) == 1

    def test_load_segments_nothing(self, local_paths):
        assert pipeline.load_segments() == []


class TestLookup:
    """CLI formatting and dispatch"""

    def test_describe_status_group(self):
        group = group_by_status([
            MatchedSegment.classified(build_segment(), is_active=True, distance=0.001),
        ])[0]
        line = lookup.describe_group(group)
        assert line == "Market St (Larkin St - Polk St) | 8:00 AM - 10:00 AM | NO PARKING | ~111 meters away"

    def test_describe_similarity_group(self):
        group = group_similar_segments([MatchedSegment.plain(build_segment())])[0]
        line = lookup.describe_group(group, now_hour=9)
        assert line == "Market St (Larkin St - Polk St) | 8:00 AM - 10:00 AM | Larkin St - Polk St | sweeping now"

    def test_main_json(self, monkeypatch, capsys):
        monkeypatch.setattr(lookup, "load_segments", lambda: [build_segment()])

        code = lookup.main(["--street", "Market Street", "--date", "2025-08-11", "--hour", "9", "--json"])

        assert code == 0
        groups = json.loads(capsys.readouterr().out)
        assert groups[0]["isActive"] is True

    def test_main_requires_lat_with_lng(self):
        assert lookup.main(["--lng", "-122.4"]) == 2

    def test_main_address_not_found(self, monkeypatch):
        async def not_found(address):
            return None

        monkeypatch.setattr(lookup, "geocode_address", not_found)
        assert lookup.main(["--address", "Nowhere"]) == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
