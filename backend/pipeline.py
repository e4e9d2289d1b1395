"""Refresh pipeline for the SF street sweeping schedule"""
import asyncio
import json
import gzip
import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from config import OUTPUT_DIR, COMPRESS_OUTPUT, LOCAL_SCHEDULE_CSV, SNAPSHOT_PREFIX
from engine.models import ScheduleSegment
from fetchers import SweepingFetcher
from transforms import SweepingDataTransformer, load_csv
from validation import ScheduleValidator

logger = logging.getLogger(__name__)


def latest_snapshot_path() -> Path:
    suffix = ".json.gz" if COMPRESS_OUTPUT else ".json"
    return OUTPUT_DIR / f"{SNAPSHOT_PREFIX}_latest{suffix}"


def read_snapshot(path: Path) -> List[Dict[str, Any]]:
    opener = gzip.open if path.name.endswith(".gz") else open
    with opener(path, "rt", encoding="utf-8") as f:
        return json.load(f)["segments"]


class ScheduleDataPipeline:
    """
    Loads the sweeping schedule (local CSV export or DataSF API),
    transforms and validates it, and writes a snapshot for lookups.
    """

    def __init__(self):
        self.transformer = SweepingDataTransformer()
        self.validator = ScheduleValidator()
        self.run_stats = {
            "start_time": None,
            "end_time": None,
            "source": None,
            "record_count": 0,
            "validation_result": None,
        }

    async def run(self, use_local: bool = True, sample_size: Optional[int] = None) -> bool:
        """
        Run the complete refresh.

        Args:
            use_local: Read the local CSV export when present instead of
                downloading from DataSF
            sample_size: Download only this many rows from DataSF and stop
                after validation. No snapshot is written.

        Returns:
            True if a snapshot was written (or the sample validated), False otherwise
        """
        self.run_stats["start_time"] = datetime.utcnow()
        logger.info("=" * 60)
        logger.info("Starting SF Street Sweeping refresh")
        logger.info("=" * 60)

        try:
            logger.info("\n[Step 1/4] Loading schedule rows...")
            if sample_size:
                rows = await self._load_sample(sample_size)
            else:
                rows = await self._load_rows(use_local)
            self.run_stats["record_count"] = len(rows)

            logger.info("\n[Step 2/4] Transforming rows...")
            segments = self.transformer.transform_records(rows)

            logger.info("\n[Step 3/4] Validating segments...")
            validation = self.validator.validate_segments(segments)
            self.run_stats["validation_result"] = validation

            if not validation.is_valid:
                logger.error("Validation failed!")
                for error in validation.errors:
                    logger.error(f"  - {error}")
                return False

            if sample_size:
                logger.info(
                    f"Sample of {len(segments)} segments validated "
                    f"({len(validation.warnings)} warnings); snapshot not written"
                )
                return True

            previous = self._load_previous_snapshot()
            if previous:
                validation.warnings.extend(
                    self.validator.validate_incremental(segments, previous).warnings
                )

            if validation.warnings:
                logger.warning("Validation warnings:")
                for warning in validation.warnings:
                    logger.warning(f"  - {warning}")

            logger.info("\n[Step 4/4] Writing snapshot...")
            self._write_output(segments)

            self.run_stats["end_time"] = datetime.utcnow()
            duration = (self.run_stats["end_time"] - self.run_stats["start_time"]).total_seconds()

            logger.info("\n" + "=" * 60)
            logger.info("Refresh completed successfully!")
            logger.info(f"Duration: {duration:.1f} seconds")
            logger.info(f"Source: {self.run_stats['source']}")
            logger.info(f"Segments: {len(segments):,}")
            logger.info(f"Corridors: {validation.stats.get('corridors_count', 0):,}")
            logger.info("=" * 60)

            return True

        except Exception as e:
            logger.exception(f"Pipeline failed with error: {e}")
            return False

    async def _load_rows(self, use_local: bool) -> List[Dict[str, Any]]:
        if use_local and LOCAL_SCHEDULE_CSV.exists():
            self.run_stats["source"] = LOCAL_SCHEDULE_CSV.name
            return load_csv(LOCAL_SCHEDULE_CSV)

        if use_local:
            logger.info(f"{LOCAL_SCHEDULE_CSV.name} not found, downloading from DataSF")

        async with SweepingFetcher() as fetcher:
            self.run_stats["source"] = fetcher.get_source_name()
            return await fetcher.fetch()

    async def _load_sample(self, sample_size: int) -> List[Dict[str, Any]]:
        async with SweepingFetcher() as fetcher:
            self.run_stats["source"] = f"{fetcher.get_source_name()} (sample)"
            return await fetcher.fetch_sample(sample_size)

    def _load_previous_snapshot(self) -> Optional[List[ScheduleSegment]]:
        path = latest_snapshot_path()
        if not path.exists():
            return None
        try:
            return SweepingDataTransformer().transform_records(read_snapshot(path))
        except (OSError, ValueError, KeyError) as e:
            logger.warning(f"Could not read previous snapshot {path.name}: {e}")
            return None

    def _write_output(self, segments: List[ScheduleSegment]):
        """Write a dated snapshot plus a 'latest' link for lookups"""
        timestamp = datetime.utcnow().strftime("%Y%m%d")
        snapshot = {
            "version": timestamp,
            "generated": datetime.utcnow().isoformat(),
            "source": self.run_stats["source"],
            "segments": [self.transformer.to_record(s) for s in segments],
        }

        output_path = OUTPUT_DIR / f"{SNAPSHOT_PREFIX}_{timestamp}.json"
        if COMPRESS_OUTPUT:
            output_path = output_path.with_suffix(".json.gz")
            with gzip.open(output_path, "wt", encoding="utf-8") as f:
                json.dump(snapshot, f)
        else:
            with open(output_path, "w") as f:
                json.dump(snapshot, f)

        logger.info(f"Wrote output to {output_path}")

        latest_path = latest_snapshot_path()
        if latest_path.exists() or latest_path.is_symlink():
            latest_path.unlink()

        # Create symlink (or copy on Windows)
        try:
            latest_path.symlink_to(output_path.name)
            logger.info(f"Created latest symlink: {latest_path}")
        except OSError:
            shutil.copy(output_path, latest_path)
            logger.info(f"Created latest copy: {latest_path}")


def load_segments() -> List[ScheduleSegment]:
    """
    Segments for lookups: the latest snapshot if one was written,
    otherwise the local CSV export. Empty if neither exists.
    """
    transformer = SweepingDataTransformer()
    snapshot = latest_snapshot_path()
    if snapshot.exists():
        logger.info(f"Loading segments from {snapshot.name}")
        return transformer.transform_records(read_snapshot(snapshot))
    if LOCAL_SCHEDULE_CSV.exists():
        logger.info(f"Loading segments from {LOCAL_SCHEDULE_CSV.name}")
        return transformer.transform_records(load_csv(LOCAL_SCHEDULE_CSV))
    logger.warning("No snapshot or local CSV found; run pipeline.py first")
    return []


async def run_pipeline(use_local: bool = True, sample_size: Optional[int] = None) -> bool:
    """Entry point for running the pipeline"""
    pipeline = ScheduleDataPipeline()
    return await pipeline.run(use_local=use_local, sample_size=sample_size)


if __name__ == "__main__":
    import argparse
    import sys

    parser = argparse.ArgumentParser(description="Refresh the street sweeping snapshot")
    parser.add_argument("--remote", action="store_true", help="Download from DataSF even if the local CSV exists")
    parser.add_argument("--sample", type=int, metavar="N", help="Validate N downloaded rows without writing a snapshot")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    success = asyncio.run(run_pipeline(use_local=not args.remote, sample_size=args.sample))
    sys.exit(0 if success else 1)
