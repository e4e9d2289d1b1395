"""Scheduler for periodic street sweeping schedule refreshes"""
import asyncio
import logging
import signal
import sys
import time
from datetime import datetime
import schedule

from config import UPDATE_SCHEDULE, UPDATE_DAY, UPDATE_HOUR
from pipeline import run_pipeline

logger = logging.getLogger(__name__)

# Flag to control graceful shutdown
shutdown_requested = False


def signal_handler(signum, frame):
    """Handle shutdown signals gracefully"""
    global shutdown_requested
    logger.info(f"Received signal {signum}, initiating graceful shutdown...")
    shutdown_requested = True


def run_pipeline_sync(use_local: bool = False) -> bool:
    """Synchronous wrapper for the async pipeline"""
    logger.info(f"Scheduled refresh starting at {datetime.utcnow()}")
    try:
        success = asyncio.run(run_pipeline(use_local=use_local))
    except Exception as e:
        logger.exception(f"Scheduled refresh error: {e}")
        return False

    if success:
        logger.info("Scheduled refresh completed successfully")
    else:
        logger.error("Scheduled refresh failed")
    return success


def run_on_first_of_month():
    if datetime.utcnow().day == 1:
        run_pipeline_sync()


def setup_schedule(cadence: str = UPDATE_SCHEDULE, day: str = UPDATE_DAY, hour: int = UPDATE_HOUR):
    """Register the refresh job on the module-level scheduler"""
    at = f"{hour:02d}:00"
    logger.info(f"Setting up {cadence} schedule")

    if cadence == "daily":
        schedule.every().day.at(at).do(run_pipeline_sync)
        logger.info(f"Refresh scheduled daily at {at}")

    elif cadence == "weekly":
        getattr(schedule.every(), day.lower()).at(at).do(run_pipeline_sync)
        logger.info(f"Refresh scheduled every {day} at {at}")

    elif cadence == "monthly":
        schedule.every().day.at(at).do(run_on_first_of_month)
        logger.info(f"Refresh scheduled monthly on the 1st at {at}")

    else:
        logger.warning(f"Unknown schedule '{cadence}', defaulting to weekly")
        schedule.every().sunday.at(at).do(run_pipeline_sync)


def run_scheduler():
    """Run the scheduler loop until SIGINT/SIGTERM"""
    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    setup_schedule()

    logger.info("Scheduler started. Press Ctrl+C to stop.")
    logger.info(f"Next run: {schedule.next_run()}")

    while not shutdown_requested:
        schedule.run_pending()
        # Check for shutdown every second between 60s polls
        for _ in range(60):
            if shutdown_requested:
                break
            time.sleep(1)

    schedule.clear()
    logger.info("Scheduler stopped.")


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    if "--once" in sys.argv:
        logger.info("Running refresh once...")
        sys.exit(0 if run_pipeline_sync() else 1)
    run_scheduler()
