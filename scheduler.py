"""
Scheduler - Periodic ranking refresh

Job Schedule:
1. Ranking Refresh: Every RANKING_REFRESH_INTERVAL_MINUTES (default 15)

Usage:
    python scheduler.py              # Run scheduler daemon
    python scheduler.py --once       # Refresh rankings once and exit
    python scheduler.py --migrate    # Apply migrations, then run the daemon
"""
import asyncio
import signal
import sys
from datetime import datetime

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from loguru import logger

from config import settings
from utils.exceptions import CatalogError


class RankingRefreshScheduler:
    """
    Scheduler for the materialized rankings.

    Runs RankingService.refresh_rankings() on an interval inside the
    current event loop (the API process or the standalone daemon).
    """

    def __init__(self, ranking_service, interval_minutes: int = None):
        self.ranking_service = ranking_service
        if interval_minutes is None:
            interval_minutes = settings.RANKING_REFRESH_INTERVAL_MINUTES
        self.interval_minutes = interval_minutes
        self.scheduler = AsyncIOScheduler()

    def setup(self):
        """Setup scheduled jobs."""
        if self.interval_minutes < 1:
            raise ValueError(f"Refresh interval must be at least 1 minute, got {self.interval_minutes}")

        self.scheduler.add_job(
            self.refresh_rankings,
            IntervalTrigger(minutes=self.interval_minutes),
            id="ranking_refresh",
            name="Ranking Refresh",
            replace_existing=True,
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now()  # Warm the snapshot on start
        )

        logger.info("Scheduler setup complete with 1 job")
        self._log_schedule()

    def _log_schedule(self):
        """Log current job schedule."""
        jobs = self.scheduler.get_jobs()
        logger.info(f"Scheduled jobs ({len(jobs)}):")
        for job in jobs:
            logger.info(f"  - {job.name}: {job.trigger}")

    async def refresh_rankings(self) -> bool:
        """
        Job: Recompute every ranking type and swap in a new snapshot.

        A failed refresh keeps the previous snapshot.
        """
        logger.info("Refreshing rankings...")

        try:
            snapshot = await self.ranking_service.refresh_rankings()
        except CatalogError as e:
            logger.error(f"Ranking refresh failed: {e}")
            return False

        logger.info(f"Ranking refresh complete (generation {snapshot.generation})")
        return True

    def start(self):
        """Start the scheduler. Must be called from a running event loop."""
        self.setup()
        self.scheduler.start()
        logger.info("Scheduler started")

    def stop(self):
        """Request shutdown. The scheduler stops on the next event loop iteration."""
        if self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler shutdown requested")


def build_ranking_service():
    """Database + RankingService for a standalone process."""
    from database import Database
    from processor import RankingService

    database = Database()
    return database, RankingService(database)


async def run_once() -> bool:
    """Refresh rankings once and exit."""
    database, service = build_ranking_service()
    await database.connect()

    try:
        scheduler = RankingRefreshScheduler(service)
        return await scheduler.refresh_rankings()
    finally:
        await database.dispose()


async def run_scheduler():
    """Run the scheduler until SIGINT / SIGTERM."""
    database, service = build_ranking_service()
    await database.connect()

    scheduler = RankingRefreshScheduler(service)
    scheduler.start()

    # Handle graceful shutdown
    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(signum, stop_event.set)

    logger.info("Press Ctrl+C to stop")
    try:
        await stop_event.wait()
        logger.info("Received shutdown signal")
    finally:
        scheduler.stop()
        await database.dispose()


def main():
    """Main entry point with CLI arguments."""
    import argparse
    from utils.logger import setup_logging
    from config import ensure_directories

    parser = argparse.ArgumentParser(description="AI App Catalog Ranking Scheduler")
    parser.add_argument("--once", action="store_true", help="Refresh rankings once and exit")
    parser.add_argument("--migrate", action="store_true", help="Apply Alembic migrations before starting")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    args = parser.parse_args()

    # Configure logging
    ensure_directories()
    setup_logging(
        log_dir=settings.LOG_DIR,
        log_level="DEBUG" if args.verbose else settings.LOG_LEVEL,
        app_name="scheduler",
    )

    if args.migrate:
        from database import run_migrations
        run_migrations()

    if args.once:
        result = asyncio.run(run_once())
        sys.exit(0 if result else 1)
    elif settings.RANKING_REFRESH_INTERVAL_MINUTES < 1:
        logger.error("RANKING_REFRESH_INTERVAL_MINUTES is 0, the refresh daemon is disabled (use --once)")
        sys.exit(1)
    else:
        # Run as daemon
        asyncio.run(run_scheduler())


if __name__ == "__main__":
    main()
