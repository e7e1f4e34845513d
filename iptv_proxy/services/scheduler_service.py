import logging
from datetime import datetime
from typing import Awaitable, Callable

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger


logger = logging.getLogger(__name__)

JOB_ID = 'catalog_update'


class UpdateScheduler:
    """Scheduler for periodic catalog updates"""

    def __init__(self, job: Callable[[], Awaitable[None]], interval_minutes: int):
        self.job = job
        self.interval_minutes = interval_minutes
        self.scheduler: AsyncIOScheduler | None = None

    def start(self) -> None:
        """Start the scheduler with the update job"""
        if self.scheduler and self.scheduler.running:
            logger.warning("Scheduler already running")
            return

        self.scheduler = AsyncIOScheduler(timezone='UTC')
        self.scheduler.add_job(
            self.job,
            trigger=IntervalTrigger(minutes=self.interval_minutes),
            id=JOB_ID,
            max_instances=1,
            coalesce=True,
        )

        self.scheduler.start()
        next_time = self.get_next_run_time()
        logger.info(
            "Scheduling automatic updates every %s minutes. Next update: %s",
            self.interval_minutes,
            next_time.isoformat() if next_time else "unknown"
        )

    def shutdown(self) -> None:
        """Shutdown the scheduler"""
        if self.scheduler and self.scheduler.running:
            self.scheduler.shutdown(wait=False)
            logger.info("Scheduler stopped")
        self.scheduler = None

    @property
    def running(self) -> bool:
        return bool(self.scheduler and self.scheduler.running)

    def get_next_run_time(self) -> datetime | None:
        """Get next scheduled update time"""
        if not self.scheduler:
            return None
        job = self.scheduler.get_job(JOB_ID)
        return job.next_run_time if job else None
