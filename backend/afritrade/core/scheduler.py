"""
Periodic dashboard refresh.
Uses APScheduler to re-run the intra-regional trade load on an interval.
"""
import logging
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

logger = logging.getLogger("afritrade.scheduler")

REFRESH_JOB_ID = "trade_refresh"

scheduler = BackgroundScheduler()


def start_scheduler(refresh_job: Callable[[], object], interval_hours: float = 6.0):
    """
    Register the refresh job and start the scheduler.
    Safe to call again; the job is replaced rather than duplicated.
    """
    scheduler.add_job(
        refresh_job,
        IntervalTrigger(hours=interval_hours),
        id=REFRESH_JOB_ID,
        name="Intra-regional trade data refresh",
        replace_existing=True,
    )

    if scheduler.running:
        logger.info("Scheduler already running, refresh job replaced")
        return

    scheduler.start()

    for job in scheduler.get_jobs():
        logger.info(f"  - {job.name} (next run: {job.next_run_time})")


def stop_scheduler():
    """Shut down the scheduler without waiting for a running refresh."""
    if scheduler.running:
        scheduler.shutdown(wait=False)
        logger.info("Scheduler stopped")


def get_scheduler_status() -> dict:
    """Return current scheduler status and next run times."""
    jobs = scheduler.get_jobs() if scheduler.running else []
    return {
        "running": scheduler.running,
        "jobs": [
            {
                "id": job.id,
                "name": job.name,
                "next_run": str(job.next_run_time) if job.next_run_time else None,
            }
            for job in jobs
        ],
    }
