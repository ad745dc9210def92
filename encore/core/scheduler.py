"""Background job scheduler for attendance summary reconciliation.

Summaries are rebuilt on every status change, but a store failure between
the record write and the summary write leaves the summary stale until the
next change to that event. The reconcile job rebuilds all of them on an
interval.
"""
import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger
from sqlmodel import Session

from encore.attendance.manager import AttendanceManager
from encore.core.config import settings
from encore.core.database import engine
from encore.store import SqlDocumentStore

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()


def reconcile_job():
    """Background summary reconcile job."""
    try:
        with Session(engine) as session:
            count = AttendanceManager(SqlDocumentStore(session)).reconcile_all()
            logger.info(f"Background reconcile completed: {count} summaries")
    except Exception as e:
        logger.error(f"Background reconcile failed: {e}")


def start_scheduler():
    """Start the background scheduler."""
    if not settings.reconcile_enabled:
        logger.info("Summary reconciliation disabled, scheduler not started")
        return
    scheduler.add_job(
        reconcile_job,
        trigger=IntervalTrigger(minutes=settings.summary_reconcile_interval_minutes),
        id="summary_reconcile",
        replace_existing=True,
    )
    scheduler.start()
    logger.info(
        f"Scheduler started, reconciling every "
        f"{settings.summary_reconcile_interval_minutes} minutes"
    )


def shutdown_scheduler():
    """Graceful shutdown."""
    if not scheduler.running:
        return
    scheduler.shutdown(wait=False)
    logger.info("Scheduler shut down")
