from typing import Optional
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from app.core.config import settings
from app.services.reminder_service import ReminderContext, run_reminder_sweep
import logging

logger = logging.getLogger(__name__)

scheduler = AsyncIOScheduler()

async def scheduled_reminder_sweep(ctx: ReminderContext):
    """Background job: one reminder sweep"""
    try:
        report = await run_reminder_sweep(ctx)
        if not report.success:
            logger.error(f"❌ Scheduled reminder sweep failed: {report.error}")
    except Exception as e:
        logger.error(f"❌ Error in scheduled reminder sweep: {e}")

def start_scheduler(ctx: ReminderContext, interval_minutes: Optional[int] = None):
    """Start the APScheduler reminder job"""
    minutes = interval_minutes or settings.REMINDER_INTERVAL_MINUTES
    if not scheduler.running:
        scheduler.add_job(
            scheduled_reminder_sweep,
            "interval",
            minutes=minutes,
            args=[ctx],
            id="reminder_sweep_job",
            replace_existing=True,
            max_instances=1,
            coalesce=True
        )
        scheduler.start()
        logger.info(f"🚀 Reminder scheduler started (runs every {minutes} min)")

def shutdown_scheduler():
    """Shut down the scheduler on app exit"""
    if scheduler.running:
        scheduler.shutdown()
        logger.info("🛑 Reminder scheduler stopped")
