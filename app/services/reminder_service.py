"""
Deadline reminders over WhatsApp.

One sweep loads every pending task, works out how many hours are left until
its deadline (in WIB) and sends at most one reminder per task. Each reminder
category has its own enable flag on the task and an inclusive window of
hours-until-deadline in which it fires. The windows are wide so a sweep run
every few minutes up to a few hours apart still lands inside them; the sent
markers on the task keep a category from firing twice for the same deadline.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Protocol, Tuple
from app.schemas.reminder import (
    PendingTask,
    ReminderCategory,
    ReminderResult,
    ReminderStatus,
    SweepReport,
)
from app.utils.timezone import format_date_indonesian, get_wib_time, to_wib

logger = logging.getLogger(__name__)

# (category, enable flag, min hours, max hours), checked in this order.
# H-1: nominal 24h before the deadline, +-4h.
# Hari-H: at the deadline, +-2h, so it also fires shortly after an overdue deadline.
# 5-jam: nominal 5h before the deadline, +-30m.
H1_WINDOW_HOURS = (20.0, 28.0)
HARI_H_WINDOW_HOURS = (-2.0, 2.0)
LIMA_JAM_WINDOW_HOURS = (4.5, 5.5)

REMINDER_WINDOWS: Tuple[Tuple[ReminderCategory, str, float, float], ...] = (
    (ReminderCategory.H1, "remind_h1", *H1_WINDOW_HOURS),
    (ReminderCategory.HARI_H, "remind_h0", *HARI_H_WINDOW_HOURS),
    (ReminderCategory.LIMA_JAM, "remind_h5h", *LIMA_JAM_WINDOW_HOURS),
)

CATEGORY_LABELS = {
    ReminderCategory.H1: "H-1",
    ReminderCategory.HARI_H: "Hari-H",
    ReminderCategory.LIMA_JAM: "5 jam sebelum",
}


class ReminderGateway(Protocol):
    async def send_message(self, target: str, message: str): ...


class PendingTaskStore(Protocol):
    async def list_pending_tasks(self) -> List[PendingTask]: ...

    async def mark_reminded(self, task_id: int, category: ReminderCategory, at: datetime) -> None: ...


@dataclass
class ReminderContext:
    """Everything a sweep talks to, built once at startup."""
    store: PendingTaskStore
    gateway: ReminderGateway
    clock: Callable[[], datetime] = get_wib_time
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)


def classify_reminder(task: PendingTask, diff_hours: float) -> Optional[ReminderCategory]:
    for category, flag, low, high in REMINDER_WINDOWS:
        if getattr(task, flag) and low <= diff_hours <= high:
            return category
    return None


def hours_until_deadline(task: PendingTask, now: datetime) -> float:
    return (to_wib(task.deadline) - now).total_seconds() / 3600


def match_reminder(task: PendingTask, now: datetime) -> Optional[ReminderCategory]:
    return classify_reminder(task, hours_until_deadline(task, now))


def build_reminder_message(task: PendingTask, category: ReminderCategory) -> str:
    description = f"📝 Deskripsi: {task.description}" if task.description else ""
    return (
        f"Hai {task.owner.name}! 📚\n"
        f"\n"
        f"🎯 Reminder Tugas: \"{task.title}\"\n"
        f"\n"
        f"⏰ Deadline: {format_date_indonesian(task.deadline)} WIB\n"
        f"📅 Reminder: {CATEGORY_LABELS[category]}\n"
        f"\n"
        f"{description}\n"
        f"\n"
        f"Jangan lupa dikerjakan ya! Semangat! 💪\n"
        f"\n"
        f"- Task Reminder Bot 🤖"
    )


async def send_task_reminder(
    task: PendingTask, category: ReminderCategory, gateway: ReminderGateway
) -> ReminderResult:
    """Send one reminder. Never raises: failures end up in the result status."""
    phone = task.owner.phone_number
    result = ReminderResult(
        task_id=task.id,
        user_name=task.owner.name,
        phone=phone,
        reminder_type=category,
        deadline_wib=format_date_indonesian(task.deadline),
        status=ReminderStatus.ERROR,
    )

    try:
        response = await gateway.send_message(phone, build_reminder_message(task, category))
    except Exception as e:
        logger.error(f"❌ [Reminder] {category.value} for task {task.id} could not be sent: {e!r}")
        result.error = str(e) or e.__class__.__name__
        return result

    result.status = ReminderStatus.SENT if response.ok else ReminderStatus.FAILED
    result.response = response.body
    logger.info(f"📨 [Reminder] {category.value} for task {task.id} ({task.title}): {result.status.value}")
    return result


async def run_reminder_sweep(ctx: ReminderContext) -> SweepReport:
    async with ctx.lock:
        now = ctx.clock()
        logger.info(f"⏰ Running reminder sweep at {now.isoformat()}")

        try:
            tasks = await ctx.store.list_pending_tasks()
        except Exception as e:
            logger.exception("❌ Could not load pending tasks")
            return SweepReport(success=False, processed_at=now, error=str(e) or e.__class__.__name__)

        results: List[ReminderResult] = []
        for task in tasks:
            category = match_reminder(task, now)
            if category is None:
                continue
            if task.was_reminded(category):
                logger.debug(f"Task {task.id}: {category.value} already sent")
                continue
            if not task.owner.phone_number:
                logger.debug(f"Task {task.id}: owner {task.user_id} has no phone number")
                continue

            result = await send_task_reminder(task, category, ctx.gateway)
            results.append(result)

            if result.status == ReminderStatus.SENT:
                try:
                    await ctx.store.mark_reminded(task.id, category, now)
                except Exception as e:
                    logger.error(f"❌ [Reminder] Sent {category.value} for task {task.id} but could not record it: {e}")

        logger.info(f"✅ Reminder sweep done, {len(results)} reminder(s) processed")
        return SweepReport(
            success=True,
            processed_at=now,
            results=results,
            total_processed=len(results),
        )
