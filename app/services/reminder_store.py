from datetime import datetime, timezone
from typing import List
import logging
from pydantic import ValidationError
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker
from app.models.task import Task
from app.models.user import User
from app.schemas.reminder import PendingTask, ReminderCategory, TaskOwner, REMINDED_FIELDS

logger = logging.getLogger(__name__)


class TaskReminderStore:
    """Reads pending tasks for the sweep and records delivered reminders."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    async def list_pending_tasks(self) -> List[PendingTask]:
        query = select(Task, User).join(User, Task.user_id == User.id).filter(
            Task.status == "pending"
        ).order_by(Task.deadline)

        async with self._session_factory() as db:
            result = await db.execute(query)
            rows = result.all()

        pending = []
        for task, user in rows:
            try:
                pending.append(PendingTask.model_validate({
                    "id": task.id,
                    "user_id": task.user_id,
                    "title": task.title,
                    "description": task.description,
                    "deadline": task.deadline,
                    "priority": task.priority,
                    "status": task.status,
                    "remind_h1": task.remind_h1,
                    "remind_h0": task.remind_h0,
                    "remind_h5h": task.remind_h5h,
                    "reminded_h1_at": task.reminded_h1_at,
                    "reminded_h0_at": task.reminded_h0_at,
                    "reminded_h5h_at": task.reminded_h5h_at,
                    "owner": TaskOwner.model_validate(user),
                }))
            except ValidationError as e:
                logger.warning(f"⚠️ Skipping malformed task {task.id}: {e}")
        return pending

    async def mark_reminded(self, task_id: int, category: ReminderCategory, at: datetime) -> None:
        column = REMINDED_FIELDS[category]
        async with self._session_factory() as db:
            try:
                await db.execute(update(Task).where(Task.id == task_id).values({column: at.astimezone(timezone.utc), "updated_at": Task.updated_at}))
                await db.commit()
            except Exception:
                await db.rollback()
                raise
