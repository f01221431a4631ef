import logging
from typing import Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
from app.models.task import Task
from app.schemas.task import TaskCreate, TaskUpdate, TaskStatus
from app.utils.timezone import to_utc, to_wib

logger = logging.getLogger(__name__)

REMINDER_MARKERS = ("reminded_h1_at", "reminded_h0_at", "reminded_h5h_at")

async def create_new_task(db: AsyncSession, task: TaskCreate, user_id: int):
    logger.info(f"📝 Creating task for user {user_id}: {task.title} (deadline input {task.deadline})")

    try:
        db_task = Task(
            title=task.title,
            description=task.description,
            deadline=to_utc(task.deadline),
            priority=task.priority.value,
            status=TaskStatus.PENDING.value,
            remind_h1=task.remind_h1,
            remind_h0=task.remind_h0,
            remind_h5h=task.remind_h5h,
            user_id=user_id
        )
        db.add(db_task)
        await db.commit()
        await db.refresh(db_task)

        logger.info(f"✅ Task created, ID: {db_task.id}, deadline UTC {db_task.deadline}")
        return db_task
    except Exception as e:
        logger.error(f"❌ Failed to create task: {e}")
        await db.rollback()
        raise

async def get_tasks(db: AsyncSession, user_id: int, status: Optional[TaskStatus] = None, skip: int = 0, limit: int = 100):
    query = select(Task).filter(Task.user_id == user_id)
    if status is not None:
        query = query.filter(Task.status == status.value)
    query = query.order_by(Task.created_at.desc(), Task.id.desc()).offset(skip).limit(limit)
    result = await db.execute(query)
    return result.scalars().all()

async def get_task(db: AsyncSession, task_id: int, user_id: int):
    result = await db.execute(select(Task).filter(Task.id == task_id, Task.user_id == user_id))
    return result.scalars().first()

async def update_task(db: AsyncSession, task_id: int, task_update: TaskUpdate, user_id: int):
    db_task = await get_task(db, task_id, user_id)
    if not db_task:
        return None

    update_data = task_update.model_dump(exclude_unset=True)
    if update_data.get("deadline") is not None:
        new_deadline = to_utc(update_data.pop("deadline"))
        if to_wib(db_task.deadline) != new_deadline:
            # A moved deadline gets its reminders again
            for marker in REMINDER_MARKERS:
                setattr(db_task, marker, None)
        db_task.deadline = new_deadline
    else:
        update_data.pop("deadline", None)

    for key, value in update_data.items():
        if key == "description":
            setattr(db_task, key, value.strip() or None if value else None)
        elif value is not None:
            setattr(db_task, key, getattr(value, "value", value))

    try:
        db.add(db_task)
        await db.commit()
        await db.refresh(db_task)
    except Exception:
        await db.rollback()
        raise
    return db_task

async def toggle_task_status(db: AsyncSession, task_id: int, user_id: int):
    db_task = await get_task(db, task_id, user_id)
    if not db_task:
        return None

    db_task.status = TaskStatus.PENDING.value if db_task.status == TaskStatus.DONE.value else TaskStatus.DONE.value
    db.add(db_task)
    await db.commit()
    await db.refresh(db_task)
    logger.info(f"🔁 Task {task_id} is now {db_task.status}")
    return db_task

async def delete_task(db: AsyncSession, task_id: int, user_id: int):
    db_task = await get_task(db, task_id, user_id)
    if not db_task:
        return None

    await db.delete(db_task)
    await db.commit()
    return db_task
