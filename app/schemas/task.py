from enum import Enum
from pydantic import BaseModel, ConfigDict, computed_field, field_validator
from typing import Optional
from datetime import datetime, timezone
from app.utils.timezone import format_date_indonesian, format_for_input, utc_now

class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

class TaskStatus(str, Enum):
    PENDING = "pending"
    DONE = "done"


def get_deadline_status(deadline: datetime, status: str, now: Optional[datetime] = None) -> Optional[str]:
    """Badge shown next to a task: overdue, due within 5 hours, or due today."""
    if status == TaskStatus.DONE.value:
        return None
    if deadline.tzinfo is None:
        deadline = deadline.replace(tzinfo=timezone.utc)
    now = now or utc_now()
    diff_hours = (deadline - now).total_seconds() / 3600

    if diff_hours < 0:
        return "Terlambat"
    if diff_hours < 5:
        return "Segera"
    if diff_hours < 24:
        return "Hari ini"
    return None


class TaskBase(BaseModel):
    title: str
    description: Optional[str] = None
    priority: Priority = Priority.MEDIUM
    remind_h1: bool = False
    remind_h0: bool = False
    remind_h5h: bool = False

    @field_validator('title')
    def title_must_not_be_empty(cls, v):
        if not v or not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip()

    @field_validator('description')
    def sanitize_description(cls, v):
        if v:
            return v.strip() or None
        return None

class TaskCreate(TaskBase):
    # Naive values (datetime-local form input) are WIB
    deadline: datetime

class TaskUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    deadline: Optional[datetime] = None
    priority: Optional[Priority] = None
    status: Optional[TaskStatus] = None
    remind_h1: Optional[bool] = None
    remind_h0: Optional[bool] = None
    remind_h5h: Optional[bool] = None

    @field_validator('title')
    def title_must_not_be_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError('Title cannot be empty')
        return v.strip() if v else v

class TaskResponse(TaskBase):
    id: int
    user_id: int
    deadline: datetime
    status: TaskStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator('deadline', 'created_at', 'updated_at')
    def ensure_utc(cls, v):
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    @computed_field
    @property
    def deadline_wib(self) -> str:
        return format_date_indonesian(self.deadline)

    @computed_field
    @property
    def deadline_input(self) -> str:
        return format_for_input(self.deadline)

    @computed_field
    @property
    def deadline_status(self) -> Optional[str]:
        return get_deadline_status(self.deadline, self.status.value)
