from enum import Enum
from pydantic import BaseModel, ConfigDict, field_validator
from typing import Any, List, Optional
from datetime import datetime, timezone
from app.schemas.task import Priority, TaskStatus
from app.utils.timezone import WIB_LABEL

class ReminderCategory(str, Enum):
    H1 = "H-1"
    HARI_H = "Hari-H"
    LIMA_JAM = "5-jam"

class ReminderStatus(str, Enum):
    SENT = "sent"
    FAILED = "failed"
    ERROR = "error"


def _ensure_utc(v: Optional[datetime]) -> Optional[datetime]:
    if v is None:
        return None
    if v.tzinfo is None:
        return v.replace(tzinfo=timezone.utc)
    return v.astimezone(timezone.utc)


class TaskOwner(BaseModel):
    id: int
    name: str
    phone_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)

class PendingTask(BaseModel):
    """A pending task joined with the owner fields the reminder sweep needs."""
    id: int
    user_id: int
    title: str
    description: Optional[str] = None
    deadline: datetime
    priority: Priority = Priority.MEDIUM
    status: TaskStatus = TaskStatus.PENDING
    remind_h1: bool = False
    remind_h0: bool = False
    remind_h5h: bool = False
    reminded_h1_at: Optional[datetime] = None
    reminded_h0_at: Optional[datetime] = None
    reminded_h5h_at: Optional[datetime] = None
    owner: TaskOwner

    model_config = ConfigDict(from_attributes=True)

    @field_validator('deadline', 'reminded_h1_at', 'reminded_h0_at', 'reminded_h5h_at')
    def as_utc(cls, v):
        return _ensure_utc(v)

    def was_reminded(self, category: ReminderCategory) -> bool:
        return getattr(self, REMINDED_FIELDS[category]) is not None


REMINDED_FIELDS = {
    ReminderCategory.H1: "reminded_h1_at",
    ReminderCategory.HARI_H: "reminded_h0_at",
    ReminderCategory.LIMA_JAM: "reminded_h5h_at",
}


class ReminderResult(BaseModel):
    task_id: int
    user_name: str
    phone: str
    reminder_type: ReminderCategory
    deadline_wib: str
    status: ReminderStatus
    response: Optional[Any] = None
    error: Optional[str] = None

class SweepReport(BaseModel):
    success: bool
    processed_at: datetime
    timezone: str = WIB_LABEL
    results: List[ReminderResult] = []
    total_processed: int = 0
    error: Optional[str] = None
