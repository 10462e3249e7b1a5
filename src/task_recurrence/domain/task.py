import uuid
from datetime import date, datetime
from typing import Any, Optional
import logging
from zoneinfo import ZoneInfo

from pydantic import BaseModel, Field, field_validator

from .rule import RecurrenceRule, normalize_rule

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(ZoneInfo("UTC"))


class Task(BaseModel):
    """
    A to-do item, optionally repeating according to a recurrence rule.
    """
    id: str = Field(default_factory=lambda: f"tsk_{uuid.uuid4().hex[:8]}", description="Unique task identifier")
    title: str = Field(..., description="Task title")
    description: Optional[str] = Field(None, description="Free-form task notes")
    completed: bool = Field(default=False, description="Indicates whether the task is done")
    due_date: Optional[date] = Field(None, description="Date the task is due")
    recurrence: RecurrenceRule = Field(default_factory=RecurrenceRule, description="Recurrence rule of the task")
    created_at: datetime = Field(
        default_factory=_utcnow,
        description="Task creation timestamp with UTC timezone"
    )
    updated_at: datetime = Field(
        default_factory=_utcnow,
        description="Last modification timestamp with UTC timezone"
    )

    @field_validator('recurrence', mode='before')
    @classmethod
    def normalize_recurrence(cls, v: Any) -> RecurrenceRule:
        return normalize_rule(v)

    @field_validator('created_at', 'updated_at')
    @classmethod
    def check_timezone(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            logger.warning("Datetime does not include a timezone. Defaulting to UTC+0 for consistent representation. "
                           "Note: When using SQLite for storage, timezone information may be automatically discarded.")
            return v.replace(tzinfo=ZoneInfo("UTC"))
        return v

    @property
    def is_recurring(self) -> bool:
        return self.recurrence.is_recurring

    def touch(self) -> None:
        self.updated_at = _utcnow()

    def toggle_completion(self) -> None:
        self.completed = not self.completed
        self.touch()

    @property
    def readable_string(self) -> str:
        from task_recurrence.summary import describe

        status = "done" if self.completed else "open"
        task_summary = f"Task: '{self.title}' ({status})"
        if self.description:
            task_summary += f"\nDescription: {self.description}"
        if self.due_date:
            task_summary += f"\nDue: {self.due_date.isoformat()}"
        if self.is_recurring:
            task_summary += f"\n{describe(self.recurrence)}"
        return task_summary
