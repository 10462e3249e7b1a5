import json
import logging
from datetime import date
from enum import Enum
from typing import Any, Mapping, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from .coercion import coerce_date, coerce_interval, coerce_month_day, is_unset, parse_week_days

logger = logging.getLogger(__name__)

WEEKDAY_NAMES: Tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday")


class Frequency(str, Enum):
    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @property
    def unit(self) -> str:
        return _UNITS[self]


_UNITS = {
    Frequency.DAILY: "day",
    Frequency.WEEKLY: "week",
    Frequency.MONTHLY: "month",
    Frequency.YEARLY: "year",
}


class InvalidRule(ValueError):
    """
    Raised when raw recurrence input is structurally malformed and cannot be coerced.
    """


class RecurrenceRule(BaseModel):
    """
    Declarative recurrence of a task.

    Accepts camelCase keys (as stored and sent by clients) as well as field names.
    Only the selector matching ``frequency`` is kept: ``week_days`` for WEEKLY,
    ``month_day`` for MONTHLY.
    """
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_recurring: bool = Field(False, description="Whether the task repeats at all")
    frequency: Frequency = Field(Frequency.DAILY, description="Unit the interval is counted in")
    interval: int = Field(1, ge=1, description="Step size in units of frequency")
    week_days: Tuple[int, ...] = Field((), description="ISO weekdays (1=Monday ... 7=Sunday) for WEEKLY rules")
    month_day: int = Field(1, description="Day of month for MONTHLY rules")
    start_date: Optional[date] = Field(None, description="Date the recurrence is anchored to")
    end_date: Optional[date] = Field(None, description="Inclusive last date, honoured only when has_end_date is set")
    has_end_date: bool = Field(False, description="Whether end_date bounds the recurrence")

    @model_validator(mode="before")
    @classmethod
    def _prepare(cls, data: Any) -> Any:
        if not isinstance(data, Mapping):
            return data
        data = dict(data)
        for name in cls.model_fields:
            alias = to_camel(name)
            if alias != name and alias in data:
                value = data.pop(alias)
                data.setdefault(name, value)

        recurring = data.get("is_recurring")
        if isinstance(recurring, str):
            recurring = recurring.strip().lower() in ("true", "1", "yes", "on")
        if not recurring:
            return {"is_recurring": False}
        data["is_recurring"] = True

        frequency = data.get("frequency")
        if isinstance(frequency, Frequency):
            frequency = frequency.value
        elif isinstance(frequency, str):
            frequency = frequency.strip().upper()
        if frequency != Frequency.WEEKLY.value:
            data.pop("week_days", None)
        if frequency != Frequency.MONTHLY.value:
            data.pop("month_day", None)

        if data.get("has_end_date") is None:
            data["has_end_date"] = not is_unset(data.get("end_date"))
        if is_unset(data.get("start_date")):
            data["start_date"] = date.today()
            logger.warning(f"Recurring rule has no start date, anchoring it on {data['start_date']}")
        return data

    @field_validator("frequency", mode="before")
    @classmethod
    def _frequency(cls, v: Any) -> Any:
        if is_unset(v):
            return Frequency.DAILY
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @field_validator("interval", mode="before")
    @classmethod
    def _interval(cls, v: Any) -> int:
        return coerce_interval(v)

    @field_validator("week_days", mode="before")
    @classmethod
    def _week_days(cls, v: Any) -> Tuple[int, ...]:
        return parse_week_days(v)

    @field_validator("month_day", mode="before")
    @classmethod
    def _month_day(cls, v: Any) -> int:
        return coerce_month_day(v)

    @field_validator("start_date", "end_date", mode="before")
    @classmethod
    def _dates(cls, v: Any) -> Any:
        return coerce_date(v)

    @property
    def effective_end_date(self) -> Optional[date]:
        """
        The end date the rule is bounded by, or None when it is open-ended.
        """
        return self.end_date if self.has_end_date else None


def normalize_rule(raw: Any) -> RecurrenceRule:
    """
    Build a normalized RecurrenceRule from raw, possibly partial input.

    Args:
        raw: A RecurrenceRule, a mapping of rule fields, JSON text of such a mapping, or None.

    Returns:
        RecurrenceRule: The normalized rule. None yields a non-recurring rule.

    Raises:
        InvalidRule: If the input cannot be coerced into a rule.
    """
    if isinstance(raw, RecurrenceRule):
        return raw
    if raw is None:
        return RecurrenceRule()
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise InvalidRule(f"Recurrence rule is not valid JSON: {e}") from e
    if not isinstance(raw, Mapping):
        raise InvalidRule(f"Recurrence rule must be a mapping, got {type(raw).__name__}")
    try:
        return RecurrenceRule.model_validate(raw)
    except ValidationError as e:
        raise InvalidRule(f"Invalid recurrence rule: {e}") from e
