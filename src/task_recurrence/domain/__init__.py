from .rule import Frequency, InvalidRule, RecurrenceRule, WEEKDAY_NAMES, normalize_rule
from .task import Task

__all__ = ["Frequency", "InvalidRule", "RecurrenceRule", "WEEKDAY_NAMES", "normalize_rule", "Task"]
