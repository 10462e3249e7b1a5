"""
Task Recurrence

Recurring to-do tasks and the engine that projects them onto calendar dates.

Core Concepts:

RecurrenceRule:
    Declarative description of how a task repeats: frequency, interval,
    weekday or month-day selector, and a start/end window.

Occurrence:
    One calendar date produced by expanding a rule. Occurrences are not
    stored; they are recomputed from the rule whenever they are needed.

Views:
    - expand(rule) lazily yields the occurrence dates.
    - describe(rule) renders the same rule as a sentence.
"""

from .domain import Frequency, InvalidRule, RecurrenceRule, Task, normalize_rule
from .expander import ExpansionOptions, effective_end, expand
from .summary import describe
from .preview import RecurrencePreview, build_preview

__all__ = [
    "Frequency",
    "InvalidRule",
    "RecurrenceRule",
    "Task",
    "normalize_rule",
    "ExpansionOptions",
    "effective_end",
    "expand",
    "describe",
    "RecurrencePreview",
    "build_preview",
]
