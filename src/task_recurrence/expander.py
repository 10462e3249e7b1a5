"""
Date-sequence generation for recurrence rules.

``expand`` walks a cursor forward from the rule's start date and lazily yields
every calendar date the rule recurs on, within the closed window
``[start_date, effective_end]``. The window end is the rule's own end date, or
``start_date + horizon`` for open-ended rules, so every expansion is finite.
"""
import calendar
import logging
from datetime import date, timedelta
from itertools import count, islice
from typing import Callable, Dict, Iterator, Optional, Union

from dateutil.relativedelta import relativedelta
from pydantic import BaseModel, ConfigDict, Field

from task_recurrence.domain.rule import Frequency, RecurrenceRule

logger = logging.getLogger(__name__)

DEFAULT_MAX_COUNT = 30
DEFAULT_HORIZON = relativedelta(years=1)

Horizon = Union[date, timedelta, relativedelta]


class ExpansionOptions(BaseModel):
    """
    Bounds applied to a single expansion.

    Attributes:
        max_count: Maximum number of dates produced.
        horizon: Upper bound for rules without an end date. Either an absolute date,
            or an offset added to the rule's start date. Defaults to one year.
    """
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    max_count: int = Field(DEFAULT_MAX_COUNT, ge=0, description="Cap on the number of dates produced")
    horizon: Optional[Horizon] = Field(None, description="Bound for open-ended rules")


def effective_end(rule: RecurrenceRule, options: Optional[ExpansionOptions] = None) -> Optional[date]:
    """
    Last date an expansion of ``rule`` may produce.

    Returns None when the rule has no start date to anchor a horizon to.
    """
    options = options or ExpansionOptions()
    if rule.effective_end_date is not None:
        return rule.effective_end_date
    if rule.start_date is None:
        return None

    horizon = options.horizon if options.horizon is not None else DEFAULT_HORIZON
    if isinstance(horizon, date):
        return horizon
    try:
        return rule.start_date + horizon
    except (OverflowError, ValueError):
        return date.max


def _add(day: date, step: Optional[timedelta]) -> Optional[date]:
    if step is None:
        return None
    try:
        return day + step
    except OverflowError:
        return None


def _step(**kwargs: int) -> Optional[timedelta]:
    try:
        return timedelta(**kwargs)
    except OverflowError:
        return None


def _daily(rule: RecurrenceRule, end: date) -> Iterator[date]:
    step = _step(days=rule.interval)
    cursor: Optional[date] = rule.start_date
    while cursor is not None and cursor <= end:
        yield cursor
        cursor = _add(cursor, step)


def _weekly(rule: RecurrenceRule, end: date) -> Iterator[date]:
    start = rule.start_date
    if not rule.week_days:
        step = _step(weeks=rule.interval)
        cursor: Optional[date] = start
        while cursor is not None and cursor <= end:
            yield cursor
            cursor = _add(cursor, step)
        return

    one_day = timedelta(days=1)
    # Skipped weeks between two matched week blocks.
    skip = _step(weeks=rule.interval - 1)
    cursor = start
    while cursor is not None and cursor <= end:
        if cursor.isoweekday() in rule.week_days:
            yield cursor
        cursor = _add(cursor, one_day)
        if cursor is not None and rule.interval > 1 and cursor.weekday() == start.weekday():
            if skip is None:
                return
            cursor = _add(cursor, skip)


def _monthly(rule: RecurrenceRule, end: date) -> Iterator[date]:
    start = rule.start_date
    first = start.replace(day=1)
    for step in count():
        try:
            month_start = first + relativedelta(months=step * rule.interval)
        except (OverflowError, ValueError):
            return
        if month_start > end:
            return
        _, days_in_month = calendar.monthrange(month_start.year, month_start.month)
        if not 1 <= rule.month_day <= days_in_month:
            continue
        target = month_start.replace(day=rule.month_day)
        if start <= target <= end:
            yield target


def _yearly(rule: RecurrenceRule, end: date) -> Iterator[date]:
    start = rule.start_date
    for step in count():
        year = start.year + step * rule.interval
        if year > end.year:
            return
        try:
            # Feb 29 anchors only recur in leap years.
            target = start.replace(year=year)
        except ValueError:
            continue
        if target > end:
            return
        yield target


_GENERATORS: Dict[Frequency, Callable[[RecurrenceRule, date], Iterator[date]]] = {
    Frequency.DAILY: _daily,
    Frequency.WEEKLY: _weekly,
    Frequency.MONTHLY: _monthly,
    Frequency.YEARLY: _yearly,
}


def expand(rule: RecurrenceRule, options: Optional[ExpansionOptions] = None) -> Iterator[date]:
    """
    Lazily enumerate the dates ``rule`` recurs on.

    Dates are ascending and unique, start no earlier than ``rule.start_date`` and end
    no later than ``effective_end(rule, options)``. At most ``options.max_count`` dates
    are produced. Non-recurring rules, rules ending before they start, and rules with
    an unsupported frequency produce nothing.

    Args:
        rule (RecurrenceRule): A normalized recurrence rule.
        options (Optional[ExpansionOptions]): Expansion bounds, defaults to 30 dates within one year.

    Returns:
        Iterator[date]: The occurrence dates.
    """
    options = options or ExpansionOptions()
    if not rule.is_recurring or rule.start_date is None or options.max_count == 0:
        return iter(())

    end = effective_end(rule, options)
    if end is None or end < rule.start_date:
        return iter(())

    generator = _GENERATORS.get(rule.frequency)
    if generator is None:
        logger.warning(f"No generator for frequency {rule.frequency!r}, rule expands to nothing")
        return iter(())
    return islice(generator(rule, end), options.max_count)
