from datetime import date

import pytest
from pydantic import ValidationError

from task_recurrence.domain.rule import Frequency, InvalidRule, RecurrenceRule, normalize_rule
from task_recurrence.domain.task import Task


def test_defaults_for_partial_input() -> None:
    rule = normalize_rule({"isRecurring": True, "startDate": "2024-01-01"})
    assert rule.is_recurring
    assert rule.frequency == Frequency.DAILY
    assert rule.interval == 1
    assert rule.week_days == ()
    assert rule.month_day == 1
    assert rule.start_date == date(2024, 1, 1)
    assert rule.end_date is None
    assert rule.has_end_date is False


def test_accepts_field_names_and_aliases() -> None:
    by_alias = normalize_rule({"isRecurring": True, "frequency": "MONTHLY", "monthDay": 15, "startDate": "2024-01-01"})
    by_name = normalize_rule({"is_recurring": True, "frequency": "MONTHLY", "month_day": 15, "start_date": date(2024, 1, 1)})
    assert by_alias == by_name


def test_frequency_is_case_insensitive() -> None:
    rule = normalize_rule({"isRecurring": True, "frequency": " weekly ", "startDate": "2024-01-01"})
    assert rule.frequency == Frequency.WEEKLY


def test_unknown_frequency_is_rejected() -> None:
    with pytest.raises(InvalidRule):
        normalize_rule({"isRecurring": True, "frequency": "HOURLY", "startDate": "2024-01-01"})


@pytest.mark.parametrize("raw, expected", [(None, 1), ("", 1), (0, 1), (-3, 1), (4, 4), ("3", 3), (2.0, 2)])
def test_interval_coercion(raw, expected) -> None:
    rule = normalize_rule({"isRecurring": True, "interval": raw, "startDate": "2024-01-01"})
    assert rule.interval == expected


@pytest.mark.parametrize("raw", ["abc", 1.5, True, [2]])
def test_non_numeric_interval_is_rejected(raw) -> None:
    with pytest.raises(InvalidRule):
        normalize_rule({"isRecurring": True, "interval": raw, "startDate": "2024-01-01"})


def _weekly(week_days) -> RecurrenceRule:
    return normalize_rule({"isRecurring": True, "frequency": "WEEKLY", "weekDays": week_days, "startDate": "2024-01-01"})


def test_week_days_are_deduplicated_and_sorted() -> None:
    assert _weekly([5, 1, 3, 1]).week_days == (1, 3, 5)


def test_week_days_from_json_text() -> None:
    assert _weekly("[5, 1, 3]").week_days == (1, 3, 5)


def test_unparseable_week_days_text_becomes_empty() -> None:
    assert _weekly("mon,wed").week_days == ()


def test_out_of_range_week_days_are_dropped() -> None:
    assert _weekly([0, 1, 8, 7]).week_days == (1, 7)


def test_non_integer_week_days_are_rejected() -> None:
    with pytest.raises(InvalidRule):
        _weekly(["monday"])


def test_inactive_selectors_are_ignored() -> None:
    rule = normalize_rule({
        "isRecurring": True,
        "frequency": "DAILY",
        "weekDays": ["monday"],
        "monthDay": "last",
        "startDate": "2024-01-01",
    })
    assert rule.week_days == ()
    assert rule.month_day == 1


def test_month_day_is_not_clamped() -> None:
    rule = normalize_rule({"isRecurring": True, "frequency": "MONTHLY", "monthDay": 40, "startDate": "2024-01-01"})
    assert rule.month_day == 40


def test_has_end_date_follows_end_date_when_missing() -> None:
    rule = normalize_rule({"isRecurring": True, "startDate": "2024-01-01", "endDate": "2024-02-01"})
    assert rule.has_end_date is True
    assert rule.effective_end_date == date(2024, 2, 1)


def test_end_date_ignored_without_flag() -> None:
    rule = normalize_rule({"isRecurring": True, "startDate": "2024-01-01", "endDate": "2024-02-01", "hasEndDate": False})
    assert rule.end_date == date(2024, 2, 1)
    assert rule.effective_end_date is None


def test_timestamps_are_reduced_to_dates() -> None:
    rule = normalize_rule({"isRecurring": True, "startDate": "2024-01-01T10:30:00.000Z"})
    assert rule.start_date == date(2024, 1, 1)


def test_invalid_date_is_rejected() -> None:
    with pytest.raises(InvalidRule):
        normalize_rule({"isRecurring": True, "startDate": "next tuesday"})


def test_missing_start_date_defaults_to_today() -> None:
    rule = normalize_rule({"isRecurring": True})
    assert rule.start_date == date.today()


def test_non_recurring_rule_drops_other_fields() -> None:
    rule = normalize_rule({"isRecurring": False, "frequency": "WEEKLY", "interval": "abc", "startDate": "2024-01-01"})
    assert rule == RecurrenceRule()
    assert rule.start_date is None


def test_normalize_none_and_json() -> None:
    assert normalize_rule(None) == RecurrenceRule()
    rule = normalize_rule('{"isRecurring": true, "frequency": "YEARLY", "startDate": "2024-03-05"}')
    assert rule.frequency == Frequency.YEARLY


def test_normalize_rejects_garbage() -> None:
    with pytest.raises(InvalidRule):
        normalize_rule("{not json")
    with pytest.raises(InvalidRule):
        normalize_rule(42)


def test_rule_is_immutable() -> None:
    rule = normalize_rule({"isRecurring": True, "startDate": "2024-01-01"})
    with pytest.raises(ValidationError):
        rule.interval = 5


def test_rule_dump_uses_aliases() -> None:
    rule = _weekly([3, 1])
    dumped = rule.model_dump(mode="json", by_alias=True)
    assert dumped["weekDays"] == [1, 3]
    assert dumped["startDate"] == "2024-01-01"
    assert normalize_rule(dumped) == rule


def test_task_normalizes_recurrence() -> None:
    task = Task(title="Water plants", recurrence={"isRecurring": True, "frequency": "WEEKLY", "weekDays": [5, 1], "startDate": "2024-01-01"})
    assert task.is_recurring
    assert task.recurrence.week_days == (1, 5)
    assert "Repeats every week on Monday, Friday starting 2024-01-01" in task.readable_string


def test_task_toggle_completion() -> None:
    task = Task(title="Pay rent")
    before = task.updated_at
    task.toggle_completion()
    assert task.completed
    assert task.updated_at >= before
    task.toggle_completion()
    assert not task.completed
