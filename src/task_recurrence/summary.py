from task_recurrence.domain.rule import Frequency, RecurrenceRule, WEEKDAY_NAMES


def _cadence(rule: RecurrenceRule) -> str:
    unit = rule.frequency.unit
    if rule.interval == 1:
        return f"every {unit}"
    return f"every {rule.interval} {unit}s"


def _weekday_names(rule: RecurrenceRule) -> str:
    if rule.week_days:
        days = rule.week_days
    else:
        days = (rule.start_date.isoweekday(),) if rule.start_date else ()
    return ", ".join(WEEKDAY_NAMES[day - 1] for day in sorted(days))


def describe(rule: RecurrenceRule) -> str:
    """
    Render a rule as a sentence, e.g. "Repeats every 2 weeks on Monday, Wednesday starting 2024-01-01".

    Non-recurring rules render as an empty string.
    """
    if not rule.is_recurring:
        return ""

    if rule.frequency == Frequency.MONTHLY:
        text = f"Repeats on day {rule.month_day} of {_cadence(rule)}"
    elif rule.frequency == Frequency.WEEKLY:
        text = f"Repeats {_cadence(rule)}"
        days = _weekday_names(rule)
        if days:
            text += f" on {days}"
    else:
        text = f"Repeats {_cadence(rule)}"

    if rule.start_date:
        text += f" starting {rule.start_date.isoformat()}"
    if rule.has_end_date and rule.end_date:
        text += f" until {rule.end_date.isoformat()}"
    return text
