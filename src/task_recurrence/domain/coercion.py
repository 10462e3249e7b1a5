import json
import logging
from datetime import date, datetime
from typing import Any, Tuple

logger = logging.getLogger(__name__)


def _to_int(value: Any, field: str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"{field} must be a number, got a boolean")
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{field} must be a whole number, got {value}")
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            raise ValueError(f"{field} must be numeric, got {value!r}")
    raise ValueError(f"{field} must be numeric, got {type(value).__name__}")


def is_unset(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def coerce_interval(value: Any) -> int:
    """
    Coerce a raw interval to a positive integer.

    Missing values default to 1. Non-positive values are replaced by 1 rather than
    rejected; anything that is not numeric raises ValueError.
    """
    if is_unset(value):
        return 1
    interval = _to_int(value, "interval")
    if interval < 1:
        logger.warning(f"Interval {interval} is not positive, defaulting to 1")
        return 1
    return interval


def coerce_month_day(value: Any) -> int:
    # Range is checked at expansion time, "day 31" is only invalid for some months.
    if is_unset(value):
        return 1
    return _to_int(value, "month_day")


def parse_week_days(value: Any) -> Tuple[int, ...]:
    """
    Parse a weekday selection into a sorted tuple of distinct ISO weekdays (1=Monday ... 7=Sunday).

    Storage layers may hand over the list as JSON text; text that cannot be decoded
    yields an empty selection. Entries outside 1..7 are dropped.

    Raises:
        ValueError: If the list contains entries that are not integers.
    """
    if is_unset(value):
        return ()
    if isinstance(value, str):
        try:
            value = json.loads(value)
        except json.JSONDecodeError:
            logger.warning(f"Could not parse week days {value!r}, using an empty selection")
            return ()
        if value is None:
            return ()
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = [value]
    if not isinstance(value, (list, tuple, set, frozenset)):
        logger.warning(f"Unsupported week days value {value!r}, using an empty selection")
        return ()

    days = set()
    for entry in value:
        day = _to_int(entry, "week_days")
        if 1 <= day <= 7:
            days.add(day)
        else:
            logger.warning(f"Dropping week day {day}, expected a value between 1 and 7")
    return tuple(sorted(days))


def coerce_date(value: Any) -> Any:
    """
    Reduce datetimes and ISO timestamp strings to calendar dates.

    Other values are passed through for pydantic to validate.
    """
    if is_unset(value):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            raise ValueError(f"Invalid date {value!r}")
    return value
