from __future__ import annotations

from datetime import datetime, timedelta
from typing import Sequence

from schemas.hospital import DaySelector

# Sunday=0, matching the provider's weekday_text convention.
WEEKDAY_NAMES: tuple[str, ...] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)

_CLOSED_MARKER = "closed"


def is_open_on(weekday_index: int, lines: Sequence[str] | None) -> bool:
    """
    Decide whether a facility is open on a weekday from its schedule lines.

    Missing schedules, and schedules with no line for the weekday, count as open.
    A line like "Monday: Closed" is the only way to be filtered out.
    """
    if lines is None:
        return True

    weekday_name = WEEKDAY_NAMES[weekday_index]
    line = next(
        (item for item in lines if isinstance(item, str) and item.startswith(weekday_name)),
        None,
    )
    if line is None:
        return True
    return _CLOSED_MARKER not in line.lower()


def to_sunday_first_index(moment: datetime) -> int:
    # datetime.weekday() is Monday=0.
    return (moment.weekday() + 1) % 7


def resolve_weekday(day: DaySelector, now: datetime) -> int:
    target = now + timedelta(days=1) if day is DaySelector.TOMORROW else now
    return to_sunday_first_index(target)
