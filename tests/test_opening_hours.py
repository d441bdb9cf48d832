from __future__ import annotations

from datetime import datetime

import pytest

from core.opening_hours import WEEKDAY_NAMES, is_open_on, resolve_weekday
from schemas.hospital import DaySelector

WEEK = [
    "Monday: Closed",
    "Tuesday: 9:00 AM – 5:00 PM",
    "Wednesday: 9:00 AM – 5:00 PM",
    "Thursday: 9:00 AM – 5:00 PM",
    "Friday: 9:00 AM – 5:00 PM",
    "Saturday: 9:00 AM – 12:00 PM",
    "Sunday: CLOSED",
]


@pytest.mark.parametrize("weekday_index", range(7))
def test_missing_schedule_counts_as_open(weekday_index: int):
    assert is_open_on(weekday_index, None) is True


def test_closed_line_for_target_day_counts_as_closed():
    assert is_open_on(1, ["Monday: Closed"]) is False


def test_hours_line_for_target_day_counts_as_open():
    assert is_open_on(1, ["Monday: 9:00–17:00"]) is True


def test_closed_match_is_case_insensitive():
    assert is_open_on(0, WEEK) is False
    assert is_open_on(2, WEEK) is True


def test_no_line_for_target_day_counts_as_open():
    assert is_open_on(3, ["Monday: Closed"]) is True


def test_other_display_language_always_reads_as_open():
    japanese_week = [
        "月曜日: 休業日",
        "火曜日: 9時00分～17時00分",
        "日曜日: 休業日",
    ]
    for weekday_index in range(7):
        assert is_open_on(weekday_index, japanese_week) is True


def test_weekday_names_start_on_sunday():
    assert WEEKDAY_NAMES[0] == "Sunday"
    assert WEEKDAY_NAMES[6] == "Saturday"


def test_resolve_weekday_today_and_tomorrow():
    saturday = datetime(2024, 6, 1, 23, 30)
    assert resolve_weekday(DaySelector.TODAY, saturday) == 6
    assert resolve_weekday(DaySelector.TOMORROW, saturday) == 0


def test_resolve_weekday_for_a_monday():
    monday = datetime(2024, 6, 3, 8, 0)
    assert resolve_weekday(DaySelector.TODAY, monday) == 1
