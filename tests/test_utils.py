"""Tests for day-key normalization and schedule checks."""

import datetime

import pandas as pd
import pytest

from habit_tracker.utils import day_key, days_between, get_todays_habits, is_habit_due, weekday_index
from tests.helpers import TODAY

MONDAY = datetime.date(2024, 1, 8)
TUESDAY = datetime.date(2024, 1, 9)
SUNDAY = datetime.date(2024, 1, 7)


@pytest.mark.parametrize(
    "value",
    [
        datetime.date(2024, 1, 10),
        datetime.datetime(2024, 1, 10, 0, 0),
        datetime.datetime(2024, 1, 10, 23, 59, 59),
        pd.Timestamp("2024-01-10 18:45"),
        "2024-01-10",
        "2024-01-10T07:15:00",
    ],
)
def test_day_key_ignores_time_of_day(value):
    assert day_key(value) == datetime.date(2024, 1, 10)


def test_day_key_rejects_garbage():
    with pytest.raises(ValueError):
        day_key("not a date")


def test_days_between_is_signed():
    assert days_between(datetime.date(2024, 1, 1), TODAY) == 9
    assert days_between(TODAY, datetime.date(2024, 1, 1)) == -9
    assert days_between(TODAY, datetime.datetime(2024, 1, 10, 22, 0)) == 0


def test_weekday_index_starts_on_sunday():
    assert weekday_index(SUNDAY) == 0
    assert weekday_index(MONDAY) == 1
    assert weekday_index(datetime.date(2024, 1, 13)) == 6


def test_daily_habit_is_always_due(make_habit):
    habit = make_habit(frequency="daily")
    assert all(is_habit_due(habit, SUNDAY + datetime.timedelta(days=i)) for i in range(7))


def test_weekly_habit_defaults_to_sunday(make_habit):
    habit = make_habit(frequency="weekly")
    assert is_habit_due(habit, SUNDAY)
    assert not is_habit_due(habit, MONDAY)


def test_weekly_habit_uses_custom_days_when_present(make_habit):
    habit = make_habit(frequency="weekly", custom_days=[2])
    assert is_habit_due(habit, TUESDAY)
    assert not is_habit_due(habit, SUNDAY)


def test_weekly_habit_with_empty_days_is_never_due(make_habit):
    habit = make_habit(frequency="weekly", custom_days=[])
    assert not any(is_habit_due(habit, SUNDAY + datetime.timedelta(days=i)) for i in range(7))


def test_custom_habit_only_due_on_selected_weekdays(make_habit):
    habit = make_habit(frequency="custom", custom_days=[1, 3, 5])
    assert is_habit_due(habit, MONDAY)
    assert is_habit_due(habit, TODAY)
    assert not is_habit_due(habit, TUESDAY)


def test_custom_habit_without_days_is_never_due(make_habit):
    habit = make_habit(frequency="custom")
    assert not any(is_habit_due(habit, SUNDAY + datetime.timedelta(days=i)) for i in range(7))


def test_todays_habits_filtered_and_sorted_stably(make_habit):
    first = make_habit(order=1, title="first")
    second = make_habit(order=1, title="second")
    top = make_habit(order=0, title="top")
    not_due = make_habit(order=0, frequency="custom", custom_days=[2])

    agenda = get_todays_habits([first, second, not_due, top], TODAY)

    assert [h.title for h in agenda] == ["top", "first", "second"]
