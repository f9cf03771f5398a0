import datetime

import pandas as pd

SUNDAY = 0


def day_key(value):
    """
    Normalize a timestamp to its calendar day (datetime.date) in local time.
    Accepts date, datetime, pandas Timestamp or an ISO-8601 string.
    """
    if isinstance(value, str):
        value = pd.Timestamp(value)
    if isinstance(value, pd.Timestamp):
        value = value.to_pydatetime()
    if isinstance(value, datetime.datetime):
        # Aware timestamps are shifted into the local zone before truncation
        if value.tzinfo is not None:
            value = value.astimezone()
        return value.date()
    if isinstance(value, datetime.date):
        return value
    raise TypeError(f"Cannot derive a day from {type(value).__name__}")


def today():
    return datetime.date.today()


def days_between(start, end):
    """Signed number of days from start to end (positive when end is later)."""
    return (day_key(end) - day_key(start)).days


def weekday_index(day):
    """Weekday with Sunday=0 .. Saturday=6."""
    return day_key(day).isoweekday() % 7


def is_habit_due(habit, day=None):
    """
    Check if a habit is scheduled on the given day.
    Weekly habits without explicit days fall on Sunday.
    """
    day = day_key(day) if day is not None else today()
    weekday = weekday_index(day)

    if habit.frequency == 'daily':
        return True
    elif habit.frequency == 'weekly':
        if habit.custom_days is not None:
            return weekday in habit.custom_days
        return weekday == SUNDAY
    elif habit.frequency == 'custom':
        if not habit.custom_days:
            return False
        return weekday in habit.custom_days

    return True


def get_todays_habits(habits, day=None):
    """Habits due on `day`, in display order (stable on ties)."""
    return sorted(
        (h for h in habits if is_habit_due(h, day)),
        key=lambda h: h.order,
    )
