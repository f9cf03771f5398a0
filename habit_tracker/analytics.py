import math
from dataclasses import dataclass
from datetime import timedelta

import pandas as pd

from habit_tracker.utils import day_key, get_todays_habits, today as current_day

WEEKDAY_ORDER = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']


@dataclass(frozen=True)
class HabitStats:
    total_completions: int
    current_streak: int
    best_streak: int
    completion_rate_7: int
    completion_rate_30: int
    is_completed_today: bool


def calculate_current_streak(completions, today=None):
    """
    Count consecutive completed days ending today.
    A habit done yesterday but not yet today keeps its streak (one grace day);
    anything older than yesterday breaks it.
    """
    if not completions:
        return 0

    today = day_key(today) if today is not None else current_day()
    days = sorted({day_key(c) for c in completions}, reverse=True)

    yesterday = today - timedelta(days=1)
    if days[0] == today:
        cursor = yesterday
    elif days[0] == yesterday:
        cursor = yesterday - timedelta(days=1)
    else:
        return 0

    streak = 1
    for d in days[1:]:
        if d != cursor:
            break
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def calculate_best_streak(completions):
    """Longest run of consecutive days anywhere in the history."""
    if not completions:
        return 0

    days = sorted(day_key(c) for c in completions)
    best = running = 1
    for prev, curr in zip(days, days[1:]):
        gap = (curr - prev).days
        if gap == 1:
            running += 1
            best = max(best, running)
        elif gap > 1:
            running = 1
    return best


def _percent(part, whole):
    """Rounded (half-up) integer percentage."""
    return math.floor(part / whole * 100 + 0.5)


def calculate_completion_rate(habit, days=30, today=None):
    """
    Percentage of the last `days` calendar days with a completion.
    Rated against calendar days, not scheduled days, so weekly/custom habits
    score lower by construction.
    """
    today = day_key(today) if today is not None else current_day()
    start = today - timedelta(days=days)

    in_window = sum(1 for d in habit.completions if start <= day_key(d) <= today)
    return max(0, min(100, _percent(in_window, days)))


def is_completed_on(habit, day):
    day = day_key(day)
    return any(day_key(c) == day for c in habit.completions)


def get_habit_stats(habit, today=None):
    today = day_key(today) if today is not None else current_day()
    return HabitStats(
        total_completions=len(habit.completions),
        current_streak=habit.streak,
        best_streak=calculate_best_streak(habit.completions),
        completion_rate_7=calculate_completion_rate(habit, 7, today),
        completion_rate_30=calculate_completion_rate(habit, 30, today),
        is_completed_today=is_completed_on(habit, today),
    )


def get_max_streak(habits):
    return max((h.streak for h in habits), default=0)


def get_total_completions(habits):
    return sum(len(h.completions) for h in habits)


def get_dashboard_summary(habits, today=None):
    """Header numbers for the dashboard: today's progress plus lifetime totals."""
    today = day_key(today) if today is not None else current_day()
    due = get_todays_habits(habits, today)
    done = [h for h in due if is_completed_on(h, today)]
    return {
        "due_today": len(due),
        "completed_today": len(done),
        "today_rate": _percent(len(done), len(due)) if due else 0,
        "total_streak": sum(h.streak for h in habits),
        "total_completions": get_total_completions(habits),
    }


def get_day_of_week_stats(habits):
    """
    Return total completions by day of week (Sunday first).
    """
    dates = [day_key(c) for h in habits for c in h.completions]
    if not dates:
        return pd.DataFrame(columns=['Day', 'Completions'])

    df = pd.DataFrame({'date': pd.to_datetime(dates)})
    df['day_name'] = df['date'].dt.day_name()

    stats = df['day_name'].value_counts().reindex(WEEKDAY_ORDER, fill_value=0).reset_index()
    stats.columns = ['Day', 'Completions']
    return stats
