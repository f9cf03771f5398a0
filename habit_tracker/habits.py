import datetime
import uuid
from dataclasses import replace

from habit_tracker.analytics import calculate_current_streak, is_completed_on
from habit_tracker.models import FREQUENCIES, Habit
from habit_tracker.utils import day_key, get_todays_habits, today as current_day

EDITABLE_FIELDS = {"title", "emoji", "category", "frequency", "custom_days"}

SAMPLE_HABITS = [
    {"title": "Drink 8 glasses of water", "emoji": "💧", "category": "Health & Fitness"},
    {"title": "Read for 30 minutes", "emoji": "📚", "category": "Learning"},
    {"title": "Exercise", "emoji": "💪", "category": "Health & Fitness"},
    {"title": "Meditate", "emoji": "🧘", "category": "Mindfulness"},
    {"title": "Write in journal", "emoji": "📝", "category": "Productivity"},
]


def generate_id():
    return uuid.uuid4().hex


def _check_frequency(frequency):
    if frequency not in FREQUENCIES:
        raise ValueError(f"Unknown frequency '{frequency}', expected one of {FREQUENCIES}")


def create_habit(title, emoji="📝", category="Other", frequency="daily",
                 custom_days=None, order=0, habit_id=None, created_at=None):
    """Create a fresh habit: no completions, zero streak."""
    _check_frequency(frequency)
    return Habit(
        id=habit_id or generate_id(),
        title=title,
        emoji=emoji,
        category=category,
        frequency=frequency,
        custom_days=tuple(custom_days) if custom_days is not None else None,
        created_at=created_at or datetime.datetime.now(),
        order=order,
    )


def edit_habit(habit, **changes):
    """Update display/schedule fields. Completion history is never touched here."""
    illegal = set(changes) - EDITABLE_FIELDS
    if illegal:
        raise ValueError(f"Fields cannot be edited: {', '.join(sorted(illegal))}")
    if "frequency" in changes:
        _check_frequency(changes["frequency"])
    if changes.get("custom_days") is not None:
        changes["custom_days"] = tuple(changes["custom_days"])
    return replace(habit, **changes)


def toggle_completion(habit, today=None):
    """
    Mark today done, or undo it if already marked.
    Returns a new Habit with streak and last_completed recomputed.
    """
    today = day_key(today) if today is not None else current_day()
    days = {day_key(c) for c in habit.completions}

    if today in days:
        days.discard(today)
        last_completed = max(days) if days else None
    else:
        days.add(today)
        last_completed = today

    completions = tuple(sorted(days))
    return replace(
        habit,
        completions=completions,
        streak=calculate_current_streak(completions, today),
        last_completed=last_completed,
    )


def is_completed_today(habit, today=None):
    today = day_key(today) if today is not None else current_day()
    return is_completed_on(habit, today)


def refresh_streak(habit, today=None):
    """Recompute cached fields from completions (e.g. after the day rolls over)."""
    completions = tuple(sorted({day_key(c) for c in habit.completions}))
    return replace(
        habit,
        completions=completions,
        streak=calculate_current_streak(completions, today),
        last_completed=completions[-1] if completions else None,
    )


def refresh_streaks(habits, today=None):
    return [refresh_streak(h, today) for h in habits]


def reorder_habits(habits, ordered_ids):
    """
    Assign order 0..n-1 following `ordered_ids`; habits not listed keep their order.
    Returns the habits in their original list positions.
    """
    positions = {habit_id: idx for idx, habit_id in enumerate(ordered_ids)}
    return [
        replace(h, order=positions[h.id]) if h.id in positions else h
        for h in habits
    ]


def move_habit(habits, habit_id, new_index, today=None):
    """Drag-and-drop within today's list: move one habit to a new display slot."""
    agenda = [h.id for h in get_todays_habits(habits, today)]
    if habit_id not in agenda:
        return list(habits)

    agenda.remove(habit_id)
    new_index = max(0, min(new_index, len(agenda)))
    agenda.insert(new_index, habit_id)
    return reorder_habits(habits, agenda)


def generate_sample_habits():
    return [create_habit(order=idx, **data) for idx, data in enumerate(SAMPLE_HABITS)]
