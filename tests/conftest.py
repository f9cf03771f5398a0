"""Shared fixtures for the habit tracker tests."""

# pylint: disable=redefined-outer-name

from dataclasses import replace

import pytest

from habit_tracker import database
from habit_tracker.habits import create_habit
from tests.helpers import NOW


@pytest.fixture
def tmp_db(tmp_path, monkeypatch):
    """Point the key-value store at a throwaway SQLite file."""
    path = tmp_path / "habits.db"
    monkeypatch.setattr(database, "DB_PATH", str(path))
    return path


@pytest.fixture
def make_habit():
    """Factory for habits with a given completion history."""
    counter = iter(range(1000))

    def _make(completions=(), streak=0, **kwargs):
        idx = next(counter)
        kwargs.setdefault("title", f"Habit {idx}")
        kwargs.setdefault("habit_id", f"habit-{idx}")
        kwargs.setdefault("created_at", NOW)
        habit = create_habit(**kwargs)
        return replace(
            habit,
            completions=tuple(sorted(completions)),
            streak=streak,
            last_completed=max(completions) if completions else None,
        )

    return _make
