"""
Local persistence for habits, user, badges and theme.

Every value is one JSON document under its own key. Reads never raise: a
missing or corrupt document degrades to an empty/default value and is logged.
Writes are best effort: failures are logged and the session carries on.
"""
import datetime
import json
import logging
import sqlite3

from habit_tracker import database
from habit_tracker.models import DEFAULT_THEME, THEMES, Badge, Habit, User

logger = logging.getLogger(__name__)

STORAGE_KEYS = {
    "habits": "habit-tracker-habits",
    "user": "habit-tracker-user",
    "badges": "habit-tracker-badges",
    "theme": "habit-tracker-theme",
}

STORAGE_ERRORS = (sqlite3.Error, OSError, ValueError, TypeError, KeyError, AttributeError)


def _save(name, document):
    try:
        database.set_value(STORAGE_KEYS[name], json.dumps(document, ensure_ascii=False))
        return True
    except STORAGE_ERRORS:
        logger.exception("Failed to save %s", name)
        return False


def _load(name):
    raw = database.get_value(STORAGE_KEYS[name])
    return json.loads(raw) if raw is not None else None


# --- HABITS ---

def save_habits(habits):
    return _save("habits", [h.to_dict() for h in habits])


def load_habits():
    try:
        stored = _load("habits")
        if not stored:
            return []
        return [Habit.from_dict(item) for item in stored]
    except STORAGE_ERRORS:
        logger.exception("Failed to load habits")
        return []


# --- USER ---

def save_user(user):
    return _save("user", user.to_dict() if user is not None else None)


def load_user():
    try:
        stored = _load("user")
        return User.from_dict(stored) if stored else None
    except STORAGE_ERRORS:
        logger.exception("Failed to load user")
        return None


# --- BADGES ---

def save_badges(badges):
    return _save("badges", [b.to_dict() for b in badges])


def load_badges():
    try:
        stored = _load("badges")
        if not stored:
            return []
        return [Badge.from_dict(item) for item in stored]
    except STORAGE_ERRORS:
        logger.exception("Failed to load badges")
        return []


# --- THEME ---

def save_theme(theme):
    return _save("theme", theme)


def load_theme():
    try:
        theme = _load("theme")
    except STORAGE_ERRORS:
        logger.exception("Failed to load theme")
        return DEFAULT_THEME
    return theme if theme in THEMES else DEFAULT_THEME


# --- UTILITIES ---

def clear_all_data():
    for name, key in STORAGE_KEYS.items():
        try:
            database.delete_value(key)
        except STORAGE_ERRORS:
            logger.exception("Failed to clear %s", name)


def export_data(now=None):
    """Snapshot all stored keys as one JSON document."""
    now = now or datetime.datetime.now()
    user = load_user()
    data = {
        "habits": [h.to_dict() for h in load_habits()],
        "user": user.to_dict() if user else None,
        "badges": [b.to_dict() for b in load_badges()],
        "theme": load_theme(),
        "exportedAt": now.isoformat(),
    }
    return json.dumps(data, indent=2, ensure_ascii=False)


def import_data(json_data):
    """
    Restore from an export document.
    Nothing is written unless the document parses; after that each present key
    is written independently and missing keys are left untouched.
    """
    try:
        data = json.loads(json_data)
        if not isinstance(data, dict):
            raise ValueError("Import document must be a JSON object")
    except (TypeError, ValueError):
        logger.exception("Failed to import data")
        return False

    for name in STORAGE_KEYS:
        if data.get(name):
            _save(name, data[name])

    logger.info("Imported keys: %s", ", ".join(k for k in STORAGE_KEYS if data.get(k)) or "none")
    return True


class LocalStorage:
    """Bundle of the storage functions, injectable into a Store."""

    save_habits = staticmethod(save_habits)
    load_habits = staticmethod(load_habits)
    save_user = staticmethod(save_user)
    load_user = staticmethod(load_user)
    save_badges = staticmethod(save_badges)
    load_badges = staticmethod(load_badges)
    save_theme = staticmethod(save_theme)
    load_theme = staticmethod(load_theme)
