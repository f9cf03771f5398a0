"""Tests for local persistence, export and import."""

# pylint: disable=unused-argument

import json
import sqlite3
from dataclasses import replace

from habit_tracker import database, storage
from habit_tracker.gamification import default_badges
from habit_tracker.models import User
from tests.helpers import NOW, TODAY, days_ago


def test_habits_round_trip(tmp_db, make_habit):
    habits = [
        make_habit([days_ago(1), TODAY], streak=2, frequency="custom", custom_days=[1, 3, 5]),
        make_habit(order=1),
    ]

    assert storage.save_habits(habits)

    assert storage.load_habits() == habits


def test_completions_persist_as_iso_strings(tmp_db, make_habit):
    storage.save_habits([make_habit([TODAY])])

    stored = json.loads(database.get_value(storage.STORAGE_KEYS["habits"]))

    assert stored[0]["completions"] == ["2024-01-10"]
    assert stored[0]["lastCompleted"] == "2024-01-10"


def test_user_badges_and_theme_round_trip(tmp_db):
    user = User(name="Sam", created_at=NOW)
    badges = [replace(b, unlocked=True, unlocked_at=NOW) for b in default_badges()]

    storage.save_user(user)
    storage.save_badges(badges)
    storage.save_theme("dark")

    assert storage.load_user() == user
    assert storage.load_badges() == badges
    assert storage.load_theme() == "dark"


def test_empty_storage_loads_defaults(tmp_db):
    assert storage.load_habits() == []
    assert storage.load_user() is None
    assert storage.load_badges() == []
    assert storage.load_theme() == "system"


def test_corrupt_documents_degrade_to_defaults(tmp_db):
    database.set_value(storage.STORAGE_KEYS["habits"], "{not json")
    database.set_value(storage.STORAGE_KEYS["user"], json.dumps({"nickname": "no name key"}))
    database.set_value(storage.STORAGE_KEYS["badges"], json.dumps([{"unlocked": True}]))
    database.set_value(storage.STORAGE_KEYS["theme"], json.dumps("neon"))

    assert storage.load_habits() == []
    assert storage.load_user() is None
    assert storage.load_badges() == []
    assert storage.load_theme() == "system"


def test_read_failure_degrades(tmp_db, monkeypatch):
    def broken(key):
        raise sqlite3.OperationalError("disk I/O error")

    monkeypatch.setattr(database, "get_value", broken)

    assert storage.load_habits() == []
    assert storage.load_theme() == "system"


def test_write_failure_is_not_fatal(tmp_db, monkeypatch, make_habit):
    def broken(key, value):
        raise sqlite3.OperationalError("database is locked")

    monkeypatch.setattr(database, "set_value", broken)

    assert storage.save_habits([make_habit()]) is False


def test_export_document_shape(tmp_db, make_habit):
    storage.save_habits([make_habit([TODAY])])
    storage.save_theme("light")

    data = json.loads(storage.export_data(now=NOW))

    assert set(data) == {"habits", "user", "badges", "theme", "exportedAt"}
    assert data["theme"] == "light"
    assert data["user"] is None
    assert data["exportedAt"] == NOW.isoformat()
    assert data["habits"][0]["completions"] == ["2024-01-10"]


def test_export_then_import_restores_everything(tmp_db, make_habit):
    habits = [make_habit([days_ago(2), days_ago(1)], streak=2)]
    user = User(name="Sam", created_at=NOW)
    storage.save_habits(habits)
    storage.save_user(user)
    storage.save_theme("dark")
    exported = storage.export_data(now=NOW)

    storage.clear_all_data()
    assert storage.load_habits() == []

    assert storage.import_data(exported)
    assert storage.load_habits() == habits
    assert storage.load_user() == user
    assert storage.load_theme() == "dark"


def test_partial_import_only_touches_present_keys(tmp_db, make_habit):
    habits = [make_habit([TODAY])]
    user = User(name="Sam", created_at=NOW)
    storage.save_habits(habits)
    storage.save_user(user)
    storage.save_badges(default_badges())
    storage.save_theme("light")

    assert storage.import_data('{"theme": "dark"}')

    assert storage.load_theme() == "dark"
    assert storage.load_habits() == habits
    assert storage.load_user() == user
    assert storage.load_badges() == default_badges()


def test_unparseable_import_changes_nothing(tmp_db, make_habit):
    habits = [make_habit([TODAY])]
    storage.save_habits(habits)
    storage.save_theme("light")

    assert storage.import_data("{ this is not json") is False
    assert storage.import_data("[1, 2, 3]") is False

    assert storage.load_habits() == habits
    assert storage.load_theme() == "light"


def test_clear_all_data(tmp_db, make_habit):
    storage.save_habits([make_habit()])
    storage.save_theme("dark")

    storage.clear_all_data()

    assert storage.load_habits() == []
    assert storage.load_theme() == "system"


def test_unusable_database_path_degrades(tmp_path, monkeypatch, make_habit):
    blocker = tmp_path / "afile"
    blocker.write_text("not a directory")
    monkeypatch.setattr(database, "DB_PATH", str(blocker / "habits.db"))

    assert storage.load_habits() == []
    assert storage.load_user() is None
    assert storage.load_badges() == []
    assert storage.load_theme() == "system"
    assert storage.save_habits([make_habit()]) is False
    assert storage.save_theme("dark") is False
    storage.clear_all_data()
