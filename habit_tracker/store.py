"""
Application store: immutable state, a pure reducer, and a dispatch loop that
persists whatever changed after each transition.
"""
import datetime
import logging
from dataclasses import dataclass, field, replace
from typing import Optional

from habit_tracker import habits as habit_ops
from habit_tracker.gamification import check_badges, default_badges, merge_badges, newly_unlocked
from habit_tracker.models import DEFAULT_THEME, User

logger = logging.getLogger(__name__)

SET_LOADING = "SET_LOADING"
SET_HABITS = "SET_HABITS"
ADD_HABIT = "ADD_HABIT"
UPDATE_HABIT = "UPDATE_HABIT"
DELETE_HABIT = "DELETE_HABIT"
REORDER_HABITS = "REORDER_HABITS"
TOGGLE_COMPLETION = "TOGGLE_COMPLETION"
SET_USER = "SET_USER"
SET_BADGES = "SET_BADGES"
SET_THEME = "SET_THEME"
SET_ONBOARDING = "SET_ONBOARDING"
INITIALIZE_DATA = "INITIALIZE_DATA"

HABIT_ACTIONS = {SET_HABITS, ADD_HABIT, UPDATE_HABIT, DELETE_HABIT, REORDER_HABITS, TOGGLE_COMPLETION}


@dataclass(frozen=True)
class AppState:
    habits: tuple = ()
    user: Optional[User] = None
    badges: tuple = field(default_factory=lambda: tuple(default_badges()))
    theme: str = DEFAULT_THEME
    is_loading: bool = True
    is_onboarding: bool = True


def action(action_type, payload=None):
    return {"type": action_type, "payload": payload}


def app_reducer(state, action):
    """Return the next state. Never mutates `state`."""
    kind = action.get("type")
    payload = action.get("payload")

    if kind == SET_LOADING:
        return replace(state, is_loading=bool(payload))
    elif kind == SET_HABITS:
        return replace(state, habits=tuple(payload))
    elif kind == ADD_HABIT:
        return replace(state, habits=state.habits + (payload,))
    elif kind == UPDATE_HABIT:
        return replace(state, habits=tuple(payload if h.id == payload.id else h for h in state.habits))
    elif kind == DELETE_HABIT:
        return replace(state, habits=tuple(h for h in state.habits if h.id != payload))
    elif kind == REORDER_HABITS:
        return replace(state, habits=tuple(payload))
    elif kind == TOGGLE_COMPLETION:
        # payload: {"id": ..., "today": date or None}
        return replace(state, habits=tuple(
            habit_ops.toggle_completion(h, payload.get("today")) if h.id == payload["id"] else h
            for h in state.habits
        ))
    elif kind == SET_USER:
        return replace(state, user=payload, is_onboarding=False)
    elif kind == SET_BADGES:
        return replace(state, badges=tuple(payload))
    elif kind == SET_THEME:
        return replace(state, theme=payload)
    elif kind == SET_ONBOARDING:
        return replace(state, is_onboarding=bool(payload))
    elif kind == INITIALIZE_DATA:
        return replace(
            state,
            habits=tuple(payload["habits"]),
            user=payload["user"],
            badges=tuple(payload["badges"]),
            theme=payload["theme"],
            is_loading=False,
            is_onboarding=payload["user"] is None,
        )
    return state


class Store:
    """
    Holds the current AppState and applies actions one at a time.
    `storage` is any object with save_*/load_* functions (see storage.LocalStorage);
    None keeps everything in memory.
    """

    def __init__(self, storage=None, clock=None, state=None):
        self.storage = storage
        self.clock = clock or datetime.datetime.now
        self.state = state or AppState()
        self.recent_unlocks = []

    def dispatch(self, action):
        previous = self.state
        self.state = app_reducer(previous, action)
        self.recent_unlocks = []
        if action.get("type") in HABIT_ACTIONS:
            self.recent_unlocks = self.check_and_unlock_badges()
        self._persist(previous, self.state)
        return self.state

    def _persist(self, before, after):
        if self.storage is None:
            return
        if after.habits != before.habits:
            self.storage.save_habits(after.habits)
        if after.user != before.user and after.user is not None:
            self.storage.save_user(after.user)
        if after.badges != before.badges:
            self.storage.save_badges(after.badges)
        if after.theme != before.theme:
            self.storage.save_theme(after.theme)

    def initialize(self):
        """Load persisted state, restore the badge catalogue and refresh cached streaks."""
        if self.storage is None:
            return self.dispatch(action(SET_LOADING, False))

        today = self.clock().date()
        self.state = app_reducer(self.state, action(INITIALIZE_DATA, {
            "habits": habit_ops.refresh_streaks(self.storage.load_habits(), today),
            "user": self.storage.load_user(),
            "badges": merge_badges(self.storage.load_badges()),
            "theme": self.storage.load_theme(),
        }))
        self.recent_unlocks = self.check_and_unlock_badges()
        if self.recent_unlocks:
            self.storage.save_badges(self.state.badges)
        logger.info("Loaded %d habits, %d badges unlocked",
                    len(self.state.habits), sum(b.unlocked for b in self.state.badges))
        return self.state

    def check_and_unlock_badges(self):
        """Run the badge rules; returns only the badges unlocked by this call."""
        before = self.state.badges
        after = check_badges(self.state.habits, before, now=self.clock())
        unlocked = newly_unlocked(before, after)
        if unlocked:
            self.state = app_reducer(self.state, action(SET_BADGES, after))
        return unlocked

    # --- convenience wrappers ---

    def add_habit(self, habit):
        return self.dispatch(action(ADD_HABIT, habit))

    def update_habit(self, habit):
        return self.dispatch(action(UPDATE_HABIT, habit))

    def delete_habit(self, habit_id):
        return self.dispatch(action(DELETE_HABIT, habit_id))

    def toggle_habit(self, habit_id, today=None):
        today = today or self.clock().date()
        return self.dispatch(action(TOGGLE_COMPLETION, {"id": habit_id, "today": today}))

    def reorder_habits(self, habits):
        return self.dispatch(action(REORDER_HABITS, habits))

    def move_habit(self, habit_id, new_index, today=None):
        today = today or self.clock().date()
        return self.reorder_habits(habit_ops.move_habit(self.state.habits, habit_id, new_index, today))

    def complete_onboarding(self, name):
        return self.dispatch(action(SET_USER, User(name=name, created_at=self.clock())))

    def set_theme(self, theme):
        return self.dispatch(action(SET_THEME, theme))

    def get_habit(self, habit_id):
        return next((h for h in self.state.habits if h.id == habit_id), None)
