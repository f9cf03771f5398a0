import datetime
import logging
from dataclasses import replace

from habit_tracker.analytics import get_max_streak, get_total_completions
from habit_tracker.models import Badge

logger = logging.getLogger(__name__)

# --- CONFIGURATION ---
BADGES = [
    Badge("first-habit", "Getting Started", "Create your first habit", "🌱"),
    Badge("streak-3", "Consistent", "Maintain a 3-day streak", "🔥"),
    Badge("streak-7", "Week Warrior", "Maintain a 7-day streak", "⭐"),
    Badge("streak-30", "Month Master", "Maintain a 30-day streak", "👑"),
    Badge("habits-5", "Multi-tasker", "Create 5 different habits", "🎯"),
    Badge("completions-100", "Century Club", "Complete 100 habits total", "💯"),
]

# badge id -> unlock condition over (habit_count, max_streak, total_completions)
BADGE_RULES = {
    "first-habit": lambda count, streak, total: count >= 1,
    "habits-5": lambda count, streak, total: count >= 5,
    "streak-3": lambda count, streak, total: streak >= 3,
    "streak-7": lambda count, streak, total: streak >= 7,
    "streak-30": lambda count, streak, total: streak >= 30,
    "completions-100": lambda count, streak, total: total >= 100,
}

# --- PURE LOGIC ---


def default_badges():
    return list(BADGES)


def merge_badges(saved):
    """
    Combine saved badge state with the catalogue.
    Saved entries win; catalogue badges missing from storage are appended locked.
    """
    if not saved:
        return default_badges()
    known = {b.id for b in saved}
    return list(saved) + [b for b in BADGES if b.id not in known]


def check_badges(habits, badges, now=None):
    """
    Unlock every badge whose rule now holds.
    Unlocked badges are left exactly as they are; nothing is ever re-locked.
    """
    now = now or datetime.datetime.now()
    habit_count = len(habits)
    max_streak = get_max_streak(habits)
    total = get_total_completions(habits)

    updated = []
    for badge in badges:
        rule = BADGE_RULES.get(badge.id)
        if not badge.unlocked and rule and rule(habit_count, max_streak, total):
            logger.info("Badge unlocked: %s", badge.id)
            badge = replace(badge, unlocked=True, unlocked_at=now)
        updated.append(badge)
    return updated


def newly_unlocked(before, after):
    """Badges unlocked in `after` that were locked (or absent) in `before`."""
    was_unlocked = {b.id for b in before if b.unlocked}
    return [b for b in after if b.unlocked and b.id not in was_unlocked]
