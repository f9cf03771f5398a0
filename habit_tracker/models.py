import datetime
from dataclasses import dataclass, field
from typing import Optional

from habit_tracker.utils import day_key

FREQUENCIES = ("daily", "weekly", "custom")
THEMES = ("light", "dark", "system")
DEFAULT_THEME = "system"

HABIT_CATEGORIES = [
    "Health & Fitness",
    "Learning",
    "Productivity",
    "Relationships",
    "Hobbies",
    "Mindfulness",
    "Finance",
    "Other",
]

HABIT_EMOJIS = [
    "💪", "🏃", "📚", "💻", "🧘", "💧", "🥗", "🏋️",
    "📖", "✍️", "🎯", "🌱", "💰", "🎨", "🎵", "📝",
    "🧠", "❤️", "🏠", "🚶", "🎸", "📊", "🔬", "🍎",
]


def _parse_timestamp(value):
    if value is None:
        return None
    if isinstance(value, datetime.datetime):
        return value
    return datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _format_timestamp(value):
    return value.isoformat() if value is not None else None


@dataclass(frozen=True)
class Habit:
    id: str
    title: str
    emoji: str = "📝"
    category: str = "Other"
    frequency: str = "daily"
    custom_days: Optional[tuple] = None
    created_at: Optional[datetime.datetime] = None
    completions: tuple = ()
    streak: int = 0
    last_completed: Optional[datetime.date] = None
    order: int = 0

    def to_dict(self):
        """Serialize to the persisted JSON shape (camelCase keys, ISO dates)."""
        return {
            "id": self.id,
            "title": self.title,
            "emoji": self.emoji,
            "category": self.category,
            "frequency": self.frequency,
            "customDays": list(self.custom_days) if self.custom_days is not None else None,
            "createdAt": _format_timestamp(self.created_at),
            "streak": self.streak,
            "lastCompleted": self.last_completed.isoformat() if self.last_completed else None,
            "completions": [d.isoformat() for d in self.completions],
            "order": self.order,
        }

    @classmethod
    def from_dict(cls, data):
        """
        Build a Habit from a persisted record.
        Completions are collapsed to unique day keys, sorted ascending.
        """
        frequency = data.get("frequency", "daily")
        if frequency not in FREQUENCIES:
            raise ValueError(f"Unknown frequency: {frequency}")

        custom_days = data.get("customDays")
        last_completed = data.get("lastCompleted")
        return cls(
            id=str(data["id"]),
            title=data.get("title", ""),
            emoji=data.get("emoji", "📝"),
            category=data.get("category", "Other"),
            frequency=frequency,
            custom_days=tuple(int(d) for d in custom_days) if custom_days is not None else None,
            created_at=_parse_timestamp(data.get("createdAt")),
            completions=tuple(sorted({day_key(c) for c in data.get("completions", [])})),
            streak=int(data.get("streak", 0)),
            last_completed=day_key(last_completed) if last_completed else None,
            order=int(data.get("order", 0)),
        )


@dataclass(frozen=True)
class Badge:
    id: str
    name: str
    description: str
    icon: str
    unlocked: bool = False
    unlocked_at: Optional[datetime.datetime] = None

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "unlocked": self.unlocked,
            "unlockedAt": _format_timestamp(self.unlocked_at),
        }

    @classmethod
    def from_dict(cls, data):
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            description=data.get("description", ""),
            icon=data.get("icon", ""),
            unlocked=bool(data.get("unlocked", False)),
            unlocked_at=_parse_timestamp(data.get("unlockedAt")),
        )


@dataclass(frozen=True)
class User:
    name: str
    created_at: datetime.datetime = field(default_factory=datetime.datetime.now)
    total_habits: int = 0
    total_completions: int = 0

    def to_dict(self):
        return {
            "name": self.name,
            "createdAt": _format_timestamp(self.created_at),
            "totalHabits": self.total_habits,
            "totalCompletions": self.total_completions,
        }

    @classmethod
    def from_dict(cls, data):
        created_at = _parse_timestamp(data.get("createdAt")) or datetime.datetime.now()
        return cls(
            name=data["name"],
            created_at=created_at,
            total_habits=int(data.get("totalHabits", 0)),
            total_completions=int(data.get("totalCompletions", 0)),
        )
