"""The application-state aggregate persisted as one blob."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from vocab_master.core.quiz import HistoryEntry
from vocab_master.core.timestamps import as_dict, format_timestamp, parse_int, parse_timestamp
from vocab_master.core.word import Word

SCHEMA_VERSION = "2.0"


def _local_time_zone() -> str:
    return datetime.now().astimezone().tzname() or "UTC"


@dataclass
class StateMeta:
    version: str
    created_at: datetime
    last_sync: datetime

    @classmethod
    def fresh(cls, now: datetime) -> "StateMeta":
        return cls(version=SCHEMA_VERSION, created_at=now, last_sync=now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "createdAt": format_timestamp(self.created_at),
            "lastSync": format_timestamp(self.last_sync),
        }


@dataclass
class UserSettings:
    theme: str = "light"
    notification_hour: str = "20:00"
    notification_enabled: bool = False
    daily_test_time_zone: str = field(default_factory=_local_time_zone)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "theme": self.theme,
            "notificationHour": self.notification_hour,
            "notificationEnabled": self.notification_enabled,
            "dailyTestTimeZone": self.daily_test_time_zone,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "UserSettings":
        defaults = cls()
        return cls(
            theme=str(data.get("theme") or defaults.theme),
            notification_hour=str(data.get("notificationHour") or defaults.notification_hour),
            notification_enabled=bool(data.get("notificationEnabled", False)),
            daily_test_time_zone=str(data.get("dailyTestTimeZone") or defaults.daily_test_time_zone),
        )


@dataclass
class Streak:
    current: int = 0
    best: int = 0
    last_active: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "current": self.current,
            "best": self.best,
            "lastActive": format_timestamp(self.last_active),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Streak":
        return cls(
            current=parse_int(data.get("current")),
            best=parse_int(data.get("best")),
            last_active=parse_timestamp(data.get("lastActive")),
        )


@dataclass
class AppStats:
    """Derived counters plus the streak. Counters are recomputed, never trusted."""

    total_added: int = 0
    total_learned: int = 0
    favorites_count: int = 0
    hard_count: int = 0
    streak: Streak = field(default_factory=Streak)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalAdded": self.total_added,
            "totalLearned": self.total_learned,
            "favoritesCount": self.favorites_count,
            "hardCount": self.hard_count,
            "streak": self.streak.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppStats":
        return cls(
            total_added=parse_int(data.get("totalAdded")),
            total_learned=parse_int(data.get("totalLearned")),
            favorites_count=parse_int(data.get("favoritesCount")),
            hard_count=parse_int(data.get("hardCount")),
            streak=Streak.from_dict(as_dict(data.get("streak"))),
        )


@dataclass
class AppState:
    """Single owned aggregate shared by reference between components.

    Components hold the AppState itself rather than its fields so that a
    wholesale replace (see ``replace_with``) is visible to all of them.
    """

    meta: StateMeta
    settings: UserSettings = field(default_factory=UserSettings)
    categories: List[str] = field(default_factory=list)
    words: Dict[str, Word] = field(default_factory=dict)
    history: List[HistoryEntry] = field(default_factory=list)
    app_stats: AppStats = field(default_factory=AppStats)

    @classmethod
    def default(cls, now: Optional[datetime] = None) -> "AppState":
        return cls(meta=StateMeta.fresh(now or datetime.now()))

    @classmethod
    def from_dict(cls, data: Dict[str, Any], now: Optional[datetime] = None) -> "AppState":
        """Shallow-merge a serialized payload over the default state.

        Top-level fields that are missing or of the wrong type keep their
        default value.
        """
        now = now or datetime.now()
        state = cls.default(now)

        meta = data.get("meta")
        if isinstance(meta, dict):
            state.meta = StateMeta(
                version=str(meta.get("version") or SCHEMA_VERSION),
                created_at=parse_timestamp(meta.get("createdAt")) or now,
                last_sync=parse_timestamp(meta.get("lastSync")) or now,
            )

        settings = data.get("settings")
        if isinstance(settings, dict):
            state.settings = UserSettings.from_dict(settings)

        categories = data.get("categories")
        if isinstance(categories, list):
            state.categories = [str(c) for c in categories if c]

        state.words = _words_from_payload(data.get("words"), now)

        history = data.get("history")
        if isinstance(history, list):
            state.history = [HistoryEntry.from_dict(h) for h in history if isinstance(h, dict)]

        app_stats = data.get("appStats")
        if isinstance(app_stats, dict):
            state.app_stats = AppStats.from_dict(app_stats)

        return state

    def to_dict(self) -> Dict[str, Any]:
        return {
            "meta": self.meta.to_dict(),
            "settings": self.settings.to_dict(),
            "categories": list(self.categories),
            "words": {word_id: word.to_dict() for word_id, word in self.words.items()},
            "history": [h.to_dict() for h in self.history],
            "appStats": self.app_stats.to_dict(),
        }

    def replace_with(self, other: "AppState") -> None:
        """Swap every field for ``other``'s, keeping this object's identity."""
        self.meta = other.meta
        self.settings = other.settings
        self.categories = other.categories
        self.words = other.words
        self.history = other.history
        self.app_stats = other.app_stats


def _words_from_payload(raw: Any, now: datetime) -> Dict[str, Word]:
    if isinstance(raw, dict):
        items = list(raw.values())
    elif isinstance(raw, list):
        items = raw
    else:
        return {}
    words: Dict[str, Word] = {}
    for item in items:
        if not isinstance(item, dict):
            continue
        word = Word.from_dict(item, now)
        if word.id:
            words[word.id] = word
    return words
