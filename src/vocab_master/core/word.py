"""Word entities and their JSON shape."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional

from vocab_master.core.timestamps import as_dict, as_list, format_timestamp, parse_int, parse_timestamp

LEVELS = ("A1", "A2", "B1", "B2", "C1", "C2")
DEFAULT_LEVEL = "C1"


@dataclass
class Example:
    """An example sentence with an optional translation and usage context."""

    english: str
    turkish: str = ""
    context: str = ""

    @classmethod
    def from_raw(cls, raw: Any) -> "Example":
        """Accept either a plain sentence or an english/turkish/context mapping."""
        if isinstance(raw, Example):
            return raw
        if isinstance(raw, dict):
            return cls(
                english=str(raw.get("english") or raw.get("en") or ""),
                turkish=str(raw.get("turkish") or raw.get("tr") or ""),
                context=str(raw.get("context") or ""),
            )
        return cls(english=str(raw or ""))

    def to_dict(self) -> Dict[str, str]:
        return {"english": self.english, "turkish": self.turkish, "context": self.context}


@dataclass
class WordStats:
    """Review statistics. Only the scheduler and quiz engine mutate these."""

    added_at: datetime
    next_review_date: datetime
    times_tested: int = 0
    correct_count: int = 0
    wrong_count: int = 0
    last_tested: Optional[datetime] = None
    difficulty_score: int = 0
    learned: bool = False

    @classmethod
    def fresh(cls, now: datetime) -> "WordStats":
        return cls(added_at=now, next_review_date=now)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], now: datetime) -> "WordStats":
        added_at = parse_timestamp(data.get("addedAt")) or now
        return cls(
            added_at=added_at,
            next_review_date=parse_timestamp(data.get("nextReviewDate")) or added_at,
            times_tested=parse_int(data.get("timesTested")),
            correct_count=parse_int(data.get("correctCount")),
            wrong_count=parse_int(data.get("wrongCount")),
            last_tested=parse_timestamp(data.get("lastTested")),
            difficulty_score=parse_int(data.get("difficultyScore")),
            learned=bool(data.get("learned", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "addedAt": format_timestamp(self.added_at),
            "timesTested": self.times_tested,
            "correctCount": self.correct_count,
            "wrongCount": self.wrong_count,
            "lastTested": format_timestamp(self.last_tested),
            "difficultyScore": self.difficulty_score,
            "nextReviewDate": format_timestamp(self.next_review_date),
            "learned": self.learned,
        }


@dataclass
class Word:
    id: str
    english: str
    turkish: str
    stats: WordStats
    pronunciation: str = ""
    english_explanation: str = ""
    turkish_explanation: str = ""
    notes: str = ""
    synonyms: List[str] = field(default_factory=list)
    antonyms: List[str] = field(default_factory=list)
    examples: List[Example] = field(default_factory=list)
    level: str = DEFAULT_LEVEL
    categories: List[str] = field(default_factory=list)
    favorite: bool = False

    @classmethod
    def from_dict(cls, data: Dict[str, Any], now: Optional[datetime] = None) -> "Word":
        """Build a Word from its serialized camelCase form.

        Missing fields fall back to defaults so partially-shaped payloads
        from older exports still load.
        """
        now = now or datetime.now()
        return cls(
            id=str(data.get("id") or ""),
            english=str(data.get("english") or ""),
            turkish=str(data.get("turkish") or ""),
            stats=WordStats.from_dict(as_dict(data.get("stats")), now),
            pronunciation=str(data.get("pronunciation") or ""),
            english_explanation=str(data.get("englishExplanation") or ""),
            turkish_explanation=str(data.get("turkishExplanation") or ""),
            notes=str(data.get("notes") or ""),
            synonyms=[str(s) for s in as_list(data.get("synonyms")) if s],
            antonyms=[str(a) for a in as_list(data.get("antonyms")) if a],
            examples=[Example.from_raw(e) for e in as_list(data.get("examples")) if e],
            level=str(data.get("level") or DEFAULT_LEVEL),
            categories=_unique(str(c) for c in as_list(data.get("categories")) if c),
            favorite=bool(data.get("favorite", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "english": self.english,
            "turkish": self.turkish,
            "pronunciation": self.pronunciation,
            "englishExplanation": self.english_explanation,
            "turkishExplanation": self.turkish_explanation,
            "notes": self.notes,
            "synonyms": list(self.synonyms),
            "antonyms": list(self.antonyms),
            "examples": [e.to_dict() for e in self.examples],
            "level": self.level,
            "categories": list(self.categories),
            "favorite": self.favorite,
            "stats": self.stats.to_dict(),
        }


def _unique(values) -> List[str]:
    seen: Dict[str, None] = {}
    for value in values:
        seen.setdefault(value, None)
    return list(seen)
