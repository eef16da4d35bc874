"""Quiz entities: sources, questions, answers and history entries."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from vocab_master.core.timestamps import as_list, format_timestamp, parse_int, parse_timestamp
from vocab_master.core.word import Word


class QuestionType(str, Enum):
    DIRECT = "direct"
    REVERSE = "reverse"
    WRITING = "writing"
    LISTENING = "listening"


class QuizState(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class SourceKind(str, Enum):
    ALL = "all"
    DUE = "due"
    FAVORITES = "favorites"
    HARD = "hard"
    CATEGORY = "category"
    CUSTOM = "custom"


@dataclass(frozen=True)
class QuizSource:
    """Which words a quiz draws from."""

    kind: SourceKind
    category: Optional[str] = None
    word_ids: Tuple[str, ...] = ()

    @classmethod
    def all(cls) -> "QuizSource":
        return cls(SourceKind.ALL)

    @classmethod
    def due(cls) -> "QuizSource":
        return cls(SourceKind.DUE)

    @classmethod
    def favorites(cls) -> "QuizSource":
        return cls(SourceKind.FAVORITES)

    @classmethod
    def hard(cls) -> "QuizSource":
        return cls(SourceKind.HARD)

    @classmethod
    def for_category(cls, name: str) -> "QuizSource":
        return cls(SourceKind.CATEGORY, category=name)

    @classmethod
    def custom(cls, word_ids) -> "QuizSource":
        return cls(SourceKind.CUSTOM, word_ids=tuple(word_ids))

    @property
    def is_custom(self) -> bool:
        return self.kind is SourceKind.CUSTOM


@dataclass(frozen=True, eq=False)
class Question:
    word: Word
    type: QuestionType


@dataclass
class QuestionView:
    """Everything a view needs to render the current question."""

    question: Question
    prompt: str
    options: List[str] = field(default_factory=list)
    cloze: Optional[str] = None
    letter_pool: List[str] = field(default_factory=list)
    fixed_slots: Dict[int, str] = field(default_factory=dict)
    audio_text: Optional[str] = None


@dataclass(frozen=True)
class Answer:
    word_id: str
    type: QuestionType
    user_answer: str
    correct_answer: str
    correct: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            "wordId": self.word_id,
            "type": self.type.value,
            "userAnswer": self.user_answer,
            "correctAnswer": self.correct_answer,
            "correct": self.correct,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Answer":
        try:
            question_type = QuestionType(data.get("type"))
        except (TypeError, ValueError):
            question_type = QuestionType.DIRECT
        return cls(
            word_id=str(data.get("wordId") or ""),
            type=question_type,
            user_answer=str(data.get("userAnswer") or ""),
            correct_answer=str(data.get("correctAnswer") or ""),
            correct=bool(data.get("correct", False)),
        )


@dataclass(frozen=True)
class AnswerResult:
    correct: bool
    correct_answer: str


@dataclass
class WordResult:
    correct: int = 0
    total: int = 0


@dataclass
class HistoryEntry:
    quiz_id: str
    date: datetime
    score: int
    total: int
    details: List[Answer] = field(default_factory=list)

    @property
    def percent(self) -> int:
        return round(self.score / self.total * 100) if self.total else 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "quizId": self.quiz_id,
            "date": format_timestamp(self.date),
            "score": self.score,
            "total": self.total,
            "details": [a.to_dict() for a in self.details],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HistoryEntry":
        return cls(
            quiz_id=str(data.get("quizId") or ""),
            date=parse_timestamp(data.get("date")) or datetime.now(),
            score=parse_int(data.get("score")),
            total=parse_int(data.get("total")),
            details=[Answer.from_dict(d) for d in as_list(data.get("details")) if isinstance(d, dict)],
        )
