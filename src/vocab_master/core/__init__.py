"""Domain layer - Pure entities for words, quizzes and application state."""

from .app_state import SCHEMA_VERSION, AppState, AppStats, StateMeta, Streak, UserSettings
from .errors import (
    ImportFormatError,
    PersistenceError,
    QuizStateError,
    ValidationError,
    VocabError,
)
from .quiz import (
    Answer,
    AnswerResult,
    HistoryEntry,
    Question,
    QuestionType,
    QuestionView,
    QuizSource,
    QuizState,
    SourceKind,
    WordResult,
)
from .word import DEFAULT_LEVEL, LEVELS, Example, Word, WordStats

__all__ = [
    "SCHEMA_VERSION",
    "AppState",
    "AppStats",
    "StateMeta",
    "Streak",
    "UserSettings",
    "VocabError",
    "ValidationError",
    "ImportFormatError",
    "PersistenceError",
    "QuizStateError",
    "Answer",
    "AnswerResult",
    "HistoryEntry",
    "Question",
    "QuestionType",
    "QuestionView",
    "QuizSource",
    "QuizState",
    "SourceKind",
    "WordResult",
    "DEFAULT_LEVEL",
    "LEVELS",
    "Example",
    "Word",
    "WordStats",
]
