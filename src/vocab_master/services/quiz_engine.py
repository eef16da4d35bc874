"""Quiz Engine - word selection, question lists, answer evaluation and completion."""

import logging
import random
import uuid
from collections import OrderedDict
from datetime import datetime
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from vocab_master.core import (
    Answer,
    AnswerResult,
    AppState,
    HistoryEntry,
    Question,
    QuestionType,
    QuestionView,
    QuizSource,
    QuizState,
    QuizStateError,
    SourceKind,
    ValidationError,
    Word,
    WordResult,
)
from vocab_master.services.question_builder import build_question_view, shuffled
from vocab_master.services.review_scheduler import ReviewScheduler
from vocab_master.services.streak_tracker import StreakTracker
from vocab_master.services.word_repository import WordRepository

logger = logging.getLogger(__name__)

MIN_QUIZ_WORDS = 5


def evaluate_answer(question: Question, user_answer: str) -> AnswerResult:
    """Compare a trimmed answer against the question's correct answer.

    direct and reverse are multiple choice and compared exactly; writing and
    listening are typed and compared case-insensitively.
    """
    word = question.word
    if question.type is QuestionType.DIRECT:
        correct_answer = word.turkish
        return AnswerResult(user_answer == correct_answer, correct_answer)
    correct_answer = word.english
    if question.type is QuestionType.REVERSE:
        return AnswerResult(user_answer == correct_answer, correct_answer)
    return AnswerResult(user_answer.lower() == correct_answer.lower(), correct_answer)


class QuizSession:
    """A single quiz run: questions, cursor and recorded answers.

    Created IN_PROGRESS by QuizEngine.start. Moving past the last question
    makes it COMPLETE; ``finish`` then writes history and the streak, and
    ``retake`` replays the same questions.
    """

    def __init__(self, quiz_id: str, questions: List[Question], engine: "QuizEngine") -> None:
        self.id = quiz_id
        self._questions: Tuple[Question, ...] = tuple(questions)
        self._engine = engine
        self._reset()

    def _reset(self) -> None:
        self._state = QuizState.IN_PROGRESS
        self._position = 0
        self._answers: List[Answer] = []
        self._answered_position: Optional[int] = None
        self._views: Dict[int, QuestionView] = {}
        self._history_entry: Optional[HistoryEntry] = None
        self.started_at = self._engine.now()

    # ---- read-only views ----
    @property
    def state(self) -> QuizState:
        return self._state

    @property
    def questions(self) -> Tuple[Question, ...]:
        return self._questions

    @property
    def answers(self) -> Tuple[Answer, ...]:
        return tuple(self._answers)

    @property
    def position(self) -> int:
        return self._position

    @property
    def total(self) -> int:
        return len(self._questions)

    @property
    def current_question(self) -> Optional[Question]:
        if self._state is not QuizState.IN_PROGRESS:
            return None
        return self._questions[self._position]

    @property
    def is_current_answered(self) -> bool:
        return self._answered_position == self._position

    @property
    def history_entry(self) -> Optional[HistoryEntry]:
        return self._history_entry

    # ---- in progress ----
    def present(self) -> QuestionView:
        """Build (once per position) what the view shows for the current question."""
        question = self._require_current()
        if self._position not in self._views:
            self._views[self._position] = self._engine.build_view(question)
        return self._views[self._position]

    def submit_answer(self, raw_input: Optional[str]) -> AnswerResult:
        """Evaluate and record an answer for the current question.

        Raises:
            ValidationError: If the answer is empty after trimming.
            QuizStateError: If the quiz is not in progress or the current
                question was already answered.
        """
        question = self._require_current()
        if self.is_current_answered:
            raise QuizStateError("This question has already been answered")
        user_answer = (raw_input or "").strip()
        if not user_answer:
            raise ValidationError("Please provide an answer")

        result = evaluate_answer(question, user_answer)
        self._answers.append(
            Answer(
                word_id=question.word.id,
                type=question.type,
                user_answer=user_answer,
                correct_answer=result.correct_answer,
                correct=result.correct,
            )
        )
        self._answered_position = self._position
        self._engine.record_answer(question.word, result.correct)
        return result

    def next_question(self) -> bool:
        """Advance the cursor.

        Returns:
            True if another question is available, False once the quiz is
            COMPLETE.
        """
        self._require_current()
        self._position += 1
        if self._position >= len(self._questions):
            self._state = QuizState.COMPLETE
            return False
        return True

    # ---- complete ----
    def word_results(self) -> Dict[str, WordResult]:
        """Per-word correct/total tallies in first-answered order."""
        results: Dict[str, WordResult] = OrderedDict()
        for answer in self._answers:
            tally = results.setdefault(answer.word_id, WordResult())
            tally.total += 1
            if answer.correct:
                tally.correct += 1
        return results

    def finish(self) -> HistoryEntry:
        """Write the history entry and advance the streak.

        Raises:
            QuizStateError: If the quiz is not COMPLETE or was already finished.
        """
        if self._state is not QuizState.COMPLETE:
            raise QuizStateError("Quiz is not complete yet")
        if self._history_entry is not None:
            raise QuizStateError("Quiz has already been finished")
        self._history_entry = self._engine.complete(self)
        return self._history_entry

    def retake(self) -> None:
        """Replay the same questions in the same order with a fresh answer list."""
        if self._state is not QuizState.COMPLETE:
            raise QuizStateError("Only a completed quiz can be retaken")
        self._reset()

    def _require_current(self) -> Question:
        question = self.current_question
        if question is None:
            raise QuizStateError("Quiz is not in progress")
        return question


class QuizEngine:
    """Builds quizzes from the repository and routes outcomes to the scheduler.

    ``rng`` is injectable so tests can seed sampling and shuffling.
    """

    def __init__(
        self,
        state: AppState,
        repository: WordRepository,
        scheduler: ReviewScheduler,
        streak_tracker: StreakTracker,
        rng: Optional[random.Random] = None,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._state = state
        self._repository = repository
        self._scheduler = scheduler
        self._streak_tracker = streak_tracker
        self._rng = rng or random.Random()
        self._clock = clock
        self._id_factory = id_factory

    def now(self) -> datetime:
        return self._clock()

    def resolve_source(self, source: QuizSource) -> List[Word]:
        kind = source.kind
        if kind is SourceKind.ALL:
            return self._repository.list_words()
        if kind is SourceKind.DUE:
            return self._scheduler.due_words()
        if kind is SourceKind.FAVORITES:
            return [w for w in self._repository.list_words() if w.favorite]
        if kind is SourceKind.HARD:
            return self._scheduler.hard_words()
        if kind is SourceKind.CATEGORY:
            return self._repository.words_by_category(source.category or "")
        words = []
        for word_id in dict.fromkeys(source.word_ids):
            word = self._repository.get(word_id)
            if word is not None:
                words.append(word)
        return words

    def start(
        self,
        source: QuizSource,
        question_types: Iterable,
        word_count: int = 10,
        randomize: bool = False,
    ) -> QuizSession:
        """Configure and start a quiz.

        Raises:
            ValidationError: If no question type is selected, the word count
                is below one, a non-custom source has fewer than
                MIN_QUIZ_WORDS words, or a custom selection has no known word.
        """
        types = self._parse_question_types(question_types)
        if not types:
            raise ValidationError("Please select at least one question type")

        candidates = self.resolve_source(source)
        if source.is_custom:
            if not candidates:
                raise ValidationError("Please select at least one word")
            selected = candidates
        else:
            if len(candidates) < MIN_QUIZ_WORDS:
                raise ValidationError(
                    f"Insufficient words: you need at least {MIN_QUIZ_WORDS} words to start a quiz "
                    f"(found {len(candidates)})"
                )
            if word_count < 1:
                raise ValidationError("Word count must be at least 1")
            selected = self._rng.sample(candidates, min(word_count, len(candidates)))

        questions = [Question(word, qtype) for word in selected for qtype in types]
        if randomize:
            questions = shuffled(questions, self._rng)

        session = QuizSession(self._id_factory(), questions, self)
        logger.info(
            "Started quiz %s: source=%s words=%d questions=%d",
            session.id, source.kind.value, len(selected), len(questions),
        )
        return session

    def build_view(self, question: Question) -> QuestionView:
        return build_question_view(question, self._repository.list_words(), self._rng)

    def record_answer(self, word: Word, correct: bool) -> None:
        if word.id not in self._repository:
            logger.warning("Answer for deleted word %s not recorded in stats", word.id)
            return
        self._scheduler.record_answer(word, correct)

    def complete(self, session: QuizSession) -> HistoryEntry:
        answers = session.answers
        entry = HistoryEntry(
            quiz_id=session.id,
            date=self._clock(),
            score=sum(1 for a in answers if a.correct),
            total=len(answers),
            details=list(answers),
        )
        self._state.history.append(entry)
        self._streak_tracker.record_activity(entry.date)
        logger.info("Finished quiz %s: %d/%d", session.id, entry.score, entry.total)
        return entry

    @staticmethod
    def _parse_question_types(question_types: Iterable) -> List[QuestionType]:
        types: List[QuestionType] = []
        for raw in question_types or []:
            try:
                qtype = QuestionType(raw)
            except ValueError as e:
                raise ValidationError(f"Unknown question type: {raw!r}") from e
            if qtype not in types:
                types.append(qtype)
        return types
