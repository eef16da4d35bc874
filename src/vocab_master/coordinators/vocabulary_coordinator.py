"""Vocabulary Coordinator - Facade that wires the learning engine to its callers."""

import logging
from datetime import date, datetime
from typing import Any, Callable, Iterable, Mapping, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from vocab_master.core import (
    AnswerResult,
    AppState,
    AppStats,
    HistoryEntry,
    ImportFormatError,
    PersistenceError,
    QuestionType,
    QuizSource,
    QuizStateError,
    UserSettings,
    ValidationError,
    Word,
)
from vocab_master.io import DebouncedWriter, StateRepository
from vocab_master.services import (
    MIN_QUIZ_WORDS,
    ImportMergeResolver,
    MergeResult,
    QuizEngine,
    QuizSession,
    ReviewScheduler,
    StatsService,
    StreakTracker,
    WordRepository,
    validate_word_data,
    validate_word_update,
)

logger = logging.getLogger(__name__)

IMPORT_MODES = ("merge", "replace")


class VocabularyCoordinator(QObject):
    """Entry point for every user action against the learning engine.

    Responsibilities:
    - Validate input before it reaches the repository
    - Route quiz answers and completion through the engine
    - Mark state dirty after each mutation so the writer coalesces saves
    - Flush immediately for must-persist actions (quiz finish, import, save)
    - Catch engine errors at this seam and report them via error_reported
    """

    state_changed = Signal()
    error_reported = Signal(str, str)  # title, message
    duplicate_detected = Signal(object, object)  # submitted data, existing Word
    quiz_started = Signal(object)  # QuizSession
    quiz_completed = Signal(object)  # HistoryEntry
    question_presented = Signal(object)  # QuestionView

    def __init__(
        self,
        state: AppState,
        state_repository: StateRepository,
        repository: WordRepository,
        scheduler: ReviewScheduler,
        quiz_engine: QuizEngine,
        streak_tracker: StreakTracker,
        merge_resolver: ImportMergeResolver,
        stats_service: StatsService,
        writer: DebouncedWriter,
        clock: Callable[[], datetime] = datetime.now,
    ):
        super().__init__()

        if state is None:
            raise ValueError("AppState must not be None")
        if state_repository is None:
            raise ValueError("StateRepository must not be None")
        if repository is None:
            raise ValueError("WordRepository must not be None")
        if quiz_engine is None:
            raise ValueError("QuizEngine must not be None")
        if writer is None:
            raise ValueError("DebouncedWriter must not be None")

        self.state = state
        self.state_repository = state_repository
        self.repository = repository
        self.scheduler = scheduler
        self.quiz_engine = quiz_engine
        self.streak_tracker = streak_tracker
        self.merge_resolver = merge_resolver
        self.stats_service = stats_service
        self.writer = writer
        self._clock = clock
        self.current_quiz: Optional[QuizSession] = None

        self.writer.save_failed.connect(self._on_save_failed)
        self.stats_service.refresh()

    # ---- words ----
    def add_word(self, data: Mapping[str, Any], allow_duplicate: bool = False) -> Optional[Word]:
        """Validate and add a word.

        A possible duplicate emits duplicate_detected and returns None unless
        ``allow_duplicate`` is set (the caller confirmed).
        """
        try:
            validate_word_data(data)
        except ValidationError as e:
            self._report("Invalid word", str(e))
            return None

        if not allow_duplicate:
            existing = self.repository.find_duplicate(data.get("english"), data.get("turkish"))
            if existing is not None:
                self.duplicate_detected.emit(dict(data), existing)
                return None

        word = self.repository.add(data)
        self._changed()
        return word

    def update_word(self, word_id: str, partial: Mapping[str, Any]) -> Optional[Word]:
        try:
            validate_word_update(partial)
        except ValidationError as e:
            self._report("Invalid word", str(e))
            return None
        word = self.repository.update(word_id, partial)
        if word is not None:
            self._changed()
        return word

    def delete_word(self, word_id: str) -> bool:
        deleted = self.repository.delete(word_id)
        if deleted:
            self._changed()
        return deleted

    def toggle_favorite(self, word_id: str) -> bool:
        if word_id not in self.repository:
            return False
        favorite = self.repository.toggle_favorite(word_id)
        self._changed()
        return favorite

    def toggle_learned(self, word_id: str) -> bool:
        if word_id not in self.repository:
            return False
        learned = self.repository.toggle_learned(word_id)
        self._changed()
        return learned

    def reset_word_stats(self, word_id: str) -> bool:
        reset = self.repository.reset_stats(word_id)
        if reset:
            self._changed()
        return reset

    # ---- categories ----
    def add_category(self, name: str) -> bool:
        return self._changed_if(self.repository.add_category(name))

    def rename_category(self, old_name: str, new_name: str) -> bool:
        return self._changed_if(self.repository.rename_category(old_name, new_name))

    def delete_category(self, name: str) -> bool:
        return self._changed_if(self.repository.delete_category(name))

    # ---- quiz ----
    def start_quiz(
        self,
        source: QuizSource,
        question_types: Iterable,
        word_count: int = 10,
        randomize: bool = False,
    ) -> Optional[QuizSession]:
        try:
            session = self.quiz_engine.start(source, question_types, word_count, randomize)
        except ValidationError as e:
            self._report("Cannot start quiz", str(e))
            return None
        self.current_quiz = session
        self.quiz_started.emit(session)
        self._present_current()
        return session

    def start_daily_test(
        self,
        question_types: Iterable = (QuestionType.DIRECT,),
        word_count: int = 10,
    ) -> Optional[QuizSession]:
        if not self.scheduler.has_due_words(MIN_QUIZ_WORDS):
            self._report("Daily test", "Not enough words due for review yet.")
            return None
        return self.start_quiz(QuizSource.due(), question_types, word_count, randomize=True)

    def submit_answer(self, raw_input: Optional[str]) -> Optional[AnswerResult]:
        if self.current_quiz is None:
            self._report("Quiz", "No quiz in progress.")
            return None
        try:
            result = self.current_quiz.submit_answer(raw_input)
        except (ValidationError, QuizStateError) as e:
            self._report("Quiz", str(e))
            return None
        self._changed()
        return result

    def next_question(self) -> bool:
        if self.current_quiz is None:
            return False
        try:
            advanced = self.current_quiz.next_question()
        except QuizStateError as e:
            self._report("Quiz", str(e))
            return False
        if advanced:
            self._present_current()
        return advanced

    def finish_quiz(self) -> Optional[HistoryEntry]:
        if self.current_quiz is None:
            self._report("Quiz", "No quiz to finish.")
            return None
        try:
            entry = self.current_quiz.finish()
        except QuizStateError as e:
            self._report("Quiz", str(e))
            return None
        self._changed()
        self.save_now()
        self.quiz_completed.emit(entry)
        return entry

    def retake_quiz(self) -> bool:
        if self.current_quiz is None:
            self._report("Quiz", "No quiz to retake.")
            return False
        try:
            self.current_quiz.retake()
        except QuizStateError as e:
            self._report("Quiz", str(e))
            return False
        self.quiz_started.emit(self.current_quiz)
        self._present_current()
        return True

    def discard_quiz(self) -> None:
        self.current_quiz = None

    # ---- import / export ----
    def export_data(self, today: Optional[date] = None) -> Tuple[str, str]:
        """Return ``(filename, document)`` for a full backup download."""
        today = today or self._clock().date()
        self.stats_service.refresh()
        return (
            self.state_repository.export_filename(today),
            self.state_repository.export_document(self.state),
        )

    def import_data(self, text: str, mode: str = "merge") -> Optional[MergeResult]:
        """Apply an exported document in ``merge`` or ``replace`` mode.

        Returns:
            The merge counts (for replace: every imported word counts as
            merged), or None if the document was rejected.
        """
        if mode not in IMPORT_MODES:
            self._report("Import failed", f"Unknown import mode: {mode}")
            return None
        try:
            imported = self.state_repository.parse_import_document(text)
        except ImportFormatError as e:
            logger.error("Import rejected: %s", e)
            self._report("Import failed", "Error importing data. Please check the file format.")
            return None

        if mode == "replace":
            self.merge_resolver.replace(imported)
            result = MergeResult(merged_count=len(self.state.words), skipped_count=0)
        else:
            result = self.merge_resolver.merge(list(imported.words.values()))

        self.current_quiz = None
        self._changed()
        self.save_now()
        return result

    def clear_all_data(self) -> None:
        """Reset to a fresh state, keeping only the theme preference."""
        theme = self.state.settings.theme
        self.state.replace_with(AppState.default(self._clock()))
        self.state.settings = UserSettings(theme=theme)
        self.current_quiz = None
        self._changed()
        self.save_now()

    def restore_backup(self) -> bool:
        """Roll back to the copy kept by the previous save.

        The state being replaced becomes the new rollback copy, so calling
        this twice swaps back.
        """
        backup = self.state_repository.load_backup()
        if backup is None:
            self._report("Restore failed", "No backup available.")
            return False
        self.state.replace_with(backup)
        self.current_quiz = None
        self._changed()
        return self.save_now()

    # ---- stats / persistence ----
    def app_stats(self) -> AppStats:
        return self.stats_service.refresh()

    def storage_size(self) -> int:
        """Bytes used by the last saved state."""
        return self.state_repository.storage_size()

    def save_now(self) -> bool:
        """Flush pending changes immediately; reports failures instead of raising."""
        try:
            self.writer.flush()
        except PersistenceError as e:
            logger.error("Save failed: %s", e)
            self._report("Save failed", str(e))
            return False
        return True

    def shutdown(self) -> None:
        self.save_now()

    def _present_current(self) -> None:
        self.question_presented.emit(self.current_quiz.present())

    def _changed(self) -> None:
        self.stats_service.refresh()
        self.writer.mark_dirty()
        self.state_changed.emit()

    def _changed_if(self, changed: bool) -> bool:
        if changed:
            self._changed()
        return changed

    def _on_save_failed(self, message: str) -> None:
        self._report("Save failed", message)

    def _report(self, title: str, message: str) -> None:
        logger.warning("%s: %s", title, message)
        self.error_reported.emit(title, message)
