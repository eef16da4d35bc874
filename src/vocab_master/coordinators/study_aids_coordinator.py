"""Study Aids Coordinator - pronunciation playback and AI enrichment of word cards."""

import logging
from typing import Optional

from PySide6.QtCore import QObject, QThreadPool, Signal

from vocab_master.core import QuestionView, Word
from vocab_master.services import (
    EnrichmentWorker,
    SettingsManager,
    SpeechService,
    WordEnrichmentService,
)

logger = logging.getLogger(__name__)


class _EnrichmentRequest(QObject):
    """Routes one worker's signals back to the coordinator with its request id."""

    def __init__(self, english: str, worker_id: int, parent: "StudyAidsCoordinator"):
        super().__init__(parent)
        self.english = english
        self.worker_id = worker_id
        self.coordinator = parent

    def on_result(self, result):
        self.coordinator._handle_enrichment_result(result, self.english, self.worker_id)

    def on_error(self, error: str):
        self.coordinator._handle_enrichment_error(error, self.worker_id)


class StudyAidsCoordinator(QObject):
    """
    Coordinates the helpers around the learning engine:
    - Speaks english words, and plays listening questions once when shown
    - Runs Gemini enrichment for the add-word form on the thread pool
    - Drops results from requests that a newer request replaced
    """

    enrichment_started = Signal(str)  # english
    enrichment_completed = Signal(object)  # form data dict
    enrichment_failed = Signal(str)
    error_reported = Signal(str, str)  # title, message

    def __init__(
        self,
        speech_service: SpeechService,
        enrichment_service: WordEnrichmentService,
        settings_manager: SettingsManager,
        thread_pool: Optional[QThreadPool] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)

        if speech_service is None:
            raise ValueError("SpeechService must not be None")
        if enrichment_service is None:
            raise ValueError("WordEnrichmentService must not be None")
        if settings_manager is None:
            raise ValueError("SettingsManager must not be None")

        self.speech_service = speech_service
        self.enrichment_service = enrichment_service
        self.settings_manager = settings_manager
        self.thread_pool = thread_pool or QThreadPool.globalInstance()

        self._worker_counter = 0
        self._active_worker_id: Optional[int] = None
        # Helpers must outlive the worker that reports to them
        self._request_helper: Optional[_EnrichmentRequest] = None

        self.speech_service.playback_failed.connect(self._on_playback_failed)

    # ---- speech ----
    def speak_word(self, word: Word) -> bool:
        return self.speech_service.speak(word.english)

    def speak_view(self, view: QuestionView) -> bool:
        """Replay the current question; listening questions carry their own text."""
        return self.speech_service.speak(view.audio_text or view.question.word.english)

    def on_question_presented(self, view: QuestionView) -> None:
        if view.audio_text:
            self.speech_service.speak(view.audio_text)

    def stop_speech(self) -> None:
        self.speech_service.stop()

    # ---- enrichment ----
    def enrich_word(self, english: str) -> bool:
        """Start filling the add-word form for ``english`` in the background.

        Returns:
            True if a worker was started. Missing input or a missing API key
            is reported through error_reported instead.
        """
        english = (english or "").strip()
        if not english:
            self._report("AI enrichment", "Enter an English word first.")
            return False

        api_key = self._current_api_key()
        if not api_key:
            self._report("AI enrichment", "API key not configured. Add GEMINI_API_KEY to .env file.")
            return False

        self._worker_counter += 1
        worker_id = self._worker_counter
        self._active_worker_id = worker_id

        worker = EnrichmentWorker(self.enrichment_service, english, api_key)
        request_helper = _EnrichmentRequest(english, worker_id, self)
        self._request_helper = request_helper
        worker.signals.result.connect(request_helper.on_result)
        worker.signals.error.connect(request_helper.on_error)

        self.enrichment_started.emit(english)
        self.thread_pool.start(worker)
        return True

    def cancel_enrichment(self) -> None:
        """Forget the pending request; its result will be ignored."""
        self._active_worker_id = None

    def _handle_enrichment_result(self, result, english: str, worker_id: int) -> None:
        if worker_id != self._active_worker_id:
            logger.debug("Ignoring stale enrichment result for %r (worker %d)", english, worker_id)
            return
        self._active_worker_id = None
        if not result.is_success():
            logger.warning("Enrichment of %r failed: %s", english, result.error)
            self.enrichment_failed.emit(result.error or "Unknown error")
            return
        logger.info("Enriched %r with %s", english, result.model)
        self.enrichment_completed.emit(result.data)

    def _handle_enrichment_error(self, error: str, worker_id: int) -> None:
        if worker_id != self._active_worker_id:
            return
        self._active_worker_id = None
        logger.error("Enrichment worker failed: %s", error)
        self.enrichment_failed.emit(error)

    def _current_api_key(self) -> Optional[str]:
        """Fetch the latest API key from settings."""
        return self.settings_manager.get_gemini_api_key()

    def _on_playback_failed(self, message: str) -> None:
        self._report("Speech", message)

    def _report(self, title: str, message: str) -> None:
        logger.warning("%s: %s", title, message)
        self.error_reported.emit(title, message)
