"""Main entry point for the vocabulary trainer."""

import logging
import random
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional

from PySide6.QtCore import QCoreApplication

from vocab_master.coordinators import ReminderCoordinator, StudyAidsCoordinator, VocabularyCoordinator
from vocab_master.io import BlobStore, DebouncedWriter, SqliteBlobStore, StateRepository
from vocab_master.services import (
    GeminiWordEnrichmentService,
    ImportMergeResolver,
    QuizEngine,
    ReviewScheduler,
    SettingsManager,
    SpeechService,
    StatsService,
    StreakTracker,
    WordRepository,
)

LOG_FILE = "vocab_master.log"

logger = logging.getLogger("vocab_master")


def setup_logging(log_dir: Path) -> None:
    logger.setLevel(logging.INFO)

    log_dir.mkdir(parents=True, exist_ok=True)
    file_handler = RotatingFileHandler(log_dir / LOG_FILE, maxBytes=5_000_000, backupCount=3)
    file_handler.setFormatter(
        logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
    )
    logger.addHandler(file_handler)
    # Also configure root logger to see logs from other libraries
    logging.basicConfig(level=logging.INFO)


def build_coordinator(
    store: BlobStore,
    autosave_delay_ms: int = DebouncedWriter.DEFAULT_QUIET_PERIOD_MS,
    rng: Optional[random.Random] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> VocabularyCoordinator:
    """
    Load state from ``store`` and wire every engine component around it.
    This is the only place that knows how the components fit together.
    """
    state_repository = StateRepository(store, clock=clock)
    state = state_repository.load()

    repository = WordRepository(state, clock=clock)
    scheduler = ReviewScheduler(state, clock=clock)
    streak_tracker = StreakTracker(state, clock=clock)
    quiz_engine = QuizEngine(
        state, repository, scheduler, streak_tracker, rng=rng, clock=clock
    )
    writer = DebouncedWriter(
        write=lambda: state_repository.save(state),
        quiet_period_ms=autosave_delay_ms,
    )

    return VocabularyCoordinator(
        state=state,
        state_repository=state_repository,
        repository=repository,
        scheduler=scheduler,
        quiz_engine=quiz_engine,
        streak_tracker=streak_tracker,
        merge_resolver=ImportMergeResolver(state, repository),
        stats_service=StatsService(state),
        writer=writer,
        clock=clock,
    )


def build_study_aids(
    coordinator: VocabularyCoordinator,
    settings: SettingsManager,
    speech_service: Optional[SpeechService] = None,
    enrichment_service: Optional[GeminiWordEnrichmentService] = None,
    thread_pool=None,
) -> StudyAidsCoordinator:
    """Create the speech and enrichment helpers and hook them to the quiz flow."""
    study_aids = StudyAidsCoordinator(
        speech_service=speech_service or SpeechService(),
        enrichment_service=enrichment_service or GeminiWordEnrichmentService(),
        settings_manager=settings,
        thread_pool=thread_pool,
    )
    coordinator.question_presented.connect(study_aids.on_question_presented)
    return study_aids


def main():
    """
    Bootstrap the application following the Composition Root pattern.
    """
    # 1. Configuration and logging
    settings = SettingsManager()
    setup_logging(settings.get_log_dir())

    # 2. Initialize Application
    app = QCoreApplication(sys.argv)
    app.setApplicationName("Vocab Master")
    app.setOrganizationName("VocabMaster")

    # 3. Initialize Infrastructure
    store = SqliteBlobStore(settings.get_db_path())
    store.ensure_schema()

    # 4. Instantiate Coordinators (Dependency Injection)
    coordinator = build_coordinator(store, settings.get_autosave_delay_ms())
    reminder = ReminderCoordinator(
        state=coordinator.state,
        scheduler=coordinator.scheduler,
        streak_tracker=coordinator.streak_tracker,
    )
    study_aids = build_study_aids(coordinator, settings)
    logger.info("Loaded %d words from %s", len(coordinator.repository), settings.get_db_path())

    # 5. Signal Wiring
    reminder.reminder_due.connect(
        lambda ready: logger.info("Time to study! Daily test ready: %s", ready)
    )
    coordinator.error_reported.connect(
        lambda title, message: logger.error("%s: %s", title, message)
    )
    study_aids.enrichment_completed.connect(
        lambda data: logger.info("Word card ready for %s", data.get("english"))
    )
    app.aboutToQuit.connect(study_aids.stop_speech)
    app.aboutToQuit.connect(coordinator.shutdown)
    app.aboutToQuit.connect(store.close)

    # 6. Start event loop
    reminder.start()
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
