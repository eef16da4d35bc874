"""Services layer - learning engine and external integrations."""

from vocab_master.services.word_repository import WordRepository
from vocab_master.services.word_validation import validate_word_data, validate_word_update
from vocab_master.services.review_scheduler import REVIEW_INTERVALS_DAYS, ReviewScheduler, interval_days
from vocab_master.services.question_builder import (
    build_cloze,
    build_letter_pool,
    build_question_view,
    fill_slots,
    generate_distractors,
)
from vocab_master.services.streak_tracker import StreakTracker
from vocab_master.services.quiz_engine import MIN_QUIZ_WORDS, QuizEngine, QuizSession, evaluate_answer
from vocab_master.services.import_merge import ImportMergeResolver, MergeResult
from vocab_master.services.stats_service import StatsService
from vocab_master.services.settings_manager import SettingsManager
from vocab_master.services.speech_service import SpeechService

# Enrichment services
from vocab_master.services.enrichment import (
    EnrichmentResult,
    EnrichmentWorker,
    GeminiWordEnrichmentService,
    WordEnrichmentService,
    build_enrichment_prompt,
    parse_enrichment_json,
)

__all__ = [
    "WordRepository",
    "validate_word_data",
    "validate_word_update",
    "ReviewScheduler",
    "REVIEW_INTERVALS_DAYS",
    "interval_days",
    "build_cloze",
    "build_letter_pool",
    "build_question_view",
    "fill_slots",
    "generate_distractors",
    "StreakTracker",
    "QuizEngine",
    "QuizSession",
    "MIN_QUIZ_WORDS",
    "evaluate_answer",
    "ImportMergeResolver",
    "MergeResult",
    "StatsService",
    "SettingsManager",
    "SpeechService",
    "EnrichmentResult",
    "EnrichmentWorker",
    "GeminiWordEnrichmentService",
    "WordEnrichmentService",
    "build_enrichment_prompt",
    "parse_enrichment_json",
]
