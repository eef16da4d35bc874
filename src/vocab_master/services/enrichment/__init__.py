"""Word enrichment services - AI-generated word cards."""

from vocab_master.services.enrichment.word_enrichment_service import (
    EnrichmentResult,
    WordEnrichmentService,
    build_enrichment_prompt,
    parse_enrichment_json,
)
from vocab_master.services.enrichment.gemini_word_enrichment_service import GeminiWordEnrichmentService
from vocab_master.services.enrichment.enrichment_worker import EnrichmentWorker, WorkerSignals

__all__ = [
    "EnrichmentResult",
    "WordEnrichmentService",
    "GeminiWordEnrichmentService",
    "EnrichmentWorker",
    "WorkerSignals",
    "build_enrichment_prompt",
    "parse_enrichment_json",
]
