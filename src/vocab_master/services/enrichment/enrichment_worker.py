"""Async worker for non-blocking enrichment calls using Qt threading."""

from PySide6.QtCore import QObject, QRunnable, Signal, Slot

from vocab_master.services.enrichment.word_enrichment_service import WordEnrichmentService


class WorkerSignals(QObject):
    """
    Signals for communicating results from worker threads.

    QRunnable doesn't inherit from QObject, so we need a separate
    QObject to hold the signals.
    """
    finished = Signal()
    error = Signal(str)
    result = Signal(object)  # EnrichmentResult


class EnrichmentWorker(QRunnable):
    """
    Worker that runs an enrichment API call in a background thread.

    Submit it to QThreadPool.globalInstance(); results arrive via signals.
    """

    def __init__(self, service: WordEnrichmentService, english: str, api_key: str):
        super().__init__()
        self.service = service
        self.english = english
        self.api_key = api_key
        self.signals = WorkerSignals()
        self.setAutoDelete(True)

    @Slot()
    def run(self):
        """Execute the enrichment API call in background thread."""
        try:
            result = self.service.enrich(english=self.english, api_key=self.api_key)
            self.signals.result.emit(result)
        except Exception as e:
            # Anything the service did not classify itself
            self.signals.error.emit(f"Unexpected enrichment error: {e}")
        finally:
            self.signals.finished.emit()
