"""Speech Service - text-to-speech playback of english words."""

import logging
from typing import Callable, Optional

from PySide6.QtCore import QLocale, QObject, Signal, Slot
from PySide6.QtTextToSpeech import QTextToSpeech

logger = logging.getLogger(__name__)


class SpeechService(QObject):
    """Plays a literal string with fixed locale, rate and pitch.

    ``speak`` returns immediately; ``playback_finished`` fires with the
    spoken text once the engine goes back to Ready. A new request cancels
    whatever is still playing.
    """

    playback_finished = Signal(str)
    playback_failed = Signal(str)

    LOCALE = "en_US"
    RATE = -0.1  # Qt range is -1..1; a touch slower than normal
    PITCH = 0.0

    def __init__(
        self,
        engine_factory: Optional[Callable[[], QTextToSpeech]] = None,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        self._engine_factory = engine_factory or QTextToSpeech
        self._engine = None
        self._current_text: Optional[str] = None

    def _ensure_engine(self):
        if self._engine is None:
            engine = self._engine_factory()
            engine.setLocale(QLocale(self.LOCALE))
            engine.setRate(self.RATE)
            engine.setPitch(self.PITCH)
            engine.stateChanged.connect(self._on_state_changed)
            self._engine = engine
        return self._engine

    def speak(self, text: str) -> bool:
        """Request playback of ``text``.

        Returns:
            False if there was nothing to say, True once the request is queued.
        """
        text = (text or "").strip()
        if not text:
            return False
        engine = self._ensure_engine()
        engine.stop()
        self._current_text = text
        engine.say(text)
        return True

    def stop(self) -> None:
        if self._engine is not None:
            self._engine.stop()
        self._current_text = None

    @Slot(object)
    def _on_state_changed(self, state) -> None:
        if state == QTextToSpeech.State.Error:
            message = self._engine.errorString() if self._engine is not None else "unknown error"
            logger.warning("Speech playback failed: %s", message)
            self._current_text = None
            self.playback_failed.emit(message)
        elif state == QTextToSpeech.State.Ready and self._current_text is not None:
            text, self._current_text = self._current_text, None
            self.playback_finished.emit(text)
