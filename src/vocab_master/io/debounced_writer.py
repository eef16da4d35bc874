"""Write-coalescing policy for state persistence."""

import logging
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from vocab_master.core import PersistenceError

logger = logging.getLogger(__name__)


class DebouncedWriter(QObject):
    """Coalesces rapid mutations into a single write after a quiet period.

    ``mark_dirty`` sets the pending flag and restarts a single-shot timer;
    the write happens when the timer fires. ``flush`` writes immediately
    and is used for must-persist entry points (explicit save, import,
    shutdown). A failed write keeps the pending flag so the next mutation
    or flush retries.
    """

    saved = Signal()
    save_failed = Signal(str)

    DEFAULT_QUIET_PERIOD_MS = 1000

    def __init__(
        self,
        write: Callable[[], None],
        quiet_period_ms: int = DEFAULT_QUIET_PERIOD_MS,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        if write is None:
            raise ValueError("write callback must not be None")
        self._write = write
        self._pending = False
        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.setInterval(quiet_period_ms)
        self._timer.timeout.connect(self._on_quiet_period)

    @property
    def pending(self) -> bool:
        return self._pending

    @property
    def quiet_period_ms(self) -> int:
        return self._timer.interval()

    def mark_dirty(self) -> None:
        self._pending = True
        self._timer.start()

    def flush(self) -> bool:
        """Write now if anything is pending.

        Returns:
            True if a write happened, False if nothing was pending.

        Raises:
            PersistenceError: If the write fails; the pending flag stays set.
        """
        self._timer.stop()
        if not self._pending:
            return False
        self._write()
        self._pending = False
        self.saved.emit()
        return True

    @Slot()
    def _on_quiet_period(self) -> None:
        try:
            self.flush()
        except PersistenceError as e:
            logger.error("Deferred save failed: %s", e)
            self.save_failed.emit(str(e))
