"""Reminder Coordinator - decides when to nudge the user to study."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from vocab_master.core import AppState
from vocab_master.services import MIN_QUIZ_WORDS, ReviewScheduler, StreakTracker

logger = logging.getLogger(__name__)

POLL_INTERVAL_MS = 60_000
REMINDER_WINDOW_MINUTES = 5
SNOOZE_HOURS = 1


def _parse_hour(value: str) -> Optional[tuple]:
    try:
        hours, minutes = (int(part) for part in value.split(":", 1))
    except (AttributeError, ValueError):
        return None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        return None
    return hours, minutes


class ReminderCoordinator(QObject):
    """
    Polls once a minute and emits reminder_due around the configured hour.

    Displaying the notification is the caller's job; this object only
    decides. At most one reminder fires per day: a reminder counts as
    handled once it fires, and any activity that day silences it too.
    """

    reminder_due = Signal(bool)  # whether a daily test is available

    def __init__(
        self,
        state: AppState,
        scheduler: ReviewScheduler,
        streak_tracker: StreakTracker,
        clock: Callable[[], datetime] = datetime.now,
        parent: Optional[QObject] = None,
    ):
        super().__init__(parent)
        if state is None:
            raise ValueError("AppState must not be None")
        if streak_tracker is None:
            raise ValueError("StreakTracker must not be None")

        self.state = state
        self.scheduler = scheduler
        self.streak_tracker = streak_tracker
        self._clock = clock
        self._snoozed_until: Optional[datetime] = None
        self._last_fired_on = None

        self._timer = QTimer(self)
        self._timer.setInterval(POLL_INTERVAL_MS)
        self._timer.timeout.connect(self._on_poll)

    @property
    def snoozed_until(self) -> Optional[datetime]:
        return self._snoozed_until

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def is_active(self) -> bool:
        return self._timer.isActive()

    def should_remind(self, now: Optional[datetime] = None) -> bool:
        now = now or self._clock()
        settings = self.state.settings
        if not settings.notification_enabled:
            return False

        target = _parse_hour(settings.notification_hour)
        if target is None:
            logger.warning("Ignoring invalid reminder hour %r", settings.notification_hour)
            return False

        if self._snoozed_until is not None and now < self._snoozed_until:
            return False
        if self._last_fired_on == now.date():
            return False

        reminder_at = now.replace(hour=target[0], minute=target[1], second=0, microsecond=0)
        if abs(now - reminder_at) > timedelta(minutes=REMINDER_WINDOW_MINUTES):
            return False

        return not self.streak_tracker.has_activity_on(now)

    def check(self, now: Optional[datetime] = None) -> bool:
        """Emit reminder_due if a reminder is due now. Returns whether it fired."""
        now = now or self._clock()
        if not self.should_remind(now):
            return False

        self._last_fired_on = now.date()
        daily_test_ready = self.scheduler.has_due_words(MIN_QUIZ_WORDS, now)
        logger.info("Study reminder due (daily test ready: %s)", daily_test_ready)
        self.reminder_due.emit(daily_test_ready)
        return True

    def snooze(self, now: Optional[datetime] = None, hours: int = SNOOZE_HOURS) -> datetime:
        """Silence reminders for ``hours``; the current day's reminder may fire again afterwards."""
        now = now or self._clock()
        self._snoozed_until = now + timedelta(hours=hours)
        self._last_fired_on = None
        return self._snoozed_until

    @Slot()
    def _on_poll(self) -> None:
        self.check()
