"""Streak Tracker - consecutive-day usage counter."""

import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from vocab_master.core import AppState, Streak

logger = logging.getLogger(__name__)


class StreakTracker:
    """Owns ``app_stats.streak``.

    Days are compared as local calendar dates, not elapsed hours: crossing
    midnight always starts a new day.
    """

    def __init__(self, state: AppState, clock: Callable[[], datetime] = datetime.now) -> None:
        self._state = state
        self._clock = clock

    @property
    def streak(self) -> Streak:
        return self._state.app_stats.streak

    def record_activity(self, now: Optional[datetime] = None) -> None:
        now = now or self._clock()
        streak = self.streak
        last_day = streak.last_active.date() if streak.last_active else None
        today = now.date()

        if last_day == today:
            return

        if last_day == today - timedelta(days=1):
            streak.current += 1
        else:
            streak.current = 1

        streak.last_active = now
        streak.best = max(streak.best, streak.current)
        logger.info("Streak is now %d (best %d)", streak.current, streak.best)

    def has_activity_on(self, now: Optional[datetime] = None) -> bool:
        """Whether any activity was recorded on ``now``'s calendar day."""
        now = now or self._clock()
        last_active = self.streak.last_active
        return last_active is not None and last_active.date() == now.date()
