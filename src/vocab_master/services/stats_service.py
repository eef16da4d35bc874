"""Stats Service - derived counters and distributions for the dashboard."""

from collections import Counter
from typing import Dict

from vocab_master.core import LEVELS, AppState, AppStats
from vocab_master.services.review_scheduler import ReviewScheduler


class StatsService:
    def __init__(self, state: AppState) -> None:
        self._state = state

    def refresh(self) -> AppStats:
        """Recompute the counters in ``app_stats``; the streak is left alone."""
        words = list(self._state.words.values())
        stats = self._state.app_stats
        stats.total_added = len(words)
        stats.total_learned = sum(1 for w in words if w.stats.learned)
        stats.favorites_count = sum(1 for w in words if w.favorite)
        stats.hard_count = sum(1 for w in words if ReviewScheduler.is_hard(w))
        return stats

    def level_distribution(self) -> Dict[str, int]:
        counts = Counter(w.level for w in self._state.words.values())
        ordered = {level: counts[level] for level in LEVELS if counts[level]}
        for level, count in counts.items():
            ordered.setdefault(level, count)
        return ordered

    def category_distribution(self) -> Dict[str, int]:
        counts: Counter = Counter()
        for word in self._state.words.values():
            counts.update(word.categories)
        return dict(sorted(counts.items()))

    def accuracy(self) -> float:
        """Share of correct answers over all finished quizzes, 0.0 when none."""
        total = sum(h.total for h in self._state.history)
        if not total:
            return 0.0
        return sum(h.score for h in self._state.history) / total
