"""Review Scheduler - spaced-repetition intervals and hard-word classification."""

from datetime import datetime, timedelta
from typing import Callable, List, Optional

from vocab_master.core import AppState, Word

REVIEW_INTERVALS_DAYS = (1, 3, 7, 14, 30, 90)
WRONG_ANSWER_DELAY_DAYS = 1
WRONG_ANSWER_PENALTY = 2
LEARNED_MIN_CORRECT = 5
HARD_DIFFICULTY_THRESHOLD = 3
HARD_MIN_TESTS = 3
HARD_ERROR_RATE = 0.4


def interval_days(correct_count: int, wrong_count: int) -> int:
    """Ladder step for a net streak of ``correct_count - wrong_count``.

    The index is recomputed from the counters on every call, so a wrong
    answer pulls it back and later correct answers push it forward again.
    """
    index = correct_count - wrong_count - 1
    index = min(max(0, index), len(REVIEW_INTERVALS_DAYS) - 1)
    return REVIEW_INTERVALS_DAYS[index]


class ReviewScheduler:
    """Updates word stats from quiz outcomes and answers due/hard queries."""

    def __init__(self, state: AppState, clock: Callable[[], datetime] = datetime.now) -> None:
        self._state = state
        self._clock = clock

    def record_answer(self, word: Word, correct: bool) -> None:
        stats = word.stats
        now = self._clock()
        stats.times_tested += 1
        stats.last_tested = now

        if correct:
            stats.correct_count += 1
            stats.difficulty_score = max(0, stats.difficulty_score - 1)
            days = interval_days(stats.correct_count, stats.wrong_count)
        else:
            stats.wrong_count += 1
            stats.difficulty_score += WRONG_ANSWER_PENALTY
            days = WRONG_ANSWER_DELAY_DAYS
        stats.next_review_date = now + timedelta(days=days)

        # Never cleared here; only a manual toggle or stats reset does that.
        if stats.correct_count >= LEARNED_MIN_CORRECT and stats.wrong_count == 0:
            stats.learned = True

    @staticmethod
    def is_hard(word: Word) -> bool:
        stats = word.stats
        if stats.difficulty_score >= HARD_DIFFICULTY_THRESHOLD:
            return True
        return (
            stats.times_tested >= HARD_MIN_TESTS
            and stats.wrong_count / stats.times_tested >= HARD_ERROR_RATE
        )

    def hard_words(self) -> List[Word]:
        return [w for w in self._state.words.values() if self.is_hard(w)]

    def due_words(self, now: Optional[datetime] = None) -> List[Word]:
        now = now or self._clock()
        return [w for w in self._state.words.values() if w.stats.next_review_date <= now]

    def has_due_words(self, minimum: int = 1, now: Optional[datetime] = None) -> bool:
        return len(self.due_words(now)) >= minimum
