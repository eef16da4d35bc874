"""Import Merge Resolver - reconciles imported words with the repository."""

import logging
import uuid
from dataclasses import dataclass, replace
from typing import Callable, Iterable

from vocab_master.core import AppState, Word
from vocab_master.services.word_repository import WordRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MergeResult:
    merged_count: int
    skipped_count: int


class ImportMergeResolver:
    """Applies an imported collection in merge or replace mode.

    Merge uses WordRepository.find_duplicate against the live repository,
    so duplicates inside the imported batch are caught too. The first
    occurrence wins; fields are never merged.
    """

    def __init__(
        self,
        state: AppState,
        repository: WordRepository,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
    ) -> None:
        self._state = state
        self._repository = repository
        self._id_factory = id_factory

    def merge(self, imported_words: Iterable[Word]) -> MergeResult:
        merged = 0
        skipped = 0
        for word in imported_words:
            if self._repository.find_duplicate(word.english, word.turkish) is not None:
                skipped += 1
                continue
            if not word.id or word.id in self._repository:
                # Same id, different word: keep ids unique.
                word = replace(word, id=self._id_factory())
            self._repository.insert(word)
            merged += 1
        logger.info("Merged %d words, skipped %d duplicates", merged, skipped)
        return MergeResult(merged_count=merged, skipped_count=skipped)

    def replace(self, imported_state: AppState) -> None:
        """Discard the current aggregate and adopt ``imported_state`` wholesale."""
        self._state.replace_with(imported_state)
        logger.info("Replaced state with imported data (%d words)", len(self._state.words))
