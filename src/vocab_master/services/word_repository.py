"""Word Repository - owns the canonical word collection and its mutations."""

import logging
import uuid
from datetime import datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional

from vocab_master.core import DEFAULT_LEVEL, AppState, Example, Word, WordStats

logger = logging.getLogger(__name__)

TEXT_FIELDS = (
    "english",
    "turkish",
    "pronunciation",
    "english_explanation",
    "turkish_explanation",
    "notes",
)
LIST_FIELDS = ("synonyms", "antonyms", "categories")
UPDATABLE_FIELDS = TEXT_FIELDS + LIST_FIELDS + ("examples", "level", "favorite")


def _new_word_id() -> str:
    return str(uuid.uuid4())


def _clean_list(values: Optional[Iterable[Any]]) -> List[str]:
    cleaned: Dict[str, None] = {}
    for value in values or []:
        text = str(value).strip()
        if text:
            cleaned.setdefault(text, None)
    return list(cleaned)


def _normalized(text: Optional[str]) -> str:
    return (text or "").strip().lower()


class WordRepository:
    """Application service owning Word records inside the AppState.

    Permissive: malformed input is stored as given and validation
    is the caller's job (see word_validation). Operations on unknown ids
    return None/False instead of raising.
    """

    def __init__(
        self,
        state: AppState,
        clock: Callable[[], datetime] = datetime.now,
        id_factory: Callable[[], str] = _new_word_id,
    ) -> None:
        self._state = state
        self._clock = clock
        self._id_factory = id_factory

    # ---- queries ----
    def get(self, word_id: str) -> Optional[Word]:
        return self._state.words.get(word_id)

    def list_words(self) -> List[Word]:
        return list(self._state.words.values())

    def __len__(self) -> int:
        return len(self._state.words)

    def __contains__(self, word_id: object) -> bool:
        return word_id in self._state.words

    def find_duplicate(self, english: Optional[str], turkish: Optional[str] = None) -> Optional[Word]:
        """Find a possible duplicate of an english/turkish pair.

        A word matches when its trimmed english equals ``english``
        case-insensitively, or when a non-empty ``turkish`` is given and its
        trimmed turkish matches case-insensitively. Either match alone is
        enough. This is a warning signal; duplicates are allowed once the
        caller confirms.

        Returns:
            The first matching word, or None.
        """
        e = _normalized(english)
        if not e:
            return None
        t = _normalized(turkish)
        for word in self._state.words.values():
            if word.english and _normalized(word.english) == e:
                return word
            if t and word.turkish and _normalized(word.turkish) == t:
                return word
        return None

    def search(
        self,
        query: str = "",
        level: Optional[str] = None,
        category: Optional[str] = None,
    ) -> List[Word]:
        """Filter words for the dictionary view."""
        needle = query.strip().lower()
        results = []
        for word in self._state.words.values():
            if needle and not (
                needle in word.english.lower()
                or needle in word.turkish.lower()
                or needle in word.english_explanation.lower()
            ):
                continue
            if level and word.level != level:
                continue
            if category and category not in word.categories:
                continue
            results.append(word)
        return results

    # ---- mutations ----
    def add(self, data: Mapping[str, Any]) -> Word:
        """Create a word with a fresh id and default field values."""
        now = self._clock()
        word = Word(
            id=self._id_factory(),
            english=str(data.get("english") or "").strip(),
            turkish=str(data.get("turkish") or "").strip(),
            stats=WordStats.fresh(now),
            pronunciation=str(data.get("pronunciation") or "").strip(),
            english_explanation=str(data.get("english_explanation") or "").strip(),
            turkish_explanation=str(data.get("turkish_explanation") or "").strip(),
            notes=str(data.get("notes") or "").strip(),
            synonyms=_clean_list(data.get("synonyms")),
            antonyms=_clean_list(data.get("antonyms")),
            examples=[Example.from_raw(e) for e in data.get("examples") or []],
            level=data.get("level") or DEFAULT_LEVEL,
            categories=_clean_list(data.get("categories")),
            favorite=bool(data.get("favorite", False)),
        )
        self._state.words[word.id] = word
        logger.info("Added word %s (%s)", word.id, word.english)
        return word

    def insert(self, word: Word) -> Word:
        """Insert an existing Word verbatim, keeping its id."""
        self._state.words[word.id] = word
        return word

    def update(self, word_id: str, partial: Mapping[str, Any]) -> Optional[Word]:
        """Overwrite only the provided fields; stats and id are never touched.

        Returns:
            The updated word, or None if ``word_id`` is unknown.
        """
        word = self._state.words.get(word_id)
        if word is None:
            return None
        for key, value in partial.items():
            if key not in UPDATABLE_FIELDS:
                logger.debug("Ignoring non-updatable field %r for word %s", key, word_id)
                continue
            if key in TEXT_FIELDS:
                value = str(value or "").strip()
            elif key in LIST_FIELDS:
                value = _clean_list(value)
            elif key == "examples":
                value = [Example.from_raw(e) for e in value or []]
            elif key == "favorite":
                value = bool(value)
            elif key == "level":
                value = value or DEFAULT_LEVEL
            setattr(word, key, value)
        return word

    def delete(self, word_id: str) -> bool:
        if self._state.words.pop(word_id, None) is None:
            return False
        logger.info("Deleted word %s", word_id)
        return True

    def toggle_favorite(self, word_id: str) -> bool:
        """Flip the favorite flag.

        Returns:
            The new value, or False if the word is unknown.
        """
        word = self._state.words.get(word_id)
        if word is None:
            return False
        word.favorite = not word.favorite
        return word.favorite

    def toggle_learned(self, word_id: str) -> bool:
        """Manual learned toggle from the quiz summary; False if unknown."""
        word = self._state.words.get(word_id)
        if word is None:
            return False
        word.stats.learned = not word.stats.learned
        return word.stats.learned

    def reset_stats(self, word_id: str) -> bool:
        word = self._state.words.get(word_id)
        if word is None:
            return False
        word.stats = WordStats(added_at=word.stats.added_at, next_review_date=self._clock())
        return True

    def clear(self) -> None:
        self._state.words.clear()

    # ---- categories ----
    def list_categories(self) -> List[str]:
        """Union of categories referenced by words and registered top-level."""
        names = set(self._state.categories)
        for word in self._state.words.values():
            names.update(word.categories)
        return sorted(names)

    def words_by_category(self, name: str) -> List[Word]:
        return [w for w in self._state.words.values() if name in w.categories]

    def add_category(self, name: str) -> bool:
        n = (name or "").strip()
        if not n or n in self._state.categories:
            return False
        self._state.categories.append(n)
        return True

    def rename_category(self, old_name: str, new_name: str) -> bool:
        """Rename a category everywhere it appears.

        Returns:
            False for empty names, identical names, or a target that is
            already registered; True otherwise.
        """
        o = (old_name or "").strip()
        n = (new_name or "").strip()
        if not o or not n or o == n:
            return False
        if n in self._state.categories:
            return False

        self._state.categories = [n if c == o else c for c in self._state.categories]
        for word in self._state.words.values():
            if o in word.categories:
                word.categories = _clean_list(n if c == o else c for c in word.categories)
        logger.info("Renamed category %r to %r", o, n)
        return True

    def delete_category(self, name: str) -> bool:
        n = (name or "").strip()
        if not n:
            return False
        self._state.categories = [c for c in self._state.categories if c != n]
        for word in self._state.words.values():
            if n in word.categories:
                word.categories = [c for c in word.categories if c != n]
        logger.info("Deleted category %r", n)
        return True
