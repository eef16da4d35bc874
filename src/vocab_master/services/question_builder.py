"""Question builders - distractors, cloze sentences and letter pools."""

import random
import re
from typing import Dict, List, Optional, Sequence, TypeVar

from vocab_master.core import Question, QuestionType, QuestionView, Word

T = TypeVar("T")

DISTRACTOR_COUNT = 3
CLOZE_MASK = "____"
LISTENING_PROMPT = "Listen and type the word:"


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    """Return a uniformly shuffled copy of ``items``."""
    copy = list(items)
    rng.shuffle(copy)
    return copy


def answer_field(question_type: QuestionType) -> str:
    """Word attribute holding the correct answer for a question type."""
    return "turkish" if question_type is QuestionType.DIRECT else "english"


def generate_distractors(
    word: Word,
    field: str,
    pool: Sequence[Word],
    rng: random.Random,
    count: int = DISTRACTOR_COUNT,
) -> List[str]:
    """Pick wrong options for a multiple-choice question.

    Words sharing ``word``'s level are preferred when at least ``count`` of
    them exist; otherwise the whole pool is used. Each distractor is the
    word's ``field`` value, falling back to its english text. Values equal
    to the correct answer (case-insensitive) or already chosen are skipped,
    so fewer than ``count`` may come back for very small pools.
    """
    others = [w for w in pool if w.id != word.id]
    same_level = [w for w in others if w.level == word.level]
    preferred = same_level if len(same_level) >= count else others
    preferred_ids = {w.id for w in preferred}
    rest = [w for w in others if w.id not in preferred_ids]
    ordered = shuffled(preferred, rng) + shuffled(rest, rng)

    correct = (getattr(word, field) or word.english).strip().lower()
    chosen: List[str] = []
    seen = {correct}
    for candidate in ordered:
        value = getattr(candidate, field) or candidate.english
        key = value.strip().lower()
        if key in seen:
            continue
        seen.add(key)
        chosen.append(value)
        if len(chosen) == count:
            break
    return chosen


def build_options(word: Word, question_type: QuestionType, pool: Sequence[Word], rng: random.Random) -> List[str]:
    field = answer_field(question_type)
    distractors = generate_distractors(word, field, pool, rng)
    return shuffled([getattr(word, field)] + distractors, rng)


def build_cloze(word: Word) -> str:
    """Mask the english word inside its first example (or explanation)."""
    sentence = word.examples[0].english if word.examples else word.english_explanation
    sentence = sentence or ""
    if not word.english:
        return sentence
    return re.sub(re.escape(word.english), CLOZE_MASK, sentence, flags=re.IGNORECASE)


def fixed_slots(target: str) -> Dict[int, str]:
    """Positions in ``target`` that are not letters and are shown pre-filled."""
    return {i: ch for i, ch in enumerate(target) if not ch.isalpha()}


def build_letter_pool(target: str, rng: random.Random) -> List[str]:
    return shuffled([ch for ch in target if ch.isalpha()], rng)


def fill_slots(target: str, letters: Sequence[str]) -> str:
    """Rebuild an answer by placing ``letters`` into the fillable slots in order.

    Unfilled slots are left out, mirroring a partially answered puzzle.
    """
    fixed = fixed_slots(target)
    remaining = iter(letters)
    parts = []
    for index in range(len(target)):
        if index in fixed:
            parts.append(fixed[index])
        else:
            parts.append(next(remaining, ""))
    return "".join(parts).strip()


def build_question_view(question: Question, pool: Sequence[Word], rng: Optional[random.Random] = None) -> QuestionView:
    rng = rng or random.Random()
    word = question.word
    qtype = question.type

    if qtype is QuestionType.DIRECT:
        return QuestionView(question, prompt=word.english, options=build_options(word, qtype, pool, rng))
    if qtype is QuestionType.REVERSE:
        prompt = word.turkish or word.turkish_explanation
        return QuestionView(question, prompt=prompt, options=build_options(word, qtype, pool, rng))
    if qtype is QuestionType.WRITING:
        cloze = build_cloze(word)
        return QuestionView(
            question,
            prompt=cloze,
            cloze=cloze,
            letter_pool=build_letter_pool(word.english, rng),
            fixed_slots=fixed_slots(word.english),
        )
    return QuestionView(question, prompt=LISTENING_PROMPT, audio_text=word.english)
