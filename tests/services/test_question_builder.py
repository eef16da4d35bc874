"""Unit tests for question builders: distractors, cloze and letter pools."""

import random
from datetime import datetime

import pytest

from vocab_master.core import Example, Question, QuestionType, Word, WordStats
from vocab_master.services import (
    build_cloze,
    build_letter_pool,
    build_question_view,
    fill_slots,
    generate_distractors,
)
from vocab_master.services.question_builder import LISTENING_PROMPT, fixed_slots


NOW = datetime(2024, 3, 10, 9, 30)


def make_word(word_id, english, turkish, level="B1", **kwargs) -> Word:
    return Word(
        id=word_id,
        english=english,
        turkish=turkish,
        stats=WordStats.fresh(NOW),
        level=level,
        **kwargs,
    )


@pytest.fixture
def pool():
    return [
        make_word("1", "apple", "elma", "B1"),
        make_word("2", "bread", "ekmek", "B1"),
        make_word("3", "cheese", "peynir", "B1"),
        make_word("4", "dinner", "akşam yemeği", "B1"),
        make_word("5", "engine", "motor", "C2"),
        make_word("6", "forest", "orman", "C2"),
    ]


class TestDistractors:
    def test_never_include_correct_answer(self, pool):
        target = pool[0]
        for seed in range(50):
            options = generate_distractors(target, "turkish", pool, random.Random(seed))
            assert "elma" not in options
            assert len(options) == 3

    def test_prefer_same_level_when_enough(self, pool):
        target = pool[0]
        for seed in range(20):
            options = generate_distractors(target, "turkish", pool, random.Random(seed))
            assert set(options) == {"ekmek", "peynir", "akşam yemeği"}

    def test_fall_back_to_other_levels(self, pool):
        target = pool[4]  # only one other C2 word
        options = generate_distractors(target, "english", pool, random.Random(1))
        assert len(options) == 3
        assert "engine" not in options

    def test_same_text_as_answer_is_skipped(self):
        target = make_word("1", "bank", "banka")
        twin = make_word("2", "Bank", "kıyı")
        other = make_word("3", "river", "nehir")
        options = generate_distractors(target, "english", [target, twin, other], random.Random(0))
        assert options == ["river"]

    def test_small_pool_gives_fewer_options(self):
        target = make_word("1", "apple", "elma")
        only = make_word("2", "pear", "armut")
        assert generate_distractors(target, "turkish", [target, only], random.Random(0)) == ["armut"]


class TestCloze:
    def test_masks_word_in_first_example_ignoring_case(self):
        word = make_word(
            "1", "run", "koşmak",
            examples=[Example("Run fast and run far."), Example("Never used.")],
        )
        assert build_cloze(word) == "____ fast and ____ far."

    def test_falls_back_to_explanation(self):
        word = make_word("1", "run", "koşmak", english_explanation="To run is to move fast.")
        assert build_cloze(word) == "To ____ is to move fast."

    def test_regex_characters_are_literal(self):
        word = make_word("1", "C++", "C++", examples=[Example("I write C++ daily.")])
        assert build_cloze(word) == "I write ____ daily."

    def test_no_sentence_gives_empty_cloze(self):
        assert build_cloze(make_word("1", "run", "koşmak")) == ""


class TestLetterPool:
    def test_pool_is_a_permutation_of_letters(self):
        letters = build_letter_pool("ice-cream", random.Random(3))
        assert sorted(letters) == sorted("icecream")

    def test_fixed_slots_hold_non_letters(self):
        assert fixed_slots("ice cream") == {3: " "}
        assert fixed_slots("well-known") == {4: "-"}

    def test_fill_slots_rebuilds_answer(self):
        assert fill_slots("ice-cream", list("icecream")) == "ice-cream"

    def test_fill_slots_partial(self):
        assert fill_slots("abc", ["a"]) == "a"


class TestQuestionView:
    def test_direct_shows_english_and_turkish_options(self, pool):
        view = build_question_view(Question(pool[0], QuestionType.DIRECT), pool, random.Random(0))
        assert view.prompt == "apple"
        assert "elma" in view.options
        assert len(view.options) == 4

    def test_reverse_shows_turkish_and_english_options(self, pool):
        view = build_question_view(Question(pool[1], QuestionType.REVERSE), pool, random.Random(0))
        assert view.prompt == "ekmek"
        assert "bread" in view.options

    def test_writing_has_letter_pool(self, pool):
        word = make_word("9", "ice-cream", "dondurma", examples=[Example("I like ice-cream.")])
        view = build_question_view(Question(word, QuestionType.WRITING), pool, random.Random(0))
        assert view.cloze == "I like ____."
        assert sorted(view.letter_pool) == sorted("icecream")
        assert view.fixed_slots == {3: "-"}
        assert view.options == []

    def test_listening_plays_english(self, pool):
        view = build_question_view(Question(pool[2], QuestionType.LISTENING), pool, random.Random(0))
        assert view.prompt == LISTENING_PROMPT
        assert view.audio_text == "cheese"
