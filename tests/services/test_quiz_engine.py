"""Unit tests for QuizEngine and QuizSession."""

import random
from datetime import datetime, timedelta
from itertools import count

import pytest

from vocab_master.core import (
    AppState,
    Question,
    QuestionType,
    QuizSource,
    QuizState,
    QuizStateError,
    ValidationError,
)
from vocab_master.services import (
    MIN_QUIZ_WORDS,
    QuizEngine,
    ReviewScheduler,
    StreakTracker,
    WordRepository,
    evaluate_answer,
)


NOW = datetime(2024, 3, 10, 9, 30)

WORDS = [
    ("apple", "elma", "A1"),
    ("book", "kitap", "A1"),
    ("cat", "kedi", "A1"),
    ("dog", "köpek", "A1"),
    ("egg", "yumurta", "A1"),
    ("fish", "balık", "A1"),
]


class Clock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def clock():
    return Clock(NOW)


@pytest.fixture
def state():
    return AppState.default(NOW)


@pytest.fixture
def repository(state, clock):
    ids = count(1)
    return WordRepository(state, clock=clock, id_factory=lambda: f"w{next(ids)}")


@pytest.fixture
def engine(state, repository, clock):
    scheduler = ReviewScheduler(state, clock=clock)
    streak = StreakTracker(state, clock=clock)
    quiz_ids = count(1)
    return QuizEngine(
        state,
        repository,
        scheduler,
        streak,
        rng=random.Random(42),
        clock=clock,
        id_factory=lambda: f"quiz{next(quiz_ids)}",
    )


def add_words(repository, n=len(WORDS)):
    return [
        repository.add({"english": e, "turkish": t, "level": level})
        for e, t, level in WORDS[:n]
    ]


def answer_all_correctly(session):
    while True:
        question = session.current_question
        expected = question.word.turkish if question.type is QuestionType.DIRECT else question.word.english
        session.submit_answer(expected)
        if not session.next_question():
            break


class TestStart:
    def test_insufficient_words_blocks_quiz(self, engine, repository):
        add_words(repository, 4)
        with pytest.raises(ValidationError, match="Insufficient words"):
            engine.start(QuizSource.all(), [QuestionType.DIRECT])

    def test_no_question_type_is_rejected(self, engine, repository):
        add_words(repository)
        with pytest.raises(ValidationError, match="question type"):
            engine.start(QuizSource.all(), [])

    def test_unknown_question_type_is_rejected(self, engine, repository):
        add_words(repository)
        with pytest.raises(ValidationError):
            engine.start(QuizSource.all(), ["spelling"])

    def test_word_count_below_one_is_rejected(self, engine, repository):
        add_words(repository)
        with pytest.raises(ValidationError):
            engine.start(QuizSource.all(), ["direct"], word_count=0)

    def test_questions_are_words_times_types(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct", "writing"], word_count=5)

        assert session.state is QuizState.IN_PROGRESS
        assert session.total == 10
        assert len({q.word.id for q in session.questions}) == 5

    def test_sessions_start_in_progress(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        assert session.state is QuizState.IN_PROGRESS
        assert list(QuizState) == [QuizState.IN_PROGRESS, QuizState.COMPLETE]

    def test_questions_are_hashable(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct", "reverse"], word_count=5)

        seen = {question: i for i, question in enumerate(session.questions)}

        assert len(seen) == 10
        assert seen[session.current_question] == 0

    def test_without_randomize_types_are_grouped_per_word(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct", "reverse"], word_count=3)
        questions = session.questions
        for i in range(0, len(questions), 2):
            assert questions[i].word.id == questions[i + 1].word.id
            assert questions[i].type is QuestionType.DIRECT
            assert questions[i + 1].type is QuestionType.REVERSE

    def test_word_count_is_capped_by_available_words(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=50)
        assert session.total == len(WORDS)

    def test_custom_source_uses_every_given_word(self, engine, repository):
        words = add_words(repository)
        ids = [w.id for w in words]
        session = engine.start(QuizSource.custom(ids), ["direct", "reverse"], word_count=2)

        assert session.total == 6 * 2
        assert [q.word.id for q in session.questions[::2]] == ids

    def test_custom_source_below_minimum_is_allowed(self, engine, repository):
        words = add_words(repository)
        session = engine.start(QuizSource.custom([words[0].id, "unknown"]), ["direct"])
        assert session.total == 1

    def test_empty_custom_source_is_rejected(self, engine, repository):
        add_words(repository)
        with pytest.raises(ValidationError):
            engine.start(QuizSource.custom(["unknown"]), ["direct"])

    def test_category_and_favorite_sources(self, engine, repository):
        words = add_words(repository)
        for w in words[:5]:
            repository.update(w.id, {"categories": ["Animals"], "favorite": True})

        by_category = engine.start(QuizSource.for_category("Animals"), ["direct"])
        favorites = engine.start(QuizSource.favorites(), ["direct"])

        expected = {w.id for w in words[:5]}
        assert {q.word.id for q in by_category.questions} == expected
        assert {q.word.id for q in favorites.questions} == expected

    def test_due_source_skips_future_words(self, engine, repository):
        words = add_words(repository)
        words[0].stats.next_review_date = NOW + timedelta(days=3)
        session = engine.start(QuizSource.due(), ["direct"], word_count=10)
        assert words[0].id not in {q.word.id for q in session.questions}
        assert session.total == 5

    def test_minimum_is_five(self):
        assert MIN_QUIZ_WORDS == 5


class TestEvaluateAnswer:
    def test_direct_is_exact(self, repository):
        word = repository.add({"english": "apple", "turkish": "elma"})
        assert evaluate_answer(Question(word, QuestionType.DIRECT), "elma").correct is True
        assert evaluate_answer(Question(word, QuestionType.DIRECT), "Elma").correct is False

    def test_typed_answers_ignore_case(self, repository):
        word = repository.add({"english": "Apple", "turkish": "elma"})
        result = evaluate_answer(Question(word, QuestionType.WRITING), "aPPLE")
        assert result.correct is True
        assert result.correct_answer == "Apple"
        assert evaluate_answer(Question(word, QuestionType.LISTENING), "apple").correct is True


class TestSession:
    def test_submit_updates_stats_and_does_not_advance(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        word = session.current_question.word

        result = session.submit_answer(f"  {word.turkish} ")

        assert result.correct is True
        assert session.position == 0
        assert word.stats.times_tested == 1
        assert word.stats.correct_count == 1

    def test_empty_answer_is_rejected_without_side_effects(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        word = session.current_question.word

        with pytest.raises(ValidationError):
            session.submit_answer("   ")
        assert word.stats.times_tested == 0
        assert session.answers == ()

    def test_double_submit_is_rejected(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        session.submit_answer("wrong")
        with pytest.raises(QuizStateError):
            session.submit_answer("again")

    def test_present_is_stable_per_position(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        first = session.present()
        assert session.present() is first
        assert session.current_question.word.turkish in first.options

    def test_full_run_then_finish(self, engine, repository, state):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct", "writing"], word_count=5)

        answer_all_correctly(session)

        assert session.state is QuizState.COMPLETE
        assert session.current_question is None
        entry = session.finish()
        assert entry.score == entry.total == 10
        assert entry.percent == 100
        assert state.history == [entry]
        assert state.app_stats.streak.current == 1

    def test_word_results_group_per_word(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct", "reverse"], word_count=5)
        answer_all_correctly(session)

        results = session.word_results()
        assert len(results) == 5
        assert all(r.correct == r.total == 2 for r in results.values())

    def test_finish_before_complete_is_rejected(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        with pytest.raises(QuizStateError):
            session.finish()

    def test_finish_twice_is_rejected(self, engine, repository, state):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        answer_all_correctly(session)
        session.finish()
        with pytest.raises(QuizStateError):
            session.finish()
        assert len(state.history) == 1

    def test_streak_updates_once_per_quiz(self, engine, repository, state, clock):
        add_words(repository)
        for _ in range(2):
            session = engine.start(QuizSource.all(), ["direct"], word_count=5)
            answer_all_correctly(session)
            session.finish()
        assert state.app_stats.streak.current == 1

        clock.now = NOW + timedelta(days=1)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        answer_all_correctly(session)
        session.finish()
        assert state.app_stats.streak.current == 2

    def test_retake_replays_same_questions(self, engine, repository, state):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        answer_all_correctly(session)
        session.finish()
        questions = session.questions

        session.retake()

        assert session.state is QuizState.IN_PROGRESS
        assert session.questions == questions
        assert session.answers == ()
        assert session.position == 0
        answer_all_correctly(session)
        session.finish()
        assert len(state.history) == 2

    def test_retake_in_progress_is_rejected(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        with pytest.raises(QuizStateError):
            session.retake()

    def test_answer_for_deleted_word_is_not_recorded(self, engine, repository):
        add_words(repository)
        session = engine.start(QuizSource.all(), ["direct"], word_count=5)
        word = session.current_question.word
        repository.delete(word.id)

        session.submit_answer(word.turkish)

        assert word.stats.times_tested == 0
        assert len(session.answers) == 1
