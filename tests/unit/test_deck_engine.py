"""
Unit tests for DeckEngine.

Tests loading, study order, response bookkeeping, progress, structural
edits and persistence.
"""

import random
from datetime import datetime

import pytest

from flashdeck.deck import DeckEngine, MismatchError
from flashdeck.deck.engine import NO_RESPONSE


# ============================================================================
# Fixtures
# ============================================================================


@pytest.fixture
def deck_files(tmp_path):
    questions = tmp_path / "questions.txt"
    answers = tmp_path / "answers.txt"
    questions.write_text("2+2?\n\n3*3?\n10/2?\n", encoding="utf-8")
    answers.write_text("4\n9\n  \n5\n", encoding="utf-8")
    return questions, answers


@pytest.fixture
def engine(deck_files):
    return DeckEngine.from_files(*deck_files, rng=random.Random(42))


@pytest.fixture
def single_card(tmp_path):
    questions = tmp_path / "q.txt"
    answers = tmp_path / "a.txt"
    questions.write_text("2+2?\n", encoding="utf-8")
    answers.write_text("4\n", encoding="utf-8")
    return DeckEngine.from_files(questions, answers)


# ============================================================================
# Loading
# ============================================================================


class TestFromFiles:
    """Test deck loading."""

    def test_loads_aligned_cards(self, engine):
        assert engine.questions == ["2+2?", "3*3?", "10/2?"]
        assert engine.answers == ["4", "9", "5"]
        assert engine.order == [0, 1, 2]
        assert engine.current == 0
        assert engine.responses == {}

    def test_mismatch_reports_both_counts(self, tmp_path):
        questions = tmp_path / "questions.txt"
        answers = tmp_path / "answers.txt"
        questions.write_text("a\nb\nc\n", encoding="utf-8")
        answers.write_text("1\n2\n", encoding="utf-8")

        with pytest.raises(MismatchError) as exc_info:
            DeckEngine.from_files(questions, answers)

        assert exc_info.value.counts == (3, 2)
        assert "3 questions vs 2 answers" in str(exc_info.value)

    def test_missing_file_raises_oserror(self, tmp_path):
        (tmp_path / "questions.txt").write_text("a\n", encoding="utf-8")

        with pytest.raises(OSError):
            DeckEngine.from_files(tmp_path / "questions.txt", tmp_path / "answers.txt")

    def test_constructor_rejects_unequal_sequences(self, tmp_path):
        with pytest.raises(MismatchError):
            DeckEngine(tmp_path / "q", tmp_path / "a", ["a", "b"], ["1"])


# ============================================================================
# Study Order
# ============================================================================


class TestSetMode:
    """Test sequential and random study order."""

    def test_sequential_is_identity(self, engine):
        engine.set_mode(False)
        assert engine.order == [0, 1, 2]
        assert engine.random is False

    def test_random_is_permutation(self, engine):
        for _ in range(10):
            engine.set_mode(True)
            assert sorted(engine.order) == [0, 1, 2]
        assert engine.random is True

    def test_random_actually_shuffles(self, tmp_path):
        n = 30
        deck = DeckEngine(
            tmp_path / "q", tmp_path / "a",
            [f"q{i}" for i in range(n)], [f"a{i}" for i in range(n)],
            rng=random.Random(1),
        )
        deck.set_mode(True)

        assert deck.order != list(range(n))
        assert sorted(deck.order) == list(range(n))

    def test_set_mode_rewinds_cursor(self, engine):
        engine.set_mode(False)
        engine.advance()
        engine.advance()

        engine.set_mode(True)

        assert engine.current == 0


# ============================================================================
# Session Progress
# ============================================================================


class TestSession:
    """Test walking through a session."""

    def test_single_card_scenario(self, single_card):
        single_card.set_mode(False)
        assert single_card.current_card() == (0, "2+2?", "4")

        single_card.record(0, "4")
        single_card.advance()

        assert single_card.is_complete() is True
        assert single_card.progress() == 1.0
        assert single_card.current_card() is None

    def test_current_card_follows_order(self, engine):
        engine.set_mode(False)
        engine.order = [2, 0, 1]

        assert engine.current_card() == (2, "10/2?", "5")

    def test_progress_is_monotonic_and_ends_at_one(self, engine):
        engine.set_mode(True)
        seen = [engine.progress()]
        while not engine.is_complete():
            engine.advance()
            seen.append(engine.progress())

        assert seen == sorted(seen)
        assert seen[0] == 0.0
        assert seen[-1] == 1.0

    def test_empty_deck_progress_guards_division(self, tmp_path):
        deck = DeckEngine(tmp_path / "q", tmp_path / "a", [], [])
        deck.set_mode(False)

        assert deck.progress() == 0.0
        assert deck.is_complete() is True
        assert deck.current_card() is None

    def test_record_last_write_wins(self, engine):
        engine.record(1, "8")
        engine.record(1, "9")

        assert engine.responses == {1: "9"}
        assert engine.seen == {1}

    def test_empty_response_is_recorded(self, engine):
        engine.record(0, "")

        assert engine.responses == {0: ""}

    def test_response_keys_never_exceed_deck_size(self, engine):
        engine.set_mode(True)
        while not engine.is_complete():
            index, _, _ = engine.current_card()
            engine.record(index, "x")
            engine.record(index, "y")
            engine.advance()

        assert len(engine.responses) == len(engine.questions)

    def test_answered_sorted_by_deck_index(self, engine):
        engine.record(2, "five")
        engine.record(0, "four")

        assert engine.answered() == [
            (0, "2+2?", "four", "4"),
            (2, "10/2?", "five", "5"),
        ]


# ============================================================================
# Structural Edits
# ============================================================================


class TestEdits:
    """Test inserting, deleting and editing cards."""

    def test_insert_appends_blank_card(self, engine):
        index = engine.insert_card()

        assert index == 3
        assert engine.questions[-1] == ""
        assert engine.answers[-1] == ""
        assert engine.order == [0, 1, 2, 3]
        assert len(engine.questions) == len(engine.answers)

    def test_delete_removes_from_both_sides(self, engine):
        engine.delete_card(1)

        assert engine.questions == ["2+2?", "10/2?"]
        assert engine.answers == ["4", "5"]
        assert engine.order == [0, 1]

    def test_delete_only_card(self, single_card):
        single_card.delete_card(0)

        assert single_card.questions == []
        assert single_card.answers == []
        assert single_card.order == []

    def test_delete_out_of_range(self, engine):
        with pytest.raises(IndexError):
            engine.delete_card(3)
        assert len(engine.questions) == 3

    def test_delete_shifts_responses(self, engine):
        engine.record(0, "four")
        engine.record(1, "nine")
        engine.record(2, "five")

        engine.delete_card(1)

        assert engine.responses == {0: "four", 1: "five"}
        assert engine.seen == {0, 1}

    def test_delete_clamps_cursor(self, engine):
        engine.set_mode(False)
        engine.current = 3
        engine.delete_card(0)

        assert engine.current == 2
        assert engine.is_complete()

    def test_update_fields(self, engine):
        engine.update_question(0, "two plus two?")
        engine.update_answer(0, "four")

        assert engine.current_card() == (0, "two plus two?", "four")


# ============================================================================
# Persistence
# ============================================================================


class TestPersistence:
    """Test writing decks and transcripts."""

    def test_persist_round_trip(self, engine, deck_files):
        engine.update_question(1, "3 times 3?")
        engine.delete_card(2)
        engine.insert_card()
        engine.update_question(2, "1+1?")
        engine.update_answer(2, "2")

        engine.persist_edits()
        reloaded = DeckEngine.from_files(*deck_files)

        assert reloaded.questions == engine.questions
        assert reloaded.answers == engine.answers

    def test_persist_failure_keeps_memory_state(self, engine, monkeypatch):
        import flashdeck.deck.engine as engine_module

        def fail(path, lines):
            raise PermissionError("read-only")

        monkeypatch.setattr(engine_module, "stage_lines", fail)
        engine.update_question(0, "changed")

        with pytest.raises(OSError):
            engine.persist_edits()
        assert engine.questions[0] == "changed"

    def test_failed_answers_write_keeps_deck_loadable(self, engine, deck_files, monkeypatch):
        """A save that fails on the answers file must not touch the questions file."""
        import flashdeck.deck.engine as engine_module

        real_stage = engine_module.stage_lines

        def fail_answers(path, lines):
            if path == engine.answers_path:
                raise OSError("disk full")
            return real_stage(path, lines)

        monkeypatch.setattr(engine_module, "stage_lines", fail_answers)
        engine.delete_card(0)

        with pytest.raises(OSError, match="disk full"):
            engine.persist_edits()

        reloaded = DeckEngine.from_files(*deck_files)
        assert reloaded.questions == ["2+2?", "3*3?", "10/2?"]
        assert reloaded.answers == ["4", "9", "5"]
        assert sorted(p.name for p in deck_files[0].parent.iterdir()) == [
            "answers.txt",
            "questions.txt",
        ]

    def test_transcript_lists_cards_in_study_order(self, engine):
        engine.set_mode(False)
        engine.order = [2, 0, 1]
        engine.record(2, "5")
        engine.record(0, "four")

        text = engine.render_transcript()

        assert text.index("Q1 (#3)") < text.index("Q2 (#1)") < text.index("Q3 (#2)")
        assert "Your answer:\nfour\n" in text
        assert f"Your answer:\n{NO_RESPONSE}\n" in text
        assert "Correct:\n9\n" in text
        assert text.count("-" * 60) == 3

    def test_save_session_writes_timestamped_file(self, engine, tmp_path):
        engine.set_mode(False)
        engine.record(0, "4")
        out_dir = tmp_path / "transcripts"

        path = engine.save_session(out_dir, now=datetime(2024, 3, 5, 14, 7, 9))

        assert path == out_dir / "flashcard_responses_20240305-140709.txt"
        assert path.read_text(encoding="utf-8") == engine.render_transcript()
