"""
Deck Engine: one topic's cards, study order and responses.

Owns:
- Parallel question/answer sequences (always the same length)
- The study order (identity or shuffled permutation) and the cursor into it
- Recorded responses keyed by deck index, plus the set of seen indices
- Durable persistence of edited cards and the write-only session transcript
"""

from __future__ import annotations

import random
from datetime import datetime
from pathlib import Path

from loguru import logger

from .errors import MismatchError
from .line_store import commit_staged, discard_staged, read_nonempty_lines, stage_lines

# =============================================================================
# Transcript Format
# =============================================================================

TRANSCRIPT_PREFIX = "flashcard_responses"
TRANSCRIPT_TIMESTAMP = "%Y%m%d-%H%M%S"
NO_RESPONSE = "(none)"
TRANSCRIPT_SEPARATOR = "-" * 60


class DeckEngine:
    """
    Study engine for a single topic deck.

    ``order`` holds deck indices in presentation order and ``current`` is a
    cursor into ``order``; ``current == len(order)`` means the session is
    complete. Responses are keyed by deck index, not by order position.
    """

    def __init__(
        self,
        questions_path: Path,
        answers_path: Path,
        questions: list[str],
        answers: list[str],
        rng: random.Random | None = None,
    ):
        if len(questions) != len(answers):
            raise MismatchError(len(questions), len(answers))

        self.questions_path = Path(questions_path)
        self.answers_path = Path(answers_path)
        self.questions = list(questions)
        self.answers = list(answers)
        self.order: list[int] = list(range(len(self.questions)))
        self.current = 0
        self.random = False
        self.responses: dict[int, str] = {}
        self.seen: set[int] = set()
        self._rng = rng or random.Random()

    @classmethod
    def from_files(
        cls,
        questions_path: Path | str,
        answers_path: Path | str,
        rng: random.Random | None = None,
    ) -> DeckEngine:
        """
        Load a deck from its question and answer files.

        Raises:
            OSError: If either file cannot be read
            MismatchError: If the files hold different numbers of lines
        """
        questions = read_nonempty_lines(questions_path)
        answers = read_nonempty_lines(answers_path)
        if len(questions) != len(answers):
            logger.warning(
                f"Deck {questions_path} rejected: "
                f"{len(questions)} questions vs {len(answers)} answers"
            )
            raise MismatchError(len(questions), len(answers))

        logger.info(f"Loaded {len(questions)} cards from {questions_path}")
        return cls(Path(questions_path), Path(answers_path), questions, answers, rng=rng)

    def __len__(self) -> int:
        return len(self.questions)

    # =========================================================================
    # Study Session
    # =========================================================================

    def set_mode(self, random_order: bool) -> None:
        """Rebuild the study order (shuffled when ``random_order``) and rewind."""
        self.random = random_order
        self.order = list(range(len(self.questions)))
        if random_order:
            self._rng.shuffle(self.order)
        self.current = 0
        logger.debug(f"Study mode set: {'random' if random_order else 'sequential'}")

    def current_card(self) -> tuple[int, str, str] | None:
        """Return ``(index, question, answer)`` for the card under the cursor."""
        if self.current >= len(self.order):
            return None
        index = self.order[self.current]
        return index, self.questions[index], self.answers[index]

    def record(self, index: int, response: str) -> None:
        """Store the response for a deck index; the latest write wins."""
        self.responses[index] = response
        self.seen.add(index)

    def advance(self) -> None:
        self.current += 1

    def is_complete(self) -> bool:
        return self.current >= len(self.order)

    def progress(self) -> float:
        """Fraction of the study order already passed, in ``[0, 1]``."""
        return min(self.current, len(self.order)) / max(len(self.order), 1)

    @property
    def position(self) -> int:
        return min(self.current, len(self.order))

    @property
    def total(self) -> int:
        return len(self.order)

    def answered(self) -> list[tuple[int, str, str, str]]:
        """Answered cards in deck order as ``(index, question, response, answer)``."""
        return [
            (index, self.questions[index], self.responses[index], self.answers[index])
            for index in sorted(self.responses)
        ]

    # =========================================================================
    # Card Editing
    # =========================================================================

    def update_question(self, index: int, text: str) -> None:
        self.questions[index] = text

    def update_answer(self, index: int, text: str) -> None:
        self.answers[index] = text

    def insert_card(self) -> int:
        """Append a blank card and return its index."""
        self.questions.append("")
        self.answers.append("")
        self._rebuild_order()
        return len(self.questions) - 1

    def delete_card(self, index: int) -> None:
        """
        Remove the card at ``index`` from both sequences.

        Responses for later cards are shifted down so they keep pointing at
        the same card.
        """
        if not 0 <= index < len(self.questions):
            raise IndexError(f"card index {index} out of range")

        del self.questions[index]
        del self.answers[index]

        self.responses = {
            (i - 1 if i > index else i): text
            for i, text in self.responses.items()
            if i != index
        }
        self.seen = {(i - 1 if i > index else i) for i in self.seen if i != index}
        self._rebuild_order()

    def _rebuild_order(self) -> None:
        self.order = list(range(len(self.questions)))
        self.current = min(self.current, len(self.order))

    # =========================================================================
    # Persistence
    # =========================================================================

    def persist_edits(self) -> None:
        """
        Write the current deck back to its source files.

        Both files are staged before either is replaced, so a failed write
        leaves the on-disk pair as it was.

        Raises:
            OSError: If either file cannot be written; in-memory state is unchanged
        """
        blanks = sum(
            1 for q, a in zip(self.questions, self.answers) if not q.strip() or not a.strip()
        )
        if blanks:
            logger.warning(
                f"Saving {blanks} card(s) with a blank side; blank lines are dropped on load"
            )

        staged_questions = stage_lines(self.questions_path, self.questions)
        try:
            staged_answers = stage_lines(self.answers_path, self.answers)
        except BaseException:
            discard_staged(staged_questions)
            raise

        try:
            commit_staged(staged_questions, self.questions_path)
        except BaseException:
            discard_staged(staged_answers)
            raise
        commit_staged(staged_answers, self.answers_path)
        logger.info(f"Saved {len(self.questions)} cards to {self.questions_path.parent}")

    def render_transcript(self) -> str:
        """Transcript text: every card in study order with response and answer."""
        blocks = []
        for position, index in enumerate(self.order, start=1):
            response = self.responses.get(index, NO_RESPONSE)
            blocks.append(
                f"Q{position} (#{index + 1})\n"
                f"{self.questions[index]}\n\n"
                f"Your answer:\n{response}\n\n"
                f"Correct:\n{self.answers[index]}\n\n"
                f"{TRANSCRIPT_SEPARATOR}\n\n"
            )
        return "".join(blocks)

    def save_session(
        self,
        directory: Path | str = ".",
        prefix: str = TRANSCRIPT_PREFIX,
        now: datetime | None = None,
    ) -> Path:
        """
        Write the session transcript to a timestamped file.

        Returns:
            Path of the written transcript

        Raises:
            OSError: If the file cannot be written
        """
        stamp = (now or datetime.now()).strftime(TRANSCRIPT_TIMESTAMP)
        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / f"{prefix}_{stamp}.txt"
        path.write_text(self.render_transcript(), encoding="utf-8")
        logger.info(f"Saved session transcript: {path}")
        return path
