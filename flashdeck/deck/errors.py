"""Deck error taxonomy. I/O failures surface as the builtin OSError family."""

from __future__ import annotations


class DeckError(Exception):
    """Base class for deck and topic problems."""
    pass


class MismatchError(DeckError):
    """Raised when a deck's question and answer files have different lengths."""

    def __init__(self, questions: int, answers: int):
        self.questions = questions
        self.answers = answers
        super().__init__(
            f"Mismatched counts: {questions} questions vs {answers} answers"
        )

    @property
    def counts(self) -> tuple[int, int]:
        return (self.questions, self.answers)


class TopicNameError(DeckError, ValueError):
    """Raised when a topic name cannot be used as a topic directory."""
    pass
