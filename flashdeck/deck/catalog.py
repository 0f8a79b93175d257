"""
Topic Catalog: named decks stored one directory per topic.

Layout::

    decks/
      networking/
        questions.txt
        answers.txt
      spanish/
        ...
"""

from __future__ import annotations

import random
from pathlib import Path

from loguru import logger

from .engine import DeckEngine
from .errors import TopicNameError

QUESTIONS_FILENAME = "questions.txt"
ANSWERS_FILENAME = "answers.txt"


class TopicCatalog:
    """Enumerate, create and open topic decks under a root directory."""

    def __init__(
        self,
        root: Path | str,
        questions_filename: str = QUESTIONS_FILENAME,
        answers_filename: str = ANSWERS_FILENAME,
        rng: random.Random | None = None,
    ):
        """
        Initialize catalog.

        Args:
            root: Directory holding one sub-directory per topic (created by ``ensure``)
            questions_filename: Name of the per-topic questions file
            answers_filename: Name of the per-topic answers file
            rng: Random source handed to every engine opened (for shuffling)
        """
        self.root = Path(root)
        self.questions_filename = questions_filename
        self.answers_filename = answers_filename
        self._rng = rng

    def list_topics(self) -> list[str]:
        """Topic names (sub-directories of the root), sorted."""
        if not self.root.exists():
            return []

        return sorted(
            d.name
            for d in self.root.iterdir()
            if d.is_dir() and not d.name.startswith(".")
        )

    def paths_for(self, name: str) -> tuple[Path, Path]:
        """Questions and answers file paths for a topic."""
        topic_dir = self.root / name
        return topic_dir / self.questions_filename, topic_dir / self.answers_filename

    @staticmethod
    def normalize_name(name: str) -> str:
        """
        Validate a topic name and strip surrounding whitespace.

        Raises:
            TopicNameError: If the name is blank, hidden (leading dot) or not a
                single path component
        """
        cleaned = name.strip()
        if not cleaned:
            raise TopicNameError("Topic name cannot be empty")
        if cleaned.startswith(".") or "/" in cleaned or "\\" in cleaned:
            raise TopicNameError(f"Invalid topic name: {cleaned!r}")
        return cleaned

    def ensure(self, name: str) -> str:
        """Create the topic directory and empty deck files if absent."""
        name = self.normalize_name(name)
        questions_path, answers_path = self.paths_for(name)
        if not questions_path.parent.exists():
            logger.info(f"Creating topic '{name}' in {self.root}")
        questions_path.parent.mkdir(parents=True, exist_ok=True)
        for path in (questions_path, answers_path):
            if not path.exists():
                path.touch()
        return name

    def open_or_create(self, name: str) -> DeckEngine:
        """
        Open a topic's deck, creating the topic first if needed.

        Raises:
            TopicNameError: If the name is unusable (nothing is created)
            OSError: If the deck files cannot be created or read
            MismatchError: If the deck's files have different line counts
        """
        name = self.ensure(name)
        questions_path, answers_path = self.paths_for(name)
        return DeckEngine.from_files(questions_path, answers_path, rng=self._rng)

    def card_count(self, name: str) -> int:
        """Number of cards in a topic (loads the deck to validate it)."""
        questions_path, answers_path = self.paths_for(self.normalize_name(name))
        return len(DeckEngine.from_files(questions_path, answers_path))
