"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import random
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from flashdeck.deck import TopicCatalog  # noqa: E402


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


def write_topic(root: Path, name: str, questions: list[str], answers: list[str]) -> Path:
    """Create a topic directory with the given deck lines."""
    topic_dir = root / name
    topic_dir.mkdir(parents=True, exist_ok=True)
    (topic_dir / "questions.txt").write_text("".join(f"{q}\n" for q in questions), encoding="utf-8")
    (topic_dir / "answers.txt").write_text("".join(f"{a}\n" for a in answers), encoding="utf-8")
    return topic_dir


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def decks_root(tmp_path):
    """Topic root with a small arithmetic deck and a capitals deck."""
    root = tmp_path / "decks"
    write_topic(root, "math", ["2+2?", "3*3?", "10/2?"], ["4", "9", "5"])
    write_topic(root, "capitals", ["Capital of France?"], ["Paris"])
    return root


@pytest.fixture
def catalog(decks_root):
    """TopicCatalog over ``decks_root`` with a seeded random source."""
    return TopicCatalog(decks_root, rng=random.Random(7))


@pytest.fixture
def make_topic():
    """Factory fixture: ``make_topic(root, name, questions, answers)``."""
    return write_topic
