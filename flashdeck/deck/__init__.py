"""
Deck layer: card storage, study order and topic directories.

Components:
- line_store: newline-delimited files with atomic replace
- engine: DeckEngine for one topic (order, responses, persistence)
- catalog: TopicCatalog enumerating and creating topic directories
"""

from .catalog import TopicCatalog
from .engine import DeckEngine
from .errors import DeckError, MismatchError, TopicNameError
from .line_store import read_nonempty_lines, write_atomic

__all__ = [
    "DeckEngine",
    "DeckError",
    "MismatchError",
    "TopicCatalog",
    "TopicNameError",
    "read_nonempty_lines",
    "write_atomic",
]
