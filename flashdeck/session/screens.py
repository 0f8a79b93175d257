"""
Screens of the study UI and the render-ready snapshot.

The snapshot is everything a front end needs to draw one frame; it carries
plain values only and is rebuilt after every event.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Screen(str, Enum):
    """Active screen of the session controller."""

    TOPIC_SELECT = "topic_select"
    TOPIC_CREATE = "topic_create"
    MAIN_MENU = "main_menu"
    CARD_LIST = "card_list"
    MODE_SELECT = "mode_select"
    ASK = "ask"
    REVEAL = "reveal"
    REVIEW = "review"
    EDIT_QUESTION = "edit_question"
    EDIT_ANSWER = "edit_answer"
    DONE = "done"
    CONFIRM_QUIT = "confirm_quit"


class EditOrigin(str, Enum):
    """Screen an edit was started from; it is where the edit returns to."""

    CARD_LIST = "card_list"
    REVEAL = "reveal"


# Screens where letters are typed into the input buffer
TEXT_SCREENS = frozenset(
    {Screen.TOPIC_CREATE, Screen.ASK, Screen.EDIT_QUESTION, Screen.EDIT_ANSWER}
)

TITLES = {
    Screen.TOPIC_SELECT: "Topics",
    Screen.TOPIC_CREATE: "New Topic",
    Screen.MAIN_MENU: "Main Menu",
    Screen.CARD_LIST: "Cards",
    Screen.MODE_SELECT: "Mode Select",
    Screen.ASK: "Question",
    Screen.REVEAL: "Answer",
    Screen.REVIEW: "Review",
    Screen.EDIT_QUESTION: "Edit Question",
    Screen.EDIT_ANSWER: "Edit Answer",
    Screen.DONE: "Done",
    Screen.CONFIRM_QUIT: "Quit",
}

HINTS = {
    Screen.TOPIC_SELECT: "↑/↓: Select • Enter: Open • N: New topic • Q: Quit",
    Screen.TOPIC_CREATE: "Enter: Create • Esc: Cancel",
    Screen.MAIN_MENU: "S: Study • E: Edit cards • B: Back • Q: Quit",
    Screen.CARD_LIST: "E/A: Edit question/answer • N: New • D: Delete • S: Save • B: Back",
    Screen.MODE_SELECT: "Study in random order? (Y/N)",
    Screen.ASK: "Enter: Submit • Ctrl+R: Review • Ctrl+Q: Quit",
    Screen.REVEAL: "N: Next • E: Edit question • A: Edit answer • R: Review • Q: Quit",
    Screen.REVIEW: "↑/↓: Scroll • Esc/B: Back",
    Screen.EDIT_QUESTION: "Enter: Save • Esc: Cancel • Ctrl+S: Save to file",
    Screen.EDIT_ANSWER: "Enter: Save • Esc: Cancel • Ctrl+S: Save to file",
    Screen.DONE: "Session Complete! R: Review • Q: Quit",
    Screen.CONFIRM_QUIT: "Really quit? (Y/N)",
}


@dataclass
class Snapshot:
    """Render-ready view of the controller state for one frame."""

    screen: Screen
    title: str
    hint: str
    topic: str | None = None
    topics: list[str] = field(default_factory=list)
    selected: int = 0
    cards: list[tuple[str, str]] = field(default_factory=list)
    card_index: int | None = None
    question: str | None = None
    answer: str | None = None
    input_text: str = ""
    cursor: int = 0
    takes_text: bool = False
    progress: float = 0.0
    position: int = 0
    total: int = 0
    review_lines: list[str] = field(default_factory=list)
    review_scroll: int = 0
    status: str | None = None
    status_is_error: bool = False

    @property
    def progress_label(self) -> str:
        return f"{self.progress * 100:.0f}% ({self.position}/{self.total})"
