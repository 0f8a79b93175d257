"""
Session Controller: the screen state machine of the study UI.

Consumes abstract InputEvents, drives a DeckEngine and exposes a Snapshot
per frame. Every transition runs to completion inside ``handle()``; errors
from loading or saving decks are turned into status messages and never
escape the controller.

Flow:
    topic-select -> main-menu -> mode-select -> ask <-> reveal -> done
                              -> card-list -> edit-question / edit-answer
    Ctrl+Q on any screen -> confirm-quit -> (quit | back to that screen)
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from flashdeck.deck import DeckEngine, MismatchError, TopicCatalog, TopicNameError
from flashdeck.deck.engine import TRANSCRIPT_PREFIX

from .events import InputEvent, Key
from .screens import HINTS, TEXT_SCREENS, TITLES, EditOrigin, Screen, Snapshot
from .text_input import TextInput

REVIEW_SEPARATOR = "-" * 40
PAGE_SIZE = 10


def clamp_index(index: int, count: int) -> int:
    """Clamp a selection index to ``[0, max(0, count - 1)]``."""
    return max(0, min(index, count - 1))


class SessionController:
    """
    Finite-state navigation over topics, deck editing and study sessions.

    The catalog's topic list is cached in ``topics`` and refreshed explicitly
    whenever a topic is created. The engine exists only while a topic is open.
    """

    _HANDLERS = {
        Screen.TOPIC_SELECT: "_on_topic_select",
        Screen.TOPIC_CREATE: "_on_topic_create",
        Screen.MAIN_MENU: "_on_main_menu",
        Screen.CARD_LIST: "_on_card_list",
        Screen.MODE_SELECT: "_on_mode_select",
        Screen.ASK: "_on_ask",
        Screen.REVEAL: "_on_reveal",
        Screen.REVIEW: "_on_review",
        Screen.EDIT_QUESTION: "_on_edit",
        Screen.EDIT_ANSWER: "_on_edit",
        Screen.DONE: "_on_done",
        Screen.CONFIRM_QUIT: "_on_confirm_quit",
    }

    def __init__(
        self,
        catalog: TopicCatalog,
        transcripts_dir: Path | str = ".",
        transcript_prefix: str = TRANSCRIPT_PREFIX,
    ):
        self.catalog = catalog
        self.transcripts_dir = Path(transcripts_dir)
        self.transcript_prefix = transcript_prefix

        self.topics: list[str] = []
        self.topic: str | None = None
        self.engine: DeckEngine | None = None

        self.screen = Screen.TOPIC_SELECT
        self.previous_screen: Screen | None = None
        self.input = TextInput()
        self.review_scroll = 0
        self.topic_index = 0
        self.card_index = 0
        self.edit_origin: EditOrigin | None = None
        self.edit_target: int | None = None

        self.running = True
        self.status: str | None = None
        self.status_is_error = False
        self.transcript_path: Path | None = None

        self.refresh_topics()

    # =========================================================================
    # Public API
    # =========================================================================

    @property
    def takes_text(self) -> bool:
        return self.screen in TEXT_SCREENS

    def refresh_topics(self) -> None:
        """Re-read the topic list from the catalog."""
        self.topics = self.catalog.list_topics()
        self.topic_index = clamp_index(self.topic_index, len(self.topics))

    def open_topic(self, name: str) -> bool:
        """
        Load (creating if needed) a topic and go to its main menu.

        Returns:
            True on success; on failure the screen is unchanged and the
            error is shown as the status message
        """
        try:
            engine = self.catalog.open_or_create(name)
        except (OSError, MismatchError, TopicNameError) as e:
            logger.error(f"Cannot open topic '{name}': {e}")
            self._set_status(f"Cannot open '{name.strip()}': {e}", error=True)
            return False

        self.engine = engine
        self.topic = name.strip()
        self.card_index = 0
        self.refresh_topics()
        if self.topic in self.topics:
            self.topic_index = self.topics.index(self.topic)
        self._go(Screen.MAIN_MENU)
        return True

    def handle(self, event: InputEvent) -> None:
        """Apply one input event."""
        if not self.running:
            return

        self.status = None
        self.status_is_error = False

        if self.screen != Screen.CONFIRM_QUIT and event.is_command("q", self.takes_text):
            self.previous_screen = self.screen
            self._go(Screen.CONFIRM_QUIT)
            return

        getattr(self, self._HANDLERS[self.screen])(event)

    def snapshot(self) -> Snapshot:
        """Build the render-ready state for the current frame."""
        snap = Snapshot(
            screen=self.screen,
            title=TITLES[self.screen],
            hint=HINTS[self.screen],
            topic=self.topic,
            topics=list(self.topics),
            selected=self.topic_index,
            input_text=self.input.text,
            cursor=self.input.cursor,
            takes_text=self.takes_text,
            review_scroll=self.review_scroll,
            status=self.status,
            status_is_error=self.status_is_error,
        )

        engine = self.engine
        if engine is None:
            return snap

        snap.cards = list(zip(engine.questions, engine.answers))
        snap.progress = engine.progress()
        snap.position = engine.position
        snap.total = engine.total

        if self.screen == Screen.CARD_LIST:
            snap.selected = self.card_index
        elif self.screen == Screen.REVIEW:
            snap.review_lines = self.review_lines()

        index = self._displayed_card()
        if index is not None and index < len(engine.questions):
            snap.card_index = index
            snap.question = engine.questions[index]
            if self.screen != Screen.ASK:
                snap.answer = engine.answers[index]
        return snap

    def review_lines(self) -> list[str]:
        """Answered cards as display lines, in deck order."""
        if self.engine is None:
            return []

        lines: list[str] = []
        for index, question, response, answer in self.engine.answered():
            lines.extend(
                [
                    f"Q#{index + 1}",
                    question,
                    "",
                    f"You: {response}",
                    f"Correct: {answer}",
                    REVIEW_SEPARATOR,
                ]
            )
        return lines

    # =========================================================================
    # Screen Handlers
    # =========================================================================

    def _on_topic_select(self, event: InputEvent) -> None:
        if event.key == Key.UP:
            self.topic_index = clamp_index(self.topic_index - 1, len(self.topics))
        elif event.key == Key.DOWN:
            self.topic_index = clamp_index(self.topic_index + 1, len(self.topics))
        elif event.key == Key.ENTER:
            if not self.topics:
                self._set_status("No topics yet. Press N to create one.")
                return
            self.open_topic(self.topics[self.topic_index])
        elif event.is_command("n", text_entry=False):
            self.input.clear()
            self._go(Screen.TOPIC_CREATE)

    def _on_topic_create(self, event: InputEvent) -> None:
        if event.key == Key.ESC:
            self.input.clear()
            self._go(Screen.TOPIC_SELECT)
        elif event.key == Key.ENTER:
            name = self.input.text
            if not name.strip():
                self.input.clear()
                self._go(Screen.TOPIC_SELECT)
                return
            if self.open_topic(name):
                self.input.clear()
        else:
            self.input.handle(event)

    def _on_main_menu(self, event: InputEvent) -> None:
        if event.is_command("s", text_entry=False):
            if not len(self.engine):
                self._set_status("This topic has no cards. Press E to add some.", error=True)
                return
            self._go(Screen.MODE_SELECT)
        elif event.is_command("e", text_entry=False):
            self.card_index = clamp_index(self.card_index, len(self.engine))
            self._go(Screen.CARD_LIST)
        elif event.key == Key.ESC or event.is_command("b", text_entry=False):
            logger.info(f"Closed topic '{self.topic}'")
            self.engine = None
            self.topic = None
            self._go(Screen.TOPIC_SELECT)

    def _on_card_list(self, event: InputEvent) -> None:
        engine = self.engine
        count = len(engine)

        if event.key == Key.UP:
            self.card_index = clamp_index(self.card_index - 1, count)
        elif event.key == Key.DOWN:
            self.card_index = clamp_index(self.card_index + 1, count)
        elif event.key == Key.ENTER or event.is_command("e", text_entry=False):
            if count:
                self._start_edit(Screen.EDIT_QUESTION, self.card_index, EditOrigin.CARD_LIST)
        elif event.is_command("a", text_entry=False):
            if count:
                self._start_edit(Screen.EDIT_ANSWER, self.card_index, EditOrigin.CARD_LIST)
        elif event.is_command("n", text_entry=False):
            self.card_index = engine.insert_card()
            self._start_edit(Screen.EDIT_QUESTION, self.card_index, EditOrigin.CARD_LIST)
        elif event.is_command("d", text_entry=False):
            if count:
                engine.delete_card(self.card_index)
                self._set_status(f"Deleted card #{self.card_index + 1}")
                self.card_index = clamp_index(self.card_index, len(engine))
        elif event.is_command("s", text_entry=False):
            self._persist()
        elif event.key == Key.ESC or event.is_command("b", text_entry=False):
            self._go(Screen.MAIN_MENU)

    def _on_mode_select(self, event: InputEvent) -> None:
        if event.is_command("y", text_entry=False):
            self._begin_session(random_order=True)
        elif event.is_command("n", text_entry=False):
            self._begin_session(random_order=False)

    def _on_ask(self, event: InputEvent) -> None:
        if event.key == Key.ENTER:
            card = self.engine.current_card()
            if card is None:
                return
            self.engine.record(card[0], self.input.take())
            self._go(Screen.REVEAL)
        elif event.key == Key.CLICK or event.is_command("r", text_entry=True):
            self._enter_review()
        else:
            self.input.handle(event)

    def _on_reveal(self, event: InputEvent) -> None:
        engine = self.engine
        if event.key == Key.ENTER or event.is_command("n", text_entry=False):
            engine.advance()
            if engine.is_complete():
                self._finish_session()
            else:
                self.input.clear()
                self._go(Screen.ASK)
        elif event.is_command("e", text_entry=False) or event.is_command("a", text_entry=False):
            card = engine.current_card()
            if card is None:
                return
            target = Screen.EDIT_QUESTION if event.char.lower() == "e" else Screen.EDIT_ANSWER
            self._start_edit(target, card[0], EditOrigin.REVEAL)
        elif event.key == Key.CLICK or event.is_command("r", text_entry=False):
            self._enter_review()

    def _on_edit(self, event: InputEvent) -> None:
        if event.key == Key.ENTER:
            if self.screen == Screen.EDIT_QUESTION:
                self.engine.update_question(self.edit_target, self.input.text)
            else:
                self.engine.update_answer(self.edit_target, self.input.text)
            logger.debug(f"Edited card #{self.edit_target + 1} ({self.screen.value})")
            self._finish_edit()
        elif event.key == Key.ESC:
            self._finish_edit()
        elif event.is_command("s", text_entry=True):
            self._persist()
        else:
            self.input.handle(event)

    def _on_review(self, event: InputEvent) -> None:
        steps = {Key.UP: -1, Key.DOWN: 1, Key.PAGE_UP: -PAGE_SIZE, Key.PAGE_DOWN: PAGE_SIZE}
        if event.key in steps:
            self._scroll_review(steps[event.key])
        elif event.key == Key.ESC or event.is_command("b", text_entry=False):
            self._go(Screen.DONE if self.engine.is_complete() else Screen.ASK)

    def _on_done(self, event: InputEvent) -> None:
        if event.key == Key.CLICK or event.is_command("r", text_entry=False):
            self._enter_review()

    def _on_confirm_quit(self, event: InputEvent) -> None:
        if event.is_command("y", text_entry=False):
            logger.info("Quit confirmed")
            self.running = False
        elif event.key == Key.ESC or event.is_command("n", text_entry=False):
            self._go(self.previous_screen or Screen.TOPIC_SELECT)
            self.previous_screen = None

    # =========================================================================
    # Helpers
    # =========================================================================

    def _go(self, screen: Screen) -> None:
        logger.debug(f"Screen {self.screen.value} -> {screen.value}")
        self.screen = screen

    def _set_status(self, message: str, error: bool = False) -> None:
        self.status = message
        self.status_is_error = error

    def _displayed_card(self) -> int | None:
        if self.screen in (Screen.EDIT_QUESTION, Screen.EDIT_ANSWER):
            return self.edit_target
        if self.screen == Screen.CARD_LIST:
            return self.card_index if len(self.engine) else None
        if self.screen in (Screen.ASK, Screen.REVEAL):
            card = self.engine.current_card()
            return card[0] if card else None
        return None

    def _begin_session(self, random_order: bool) -> None:
        self.engine.set_mode(random_order)
        logger.info(
            f"Studying '{self.topic}': {self.engine.total} cards, "
            f"{'random' if random_order else 'sequential'} order"
        )
        self.input.clear()
        self.review_scroll = 0
        self._go(Screen.ASK)

    def _finish_session(self) -> None:
        self._go(Screen.DONE)
        if not self.engine.responses:
            return
        try:
            self.transcript_path = self.engine.save_session(
                self.transcripts_dir, prefix=self.transcript_prefix
            )
        except OSError as e:
            logger.error(f"Failed to save session transcript: {e}")
            self._set_status(f"Could not save session: {e}", error=True)
            return
        self._set_status(f"Saved session: {self.transcript_path}")

    def _start_edit(self, screen: Screen, index: int, origin: EditOrigin) -> None:
        self.edit_target = index
        self.edit_origin = origin
        if screen == Screen.EDIT_QUESTION:
            self.input.set(self.engine.questions[index])
        else:
            self.input.set(self.engine.answers[index])
        self._go(screen)

    def _finish_edit(self) -> None:
        target = Screen.CARD_LIST if self.edit_origin == EditOrigin.CARD_LIST else Screen.REVEAL
        self.input.clear()
        self.edit_origin = None
        self.edit_target = None
        self._go(target)

    def _persist(self) -> None:
        try:
            self.engine.persist_edits()
        except OSError as e:
            logger.error(f"Failed to save '{self.topic}': {e}")
            self._set_status(f"Save failed: {e}", error=True)
            return
        self._set_status(f"Saved {len(self.engine)} cards")

    def _enter_review(self) -> None:
        self._scroll_review(0)
        self._go(Screen.REVIEW)

    def _scroll_review(self, delta: int) -> None:
        limit = max(0, len(self.review_lines()) - 1)
        self.review_scroll = max(0, min(self.review_scroll + delta, limit))
