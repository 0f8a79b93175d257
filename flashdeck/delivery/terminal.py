"""
Terminal front end using asciimatics.

Decodes raw asciimatics keyboard/mouse events into InputEvents, draws the
controller's Snapshot and runs the single-threaded poll loop.

Layout (rows):
    0           title
    2 .. h-7    body (question, lists, review text)
    h-6 .. h-4  input box or hint line
    h-3 .. h-1  progress bar (left click here opens review)
"""

from __future__ import annotations

import sys
import textwrap
from contextlib import contextmanager

from asciimatics.event import KeyboardEvent, MouseEvent
from asciimatics.screen import Screen
from loguru import logger

from flashdeck.session import InputEvent, Key, SessionController, Snapshot
from flashdeck.session import Screen as Page

APP_TITLE = "Flashcards"
PROGRESS_ROWS = 3

_KEYS = {
    Screen.KEY_ESCAPE: Key.ESC,
    Screen.KEY_BACK: Key.BACKSPACE,
    Screen.KEY_DELETE: Key.DELETE,
    Screen.KEY_LEFT: Key.LEFT,
    Screen.KEY_RIGHT: Key.RIGHT,
    Screen.KEY_UP: Key.UP,
    Screen.KEY_DOWN: Key.DOWN,
    Screen.KEY_HOME: Key.HOME,
    Screen.KEY_END: Key.END,
    Screen.KEY_PAGE_UP: Key.PAGE_UP,
    Screen.KEY_PAGE_DOWN: Key.PAGE_DOWN,
    10: Key.ENTER,
    13: Key.ENTER,
    8: Key.BACKSPACE,
    127: Key.BACKSPACE,
}


# =============================================================================
# Event Decoding
# =============================================================================


def decode_event(event, height: int) -> InputEvent | None:
    """
    Translate an asciimatics event into an InputEvent.

    Args:
        event: KeyboardEvent or MouseEvent from ``Screen.get_event()``
        height: Terminal height, used to hit-test clicks on the progress bar

    Returns:
        The decoded event, or None for events the UI ignores
    """
    if isinstance(event, KeyboardEvent):
        code = event.key_code
        if code in _KEYS:
            return InputEvent.press(_KEYS[code])
        if 1 <= code <= 26:
            return InputEvent.control(chr(code + ord("a") - 1))
        if code >= 32:
            return InputEvent.typed(chr(code))
        return None

    if isinstance(event, MouseEvent):
        if event.buttons & MouseEvent.LEFT_CLICK and event.y >= height - PROGRESS_ROWS:
            return InputEvent.click()
    return None


# =============================================================================
# Drawing
# =============================================================================


def _wrap(lines: list[str], width: int) -> list[str]:
    wrapped: list[str] = []
    for line in lines:
        wrapped.extend(textwrap.wrap(line, width) or [""])
    return wrapped


def _list_window(items: list[str], selected: int, rows: int) -> list[tuple[str, bool]]:
    start = max(0, selected - rows + 1)
    return [
        (f"{'>' if i == selected else ' '} {item}", i == selected)
        for i, item in enumerate(items[start : start + rows], start=start)
    ]


def body_lines(snap: Snapshot, width: int, rows: int) -> list[tuple[str, bool]]:
    """Body text for a snapshot as ``(line, highlighted)`` pairs."""
    screen = snap.screen

    if screen == Page.TOPIC_SELECT:
        if not snap.topics:
            return [("(no topics yet)", False)]
        return _list_window(snap.topics, snap.selected, rows)

    if screen == Page.CARD_LIST:
        if not snap.cards:
            return [("(no cards; press N to add one)", False)]
        items = [f"{i + 1:>3}. {q}  |  {a}"[: width - 2] for i, (q, a) in enumerate(snap.cards)]
        return _list_window(items, snap.selected, rows)

    if screen == Page.REVIEW:
        lines = _wrap(snap.review_lines, width) if snap.review_lines else ["(nothing answered yet)"]
        return [(line, False) for line in lines[snap.review_scroll : snap.review_scroll + rows]]

    texts = {
        Page.TOPIC_CREATE: ["Name of the new topic:"],
        Page.MAIN_MENU: [
            f"Topic: {snap.topic}",
            f"{len(snap.cards)} cards",
            "",
            "S  Study",
            "E  Edit cards",
            "B  Back to topics",
        ],
        Page.MODE_SELECT: ["Study in random order? (Y/N)"],
        Page.ASK: [snap.question or ""],
        Page.REVEAL: [f"Question: {snap.question}", "", f"Answer: {snap.answer}"],
        Page.EDIT_QUESTION: [f"Card #{(snap.card_index or 0) + 1}", f"Answer: {snap.answer}"],
        Page.EDIT_ANSWER: [f"Card #{(snap.card_index or 0) + 1}", f"Question: {snap.question}"],
        Page.DONE: ["Session Complete!"],
        Page.CONFIRM_QUIT: ["Really quit? (Y/N)"],
    }
    return [(line, False) for line in _wrap(texts.get(screen, []), width)[:rows]]


def progress_bar(snap: Snapshot, width: int) -> str:
    label = f" {snap.progress_label}"
    bar_width = max(1, width - len(label) - 2)
    filled = int(round(snap.progress * bar_width))
    return f"[{'#' * filled}{'.' * (bar_width - filled)}]{label}"


def draw(screen: Screen, snap: Snapshot) -> None:
    """Render one frame."""
    width, height = screen.width, screen.height
    screen.clear_buffer(Screen.COLOUR_WHITE, Screen.A_NORMAL, Screen.COLOUR_BLACK)

    title = f"{APP_TITLE} • {snap.title}" + (f" • {snap.topic}" if snap.topic else "")
    screen.print_at(title.center(width)[:width], 0, 0, colour=Screen.COLOUR_YELLOW, attr=Screen.A_BOLD)

    body_top, body_bottom = 2, height - 7
    for offset, (line, highlighted) in enumerate(
        body_lines(snap, width - 2, max(1, body_bottom - body_top + 1))
    ):
        attr = Screen.A_REVERSE if highlighted else Screen.A_NORMAL
        screen.print_at(line[: width - 2], 1, body_top + offset, attr=attr)

    if snap.takes_text:
        _draw_input(screen, snap, height - 5)
        screen.print_at(snap.hint[:width], 0, height - 4, colour=Screen.COLOUR_BLUE)
    else:
        screen.print_at(snap.hint.center(width)[:width], 0, height - 5, colour=Screen.COLOUR_BLUE)

    if snap.status:
        colour = Screen.COLOUR_RED if snap.status_is_error else Screen.COLOUR_GREEN
        screen.print_at(snap.status[:width], 0, height - 6, colour=colour)

    screen.print_at(progress_bar(snap, width), 0, height - 2, colour=Screen.COLOUR_CYAN, attr=Screen.A_BOLD)
    screen.refresh()


def _draw_input(screen: Screen, snap: Snapshot, y: int) -> None:
    room = max(1, screen.width - 4)
    start = max(0, snap.cursor - room + 1)
    visible = snap.input_text[start : start + room]
    screen.print_at("> ", 0, y, colour=Screen.COLOUR_GREEN, attr=Screen.A_BOLD)
    screen.print_at(visible, 2, y)
    under_cursor = snap.input_text[snap.cursor : snap.cursor + 1] or " "
    screen.print_at(under_cursor, 2 + snap.cursor - start, y, attr=Screen.A_REVERSE)


# =============================================================================
# Event Loop
# =============================================================================


def _event_loop(screen: Screen, controller: SessionController, poll_interval: float) -> None:
    dirty = True
    while controller.running:
        if dirty or screen.has_resized():
            draw(screen, controller.snapshot())
            dirty = False

        screen.wait_for_input(poll_interval)
        event = screen.get_event()
        if event is None:
            continue

        decoded = decode_event(event, screen.height)
        if decoded is not None:
            controller.handle(decoded)
            dirty = True


@contextmanager
def flow_control_disabled(stream=None):
    """
    Turn off XON/XOFF flow control on a terminal for the duration.

    While IXON is set the tty driver consumes Ctrl+Q and Ctrl+S itself, so
    they never reach the UI. Does nothing unless ``stream`` (stdin by
    default) is a POSIX terminal. The original attributes are restored on
    exit.
    """
    stream = sys.stdin if stream is None else stream
    if sys.platform == "win32" or not stream.isatty():
        yield
        return

    import termios

    fd = stream.fileno()
    saved = termios.tcgetattr(fd)
    attrs = termios.tcgetattr(fd)
    attrs[0] &= ~termios.IXON
    termios.tcsetattr(fd, termios.TCSANOW, attrs)
    logger.debug("Terminal flow control disabled")
    try:
        yield
    finally:
        termios.tcsetattr(fd, termios.TCSADRAIN, saved)


def run_terminal(controller: SessionController, poll_interval_ms: int = 100) -> None:
    """Run the full-screen UI until the user confirms quit."""
    logger.info("Starting terminal UI")
    with flow_control_disabled():
        Screen.wrapper(
            _event_loop,
            catch_interrupt=True,
            arguments=[controller, poll_interval_ms / 1000],
        )
    logger.info("Terminal UI closed")
