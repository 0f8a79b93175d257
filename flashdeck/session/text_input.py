"""Single-line text buffer with a clamped cursor, shared by all text screens."""

from __future__ import annotations

from .events import InputEvent, Key


class TextInput:
    """
    Editable text with a cursor offset in characters.

    Invariant: ``0 <= cursor <= len(text)`` after every operation.
    """

    def __init__(self, text: str = ""):
        self.text = text
        self.cursor = len(text)

    def __len__(self) -> int:
        return len(self.text)

    def _clamp(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)))

    def set(self, text: str) -> None:
        """Replace the content and put the cursor at the end."""
        self.text = text
        self.cursor = len(text)

    def clear(self) -> None:
        self.set("")

    def take(self) -> str:
        """Return the content and clear the buffer."""
        text = self.text
        self.clear()
        return text

    def insert(self, char: str) -> None:
        self._clamp()
        self.text = self.text[: self.cursor] + char + self.text[self.cursor :]
        self.cursor += len(char)

    def backspace(self) -> None:
        """Remove the character behind the cursor."""
        self._clamp()
        if self.cursor > 0:
            self.text = self.text[: self.cursor - 1] + self.text[self.cursor :]
            self.cursor -= 1

    def delete(self) -> None:
        """Remove the character at the cursor."""
        self._clamp()
        if self.cursor < len(self.text):
            self.text = self.text[: self.cursor] + self.text[self.cursor + 1 :]

    def left(self) -> None:
        self.cursor = max(0, min(self.cursor, len(self.text)) - 1)

    def right(self) -> None:
        self.cursor = min(len(self.text), self.cursor + 1)

    def home(self) -> None:
        self.cursor = 0

    def end(self) -> None:
        self.cursor = len(self.text)

    def handle(self, event: InputEvent) -> bool:
        """
        Apply an editing event.

        Returns:
            True if the event was consumed as text editing
        """
        if event.key == Key.CHAR:
            if event.ctrl or not event.char:
                return False
            self.insert(event.char)
            return True

        actions = {
            Key.BACKSPACE: self.backspace,
            Key.DELETE: self.delete,
            Key.LEFT: self.left,
            Key.RIGHT: self.right,
            Key.HOME: self.home,
            Key.END: self.end,
        }
        action = actions.get(event.key)
        if action is None:
            return False
        action()
        return True
