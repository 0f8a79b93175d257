"""
Abstract input events consumed by the session controller.

Front ends translate their raw keyboard/mouse events into InputEvent values;
the controller never sees terminal-specific codes.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Key(str, Enum):
    """Kind of input event."""

    CHAR = "char"
    ENTER = "enter"
    ESC = "esc"
    BACKSPACE = "backspace"
    DELETE = "delete"
    LEFT = "left"
    RIGHT = "right"
    HOME = "home"
    END = "end"
    UP = "up"
    DOWN = "down"
    PAGE_UP = "page_up"
    PAGE_DOWN = "page_down"
    CLICK = "click"  # primary pointer activation


@dataclass(frozen=True)
class InputEvent:
    """A single decoded input event."""

    key: Key
    char: str = ""
    ctrl: bool = False

    @classmethod
    def typed(cls, char: str) -> InputEvent:
        """A printable character."""
        return cls(Key.CHAR, char=char)

    @classmethod
    def control(cls, letter: str) -> InputEvent:
        """Ctrl+<letter>."""
        return cls(Key.CHAR, char=letter.lower(), ctrl=True)

    @classmethod
    def press(cls, key: Key) -> InputEvent:
        """A navigation or editing key."""
        return cls(key)

    @classmethod
    def click(cls) -> InputEvent:
        return cls(Key.CLICK)

    def is_command(self, letter: str, text_entry: bool) -> bool:
        """
        Whether this event triggers the command bound to ``letter``.

        Ctrl+letter always matches. The bare letter (either case) only
        matches on screens that are not collecting text.
        """
        if self.key != Key.CHAR or self.char.lower() != letter:
            return False
        return self.ctrl or not text_entry
