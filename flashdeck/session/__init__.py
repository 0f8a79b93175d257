"""
Session layer: the screen state machine behind the study UI.

Components:
- events: abstract input events (Key, InputEvent)
- text_input: shared text-buffer editing
- screens: Screen enum, edit origin and the render-ready Snapshot
- controller: SessionController transition logic
"""

from .controller import SessionController, clamp_index
from .events import InputEvent, Key
from .screens import EditOrigin, Screen, Snapshot
from .text_input import TextInput

__all__ = [
    "EditOrigin",
    "InputEvent",
    "Key",
    "Screen",
    "SessionController",
    "Snapshot",
    "TextInput",
    "clamp_index",
]
