"""
flashdeck: terminal flashcards organized by topic.

Components:
- deck: line store, deck engine and topic catalog
- session: screen state machine driven by abstract input events
- delivery: asciimatics terminal front end
- cli: typer entry point
"""

__version__ = "1.0.0"
