"""
Delivery: terminal front end for the session controller.

Components:
- terminal: asciimatics event decoding, frame drawing and the poll loop
"""

from .terminal import decode_event, run_terminal

__all__ = ["decode_event", "run_terminal"]
