"""Textual integration: event conversion and a dispatcher adapter."""

from .controller import TextualKeybindAdapter, TextualKeybindHooks
from .keys import KeyEventLike, key_input_from_event

__all__ = [
    "KeyEventLike",
    "TextualKeybindAdapter",
    "TextualKeybindHooks",
    "key_input_from_event",
]
