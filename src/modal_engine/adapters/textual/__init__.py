"""Textual host adapter."""

from .controller import (
    TextualHostHooks,
    TextualModalAdapter,
    click_to_raw_event,
    key_to_raw_event,
)

__all__ = [
    "TextualHostHooks",
    "TextualModalAdapter",
    "click_to_raw_event",
    "key_to_raw_event",
]
