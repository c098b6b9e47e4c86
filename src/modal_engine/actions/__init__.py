"""Host-facing action verbs reused across modes."""

from .core import noop_action, scroll_by, scroll_to_bottom, scroll_to_top, switch_mode
from .hints import hint_label, hint_labels, hint_width

__all__ = [
    "noop_action",
    "scroll_by",
    "scroll_to_top",
    "scroll_to_bottom",
    "switch_mode",
    "hint_width",
    "hint_label",
    "hint_labels",
]
