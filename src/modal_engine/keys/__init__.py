"""Key normalization and the canonical token grammar."""

from .normalizer import (
    RawEvent,
    RawKeyEvent,
    RawPointerEvent,
    mark_replayed,
    normalize,
)
from .tokens import (
    char_token,
    format_keys,
    is_control_token,
    is_digit_token,
    is_token,
    make_token,
    parse_keys,
    split_token,
    token_modifiers,
    token_name,
)

__all__ = [
    "RawEvent",
    "RawKeyEvent",
    "RawPointerEvent",
    "mark_replayed",
    "normalize",
    "char_token",
    "format_keys",
    "is_control_token",
    "is_digit_token",
    "is_token",
    "make_token",
    "parse_keys",
    "split_token",
    "token_modifiers",
    "token_name",
]
