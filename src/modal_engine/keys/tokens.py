"""Canonical key tokens and vim-style key notation."""

from __future__ import annotations

import re
from typing import Optional

MODIFIER_ORDER = ("S", "A", "C", "M")
REPEAT_PREFIXES = ("2", "3", "4")

# Literal characters that have a dedicated token name.
LITERAL_NAMES = {
    "<": "lt",
    "\\": "Bslash",
    "|": "Bar",
    " ": "Space",
}

_TOKEN_RE = re.compile(r"^<(?P<repeat>[234]-)?(?P<mods>(?:[SACM]-)*)(?P<name>.+)>$", re.S)


def make_token(
    name: str,
    *,
    shift: bool = False,
    alt: bool = False,
    ctrl: bool = False,
    meta: bool = False,
    repeat: Optional[int] = None,
) -> str:
    """Assemble ``<[N-][S-][A-][C-][M-]name>`` in the fixed modifier order."""

    if not name:
        raise ValueError("token name cannot be empty")
    if repeat is not None and str(repeat) not in REPEAT_PREFIXES:
        raise ValueError(f"unsupported repeat count: {repeat}")
    parts = ["<"]
    if repeat is not None:
        parts.append(f"{repeat}-")
    for modifier, enabled in zip(MODIFIER_ORDER, (shift, alt, ctrl, meta)):
        if enabled:
            parts.append(f"{modifier}-")
    parts.append(name)
    parts.append(">")
    return "".join(parts)


def split_token(token: str) -> tuple[Optional[int], tuple[str, ...], str]:
    """Return ``(repeat, modifiers, name)`` for a canonical token."""

    match = _TOKEN_RE.match(token)
    if match is None:
        raise ValueError(f"malformed key token: {token!r}")
    repeat = match.group("repeat")
    mods = tuple(m for m in match.group("mods").split("-") if m)
    return (int(repeat[0]) if repeat else None, mods, match.group("name"))


def is_token(value: str) -> bool:
    try:
        split_token(value)
    except ValueError:
        return False
    return True


def token_name(token: str) -> str:
    return split_token(token)[2]


def token_modifiers(token: str) -> tuple[str, ...]:
    return split_token(token)[1]


def is_digit_token(token: str) -> bool:
    """True for the ten bare digit tokens ``<0>`` .. ``<9>``."""

    # ASCII 0-9 only; the count register must stay int()-parseable
    return len(token) == 3 and token[0] == "<" and token[2] == ">" and "0" <= token[1] <= "9"


def is_control_token(token: str) -> bool:
    """True when a token carries ``C-`` or names a raw control character."""

    try:
        if "C" in token_modifiers(token):
            return True
        name = token_name(token)
    except ValueError:
        return False
    return len(name) == 1 and ord(name) < 32


def char_token(char: str) -> str:
    if len(char) != 1:
        raise ValueError(f"expected a single character, got {char!r}")
    return f"<{LITERAL_NAMES.get(char, char)}>"


def parse_keys(notation: str) -> tuple[str, ...]:
    """Parse vim key notation into canonical tokens.

    ``"gg"`` gives ``("<g>", "<g>")`` and ``"<C-a>x"`` gives
    ``("<C-a>", "<x>")``. A ``<`` that does not open a well-formed token is
    the literal ``<lt>``.
    """

    if not notation:
        raise ValueError("key notation cannot be empty")
    tokens: list[str] = []
    index = 0
    while index < len(notation):
        char = notation[index]
        if char == "<":
            end = notation.find(">", index + 2)
            if end != -1:
                candidate = notation[index : end + 1]
                if "<" not in candidate[1:] and is_token(candidate):
                    tokens.append(candidate)
                    index = end + 1
                    continue
        tokens.append(char_token(char))
        index += 1
    return tuple(tokens)


def format_keys(tokens: tuple[str, ...]) -> str:
    return "".join(tokens)


__all__ = [
    "MODIFIER_ORDER",
    "make_token",
    "split_token",
    "is_token",
    "token_name",
    "token_modifiers",
    "is_digit_token",
    "is_control_token",
    "char_token",
    "parse_keys",
    "format_keys",
]
