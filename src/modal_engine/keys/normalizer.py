"""Translate raw keyboard and pointer events into canonical key tokens."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Literal, Optional, Union

from .tokens import make_token

# Character codes carried by printable key events.
CHAR_CODE_NAMES: dict[int, str] = {
    0: "Nul",
    8: "BS",
    9: "Tab",
    10: "NL",
    12: "FF",
    13: "Enter",
    27: "Esc",
    32: "Space",
    60: "lt",
    92: "Bslash",
    124: "Bar",
    127: "Del",
}

# Physical key codes carried by every key event.
KEY_CODE_NAMES: dict[int, str] = {
    0: "Nul",
    8: "BS",
    9: "Tab",
    13: "Enter",
    27: "Esc",
    32: "Space",
    33: "PageUp",
    34: "PageDown",
    35: "End",
    36: "Home",
    37: "Left",
    38: "Up",
    39: "Right",
    40: "Down",
    45: "Insert",
    46: "Del",
    **{112 + offset: f"F{offset + 1}" for offset in range(12)},
}

BUTTON_NAMES = ("Left", "Middle", "Right")

PointerKind = Literal["click", "release", "contextmenu"]


@dataclass(frozen=True, slots=True)
class RawKeyEvent:
    """Platform key event reduced to the fields the normalizer reads."""

    char_code: Optional[int] = None
    key_code: Optional[int] = None
    shift: bool = False
    alt: bool = False
    ctrl: bool = False
    meta: bool = False
    replayed: bool = False


@dataclass(frozen=True, slots=True)
class RawPointerEvent:
    """Platform mouse event; ``detail`` is the click-repeat count."""

    kind: PointerKind
    button: int = 0
    detail: int = 1
    replayed: bool = False


RawEvent = Union[RawKeyEvent, RawPointerEvent]


@dataclass(frozen=True, slots=True)
class ResolvedKey:
    """Key name plus the modifiers it already encodes."""

    name: str
    shifted: bool = False
    controlled: bool = False


def resolve_key(event: RawKeyEvent) -> Optional[ResolvedKey]:
    # the printable path wins: its code already reflects shift (``B`` vs ``b``)
    if event.char_code is not None:
        code = event.char_code
        name = CHAR_CODE_NAMES.get(code)
        if name is None:
            try:
                name = chr(code)
            except (ValueError, OverflowError):
                return None
        return ResolvedKey(name=name, shifted=event.shift, controlled=code < 32)

    if event.key_code is not None:
        code = event.key_code
        name = KEY_CODE_NAMES.get(code)
        if name is not None:
            return ResolvedKey(name=name)
        if 48 <= code <= 57 or 65 <= code <= 90:
            return ResolvedKey(name=chr(code).lower())
    return None


def normalize_key(event: RawKeyEvent) -> Optional[str]:
    resolved = resolve_key(event)
    if resolved is None:
        return None
    return make_token(
        resolved.name,
        shift=event.shift and not resolved.shifted,
        alt=event.alt,
        ctrl=event.ctrl and not resolved.controlled,
        meta=event.meta,
    )


def _repeat(detail: int) -> Optional[int]:
    return detail if detail in (2, 3, 4) else None


def normalize_pointer(event: RawPointerEvent) -> Optional[str]:
    if event.kind == "contextmenu":
        return make_token("RightMouse", repeat=_repeat(event.detail))
    if not 0 <= event.button < len(BUTTON_NAMES):
        return None
    button = BUTTON_NAMES[event.button]
    if event.kind == "release":
        return make_token(f"{button}Release")
    if event.kind == "click":
        return make_token(f"{button}Mouse", repeat=_repeat(event.detail))
    return None


def normalize(event: RawEvent) -> Optional[str]:
    """Return the canonical token for ``event`` or ``None`` if it has none."""

    if isinstance(event, RawPointerEvent):
        return normalize_pointer(event)
    return normalize_key(event)


def mark_replayed(event: RawEvent) -> RawEvent:
    return event if event.replayed else replace(event, replayed=True)


__all__ = [
    "CHAR_CODE_NAMES",
    "KEY_CODE_NAMES",
    "RawEvent",
    "RawKeyEvent",
    "RawPointerEvent",
    "ResolvedKey",
    "resolve_key",
    "normalize",
    "normalize_key",
    "normalize_pointer",
    "mark_replayed",
]
