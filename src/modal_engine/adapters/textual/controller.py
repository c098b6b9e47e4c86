"""Textual adapter: turns Textual key and mouse data into raw engine events."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Optional

from modal_engine.engine import Engine, FeedResult
from modal_engine.keys import RawEvent, RawKeyEvent, RawPointerEvent
from modal_engine.keys.normalizer import PointerKind

# Textual key names for keys that carry no character.
TEXTUAL_KEY_CODES: Dict[str, int] = {
    "pageup": 33,
    "pagedown": 34,
    "end": 35,
    "home": 36,
    "left": 37,
    "up": 38,
    "right": 39,
    "down": 40,
    "insert": 45,
    "delete": 46,
    **{f"f{index}": 111 + index for index in range(1, 13)},
}

# Characters Textual fills in for named keys.
TEXTUAL_KEY_CHARS: Dict[str, str] = {
    "escape": "\x1b",
    "enter": "\r",
    "tab": "\t",
    "backspace": "\x08",
    "space": " ",
}

MODIFIER_FIELDS = {"shift": "shift", "alt": "alt", "ctrl": "ctrl", "meta": "meta"}


def _noop(*_args: object, **_kwargs: object) -> None:
    return None


def key_to_raw_event(key: str, character: Optional[str] = None) -> RawKeyEvent:
    """Build a ``RawKeyEvent`` from a Textual ``key`` name and ``character``."""

    parts = key.split("+")
    base = parts[-1]
    flags = {MODIFIER_FIELDS[part]: True for part in parts[:-1] if part in MODIFIER_FIELDS}

    if character is None:
        character = TEXTUAL_KEY_CHARS.get(base)
        if character is None and len(base) == 1:
            character = base

    char_code: Optional[int] = None
    key_code: Optional[int] = None
    if character is not None and len(character) == 1:
        char_code = ord(character)
        # Textual reports ctrl+a as "\x01"; keep the letter and the C- flag
        if flags.get("ctrl") and 1 <= char_code <= 26 and base != "escape":
            char_code = ord("a") + char_code - 1
    else:
        key_code = TEXTUAL_KEY_CODES.get(base)

    return RawKeyEvent(char_code=char_code, key_code=key_code, **flags)


def click_to_raw_event(
    button: int, *, chain: int = 1, kind: PointerKind = "click"
) -> RawPointerEvent:
    """Textual numbers buttons from 1; the engine numbers them from 0."""

    return RawPointerEvent(kind=kind, button=button - 1, detail=chain)


@dataclass(slots=True)
class TextualHostHooks:
    """Callbacks the adapter uses to hand results back to the Textual app."""

    replay: Callable[[RawEvent], None] = _noop
    update_status: Callable[[str], None] = _noop
    log: Callable[[str], None] = _noop


class TextualModalAdapter:
    """Feeds Textual input into an ``Engine`` and replays what it rejects."""

    def __init__(self, engine: Engine, hooks: TextualHostHooks) -> None:
        self.engine = engine
        self.hooks = hooks
        self.engine.manager.context.bus.subscribe(
            "mode.switch", lambda name: self.hooks.update_status(f"-- {name} --")
        )

    def handle_textual_key(self, key: str, *, character: Optional[str] = None) -> FeedResult:
        event = key_to_raw_event(key, character)
        self.hooks.log(f"key -> {key!r} {event}")
        return self._apply(self.engine.feed_event(event))

    def handle_textual_click(
        self, button: int, *, chain: int = 1, kind: PointerKind = "click"
    ) -> FeedResult:
        event = click_to_raw_event(button, chain=chain, kind=kind)
        self.hooks.log(f"mouse -> {event}")
        return self._apply(self.engine.feed_event(event))

    def _apply(self, result: FeedResult) -> FeedResult:
        self.hooks.log(
            f"result <- status={result.status} tokens={''.join(result.tokens)} "
            f"mode={self.engine.mode}"
        )
        if result.status == "pass_through":
            for event in result.events:
                self.hooks.replay(event)
        return result


__all__ = [
    "TextualHostHooks",
    "TextualModalAdapter",
    "click_to_raw_event",
    "key_to_raw_event",
]
