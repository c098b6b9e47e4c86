"""Dataclasses describing actions, key sequences and bindings."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, MutableMapping, Union

from modal_engine.keys import format_keys, is_token, parse_keys

from .patterns import Custom, CountPrefix, Pattern, pattern_from_tokens, pattern_tokens


@dataclass(frozen=True, slots=True)
class KeySequence:
    """Immutable run of canonical tokens."""

    tokens: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", tuple(self.tokens))
        if not self.tokens:
            raise ValueError("KeySequence requires at least one token")
        for token in self.tokens:
            if not is_token(token):
                raise ValueError(f"malformed key token: {token!r}")

    @classmethod
    def from_notation(cls, notation: str) -> "KeySequence":
        return cls(parse_keys(notation))

    def to_pattern(self) -> Pattern:
        return pattern_from_tokens(self.tokens)

    def __str__(self) -> str:
        return format_keys(self.tokens)


@dataclass(frozen=True, slots=True)
class ActionRef:
    """A named zero-argument callback fired when a binding wins."""

    id: str
    handler: Callable[[], object]
    description: str = ""
    metadata: Mapping[str, object] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("ActionRef id cannot be empty")
        if not callable(self.handler):
            raise TypeError("handler must be callable")
        object.__setattr__(self, "metadata", MappingProxyType(dict(self.metadata)))

    def __call__(self) -> None:
        self.handler()


def _normalize_tags(tags: Iterable[str]) -> tuple[str, ...]:
    seen: MutableMapping[str, None] = {}
    for tag in tags:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return tuple(seen)


PatternSpec = Union[Pattern, KeySequence, str]


def coerce_pattern(spec: PatternSpec) -> Pattern:
    if isinstance(spec, str):
        return KeySequence.from_notation(spec).to_pattern()
    if isinstance(spec, KeySequence):
        return spec.to_pattern()
    return spec


@dataclass(frozen=True, slots=True)
class Binding:
    """Associates a pattern with an action inside one mode.

    ``repeat`` bindings run their action once per unit of the pending count.
    """

    id: str
    mode: str
    pattern: PatternSpec
    action_id: str
    description: str = ""
    repeat: bool = False
    tags: tuple[str, ...] = ()
    source: str | None = None

    def __post_init__(self) -> None:
        if not self.id:
            raise ValueError("binding id cannot be empty")
        if not self.mode:
            raise ValueError("binding mode cannot be empty")
        if not self.action_id:
            raise ValueError("binding action_id cannot be empty")
        pattern = coerce_pattern(self.pattern)
        if isinstance(pattern, CountPrefix):
            raise ValueError("count prefixes are enabled per mapper, not bound")
        object.__setattr__(self, "pattern", pattern)
        object.__setattr__(self, "tags", _normalize_tags(self.tags))

    @property
    def tokens(self) -> tuple[str, ...]:
        return pattern_tokens(self.pattern)  # type: ignore[arg-type]

    @property
    def key_signature(self) -> str:
        if isinstance(self.pattern, Custom):
            return f"custom:{self.id}"
        return " ".join(self.tokens)


__all__ = [
    "ActionRef",
    "Binding",
    "KeySequence",
    "PatternSpec",
    "coerce_pattern",
]
