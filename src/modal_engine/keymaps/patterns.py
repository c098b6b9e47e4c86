"""Match states and the closed set of pattern variants a Mapping can run."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Union

from modal_engine.keys import is_token


class MatchState(Enum):
    START = "start"
    CONTINUE = "continue"
    ACCEPT = "accept"
    REJECT = "reject"

    @property
    def terminal(self) -> bool:
        return self in (MatchState.ACCEPT, MatchState.REJECT)


def _check_token(token: str) -> None:
    if not is_token(token):
        raise ValueError(f"malformed key token: {token!r}")


@dataclass(frozen=True, slots=True)
class SingleToken:
    """Accepts exactly one token."""

    token: str

    def __post_init__(self) -> None:
        _check_token(self.token)


@dataclass(frozen=True, slots=True)
class TokenSequence:
    """Accepts a fixed run of two or more tokens."""

    tokens: tuple[str, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "tokens", tuple(self.tokens))
        if len(self.tokens) < 2:
            raise ValueError("TokenSequence needs at least two tokens; use SingleToken")
        for token in self.tokens:
            _check_token(token)


@dataclass(frozen=True, slots=True)
class CountPrefix:
    """Collects a leading decimal repeat count."""


StepFunction = Callable[[tuple[str, ...], str], MatchState]


@dataclass(frozen=True, slots=True)
class Custom:
    """Delegates each step to ``step(captured, token)``.

    ``captured`` holds the tokens the mapping has kept so far; a token that
    yields ``CONTINUE`` or ``ACCEPT`` is appended to it.
    """

    step: StepFunction
    label: str = "custom"

    def __post_init__(self) -> None:
        if not callable(self.step):
            raise TypeError("step must be callable")


Pattern = Union[SingleToken, TokenSequence, CountPrefix, Custom]


def pattern_tokens(pattern: Pattern) -> tuple[str, ...]:
    """Fixed tokens of a pattern; empty for variants that match by rule."""

    if isinstance(pattern, SingleToken):
        return (pattern.token,)
    if isinstance(pattern, TokenSequence):
        return pattern.tokens
    return ()


def pattern_from_tokens(tokens: tuple[str, ...]) -> Pattern:
    if len(tokens) == 1:
        return SingleToken(tokens[0])
    return TokenSequence(tokens)


__all__ = [
    "MatchState",
    "SingleToken",
    "TokenSequence",
    "CountPrefix",
    "Custom",
    "Pattern",
    "StepFunction",
    "pattern_tokens",
    "pattern_from_tokens",
]
