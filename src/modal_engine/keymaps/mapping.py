"""Per-binding state machines driven one token at a time."""

from __future__ import annotations

from typing import Callable, Dict, Optional

from modal_engine.keys import is_digit_token

from .models import ActionRef
from .patterns import (
    CountPrefix,
    Custom,
    MatchState,
    Pattern,
    SingleToken,
    TokenSequence,
)


class CountRegister:
    """Decimal repeat count accumulated by a count-prefix mapping."""

    DEFAULT = "1"

    __slots__ = ("_digits",)

    def __init__(self) -> None:
        self._digits = self.DEFAULT

    @property
    def value(self) -> str:
        return self._digits

    def seed(self, digit: str) -> None:
        self._digits = digit

    def append(self, digit: str) -> None:
        self._digits += digit

    def reset(self) -> None:
        self._digits = self.DEFAULT

    def __int__(self) -> int:
        return int(self._digits)

    def __repr__(self) -> str:
        return f"CountRegister({self._digits!r})"


class Mapping:
    """Runs one pattern against a stream of tokens.

    ``next`` only updates ``state`` and ``captured`` (plus the count register
    for ``CountPrefix``); running the action is left to the owning Mapper.
    """

    __slots__ = ("pattern", "action", "binding_id", "repeat", "state", "captured", "register")

    def __init__(
        self,
        pattern: Pattern,
        action: Optional[ActionRef] = None,
        *,
        binding_id: str,
        repeat: bool = False,
        register: Optional[CountRegister] = None,
    ) -> None:
        if type(pattern) not in _STEPS:
            raise TypeError(f"unsupported pattern: {pattern!r}")
        if isinstance(pattern, CountPrefix):
            if register is None:
                raise ValueError("CountPrefix mappings need a count register")
        elif action is None:
            raise ValueError(f"mapping '{binding_id}' needs an action")
        self.pattern = pattern
        self.action = action
        self.binding_id = binding_id
        self.repeat = repeat
        self.register = register
        self.state = MatchState.START
        self.captured: list[str] = []

    @property
    def is_count_prefix(self) -> bool:
        return isinstance(self.pattern, CountPrefix)

    @property
    def ending_token(self) -> Optional[str]:
        """Token that closed a count prefix, once the mapping accepted."""

        if self.is_count_prefix and self.state is MatchState.ACCEPT:
            return self.captured[-1]
        return None

    def reset(self) -> None:
        self.state = MatchState.START
        self.captured = []

    def next(self, token: str) -> MatchState:
        if self.state.terminal:
            self.state = MatchState.REJECT
        else:
            self.state = _STEPS[type(self.pattern)](self, token)
        return self.state

    def __repr__(self) -> str:
        return f"Mapping({self.binding_id!r}, state={self.state.value})"


def _step_single(mapping: Mapping, token: str) -> MatchState:
    pattern = mapping.pattern
    assert isinstance(pattern, SingleToken)
    return MatchState.ACCEPT if token == pattern.token else MatchState.REJECT


def _step_sequence(mapping: Mapping, token: str) -> MatchState:
    pattern = mapping.pattern
    assert isinstance(pattern, TokenSequence)
    if token != pattern.tokens[len(mapping.captured)]:
        return MatchState.REJECT
    mapping.captured.append(token)
    if len(mapping.captured) == len(pattern.tokens):
        return MatchState.ACCEPT
    return MatchState.CONTINUE


def _step_count(mapping: Mapping, token: str) -> MatchState:
    register = mapping.register
    assert register is not None
    digit = is_digit_token(token)
    if mapping.state is MatchState.START:
        # a leading zero is a command of its own, never a count
        if not digit or token == "<0>":
            return MatchState.REJECT
        register.seed(token[1])
        mapping.captured.append(token)
        return MatchState.CONTINUE
    mapping.captured.append(token)
    if digit:
        register.append(token[1])
        return MatchState.CONTINUE
    return MatchState.ACCEPT


def _step_custom(mapping: Mapping, token: str) -> MatchState:
    pattern = mapping.pattern
    assert isinstance(pattern, Custom)
    outcome = pattern.step(tuple(mapping.captured), token)
    if outcome is MatchState.CONTINUE or outcome is MatchState.ACCEPT:
        mapping.captured.append(token)
        return outcome
    return MatchState.REJECT


_STEPS: Dict[type, Callable[[Mapping, str], MatchState]] = {
    SingleToken: _step_single,
    TokenSequence: _step_sequence,
    CountPrefix: _step_count,
    Custom: _step_custom,
}


__all__ = ["CountRegister", "Mapping"]
