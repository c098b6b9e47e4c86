"""Engine settings resolved from keyword arguments or the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

ENV_PREFIX = "MODAL_ENGINE_"

DEFAULT_SCROLL_STEP = 40
DEFAULT_HINT_SYMBOLS = "asdfjklASDFJKL"
DEFAULT_INITIAL_MODE = "normal"


def _env_int(environ: Mapping[str, str], key: str, fallback: int) -> int:
    value = environ.get(key)
    if value is None:
        return fallback
    try:
        return int(value)
    except ValueError:
        return fallback


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Tunables shared by the default keymaps and modes."""

    scroll_step: int = DEFAULT_SCROLL_STEP
    hint_symbols: str = DEFAULT_HINT_SYMBOLS
    initial_mode: str = DEFAULT_INITIAL_MODE

    def __post_init__(self) -> None:
        if self.scroll_step <= 0:
            raise ValueError("scroll_step must be positive")
        if len(set(self.hint_symbols)) < 2:
            raise ValueError("hint_symbols needs at least two distinct symbols")
        if len(set(self.hint_symbols)) != len(self.hint_symbols):
            raise ValueError("hint_symbols must not repeat a symbol")
        if not self.initial_mode:
            raise ValueError("initial_mode cannot be empty")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        return cls(
            scroll_step=_env_int(
                env, f"{ENV_PREFIX}SCROLL_STEP", DEFAULT_SCROLL_STEP
            ),
            hint_symbols=env.get(f"{ENV_PREFIX}HINT_SYMBOLS") or DEFAULT_HINT_SYMBOLS,
            initial_mode=env.get(f"{ENV_PREFIX}INITIAL_MODE") or DEFAULT_INITIAL_MODE,
        )


__all__ = ["EngineSettings"]
