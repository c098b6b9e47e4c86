"""Pattern state machines, per-mode resolution, and keymap storage."""

from .patterns import (
    CountPrefix,
    Custom,
    MatchState,
    Pattern,
    SingleToken,
    TokenSequence,
)
from .models import ActionRef, Binding, KeySequence
from .mapping import CountRegister, Mapping
from .registry import KeymapConflictError, KeymapRegistry, RegistryStats
from .mapper import Mapper, Resolution
from .defaults import HINT_SELECT, INSERT, NORMAL, load_default_keymaps

__all__ = [
    "MatchState",
    "Pattern",
    "SingleToken",
    "TokenSequence",
    "CountPrefix",
    "Custom",
    "ActionRef",
    "Binding",
    "KeySequence",
    "CountRegister",
    "Mapping",
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
    "Mapper",
    "Resolution",
    "NORMAL",
    "INSERT",
    "HINT_SELECT",
    "load_default_keymaps",
]
