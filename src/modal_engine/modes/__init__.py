"""Mode registry, lifecycle hooks, and the built-in modes."""

from .base_mode import HostActions, Mode, ModeBus, ModeContext, NullHost
from .normal_mode import NormalMode
from .insert_mode import InsertMode
from .hint_mode import HintMode
from .mode_manager import ModeManager

__all__ = [
    "HostActions",
    "Mode",
    "ModeBus",
    "ModeContext",
    "NullHost",
    "NormalMode",
    "InsertMode",
    "HintMode",
    "ModeManager",
]
