"""Core action implementations shared across modes.

Each function takes the ``ModeContext`` first; the default keymaps bind the
context (and any arguments) with ``functools.partial`` so the registered
handlers are zero-argument callables.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from modal_engine.modes.base_mode import ModeContext


def noop_action() -> None:
    return None


def scroll_by(context: "ModeContext", dx: int, dy: int) -> None:
    context.host.scroll_by(dx, dy)


def scroll_to_top(context: "ModeContext") -> None:
    context.host.scroll_to_top()


def scroll_to_bottom(context: "ModeContext") -> None:
    context.host.scroll_to_bottom()


def switch_mode(context: "ModeContext", name: str) -> None:
    context.switch_to(name)


__all__ = [
    "noop_action",
    "scroll_by",
    "scroll_to_top",
    "scroll_to_bottom",
    "switch_mode",
]
