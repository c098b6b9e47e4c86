"""Built-in keymaps that seed each mode with its default bindings."""

from __future__ import annotations

from functools import partial
from typing import TYPE_CHECKING

from modal_engine.actions import core as core_actions

from .models import ActionRef, Binding
from .registry import KeymapRegistry

if TYPE_CHECKING:
    from modal_engine.modes.base_mode import ModeContext

NORMAL = "normal"
INSERT = "insert"
HINT_SELECT = "hint_select"


def default_actions(context: "ModeContext") -> tuple[ActionRef, ...]:
    step = context.settings.scroll_step
    return (
        ActionRef(
            id="core.noop",
            handler=core_actions.noop_action,
            description="Do nothing; clears a pending count",
        ),
        ActionRef(
            id="scroll.left",
            handler=partial(core_actions.scroll_by, context, -step, 0),
            description="Scroll left by one step",
        ),
        ActionRef(
            id="scroll.down",
            handler=partial(core_actions.scroll_by, context, 0, step),
            description="Scroll down by one step",
        ),
        ActionRef(
            id="scroll.up",
            handler=partial(core_actions.scroll_by, context, 0, -step),
            description="Scroll up by one step",
        ),
        ActionRef(
            id="scroll.right",
            handler=partial(core_actions.scroll_by, context, step, 0),
            description="Scroll right by one step",
        ),
        ActionRef(
            id="scroll.top",
            handler=partial(core_actions.scroll_to_top, context),
            description="Scroll to the top",
        ),
        ActionRef(
            id="scroll.bottom",
            handler=partial(core_actions.scroll_to_bottom, context),
            description="Scroll to the bottom",
        ),
        ActionRef(
            id="core.enter_normal",
            handler=partial(core_actions.switch_mode, context, NORMAL),
            description="Return to normal mode",
        ),
        ActionRef(
            id="core.enter_insert",
            handler=partial(core_actions.switch_mode, context, INSERT),
            description="Enter insert mode",
        ),
        ActionRef(
            id="core.enter_hints",
            handler=partial(core_actions.switch_mode, context, HINT_SELECT),
            description="Label followable targets and select one",
        ),
    )


DEFAULT_BINDINGS: tuple[Binding, ...] = (
    Binding(
        id="normal.escape",
        mode=NORMAL,
        pattern="<Esc>",
        action_id="core.noop",
        description="Cancel a pending count",
        repeat=True,
    ),
    Binding(
        id="normal.scroll_left",
        mode=NORMAL,
        pattern="h",
        action_id="scroll.left",
        repeat=True,
    ),
    Binding(
        id="normal.scroll_down",
        mode=NORMAL,
        pattern="j",
        action_id="scroll.down",
        repeat=True,
    ),
    Binding(
        id="normal.scroll_up",
        mode=NORMAL,
        pattern="k",
        action_id="scroll.up",
        repeat=True,
    ),
    Binding(
        id="normal.scroll_right",
        mode=NORMAL,
        pattern="l",
        action_id="scroll.right",
        repeat=True,
    ),
    Binding(
        id="normal.top",
        mode=NORMAL,
        pattern="gg",
        action_id="scroll.top",
    ),
    Binding(
        id="normal.bottom",
        mode=NORMAL,
        pattern="G",
        action_id="scroll.bottom",
    ),
    Binding(
        id="normal.enter_insert",
        mode=NORMAL,
        pattern="i",
        action_id="core.enter_insert",
    ),
    Binding(
        id="normal.enter_hints",
        mode=NORMAL,
        pattern="f",
        action_id="core.enter_hints",
    ),
    Binding(
        id="insert.exit_escape",
        mode=INSERT,
        pattern="<Esc>",
        action_id="core.enter_normal",
        description="Leave insert mode",
    ),
    Binding(
        id="hint_select.exit_escape",
        mode=HINT_SELECT,
        pattern="<Esc>",
        action_id="core.enter_normal",
        description="Leave hint selection",
    ),
)


def load_default_keymaps(registry: KeymapRegistry, context: "ModeContext") -> None:
    """Register the default actions (bound to ``context``) and bindings."""

    for action in default_actions(context):
        registry.register_action(action, replace=True)
    for binding in DEFAULT_BINDINGS:
        registry.register_binding(binding)


__all__ = [
    "NORMAL",
    "INSERT",
    "HINT_SELECT",
    "DEFAULT_BINDINGS",
    "default_actions",
    "load_default_keymaps",
]
