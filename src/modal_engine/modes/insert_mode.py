"""Insert mode: everything reaches the host except the exit binding."""

from __future__ import annotations

from modal_engine.keymaps import INSERT

from .base_mode import Mode


class InsertMode(Mode):
    name = INSERT
