"""Normal mode: counts, scrolling, and the entry points to other modes."""

from __future__ import annotations

from typing import Sequence

from modal_engine.keymaps import NORMAL
from modal_engine.keys import is_control_token

from .base_mode import Mode


class NormalMode(Mode):
    name = NORMAL
    count_prefix = True

    @property
    def count(self) -> str:
        return self.mapper.count.value

    def pass_through(self, tokens: Sequence[str]) -> bool:
        # unmatched control chords are swallowed, anything else goes back
        return not all(is_control_token(token) for token in tokens)
