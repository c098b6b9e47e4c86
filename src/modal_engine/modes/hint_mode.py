"""Hint selection: label the host's targets and follow the one typed."""

from __future__ import annotations

from typing import Dict, Optional, Sequence

from modal_engine.actions import hint_labels
from modal_engine.keymaps import HINT_SELECT, NORMAL, ActionRef, Custom, MatchState
from modal_engine.keys import char_token
from modal_engine.runtime import telemetry

from .base_mode import Mode, ModeContext


class HintMode(Mode):
    """Collects one label's worth of symbol keys, then follows its target.

    Labels are recomputed from ``host.list_targets()`` on every entry. An
    unknown label resets the mode and keeps the overlay up.
    """

    name = HINT_SELECT

    def __init__(self, context: ModeContext, **kwargs: object) -> None:
        super().__init__(context, **kwargs)  # type: ignore[arg-type]
        self.symbols = context.settings.hint_symbols
        self._symbol_tokens = {char_token(symbol): symbol for symbol in self.symbols}
        self._targets: Dict[str, object] = {}
        self._width = 0
        self.mapper.add(
            Custom(self._step, label="hint-label"),
            ActionRef(
                id="hints.follow",
                handler=self._follow,
                description="Follow the target whose label was typed",
            ),
            binding_id="hint_select.label",
        )

    @property
    def labels(self) -> Dict[str, object]:
        return dict(self._targets)

    def on_enter(self, previous: Optional[str]) -> None:
        targets: Sequence[object] = list(self.context.host.list_targets())
        labels = hint_labels(len(targets), self.symbols)
        self._width = len(labels[0]) if labels else 0
        self._targets = dict(zip(labels, targets))
        telemetry.record_event(
            "hints.show",
            level="debug",
            data={"targets": len(targets), "width": self._width},
        )
        self.context.host.show_hints(dict(self._targets))
        super().on_enter(previous)

    def on_exit(self, next_mode: Optional[str]) -> None:
        self.context.host.clear_hints()
        self._targets = {}
        self._width = 0
        super().on_exit(next_mode)

    def _step(self, captured: tuple[str, ...], token: str) -> MatchState:
        if not self._width or token not in self._symbol_tokens:
            return MatchState.REJECT
        if len(captured) + 1 == self._width:
            return MatchState.ACCEPT
        return MatchState.CONTINUE

    def _follow(self) -> None:
        mapping = self.mapper.last_accepted
        assert mapping is not None
        label = "".join(self._symbol_tokens[token] for token in mapping.captured)
        target = self._targets.get(label)
        if target is None:
            telemetry.record_event(
                "hints.unknown_label", level="debug", data={"label": label}
            )
            return
        self.context.host.follow(target)
        self.context.switch_to(NORMAL)
