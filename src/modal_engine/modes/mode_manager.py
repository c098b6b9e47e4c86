"""Mode registry coordinating Normal/Insert/HintSelect dispatch."""

from __future__ import annotations

from typing import Dict, Optional, Type

from modal_engine.keymaps import Resolution, load_default_keymaps
from modal_engine.runtime import telemetry

from .base_mode import Mode, ModeContext


class ModeManager:
    """Owns the registered modes, the active mode name, and dispatch.

    Modes are keyed by name and never reference each other; actions switch
    modes through ``ModeContext.switch_to``, which lands here.
    """

    def __init__(self, context: ModeContext, *, load_defaults: bool = True) -> None:
        self.context = context
        self.context.manager = self
        self._modes: Dict[str, Mode] = {}
        self._active: Optional[str] = None
        self.logger = telemetry.get_logger("modal_engine.modes")
        if load_defaults:
            load_default_keymaps(context.registry, context)

    @property
    def active_mode(self) -> Optional[Mode]:
        if self._active is None:
            return None
        return self._modes.get(self._active)

    @property
    def active_name(self) -> Optional[str]:
        return self._active

    @property
    def modes(self) -> tuple[str, ...]:
        return tuple(self._modes)

    def get_mode(self, name: str) -> Mode:
        try:
            return self._modes[name]
        except KeyError as exc:
            raise KeyError(f"Unknown mode '{name}'") from exc

    def register_mode(
        self,
        mode_cls: Type[Mode],
        /,
        *mode_args: object,
        **mode_kwargs: object,
    ) -> Mode:
        return self.add_mode(mode_cls(self.context, *mode_args, **mode_kwargs))

    def add_mode(self, mode: Mode) -> Mode:
        if mode.context is not self.context:
            raise ValueError(f"Mode '{mode.name}' was built for another context")
        if mode.name in self._modes:
            raise ValueError(f"Mode '{mode.name}' already registered")
        self._modes[mode.name] = mode
        if self._active is None:
            self._active = mode.name
            mode.on_enter(None)
        return mode

    def switch_mode(self, name: str) -> None:
        if name not in self._modes:
            raise KeyError(f"Unknown mode '{name}'")
        previous = self.active_mode
        if previous is not None and previous.name == name:
            return
        if previous is not None:
            previous.on_exit(name)
        self._active = name
        self._modes[name].on_enter(previous.name if previous else None)
        telemetry.record_event(
            "mode.switch",
            data={"mode": name, "previous": previous.name if previous else None},
        )
        self.context.bus.emit("mode.switch", name)

    def dispatch(self, token: str) -> Resolution:
        mode = self.active_mode
        if mode is None:
            raise RuntimeError("No active mode registered")
        with telemetry.span(
            f"mode::{mode.name}",
            component=mode.name,
            metadata={"active_mode": mode.name},
        ):
            return mode.handle_token(token)


__all__ = ["ModeManager"]
