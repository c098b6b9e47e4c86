"""Base classes and shared services for modes."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import (
    TYPE_CHECKING,
    Callable,
    Dict,
    Mapping,
    Optional,
    Protocol,
    Sequence,
    runtime_checkable,
)

from modal_engine.keymaps import KeymapRegistry, Mapper, Resolution
from modal_engine.runtime import EngineSettings, telemetry

if TYPE_CHECKING:
    from .mode_manager import ModeManager

ModeHook = Callable[[Optional[str]], None]


@runtime_checkable
class HostActions(Protocol):
    """Side effects the host performs on the engine's behalf."""

    def scroll_by(self, dx: int, dy: int) -> None: ...

    def scroll_to_top(self) -> None: ...

    def scroll_to_bottom(self) -> None: ...

    def list_targets(self) -> Sequence[object]: ...

    def show_hints(self, hints: Mapping[str, object]) -> None: ...

    def clear_hints(self) -> None: ...

    def follow(self, target: object) -> None: ...


class NullHost:
    """Host that ignores every request; useful for headless runs."""

    def scroll_by(self, dx: int, dy: int) -> None:
        del dx, dy

    def scroll_to_top(self) -> None:
        return None

    def scroll_to_bottom(self) -> None:
        return None

    def list_targets(self) -> Sequence[object]:
        return ()

    def show_hints(self, hints: Mapping[str, object]) -> None:
        del hints

    def clear_hints(self) -> None:
        return None

    def follow(self, target: object) -> None:
        del target


class ModeBus:
    """Minimal event bus letting modes and hosts exchange signals."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, list[Callable[[object], None]]] = {}

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in self._subscribers.get(event, []):
            callback(payload)


@dataclass(slots=True)
class ModeContext:
    """Shared services every mode can access."""

    host: HostActions = field(default_factory=NullHost)
    registry: KeymapRegistry = field(
        default_factory=lambda: KeymapRegistry(logger_name="modal_engine.keymaps")
    )
    bus: ModeBus = field(default_factory=ModeBus)
    settings: EngineSettings = field(default_factory=EngineSettings)
    manager: Optional["ModeManager"] = None

    def switch_to(self, name: str) -> None:
        if self.manager is None:
            raise RuntimeError("ModeContext is not attached to a ModeManager")
        self.manager.switch_mode(name)


class Mode:
    """A named mode owning one Mapper.

    Subclasses set ``name`` and ``count_prefix`` and may override the hooks
    and ``pass_through``. Hosts can also build ad hoc modes directly by
    passing ``name`` plus optional callbacks.
    """

    name: str = "mode"
    count_prefix: bool = False

    def __init__(
        self,
        context: ModeContext,
        *,
        name: str | None = None,
        on_enter: ModeHook | None = None,
        on_exit: ModeHook | None = None,
        pass_through: Callable[[Sequence[str]], bool] | None = None,
    ) -> None:
        if name:
            self.name = name
        self.context = context
        self.logger = telemetry.get_logger(f"modal_engine.modes.{self.name}")
        self._enter_hook = on_enter
        self._exit_hook = on_exit
        self._pass_through_hook = pass_through
        self.mapper = Mapper(
            self.name,
            registry=context.registry,
            count_prefix=self.count_prefix,
            pass_through=self._should_pass_through,
            logger_name="modal_engine.keymaps",
        )

    def on_enter(self, previous: Optional[str]) -> None:
        self.mapper.reset_full()
        if self._enter_hook is not None:
            self._enter_hook(previous)

    def on_exit(self, next_mode: Optional[str]) -> None:
        self.mapper.reset_full()
        if self._exit_hook is not None:
            self._exit_hook(next_mode)

    def pass_through(self, tokens: Sequence[str]) -> bool:
        """Whether an unresolved sequence goes back to the host."""

        del tokens
        return True

    def handle_token(self, token: str) -> Resolution:
        return self.mapper.feed(token)

    def _should_pass_through(self, tokens: Sequence[str]) -> bool:
        if self._pass_through_hook is not None:
            return self._pass_through_hook(tokens)
        return self.pass_through(tokens)
