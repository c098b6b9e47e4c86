"""Feed loop: the boundary between host input and the active mode.

The engine buffers the raw events behind every token that is still in
flight. When the active Mapper gives up on a sequence, those events are
handed back to the host, in arrival order and marked as replayed, so the
host can deliver them exactly once without the engine seeing them again.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Literal, Optional

from modal_engine.keys import RawEvent, mark_replayed, normalize
from modal_engine.modes import (
    HintMode,
    HostActions,
    InsertMode,
    ModeContext,
    ModeManager,
    NormalMode,
    NullHost,
)
from modal_engine.runtime import EngineSettings, telemetry

FeedStatus = Literal["consumed", "pending", "discarded", "pass_through", "ignored"]


@dataclass(frozen=True, slots=True)
class FeedResult:
    """What the host should do with the input it just fed.

    ``consumed``: an action ran. ``pending``: hold the input, more keys may
    complete a binding. ``discarded``: no binding matched and the mode
    swallowed the input. ``pass_through``: deliver ``events`` (or, for
    token-only feeds, treat ``tokens``) as if the engine were absent.
    ``ignored``: the event was already replayed once; let it through as is.
    """

    status: FeedStatus
    events: tuple[RawEvent, ...] = ()
    tokens: tuple[str, ...] = ()
    binding_id: Optional[str] = None

    @property
    def consumed(self) -> bool:
        return self.status in ("consumed", "pending", "discarded")


class Engine:
    """Synchronous entry point feeding tokens to the active mode."""

    def __init__(self, manager: ModeManager) -> None:
        self.manager = manager
        self.logger = telemetry.get_logger("modal_engine.engine")
        self._events: list[RawEvent] = []
        self._tokens: list[str] = []
        self._dispatching = False
        manager.context.bus.subscribe("mode.switch", self._on_mode_switch)

    @property
    def mode(self) -> Optional[str]:
        return self.manager.active_name

    @property
    def in_flight(self) -> tuple[RawEvent, ...]:
        return tuple(self._events)

    def feed_event(self, event: RawEvent) -> FeedResult:
        """Normalize ``event`` and feed its token."""

        if event.replayed:
            return FeedResult("ignored")
        token = normalize(event)
        if token is None:
            telemetry.record_event(
                "engine.unrecognized",
                level="debug",
                data={"event": event},
            )
            return FeedResult("pass_through", events=(mark_replayed(event),))
        return self.feed(token, (event,))

    def feed(self, token: str, events: Iterable[RawEvent] = ()) -> FeedResult:
        """Feed one token; ``events`` are the raw events that produced it."""

        self._events.extend(events)
        self._tokens.append(token)
        self._dispatching = True
        try:
            resolution = self.manager.dispatch(token)
        except Exception:
            self._clear()
            raise
        finally:
            self._dispatching = False

        if resolution.status == "pending":
            return FeedResult("pending", tokens=tuple(self._tokens))

        events_out, tokens_out = tuple(self._events), tuple(self._tokens)
        self._clear()
        if resolution.status == "accept":
            return FeedResult(
                "consumed", tokens=tokens_out, binding_id=resolution.binding_id
            )
        if not resolution.pass_through:
            return FeedResult("discarded", tokens=tokens_out)
        return FeedResult(
            "pass_through",
            events=tuple(mark_replayed(event) for event in events_out),
            tokens=tokens_out,
        )

    def flush(self) -> FeedResult:
        """Abandon the pending sequence and hand its input back."""

        mode = self.manager.active_mode
        if mode is not None:
            mode.mapper.reset_full()
        if not self._tokens:
            return FeedResult("ignored")
        result = FeedResult(
            "pass_through",
            events=tuple(mark_replayed(event) for event in self._events),
            tokens=tuple(self._tokens),
        )
        self._clear()
        return result

    def _on_mode_switch(self, mode: object) -> None:
        # a switch from outside feed drops the sequence the outgoing mode held;
        # call flush() first to get those events back
        if self._dispatching or not self._tokens:
            return
        telemetry.record_event(
            "engine.abandoned",
            level="debug",
            data={"mode": mode, "tokens": "".join(self._tokens)},
        )
        self._clear()

    def _clear(self) -> None:
        self._events.clear()
        self._tokens.clear()


def create_default_manager(
    host: HostActions | None = None,
    *,
    settings: EngineSettings | None = None,
) -> ModeManager:
    """Build a ModeManager with Normal, Insert and HintSelect + default keymaps."""

    context = ModeContext(
        host=host or NullHost(),
        settings=settings or EngineSettings.from_env(),
    )
    manager = ModeManager(context)
    manager.register_mode(NormalMode)
    manager.register_mode(InsertMode)
    manager.register_mode(HintMode)
    manager.switch_mode(context.settings.initial_mode)
    return manager


def create_default_engine(
    host: HostActions | None = None,
    *,
    settings: EngineSettings | None = None,
) -> Engine:
    return Engine(create_default_manager(host, settings=settings))


__all__ = [
    "Engine",
    "FeedResult",
    "FeedStatus",
    "create_default_engine",
    "create_default_manager",
]
