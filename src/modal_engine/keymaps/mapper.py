"""Parallel pattern resolution for a single mode."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Literal, Optional, Sequence

from modal_engine.runtime import telemetry
from modal_engine.runtime.telemetry import span

from .mapping import CountRegister, Mapping
from .models import ActionRef, PatternSpec, coerce_pattern
from .patterns import CountPrefix, MatchState
from .registry import KeymapRegistry

PassThroughPolicy = Callable[[Sequence[str]], bool]

COUNT_BINDING_ID = "count"


def always_pass_through(tokens: Sequence[str]) -> bool:
    del tokens
    return True


@dataclass(frozen=True, slots=True)
class Resolution:
    """Outcome of feeding one token to a Mapper.

    ``tokens`` is the sequence the Mapper saw since its last reset, ending
    with the token just fed. ``pass_through`` is only meaningful for
    ``exhausted``: whether the host should get the unresolved input back.
    """

    status: Literal["accept", "pending", "exhausted"]
    binding_id: Optional[str] = None
    tokens: tuple[str, ...] = ()
    pass_through: bool = False


class Mapper:
    """Drives every mapping of a mode in parallel, one token at a time.

    Mappings are ordered: the optional count prefix first, then the
    registry's bindings for ``mode`` in registration order, then mappings
    added with ``add``. The first mapping to accept on a token wins.
    """

    def __init__(
        self,
        mode: str,
        *,
        registry: KeymapRegistry | None = None,
        count_prefix: bool = False,
        pass_through: PassThroughPolicy | None = None,
        logger_name: str | None = None,
    ) -> None:
        self.mode = mode
        self.count = CountRegister()
        self.last_accepted: Optional[Mapping] = None
        self._registry = registry
        self._pass_through = pass_through or always_pass_through
        self._logger_name = logger_name
        self._count_mapping = (
            Mapping(CountPrefix(), binding_id=COUNT_BINDING_ID, register=self.count)
            if count_prefix
            else None
        )
        self._local: list[Mapping] = []
        self._mappings: list[Mapping] = []
        self._active: list[Mapping] = []
        self._pending: list[str] = []
        self._revision: Optional[int] = None
        self._rebuild()
        self.reset_full()

    @property
    def mappings(self) -> tuple[Mapping, ...]:
        return tuple(self._mappings)

    @property
    def active(self) -> tuple[Mapping, ...]:
        return tuple(self._active)

    @property
    def pending(self) -> tuple[str, ...]:
        return tuple(self._pending)

    def add(
        self,
        pattern: PatternSpec,
        action: ActionRef | Callable[[], object],
        *,
        binding_id: str | None = None,
        repeat: bool = False,
    ) -> Mapping:
        """Append a mode-local mapping and fully reset the Mapper."""

        if not isinstance(action, ActionRef):
            action = ActionRef(
                id=binding_id or f"{self.mode}.local{len(self._local)}",
                handler=action,
            )
        mapping = Mapping(
            coerce_pattern(pattern),
            action,
            binding_id=binding_id or action.id,
            repeat=repeat,
        )
        self._local.append(mapping)
        self._rebuild()
        self.reset_full()
        return mapping

    def reset_full(self) -> None:
        """Restart every mapping and restore the count register to ``"1"``."""

        if self._registry is not None and self._registry.revision() != self._revision:
            self._rebuild()
        self.count.reset()
        self._restart()

    def reset_preserving_count(self) -> None:
        """Restart every mapping but keep the accumulated count."""

        self._restart()

    def feed(self, token: str) -> Resolution:
        with span(
            "mapper::feed",
            logger_name=self._logger_name,
            metadata={"mode": self.mode, "token": token},
        ) as handle:
            resolution = self._feed(token)
            handle.add_metadata("status", resolution.status)
            if resolution.binding_id:
                handle.add_metadata("binding_id", resolution.binding_id)
            return resolution

    def _feed(self, token: str) -> Resolution:
        self._pending.append(token)
        survivors: list[Mapping] = []
        for mapping in self._active:
            state = mapping.next(token)
            if state is MatchState.ACCEPT:
                return self._accept(mapping)
            if state is MatchState.CONTINUE:
                survivors.append(mapping)

        if survivors:
            self._active = survivors
            return Resolution("pending", tokens=tuple(self._pending))
        return self._exhausted()

    def _accept(self, mapping: Mapping) -> Resolution:
        self.last_accepted = mapping
        if mapping.is_count_prefix:
            ending = mapping.ending_token
            assert ending is not None
            self.reset_preserving_count()
            return self._feed(ending)

        tokens = tuple(self._pending)
        assert mapping.action is not None
        runs = int(self.count) if mapping.repeat else 1
        telemetry.record_event(
            "mapper.accept",
            level="debug",
            data={
                "mode": self.mode,
                "binding_id": mapping.binding_id,
                "count": runs,
            },
            logger_name=self._logger_name,
        )
        try:
            for _ in range(runs):
                mapping.action()
        finally:
            self.reset_full()
        return Resolution("accept", binding_id=mapping.binding_id, tokens=tokens)

    def _exhausted(self) -> Resolution:
        tokens = tuple(self._pending)
        self.reset_full()
        passed = self._pass_through(tokens)
        telemetry.record_event(
            "mapper.exhausted",
            level="debug",
            data={"mode": self.mode, "tokens": "".join(tokens), "pass_through": passed},
            logger_name=self._logger_name,
        )
        return Resolution("exhausted", tokens=tokens, pass_through=passed)

    def _restart(self) -> None:
        self._active = list(self._mappings)
        for mapping in self._active:
            mapping.reset()
        self._pending = []

    def _rebuild(self) -> None:
        mappings: list[Mapping] = []
        if self._count_mapping is not None:
            mappings.append(self._count_mapping)
        if self._registry is not None:
            self._revision = self._registry.revision()
            for binding in self._registry.iter_bindings(self.mode):
                mappings.append(
                    Mapping(
                        binding.pattern,  # type: ignore[arg-type]
                        self._registry.get_action(binding.action_id),
                        binding_id=binding.id,
                        repeat=binding.repeat,
                    )
                )
        mappings.extend(self._local)
        self._mappings = mappings


__all__ = [
    "COUNT_BINDING_ID",
    "Mapper",
    "PassThroughPolicy",
    "Resolution",
    "always_pass_through",
]
