"""Per-mode binding tables and the actions they point at."""

from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional

from modal_engine.runtime import telemetry
from modal_engine.runtime.telemetry import SpanHandle, span

from .models import ActionRef, Binding


@dataclass(slots=True)
class RegistryStats:
    action_count: int
    binding_count: int
    modes: tuple[str, ...]


class KeymapConflictError(RuntimeError):
    """A strict registration found bindings with the same key signature."""

    def __init__(self, binding: Binding, conflicts: Iterable[Binding]):
        self.binding = binding
        self.conflicts = tuple(conflicts)
        shadowed = ", ".join(existing.id for existing in self.conflicts)
        super().__init__(
            f"'{binding.id}' ({binding.key_signature}) is already bound in "
            f"mode '{binding.mode}' by {shadowed}"
        )


class KeymapRegistry:
    """Actions by id plus one ordered binding table per mode.

    Table order is registration order, which is also the order Mappers try
    bindings in. A binding whose keys are already taken is still appended
    (and logged) unless ``strict`` is set. Every mutation bumps ``revision``.
    """

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._actions: Dict[str, ActionRef] = {}
        self._tables: Dict[str, List[Binding]] = {}
        self._by_id: Dict[str, Binding] = {}
        self._logger_name = logger_name
        self._revision = 0

    def revision(self) -> int:
        return self._revision

    @contextmanager
    def _mutation(self, name: str, **metadata: object) -> Iterator[SpanHandle]:
        with span(
            f"keymaps::{name}", logger_name=self._logger_name, metadata=metadata
        ) as handle:
            yield handle
        self._revision += 1

    def get_action(self, action_id: str) -> ActionRef:
        action = self._actions.get(action_id)
        if action is None:
            raise KeyError(f"no action registered as '{action_id}'")
        return action

    def get_binding(self, binding_id: str) -> Binding:
        binding = self._by_id.get(binding_id)
        if binding is None:
            raise KeyError(f"no binding registered as '{binding_id}'")
        return binding

    def register_action(self, action: ActionRef, *, replace: bool = False) -> ActionRef:
        existing = self._actions.get(action.id)
        if existing is not None and not replace:
            raise ValueError(f"action id '{action.id}' is taken")
        with self._mutation("register_action", action_id=action.id):
            self._actions[action.id] = action
        return action

    def register_binding(self, binding: Binding, *, strict: bool = False) -> Binding:
        if binding.action_id not in self._actions:
            raise KeyError(
                f"'{binding.id}' points at unregistered action '{binding.action_id}'"
            )
        if binding.id in self._by_id:
            raise ValueError(f"binding id '{binding.id}' is taken")
        conflicts = self.detect_conflicts(binding)
        if conflicts and strict:
            raise KeymapConflictError(binding, conflicts)

        with self._mutation(
            "register_binding", binding_id=binding.id, mode=binding.mode
        ) as handle:
            if conflicts:
                names = ",".join(existing.id for existing in conflicts)
                handle.add_metadata("shadowed_by", names)
                telemetry.record_event(
                    "keymaps.shadowed",
                    level="warning",
                    data={"binding_id": binding.id, "shadowed_by": names},
                    logger_name=self._logger_name,
                )
            self._tables.setdefault(binding.mode, []).append(binding)
            self._by_id[binding.id] = binding
        return binding

    def register(
        self,
        binding: Binding,
        action: ActionRef,
        *,
        strict: bool = False,
    ) -> Binding:
        """Register ``binding`` together with its action.

        The action may already be registered, but only as the same object.
        """

        known = self._actions.get(action.id)
        if known is None:
            self.register_action(action)
        elif known is not action:
            raise ValueError(f"action id '{action.id}' is taken by another handler")
        return self.register_binding(binding, strict=strict)

    def unregister_binding(self, binding_id: str) -> Optional[Binding]:
        binding = self._by_id.get(binding_id)
        if binding is None:
            return None
        with self._mutation("unregister_binding", binding_id=binding_id):
            del self._by_id[binding_id]
            table = self._tables[binding.mode]
            table.remove(binding)
            if not table:
                del self._tables[binding.mode]
        return binding

    def iter_bindings(self, mode: Optional[str] = None) -> Iterator[Binding]:
        if mode is not None:
            return iter(tuple(self._tables.get(mode, ())))
        return iter(tuple(self._by_id.values()))

    def detect_conflicts(self, binding: Binding) -> list[Binding]:
        """Bindings of the same mode whose key signature equals ``binding``'s."""

        signature = binding.key_signature
        return [
            existing
            for existing in self._tables.get(binding.mode, ())
            if existing.id != binding.id and existing.key_signature == signature
        ]

    def stats(self) -> RegistryStats:
        return RegistryStats(
            action_count=len(self._actions),
            binding_count=len(self._by_id),
            modes=tuple(sorted(self._tables)),
        )


__all__ = [
    "KeymapRegistry",
    "KeymapConflictError",
    "RegistryStats",
]
