from __future__ import annotations

from typing import List, Mapping, Sequence, Tuple


class RecordingHost:
    """Host double that records every request the engine makes."""

    def __init__(self, targets: Sequence[object] = ()) -> None:
        self.targets = list(targets)
        self.calls: List[Tuple[str, ...]] = []
        self.scrolls: List[Tuple[int, int]] = []
        self.hints: dict[str, object] = {}
        self.followed: List[object] = []

    def scroll_by(self, dx: int, dy: int) -> None:
        self.scrolls.append((dx, dy))
        self.calls.append(("scroll_by",))

    def scroll_to_top(self) -> None:
        self.calls.append(("top",))

    def scroll_to_bottom(self) -> None:
        self.calls.append(("bottom",))

    def list_targets(self) -> Sequence[object]:
        return list(self.targets)

    def show_hints(self, hints: Mapping[str, object]) -> None:
        self.hints = dict(hints)
        self.calls.append(("show_hints",))

    def clear_hints(self) -> None:
        self.hints = {}
        self.calls.append(("clear_hints",))

    def follow(self, target: object) -> None:
        self.followed.append(target)
