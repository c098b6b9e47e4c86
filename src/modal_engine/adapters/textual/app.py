"""Executable Textual app that drives a scroll view with the modal engine."""

from __future__ import annotations

import argparse
from typing import Callable, Mapping, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.containers import VerticalScroll
    from textual.widgets import Footer, Header, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use modal_engine.adapters.textual.app"
    ) from exc

from modal_engine.engine import create_default_engine
from modal_engine.keys import RawEvent
from modal_engine.runtime import EngineSettings

from .controller import TextualHostHooks, TextualModalAdapter

# scroll steps are pixel-like; one terminal cell is roughly this many
CELL_WIDTH = 8
CELL_HEIGHT = 20


class Target(Static):
    """A followable line in the demo document."""

    def __init__(self, caption: str) -> None:
        super().__init__(caption)
        self.caption = caption

    def show_label(self, label: Optional[str]) -> None:
        self.update(f"[reverse]{label}[/reverse] {self.caption}" if label else self.caption)


class ScrollViewHost:
    """HostActions implementation backed by a Textual ``VerticalScroll``."""

    def __init__(
        self,
        view: VerticalScroll,
        targets: Sequence[Target],
        report: Callable[[str], None],
    ) -> None:
        self.view = view
        self.targets = list(targets)
        self.report = report

    def scroll_by(self, dx: int, dy: int) -> None:
        self.view.scroll_relative(x=dx / CELL_WIDTH, y=dy / CELL_HEIGHT, animate=False)

    def scroll_to_top(self) -> None:
        self.view.scroll_home(animate=False)

    def scroll_to_bottom(self) -> None:
        self.view.scroll_end(animate=False)

    def list_targets(self) -> Sequence[object]:
        top = self.view.scroll_offset.y
        bottom = top + self.view.size.height
        return [
            target for target in self.targets if top <= target.virtual_region.y < bottom
        ]

    def show_hints(self, hints: Mapping[str, object]) -> None:
        for label, target in hints.items():
            if isinstance(target, Target):
                target.show_label(label)

    def clear_hints(self) -> None:
        for target in self.targets:
            target.show_label(None)

    def follow(self, target: object) -> None:
        if isinstance(target, Target):
            self.view.scroll_to_widget(target, animate=False)
            self.report(f"followed: {target.caption}")


class ModalDemoApp(App[None]):
    """Scrollable document navigated with vim-style keys."""

    CSS = """
	#document {
		height: 1fr;
		border: round $accent;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [("ctrl+q", "quit", "Quit")]

    def __init__(self, *, settings: EngineSettings | None = None, lines: int = 200) -> None:
        super().__init__()
        self._settings = settings
        self._line_count = lines
        self._status: Static | None = None
        self.adapter: TextualModalAdapter | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        lines: list[Static] = [
            Target(f"line {index}: target #{index}") if index % 5 == 0 else Static(f"line {index}")
            for index in range(self._line_count)
        ]
        yield VerticalScroll(*lines, id="document")
        self._status = Static("-- normal --", id="status-line")
        yield self._status
        yield Footer()

    def on_mount(self) -> None:
        view = self.query_one("#document", VerticalScroll)
        host = ScrollViewHost(view, list(view.query(Target)), self._update_status)
        engine = create_default_engine(host, settings=self._settings)
        self.adapter = TextualModalAdapter(
            engine,
            TextualHostHooks(replay=self._replay, update_status=self._update_status),
        )

    def on_key(self, event: events.Key) -> None:
        if self.adapter is None or event.key == "ctrl+q":
            return
        result = self.adapter.handle_textual_key(event.key, character=event.character)
        if result.consumed:
            event.stop()
            event.prevent_default()

    def on_click(self, event: events.Click) -> None:
        if self.adapter is None:
            return
        result = self.adapter.handle_textual_click(
            event.button, chain=getattr(event, "chain", 1)
        )
        if result.consumed:
            event.stop()

    def _replay(self, event: RawEvent) -> None:
        """Report a replayed event on the status line.

        The demo document has no text input, so nothing is re-posted. A key
        held as a prefix (the ``g`` of ``gx``) was stopped when it arrived
        and is only reported here. The key that ended the sequence was not
        stopped, so Textual's default handling still sees it.
        """

        self._update_status(f"passed through: {event}")

    def _update_status(self, status: str) -> None:
        if self._status is not None:
            self._status.update(status)


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the modal engine Textual demo.")
    parser.add_argument(
        "--lines",
        type=int,
        default=200,
        help="Number of lines in the demo document (default: 200)",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    ModalDemoApp(settings=EngineSettings.from_env(), lines=args.lines).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
