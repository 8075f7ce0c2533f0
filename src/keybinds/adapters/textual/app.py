"""Executable Textual app that shows the dispatcher reacting to key presses."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

from textual import events
from textual.app import App, ComposeResult
from textual.containers import Vertical
from textual.widgets import Footer, Header, Static

from keybinds.dispatch import DEFAULT_TIMEOUT_MS, KeybindDispatcher
from keybinds.keymaps import BindingEntryError, load_bindings

from .controller import TextualKeybindAdapter, TextualKeybindHooks

DEMO_BINDINGS: Mapping[str, str] = {
    "h e l l o": "say_hello",
    "Ctrl+Alt+Enter": "open_file",
    "Ctrl+x Ctrl+c": "exit_app",
    "Esc": "escape",
    "Esc Esc": "double_escape",
}


def build_dispatcher(
    bindings: Mapping[str, str], *, timeout_ms: int = DEFAULT_TIMEOUT_MS
) -> tuple[KeybindDispatcher[str], list[BindingEntryError]]:
    """Load ``bindings`` into a dispatcher, returning entries that failed."""

    result = load_bindings(bindings)
    dispatcher: KeybindDispatcher[str] = KeybindDispatcher(
        result.table, timeout_ms=timeout_ms
    )
    return dispatcher, list(result.errors)


@dataclass
class UIState:
    status_text: str = ""
    fired: list[str] = field(default_factory=list)


class KeybindsDemoApp(App[None]):
    """Prints every fired action; ``Ctrl+x Ctrl+c`` exits."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#action-log {
		height: 1fr;
		border: round $accent;
		padding: 1 1;
		overflow: auto;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    def __init__(
        self,
        bindings: Mapping[str, str] = DEMO_BINDINGS,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        tick: float = 0.05,
    ) -> None:
        super().__init__()
        self._state = UIState()
        self._tick = tick
        dispatcher, errors = build_dispatcher(bindings, timeout_ms=timeout_ms)
        self._load_errors = errors
        self.adapter = TextualKeybindAdapter(
            dispatcher,
            TextualKeybindHooks(
                run_action=self._run_action,
                update_status=self._update_status,
            ),
        )
        self._log_widget: Static | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        with Vertical(id="log-area"):
            self._log_widget = Static("", id="action-log")
            yield self._log_widget
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        for error in self._load_errors:
            self._append(f"skipped {error}")
        self.set_interval(self._tick, self.adapter.process_timeouts)

    def on_key(self, event: events.Key) -> None:
        self.adapter.handle_textual_key(event)

    def _run_action(self, action: object) -> None:
        if action == "exit_app":
            self.exit()
            return
        self._append(f"action: {action}")

    def _append(self, line: str) -> None:
        self._state.fired.append(line)
        if self._log_widget:
            self._log_widget.update("\n".join(self._state.fired[-200:]))

    def _update_status(self, status: str) -> None:
        self._state.status_text = status
        if self._status_widget:
            self._status_widget.update(status)


def _parse_binding(value: str) -> tuple[str, str]:
    text, sep, action = value.rpartition("=")
    if not sep or not text.strip() or not action.strip():
        raise argparse.ArgumentTypeError(f"expected TEXT=ACTION, got {value!r}")
    return text, action.strip()


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected an integer, got {value!r}") from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {number}")
    return number


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Run the keybinds Textual demo.")
    parser.add_argument(
        "--bind",
        dest="bindings",
        action="append",
        type=_parse_binding,
        default=[],
        metavar="TEXT=ACTION",
        help="Add a binding, e.g. --bind 'Ctrl+x Ctrl+s=save' (repeatable)",
    )
    parser.add_argument(
        "--timeout-ms",
        type=_positive_int,
        default=DEFAULT_TIMEOUT_MS,
        help="Quiet period before a pending sequence resolves (default: %(default)s)",
    )
    parser.add_argument(
        "--no-defaults",
        action="store_true",
        help="Do not load the built-in demo bindings",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    bindings = {} if args.no_defaults else dict(DEMO_BINDINGS)
    bindings.update(dict(args.bindings))
    KeybindsDemoApp(bindings, timeout_ms=args.timeout_ms).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()
