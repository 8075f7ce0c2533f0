from __future__ import annotations

import argparse
from dataclasses import dataclass
from typing import List, Optional

import pytest
from textual import events

from keybinds.adapters.textual import (
    TextualKeybindAdapter,
    TextualKeybindHooks,
    key_input_from_event,
)
from keybinds.adapters.textual.app import (
    DEMO_BINDINGS,
    _parse_args,
    _parse_binding,
    _positive_int,
    build_dispatcher,
)
from keybinds.dispatch import DEFAULT_TIMEOUT_MS, KeybindDispatcher
from keybinds.keymaps import (
    Char,
    FunctionKey,
    KeyInput,
    Mods,
    NamedKey,
    Platform,
    SpecialKey,
)


@dataclass
class FakeKeyEvent:
    key: str
    character: Optional[str] = None
    stopped: bool = False

    def stop(self) -> None:
        self.stopped = True


def make_adapter(
    *texts: str,
) -> tuple[TextualKeybindAdapter[str], List[object], List[str], List[str]]:
    dispatcher: KeybindDispatcher[str] = KeybindDispatcher(
        timeout_ms=1000, platform=Platform.OTHER
    )
    for text in texts:
        dispatcher.bind(text, text)
    actions: List[object] = []
    statuses: List[str] = []
    logs: List[str] = []
    hooks = TextualKeybindHooks(
        run_action=actions.append,
        update_status=statuses.append,
        log=logs.append,
    )
    return TextualKeybindAdapter(dispatcher, hooks), actions, statuses, logs


@pytest.mark.parametrize(
    ("key", "character", "expected"),
    [
        ("a", "a", KeyInput("a")),
        ("A", "A", KeyInput("A")),
        ("shift+a", "A", KeyInput("A")),
        ("ctrl+x", "\x18", KeyInput("x", Mods.CTRL)),
        ("ctrl+alt+enter", None, KeyInput(NamedKey.ENTER, Mods.CTRL | Mods.ALT)),
        ("escape", "\x1b", KeyInput(NamedKey.ESC)),
        ("shift+tab", None, KeyInput(NamedKey.BACKTAB)),
        ("shift+up", None, KeyInput(NamedKey.UP, Mods.SHIFT)),
        ("f5", None, KeyInput(FunctionKey(5))),
        ("space", " ", KeyInput(Char(" "))),
        ("plus", "+", KeyInput(Char("+"))),
        ("super+s", "s", KeyInput("s", Mods.WIN)),
        ("meta+s", "s", KeyInput("s", Mods.CMD)),
        ("pageup", None, KeyInput(NamedKey.PAGE_UP)),
    ],
)
def test_key_input_from_event(
    key: str, character: Optional[str], expected: KeyInput
) -> None:
    assert key_input_from_event(FakeKeyEvent(key, character)) == expected


def test_unknown_and_empty_events() -> None:
    assert key_input_from_event(FakeKeyEvent("volume_up")).key is SpecialKey.UNIDENTIFIED
    assert key_input_from_event(FakeKeyEvent("f99")).key is SpecialKey.UNIDENTIFIED
    assert key_input_from_event(FakeKeyEvent("")).is_ignored


def test_key_input_from_real_textual_event() -> None:
    event = events.Key("ctrl+x", "\x18")

    assert key_input_from_event(event) == KeyInput("x", Mods.CTRL)


def test_adapter_runs_action_and_reports_status() -> None:
    adapter, actions, statuses, logs = make_adapter("Ctrl+x Ctrl+c")
    first = FakeKeyEvent("ctrl+x", "\x18")
    second = FakeKeyEvent("ctrl+c", "\x03")

    adapter.handle_textual_key(first, now=0.0)
    outcome = adapter.handle_textual_key(second, now=0.1)

    assert outcome.fired
    assert actions == ["Ctrl+x Ctrl+c"]
    assert statuses == ["pending:Ctrl+x", "fired:Ctrl+x Ctrl+c"]
    assert first.stopped and second.stopped
    assert logs


def test_adapter_lets_unbound_keys_propagate() -> None:
    adapter, actions, statuses, _ = make_adapter("q")
    event = FakeKeyEvent("z", "z")

    outcome = adapter.handle_textual_key(event, now=0.0)

    assert outcome.status == "cleared"
    assert not event.stopped
    assert actions == []
    assert statuses == ["cleared"]


def test_adapter_process_timeouts_fires_shorter_binding() -> None:
    adapter, actions, statuses, _ = make_adapter("Esc", "Esc Esc")
    adapter.handle_textual_key(FakeKeyEvent("escape", "\x1b"), now=0.0)

    assert adapter.process_timeouts(now=0.5).status == "noop"
    outcome = adapter.process_timeouts(now=1.0)

    assert outcome.fired
    assert actions == ["Esc"]
    assert statuses[-1] == "fired:Esc"


def test_adapter_logs_pending_state() -> None:
    adapter, _, _, logs = make_adapter("g g")

    adapter.handle_textual_key(FakeKeyEvent("g", "g"), now=0.0)

    assert any("pending=1" in line for line in logs)
    assert any("bindings=1" in line for line in logs)


def test_build_dispatcher_reports_bad_entries() -> None:
    dispatcher, errors = build_dispatcher(
        {"Ctrl+x Ctrl+s": "save", "Hyper+x": "bad"}, timeout_ms=400
    )

    assert len(dispatcher.bindings) == 1
    assert dispatcher.timeout_ms == 400
    assert [error.text for error in errors] == ["Hyper+x"]


def test_demo_bindings_load_cleanly() -> None:
    _, errors = build_dispatcher(DEMO_BINDINGS)

    assert errors == []


def test_parse_args_collects_bindings() -> None:
    args = _parse_args(
        ["--bind", "Ctrl+x Ctrl+s=save", "--bind", "g g=top", "--timeout-ms", "250"]
    )

    assert args.bindings == [("Ctrl+x Ctrl+s", "save"), ("g g", "top")]
    assert args.timeout_ms == 250
    assert not args.no_defaults


def test_parse_binding_allows_equals_key() -> None:
    assert _parse_binding("Ctrl+= =zoom") == ("Ctrl+= ", "zoom")


def test_parse_binding_rejects_missing_action() -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_binding("Ctrl+x")
    with pytest.raises(argparse.ArgumentTypeError):
        _parse_binding("Ctrl+x=")


def test_timeout_flag_defaults_to_dispatcher_default() -> None:
    assert _parse_args([]).timeout_ms == DEFAULT_TIMEOUT_MS
    assert DEFAULT_TIMEOUT_MS > 0


@pytest.mark.parametrize("value", ["0", "-5", "soon"])
def test_timeout_flag_rejects_non_positive_values(value: str) -> None:
    with pytest.raises(argparse.ArgumentTypeError):
        _positive_int(value)
    with pytest.raises(SystemExit):
        _parse_args(["--timeout-ms", value])
