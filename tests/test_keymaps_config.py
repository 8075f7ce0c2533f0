from __future__ import annotations

import pytest

from keybinds.keymaps import (
    BindingLoadError,
    BindingTable,
    DuplicateSequenceError,
    InvalidShiftUsageError,
    KeyInput,
    KeySeq,
    Mods,
    NamedKey,
    Platform,
    UnknownModifierError,
    export_bindings,
    load_bindings,
)


def test_load_bindings_builds_table() -> None:
    result = load_bindings(
        {"Ctrl+x Ctrl+c": "quit", "control+alt+enter": "open"},
        platform=Platform.OTHER,
    )

    assert result.ok
    table = result.raise_for_errors()
    assert table.get(KeyInput(NamedKey.ENTER, Mods.CTRL | Mods.ALT)).action == "open"  # type: ignore[union-attr]


def test_export_uses_canonical_text_in_registration_order() -> None:
    table: BindingTable[str] = BindingTable()
    table.register(KeySeq.of(KeyInput("x", Mods.CTRL), KeyInput("c", Mods.CTRL)), "quit")
    table.register(KeyInput(" ", Mods.SHIFT), "scroll")

    exported = export_bindings(table)

    assert list(exported.items()) == [("Ctrl+x Ctrl+c", "quit"), ("Shift+Space", "scroll")]


def test_export_then_load_reproduces_table() -> None:
    original = load_bindings(
        {"h e l l o": "hello", "Cmd+Shift+F12": "debug", "Esc Esc": "escape"},
        platform=Platform.OTHER,
    ).raise_for_errors()

    reloaded = load_bindings(export_bindings(original), platform=Platform.OTHER)

    assert reloaded.ok
    assert list(reloaded.table) == list(original)


def test_load_collects_per_entry_errors() -> None:
    result = load_bindings(
        {"a": "ok", "Hyper+x": "bad", "Shift+a": "shifted", "A": "upper"},
        platform=Platform.OTHER,
    )

    assert not result.ok
    assert len(result.table) == 2
    failures = {entry.text: type(entry.error) for entry in result.errors}
    assert failures == {
        "Hyper+x": UnknownModifierError,
        "Shift+a": InvalidShiftUsageError,
    }


def test_load_reports_duplicates_within_mapping() -> None:
    result = load_bindings({"Ctrl+x": "one", "control+x": "two"}, platform=Platform.OTHER)

    assert len(result.table) == 1
    assert isinstance(result.errors[0].error, DuplicateSequenceError)


def test_load_into_existing_table() -> None:
    table: BindingTable[str] = BindingTable()
    table.register(KeySeq.of("q"), "quit")

    result = load_bindings({"w": "write"}, table=table)

    assert result.table is table
    assert len(table) == 2


def test_raise_for_errors() -> None:
    result = load_bindings({"F99": "nope", "Ctrl+": "nope"})

    with pytest.raises(BindingLoadError) as excinfo:
        result.raise_for_errors()

    assert len(excinfo.value.errors) == 2
    assert "F99" in str(excinfo.value)
