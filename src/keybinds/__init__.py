"""Framework-agnostic key binding parser and sequence dispatcher."""

from keybinds.dispatch import DispatchOutcome, KeybindDispatcher
from keybinds.keymaps import (
    BindingTable,
    Char,
    FunctionKey,
    KeyInput,
    KeySeq,
    Keybind,
    Mods,
    NamedKey,
    Platform,
    SpecialKey,
    parse_key_input,
    parse_key_seq,
)

__all__ = [
    "adapters",
    "dispatch",
    "keymaps",
    "runtime",
    "BindingTable",
    "Char",
    "DispatchOutcome",
    "FunctionKey",
    "KeyInput",
    "KeySeq",
    "Keybind",
    "KeybindDispatcher",
    "Mods",
    "NamedKey",
    "Platform",
    "SpecialKey",
    "parse_key_input",
    "parse_key_seq",
]

__version__ = "0.1.0"
