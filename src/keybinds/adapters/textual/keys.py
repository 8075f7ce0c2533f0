"""Conversion from Textual key events into :class:`KeyInput` values."""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional, Protocol

from keybinds.keymaps import Char, FunctionKey, Key, KeyInput, Mods, NamedKey, SpecialKey
from keybinds.keymaps.models import ASCII_WHITESPACE, MAX_FUNCTION_KEY, allows_shift


class KeyEventLike(Protocol):
    """The two attributes of ``textual.events.Key`` the conversion reads."""

    key: str
    character: Optional[str]


TEXTUAL_NAMED_KEYS: Mapping[str, Key] = MappingProxyType(
    {
        "up": NamedKey.UP,
        "right": NamedKey.RIGHT,
        "down": NamedKey.DOWN,
        "left": NamedKey.LEFT,
        "enter": NamedKey.ENTER,
        "backspace": NamedKey.BACKSPACE,
        "delete": NamedKey.DELETE,
        "home": NamedKey.HOME,
        "end": NamedKey.END,
        "pageup": NamedKey.PAGE_UP,
        "pagedown": NamedKey.PAGE_DOWN,
        "escape": NamedKey.ESC,
        "tab": NamedKey.TAB,
        "backtab": NamedKey.BACKTAB,
        "insert": NamedKey.INSERT,
        "space": Char(" "),
        "plus": Char("+"),
    }
)

TEXTUAL_MODIFIERS: Mapping[str, Mods] = MappingProxyType(
    {
        "ctrl": Mods.CTRL,
        "alt": Mods.ALT,
        "meta": Mods.CMD,
        "super": Mods.WIN,
        "shift": Mods.SHIFT,
    }
)

_FUNCTION_KEY = re.compile(r"f([0-9]+)")


def _printable(character: Optional[str]) -> bool:
    return (
        character is not None
        and len(character) == 1
        and character.isprintable()
        and character not in ASCII_WHITESPACE
    )


def _base_key(name: str, character: Optional[str]) -> Key:
    named = TEXTUAL_NAMED_KEYS.get(name.lower())
    if named is not None:
        return named

    function = _FUNCTION_KEY.fullmatch(name.lower())
    if function is not None:
        number = int(function.group(1))
        if 1 <= number <= MAX_FUNCTION_KEY:
            return FunctionKey(number)
        return SpecialKey.UNIDENTIFIED

    # The character already reflects shift and layout ("A", "!").
    if _printable(character):
        return Char(character)  # type: ignore[arg-type]
    if _printable(name):
        return Char(name)
    return SpecialKey.UNIDENTIFIED


def key_input_from_event(event: KeyEventLike) -> KeyInput:
    """Translate a Textual key event; unknown keys become ``Unidentified``."""

    name = getattr(event, "key", "") or ""
    character = getattr(event, "character", None)
    if not name:
        return KeyInput(SpecialKey.IGNORED)

    *prefixes, base = name.split("+")
    mods = Mods.NONE
    for prefix in prefixes:
        mods |= TEXTUAL_MODIFIERS.get(prefix.lower(), Mods.NONE)

    key = _base_key(base, character)
    if key is NamedKey.TAB and Mods.SHIFT in mods:
        key = NamedKey.BACKTAB
        mods &= ~Mods.SHIFT
    if Mods.SHIFT in mods and not allows_shift(key):
        mods &= ~Mods.SHIFT
    return KeyInput(key, mods)


__all__ = [
    "KeyEventLike",
    "TEXTUAL_MODIFIERS",
    "TEXTUAL_NAMED_KEYS",
    "key_input_from_event",
]
