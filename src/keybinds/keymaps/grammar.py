"""Parser for the key binding notation (``"Ctrl+x Ctrl+s"``).

Grammar::

    key-sequence    ::= key-combination (space+ key-combination)*
    key-combination ::= (modifier '+')* key
    modifier        ::= Ctrl | Control | Cmd | Command | Mod | Super
                      | Alt | Option | Shift           (case-insensitive)
    key             ::= character-key | named-key | function-key
    function-key    ::= 'F' digit+                    (1 <= value <= 35)

Every failure raises a :class:`~keybinds.keymaps.errors.ParseError`
subclass carrying the offending token and the full input.
"""

from __future__ import annotations

import re
from types import MappingProxyType
from typing import Mapping, Optional, Union

from .errors import (
    EmptyInputError,
    MalformedCombinationError,
    ParseError,
    UnknownKeyError,
    UnknownModifierError,
)
from .models import (
    ASCII_WHITESPACE,
    MAX_FUNCTION_KEY,
    Char,
    FunctionKey,
    Key,
    KeyInput,
    KeySeq,
    Mods,
    NamedKey,
)
from .platform import LogicalModifier, Platform, resolve_modifier

_COMBINATION_SPLIT = re.compile(f"[{re.escape(ASCII_WHITESPACE)}]+")
_FUNCTION_KEY = re.compile(r"[Ff]([0-9]+)")

_MODIFIERS: Mapping[str, Union[Mods, LogicalModifier]] = MappingProxyType(
    {
        "ctrl": Mods.CTRL,
        "control": Mods.CTRL,
        "cmd": Mods.CMD,
        "command": Mods.CMD,
        "alt": Mods.ALT,
        "option": Mods.ALT,
        "shift": Mods.SHIFT,
        "mod": LogicalModifier.MOD,
        "super": LogicalModifier.SUPER,
    }
)


def _named_key_table() -> Mapping[str, Key]:
    table: dict[str, Key] = {key.value.lower(): key for key in NamedKey}
    table["escape"] = NamedKey.ESC
    table["space"] = Char(" ")
    table["plus"] = Char("+")
    return MappingProxyType(table)


NAMED_KEYS = _named_key_table()


def parse_modifier(text: str, *, platform: Optional[Platform] = None) -> Mods:
    if not text:
        raise MalformedCombinationError("Modifier key must not be empty")
    modifier = _MODIFIERS.get(text.lower())
    if modifier is None:
        raise UnknownModifierError(text)
    if isinstance(modifier, LogicalModifier):
        return resolve_modifier(modifier, platform)
    return modifier


def parse_key(text: str) -> Key:
    if not text:
        raise MalformedCombinationError("Key must not be empty")

    named = NAMED_KEYS.get(text.lower())
    if named is not None:
        return named

    function = _FUNCTION_KEY.fullmatch(text)
    if function is not None:
        number = int(function.group(1))
        if not 1 <= number <= MAX_FUNCTION_KEY:
            raise UnknownKeyError(text)
        return FunctionKey(number)

    if len(text) == 1 and text not in ASCII_WHITESPACE:
        return Char(text)
    raise UnknownKeyError(text)


def parse_key_input(text: str, *, platform: Optional[Platform] = None) -> KeyInput:
    """Parse a single combination such as ``"Ctrl+Shift+F7"``."""

    combination = text.strip(ASCII_WHITESPACE)
    if not combination:
        raise EmptyInputError(source=text)
    if _COMBINATION_SPLIT.search(combination):
        raise MalformedCombinationError(
            "Expected a single key combination", token=combination, source=text
        )
    return _parse_combination(combination, source=text, platform=platform)


def _parse_combination(
    token: str, *, source: str, platform: Optional[Platform]
) -> KeyInput:
    *modifiers, key_text = token.split("+")
    try:
        mods = Mods.NONE
        for modifier in modifiers:
            mods |= parse_modifier(modifier, platform=platform)
        key = parse_key(key_text)
        return KeyInput(key, mods)
    except ParseError as exc:
        raise exc.attach(token=token, source=source)


def parse_key_seq(text: str, *, platform: Optional[Platform] = None) -> KeySeq:
    """Parse whitespace separated combinations into a :class:`KeySeq`.

    Only ASCII whitespace separates combinations, so characters such as
    the ideographic space (U+3000) remain usable as keys.
    """

    tokens = [token for token in _COMBINATION_SPLIT.split(text) if token]
    if not tokens:
        raise EmptyInputError(source=text)
    platform = platform or Platform.current()
    return KeySeq(
        tuple(
            _parse_combination(token, source=text, platform=platform)
            for token in tokens
        )
    )


def format_key_seq(sequence: KeySeq) -> str:
    """Canonical text for ``sequence``; parsing it yields an equal value."""

    return str(sequence)


__all__ = [
    "NAMED_KEYS",
    "parse_modifier",
    "parse_key",
    "parse_key_input",
    "parse_key_seq",
    "format_key_seq",
]
