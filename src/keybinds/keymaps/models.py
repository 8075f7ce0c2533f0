"""Value types describing keys, key inputs, sequences and bindings."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, Flag
from typing import TYPE_CHECKING, Generic, Iterable, Iterator, Optional, TypeVar, Union

from .errors import EmptyInputError, InvalidShiftUsageError

if TYPE_CHECKING:
    from .platform import Platform

A = TypeVar("A")

# Separators of the binding grammar; a character key may not be one of them.
ASCII_WHITESPACE = " \t\n\x0b\x0c\r"


@dataclass(frozen=True, slots=True)
class Char:
    """Logical character key. Case matters: ``Char("a") != Char("A")``."""

    value: str

    def __post_init__(self) -> None:
        if len(self.value) != 1:
            raise ValueError(f"Char requires exactly one code point, got {self.value!r}")
        if self.value != " " and self.value in ASCII_WHITESPACE:
            raise ValueError(f"{self.value!r} is not a character key")

    def __str__(self) -> str:
        if self.value == " ":
            return "Space"
        if self.value == "+":
            return "Plus"
        return self.value


class NamedKey(str, Enum):
    UP = "Up"
    RIGHT = "Right"
    DOWN = "Down"
    LEFT = "Left"
    ENTER = "Enter"
    BACKSPACE = "Backspace"
    DELETE = "Delete"
    HOME = "Home"
    END = "End"
    PAGE_UP = "PageUp"
    PAGE_DOWN = "PageDown"
    ESC = "Esc"
    TAB = "Tab"
    BACKTAB = "Backtab"
    INSERT = "Insert"
    COPY = "Copy"
    CUT = "Cut"
    PASTE = "Paste"
    CLEAR = "Clear"
    UNDO = "Undo"
    REDO = "Redo"
    ZOOM_IN = "ZoomIn"
    ZOOM_OUT = "ZoomOut"
    SCROLL_LOCK = "ScrollLock"
    NUM_LOCK = "NumLock"
    FN_LOCK = "FnLock"
    PRINT_SCREEN = "PrintScreen"
    MENU = "Menu"
    PLAY = "Play"
    PAUSE = "Pause"
    PLAY_PAUSE = "PlayPause"
    STOP = "Stop"
    REWIND = "Rewind"
    NEXT_TRACK = "NextTrack"
    PREV_TRACK = "PrevTrack"
    VOLUME_UP = "VolumeUp"
    VOLUME_DOWN = "VolumeDown"
    MUTE = "Mute"

    def __str__(self) -> str:
        return self.value


MAX_FUNCTION_KEY = 35


@dataclass(frozen=True, slots=True)
class FunctionKey:
    number: int

    def __post_init__(self) -> None:
        if not 1 <= self.number <= MAX_FUNCTION_KEY:
            raise ValueError(f"Function keys range from F1 to F{MAX_FUNCTION_KEY}")

    def __str__(self) -> str:
        return f"F{self.number}"


class SpecialKey(str, Enum):
    """Sentinels produced by event adapters rather than by the grammar."""

    # Real key press that no binding can complete.
    UNIDENTIFIED = "Unidentified"
    # Must not affect dispatcher state at all.
    IGNORED = "Ignored"

    def __str__(self) -> str:
        return self.value


Key = Union[Char, NamedKey, FunctionKey, SpecialKey]
KeyLike = Union[Key, str]


def coerce_key(value: KeyLike) -> Key:
    if isinstance(value, (Char, NamedKey, FunctionKey, SpecialKey)):
        return value
    if isinstance(value, str):
        return Char(value)
    raise TypeError(f"Cannot use {value!r} as a key")


def allows_shift(key: Key) -> bool:
    """Whether Shift may be combined with ``key``.

    Characters already carry the shift state, so only named keys, function
    keys and the two named characters (``Space`` and ``Plus``) accept it.
    Sentinels accept it too; adapters report them with whatever modifiers
    were held.
    """

    if isinstance(key, (NamedKey, FunctionKey, SpecialKey)):
        return True
    if isinstance(key, Char):
        return key.value in (" ", "+")
    return False


class Mods(Flag):
    NONE = 0
    CTRL = 1
    CMD = 2
    ALT = 4
    SHIFT = 8
    # The OS/Windows key shares the Cmd flag.
    WIN = 2

    def __str__(self) -> str:
        return "+".join(name for flag, name in _MODS_ORDER if flag in self)


_MODS_ORDER: tuple[tuple[Mods, str], ...] = (
    (Mods.CTRL, "Ctrl"),
    (Mods.CMD, "Cmd"),
    (Mods.ALT, "Alt"),
    (Mods.SHIFT, "Shift"),
)


def _normalize_mods(mods: Union[Mods, Iterable[Mods], None]) -> Mods:
    if mods is None:
        return Mods.NONE
    if isinstance(mods, Mods):
        return mods
    result = Mods.NONE
    for flag in mods:
        result |= flag
    return result


@dataclass(frozen=True, slots=True)
class KeyInput:
    """Single key press: one logical key plus the set of held modifiers."""

    key: Key
    mods: Mods = Mods.NONE

    def __post_init__(self) -> None:
        key = coerce_key(self.key)
        mods = _normalize_mods(self.mods)
        if Mods.SHIFT in mods and not allows_shift(key):
            raise InvalidShiftUsageError(key)
        object.__setattr__(self, "key", key)
        object.__setattr__(self, "mods", mods)

    @property
    def is_ignored(self) -> bool:
        return self.key is SpecialKey.IGNORED

    def __str__(self) -> str:
        if self.mods:
            return f"{self.mods}+{self.key}"
        return str(self.key)

    @classmethod
    def coerce(cls, value: Union["KeyInput", KeyLike]) -> "KeyInput":
        if isinstance(value, KeyInput):
            return value
        return cls(value)

    @classmethod
    def parse(cls, text: str, *, platform: Optional["Platform"] = None) -> "KeyInput":
        from .grammar import parse_key_input

        return parse_key_input(text, platform=platform)


class Match(str, Enum):
    MATCHED = "matched"
    PREFIX = "prefix"
    UNMATCH = "unmatch"


@dataclass(frozen=True, slots=True)
class KeySeq:
    """Non-empty, ordered collection of key inputs."""

    inputs: tuple[KeyInput, ...]

    def __post_init__(self) -> None:
        if isinstance(self.inputs, str):
            raise TypeError("Use KeySeq.parse() to build a sequence from text")
        inputs = tuple(KeyInput.coerce(value) for value in self.inputs)
        if not inputs:
            raise EmptyInputError()
        object.__setattr__(self, "inputs", inputs)

    def __len__(self) -> int:
        return len(self.inputs)

    def __iter__(self) -> Iterator[KeyInput]:
        return iter(self.inputs)

    def __getitem__(self, index: int) -> KeyInput:
        return self.inputs[index]

    def __str__(self) -> str:
        return " ".join(str(value) for value in self.inputs)

    @property
    def is_combination(self) -> bool:
        return len(self.inputs) == 1

    def match_to(self, inputs: Iterable[KeyInput]) -> Match:
        """Compare typed ``inputs`` against this sequence.

        ``PREFIX`` means the inputs are a strict prefix of the sequence and
        more keys are needed.
        """

        typed = tuple(inputs)
        if len(typed) > len(self.inputs):
            return Match.UNMATCH
        if self.inputs[: len(typed)] != typed:
            return Match.UNMATCH
        if len(typed) == len(self.inputs):
            return Match.MATCHED
        return Match.PREFIX

    def append(self, *inputs: Union[KeyInput, KeyLike]) -> "KeySeq":
        return KeySeq(self.inputs + tuple(KeyInput.coerce(i) for i in inputs))

    @classmethod
    def of(cls, *inputs: Union[KeyInput, KeyLike]) -> "KeySeq":
        return cls(tuple(inputs))

    @classmethod
    def parse(cls, text: str, *, platform: Optional["Platform"] = None) -> "KeySeq":
        from .grammar import parse_key_seq

        return parse_key_seq(text, platform=platform)


SeqLike = Union[KeySeq, KeyInput, KeyLike, Iterable[Union[KeyInput, KeyLike]]]


def coerce_sequence(value: SeqLike) -> KeySeq:
    if isinstance(value, KeySeq):
        return value
    if isinstance(value, (KeyInput, Char, NamedKey, FunctionKey, SpecialKey, str)):
        return KeySeq.of(value)
    return KeySeq(tuple(value))


@dataclass(frozen=True, slots=True)
class Keybind(Generic[A]):
    """Associates a key sequence with an opaque action."""

    sequence: KeySeq
    action: A

    def __post_init__(self) -> None:
        object.__setattr__(self, "sequence", coerce_sequence(self.sequence))

    @property
    def key_signature(self) -> str:
        return str(self.sequence)


__all__ = [
    "Char",
    "NamedKey",
    "FunctionKey",
    "SpecialKey",
    "Key",
    "KeyLike",
    "coerce_key",
    "allows_shift",
    "Mods",
    "KeyInput",
    "Match",
    "KeySeq",
    "SeqLike",
    "coerce_sequence",
    "Keybind",
    "MAX_FUNCTION_KEY",
]
