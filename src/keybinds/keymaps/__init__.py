"""Key model, binding grammar and binding tables."""

from .errors import (
    BindError,
    BindingLoadError,
    DuplicateSequenceError,
    EmptyInputError,
    InvalidShiftUsageError,
    KeybindsError,
    MalformedCombinationError,
    ParseError,
    SentinelKeyError,
    UnknownKeyError,
    UnknownModifierError,
)
from .models import (
    Char,
    FunctionKey,
    Key,
    KeyInput,
    KeySeq,
    Keybind,
    Match,
    Mods,
    NamedKey,
    SpecialKey,
)
from .platform import LogicalModifier, Platform, resolve_modifier
from .grammar import (
    format_key_seq,
    parse_key,
    parse_key_input,
    parse_key_seq,
    parse_modifier,
)
from .registry import BindingTable, TableStats
from .resolver import SequenceLookup, SequenceResolver
from .config import BindingEntryError, LoadResult, export_bindings, load_bindings

__all__ = [
    "Char",
    "FunctionKey",
    "Key",
    "KeyInput",
    "KeySeq",
    "Keybind",
    "Match",
    "Mods",
    "NamedKey",
    "SpecialKey",
    "LogicalModifier",
    "Platform",
    "resolve_modifier",
    "format_key_seq",
    "parse_key",
    "parse_key_input",
    "parse_key_seq",
    "parse_modifier",
    "BindingTable",
    "TableStats",
    "SequenceLookup",
    "SequenceResolver",
    "BindingEntryError",
    "LoadResult",
    "export_bindings",
    "load_bindings",
    "KeybindsError",
    "ParseError",
    "EmptyInputError",
    "UnknownModifierError",
    "UnknownKeyError",
    "InvalidShiftUsageError",
    "MalformedCombinationError",
    "BindError",
    "DuplicateSequenceError",
    "SentinelKeyError",
    "BindingLoadError",
]
