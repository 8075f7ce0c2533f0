"""Exceptions raised while parsing and registering key bindings."""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, Optional

if TYPE_CHECKING:
    from .models import Key, KeySeq, Keybind


class KeybindsError(Exception):
    """Base class for every error raised by this package."""


class ParseError(KeybindsError, ValueError):
    """Binding text could not be turned into a key sequence.

    ``token`` is the offending piece of text and ``source`` the whole input
    it came from, when known.
    """

    def __init__(
        self,
        reason: str,
        *,
        token: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(reason)
        self.reason = reason
        self.token = token
        self.source = source

    def attach(
        self, *, token: Optional[str] = None, source: Optional[str] = None
    ) -> "ParseError":
        if self.token is None:
            self.token = token
        if self.source is None:
            self.source = source
        return self

    def __str__(self) -> str:
        message = self.reason
        if self.token is not None:
            message = f"{message}: {self.token!r}"
        if self.source is not None and self.source != self.token:
            message = f"{message} in {self.source!r}"
        return message


class EmptyInputError(ParseError):
    """The input contained no key combination at all."""

    def __init__(self, *, source: Optional[str] = None) -> None:
        super().__init__("Key sequence must not be empty", source=source)


class UnknownModifierError(ParseError):
    def __init__(self, token: str, *, source: Optional[str] = None) -> None:
        super().__init__("Unknown modifier key", token=token, source=source)


class UnknownKeyError(ParseError):
    def __init__(self, token: str, *, source: Optional[str] = None) -> None:
        super().__init__("Unknown key", token=token, source=source)


class InvalidShiftUsageError(ParseError):
    """Shift was combined with a key that already encodes the shift state."""

    def __init__(
        self,
        key: "Key",
        *,
        token: Optional[str] = None,
        source: Optional[str] = None,
    ) -> None:
        super().__init__(
            "Shift modifier is only available with named keys",
            token=token,
            source=source,
        )
        self.key = key


class MalformedCombinationError(ParseError):
    """A combination had an empty modifier or no key after the last ``+``."""


class BindError(KeybindsError, RuntimeError):
    """A binding could not be added to a table."""


class DuplicateSequenceError(BindError):
    """Raised when a sequence is already registered in the table."""

    def __init__(self, sequence: "KeySeq", existing: "Keybind"):
        super().__init__(f"Key sequence '{sequence}' is already bound")
        self.sequence = sequence
        self.existing = existing


class SentinelKeyError(BindError):
    """A sequence contained a key that only event adapters may produce."""

    def __init__(self, sequence: "KeySeq", key: "Key"):
        super().__init__(
            f"Key sequence '{sequence}' cannot be bound: {key} is not a bindable key"
        )
        self.sequence = sequence
        self.key = key


class BindingLoadError(BindError):
    """One or more entries of a binding mapping failed to load."""

    def __init__(self, errors: Iterable[object]):
        errors_tuple = tuple(errors)
        lines = "; ".join(str(error) for error in errors_tuple)
        super().__init__(f"{len(errors_tuple)} binding(s) failed to load: {lines}")
        self.errors = errors_tuple


__all__ = [
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
