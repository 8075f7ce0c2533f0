"""Binding table: owns registered key sequences and their actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Generic, Iterable, Iterator, Optional, Sequence, TypeVar

from keybinds.runtime.telemetry import span

from .errors import DuplicateSequenceError, SentinelKeyError
from .grammar import parse_key_seq
from .models import KeyInput, KeySeq, Keybind, SeqLike, SpecialKey, coerce_sequence
from .platform import Platform
from .resolver import SequenceLookup, SequenceResolver

A = TypeVar("A")


@dataclass(slots=True)
class TableStats:
    """Lightweight snapshot describing table state."""

    binding_count: int
    combination_count: int
    longest_sequence: int
    revision: int


class BindingTable(Generic[A]):
    """Ordered collection of :class:`Keybind` entries.

    Identical sequences are rejected, as are sequences holding the
    ``Unidentified`` or ``Ignored`` sentinels. A sequence that is a strict
    prefix of another one is allowed and left for the dispatcher to
    disambiguate.
    """

    def __init__(
        self,
        bindings: Iterable[Keybind[A]] = (),
        *,
        logger_name: str | None = None,
    ) -> None:
        self._bindings: Dict[KeySeq, Keybind[A]] = {}
        self._logger_name = logger_name
        self._revision = 0
        self._resolver: SequenceResolver[A] = SequenceResolver(
            self, logger_name=logger_name
        )
        for binding in bindings:
            self.add(binding)

    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return len(self._bindings)

    def __iter__(self) -> Iterator[Keybind[A]]:
        return iter(tuple(self._bindings.values()))

    def __contains__(self, sequence: object) -> bool:
        try:
            key = coerce_sequence(sequence)  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False
        return key in self._bindings

    def __repr__(self) -> str:
        return f"BindingTable({list(self._bindings.values())!r})"

    def get(self, sequence: SeqLike) -> Optional[Keybind[A]]:
        return self._bindings.get(coerce_sequence(sequence))

    def register(self, sequence: SeqLike, action: A) -> Keybind[A]:
        return self.add(Keybind(coerce_sequence(sequence), action))

    def add(self, binding: Keybind[A]) -> Keybind[A]:
        with span(
            "keymaps::register",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"sequence": binding.key_signature},
        ) as handle:
            for key_input in binding.sequence:
                if isinstance(key_input.key, SpecialKey):
                    raise SentinelKeyError(binding.sequence, key_input.key)
            existing = self._bindings.get(binding.sequence)
            if existing is not None:
                handle.add_metadata("duplicate", existing.key_signature)
                raise DuplicateSequenceError(binding.sequence, existing)
            self._bindings[binding.sequence] = binding
            self._touch()
            return binding

    def bind(
        self, text: str, action: A, *, platform: Optional[Platform] = None
    ) -> Keybind[A]:
        """Parse ``text`` and register it; parse errors propagate unchanged."""

        with span(
            "keymaps::bind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"text": text},
        ):
            sequence = parse_key_seq(text, platform=platform)
            return self.register(sequence, action)

    def unregister(self, sequence: SeqLike) -> Optional[Keybind[A]]:
        key = coerce_sequence(sequence)
        with span(
            "keymaps::unregister",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"sequence": str(key)},
        ):
            binding = self._bindings.pop(key, None)
            if binding is None:
                return None
            self._touch()
            return binding

    def clear(self) -> None:
        with span(
            "keymaps::clear",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"bindings": len(self._bindings)},
        ):
            if not self._bindings:
                return
            self._bindings.clear()
            self._touch()

    def lookup(self, inputs: Sequence[KeyInput]) -> SequenceLookup[A]:
        return self._resolver.lookup(tuple(inputs))

    def find_exact(self, inputs: Sequence[KeyInput]) -> Optional[Keybind[A]]:
        return self.lookup(inputs).exact

    def is_prefix(self, inputs: Sequence[KeyInput]) -> bool:
        """True when ``inputs`` is a strict prefix of a registered sequence."""

        return self.lookup(inputs).extendable

    def stats(self) -> TableStats:
        lengths = [len(binding.sequence) for binding in self._bindings.values()]
        return TableStats(
            binding_count=len(lengths),
            combination_count=sum(1 for length in lengths if length == 1),
            longest_sequence=max(lengths, default=0),
            revision=self._revision,
        )

    def _touch(self) -> None:
        self._revision += 1


__all__ = [
    "BindingTable",
    "TableStats",
]
