"""Trie-based prefix and exact-match lookups over a binding table."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Dict, Generic, Iterable, Optional, Sequence, TypeVar

from keybinds.runtime.telemetry import span

from .models import KeyInput, Keybind

if TYPE_CHECKING:
    from .registry import BindingTable

A = TypeVar("A")


@dataclass(slots=True)
class TrieNode(Generic[A]):
    """Single trie node; ``binding`` is set when a sequence ends here."""

    binding: Optional[Keybind[A]] = None
    children: Dict[KeyInput, "TrieNode[A]"] = field(default_factory=dict)

    def child(self, key: KeyInput) -> "TrieNode[A]":
        return self.children.setdefault(key, TrieNode())

    def next_inputs(self) -> tuple[KeyInput, ...]:
        return tuple(sorted(self.children, key=str))


@dataclass(slots=True)
class KeymapTrie(Generic[A]):
    root: TrieNode[A] = field(default_factory=TrieNode)

    def add_binding(self, binding: Keybind[A]) -> None:
        node = self.root
        for key in binding.sequence:
            node = node.child(key)
        node.binding = binding

    def walk(self, inputs: Iterable[KeyInput]) -> Optional[TrieNode[A]]:
        node = self.root
        for key in inputs:
            child = node.children.get(key)
            if child is None:
                return None
            node = child
        return node


@dataclass(frozen=True, slots=True)
class SequenceLookup(Generic[A]):
    """What a buffer of typed inputs means for a table.

    ``exact`` is the binding whose sequence equals the buffer, and
    ``extendable`` tells whether the buffer is a strict prefix of at least
    one other sequence.
    """

    exact: Optional[Keybind[A]] = None
    extendable: bool = False
    next_expected: tuple[KeyInput, ...] = ()

    @property
    def is_dead_end(self) -> bool:
        return self.exact is None and not self.extendable


class SequenceResolver(Generic[A]):
    """Builds a trie for a table and answers lookups against it.

    The trie is rebuilt lazily whenever the table revision moves.
    """

    def __init__(
        self, table: "BindingTable[A]", *, logger_name: str | None = None
    ) -> None:
        self._table = table
        self._logger_name = logger_name
        self._cache: Optional[tuple[int, KeymapTrie[A]]] = None

    def lookup(self, inputs: Sequence[KeyInput]) -> SequenceLookup[A]:
        node = self._ensure_trie().walk(inputs)
        if node is None:
            return SequenceLookup()
        next_expected = node.next_inputs()
        return SequenceLookup(
            exact=node.binding if inputs else None,
            extendable=bool(next_expected),
            next_expected=next_expected,
        )

    def reset(self) -> None:
        self._cache = None

    def _ensure_trie(self) -> KeymapTrie[A]:
        revision = self._table.revision()
        if self._cache and self._cache[0] == revision:
            return self._cache[1]

        with span(
            "keymaps::build_trie",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"revision": revision, "bindings": len(self._table)},
        ):
            trie: KeymapTrie[A] = KeymapTrie()
            for binding in self._table:
                trie.add_binding(binding)
        self._cache = (revision, trie)
        return trie


__all__ = [
    "TrieNode",
    "KeymapTrie",
    "SequenceLookup",
    "SequenceResolver",
]
