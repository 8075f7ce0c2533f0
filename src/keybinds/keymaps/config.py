"""Mapping-level import and export of binding tables.

Document formats (TOML, YAML, JSON) are left to the caller; this module
only translates between ``{binding text: action}`` mappings and tables.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Generic, Mapping, Optional, TypeVar

from keybinds.runtime import telemetry

from .errors import BindingLoadError, KeybindsError
from .platform import Platform
from .registry import BindingTable

A = TypeVar("A")


@dataclass(frozen=True, slots=True)
class BindingEntryError:
    """A single mapping entry that could not be loaded."""

    text: str
    error: KeybindsError

    def __str__(self) -> str:
        return f"{self.text!r}: {self.error}"


@dataclass(slots=True)
class LoadResult(Generic[A]):
    table: BindingTable[A]
    errors: list[BindingEntryError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> BindingTable[A]:
        if self.errors:
            raise BindingLoadError(self.errors)
        return self.table


def export_bindings(table: BindingTable[A]) -> Dict[str, A]:
    """Return ``{canonical text: action}`` in registration order."""

    return {binding.key_signature: binding.action for binding in table}


def load_bindings(
    mapping: Mapping[str, A],
    *,
    platform: Optional[Platform] = None,
    table: Optional[BindingTable[A]] = None,
    logger_name: str | None = None,
) -> LoadResult[A]:
    """Register every entry of ``mapping`` into ``table`` (or a new one).

    Failing entries are collected in :attr:`LoadResult.errors`; the
    remaining entries are still registered.
    """

    target: BindingTable[A] = (
        table if table is not None else BindingTable(logger_name=logger_name)
    )
    result = LoadResult(table=target)
    for text, action in mapping.items():
        try:
            target.bind(text, action, platform=platform)
        except KeybindsError as exc:
            result.errors.append(BindingEntryError(text=text, error=exc))

    if result.errors:
        telemetry.record_event(
            "keymaps.load_errors",
            level="warning",
            data={
                "failed": len(result.errors),
                "loaded": len(mapping) - len(result.errors),
            },
            logger_name=logger_name,
        )
    return result


__all__ = [
    "BindingEntryError",
    "LoadResult",
    "export_bindings",
    "load_bindings",
]
