"""Platform table for the logical ``Mod`` and ``Super`` modifiers."""

from __future__ import annotations

import sys
from enum import Enum
from typing import Optional

from .models import Mods


class Platform(str, Enum):
    MACOS = "macos"
    OTHER = "other"

    @classmethod
    def current(cls, name: Optional[str] = None) -> "Platform":
        """Platform for ``sys.platform`` (or an explicit platform string)."""

        value = sys.platform if name is None else name
        return cls.MACOS if value == "darwin" else cls.OTHER


class LogicalModifier(str, Enum):
    """Modifiers whose concrete flag depends on the platform."""

    MOD = "Mod"
    SUPER = "Super"


_MODIFIER_TABLE: dict[tuple[LogicalModifier, Platform], Mods] = {
    (LogicalModifier.MOD, Platform.MACOS): Mods.CMD,
    (LogicalModifier.SUPER, Platform.MACOS): Mods.CMD,
    (LogicalModifier.MOD, Platform.OTHER): Mods.CTRL,
    (LogicalModifier.SUPER, Platform.OTHER): Mods.WIN,
}


def resolve_modifier(
    modifier: LogicalModifier, platform: Optional[Platform] = None
) -> Mods:
    return _MODIFIER_TABLE[(modifier, platform or Platform.current())]


__all__ = ["Platform", "LogicalModifier", "resolve_modifier"]
