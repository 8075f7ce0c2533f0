"""Runtime services shared by the keymap and dispatch layers."""

from . import telemetry

__all__ = ["telemetry"]
