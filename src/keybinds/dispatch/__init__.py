"""Stateful matching of live key input against binding tables."""

from .dispatcher import (
    DEFAULT_TIMEOUT_MS,
    DispatchOutcome,
    KeybindDispatcher,
    OutcomeStatus,
    ReconfigurePolicy,
)

__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "DispatchOutcome",
    "KeybindDispatcher",
    "OutcomeStatus",
    "ReconfigurePolicy",
]
