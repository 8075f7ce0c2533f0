"""Textual adapter that feeds key events into a :class:`KeybindDispatcher`."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Generic, Optional, TypeVar

from textual import events

from keybinds.dispatch import DispatchOutcome, KeybindDispatcher

from .keys import KeyEventLike, key_input_from_event

A = TypeVar("A")


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualKeybindHooks:
    """Callbacks the adapter invokes on the host application."""

    run_action: Callable[[object], None]
    update_status: Callable[[str], None] = _noop
    # Optional realtime log callback for debug panes
    log: Callable[[str], None] = _noop


class TextualKeybindAdapter(Generic[A]):
    """Bridges Textual key events and timer ticks to a dispatcher."""

    def __init__(
        self, dispatcher: KeybindDispatcher[A], hooks: TextualKeybindHooks
    ) -> None:
        self.dispatcher = dispatcher
        self.hooks = hooks

    def handle_textual_key(
        self, event: events.Key | KeyEventLike, *, now: Optional[float] = None
    ) -> DispatchOutcome[A]:
        """Convert ``event``, dispatch it and stop propagation when consumed."""

        key_input = key_input_from_event(event)
        self._log_state("key ->", key=event.key, input=str(key_input))
        outcome = self.dispatcher.feed(key_input, now)
        if outcome.status in ("fired", "pending"):
            stop = getattr(event, "stop", None)
            if callable(stop):
                stop()
        self._after_outcome(outcome)
        return outcome

    def process_timeouts(self, now: Optional[float] = None) -> DispatchOutcome[A]:
        """Call from ``App.set_interval``; resolves expired pending sequences."""

        outcome = self.dispatcher.check_timeout(now)
        if outcome.status != "noop":
            self._log_state("timeout ->", status=outcome.status)
            self._after_outcome(outcome)
        return outcome

    def _after_outcome(self, outcome: DispatchOutcome[A]) -> None:
        if outcome.fired and outcome.binding is not None:
            self.hooks.update_status(f"fired:{outcome.binding.key_signature}")
            self.hooks.run_action(outcome.binding.action)
        elif outcome.status == "pending":
            pending = " ".join(str(key) for key in self.dispatcher.pending)
            self.hooks.update_status(f"pending:{pending}")
        elif outcome.status == "cleared":
            self.hooks.update_status("cleared")
        self._log_state("result <-", status=outcome.status, consumed=outcome.consumed)

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot = self._state_metadata()
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix]
        for key, value in snapshot.items():
            parts.append(f"{key}={value!r}")
        self.hooks.log(" ".join(parts))

    def _state_metadata(self) -> Dict[str, object]:
        deadline = self.dispatcher.deadline
        return {
            "pending": len(self.dispatcher.pending),
            "deadline": round(deadline, 3) if deadline is not None else None,
            "bindings": len(self.dispatcher.bindings),
        }


__all__ = ["TextualKeybindAdapter", "TextualKeybindHooks"]
