"""Incremental key sequence dispatcher.

The dispatcher owns a :class:`~keybinds.keymaps.BindingTable` and a buffer
of the inputs typed so far. Each :meth:`KeybindDispatcher.feed` call
appends one input and decides whether a binding fired, whether more input
is needed, or whether the buffer hit a dead end. When a buffer is both an
exact match and a prefix of a longer binding the dispatcher waits; only
:meth:`KeybindDispatcher.check_timeout` resolves it in favour of the
shorter binding.

No timers or threads live here. The host event loop calls
``check_timeout`` on whatever cadence it likes.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Literal, Optional, TypeVar, Union

from keybinds.keymaps import (
    BindingTable,
    KeyInput,
    Keybind,
    Platform,
    SpecialKey,
)
from keybinds.keymaps.models import KeyLike, SeqLike
from keybinds.runtime import telemetry

A = TypeVar("A")

OutcomeStatus = Literal["ignored", "pending", "fired", "cleared", "noop"]
ReconfigurePolicy = Literal["keep", "reset"]
InputLike = Union[KeyInput, KeyLike]


def _default_timeout_ms() -> int:
    raw = os.getenv("KEYBINDS_TIMEOUT_MS")
    if raw is None:
        return 1000
    try:
        value = int(raw)
    except ValueError:
        return 1000
    return value if value > 0 else 1000


DEFAULT_TIMEOUT_MS = _default_timeout_ms()


@dataclass(frozen=True, slots=True)
class DispatchOutcome(Generic[A]):
    """Result of a single ``feed`` or ``check_timeout`` call.

    ``consumed`` is the number of buffered inputs the decision was based on.
    """

    status: OutcomeStatus
    binding: Optional[Keybind[A]] = None
    consumed: int = 0

    @classmethod
    def ignored(cls, consumed: int = 0) -> "DispatchOutcome[A]":
        return cls("ignored", consumed=consumed)

    @classmethod
    def pending(cls, consumed: int) -> "DispatchOutcome[A]":
        return cls("pending", consumed=consumed)

    @classmethod
    def fired_with(cls, binding: Keybind[A], consumed: int) -> "DispatchOutcome[A]":
        return cls("fired", binding, consumed)

    @classmethod
    def cleared(cls, consumed: int) -> "DispatchOutcome[A]":
        return cls("cleared", consumed=consumed)

    @classmethod
    def noop(cls, consumed: int = 0) -> "DispatchOutcome[A]":
        return cls("noop", consumed=consumed)

    @property
    def fired(self) -> bool:
        return self.status == "fired"

    @property
    def action(self) -> Optional[A]:
        if self.binding is None:
            return None
        return self.binding.action


class KeybindDispatcher(Generic[A]):
    """Matches a stream of key inputs against a binding table."""

    def __init__(
        self,
        bindings: Union[BindingTable[A], Iterable[Keybind[A]], None] = None,
        *,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        reconfigure: ReconfigurePolicy = "keep",
        platform: Optional[Platform] = None,
        clock: Callable[[], float] = time.monotonic,
        logger_name: str | None = None,
    ) -> None:
        if reconfigure not in ("keep", "reset"):
            raise ValueError(f"Unknown reconfigure policy '{reconfigure}'")
        self._logger_name = logger_name
        if isinstance(bindings, BindingTable):
            self._table = bindings
        else:
            self._table = BindingTable(bindings or (), logger_name=logger_name)
        self._reconfigure: ReconfigurePolicy = reconfigure
        self._platform = platform
        self._clock = clock
        self._ongoing: list[KeyInput] = []
        self._last_input: Optional[float] = None
        self._seen_revision = self._table.revision()
        self._timeout_ms = 0
        self.timeout_ms = timeout_ms

    @classmethod
    def empty(cls, **options: object) -> "KeybindDispatcher[A]":
        """Dispatcher with no bindings, configured through ``options``."""

        return cls(None, **options)  # type: ignore[arg-type]

    @property
    def bindings(self) -> BindingTable[A]:
        return self._table

    @property
    def reconfigure(self) -> ReconfigurePolicy:
        return self._reconfigure

    @property
    def timeout_ms(self) -> int:
        return self._timeout_ms

    @timeout_ms.setter
    def timeout_ms(self, value: int) -> None:
        if value <= 0:
            raise ValueError("timeout_ms must be positive")
        self._timeout_ms = value

    @property
    def is_pending(self) -> bool:
        return bool(self._ongoing)

    @property
    def pending(self) -> tuple[KeyInput, ...]:
        return tuple(self._ongoing)

    @property
    def deadline(self) -> Optional[float]:
        if self._last_input is None:
            return None
        return self._last_input + self._timeout_ms / 1000.0

    def bind(self, text: str, action: A) -> Keybind[A]:
        binding = self._table.bind(text, action, platform=self._platform)
        self._sync_revision()
        return binding

    def register(self, sequence: SeqLike, action: A) -> Keybind[A]:
        binding = self._table.register(sequence, action)
        self._sync_revision()
        return binding

    def unregister(self, sequence: SeqLike) -> Optional[Keybind[A]]:
        binding = self._table.unregister(sequence)
        self._sync_revision()
        return binding

    def clear_bindings(self) -> None:
        self._table.clear()
        self._sync_revision()

    def reset(self) -> None:
        self._ongoing.clear()
        self._last_input = None

    def feed(self, key: InputLike, now: Optional[float] = None) -> DispatchOutcome[A]:
        """Consume one input. Never raises for malformed input."""

        key_input = _coerce_input(key)
        if key_input.is_ignored:
            return DispatchOutcome.ignored(len(self._ongoing))

        self._sync_revision()
        timestamp = self._clock() if now is None else now
        with telemetry.span(
            "dispatch::feed",
            logger_name=self._logger_name,
            component="dispatch",
            metadata={"input": str(key_input), "buffered": len(self._ongoing)},
        ) as handle:
            self._ongoing.append(key_input)
            self._last_input = timestamp
            consumed = len(self._ongoing)
            lookup = self._table.lookup(self._ongoing)

            if lookup.exact is not None and not lookup.extendable:
                self.reset()
                outcome: DispatchOutcome[A] = DispatchOutcome.fired_with(
                    lookup.exact, consumed
                )
            elif lookup.extendable:
                outcome = DispatchOutcome.pending(consumed)
            else:
                self.reset()
                outcome = DispatchOutcome.cleared(consumed)
            handle.add_metadata("status", outcome.status)

        self._record(outcome, trigger="input")
        return outcome

    def dispatch(self, key: InputLike, now: Optional[float] = None) -> Optional[A]:
        """Feed ``key`` and return the fired action, if any."""

        outcome = self.feed(key, now)
        return outcome.action if outcome.fired else None

    def check_timeout(
        self, now: Optional[float] = None, timeout_ms: Optional[int] = None
    ) -> DispatchOutcome[A]:
        """Resolve a pending buffer once ``timeout_ms`` passed since its last input.

        An exact match still sitting in the buffer fires; anything else is
        cleared. Returns ``noop`` while idle or before the deadline.
        """

        self._sync_revision()
        if not self._ongoing or self._last_input is None:
            return DispatchOutcome.noop()

        timestamp = self._clock() if now is None else now
        limit = self._timeout_ms if timeout_ms is None else max(timeout_ms, 0)
        if timestamp < self._last_input + limit / 1000.0:
            return DispatchOutcome.noop(len(self._ongoing))

        with telemetry.span(
            "dispatch::timeout",
            logger_name=self._logger_name,
            component="dispatch",
            metadata={"buffered": len(self._ongoing), "timeout_ms": limit},
        ) as handle:
            consumed = len(self._ongoing)
            exact = self._table.lookup(self._ongoing).exact
            self.reset()
            if exact is not None:
                outcome: DispatchOutcome[A] = DispatchOutcome.fired_with(exact, consumed)
            else:
                outcome = DispatchOutcome.cleared(consumed)
            handle.add_metadata("status", outcome.status)

        self._record(outcome, trigger="timeout")
        return outcome

    def _sync_revision(self) -> None:
        revision = self._table.revision()
        if revision == self._seen_revision:
            return
        self._seen_revision = revision
        if self._reconfigure == "reset" and self._ongoing:
            self.reset()
            telemetry.record_event(
                "dispatch.reconfigure_reset",
                level="debug",
                data={"revision": revision},
                logger_name=self._logger_name,
            )

    def _record(self, outcome: DispatchOutcome[A], *, trigger: str) -> None:
        if outcome.status == "pending":
            return
        data: dict[str, object] = {"trigger": trigger, "consumed": outcome.consumed}
        if outcome.binding is not None:
            data["sequence"] = outcome.binding.key_signature
        telemetry.record_event(
            f"dispatch.{outcome.status}",
            level="debug",
            data=data,
            logger_name=self._logger_name,
        )


def _coerce_input(value: object) -> KeyInput:
    try:
        return KeyInput.coerce(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return KeyInput(SpecialKey.UNIDENTIFIED)


__all__ = [
    "DEFAULT_TIMEOUT_MS",
    "DispatchOutcome",
    "KeybindDispatcher",
    "OutcomeStatus",
    "ReconfigurePolicy",
]
