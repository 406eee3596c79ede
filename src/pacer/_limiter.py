"""Debounce and throttle state machines.

A `Limiter` is an immutable value.  `push` and `update` never perform side
effects themselves: they return the next limiter together with an `Effect`
describing what the host should schedule or dispatch.  Timers are never
cancelled.  Superseded debounce checks are recognized as stale by comparing the
length of the pending queue at schedule-time with its length at fire-time, and
throttle reopening is idempotent, so any number of redundant timers may be in
flight without corrupting state.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

from ._effects import NONE, Dispatch, ScheduleAfter, batch

if TYPE_CHECKING:
    from collections.abc import Callable

    from typing_extensions import TypeAlias

    from ._effects import Effect

__all__ = [
    "Debounce",
    "Emit",
    "EmitIfSettled",
    "InternalMsg",
    "Limiter",
    "Mode",
    "Noop",
    "Push",
    "Reopen",
    "State",
    "Throttle",
    "debounce",
    "push",
    "throttle",
    "update",
]

T = TypeVar("T")
M = TypeVar("M")


class State(Enum):
    """Whether a limiter currently accepts new payloads."""

    OPEN = "open"
    CLOSED = "closed"


# ---------------------------------------------------------------------------
# modes


@dataclass(frozen=True)
class Debounce(Generic[T]):
    """Debounce configuration.

    `pending` holds every payload pushed since the last emission, most recent
    first.
    """

    cooldown_ms: int
    pending: tuple[T, ...] = ()


@dataclass(frozen=True)
class Throttle:
    """Throttle configuration.  Throttling never buffers payloads."""

    interval_ms: int


Mode: TypeAlias = Union[Debounce[Any], Throttle]


# ---------------------------------------------------------------------------
# internal messages


@dataclass(frozen=True)
class Emit(Generic[T]):
    """Deliver `payload` to the consumer."""

    payload: T


@dataclass(frozen=True)
class EmitIfSettled:
    """Emit the latest debounced payload if the queue still has `expected` items."""

    expected: int


@dataclass(frozen=True)
class Reopen:
    """End a throttle window."""


@dataclass(frozen=True)
class Push(Generic[T]):
    """Push `payload` through the message protocol rather than `push()`."""

    payload: T


@dataclass(frozen=True)
class Noop:
    pass


InternalMsg: TypeAlias = Union[Emit[Any], EmitIfSettled, Reopen, Push[Any], Noop]


# ---------------------------------------------------------------------------
# limiter


@dataclass(frozen=True)
class Limiter(Generic[T, M]):
    """Rate limiting state for a single event stream.

    Parameters
    ----------
    callback : Callable[[InternalMsg], M]
        Wraps internal messages into the host's own message type.  It is only ever
        called to build outgoing messages.
    mode : Mode
        `Debounce` or `Throttle`, along with its mode-local data.
    state : State
        `State.OPEN` or `State.CLOSED`.  Only throttling ever closes.
    """

    callback: Callable[[InternalMsg], M]
    mode: Mode
    state: State = State.OPEN

    @property
    def is_open(self) -> bool:
        return self.state is State.OPEN

    @property
    def pending(self) -> tuple[T, ...]:
        """Payloads waiting to settle, most recent first."""
        if isinstance(self.mode, Debounce):
            return self.mode.pending
        return ()

    @property
    def delay_ms(self) -> int:
        """The cooldown or interval this limiter was built with."""
        if isinstance(self.mode, Debounce):
            return self.mode.cooldown_ms
        return self.mode.interval_ms


def debounce(callback: Callable[[InternalMsg], M], cooldown_ms: int) -> Limiter[Any, M]:
    """Create a debouncing limiter.

    The most recently pushed payload is emitted once no other push has happened
    for `cooldown_ms` milliseconds.

    Parameters
    ----------
    callback : Callable[[InternalMsg], M]
        Function used to wrap internal messages into the host's message type.
    cooldown_ms : int
        Quiet period, in milliseconds.  Not validated.
    """
    return Limiter(callback, Debounce(cooldown_ms, ()), State.OPEN)


def throttle(callback: Callable[[InternalMsg], M], interval_ms: int) -> Limiter[Any, M]:
    """Create a throttling limiter.

    The first payload of a burst is emitted immediately, and every other payload
    is dropped until `interval_ms` milliseconds have passed.

    Parameters
    ----------
    callback : Callable[[InternalMsg], M]
        Function used to wrap internal messages into the host's message type.
    interval_ms : int
        Length of the closed window, in milliseconds.  Not validated.
    """
    return Limiter(callback, Throttle(interval_ms), State.OPEN)


def push(payload: T, limiter: Limiter[T, M]) -> tuple[Limiter[T, M], Effect]:
    """Feed a new payload from the event source into `limiter`."""
    if limiter.state is not State.OPEN:
        # closed throttle: the payload is dropped
        return limiter, NONE

    mode = limiter.mode
    if isinstance(mode, Debounce):
        queue = (payload, *mode.pending)
        check = limiter.callback(EmitIfSettled(len(queue)))
        new = replace(limiter, mode=Debounce(mode.cooldown_ms, queue))
        return new, ScheduleAfter(check, mode.cooldown_ms)

    if isinstance(mode, Throttle):
        new = replace(limiter, state=State.CLOSED)
        return new, batch(
            ScheduleAfter(limiter.callback(Reopen()), mode.interval_ms),
            Dispatch(limiter.callback(Emit(payload))),
        )

    return limiter, NONE


def update(msg: Any, limiter: Limiter[T, M]) -> tuple[Limiter[T, M], Effect]:
    """Apply an internal message delivered by the host loop to `limiter`.

    Any combination of message, state and mode that is not handled below leaves
    the limiter unchanged and requests no effect.
    """
    if isinstance(msg, Reopen):
        if limiter.state is State.OPEN:
            return limiter, NONE
        return replace(limiter, state=State.OPEN), NONE

    if limiter.state is not State.OPEN:
        return limiter, NONE

    mode = limiter.mode
    if isinstance(msg, EmitIfSettled) and isinstance(mode, Debounce):
        if msg.expected != len(mode.pending) or not mode.pending:
            return limiter, NONE
        latest = mode.pending[0]
        new = replace(limiter, mode=Debounce(mode.cooldown_ms, ()))
        return new, Dispatch(limiter.callback(Emit(latest)))

    if isinstance(msg, Push):
        return push(msg.payload, limiter)

    return limiter, NONE
