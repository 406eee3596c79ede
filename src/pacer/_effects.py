"""Descriptions of the side effects a limiter asks its host to perform."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

if TYPE_CHECKING:
    from collections.abc import Iterator

    from typing_extensions import TypeAlias

__all__ = [
    "NONE",
    "Batch",
    "Dispatch",
    "Effect",
    "NoEffect",
    "ScheduleAfter",
    "batch",
    "iter_effects",
]

M = TypeVar("M")


@dataclass(frozen=True)
class NoEffect:
    """Nothing to do."""

    def __repr__(self) -> str:
        return "NONE"


NONE = NoEffect()


@dataclass(frozen=True)
class Dispatch(Generic[M]):
    """Deliver `msg` into the host loop as soon as possible."""

    msg: M


@dataclass(frozen=True)
class ScheduleAfter(Generic[M]):
    """Deliver `msg` into the host loop after at least `delay_ms` milliseconds."""

    msg: M
    delay_ms: int


@dataclass(frozen=True)
class Batch:
    """A group of effects, performed in order."""

    effects: tuple[Effect, ...]


Effect: TypeAlias = Union[NoEffect, Dispatch[Any], ScheduleAfter[Any], Batch]


def batch(*effects: Effect) -> Effect:
    """Combine `effects` into a single effect.

    Nested batches are flattened and `NONE` entries dropped.  A single remaining
    effect is returned as is, and an empty batch collapses to `NONE`.
    """
    flat = tuple(iter_effects(Batch(effects)))
    if not flat:
        return NONE
    if len(flat) == 1:
        return flat[0]
    return Batch(flat)


def iter_effects(effect: Effect) -> Iterator[Dispatch[Any] | ScheduleAfter[Any]]:
    """Yield the primitive `Dispatch` and `ScheduleAfter` requests in `effect`."""
    if isinstance(effect, Batch):
        for sub in effect.effects:
            yield from iter_effects(sub)
    elif isinstance(effect, (Dispatch, ScheduleAfter)):
        yield effect
