"""Pacer implements debounce and throttle limiters for event streams.

The limiters are pure state machines: they describe the timers and dispatches
they need as effects, and any message loop can perform them.
"""

from importlib.metadata import PackageNotFoundError, version
from typing import Any

try:
    __version__ = version("pacer")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"

__all__ = [
    "NONE",
    "AsyncioScheduler",
    "Batch",
    "Debounce",
    "Debouncer",
    "Dispatch",
    "DispatchLoopError",
    "Effect",
    "Emit",
    "EmitIfSettled",
    "InternalMsg",
    "Limiter",
    "LimiterLoop",
    "MessageInfo",
    "MessageLoop",
    "Mode",
    "Noop",
    "Push",
    "Reopen",
    "ScheduleAfter",
    "Scheduler",
    "State",
    "Throttle",
    "ThreadScheduler",
    "Throttler",
    "__version__",
    "_compiled",
    "batch",
    "debounce",
    "debounced",
    "get_default_scheduler",
    "push",
    "set_default_scheduler",
    "throttle",
    "throttled",
    "update",
]

from ._effects import NONE, Batch, Dispatch, Effect, ScheduleAfter, batch
from ._exceptions import DispatchLoopError
from ._limiter import (
    Debounce,
    Emit,
    EmitIfSettled,
    InternalMsg,
    Limiter,
    Mode,
    Noop,
    Push,
    Reopen,
    State,
    Throttle,
    debounce,
    push,
    throttle,
    update,
)
from ._loop import LimiterLoop, MessageInfo, MessageLoop
from ._scheduler import (
    AsyncioScheduler,
    Scheduler,
    ThreadScheduler,
    get_default_scheduler,
    set_default_scheduler,
)
from ._throttler import Debouncer, Throttler, debounced, throttled


def __getattr__(name: str) -> Any:  # pragma: no cover
    if name == "_compiled":
        return hasattr(Limiter, "__mypyc_attrs__")
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
