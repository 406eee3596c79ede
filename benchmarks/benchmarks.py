# type: ignore
from pacer import (
    EmitIfSettled,
    LimiterLoop,
    Reopen,
    debounce,
    push,
    throttle,
    update,
)
from pacer.testing import VirtualScheduler


def _identity(msg):
    return msg


class CreateSuite:
    def time_create_debounce(self):
        _ = debounce(_identity, 100)

    def time_create_throttle(self):
        _ = throttle(_identity, 100)

    def time_create_limiter_loop(self):
        _ = LimiterLoop.debounce(print, 100, scheduler=VirtualScheduler())


class PushSuite:
    params = [1, 10, 100]

    def setup(self, n: int) -> None:
        lim = debounce(_identity, 100)
        for i in range(n):
            lim, _ = push(i, lim)
        self.debounced = lim
        self.throttled, _ = push(0, throttle(_identity, 100))
        self.n = n

    def time_debounce_push(self, n: int) -> None:
        push(n, self.debounced)

    def time_debounce_settle(self, n: int) -> None:
        update(EmitIfSettled(self.n), self.debounced)

    def time_debounce_stale(self, n: int) -> None:
        update(EmitIfSettled(0), self.debounced)

    def time_throttle_drop(self, n: int) -> None:
        push(n, self.throttled)

    def time_throttle_reopen(self, n: int) -> None:
        update(Reopen(), self.throttled)


class LoopSuite:
    params = [10, 100]

    def setup(self, n: int) -> None:
        self.clock = VirtualScheduler()
        self.loop = LimiterLoop.debounce(_identity, 5, scheduler=self.clock)

    def time_burst_and_settle(self, n: int) -> None:
        for i in range(n):
            self.loop.push(i)
            self.clock.advance(1)
        self.clock.run_all()
