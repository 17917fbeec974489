from __future__ import annotations

import time
from typing import IO, Callable, Optional, Sequence

from tqdm import tqdm

from .errors import ExecutionError
from .logger import get_logger
from .planner import RenameOp

logger = get_logger(__name__)

DEFAULT_RATE = 100.0

BAR_FORMAT = "{desc} [{n_fmt}/{total_fmt}] {bar:30}{postfix}"


class RateLimiter:
    """Fixed-rate pacing between consecutive calls to :meth:`wait`.

    A call made after the interval has already passed returns at once and the
    schedule restarts from that moment, so a slow operation never leaves a
    backlog of ticks behind it.
    """

    def __init__(
        self,
        rate_per_minute: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        if rate_per_minute <= 0:
            raise ValueError(f"速率必须为正数: {rate_per_minute}")
        self.interval = 60.0 / rate_per_minute
        self.clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def wait(self) -> None:
        now = self.clock()
        if self._last is not None:
            due = self._last + self.interval
            if now < due:
                self._sleep(due - now)
                now = self.clock()
        self._last = now


class ProgressReporter:
    """Progress sink for a single run. The base class ignores everything."""

    def start(self, total: int) -> None:
        pass

    def update(self, completed: int, total: int, elapsed: float, remaining: float) -> None:
        pass

    def finish(self) -> None:
        pass


class TqdmProgress(ProgressReporter):
    def __init__(
        self,
        desc: str = "改名",
        disable: bool = False,
        file: Optional[IO[str]] = None,
    ) -> None:
        self.desc = desc
        self.disable = disable
        self.file = file
        self._bar: Optional[tqdm] = None

    def start(self, total: int) -> None:
        self._bar = tqdm(
            total=total,
            desc=self.desc,
            bar_format=BAR_FORMAT,
            disable=self.disable,
            file=self.file,
        )

    def update(self, completed: int, total: int, elapsed: float, remaining: float) -> None:
        if self._bar is None:
            return
        self._bar.set_postfix_str(
            f"已用 {elapsed:.0f}s 剩余 {remaining:.0f}s", refresh=False
        )
        self._bar.update(completed - self._bar.n)

    def finish(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


def execute(
    ops: Sequence[RenameOp],
    rename: Callable[[str, str], object],
    rate: float = DEFAULT_RATE,
    *,
    progress: Optional[ProgressReporter] = None,
    limiter: Optional[RateLimiter] = None,
) -> int:
    """Apply ``ops`` one at a time, in order, at no more than ``rate`` per minute.

    ``rename(target_id, new_name)`` reports failure by raising. The first
    failure stops the run and is re-raised as :class:`ExecutionError`; ops that
    already went through stay applied. Returns the number of ops applied.
    """
    total = len(ops)
    if total == 0:
        return 0
    limiter = limiter or RateLimiter(rate)
    progress = progress or ProgressReporter()
    clock = limiter.clock

    started = clock()
    progress.start(total)
    try:
        for index, op in enumerate(ops):
            limiter.wait()
            logger.debug("改名 %s -> %s", op.target_id, op.new_name)
            try:
                rename(op.target_id, op.new_name)
            except Exception as exc:
                raise ExecutionError(op, index + 1, total) from exc
            completed = index + 1
            elapsed = clock() - started
            remaining = elapsed / completed * (total - completed)
            progress.update(completed, total, elapsed, remaining)
    finally:
        progress.finish()
    return total
