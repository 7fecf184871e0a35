from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from .scheduler import Scheduler

logger = logging.getLogger(__name__)


@dataclass
class LoopConfig:
    """Pacing for GameLoop.

    tick_rate of 0 runs unthrottled; max_steps of None runs until stop().
    max_catch_up bounds how much wall time one step may hand the scheduler,
    so waking from a suspended laptop does not replay hours of jobs at once.
    """

    tick_rate: float = 10.0
    max_steps: Optional[int] = None
    max_catch_up: float = 5.0


class GameLoop:
    """Feeds elapsed wall time into a Scheduler.

    The clock and sleep functions are injectable so pacing can be checked
    without waiting on real time.
    """

    def __init__(
        self,
        scheduler: Scheduler,
        config: Optional[LoopConfig] = None,
        clock: Callable[[], float] = time.perf_counter,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.scheduler = scheduler
        self.config = config or LoopConfig()
        self.running = False
        self.step = 0
        self._clock = clock
        self._sleep = sleep
        self._last_pump = 0.0

    @property
    def period(self) -> float:
        rate = self.config.tick_rate
        return 1.0 / rate if rate and rate > 0 else 0.0

    def start(self) -> None:
        if self.running:
            return
        self.running = True
        self.step = 0
        self._last_pump = self._clock()
        logger.info("Loop started (tick_rate=%s, max_steps=%s)", self.config.tick_rate, self.config.max_steps)

    def stop(self) -> None:
        if self.running:
            self.running = False
            logger.info("Loop stopped after %d steps", self.step)

    def update(self, dt: float) -> None:
        """Advance the scheduler by dt seconds; ignored unless running."""
        if not self.running:
            return
        self.scheduler.advance(min(max(0.0, dt), self.config.max_catch_up))
        self.step += 1
        if self.config.max_steps is not None and self.step >= self.config.max_steps:
            self.stop()

    def pump(self) -> None:
        """One step covering the wall time since the previous pump."""
        now = self._clock()
        elapsed, self._last_pump = now - self._last_pump, now
        self.update(elapsed)

    def run(self) -> None:
        """Block, pumping once per period, until stopped or max_steps is reached."""
        self.start()
        while self.running:
            began = self._clock()
            self.pump()
            if self.running and self.period:
                self._sleep(max(0.0, self.period - (self._clock() - began)))
