from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Tuple

logger = logging.getLogger(__name__)

JobCallback = Callable[[float], None]


@dataclass
class RecurringJob:
    """A callback fired every ``interval`` seconds of scheduler time.

    The callback receives the interval as its dt argument. Due times are
    computed as start + n * interval so repeated firing does not drift.
    """

    name: str
    interval: float
    callback: JobCallback
    start: float = 0.0
    runs: int = 0
    enabled: bool = True

    @property
    def next_due(self) -> float:
        return self.start + (self.runs + 1) * self.interval


@dataclass
class Scheduler:
    """Drives independent recurring jobs from one virtual clock.

    Nothing here reads wall-clock time: callers advance the clock explicitly,
    either from a real-time loop or from tests.
    """

    now: float = 0.0
    _jobs: List[RecurringJob] = field(default_factory=list)

    def every(self, interval: float, name: str, callback: JobCallback) -> RecurringJob:
        if interval <= 0:
            raise ValueError(f"Job interval must be > 0, got {interval}")
        if any(j.name == name for j in self._jobs):
            raise ValueError(f"Job '{name}' is already scheduled")
        job = RecurringJob(name=name, interval=interval, callback=callback, start=self.now)
        self._jobs.append(job)
        logger.debug("Scheduled job '%s' every %.3fs", name, interval)
        return job

    def cancel(self, name: str) -> None:
        self._jobs = [j for j in self._jobs if j.name != name]

    def job(self, name: str) -> RecurringJob:
        for j in self._jobs:
            if j.name == name:
                return j
        raise KeyError(name)

    @property
    def jobs(self) -> List[RecurringJob]:
        return list(self._jobs)

    def clock(self) -> float:
        return self.now

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing every job that falls due, in time order.

        Jobs due at the same instant fire in registration order. Returns the
        number of callbacks fired.
        """
        if seconds < 0:
            raise ValueError("Cannot advance the clock backwards")
        target = self.now + seconds
        # Tolerance so 0.1 * 10 style sums land on their due time.
        eps = 1e-9
        heap: List[Tuple[float, int, RecurringJob]] = [
            (j.next_due, idx, j) for idx, j in enumerate(self._jobs)
        ]
        heapq.heapify(heap)
        fired = 0
        while heap and heap[0][0] <= target + eps:
            due, idx, job = heapq.heappop(heap)
            self.now = max(self.now, due)
            job.runs += 1
            if job.enabled:
                job.callback(job.interval)
                fired += 1
            if job in self._jobs:
                heapq.heappush(heap, (job.next_due, idx, job))
        self.now = target
        return fired
