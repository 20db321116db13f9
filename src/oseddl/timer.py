"""Per-deadline countdown timers on APScheduler."""

import logging
import uuid
from datetime import datetime
from typing import Callable

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .core.countdown import Clock, TimeLeft, time_left, utc_now

logger = logging.getLogger(__name__)

TICK_SECONDS = 1


class CountdownTimer:
    """
    Ticks once a second, reporting the time left until a fixed deadline.

    on_tick receives a TimeLeft, or None once the deadline has passed.
    Each timer owns one job; it creates and shuts down its own scheduler
    unless one is passed in. Use as a context manager to guarantee stop().
    """

    def __init__(
        self,
        deadline: datetime,
        on_tick: Callable[[TimeLeft | None], None],
        scheduler: BackgroundScheduler | None = None,
        clock: Clock = utc_now,
    ):
        self.deadline = deadline
        self.on_tick = on_tick
        self.clock = clock
        self._owns_scheduler = scheduler is None
        self._scheduler = scheduler or BackgroundScheduler()
        self._job = None
        self.current: TimeLeft | None = None

    @property
    def running(self) -> bool:
        return self._job is not None

    def tick(self) -> TimeLeft | None:
        """Recompute the breakdown from the clock and notify."""
        self.current = time_left(self.deadline, self.clock())
        self.on_tick(self.current)
        return self.current

    def start(self) -> "CountdownTimer":
        if self._job is not None:
            return self
        self.tick()
        self._job = self._scheduler.add_job(
            self.tick,
            IntervalTrigger(seconds=TICK_SECONDS),
            id=f"countdown-{uuid.uuid4().hex}",
        )
        if self._owns_scheduler and not self._scheduler.running:
            self._scheduler.start()
        logger.debug(f"Countdown started for {self.deadline.isoformat()}")
        return self

    def stop(self) -> None:
        if self._job is None:
            return
        self._job.remove()
        self._job = None
        if self._owns_scheduler and self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        logger.debug(f"Countdown stopped for {self.deadline.isoformat()}")

    def __enter__(self) -> "CountdownTimer":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
