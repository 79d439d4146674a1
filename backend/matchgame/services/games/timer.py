import contextlib
import logging
from typing import Callable, ContextManager, Optional

from .scheduler import Handle, Scheduler

logger = logging.getLogger(__name__)

LOW = 'low'
WARNING = 'warning'
NORMAL = 'normal'


def urgency(time_left: int) -> str:
    if time_left <= 10:
        return LOW
    if time_left <= 20:
        return WARNING
    return NORMAL


class CountdownTimer:
    """Counts ``time_left`` down by one per tick until stopped.

    ``on_tick`` receives the new ``time_left`` after every decrement; it is
    the owner's job to stop the timer once the count runs out.
    """

    def __init__(self, scheduler: Scheduler, initial_time: int = 60,
                 interval: float = 1.0, on_tick: Optional[Callable[[int], None]] = None,
                 lock: Optional[ContextManager] = None) -> None:
        self.scheduler = scheduler
        self.initial_time = initial_time
        self.interval = interval
        self.on_tick = on_tick
        self.time_left = initial_time
        self._handle: Optional[Handle] = None
        self._armed = 0
        self._lock = lock if lock is not None else contextlib.nullcontext()

    @property
    def running(self) -> bool:
        return self._handle is not None

    @property
    def urgency(self) -> str:
        return urgency(self.time_left)

    @property
    def progress(self) -> float:
        if self.initial_time <= 0:
            return 0.0
        return min(1.0, max(0.0, self.time_left / self.initial_time))

    def start(self) -> None:
        self.stop()
        self.time_left = self.initial_time
        self._arm()

    def stop(self) -> None:
        if self._handle is None:
            return
        self._handle.cancel()
        self._handle = None
        logger.debug(f"[timer-stop] time_left={self.time_left}")

    def add(self, seconds: int) -> int:
        self.time_left += seconds
        return self.time_left

    def tick(self) -> None:
        self.time_left -= 1
        if self.on_tick:
            self.on_tick(self.time_left)

    def _arm(self) -> None:
        self._armed += 1
        self._handle = self.scheduler.call_later(self.interval, self._fire, self._armed)

    def _fire(self, armed: int) -> None:
        with self._lock:
            # A tick that was already on its way when the timer got restarted.
            if self._handle is None or armed != self._armed:
                return
            self._handle = None
            # Re-arm first so on_tick can cancel the next tick via stop().
            self._arm()
            self.tick()
