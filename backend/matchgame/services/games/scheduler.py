import heapq
import itertools
import logging
from typing import Any, Callable, List, Tuple

logger = logging.getLogger(__name__)


class Handle:
    """A pending delayed callback. ``cancel`` is safe to call repeatedly."""

    def __init__(self, delay: float, callback: Callable[..., Any], args: Tuple[Any, ...]) -> None:
        self.delay = delay
        self.callback = callback
        self.args = args
        self.cancelled = False
        self.fired = False

    def cancel(self) -> None:
        self.cancelled = True

    def run(self) -> None:
        if self.cancelled or self.fired:
            return
        self.fired = True
        self.callback(*self.args)


class Scheduler:
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Handle:
        raise NotImplementedError


class SocketIOScheduler(Scheduler):
    """Runs delayed callbacks as Socket.IO background tasks.

    Works with whichever async mode the server picked (threading, eventlet,
    gevent) since both the task and the sleep go through ``socketio``.
    """

    def __init__(self, socketio) -> None:
        self.socketio = socketio

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Handle:
        handle = Handle(delay, callback, args)
        self.socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: Handle) -> None:
        if handle.delay > 0:
            self.socketio.sleep(handle.delay)
        if handle.cancelled:
            return
        try:
            handle.run()
        except Exception:
            logger.exception(f"[task-error] callback={getattr(handle.callback, '__name__', handle.callback)}")
            raise


class ManualScheduler(Scheduler):
    """Virtual-clock scheduler; nothing fires until ``advance`` is called."""

    def __init__(self) -> None:
        self.now = 0.0
        self._queue: List[Tuple[float, int, Handle]] = []
        self._seq = itertools.count()

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Handle:
        handle = Handle(delay, callback, args)
        heapq.heappush(self._queue, (self.now + max(0.0, delay), next(self._seq), handle))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for _, _, h in self._queue if not h.cancelled)

    def advance(self, seconds: float) -> int:
        """Move the clock forward, firing due callbacks in due order.

        Callbacks scheduled while advancing fire too if they fall inside the
        window. Returns the number of callbacks run.
        """
        target = self.now + seconds
        ran = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, handle = heapq.heappop(self._queue)
            self.now = due
            if handle.cancelled:
                continue
            handle.run()
            ran += 1
        self.now = target
        return ran
