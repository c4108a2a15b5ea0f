"""
Rate keeping and periodic-task utilities inspired by openpilot's common.realtime.
Provides a monotonic rate keeper and a cancellable fixed-period worker thread.
"""

from __future__ import annotations

import threading
import time
from typing import Callable, Optional

from common.logger import get_logger

logger = get_logger("realtime")


def monotonic_time() -> float:
    """Return monotonic time in seconds."""
    return time.monotonic()


class RateKeeper:
    """
    Maintain a fixed loop rate. Mirrors openpilot's Ratekeeper interface:
    - monitor_time(): update timing statistics, return remaining time (negative if late)
    - keep_time(): call monitor_time() then sleep for remaining time, if positive

    When a ``stop_event`` is given the sleep wakes as soon as the event is set,
    and keep_time() reports whether the loop should keep going.
    """

    def __init__(
        self,
        rate_hz: float,
        clock=monotonic_time,
        print_delay_threshold: float | None = 0.01,
        stop_event: Optional[threading.Event] = None,
        name: str = "RateKeeper",
    ):
        if rate_hz <= 0.0:
            raise ValueError("rate_hz must be positive")
        self.period = 1.0 / rate_hz
        self.clock = clock
        self.print_delay_threshold = print_delay_threshold
        self.stop_event = stop_event
        self.name = name
        self.frame = 0
        self._last = self.clock()
        self._next = self._last + self.period

    def monitor_time(self) -> float:
        """
        Update timing statistics and compute remaining time before the next frame.
        Returns remaining seconds (negative if the loop is lagging).
        """
        now = self.clock()
        remaining = self._next - now
        if self.print_delay_threshold is not None and remaining < -self.print_delay_threshold:
            logger.debug(f"[{self.name}] Lagging by {-remaining * 1000:.2f} ms (frame {self.frame})")

        self._last = now
        self._next += self.period
        if remaining < -self.period:
            # Don't try to catch up on a backlog of missed frames.
            self._next = now + self.period
        self.frame += 1
        return remaining

    def keep_time(self) -> bool:
        """
        Call monitor_time() and sleep for the remaining time, if positive.
        Returns False once the stop event has been set.
        """
        remaining = self.monitor_time()
        if self.stop_event is None:
            if remaining > 0.0:
                time.sleep(remaining)
            return True
        if remaining > 0.0:
            return not self.stop_event.wait(remaining)
        return not self.stop_event.is_set()


class PeriodicTask:
    """
    Runs ``tick`` every ``period`` seconds on a daemon thread until cancelled.

    The cancel flag is checked before every tick body, so once cancel() has
    returned (with join) no further tick executes. Exceptions raised by a tick
    are logged and the loop carries on with the next period.
    """

    def __init__(
        self,
        name: str,
        period: float,
        tick: Callable[[], None],
        start_delay: float = 0.0,
    ):
        if period <= 0.0:
            raise ValueError("period must be positive")
        if start_delay < 0.0:
            raise ValueError("start_delay must be non-negative")
        self.name = name
        self.period = float(period)
        self.start_delay = float(start_delay)
        self._tick = tick
        self._cancelled = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self.ticks = 0
        self.failures = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError(f"{self.name} already started")
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()

    def cancel(self, join: bool = True, timeout: float | None = None) -> None:
        self._cancelled.set()
        thread = self._thread
        if not join or thread is None or thread is threading.current_thread():
            return
        thread.join(timeout=timeout if timeout is not None else max(1.0, 2.0 * self.period))
        if thread.is_alive():
            logger.warning(f"{self.name} did not stop within the join timeout")

    def _run(self) -> None:
        if self.start_delay > 0.0 and self._cancelled.wait(self.start_delay):
            return
        logger.debug(f"{self.name} started ({1.0 / self.period:.1f} Hz)")
        rk = RateKeeper(
            rate_hz=1.0 / self.period,
            print_delay_threshold=self.period,
            stop_event=self._cancelled,
            name=self.name,
        )
        while not self._cancelled.is_set():
            try:
                self._tick()
            except Exception:
                self.failures += 1
                logger.exception(f"{self.name} tick failed")
            self.ticks += 1
            if not rk.keep_time():
                break
        logger.debug(f"{self.name} stopped after {self.ticks} ticks")


__all__ = ["monotonic_time", "RateKeeper", "PeriodicTask"]
