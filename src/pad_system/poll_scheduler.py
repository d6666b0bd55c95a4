"""
Poll scheduler - periodic timer thread driving the sampling passes
"""

import threading
import time
from typing import Callable, Optional

from pad_utils import OnceInMs

from .errors import ConfigError

DEFAULT_POLL_MS = 1


def validate_interval_ms(interval_ms) -> int:
    """
    Check a poll interval in milliseconds.

    Raises:
        ConfigError: not a positive integer
    """
    if isinstance(interval_ms, bool) or not isinstance(interval_ms, int):
        raise ConfigError(f"Poll interval must be an integer number of ms, got {interval_ms!r}")
    if interval_ms <= 0:
        raise ConfigError(f"Poll interval must be positive, got {interval_ms} ms")
    return interval_ms


class PollScheduler:
    """
    Periodic tick source with an explicit Disarmed -> Armed -> Disarmed cycle.

    While armed a dedicated timer thread calls on_tick once per interval.
    Deadlines advance by exactly one interval from the previous deadline,
    not from "now", so a slow tick does not shift the period. A tick that
    comes due late is fired immediately to catch up; once the timer falls
    more than max_catchup_ticks behind it skips forward to the next
    deadline after "now" and counts the skipped ticks.

    on_tick runs on the timer thread and must not block on I/O.

    disarm() is synchronous: when it returns the timer thread has exited,
    so no tick fires afterwards. A tick may disarm its own timer; if the
    scheduler is armed again before that tick returns, the new timer
    thread holds its first tick back until the old one has finished, so
    ticks never overlap.
    """

    def __init__(self,
                 on_tick: Callable[[], None],
                 name: str,
                 logger,
                 interval_ms: int = DEFAULT_POLL_MS,
                 max_catchup_ticks: int = 50,
                 clock: Callable[[], float] = time.monotonic):
        """
        Args:
            on_tick: Callback fired once per tick on the timer thread
            name: Suffix for the timer thread name
            logger: ClassLogger instance for logging
            interval_ms: Tick interval in milliseconds (positive)
            max_catchup_ticks: Late ticks fired back-to-back before skipping ahead
            clock: Monotonic clock in seconds
        """
        self._on_tick = on_tick
        self._name = name
        self._logger = logger
        self._interval_ms = validate_interval_ms(interval_ms)
        self._pending_interval_ms: Optional[int] = None
        self._max_catchup_ticks = max_catchup_ticks
        self._clock = clock

        self._cond = threading.Condition()
        self._armed = False
        self._generation = 0
        self._thread: Optional[threading.Thread] = None
        self._in_tick = False
        self._next_deadline = 0.0

        self.ticks_fired = 0
        self.late_ticks = 0
        self.skipped_ticks = 0
        self._tick_error_log = OnceInMs(1000)
        self._overrun_log = OnceInMs(1000)

    @property
    def armed(self) -> bool:
        with self._cond:
            return self._armed

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def interval(self) -> float:
        """Tick interval in seconds"""
        return self._interval_ms / 1000.0

    def set_interval(self, interval_ms: int) -> None:
        """
        Change the tick interval.

        Applied immediately while disarmed; while armed the new value is
        kept and takes effect on the next arm().

        Raises:
            ConfigError: not a positive integer
        """
        interval_ms = validate_interval_ms(interval_ms)
        with self._cond:
            if self._armed:
                self._pending_interval_ms = interval_ms
                self._logger.info(
                    f"Poll interval change to {interval_ms} ms on {self._name} deferred until next arm"
                )
                return
            self._interval_ms = interval_ms
            self._pending_interval_ms = None
        self._logger.debug(f"Poll interval on {self._name} set to {interval_ms} ms")

    def arm(self) -> None:
        """Start ticking; the first tick comes due one interval from now. No-op if armed."""
        with self._cond:
            if self._armed:
                return
            if self._pending_interval_ms is not None:
                self._interval_ms = self._pending_interval_ms
                self._pending_interval_ms = None
            self._armed = True
            self._generation += 1
            self._next_deadline = self._clock() + self.interval
            self._thread = threading.Thread(
                target=self._timer_loop,
                args=(self._generation,),
                name=f"pad-timer-{self._name}",
                daemon=True,
            )
            self._thread.start()
        self._logger.debug(f"Timer {self._name} armed at {self._interval_ms} ms")

    def disarm(self) -> None:
        """Stop ticking and wait for the timer thread to exit. No-op if disarmed."""
        with self._cond:
            if not self._armed:
                return
            self._armed = False
            thread = self._thread
            self._thread = None
            self._cond.notify_all()

        # A tick that disarms its own timer cannot join itself; the loop
        # exits as soon as that tick returns.
        if thread is not None and thread is not threading.current_thread():
            thread.join()
        self._logger.debug(f"Timer {self._name} disarmed after {self.ticks_fired} ticks")

    def _timer_loop(self, generation: int) -> None:
        while True:
            with self._cond:
                if not self._armed or self._generation != generation:
                    return
                if self._in_tick:
                    # Re-armed while a tick of the previous timer thread is
                    # still running; it has to return first
                    self._cond.wait()
                    continue
                delay = self._next_deadline - self._clock()
                if delay > 0:
                    self._cond.wait(delay)
                    continue
                self._advance_deadline()
                self._in_tick = True

            try:
                self._fire()
            finally:
                with self._cond:
                    self._in_tick = False
                    self._cond.notify_all()

    def _advance_deadline(self) -> None:
        """Move the deadline one interval on; called with the lock held once a tick is due"""
        interval = self.interval
        now = self._clock()
        self._next_deadline += interval
        if self._next_deadline >= now:
            return

        self.late_ticks += 1
        behind_ticks = int((now - self._next_deadline) / interval)
        if behind_ticks > self._max_catchup_ticks:
            # Skip ahead keeping the phase, like a forwarded hardware timer
            skipped = 0
            while self._next_deadline <= now:
                self._next_deadline += interval
                skipped += 1
            self.skipped_ticks += skipped
            if self._overrun_log.should_execute():
                self._logger.warning(
                    f"Timer {self._name} fell {behind_ticks} ticks behind; skipped {skipped}"
                )

    def _fire(self) -> None:
        self.ticks_fired += 1
        try:
            self._on_tick()
        except Exception as e:
            if self._tick_error_log.should_execute():
                self._logger.error(f"Tick handler on {self._name} failed", exception=e)
