"""
Activation controller - reference-counted open/close gating of the poll timer
"""

import threading
from typing import Optional

from .deferred_executor import DeferredWorkExecutor
from .errors import LockInterrupted, ShutdownInProgress
from .poll_scheduler import PollScheduler


class ActivationController:
    """
    Starts and stops polling as consumers come and go.

    acquire()/release() count consumers; the scheduler is armed on the
    0 -> 1 transition and disarmed (and the deferred worker drained) on
    1 -> 0. suspend()/resume() override the armed state temporarily
    without touching the count. One mutex serializes all of these, so
    the scheduler is armed exactly when count > 0 and not suspended.

    Example:
        controller = ActivationController(scheduler, executor, "P1", logger)
        controller.acquire()    # first consumer: timer starts
        controller.suspend()    # timer stops, count kept
        controller.resume()     # timer restarts
        controller.release()    # last consumer: timer stops, worker drained
    """

    def __init__(self,
                 scheduler: PollScheduler,
                 executor: Optional[DeferredWorkExecutor],
                 name: str,
                 logger,
                 lock_poll_interval: float = 0.01):
        """
        Args:
            scheduler: Poll scheduler to arm/disarm
            executor: Deferred worker to drain on stop, or None for inline pads
            name: Pad name used in log lines
            logger: ClassLogger instance for logging
            lock_poll_interval: How often a cancellable lock wait checks its cancel event (s)
        """
        self._scheduler = scheduler
        self._executor = executor
        self._name = name
        self._logger = logger
        self._lock_poll_interval = lock_poll_interval

        self._mutex = threading.Lock()
        self._count = 0
        self._suspended = False
        self._shutting_down = False

    @property
    def active_count(self) -> int:
        return self._count

    @property
    def suspended(self) -> bool:
        return self._suspended

    @property
    def shutting_down(self) -> bool:
        return self._shutting_down

    @property
    def armed(self) -> bool:
        return self._scheduler.armed

    def _lock(self, cancel_event: Optional[threading.Event]) -> None:
        """Take the mutex, giving up with LockInterrupted once cancel_event is set"""
        if cancel_event is None:
            self._mutex.acquire()
            return
        while not self._mutex.acquire(timeout=self._lock_poll_interval):
            if cancel_event.is_set():
                raise LockInterrupted(f"{self._name}: wait for activation lock cancelled")

    def acquire(self, cancel_event: Optional[threading.Event] = None) -> int:
        """
        Register one consumer; arms the scheduler on the first one.

        Args:
            cancel_event: Optional event; when set while waiting for the
                mutex the wait is abandoned

        Returns:
            int: consumer count after the call

        Raises:
            LockInterrupted: cancel_event fired before the mutex was taken
            ShutdownInProgress: the pad is being detached
        """
        self._lock(cancel_event)
        try:
            if self._shutting_down:
                raise ShutdownInProgress(f"{self._name}: detach in progress")
            self._count += 1
            if self._count == 1:
                if self._suspended:
                    self._logger.info(f"{self._name}: opened while suspended; polling starts on resume")
                else:
                    self._scheduler.arm()
                    self._logger.info(f"{self._name}: polling started")
            return self._count
        finally:
            self._mutex.release()

    def release(self, cancel_event: Optional[threading.Event] = None) -> int:
        """
        Unregister one consumer; on the last one disarm and drain.

        Returns:
            int: consumer count after the call

        Raises:
            LockInterrupted: cancel_event fired before the mutex was taken
        """
        self._lock(cancel_event)
        try:
            if self._count == 0:
                self._logger.warning(f"{self._name}: release without matching acquire ignored")
                return 0
            self._count -= 1
            if self._count == 0:
                self._stop_polling()
                self._logger.info(f"{self._name}: polling stopped")
            return self._count
        finally:
            self._mutex.release()

    def suspend(self) -> None:
        """Stop polling and drain pending work; the consumer count is kept"""
        with self._mutex:
            if self._suspended:
                return
            self._suspended = True
            self._stop_polling()
            self._logger.info(f"{self._name}: suspended (consumers={self._count})")

    def resume(self) -> None:
        """Leave suspend; polling restarts only if there are consumers"""
        with self._mutex:
            if not self._suspended:
                return
            self._suspended = False
            if self._count > 0 and not self._shutting_down:
                self._scheduler.arm()
            self._logger.info(f"{self._name}: resumed (consumers={self._count})")

    def shutdown(self) -> None:
        """
        Refuse new consumers, stop polling and stop the deferred worker.

        After this returns no sampling pass is running or will run, so
        the pad's line resources can be released. Idempotent.
        """
        with self._mutex:
            if self._shutting_down:
                return
            self._shutting_down = True
            self._stop_polling()
            if self._executor is not None:
                self._executor.drain_and_stop()
            self._logger.info(f"{self._name}: shut down (consumers={self._count})")

    def invariant_holds(self) -> bool:
        """armed == (count > 0 and not suspended and not shutting down)"""
        with self._mutex:
            expected = self._count > 0 and not self._suspended and not self._shutting_down
            return self._scheduler.armed == expected

    def _stop_polling(self) -> None:
        # mutex held
        self._scheduler.disarm()
        if self._executor is not None:
            self._executor.drain()
