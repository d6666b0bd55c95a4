"""
Joystick device - one pad wired to its scheduler, worker and activation
controller, exposed through host lifecycle hooks
"""

import logging
import threading
from typing import Optional

from pad_utils import HybridLogger

from .activation import ActivationController
from .config import PadConfig, normalize_poll_ms
from .deferred_executor import DeferredWorkExecutor
from .event_reporter import EventReporter
from .interfaces import IEventSink, ILineProvider
from .line_sampler import LineSampler
from .pad_builder import Pad, build_pad
from .poll_scheduler import DEFAULT_POLL_MS, PollScheduler


class JoystickDevice:
    """
    A polled joystick pad.

    Host-facing hooks:
        on_attach(config, ...) -> JoystickDevice   build the pad
        on_open() / on_close()                     consumer reference counting
        on_suspend() / on_resume()                 system power transitions
        on_detach()                                full teardown

    Each tick samples every line and reports a full frame to the sink.
    When the line provider may block, the pass runs on a dedicated worker
    thread and the timer thread only queues it.

    Example:
        hybrid = HybridLogger("gpio-joystick")
        device = JoystickDevice.on_attach(default_pad_config(0), provider, sink, hybrid)
        device.on_open()
        ...
        device.on_close()
        device.on_detach()
    """

    def __init__(self,
                 pad: Pad,
                 hybrid_logger: HybridLogger,
                 poll_ms: int = DEFAULT_POLL_MS,
                 log_level: int = logging.INFO):
        """
        Args:
            pad: A pad returned by build_pad()
            hybrid_logger: Logger factory the components get their loggers from
            poll_ms: Tick interval in milliseconds
            log_level: Level of the component loggers
        """
        self.pad = pad
        name = pad.identity.name
        self._logger = hybrid_logger.get_class_logger("JoystickDevice", log_level)

        self._sampler = LineSampler(hybrid_logger.get_class_logger("LineSampler", log_level))
        self._reporter = EventReporter(hybrid_logger.get_class_logger("EventReporter", log_level))

        self._executor: Optional[DeferredWorkExecutor] = None
        if pad.may_block:
            self._executor = DeferredWorkExecutor(
                self.run_pass,
                pad.identity.phys,
                hybrid_logger.get_class_logger("DeferredWorkExecutor", log_level),
            )

        self._scheduler = PollScheduler(
            self._on_tick,
            pad.identity.phys,
            hybrid_logger.get_class_logger("PollScheduler", log_level),
            interval_ms=normalize_poll_ms(poll_ms),
        )
        self._controller = ActivationController(
            self._scheduler,
            self._executor,
            name,
            hybrid_logger.get_class_logger("ActivationController", log_level),
        )
        self._detach_lock = threading.Lock()
        self._detached = False

        self._logger.info(f"{pad} polling every {self._scheduler.interval_ms} ms")

    @classmethod
    def on_attach(cls,
                  config: PadConfig,
                  provider: ILineProvider,
                  sink: IEventSink,
                  hybrid_logger: HybridLogger,
                  poll_ms: int = DEFAULT_POLL_MS,
                  log_level: int = logging.INFO) -> "JoystickDevice":
        """
        Validate the pad configuration, set up the provider and build the pad.

        Raises:
            ConfigError: invalid configuration or poll interval
            NoConnectedLines: none of the configured lines is connected
        """
        config.validate()
        poll_ms = normalize_poll_ms(poll_ms)
        builder_logger = hybrid_logger.get_class_logger("PadBuilder", log_level)

        provider.setup()
        try:
            pad = build_pad(config.lines, provider, sink, builder_logger,
                            instance=config.instance, name=config.name)
        except Exception:
            provider.cleanup()
            raise

        try:
            sink.bind(pad.identity, pad.descriptor.connected_buttons)
        except Exception:
            pad.release_resources()
            provider.cleanup()
            raise
        return cls(pad, hybrid_logger, poll_ms=poll_ms, log_level=log_level)

    # --- Host hooks ---------------------------------------------------------

    def on_open(self, cancel_event: Optional[threading.Event] = None) -> int:
        """A consumer opened the device; returns the consumer count"""
        return self._controller.acquire(cancel_event)

    def on_close(self, cancel_event: Optional[threading.Event] = None) -> int:
        """A consumer closed the device; returns the consumer count"""
        return self._controller.release(cancel_event)

    def on_suspend(self) -> None:
        self._controller.suspend()

    def on_resume(self) -> None:
        self._controller.resume()

    def on_detach(self) -> None:
        """
        Tear the device down: stop polling, drain and stop the worker, then
        release line resources, the provider and the sink. Idempotent.
        """
        with self._detach_lock:
            if self._detached:
                return
            self._detached = True

        self._controller.shutdown()
        self.pad.release_resources()
        try:
            self.pad.provider.cleanup()
        except Exception as e:
            self._logger.error(f"{self.pad.identity.name}: provider cleanup failed", exception=e)
        try:
            self.pad.sink.close()
        except Exception as e:
            self._logger.error(f"{self.pad.identity.name}: sink close failed", exception=e)
        self._logger.info(f"{self.pad.identity.name} detached: {self.stats()}")

    # --- Polling ------------------------------------------------------------

    def set_poll_interval(self, poll_ms: int) -> None:
        """Change the tick interval; while polling it applies from the next start"""
        self._scheduler.set_interval(normalize_poll_ms(poll_ms))

    def run_pass(self) -> None:
        """One full sampling pass: read every line, report the frame"""
        sampled = self._sampler.sample(self.pad)
        self._reporter.report(self.pad, sampled)

    def _on_tick(self) -> None:
        # Timer thread: never blocks on the provider
        if self._executor is None:
            self.run_pass()
        elif not self._executor.submit():
            self.pad.state.ticks_coalesced += 1

    # --- Introspection ------------------------------------------------------

    @property
    def armed(self) -> bool:
        return self._controller.armed

    @property
    def active_count(self) -> int:
        return self._controller.active_count

    @property
    def suspended(self) -> bool:
        return self._controller.suspended

    @property
    def detached(self) -> bool:
        return self._detached

    @property
    def scheduler(self) -> PollScheduler:
        return self._scheduler

    @property
    def executor(self) -> Optional[DeferredWorkExecutor]:
        return self._executor

    @property
    def controller(self) -> ActivationController:
        return self._controller

    def stats(self) -> dict:
        """Snapshot of the runtime counters"""
        stats = self.pad.state.snapshot()
        stats.update({
            "consumers": self._controller.active_count,
            "armed": self._controller.armed,
            "suspended": self._controller.suspended,
            "poll_ms": self._scheduler.interval_ms,
            "ticks_fired": self._scheduler.ticks_fired,
            "late_ticks": self._scheduler.late_ticks,
            "skipped_ticks": self._scheduler.skipped_ticks,
            "deferred_jobs": self._executor.jobs_run if self._executor else 0,
        })
        return stats
