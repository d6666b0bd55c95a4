"""
Joystick host - attaches every configured pad and drives their lifecycles together
"""

import logging
import threading
from typing import Callable, List, Optional

from pad_utils import HybridLogger

from .config import JoystickConfig, PadConfig
from .interfaces import IEventSink, ILineProvider
from .joystick_device import JoystickDevice

ProviderFactory = Callable[[PadConfig], ILineProvider]
SinkFactory = Callable[[PadConfig], IEventSink]


class JoystickHost:
    """
    Owns the JoystickDevices of one process (at most P1 and P2).
    
    Pads share nothing; the host only fans host events out to each of
    them. Used as a context manager it attaches on entry and detaches on
    exit.
    
    Example:
        with JoystickHost(config, make_provider, make_sink, hybrid) as host:
            host.open_all()
            stop_event.wait()
            host.close_all()
    """
    
    def __init__(self,
                 config: JoystickConfig,
                 provider_factory: ProviderFactory,
                 sink_factory: SinkFactory,
                 hybrid_logger: HybridLogger,
                 log_level: int = logging.INFO):
        config.validate()
        self.config = config
        self._provider_factory = provider_factory
        self._sink_factory = sink_factory
        self._hybrid_logger = hybrid_logger
        self._log_level = log_level
        self._logger = hybrid_logger.get_class_logger("JoystickHost", log_level)
        self._devices: List[JoystickDevice] = []
    
    @property
    def devices(self) -> List[JoystickDevice]:
        return list(self._devices)
    
    def attach_all(self) -> List[JoystickDevice]:
        """
        Attach every configured pad.
        
        If one pad fails to attach, the pads attached before it are
        detached again and the error is raised.
        """
        for pad_config in self.config.pads:
            try:
                device = JoystickDevice.on_attach(
                    pad_config,
                    self._provider_factory(pad_config),
                    self._sink_factory(pad_config),
                    self._hybrid_logger,
                    poll_ms=self.config.poll_ms,
                    log_level=self._log_level,
                )
            except Exception as e:
                self._logger.error(f"Pad {pad_config.instance} failed to attach: {e}")
                self.detach_all()
                raise
            self._devices.append(device)
        self._logger.info(f"{len(self._devices)} pad(s) attached, polling every {self.config.poll_ms} ms")
        return self.devices
    
    def open_all(self, cancel_event: Optional[threading.Event] = None) -> None:
        for device in self._devices:
            device.on_open(cancel_event)
    
    def close_all(self) -> None:
        for device in self._devices:
            if device.active_count > 0:
                device.on_close()
    
    def suspend_all(self) -> None:
        for device in self._devices:
            device.on_suspend()
    
    def resume_all(self) -> None:
        for device in self._devices:
            device.on_resume()
    
    def detach_all(self) -> None:
        """Detach every pad, last attached first"""
        while self._devices:
            device = self._devices.pop()
            try:
                device.on_detach()
            except Exception as e:
                self._logger.error(f"Detach of {device.pad.identity.name} failed", exception=e)
    
    def stats(self) -> List[dict]:
        return [device.stats() for device in self._devices]
    
    def __enter__(self) -> "JoystickHost":
        self.attach_all()
        return self
    
    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.detach_all()
