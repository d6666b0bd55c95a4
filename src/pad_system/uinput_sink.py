"""
uinput sink - publishes pad frames as a Linux virtual input device via evdev
"""

from typing import List, Set

try:
    import evdev
    from evdev import ecodes
except ImportError:
    # Optional dependency: pip install gpio-joystick[uinput]
    evdev = None

from .buttons import ButtonId
from .interfaces import IEventSink
from .pad_state import PadIdentity


class UInputEventSink(IEventSink):
    """
    Event sink writing EV_KEY events to a uinput device.
    
    The device is created in bind(), once the pad knows which of its
    buttons are wired: only those are advertised as key capabilities.
    Each frame ends with a SYN_REPORT.
    """
    
    def __init__(self, logger, uinput_class=None):
        """
        Args:
            logger: ClassLogger instance for logging
            uinput_class: UInput factory to use instead of evdev.UInput
        """
        if evdev is None:
            raise ImportError("evdev is required for the uinput sink but is not installed")
        self._uinput_class = uinput_class or evdev.UInput
        self._logger = logger
        self._device = None
        self._codes: Set[int] = set()
    
    @property
    def device(self):
        return self._device
    
    def bind(self, identity: PadIdentity, buttons: List[ButtonId]) -> None:
        """Create the virtual device for a pad"""
        if self._device is not None:
            return
        self._codes = {int(button) for button in buttons}
        self._device = self._uinput_class(
            events={ecodes.EV_KEY: sorted(self._codes)},
            name=identity.name,
            vendor=identity.vendor,
            product=identity.product,
            version=identity.version,
            bustype=ecodes.BUS_HOST,
            phys=identity.phys,
        )
        self._logger.info(
            f"uinput device '{identity.name}' created ({identity.phys}, {len(self._codes)} keys)"
        )
    
    def signal(self, button_id: ButtonId, pressed: bool) -> None:
        if self._device is None or int(button_id) not in self._codes:
            return
        self._device.write(ecodes.EV_KEY, int(button_id), 1 if pressed else 0)
    
    def end_frame(self) -> None:
        if self._device is not None:
            self._device.syn()
    
    def close(self) -> None:
        device = self._device
        self._device = None
        if device is not None:
            device.close()
            self._logger.info("uinput device closed")
