"""
GPIO-based line provider implementation using RPi.GPIO
"""

from typing import Dict, Optional, Set

try:
    import RPi.GPIO as GPIO
except (ImportError, RuntimeError):
    # Not on a Raspberry Pi; the provider refuses to start without a GPIO module
    GPIO = None

from pad_utils import describe_gpio

from .errors import TransientReadFailure
from .interfaces import ILineProvider

PULL_MODES = ("up", "down", "off")


class GPIOLineProvider(ILineProvider):
    """
    Line provider reading BCM GPIO pins for production.
    
    Reads are register reads on the SoC and never block, so pads built on
    this provider are sampled inline on the timer thread.
    
    Example:
        provider = GPIOLineProvider(pad_config.pins, logger, pull_mode="up")
    """
    
    may_block = False
    
    def __init__(self,
                 pins: Dict[str, Optional[int]],
                 logger,
                 pull_mode: str = "up",
                 gpio_module=None):
        """
        Args:
            pins: Line name -> BCM pin number, None for unwired lines
            logger: ClassLogger instance for logging
            pull_mode: Internal pull resistor: "up" (active-low buttons), "down" or "off"
            gpio_module: GPIO module to use instead of RPi.GPIO
        """
        if pull_mode not in PULL_MODES:
            raise ValueError(f"pull_mode must be one of {PULL_MODES}, got {pull_mode!r}")
        
        self._gpio = gpio_module if gpio_module is not None else GPIO
        if self._gpio is None:
            raise ImportError("RPi.GPIO is required but not available")
        
        self._pins = dict(pins)
        self._pull_mode = pull_mode
        self._logger = logger
        self._claimed: Set[int] = set()
        self._initialized = False
    
    def _pull_constant(self) -> int:
        return {
            "up": self._gpio.PUD_UP,
            "down": self._gpio.PUD_DOWN,
            "off": self._gpio.PUD_OFF,
        }[self._pull_mode]
    
    def setup(self) -> None:
        """Select BCM numbering"""
        if self._initialized:
            return
        try:
            self._gpio.setwarnings(False)
            self._gpio.setmode(self._gpio.BCM)
            self._initialized = True
            wired = sum(1 for pin in self._pins.values() if pin is not None)
            self._logger.info(f"GPIO provider initialized: {wired} pins (pull-{self._pull_mode})")
        except Exception as e:
            self._logger.error(f"GPIO provider setup failed: {e}")
            raise
    
    def is_connected(self, line_name: str) -> bool:
        return self._pins.get(line_name) is not None
    
    def resolve(self, line_name: str) -> Optional[int]:
        """Configure the line's pin as an input and return it as the handle"""
        pin = self._pins.get(line_name)
        if pin is None:
            return None
        self._gpio.setup(pin, self._gpio.IN, pull_up_down=self._pull_constant())
        self._claimed.add(pin)
        self._logger.debug(f"Line '{line_name}' -> {describe_gpio(pin)}")
        return pin
    
    def read(self, handle: int) -> bool:
        """
        Read the level of a pin.
        
        Returns:
            True if the pin is HIGH, False if LOW
        """
        try:
            return self._gpio.input(handle) == self._gpio.HIGH
        except RuntimeError as e:
            raise TransientReadFailure(describe_gpio(handle), str(e)) from e
    
    def release(self, handle: int) -> None:
        if handle in self._claimed:
            self._claimed.discard(handle)
            self._gpio.cleanup(handle)
    
    def cleanup(self) -> None:
        """Release every pin still claimed"""
        for pin in sorted(self._claimed):
            try:
                self._gpio.cleanup(pin)
            except Exception as e:
                self._logger.error(f"Cleanup of {describe_gpio(pin)} failed", exception=e)
        if self._claimed:
            self._logger.info(f"GPIO provider cleaned up {len(self._claimed)} pins")
        self._claimed.clear()
        self._initialized = False
