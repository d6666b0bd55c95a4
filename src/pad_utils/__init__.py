"""
Utilities package - Common utilities for the GPIO joystick system
"""

from .hybrid_logger import HybridLogger, ClassLogger, ColoredFormatter
from .gpio_utils import (
    gpio_to_physical,
    physical_to_gpio,
    describe_gpio,
    GPIO_TO_PHYSICAL,
    PHYSICAL_TO_GPIO,
    VALID_GPIOS,
)
from .once_in_ms import OnceInMs

__all__ = [
    'HybridLogger',
    'ClassLogger', 
    'ColoredFormatter',
    'gpio_to_physical',
    'physical_to_gpio',
    'describe_gpio',
    'GPIO_TO_PHYSICAL',
    'PHYSICAL_TO_GPIO',
    'VALID_GPIOS',
    'OnceInMs'
]
