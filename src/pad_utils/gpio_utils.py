"""
GPIO utilities for the Raspberry Pi 40-pin header
Mapping between BCM GPIO numbers and physical header pin numbers.
"""

from typing import Optional

# BCM GPIO to physical header pin (40-pin header, Pi 2 and later)
GPIO_TO_PHYSICAL = {
    0: 27,   1: 28,   2: 3,    3: 5,
    4: 7,    5: 29,   6: 31,   7: 26,
    8: 24,   9: 21,   10: 19,  11: 23,
    12: 32,  13: 33,  14: 8,   15: 10,
    16: 36,  17: 11,  18: 12,  19: 35,
    20: 38,  21: 40,  22: 15,  23: 16,
    24: 18,  25: 22,  26: 37,  27: 13
}

# Physical Pin to GPIO mapping (reverse lookup)
PHYSICAL_TO_GPIO = {v: k for k, v in GPIO_TO_PHYSICAL.items()}

# GPIO numbers usable as button inputs
VALID_GPIOS = frozenset(GPIO_TO_PHYSICAL)


def gpio_to_physical(gpio_num: int) -> Optional[int]:
    """Convert GPIO number to physical pin number"""
    return GPIO_TO_PHYSICAL.get(gpio_num)


def physical_to_gpio(physical_pin: int) -> Optional[int]:
    """Convert physical pin number to GPIO number"""
    return PHYSICAL_TO_GPIO.get(physical_pin)


def describe_gpio(gpio_num: int) -> str:
    """Human-readable 'GPIO n (pin m)' label for log lines"""
    physical = gpio_to_physical(gpio_num)
    if physical is None:
        return f"GPIO{gpio_num}"
    return f"GPIO{gpio_num} (pin {physical})"
