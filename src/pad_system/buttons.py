"""
Button identifiers and built-in pad layouts
"""

from enum import IntEnum
from typing import List, Tuple

# Maximum number of pads a single host drives (P1 + P2)
MAX_DEVICES = 2

# Device identity advertised for every pad
VENDOR_ID = 0x0107
VERSION_ID = 0x0100


class ButtonId(IntEnum):
    """Button identifiers, valued with the Linux input event key codes"""
    BTN_A = 0x130
    BTN_B = 0x131
    BTN_X = 0x133
    BTN_Y = 0x134
    BTN_TL = 0x136
    BTN_TR = 0x137
    BTN_SELECT = 0x13a
    BTN_START = 0x13b
    BTN_MODE = 0x13c
    BTN_THUMBR = 0x13e
    BTN_DPAD_UP = 0x220
    BTN_DPAD_DOWN = 0x221
    BTN_DPAD_LEFT = 0x222
    BTN_DPAD_RIGHT = 0x223


class PadType(IntEnum):
    """Pad layout, selected by instance id (0 -> P1, 1 -> P2)"""
    GPIO = 1         # First pad on the main header
    GPIO_BPLUS = 2   # Second pad on the B+ header pins

    @classmethod
    def for_instance(cls, instance: int) -> "PadType":
        return cls.GPIO if instance == 0 else cls.GPIO_BPLUS


PAD_NAMES = {
    PadType.GPIO: "GPIO Joystick 1",
    PadType.GPIO_BPLUS: "GPIO Joystick 2",
}

# 12-line layout: d-pad + 8 buttons
STANDARD_LAYOUT: List[Tuple[str, ButtonId]] = [
    ("up", ButtonId.BTN_DPAD_UP),
    ("down", ButtonId.BTN_DPAD_DOWN),
    ("left", ButtonId.BTN_DPAD_LEFT),
    ("right", ButtonId.BTN_DPAD_RIGHT),
    ("start", ButtonId.BTN_START),
    ("select", ButtonId.BTN_SELECT),
    ("a", ButtonId.BTN_A),
    ("b", ButtonId.BTN_B),
    ("tr", ButtonId.BTN_TR),
    ("y", ButtonId.BTN_Y),
    ("x", ButtonId.BTN_X),
    ("tl", ButtonId.BTN_TL),
]

# 14-line layout adds the home/service and test buttons
EXTENDED_LAYOUT: List[Tuple[str, ButtonId]] = STANDARD_LAYOUT + [
    ("home", ButtonId.BTN_MODE),
    ("test", ButtonId.BTN_THUMBR),
]

# Default BCM pins for STANDARD_LAYOUT, in layout order
DEFAULT_PINS = {
    PadType.GPIO: [2, 15, 25, 20, 8, 7, 23, 22, 21, 16, 13, 12],
    PadType.GPIO_BPLUS: [9, 3, 4, 11, 17, 24, 19, 18, 14, 10, 5, 6],
}


def button_from_name(name: str) -> ButtonId:
    """
    Resolve a button name from configuration.
    
    Accepts the enum member name ("BTN_A") or the short form without the
    prefix, case-insensitive ("a", "dpad_up").
    
    Raises:
        KeyError: if the name matches no button
    """
    key = name.strip().upper()
    if not key.startswith("BTN_"):
        key = "BTN_" + key
    return ButtonId[key]
