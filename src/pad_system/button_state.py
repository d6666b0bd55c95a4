"""
ButtonState - immutable frame snapshot with calculated edge fields
"""

from dataclasses import dataclass, field
from typing import List

from .buttons import ButtonId


@dataclass
class ButtonState:
    """
    Snapshot of one reported frame with automatic edge detection.
    
    Usage:
        state = ButtonState([ButtonId.BTN_A, ButtonId.BTN_B], [True, False], [False, False])
        print(f"A changed: {state.was_changed[0]}")
        print(f"A current: {state.for_button[0]}")
    """
    buttons: List[ButtonId]          # Button of each slot, in pad table order
    for_button: List[bool]           # Current state: [button0, button1, ...]
    previous_state_of: List[bool]    # Previous state: [button0_prev, button1_prev, ...]
    
    # Calculated fields (not in constructor, computed automatically)
    was_changed: List[bool] = field(init=False)      # Per-button edge detection
    total_buttons_pressed: int = field(init=False)   # Count of currently pressed buttons
    any_changed: bool = field(init=False)            # True if any button changed state
    
    def __post_init__(self):
        """Calculate derived fields and validate inputs after construction"""
        if not isinstance(self.for_button, list):
            raise TypeError("for_button must be a list of bool")
        if not isinstance(self.previous_state_of, list):
            raise TypeError("previous_state_of must be a list of bool")
        if not (len(self.buttons) == len(self.for_button) == len(self.previous_state_of)):
            raise ValueError(
                f"State lists must have same length: buttons={len(self.buttons)}, "
                f"for_button={len(self.for_button)}, previous_state_of={len(self.previous_state_of)}"
            )
        if not all(isinstance(x, bool) for x in self.for_button):
            raise TypeError("All elements in for_button must be bool")
        if not all(isinstance(x, bool) for x in self.previous_state_of):
            raise TypeError("All elements in previous_state_of must be bool")
        
        self.was_changed = [
            previous != current
            for previous, current in zip(self.previous_state_of, self.for_button)
        ]
        self.total_buttons_pressed = sum(self.for_button)
        self.any_changed = any(self.was_changed)
    
    def get_button_count(self) -> int:
        """Get total number of buttons in this state"""
        return len(self.for_button)
    
    def is_pressed(self, button: ButtonId) -> bool:
        return self.for_button[self.buttons.index(button)]
    
    @property
    def pressed_buttons(self) -> List[ButtonId]:
        return [b for b, pressed in zip(self.buttons, self.for_button) if pressed]
    
    @property
    def just_pressed(self) -> List[ButtonId]:
        """Rising edges: changed and now pressed"""
        return [
            b for b, changed, pressed in zip(self.buttons, self.was_changed, self.for_button)
            if changed and pressed
        ]
    
    @property
    def just_released(self) -> List[ButtonId]:
        """Falling edges: changed and now released"""
        return [
            b for b, changed, pressed in zip(self.buttons, self.was_changed, self.for_button)
            if changed and not pressed
        ]
    
    def __str__(self) -> str:
        pressed = [b.name for b in self.pressed_buttons]
        changed = [b.name for b, c in zip(self.buttons, self.was_changed) if c]
        return (
            f"ButtonState("
            f"pressed={pressed}, "
            f"changed={changed}, "
            f"total_pressed={self.total_buttons_pressed}"
            f")"
        )
