"""
Button state sink - turns full-state frames into edge-detected ButtonState
snapshots and logs press/release
"""

import threading
from typing import Callable, Dict, List, Optional

from .button_state import ButtonState
from .buttons import ButtonId
from .interfaces import IEventSink

ButtonStateListener = Callable[[ButtonState], None]


class ButtonStateSink(IEventSink):
    """
    Event sink keeping the latest frame as a ButtonState.
    
    The reporter resends every button each tick; this sink diffs against
    the previous frame. Presses are logged at INFO, releases at DEBUG, and
    registered listeners get every frame that changed something.
    
    Example:
        sink = ButtonStateSink(logger)
        sink.register_listener(lambda state: print(state.just_pressed))
    """
    
    def __init__(self, logger, notify_unchanged: bool = False):
        """
        Args:
            logger: ClassLogger instance for logging
            notify_unchanged: Call listeners for every frame, not only changed ones
        """
        self._logger = logger
        self._notify_unchanged = notify_unchanged
        self._name = "pad"
        self._lock = threading.Lock()
        self._frame: Dict[ButtonId, bool] = {}
        self._order: List[ButtonId] = []
        self._previous: Dict[ButtonId, bool] = {}
        self._listeners: List[ButtonStateListener] = []
        self.latest: Optional[ButtonState] = None
        self.frames = 0
        self.press_counts: Dict[ButtonId, int] = {}
    
    def bind(self, identity, buttons: List[ButtonId]) -> None:
        self._name = identity.name
    
    def register_listener(self, callback: ButtonStateListener) -> None:
        """Subscribe a callback(state) to changed frames"""
        with self._lock:
            if callback not in self._listeners:
                self._listeners.append(callback)
    
    def signal(self, button_id: ButtonId, pressed: bool) -> None:
        if button_id not in self._frame:
            self._order.append(button_id)
        self._frame[button_id] = pressed
    
    def end_frame(self) -> None:
        buttons = list(self._order)
        current = [self._frame[b] for b in buttons]
        previous = [self._previous.get(b, False) for b in buttons]
        state = ButtonState(buttons=buttons, for_button=current, previous_state_of=previous)
        
        self._previous = dict(self._frame)
        self._frame.clear()
        self._order.clear()
        self.latest = state
        self.frames += 1
        
        for button in state.just_pressed:
            self.press_counts[button] = self.press_counts.get(button, 0) + 1
            self._logger.info(f"{self._name}: {button.name} pressed (#{self.press_counts[button]})")
        for button in state.just_released:
            self._logger.debug(f"{self._name}: {button.name} released")
        
        if state.any_changed or self._notify_unchanged:
            self._notify_listeners(state)
    
    def _notify_listeners(self, state: ButtonState) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(state)
            except Exception as e:
                self._logger.error(f"Error notifying button listener {listener!r}", exception=e)
