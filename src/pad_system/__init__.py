"""
Pad System Package

Polls GPIO-wired game pads on a fixed cadence and reports their buttons
to an event sink. Polling runs only while the pad has consumers and is
not suspended.
"""

from .activation import ActivationController
from .button_state import ButtonState
from .button_state_sink import ButtonStateSink
from .buttons import (
    ButtonId,
    PadType,
    MAX_DEVICES,
    STANDARD_LAYOUT,
    EXTENDED_LAYOUT,
    DEFAULT_PINS,
    button_from_name,
)
from .config import (
    JoystickConfig,
    PadConfig,
    default_config,
    default_pad_config,
    load_config,
    config_from_dict,
    normalize_poll_ms,
)
from .deferred_executor import DeferredWorkExecutor
from .errors import (
    JoystickError,
    ConfigError,
    NoConnectedLines,
    TransientReadFailure,
    LockInterrupted,
    ShutdownInProgress,
)
from .event_reporter import EventReporter
from .gpio_line_provider import GPIOLineProvider
from .interfaces import ILineProvider, IEventSink
from .joystick_device import JoystickDevice
from .joystick_host import JoystickHost
from .line_sampler import LineSampler
from .mock_line_provider import MockLineProvider
from .pad_builder import Pad, build_pad, validate_mapping
from .pad_state import LineMapping, LogicalLine, PadDescriptor, PadIdentity, PadRuntimeState
from .poll_scheduler import PollScheduler, DEFAULT_POLL_MS

__all__ = [
    "ActivationController",
    "ButtonState",
    "ButtonStateSink",
    "ButtonId",
    "PadType",
    "MAX_DEVICES",
    "STANDARD_LAYOUT",
    "EXTENDED_LAYOUT",
    "DEFAULT_PINS",
    "button_from_name",
    "JoystickConfig",
    "PadConfig",
    "default_config",
    "default_pad_config",
    "load_config",
    "config_from_dict",
    "normalize_poll_ms",
    "DeferredWorkExecutor",
    "JoystickError",
    "ConfigError",
    "NoConnectedLines",
    "TransientReadFailure",
    "LockInterrupted",
    "ShutdownInProgress",
    "EventReporter",
    "GPIOLineProvider",
    "ILineProvider",
    "IEventSink",
    "JoystickDevice",
    "JoystickHost",
    "LineSampler",
    "MockLineProvider",
    "Pad",
    "build_pad",
    "validate_mapping",
    "LineMapping",
    "LogicalLine",
    "PadDescriptor",
    "PadIdentity",
    "PadRuntimeState",
    "PollScheduler",
    "DEFAULT_POLL_MS",
]
