"""
Joystick system configuration
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from pad_utils import VALID_GPIOS

from .buttons import (
    DEFAULT_PINS,
    EXTENDED_LAYOUT,
    MAX_DEVICES,
    STANDARD_LAYOUT,
    PadType,
    button_from_name,
)
from .errors import ConfigError
from .pad_builder import validate_mapping
from .pad_state import LineMapping
from .poll_scheduler import DEFAULT_POLL_MS, validate_interval_ms


def normalize_poll_ms(value: Any) -> int:
    """
    Validate a poll interval from configuration.
    
    0 means "use the default" and becomes 1 ms; anything else must be a
    positive integer.
    
    Raises:
        ConfigError: negative or not an integer
    """
    if isinstance(value, int) and not isinstance(value, bool) and value == 0:
        return DEFAULT_POLL_MS
    return validate_interval_ms(value)


@dataclass
class PadConfig:
    """Line table and identity of one pad"""
    instance: int = 0
    lines: List[LineMapping] = field(default_factory=list)
    name: Optional[str] = None
    
    @property
    def pins(self) -> Dict[str, Optional[int]]:
        """Line name -> BCM pin (None for unwired lines)"""
        return {line.name: line.pin for line in self.lines}
    
    def validate(self) -> None:
        """Basic validation of the pad table"""
        if not (0 <= self.instance < MAX_DEVICES):
            raise ConfigError(f"Pad instance must be 0..{MAX_DEVICES - 1}, got {self.instance}")
        
        validate_mapping(self.lines)
        
        used_pins = set()
        for line in self.lines:
            if line.pin is None:
                continue
            if line.pin not in VALID_GPIOS:
                raise ConfigError(f"Line '{line.name}': GPIO {line.pin} out of valid range (0-27)")
            if line.pin in used_pins:
                raise ConfigError(f"Line '{line.name}': GPIO {line.pin} is used by another line")
            used_pins.add(line.pin)


@dataclass
class JoystickConfig:
    """Main joystick system configuration"""
    pads: List[PadConfig]
    poll_ms: int = DEFAULT_POLL_MS
    
    @property
    def pad_count(self) -> int:
        return len(self.pads)
    
    def validate(self) -> None:
        """Validate the poll interval, every pad and the pads against each other"""
        self.poll_ms = normalize_poll_ms(self.poll_ms)
        
        if not self.pads:
            raise ConfigError("At least one pad must be configured")
        if len(self.pads) > MAX_DEVICES:
            raise ConfigError(f"At most {MAX_DEVICES} pads are supported, got {len(self.pads)}")
        
        instances = set()
        pins = set()
        for pad in self.pads:
            pad.validate()
            if pad.instance in instances:
                raise ConfigError(f"Pad instance {pad.instance} configured twice")
            instances.add(pad.instance)
            
            pad_pins = {line.pin for line in pad.lines if line.pin is not None}
            if pins & pad_pins:
                raise ConfigError(f"GPIO pin conflict between pads: {sorted(pins & pad_pins)}")
            pins |= pad_pins


LAYOUTS = ("standard", "extended")


def default_pad_config(instance: int = 0, extended: bool = False) -> PadConfig:
    """
    Built-in table for P1 (main header) or P2 (B+ header), all active-low.
    
    The standard layout has 12 wired lines. The extended layout adds the
    home and test buttons, which have no default pin and stay unconnected
    until a configuration file gives them one.
    """
    if not (0 <= instance < MAX_DEVICES):
        raise ConfigError(f"Pad instance must be 0..{MAX_DEVICES - 1}, got {instance}")
    pins = DEFAULT_PINS[PadType.for_instance(instance)]
    lines = [
        LineMapping(name=name, button=button, active_low=True, pin=pin)
        for (name, button), pin in zip(STANDARD_LAYOUT, pins)
    ]
    if extended:
        lines += [
            LineMapping(name=name, button=button, active_low=True, pin=None)
            for name, button in EXTENDED_LAYOUT[len(STANDARD_LAYOUT):]
        ]
    return PadConfig(instance=instance, lines=lines)


def default_config(instances: Sequence[int] = (0,),
                   poll_ms: int = DEFAULT_POLL_MS,
                   extended: bool = False) -> JoystickConfig:
    """Configuration with the built-in table for every requested instance"""
    config = JoystickConfig(
        pads=[default_pad_config(instance, extended) for instance in instances],
        poll_ms=poll_ms,
    )
    config.validate()
    return config


def _line_from_dict(data: Dict[str, Any]) -> LineMapping:
    if not isinstance(data, dict):
        raise ConfigError(f"Line entry must be an object, got {data!r}")
    try:
        name = data["name"]
        button_name = data["button"]
    except KeyError as e:
        raise ConfigError(f"Line entry {data!r} is missing key {e}") from None
    if not isinstance(name, str):
        raise ConfigError(f"Line name must be a string, got {name!r}")
    
    try:
        button = button_from_name(str(button_name))
    except KeyError:
        raise ConfigError(f"Line '{name}': unknown button '{button_name}'") from None
    
    pin = data.get("pin")
    if pin is not None and (isinstance(pin, bool) or not isinstance(pin, int)):
        raise ConfigError(f"Line '{name}': pin must be an integer or null, got {pin!r}")
    
    active_low = data.get("active_low", True)
    if not isinstance(active_low, bool):
        raise ConfigError(f"Line '{name}': active_low must be true or false")
    
    return LineMapping(name=str(name), button=button, active_low=active_low, pin=pin)


def config_from_dict(data: Dict[str, Any]) -> JoystickConfig:
    """
    Build a configuration from parsed JSON.
    
    Pads without a "lines" key get the built-in table of their instance;
    "layout": "extended" adds the home and test lines to it.
    
    Example:
        {
            "poll_ms": 2,
            "pads": [
                {"instance": 0, "layout": "extended"},
                {"instance": 1, "name": "Player 2", "lines": [
                    {"name": "up", "button": "dpad_up", "pin": 9},
                    {"name": "a", "button": "a", "pin": 17, "active_low": false}
                ]}
            ]
        }
    """
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be an object")
    
    pads_data = data.get("pads", [{"instance": 0}])
    if not isinstance(pads_data, list):
        raise ConfigError(f"'pads' must be a list, got {pads_data!r}")
    
    pads: List[PadConfig] = []
    for pad_data in pads_data:
        if not isinstance(pad_data, dict):
            raise ConfigError(f"Pad entry must be an object, got {pad_data!r}")
        instance = pad_data.get("instance", len(pads))
        if isinstance(instance, bool) or not isinstance(instance, int):
            raise ConfigError(f"Pad instance must be an integer, got {instance!r}")
        
        if "lines" in pad_data:
            lines_data = pad_data["lines"]
            if not isinstance(lines_data, list):
                raise ConfigError(f"Pad {instance}: 'lines' must be a list, got {lines_data!r}")
            lines = [_line_from_dict(line) for line in lines_data]
            pad = PadConfig(instance=instance, lines=lines, name=pad_data.get("name"))
        else:
            layout = pad_data.get("layout", "standard")
            if layout not in LAYOUTS:
                raise ConfigError(f"Pad {instance}: layout must be one of {LAYOUTS}, got {layout!r}")
            pad = default_pad_config(instance, extended=(layout == "extended"))
            pad.name = pad_data.get("name")
        pads.append(pad)
    
    config = JoystickConfig(pads=pads, poll_ms=data.get("poll_ms", DEFAULT_POLL_MS))
    config.validate()
    return config


def load_config(path: Union[str, Path]) -> JoystickConfig:
    """
    Load and validate a JSON configuration file.
    
    Raises:
        ConfigError: unreadable file, invalid JSON or invalid content
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except OSError as e:
        raise ConfigError(f"Cannot read configuration {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    return config_from_dict(data)
