"""
Pad data model - line table, identity and per-tick runtime state
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional, Tuple

from .buttons import ButtonId, PadType, PAD_NAMES, VENDOR_ID, VERSION_ID


@dataclass(frozen=True)
class LineMapping:
    """
    One row of a pad mapping table as it comes from configuration.
    
    pin is only meaningful to providers addressing lines by number
    (GPIOLineProvider); None means "not wired".
    """
    name: str
    button: ButtonId
    active_low: bool = True
    pin: Optional[int] = None


@dataclass(frozen=True)
class LogicalLine:
    """A resolved line of a pad. Immutable once the pad is built."""
    index: int
    name: str
    button: ButtonId
    active_low: bool
    handle: Optional[Any] = None
    
    @property
    def connected(self) -> bool:
        return self.handle is not None
    
    def __str__(self) -> str:
        polarity = "active-low" if self.active_low else "active-high"
        wiring = "connected" if self.connected else "absent"
        return f"{self.index}:{self.name}->{self.button.name} ({polarity}, {wiring})"


@dataclass(frozen=True)
class PadIdentity:
    """Input-device identity of one pad instance"""
    instance: int
    pad_type: PadType
    name: str
    phys: str
    vendor: int = VENDOR_ID
    product: int = 0
    version: int = VERSION_ID
    
    @classmethod
    def for_instance(cls, instance: int, name: Optional[str] = None) -> "PadIdentity":
        pad_type = PadType.for_instance(instance)
        return cls(
            instance=instance,
            pad_type=pad_type,
            name=name or PAD_NAMES[pad_type],
            phys=f"gpio-joystick.{instance}",
            product=int(pad_type),
        )


@dataclass
class PadDescriptor:
    """Ordered line -> button table of a pad"""
    lines: Tuple[LogicalLine, ...]
    
    def __len__(self) -> int:
        return len(self.lines)
    
    @property
    def connected_lines(self) -> List[LogicalLine]:
        return [line for line in self.lines if line.connected]
    
    @property
    def connected_buttons(self) -> List[ButtonId]:
        """Buttons worth advertising: only those with a wired line"""
        return [line.button for line in self.lines if line.connected]
    
    @property
    def buttons(self) -> List[ButtonId]:
        return [line.button for line in self.lines]


@dataclass
class PadRuntimeState:
    """
    Mutable per-pad sampling state.
    
    current/previous are written only by the sampling pass; the counters
    each have a single writer (sampler, reporter or scheduler) and are read
    without locking for statistics.
    """
    line_count: int
    current: List[bool] = field(init=False)
    previous: List[bool] = field(init=False)
    last_sample_time: Optional[float] = None
    frames_reported: int = 0
    read_failures: int = 0
    sink_failures: int = 0
    ticks_coalesced: int = 0
    
    def __post_init__(self):
        if self.line_count <= 0:
            raise ValueError(f"line_count must be positive, got {self.line_count}")
        self.current = [False] * self.line_count
        self.previous = [False] * self.line_count
    
    def store_sample(self, sampled: List[bool]) -> None:
        """Shift current into previous and keep the new sample"""
        if len(sampled) != self.line_count:
            raise ValueError(
                f"Sample length {len(sampled)} does not match line count {self.line_count}"
            )
        self.previous = self.current
        self.current = list(sampled)
    
    @property
    def changed(self) -> List[bool]:
        return [prev != cur for prev, cur in zip(self.previous, self.current)]
    
    def snapshot(self) -> dict:
        return {
            "pressed": [i for i, pressed in enumerate(self.current) if pressed],
            "last_sample_time": self.last_sample_time,
            "frames_reported": self.frames_reported,
            "read_failures": self.read_failures,
            "sink_failures": self.sink_failures,
            "ticks_coalesced": self.ticks_coalesced,
        }
