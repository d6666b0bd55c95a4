"""
Pad construction and teardown
"""

from typing import List, Optional, Sequence

from .errors import ConfigError, NoConnectedLines
from .interfaces import IEventSink, ILineProvider
from .pad_state import LineMapping, LogicalLine, PadDescriptor, PadIdentity, PadRuntimeState


class Pad:
    """
    One joystick instance: its line table, runtime state and the provider
    and sink it talks to.
    
    Owns the resources resolved for its lines; release_resources() hands
    them back to the provider. Scheduling lives in JoystickDevice.
    """
    
    def __init__(self,
                 descriptor: PadDescriptor,
                 provider: ILineProvider,
                 sink: IEventSink,
                 identity: PadIdentity,
                 logger):
        self.descriptor = descriptor
        self.provider = provider
        self.sink = sink
        self.identity = identity
        self.state = PadRuntimeState(len(descriptor))
        self._logger = logger
        self._released = False
        
        # Decided once per pad, never per tick
        self.may_block = bool(provider.may_block)
    
    @property
    def released(self) -> bool:
        return self._released
    
    def release_resources(self) -> None:
        """
        Release every resolved line. Safe to call more than once.
        
        Must only run after the pad's scheduler is disarmed and its worker
        drained, otherwise a sampling pass could touch a released line.
        """
        if self._released:
            return
        self._released = True
        for line in self.descriptor.connected_lines:
            try:
                self.provider.release(line.handle)
            except Exception as e:
                self._logger.error(f"Failed to release line '{line.name}'", exception=e)
        self._logger.info(f"{self.identity.name}: line resources released")
    
    def __str__(self) -> str:
        connected = len(self.descriptor.connected_lines)
        return (
            f"Pad({self.identity.name}, phys={self.identity.phys}, "
            f"lines={len(self.descriptor)}, connected={connected}, "
            f"mode={'deferred' if self.may_block else 'inline'})"
        )


def validate_mapping(mapping: Sequence[LineMapping]) -> None:
    """
    Check a mapping table for structural errors.
    
    Raises:
        ConfigError: empty table, duplicate line names or duplicate buttons
    """
    if not mapping:
        raise ConfigError("Pad mapping must contain at least one line")
    
    seen_names = set()
    seen_buttons = set()
    for entry in mapping:
        if not entry.name:
            raise ConfigError("Pad mapping contains a line without a name")
        if entry.name in seen_names:
            raise ConfigError(f"Duplicate line name in pad mapping: '{entry.name}'")
        if entry.button in seen_buttons:
            raise ConfigError(f"Button {entry.button.name} is mapped to more than one line")
        seen_names.add(entry.name)
        seen_buttons.add(entry.button)


def build_pad(mapping: Sequence[LineMapping],
              provider: ILineProvider,
              sink: IEventSink,
              logger,
              instance: int = 0,
              name: Optional[str] = None) -> Pad:
    """
    Resolve every line of a mapping table through the provider and build a pad.
    
    Lines the provider cannot back are kept in the table and always report
    "not pressed". A pad with no connected line at all is refused.
    
    Args:
        mapping: Ordered (line name, button, polarity) table
        provider: Line provider the lines are resolved against
        sink: Event sink receiving the pad's frames
        logger: ClassLogger instance for logging
        instance: Instance id (0 -> P1, 1 -> P2)
        name: Optional display name overriding the default for the instance
        
    Returns:
        Pad: the constructed pad, owning its resolved resources
        
    Raises:
        ConfigError: the mapping is malformed
        NoConnectedLines: no line resolved to a backing resource
    """
    validate_mapping(mapping)
    identity = PadIdentity.for_instance(instance, name)
    
    lines: List[LogicalLine] = []
    try:
        for index, entry in enumerate(mapping):
            handle = provider.resolve(entry.name)
            lines.append(LogicalLine(
                index=index,
                name=entry.name,
                button=entry.button,
                active_low=entry.active_low,
                handle=handle,
            ))
    except Exception:
        # Hand back what was claimed before the failure
        for line in lines:
            if line.connected:
                provider.release(line.handle)
        raise
    
    descriptor = PadDescriptor(tuple(lines))
    if not descriptor.connected_lines:
        logger.error(f"{identity.name}: no lines connected; refusing to register")
        raise NoConnectedLines(f"{identity.name}: none of {len(lines)} lines is connected")
    
    absent = [line.name for line in lines if not line.connected]
    if absent:
        logger.info(f"{identity.name}: unconnected lines report released: {', '.join(absent)}")
    
    pad = Pad(descriptor, provider, sink, identity, logger)
    logger.info(
        f"Joystick {instance} configured: type={int(identity.pad_type)}, "
        f"vendor=0x{identity.vendor:04x}, product=0x{identity.product:04x}"
    )
    return pad
