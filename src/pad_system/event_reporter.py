"""
Event reporter - forwards one sampled frame to the event sink
"""

import time
from typing import List

from pad_utils import OnceInMs

from .pad_builder import Pad


class EventReporter:
    """
    Emits the full pad state to the sink every tick.
    
    Every line is signalled in table order whether or not it changed,
    followed by one end_frame(). Sink errors are the sink's concern: they
    are logged (rate-limited) and counted, never raised to the scheduler.
    """
    
    def __init__(self, logger, failure_log_interval_ms: int = 1000, clock=time.monotonic):
        self._logger = logger
        self._clock = clock
        self._failure_log = OnceInMs(failure_log_interval_ms)
    
    def report(self, pad: Pad, sampled: List[bool]) -> None:
        """
        Report one frame.
        
        Args:
            pad: Pad the sample belongs to
            sampled: pressed state per line, as returned by LineSampler.sample()
        """
        lines = pad.descriptor.lines
        if len(sampled) != len(lines):
            raise ValueError(
                f"Sample has {len(sampled)} entries, pad {pad.identity.name} has {len(lines)} lines"
            )
        
        sink = pad.sink
        try:
            for line, pressed in zip(lines, sampled):
                sink.signal(line.button, pressed)
            sink.end_frame()
        except Exception as e:
            pad.state.sink_failures += 1
            if self._failure_log.should_execute():
                self._logger.error(f"{pad.identity.name}: event sink failed", exception=e)
            return
        
        pad.state.last_sample_time = self._clock()
        pad.state.frames_reported += 1
