"""
Line sampler - one polarity-corrected read of every pad line
"""

from typing import List

from pad_utils import OnceInMs

from .errors import TransientReadFailure
from .pad_builder import Pad


class LineSampler:
    """
    Reads the state of every line of a pad once per tick.
    
    Unconnected lines are always released. A TransientReadFailure on one
    line reports that line released for this tick only; there is no retry
    inside a tick, the next tick reads it again. When the provider may
    block, sample() must only be called from the deferred worker.
    """
    
    def __init__(self, logger, failure_log_interval_ms: int = 1000):
        """
        Args:
            logger: ClassLogger instance for logging
            failure_log_interval_ms: Minimum spacing of read-failure warnings
        """
        self._logger = logger
        self._failure_log = OnceInMs(failure_log_interval_ms)
    
    def sample(self, pad: Pad) -> List[bool]:
        """
        Sample all lines of the pad and store the result in its runtime state.
        
        Returns:
            List[bool]: pressed state per line, in table order
        """
        provider = pad.provider
        sampled: List[bool] = []
        
        for line in pad.descriptor.lines:
            if not line.connected:
                sampled.append(False)
                continue
            
            try:
                raw = provider.read(line.handle)
            except TransientReadFailure as e:
                pad.state.read_failures += 1
                self._log_failure(pad, e)
                sampled.append(False)
                continue
            
            # pressed = raw low for active-low wiring, raw high otherwise
            pressed = (not raw) if line.active_low else bool(raw)
            sampled.append(pressed)
        
        pad.state.store_sample(sampled)
        return sampled
    
    def _log_failure(self, pad: Pad, error: TransientReadFailure) -> None:
        if self._failure_log.should_execute():
            suppressed = self._failure_log.take_suppressed()
            suffix = f" ({suppressed} more suppressed)" if suppressed else ""
            self._logger.warning(f"{pad.identity.name}: {error}{suffix}")
