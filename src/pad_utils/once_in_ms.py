"""
Timing utility for throttling repeated work (mostly log lines) in poll loops
"""

import time


class OnceInMs:
    """
    Timer for throttling code execution to at most once per interval.
    
    The poll loop runs every millisecond, so a fault that repeats on every
    tick (a flaky line, an unplugged sink) would flood the log. Guard the
    log call with should_execute() instead.
    
    Example:
        self._read_failure_log = OnceInMs(1000)
        
        if self._read_failure_log.should_execute():
            self._logger.warning("Line 'up' read failed")
    """
    
    def __init__(self, interval_ms: int):
        """
        Args:
            interval_ms: Minimum milliseconds between executions
        """
        self.interval_ms = interval_ms
        self.interval = interval_ms / 1000.0
        self.last_execution = None
        self.suppressed = 0
    
    def should_execute(self) -> bool:
        """
        Check if enough time has passed and update timer if so.
        
        Returns:
            True if interval has passed (and timer is updated), False otherwise
        """
        current = time.monotonic()
        if self.last_execution is None or current - self.last_execution >= self.interval:
            self.last_execution = current
            return True
        self.suppressed += 1
        return False
    
    def take_suppressed(self) -> int:
        """Return how many calls were throttled since the last read, and reset"""
        count = self.suppressed
        self.suppressed = 0
        return count
    
    def reset(self):
        """Force next should_execute() call to return True"""
        self.last_execution = None
    
    def elapsed_ms(self) -> float:
        """Milliseconds elapsed since last execution"""
        if self.last_execution is None:
            return float("inf")
        return (time.monotonic() - self.last_execution) * 1000
