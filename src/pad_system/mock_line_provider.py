"""
Mock line provider - in-memory lines for development and testing without GPIO
"""

import threading
import time
from typing import Dict, Iterable, Optional

from .errors import TransientReadFailure
from .interfaces import ILineProvider


class MockLineProvider(ILineProvider):
    """
    In-memory line provider.
    
    Connected lines hold a raw level (True = high) that tests or the CLI
    change with set_level(). Can pose as a blocking provider, optionally
    sleeping on every read, and can be told to fail upcoming reads.
    
    Example:
        provider = MockLineProvider({"up": True, "a": True}, may_block=True)
        provider.set_level("up", False)    # active-low "up" now pressed
        provider.fail_reads("a", count=1)  # next read of "a" fails
    """
    
    def __init__(self,
                 levels: Dict[str, bool],
                 may_block: bool = False,
                 read_delay: float = 0.0,
                 logger=None):
        """
        Args:
            levels: Connected line name -> initial raw level; other lines are absent
            may_block: Value advertised as the provider's may_block capability
            read_delay: Seconds every read() sleeps, to simulate bus latency
            logger: Optional ClassLogger instance
        """
        self.may_block = may_block
        self._levels = dict(levels)
        self._read_delay = read_delay
        self._logger = logger
        
        self._lock = threading.Lock()
        self._failures: Dict[str, int] = {}
        self._claimed = set()
        self._in_flight = 0
        
        self.reads = 0
        self.max_in_flight = 0
        self.released: set = set()
        self.setup_called = False
        self.cleaned_up = False
    
    @classmethod
    def all_released(cls, names: Iterable[str], active_low: bool = True, **kwargs) -> "MockLineProvider":
        """Provider with every named line connected and at its released level"""
        return cls({name: active_low for name in names}, **kwargs)
    
    def set_level(self, line_name: str, level: bool) -> None:
        if line_name not in self._levels:
            raise KeyError(f"Line '{line_name}' is not connected")
        with self._lock:
            self._levels[line_name] = bool(level)
    
    def fail_reads(self, line_name: str, count: int = 1) -> None:
        """Make the next count reads of a line raise TransientReadFailure"""
        with self._lock:
            self._failures[line_name] = self._failures.get(line_name, 0) + count
    
    def setup(self) -> None:
        self.setup_called = True
        if self._logger:
            self._logger.info(f"Mock provider ready: {sorted(self._levels)}")
    
    def is_connected(self, line_name: str) -> bool:
        return line_name in self._levels
    
    def resolve(self, line_name: str) -> Optional[str]:
        if line_name not in self._levels:
            return None
        self._claimed.add(line_name)
        return line_name
    
    def read(self, handle: str) -> bool:
        with self._lock:
            if handle not in self._claimed:
                raise RuntimeError(f"Read of unclaimed line '{handle}'")
            self.reads += 1
            self._in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self._in_flight)
            failures = self._failures.get(handle, 0)
            if failures:
                self._failures[handle] = failures - 1
            level = self._levels[handle]
        
        try:
            if self._read_delay:
                time.sleep(self._read_delay)
            if failures:
                raise TransientReadFailure(handle, "injected failure")
            return level
        finally:
            with self._lock:
                self._in_flight -= 1
    
    def release(self, handle: str) -> None:
        self._claimed.discard(handle)
        self.released.add(handle)
    
    def cleanup(self) -> None:
        for handle in list(self._claimed):
            self.release(handle)
        self.cleaned_up = True
