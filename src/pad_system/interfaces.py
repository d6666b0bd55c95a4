"""
Abstract interfaces for the external collaborators of a pad
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional

from .buttons import ButtonId


class ILineProvider(ABC):
    """
    Abstract interface for reading raw digital input lines.
    
    Separates the concern of reading hardware levels from pad scheduling.
    Implementations: RPi.GPIO, in-memory mock, or anything reached over a
    bus that needs a blocking round-trip.
    
    may_block is a static property of the implementation. The scheduler
    reads it once when the pad is built: providers that may block are
    sampled on the deferred worker thread, all others inline on the timer
    thread.
    """
    
    may_block: bool = False
    
    @abstractmethod
    def setup(self) -> None:
        """Initialize the provider hardware/resources"""
        pass
    
    @abstractmethod
    def is_connected(self, line_name: str) -> bool:
        """
        Check whether a line has a backing resource, without claiming it.
        
        Args:
            line_name: Line name from the pad mapping ("up", "a", ...)
        """
        pass
    
    @abstractmethod
    def resolve(self, line_name: str) -> Optional[Any]:
        """
        Claim the backing resource of a line.
        
        Args:
            line_name: Line name from the pad mapping
            
        Returns:
            An opaque handle passed back to read()/release(), or None if the
            line is not connected (absence is not an error)
        """
        pass
    
    @abstractmethod
    def read(self, handle: Any) -> bool:
        """
        Read the raw level of a resolved line.
        
        Args:
            handle: Handle returned by resolve()
            
        Returns:
            True for a high level, False for low (no polarity applied)
            
        Raises:
            TransientReadFailure: the level could not be read this time
        """
        pass
    
    @abstractmethod
    def release(self, handle: Any) -> None:
        """Release a resource claimed by resolve()"""
        pass
    
    @abstractmethod
    def cleanup(self) -> None:
        """Cleanup provider resources"""
        pass


class IEventSink(ABC):
    """
    Abstract interface for the downstream consumer of button events.
    
    A frame is a run of signal() calls, one per pad line in table order,
    terminated by end_frame(). The sink owns delivery and buffering.
    """
    
    def bind(self, identity, buttons: List[ButtonId]) -> None:
        """
        Called once when a pad starts using this sink (optional).

        Args:
            identity: PadIdentity of the pad
            buttons: Buttons whose line is connected, in table order
        """
        pass

    @abstractmethod
    def signal(self, button_id: ButtonId, pressed: bool) -> None:
        """Record the current state of one button"""
        pass
    
    @abstractmethod
    def end_frame(self) -> None:
        """Mark the end of the current frame"""
        pass
    
    def close(self) -> None:
        """Release sink resources (optional)"""
        pass
