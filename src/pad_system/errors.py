"""
Exception hierarchy for the joystick system
"""


class JoystickError(Exception):
    """Base class for every error raised by pad_system"""


class ConfigError(JoystickError, ValueError):
    """Invalid poll interval or malformed pad mapping; the pad is not created"""


class NoConnectedLines(JoystickError):
    """Every line of the pad mapping resolved to 'absent'; registration refused"""


class TransientReadFailure(JoystickError):
    """
    A single line could not be read on this tick.
    
    Raised by line providers; the sampler reports the line as released for
    the current tick and reads it again on the next one.
    """
    
    def __init__(self, line_name: str, reason: str = ""):
        self.line_name = line_name
        self.reason = reason
        message = f"Read of line '{line_name}' failed"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class LockInterrupted(JoystickError):
    """Waiting for the activation lock was cancelled; state is unchanged"""


class ShutdownInProgress(JoystickError):
    """The pad is being detached and no longer accepts new consumers"""
