"""
Hybrid logger - per-class loggers sharing one colored console/file backend
"""

import logging
import sys
import traceback
from contextlib import suppress
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for stdout and brackets format"""
    
    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[94m',    # Blue
        'INFO': '\033[92m',     # Green
        'WARNING': '\033[93m',  # Yellow
        'ERROR': '\033[91m',    # Red
        'CRITICAL': '\033[95m', # Magenta
        'RESET': '\033[0m'      # Reset
    }
    
    def __init__(self, use_colors: bool = False):
        self.use_colors = use_colors
        # Format: [time] [level] [class] message
        super().__init__('[%(asctime)s] [%(levelname)s] [%(class_name)s] %(message)s')
    
    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, 'class_name'):
            record.class_name = 'Main'
            
        formatted = super().format(record)
        
        # Colors for stdout only
        if self.use_colors:
            color = self.COLORS.get(record.levelname, self.COLORS['RESET'])
            formatted = f"{color}{formatted}{self.COLORS['RESET']}"
        
        return formatted


class ClassLogger:
    """Per-class logger wrapper with level filtering"""
    
    def __init__(self, main_logger: logging.Logger, class_name: str, level: int):
        self.main_logger = main_logger
        self.class_name = class_name
        self.level = level
    
    def _log(self, level: int, message: str, exc_info: bool = False) -> None:
        if level >= self.level:
            exc_info_tuple = sys.exc_info() if exc_info else None
            record = self.main_logger.makeRecord(
                self.main_logger.name, level, "", 0, message, (), exc_info_tuple
            )
            record.class_name = self.class_name
            self.main_logger.handle(record)
    
    def debug(self, message: str) -> None:
        """Log debug message"""
        self._log(logging.DEBUG, message)
    
    def info(self, message: str) -> None:
        """Log info message"""
        self._log(logging.INFO, message)
    
    def warning(self, message: str) -> None:
        """Log warning message"""
        self._log(logging.WARNING, message)
    
    def error(self, message: str, exception: Optional[BaseException] = None) -> None:
        """Log error message with optional exception details"""
        if exception:
            exc_type = type(exception).__name__
            tb = traceback.extract_tb(exception.__traceback__)
            filename, lineno, _func, _text = tb[-1] if tb else ("unknown", 0, "unknown", "")
            enhanced_message = f"{message} | Type: {exc_type} | File: {filename} | Line: {lineno}"
            self._log(logging.ERROR, enhanced_message, exc_info=True)
        else:
            self._log(logging.ERROR, message)
    
    def critical(self, message: str) -> None:
        """Log critical message"""
        self._log(logging.CRITICAL, message)
    
    def flush(self) -> None:
        """Flush every handler of the shared backend"""
        for handler in self.main_logger.handlers:
            with suppress(OSError, ValueError):
                handler.flush()


class HybridLogger:
    """
    Logger factory with per-class logging and colored output.
    
    Every component of the joystick system takes a ClassLogger in its
    constructor; the host creates one HybridLogger and hands out class
    loggers with individual levels.
    
    Example:
        with HybridLogger("gpio-joystick", log_dir="logs") as hybrid:
            scheduler_logger = hybrid.get_class_logger("PollScheduler", logging.DEBUG)
    """
    
    def __init__(self, name: str = "gpio-joystick", log_dir: Optional[str] = "logs",
                 console: bool = True):
        """
        Args:
            name: Name of the backing logging.Logger (also the log file prefix)
            log_dir: Directory for the log file, or None to log to console only
            console: Attach the colored stdout handler
        """
        self.name = name
        self.log_dir = log_dir
        self.console = console
        self.main_logger: Optional[logging.Logger] = None
        self.class_loggers: Dict[str, ClassLogger] = {}
        self.log_file: Optional[Path] = None
        self._setup_main_logger()
        
    def _setup_main_logger(self) -> None:
        """Create main logger with file and console handlers"""
        self.main_logger = logging.getLogger(self.name)
        self.main_logger.setLevel(logging.DEBUG)
        self.main_logger.propagate = False
        
        # Clear any existing handlers
        for handler in self.main_logger.handlers[:]:
            self.main_logger.removeHandler(handler)
            handler.close()
        
        if self.console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(ColoredFormatter(use_colors=True))
            self.main_logger.addHandler(console_handler)
        
        if self.log_dir is not None:
            Path(self.log_dir).mkdir(parents=True, exist_ok=True)
            timestamp = datetime.now().strftime('%Y-%m-%d_%H-%M-%S')
            self.log_file = Path(self.log_dir) / f"{self.name}_{timestamp}.log"
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(ColoredFormatter(use_colors=False))
            self.main_logger.addHandler(file_handler)
    
    def get_class_logger(self, class_name: str, level: int = logging.INFO) -> ClassLogger:
        """
        Get a logger for a specific class with custom log level
        
        Args:
            class_name: Name of the class for log identification
            level: Minimum log level (logging.DEBUG, INFO, WARNING, ERROR, CRITICAL)
            
        Returns:
            ClassLogger: Logger instance for the specified class
        """
        if class_name not in self.class_loggers:
            self.class_loggers[class_name] = ClassLogger(
                self.main_logger, class_name, level
            )
        return self.class_loggers[class_name]
    
    def get_main_logger(self, level: int = logging.INFO) -> ClassLogger:
        """Get the main application logger (class_name="Main")"""
        return self.get_class_logger("Main", level)
    
    def cleanup(self) -> None:
        """Clean up logger resources"""
        if self.main_logger:
            for handler in self.main_logger.handlers:
                with suppress(OSError, ValueError):
                    handler.flush()
                    handler.close()
            self.main_logger.handlers.clear()
    
    def __enter__(self) -> "HybridLogger":
        return self
    
    def __exit__(self, exc_type, exc_value, tb) -> None:
        self.cleanup()
