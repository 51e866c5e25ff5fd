"""
Logging system for the grading engines.
Provides human-readable console logs and optional file output.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Optional


# ANSI color codes for terminal output
class Colors:
    RESET = "\033[0m"
    RED = "\033[91m"
    GREEN = "\033[92m"
    YELLOW = "\033[93m"
    CYAN = "\033[96m"
    WHITE = "\033[97m"
    BOLD = "\033[1m"


class ColoredFormatter(logging.Formatter):
    """Custom formatter with colors for console output."""

    LEVEL_COLORS = {
        logging.DEBUG: Colors.CYAN,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record):
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        # Format a copy so file handlers sharing the record stay uncolored
        record = logging.makeLogRecord(record.__dict__)
        record.levelname = f"{color}{record.levelname}{Colors.RESET}"
        record.msg = f"{color}{record.msg}{Colors.RESET}"
        return super().format(record)


class GraderLogger:
    """
    Central logging system for grading runs.

    Features:
    - Console output with colors
    - Optional daily log file when a log directory is configured
    - Structured per-field verdict lines at DEBUG level
    """

    _instance: Optional['GraderLogger'] = None
    _initialized: bool = False

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __init__(self, log_dir: Optional[str] = None, log_level: str = "INFO"):
        if GraderLogger._initialized:
            return

        self.log_dir = Path(log_dir) if log_dir else None
        if self.log_dir is not None:
            self.log_dir.mkdir(parents=True, exist_ok=True)

        self.main_logger = self._create_logger("fieldgrade", log_level)

        GraderLogger._initialized = True

    def _create_logger(self, name: str, level: str) -> logging.Logger:
        """Create a configured logger instance."""
        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, level.upper()))
        logger.handlers.clear()

        console_handler = logging.StreamHandler()
        console_handler.setFormatter(ColoredFormatter(
            "%(asctime)s | %(levelname)s | %(message)s",
            datefmt="%H:%M:%S"
        ))
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            log_file = self.log_dir / f"grader_{datetime.now().strftime('%Y%m%d')}.log"
            file_handler = logging.FileHandler(log_file, encoding='utf-8')
            file_handler.setFormatter(logging.Formatter(
                "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S"
            ))
            logger.addHandler(file_handler)

        return logger

    def info(self, msg: str, *args, **kwargs):
        """Log info message."""
        self.main_logger.info(msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs):
        """Log debug message."""
        self.main_logger.debug(msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs):
        """Log warning message."""
        self.main_logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs):
        """Log error message."""
        self.main_logger.error(msg, *args, **kwargs)

    def verdict(self, key: str, passed: bool, points: int, value=None, **kwargs):
        """
        Log the outcome of one field test with structured format.

        Args:
            key: Rule or entry key
            passed: Whether the predicate held
            points: Points awarded (0 on failure)
            value: Submitted value (optional)
            **kwargs: Additional fields
        """
        if not self.main_logger.isEnabledFor(logging.DEBUG):
            return

        parts = [
            f"[{'PASS' if passed else 'FAIL'}]",
            f"key={key}",
            f"points={points}",
        ]
        if value is not None:
            parts.append(f"value={value!r}")
        for name, extra in kwargs.items():
            parts.append(f"{name}={extra}")

        self.main_logger.debug(" | ".join(parts))


# Global logger instance
_logger: Optional[GraderLogger] = None


def get_logger(log_dir: Optional[str] = None, log_level: str = "INFO") -> GraderLogger:
    """Get or create the global logger instance."""
    global _logger
    if _logger is None:
        _logger = GraderLogger(log_dir, log_level)
    return _logger


def setup_logger(log_dir: Optional[str] = None, log_level: str = "INFO") -> GraderLogger:
    """Initialize the logger with custom settings."""
    global _logger
    GraderLogger._initialized = False
    GraderLogger._instance = None
    _logger = GraderLogger(log_dir, log_level)
    return _logger
