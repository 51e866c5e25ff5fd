"""
Configuration management for grading runs.
Loads settings from environment variables with sensible defaults.

The engines never read the environment themselves; callers (the CLI, a
grading processor) read a Config and pass values in.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from ..utils.datetime_utils import DEFAULT_DATE_TIME_FORMAT

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass
class LogConfig:
    """
    Logging configuration.

    Loaded from environment variables:
    - GRADER_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR or CRITICAL
    - GRADER_LOG_DIR: Directory for daily log files (unset: console only)
    """
    level: str = "INFO"
    log_dir: Optional[str] = None

    def __post_init__(self):
        self.level = self.level.upper().strip()
        if self.level not in VALID_LOG_LEVELS:
            raise ValueError(
                f"GRADER_LOG_LEVEL must be one of {list(VALID_LOG_LEVELS)}, got '{self.level}'"
            )
        if self.log_dir is not None and not self.log_dir.strip():
            self.log_dir = None


@dataclass
class GradingConfig:
    """
    Grading configuration.

    Loaded from environment variables:
    - GRADER_DATE_TIME_FORMAT: strptime format for DATE_TIME rules
    - GRADER_RULES_DIR: Directory searched for rule books by id
    """
    date_time_format: str = DEFAULT_DATE_TIME_FORMAT
    rules_dir: str = "configs/rules"

    def __post_init__(self):
        if "%" not in self.date_time_format:
            raise ValueError(
                f"GRADER_DATE_TIME_FORMAT must be a strftime format, got '{self.date_time_format}'"
            )


class Config:
    """
    Central configuration manager.

    Loads configuration from environment variables (and a .env file when
    present) and provides typed access to all settings.
    """

    _instance: Optional['Config'] = None

    def __new__(cls, *args, **kwargs):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, env_file: str = ".env"):
        if self._initialized:
            return

        env_path = Path(env_file)
        if env_path.exists():
            load_dotenv(env_path, override=True)

        self.log = self._load_log_config()
        self.grading = self._load_grading_config()

        self._initialized = True

    def _load_log_config(self) -> LogConfig:
        """Load logging configuration from environment."""
        return LogConfig(
            level=os.getenv("GRADER_LOG_LEVEL", "INFO"),
            log_dir=os.getenv("GRADER_LOG_DIR"),
        )

    def _load_grading_config(self) -> GradingConfig:
        """Load grading configuration from environment."""
        return GradingConfig(
            date_time_format=os.getenv("GRADER_DATE_TIME_FORMAT", DEFAULT_DATE_TIME_FORMAT),
            rules_dir=os.getenv("GRADER_RULES_DIR", "configs/rules"),
        )

    @classmethod
    def reload(cls, env_file: str = ".env") -> 'Config':
        """Discard the cached instance and load again."""
        cls._instance = None
        return cls(env_file)


def get_config(env_file: str = ".env") -> Config:
    """Get or create the global config instance."""
    return Config(env_file)
