"""
Configuration: environment settings and per-exercise rule books.
"""

from .config import Config, GradingConfig, LogConfig, get_config
from .rulebook import (
    DEFAULT_RULES_DIR,
    RuleBook,
    RuleBookNotFoundError,
    list_rule_books,
    load_rule_book,
)

__all__ = [
    "Config",
    "GradingConfig",
    "LogConfig",
    "get_config",
    "DEFAULT_RULES_DIR",
    "RuleBook",
    "RuleBookNotFoundError",
    "list_rule_books",
    "load_rule_book",
]
