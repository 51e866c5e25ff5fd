"""
Error types shared by the grading engines.

Two channels never mix:
- ConfigurationError is raised for bugs in how an exercise was configured
  (unknown key, placeholder requirement violated, malformed rule book).
- A submitted value failing its rule is data: an explanation string plus
  zero points. It is never raised.
"""

from typing import Iterable, Optional


class ConfigurationError(Exception):
    """Fatal configuration problem with an actionable message."""

    def __init__(self, key: Optional[str], message: str, allowed: Optional[Iterable[str]] = None):
        self.key = key
        self.allowed = sorted(allowed) if allowed else None
        full_msg = f"{message}: {key}" if key is not None else message
        if self.allowed:
            full_msg += f". Allowed: {', '.join(self.allowed)}"
        super().__init__(full_msg)
