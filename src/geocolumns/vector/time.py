# src/geocolumns/vector/time.py

"""
This module defines the time interval value attached to individual features.
"""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

__all__ = [
    "TimeInterval"
]

@dataclass(frozen=True)
class TimeInterval:
    """
    Optional start and end instants of a feature. A missing bound is open.

    Args:
        start (Optional[datetime]): First instant covered, or None if unbounded.
        end (Optional[datetime]): Last instant covered, or None if unbounded.
    """
    start: Optional[datetime] = None
    end: Optional[datetime] = None

    @property
    def is_unbounded(self) -> bool:
        return self.start is None and self.end is None

    def contains(self, instant: datetime) -> bool:
        """Checks whether an instant falls within the interval, bounds included."""
        if self.start is not None and instant < self.start:
            return False
        if self.end is not None and instant > self.end:
            return False
        return True

    def replace_start(self, start: Optional[datetime]) -> 'TimeInterval':
        return replace(self, start=start)

    def replace_end(self, end: Optional[datetime]) -> 'TimeInterval':
        return replace(self, end=end)
