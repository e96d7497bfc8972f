"""Confidence level model."""

from enum import Enum
from functools import total_ordering


@total_ordering
class Confidence(Enum):
    """Ordinal trust level of an extracted value (low < medium < high)."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _RANKS[self]

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Confidence):
            return NotImplemented
        return self.rank < other.rank

    def lower(self) -> "Confidence":
        """Demote one level; LOW stays LOW."""
        if self is Confidence.HIGH:
            return Confidence.MEDIUM
        return Confidence.LOW


_RANKS = {
    Confidence.LOW: 0,
    Confidence.MEDIUM: 1,
    Confidence.HIGH: 2,
}
