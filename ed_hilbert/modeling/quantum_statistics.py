"""Quantum statistics of the particles populating a Hilbert space."""

from enum import Enum

__all__ = ["QuantumStatistics"]


class QuantumStatistics(Enum):
    """
    Closed statistics tag of a single-particle state.

    Bosonic components are always written before fermionic ones, so
    ``BOSONIC < FERMIONIC``.
    """

    BOSONIC = "bosonic"
    FERMIONIC = "fermionic"

    @property
    def rank(self) -> int:
        if self is QuantumStatistics.BOSONIC:
            return 0
        elif self is QuantumStatistics.FERMIONIC:
            return 1
        raise ValueError(f"unknown statistics {self!r}")

    @property
    def is_fermionic(self) -> bool:
        return self is QuantumStatistics.FERMIONIC

    @property
    def symbol(self) -> str:
        """Short label used when printing states: ``b`` or ``f``."""
        if self is QuantumStatistics.BOSONIC:
            return "b"
        elif self is QuantumStatistics.FERMIONIC:
            return "f"
        raise ValueError(f"unknown statistics {self!r}")

    def __lt__(self, other):
        if not isinstance(other, QuantumStatistics):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other):
        if not isinstance(other, QuantumStatistics):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other):
        if not isinstance(other, QuantumStatistics):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other):
        if not isinstance(other, QuantumStatistics):
            return NotImplemented
        return self.rank >= other.rank

    def __str__(self):
        return self.value

    @classmethod
    def from_string(cls, label: str) -> "QuantumStatistics":
        """Parse ``"bosonic"``, ``"fermionic"``, ``"b"`` or ``"f"`` (any case)."""
        if not isinstance(label, str):
            raise TypeError(f"label must be a STRING, not {type(label)}")
        key = label.strip().lower()
        for member in cls:
            if key in (member.value, member.symbol):
                return member
        raise ValueError(f"unknown statistics {label!r}")
