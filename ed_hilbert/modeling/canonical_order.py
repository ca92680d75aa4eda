"""Canonical ordering of many-particle states and fermionic sign bookkeeping.

This module provides the routines that bring an arbitrary sequence of
single-particle states into ascending (canonical) order by adjacent
transpositions while keeping track of the parity of the permutation:

- :func:`canonicalize` works on any mutable sequence of mutually comparable
  objects (typically :class:`SingleParticleState` instances),
- :func:`canonicalize_indices` works on integer arrays of single-particle
  indices and runs the compiled kernel
  :func:`ed_hilbert.tools.sort_with_sign_inplace`.

Both return a :class:`SortOutcome`. A repeated single-particle state under the
hard-core rule is a routine outcome (``SortOutcome.REJECTED``), not an error.

The sort is an O(n^2) insertion sort that allocates nothing: occupations are
small in practice and the routine sits in the innermost loop of Hamiltonian
assembly. Sequences longer than
:func:`ed_hilbert.settings.get_sort_warning_threshold` are still sorted, but a
warning is logged.
"""

from enum import Enum
import numpy as np
from ed_hilbert.settings import get_sort_warning_threshold
from ed_hilbert.tools import validate_parameters, sort_with_sign_inplace
from .quantum_statistics import QuantumStatistics
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "SortOutcome",
    "canonicalize",
    "canonicalize_indices",
    "is_canonical",
]


class SortOutcome(Enum):
    """Result of a canonical sort: rejection, or the parity of the permutation."""

    REJECTED = "rejected"
    EVEN = "even"
    ODD = "odd"

    @property
    def sign(self) -> int:
        """``0`` for a rejected state, otherwise ``+1`` or ``-1``."""
        if self is SortOutcome.REJECTED:
            return 0
        elif self is SortOutcome.EVEN:
            return 1
        elif self is SortOutcome.ODD:
            return -1
        raise ValueError(f"unknown outcome {self!r}")

    @property
    def is_rejected(self) -> bool:
        return self is SortOutcome.REJECTED

    @classmethod
    def from_sign(cls, sign) -> "SortOutcome":
        """Translate the integer code ``0``/``+1``/``-1`` of the compiled kernel."""
        if sign == 0:
            return cls.REJECTED
        elif sign == 1:
            return cls.EVEN
        elif sign == -1:
            return cls.ODD
        raise ValueError(f"sign must be 0, +1 or -1, not {sign!r}")

    def compose(self, other: "SortOutcome") -> "SortOutcome":
        """Outcome of two successive reorderings (signs multiply)."""
        if not isinstance(other, SortOutcome):
            raise TypeError(f"other must be a SortOutcome, not {type(other)}")
        return SortOutcome.from_sign(self.sign * other.sign)


def _warn_if_long(n_entries):
    threshold = get_sort_warning_threshold()
    if n_entries > threshold:
        logger.warning(
            f"canonical sort of {n_entries} entries exceeds threshold {threshold}: "
            "consider an O(n log n) ordering for such occupations"
        )


def canonicalize(states, statistics, is_hard_core=True):
    """Sort a sequence of single-particle states in place into canonical order.

    Parameters
    ----------
    states : list or numpy.ndarray
        Mutable sequence of mutually comparable single-particle states. It is
        modified in place; copy it first if the original order is needed.
    statistics : QuantumStatistics
        ``FERMIONIC`` makes every transposition flip the sign.
    is_hard_core : bool, optional
        If ``True`` (default), two equal states reject the sequence.

    Returns
    -------
    SortOutcome
        ``REJECTED`` if a repeated state was met under the hard-core rule (the
        sequence is then left partially sorted and must be discarded),
        otherwise ``EVEN`` or ``ODD``. Bosonic sequences are always ``EVEN``.

    Raises
    ------
    TypeError
        If ``states`` is immutable or the flags have invalid types.
    """
    validate_parameters(statistics=statistics, is_hard_core=is_hard_core)
    if isinstance(states, tuple):
        raise TypeError("states must be a mutable sequence, not a TUPLE")
    n_entries = len(states)
    if n_entries < 2:
        return SortOutcome.EVEN
    _warn_if_long(n_entries)
    fermionic = statistics is QuantumStatistics.FERMIONIC
    odd = False
    for ii in range(1, n_entries):
        jj = ii
        while jj > 0:
            left = states[jj - 1]
            right = states[jj]
            if left == right:
                if is_hard_core:
                    return SortOutcome.REJECTED
                break
            if left > right:
                states[jj - 1] = right
                states[jj] = left
                if fermionic:
                    odd = not odd
                jj -= 1
            else:
                break
    return SortOutcome.ODD if odd else SortOutcome.EVEN


def canonicalize_indices(indices, statistics, is_hard_core=True):
    """Compiled counterpart of :func:`canonicalize` for single-particle indices.

    Parameters
    ----------
    indices : numpy.ndarray
        One-dimensional integer array, sorted in place.
    statistics : QuantumStatistics
        Quantum statistics of the particles.
    is_hard_core : bool, optional
        If ``True`` (default), repeated indices reject the configuration.

    Returns
    -------
    SortOutcome
    """
    validate_parameters(array=indices, statistics=statistics, is_hard_core=is_hard_core)
    if indices.ndim != 1 or not np.issubdtype(indices.dtype, np.integer):
        raise TypeError(
            f"indices must be a 1D integer array, not {indices.ndim}D {indices.dtype}"
        )
    n_entries = indices.shape[0]
    if n_entries < 2:
        return SortOutcome.EVEN
    _warn_if_long(n_entries)
    sign = sort_with_sign_inplace(
        indices, statistics is QuantumStatistics.FERMIONIC, bool(is_hard_core)
    )
    return SortOutcome.from_sign(sign)


def is_canonical(states, is_hard_core=True):
    """Check whether a sequence is already in canonical order.

    Strictly ascending under the hard-core rule, non-decreasing otherwise.
    """
    for ii in range(1, len(states)):
        left = states[ii - 1]
        right = states[ii]
        if left == right:
            if is_hard_core:
                return False
        elif left > right:
            return False
    return True
