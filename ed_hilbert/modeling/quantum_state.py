"""Single-particle and many-particle basis states.

This module provides :class:`SingleParticleState`, an immutable label made of a
quantum statistics and a tuple of degree-of-freedom indices, and
:class:`ManyParticleState`, an always-canonical tuple of single-particle states
whose equality and hash ignore the order in which the constituents were
supplied.
"""

from dataclasses import dataclass
from functools import total_ordering
import numpy as np
from ed_hilbert.tools import validate_parameters
from .quantum_statistics import QuantumStatistics
from .canonical_order import SortOutcome, canonicalize, is_canonical
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "SingleParticleState",
    "ManyParticleState",
]


@total_ordering
@dataclass(frozen=True)
class SingleParticleState:
    """
    Single-particle basis state.

    States are ordered by statistics first (bosons before fermions) and then
    lexicographically by ``dof_indices``. The indices can be integers or
    symbolic labels, as long as they compare with each other.
    """

    statistics: QuantumStatistics
    dof_indices: tuple

    def __post_init__(self):
        validate_parameters(statistics=self.statistics)
        if not isinstance(self.dof_indices, tuple):
            object.__setattr__(self, "dof_indices", tuple(self.dof_indices))

    def __lt__(self, other):
        if not isinstance(other, SingleParticleState):
            return NotImplemented
        if self.statistics is not other.statistics:
            return self.statistics < other.statistics
        return self.dof_indices < other.dof_indices

    @property
    def ndof(self) -> int:
        return len(self.dof_indices)

    def __str__(self):
        return f"|{self.statistics.symbol}_{self.dof_indices}⟩"


class ManyParticleState:
    """Many-particle basis state stored in canonical (ascending) order.

    Two states built from the same multiset of single-particle states compare
    and hash equal. Direct construction expects constituents that are already
    canonical; arbitrary orderings go through :meth:`from_unordered`, which
    also returns the permutation sign.

    Parameters
    ----------
    single_particle_states : iterable of SingleParticleState
        Constituents, already in canonical order.
    is_hard_core : bool, optional
        If ``True`` (default) the constituents must be strictly ascending,
        otherwise repeats are accepted.
    check : bool, optional
        If ``False`` the ordering check is skipped. Used by the enumerators,
        which produce canonical combinations by construction.

    Raises
    ------
    ValueError
        If ``check`` is set and the constituents are not canonical.
    """

    __slots__ = ("single_particle_states", "_hash")

    def __init__(self, single_particle_states, is_hard_core=True, check=True):
        states = tuple(single_particle_states)
        if check:
            validate_parameters(is_hard_core=is_hard_core, check=check)
            for state in states:
                if not isinstance(state, SingleParticleState):
                    raise TypeError(
                        f"constituents must be SingleParticleState, not {type(state)}"
                    )
            if not is_canonical(states, is_hard_core):
                raise ValueError(
                    f"constituents are not in canonical order: {states}; "
                    "use ManyParticleState.from_unordered"
                )
        self.single_particle_states = states
        self._hash = hash(states)

    @classmethod
    def from_unordered(cls, single_particle_states, statistics=None, is_hard_core=True):
        """Build a state from constituents given in any order.

        Parameters
        ----------
        single_particle_states : iterable of SingleParticleState
            Constituents in arbitrary order. The input is copied, not modified.
        statistics : QuantumStatistics, optional
            Statistics used for the sign. Defaults to the statistics of the
            first constituent.
        is_hard_core : bool, optional
            If ``True`` (default) repeated constituents reject the state.

        Returns
        -------
        tuple
            ``(state, outcome)``. ``state`` is ``None`` when ``outcome`` is
            ``SortOutcome.REJECTED``; otherwise ``outcome.sign`` is the sign
            picked up while reordering.
        """
        buffer = list(single_particle_states)
        if statistics is None:
            statistics = _default_statistics(buffer)
        outcome = canonicalize(buffer, statistics, is_hard_core)
        if outcome.is_rejected:
            return None, outcome
        return cls(buffer, is_hard_core=is_hard_core, check=False), outcome

    @property
    def nparticle(self) -> int:
        return len(self.single_particle_states)

    @property
    def statistics(self):
        """Statistics of the constituents, ``None`` for the empty state."""
        if not self.single_particle_states:
            return None
        return self.single_particle_states[0].statistics

    def __len__(self):
        return len(self.single_particle_states)

    def __iter__(self):
        return iter(self.single_particle_states)

    def __getitem__(self, index):
        return self.single_particle_states[index]

    def __contains__(self, state):
        return state in self.single_particle_states

    def __eq__(self, other):
        if not isinstance(other, ManyParticleState):
            return NotImplemented
        return self.single_particle_states == other.single_particle_states

    def __hash__(self):
        return self._hash

    def __repr__(self):
        return f"ManyParticleState({self.single_particle_states!r})"

    def __str__(self):
        if not self.single_particle_states:
            return "|vac⟩"
        return " ⊗ ".join(str(state) for state in self.single_particle_states)

    def create(self, state, statistics=None, is_hard_core=True):
        """Apply the creation operator of ``state`` to this basis state.

        The new particle is placed in front and moved to its canonical slot,
        so fermions pick up ``(-1)`` for every constituent smaller than
        ``state``. Bosonic occupation factors are not included.

        Returns
        -------
        tuple
            ``(new_state, outcome)``, ``(None, SortOutcome.REJECTED)`` if
            ``state`` is already occupied under the hard-core rule.
        """
        if not isinstance(state, SingleParticleState):
            raise TypeError(f"state must be a SingleParticleState, not {type(state)}")
        if statistics is None:
            statistics = state.statistics
        buffer = [state]
        buffer.extend(self.single_particle_states)
        outcome = canonicalize(buffer, statistics, is_hard_core)
        if outcome.is_rejected:
            return None, outcome
        return ManyParticleState(buffer, check=False), outcome

    def annihilate(self, state, statistics=None):
        """Apply the annihilation operator of ``state`` to this basis state.

        The particle is first moved to the front, so fermions pick up
        ``(-1)`` for every constituent before it.

        Returns
        -------
        tuple
            ``(new_state, outcome)``, ``(None, SortOutcome.REJECTED)`` if
            ``state`` is not occupied.
        """
        if not isinstance(state, SingleParticleState):
            raise TypeError(f"state must be a SingleParticleState, not {type(state)}")
        if statistics is None:
            statistics = state.statistics
        validate_parameters(statistics=statistics)
        try:
            position = self.single_particle_states.index(state)
        except ValueError:
            return None, SortOutcome.REJECTED
        remaining = (
            self.single_particle_states[:position]
            + self.single_particle_states[position + 1 :]
        )
        if statistics is QuantumStatistics.FERMIONIC and position % 2 == 1:
            outcome = SortOutcome.ODD
        else:
            outcome = SortOutcome.EVEN
        return ManyParticleState(remaining, check=False), outcome

    def indices(self, single_particle_space):
        """Single-particle indices of the constituents in ``single_particle_space``."""
        return np.array(
            [single_particle_space.index_of(s) for s in self.single_particle_states],
            dtype=np.int64,
        )

    def occupations(self, single_particle_space):
        """Occupation numbers over all states of ``single_particle_space``."""
        occupations = np.zeros(single_particle_space.nstate, dtype=np.int64)
        for index in self.indices(single_particle_space):
            occupations[index] += 1
        return occupations


def _default_statistics(states):
    if not states:
        # Empty input always sorts to EVEN
        return QuantumStatistics.FERMIONIC
    first = states[0]
    if not isinstance(first, SingleParticleState):
        raise TypeError(
            f"statistics is required for constituents of type {type(first)}"
        )
    return first.statistics
