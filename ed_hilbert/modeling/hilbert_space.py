"""Single-particle and many-particle Hilbert spaces for exact diagonalization.

This module provides:

- :class:`SingleParticleHilbertSpace`, the Cartesian product of the values of
  each degree of freedom (dof), with the last dof varying fastest;
- :class:`ManyParticleHilbertSpace`, all size-``N`` combinations of distinct
  single-particle states in lexicographic order, with an exact state count and
  a fully populated ``state -> index`` map;
- :class:`CombinationSequence`, the restartable lazy view used when the
  many-particle basis is not materialized.

All indices are 0-based. Both spaces are read-only once built.
"""

import math
from collections.abc import Sequence
from itertools import combinations, product
import numpy as np
from scipy.sparse import csc_matrix
from ed_hilbert.settings import resolve_max_nstate
from ed_hilbert.tools import (
    validate_parameters,
    get_time,
    fits_int64,
    count_combinations,
    combination_configs,
    occupations_from_configs,
    config_to_index_binarysearch,
    get_product_configs,
    config_to_index,
    fock_indices,
)
from .quantum_state import SingleParticleState, ManyParticleState
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "SingleParticleHilbertSpace",
    "ManyParticleHilbertSpace",
    "CombinationSequence",
    "build_state_to_index_map",
]

# 2**62 is the largest power of two held by int64 indices
_MAX_FOCK_MODES = 62


@get_time
def build_state_to_index_map(state_list):
    """Return the ``state -> index`` dict of an ordered basis.

    Raises
    ------
    ValueError
        If the basis contains duplicated states.
    """
    state_to_index_map = {}
    for index, state in enumerate(state_list):
        state_to_index_map[state] = index
    if len(state_to_index_map) != len(state_list):
        raise ValueError("the basis contains duplicated states")
    return state_to_index_map


def _check_index(index, nstate):
    validate_parameters(index=index)
    if index < 0 or index >= nstate:
        raise IndexError(f"index {index} out of range [0, {nstate})")
    return int(index)


class SingleParticleHilbertSpace:
    """
    Finite single-particle Hilbert space.

    Each degree of freedom is given either by its number of values ``n``
    (values ``0, ..., n-1``) through ``dof_ndof``, or by an explicit finite
    collection of mutually comparable, hashable values through ``dof_values``.
    Values are stored sorted, so ``state_list`` is in ascending order.

    Parameters
    ----------
    statistics : QuantumStatistics
        Quantum statistics of the single-particle states.
    dof_ndof : tuple of int, optional
        Number of values of each dof, e.g. ``(2, 3)``.
    dof_name : tuple of str, optional
        Name of each dof. Defaults to ``("dof_0", "dof_1", ...)``.
    dof_values : tuple of iterables, optional
        Explicit values of each dof. Mutually exclusive with ``dof_ndof``.

    Raises
    ------
    TypeError
        If an argument has an invalid type.
    ValueError
        If ``dof_name`` does not match the number of dofs, a dof is empty or
        has repeated values, or no dof is given.
    """

    def __init__(self, statistics, dof_ndof=None, dof_name=None, dof_values=None):
        validate_parameters(
            statistics=statistics,
            dof_ndof=dof_ndof,
            dof_name=dof_name,
            dof_values=dof_values,
        )
        if (dof_ndof is None) == (dof_values is None):
            raise ValueError("exactly one of dof_ndof and dof_values must be given")
        if dof_ndof is not None:
            for ii, n_values in enumerate(dof_ndof):
                if n_values < 1:
                    raise ValueError(
                        f"dof {ii} must have at least 1 value, not {n_values}"
                    )
            dof_values = tuple(tuple(range(int(n))) for n in dof_ndof)
        else:
            dof_values = tuple(
                _sorted_dof_values(ii, values) for ii, values in enumerate(dof_values)
            )
        ndof = len(dof_values)
        if ndof == 0:
            raise ValueError("at least one degree of freedom is required")
        if dof_name is None:
            dof_name = tuple(f"dof_{ii}" for ii in range(ndof))
        elif len(dof_name) != ndof:
            raise ValueError(
                f"{len(dof_name)} dof names given for {ndof} degrees of freedom"
            )
        self.statistics = statistics
        self.ndof = ndof
        self.dof_name = tuple(dof_name)
        self.dof_values = dof_values
        self.dof_ndof = tuple(len(values) for values in dof_values)
        # Last dof varies fastest
        self.state_list = tuple(
            SingleParticleState(statistics, dof_indices)
            for dof_indices in product(*dof_values)
        )
        self.nstate = len(self.state_list)
        self.state_to_index_map = build_state_to_index_map(self.state_list)
        logger.info("----------------------------------------------------")
        logger.info(
            f"SINGLE-PARTICLE SPACE {statistics}: {self.nstate} states, "
            f"dofs {dict(zip(self.dof_name, self.dof_ndof))}"
        )

    @classmethod
    def from_dof_ranges(cls, statistics, dof_ranges):
        """Build a space from an ordered list of ``(name, values)`` pairs.

        ``values`` is either a number of values ``n`` or an iterable of values.

        Examples
        --------
        >>> space = SingleParticleHilbertSpace.from_dof_ranges(
        ...     QuantumStatistics.FERMIONIC, [("site", 4), ("spin", ("dn", "up"))]
        ... )
        >>> space.nstate
        8
        """
        if not isinstance(dof_ranges, (list, tuple)):
            raise TypeError(
                f"dof_ranges must be a LIST of pairs, not {type(dof_ranges)}"
            )
        dof_name = []
        dof_values = []
        for entry in dof_ranges:
            if not isinstance(entry, (list, tuple)) or len(entry) != 2:
                raise ValueError(
                    f"dof_ranges entries must be (name, values), not {entry!r}"
                )
            name, values = entry
            dof_name.append(name)
            if isinstance(values, (int, np.integer)) and not isinstance(values, bool):
                if values < 1:
                    raise ValueError(
                        f"dof {name!r} must have at least 1 value, not {values}"
                    )
                values = range(int(values))
            dof_values.append(values)
        return cls(statistics, dof_name=tuple(dof_name), dof_values=tuple(dof_values))

    def __len__(self):
        return self.nstate

    def __iter__(self):
        return iter(self.state_list)

    def __contains__(self, state):
        return state in self.state_to_index_map

    def __repr__(self):
        return (
            f"SingleParticleHilbertSpace(statistics={self.statistics}, "
            f"dof_name={self.dof_name}, dof_ndof={self.dof_ndof})"
        )

    def index_of(self, state):
        """Index of ``state``; raises ``KeyError`` if it does not belong here."""
        try:
            return self.state_to_index_map[state]
        except KeyError:
            raise KeyError(f"{state} is not a state of {self!r}") from None

    def state_at(self, index):
        """State at ``index``; raises ``IndexError`` outside ``[0, nstate)``."""
        return self.state_list[_check_index(index, self.nstate)]

    def state_from_dof(self, *dof_indices):
        """Return the stored state labelled by one value per dof."""
        if len(dof_indices) != self.ndof:
            raise ValueError(f"{len(dof_indices)} values given for {self.ndof} dofs")
        state = SingleParticleState(self.statistics, tuple(dof_indices))
        return self.state_list[self.index_of(state)]

    def dof_configs(self):
        """Positions of the dof values of every state.

        Returns
        -------
        numpy.ndarray
            ``(nstate, ndof)`` integer array, row ``i`` holds for each dof the
            position of the value of ``state_list[i]`` inside ``dof_values``.
        """
        return get_product_configs(np.asarray(self.dof_ndof, dtype=np.int64))

    def index_from_positions(self, positions):
        """State index from the positions of its dof values, see :meth:`dof_configs`."""
        positions = np.asarray(positions, dtype=np.int64)
        if positions.shape != (self.ndof,):
            raise ValueError(
                f"positions must have shape ({self.ndof},), not {positions.shape}"
            )
        loc_dims = np.asarray(self.dof_ndof, dtype=np.int64)
        if np.any(positions < 0) or np.any(positions >= loc_dims):
            raise IndexError(f"positions {positions} out of range {self.dof_ndof}")
        return int(config_to_index(positions, loc_dims))


def _sorted_dof_values(dof_index, values):
    try:
        values = tuple(values)
    except TypeError:
        raise TypeError(
            f"values of dof {dof_index} must be iterable, not {type(values)}"
        ) from None
    if len(values) == 0:
        raise ValueError(f"dof {dof_index} has no values")
    try:
        sorted_values = tuple(sorted(values))
    except TypeError as err:
        raise TypeError(f"values of dof {dof_index} are not comparable: {err}") from err
    if len(set(sorted_values)) != len(sorted_values):
        raise ValueError(f"dof {dof_index} has repeated values: {values}")
    return sorted_values


class CombinationSequence(Sequence):
    """Restartable lazy view over all combinations of ``nparticle`` states.

    Every iteration restarts ``itertools.combinations`` from the beginning and
    yields canonical :class:`ManyParticleState` objects one at a time. Random
    access unranks the combination with exact integer arithmetic.

    Parameters
    ----------
    single_particle_states : tuple of SingleParticleState
        Ascending single-particle basis.
    nparticle : int
        Number of particles.
    """

    def __init__(self, single_particle_states, nparticle):
        self._states = tuple(single_particle_states)
        self.nparticle = nparticle
        self.nstate = count_combinations(len(self._states), nparticle)

    def __len__(self):
        return self.nstate

    def __iter__(self):
        for combination in combinations(self._states, self.nparticle):
            yield ManyParticleState(combination, check=False)

    def __getitem__(self, index):
        if isinstance(index, slice):
            raise TypeError("CombinationSequence does not support slicing")
        validate_parameters(index=index)
        if index < 0:
            index += self.nstate
        if index < 0 or index >= self.nstate:
            raise IndexError(f"index out of range [0, {self.nstate})")
        return ManyParticleState(self._unrank(int(index)), check=False)

    def __repr__(self):
        return (
            f"CombinationSequence(nsingle={len(self._states)}, "
            f"nparticle={self.nparticle})"
        )

    def _unrank(self, rank):
        nsingle = len(self._states)
        picks = []
        value = 0
        for kk in range(self.nparticle):
            while True:
                block = math.comb(nsingle - 1 - value, self.nparticle - 1 - kk)
                if rank < block:
                    break
                rank -= block
                value += 1
            picks.append(self._states[value])
            value += 1
        return tuple(picks)


class ManyParticleHilbertSpace:
    """
    Finite many-particle Hilbert space of ``nparticle`` hard-core particles.

    The basis is made of all combinations of ``nparticle`` distinct states of
    ``single_particle_space``, enumerated in lexicographic order of their
    single-particle indices; the position in that order is the index. The
    number of states ``C(M, N)`` is computed exactly up front and checked
    against ``max_nstate`` before any enumeration.

    Parameters
    ----------
    single_particle_space : SingleParticleHilbertSpace
        Owning single-particle space. It is referenced, not copied.
    nparticle : int
        Number of particles, ``0 <= nparticle <= single_particle_space.nstate``.
    lazy : bool, optional
        If ``False`` (default) ``state_list`` is a tuple of all states. If
        ``True`` it is a :class:`CombinationSequence` regenerated on demand;
        ``state_to_index_map`` is fully built in both cases.
    max_nstate : int, optional
        Ceiling on ``nstate``. Defaults to
        :func:`ed_hilbert.settings.get_max_nstate`.

    Raises
    ------
    TypeError
        If an argument has an invalid type.
    ValueError
        If ``nparticle`` is negative or larger than the number of
        single-particle states, or ``nstate`` exceeds ``max_nstate``.
    """

    def __init__(self, single_particle_space, nparticle, lazy=False, max_nstate=None):
        if not isinstance(single_particle_space, SingleParticleHilbertSpace):
            raise TypeError(
                "single_particle_space must be a SingleParticleHilbertSpace, "
                f"not {type(single_particle_space)}"
            )
        validate_parameters(nparticle=nparticle, lazy=lazy)
        nsingle = single_particle_space.nstate
        if nparticle < 0:
            raise ValueError(f"nparticle must be non-negative, not {nparticle}")
        if nparticle > nsingle:
            raise ValueError(
                f"nparticle={nparticle} exceeds the {nsingle} single-particle states"
            )
        nparticle = int(nparticle)
        nstate = count_combinations(nsingle, nparticle)
        ceiling = resolve_max_nstate(max_nstate)
        if ceiling is not None and nstate > ceiling:
            raise ValueError(
                f"C({nsingle}, {nparticle}) = {nstate} states exceed "
                f"max_nstate={ceiling}"
            )
        self.single_particle_space = single_particle_space
        self.statistics = single_particle_space.statistics
        self.nparticle = nparticle
        self.nstate = nstate
        self.is_lazy = lazy
        logger.info("----------------------------------------------------")
        logger.info(
            f"MANY-PARTICLE SPACE {self.statistics}: {nparticle} particles in "
            f"{nsingle} states"
        )
        logger.info(f"DIM: {nstate}, fits int64: {self.nstate_fits_int64}")
        sequence = CombinationSequence(single_particle_space.state_list, nparticle)
        self.state_list = sequence if lazy else tuple(sequence)
        self.state_to_index_map = build_state_to_index_map(self.state_list)
        self._state_configs = None

    @classmethod
    def materialized(cls, single_particle_space, nparticle, max_nstate=None):
        """Space whose ``state_list`` is a fully stored tuple."""
        return cls(single_particle_space, nparticle, lazy=False, max_nstate=max_nstate)

    @classmethod
    def streaming(cls, single_particle_space, nparticle, max_nstate=None):
        """Space whose ``state_list`` is a restartable :class:`CombinationSequence`."""
        return cls(single_particle_space, nparticle, lazy=True, max_nstate=max_nstate)

    @property
    def nsingle(self) -> int:
        return self.single_particle_space.nstate

    @property
    def nstate_fits_int64(self) -> bool:
        return fits_int64(self.nstate)

    @property
    def index_dtype(self):
        """``numpy.int64`` if every index narrows to 64 bits, else ``object``."""
        return np.dtype(np.int64) if self.nstate_fits_int64 else np.dtype(object)

    def __len__(self):
        return self.nstate

    def __iter__(self):
        return iter(self.state_list)

    def __contains__(self, state):
        return state in self.state_to_index_map

    def __repr__(self):
        return (
            f"ManyParticleHilbertSpace(statistics={self.statistics}, "
            f"nsingle={self.nsingle}, nparticle={self.nparticle}, "
            f"lazy={self.is_lazy})"
        )

    def index_of(self, state):
        """Index of ``state``; raises ``KeyError`` if it does not belong here."""
        try:
            return self.state_to_index_map[state]
        except KeyError:
            raise KeyError(f"{state} is not a state of {self!r}") from None

    def state_at(self, index):
        """State at ``index``; raises ``IndexError`` outside ``[0, nstate)``."""
        return self.state_list[_check_index(index, self.nstate)]

    def state_configs(self):
        """Single-particle indices of every basis state.

        Returns
        -------
        numpy.ndarray
            ``(nstate, nparticle)`` ``int64`` array; row ``i`` holds the
            ascending single-particle indices of ``state_at(i)``. Rows are
            lexicographically sorted.

        Raises
        ------
        OverflowError
            If ``nstate`` does not fit in ``int64``.
        """
        if self._state_configs is None:
            self._state_configs = combination_configs(self.nsingle, self.nparticle)
        return self._state_configs

    def occupation_configs(self):
        """``(nstate, nsingle)`` ``uint8`` occupation numbers of every basis state."""
        return occupations_from_configs(self.state_configs(), self.nsingle)

    def config_index(self, config):
        """Index of a row of ascending single-particle indices, ``-1`` if absent."""
        config = np.asarray(config, dtype=np.int64)
        if config.shape != (self.nparticle,):
            raise ValueError(
                f"config must have shape ({self.nparticle},), not {config.shape}"
            )
        return int(config_to_index_binarysearch(config, self.state_configs()))

    @get_time
    def fock_projector(self):
        """Embedding of this fixed-particle-number sector into the full Fock space.

        Returns
        -------
        scipy.sparse.csc_matrix
            Binary matrix of shape ``(2**nsingle, nstate)`` with one nonzero per
            column. The Fock index reads the occupations as a binary number with
            single-particle state ``0`` as most significant bit.

        Raises
        ------
        OverflowError
            If ``2**nsingle`` does not fit in ``int64``.
        """
        if self.nsingle > _MAX_FOCK_MODES:
            raise OverflowError(
                f"2**{self.nsingle} Fock states do not fit in int64 indices"
            )
        logger.info("----------------------------------------------------")
        logger.info("Projector from particle-number sector to full Fock space")
        rows = fock_indices(self.occupation_configs())
        cols = np.arange(self.nstate, dtype=np.int64)
        data = np.ones(self.nstate, dtype=np.float64)
        return csc_matrix((data, (rows, cols)), shape=(2**self.nsingle, self.nstate))
