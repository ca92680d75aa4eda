"""Exact combination counting and lexicographic combination ranking.

Counts are always computed with Python integers (arbitrary precision) through
:func:`math.comb`. The compiled helpers work on ``int64`` and are only used
once the count has been checked to fit, see :func:`fits_int64`.

Combinations are ascending arrays of single-particle indices ``0 <= c_0 < ...
< c_{N-1} < M``; their rank is the position in ``itertools.combinations``
order.
"""

import math
import numpy as np
from numba import njit, prange
import logging
from .checks import _is_int, validate_parameters

logger = logging.getLogger(__name__)

__all__ = [
    "INT64_MAX",
    "count_combinations",
    "fits_int64",
    "binomial_table",
    "get_combination_rank",
    "combination_rank",
    "get_combination_unrank",
    "combination_unrank",
    "get_combination_configs",
    "combination_configs",
    "occupations_from_configs",
]

INT64_MAX = np.iinfo(np.int64).max


def count_combinations(nsingle, nparticle):
    """Exact number of ways to pick ``nparticle`` out of ``nsingle`` states."""
    if nparticle < 0 or nparticle > nsingle:
        return 0
    return math.comb(nsingle, nparticle)


def fits_int64(value):
    return -INT64_MAX - 1 <= value <= INT64_MAX


def binomial_table(nsingle, nparticle):
    """Table of the binomials needed to (un)rank combinations.

    Entry ``[a, b]`` holds ``C(a, b)`` for every pair with ``b <= nparticle``
    and ``a - b <= nsingle - nparticle``; all of them are bounded by
    ``C(nsingle, nparticle)``. The remaining entries are never read and are
    left at zero.

    Raises
    ------
    OverflowError
        If ``C(nsingle, nparticle)`` does not fit in ``int64``.
    """
    nstate = count_combinations(nsingle, nparticle)
    if not fits_int64(nstate):
        raise OverflowError(
            f"C({nsingle}, {nparticle}) = {nstate} does not fit in int64"
        )
    table = np.zeros((nsingle + 1, nparticle + 1), dtype=np.int64)
    n_holes = nsingle - nparticle
    for a in range(nsingle + 1):
        for b in range(min(a, nparticle) + 1):
            if a - b <= n_holes:
                table[a, b] = math.comb(a, b)
    return table


@njit(cache=True)
def get_combination_rank(config, nsingle, table):
    """Lexicographic rank of an ascending combination.

    Parameters
    ----------
    config : numpy.ndarray
        Ascending single-particle indices.
    nsingle : int
        Number of single-particle states ``M``.
    table : numpy.ndarray
        Output of :func:`binomial_table` for ``(M, len(config))``.

    Returns
    -------
    int
        Position of ``config`` in the combination enumeration.
    """
    nparticle = config.shape[0]
    rank = 0
    previous = -1
    for kk in range(nparticle):
        for value in range(previous + 1, config[kk]):
            rank += table[nsingle - 1 - value, nparticle - 1 - kk]
        previous = config[kk]
    return rank


@njit(cache=True)
def get_combination_unrank(rank, nsingle, nparticle, table):
    """Inverse of :func:`get_combination_rank`.

    ``rank`` must lie in ``[0, C(nsingle, nparticle))``; the table entries
    beyond that range are not filled.
    """
    config = np.empty(nparticle, dtype=np.int64)
    value = 0
    for kk in range(nparticle):
        while True:
            block = table[nsingle - 1 - value, nparticle - 1 - kk]
            if rank < block:
                break
            rank -= block
            value += 1
        config[kk] = value
        value += 1
    return config


def _check_table(table, nsingle, nparticle):
    if table is None:
        return binomial_table(nsingle, nparticle)
    validate_parameters(array=table)
    if table.shape != (nsingle + 1, nparticle + 1):
        raise ValueError(
            f"table shape {table.shape} does not match "
            f"C({nsingle}, {nparticle}): expected {(nsingle + 1, nparticle + 1)}"
        )
    return table


def combination_rank(config, nsingle, table=None):
    """Python entry point of :func:`get_combination_rank` with argument checks.

    Parameters
    ----------
    config : array_like
        Strictly ascending single-particle indices in ``[0, nsingle)``.
    nsingle : int
        Number of single-particle states ``M``.
    table : numpy.ndarray, optional
        Output of :func:`binomial_table` for ``(M, len(config))``; built on the
        fly when omitted.

    Returns
    -------
    int
        Position of ``config`` in the combination enumeration.

    Raises
    ------
    ValueError
        If ``config`` is not a strictly ascending combination of ``[0, M)`` or
        ``table`` has the wrong shape.
    """
    if not _is_int(nsingle):
        raise TypeError(f"nsingle should be INT, not {type(nsingle)}")
    config = np.asarray(config)
    if config.size == 0:
        config = config.astype(np.int64)
    if config.ndim != 1 or not np.issubdtype(config.dtype, np.integer):
        raise TypeError(
            f"config must be a 1D INTEGER array, not {config.dtype} "
            f"of shape {config.shape}"
        )
    nparticle = config.shape[0]
    if nparticle > nsingle:
        raise ValueError(f"{nparticle} particles do not fit in {nsingle} states")
    if nparticle > 0 and (config[0] < 0 or config[-1] >= nsingle):
        raise ValueError(f"config {config} has entries outside [0, {nsingle})")
    if np.any(np.diff(config) <= 0):
        raise ValueError(f"config {config} is not strictly ascending")
    table = _check_table(table, nsingle, nparticle)
    return int(get_combination_rank(config.astype(np.int64), nsingle, table))


def combination_unrank(rank, nsingle, nparticle, table=None):
    """Python entry point of :func:`get_combination_unrank` with argument checks.

    Raises
    ------
    IndexError
        If ``rank`` lies outside ``[0, C(nsingle, nparticle))``.
    ValueError
        If ``nparticle`` lies outside ``[0, nsingle]`` or ``table`` has the
        wrong shape.
    """
    validate_parameters(index=rank, nparticle=nparticle)
    if not _is_int(nsingle):
        raise TypeError(f"nsingle should be INT, not {type(nsingle)}")
    nstate = count_combinations(nsingle, nparticle)
    if nstate == 0:
        raise ValueError(f"nparticle must be in [0, {nsingle}], got {nparticle}")
    if rank < 0 or rank >= nstate:
        raise IndexError(f"rank {rank} out of range [0, {nstate})")
    table = _check_table(table, nsingle, nparticle)
    return get_combination_unrank(int(rank), nsingle, nparticle, table)


@njit(cache=True)
def get_combination_configs(nsingle, nparticle, nstate):
    """Enumerate all ascending combinations in lexicographic order.

    Parameters
    ----------
    nsingle : int
        Number of single-particle states ``M``.
    nparticle : int
        Number of particles ``N``.
    nstate : int
        ``C(M, N)``, computed exactly by the caller.

    Returns
    -------
    ndarray
        ``(nstate, nparticle)`` array; row ``i`` is the combination of rank ``i``.
    """
    configs = np.empty((nstate, nparticle), dtype=np.int64)
    current = np.arange(nparticle).astype(np.int64)
    for row in range(nstate):
        configs[row, :] = current
        # Rightmost entry that can still be raised
        kk = nparticle - 1
        while kk >= 0 and current[kk] == nsingle - nparticle + kk:
            kk -= 1
        if kk < 0:
            break
        current[kk] += 1
        for jj in range(kk + 1, nparticle):
            current[jj] = current[jj - 1] + 1
    return configs


def combination_configs(nsingle, nparticle):
    """Python entry point of :func:`get_combination_configs` with size checks."""
    nstate = count_combinations(nsingle, nparticle)
    if not fits_int64(nstate):
        raise OverflowError(
            f"C({nsingle}, {nparticle}) = {nstate} does not fit in int64"
        )
    return get_combination_configs(nsingle, nparticle, nstate)


@njit(parallel=True, cache=True)
def occupations_from_configs(configs, nsingle):
    """Occupation-number table of a set of combinations.

    Parameters
    ----------
    configs : ndarray
        ``(nstate, N)`` array of single-particle indices.
    nsingle : int
        Number of single-particle states ``M``.

    Returns
    -------
    ndarray
        ``(nstate, M)`` ``uint8`` array counting the particles in each state.
    """
    nstate = configs.shape[0]
    occupations = np.zeros((nstate, nsingle), dtype=np.uint8)
    for row in prange(nstate):
        for kk in range(configs.shape[1]):
            occupations[row, configs[row, kk]] += 1
    return occupations
