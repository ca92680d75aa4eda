"""Numba-accelerated array helpers used by the Hilbert-space builders.

This module contains small compiled utilities for the in-place canonical sort
of single-particle index buffers, lexicographic row comparisons, and lookups in
sorted configuration tables. They are the low-level kernels behind the
higher-level routines of :mod:`ed_hilbert.modeling`.

Most functions assume inputs are already validated and shaped consistently.
"""

import numpy as np
from numba import njit, prange
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "sort_with_sign_inplace",
    "compare_int_vectors",
    "config_to_index_binarysearch",
    "get_product_configs",
    "config_to_index",
    "fock_indices",
]


@njit(cache=True)
def sort_with_sign_inplace(buffer, fermionic, hard_core):
    """Insertion-sort an integer buffer in place and track the permutation sign.

    Each adjacent inversion is removed by a swap; for fermions every swap flips
    the sign. When two entries compare equal and ``hard_core`` is set, the sort
    stops immediately.

    Parameters
    ----------
    buffer : numpy.ndarray
        One-dimensional integer array (single-particle indices), sorted in place.
    fermionic : bool
        If ``True``, transpositions contribute a ``-1`` factor.
    hard_core : bool
        If ``True``, repeated entries reject the configuration.

    Returns
    -------
    int
        ``0`` if the buffer is rejected (left partially sorted), otherwise the
        sign ``+1`` or ``-1``.
    """
    sign = 1
    n_entries = buffer.shape[0]
    for ii in range(1, n_entries):
        jj = ii
        while jj > 0:
            left = buffer[jj - 1]
            right = buffer[jj]
            if left > right:
                buffer[jj - 1] = right
                buffer[jj] = left
                if fermionic:
                    sign = -sign
                jj -= 1
            elif left == right:
                if hard_core:
                    return 0
                break
            else:
                break
    return sign


@njit(cache=True)
def compare_int_vectors(vec_a, vec_b):
    """
    Lexicographically compare two 1D arrays 'vec_a' and 'vec_b'.

    Returns:
        int: -1, 0, or 1, indicating the lexicographical order of vec_a and vec_b.
    """
    for ii in range(vec_a.shape[0]):
        if vec_a[ii] < vec_b[ii]:
            return -1
        elif vec_a[ii] > vec_b[ii]:
            return 1
    return 0


@njit(cache=True)
def config_to_index_binarysearch(config, unique_configs):
    """Find a configuration index by binary search in a sorted table.

    Parameters
    ----------
    config : ndarray
        Configuration to search for.
    unique_configs : ndarray
        Lexicographically sorted configuration table, one row per config.

    Returns
    -------
    int
        Row index if found, otherwise ``-1``.
    """
    low = 0
    high = unique_configs.shape[0] - 1
    while low <= high:
        idx = (low + high) // 2
        comp_result = compare_int_vectors(unique_configs[idx], config)
        if comp_result == 0:
            return idx
        elif comp_result < 0:
            low = idx + 1
        else:
            high = idx - 1
    return -1


@njit(parallel=True, cache=True)
def get_product_configs(loc_dims):
    """Enumerate all product configurations for a set of local dimensions.

    The last entry varies fastest, so the rows come out lexicographically
    sorted.

    Parameters
    ----------
    loc_dims : ndarray
        One-dimensional integer array with the number of values of each entry.

    Returns
    -------
    ndarray
        Array of shape ``(prod(loc_dims), len(loc_dims))``, one configuration
        per row.
    """
    num_dims = loc_dims.shape[0]
    strides = np.ones(num_dims, dtype=np.int64)
    for dim_index in range(num_dims - 2, -1, -1):
        strides[dim_index] = strides[dim_index + 1] * loc_dims[dim_index + 1]
    total_configs = 1
    for dim in loc_dims:
        total_configs *= dim
    configs = np.zeros((total_configs, num_dims), dtype=np.int64)
    for ii in prange(total_configs):
        for dim_index in range(num_dims):
            configs[ii, dim_index] = (ii // strides[dim_index]) % loc_dims[dim_index]
    return configs


@njit(cache=True)
def config_to_index(config, loc_dims):
    """Convert a configuration into its row-major linear index.

    Parameters
    ----------
    config : numpy.ndarray
        One-dimensional array of local labels.
    loc_dims : numpy.ndarray
        Local dimensions in the same order as ``config``.

    Returns
    -------
    int
        Linear index, with the last entry as least significant digit.
    """
    linear_index = 0
    multiplier = 1
    for ii in range(config.shape[0] - 1, -1, -1):
        linear_index += config[ii] * multiplier
        multiplier *= loc_dims[ii]
    return linear_index


@njit(parallel=True, cache=True)
def fock_indices(occupations):
    """Index of each hard-core occupation row in the full occupation-number space.

    Parameters
    ----------
    occupations : ndarray
        ``(nstate, M)`` array of ``0``/``1`` occupations.

    Returns
    -------
    ndarray
        ``int64`` index of every row, reading it as a binary number with the
        first single-particle state as most significant bit.
    """
    nstate, nsingle = occupations.shape
    loc_dims = np.full(nsingle, 2, dtype=np.int64)
    indices = np.empty(nstate, dtype=np.int64)
    for row in prange(nstate):
        indices[row] = config_to_index(occupations[row], loc_dims)
    return indices
