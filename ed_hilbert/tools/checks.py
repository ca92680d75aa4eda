"""
This module provides type validation and timing helpers for the Hilbert-space builders.
"""

import numpy as np
from functools import wraps
from time import perf_counter
import logging

logger = logging.getLogger(__name__)

__all__ = [
    "validate_parameters",
    "get_time",
]


def get_time(func):
    """Times any function"""

    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = perf_counter()
        result = func(*args, **kwargs)
        end_time = perf_counter()
        tot_time = end_time - start_time
        logger.info(f"TIME {func.__name__} {round(tot_time, 5)}")
        return result

    return wrapper


_QUANTUM_STATISTICS = None


def _statistics_type():
    global _QUANTUM_STATISTICS
    if _QUANTUM_STATISTICS is None:
        # Resolved on first use: the modeling package depends on this module
        from ed_hilbert.modeling.quantum_statistics import QuantumStatistics

        _QUANTUM_STATISTICS = QuantumStatistics
    return _QUANTUM_STATISTICS


def _is_int(value):
    return isinstance(value, (int, np.integer)) and not isinstance(
        value, (bool, np.bool_)
    )


def validate_parameters(
    statistics=None,
    dof_ndof=None,
    dof_name=None,
    dof_values=None,
    nparticle=None,
    is_hard_core=None,
    lazy=None,
    check=None,
    index=None,
    array=None,
):
    """
    This is a function for type validation of parameters widely used in the library
    """
    # -----------------------------------------------------------------------------
    if statistics is not None:
        if not isinstance(statistics, _statistics_type()):
            raise TypeError(
                f"statistics must be a QuantumStatistics, not {type(statistics)}"
            )
    # -----------------------------------------------------------------------------
    if dof_ndof is not None and (
        not isinstance(dof_ndof, (tuple, list))
        or not all(_is_int(n) for n in dof_ndof)
    ):
        raise TypeError(f"dof_ndof should be a TUPLE of INTs, not {dof_ndof!r}")
    if dof_name is not None and (
        not isinstance(dof_name, (tuple, list))
        or not all(isinstance(name, str) for name in dof_name)
    ):
        raise TypeError(f"dof_name should be a TUPLE of STRs, not {dof_name!r}")
    if dof_values is not None and not isinstance(dof_values, (tuple, list)):
        raise TypeError(
            f"dof_values should be a TUPLE of iterables, not {type(dof_values)}"
        )
    # -----------------------------------------------------------------------------
    if nparticle is not None and not _is_int(nparticle):
        raise TypeError(f"nparticle should be INT, not {type(nparticle)}")
    if is_hard_core is not None and not isinstance(is_hard_core, (bool, np.bool_)):
        raise TypeError(f"is_hard_core should be a BOOL, not {type(is_hard_core)}")
    if lazy is not None and not isinstance(lazy, bool):
        raise TypeError(f"lazy should be a BOOL, not {type(lazy)}")
    if check is not None and not isinstance(check, bool):
        raise TypeError(f"check should be a BOOL, not {type(check)}")
    # -----------------------------------------------------------------------------
    if index is not None and not _is_int(index):
        raise TypeError(f"index should be a SCALAR INT, not {type(index)}")
    # -----------------------------------------------------------------------------
    if array is not None and not isinstance(array, np.ndarray):
        raise TypeError(f"array must be np.array, not {type(array)}")
    # -----------------------------------------------------------------------------
