import numpy as np

__all__ = [
    "set_sort_warning_threshold",
    "get_sort_warning_threshold",
    "set_max_nstate",
    "get_max_nstate",
    "resolve_max_nstate",
]


_SORT_WARNING_THRESHOLD = 64
_MAX_NSTATE = 10**8


def set_sort_warning_threshold(threshold: int) -> None:
    global _SORT_WARNING_THRESHOLD
    if isinstance(threshold, (bool, np.bool_)) or not isinstance(
        threshold, (int, np.integer)
    ):
        raise TypeError(f"threshold must be INT, got {type(threshold)}")
    if threshold < 1:
        raise ValueError(f"threshold must be positive, got {threshold!r}")
    _SORT_WARNING_THRESHOLD = int(threshold)


def get_sort_warning_threshold() -> int:
    return _SORT_WARNING_THRESHOLD


def set_max_nstate(max_nstate) -> None:
    """Set the global ceiling on many-particle Hilbert-space dimensions.

    Parameters
    ----------
    max_nstate : int or None
        Largest admissible ``nstate``. ``None`` disables the check.
    """
    global _MAX_NSTATE
    _MAX_NSTATE = _check_max_nstate(max_nstate)


def get_max_nstate():
    return _MAX_NSTATE


def resolve_max_nstate(max_nstate=None):
    """Return ``max_nstate`` if given, otherwise the global ceiling."""
    if max_nstate is None:
        return _MAX_NSTATE
    return _check_max_nstate(max_nstate)


def _check_max_nstate(max_nstate):
    if max_nstate is None:
        return None
    if isinstance(max_nstate, (bool, np.bool_)) or not isinstance(
        max_nstate, (int, np.integer)
    ):
        raise TypeError(f"max_nstate must be INT or None, got {type(max_nstate)}")
    if max_nstate < 1:
        raise ValueError(f"max_nstate must be positive, got {max_nstate!r}")
    return int(max_nstate)
