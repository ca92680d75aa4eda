import pytest

from ed_hilbert import (
    set_sort_warning_threshold,
    get_sort_warning_threshold,
    set_max_nstate,
    get_max_nstate,
)
from ed_hilbert.settings import resolve_max_nstate


def test_defaults():
    assert get_sort_warning_threshold() == 64
    assert get_max_nstate() == 10**8


def test_setters(restore_settings):
    set_sort_warning_threshold(8)
    assert get_sort_warning_threshold() == 8
    set_max_nstate(None)
    assert get_max_nstate() is None
    assert resolve_max_nstate() is None
    assert resolve_max_nstate(5) == 5


@pytest.mark.parametrize("value, error", [(0, ValueError), (2.5, TypeError), (True, TypeError)])
def test_invalid_threshold(value, error):
    with pytest.raises(error):
        set_sort_warning_threshold(value)


@pytest.mark.parametrize("value, error", [(-3, ValueError), ("10", TypeError), (False, TypeError)])
def test_invalid_max_nstate(value, error):
    with pytest.raises(error):
        set_max_nstate(value)
