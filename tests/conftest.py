import pytest

from ed_hilbert import (
    QuantumStatistics,
    SingleParticleHilbertSpace,
    set_sort_warning_threshold,
    get_sort_warning_threshold,
    set_max_nstate,
    get_max_nstate,
)


@pytest.fixture
def restore_settings():
    """Put the global settings back after a test changes them."""
    threshold = get_sort_warning_threshold()
    max_nstate = get_max_nstate()
    yield
    set_sort_warning_threshold(threshold)
    set_max_nstate(max_nstate)


@pytest.fixture
def three_fermion_states():
    """Fermionic single-particle space with states A < B < C."""
    return SingleParticleHilbertSpace(QuantumStatistics.FERMIONIC, dof_ndof=(3,))


@pytest.fixture
def spinful_chain():
    """4 sites x 2 spin projections, fermionic."""
    return SingleParticleHilbertSpace.from_dof_ranges(
        QuantumStatistics.FERMIONIC, [("site", 4), ("spin", ("dn", "up"))]
    )
