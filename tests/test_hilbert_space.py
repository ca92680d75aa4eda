import math

import numpy as np
import pytest

from ed_hilbert import (
    QuantumStatistics,
    SingleParticleState,
    SingleParticleHilbertSpace,
    ManyParticleHilbertSpace,
    ManyParticleState,
    CombinationSequence,
    SortOutcome,
    set_max_nstate,
)

BOSONIC = QuantumStatistics.BOSONIC
FERMIONIC = QuantumStatistics.FERMIONIC


class TestSingleParticleHilbertSpace:
    def test_product_order_last_dof_fastest(self):
        space = SingleParticleHilbertSpace(FERMIONIC, dof_ndof=(2, 3))
        assert space.nstate == 6
        assert [s.dof_indices for s in space.state_list] == [
            (0, 0), (0, 1), (0, 2), (1, 0), (1, 1), (1, 2)
        ]
        assert space.dof_name == ("dof_0", "dof_1")
        assert list(space.state_list) == sorted(space.state_list)

    def test_reverse_map_is_consistent(self, spinful_chain):
        assert len(spinful_chain.state_to_index_map) == spinful_chain.nstate
        for index, state in enumerate(spinful_chain.state_list):
            assert spinful_chain.index_of(state) == index
            assert spinful_chain.state_at(index) == state

    def test_from_dof_ranges_with_symbolic_values(self, spinful_chain):
        assert spinful_chain.dof_name == ("site", "spin")
        assert spinful_chain.dof_ndof == (4, 2)
        assert spinful_chain.dof_values[1] == ("dn", "up")
        state = spinful_chain.state_from_dof(1, "up")
        assert state.dof_indices == (1, "up")
        assert spinful_chain.index_of(state) == 3

    def test_explicit_values_are_sorted(self):
        space = SingleParticleHilbertSpace(BOSONIC, dof_values=((2, 0, 1),))
        assert space.dof_values == ((0, 1, 2),)
        assert [s.dof_indices for s in space] == [(0,), (1,), (2,)]

    def test_dof_configs_and_positions(self):
        space = SingleParticleHilbertSpace(
            FERMIONIC, dof_name=("orbital", "spin"), dof_values=((-1, 1), ("a", "b", "c"))
        )
        configs = space.dof_configs()
        assert configs.shape == (6, 2)
        for index, row in enumerate(configs):
            assert space.index_from_positions(row) == index
            state = space.state_at(index)
            assert state.dof_indices == (
                space.dof_values[0][row[0]],
                space.dof_values[1][row[1]],
            )
        with pytest.raises(IndexError):
            space.index_from_positions([2, 0])

    def test_lookup_errors(self, three_fermion_states):
        with pytest.raises(KeyError):
            three_fermion_states.index_of(SingleParticleState(FERMIONIC, (7,)))
        with pytest.raises(KeyError):
            three_fermion_states.index_of(SingleParticleState(BOSONIC, (0,)))
        with pytest.raises(IndexError):
            three_fermion_states.state_at(3)
        with pytest.raises(IndexError):
            three_fermion_states.state_at(-1)
        with pytest.raises(TypeError):
            three_fermion_states.state_at(1.0)

    def test_container_protocol(self, three_fermion_states):
        assert len(three_fermion_states) == 3
        assert SingleParticleState(FERMIONIC, (2,)) in three_fermion_states
        assert SingleParticleState(FERMIONIC, (3,)) not in three_fermion_states

    @pytest.mark.parametrize(
        "kwargs, error",
        [
            (dict(dof_ndof=(2, 3), dof_name=("site",)), ValueError),
            (dict(dof_ndof=(2, 0)), ValueError),
            (dict(dof_values=((0, 1), ())), ValueError),
            (dict(dof_values=((0, 0, 1),)), ValueError),
            (dict(dof_ndof=()), ValueError),
            (dict(), ValueError),
            (dict(dof_ndof=(2,), dof_values=((0, 1),)), ValueError),
            (dict(dof_ndof=(2.0,)), TypeError),
            (dict(dof_ndof=(2,), dof_name=(1,)), TypeError),
            (dict(dof_values=((0, "a"),)), TypeError),
        ],
    )
    def test_invalid_construction(self, kwargs, error):
        with pytest.raises(error):
            SingleParticleHilbertSpace(FERMIONIC, **kwargs)

    def test_invalid_dof_ranges(self):
        with pytest.raises(ValueError):
            SingleParticleHilbertSpace.from_dof_ranges(FERMIONIC, [("site", 3, 1)])
        with pytest.raises(ValueError):
            SingleParticleHilbertSpace.from_dof_ranges(FERMIONIC, [("site", 0)])
        with pytest.raises(TypeError):
            SingleParticleHilbertSpace.from_dof_ranges(FERMIONIC, "site")

    def test_statistics_is_required(self):
        with pytest.raises(TypeError):
            SingleParticleHilbertSpace("fermionic", dof_ndof=(2,))


class TestManyParticleHilbertSpace:
    def test_three_states_two_particles(self, three_fermion_states):
        a, b, c = three_fermion_states.state_list
        space = ManyParticleHilbertSpace(three_fermion_states, 2)
        assert space.nstate == 3
        assert list(space.state_list) == [
            ManyParticleState((a, b)),
            ManyParticleState((a, c)),
            ManyParticleState((b, c)),
        ]
        assert [space.index_of(state) for state in space.state_list] == [0, 1, 2]
        # Composition path lands on the same index
        state, outcome = ManyParticleState.from_unordered([c, a])
        assert outcome is SortOutcome.ODD
        assert space.index_of(state) == 1

    @pytest.mark.parametrize("nsingle, nparticle", [(4, 2), (5, 0), (5, 5), (6, 3), (8, 1)])
    def test_combination_count_and_bijection(self, nsingle, nparticle):
        single = SingleParticleHilbertSpace(FERMIONIC, dof_ndof=(nsingle,))
        space = ManyParticleHilbertSpace(single, nparticle)
        assert space.nstate == math.comb(nsingle, nparticle)
        assert len(space.state_to_index_map) == space.nstate
        assert sorted(space.state_to_index_map.values()) == list(range(space.nstate))
        for state in space:
            assert space.state_at(space.index_of(state)) == state
            assert state.nparticle == nparticle
            assert len(set(state)) == nparticle
            assert all(s in single for s in state)

    def test_four_states_two_particles(self):
        single = SingleParticleHilbertSpace(FERMIONIC, dof_ndof=(4,))
        assert ManyParticleHilbertSpace(single, 2).nstate == 6

    def test_zero_particles_yield_the_vacuum(self, three_fermion_states):
        space = ManyParticleHilbertSpace(three_fermion_states, 0)
        assert space.nstate == 1
        assert space.state_at(0) == ManyParticleState(())
        assert space.index_of(ManyParticleState(())) == 0

    def test_enumeration_is_lexicographic(self, spinful_chain):
        space = ManyParticleHilbertSpace(spinful_chain, 3)
        states = [tuple(s.single_particle_states) for s in space]
        assert states == sorted(states)

    def test_enumeration_is_reproducible(self, spinful_chain):
        first = ManyParticleHilbertSpace(spinful_chain, 2)
        second = ManyParticleHilbertSpace(spinful_chain, 2)
        assert list(first.state_list) == list(second.state_list)
        assert first.state_to_index_map == second.state_to_index_map

    def test_lazy_and_materialized_agree(self, spinful_chain):
        stored = ManyParticleHilbertSpace.materialized(spinful_chain, 3)
        lazy = ManyParticleHilbertSpace.streaming(spinful_chain, 3)
        assert not stored.is_lazy
        assert lazy.is_lazy
        assert isinstance(stored.state_list, tuple)
        assert isinstance(lazy.state_list, CombinationSequence)
        assert list(lazy.state_list) == list(stored.state_list)
        # The lazy view can be driven again from the start
        assert list(lazy.state_list) == list(stored.state_list)
        for index in range(stored.nstate):
            assert lazy.state_at(index) == stored.state_at(index)
        assert lazy.state_to_index_map == stored.state_to_index_map

    def test_combination_sequence_random_access(self, three_fermion_states):
        sequence = CombinationSequence(three_fermion_states.state_list, 2)
        assert len(sequence) == 3
        assert sequence[-1] == sequence[2]
        with pytest.raises(IndexError):
            sequence[3]
        with pytest.raises(TypeError):
            sequence[0:2]

    def test_lookup_errors(self, three_fermion_states):
        space = ManyParticleHilbertSpace(three_fermion_states, 2)
        a, b, c = three_fermion_states.state_list
        with pytest.raises(KeyError):
            space.index_of(ManyParticleState((a,)))
        with pytest.raises(IndexError):
            space.state_at(space.nstate)
        with pytest.raises(IndexError):
            space.state_at(-1)
        assert ManyParticleState((b, c)) in space
        assert ManyParticleState((a, b, c)) not in space

    @pytest.mark.parametrize("nparticle", [-1, 4])
    def test_invalid_particle_number(self, three_fermion_states, nparticle):
        with pytest.raises(ValueError):
            ManyParticleHilbertSpace(three_fermion_states, nparticle)

    def test_invalid_argument_types(self, three_fermion_states):
        with pytest.raises(TypeError):
            ManyParticleHilbertSpace(three_fermion_states, 1.0)
        with pytest.raises(TypeError):
            ManyParticleHilbertSpace(three_fermion_states.state_list, 1)
        with pytest.raises(TypeError):
            ManyParticleHilbertSpace(three_fermion_states, 1, lazy="yes")

    def test_ceiling_is_checked_before_enumeration(self, restore_settings):
        single = SingleParticleHilbertSpace(FERMIONIC, dof_ndof=(68,))
        with pytest.raises(ValueError, match=str(math.comb(68, 34))):
            ManyParticleHilbertSpace(single, 34)
        with pytest.raises(ValueError):
            ManyParticleHilbertSpace(single, 3, max_nstate=100)
        set_max_nstate(10)
        with pytest.raises(ValueError):
            ManyParticleHilbertSpace(single, 2)
        # Explicit keyword overrides the global ceiling
        assert ManyParticleHilbertSpace(single, 1, max_nstate=100).nstate == 68

    def test_index_dtype(self, three_fermion_states):
        space = ManyParticleHilbertSpace(three_fermion_states, 1)
        assert space.nstate_fits_int64
        assert space.index_dtype == np.dtype(np.int64)

    def test_state_configs(self, spinful_chain):
        space = ManyParticleHilbertSpace(spinful_chain, 3)
        configs = space.state_configs()
        assert configs.shape == (math.comb(8, 3), 3)
        for index, row in enumerate(configs):
            state = space.state_at(index)
            np.testing.assert_array_equal(row, state.indices(spinful_chain))
            assert space.config_index(row) == index
        assert space.config_index([0, 0, 1]) == -1
        with pytest.raises(ValueError):
            space.config_index([0, 1])

    def test_occupation_configs(self, spinful_chain):
        space = ManyParticleHilbertSpace(spinful_chain, 2)
        occupations = space.occupation_configs()
        assert occupations.shape == (space.nstate, 8)
        assert occupations.dtype == np.uint8
        np.testing.assert_array_equal(occupations.sum(axis=1), 2)
        for index, row in enumerate(occupations):
            np.testing.assert_array_equal(row, space.state_at(index).occupations(spinful_chain))

    def test_fock_projector(self):
        single = SingleParticleHilbertSpace(FERMIONIC, dof_ndof=(4,))
        space = ManyParticleHilbertSpace(single, 2)
        projector = space.fock_projector()
        assert projector.shape == (16, 6)
        dense = projector.toarray()
        np.testing.assert_array_equal(dense.sum(axis=0), np.ones(6))
        rows = np.flatnonzero(dense.sum(axis=1))
        assert all(bin(row).count("1") == 2 for row in rows)
        # {0, 1} occupies the two most significant bits
        assert dense[0b1100, 0] == 1
        assert dense[0b0011, 5] == 1
