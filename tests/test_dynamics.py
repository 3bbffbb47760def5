import numpy as np
import pytest

from isingsim.dynamics import IsingState, site_energy, total_energy
from isingsim.lattice import nearest_neighbours, square_lattice

SIZE = 4


@pytest.fixture
def table():
    return nearest_neighbours(square_lattice(SIZE), SIZE, 4)


def _checkerboard():
    return np.array([(-1.0) ** (i + j) for i in range(SIZE) for j in range(SIZE)])


def test_aligned_energy(table):
    spins = np.ones(SIZE * SIZE)
    assert total_energy(spins, table, 1.0) == pytest.approx(-32.0)


def test_total_is_half_sum_of_site_energies(table):
    spins = np.random.default_rng(3).choice([-1.0, 1.0], size=SIZE * SIZE)
    halves = 0.5 * sum(site_energy(spins, table, 1.5, s) for s in range(len(spins)))
    assert total_energy(spins, table, 1.5) == pytest.approx(halves)


def test_checkerboard_energy_is_opposite_of_aligned(table):
    aligned = total_energy(np.ones(SIZE * SIZE), table, 1.0)
    assert total_energy(_checkerboard(), table, 1.0) == pytest.approx(-aligned)


def test_from_spins_copies_and_measures(table):
    spins = _checkerboard()
    state = IsingState.from_spins(spins, table, 1.0)
    state.spins[0] = 5.0
    assert spins[0] == 1.0
    assert IsingState.from_spins(spins, table).magnetisation == pytest.approx(0.0)


def test_metropolis_downhill_always_accepted(table):
    state = IsingState.from_spins(_checkerboard(), table, 1.0)
    before = state.energy
    rng = np.random.default_rng(0)
    assert state.metropolis_step(1.0, rng, site=SIZE * SIZE + 1)
    assert state.spins[1] == 1.0
    assert state.energy == pytest.approx(total_energy(state.spins, table, 1.0))
    assert state.energy < before
    assert state.magnetisation == pytest.approx(state.spins.mean())


def test_metropolis_uphill_rejected_when_cold(table):
    state = IsingState.from_spins(np.ones(SIZE * SIZE), table, 1.0)
    rng = np.random.default_rng(1)
    assert not state.metropolis_step(1e-3, rng, site=3)
    assert np.all(state.spins == 1.0)
    assert state.magnetisation == pytest.approx(1.0)


def test_metropolis_tracks_energy_and_magnetisation(table):
    rng = np.random.default_rng(42)
    state = IsingState.from_spins(np.ones(SIZE * SIZE), table, 1.0)
    for _ in range(500):
        state.metropolis_step(2.5, rng)
    assert state.energy == pytest.approx(total_energy(state.spins, table, 1.0))
    assert state.magnetisation == pytest.approx(state.spins.mean())


def test_wolff_cold_flips_whole_lattice(table):
    state = IsingState.from_spins(np.ones(SIZE * SIZE), table, 1.0)
    before = state.energy
    size = state.wolff_step(1e-3, np.random.default_rng(5))
    assert size == SIZE * SIZE
    assert state.cluster_size == size
    assert np.all(state.spins == -1.0)
    assert state.magnetisation == pytest.approx(-1.0)
    assert state.energy == pytest.approx(before)


def test_wolff_hot_flips_single_spin(table):
    state = IsingState.from_spins(np.ones(SIZE * SIZE), table, 1.0)
    size = state.wolff_step(1e9, np.random.default_rng(6))
    assert size == 1
    assert int((state.spins == -1.0).sum()) == 1


def test_wolff_keeps_invariants(table):
    rng = np.random.default_rng(11)
    state = IsingState.from_spins(np.ones(SIZE * SIZE), table, 1.0)
    for _ in range(50):
        size = state.wolff_step(2.3, rng)
        assert 1 <= size <= SIZE * SIZE
    assert state.energy == pytest.approx(total_energy(state.spins, table, 1.0))
    assert state.magnetisation == pytest.approx(state.spins.mean())