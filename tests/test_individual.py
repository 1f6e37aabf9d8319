"""Tests for gridroute.individual module."""

import numpy as np
import pytest

from gridroute.geometry import Connection, Direction, Segment
from gridroute.individual import FitnessWeights, Individual, generate_individual

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def _conn(start, end, spec):
    return Connection(start=start, end=end, segments=[Segment(d, n) for d, n in spec])


@pytest.fixture
def crossing_pair():
    """Two wires that either avoid each other or share one cell."""
    a = _conn((0, 1), (1, 1), [(S, 1)])
    apart = _conn((1, 0), (2, 2), [(S, 1), (E, 2)])
    through = _conn((1, 0), (2, 2), [(E, 2), (S, 1)])
    return a, apart, through


class TestFitness:
    """Tests for collision counting and scoring."""

    def test_disjoint_wires(self, crossing_pair):
        a, apart, _ = crossing_pair
        ind = Individual(dimensions=(3, 3), connections=[a, apart])
        assert ind.collisions() == 0
        # 4 cells of wire, 3 segments
        assert ind.evaluate() == pytest.approx(4 * 0.2 + 3 * 0.1)

    def test_overlap_costs_one_collision(self, crossing_pair):
        a, apart, through = crossing_pair
        clean = Individual(dimensions=(3, 3), connections=[a, apart])
        clash = Individual(dimensions=(3, 3), connections=[a.copy(), through])
        assert clash.collisions() == 1
        assert clash.evaluate() - clean.evaluate() == pytest.approx(100.0)

    def test_shared_pin_counts(self):
        a = _conn((0, 0), (0, 2), [(E, 2)])
        b = _conn((0, 2), (2, 2), [(S, 2)])
        ind = Individual(dimensions=(3, 3), connections=[a, b])
        assert ind.collisions() == 1

    def test_custom_weights(self, crossing_pair):
        a, _, through = crossing_pair
        ind = Individual(dimensions=(3, 3), connections=[a, through])
        weights = FitnessWeights(collision=1.0, length=0.0, segment_count=0.0)
        assert ind.evaluate(weights) == pytest.approx(1.0)
        assert ind.fitness == pytest.approx(1.0)

    def test_occupancy_counts(self, crossing_pair):
        a, _, through = crossing_pair
        ind = Individual(dimensions=(3, 3), connections=[a, through])
        counts = ind.occupancy_counts()
        assert counts.shape == (3, 3)
        assert counts[1, 1] == 2
        assert counts.sum() == len(a.cells()) + len(through.cells())

    def test_empty_individual(self):
        ind = Individual(dimensions=(2, 2))
        assert ind.collisions() == 0
        assert ind.evaluate() == 0.0

    def test_summary(self, crossing_pair):
        a, apart, _ = crossing_pair
        summary = Individual(dimensions=(3, 3), connections=[a, apart]).summary()
        assert summary["collisions"] == 0
        assert summary["total_length"] == 4
        assert summary["segments"] == 3
        assert summary["connections"] == 2


class TestGenerateIndividual:
    """Tests for building Individuals with the router."""

    def test_one_connection_per_pair(self, multi_problem):
        ind = generate_individual(multi_problem, seed=3)
        assert len(ind.connections) == len(multi_problem.pin_pairs)
        for conn, (start, end) in zip(ind.connections, multi_problem.pin_pairs):
            assert conn.start == start
            assert conn.end == end
        assert ind.is_valid()

    def test_seeded_build_is_reproducible(self, multi_problem):
        first = generate_individual(multi_problem, seed=42)
        second = generate_individual(multi_problem, seed=42)
        assert first.connections == second.connections

    def test_shared_rng(self, multi_problem):
        ind = generate_individual(multi_problem, rng=np.random.default_rng(0))
        assert ind.is_valid()
        assert ind.fitness is None

    @pytest.mark.parametrize("seed", range(10))
    def test_fitness_is_non_negative(self, multi_problem, seed):
        ind = generate_individual(multi_problem, seed=seed)
        assert ind.evaluate() >= 0.0


class TestOperators:
    """Tests for crossover and mutation."""

    def test_crossover_copies_donor_connection(self, multi_problem):
        child = generate_individual(multi_problem, seed=1)
        donor = generate_individual(multi_problem, seed=2)
        child.evaluate()

        child.crossover(donor, 0.5)

        assert child.connections[1] == donor.connections[1]
        assert child.connections[1] is not donor.connections[1]
        assert child.fitness is None

        child.connections[1].segments.clear()
        assert donor.connections[1].segments

    def test_crossover_roll_of_one(self, multi_problem):
        child = generate_individual(multi_problem, seed=1)
        donor = generate_individual(multi_problem, seed=2)
        child.crossover(donor, 1.0)
        assert child.connections[-1] == donor.connections[-1]

    def test_crossover_without_connections(self):
        child = Individual(dimensions=(2, 2))
        child.crossover(Individual(dimensions=(2, 2)), 0.3)
        assert child.connections == []

    def test_mutate_keeps_pins(self, multi_problem):
        ind = generate_individual(multi_problem, seed=5)
        ind.evaluate()
        rng = np.random.default_rng(0)

        mutated = ind.mutate(rng, 1.0)

        assert mutated == len(ind.connections)
        assert ind.fitness is None
        assert ind.is_valid()
        for conn, (start, end) in zip(ind.connections, multi_problem.pin_pairs):
            assert (conn.start, conn.end) == (start, end)

    def test_zero_rate_changes_nothing(self, multi_problem):
        ind = generate_individual(multi_problem, seed=5)
        before = ind.copy()
        ind.evaluate()
        assert ind.mutate(np.random.default_rng(0), 0.0) == 0
        assert ind.connections == before.connections
        assert ind.fitness is not None

    def test_copy_shares_no_connection(self, multi_problem):
        ind = generate_individual(multi_problem, seed=5)
        clone = ind.copy()
        for original, copied in zip(ind.connections, clone.connections):
            assert original == copied
            assert original is not copied
