"""Tests for gridroute.geometry module."""

import numpy as np
import pytest

from gridroute.exceptions import ConnectionStateError
from gridroute.geometry import DIRECTIONS, Connection, Direction, Segment, manhattan, move

N, S, E, W = Direction.NORTH, Direction.SOUTH, Direction.EAST, Direction.WEST


def _segments(spec):
    return [Segment(direction, length) for direction, length in spec]


def _assert_canonical(conn):
    for seg in conn.segments:
        assert seg.length > 0
    for a, b in zip(conn.segments, conn.segments[1:]):
        assert a.direction != b.direction
        assert a.direction != b.direction.inverse


class TestDirection:
    """Tests for the Direction enum."""

    def test_sampling_order(self):
        assert DIRECTIONS == (N, S, E, W)

    def test_inverse(self):
        assert N.inverse is S
        assert S.inverse is N
        assert E.inverse is W
        assert W.inverse is E

    def test_delta(self):
        assert move((2, 2), N) == (1, 2)
        assert move((2, 2), S) == (3, 2)
        assert move((2, 2), E) == (2, 3)
        assert move((2, 2), W) == (2, 1)
        assert move((2, 2), S, 3) == (5, 2)

    def test_is_vertical(self):
        assert N.is_vertical and S.is_vertical
        assert not E.is_vertical and not W.is_vertical

    def test_manhattan(self):
        assert manhattan((1, 3), (5, 3)) == 4
        assert manhattan((0, 0), (2, 5)) == 7


class TestConnectionWalk:
    """Tests for walking a connection's segments."""

    @pytest.fixture
    def stepped(self):
        return Connection(start=(1, 0), end=(3, 1), segments=_segments([(S, 1), (E, 1), (S, 1)]))

    def test_find_point(self, stepped):
        assert stepped.find_point(0) == (2, 0)
        assert stepped.find_point(1) == (2, 1)
        assert stepped.find_point(2) == (3, 1)

    def test_find_point_out_of_range(self, stepped):
        with pytest.raises(ConnectionStateError):
            stepped.find_point(3)

    def test_segment_start(self, stepped):
        assert stepped.segment_start(0) == (1, 0)
        assert stepped.segment_start(2) == (2, 1)

    def test_walk_telescopes_to_end(self, stepped):
        assert stepped.walk() == [(1, 0), (2, 0), (2, 1), (3, 1)]
        assert stepped.end_point() == stepped.end

    def test_cells_include_turn_points(self, stepped):
        assert stepped.cells() == [(1, 0), (2, 0), (2, 1), (3, 1)]

    def test_cells_of_straight_run(self):
        conn = Connection(start=(1, 3), end=(5, 3), segments=_segments([(S, 4)]))
        assert conn.cells() == [(1, 3), (2, 3), (3, 3), (4, 3), (5, 3)]

    def test_lengths(self, stepped):
        assert stepped.total_length == 3
        assert stepped.segment_count == 3

    def test_is_valid(self, stepped):
        assert stepped.is_valid((4, 4))
        assert not stepped.is_valid((3, 4))

    def test_overshoot_is_invalid(self):
        conn = Connection(start=(0, 0), end=(0, 2), segments=_segments([(E, 3)]))
        assert not conn.is_valid()

    def test_copy_is_independent(self, stepped):
        clone = stepped.copy()
        clone.segments.append(Segment(E, 1))
        assert len(stepped.segments) == 3


class TestFlatten:
    """Tests for segment canonicalization."""

    @pytest.mark.parametrize(
        "before, after",
        [
            ([(E, 2), (E, 3)], [(E, 5)]),
            ([(E, 2), (W, 2)], []),
            ([(E, 2), (W, 5)], [(W, 3)]),
            ([(E, 5), (W, 2)], [(E, 3)]),
            ([(N, 1), (E, 2), (W, 2), (N, 3)], [(N, 4)]),
            ([(E, 2), (N, 1), (S, 3)], [(E, 2), (S, 2)]),
            ([(E, 0), (S, 2)], [(S, 2)]),
            ([(S, 1), (E, 0), (S, 2)], [(S, 3)]),
        ],
    )
    def test_flatten_cases(self, before, after):
        conn = Connection(start=(5, 5), end=(5, 5), segments=_segments(before))
        conn.flatten()
        assert conn.segments == _segments(after)

    def test_flatten_preserves_endpoint(self):
        conn = Connection(
            start=(2, 2),
            end=(4, 5),
            segments=_segments([(E, 1), (E, 2), (N, 1), (S, 3), (W, 1), (E, 1)]),
        )
        conn.flatten()
        assert conn.end_point() == (4, 5)
        _assert_canonical(conn)


class TestMutate:
    """Tests for the jog mutation."""

    def test_jog_east(self):
        conn = Connection(start=(1, 3), end=(5, 3), segments=_segments([(S, 4)]))
        conn.mutate(0.3, 0.7, (6, 6))
        # Clipped to the two columns east of column 3
        assert conn.segments == _segments([(E, 2), (S, 4), (W, 2)])

    def test_jog_west(self):
        conn = Connection(start=(1, 3), end=(5, 3), segments=_segments([(S, 4)]))
        conn.mutate(0.9, 0.7, (6, 6))
        assert conn.segments == _segments([(W, 3), (S, 4), (E, 3)])

    def test_no_room_leaves_path_unchanged(self):
        conn = Connection(start=(0, 0), end=(0, 3), segments=_segments([(E, 3)]))
        conn.mutate(0.2, 0.5, (4, 4))
        assert conn.segments == _segments([(E, 3)])

    def test_empty_connection_raises(self):
        conn = Connection(start=(0, 0), end=(0, 0))
        with pytest.raises(ConnectionStateError):
            conn.mutate(0.5, 0.5, (4, 4))

    def test_roll_of_one_picks_last_segment(self):
        conn = Connection(start=(0, 0), end=(2, 2), segments=_segments([(S, 2), (E, 2)]))
        conn.mutate(1.0, 0.0, (5, 5))
        assert conn.end_point() == (2, 2)
        assert conn.is_valid((5, 5))

    def test_repeated_mutation_keeps_invariants(self):
        dims = (10, 12)
        conn = Connection(
            start=(1, 1),
            end=(8, 9),
            segments=_segments([(S, 3), (E, 4), (S, 4), (E, 4)]),
        )
        rng = np.random.default_rng(0)
        for _ in range(300):
            conn.mutate(rng.random(), rng.random(), dims)
            assert conn.start == (1, 1)
            assert conn.end == (8, 9)
            assert conn.is_valid(dims)
            _assert_canonical(conn)
