import itertools
import math

import pytest

from voxmap.neighbor_tools import DISTANCES, OFFSETS, iter_neighbors


@pytest.mark.parametrize("connectivity", [6, 18, 26])
def test_neighbor_count(connectivity):
    assert len(list(iter_neighbors((0, 0, 0), connectivity))) == connectivity


def test_full_neighborhood_covers_cube():
    cube = {o for o in itertools.product((-1, 0, 1), repeat=3) if o != (0, 0, 0)}
    assert {n for n, _ in iter_neighbors((0, 0, 0), 26)} == cube


def test_distance_matches_offset_norm():
    origin = (5, -2, 7)
    for neighbor, distance in iter_neighbors(origin, 26):
        offset = [n - o for n, o in zip(neighbor, origin)]
        assert distance == pytest.approx(math.sqrt(sum(c * c for c in offset)))


def test_six_connectivity_is_faces_only():
    for neighbor, distance in iter_neighbors((0, 0, 0), 6):
        assert sum(abs(c) for c in neighbor) == 1
        assert distance == 1.0


def test_order_follows_table():
    neighbors = [n for n, _ in iter_neighbors((10, 10, 10), 26)]
    assert neighbors[0] == (9, 10, 10)
    assert neighbors[-1] == (11, 11, 11)
    assert len(OFFSETS) == len(DISTANCES)


def test_invalid_connectivity():
    with pytest.raises(ValueError):
        list(iter_neighbors((0, 0, 0), 8))