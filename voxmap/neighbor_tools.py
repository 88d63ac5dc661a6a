"""Lookup tables and iteration over the 6-, 18- and 26-neighborhood of a voxel."""

from __future__ import annotations

import math
from typing import Iterator

_SQRT_2 = math.sqrt(2.0)
_SQRT_3 = math.sqrt(3.0)

OFFSETS: tuple[tuple[int, int, int], ...] = (
    # Faces.
    (-1, 0, 0), (1, 0, 0), (0, -1, 0), (0, 1, 0), (0, 0, -1), (0, 0, 1),
    # Edges.
    (-1, -1, 0), (-1, 1, 0), (1, -1, 0), (1, 1, 0),
    (0, -1, -1), (0, -1, 1), (0, 1, -1), (0, 1, 1),
    (-1, 0, -1), (1, 0, -1), (-1, 0, 1), (1, 0, 1),
    # Corners.
    (-1, -1, -1), (-1, -1, 1), (-1, 1, -1), (-1, 1, 1),
    (1, -1, -1), (1, -1, 1), (1, 1, -1), (1, 1, 1),
)

DISTANCES: tuple[float, ...] = (1.0,) * 6 + (_SQRT_2,) * 12 + (_SQRT_3,) * 8

_CONNECTIVITIES = (6, 18, 26)


def iter_neighbors(
    index: tuple[int, int, int], connectivity: int = 26
) -> Iterator[tuple[tuple[int, int, int], float]]:
    """Yield ``(neighbor_index, distance)`` pairs in lookup-table order."""
    if connectivity not in _CONNECTIVITIES:
        raise ValueError(f"connectivity must be one of {_CONNECTIVITIES}, not {connectivity}")
    x, y, z = index
    for (dx, dy, dz), distance in zip(OFFSETS[:connectivity], DISTANCES):
        yield (x + dx, y + dy, z + dz), distance