"""Marching cubes: turn the signed distances at a cube's corners into triangles.

Cube corners are given as 8 points in the order used by the mesh integrator:
(0,0,0), (1,0,0), (1,1,0), (0,1,0), (0,0,1), (1,0,1), (1,1,1), (0,1,1)
scaled by the voxel size and offset by the cube origin.
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from voxmap.marching_tables import EDGE_INDEX_PAIRS, triangle_edges
from voxmap.mesh import Mesh

_MIN_SDF_DIFFERENCE = 1e-6
_NUM_CORNERS = 8


def _as_corners(vertex_coords: Sequence[Sequence[float]]) -> np.ndarray:
    coords = np.asarray(vertex_coords, dtype=float)
    if coords.shape != (_NUM_CORNERS, 3):
        raise ValueError(f"expected 8 corner points of 3 coordinates, got shape {coords.shape}")
    return coords


def _as_sdf(vertex_sdf: Sequence[float]) -> np.ndarray:
    sdf = np.asarray(vertex_sdf, dtype=float)
    if sdf.shape != (_NUM_CORNERS,):
        raise ValueError(f"expected 8 signed distances, got shape {sdf.shape}")
    return sdf


def calculate_vertex_configuration(vertex_sdf: Sequence[float]) -> int:
    """Bit mask with bit ``i`` set when corner ``i`` has a negative distance."""
    sdf = _as_sdf(vertex_sdf)
    return sum(1 << i for i, value in enumerate(sdf) if value < 0)


def interpolate_vertex(
    vertex1: Sequence[float], vertex2: Sequence[float], sdf1: float, sdf2: float
) -> np.ndarray:
    """Approximate the zero crossing between two corners by linear interpolation.

    When the distances are nearly equal the midpoint is used instead.
    """
    v1 = np.asarray(vertex1, dtype=float)
    v2 = np.asarray(vertex2, dtype=float)
    sdf_diff = sdf1 - sdf2
    if abs(sdf_diff) >= _MIN_SDF_DIFFERENCE:
        t = sdf1 / sdf_diff
        return v1 + t * (v2 - v1)
    return 0.5 * (v1 + v2)


def interpolate_edge_vertices(
    vertex_coords: Sequence[Sequence[float]], vertex_sdf: Sequence[float]
) -> np.ndarray:
    """Zero-crossing points on the 12 cube edges, shape (12, 3).

    Edges without a sign change hold NaN.
    """
    coords = _as_corners(vertex_coords)
    sdf = _as_sdf(vertex_sdf)
    edges = np.full((len(EDGE_INDEX_PAIRS), 3), np.nan)
    for edge, (c0, c1) in enumerate(EDGE_INDEX_PAIRS):
        if (sdf[c0] < 0) != (sdf[c1] < 0):
            edges[edge] = interpolate_vertex(coords[c0], coords[c1], sdf[c0], sdf[c1])
    return edges


def mesh_cube_triangles(
    vertex_coords: Sequence[Sequence[float]], vertex_sdf: Sequence[float]
) -> list[np.ndarray]:
    """Triangles of one cube, each a (3, 3) array of vertex rows in table order."""
    configuration = calculate_vertex_configuration(vertex_sdf)
    edge_coords = interpolate_edge_vertices(vertex_coords, vertex_sdf)
    return [edge_coords[list(edges)].copy() for edges in triangle_edges(configuration)]


def mesh_cube(
    vertex_coords: Sequence[Sequence[float]], vertex_sdf: Sequence[float], mesh: Mesh
) -> int:
    """Append the cube's triangles to ``mesh`` with flat normals.

    Vertices of each triangle are stored in reverse table order and indexed
    from the mesh's current vertex count. Returns the number of triangles added.
    """
    configuration = calculate_vertex_configuration(vertex_sdf)
    if configuration == 0:
        return 0

    edge_coords = interpolate_edge_vertices(vertex_coords, vertex_sdf)
    triangles = triangle_edges(configuration)
    for e0, e1, e2 in triangles:
        next_index = len(mesh.vertices)
        p0 = edge_coords[e2].copy()
        p1 = edge_coords[e1].copy()
        p2 = edge_coords[e0].copy()
        mesh.vertices.extend((p0, p1, p2))
        mesh.indices.extend((next_index, next_index + 1, next_index + 2))

        normal = np.cross(p1 - p0, p2 - p0)
        length = np.linalg.norm(normal)
        if length > 0.0:
            normal = normal / length
        mesh.normals.extend((normal.copy(), normal.copy(), normal.copy()))
    return len(triangles)