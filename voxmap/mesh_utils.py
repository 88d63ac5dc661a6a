"""Merging meshes into one mesh with shared vertices."""

from __future__ import annotations

import math
from typing import Iterable

import numpy as np

from voxmap.mesh import Mesh

_EPSILON = 1e-6
_FALLBACK_NORMAL = (0.0, 0.0, 1.0)


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def _grid_key(vertex: np.ndarray, threshold_inv: float) -> tuple[int, int, int]:
    x, y, z = (float(c) * threshold_inv for c in vertex)
    return _round_half_away(x), _round_half_away(y), _round_half_away(z)


def create_connected_mesh(
    meshes: Mesh | Iterable[Mesh],
    approximate_vertex_proximity_threshold: float = 1e-10,
) -> Mesh:
    """Combine meshes into one, merging vertices closer than the threshold.

    Vertices falling into the same grid cell of the threshold's size are
    merged into the first one seen there; their normals are summed and
    renormalized. Triangles left with two or three identical vertices are
    dropped. A large threshold therefore simplifies the mesh.
    """
    if isinstance(meshes, Mesh):
        meshes = [meshes]
    if approximate_vertex_proximity_threshold <= 0.0:
        raise ValueError("proximity threshold must be positive")

    threshold_inv = 1.0 / float(approximate_vertex_proximity_threshold)
    connected = Mesh()
    uniques: dict[tuple[int, int, int], int] = {}

    for mesh in meshes:
        if not mesh.vertices:
            continue
        if len(mesh.vertices) != len(mesh.indices):
            raise ValueError("every vertex must belong to exactly one triangle slot")
        if len(mesh.vertices) % 3 != 0:
            raise ValueError("vertex count must be a multiple of three")

        old_to_new: list[int] = []
        for old_index, raw_vertex in enumerate(mesh.vertices):
            vertex = np.array(raw_vertex, dtype=float)
            key = _grid_key(vertex, threshold_inv)
            existing = uniques.get(key)
            if existing is None:
                new_index = len(connected.vertices)
                connected.vertices.append(vertex)
                if mesh.has_colors:
                    connected.colors.append(mesh.colors[old_index])
                if mesh.has_normals:
                    connected.normals.append(np.array(mesh.normals[old_index], dtype=float))
                uniques[key] = new_index
                old_to_new.append(new_index)
            else:
                old_to_new.append(existing)
                if mesh.has_normals and existing < len(connected.normals):
                    connected.normals[existing] = connected.normals[existing] + np.asarray(
                        mesh.normals[old_index], dtype=float
                    )

        connected.normals = [
            normal / length if (length := float(np.linalg.norm(normal))) > _EPSILON
            else np.array(_FALLBACK_NORMAL)
            for normal in connected.normals
        ]

        for start in range(0, len(mesh.indices), 3):
            v0, v1, v2 = (old_to_new[i] for i in mesh.indices[start:start + 3])
            if v0 == v1 or v1 == v2 or v0 == v2:
                continue
            connected.indices.extend((v0, v1, v2))

    if connected.has_colors and len(connected.colors) != len(connected.vertices):
        raise ValueError("meshes disagree on having colors")
    if connected.has_normals and len(connected.normals) != len(connected.vertices):
        raise ValueError("meshes disagree on having normals")
    return connected