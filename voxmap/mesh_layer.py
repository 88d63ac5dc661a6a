"""A layer of mesh blocks addressed by integer block index."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np

from voxmap.mesh import Mesh
from voxmap.mesh_utils import create_connected_mesh

BlockIndex = tuple[int, int, int]


def _as_index(index: Sequence[int]) -> BlockIndex:
    x, y, z = (int(v) for v in index)
    return x, y, z


class MeshLayer:
    """Holds one mesh per allocated block."""

    def __init__(self, block_size: float) -> None:
        if block_size <= 0.0:
            raise ValueError(f"block size must be positive, not {block_size}")
        self._block_size = float(block_size)
        self._block_size_inv = 1.0 / self._block_size
        self._meshes: dict[BlockIndex, Mesh] = {}

    @property
    def block_size(self) -> float:
        return self._block_size

    @property
    def block_size_inv(self) -> float:
        return self._block_size_inv

    def __len__(self) -> int:
        return len(self._meshes)

    def __contains__(self, index: object) -> bool:
        try:
            return _as_index(index) in self._meshes  # type: ignore[arg-type]
        except (TypeError, ValueError):
            return False

    def block_index_from_coordinates(self, coords: Sequence[float]) -> BlockIndex:
        x, y, z = (math.floor(float(c) * self._block_size_inv) for c in coords)
        return x, y, z

    def get_mesh(self, index: Sequence[int]) -> Mesh:
        """The mesh at a block index; raises KeyError if it is not allocated."""
        key = _as_index(index)
        try:
            return self._meshes[key]
        except KeyError:
            raise KeyError(f"no mesh allocated at {key}") from None

    def get_mesh_by_coordinates(self, coords: Sequence[float]) -> Mesh:
        return self.get_mesh(self.block_index_from_coordinates(coords))

    def allocate_mesh(self, index: Sequence[int]) -> Mesh:
        """The mesh at a block index, created empty if it does not exist yet."""
        key = _as_index(index)
        mesh = self._meshes.get(key)
        if mesh is None:
            mesh = Mesh(self._block_size, np.array(key, dtype=float) * self._block_size)
            self._meshes[key] = mesh
        return mesh

    def allocate_mesh_by_coordinates(self, coords: Sequence[float]) -> Mesh:
        return self.allocate_mesh(self.block_index_from_coordinates(coords))

    def remove_mesh(self, index: Sequence[int]) -> None:
        self._meshes.pop(_as_index(index), None)

    def remove_mesh_by_coordinates(self, coords: Sequence[float]) -> None:
        self._meshes.pop(self.block_index_from_coordinates(coords), None)

    def clear_distant_mesh(self, center: Sequence[float], max_distance: float) -> None:
        """Empty meshes whose origin is farther than ``max_distance`` from ``center``.

        The meshes stay allocated and are marked updated, so that the emptied
        blocks can still be sent on to consumers.
        """
        center_point = np.asarray(center, dtype=float)
        limit = max_distance * max_distance
        for mesh in self._meshes.values():
            offset = mesh.origin - center_point
            if float(offset @ offset) > limit:
                mesh.clear()
                mesh.updated = True

    def allocated_indices(self) -> list[BlockIndex]:
        return list(self._meshes)

    def updated_indices(self) -> list[BlockIndex]:
        return [index for index, mesh in self._meshes.items() if mesh.updated]

    def combined_mesh(self) -> Mesh:
        """All meshes joined into one; triangles keep their own distinct vertices."""
        meshes = list(self._meshes.values())
        first = next((mesh for mesh in meshes if mesh.vertices), None)
        flags = (
            (first.has_colors, first.has_normals, first.has_triangles)
            if first is not None
            else (False, False, False)
        )
        has_colors, has_normals, has_indices = flags

        combined = Mesh()
        for mesh in meshes:
            if not mesh.vertices:
                continue
            if (mesh.has_colors, mesh.has_normals, mesh.has_triangles) != flags:
                raise ValueError("meshes disagree on having colors, normals or triangles")
            count = len(mesh.vertices)
            if count % 3 != 0:
                raise ValueError("vertex count must be a multiple of three")
            if has_colors and len(mesh.colors) < count:
                raise ValueError("mesh has fewer colors than vertices")
            if has_normals and len(mesh.normals) < count:
                raise ValueError("mesh has fewer normals than vertices")

            start = len(combined.vertices)
            combined.vertices.extend(np.array(v, dtype=float) for v in mesh.vertices)
            if has_colors:
                combined.colors.extend(mesh.colors[:count])
            if has_normals:
                combined.normals.extend(np.array(n, dtype=float) for n in mesh.normals[:count])
            if has_indices:
                combined.indices.extend(range(start, start + count))

        if len(combined.vertices) != len(combined.indices):
            raise ValueError("combined mesh has vertices without triangle indices")
        return combined

    def connected_mesh(self, approximate_vertex_proximity_threshold: float = 1e-10) -> Mesh:
        """All meshes joined into one with nearby vertices merged."""
        return create_connected_mesh(
            list(self._meshes.values()), approximate_vertex_proximity_threshold
        )

    def clear(self) -> None:
        """Delete every mesh in the layer."""
        self._meshes.clear()