"""Triangle meshes holding vertices, normals, colors and triangle indices."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, TypeVar

import numpy as np

from voxmap.voxels import Color

INVALID_BLOCK_SIZE = -1.0

_T = TypeVar("_T")


def _resized(items: list[_T], size: int, fill: Callable[[], _T]) -> list[_T]:
    return items[:size] + [fill() for _ in range(size - len(items))]


def _zero_point() -> np.ndarray:
    return np.zeros(3)


@dataclass
class Mesh:
    """Vertex, normal, color and triangle index data of one mesh block.

    Without a block size the mesh is not tied to a block and carries
    ``INVALID_BLOCK_SIZE``; an explicit block size must be positive.
    """

    block_size: float = INVALID_BLOCK_SIZE
    origin: np.ndarray = field(default_factory=_zero_point)
    vertices: list[np.ndarray] = field(default_factory=list)
    indices: list[int] = field(default_factory=list)
    normals: list[np.ndarray] = field(default_factory=list)
    colors: list[Color] = field(default_factory=list)
    updated: bool = False

    def __post_init__(self) -> None:
        if self.block_size != INVALID_BLOCK_SIZE and self.block_size <= 0.0:
            raise ValueError(f"block size must be positive, not {self.block_size}")
        self.origin = np.asarray(self.origin, dtype=float)

    @property
    def has_vertices(self) -> bool:
        return bool(self.vertices)

    @property
    def has_normals(self) -> bool:
        return bool(self.normals)

    @property
    def has_colors(self) -> bool:
        return bool(self.colors)

    @property
    def has_triangles(self) -> bool:
        return bool(self.indices)

    def __len__(self) -> int:
        return len(self.vertices)

    def clear(self) -> None:
        """Remove all vertices, normals, colors and indices."""
        self.vertices.clear()
        self.normals.clear()
        self.colors.clear()
        self.indices.clear()

    def clear_triangles(self) -> None:
        self.indices.clear()

    def clear_normals(self) -> None:
        self.normals.clear()

    def clear_colors(self) -> None:
        self.colors.clear()

    def resize(
        self,
        size: int,
        has_normals: bool = True,
        has_colors: bool = True,
        has_indices: bool = True,
    ) -> None:
        """Truncate or pad the vertex list, and optionally the other lists, to ``size``."""
        if size < 0:
            raise ValueError(f"size must not be negative, not {size}")
        self.vertices = _resized(self.vertices, size, _zero_point)
        if has_normals:
            self.normals = _resized(self.normals, size, _zero_point)
        if has_colors:
            self.colors = _resized(self.colors, size, Color)
        if has_indices:
            self.indices = _resized(self.indices, size, int)

    def colorize(self, color: Color) -> None:
        """Give every vertex the same color."""
        self.colors = [color] * len(self.vertices)

    def concatenate(self, other: Mesh) -> None:
        """Append another mesh, shifting its triangle indices past our vertices."""
        if other.has_colors != self.has_colors:
            raise ValueError("meshes disagree on having colors")
        if other.has_normals != self.has_normals:
            raise ValueError("meshes disagree on having normals")
        if other.has_triangles != self.has_triangles:
            raise ValueError("meshes disagree on having triangles")

        offset = len(self.vertices)
        self.vertices.extend(np.array(vertex, dtype=float) for vertex in other.vertices)
        self.colors.extend(other.colors)
        self.normals.extend(np.array(normal, dtype=float) for normal in other.normals)
        self.indices.extend(index + offset for index in other.indices)