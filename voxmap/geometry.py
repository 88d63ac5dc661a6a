"""Rigid transformations in three dimensions."""

from __future__ import annotations

from typing import Sequence

import numpy as np

_ORTHONORMAL_TOLERANCE = 1e-6


class Transformation:
    """A rotation followed by a translation, mapping points between frames."""

    def __init__(
        self,
        rotation: Sequence[Sequence[float]] | None = None,
        position: Sequence[float] | None = None,
    ) -> None:
        matrix = np.eye(3) if rotation is None else np.array(rotation, dtype=float)
        if matrix.shape != (3, 3):
            raise ValueError(f"rotation must be a 3x3 matrix, got shape {matrix.shape}")
        if not np.allclose(matrix @ matrix.T, np.eye(3), atol=_ORTHONORMAL_TOLERANCE) or (
            np.linalg.det(matrix) <= 0.0
        ):
            raise ValueError("rotation must be a proper orthonormal matrix")
        translation = np.zeros(3) if position is None else np.array(position, dtype=float)
        if translation.shape != (3,):
            raise ValueError(f"position must have 3 coordinates, got shape {translation.shape}")
        self._rotation = matrix
        self._position = translation

    @classmethod
    def from_quaternion(
        cls,
        w: float,
        x: float,
        y: float,
        z: float,
        position: Sequence[float] | None = None,
    ) -> Transformation:
        """Build a transformation from a (normalized on input) quaternion."""
        q = np.array([w, x, y, z], dtype=float)
        norm = float(np.linalg.norm(q))
        if norm == 0.0:
            raise ValueError("quaternion must not be zero")
        w, x, y, z = q / norm
        matrix = np.array(
            [
                [1 - 2 * (y * y + z * z), 2 * (x * y - w * z), 2 * (x * z + w * y)],
                [2 * (x * y + w * z), 1 - 2 * (x * x + z * z), 2 * (y * z - w * x)],
                [2 * (x * z - w * y), 2 * (y * z + w * x), 1 - 2 * (x * x + y * y)],
            ]
        )
        return cls(matrix, position)

    @property
    def rotation(self) -> np.ndarray:
        return self._rotation.copy()

    @property
    def position(self) -> np.ndarray:
        return self._position.copy()

    def inverse(self) -> Transformation:
        rotation_t = self._rotation.T
        return Transformation(rotation_t, -(rotation_t @ self._position))

    def apply(self, point: Sequence[float]) -> np.ndarray:
        """Transform a point: rotate it, then translate it."""
        return self._rotation @ np.asarray(point, dtype=float) + self._position

    def rotate(self, vector: Sequence[float]) -> np.ndarray:
        """Rotate a direction vector, ignoring the translation."""
        return self._rotation @ np.asarray(vector, dtype=float)

    def __matmul__(self, other: Transformation) -> Transformation:
        if not isinstance(other, Transformation):
            return NotImplemented
        return Transformation(
            self._rotation @ other._rotation,
            self._rotation @ other._position + self._position,
        )

    def __repr__(self) -> str:
        return (
            f"Transformation(rotation={self._rotation.tolist()}, "
            f"position={self._position.tolist()})"
        )