"""A frustum camera model for checking which points a camera can see."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from voxmap.geometry import Transformation

_NUM_CORNERS = 8

# Corner triples defining near, far, left, right, top and bottom planes.
_PLANE_CORNERS = ((0, 2, 1), (4, 5, 6), (3, 6, 2), (0, 5, 4), (3, 4, 7), (2, 6, 5))

# Pairs of corners joined by the frustum's edges.
_LINE_CORNERS = (
    (0, 1), (1, 2), (2, 3), (3, 0),
    (4, 5), (5, 6), (6, 7), (7, 4),
    (0, 4), (1, 5), (3, 7), (2, 6),
)


@dataclass
class Plane:
    """A plane ``point . normal == distance``; the normal side is inside."""

    normal: np.ndarray
    distance: float

    @classmethod
    def from_points(
        cls, p1: Sequence[float], p2: Sequence[float], p3: Sequence[float]
    ) -> Plane:
        a = np.asarray(p1, dtype=float)
        b = np.asarray(p2, dtype=float)
        c = np.asarray(p3, dtype=float)
        cross = np.cross(b - a, c - a)
        length = float(np.linalg.norm(cross))
        if length == 0.0:
            raise ValueError("points are collinear and do not define a plane")
        normal = cross / length
        return cls(normal, float(normal @ a))

    @classmethod
    def from_distance_normal(cls, normal: Sequence[float], distance: float) -> Plane:
        return cls(np.asarray(normal, dtype=float), float(distance))

    def is_point_inside(self, point: Sequence[float]) -> bool:
        return float(np.asarray(point, dtype=float) @ self.normal) >= self.distance


class CameraModel:
    """A camera looking along its positive x axis, bounded by a frustum."""

    def __init__(self) -> None:
        self._corners_c: list[np.ndarray] = []
        self._initialized = False
        self._t_c_b = Transformation()
        self._t_g_c = Transformation()
        self._bounding_planes: list[Plane] = []
        self._aabb: tuple[np.ndarray, np.ndarray] | None = None

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def bounding_planes(self) -> list[Plane]:
        return list(self._bounding_planes)

    def set_intrinsics_from_focal_length(
        self,
        resolution: Sequence[float],
        focal_length: float,
        min_distance: float,
        max_distance: float,
    ) -> None:
        width, height = resolution
        horizontal_fov = 2.0 * math.atan(width / (2.0 * focal_length))
        vertical_fov = 2.0 * math.atan(height / (2.0 * focal_length))
        self.set_intrinsics_from_fov(horizontal_fov, vertical_fov, min_distance, max_distance)

    def set_intrinsics_from_fov(
        self,
        horizontal_fov: float,
        vertical_fov: float,
        min_distance: float,
        max_distance: float,
    ) -> None:
        """Set the frustum corners; bounding planes follow when a pose is set."""
        tan_h = math.tan(horizontal_fov / 2.0)
        tan_v = math.tan(vertical_fov / 2.0)
        self._corners_c = [
            np.array([d, sy * d * tan_h, sz * d * tan_v])
            for d in (min_distance, max_distance)
            for sy, sz in ((1, 1), (1, -1), (-1, -1), (-1, 1))
        ]
        self._initialized = True

    @property
    def extrinsics(self) -> Transformation:
        """Transformation from body frame to camera frame."""
        return self._t_c_b

    @extrinsics.setter
    def extrinsics(self, t_c_b: Transformation) -> None:
        self._t_c_b = t_c_b

    @property
    def camera_pose(self) -> Transformation:
        return self._t_g_c

    @camera_pose.setter
    def camera_pose(self, pose: Transformation) -> None:
        self._t_g_c = pose
        self._calculate_bounding_planes()

    @property
    def body_pose(self) -> Transformation:
        return self._t_g_c @ self._t_c_b

    @body_pose.setter
    def body_pose(self, pose: Transformation) -> None:
        self.camera_pose = pose @ self._t_c_b.inverse()

    def _require_initialized(self) -> None:
        if not self._initialized:
            raise RuntimeError("camera intrinsics have not been set")

    def _corners_g(self) -> list[np.ndarray]:
        return [self._t_g_c.apply(corner) for corner in self._corners_c]

    def _calculate_bounding_planes(self) -> None:
        if not self._initialized:
            return
        if len(self._corners_c) != _NUM_CORNERS:
            raise RuntimeError("camera frustum must have 8 corners")
        corners = self._corners_g()
        self._bounding_planes = [
            Plane.from_points(corners[a], corners[b], corners[c]) for a, b, c in _PLANE_CORNERS
        ]
        stacked = np.vstack(corners)
        self._aabb = (stacked.min(axis=0), stacked.max(axis=0))

    def aabb(self) -> tuple[np.ndarray, np.ndarray]:
        """Axis-aligned bounding box of the frustum in the global frame."""
        if self._aabb is None:
            raise RuntimeError("bounding box is computed once intrinsics and a pose are set")
        return self._aabb[0].copy(), self._aabb[1].copy()

    def is_point_in_view(self, point: Sequence[float]) -> bool:
        """Whether a point lies inside every bounding plane."""
        return all(plane.is_point_inside(point) for plane in self._bounding_planes)

    def bounding_lines(self) -> list[np.ndarray]:
        """The 12 frustum edges as 24 consecutive start/end points."""
        self._require_initialized()
        corners = self._corners_g()
        return [corners[i].copy() for pair in _LINE_CORNERS for i in pair]

    def far_plane_points(self) -> list[np.ndarray]:
        """Three corners of the far plane in the global frame."""
        self._require_initialized()
        return [self._t_g_c.apply(self._corners_c[i]) for i in (4, 5, 6)]