"""Voxel filters for turning layers into colored or intensity point sets.

Each filter looks at one voxel and its center coordinate. It returns the
value to show, or ``None`` when the voxel should not be shown. Occupancy
filters return a plain boolean. Coordinates are only consulted by the
slice filters.
"""

from __future__ import annotations

import math
from typing import Callable, Iterable, Sequence, TypeVar

import numpy as np

from voxmap.voxels import Color, EsdfVoxel, IntensityVoxel, TsdfVoxel

FLOAT_EPSILON = 1e-6
_MIN_COLOR_WEIGHT = 0.0
_MIN_INTENSITY_WEIGHT = 1e-3

_V = TypeVar("_V")
_R = TypeVar("_R")


def _check_plane_index(free_plane_index: int) -> None:
    if free_plane_index not in (0, 1, 2):
        raise ValueError(f"free plane index must be 0, 1 or 2, not {free_plane_index}")


def _in_slice(
    coord: Sequence[float], free_plane_index: int, free_plane_val: float, voxel_size: float
) -> bool:
    _check_plane_index(free_plane_index)
    offset = abs(float(coord[free_plane_index]) - free_plane_val)
    return offset <= voxel_size / 2.0 + FLOAT_EPSILON


def visualize_near_surface_tsdf_voxel(
    voxel: TsdfVoxel, coord: Sequence[float], surface_distance: float
) -> Color | None:
    """The voxel's color if it is observed and within ``surface_distance`` of the surface."""
    if voxel.weight > _MIN_COLOR_WEIGHT and abs(voxel.distance) < surface_distance:
        return voxel.color
    return None


def visualize_tsdf_voxel(voxel: TsdfVoxel, coord: Sequence[float]) -> Color | None:
    """The voxel's color if it carries any weight."""
    if voxel.weight > _MIN_COLOR_WEIGHT:
        return voxel.color
    return None


def distance_intensity_tsdf_voxel(voxel: TsdfVoxel, coord: Sequence[float]) -> float | None:
    """The voxel's distance if its weight is above the intensity threshold."""
    if voxel.weight > _MIN_INTENSITY_WEIGHT:
        return voxel.distance
    return None


def distance_intensity_tsdf_voxel_near_surface(
    voxel: TsdfVoxel, coord: Sequence[float], surface_distance: float
) -> float | None:
    """The voxel's distance if it is observed and near the surface."""
    if voxel.weight > _MIN_INTENSITY_WEIGHT and abs(voxel.distance) < surface_distance:
        return voxel.distance
    return None


def distance_intensity_tsdf_voxel_slice(
    voxel: TsdfVoxel,
    coord: Sequence[float],
    free_plane_index: int,
    free_plane_val: float,
    voxel_size: float,
) -> float | None:
    """The voxel's distance if it is observed and lies in the slice."""
    if _in_slice(coord, free_plane_index, free_plane_val, voxel_size):
        if voxel.weight > _MIN_INTENSITY_WEIGHT:
            return voxel.distance
    return None


def distance_intensity_esdf_voxel(voxel: EsdfVoxel, coord: Sequence[float]) -> float | None:
    """The voxel's distance if it is observed."""
    if voxel.observed:
        return voxel.distance
    return None


def distance_intensity_esdf_voxel_slice(
    voxel: EsdfVoxel,
    coord: Sequence[float],
    free_plane_index: int,
    free_plane_val: float,
    voxel_size: float,
) -> float | None:
    """The voxel's distance if it is observed and lies in the slice."""
    if _in_slice(coord, free_plane_index, free_plane_val, voxel_size):
        if voxel.observed:
            return voxel.distance
    return None


def intensity_voxel_value(voxel: IntensityVoxel, coord: Sequence[float]) -> float | None:
    """The voxel's intensity if its weight is above the intensity threshold."""
    if voxel.weight > _MIN_INTENSITY_WEIGHT:
        return voxel.intensity
    return None


def visualize_occupied_tsdf_voxel(
    voxel: TsdfVoxel, coord: Sequence[float], min_distance: float = 0.0
) -> bool:
    """Whether the voxel is observed and at or behind ``min_distance``."""
    return voxel.weight > _MIN_INTENSITY_WEIGHT and voxel.distance <= min_distance


def visualize_free_esdf_voxel(
    voxel: EsdfVoxel, coord: Sequence[float], min_distance: float
) -> float | None:
    """The voxel's distance if it is observed and at least ``min_distance`` away."""
    if voxel.observed and voxel.distance >= min_distance:
        return voxel.distance
    return None


def adjust_slice_level(free_plane_val: float, voxel_size: float) -> float:
    """Push a slice level up by half a voxel when it falls on a voxel boundary."""
    if voxel_size <= 0.0:
        raise ValueError(f"voxel size must be positive, not {voxel_size}")
    if math.remainder(free_plane_val, voxel_size) < FLOAT_EPSILON:
        return free_plane_val + voxel_size / 2.0
    return free_plane_val


def points_from_voxels(
    voxels: Iterable[tuple[_V, Sequence[float]]],
    vis_function: Callable[[_V, Sequence[float]], _R | None],
) -> list[tuple[np.ndarray, _R]]:
    """Apply a filter to ``(voxel, coord)`` pairs and keep the shown ones.

    Returns ``(coord, value)`` pairs in input order. A filter result of
    ``None`` or ``False`` drops the voxel.
    """
    points: list[tuple[np.ndarray, _R]] = []
    for voxel, coord in voxels:
        value = vis_function(voxel, coord)
        if value is None or value is False:
            continue
        points.append((np.asarray(coord, dtype=float), value))
    return points