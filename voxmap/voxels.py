"""Voxel types and the per-voxel operations used by layers, merging and evaluation."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

_SAME_VOXEL_TOLERANCE = 1e-10
_OBSERVED_WEIGHT_THRESHOLD = 1e-6


@dataclass(frozen=True)
class Color:
    """An 8-bit RGBA color."""

    r: int = 0
    g: int = 0
    b: int = 0
    a: int = 0


def _to_channel(value: float) -> int:
    return max(0, min(255, int(round(value))))


def blend_colors(first: Color, first_weight: float, second: Color, second_weight: float) -> Color:
    """Blend two colors in proportion to their weights."""
    total = first_weight + second_weight
    if total <= 0:
        raise ValueError("combined weight must be positive to blend colors")
    w1 = first_weight / total
    w2 = second_weight / total
    return Color(
        _to_channel(first.r * w1 + second.r * w2),
        _to_channel(first.g * w1 + second.g * w2),
        _to_channel(first.b * w1 + second.b * w2),
        _to_channel(first.a * w1 + second.a * w2),
    )


@dataclass
class TsdfVoxel:
    distance: float = 0.0
    weight: float = 0.0
    color: Color = field(default_factory=Color)


@dataclass
class EsdfVoxel:
    distance: float = 0.0
    observed: bool = False
    in_queue: bool = False
    fixed: bool = False
    parent: tuple[int, int, int] = (0, 0, 0)


@dataclass
class OccupancyVoxel:
    probability_log: float = 0.0
    observed: bool = False


@dataclass
class IntensityVoxel:
    intensity: float = 0.0
    weight: float = 0.0


class VoxelEvaluationMode(Enum):
    EVALUATE_ALL_VOXELS = "evaluate_all_voxels"
    IGNORE_ERROR_BEHIND_TEST_SURFACE = "ignore_error_behind_test_surface"
    IGNORE_ERROR_BEHIND_GT_SURFACE = "ignore_error_behind_gt_surface"
    IGNORE_ERROR_BEHIND_ALL_SURFACES = "ignore_error_behind_all_surfaces"


class VoxelEvaluationResult(Enum):
    EVALUATED = "evaluated"
    IGNORED = "ignored"
    NO_OVERLAP = "no_overlap"


def is_observed_voxel(voxel: object) -> bool:
    """Whether a voxel carries an observation; unknown voxel types never do."""
    if isinstance(voxel, TsdfVoxel):
        return voxel.weight > _OBSERVED_WEIGHT_THRESHOLD
    if isinstance(voxel, EsdfVoxel):
        return voxel.observed
    return False


def _require_sdf_voxel(voxel: object) -> None:
    if not isinstance(voxel, (TsdfVoxel, EsdfVoxel)):
        raise TypeError(f"{type(voxel).__name__} has no signed distance")


def get_voxel_sdf(voxel: TsdfVoxel | EsdfVoxel) -> float:
    _require_sdf_voxel(voxel)
    return voxel.distance


def set_voxel_sdf(voxel: TsdfVoxel | EsdfVoxel, sdf: float) -> None:
    _require_sdf_voxel(voxel)
    voxel.distance = sdf


def set_voxel_weight(voxel: TsdfVoxel | EsdfVoxel, weight: float) -> None:
    """Set the weight; ESDF voxels only record whether the weight is positive."""
    if isinstance(voxel, TsdfVoxel):
        voxel.weight = weight
    elif isinstance(voxel, EsdfVoxel):
        voxel.observed = weight > 0.0
    else:
        raise TypeError(f"{type(voxel).__name__} has no weight")


def compute_voxel_error(
    voxel_gt: TsdfVoxel | EsdfVoxel,
    voxel_test: TsdfVoxel | EsdfVoxel,
    evaluation_mode: VoxelEvaluationMode,
) -> tuple[VoxelEvaluationResult, float]:
    """Compare a test voxel against ground truth, returning (result, error)."""
    _require_sdf_voxel(voxel_gt)
    _require_sdf_voxel(voxel_test)

    if not is_observed_voxel(voxel_gt) or not is_observed_voxel(voxel_test):
        return VoxelEvaluationResult.NO_OVERLAP, 0.0

    ignore_behind_test = evaluation_mode in (
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    )
    ignore_behind_gt = evaluation_mode in (
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE,
        VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES,
    )
    if (ignore_behind_test and voxel_test.distance < 0.0) or (
        ignore_behind_gt and voxel_gt.distance < 0.0
    ):
        return VoxelEvaluationResult.IGNORED, 0.0

    return VoxelEvaluationResult.EVALUATED, voxel_test.distance - voxel_gt.distance


def _close(a: float, b: float) -> bool:
    return abs(a - b) < _SAME_VOXEL_TOLERANCE


def is_same_voxel(voxel_a: object, voxel_b: object) -> bool:
    """Compare two voxels of the same type within a tight tolerance."""
    if type(voxel_a) is not type(voxel_b):
        raise TypeError("voxels must be of the same type")
    if isinstance(voxel_a, TsdfVoxel):
        return (
            _close(voxel_a.distance, voxel_b.distance)
            and _close(voxel_a.weight, voxel_b.weight)
            and voxel_a.color == voxel_b.color
        )
    if isinstance(voxel_a, EsdfVoxel):
        return (
            _close(voxel_a.distance, voxel_b.distance)
            and voxel_a.observed == voxel_b.observed
            and voxel_a.in_queue == voxel_b.in_queue
            and voxel_a.fixed == voxel_b.fixed
            and tuple(voxel_a.parent) == tuple(voxel_b.parent)
        )
    if isinstance(voxel_a, OccupancyVoxel):
        return (
            _close(voxel_a.probability_log, voxel_b.probability_log)
            and voxel_a.observed == voxel_b.observed
        )
    raise TypeError(f"cannot compare voxels of type {type(voxel_a).__name__}")


def merge_voxel_into(source: object, target: object) -> None:
    """Merge the contents of ``source`` into ``target`` in place."""
    if type(source) is not type(target):
        raise TypeError("voxels must be of the same type")
    if isinstance(source, TsdfVoxel):
        combined = source.weight + target.weight
        if combined > 0:
            target.distance = (
                source.distance * source.weight + target.distance * target.weight
            ) / combined
            target.color = blend_colors(source.color, source.weight, target.color, target.weight)
            target.weight = combined
    elif isinstance(source, EsdfVoxel):
        if source.observed and target.observed:
            target.distance = (source.distance + target.distance) / 2.0
        elif source.observed:
            target.distance = source.distance
        target.observed = target.observed or source.observed
    elif isinstance(source, OccupancyVoxel):
        target.probability_log += source.probability_log
        target.observed = target.observed or source.observed
    else:
        raise TypeError(f"cannot merge voxels of type {type(source).__name__}")