import pytest

from voxmap.voxels import (
    Color,
    EsdfVoxel,
    IntensityVoxel,
    OccupancyVoxel,
    TsdfVoxel,
    VoxelEvaluationMode,
    VoxelEvaluationResult,
    blend_colors,
    compute_voxel_error,
    get_voxel_sdf,
    is_observed_voxel,
    is_same_voxel,
    merge_voxel_into,
    set_voxel_sdf,
    set_voxel_weight,
)


def test_blend_same_color_is_unchanged():
    c = Color(10, 20, 30, 255)
    assert blend_colors(c, 1.0, c, 3.0) == c


def test_blend_zero_weight_keeps_other_color():
    a = Color(200, 100, 50, 255)
    b = Color(0, 0, 0, 0)
    assert blend_colors(a, 2.0, b, 0.0) == a


def test_blend_rejects_zero_total_weight():
    with pytest.raises(ValueError):
        blend_colors(Color(), 0.0, Color(), 0.0)


def test_observed_voxels():
    assert is_observed_voxel(TsdfVoxel(weight=1.0))
    assert not is_observed_voxel(TsdfVoxel(weight=0.0))
    assert is_observed_voxel(EsdfVoxel(observed=True))
    assert not is_observed_voxel(EsdfVoxel())
    assert not is_observed_voxel(OccupancyVoxel(observed=True))


def test_sdf_get_set_round_trip():
    for voxel in (TsdfVoxel(), EsdfVoxel()):
        set_voxel_sdf(voxel, 0.75)
        assert get_voxel_sdf(voxel) == 0.75


def test_sdf_on_intensity_voxel_raises():
    with pytest.raises(TypeError):
        get_voxel_sdf(IntensityVoxel())


def test_set_weight():
    tsdf = TsdfVoxel()
    set_voxel_weight(tsdf, 2.5)
    assert tsdf.weight == 2.5
    esdf = EsdfVoxel()
    set_voxel_weight(esdf, 1.0)
    assert esdf.observed is True
    set_voxel_weight(esdf, 0.0)
    assert esdf.observed is False


def test_error_no_overlap():
    result, error = compute_voxel_error(
        TsdfVoxel(distance=1.0, weight=1.0), TsdfVoxel(distance=2.0), VoxelEvaluationMode.EVALUATE_ALL_VOXELS
    )
    assert result is VoxelEvaluationResult.NO_OVERLAP
    assert error == 0.0


def test_error_evaluated_value():
    result, error = compute_voxel_error(
        EsdfVoxel(distance=1.0, observed=True),
        EsdfVoxel(distance=1.25, observed=True),
        VoxelEvaluationMode.EVALUATE_ALL_VOXELS,
    )
    assert result is VoxelEvaluationResult.EVALUATED
    assert error == 0.25


def test_error_is_antisymmetric():
    a = TsdfVoxel(distance=0.3, weight=1.0)
    b = TsdfVoxel(distance=-0.1, weight=1.0)
    mode = VoxelEvaluationMode.EVALUATE_ALL_VOXELS
    assert compute_voxel_error(a, b, mode)[1] == pytest.approx(-compute_voxel_error(b, a, mode)[1])


@pytest.mark.parametrize(
    "mode, gt_distance, test_distance, expected",
    [
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE, 1.0, -1.0, VoxelEvaluationResult.IGNORED),
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_TEST_SURFACE, -1.0, 1.0, VoxelEvaluationResult.EVALUATED),
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE, -1.0, 1.0, VoxelEvaluationResult.IGNORED),
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_GT_SURFACE, 1.0, -1.0, VoxelEvaluationResult.EVALUATED),
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES, 1.0, -1.0, VoxelEvaluationResult.IGNORED),
        (VoxelEvaluationMode.IGNORE_ERROR_BEHIND_ALL_SURFACES, -1.0, 1.0, VoxelEvaluationResult.IGNORED),
        (VoxelEvaluationMode.EVALUATE_ALL_VOXELS, -1.0, -1.0, VoxelEvaluationResult.EVALUATED),
    ],
)
def test_error_modes(mode, gt_distance, test_distance, expected):
    result, _ = compute_voxel_error(
        TsdfVoxel(distance=gt_distance, weight=1.0), TsdfVoxel(distance=test_distance, weight=1.0), mode
    )
    assert result is expected


def test_same_voxel():
    assert is_same_voxel(TsdfVoxel(0.5, 1.0, Color(1, 2, 3, 4)), TsdfVoxel(0.5, 1.0, Color(1, 2, 3, 4)))
    assert not is_same_voxel(TsdfVoxel(0.5, 1.0, Color(1, 2, 3, 4)), TsdfVoxel(0.5, 1.0, Color(1, 2, 3, 5)))
    assert not is_same_voxel(EsdfVoxel(parent=(1, 0, 0)), EsdfVoxel(parent=(0, 0, 0)))
    assert is_same_voxel(OccupancyVoxel(0.2, True), OccupancyVoxel(0.2, True))


def test_same_voxel_type_mismatch():
    with pytest.raises(TypeError):
        is_same_voxel(TsdfVoxel(), EsdfVoxel())


def test_merge_tsdf_into_empty_copies_source():
    source = TsdfVoxel(0.4, 2.0, Color(9, 8, 7, 255))
    target = TsdfVoxel()
    merge_voxel_into(source, target)
    assert is_same_voxel(source, target)


def test_merge_tsdf_identical_keeps_distance_and_sums_weight():
    source = TsdfVoxel(0.4, 2.0, Color(9, 8, 7, 255))
    target = TsdfVoxel(0.4, 2.0, Color(9, 8, 7, 255))
    merge_voxel_into(source, target)
    assert target.distance == pytest.approx(source.distance)
    assert target.weight == source.weight + source.weight
    assert target.color == source.color


def test_merge_tsdf_zero_weights_untouched():
    target = TsdfVoxel(distance=0.7)
    merge_voxel_into(TsdfVoxel(distance=0.1), target)
    assert target.distance == 0.7


def test_merge_esdf():
    target = EsdfVoxel(distance=3.0)
    merge_voxel_into(EsdfVoxel(distance=1.5, observed=True), target)
    assert target.distance == 1.5 and target.observed
    both = EsdfVoxel(distance=1.5, observed=True)
    merge_voxel_into(EsdfVoxel(distance=1.5, observed=True), both)
    assert both.distance == 1.5
    unobserved = EsdfVoxel(distance=2.0, observed=True)
    merge_voxel_into(EsdfVoxel(distance=9.0), unobserved)
    assert unobserved.distance == 2.0


def test_merge_occupancy():
    target = OccupancyVoxel(probability_log=0.6)
    merge_voxel_into(OccupancyVoxel(probability_log=0.0, observed=True), target)
    assert target.probability_log == 0.6
    assert target.observed is True