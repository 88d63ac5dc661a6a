import numpy as np
import pytest

from voxmap.mesh import Mesh
from voxmap.mesh_utils import create_connected_mesh
from voxmap.voxels import Color


def _mesh(points, normal=(0.0, 0.0, 1.0), color=None):
    mesh = Mesh()
    mesh.vertices = [np.array(p, dtype=float) for p in points]
    mesh.indices = list(range(len(points)))
    mesh.normals = [np.array(normal, dtype=float) for _ in points]
    if color is not None:
        mesh.colors = [color] * len(points)
    return mesh


TRI_A = [(0, 0, 0), (1, 0, 0), (0, 1, 0)]
TRI_B = [(1, 0, 0), (0, 1, 0), (1, 1, 0)]


def test_shared_vertices_are_merged():
    connected = create_connected_mesh([_mesh(TRI_A), _mesh(TRI_B)])
    assert len(connected.vertices) == 4
    assert connected.indices == [0, 1, 2, 1, 2, 3]
    assert np.allclose(connected.vertices[3], TRI_B[2])


def test_single_mesh_is_accepted():
    connected = create_connected_mesh(_mesh(TRI_A + TRI_B))
    assert len(connected.vertices) == 4
    assert len(connected.indices) == 6


def test_merged_normals_are_averaged_and_unit():
    connected = create_connected_mesh(
        [_mesh(TRI_A, normal=(0, 0, 1)), _mesh(TRI_B, normal=(1, 0, 0))]
    )
    for normal in connected.normals:
        assert np.isclose(np.linalg.norm(normal), 1.0)
    shared = connected.normals[1]
    assert np.isclose(shared[0], shared[2])
    assert np.isclose(shared[1], 0.0)
    assert np.allclose(connected.normals[0], [0, 0, 1])


def test_opposite_normals_fall_back_to_up():
    connected = create_connected_mesh(
        [_mesh(TRI_A, normal=(1, 0, 0)), _mesh(TRI_B, normal=(-1, 0, 0))]
    )
    assert np.allclose(connected.normals[1], [0, 0, 1])


def test_colors_follow_first_vertex():
    red = Color(255, 0, 0, 255)
    blue = Color(0, 0, 255, 255)
    connected = create_connected_mesh([_mesh(TRI_A, color=red), _mesh(TRI_B, color=blue)])
    assert connected.colors == [red, red, red, blue]


def test_large_threshold_drops_degenerate_triangles():
    tiny = [(0, 0, 0), (0.01, 0, 0), (0, 0.01, 0)]
    connected = create_connected_mesh([_mesh(tiny)], approximate_vertex_proximity_threshold=1.0)
    assert len(connected.vertices) == 1
    assert connected.indices == []


def test_empty_meshes_are_skipped():
    connected = create_connected_mesh([Mesh(), _mesh(TRI_A), Mesh()])
    assert len(connected.vertices) == 3
    assert connected.indices == [0, 1, 2]


def test_input_meshes_are_not_modified():
    a = _mesh(TRI_A, normal=(0, 0, 1))
    b = _mesh(TRI_B, normal=(1, 0, 0))
    create_connected_mesh([a, b])
    assert np.allclose(a.normals[1], [0, 0, 1])
    assert np.allclose(b.normals[0], [1, 0, 0])


def test_mismatched_indices_raise():
    mesh = _mesh(TRI_A)
    mesh.indices = [0, 1]
    with pytest.raises(ValueError):
        create_connected_mesh([mesh])


def test_non_triangle_vertex_count_raises():
    with pytest.raises(ValueError):
        create_connected_mesh([_mesh(TRI_A + [(5, 5, 5)])])


def test_non_positive_threshold_raises():
    with pytest.raises(ValueError):
        create_connected_mesh([_mesh(TRI_A)], approximate_vertex_proximity_threshold=0.0)