# voxmap

Building blocks for volumetric mapping with signed distance fields.

## What it offers

- `voxmap.voxels`: `TsdfVoxel`, `EsdfVoxel`, `OccupancyVoxel`, `IntensityVoxel`
  and `Color`, with helpers to merge voxels (`merge_voxel_into`), compare them
  (`is_same_voxel`), blend colors (`blend_colors`) and score a test voxel
  against ground truth (`compute_voxel_error` with a `VoxelEvaluationMode`,
  returning a `VoxelEvaluationResult` and the error).
- `voxmap.marching_cubes`: marching cubes over a single cube of eight SDF
  samples (`mesh_cube`, `mesh_cube_triangles`, `interpolate_edge_vertices`),
  backed by the lookup tables in `voxmap.marching_tables`.
- `voxmap.mesh`, `voxmap.mesh_layer` and `voxmap.mesh_utils`: a `Mesh` per
  block, a `MeshLayer` that holds one mesh per block index (with
  `combined_mesh` and `connected_mesh`), and `create_connected_mesh` to weld
  nearby vertices into a single connected mesh.
- `voxmap.camera_model` and `voxmap.geometry`: a `CameraModel` frustum built
  from six bounding `Plane`s, placed with a `Transformation`.
- `voxmap.visualization`: voxel filters that pick colors or intensities for
  point-cloud output, `adjust_slice_level` for slices, and
  `points_from_voxels` to apply a filter to `(voxel, coord)` pairs.
- `voxmap.timing`: named `Timer`s that report into a `Timing` registry.
- `voxmap.protobuf_utils`: varint length-prefixed message streams
  (`read_message`, `write_message`, `read_message_count`,
  `write_message_count`), raising `ProtoStreamError` on bad input.
- `voxmap.neighbor_tools`: `iter_neighbors` over 6-, 18- and 26-connected
  voxel neighbourhoods.

## Installing

```
pip install .
```

## A short example

Corners are given as eight points, one row each:

```python
import numpy as np

from voxmap.marching_cubes import mesh_cube
from voxmap.mesh import Mesh

corners = np.array(
    [[0, 0, 0], [1, 0, 0], [1, 1, 0], [0, 1, 0],
     [0, 0, 1], [1, 0, 1], [1, 1, 1], [0, 1, 1]],
    dtype=float,
)
sdf = np.array([-0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5, 0.5])

mesh = Mesh()
mesh_cube(corners, sdf, mesh)
print(len(mesh.vertices), "vertices")  # 3 vertices: one triangle
```

Timing a block of work:

```python
from voxmap.timing import Timer, Timing

timing = Timing()
with Timer("integrate", timing=timing):
    ...
print(timing.report())
```

## What it does not do

voxmap works on single voxels, single cubes and meshes you hand it. It has
no layer of voxel blocks, so it does not integrate point clouds into a TSDF,
compute an ESDF, or mesh a whole map by itself: you feed `mesh_cube` the
corner samples and collect the results in a `MeshLayer`. It does not save or
load maps, simulate scenes, or publish anything over a network, and it has
no command-line program.

## Running the tests

```
pip install .[test]
pytest
```