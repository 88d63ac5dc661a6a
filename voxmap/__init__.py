"""Voxel map utilities: SDF voxels, marching cubes meshing, mesh layers, camera frustums and timing."""

__version__ = "0.1.0"