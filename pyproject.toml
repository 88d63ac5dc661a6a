[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "voxmap"
version = "0.1.0"
description = "Voxel map utilities: TSDF/ESDF voxels, marching cubes meshing, mesh layers, camera frustums and timing."
requires-python = ">=3.10"
dependencies = ["numpy"]
keywords = ["voxel", "tsdf", "esdf", "marching cubes", "mesh", "mapping"]
classifiers = [
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["voxmap"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
