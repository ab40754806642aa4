[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "slamkit"
version = "0.1.0"
description = "Linear algebra, geometry, sparse solvers and optimisation building blocks for SLAM"
requires-python = ">=3.10"
keywords = [
    "slam",
    "linear-algebra",
    "geometry",
    "quaternion",
    "sparse",
    "optimization",
    "computer-vision",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Intended Audience :: Education",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
slamkit = "slamkit.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["slamkit"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
