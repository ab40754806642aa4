"""Linear algebra, geometry, sparse solvers and optimisation building blocks for SLAM."""

__version__ = "0.1.0"

__all__ = [
    "alignment",
    "benchmark",
    "cli",
    "covariance",
    "decompositions",
    "formatting",
    "jacobians",
    "linalg",
    "multiview",
    "optimize",
    "pose_graph",
    "robust",
    "rotation",
    "solvers",
    "sparse",
    "sparse_solvers",
    "transform",
    "views",
]