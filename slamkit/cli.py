"""Command-line walkthroughs of matrix and pose techniques."""

from __future__ import annotations

import argparse
from collections.abc import Callable, Iterator

import numpy as np

from slamkit.benchmark import time_repeated
from slamkit.covariance import (
    accumulate_trajectory,
    information_matrix,
    propagate_covariance,
)
from slamkit.formatting import MatrixFormat, format_matrix, format_vector, linspaced
from slamkit.rotation import AngleAxis, Quaternion, unit_axis
from slamkit.transform import Isometry
from slamkit.views import map_column_major, map_row_major, map_strided


def _integration(args: argparse.Namespace) -> Iterator[str]:
    yield "=== Integration Patterns ==="
    yield ""
    yield "Interoperating with external buffers:"
    yield "  row-major data     -> map_row_major(buffer, rows, cols)"
    yield "  column-major data  -> map_column_major(buffer, rows, cols)"
    yield "  interleaved data   -> map_strided(buffer, stride, count)"
    yield ""
    yield "Key points:"
    yield "- Row-major and column-major layouts read the same buffer differently"
    yield "- Mapping avoids copying data"
    yield "- Be careful with data ownership: writes through a view change the buffer"


def _map(args: argparse.Namespace) -> Iterator[str]:
    yield "=== Mapping Buffers ==="
    yield ""
    raw = np.arange(1.0, 10.0)
    mapped = map_column_major(raw, 3, 3)
    yield "Mapped matrix (column-major):"
    yield format_matrix(mapped)
    yield ""
    mapped[0, 0] = 100.0
    yield f"After modification, raw[0] = {format_vector(raw[:1])}"
    yield ""
    yield f"Mapped vector: {format_vector(map_column_major(np.arange(1.0, 6.0), 5, 1))}"
    yield ""
    yield "Row-major mapped matrix:"
    yield format_matrix(map_row_major(np.arange(1.0, 10.0), 3, 3))
    yield ""
    interleaved = np.array([1, 0, 0, 2, 0, 0, 3, 0, 0, 4, 0, 0], dtype=float)
    yield f"R channel from interleaved: {format_vector(map_strided(interleaved, 3, 4))}"


def _expressions(args: argparse.Namespace) -> Iterator[str]:
    yield "=== Expressions ==="
    yield ""
    v1, v2, v3 = np.array([1.0, 2, 3]), np.array([4.0, 5, 6]), np.array([7.0, 8, 9])
    yield f"Fused expression result: {format_vector(2 * v1 + v2 - 0.5 * v3)}"
    yield f"Evaluated expression: {format_vector(2 * v1 + v2)}"
    yield ""
    product = linspaced(5, 0, 4) * linspaced(5, 1, 5)
    yield f"Element-wise product: {format_vector(product)}"
    yield ""
    qa = Quaternion.from_angle_axis(AngleAxis(np.pi / 2, unit_axis(2)))
    qb = Quaternion.from_angle_axis(AngleAxis(np.pi / 2, unit_axis(0)))
    yield "q1 * q2 applies q2 first, then q1 (like matrices):"
    yield f"  (qa * qb) rotates (0, 1, 0) to {format_vector((qa * qb).rotate([0, 1, 0]))}"


def _debugging(args: argparse.Namespace) -> Iterator[str]:
    yield "=== Debugging Tips ==="
    yield ""
    m = np.arange(1.0, 10.0).reshape(3, 3)
    clean = MatrixFormat(
        precision=4, coeff_separator=", ", row_prefix="[", row_suffix="]"
    )
    yield "1. Use MatrixFormat(...).format(matrix) for pretty printing"
    yield "   Example:"
    yield clean.format(m)
    yield ""
    yield "2. Check matrix sizes with .shape and .size"
    yield f"   M is {m.shape[0]}x{m.shape[1]}"


def _performance(args: argparse.Namespace) -> Iterator[str]:
    yield "=== Performance Tips ==="
    yield ""
    iterations = args.iterations
    rng = np.random.default_rng()
    mat = rng.uniform(-1.0, 1.0, (4, 4))
    time_product = time_repeated(lambda: mat @ mat, iterations)
    yield f"4x4 product, {iterations} iterations: {time_product} ms"
    yield ""
    vec = rng.uniform(-1.0, 1.0, 1000)
    time_norm = time_repeated(lambda: np.linalg.norm(vec), iterations)
    time_squared = time_repeated(lambda: vec @ vec, iterations)
    yield "norm vs squared norm:"
    yield f"  norm: {time_norm} ms"
    yield f"  squared norm: {time_squared} ms"


def _patterns(args: argparse.Namespace) -> Iterator[str]:
    yield "=== SLAM Patterns ==="
    yield ""
    p_in = np.eye(3) * 0.1
    jac = np.array([[1, 0, 0.5], [0, 1, 0.3]])
    yield "Covariance propagation: P_out = J * P_in * J^T"
    yield "P_out:"
    yield format_matrix(propagate_covariance(jac, p_in))
    yield ""
    yield "Information matrix:"
    yield format_matrix(information_matrix(p_in))
    yield ""
    pose = Isometry(AngleAxis(0.5, unit_axis(2)).to_matrix(), [1, 2, 3])
    yield "T * T^{-1}:"
    yield format_matrix((pose * pose.inverse()).matrix())
    yield ""
    delta = Isometry(AngleAxis(0.1, unit_axis(2)).to_matrix(), [1, 0, 0])
    trajectory = accumulate_trajectory(Isometry.identity(), [delta] * 5)
    yield "Accumulated trajectory positions:"
    for i, current in enumerate(trajectory):
        yield f"  Pose {i}: {format_vector(current.translation)}"


_TOPICS: dict[str, Callable[[argparse.Namespace], Iterator[str]]] = {
    "debugging": _debugging,
    "expressions": _expressions,
    "integration": _integration,
    "map": _map,
    "patterns": _patterns,
    "performance": _performance,
}


def topics() -> list[str]:
    """Names of the available walkthroughs, sorted."""
    return sorted(_TOPICS)


def _non_negative(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError("must be non-negative")
    return value


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(
        prog="slamkit", description="Print a walkthrough on one topic."
    )
    parser.add_argument("topic", nargs="?", choices=topics())
    parser.add_argument(
        "--iterations",
        type=_non_negative,
        default=100000,
        help="repetitions for timing topics",
    )
    args = parser.parse_args(argv)
    if args.topic is None:
        print("Available topics:")
        for name in topics():
            print(f"  {name}")
        return 0
    print("\n".join(_TOPICS[args.topic](args)))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())