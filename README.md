# slamkit

Building blocks for SLAM and multi-view geometry, built on NumPy and SciPy.

## Modules

- `slamkit.linalg`: skew-symmetric matrices, rotation about Z, building and
  splitting 4x4 homogeneous transforms, point transforms, coefficient statistics.
- `slamkit.decompositions`: full SVD (`svd`, `SvdResult.reconstruct`), rank,
  pseudo-inverse, thin QR, Cholesky (raising `NotPositiveDefiniteError`),
  LU solve and determinant, symmetric and general eigenvalues.
- `slamkit.alignment`: rigid point-cloud alignment (`align_point_clouds`),
  essential-matrix construction and projection onto singular values (1, 1, 0).
- `slamkit.rotation`: `Quaternion` and `AngleAxis` with conversions, Euler
  angles (`euler_angles`, `from_euler_zyx`), `is_rotation`, and small-angle
  versus exact rotations from a rotation vector.
- `slamkit.transform`: immutable `Affine` and `Isometry` transforms with
  `rotate`, `pretranslate`, `inverse`, composition by `*`, and `compose`.
- `slamkit.solvers`: square systems (`SquareMethod`: inverse, partial- and
  full-pivot LU, column-pivot QR), SPD systems (`SpdMethod`: LLT, LDLT),
  least squares (`LeastSquaresMethod`: normal equations, QR, SVD),
  minimum-norm and weighted least squares, residual norm, RMS error and
  condition number.
- `slamkit.multiview`: pinhole projection matrices, projection, DLT
  triangulation and linear projection-matrix estimation from 3D-2D matches.
- `slamkit.sparse`: `Triplet`, `from_triplets`, `tridiagonal`, fill ratio,
  iteration over stored entries, dense-block assembly and storage estimates.
- `slamkit.sparse_solvers`: sparse Cholesky and LU solves, `SparseLDLT` with
  reusable pattern analysis, Jacobi-preconditioned `conjugate_gradient` and
  `bicgstab` returning an `IterativeResult`.
- `slamkit.pose_graph`: pose-graph Hessian structure, sparsity and a text
  sparsity pattern.
- `slamkit.jacobians`: numerical Jacobians, point-pose Jacobians and a
  `PinholeCamera` with projection and reprojection Jacobians.
- `slamkit.optimize`: Gauss-Newton and Levenberg-Marquardt fits of
  `y = a * exp(b * x)`, with noisy sample data from a seeded `CRandom`.
- `slamkit.robust`: squared, Huber and Cauchy costs, a cost table, and
  simulated pixel observations for a camera pose.
- `slamkit.covariance`: covariance propagation, information matrices and
  trajectory accumulation.
- `slamkit.views`: zero-copy column-major, row-major and strided views over
  flat buffers of doubles.
- `slamkit.formatting`: `MatrixFormat`, `format_matrix`, `format_vector`
  and `linspaced`.
- `slamkit.benchmark`: a millisecond `Timer` and `time_repeated`.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Examples

Aligning two point clouds:

```python
import numpy as np
from slamkit.alignment import align_point_clouds
from slamkit.linalg import rotation_about_z

source = np.array([[0, 1, 0, 1],
                   [0, 0, 1, 1],
                   [0, 0, 0, 0]], dtype=float)
rotation = rotation_about_z(np.pi / 4)
target = rotation @ source + np.array([[1], [2], [0]])

result = align_point_clouds(source, target)
print(result.rotation, result.translation)
```

Rotations and poses (transforms are immutable; `rotate` and `pretranslate`
return new transforms):

```python
import numpy as np
from slamkit.rotation import AngleAxis, Quaternion, unit_axis
from slamkit.transform import Isometry, compose

q = Quaternion.from_angle_axis(AngleAxis(np.pi / 2, unit_axis(2)))
print(q * np.array([1.0, 0.0, 0.0]))

base = Isometry.identity().pretranslate([1.0, 0.0, 0.0])
link = Isometry.identity().rotate(q)
print(compose(base, link).matrix())
```

Sparse systems:

```python
import numpy as np
from slamkit.sparse import tridiagonal
from slamkit.sparse_solvers import conjugate_gradient, sparse_cholesky_solve

print(sparse_cholesky_solve(tridiagonal(5), [1, 2, 3, 4, 5]))

result = conjugate_gradient(tridiagonal(100), np.ones(100),
                            tolerance=1e-10, max_iterations=1000)
print(result.iterations, result.error, result.converged)
```

Fitting `y = a * exp(b * x)` with Levenberg-Marquardt:

```python
from slamkit.optimize import exponential_data, levenberg_marquardt

xs = [0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0]
ys = exponential_data(xs, 2.0, 0.5, 42)
fit = levenberg_marquardt(xs, ys, 1.0, 1.0, 0.01, 20, 1e-10)
print(fit.a, fit.b, fit.converged)
```

## Command line

Run `slamkit` with no arguments to list the available walkthroughs:

```
slamkit
```

Then print one of them: `debugging`, `expressions`, `integration`, `map`,
`patterns` or `performance`:

```
slamkit patterns
slamkit performance --iterations 1000
```

`--iterations` sets how many repetitions the timing walkthrough uses
(default 100000).

## What is not included

- There is no bundle-adjustment or pose-graph optimiser: `simulate_observations`
  produces observations and `pose_graph_hessian` builds a Hessian structure,
  but nothing solves those problems.
- `estimate_projection_dlt` returns a scaled 3x4 projection matrix only; it
  does not decompose it into a rotation and translation or refine it
  nonlinearly.