"""Nonlinear least squares for the model y = a exp(b x): Gauss-Newton and LM."""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np
from numpy.typing import ArrayLike

_MASK32 = 0xFFFFFFFF
_MODULUS = 2147483647


class CRandom:
    """Additive-feedback generator reproducing the C library ``rand()`` sequence."""

    def __init__(self, seed: int = 1) -> None:
        seed &= _MASK32
        if seed == 0:
            seed = 1
        if seed >= 1 << 31:
            seed -= 1 << 32
        table = [seed]
        for _ in range(1, 31):
            previous = table[-1]
            sign = -1 if previous < 0 else 1
            hi, lo = divmod(abs(previous), 127773)
            word = 16807 * sign * lo - 2836 * sign * hi
            if word < 0:
                word += _MODULUS
            table.append(word)
        table.extend(table[:3])
        self._state: deque[int] = deque((v & _MASK32 for v in table), maxlen=34)
        for _ in range(310):
            self._advance()

    def _advance(self) -> int:
        value = (self._state[-31] + self._state[-3]) & _MASK32
        self._state.append(value)
        return value

    def next(self) -> int:
        """Next value in [0, 2^31)."""
        return self._advance() >> 1

    def __iter__(self) -> Iterator[int]:
        while True:
            yield self.next()


@dataclass(frozen=True)
class Step:
    """One iteration of an optimiser."""

    iteration: int
    a: float
    b: float
    cost: float
    step_norm: float
    accepted: bool = True
    damping: Optional[float] = None


@dataclass(frozen=True)
class FitResult:
    """Final parameters and the history of iterations."""

    a: float
    b: float
    converged: bool
    steps: list[Step] = field(default_factory=list)


def _data(xs: ArrayLike, ys: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    x = np.asarray(xs, dtype=float).reshape(-1)
    y = np.asarray(ys, dtype=float).reshape(-1)
    if x.shape != y.shape:
        raise ValueError(f"got {x.size} x values but {y.size} y values")
    if x.size == 0:
        raise ValueError("no data points")
    return x, y


def exponential_data(
    xs: Sequence[float], a: float = 2.0, b: float = 0.5, seed: int = 42
) -> np.ndarray:
    """Samples of a exp(b x) with uniform noise in [-0.05, 0.05) from ``CRandom``."""
    rng = CRandom(seed)
    return np.array(
        [a * np.exp(b * x) + 0.1 * ((rng.next() % 100) / 100.0 - 0.5) for x in xs]
    )


def _residuals(x: np.ndarray, y: np.ndarray, a: float, b: float) -> np.ndarray:
    return y - a * np.exp(b * x)


def _jacobian(x: np.ndarray, a: float, b: float) -> np.ndarray:
    e = np.exp(b * x)
    return np.column_stack([-e, -a * x * e])


def exponential_cost(xs: ArrayLike, ys: ArrayLike, a: float, b: float) -> float:
    """Sum of squared residuals y - a exp(b x)."""
    x, y = _data(xs, ys)
    r = _residuals(x, y, a, b)
    return float(r @ r)


def gauss_newton(
    xs: ArrayLike,
    ys: ArrayLike,
    a: float = 1.0,
    b: float = 1.0,
    max_iterations: int = 10,
    tolerance: float = 1e-8,
) -> FitResult:
    """Fit a, b by Gauss-Newton; each step records the cost before its update."""
    x, y = _data(xs, ys)
    steps: list[Step] = []
    converged = False
    for iteration in range(max_iterations):
        r = _residuals(x, y, a, b)
        jac = _jacobian(x, a, b)
        cost = float(r @ r)
        dx = np.linalg.solve(jac.T @ jac, -jac.T @ r)
        a += float(dx[0])
        b += float(dx[1])
        norm = float(np.linalg.norm(dx))
        steps.append(Step(iteration, a, b, cost, norm))
        if norm < tolerance:
            converged = True
            break
    return FitResult(a, b, converged, steps)


def levenberg_marquardt(
    xs: ArrayLike,
    ys: ArrayLike,
    a: float = 1.0,
    b: float = 1.0,
    damping: float = 0.01,
    max_iterations: int = 20,
    tolerance: float = 1e-10,
) -> FitResult:
    """Fit a, b by Levenberg-Marquardt, halving the damping on success, doubling on failure.

    Accepted steps record the new cost; rejected steps the unchanged cost.
    """
    x, y = _data(xs, ys)
    steps: list[Step] = []
    converged = False
    for iteration in range(max_iterations):
        r = _residuals(x, y, a, b)
        jac = _jacobian(x, a, b)
        cost = float(r @ r)
        hessian = jac.T @ jac + damping * np.eye(2)
        dx = np.linalg.solve(hessian, -jac.T @ r)
        a_new = a + float(dx[0])
        b_new = b + float(dx[1])
        new_cost = exponential_cost(x, y, a_new, b_new)
        norm = float(np.linalg.norm(dx))
        if new_cost < cost:
            a, b = a_new, b_new
            damping /= 2
            steps.append(Step(iteration, a, b, new_cost, norm, True, damping))
            if abs(cost - new_cost) < tolerance:
                converged = True
                break
        else:
            damping *= 2
            steps.append(Step(iteration, a, b, cost, norm, False, damping))
    return FitResult(a, b, converged, steps)