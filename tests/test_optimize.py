import numpy as np
import pytest

from slamkit.optimize import (
    CRandom,
    exponential_cost,
    exponential_data,
    gauss_newton,
    levenberg_marquardt,
)

XS = [0, 0.5, 1.0, 1.5, 2.0, 2.5, 3.0]


def test_crandom_matches_c_library_sequence_for_seed_one():
    rng = CRandom(1)
    assert [rng.next(), rng.next()] == [1804289383, 846930886]


def test_crandom_seed_zero_behaves_like_one():
    a, b = CRandom(0), CRandom(1)
    assert [a.next() for _ in range(5)] == [b.next() for _ in range(5)]


def test_crandom_is_deterministic_and_in_range():
    first = [v for v, _ in zip(CRandom(42), range(50))]
    second = [v for v, _ in zip(CRandom(42), range(50))]
    assert first == second
    assert all(0 <= v < 2**31 for v in first)


def test_exponential_data_noise_is_bounded():
    ys = exponential_data(XS)
    clean = 2.0 * np.exp(0.5 * np.array(XS))
    assert ys.shape == (len(XS),)
    assert np.all(np.abs(ys - clean) <= 0.05 + 1e-12)


def test_exponential_cost_zero_on_exact_data():
    ys = 2.0 * np.exp(0.5 * np.array(XS))
    assert exponential_cost(XS, ys, 2.0, 0.5) == pytest.approx(0.0, abs=1e-20)
    assert exponential_cost(XS, ys, 1.0, 1.0) > 0.0


def test_cost_rejects_mismatched_lengths():
    with pytest.raises(ValueError):
        exponential_cost([0.0, 1.0], [1.0], 1.0, 1.0)


def test_gauss_newton_recovers_noiseless_parameters():
    ys = 2.0 * np.exp(0.5 * np.array(XS))
    result = gauss_newton(XS, ys, a=1.5, b=0.6)
    assert result.converged
    assert result.a == pytest.approx(2.0, abs=1e-6)
    assert result.b == pytest.approx(0.5, abs=1e-6)
    assert result.steps[-1].step_norm < 1e-8


def test_gauss_newton_fit_beats_truth_on_noisy_data():
    ys = exponential_data(XS)
    result = gauss_newton(XS, ys, a=1.8, b=0.45)
    assert result.converged
    assert exponential_cost(XS, ys, result.a, result.b) <= exponential_cost(
        XS, ys, 2.0, 0.5
    )


def test_gauss_newton_stops_at_iteration_limit():
    ys = exponential_data(XS)
    result = gauss_newton(XS, ys, max_iterations=1)
    assert not result.converged
    assert len(result.steps) == 1
    assert result.steps[0].cost == pytest.approx(exponential_cost(XS, ys, 1.0, 1.0))


def test_levenberg_marquardt_lowers_cost_monotonically():
    ys = exponential_data(XS)
    result = levenberg_marquardt(XS, ys)
    accepted = [s.cost for s in result.steps if s.accepted]
    assert accepted
    assert all(later < earlier for earlier, later in zip(accepted, accepted[1:]))
    assert exponential_cost(XS, ys, result.a, result.b) < exponential_cost(
        XS, ys, 1.0, 1.0
    )


def test_levenberg_marquardt_damping_schedule():
    ys = exponential_data(XS)
    result = levenberg_marquardt(XS, ys, damping=0.01)
    damping = 0.01
    for step in result.steps:
        damping = damping / 2 if step.accepted else damping * 2
        assert step.damping == pytest.approx(damping)


def test_levenberg_marquardt_without_iterations_returns_start():
    ys = exponential_data(XS)
    result = levenberg_marquardt(XS, ys, a=1.25, b=0.75, max_iterations=0)
    assert (result.a, result.b, result.converged, result.steps) == (
        1.25,
        0.75,
        False,
        [],
    )


def test_optimisers_reject_empty_data():
    with pytest.raises(ValueError):
        gauss_newton([], [])
    with pytest.raises(ValueError):
        levenberg_marquardt([], [])