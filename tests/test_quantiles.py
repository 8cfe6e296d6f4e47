"""Tests for probability-space quantile extraction."""
import pytest
from scipy.stats import norm

from synth_regime.analysis.quantiles import extract_quantiles
from synth_regime.errors import SnapshotError


def _linear_curve(low: float, high: float, step: float) -> dict:
    levels = []
    price = low
    while price <= high:
        levels.append(price)
        price += step
    return {p: (p - low) / (high - low) for p in levels}


def test_linear_cdf_matches_analytic_inverse():
    curve = _linear_curve(90_000.0, 110_000.0, 1_000.0)
    levels = extract_quantiles(curve)

    assert levels is not None
    assert levels.q10 == pytest.approx(92_000.0)
    assert levels.q50 == pytest.approx(100_000.0)
    assert levels.q90 == pytest.approx(108_000.0)


def test_normal_cdf_median_exact_and_tails_close():
    mean, sd = 100_000.0, 2_000.0
    curve = {mean + k * 500.0: float(norm.cdf(mean + k * 500.0, loc=mean, scale=sd)) for k in range(-10, 11)}

    levels = extract_quantiles(curve)

    assert levels.q50 == pytest.approx(mean, abs=1e-6)
    assert levels.q10 == pytest.approx(norm.ppf(0.1, loc=mean, scale=sd), abs=25.0)
    assert levels.q90 == pytest.approx(norm.ppf(0.9, loc=mean, scale=sd), abs=25.0)


def test_interpolates_in_probability_space():
    # q50 sits 2/3 of the way from 0.2 to 0.65 in probability
    curve = {100.0: 0.2, 130.0: 0.65}
    levels = extract_quantiles(curve)

    assert levels.q50 == pytest.approx(100.0 + (0.3 / 0.45) * 30.0)


def test_unsorted_input_is_sorted_by_probability():
    curve = {110.0: 0.9, 100.0: 0.1, 105.0: 0.5}
    levels = extract_quantiles(curve)

    assert (levels.q10, levels.q50, levels.q90) == (100.0, 105.0, 110.0)


def test_targets_outside_curve_clamp_to_boundary():
    curve = {100.0: 0.3, 110.0: 0.7}
    levels = extract_quantiles(curve)

    assert levels.q10 == 100.0
    assert levels.q90 == 110.0
    assert levels.q50 == pytest.approx(105.0)


def test_equal_probabilities_resolve_to_midpoint():
    curve = {100.0: 0.2, 105.0: 0.5, 110.0: 0.5, 120.0: 0.8}
    levels = extract_quantiles(curve)

    assert levels.q50 == pytest.approx(107.5)
    assert levels.q10 == 100.0


def test_exact_probability_match_returns_level_price():
    levels = extract_quantiles({100.0: 0.1, 104.0: 0.5, 120.0: 0.9})
    assert levels.q50 == 104.0


def test_non_numeric_level_raises_snapshot_error():
    with pytest.raises(SnapshotError):
        extract_quantiles({"99": 0.1, "abc": 0.9})


def test_fewer_than_two_levels_is_insufficient():
    assert extract_quantiles({}) is None
    assert extract_quantiles({100.0: 0.5}) is None
