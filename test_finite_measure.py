"""
test_finite_measure.py

Tests for probability measures given by point masses on a finite Ω.
"""

import pytest

from finite_measure import (
    validate_measure, event_probability, uniform_distribution, point_mass,
    inclusion_exclusion, partial_sums, is_measurable,
)
from sigma_core import close_to_sigma_algebra


OMEGA = [1, 2, 3, 4]


def test_uniform_distribution_is_a_measure():
    masses = uniform_distribution(OMEGA)
    assert masses == {1: 0.25, 2: 0.25, 3: 0.25, 4: 0.25}
    result = validate_measure(masses)
    assert result.is_valid
    assert result.sum_to_one and result.all_non_negative
    assert result.total == pytest.approx(1.0)


def test_uniform_distribution_on_empty_universe():
    with pytest.raises(ValueError):
        uniform_distribution([])


def test_point_mass():
    masses = point_mass(OMEGA, 3)
    assert masses == {1: 0, 2: 0, 3: 1, 4: 0}
    assert event_probability([3, 4], masses) == 1
    assert event_probability([1, 2], masses) == 0


def test_validate_measure_reports_each_failure():
    over = validate_measure({1: 0.5, 2: 0.6})
    assert not over.is_valid
    assert not over.sum_to_one
    assert over.all_non_negative
    assert over.total == pytest.approx(1.1)

    negative = validate_measure([(1, 1.5), (2, -0.5)])
    assert not negative.is_valid
    assert negative.sum_to_one
    assert not negative.all_non_negative


def test_validate_measure_tolerates_rounding():
    assert validate_measure({i: 0.1 for i in range(10)}).sum_to_one


def test_event_probability():
    masses = uniform_distribution(OMEGA)
    assert event_probability([1, 2], masses) == pytest.approx(0.5)
    assert event_probability([], masses) == 0
    assert event_probability([9], masses) == 0


def test_inclusion_exclusion_matches_direct_computation():
    masses = {1: 0.1, 2: 0.2, 3: 0.3, 4: 0.4}
    a, b = [1, 2], [2, 3]
    p_union = inclusion_exclusion(
        event_probability(a, masses), event_probability(b, masses), event_probability([2], masses))
    assert p_union == pytest.approx(event_probability([1, 2, 3], masses))


def test_partial_sums():
    assert partial_sums([0.5, 0.25, 0.25]) == [0.5, 0.75, 1.0]
    assert partial_sums([]) == []


def test_is_measurable():
    sigma = close_to_sigma_algebra([[1]], OMEGA)
    assert is_measurable([2, 3, 4], sigma)
    assert not is_measurable([1, 2], sigma)


def test_repeated_outcomes_all_count():
    pairs = [(1, 0.5), (1, 0.5)]
    result = validate_measure(pairs)
    assert result.total == pytest.approx(1.0)
    assert result.is_valid
    assert event_probability([1], pairs) == pytest.approx(1.0)
    assert event_probability([2], pairs) == 0
