"""
Tests for demand statistics.
"""

import math

import pytest

from optimizer.insights.demand_statistics import (
    DemandStatistics,
    clean_demand_series,
    compute_demand_statistics,
)


class TestComputeDemandStatistics:
    def test_mean_and_population_std(self):
        stats = compute_demand_statistics([1, 2, 3, 4])

        assert stats.average_demand == pytest.approx(2.5)
        # Population variance: 5 / 4
        assert stats.standard_deviation == pytest.approx(math.sqrt(1.25))
        assert stats.total_demand == pytest.approx(10.0)
        assert stats.coefficient_of_variation == pytest.approx(math.sqrt(1.25) / 2.5)
        assert stats.observation_count == 4

    def test_constant_series_has_zero_std(self):
        stats = compute_demand_statistics([100.0] * 12)

        assert stats.average_demand == 100.0
        assert stats.standard_deviation == 0.0
        assert stats.total_demand == 1200.0
        assert stats.coefficient_of_variation == 0.0

    def test_all_zero_series(self):
        stats = compute_demand_statistics([0, 0, 0])

        assert stats.standard_deviation == 0.0
        assert stats.average_demand == 0.0
        assert stats.coefficient_of_variation == 0.0

    def test_empty_series_is_all_zero(self):
        assert compute_demand_statistics([]) == DemandStatistics()

    def test_invalid_entries_are_excluded_not_zero_filled(self):
        stats = compute_demand_statistics([10, -5, float("nan"), "abc", None, 20])

        assert stats.observation_count == 2
        assert stats.average_demand == pytest.approx(15.0)
        assert stats.standard_deviation == pytest.approx(5.0)

    def test_only_invalid_entries(self):
        stats = compute_demand_statistics([-1, float("nan")])
        assert stats == DemandStatistics()

    def test_infinite_entries_are_excluded(self):
        stats = compute_demand_statistics([10, float("inf"), 30])
        assert stats.average_demand == pytest.approx(20.0)

    def test_std_is_never_negative(self):
        for series in ([5], [0, 1000], [3.3, 3.3, 3.3000001], [1e-9, 2e-9]):
            assert compute_demand_statistics(series).standard_deviation >= 0


class TestCleanDemandSeries:
    def test_keeps_order_of_valid_values(self):
        assert list(clean_demand_series([3, -1, 1, "x", 2])) == [3.0, 1.0, 2.0]

    def test_numeric_strings_are_kept(self):
        assert list(clean_demand_series(["4", "5.5"])) == [4.0, 5.5]
