"""Unit tests for MultipleStatisticsCalculator."""

import itertools
import math

import pytest

from valuator.domain.models.valuation import MultipleStatistics
from valuator.domain.services.multiple_statistics import MultipleStatisticsCalculator, QuantileStrategy


@pytest.fixture
def calculator():
    return MultipleStatisticsCalculator()


class TestNearestRank:
    def test_odd_sample(self, calculator):
        stats = calculator.calculate([5.0, 6.7, 5.0])

        assert stats.count == 3
        assert stats.min == 5.0
        assert stats.q1 == 5.0
        assert stats.median == 5.0
        assert stats.q3 == 6.7
        assert stats.max == 6.7
        assert stats.mean == pytest.approx(16.7 / 3)

    def test_even_sample_takes_upper_middle(self, calculator):
        stats = calculator.calculate([4, 1, 3, 2])

        assert stats.median == 3
        assert stats.q1 == 2
        assert stats.q3 == 4

    def test_single_value(self, calculator):
        stats = calculator.calculate([7.5])

        assert stats.min == stats.q1 == stats.median == stats.q3 == stats.max == 7.5
        assert stats.standard_deviation == 0.0

    def test_population_standard_deviation(self, calculator):
        stats = calculator.calculate([2, 4, 4, 4, 5, 5, 7, 9])

        assert stats.mean == 5
        assert stats.standard_deviation == pytest.approx(2.0)

    def test_order_independent(self, calculator):
        sample = [6.25, 31.25, 25.0, 5.0]
        expected = calculator.calculate(sample)

        for permutation in itertools.permutations(sample):
            assert calculator.calculate(permutation) == expected


class TestLinear:
    def test_even_sample_interpolates(self):
        stats = MultipleStatisticsCalculator(QuantileStrategy.LINEAR).calculate([1, 2, 3, 4])

        assert stats.median == pytest.approx(2.5)
        assert stats.q1 == pytest.approx(1.75)
        assert stats.q3 == pytest.approx(3.25)


class TestEmptySample:
    def test_empty_returns_no_data(self, calculator):
        stats = calculator.calculate([])

        assert stats == MultipleStatistics.empty()
        assert stats.has_data is False
        assert stats.median is None

    def test_non_finite_values_dropped(self, calculator):
        stats = calculator.calculate([math.nan, 4.0, math.inf])

        assert stats.count == 1
        assert stats.median == 4.0

    def test_only_non_finite_values(self, calculator):
        assert calculator.calculate([math.nan]).has_data is False
