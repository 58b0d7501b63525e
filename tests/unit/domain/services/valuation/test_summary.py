"""
Unit tests for ValuationSummaryAggregator.

Blending, renormalization, exclusion and the derived summary fields.
"""

import dataclasses

import pytest

from valuator.config.settings import SummarySettings
from valuator.domain.exceptions import ValuationError
from valuator.domain.models.valuation import (
    DataQuality,
    MethodResult,
    MethodUnavailable,
    ValuationMethod,
    ValuationRange,
)
from valuator.domain.services.valuation.methods import (
    AssetBasedMethod,
    ComparableCompanyMethod,
    EBITDAMultipleMethod,
    RevenueMultipleMethod,
)
from valuator.domain.services.valuation.summary import ValuationSummaryAggregator


def result(method, low, median, high, weight, confidence=5.0):
    return MethodResult(
        method=method,
        valuation_range=ValuationRange(low=low, median=median, high=high),
        confidence=confidence,
        weight=weight,
    )


@pytest.fixture
def aggregator():
    return ValuationSummaryAggregator()


class TestBlending:
    def test_weights_renormalized(self, aggregator, saas_inputs):
        outcomes = [
            result(ValuationMethod.REVENUE_MULTIPLE, 80, 100, 120, weight=0.3, confidence=7),
            result(ValuationMethod.ASSET_BASED, 150, 200, 260, weight=0.1, confidence=5),
            MethodUnavailable(method=ValuationMethod.DISCOUNTED_CASH_FLOW, reason="degenerate"),
        ]

        summary = aggregator.aggregate(outcomes, saas_inputs)

        assert summary.method_weights[ValuationMethod.REVENUE_MULTIPLE] == pytest.approx(0.75)
        assert summary.method_weights[ValuationMethod.ASSET_BASED] == pytest.approx(0.25)
        assert sum(summary.method_weights.values()) == pytest.approx(1.0)
        assert summary.weighted_valuation == pytest.approx(125)
        assert summary.overall_confidence == pytest.approx(6.5)
        assert summary.method_count == 2
        assert summary.excluded_methods == (ValuationMethod.DISCOUNTED_CASH_FLOW,)

    def test_range_is_union_of_blended_methods(self, aggregator, saas_inputs):
        outcomes = [
            result(ValuationMethod.REVENUE_MULTIPLE, 80, 100, 120, weight=0.3),
            result(ValuationMethod.ASSET_BASED, 150, 200, 260, weight=0.1),
        ]

        summary = aggregator.aggregate(outcomes, saas_inputs)

        assert summary.valuation_range.low == 80
        assert summary.valuation_range.median == pytest.approx(125)
        assert summary.valuation_range.high == 260

    def test_zero_weight_results_excluded(self, aggregator, saas_inputs):
        outcomes = [
            result(ValuationMethod.REVENUE_MULTIPLE, 80, 100, 120, weight=0.3),
            result(ValuationMethod.COMPARABLE_COMPANY, 0, 0, 0, weight=0.0, confidence=0),
        ]

        summary = aggregator.aggregate(outcomes, saas_inputs)

        assert summary.weighted_valuation == pytest.approx(100)
        assert summary.valuation_range.low == 80
        assert ValuationMethod.COMPARABLE_COMPANY in summary.excluded_methods
        assert ValuationMethod.COMPARABLE_COMPANY not in summary.method_weights

    def test_no_usable_method(self, aggregator, saas_inputs):
        outcomes = [
            MethodUnavailable(method=ValuationMethod.DISCOUNTED_CASH_FLOW, reason="degenerate"),
            result(ValuationMethod.COMPARABLE_COMPANY, 0, 0, 0, weight=0.0),
        ]

        with pytest.raises(ValuationError, match="No valuation method"):
            aggregator.aggregate(outcomes, saas_inputs)

    def test_full_method_set(self, aggregator, saas_inputs, public_comparables):
        outcomes = [
            RevenueMultipleMethod().calculate(saas_inputs),
            EBITDAMultipleMethod().calculate(saas_inputs),
            AssetBasedMethod().calculate(saas_inputs),
            ComparableCompanyMethod().calculate(saas_inputs, comparables=public_comparables),
        ]

        summary = aggregator.aggregate(outcomes, saas_inputs)

        low, weighted, high = (
            summary.valuation_range.low,
            summary.weighted_valuation,
            summary.valuation_range.high,
        )
        assert low <= weighted <= high
        assert summary.excluded_methods == ()


class TestImpliedMultiples:
    def test_back_solved_from_weighted_valuation(self, aggregator, saas_inputs):
        outcomes = [
            RevenueMultipleMethod().calculate(saas_inputs),
            EBITDAMultipleMethod().calculate(saas_inputs),
        ]

        summary = aggregator.aggregate(outcomes, saas_inputs)
        implied = summary.implied_multiples

        assert summary.weighted_valuation == pytest.approx((34_000_000 * 0.3 + 25_000_000 * 0.25) / 0.55)
        assert implied.revenue_multiple == pytest.approx(summary.weighted_valuation / saas_inputs.revenue)
        assert implied.ebitda_multiple == pytest.approx(summary.weighted_valuation / saas_inputs.ebitda)
        assert implied.book_value_multiple is None

    def test_book_value_multiple(self, aggregator, saas_inputs):
        asset_result = AssetBasedMethod().calculate(saas_inputs)

        summary = aggregator.aggregate([asset_result], saas_inputs)

        assert summary.implied_multiples.book_value_multiple == pytest.approx(1.0)

    def test_zero_ebitda_median_gives_none(self, aggregator, saas_inputs):
        unprofitable = dataclasses.replace(saas_inputs, ebitda=-100_000, ebitda_margin=-2)
        outcomes = [
            RevenueMultipleMethod().calculate(unprofitable),
            EBITDAMultipleMethod().calculate(unprofitable),
        ]

        summary = aggregator.aggregate(outcomes, unprofitable)

        assert summary.implied_multiples.ebitda_multiple is None
        assert summary.implied_multiples.revenue_multiple is not None


class TestDataQuality:
    @pytest.mark.parametrize(
        "confidence, expected",
        [(8.0, DataQuality.HIGH), (7.0, DataQuality.HIGH), (6.0, DataQuality.MEDIUM), (4.9, DataQuality.LOW)],
    )
    def test_default_tiers(self, aggregator, confidence, expected):
        assert aggregator.data_quality(confidence) is expected

    def test_configured_tiers(self):
        aggregator = ValuationSummaryAggregator(
            SummarySettings(high_quality_confidence=9, medium_quality_confidence=8)
        )

        assert aggregator.data_quality(8.5) is DataQuality.MEDIUM


class TestPerShareMetrics:
    def test_present_with_shares_outstanding(self, aggregator, saas_inputs):
        inputs = dataclasses.replace(saas_inputs, shares_outstanding=1_000_000)

        summary = aggregator.aggregate(
            [result(ValuationMethod.REVENUE_MULTIPLE, 80_000_000, 100_000_000, 120_000_000, weight=0.3)], inputs
        )

        metrics = summary.per_share_metrics
        assert metrics.value_per_share == pytest.approx(100)
        assert metrics.price_range.low == pytest.approx(80)
        assert metrics.price_range.high == pytest.approx(120)

    def test_absent_without_shares(self, aggregator, saas_inputs):
        summary = aggregator.aggregate(
            [result(ValuationMethod.REVENUE_MULTIPLE, 80, 100, 120, weight=0.3)], saas_inputs
        )

        assert summary.per_share_metrics is None
