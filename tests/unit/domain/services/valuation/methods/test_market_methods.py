"""
Unit tests for the comparable-company and precedent-transaction methods.

Comparables: EV/Revenue [5.0, 6.7, 5.0], EV/EBITDA [25.0, 26.7, 33.3].
Transactions: EV/Revenue [6.25, 6.25], EV/EBITDA [31.25, 25.0].
"""

from datetime import date

import pytest

from valuator.config.settings import ComparableCompanySettings
from valuator.domain.models.valuation import (
    AdjustmentType,
    ComparableCompanyResult,
    PrecedentTransactionResult,
    PublicComparable,
)
from valuator.domain.services.input_normalizer import FinancialInputsNormalizer
from valuator.domain.services.valuation.methods import ComparableCompanyMethod, PrecedentTransactionMethod


def normalize(**fields):
    return FinancialInputsNormalizer().normalize({"revenue": 5_000_000, "industryType": "SaaS", **fields})


class TestComparableCompanyMethod:
    def test_reference_company(self, saas_inputs, public_comparables):
        result = ComparableCompanyMethod().calculate(saas_inputs, comparables=public_comparables)

        assert isinstance(result, ComparableCompanyResult)
        assert result.revenue_multiples.median == 5.0
        assert result.ebitda_multiples.median == 26.7
        assert result.revenue_valuation == pytest.approx(5_000_000 * 5.0 * 0.75)
        assert result.ebitda_valuation == pytest.approx(1_000_000 * 26.7 * 0.75)
        assert result.valuation_range.low == pytest.approx(min(18_750_000, 20_025_000) * 0.8)
        assert result.valuation_range.median == pytest.approx((18_750_000 + 20_025_000) / 2)
        assert result.valuation_range.high == pytest.approx(20_025_000 * 1.2)
        assert result.confidence == 7
        assert result.weight == 0.15
        assert result.warnings == ()
        assert len(result.comparables) == 3

    def test_liquidity_discount_reported(self, saas_inputs, public_comparables):
        result = ComparableCompanyMethod().calculate(saas_inputs, comparables=public_comparables)

        assert [a.type for a in result.adjustments] == [AdjustmentType.LIQUIDITY_DISCOUNT]
        assert result.adjustments[0].adjustment == -25

    def test_empty_sample_excluded_from_blend(self, saas_inputs):
        result = ComparableCompanyMethod().calculate(saas_inputs, comparables=[])

        assert isinstance(result, ComparableCompanyResult)
        assert result.revenue_multiples.has_data is False
        assert result.ebitda_multiples.has_data is False
        assert result.revenue_valuation == 0
        assert result.ebitda_valuation == 0
        assert result.weight == 0
        assert result.confidence == 0
        assert "excluded from blend" in result.warnings[0]

    def test_non_positive_ebitda_multiples_filtered(self, saas_inputs):
        comparables = [
            PublicComparable(
                company_name="Loss Maker",
                ticker="LOSS",
                market_cap=100_000_000,
                revenue=50_000_000,
                ebitda=-5_000_000,
                revenue_multiple=2.0,
                ebitda_multiple=-20.0,
                similarity=50,
            )
        ]

        result = ComparableCompanyMethod().calculate(saas_inputs, comparables=comparables)

        assert result.revenue_multiples.count == 1
        assert result.ebitda_multiples.has_data is False

    def test_single_revenue_leg_for_unprofitable_target(self, public_comparables):
        inputs = normalize(ebitdaMargin=-5)

        result = ComparableCompanyMethod().calculate(inputs, comparables=public_comparables)

        assert result.ebitda_valuation == 0
        assert result.valuation_range.median == pytest.approx(18_750_000)
        assert result.valuation_range.low == pytest.approx(15_000_000)
        assert result.valuation_range.high == pytest.approx(22_500_000)
        assert result.confidence == 5
        assert result.weight == 0.15
        assert "single multiple" in result.warnings[0]

    def test_zero_floor_for_missing_ebitda_leg(self, public_comparables):
        method = ComparableCompanyMethod(ComparableCompanySettings(zero_floor_missing_ebitda=True))

        result = method.calculate(normalize(ebitdaMargin=-5), comparables=public_comparables)

        assert result.valuation_range.low == 0
        assert result.valuation_range.median == pytest.approx(9_375_000)
        assert result.valuation_range.high == pytest.approx(22_500_000)
        assert result.confidence == 7
        assert "counted as zero" in result.warnings[0]

    def test_order_of_comparables_irrelevant(self, saas_inputs, public_comparables):
        method = ComparableCompanyMethod()

        forward = method.calculate(saas_inputs, comparables=public_comparables)
        backward = method.calculate(saas_inputs, comparables=list(reversed(public_comparables)))

        assert forward.valuation_range == backward.valuation_range


class TestPrecedentTransactionMethod:
    def test_reference_company(self, saas_inputs, transactions):
        result = PrecedentTransactionMethod().calculate(saas_inputs, transactions=transactions)

        assert isinstance(result, PrecedentTransactionResult)
        assert result.control_premium == 25
        assert result.revenue_multiples.median == 6.25
        # upper middle element of [25.0, 31.25]
        assert result.ebitda_multiples.median == 31.25
        assert result.revenue_valuation == pytest.approx(39_062_500)
        assert result.ebitda_valuation == pytest.approx(39_062_500)
        assert result.valuation_range.low == pytest.approx(31_250_000)
        assert result.valuation_range.median == pytest.approx(39_062_500)
        assert result.valuation_range.high == pytest.approx(46_875_000)
        assert result.confidence == 6
        assert result.weight == 0.1

    def test_transactions_attached(self, saas_inputs, transactions):
        result = PrecedentTransactionMethod().calculate(saas_inputs, transactions=transactions)

        assert [t.transaction_date for t in result.transactions] == [date(2023, 6, 1), date(2023, 3, 15)]

    def test_empty_sample(self, saas_inputs):
        result = PrecedentTransactionMethod().calculate(saas_inputs)

        assert result.weight == 0
        assert result.valuation_range.median == 0
        assert "precedent transaction" in result.warnings[0]
