"""Unit tests for the DCF and asset-based methods."""

import pytest

from valuator.config.settings import AssetBasedSettings, DCFSettings
from valuator.domain.models.valuation import AssetBasedResult, DCFResult, MethodUnavailable, ValuationMethod
from valuator.domain.services.input_normalizer import FinancialInputsNormalizer
from valuator.domain.services.valuation.methods import AssetBasedMethod, DiscountedCashFlowMethod


def normalize(**fields):
    return FinancialInputsNormalizer().normalize({"revenue": 5_000_000, "industryType": "SaaS", **fields})


class TestDiscountedCashFlowMethod:
    """Five-year projection plus perpetuity-growth terminal value."""

    def test_reference_company(self, saas_inputs):
        result = DiscountedCashFlowMethod().calculate(saas_inputs)

        assert isinstance(result, DCFResult)
        assert result.projection_years == 5
        assert len(result.projected_cash_flows) == 5
        assert result.discount_rate == pytest.approx(13.4)
        assert result.terminal_growth_rate == pytest.approx(3.0)
        assert result.equity_value == result.enterprise_value
        assert result.enterprise_value == pytest.approx(
            result.present_value_of_cash_flows + result.present_value_of_terminal
        )
        assert result.confidence == 6
        assert result.weight == 0.2

    def test_range_brackets_equity_value(self, saas_inputs):
        result = DiscountedCashFlowMethod().calculate(saas_inputs)

        assert result.valuation_range.median == pytest.approx(result.equity_value)
        assert result.valuation_range.low == pytest.approx(result.equity_value * 0.8)
        assert result.valuation_range.high == pytest.approx(result.equity_value * 1.2)

    def test_growth_decays_each_year(self, saas_inputs):
        flows = DiscountedCashFlowMethod().calculate(saas_inputs).projected_cash_flows

        assert flows[0].revenue == pytest.approx(5_000_000 * 1.25)
        assert flows[1].revenue == pytest.approx(flows[0].revenue * (1 + 0.25 * 0.85))
        assert [f.year for f in flows] == [1, 2, 3, 4, 5]

    def test_zero_growth_keeps_ebitda_flat(self):
        result = DiscountedCashFlowMethod().calculate(normalize(revenueGrowthRate=0))

        for flow in result.projected_cash_flows:
            assert flow.revenue == pytest.approx(5_000_000)
            assert flow.ebitda == pytest.approx(1_000_000)
            assert flow.working_capital_change == pytest.approx(0)
            # EBITDA - 25% tax - 3% of revenue capex
            assert flow.free_cash_flow == pytest.approx(600_000)
        assert result.terminal_growth_rate == 0

    def test_terminal_value_formula(self, saas_inputs):
        result = DiscountedCashFlowMethod().calculate(saas_inputs)
        last = result.projected_cash_flows[-1]

        expected = last.free_cash_flow * 1.03 / (0.134 - 0.03)
        assert result.terminal_value == pytest.approx(expected)
        assert result.present_value_of_terminal == pytest.approx(expected / 1.134**5)

    def test_terminal_growth_scaled_for_slow_growers(self):
        result = DiscountedCashFlowMethod().calculate(normalize(revenueGrowthRate=5))

        assert result.terminal_growth_rate == pytest.approx(1.5)

    def test_discount_rate_not_above_terminal_growth(self, saas_inputs):
        method = DiscountedCashFlowMethod(DCFSettings(risk_free_rate=1.0, market_risk_premium=1.0))

        result = method.calculate(saas_inputs)

        assert isinstance(result, MethodUnavailable)
        assert result.method is ValuationMethod.DISCOUNTED_CASH_FLOW
        assert "terminal growth" in result.reason

    def test_non_positive_enterprise_value(self):
        result = DiscountedCashFlowMethod().calculate(normalize(ebitdaMargin=-50))

        assert isinstance(result, MethodUnavailable)
        assert "enterprise value" in result.reason


class TestAssetBasedMethod:
    """Adjusted book value with a technology-asset markup."""

    def test_reference_company(self, saas_inputs):
        result = AssetBasedMethod().calculate(saas_inputs)

        assert isinstance(result, AssetBasedResult)
        assert result.tangible_assets == pytest.approx(5_250_000)
        assert result.intangible_assets == pytest.approx(2_250_000)
        assert len(result.asset_adjustments) == 1
        assert result.asset_adjustments[0].adjustment == pytest.approx(450_000)
        assert result.adjusted_book_value == pytest.approx(6_450_000)
        assert result.valuation_range.low == pytest.approx(5_160_000)
        assert result.valuation_range.high == pytest.approx(7_740_000)
        assert result.confidence == 5
        assert result.weight == 0.1

    def test_manufacturing_weight(self):
        assert AssetBasedMethod().calculate(normalize(industryType="Manufacturing")).weight == 0.2

    def test_configured_tangible_share(self, saas_inputs):
        result = AssetBasedMethod(AssetBasedSettings(tangible_share=1.0)).calculate(saas_inputs)

        assert result.intangible_assets == 0
        assert result.adjusted_book_value == pytest.approx(saas_inputs.shareholders_equity)

    def test_negative_book_value_unavailable(self):
        result = AssetBasedMethod().calculate(normalize(shareholdersEquity=-10_000_000))

        assert isinstance(result, MethodUnavailable)
        assert result.method is ValuationMethod.ASSET_BASED
