"""Unit tests for RiskFactorIdentifier."""

import dataclasses

from valuator.config.settings import RiskSettings
from valuator.domain.models.valuation import RiskCategory, RiskImpact
from valuator.domain.services.valuation.risk_factors import RiskFactorIdentifier


class TestRiskFactorIdentifier:
    def test_healthy_company_has_no_risks(self, saas_inputs):
        assert RiskFactorIdentifier().identify(saas_inputs) == []

    def test_all_rules_in_fixed_order(self, saas_inputs):
        inputs = dataclasses.replace(saas_inputs, ebitda_margin=5, revenue_growth_rate=2, employee_count=10)

        risks = RiskFactorIdentifier().identify(inputs)

        assert [r.factor for r in risks] == ["Low Profitability", "Slow Growth", "Key Person Risk"]
        assert [r.category for r in risks] == [RiskCategory.FINANCIAL, RiskCategory.MARKET, RiskCategory.OPERATIONAL]
        assert risks[0].impact is RiskImpact.HIGH
        assert risks[0].discount_adjustment == -15
        assert risks[1].discount_adjustment is None

    def test_unknown_headcount_is_not_key_person_risk(self, saas_inputs):
        assert saas_inputs.employee_count is None
        assert RiskFactorIdentifier().identify(saas_inputs) == []

    def test_zero_headcount_is_not_key_person_risk(self, saas_inputs):
        inputs = dataclasses.replace(saas_inputs, employee_count=0)

        assert RiskFactorIdentifier().identify(inputs) == []

    def test_large_team_is_not_key_person_risk(self, saas_inputs):
        inputs = dataclasses.replace(saas_inputs, employee_count=50)

        assert RiskFactorIdentifier().identify(inputs) == []

    def test_pure(self, saas_inputs):
        inputs = dataclasses.replace(saas_inputs, ebitda_margin=5)
        identifier = RiskFactorIdentifier()

        assert identifier.identify(inputs) == identifier.identify(inputs)

    def test_configured_thresholds(self, saas_inputs):
        identifier = RiskFactorIdentifier(RiskSettings(slow_growth_threshold=30))

        assert [r.factor for r in identifier.identify(saas_inputs)] == ["Slow Growth"]
