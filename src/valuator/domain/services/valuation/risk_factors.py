# Copyright 2025 Vijaykumar Singh <singhvjd@gmail.com>
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

"""
Risk Factor Identifier

Threshold rules over the inputs; rules are evaluated in a fixed order
(financial, market, operational) so the output is stable.
"""

import logging
from typing import List, Optional

from valuator.config.settings import RiskSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import RiskCategory, RiskImpact, ValuationRiskFactor

logger = logging.getLogger(__name__)


class RiskFactorIdentifier:
    def __init__(self, settings: Optional[RiskSettings] = None):
        self.settings = settings or RiskSettings()

    def identify(self, inputs: FinancialInputs) -> List[ValuationRiskFactor]:
        """Return the risk factors tripped by ``inputs``; empty when none apply."""
        s = self.settings
        risk_factors: List[ValuationRiskFactor] = []

        if inputs.ebitda_margin < s.low_ebitda_margin_threshold:
            risk_factors.append(
                ValuationRiskFactor(
                    category=RiskCategory.FINANCIAL,
                    factor="Low Profitability",
                    impact=RiskImpact.HIGH,
                    description="Low EBITDA margin indicates potential profitability challenges",
                    mitigation="Focus on cost optimization and pricing strategy",
                    discount_adjustment=s.low_profitability_discount,
                )
            )

        if inputs.revenue_growth_rate < s.slow_growth_threshold:
            risk_factors.append(
                ValuationRiskFactor(
                    category=RiskCategory.MARKET,
                    factor="Slow Growth",
                    impact=RiskImpact.MEDIUM,
                    description="Below-average growth rate may indicate market maturity or competitive pressure",
                    mitigation="Explore new markets or product innovations",
                )
            )

        # An unknown or zero headcount is not evidence of a small team.
        if inputs.employee_count and inputs.employee_count < s.key_person_employee_threshold:
            risk_factors.append(
                ValuationRiskFactor(
                    category=RiskCategory.OPERATIONAL,
                    factor="Key Person Risk",
                    impact=RiskImpact.MEDIUM,
                    description="Small team size may create dependency on key individuals",
                    mitigation="Develop succession planning and knowledge transfer processes",
                )
            )

        if risk_factors:
            logger.debug(f"Risk factors: {', '.join(r.factor for r in risk_factors)}")
        return risk_factors
