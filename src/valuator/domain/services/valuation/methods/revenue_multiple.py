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
Revenue multiple valuation method.

Scales the industry EV/Revenue band by additive percentage adjustments:

    - size discount when revenue is below the small-company threshold
    - growth premium above the high-growth threshold, growth discount below
      the low-growth threshold
    - margin premium when gross margin is above the high-margin threshold

Valuation range = revenue x adjusted band.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from valuator.config.settings import IndustryMultiplesSettings, RevenueMultipleSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import (
    AdjustmentType,
    RevenueMultipleResult,
    ValuationAdjustment,
    ValuationMethod,
    ValuationRange,
)
from valuator.domain.services.valuation.methods.base import BaseValuationMethod
from valuator.domain.services.valuation.methods.common import adjustment_multiplier

logger = logging.getLogger(__name__)


class RevenueMultipleMethod(BaseValuationMethod):
    method = ValuationMethod.REVENUE_MULTIPLE

    def __init__(
        self,
        settings: Optional[RevenueMultipleSettings] = None,
        multiples: Optional[IndustryMultiplesSettings] = None,
    ) -> None:
        self.settings = settings or RevenueMultipleSettings()
        self.multiples = multiples or IndustryMultiplesSettings()

    def _calculate(self, inputs: FinancialInputs, **_: Any) -> RevenueMultipleResult:
        industry = inputs.industry_type.value
        industry_multiples = self.multiples.revenue_band(industry)
        adjustments = self.build_adjustments(inputs)

        multiplier = adjustment_multiplier(adjustments)
        if multiplier <= 0:
            raise self.unavailable(f"adjustments reduce the multiple to {multiplier:.2f}x")

        adjusted = industry_multiples.scaled(multiplier)
        valuation_range = ValuationRange(
            low=inputs.revenue * adjusted.low,
            median=inputs.revenue * adjusted.median,
            high=inputs.revenue * adjusted.high,
        )

        return RevenueMultipleResult(
            method=self.method,
            valuation_range=valuation_range,
            confidence=self.settings.confidence,
            weight=self.settings.weight_for(industry),
            industry_multiples=industry_multiples,
            adjustments=tuple(adjustments),
            adjusted_multiples=adjusted,
        )

    def build_adjustments(self, inputs: FinancialInputs) -> List[ValuationAdjustment]:
        s = self.settings
        adjustments: List[ValuationAdjustment] = []

        if inputs.revenue < s.small_company_revenue_threshold:
            adjustments.append(
                ValuationAdjustment(
                    type=AdjustmentType.SIZE,
                    description="Small company size discount",
                    adjustment=s.size_discount,
                    rationale="Smaller companies typically trade at discount to larger peers",
                )
            )

        if inputs.revenue_growth_rate > s.high_growth_threshold:
            adjustments.append(
                ValuationAdjustment(
                    type=AdjustmentType.GROWTH_PREMIUM,
                    description="High growth premium",
                    adjustment=s.growth_premium,
                    rationale="High growth rate justifies premium valuation",
                )
            )
        elif inputs.revenue_growth_rate < s.low_growth_threshold:
            adjustments.append(
                ValuationAdjustment(
                    type=AdjustmentType.GROWTH_PREMIUM,
                    description="Low growth discount",
                    adjustment=s.growth_discount,
                    rationale="Below average growth rate",
                )
            )

        if inputs.gross_margin > s.high_gross_margin_threshold:
            adjustments.append(
                ValuationAdjustment(
                    type=AdjustmentType.TECHNOLOGY_PREMIUM,
                    description="High margin premium",
                    adjustment=s.margin_premium,
                    rationale="Strong margin profile indicates scalable business model",
                )
            )

        return adjustments
