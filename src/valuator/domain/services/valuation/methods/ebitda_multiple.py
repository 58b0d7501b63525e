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
EBITDA multiple valuation method.

Non-positive EBITDA does not make the method unavailable: the range floors
at zero and the method drops to the unprofitable confidence/weight so it
barely moves the blend.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from valuator.config.settings import EBITDAMultipleSettings, IndustryMultiplesSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import (
    AdjustmentType,
    EBITDAMultipleResult,
    ValuationAdjustment,
    ValuationMethod,
    ValuationRange,
)
from valuator.domain.services.valuation.methods.base import BaseValuationMethod
from valuator.domain.services.valuation.methods.common import adjustment_multiplier

logger = logging.getLogger(__name__)


class EBITDAMultipleMethod(BaseValuationMethod):
    method = ValuationMethod.EBITDA_MULTIPLE

    def __init__(
        self,
        settings: Optional[EBITDAMultipleSettings] = None,
        multiples: Optional[IndustryMultiplesSettings] = None,
    ) -> None:
        self.settings = settings or EBITDAMultipleSettings()
        self.multiples = multiples or IndustryMultiplesSettings()

    def _calculate(self, inputs: FinancialInputs, **_: Any) -> EBITDAMultipleResult:
        s = self.settings
        industry_multiples = self.multiples.ebitda_band(inputs.industry_type.value)

        adjustments: List[ValuationAdjustment] = []
        if inputs.ebitda_margin > s.high_margin_threshold:
            adjustments.append(
                ValuationAdjustment(
                    type=AdjustmentType.TECHNOLOGY_PREMIUM,
                    description="High EBITDA margin premium",
                    adjustment=s.margin_premium,
                    rationale="Strong operational efficiency",
                )
            )

        adjusted = industry_multiples.scaled(adjustment_multiplier(adjustments))
        valuation_range = ValuationRange(
            low=max(0.0, inputs.ebitda * adjusted.low),
            median=max(0.0, inputs.ebitda * adjusted.median),
            high=max(0.0, inputs.ebitda * adjusted.high),
        )

        profitable = inputs.ebitda > 0
        warnings = () if profitable else ("EBITDA is not positive; EBITDA multiple floored at zero",)
        if not profitable:
            logger.info(f"EBITDA {inputs.ebitda:,.0f} is not positive, down-weighting EBITDA multiple")

        return EBITDAMultipleResult(
            method=self.method,
            valuation_range=valuation_range,
            confidence=s.confidence if profitable else s.unprofitable_confidence,
            weight=s.weight if profitable else s.unprofitable_weight,
            warnings=warnings,
            industry_multiples=industry_multiples,
            adjustments=tuple(adjustments),
            adjusted_multiples=adjusted,
        )
