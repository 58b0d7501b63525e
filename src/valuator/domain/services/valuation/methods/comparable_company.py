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

"""Comparable company (trading multiples) valuation method."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from valuator.config.settings import ComparableCompanySettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import (
    AdjustmentType,
    ComparableCompanyResult,
    PublicComparable,
    ValuationAdjustment,
    ValuationMethod,
)
from valuator.domain.services.multiple_statistics import MultipleStatisticsCalculator
from valuator.domain.services.valuation.methods.market import MarketMultipleMethod


class ComparableCompanyMethod(MarketMultipleMethod):
    """Values the company off public peers, less a private-company liquidity discount."""

    method = ValuationMethod.COMPARABLE_COMPANY
    sample_label = "comparable company"

    def __init__(
        self,
        settings: Optional[ComparableCompanySettings] = None,
        statistics: Optional[MultipleStatisticsCalculator] = None,
    ) -> None:
        super().__init__(settings or ComparableCompanySettings(), statistics)

    def _calculate(
        self,
        inputs: FinancialInputs,
        comparables: Sequence[PublicComparable] = (),
        **_: Any,
    ) -> ComparableCompanyResult:
        valuation = self.value_from_multiples(
            inputs,
            revenue_multiples=[c.revenue_multiple for c in comparables],
            ebitda_multiples=[c.ebitda_multiple for c in comparables],
        )
        adjustments = (
            ValuationAdjustment(
                type=AdjustmentType.LIQUIDITY_DISCOUNT,
                description="Private company liquidity discount",
                adjustment=self.settings.multiple_adjustment_pct,
                rationale="Private companies trade at discount to public comparables",
            ),
        )

        return ComparableCompanyResult(
            method=self.method,
            valuation_range=valuation.valuation_range,
            confidence=valuation.confidence,
            weight=valuation.weight,
            warnings=valuation.warnings,
            comparables=tuple(comparables),
            revenue_multiples=valuation.revenue_multiples,
            ebitda_multiples=valuation.ebitda_multiples,
            adjustments=adjustments,
            revenue_valuation=valuation.revenue_valuation,
            ebitda_valuation=valuation.ebitda_valuation,
        )
