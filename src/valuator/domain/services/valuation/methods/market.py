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
Market-multiple valuation shared by the comparable-company and
precedent-transaction methods.

Both methods read a sample of peer multiples, take the median of each
(EBITDA multiples filtered to positive values), scale it by a fixed
percentage adjustment and apply it to the target's revenue and EBITDA:

    revenue valuation = revenue x median(EV/Revenue) x (1 + adj/100)
    EBITDA valuation  = EBITDA  x median(EV/EBITDA)  x (1 + adj/100)

With both legs usable the range is::

    low    = min(revenue x 0.8, EBITDA x 0.8)
    median = (revenue + EBITDA) / 2
    high   = max(revenue x 1.2, EBITDA x 1.2)

When only one leg is usable the range brackets that leg alone and the
confidence drops by ``single_leg_confidence_penalty``; setting
``zero_floor_missing_ebitda`` restores the zero-valued leg in the formula
above. With no usable leg the method returns a zero-weight, zero-confidence
result so it stays in the report but out of the blend.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from valuator.config.settings import MarketMethodSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import MultipleStatistics, ValuationRange
from valuator.domain.services.multiple_statistics import MultipleStatisticsCalculator
from valuator.domain.services.valuation.methods.base import BaseValuationMethod

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarketValuation:
    """Intermediate figures common to both market-based methods."""

    revenue_multiples: MultipleStatistics
    ebitda_multiples: MultipleStatistics
    revenue_valuation: float
    ebitda_valuation: float
    valuation_range: ValuationRange
    confidence: float
    weight: float
    warnings: Tuple[str, ...]


class MarketMultipleMethod(BaseValuationMethod):
    """Base for methods that value the company off a peer sample."""

    sample_label: str = "market"

    def __init__(
        self,
        settings: MarketMethodSettings,
        statistics: Optional[MultipleStatisticsCalculator] = None,
    ) -> None:
        self.settings = settings
        self.statistics = statistics or MultipleStatisticsCalculator()

    def value_from_multiples(
        self,
        inputs: FinancialInputs,
        revenue_multiples: Iterable[float],
        ebitda_multiples: Iterable[float],
    ) -> MarketValuation:
        s = self.settings
        revenue_stats = self.statistics.calculate(m for m in revenue_multiples if m is not None and m > 0)
        ebitda_stats = self.statistics.calculate(m for m in ebitda_multiples if m is not None and m > 0)
        multiplier = 1 + s.multiple_adjustment_pct / 100

        revenue_usable = revenue_stats.has_data
        ebitda_usable = inputs.ebitda > 0 and ebitda_stats.has_data

        revenue_valuation = inputs.revenue * revenue_stats.median * multiplier if revenue_usable else 0.0
        ebitda_valuation = inputs.ebitda * ebitda_stats.median * multiplier if ebitda_usable else 0.0

        if not revenue_usable and not ebitda_usable:
            logger.info(f"{self.method.value}: no usable {self.sample_label} sample, excluding from blend")
            return MarketValuation(
                revenue_multiples=revenue_stats,
                ebitda_multiples=ebitda_stats,
                revenue_valuation=0.0,
                ebitda_valuation=0.0,
                valuation_range=ValuationRange(low=0.0, median=0.0, high=0.0),
                confidence=0.0,
                weight=0.0,
                warnings=(f"No usable {self.sample_label} sample; {self.method.value} excluded from blend",),
            )

        if (revenue_usable and ebitda_usable) or s.zero_floor_missing_ebitda:
            valuation_range = ValuationRange(
                low=min(revenue_valuation * s.range_low_factor, ebitda_valuation * s.range_low_factor),
                median=(revenue_valuation + ebitda_valuation) / 2,
                high=max(revenue_valuation * s.range_high_factor, ebitda_valuation * s.range_high_factor),
            )
            warnings: Tuple[str, ...] = ()
            confidence = s.confidence
            if not (revenue_usable and ebitda_usable):
                missing = "EBITDA" if revenue_usable else "revenue"
                warnings = (f"{missing} leg unavailable; counted as zero in {self.method.value} range",)
        else:
            missing, value = ("EBITDA", revenue_valuation) if revenue_usable else ("revenue", ebitda_valuation)
            valuation_range = ValuationRange.around(value, s.range_low_factor, s.range_high_factor)
            confidence = max(1.0, s.confidence - s.single_leg_confidence_penalty)
            warnings = (f"{missing} leg unavailable; {self.method.value} uses a single multiple",)

        return MarketValuation(
            revenue_multiples=revenue_stats,
            ebitda_multiples=ebitda_stats,
            revenue_valuation=revenue_valuation,
            ebitda_valuation=ebitda_valuation,
            valuation_range=valuation_range,
            confidence=confidence,
            weight=s.weight,
            warnings=warnings,
        )
