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
Valuation Summary Aggregator

Blends the per-method outcomes into one weighted valuation.

Only ``MethodResult`` values with a positive weight take part; unavailable
methods and zero-weight results are listed in ``excluded_methods`` and the
remaining weights are renormalized to sum to 1.

    weighted valuation = sum(median_i x w_i)
    overall confidence = sum(confidence_i x w_i)
    range low / high   = min(low_i) / max(high_i)   (union over blended methods)

Implied multiples back-solve each method's adjusted median multiple in
proportion to ``weighted / method median``; a multiple is ``None`` when its
denominator is zero or the method did not produce a result.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from valuator.config.settings import SummarySettings
from valuator.domain.exceptions import ValuationError
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import (
    AssetBasedResult,
    DataQuality,
    EBITDAMultipleResult,
    ImpliedMultiples,
    MethodOutcome,
    MethodResult,
    PerShareMetrics,
    RevenueMultipleResult,
    ValuationMethod,
    ValuationRange,
    ValuationSummary,
)
from valuator.domain.services.valuation.methods.common import safe_divide

logger = logging.getLogger(__name__)


class ValuationSummaryAggregator:
    """Fold method outcomes into a ``ValuationSummary``."""

    def __init__(self, settings: Optional[SummarySettings] = None) -> None:
        self.settings = settings or SummarySettings()

    def aggregate(self, outcomes: Iterable[MethodOutcome], inputs: FinancialInputs) -> ValuationSummary:
        """
        Blend the surviving methods.

        Args:
            outcomes: One outcome per method (results and unavailable tags)
            inputs: Inputs the methods were run against

        Returns:
            ValuationSummary over the methods with a positive weight

        Raises:
            ValuationError: If no method has a positive weight
        """
        outcomes = list(outcomes)
        results: Dict[ValuationMethod, MethodResult] = {
            o.method: o for o in outcomes if isinstance(o, MethodResult)
        }
        blended = [r for r in results.values() if r.weight > 0]
        excluded = tuple(o.method for o in outcomes if o.method not in {r.method for r in blended})

        if not blended:
            raise ValuationError("No valuation method produced a usable result")

        total_weight = sum(r.weight for r in blended)
        method_weights = {r.method: r.weight / total_weight for r in blended}

        weighted_valuation = sum(r.valuation_range.median * method_weights[r.method] for r in blended)
        overall_confidence = sum(r.confidence * method_weights[r.method] for r in blended)

        valuation_range = ValuationRange(
            low=min(r.valuation_range.low for r in blended),
            median=weighted_valuation,
            high=max(r.valuation_range.high for r in blended),
        )

        if excluded:
            logger.info(f"Excluded from blend: {', '.join(m.value for m in excluded)}")
        logger.debug(
            "Method weights: " + ", ".join(f"{m.value}={w:.2%}" for m, w in method_weights.items())
        )

        return ValuationSummary(
            weighted_valuation=weighted_valuation,
            valuation_range=valuation_range,
            implied_multiples=self.implied_multiples(weighted_valuation, results),
            overall_confidence=overall_confidence,
            method_count=len(blended),
            data_quality=self.data_quality(overall_confidence),
            method_weights=method_weights,
            excluded_methods=excluded,
            per_share_metrics=self.per_share_metrics(valuation_range, inputs),
        )

    def data_quality(self, confidence: float) -> DataQuality:
        if confidence >= self.settings.high_quality_confidence:
            return DataQuality.HIGH
        if confidence >= self.settings.medium_quality_confidence:
            return DataQuality.MEDIUM
        return DataQuality.LOW

    @staticmethod
    def implied_multiples(weighted_valuation: float, results: Dict[ValuationMethod, MethodResult]) -> ImpliedMultiples:
        revenue = results.get(ValuationMethod.REVENUE_MULTIPLE)
        ebitda = results.get(ValuationMethod.EBITDA_MULTIPLE)
        assets = results.get(ValuationMethod.ASSET_BASED)

        revenue_multiple = None
        if isinstance(revenue, RevenueMultipleResult):
            ratio = safe_divide(weighted_valuation, revenue.valuation_range.median)
            revenue_multiple = None if ratio is None else ratio * revenue.adjusted_multiples.median

        ebitda_multiple = None
        if isinstance(ebitda, EBITDAMultipleResult):
            ratio = safe_divide(weighted_valuation, ebitda.valuation_range.median)
            ebitda_multiple = None if ratio is None else ratio * ebitda.adjusted_multiples.median

        book_value_multiple = None
        if isinstance(assets, AssetBasedResult):
            book_value_multiple = safe_divide(weighted_valuation, assets.adjusted_book_value)

        return ImpliedMultiples(
            revenue_multiple=revenue_multiple,
            ebitda_multiple=ebitda_multiple,
            book_value_multiple=book_value_multiple,
        )

    @staticmethod
    def per_share_metrics(valuation_range: ValuationRange, inputs: FinancialInputs) -> Optional[PerShareMetrics]:
        shares = inputs.shares_outstanding
        if not shares or shares <= 0:
            return None

        price_range = ValuationRange(
            low=valuation_range.low / shares,
            median=valuation_range.median / shares,
            high=valuation_range.high / shares,
        )
        return PerShareMetrics(
            shares_outstanding=shares,
            value_per_share=price_range.median,
            price_range=price_range,
        )

