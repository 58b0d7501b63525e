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
Asset-based (adjusted book value) valuation method.

Total assets are split into tangible and intangible portions; the
intangible portion is marked up to reflect technology assets carried below
market value, and the markup is added to shareholders' equity.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from valuator.config.settings import AssetBasedSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import AssetAdjustment, AssetBasedResult, ValuationMethod, ValuationRange
from valuator.domain.services.valuation.methods.base import BaseValuationMethod

logger = logging.getLogger(__name__)


class AssetBasedMethod(BaseValuationMethod):
    method = ValuationMethod.ASSET_BASED

    def __init__(self, settings: Optional[AssetBasedSettings] = None) -> None:
        self.settings = settings or AssetBasedSettings()

    def _calculate(self, inputs: FinancialInputs, **_: Any) -> AssetBasedResult:
        s = self.settings
        tangible_assets = inputs.total_assets * s.tangible_share
        intangible_assets = inputs.total_assets - tangible_assets

        markup = intangible_assets * s.technology_markup_pct / 100
        asset_adjustments = (
            AssetAdjustment(
                asset="Technology Assets",
                book_value=intangible_assets,
                market_value=intangible_assets + markup,
                adjustment=markup,
                reason="Technology assets may be undervalued on balance sheet",
            ),
        )

        adjusted_book_value = inputs.shareholders_equity + sum(adj.adjustment for adj in asset_adjustments)
        if adjusted_book_value <= 0:
            raise self.unavailable(f"adjusted book value is not positive ({adjusted_book_value:,.0f})")

        return AssetBasedResult(
            method=self.method,
            valuation_range=ValuationRange.around(adjusted_book_value, s.range_low_factor, s.range_high_factor),
            confidence=s.confidence,
            weight=s.weight_for(inputs.industry_type.value),
            tangible_assets=tangible_assets,
            intangible_assets=intangible_assets,
            asset_adjustments=asset_adjustments,
            adjusted_book_value=adjusted_book_value,
        )
