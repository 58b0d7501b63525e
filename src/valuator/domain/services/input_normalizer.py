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

"""Financial Inputs Normalizer.

Turns a partial financial-data record into a fully populated
``FinancialInputs`` snapshot. Validation happens here, at the boundary, so
no valuation method ever computes on fabricated or NaN values:

    - ``revenue`` is required and must be a finite positive number.
    - Every numeric field must be finite.
    - Total assets and the count fields cannot be negative.

Missing fields are derived from revenue with the configured ratios. An
absolute/margin pair (gross profit / gross margin, EBITDA / EBITDA margin)
is reconciled so that supplying either half derives the other.

Usage:
    normalizer = FinancialInputsNormalizer()
    inputs = normalizer.normalize({"revenue": 5_000_000, "ebitdaMargin": 20})
"""

import logging
import math
from dataclasses import fields as dataclass_fields
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from pydantic import ValidationError

from valuator.config.settings import NormalizationSettings
from valuator.domain.exceptions import InvalidInputError
from valuator.domain.models.financials import (
    BusinessModel,
    FinancialInputs,
    IndustryType,
    MarketPosition,
    RawFinancialData,
)

logger = logging.getLogger(__name__)

FinancialRecord = Union[Mapping[str, Any], RawFinancialData, FinancialInputs]

_NON_NEGATIVE_FIELDS = ("total_assets", "employee_count", "customers_count", "shares_outstanding")


class FinancialInputsNormalizer:
    """Validate a raw record and complete it with revenue-derived defaults."""

    def __init__(self, settings: Optional[NormalizationSettings] = None):
        self.settings = settings or NormalizationSettings()

    def normalize(self, record: FinancialRecord) -> FinancialInputs:
        """
        Build a complete ``FinancialInputs`` from a partial record.

        Args:
            record: Mapping (camelCase or snake_case keys), ``RawFinancialData``,
                or an already-normalized ``FinancialInputs`` (re-validated).

        Returns:
            Fully populated FinancialInputs

        Raises:
            InvalidInputError: If revenue is missing/non-positive, a value is
                not numeric or not finite, or a non-negative field is negative.
        """
        if isinstance(record, FinancialInputs):
            self._validate_values({f.name: getattr(record, f.name) for f in dataclass_fields(record)})
            return record

        raw = self._parse(record)
        self._validate_values(raw.model_dump())

        revenue = float(raw.revenue)
        ratios = self.settings.revenue_ratios
        defaulted: List[str] = []

        gross_profit, gross_margin = self._reconcile(
            "gross_profit",
            revenue,
            raw.gross_profit,
            raw.gross_margin,
            ratios.gross_profit,
            self.settings.default_gross_margin,
            defaulted,
        )
        ebitda, ebitda_margin = self._reconcile(
            "ebitda",
            revenue,
            raw.ebitda,
            raw.ebitda_margin,
            ratios.ebitda,
            self.settings.default_ebitda_margin,
            defaulted,
        )

        def from_revenue(name: str, value: Optional[float], ratio: float) -> float:
            if value is None:
                defaulted.append(name)
                return revenue * ratio
            return float(value)

        growth = raw.revenue_growth_rate
        if growth is None:
            defaulted.append("revenue_growth_rate")
            growth = self.settings.default_revenue_growth_rate

        inputs = FinancialInputs(
            revenue=revenue,
            revenue_growth_rate=float(growth),
            gross_profit=gross_profit,
            gross_margin=gross_margin,
            ebitda=ebitda,
            ebitda_margin=ebitda_margin,
            net_income=from_revenue("net_income", raw.net_income, ratios.net_income),
            total_assets=from_revenue("total_assets", raw.total_assets, ratios.total_assets),
            total_liabilities=from_revenue("total_liabilities", raw.total_liabilities, ratios.total_liabilities),
            shareholders_equity=from_revenue(
                "shareholders_equity", raw.shareholders_equity, ratios.shareholders_equity
            ),
            operating_cash_flow=from_revenue(
                "operating_cash_flow", raw.operating_cash_flow, ratios.operating_cash_flow
            ),
            free_cash_flow=from_revenue("free_cash_flow", raw.free_cash_flow, ratios.free_cash_flow),
            industry_type=IndustryType.parse(
                raw.industry_type, IndustryType.parse(self.settings.default_industry, IndustryType.OTHER)
            ),
            business_model=BusinessModel.parse(
                raw.business_model, BusinessModel.parse(self.settings.default_business_model, BusinessModel.OTHER)
            ),
            market_position=MarketPosition.parse(
                raw.market_position,
                MarketPosition.parse(self.settings.default_market_position, MarketPosition.OTHER),
            ),
            employee_count=(
                raw.employee_count if raw.employee_count is not None else self.settings.default_employee_count
            ),
            customers_count=(
                raw.customers_count if raw.customers_count is not None else self.settings.default_customers_count
            ),
            monthly_recurring_revenue=raw.monthly_recurring_revenue,
            market_share=raw.market_share,
            shares_outstanding=raw.shares_outstanding,
        )

        if defaulted:
            logger.debug(f"Defaulted {len(defaulted)} financial fields from revenue: {', '.join(defaulted)}")

        return inputs

    def _parse(self, record: Union[Mapping[str, Any], RawFinancialData]) -> RawFinancialData:
        if isinstance(record, RawFinancialData):
            return record
        if not isinstance(record, Mapping):
            raise InvalidInputError(f"Financial data must be a mapping, got {type(record).__name__}")
        try:
            return RawFinancialData.model_validate(dict(record))
        except ValidationError as e:
            bad_fields = sorted({".".join(str(part) for part in err["loc"]) for err in e.errors()})
            raise InvalidInputError("Financial data contains invalid values", fields=bad_fields) from e

    def _validate_values(self, values: Dict[str, Any]) -> None:
        revenue = values.get("revenue")
        if revenue is None:
            raise InvalidInputError("Revenue is required to value a company", fields=["revenue"])

        non_finite = [
            name
            for name, value in values.items()
            if isinstance(value, float) and not math.isfinite(value)
        ]
        if non_finite:
            raise InvalidInputError("Financial data contains non-finite values", fields=sorted(non_finite))

        if revenue <= 0:
            raise InvalidInputError("Revenue must be positive", fields=["revenue"])

        negative = [name for name in _NON_NEGATIVE_FIELDS if values.get(name) is not None and values[name] < 0]
        if negative:
            raise InvalidInputError("Financial data contains negative values", fields=negative)

    @staticmethod
    def _reconcile(
        name: str,
        revenue: float,
        absolute: Optional[float],
        margin: Optional[float],
        ratio: float,
        default_margin: float,
        defaulted: List[str],
    ) -> Tuple[float, float]:
        """Return ``(absolute, margin_pct)`` with whichever half is missing derived."""
        if absolute is not None and margin is not None:
            return float(absolute), float(margin)
        if absolute is not None:
            defaulted.append(f"{name}_margin")
            return float(absolute), float(absolute) / revenue * 100
        if margin is not None:
            defaulted.append(name)
            return revenue * float(margin) / 100, float(margin)
        defaulted.extend([name, f"{name}_margin"])
        return revenue * ratio, default_margin
