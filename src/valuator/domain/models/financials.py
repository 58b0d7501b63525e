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

"""Financial input data types.

``RawFinancialData`` is the loosely-typed record accepted at the engine
boundary (any field may be absent, camelCase or snake_case keys).
``FinancialInputs`` is the fully populated snapshot every valuation method
consumes once the normalizer has filled the gaps.

Conventions:
    - All monetary fields share one currency (no conversion in the engine).
    - Rates and margins are percentages, e.g. ``25.0`` means 25%.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _LabelledEnum(str, Enum):
    """String enum that maps unknown labels to ``OTHER``."""

    @classmethod
    def parse(cls, value: Optional[str], default: "_LabelledEnum") -> "_LabelledEnum":
        if value is None:
            return default
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value.lower() == text or member.name.lower() == text:
                return member
        return cls["OTHER"]


class IndustryType(_LabelledEnum):
    SAAS = "SaaS"
    TECHNOLOGY = "Technology"
    MANUFACTURING = "Manufacturing"
    RETAIL = "Retail"
    HEALTHCARE = "Healthcare"
    FINANCIAL_SERVICES = "Financial Services"
    ENERGY = "Energy"
    REAL_ESTATE = "Real Estate"
    OTHER = "Other"


class BusinessModel(_LabelledEnum):
    B2B_SAAS = "B2B SaaS"
    B2C_SAAS = "B2C SaaS"
    MARKETPLACE = "Marketplace"
    ECOMMERCE = "E-commerce"
    MANUFACTURING = "Manufacturing"
    SERVICES = "Services"
    HYBRID = "Hybrid"
    OTHER = "Other"


class MarketPosition(_LabelledEnum):
    MARKET_LEADER = "Market Leader"
    STRONG_COMPETITOR = "Strong Competitor"
    NICHE_PLAYER = "Niche Player"
    EMERGING = "Emerging"
    DECLINING = "Declining"
    OTHER = "Other"


class RawFinancialData(BaseModel):
    """Partial financial-data record as supplied by callers."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    revenue: Optional[float] = Field(
        default=None,
        validation_alias=AliasChoices("revenue", "annualRevenue", "annual_revenue"),
    )
    revenue_growth_rate: Optional[float] = None
    gross_profit: Optional[float] = None
    gross_margin: Optional[float] = None
    ebitda: Optional[float] = None
    ebitda_margin: Optional[float] = None
    net_income: Optional[float] = None
    total_assets: Optional[float] = None
    total_liabilities: Optional[float] = None
    shareholders_equity: Optional[float] = None
    operating_cash_flow: Optional[float] = None
    free_cash_flow: Optional[float] = None
    industry_type: Optional[str] = None
    business_model: Optional[str] = None
    market_position: Optional[str] = None
    employee_count: Optional[int] = None
    customers_count: Optional[int] = None
    monthly_recurring_revenue: Optional[float] = None
    market_share: Optional[float] = None
    shares_outstanding: Optional[float] = None


@dataclass(frozen=True, slots=True)
class FinancialInputs:
    """Normalized snapshot of one company-period."""

    revenue: float
    revenue_growth_rate: float
    gross_profit: float
    gross_margin: float
    ebitda: float
    ebitda_margin: float
    net_income: float
    total_assets: float
    total_liabilities: float
    shareholders_equity: float
    operating_cash_flow: float
    free_cash_flow: float
    industry_type: IndustryType
    business_model: BusinessModel
    market_position: MarketPosition
    employee_count: Optional[int] = None
    customers_count: Optional[int] = None
    monthly_recurring_revenue: Optional[float] = None
    market_share: Optional[float] = None
    shares_outstanding: Optional[float] = None
