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

"""Valuation report data types.

Every method calculator returns either a ``MethodResult`` subclass carrying
its method-specific payload, or a ``MethodUnavailable`` tag when it refused
to value the company. The aggregator folds over the results only.

All types are frozen: a ``CompanyValuation`` is built once per request and
never mutated afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, Mapping, Optional, Tuple, Union

from valuator.domain.models.financials import FinancialInputs


class ValuationMethod(str, Enum):
    REVENUE_MULTIPLE = "Revenue Multiple"
    EBITDA_MULTIPLE = "EBITDA Multiple"
    DISCOUNTED_CASH_FLOW = "Discounted Cash Flow"
    ASSET_BASED = "Asset-Based"
    COMPARABLE_COMPANY = "Comparable Company"
    PRECEDENT_TRANSACTION = "Precedent Transaction"


class AdjustmentType(str, Enum):
    SIZE = "Size Premium/Discount"
    LIQUIDITY_DISCOUNT = "Liquidity Discount"
    CONTROL_PREMIUM = "Control Premium"
    KEY_PERSON_DISCOUNT = "Key Person Discount"
    TECHNOLOGY_PREMIUM = "Technology Premium"
    GROWTH_PREMIUM = "Growth Premium"
    OTHER = "Other"


class DataQuality(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class RiskCategory(str, Enum):
    MARKET = "Market"
    FINANCIAL = "Financial"
    OPERATIONAL = "Operational"
    REGULATORY = "Regulatory"
    TECHNOLOGY = "Technology"


class RiskImpact(str, Enum):
    HIGH = "High"
    MEDIUM = "Medium"
    LOW = "Low"


class ScenarioName(str, Enum):
    OPTIMISTIC = "Optimistic"
    BASE_CASE = "Base Case"
    PESSIMISTIC = "Pessimistic"


# =============================================================================
# Building blocks
# =============================================================================


@dataclass(frozen=True, slots=True)
class MultipleBand:
    """Low/median/high multiple band, e.g. an industry EV/Revenue range."""

    low: float
    median: float
    high: float

    def scaled(self, factor: float) -> "MultipleBand":
        return MultipleBand(low=self.low * factor, median=self.median * factor, high=self.high * factor)


@dataclass(frozen=True, slots=True)
class ValuationRange:
    low: float
    median: float
    high: float

    @classmethod
    def around(cls, value: float, low_factor: float, high_factor: float) -> "ValuationRange":
        """Bracket a point value, e.g. ``around(v, 0.8, 1.2)``."""
        return cls(low=value * low_factor, median=value, high=value * high_factor)

    @property
    def is_ordered(self) -> bool:
        return self.low <= self.median <= self.high


@dataclass(frozen=True, slots=True)
class ValuationAdjustment:
    type: AdjustmentType
    description: str
    adjustment: float  # percentage points
    rationale: str


@dataclass(frozen=True, slots=True)
class AssetAdjustment:
    asset: str
    book_value: float
    market_value: float
    adjustment: float
    reason: str


@dataclass(frozen=True, slots=True)
class ProjectedCashFlow:
    year: int
    revenue: float
    ebitda: float
    taxes: float
    capital_expenditure: float
    working_capital_change: float
    free_cash_flow: float
    present_value: float


@dataclass(frozen=True, slots=True)
class PublicComparable:
    company_name: str
    ticker: str
    market_cap: float
    revenue: float
    ebitda: float
    revenue_multiple: float
    ebitda_multiple: float
    similarity: float  # 0-100


@dataclass(frozen=True, slots=True)
class TransactionComparable:
    target_company: str
    acquirer: str
    transaction_date: date
    transaction_value: float
    revenue: float
    ebitda: float
    revenue_multiple: float
    ebitda_multiple: float
    similarity: float


@dataclass(frozen=True, slots=True)
class MarketComparable:
    """Public comparable as shown in the report, tagged with the target industry."""

    company_name: str
    industry: str
    market_cap: float
    revenue: float
    ebitda: float
    revenue_multiple: float
    ebitda_multiple: float
    similarity: float


@dataclass(frozen=True, slots=True)
class MultipleStatistics:
    """Summary statistics over a multiple sample.

    ``count == 0`` is the explicit "no data" state: every statistic is ``None``.
    """

    count: int
    min: Optional[float]
    q1: Optional[float]
    median: Optional[float]
    q3: Optional[float]
    max: Optional[float]
    mean: Optional[float]
    standard_deviation: Optional[float]

    @classmethod
    def empty(cls) -> "MultipleStatistics":
        return cls(count=0, min=None, q1=None, median=None, q3=None, max=None, mean=None, standard_deviation=None)

    @property
    def has_data(self) -> bool:
        return self.count > 0


# =============================================================================
# Method results
# =============================================================================


@dataclass(frozen=True, slots=True, kw_only=True)
class MethodResult:
    """Common shape shared by all six valuation methods.

    ``confidence`` is on a 1-10 scale (0 marks a method flagged out of the
    blend); ``weight`` is this run's blending weight in [0, 1].
    """

    method: ValuationMethod
    valuation_range: ValuationRange
    confidence: float
    weight: float
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True, kw_only=True)
class RevenueMultipleResult(MethodResult):
    industry_multiples: MultipleBand
    adjustments: Tuple[ValuationAdjustment, ...]
    adjusted_multiples: MultipleBand


@dataclass(frozen=True, slots=True, kw_only=True)
class EBITDAMultipleResult(MethodResult):
    industry_multiples: MultipleBand
    adjustments: Tuple[ValuationAdjustment, ...]
    adjusted_multiples: MultipleBand


@dataclass(frozen=True, slots=True, kw_only=True)
class DCFResult(MethodResult):
    projection_years: int
    discount_rate: float  # WACC, percent
    terminal_growth_rate: float  # percent
    projected_cash_flows: Tuple[ProjectedCashFlow, ...]
    terminal_value: float
    present_value_of_terminal: float
    present_value_of_cash_flows: float
    enterprise_value: float
    equity_value: float


@dataclass(frozen=True, slots=True, kw_only=True)
class AssetBasedResult(MethodResult):
    tangible_assets: float
    intangible_assets: float
    asset_adjustments: Tuple[AssetAdjustment, ...]
    adjusted_book_value: float


@dataclass(frozen=True, slots=True, kw_only=True)
class ComparableCompanyResult(MethodResult):
    comparables: Tuple[PublicComparable, ...]
    revenue_multiples: MultipleStatistics
    ebitda_multiples: MultipleStatistics
    adjustments: Tuple[ValuationAdjustment, ...]
    revenue_valuation: float
    ebitda_valuation: float


@dataclass(frozen=True, slots=True, kw_only=True)
class PrecedentTransactionResult(MethodResult):
    transactions: Tuple[TransactionComparable, ...]
    revenue_multiples: MultipleStatistics
    ebitda_multiples: MultipleStatistics
    control_premium: float  # percent
    revenue_valuation: float
    ebitda_valuation: float


@dataclass(frozen=True, slots=True)
class MethodUnavailable:
    """Tag returned by a method that refused to produce a valuation."""

    method: ValuationMethod
    reason: str
    warnings: Tuple[str, ...] = ()


MethodOutcome = Union[MethodResult, MethodUnavailable]


# =============================================================================
# Aggregate report
# =============================================================================


@dataclass(frozen=True, slots=True)
class ImpliedMultiples:
    revenue_multiple: Optional[float]
    ebitda_multiple: Optional[float]
    book_value_multiple: Optional[float]


@dataclass(frozen=True, slots=True)
class PerShareMetrics:
    shares_outstanding: float
    value_per_share: float
    price_range: ValuationRange


@dataclass(frozen=True, slots=True)
class ValuationSummary:
    """Blend of the surviving method results.

    ``valuation_range.low``/``high`` are the union (min/max) of the blended
    methods' bounds while ``median`` is the weight-blended point value.
    """

    weighted_valuation: float
    valuation_range: ValuationRange
    implied_multiples: ImpliedMultiples
    overall_confidence: float
    method_count: int
    data_quality: DataQuality
    method_weights: Mapping[ValuationMethod, float] = field(default_factory=dict)
    excluded_methods: Tuple[ValuationMethod, ...] = ()
    per_share_metrics: Optional[PerShareMetrics] = None


@dataclass(frozen=True, slots=True)
class VariableRange:
    low: float
    high: float


@dataclass(frozen=True, slots=True)
class ImpactRange:
    low_case: float  # percent change in valuation
    high_case: float


@dataclass(frozen=True, slots=True)
class SensitivityVariable:
    variable: str
    base_case: float
    range: VariableRange
    impact: ImpactRange


@dataclass(frozen=True, slots=True)
class ValuationScenario:
    scenario: ScenarioName
    assumptions: Mapping[str, float]
    valuation: float
    probability: float


@dataclass(frozen=True, slots=True)
class ConfidenceInterval:
    low: float
    high: float


@dataclass(frozen=True, slots=True)
class MonteCarloResults:
    iterations: int
    mean_valuation: float
    standard_deviation: float
    confidence_intervals: Mapping[str, ConfidenceInterval]


@dataclass(frozen=True, slots=True)
class SensitivityAnalysis:
    variables: Tuple[SensitivityVariable, ...] = ()
    scenarios: Tuple[ValuationScenario, ...] = ()
    monte_carlo: Optional[MonteCarloResults] = None


@dataclass(frozen=True, slots=True)
class ValuationRiskFactor:
    category: RiskCategory
    factor: str
    impact: RiskImpact
    description: str
    mitigation: Optional[str] = None
    discount_adjustment: Optional[float] = None  # percent


@dataclass(frozen=True, slots=True)
class CompanyIdentity:
    company_id: str
    name: str
    currency: str


@dataclass(frozen=True, slots=True)
class CompanyValuation:
    company_id: str
    company_name: str
    currency: str
    valuation_date: date
    financial_inputs: FinancialInputs
    valuation_methods: Mapping[ValuationMethod, MethodOutcome]
    valuation_summary: ValuationSummary
    comparables: Tuple[MarketComparable, ...]
    sensitivity_analysis: SensitivityAnalysis
    risk_factors: Tuple[ValuationRiskFactor, ...]
    generated_at: datetime
    warnings: Tuple[str, ...] = ()

    def method(self, method: ValuationMethod) -> MethodOutcome:
        return self.valuation_methods[method]

    def results(self) -> Dict[ValuationMethod, MethodResult]:
        """Methods that produced a valuation range."""
        return {
            method: outcome
            for method, outcome in self.valuation_methods.items()
            if isinstance(outcome, MethodResult)
        }
