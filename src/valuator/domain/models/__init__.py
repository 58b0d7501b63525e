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

"""Domain models for the valuation engine."""

from valuator.domain.models.financials import (
    BusinessModel,
    FinancialInputs,
    IndustryType,
    MarketPosition,
    RawFinancialData,
)
from valuator.domain.models.valuation import (
    AdjustmentType,
    AssetAdjustment,
    AssetBasedResult,
    CompanyIdentity,
    CompanyValuation,
    ComparableCompanyResult,
    ConfidenceInterval,
    DataQuality,
    DCFResult,
    EBITDAMultipleResult,
    ImpactRange,
    ImpliedMultiples,
    MarketComparable,
    MethodOutcome,
    MethodResult,
    MethodUnavailable,
    MonteCarloResults,
    MultipleBand,
    MultipleStatistics,
    PerShareMetrics,
    PrecedentTransactionResult,
    ProjectedCashFlow,
    PublicComparable,
    RevenueMultipleResult,
    RiskCategory,
    RiskImpact,
    ScenarioName,
    SensitivityAnalysis,
    SensitivityVariable,
    TransactionComparable,
    ValuationAdjustment,
    ValuationMethod,
    ValuationRange,
    ValuationRiskFactor,
    ValuationScenario,
    ValuationSummary,
    VariableRange,
)

__all__ = [
    # Inputs
    "BusinessModel",
    "FinancialInputs",
    "IndustryType",
    "MarketPosition",
    "RawFinancialData",
    # Method results
    "AdjustmentType",
    "AssetAdjustment",
    "AssetBasedResult",
    "ComparableCompanyResult",
    "DCFResult",
    "EBITDAMultipleResult",
    "MethodOutcome",
    "MethodResult",
    "MethodUnavailable",
    "MultipleBand",
    "MultipleStatistics",
    "PrecedentTransactionResult",
    "ProjectedCashFlow",
    "PublicComparable",
    "RevenueMultipleResult",
    "TransactionComparable",
    "ValuationAdjustment",
    "ValuationMethod",
    "ValuationRange",
    # Report
    "CompanyIdentity",
    "CompanyValuation",
    "ConfidenceInterval",
    "DataQuality",
    "ImpactRange",
    "ImpliedMultiples",
    "MarketComparable",
    "MonteCarloResults",
    "PerShareMetrics",
    "RiskCategory",
    "RiskImpact",
    "ScenarioName",
    "SensitivityAnalysis",
    "SensitivityVariable",
    "ValuationRiskFactor",
    "ValuationScenario",
    "ValuationSummary",
    "VariableRange",
]
