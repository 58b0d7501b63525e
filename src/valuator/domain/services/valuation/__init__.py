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
Valuation Services
==================

Multi-method valuation engine: six independent method calculators blended by
``ValuationSummaryAggregator`` and sequenced by ``ValuationOrchestrator``.

VALUATION METHODS:
    - Revenue Multiple: industry EV/Revenue band with size/growth/margin adjustments
    - EBITDA Multiple: industry EV/EBITDA band with a margin premium
    - Discounted Cash Flow: 5-year projection plus perpetuity-growth terminal value
    - Asset-Based: adjusted book value
    - Comparable Company: public peer multiples less a liquidity discount
    - Precedent Transaction: deal multiples plus a control premium
"""

from valuator.domain.services.valuation.cost_of_capital import CostOfCapital, CostOfCapitalResult
from valuator.domain.services.valuation.helpers import to_jsonable, valuation_to_dict
from valuator.domain.services.valuation.orchestrator import ValuationOrchestrator, parse_methods
from valuator.domain.services.valuation.risk_factors import RiskFactorIdentifier
from valuator.domain.services.valuation.sensitivity import ScenarioSource, SensitivityAnalyzer, perturb_inputs
from valuator.domain.services.valuation.summary import ValuationSummaryAggregator

__all__ = [
    "CostOfCapital",
    "CostOfCapitalResult",
    "RiskFactorIdentifier",
    "ScenarioSource",
    "SensitivityAnalyzer",
    "ValuationOrchestrator",
    "ValuationSummaryAggregator",
    "parse_methods",
    "perturb_inputs",
    "to_jsonable",
    "valuation_to_dict",
]
