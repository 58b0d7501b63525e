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
Sensitivity Analyzer

Derives variable sensitivities, three named scenarios and (optionally) a
Monte Carlo distribution from an aggregated valuation.

Scenario sources:
    AGGREGATE: re-value the company through every method and the aggregator
        under perturbed growth / EBITDA margin, then apply the scenario's
        multiple premium or discount.
    REVENUE_MULTIPLE: read the scenario values off the revenue-multiple
        method's high / median / low.

Re-valuation goes through a ``revalue`` callable supplied by the caller
(normally the orchestrator) mapping ``FinancialInputs`` to a weighted
valuation, or ``None`` when no method produces a usable result for the
perturbed inputs. A failed scenario revaluation falls back to the valuation
range bound for that scenario; failed Monte Carlo draws are dropped. Without
a revaluation function, scenarios use REVENUE_MULTIPLE and Monte Carlo is
skipped.
"""

from __future__ import annotations

import dataclasses
import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional, Tuple

import numpy as np

from valuator.config.settings import SensitivitySettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import (
    ConfidenceInterval,
    ImpactRange,
    MethodOutcome,
    MonteCarloResults,
    RevenueMultipleResult,
    ScenarioName,
    SensitivityAnalysis,
    SensitivityVariable,
    ValuationScenario,
    ValuationSummary,
    VariableRange,
)

logger = logging.getLogger(__name__)

Revaluer = Callable[[FinancialInputs], Optional[float]]


class ScenarioSource(str, Enum):
    AGGREGATE = "aggregate"
    REVENUE_MULTIPLE = "revenue_multiple"


def perturb_inputs(inputs: FinancialInputs, growth_delta: float = 0.0, margin_delta: float = 0.0) -> FinancialInputs:
    """Shift growth and EBITDA margin (percentage points), recomputing EBITDA from revenue."""
    ebitda_margin = inputs.ebitda_margin + margin_delta
    return dataclasses.replace(
        inputs,
        revenue_growth_rate=inputs.revenue_growth_rate + growth_delta,
        ebitda_margin=ebitda_margin,
        ebitda=inputs.revenue * ebitda_margin / 100,
    )


class SensitivityAnalyzer:
    """Variable, scenario and Monte Carlo sensitivity over one valuation."""

    def __init__(self, settings: Optional[SensitivitySettings] = None) -> None:
        self.settings = settings or SensitivitySettings()

    @property
    def scenario_source(self) -> ScenarioSource:
        return ScenarioSource(self.settings.scenario_source)

    def analyze(
        self,
        inputs: FinancialInputs,
        outcomes: Iterable[MethodOutcome],
        summary: ValuationSummary,
        revalue: Optional[Revaluer] = None,
        include_monte_carlo: bool = False,
    ) -> SensitivityAnalysis:
        revenue_result = next((o for o in outcomes if isinstance(o, RevenueMultipleResult)), None)

        monte_carlo = None
        if include_monte_carlo:
            if revalue is None:
                logger.warning("Monte Carlo requested without a revaluation function, skipping")
            else:
                monte_carlo = self.monte_carlo(inputs, revalue)

        return SensitivityAnalysis(
            variables=tuple(self.variables(inputs, revenue_result)),
            scenarios=self.scenarios(inputs, summary, revenue_result, revalue),
            monte_carlo=monte_carlo,
        )

    def variables(
        self, inputs: FinancialInputs, revenue_result: Optional[RevenueMultipleResult]
    ) -> List[SensitivityVariable]:
        s = self.settings
        variables = [
            SensitivityVariable(
                variable="Revenue Growth Rate",
                base_case=inputs.revenue_growth_rate,
                range=VariableRange(
                    low=inputs.revenue_growth_rate - s.growth_band,
                    high=inputs.revenue_growth_rate + s.growth_band,
                ),
                impact=ImpactRange(low_case=s.growth_impact[0], high_case=s.growth_impact[1]),
            ),
            SensitivityVariable(
                variable="EBITDA Margin",
                base_case=inputs.ebitda_margin,
                range=VariableRange(
                    low=inputs.ebitda_margin - s.margin_band,
                    high=inputs.ebitda_margin + s.margin_band,
                ),
                impact=ImpactRange(low_case=s.margin_impact[0], high_case=s.margin_impact[1]),
            ),
        ]

        if revenue_result is not None:
            multiples = revenue_result.adjusted_multiples
            variables.append(
                SensitivityVariable(
                    variable="Revenue Multiple",
                    base_case=multiples.median,
                    range=VariableRange(low=multiples.low, high=multiples.high),
                    impact=ImpactRange(low_case=s.multiple_impact[0], high_case=s.multiple_impact[1]),
                )
            )
        return variables

    def scenarios(
        self,
        inputs: FinancialInputs,
        summary: ValuationSummary,
        revenue_result: Optional[RevenueMultipleResult],
        revalue: Optional[Revaluer],
    ) -> Tuple[ValuationScenario, ...]:
        s = self.settings
        premium = s.scenario_multiple_adjustment
        growth, margin = inputs.revenue_growth_rate, inputs.ebitda_margin

        assumptions = {
            ScenarioName.OPTIMISTIC: {
                "Revenue Growth": growth + s.growth_band,
                "EBITDA Margin": margin + s.margin_band,
                "Multiple Premium": premium,
            },
            ScenarioName.BASE_CASE: {
                "Revenue Growth": growth,
                "EBITDA Margin": margin,
                "Multiple Premium": 0.0,
            },
            ScenarioName.PESSIMISTIC: {
                "Revenue Growth": growth - s.growth_band,
                "EBITDA Margin": margin - s.margin_band,
                "Multiple Discount": -premium,
            },
        }
        probabilities = {
            ScenarioName.OPTIMISTIC: s.optimistic_probability,
            ScenarioName.BASE_CASE: s.base_case_probability,
            ScenarioName.PESSIMISTIC: s.pessimistic_probability,
        }

        source = self.scenario_source
        if source is ScenarioSource.AGGREGATE and revalue is None:
            logger.debug("No revaluation function supplied, scenarios read from revenue multiple range")
            source = ScenarioSource.REVENUE_MULTIPLE

        # Legacy coupling to the revenue-multiple method; the summary range
        # stands in when that method did not run.
        valuation_range = revenue_result.valuation_range if revenue_result else summary.valuation_range

        if source is ScenarioSource.AGGREGATE:
            valuations = {
                ScenarioName.OPTIMISTIC: self._revalue_scenario(
                    ScenarioName.OPTIMISTIC,
                    revalue,
                    perturb_inputs(inputs, s.growth_band, s.margin_band),
                    premium,
                    valuation_range.high,
                ),
                ScenarioName.BASE_CASE: summary.weighted_valuation,
                ScenarioName.PESSIMISTIC: self._revalue_scenario(
                    ScenarioName.PESSIMISTIC,
                    revalue,
                    perturb_inputs(inputs, -s.growth_band, -s.margin_band),
                    -premium,
                    valuation_range.low,
                ),
            }
        else:
            valuations = {
                ScenarioName.OPTIMISTIC: valuation_range.high,
                ScenarioName.BASE_CASE: valuation_range.median,
                ScenarioName.PESSIMISTIC: valuation_range.low,
            }

        return tuple(
            ValuationScenario(
                scenario=name,
                assumptions=assumptions[name],
                valuation=valuations[name],
                probability=probabilities[name],
            )
            for name in (ScenarioName.OPTIMISTIC, ScenarioName.BASE_CASE, ScenarioName.PESSIMISTIC)
        )

    @staticmethod
    def _revalue_scenario(
        scenario: ScenarioName,
        revalue: Revaluer,
        perturbed: FinancialInputs,
        multiple_adjustment: float,
        fallback: float,
    ) -> float:
        value = revalue(perturbed)
        if value is None:
            logger.warning(
                f"{scenario.value} scenario: no method produced a usable result, "
                f"using valuation range bound {fallback:,.0f}"
            )
            return fallback
        return value * (1 + multiple_adjustment / 100)

    def monte_carlo(self, inputs: FinancialInputs, revalue: Revaluer) -> Optional[MonteCarloResults]:
        """
        Simulate valuations under normally distributed growth and margin shocks.

        The generator is seeded from ``monte_carlo_seed`` so identical inputs
        and settings give identical results. Draws the revaluation cannot
        value are dropped and ``iterations`` counts the usable ones. Returns
        None when no draw is usable.
        """
        s = self.settings
        rng = np.random.default_rng(s.monte_carlo_seed)
        growth_shocks = rng.normal(0.0, s.growth_volatility, s.monte_carlo_iterations)
        margin_shocks = rng.normal(0.0, s.margin_volatility, s.monte_carlo_iterations)

        draws = [revalue(perturb_inputs(inputs, float(g), float(m))) for g, m in zip(growth_shocks, margin_shocks)]
        valuations = np.array([v for v in draws if v is not None], dtype=float)
        if valuations.size < s.monte_carlo_iterations:
            logger.warning(
                f"Monte Carlo: {s.monte_carlo_iterations - valuations.size} of {s.monte_carlo_iterations} "
                f"draws produced no usable valuation and were dropped"
            )
        if valuations.size == 0:
            return None

        p2_5, p5, p95, p97_5 = np.percentile(valuations, [2.5, 5, 95, 97.5])

        logger.debug(
            f"Monte Carlo: {valuations.size} iterations, "
            f"mean={valuations.mean():,.0f} std={valuations.std():,.0f}"
        )

        return MonteCarloResults(
            iterations=int(valuations.size),
            mean_valuation=float(valuations.mean()),
            standard_deviation=float(valuations.std()),
            confidence_intervals={
                "90%": ConfidenceInterval(low=float(p5), high=float(p95)),
                "95%": ConfidenceInterval(low=float(p2_5), high=float(p97_5)),
            },
        )
