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
Discounted cash flow valuation method.

Projection (year t = 1..N, rates in percent):

    growth_t   = g0 x decay^(t-1)
    revenue_t  = revenue_{t-1} x (1 + growth_t)
    EBITDA_t   = revenue_t x EBITDA margin
    FCF_t      = EBITDA_t - taxes - capex - change in working capital
    PV_t       = FCF_t / (1 + WACC)^t

Terminal value uses the perpetuity-growth formula on FCF_N with
``terminal growth = min(cap, factor x g0)``, discounted over N years.

Equity value equals enterprise value: net debt is not subtracted because
the inputs carry no debt/cash split.
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

from valuator.config.settings import DCFSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import DCFResult, ProjectedCashFlow, ValuationMethod, ValuationRange
from valuator.domain.services.valuation.cost_of_capital import CostOfCapital
from valuator.domain.services.valuation.methods.base import BaseValuationMethod

logger = logging.getLogger(__name__)


class DiscountedCashFlowMethod(BaseValuationMethod):
    method = ValuationMethod.DISCOUNTED_CASH_FLOW

    def __init__(self, settings: Optional[DCFSettings] = None, cost_of_capital: Optional[CostOfCapital] = None):
        self.settings = settings or DCFSettings()
        self.cost_of_capital = cost_of_capital or CostOfCapital(self.settings)

    def terminal_growth_rate(self, inputs: FinancialInputs) -> float:
        return min(self.settings.terminal_growth_cap, inputs.revenue_growth_rate * self.settings.terminal_growth_factor)

    def project_cash_flows(self, inputs: FinancialInputs, discount_rate: float) -> List[ProjectedCashFlow]:
        s = self.settings
        projections: List[ProjectedCashFlow] = []
        revenue = inputs.revenue

        for year in range(1, s.projection_years + 1):
            growth_rate = inputs.revenue_growth_rate * s.growth_decay ** (year - 1)
            revenue *= 1 + growth_rate / 100
            ebitda = revenue * inputs.ebitda_margin / 100

            taxes = ebitda * s.tax_rate / 100
            capex = revenue * s.capex_pct_of_revenue / 100
            working_capital_change = (revenue - inputs.revenue) * s.working_capital_pct_of_growth / 100

            free_cash_flow = ebitda - taxes - capex - working_capital_change
            present_value = free_cash_flow / (1 + discount_rate / 100) ** year

            projections.append(
                ProjectedCashFlow(
                    year=year,
                    revenue=revenue,
                    ebitda=ebitda,
                    taxes=taxes,
                    capital_expenditure=capex,
                    working_capital_change=working_capital_change,
                    free_cash_flow=free_cash_flow,
                    present_value=present_value,
                )
            )

        return projections

    def _calculate(self, inputs: FinancialInputs, **_: Any) -> DCFResult:
        s = self.settings
        coc = self.cost_of_capital.calculate(inputs.industry_type.value)
        discount_rate = coc.wacc
        terminal_growth = self.terminal_growth_rate(inputs)

        if discount_rate <= terminal_growth:
            raise self.unavailable(
                f"discount rate {discount_rate:.2f}% does not exceed terminal growth {terminal_growth:.2f}%"
            )

        projections = self.project_cash_flows(inputs, discount_rate)
        years = s.projection_years

        terminal_cash_flow = projections[-1].free_cash_flow * (1 + terminal_growth / 100)
        terminal_value = terminal_cash_flow / ((discount_rate - terminal_growth) / 100)
        present_value_of_terminal = terminal_value / (1 + discount_rate / 100) ** years

        present_value_of_cash_flows = sum(cf.present_value for cf in projections)
        enterprise_value = present_value_of_cash_flows + present_value_of_terminal

        if enterprise_value <= 0:
            raise self.unavailable(f"projected cash flows give a non-positive enterprise value ({enterprise_value:,.0f})")

        equity_value = enterprise_value

        logger.debug(
            f"DCF: WACC={discount_rate:.2f}% g_terminal={terminal_growth:.2f}% "
            f"PV(FCF)={present_value_of_cash_flows:,.0f} PV(TV)={present_value_of_terminal:,.0f}"
        )

        return DCFResult(
            method=self.method,
            valuation_range=ValuationRange.around(equity_value, s.range_low_factor, s.range_high_factor),
            confidence=s.confidence,
            weight=s.weight,
            projection_years=years,
            discount_rate=discount_rate,
            terminal_growth_rate=terminal_growth,
            projected_cash_flows=tuple(projections),
            terminal_value=terminal_value,
            present_value_of_terminal=present_value_of_terminal,
            present_value_of_cash_flows=present_value_of_cash_flows,
            enterprise_value=enterprise_value,
            equity_value=equity_value,
        )
