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
Cost of Capital - CAPM-style discount rate for the DCF method.

The engine values private companies without a capital structure, so the
discount rate is the cost of equity alone:

    WACC = risk-free rate + beta x market risk premium

Rates are percentages (``13.4`` means 13.4%).

Usage:
    from valuator.domain.services.valuation.cost_of_capital import CostOfCapital

    coc = CostOfCapital()
    coc.calculate("SaaS").wacc  # 13.4
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from valuator.config.settings import DCFSettings

logger = logging.getLogger(__name__)


@dataclass
class CostOfCapitalResult:
    """Result of cost of capital calculation."""

    wacc: float
    beta: float
    risk_free_rate: float
    market_risk_premium: float
    industry: str
    notes: List[str] = field(default_factory=list)


class CostOfCapital:
    """Industry-conditioned discount rate calculator."""

    def __init__(self, settings: Optional[DCFSettings] = None):
        self.settings = settings or DCFSettings()

    def get_beta(self, industry: str) -> Tuple[float, bool]:
        """
        Get beta for an industry.

        Returns:
            Tuple of (beta, is_configured) where ``is_configured`` is False
            when the default beta was used.
        """
        betas = self.settings.industry_betas
        if industry in betas:
            return (betas[industry], True)

        industry_lower = industry.lower()
        for key, beta in betas.items():
            if key.lower() == industry_lower:
                return (beta, True)

        return (self.settings.default_beta, False)

    def calculate(self, industry: str) -> CostOfCapitalResult:
        rf = self.settings.risk_free_rate
        mrp = self.settings.market_risk_premium
        notes = []

        beta, configured = self.get_beta(industry)
        if not configured:
            notes.append(f"Default beta {beta:.2f} used for '{industry}'")

        wacc = rf + beta * mrp

        logger.debug(f"WACC for {industry}: rf={rf:.2f}% beta={beta:.2f} mrp={mrp:.2f}% -> {wacc:.2f}%")

        return CostOfCapitalResult(
            wacc=wacc,
            beta=beta,
            risk_free_rate=rf,
            market_risk_premium=mrp,
            industry=industry,
            notes=notes,
        )
