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

"""Precedent transaction (deal multiples) valuation method."""

from __future__ import annotations

from typing import Any, Optional, Sequence

from valuator.config.settings import PrecedentTransactionSettings
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import PrecedentTransactionResult, TransactionComparable, ValuationMethod
from valuator.domain.services.multiple_statistics import MultipleStatisticsCalculator
from valuator.domain.services.valuation.methods.market import MarketMultipleMethod


class PrecedentTransactionMethod(MarketMultipleMethod):
    """Values the company off historical deals, plus a control premium."""

    method = ValuationMethod.PRECEDENT_TRANSACTION
    sample_label = "precedent transaction"

    def __init__(
        self,
        settings: Optional[PrecedentTransactionSettings] = None,
        statistics: Optional[MultipleStatisticsCalculator] = None,
    ) -> None:
        super().__init__(settings or PrecedentTransactionSettings(), statistics)

    def _calculate(
        self,
        inputs: FinancialInputs,
        transactions: Sequence[TransactionComparable] = (),
        **_: Any,
    ) -> PrecedentTransactionResult:
        valuation = self.value_from_multiples(
            inputs,
            revenue_multiples=[t.revenue_multiple for t in transactions],
            ebitda_multiples=[t.ebitda_multiple for t in transactions],
        )

        return PrecedentTransactionResult(
            method=self.method,
            valuation_range=valuation.valuation_range,
            confidence=valuation.confidence,
            weight=valuation.weight,
            warnings=valuation.warnings,
            transactions=tuple(transactions),
            revenue_multiples=valuation.revenue_multiples,
            ebitda_multiples=valuation.ebitda_multiples,
            control_premium=self.settings.multiple_adjustment_pct,
            revenue_valuation=valuation.revenue_valuation,
            ebitda_valuation=valuation.ebitda_valuation,
        )
