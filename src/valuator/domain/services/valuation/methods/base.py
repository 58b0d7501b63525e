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
Common contract for valuation method calculators.

Each concrete method inherits from ``BaseValuationMethod`` and implements
``_calculate``. A method that detects its own degenerate case raises
``MethodUnavailableError``; ``calculate`` converts that into a
``MethodUnavailable`` tag so the aggregator can fold over successes only.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any

from valuator.domain.exceptions import MethodUnavailableError
from valuator.domain.models.financials import FinancialInputs
from valuator.domain.models.valuation import MethodOutcome, MethodResult, MethodUnavailable, ValuationMethod

logger = logging.getLogger(__name__)


class BaseValuationMethod(ABC):
    """
    Base class for all valuation methods.

    Calculators are stateless apart from their settings, so one instance can
    value any number of companies concurrently.
    """

    method: ValuationMethod

    def calculate(self, inputs: FinancialInputs, **kwargs: Any) -> MethodOutcome:
        """Run the method, returning ``MethodUnavailable`` for degenerate cases."""
        try:
            result = self._calculate(inputs, **kwargs)
        except MethodUnavailableError as e:
            logger.warning(f"{self.method.value} unavailable: {e.reason}")
            return MethodUnavailable(method=self.method, reason=e.reason)

        logger.debug(
            f"{self.method.value}: low={result.valuation_range.low:,.0f} "
            f"median={result.valuation_range.median:,.0f} high={result.valuation_range.high:,.0f} "
            f"confidence={result.confidence} weight={result.weight}"
        )
        return result

    @abstractmethod
    def _calculate(self, inputs: FinancialInputs, **kwargs: Any) -> MethodResult:
        """Execute the valuation method.

        Raises:
            MethodUnavailableError: If the inputs make the method meaningless.
        """

    def unavailable(self, reason: str) -> MethodUnavailableError:
        return MethodUnavailableError(self.method.value, reason)
