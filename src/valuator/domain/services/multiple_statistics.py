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

"""Multiple Statistics Calculator.

Summary statistics over a sample of valuation multiples, shared by the
comparable-company and precedent-transaction methods.

Quantile strategies:
    NEAREST_RANK: sort ascending and index ``sorted[floor(n * p)]`` for
        p = 0.25 / 0.5 / 0.75. For even n the median is the upper middle
        element, not the average of the two middle elements.
    LINEAR: numpy linear interpolation between closest ranks.

The standard deviation is the population figure (divide by n).
"""

import logging
import math
from enum import Enum
from typing import Iterable, List

import numpy as np

from valuator.domain.models.valuation import MultipleStatistics

logger = logging.getLogger(__name__)


class QuantileStrategy(Enum):
    NEAREST_RANK = "nearest_rank"
    LINEAR = "linear"


class MultipleStatisticsCalculator:
    """Order-independent summary statistics over a numeric sample."""

    def __init__(self, strategy: QuantileStrategy = QuantileStrategy.NEAREST_RANK):
        self.strategy = strategy

    def calculate(self, values: Iterable[float]) -> MultipleStatistics:
        """
        Compute min/quartiles/median/max/mean/std over ``values``.

        Non-finite values are dropped. An empty sample returns
        ``MultipleStatistics.empty()`` rather than NaN statistics.
        """
        sample: List[float] = sorted(float(v) for v in values if v is not None and math.isfinite(float(v)))
        if not sample:
            return MultipleStatistics.empty()

        array = np.asarray(sample, dtype=float)
        q1, median, q3 = (self._quantile(sample, array, p) for p in (0.25, 0.5, 0.75))

        return MultipleStatistics(
            count=len(sample),
            min=sample[0],
            q1=q1,
            median=median,
            q3=q3,
            max=sample[-1],
            mean=float(array.mean()),
            standard_deviation=float(array.std()),
        )

    def _quantile(self, sample: List[float], array: np.ndarray, p: float) -> float:
        if self.strategy is QuantileStrategy.LINEAR:
            return float(np.quantile(array, p))
        return sample[math.floor(len(sample) * p)]
