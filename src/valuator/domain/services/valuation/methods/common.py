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

"""Shared helpers for multiple-based valuation methods."""

from __future__ import annotations

from typing import Optional, Sequence

from valuator.domain.models.valuation import ValuationAdjustment


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Return numerator / denominator with guards for zero/None."""
    try:
        if numerator is None or denominator is None:
            return None
        denominator = float(denominator)
        if abs(denominator) < 1e-9:
            return None
        return float(numerator) / denominator
    except (TypeError, ValueError, ZeroDivisionError):
        return None


def adjustment_multiplier(adjustments: Sequence[ValuationAdjustment]) -> float:
    """Sum percentage adjustments additively: ``1 + sum(adj) / 100``."""
    return 1 + sum(adj.adjustment for adj in adjustments) / 100
