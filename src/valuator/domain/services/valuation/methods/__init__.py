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
Valuation Methods
=================

Six independent calculators, each a pure function of ``FinancialInputs``
(plus a peer sample for the market-based methods) returning either a
``MethodResult`` subclass or a ``MethodUnavailable`` tag.
"""

from valuator.domain.services.valuation.methods.asset_based import AssetBasedMethod
from valuator.domain.services.valuation.methods.base import BaseValuationMethod
from valuator.domain.services.valuation.methods.comparable_company import ComparableCompanyMethod
from valuator.domain.services.valuation.methods.dcf import DiscountedCashFlowMethod
from valuator.domain.services.valuation.methods.ebitda_multiple import EBITDAMultipleMethod
from valuator.domain.services.valuation.methods.market import MarketMultipleMethod, MarketValuation
from valuator.domain.services.valuation.methods.precedent_transaction import PrecedentTransactionMethod
from valuator.domain.services.valuation.methods.revenue_multiple import RevenueMultipleMethod

__all__ = [
    "AssetBasedMethod",
    "BaseValuationMethod",
    "ComparableCompanyMethod",
    "DiscountedCashFlowMethod",
    "EBITDAMultipleMethod",
    "MarketMultipleMethod",
    "MarketValuation",
    "PrecedentTransactionMethod",
    "RevenueMultipleMethod",
]
