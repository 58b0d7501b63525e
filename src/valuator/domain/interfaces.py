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

"""Collaborator Interfaces.

Defines the external collaborators the valuation engine depends on. The
engine never hard-codes market samples or company records; adapters in
``valuator.infrastructure`` (or test doubles) implement these interfaces and
are injected into the orchestrator.
"""

from abc import ABC, abstractmethod
from typing import List

from valuator.domain.models.valuation import CompanyIdentity, PublicComparable, TransactionComparable


class MarketDataSource(ABC):
    """Source of public peers and precedent deals for an industry."""

    @abstractmethod
    async def get_comparables(self, industry: str) -> List[PublicComparable]:
        """Get publicly traded peers for an industry.

        Args:
            industry: Industry label (e.g. "SaaS").

        Returns:
            List of public comparables; empty when nothing is known.

        Raises:
            DataSourceError: If the source cannot be queried.
        """
        pass

    @abstractmethod
    async def get_transactions(self, industry: str) -> List[TransactionComparable]:
        """Get historical M&A transactions for an industry."""
        pass


class CompanyDirectory(ABC):
    """Lookup of company identity (display name and reporting currency)."""

    @abstractmethod
    async def get_company(self, company_id: str) -> CompanyIdentity:
        """Resolve a company id.

        Raises:
            CompanyNotFoundError: If the id is unknown.
        """
        pass
