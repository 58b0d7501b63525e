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

"""In-memory company directory."""

import logging
from typing import Dict, Iterable, Optional

from valuator.domain.exceptions import CompanyNotFoundError
from valuator.domain.interfaces import CompanyDirectory
from valuator.domain.models.valuation import CompanyIdentity

logger = logging.getLogger(__name__)


class StaticCompanyDirectory(CompanyDirectory):
    """Company identities held in a dict keyed by company id."""

    def __init__(self, companies: Optional[Iterable[CompanyIdentity]] = None):
        self._companies: Dict[str, CompanyIdentity] = {c.company_id: c for c in companies or []}

    def register(self, identity: CompanyIdentity) -> None:
        self._companies[identity.company_id] = identity

    async def get_company(self, company_id: str) -> CompanyIdentity:
        identity = self._companies.get(company_id)
        if identity is None:
            logger.warning(f"Unknown company id: {company_id}")
            raise CompanyNotFoundError(company_id)
        return identity
