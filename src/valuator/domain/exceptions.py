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

"""Valuation engine exceptions."""

from typing import List, Optional


class ValuationError(Exception):
    """Base exception for valuation engine errors"""

    def __init__(
        self,
        message: str,
        company_id: Optional[str] = None,
        method: Optional[str] = None,
    ):
        self.company_id = company_id
        self.method = method

        parts = [message]
        if company_id:
            parts.append(f"company={company_id}")
        if method:
            parts.append(f"method={method}")

        super().__init__(f"{parts[0]} ({', '.join(parts[1:])})" if len(parts) > 1 else parts[0])


class InvalidInputError(ValuationError):
    """Financial data record failed validation at the normalization boundary"""

    def __init__(self, message: str, fields: Optional[List[str]] = None, company_id: Optional[str] = None):
        self.fields = list(fields or [])
        if self.fields:
            message = f"{message}: {', '.join(self.fields)}"
        super().__init__(message, company_id=company_id)


class MethodUnavailableError(ValuationError):
    """A valuation method hit a degenerate numeric case and cannot produce a range"""

    def __init__(self, method: str, reason: str):
        self.reason = reason
        super().__init__(reason, method=method)


class DataSourceError(ValuationError):
    """Market data collaborator failed to return a sample"""

    pass


class CompanyNotFoundError(ValuationError):
    """Company directory has no record for the requested id"""

    def __init__(self, company_id: str):
        super().__init__("Company not found", company_id=company_id)
