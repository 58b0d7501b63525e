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

"""Serialization helpers for valuation reports."""

from __future__ import annotations

import dataclasses
import math
from datetime import date, datetime
from enum import Enum
from typing import Any, Dict

from valuator.domain.models.valuation import CompanyValuation, MethodUnavailable


def to_jsonable(value: Any) -> Any:
    """
    Convert report values into JSON-friendly primitives.

    Enums become their values, dates ISO strings, dataclasses dicts and
    tuples lists. Non-finite floats become ``None``.
    """
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        payload = {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
        if isinstance(value, MethodUnavailable):
            payload["available"] = False
        return payload
    if isinstance(value, dict) or hasattr(value, "items"):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in value]
    return value


def valuation_to_dict(valuation: CompanyValuation) -> Dict[str, Any]:
    """Serialize a ``CompanyValuation`` for JSON/YAML output or an API response."""
    return to_jsonable(valuation)
