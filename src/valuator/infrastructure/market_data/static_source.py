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
Static Market Data Source

In-memory ``MarketDataSource`` backed by records keyed by industry label,
with a ``default`` entry used for industries that have no records of their
own.

File format (YAML)::

    comparables:
      default:
        - company_name: TechCorp Public
          ticker: TECH
          market_cap: 1000000000
          ...
    transactions:
      SaaS:
        - target_company: Acquired SaaS Co
          transaction_date: 2023-06-01
          ...

Usage:
    source = StaticMarketDataSource.from_yaml("data/market_comparables.yaml")
    comparables = await source.get_comparables("SaaS")
"""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import yaml

from valuator.domain.exceptions import DataSourceError
from valuator.domain.interfaces import MarketDataSource
from valuator.domain.models.valuation import PublicComparable, TransactionComparable

logger = logging.getLogger(__name__)

DEFAULT_KEY = "default"
BUNDLED_FIXTURES = Path(__file__).parent / "fixtures" / "market_comparables.yaml"


class StaticMarketDataSource(MarketDataSource):
    """Market data served from fixed records."""

    def __init__(
        self,
        comparables: Optional[Mapping[str, Sequence[PublicComparable]]] = None,
        transactions: Optional[Mapping[str, Sequence[TransactionComparable]]] = None,
    ) -> None:
        self.comparables: Dict[str, List[PublicComparable]] = {k: list(v) for k, v in (comparables or {}).items()}
        self.transactions: Dict[str, List[TransactionComparable]] = {
            k: list(v) for k, v in (transactions or {}).items()
        }

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "StaticMarketDataSource":
        """
        Build a source from plain records (the parsed YAML document).

        Raises:
            DataSourceError: If a record is missing fields or has bad values
        """
        return cls(
            comparables={
                industry: [_parse_comparable(r) for r in records or []]
                for industry, records in (data.get("comparables") or {}).items()
            },
            transactions={
                industry: [_parse_transaction(r) for r in records or []]
                for industry, records in (data.get("transactions") or {}).items()
            },
        )

    @classmethod
    def from_yaml(cls, path: str | Path) -> "StaticMarketDataSource":
        """
        Load records from a YAML file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            DataSourceError: If the file is not a valid market data document
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"Market data file not found: {path}")

        with open(path, "r") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise DataSourceError(f"Invalid market data file {path}: {e}") from e

        if not isinstance(data, Mapping):
            raise DataSourceError(f"Invalid market data file {path}: expected a mapping at the top level")

        source = cls.from_mapping(data)
        logger.debug(
            f"Loaded market data from {path}: {sum(len(v) for v in source.comparables.values())} comparables, "
            f"{sum(len(v) for v in source.transactions.values())} transactions"
        )
        return source

    @classmethod
    def bundled(cls) -> "StaticMarketDataSource":
        """Source loaded from the sample fixtures shipped with the package."""
        return cls.from_yaml(BUNDLED_FIXTURES)

    async def get_comparables(self, industry: str) -> List[PublicComparable]:
        return list(self._lookup(self.comparables, industry))

    async def get_transactions(self, industry: str) -> List[TransactionComparable]:
        return list(self._lookup(self.transactions, industry))

    @staticmethod
    def _lookup(table: Mapping[str, Sequence[Any]], industry: str) -> Sequence[Any]:
        if industry in table:
            return table[industry]
        return table.get(DEFAULT_KEY, [])


def _parse_comparable(record: Mapping[str, Any]) -> PublicComparable:
    try:
        return PublicComparable(
            company_name=str(record["company_name"]),
            ticker=str(record.get("ticker", "")),
            market_cap=float(record["market_cap"]),
            revenue=float(record["revenue"]),
            ebitda=float(record["ebitda"]),
            revenue_multiple=float(record["revenue_multiple"]),
            ebitda_multiple=float(record["ebitda_multiple"]),
            similarity=float(record.get("similarity", 0)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DataSourceError(f"Invalid comparable record {record!r}: {e}") from e


def _parse_transaction(record: Mapping[str, Any]) -> TransactionComparable:
    try:
        transaction_date = record["transaction_date"]
        if not isinstance(transaction_date, date):
            transaction_date = date.fromisoformat(str(transaction_date))
        return TransactionComparable(
            target_company=str(record["target_company"]),
            acquirer=str(record.get("acquirer", "")),
            transaction_date=transaction_date,
            transaction_value=float(record["transaction_value"]),
            revenue=float(record["revenue"]),
            ebitda=float(record["ebitda"]),
            revenue_multiple=float(record["revenue_multiple"]),
            ebitda_multiple=float(record["ebitda_multiple"]),
            similarity=float(record.get("similarity", 0)),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise DataSourceError(f"Invalid transaction record {record!r}: {e}") from e
