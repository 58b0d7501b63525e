"""Test configuration helpers and fixtures."""

import sys
from datetime import date
from pathlib import Path
from typing import Any, Dict

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for candidate in (SRC, ROOT):
    candidate_str = str(candidate)
    if candidate.exists() and candidate_str not in sys.path:
        sys.path.insert(0, candidate_str)

from valuator.config.settings import ValuatorConfig  # noqa: E402
from valuator.domain.models.financials import FinancialInputs  # noqa: E402
from valuator.domain.models.valuation import (  # noqa: E402
    CompanyIdentity,
    PublicComparable,
    TransactionComparable,
)
from valuator.domain.services.input_normalizer import FinancialInputsNormalizer  # noqa: E402
from valuator.infrastructure.company_directory import StaticCompanyDirectory  # noqa: E402
from valuator.infrastructure.market_data import StaticMarketDataSource  # noqa: E402


@pytest.fixture
def config() -> ValuatorConfig:
    """Built-in defaults, independent of any config.yaml on disk."""
    return ValuatorConfig()


@pytest.fixture
def saas_record() -> Dict[str, Any]:
    """Reference record: 5M revenue SaaS company growing 25% at a 20% EBITDA margin."""
    return {
        "revenue": 5_000_000,
        "revenueGrowthRate": 25,
        "ebitdaMargin": 20,
        "industryType": "SaaS",
    }


@pytest.fixture
def saas_inputs(saas_record) -> FinancialInputs:
    return FinancialInputsNormalizer().normalize(saas_record)


@pytest.fixture
def public_comparables():
    return [
        PublicComparable(
            company_name="TechCorp Public",
            ticker="TECH",
            market_cap=1_000_000_000,
            revenue=200_000_000,
            ebitda=40_000_000,
            revenue_multiple=5.0,
            ebitda_multiple=25.0,
            similarity=85,
        ),
        PublicComparable(
            company_name="SaaS Leader Inc",
            ticker="SAAS",
            market_cap=2_000_000_000,
            revenue=300_000_000,
            ebitda=75_000_000,
            revenue_multiple=6.7,
            ebitda_multiple=26.7,
            similarity=90,
        ),
        PublicComparable(
            company_name="Digital Solutions",
            ticker="DIGI",
            market_cap=500_000_000,
            revenue=100_000_000,
            ebitda=15_000_000,
            revenue_multiple=5.0,
            ebitda_multiple=33.3,
            similarity=75,
        ),
    ]


@pytest.fixture
def transactions():
    return [
        TransactionComparable(
            target_company="Acquired SaaS Co",
            acquirer="Big Tech Corp",
            transaction_date=date(2023, 6, 1),
            transaction_value=500_000_000,
            revenue=80_000_000,
            ebitda=16_000_000,
            revenue_multiple=6.25,
            ebitda_multiple=31.25,
            similarity=80,
        ),
        TransactionComparable(
            target_company="Cloud Systems Ltd",
            acquirer="Enterprise Software Inc",
            transaction_date=date(2023, 3, 15),
            transaction_value=750_000_000,
            revenue=120_000_000,
            ebitda=30_000_000,
            revenue_multiple=6.25,
            ebitda_multiple=25.0,
            similarity=75,
        ),
    ]


@pytest.fixture
def market_data(public_comparables, transactions) -> StaticMarketDataSource:
    return StaticMarketDataSource(
        comparables={"default": public_comparables},
        transactions={"default": transactions},
    )


@pytest.fixture
def company_directory() -> StaticCompanyDirectory:
    return StaticCompanyDirectory([CompanyIdentity(company_id="acme", name="Acme Analytics", currency="USD")])
