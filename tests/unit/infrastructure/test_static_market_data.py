"""Unit tests for the in-memory market data source and company directory."""

from datetime import date

import pytest

from valuator.domain.exceptions import CompanyNotFoundError, DataSourceError
from valuator.domain.models.valuation import CompanyIdentity
from valuator.infrastructure.company_directory import StaticCompanyDirectory
from valuator.infrastructure.market_data import BUNDLED_FIXTURES, StaticMarketDataSource

COMPARABLE = {
    "company_name": "Retail Giant",
    "ticker": "RTL",
    "market_cap": 900_000_000,
    "revenue": 1_000_000_000,
    "ebitda": 90_000_000,
    "revenue_multiple": 0.9,
    "ebitda_multiple": 10.0,
    "similarity": 60,
}


class TestStaticMarketDataSource:
    @pytest.mark.asyncio
    async def test_bundled_fixtures(self):
        source = StaticMarketDataSource.bundled()

        comparables = await source.get_comparables("SaaS")
        transactions = await source.get_transactions("SaaS")

        assert BUNDLED_FIXTURES.exists()
        assert [c.ticker for c in comparables] == ["TECH", "SAAS", "DIGI"]
        assert [t.transaction_date for t in transactions] == [date(2023, 6, 1), date(2023, 3, 15)]

    @pytest.mark.asyncio
    async def test_industry_entry_preferred_over_default(self, public_comparables):
        source = StaticMarketDataSource.from_mapping({"comparables": {"Retail": [COMPARABLE]}})
        source.comparables["default"] = public_comparables

        retail = await source.get_comparables("Retail")
        saas = await source.get_comparables("SaaS")

        assert [c.ticker for c in retail] == ["RTL"]
        assert len(saas) == 3

    @pytest.mark.asyncio
    async def test_unknown_industry_without_default(self):
        source = StaticMarketDataSource()

        assert await source.get_comparables("SaaS") == []
        assert await source.get_transactions("SaaS") == []

    @pytest.mark.asyncio
    async def test_returned_list_is_a_copy(self, market_data):
        comparables = await market_data.get_comparables("SaaS")
        comparables.clear()

        assert len(await market_data.get_comparables("SaaS")) == 3

    def test_from_yaml(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text(
            "transactions:\n"
            "  SaaS:\n"
            "    - target_company: Tiny SaaS\n"
            "      transaction_date: '2022-11-30'\n"
            "      transaction_value: 40000000\n"
            "      revenue: 8000000\n"
            "      ebitda: 1000000\n"
            "      revenue_multiple: 5.0\n"
            "      ebitda_multiple: 40.0\n"
        )

        source = StaticMarketDataSource.from_yaml(path)

        transaction = source.transactions["SaaS"][0]
        assert transaction.transaction_date == date(2022, 11, 30)
        assert transaction.acquirer == ""
        assert transaction.similarity == 0
        assert source.comparables == {}

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            StaticMarketDataSource.from_yaml(tmp_path / "absent.yaml")

    def test_missing_field(self):
        record = {k: v for k, v in COMPARABLE.items() if k != "market_cap"}

        with pytest.raises(DataSourceError, match="market_cap"):
            StaticMarketDataSource.from_mapping({"comparables": {"default": [record]}})

    def test_bad_value(self):
        with pytest.raises(DataSourceError):
            StaticMarketDataSource.from_mapping({"comparables": {"default": [{**COMPARABLE, "revenue": "lots"}]}})

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "market.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(DataSourceError, match="mapping"):
            StaticMarketDataSource.from_yaml(path)


class TestStaticCompanyDirectory:
    @pytest.mark.asyncio
    async def test_known_company(self, company_directory):
        identity = await company_directory.get_company("acme")

        assert identity.name == "Acme Analytics"
        assert identity.currency == "USD"

    @pytest.mark.asyncio
    async def test_unknown_company(self, company_directory):
        with pytest.raises(CompanyNotFoundError) as excinfo:
            await company_directory.get_company("globex")

        assert excinfo.value.company_id == "globex"

    @pytest.mark.asyncio
    async def test_register(self):
        directory = StaticCompanyDirectory()
        directory.register(CompanyIdentity(company_id="initech", name="Initech", currency="EUR"))

        assert (await directory.get_company("initech")).currency == "EUR"
