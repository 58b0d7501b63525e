"""
Unit tests for configuration settings.

Covers defaults, validators and YAML loading with environment substitution.
"""

import pytest
from pydantic import ValidationError

from valuator.config import settings as settings_module
from valuator.config.settings import (
    BandSettings,
    DCFSettings,
    IndustryMultiplesSettings,
    RevenueMultipleSettings,
    SensitivitySettings,
    SummarySettings,
    ValuatorConfig,
    get_settings,
)
from valuator.domain.models.valuation import MultipleBand


class TestDefaults:
    """Built-in defaults reproduce the documented constants."""

    def test_sections_present(self, config):
        for section in (
            "normalization",
            "industry_multiples",
            "revenue_multiple",
            "ebitda_multiple",
            "dcf",
            "asset_based",
            "comparable_company",
            "precedent_transaction",
            "market_data",
            "sensitivity",
            "risk",
            "summary",
        ):
            assert hasattr(config, section), f"Config missing section: {section}"

    def test_industry_bands(self, config):
        assert config.industry_multiples.revenue_band("SaaS") == MultipleBand(low=4, median=8, high=15)
        assert config.industry_multiples.ebitda_band("Healthcare") == MultipleBand(low=8, median=15, high=25)

    def test_unknown_industry_falls_back_to_technology(self, config):
        assert config.industry_multiples.revenue_band("Energy") == MultipleBand(low=2, median=5, high=10)
        assert config.industry_multiples.ebitda_band("Energy") == MultipleBand(low=10, median=18, high=30)

    def test_industry_conditioned_weights(self, config):
        assert config.revenue_multiple.weight_for("SaaS") == 0.3
        assert config.revenue_multiple.weight_for("Retail") == 0.2
        assert config.asset_based.weight_for("Manufacturing") == 0.2
        assert config.asset_based.weight_for("SaaS") == 0.1

    def test_market_method_adjustments(self, config):
        assert config.comparable_company.multiple_adjustment_pct == -25
        assert config.precedent_transaction.multiple_adjustment_pct == 25
        assert config.comparable_company.zero_floor_missing_ebitda is False


class TestValidation:
    """Validators reject inconsistent configuration."""

    def test_band_must_be_ordered(self):
        with pytest.raises(ValidationError):
            BandSettings(low=10, median=5, high=20)

    def test_weight_bounded(self):
        with pytest.raises(ValidationError):
            RevenueMultipleSettings(default_weight=1.5)

    def test_industry_weight_bounded(self):
        with pytest.raises(ValidationError):
            RevenueMultipleSettings(weight_by_industry={"SaaS": 1.5})

    def test_fallback_industry_must_exist(self):
        with pytest.raises(ValidationError):
            IndustryMultiplesSettings(fallback_industry="Crypto")

    def test_projection_years_positive(self):
        with pytest.raises(ValidationError):
            DCFSettings(projection_years=0)

    def test_scenario_source_known(self):
        with pytest.raises(ValidationError):
            SensitivitySettings(scenario_source="median")

    def test_quality_tiers_ordered(self):
        with pytest.raises(ValidationError):
            SummarySettings(high_quality_confidence=5, medium_quality_confidence=7)


class TestYamlLoading:
    """ValuatorConfig.from_yaml and get_settings."""

    def test_env_default_used(self, tmp_path, monkeypatch):
        monkeypatch.delenv("VALUATOR_TEST_RF", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("dcf:\n  risk_free_rate: ${VALUATOR_TEST_RF:-4.5}\n")

        config = ValuatorConfig.from_yaml(path)

        assert config.dcf.risk_free_rate == 4.5
        assert config.dcf.market_risk_premium == 8.0

    def test_env_value_substituted(self, tmp_path, monkeypatch):
        monkeypatch.setenv("VALUATOR_TEST_RF", "5")
        path = tmp_path / "config.yaml"
        path.write_text("dcf:\n  risk_free_rate: ${VALUATOR_TEST_RF:-4.5}\n")

        assert ValuatorConfig.from_yaml(path).dcf.risk_free_rate == 5.0

    def test_missing_env_without_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("VALUATOR_TEST_UNSET", raising=False)
        path = tmp_path / "config.yaml"
        path.write_text("dcf:\n  risk_free_rate: ${VALUATOR_TEST_UNSET}\n")

        with pytest.raises(ValueError, match="VALUATOR_TEST_UNSET"):
            ValuatorConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            ValuatorConfig.from_yaml(tmp_path / "absent.yaml")

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")

        assert ValuatorConfig.from_yaml(path).revenue_multiple.size_discount == -15

    def test_get_settings_explicit_path_reloads(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings_module, "_settings", None)
        path = tmp_path / "config.yaml"
        path.write_text("risk:\n  slow_growth_threshold: 8\n")

        config = get_settings(path)

        assert config.risk.slow_growth_threshold == 8
        assert get_settings() is config

    def test_get_settings_without_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.setattr(settings_module, "_settings", None)
        monkeypatch.chdir(tmp_path)

        assert get_settings().dcf.risk_free_rate == 3.0
