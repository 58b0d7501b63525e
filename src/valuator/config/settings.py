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
Pydantic settings models for the valuation engine.

Every business constant the engine uses (industry multiple tables, adjustment
thresholds, DCF assumptions, method weights) lives here so the engine is a
pure function of ``(inputs, config, data source)``. Configuration is loaded
from config.yaml with environment variable substitution.
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path
from typing import Annotated, Dict, Optional, Tuple

import yaml
from pydantic import AfterValidator, BaseModel, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from valuator.domain.models.valuation import MultipleBand

logger = logging.getLogger(__name__)


def _validate_weight(v: float) -> float:
    if not 0.0 <= v <= 1.0:
        raise ValueError("weight must be between 0 and 1")
    return v


Weight = Annotated[float, AfterValidator(_validate_weight)]


# =============================================================================
# Input Normalization Settings
# =============================================================================


class RevenueRatios(BaseModel):
    """Fallback ratios applied to revenue when a field is missing."""

    gross_profit: float = 0.75
    ebitda: float = 0.20
    net_income: float = 0.15
    total_assets: float = 1.5
    total_liabilities: float = 0.3
    shareholders_equity: float = 1.2
    operating_cash_flow: float = 0.18
    free_cash_flow: float = 0.15


class NormalizationSettings(BaseSettings):
    """Defaults used to complete a partial financial-data record."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_NORMALIZATION_", extra="allow")

    default_revenue_growth_rate: float = Field(default=25.0)
    default_gross_margin: float = Field(default=75.0)
    default_ebitda_margin: float = Field(default=20.0)
    default_industry: str = Field(default="SaaS")
    default_business_model: str = Field(default="B2B SaaS")
    default_market_position: str = Field(default="Strong Competitor")
    default_employee_count: Optional[int] = Field(default=None)
    default_customers_count: Optional[int] = Field(default=None)
    revenue_ratios: RevenueRatios = Field(default_factory=RevenueRatios)


# =============================================================================
# Industry Multiple Tables
# =============================================================================


class BandSettings(BaseModel):
    low: float
    median: float
    high: float

    @model_validator(mode="after")
    def validate_order(self) -> "BandSettings":
        """Validate low <= median <= high."""
        if not self.low <= self.median <= self.high:
            raise ValueError("multiple band must satisfy low <= median <= high")
        return self

    def to_band(self) -> MultipleBand:
        return MultipleBand(low=self.low, median=self.median, high=self.high)


def _default_revenue_multiples() -> Dict[str, BandSettings]:
    return {
        "SaaS": BandSettings(low=4, median=8, high=15),
        "Technology": BandSettings(low=2, median=5, high=10),
        "Manufacturing": BandSettings(low=0.5, median=1.5, high=3),
        "Retail": BandSettings(low=0.3, median=1, high=2),
        "Healthcare": BandSettings(low=1, median=3, high=6),
    }


def _default_ebitda_multiples() -> Dict[str, BandSettings]:
    return {
        "SaaS": BandSettings(low=15, median=25, high=40),
        "Technology": BandSettings(low=10, median=18, high=30),
        "Manufacturing": BandSettings(low=5, median=10, high=15),
        "Retail": BandSettings(low=4, median=8, high=12),
        "Healthcare": BandSettings(low=8, median=15, high=25),
    }


class IndustryMultiplesSettings(BaseSettings):
    """Industry EV/Revenue and EV/EBITDA bands."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_MULTIPLES_", extra="allow")

    fallback_industry: str = Field(default="Technology")
    revenue: Dict[str, BandSettings] = Field(default_factory=_default_revenue_multiples)
    ebitda: Dict[str, BandSettings] = Field(default_factory=_default_ebitda_multiples)

    @model_validator(mode="after")
    def validate_fallback_present(self) -> "IndustryMultiplesSettings":
        """Validate the fallback industry exists in both tables."""
        for table_name, table in (("revenue", self.revenue), ("ebitda", self.ebitda)):
            if self.fallback_industry not in table:
                raise ValueError(f"fallback industry '{self.fallback_industry}' missing from {table_name} table")
        return self

    def revenue_band(self, industry: str) -> MultipleBand:
        return self._lookup(self.revenue, industry)

    def ebitda_band(self, industry: str) -> MultipleBand:
        return self._lookup(self.ebitda, industry)

    def _lookup(self, table: Dict[str, BandSettings], industry: str) -> MultipleBand:
        band = table.get(industry)
        if band is None:
            logger.debug(f"No multiple band for industry '{industry}', using {self.fallback_industry}")
            band = table[self.fallback_industry]
        return band.to_band()


# =============================================================================
# Method Settings
# =============================================================================


class RevenueMultipleSettings(BaseSettings):
    """Revenue multiple method thresholds and adjustments (percent)."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_REVENUE_MULTIPLE_", extra="allow")

    small_company_revenue_threshold: float = Field(default=10_000_000)
    size_discount: float = Field(default=-15.0)
    high_growth_threshold: float = Field(default=30.0)
    growth_premium: float = Field(default=20.0)
    low_growth_threshold: float = Field(default=10.0)
    growth_discount: float = Field(default=-10.0)
    high_gross_margin_threshold: float = Field(default=80.0)
    margin_premium: float = Field(default=15.0)
    confidence: float = Field(default=7.0)
    default_weight: Weight = Field(default=0.2)
    weight_by_industry: Dict[str, Weight] = Field(default_factory=lambda: {"SaaS": 0.3})

    def weight_for(self, industry: str) -> float:
        return self.weight_by_industry.get(industry, self.default_weight)


class EBITDAMultipleSettings(BaseSettings):
    """EBITDA multiple method thresholds and adjustments (percent)."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_EBITDA_MULTIPLE_", extra="allow")

    high_margin_threshold: float = Field(default=25.0)
    margin_premium: float = Field(default=10.0)
    confidence: float = Field(default=8.0)
    weight: Weight = Field(default=0.25)
    unprofitable_confidence: float = Field(default=3.0)
    unprofitable_weight: Weight = Field(default=0.05)


class DCFSettings(BaseSettings):
    """Discounted cash flow assumptions. Rates are percentages."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_DCF_", extra="allow")

    projection_years: int = Field(default=5)
    growth_decay: float = Field(default=0.85)
    tax_rate: float = Field(default=25.0)
    capex_pct_of_revenue: float = Field(default=3.0)
    working_capital_pct_of_growth: float = Field(default=5.0)
    risk_free_rate: float = Field(default=3.0)
    market_risk_premium: float = Field(default=8.0)
    default_beta: float = Field(default=1.0)
    industry_betas: Dict[str, float] = Field(default_factory=lambda: {"SaaS": 1.3})
    terminal_growth_cap: float = Field(default=3.0)
    terminal_growth_factor: float = Field(default=0.3)
    range_low_factor: float = Field(default=0.8)
    range_high_factor: float = Field(default=1.2)
    confidence: float = Field(default=6.0)
    weight: Weight = Field(default=0.2)

    @field_validator("projection_years")
    @classmethod
    def validate_projection_years(cls, v: int) -> int:
        """Validate projection horizon is positive."""
        if v <= 0:
            raise ValueError("projection_years must be positive")
        return v


class AssetBasedSettings(BaseSettings):
    """Asset-based method assumptions."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_ASSET_BASED_", extra="allow")

    tangible_share: float = Field(default=0.7)
    technology_markup_pct: float = Field(default=20.0)
    range_low_factor: float = Field(default=0.8)
    range_high_factor: float = Field(default=1.2)
    confidence: float = Field(default=5.0)
    default_weight: Weight = Field(default=0.1)
    weight_by_industry: Dict[str, Weight] = Field(default_factory=lambda: {"Manufacturing": 0.2})

    @field_validator("tangible_share")
    @classmethod
    def validate_share(cls, v: float) -> float:
        """Validate tangible share is a fraction."""
        if not 0.0 <= v <= 1.0:
            raise ValueError("tangible_share must be between 0 and 1")
        return v

    def weight_for(self, industry: str) -> float:
        return self.weight_by_industry.get(industry, self.default_weight)


class MarketMethodSettings(BaseSettings):
    """Shared settings for the comparable-company and precedent-transaction methods."""

    model_config = SettingsConfigDict(extra="allow")

    multiple_adjustment_pct: float = Field(default=0.0)
    range_low_factor: float = Field(default=0.8)
    range_high_factor: float = Field(default=1.2)
    confidence: float = Field(default=6.0)
    weight: Weight = Field(default=0.1)
    # Confidence points lost when only one of the revenue/EBITDA legs is usable.
    single_leg_confidence_penalty: float = Field(default=2.0)
    # When True an unusable EBITDA leg counts as a zero valuation in the
    # range (low = min(revenue, 0) and median = revenue / 2).
    zero_floor_missing_ebitda: bool = Field(default=False)


class ComparableCompanySettings(MarketMethodSettings):
    model_config = SettingsConfigDict(env_prefix="VALUATOR_COMPARABLE_COMPANY_", extra="allow")

    multiple_adjustment_pct: float = Field(default=-25.0)
    confidence: float = Field(default=7.0)
    weight: Weight = Field(default=0.15)


class PrecedentTransactionSettings(MarketMethodSettings):
    model_config = SettingsConfigDict(env_prefix="VALUATOR_PRECEDENT_TRANSACTION_", extra="allow")

    multiple_adjustment_pct: float = Field(default=25.0)
    confidence: float = Field(default=6.0)
    weight: Weight = Field(default=0.1)


# =============================================================================
# Summary Settings
# =============================================================================


class SummarySettings(BaseSettings):
    """Confidence tiers used to grade the blended valuation."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_SUMMARY_", extra="allow")

    high_quality_confidence: float = Field(default=7.0)
    medium_quality_confidence: float = Field(default=5.0)

    @model_validator(mode="after")
    def validate_tiers(self) -> "SummarySettings":
        """Validate the medium tier does not exceed the high tier."""
        if self.medium_quality_confidence > self.high_quality_confidence:
            raise ValueError("medium_quality_confidence must not exceed high_quality_confidence")
        return self


# =============================================================================
# Market Data Settings
# =============================================================================


class MarketDataSettings(BaseSettings):
    """Market data collaborator configuration."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_MARKET_DATA_", extra="allow")

    fetch_timeout_seconds: float = Field(default=5.0)
    fixtures_path: Optional[str] = Field(default=None)

    @field_validator("fetch_timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout is positive."""
        if v <= 0:
            raise ValueError("fetch_timeout_seconds must be positive")
        return v


# =============================================================================
# Sensitivity & Risk Settings
# =============================================================================


class SensitivitySettings(BaseSettings):
    """Sensitivity analysis bands, scenarios and Monte Carlo parameters."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_SENSITIVITY_", extra="allow")

    growth_band: float = Field(default=10.0)
    growth_impact: Tuple[float, float] = Field(default=(-15.0, 20.0))
    margin_band: float = Field(default=5.0)
    margin_impact: Tuple[float, float] = Field(default=(-12.0, 15.0))
    multiple_impact: Tuple[float, float] = Field(default=(-25.0, 30.0))

    # "aggregate" re-values the company under perturbed inputs; "revenue_multiple"
    # reads scenario values straight from the revenue-multiple range.
    scenario_source: str = Field(default="aggregate")
    scenario_multiple_adjustment: float = Field(default=20.0)
    optimistic_probability: float = Field(default=0.2)
    base_case_probability: float = Field(default=0.6)
    pessimistic_probability: float = Field(default=0.2)

    monte_carlo_iterations: int = Field(default=500)
    monte_carlo_seed: Optional[int] = Field(default=42)
    growth_volatility: float = Field(default=5.0)
    margin_volatility: float = Field(default=2.5)

    @field_validator("scenario_source")
    @classmethod
    def validate_scenario_source(cls, v: str) -> str:
        """Validate scenario source is a known strategy."""
        if v not in ("aggregate", "revenue_multiple"):
            raise ValueError("scenario_source must be 'aggregate' or 'revenue_multiple'")
        return v

    @field_validator("monte_carlo_iterations")
    @classmethod
    def validate_iterations(cls, v: int) -> int:
        """Validate iteration count is positive."""
        if v <= 0:
            raise ValueError("monte_carlo_iterations must be positive")
        return v


class RiskSettings(BaseSettings):
    """Thresholds for qualitative risk factor identification."""

    model_config = SettingsConfigDict(env_prefix="VALUATOR_RISK_", extra="allow")

    low_ebitda_margin_threshold: float = Field(default=10.0)
    low_profitability_discount: float = Field(default=-15.0)
    slow_growth_threshold: float = Field(default=5.0)
    key_person_employee_threshold: int = Field(default=50)


# =============================================================================
# Main Configuration
# =============================================================================


class ValuatorConfig(BaseSettings):
    """
    Master configuration - single source of truth.

    Example:
        >>> config = ValuatorConfig.from_yaml("config.yaml")
        >>> config.dcf.risk_free_rate
        3.0
    """

    model_config = SettingsConfigDict(extra="allow")

    normalization: NormalizationSettings = Field(default_factory=NormalizationSettings)
    industry_multiples: IndustryMultiplesSettings = Field(default_factory=IndustryMultiplesSettings)
    revenue_multiple: RevenueMultipleSettings = Field(default_factory=RevenueMultipleSettings)
    ebitda_multiple: EBITDAMultipleSettings = Field(default_factory=EBITDAMultipleSettings)
    dcf: DCFSettings = Field(default_factory=DCFSettings)
    asset_based: AssetBasedSettings = Field(default_factory=AssetBasedSettings)
    comparable_company: ComparableCompanySettings = Field(default_factory=ComparableCompanySettings)
    precedent_transaction: PrecedentTransactionSettings = Field(default_factory=PrecedentTransactionSettings)
    summary: SummarySettings = Field(default_factory=SummarySettings)
    market_data: MarketDataSettings = Field(default_factory=MarketDataSettings)
    sensitivity: SensitivitySettings = Field(default_factory=SensitivitySettings)
    risk: RiskSettings = Field(default_factory=RiskSettings)

    @classmethod
    def from_yaml(cls, config_path: str | Path = "config.yaml") -> "ValuatorConfig":
        """
        Load configuration from YAML file with environment variable substitution.

        Args:
            config_path: Path to config.yaml file (default: "config.yaml")

        Returns:
            Validated ValuatorConfig instance

        Raises:
            ValidationError: If configuration is invalid
            FileNotFoundError: If config file doesn't exist
            ValueError: If required environment variable is missing
        """
        config_path = Path(config_path)

        if not config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        with open(config_path, "r") as f:
            yaml_content = f.read()

        # Pattern: ${VAR_NAME} or ${VAR_NAME:-default_value}
        def env_var_replacer(match):
            var_spec = match.group(1)
            if ":-" in var_spec:
                var_name, default = var_spec.split(":-", 1)
                return os.getenv(var_name, default)
            value = os.getenv(var_spec)
            if value is None:
                raise ValueError(f"Environment variable {var_spec} not set and no default provided")
            return value

        yaml_content = re.sub(r"\$\{([^}]+)\}", env_var_replacer, yaml_content)

        config_dict = yaml.safe_load(yaml_content) or {}

        return cls(**config_dict)


_settings: Optional[ValuatorConfig] = None


def get_settings(config_path: Optional[str | Path] = None) -> ValuatorConfig:
    """
    Return the cached configuration.

    An explicit ``config_path`` always reloads. Without one, ``config.yaml`` in
    the working directory is used when present, otherwise built-in defaults.
    """
    global _settings
    if config_path is not None:
        _settings = ValuatorConfig.from_yaml(config_path)
        return _settings

    if _settings is None:
        try:
            _settings = ValuatorConfig.from_yaml("config.yaml")
        except FileNotFoundError:
            _settings = ValuatorConfig()
    return _settings


__all__ = [
    "AssetBasedSettings",
    "BandSettings",
    "ComparableCompanySettings",
    "DCFSettings",
    "EBITDAMultipleSettings",
    "IndustryMultiplesSettings",
    "MarketDataSettings",
    "MarketMethodSettings",
    "NormalizationSettings",
    "PrecedentTransactionSettings",
    "RevenueMultipleSettings",
    "RevenueRatios",
    "RiskSettings",
    "SensitivitySettings",
    "SummarySettings",
    "ValuatorConfig",
    "get_settings",
]
