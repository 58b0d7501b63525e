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
Valuation Orchestrator

Sequences one valuation request:

1. Normalize the raw financial record into ``FinancialInputs``
2. Resolve company identity and fetch the market samples concurrently
   (each fetch bounded by ``market_data.fetch_timeout_seconds``; a failed
   or slow fetch degrades to an empty sample plus a warning)
3. Run the six method calculators concurrently and wait for all of them
4. Aggregate, then derive sensitivity and risk factors
5. Compose the immutable ``CompanyValuation``

Example:
    >>> orchestrator = ValuationOrchestrator(market_data, directory, config)
    >>> valuation = await orchestrator.value_company("acme", {"revenue": 5_000_000})
    >>> valuation.valuation_summary.weighted_valuation
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from valuator.config.settings import ValuatorConfig, get_settings
from valuator.domain.exceptions import InvalidInputError, ValuationError
from valuator.domain.interfaces import CompanyDirectory, MarketDataSource
from valuator.domain.models.financials import FinancialInputs, RawFinancialData
from valuator.domain.models.valuation import (
    CompanyValuation,
    MarketComparable,
    MethodOutcome,
    MethodResult,
    MethodUnavailable,
    PublicComparable,
    SensitivityAnalysis,
    TransactionComparable,
    ValuationMethod,
)
from valuator.domain.services.input_normalizer import FinancialInputsNormalizer
from valuator.domain.services.valuation.methods import (
    AssetBasedMethod,
    BaseValuationMethod,
    ComparableCompanyMethod,
    DiscountedCashFlowMethod,
    EBITDAMultipleMethod,
    PrecedentTransactionMethod,
    RevenueMultipleMethod,
)
from valuator.domain.services.valuation.risk_factors import RiskFactorIdentifier
from valuator.domain.services.valuation.sensitivity import SensitivityAnalyzer
from valuator.domain.services.valuation.summary import ValuationSummaryAggregator

logger = logging.getLogger(__name__)

NOT_REQUESTED = "not requested"


def parse_methods(methods: Optional[Iterable[Union[ValuationMethod, str]]]) -> Tuple[ValuationMethod, ...]:
    """Resolve method tags by value ("Asset-Based") or enum name ("asset_based")."""
    if methods is None:
        return tuple(ValuationMethod)

    resolved: List[ValuationMethod] = []
    unknown: List[str] = []
    for method in methods:
        if isinstance(method, ValuationMethod):
            resolved.append(method)
            continue
        key = str(method).strip()
        match = next(
            (m for m in ValuationMethod if key.lower() in (m.value.lower(), m.name.lower())),
            None,
        )
        if match is None:
            unknown.append(key)
        else:
            resolved.append(match)

    if unknown:
        raise InvalidInputError("Unknown valuation method", fields=unknown)
    if not resolved:
        raise InvalidInputError("At least one valuation method must be requested")
    return tuple(dict.fromkeys(resolved))


class ValuationOrchestrator:
    """Run every valuation method for one company and compose the report."""

    def __init__(
        self,
        market_data: MarketDataSource,
        company_directory: CompanyDirectory,
        config: Optional[ValuatorConfig] = None,
    ) -> None:
        self.market_data = market_data
        self.company_directory = company_directory
        self.config = config or get_settings()

        c = self.config
        self.normalizer = FinancialInputsNormalizer(c.normalization)
        self.methods: Dict[ValuationMethod, BaseValuationMethod] = {
            ValuationMethod.REVENUE_MULTIPLE: RevenueMultipleMethod(c.revenue_multiple, c.industry_multiples),
            ValuationMethod.EBITDA_MULTIPLE: EBITDAMultipleMethod(c.ebitda_multiple, c.industry_multiples),
            ValuationMethod.DISCOUNTED_CASH_FLOW: DiscountedCashFlowMethod(c.dcf),
            ValuationMethod.ASSET_BASED: AssetBasedMethod(c.asset_based),
            ValuationMethod.COMPARABLE_COMPANY: ComparableCompanyMethod(c.comparable_company),
            ValuationMethod.PRECEDENT_TRANSACTION: PrecedentTransactionMethod(c.precedent_transaction),
        }
        self.aggregator = ValuationSummaryAggregator(c.summary)
        self.sensitivity_analyzer = SensitivityAnalyzer(c.sensitivity)
        self.risk_identifier = RiskFactorIdentifier(c.risk)

    async def value_company(
        self,
        company_id: str,
        financial_data: Union[Mapping[str, Any], RawFinancialData, FinancialInputs],
        *,
        include_comparables: bool = True,
        include_sensitivity: bool = True,
        include_monte_carlo: bool = False,
        methods: Optional[Iterable[Union[ValuationMethod, str]]] = None,
        valuation_date: Optional[date] = None,
    ) -> CompanyValuation:
        """
        Value one company.

        Args:
            company_id: Identifier resolved through the company directory
            financial_data: Raw (possibly partial) financial record
            include_comparables: Attach the public peer sample to the report
            include_sensitivity: Run the sensitivity analysis
            include_monte_carlo: Add a Monte Carlo block to the sensitivity analysis
            methods: Restrict the run to these methods; others are reported
                as ``MethodUnavailable("not requested")``
            valuation_date: Defaults to today

        Returns:
            CompanyValuation

        Raises:
            InvalidInputError: If the financial record or method list is invalid
            CompanyNotFoundError: If the company directory does not know the id
            ValuationError: If no requested method produced a usable result
        """
        inputs = self.normalizer.normalize(financial_data)
        requested = parse_methods(methods)
        industry = inputs.industry_type.value
        warnings: List[str] = []

        need_comparables = include_comparables or ValuationMethod.COMPARABLE_COMPANY in requested
        need_transactions = ValuationMethod.PRECEDENT_TRANSACTION in requested

        identity, (comparables, comparables_warning), (transactions, transactions_warning) = await asyncio.gather(
            self.company_directory.get_company(company_id),
            self._fetch_sample("comparable companies", self.market_data.get_comparables, industry, need_comparables),
            self._fetch_sample(
                "precedent transactions", self.market_data.get_transactions, industry, need_transactions
            ),
        )
        warnings.extend(w for w in (comparables_warning, transactions_warning) if w)

        outcomes = await self._run_methods(inputs, requested, comparables, transactions)
        for outcome in outcomes:
            if isinstance(outcome, MethodUnavailable) and outcome.reason != NOT_REQUESTED:
                warnings.append(f"{outcome.method.value} unavailable: {outcome.reason}")
            elif isinstance(outcome, MethodResult):
                warnings.extend(outcome.warnings)

        summary = self.aggregator.aggregate(outcomes, inputs)

        if include_sensitivity:
            failed_revaluations: List[str] = []

            def revalue(perturbed: FinancialInputs) -> Optional[float]:
                perturbed_outcomes = [
                    self._calculate(method, perturbed, requested, comparables, transactions)
                    for method in ValuationMethod
                ]
                try:
                    return self.aggregator.aggregate(perturbed_outcomes, perturbed).weighted_valuation
                except ValuationError as e:
                    failed_revaluations.append(str(e))
                    return None

            sensitivity = self.sensitivity_analyzer.analyze(
                inputs, outcomes, summary, revalue=revalue, include_monte_carlo=include_monte_carlo
            )
            if failed_revaluations:
                warnings.append(
                    f"Sensitivity analysis: {len(failed_revaluations)} revaluation(s) under perturbed inputs "
                    f"produced no usable result ({failed_revaluations[0]}); scenario values fall back to the "
                    f"valuation range and failed Monte Carlo draws are dropped"
                )
        else:
            sensitivity = SensitivityAnalysis()

        market_comparables: Tuple[MarketComparable, ...] = ()
        if include_comparables:
            market_comparables = tuple(self._to_market_comparable(c, industry) for c in comparables)

        logger.info(
            f"{company_id} - Weighted valuation {summary.weighted_valuation:,.0f} {identity.currency} "
            f"[{summary.valuation_range.low:,.0f} - {summary.valuation_range.high:,.0f}] "
            f"from {summary.method_count} methods, confidence {summary.overall_confidence:.1f} "
            f"({summary.data_quality.value})"
        )

        return CompanyValuation(
            company_id=company_id,
            company_name=identity.name,
            currency=identity.currency,
            valuation_date=valuation_date or date.today(),
            financial_inputs=inputs,
            valuation_methods={o.method: o for o in outcomes},
            valuation_summary=summary,
            comparables=market_comparables,
            sensitivity_analysis=sensitivity,
            risk_factors=tuple(self.risk_identifier.identify(inputs)),
            generated_at=datetime.now(),
            warnings=tuple(warnings),
        )

    async def _fetch_sample(
        self,
        label: str,
        fetch: Callable[[str], Awaitable[List[Any]]],
        industry: str,
        needed: bool,
    ) -> Tuple[List[Any], Optional[str]]:
        """Fetch one market sample; any failure degrades to an empty sample and a warning."""
        if not needed:
            return [], None

        timeout = self.config.market_data.fetch_timeout_seconds
        try:
            sample = await asyncio.wait_for(fetch(industry), timeout=timeout)
        except asyncio.TimeoutError:
            warning = f"Fetching {label} for {industry} timed out after {timeout:.1f}s; using an empty sample"
        except Exception as e:
            warning = f"Fetching {label} for {industry} failed ({e}); using an empty sample"
        else:
            logger.debug(f"Fetched {len(sample)} {label} for {industry}")
            return list(sample), None

        logger.warning(warning)
        return [], warning

    async def _run_methods(
        self,
        inputs: FinancialInputs,
        requested: Sequence[ValuationMethod],
        comparables: Sequence[PublicComparable],
        transactions: Sequence[TransactionComparable],
    ) -> List[MethodOutcome]:
        async def run(method: ValuationMethod) -> MethodOutcome:
            return self._calculate(method, inputs, requested, comparables, transactions)

        all_methods = list(ValuationMethod)
        results = await asyncio.gather(*(run(m) for m in all_methods), return_exceptions=True)

        outcomes: List[MethodOutcome] = []
        for method, result in zip(all_methods, results):
            if isinstance(result, Exception):
                logger.warning(f"{method.value} failed: {result}")
                outcomes.append(MethodUnavailable(method=method, reason=f"calculation failed: {result}"))
            else:
                outcomes.append(result)
        return outcomes

    def _calculate(
        self,
        method: ValuationMethod,
        inputs: FinancialInputs,
        requested: Sequence[ValuationMethod],
        comparables: Sequence[PublicComparable],
        transactions: Sequence[TransactionComparable],
    ) -> MethodOutcome:
        if method not in requested:
            return MethodUnavailable(method=method, reason=NOT_REQUESTED)
        if method is ValuationMethod.COMPARABLE_COMPANY:
            return self.methods[method].calculate(inputs, comparables=comparables)
        if method is ValuationMethod.PRECEDENT_TRANSACTION:
            return self.methods[method].calculate(inputs, transactions=transactions)
        return self.methods[method].calculate(inputs)

    @staticmethod
    def _to_market_comparable(comparable: PublicComparable, industry: str) -> MarketComparable:
        return MarketComparable(
            company_name=comparable.company_name,
            industry=industry,
            market_cap=comparable.market_cap,
            revenue=comparable.revenue,
            ebitda=comparable.ebitda,
            revenue_multiple=comparable.revenue_multiple,
            ebitda_multiple=comparable.ebitda_multiple,
            similarity=comparable.similarity,
        )
