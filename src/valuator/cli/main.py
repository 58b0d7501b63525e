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
Valuator CLI - Main Entry Point

Usage:
    valuator [OPTIONS] COMMAND [ARGS]...

Examples:
    valuator value acme --input acme.yaml
    valuator value acme --input acme.yaml --method "Revenue Multiple" --method discounted_cash_flow --format yaml
    valuator --log-level DEBUG value acme --input acme.yaml --monte-carlo
"""

import asyncio
import json
from typing import List, Optional

import click
import yaml
from pydantic import ValidationError

from valuator.config.settings import ValuatorConfig, get_settings
from valuator.domain.exceptions import DataSourceError, InvalidInputError, ValuationError
from valuator.domain.models.valuation import CompanyIdentity, CompanyValuation
from valuator.domain.services.valuation import ValuationOrchestrator, valuation_to_dict
from valuator.infrastructure.company_directory import StaticCompanyDirectory
from valuator.infrastructure.market_data import StaticMarketDataSource

from .utils import error_exit, format_amount, load_record, setup_logging

CONTEXT_SETTINGS = dict(
    help_option_names=["-h", "--help"],
    max_content_width=120,
)

INPUT_ERROR_EXIT_CODE = 2


@click.group(context_settings=CONTEXT_SETTINGS)
@click.option(
    "--config", "-c",
    type=click.Path(dir_okay=False),
    envvar="VALUATOR_CONFIG",
    help="Configuration file path (default: ./config.yaml when present)"
)
@click.option(
    "--log-level", "-l",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default="INFO",
    envvar="VALUATOR_LOG_LEVEL",
    help="Logging level"
)
@click.option(
    "--log-file",
    type=click.Path(),
    envvar="VALUATOR_LOG_FILE",
    help="Log file path"
)
@click.version_option(
    version="0.1.0",
    prog_name="valuator"
)
@click.pass_context
def cli(ctx, config, log_level, log_file):
    """Valuator - multi-method company valuation

    Values a company under six methods (revenue multiple, EBITDA multiple,
    DCF, asset-based, comparable company, precedent transaction) and blends
    them into one weighted valuation range.

    Run 'valuator COMMAND --help' for more information on a command.
    """
    setup_logging(log_level, log_file)

    ctx.ensure_object(dict)
    try:
        ctx.obj["config"] = get_settings(config)
    except FileNotFoundError as e:
        error_exit(str(e))
    except (ValidationError, ValueError) as e:
        error_exit(f"Invalid configuration: {e}")


@cli.command("value")
@click.argument("company_id")
@click.option(
    "--input", "-i", "input_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False),
    help="Financial data record (YAML or JSON)",
)
@click.option("--name", help="Company display name (default: COMPANY_ID)")
@click.option("--currency", default="USD", show_default=True, help="Reporting currency of the inputs")
@click.option(
    "--fixtures",
    type=click.Path(exists=True, dir_okay=False),
    help="Market data file (default: market_data.fixtures_path or the bundled sample data)",
)
@click.option("--no-comparables", is_flag=True, help="Omit the public comparables from the report")
@click.option("--no-sensitivity", is_flag=True, help="Skip the sensitivity analysis")
@click.option("--monte-carlo", is_flag=True, help="Add a Monte Carlo simulation to the sensitivity analysis")
@click.option("--method", "-m", "methods", multiple=True, help="Run only this method (repeatable)")
@click.option("--format", "-f", "output_format", type=click.Choice(["json", "yaml", "text"]), default="json")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Output file path for the report")
@click.pass_context
def value(
    ctx,
    company_id: str,
    input_path: str,
    name: Optional[str],
    currency: str,
    fixtures: Optional[str],
    no_comparables: bool,
    no_sensitivity: bool,
    monte_carlo: bool,
    methods: List[str],
    output_format: str,
    output: Optional[str],
):
    """Value a company from a financial data record

    Examples:
        valuator value acme --input acme.yaml
        valuator value acme --input acme.json --no-sensitivity --format yaml -o report.yaml
    """
    config: ValuatorConfig = ctx.obj["config"]
    record = load_record(input_path)

    fixtures_path = fixtures or config.market_data.fixtures_path
    try:
        market_data = (
            StaticMarketDataSource.from_yaml(fixtures_path) if fixtures_path else StaticMarketDataSource.bundled()
        )
    except (FileNotFoundError, DataSourceError) as e:
        error_exit(str(e))

    directory = StaticCompanyDirectory(
        [CompanyIdentity(company_id=company_id, name=name or company_id, currency=currency)]
    )
    orchestrator = ValuationOrchestrator(market_data, directory, config)

    async def run_valuation() -> CompanyValuation:
        return await orchestrator.value_company(
            company_id,
            record,
            include_comparables=not no_comparables,
            include_sensitivity=not no_sensitivity,
            include_monte_carlo=monte_carlo,
            methods=methods or None,
        )

    try:
        valuation = asyncio.run(run_valuation())
    except InvalidInputError as e:
        error_exit(str(e), INPUT_ERROR_EXIT_CODE)
    except ValuationError as e:
        error_exit(str(e))

    rendered = render(valuation, output_format)
    if output:
        with open(output, "w") as f:
            f.write(rendered)
        click.echo(f"Report written to {output}", err=True)
    else:
        click.echo(rendered)


def render(valuation: CompanyValuation, output_format: str) -> str:
    if output_format == "yaml":
        return yaml.safe_dump(valuation_to_dict(valuation), sort_keys=False)
    if output_format == "text":
        return render_text(valuation)
    return json.dumps(valuation_to_dict(valuation), indent=2)


def render_text(valuation: CompanyValuation) -> str:
    summary = valuation.valuation_summary
    currency = valuation.currency
    lines = [
        f"{valuation.company_name} ({valuation.company_id}) - {valuation.valuation_date.isoformat()}",
        f"Weighted valuation: {format_amount(summary.weighted_valuation, currency)}",
        f"Range: {format_amount(summary.valuation_range.low, currency)} - "
        f"{format_amount(summary.valuation_range.high, currency)}",
        f"Confidence: {summary.overall_confidence:.1f}/10 ({summary.data_quality.value})",
        "",
    ]
    for method, weight in summary.method_weights.items():
        result = valuation.results()[method]
        lines.append(
            f"  {method.value:<24}{format_amount(result.valuation_range.median, currency):>18}  weight {weight:.0%}"
        )
    for method in summary.excluded_methods:
        lines.append(f"  {method.value:<24}{'excluded':>18}")
    if valuation.warnings:
        lines.append("")
        lines.extend(f"! {w}" for w in valuation.warnings)
    return "\n".join(lines)


if __name__ == "__main__":
    cli()
