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
Shared CLI utilities and decorators for the valuator CLI
"""

import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml


def setup_logging(log_level: str = "INFO", log_file: Optional[str] = None):
    """Configure application logging."""
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    handlers = [logging.StreamHandler(sys.stdout)]

    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(
        level=numeric_level,
        format=log_format,
        handlers=handlers,
        force=True,
    )

    logging.getLogger("asyncio").setLevel(logging.WARNING)


def load_record(path: str) -> Dict[str, Any]:
    """
    Load a financial-data record from a YAML or JSON file.

    Raises:
        click.BadParameter: If the file does not hold a mapping
    """
    with open(Path(path), "r") as f:
        try:
            record = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise click.BadParameter(f"Cannot parse {path}: {e}", param_hint="--input")

    if not isinstance(record, dict):
        raise click.BadParameter(f"{path} must contain a mapping of financial fields", param_hint="--input")
    return record


_SCALES = ((1_000_000_000, "B"), (1_000_000, "M"), (1_000, "K"))


def format_amount(value: Optional[float], currency: str) -> str:
    """Format an amount with its currency code, e.g. ``USD 34.00M``."""
    if value is None:
        return "N/A"
    for scale, suffix in _SCALES:
        if abs(value) >= scale:
            return f"{currency} {value / scale:.2f}{suffix}"
    return f"{currency} {value:.2f}"


def error_exit(message: str, code: int = 1):
    """Print error message and exit"""
    click.echo(click.style(f"Error: {message}", fg="red"), err=True)
    sys.exit(code)
