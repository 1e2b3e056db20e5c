"""Tax and payroll rate tables.

Rates live in a TOML file rather than in code so a regulatory change is a
configuration change. The packaged ``rates.toml`` is the default; a different
table can be supplied by path or through ``MICROBOOKS_RATES_PATH``.
"""

import logging
import os
import tomllib
from dataclasses import dataclass
from decimal import Decimal
from importlib import resources
from pathlib import Path
from typing import Any, Mapping, Optional

from microbooks.domain.entities import PayrollColumn, TaxCategory, ZERO
from microbooks.domain.errors import ValidationError

logger = logging.getLogger(__name__)

RATES_ENV_VAR = "MICROBOOKS_RATES_PATH"

CONTRIBUTION_COLUMNS = (
    PayrollColumn.SOCIAL_INSURANCE,
    PayrollColumn.HEALTH_INSURANCE,
    PayrollColumn.UNEMPLOYMENT_INSURANCE,
    PayrollColumn.UNION_FEE,
)


@dataclass(frozen=True)
class TaxRate:
    vat: Decimal = ZERO
    pit: Decimal = ZERO

    @property
    def combined(self) -> Decimal:
        return self.vat + self.pit


@dataclass(frozen=True)
class PayrollRates:
    """Contribution rates applied on top of gross salary."""

    contributions: dict[PayrollColumn, Decimal]

    def rate(self, column: PayrollColumn) -> Decimal:
        return self.contributions.get(column, ZERO)

    def accrual(self, gross_salary: Decimal) -> dict[PayrollColumn, Decimal]:
        """Salary plus every contribution owed on it."""
        accrued = {PayrollColumn.SALARY: gross_salary}
        for column in CONTRIBUTION_COLUMNS:
            accrued[column] = gross_salary * self.rate(column)
        return accrued


@dataclass(frozen=True)
class RateTable:
    tax: dict[TaxCategory, TaxRate]
    payroll: PayrollRates

    def tax_rate(self, category: Optional[TaxCategory]) -> TaxRate:
        """Rates for a tax category; categories missing from the table owe nothing."""
        if category is None:
            return TaxRate()
        return self.tax.get(category, TaxRate())


def _as_rate(value: Any, where: str) -> Decimal:
    if isinstance(value, bool) or not isinstance(value, (int, Decimal)):
        raise ValidationError(f"Rate {where} must be a number, got {value!r}")
    rate = Decimal(value)
    if rate < 0 or rate > 1:
        raise ValidationError(f"Rate {where} must be between 0 and 1, got {rate}")
    return rate


def parse_rate_table(data: Mapping[str, Any]) -> RateTable:
    """Build a RateTable from parsed TOML data.

    Raises:
        ValidationError: If a category or column is unknown or a rate is invalid
    """
    tax: dict[TaxCategory, TaxRate] = {}
    for name, entry in data.get("tax", {}).items():
        try:
            category = TaxCategory[name.upper()]
        except KeyError:
            raise ValidationError(f"Unknown tax category '{name}' in rate table") from None
        tax[category] = TaxRate(
            vat=_as_rate(entry.get("vat", 0), f"tax.{name}.vat"),
            pit=_as_rate(entry.get("pit", 0), f"tax.{name}.pit"),
        )

    contributions: dict[PayrollColumn, Decimal] = {}
    for name, value in data.get("payroll", {}).items():
        try:
            column = PayrollColumn(name.lower())
        except ValueError:
            raise ValidationError(f"Unknown payroll column '{name}' in rate table") from None
        if column == PayrollColumn.SALARY:
            raise ValidationError("Salary is accrued at face value and takes no rate")
        contributions[column] = _as_rate(value, f"payroll.{name}")

    return RateTable(tax=tax, payroll=PayrollRates(contributions=contributions))


def load_rate_table(path: Optional[str | Path] = None) -> RateTable:
    """Load a rate table.

    Args:
        path: TOML file. If None, checks MICROBOOKS_RATES_PATH, then falls
            back to the packaged defaults.

    Returns:
        Parsed RateTable

    Raises:
        ValidationError: If the file is not valid TOML or has bad entries
    """
    if path is None:
        path = os.environ.get(RATES_ENV_VAR)

    try:
        if path is None:
            source = resources.files("microbooks.domain").joinpath("rates.toml")
            with source.open("rb") as fh:
                data = tomllib.load(fh, parse_float=Decimal)
            logger.debug("Loaded packaged rate table")
        else:
            with open(path, "rb") as fh:
                data = tomllib.load(fh, parse_float=Decimal)
            logger.debug("Loaded rate table from %s", path)
    except tomllib.TOMLDecodeError as e:
        raise ValidationError(f"Could not parse rate table: {e}") from e

    return parse_rate_table(data)

