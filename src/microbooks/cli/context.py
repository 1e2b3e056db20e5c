"""Helpers shared by commands that read the whole ledger."""

import click

from microbooks.cli.error_handling import handle_domain_error
from microbooks.domain.entities import Snapshot
from microbooks.domain.errors import DomainError
from microbooks.domain.rates import RateTable, load_rate_table


def load_snapshot(ctx: click.Context) -> Snapshot:
    """Read everything the projections need from the database."""
    return ctx.obj["db"].load_snapshot()


def load_rates_or_exit(ctx: click.Context) -> RateTable:
    """Load the configured rate table, exiting on a malformed file."""
    try:
        return load_rate_table(ctx.obj.get("rates_path"))
    except (DomainError, OSError) as e:
        handle_domain_error(ctx, e)
