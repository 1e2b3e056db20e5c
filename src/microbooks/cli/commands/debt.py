"""Receivable and payable commands."""

import click
from microbooks.cli.context import load_snapshot
from microbooks.cli.formatting import fmt_amount
from microbooks.domain.debt import DebtService
from microbooks.domain.entities import ZERO, PartyRole
from microbooks.utils.date_parser import parse_date


def _show_debts(ctx, role: PartyRole, today: str | None) -> None:
    reference = None
    if today:
        try:
            reference = parse_date(today)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    service = DebtService(load_snapshot(ctx))
    debts = service.party_debts(role, today=reference)
    noun = role.value
    if not debts:
        click.echo(f"No outstanding {noun} debts.")
        return

    click.echo(f"\n{'ID':>4s}  {noun.capitalize():28s}  {'Outstanding':>16s}  {'Days':>6s}")
    click.echo("-" * 62)
    total = ZERO
    for entry in debts:
        days = str(entry.debt.aging_days) if entry.debt.aging_days is not None else "-"
        click.echo(
            f"{entry.party.id:>4d}  {entry.party.name:28s}  "
            f"{fmt_amount(entry.debt.amount):>16s}  {days:>6s}"
        )
        total += entry.debt.amount
    click.echo("-" * 62)
    click.echo(f"{'':>4s}  {'Total':28s}  {fmt_amount(total):>16s}")


@click.group("debt")
def debt_group():
    """Show what customers owe and what is owed to suppliers."""
    pass


@debt_group.command("customers")
@click.option("--today", help="Reference date for debt age (defaults to today)")
@click.pass_context
def customers(ctx, today: str | None):
    """Customers with an outstanding balance and how long it has been owed."""
    _show_debts(ctx, PartyRole.CUSTOMER, today)


@debt_group.command("suppliers")
@click.option("--today", help="Reference date for debt age (defaults to today)")
@click.pass_context
def suppliers(ctx, today: str | None):
    """Suppliers with an outstanding balance."""
    _show_debts(ctx, PartyRole.SUPPLIER, today)


def register_commands(cli):
    """Register debt commands with main CLI."""
    cli.add_command(debt_group)
