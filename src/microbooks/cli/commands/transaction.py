"""Transaction management commands."""

import click
from microbooks.cli.error_handling import handle_domain_error
from microbooks.cli.formatting import fmt_amount
from microbooks.domain.transaction import TransactionService
from microbooks.utils.date_parser import parse_date


@click.group("transaction")
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--end-date", help="End date (YYYY-MM-DD, DD/MM/YYYY or 'today')")
@click.option("--category", help="Category name or label")
@click.option("--customer", "customer_id", type=int, help="Customer ID")
@click.option("--supplier", "supplier_id", type=int, help="Supplier ID")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    customer_id: int | None,
    supplier_id: int | None,
):
    """View transactions, newest first."""
    service = TransactionService(ctx.obj["db"])

    start = end = None
    try:
        if start_date:
            start = parse_date(start_date)
        if end_date:
            end = parse_date(end_date)
    except ValueError as e:
        click.echo(f"Error: Invalid date: {e}", err=True)
        ctx.exit(1)

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        category=category,
        customer_id=customer_id,
        supplier_id=supplier_id,
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(
        f"{'ID':>6s}  {'Date':10s}  {'Category':24s}  {'Channel':7s}  {'Amount':>16s}  Description"
    )
    click.echo("-" * 100)
    for txn in transactions:
        sign = "" if txn.is_income else "-"
        click.echo(
            f"{txn.id:>6d}  {txn.date.isoformat():10s}  {txn.category.value:24s}  "
            f"{txn.channel.value.lower():7s}  {sign + fmt_amount(txn.amount):>16s}  {txn.description}"
        )
    click.echo(f"\n{len(transactions)} transaction(s)")


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.pass_context
def delete_transaction(ctx, transaction_id: int):
    """Delete a transaction.

    Ledgers, stock and debts are derived from the history, so they reflect
    the deletion immediately. Product costs set by a deleted purchase are
    not rolled back.
    """
    service = TransactionService(ctx.obj["db"])

    try:
        service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group)
