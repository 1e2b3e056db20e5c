"""Stock on hand command."""

import click
from microbooks.cli.context import load_snapshot
from microbooks.cli.formatting import fmt_amount, fmt_quantity
from microbooks.domain.stock import StockService
from microbooks.utils.date_parser import parse_date


@click.command("stock")
@click.argument("product_id", type=int, required=False)
@click.option("--as-of", help="Count only transactions dated before this date")
@click.option("--movements", is_flag=True, help="List every receipt and issue of PRODUCT_ID")
@click.pass_context
def stock(ctx, product_id: int | None, as_of: str | None, movements: bool):
    """Show quantity on hand, replayed from the transaction history.

    Without PRODUCT_ID, lists every product in the catalog.

    Examples:
        microbooks stock
        microbooks stock 3 --movements
        microbooks stock --as-of 2024-07-01
    """
    cutoff = None
    if as_of:
        try:
            cutoff = parse_date(as_of)
        except ValueError as e:
            click.echo(f"Error: Invalid date: {e}", err=True)
            ctx.exit(1)

    snapshot = load_snapshot(ctx)
    service = StockService(snapshot)
    products = snapshot.product_index()

    if product_id is not None:
        product = products.get(product_id)
        if product is None:
            click.echo(f"Error: Product {product_id} not found", err=True)
            ctx.exit(1)
        quantity = service.current_stock(product_id, as_of=cutoff)
        click.echo(f"{product.name}: {fmt_quantity(quantity)} {product.unit}".rstrip())
        if movements:
            for move in service.movements(product_id):
                if cutoff is not None and move.date >= cutoff:
                    continue
                click.echo(
                    f"  {move.date.isoformat()}  #{move.transaction_id:<6d} "
                    f"{move.category.value:20s} {fmt_quantity(move.quantity):>10s} "
                    f"@ {fmt_amount(move.unit_price)}"
                )
        return

    if not products:
        click.echo("No products found.")
        return

    levels = service.stock_levels(as_of=cutoff)
    click.echo(f"\n{'ID':>4s}  {'Product':24s}  {'Quantity':>12s}  {'Unit cost':>14s}  {'Value':>16s}")
    click.echo("-" * 80)
    for product in snapshot.products:
        quantity = levels[product.id]
        click.echo(
            f"{product.id:>4d}  {product.name:24s}  {fmt_quantity(quantity):>12s}  "
            f"{fmt_amount(product.cost_price):>14s}  {fmt_amount(quantity * product.cost_price):>16s}"
        )


def register_commands(cli):
    """Register stock command with main CLI."""
    cli.add_command(stock)
