"""Add transaction command."""

import click
from microbooks.cli.error_handling import handle_domain_error
from microbooks.cli.formatting import fmt_amount, fmt_quantity
from microbooks.domain.categories import TransactionCategory, parse_category
from microbooks.domain.entities import LineItem
from microbooks.domain.product import ProductService
from microbooks.domain.transaction import TransactionService
from microbooks.utils.amount_parser import parse_amount
from microbooks.utils.date_parser import parse_date
from microbooks.utils.line_item_parser import parse_line_item


def resolve_line_items(ctx, product_service: ProductService, category, items: tuple[str, ...]):
    """Turn --item options into line items.

    A line without a price takes the product's sale price on sales and its
    current cost otherwise.
    """
    line_items = []
    for text in items:
        try:
            parsed = parse_line_item(text)
        except ValueError as e:
            click.echo(f"Error: {e}", err=True)
            ctx.exit(1)

        unit_price = parsed.unit_price
        if unit_price is None:
            product = product_service.get_product(parsed.product_id)
            if product is None:
                click.echo(f"Error: Product {parsed.product_id} not found", err=True)
                ctx.exit(1)
            if category == TransactionCategory.SALE:
                unit_price = product.sale_price
            else:
                unit_price = product.cost_price
        line_items.append(LineItem(parsed.product_id, parsed.quantity, unit_price))
    return line_items


@click.command("add")
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD, DD/MM/YYYY or relative like 'today')",
)
@click.option(
    "--category",
    required=True,
    help="Category name or label (e.g., 'sale', 'purchase', 'Customer debt payment')",
)
@click.option("--amount", help="Amount (defaults to the total of the --item lines)")
@click.option("--description", default="", help="Transaction description")
@click.option(
    "--kind",
    type=click.Choice(["income", "expense"], case_sensitive=False),
    help="Direction of the money (defaults from the category)",
)
@click.option("--customer", "customer_id", type=int, help="Customer ID")
@click.option("--supplier", "supplier_id", type=int, help="Supplier ID")
@click.option(
    "--item",
    "items",
    multiple=True,
    help="Product line as PRODUCT_ID:QUANTITY[:UNIT_PRICE]; repeat for several lines",
)
@click.option(
    "--channel",
    type=click.Choice(["cash", "bank"], case_sensitive=False),
    help="Settlement channel (defaults to cash)",
)
@click.pass_context
def add_transaction(
    ctx,
    date: str,
    category: str,
    amount: str | None,
    description: str,
    kind: str | None,
    customer_id: int | None,
    supplier_id: int | None,
    items: tuple[str, ...],
    channel: str | None,
):
    """Record a transaction.

    Recording a purchase with product lines updates the products'
    weighted-average cost.

    Examples:
        microbooks add --date 2024-01-15 --category sale --customer 1 --item 3:2:120000
        microbooks add --date 2024-01-20 --category purchase --supplier 2 --item 3:50:95000 --channel bank
        microbooks add --date 2024-01-31 --category electricity --amount 850000
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    product_service = ProductService(db)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    txn_amount = None
    if amount is not None:
        try:
            txn_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    txn_category = parse_category(category)
    if txn_category == TransactionCategory.OTHER and category.strip().lower() != "other":
        click.echo(f"Warning: Unknown category '{category}', recording as 'Other'", err=True)

    line_items = resolve_line_items(ctx, product_service, txn_category, items)

    try:
        transaction_id = transaction_service.create_transaction(
            date=txn_date,
            category=txn_category,
            amount=txn_amount,
            description=description,
            kind=kind,
            customer_id=customer_id,
            supplier_id=supplier_id,
            line_items=line_items,
            settlement_channel=channel,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
        return

    txn = transaction_service.get_transaction(transaction_id)
    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn.date}")
    click.echo(f"  Category: {txn.category.value} ({txn.kind.value.lower()})")
    click.echo(f"  Amount: {fmt_amount(txn.amount)}")
    click.echo(f"  Channel: {txn.channel.value.lower()}")
    if description:
        click.echo(f"  Description: {description}")
    for item in txn.line_items:
        click.echo(
            f"  Item: product {item.product_id} x {fmt_quantity(item.quantity)} "
            f"@ {fmt_amount(item.unit_price)}"
        )
    if txn.category == TransactionCategory.PURCHASE:
        for product_id in dict.fromkeys(item.product_id for item in txn.line_items):
            product = product_service.get_product(product_id)
            click.echo(f"  New cost of '{product.name}': {fmt_amount(product.cost_price)}")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
