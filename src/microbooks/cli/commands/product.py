"""Product catalog commands."""

import click
from microbooks.cli.error_handling import handle_domain_error
from microbooks.cli.formatting import fmt_amount, fmt_quantity
from microbooks.domain.entities import TaxCategory
from microbooks.domain.product import ProductService
from microbooks.utils.amount_parser import parse_amount

TAX_CATEGORY_CHOICES = [category.name.lower() for category in TaxCategory]


def _parse_number(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group("product")
def product_group():
    """Manage the product catalog."""
    pass


@product_group.command("add")
@click.argument("name", metavar="PRODUCT_NAME")
@click.option("--sale-price", default="0", help="Default selling price")
@click.option("--cost-price", default="0", help="Starting unit cost")
@click.option("--opening-stock", default="0", help="Quantity on hand before the first transaction")
@click.option("--unit", default="", help="Unit of measure (e.g., 'kg', 'box')")
@click.option(
    "--tax-category",
    type=click.Choice(TAX_CATEGORY_CHOICES),
    help="Tax category (defaults to distribution_goods)",
)
@click.option("--sku", help="Stock keeping unit")
@click.pass_context
def add_product(
    ctx,
    name: str,
    sale_price: str,
    cost_price: str,
    opening_stock: str,
    unit: str,
    tax_category: str | None,
    sku: str | None,
):
    """Add a product to the catalog.

    Examples:
        microbooks product add "Rice 5kg" --sale-price 120000 --cost-price 95000 --unit bag
        microbooks product add "Repair service" --tax-category services_no_materials
    """
    service = ProductService(ctx.obj["db"])

    try:
        product_id = service.create_product(
            name=name,
            sale_price=_parse_number(ctx, sale_price, "sale price"),
            cost_price=_parse_number(ctx, cost_price, "cost price"),
            opening_stock=_parse_number(ctx, opening_stock, "opening stock"),
            unit=unit,
            tax_category=tax_category,
            sku=sku,
        )
        click.echo(f"Created product '{name}' (ID: {product_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@product_group.command("list")
@click.pass_context
def list_products(ctx):
    """List all products."""
    service = ProductService(ctx.obj["db"])

    products = service.list_products()
    if not products:
        click.echo("No products found.")
        return

    click.echo("\nProducts:")
    click.echo("-" * 100)
    for p in products:
        tax = (p.tax_category or TaxCategory.DISTRIBUTION_GOODS).name.lower()
        click.echo(
            f"ID: {p.id:3d} | {p.name:24s} | {p.unit:6s} | "
            f"Sale: {fmt_amount(p.sale_price):>14s} | Cost: {fmt_amount(p.cost_price):>14s} | "
            f"Opening: {fmt_quantity(p.opening_stock):>8s} | {tax}"
        )


@product_group.command("delete")
@click.argument("product_id", type=int)
@click.pass_context
def delete_product(ctx, product_id: int):
    """Delete a product.

    Transactions that reference the product are kept; reports show it as a
    deleted product.
    """
    service = ProductService(ctx.obj["db"])

    try:
        service.delete_product(product_id)
        click.echo(f"Deleted product {product_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register product commands with main CLI."""
    cli.add_command(product_group)
