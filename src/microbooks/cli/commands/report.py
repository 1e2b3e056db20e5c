"""Period report commands."""

import click
from microbooks.cli.context import load_rates_or_exit, load_snapshot
from microbooks.cli.date_filters import period_options
from microbooks.cli.formatting import echo_table, echo_title, fmt_amount, fmt_quantity
from microbooks.domain.reports import ReportService


def _service(ctx) -> ReportService:
    return ReportService(load_snapshot(ctx), rates=load_rates_or_exit(ctx))


@click.group("report")
def report_group():
    """Print a report for a period (defaults to the current year)."""
    pass


@report_group.command("profit-loss")
@period_options
def profit_loss(ctx, period):
    """Total income, expense and profit."""
    report = _service(ctx).profit_and_loss(period)
    echo_title("Profit and loss", report.period.label, width=44)
    click.echo(f"{'Income':20s} {fmt_amount(report.total_income):>22s}")
    click.echo(f"{'Expense':20s} {fmt_amount(report.total_expense):>22s}")
    click.echo(f"{'Profit':20s} {fmt_amount(report.profit):>22s}")


@report_group.command("sales")
@period_options
def sales(ctx, period):
    """Goods sold per product, best sellers first."""
    rows = _service(ctx).sales_by_product(period)
    echo_title("Sales by product", period.label)
    if not rows:
        click.echo("No sales in this period.")
        return
    table = [
        [str(row.product_id), row.name, fmt_quantity(row.quantity), fmt_amount(row.unit_price), fmt_amount(row.total)]
        for row in rows
    ]
    total = sum(row.total for row in rows)
    table.append(["", "Total", "", "", fmt_amount(total)])
    echo_table(["ID", "Product", "Quantity", "Price", "Total"], table)


@report_group.command("tax")
@period_options
def tax(ctx, period):
    """Tax declaration: VAT and PIT per tax category, declared expenses."""
    declaration = _service(ctx).tax_declaration(period)
    echo_title("Tax declaration", declaration.period.label)
    if declaration.lines:
        table = [
            [
                line.tax_category.name.lower(),
                line.tax_category.value,
                fmt_amount(line.revenue),
                fmt_amount(line.vat_amount),
                fmt_amount(line.pit_amount),
            ]
            for line in declaration.lines
        ]
        table.append(
            [
                "",
                "Total",
                fmt_amount(declaration.total_revenue),
                fmt_amount(declaration.total_vat),
                fmt_amount(declaration.total_pit),
            ]
        )
        echo_table(["Code", "Activity", "Revenue", "VAT", "PIT"], table, first_width=48)
    else:
        click.echo("No taxable revenue in this period.")

    click.echo("\nExpenses")
    expense_table = [
        [line.category.name.lower(), line.category.value, fmt_amount(line.amount)]
        for line in declaration.expense_lines
    ]
    expense_table.append(["", "Total", fmt_amount(declaration.total_expense)])
    echo_table(["Code", "Expense", "Amount"], expense_table)


@report_group.command("inventory")
@period_options
def inventory(ctx, period):
    """Opening, receipts, issues and closing stock per product."""
    rows = _service(ctx).inventory_summary(period)
    echo_title("Inventory summary", period.label)
    if not rows:
        click.echo("No stock or movements in this period.")
        return
    table = []
    for row in rows:
        table.append(
            [
                str(row.product_id),
                row.name,
                row.unit,
                fmt_quantity(row.opening.quantity),
                fmt_amount(row.opening.value),
                fmt_quantity(row.receipt.quantity),
                fmt_amount(row.receipt.value),
                fmt_quantity(row.issue.quantity),
                fmt_amount(row.issue.value),
                fmt_quantity(row.closing.quantity),
                fmt_amount(row.closing.value),
            ]
        )
    echo_table(
        ["ID", "Product", "Unit", "Open qty", "Open value", "In qty", "In value", "Out qty", "Out value", "Close qty", "Close value"],
        table,
    )


@report_group.command("dashboard")
@period_options
def dashboard(ctx, period):
    """Headline figures for the period and current debts."""
    summary = _service(ctx).dashboard(period)
    echo_title("Dashboard", summary.period.label, width=44)
    click.echo(f"{'Income':20s} {fmt_amount(summary.total_income):>22s}")
    click.echo(f"{'Expense':20s} {fmt_amount(summary.total_expense):>22s}")
    click.echo(f"{'Profit':20s} {fmt_amount(summary.profit):>22s}")
    click.echo(f"{'Receivable':20s} {fmt_amount(summary.receivable):>22s}")
    click.echo(f"{'Payable':20s} {fmt_amount(summary.payable):>22s}")


def register_commands(cli):
    """Register report commands with main CLI."""
    cli.add_command(report_group)
