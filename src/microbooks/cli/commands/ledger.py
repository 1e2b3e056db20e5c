"""Ledger commands: print the seven derived books for a period."""

import click
from microbooks.cli.context import load_rates_or_exit, load_snapshot
from microbooks.cli.date_filters import period_options
from microbooks.cli.formatting import echo_table, echo_title, fmt_amount, fmt_quantity
from microbooks.domain.entities import (
    REVENUE_BUCKETS,
    CashLedger,
    ExpenseBucket,
    ExpenseLedger,
    InventoryLedger,
    PayrollColumn,
    PayrollLedger,
    RevenueLedger,
    SettlementChannel,
    TaxLedger,
)
from microbooks.domain.ledger import LedgerService

REVENUE_HEADERS = {
    "DISTRIBUTION_GOODS": "Goods",
    "SERVICES_NO_MATERIALS": "Services",
    "PRODUCTION_TRANSPORT_WITH_GOODS": "Production",
    "OTHER": "Other",
}


def _service(ctx) -> LedgerService:
    return LedgerService(load_snapshot(ctx), rates=load_rates_or_exit(ctx))


def render_revenue(ledger: RevenueLedger) -> None:
    echo_title("Revenue ledger", ledger.period.label)
    headers = ["Doc", "Description", "Date"]
    headers += [REVENUE_HEADERS[bucket.name] for bucket in REVENUE_BUCKETS]
    headers += ["Total", "Balance"]
    rows = [["", "Opening balance", "", *([""] * len(REVENUE_BUCKETS)), "", fmt_amount(ledger.opening_balance)]]
    for row in ledger.rows:
        rows.append(
            [
                row.document_number,
                row.description,
                row.date.isoformat(),
                *(fmt_amount(row.revenue[bucket]) for bucket in REVENUE_BUCKETS),
                fmt_amount(row.total),
                fmt_amount(row.balance),
            ]
        )
    rows.append(
        [
            "",
            "Total",
            "",
            *(fmt_amount(ledger.totals[bucket]) for bucket in REVENUE_BUCKETS),
            fmt_amount(ledger.total),
            fmt_amount(ledger.closing_balance),
        ]
    )
    echo_table(headers, rows)


def render_expense(ledger: ExpenseLedger) -> None:
    echo_title("Expense ledger", ledger.period.label)
    buckets = list(ExpenseBucket)
    headers = ["Doc", "Description", "Date", "Amount"]
    headers += [bucket.value.capitalize() for bucket in buckets]
    headers += ["Balance"]
    rows = [["", "Opening balance", "", "", *([""] * len(buckets)), fmt_amount(ledger.opening_balance)]]
    for row in ledger.rows:
        rows.append(
            [
                row.document_number,
                row.description,
                row.date.isoformat(),
                fmt_amount(row.amount),
                *(fmt_amount(row.costs[bucket]) for bucket in buckets),
                fmt_amount(row.balance),
            ]
        )
    rows.append(
        [
            "",
            "Total",
            "",
            fmt_amount(ledger.total),
            *(fmt_amount(ledger.totals[bucket]) for bucket in buckets),
            fmt_amount(ledger.closing_balance),
        ]
    )
    echo_table(headers, rows)


def render_inventory(ledger: InventoryLedger) -> None:
    name = ledger.product.name if ledger.product else f"product {ledger.product_id} (deleted)"
    echo_title(f"Inventory ledger: {name}", ledger.period.label)
    click.echo(f"Unit cost: {fmt_amount(ledger.unit_cost)}")
    headers = ["Doc", "Description", "Date", "Price", "In qty", "In value", "Out qty", "Out value", "Qty", "Value"]
    opening = ledger.opening_balance
    rows = [["", "Opening balance", "", "", "", "", "", "", fmt_quantity(opening.quantity), fmt_amount(opening.value)]]
    for row in ledger.rows:
        rows.append(
            [
                row.document_number,
                row.description,
                row.date.isoformat(),
                fmt_amount(row.unit_price),
                fmt_quantity(row.receipt_quantity),
                fmt_amount(row.receipt_value),
                fmt_quantity(row.issue_quantity),
                fmt_amount(row.issue_value),
                fmt_quantity(row.balance.quantity),
                fmt_amount(row.balance.value),
            ]
        )
    totals = ledger.totals
    closing = ledger.closing_balance
    rows.append(
        [
            "",
            "Total",
            "",
            "",
            fmt_quantity(totals.receipt_quantity),
            fmt_amount(totals.receipt_value),
            fmt_quantity(totals.issue_quantity),
            fmt_amount(totals.issue_value),
            fmt_quantity(closing.quantity),
            fmt_amount(closing.value),
        ]
    )
    echo_table(headers, rows)


def render_tax(ledger: TaxLedger) -> None:
    echo_title("Tax ledger", ledger.period.label)
    headers = ["Doc", "Description", "Date", "Payable", "Paid", "Balance"]
    rows = [["", "Opening balance", "", "", "", fmt_amount(ledger.opening_balance)]]
    for row in ledger.rows:
        rows.append(
            [
                row.document_number,
                row.description,
                row.date.isoformat(),
                fmt_amount(row.payable),
                fmt_amount(row.paid),
                fmt_amount(row.balance),
            ]
        )
    rows.append(
        [
            "",
            "Total",
            "",
            fmt_amount(ledger.totals.payable),
            fmt_amount(ledger.totals.paid),
            fmt_amount(ledger.closing_balance),
        ]
    )
    echo_table(headers, rows)


def render_payroll(ledger: PayrollLedger) -> None:
    echo_title("Payroll ledger", ledger.period.label)
    columns = list(PayrollColumn)
    headers = ["Doc", "Description", "Date"]
    for column in columns:
        label = column.value.replace("_", " ").capitalize()
        headers += [f"{label} owed", f"{label} paid"]
    rows = [["", "Opening balance", "", *(c for column in columns for c in (fmt_amount(ledger.opening_balance[column]), ""))]]
    for row in ledger.rows:
        cells = [row.document_number, row.description, row.date.isoformat()]
        for column in columns:
            cells += [fmt_amount(row.payable[column]), fmt_amount(row.paid[column])]
        rows.append(cells)
    total_cells = ["", "Total", ""]
    closing_cells = ["", "Closing balance", ""]
    for column in columns:
        total_cells += [
            fmt_amount(ledger.totals.payable[column]),
            fmt_amount(ledger.totals.paid[column]),
        ]
        closing_cells += [fmt_amount(ledger.closing_balance[column]), ""]
    rows += [total_cells, closing_cells]
    echo_table(headers, rows)


def render_cash(ledger: CashLedger) -> None:
    title = "Cash ledger" if ledger.channel == SettlementChannel.CASH else "Bank ledger"
    echo_title(title, ledger.period.label)
    headers = ["Doc", "Description", "Date", "Income", "Expense", "Balance"]
    rows = [["", "Opening balance", "", "", "", fmt_amount(ledger.opening_balance)]]
    for row in ledger.rows:
        rows.append(
            [
                row.document_number,
                row.description,
                row.date.isoformat(),
                fmt_amount(row.income),
                fmt_amount(row.expense),
                fmt_amount(row.balance),
            ]
        )
    rows.append(
        [
            "",
            "Total",
            "",
            fmt_amount(ledger.totals.income),
            fmt_amount(ledger.totals.expense),
            fmt_amount(ledger.closing_balance),
        ]
    )
    echo_table(headers, rows)


@click.group("ledger")
def ledger_group():
    """Print a ledger for a period.

    The period defaults to the current year. Use --year with --quarter or
    --month, a named --period, or --start-date and --end-date.
    """
    pass


@ledger_group.command("revenue")
@period_options
def revenue(ctx, period):
    """Revenue by tax category."""
    render_revenue(_service(ctx).revenue_ledger(period))


@ledger_group.command("expense")
@period_options
def expense(ctx, period):
    """Operating expenses by cost column."""
    render_expense(_service(ctx).expense_ledger(period))


@ledger_group.command("inventory")
@click.argument("product_id", type=int)
@period_options
def inventory(ctx, period, product_id: int):
    """Stock card for one product."""
    render_inventory(_service(ctx).inventory_ledger(product_id, period))


@ledger_group.command("tax")
@period_options
def tax(ctx, period):
    """Quarterly tax accruals against tax payments."""
    render_tax(_service(ctx).tax_ledger(period))


@ledger_group.command("payroll")
@period_options
def payroll(ctx, period):
    """Salary and contributions owed against remittances."""
    render_payroll(_service(ctx).payroll_ledger(period))


@ledger_group.command("cash")
@period_options
def cash(ctx, period):
    """Cash-on-hand book."""
    render_cash(_service(ctx).cash_ledger(period))


@ledger_group.command("bank")
@period_options
def bank(ctx, period):
    """Bank-deposit book."""
    render_cash(_service(ctx).bank_ledger(period))


def register_commands(cli):
    """Register ledger commands with main CLI."""
    cli.add_command(ledger_group)
