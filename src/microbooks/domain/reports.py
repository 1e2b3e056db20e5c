"""Period reports built on top of the ledgers."""

import logging
from decimal import Decimal
from typing import Optional

from microbooks.domain.categories import TransactionCategory
from microbooks.domain.debt import DebtService
from microbooks.domain.entities import (
    ZERO,
    DashboardSummary,
    ExpenseDeclarationLine,
    InventorySummaryRow,
    ProductSales,
    ProfitLossReport,
    Snapshot,
    StockBalance,
    TaxCategory,
    TaxDeclaration,
    TaxDeclarationLine,
    TransactionKind,
)
from microbooks.domain.ledger import LedgerService, PeriodLike, resolve_period
from microbooks.domain.rates import RateTable

logger = logging.getLogger(__name__)

DELETED_PRODUCT_NAME = "Deleted product"

# Expense lines of the household-business tax declaration, in form order.
DECLARED_EXPENSE_CATEGORIES = (
    TransactionCategory.LABOR_COST,
    TransactionCategory.ELECTRICITY,
    TransactionCategory.WATER,
    TransactionCategory.TELECOM,
    TransactionCategory.RENT,
    TransactionCategory.MANAGEMENT,
    TransactionCategory.OTHER_EXPENSE,
)


class ReportService:
    """Service for profit/loss, sales, tax declaration and inventory reports."""

    def __init__(self, snapshot: Snapshot, rates: Optional[RateTable] = None):
        """Initialize report service.

        Args:
            snapshot: Read-only snapshot of transactions and catalogs
            rates: Tax and payroll rates; loads the configured table if None
        """
        self.snapshot = snapshot
        self.ledgers = LedgerService(snapshot, rates=rates)
        self.rates = self.ledgers.rates
        self.debts = DebtService(snapshot)

    def in_period(self, period: PeriodLike):
        period = resolve_period(period)
        _, inside = period.partition(self.snapshot.transactions)
        return period, inside

    def profit_and_loss(self, period: PeriodLike) -> ProfitLossReport:
        """Total income and expense of every transaction in the period."""
        period, inside = self.in_period(period)
        income = expense = ZERO
        for txn in inside:
            if txn.kind == TransactionKind.INCOME:
                income += txn.amount
            else:
                expense += txn.amount
        return ProfitLossReport(period=period, total_income=income, total_expense=expense)

    def product_sales(self, transactions) -> list[ProductSales]:
        """Quantity and value sold per product, largest total first.

        The reported unit price is the price on the first line seen for each
        product. Products missing from the catalog keep their ID under a
        placeholder name.
        """
        products = self.snapshot.product_index()
        quantities: dict[int, Decimal] = {}
        totals: dict[int, Decimal] = {}
        prices: dict[int, Decimal] = {}
        for txn in transactions:
            for item in txn.line_items:
                if item.product_id not in totals:
                    quantities[item.product_id] = ZERO
                    totals[item.product_id] = ZERO
                    prices[item.product_id] = item.unit_price
                quantities[item.product_id] += item.quantity
                totals[item.product_id] += item.value

        result = []
        for product_id, total in totals.items():
            product = products.get(product_id)
            result.append(
                ProductSales(
                    product_id=product_id,
                    name=product.name if product else DELETED_PRODUCT_NAME,
                    quantity=quantities[product_id],
                    unit_price=prices[product_id],
                    total=total,
                )
            )
        result.sort(key=lambda sales: sales.total, reverse=True)
        return result

    def sales_by_product(self, period: PeriodLike) -> list[ProductSales]:
        """Goods sold in the period, per product."""
        _, inside = self.in_period(period)
        sales = [
            t for t in inside if t.category == TransactionCategory.SALE and t.line_items
        ]
        return self.product_sales(sales)

    def tax_declaration(self, period: PeriodLike) -> TaxDeclaration:
        """Presumptive VAT and PIT per tax category, plus declared expenses.

        Only categories with revenue in the period get a line.
        """
        period, inside = self.in_period(period)
        taxable = [t for t in inside if self.ledgers.is_taxable(t)]

        revenue = {category: ZERO for category in TaxCategory}
        for txn in taxable:
            for item in txn.line_items:
                revenue[self.ledgers.tax_category_for(item.product_id)] += item.value

        lines = []
        for category in TaxCategory:
            if revenue[category] <= 0:
                continue
            rate = self.rates.tax_rate(category)
            lines.append(
                TaxDeclarationLine(
                    tax_category=category,
                    revenue=revenue[category],
                    vat_amount=revenue[category] * rate.vat,
                    pit_amount=revenue[category] * rate.pit,
                )
            )

        expense_lines = []
        for category in DECLARED_EXPENSE_CATEGORIES:
            amount = sum(
                (
                    t.amount
                    for t in inside
                    if t.kind == TransactionKind.EXPENSE and t.category == category
                ),
                ZERO,
            )
            expense_lines.append(ExpenseDeclarationLine(category=category, amount=amount))

        logger.debug("Tax declaration %s: %d revenue line(s)", period.label, len(lines))
        return TaxDeclaration(
            period=period,
            lines=tuple(lines),
            expense_lines=tuple(expense_lines),
            sales_by_product=tuple(self.product_sales(taxable)),
        )

    def inventory_summary(self, period: PeriodLike) -> list[InventorySummaryRow]:
        """Opening, receipts, issues and closing per catalog product.

        Products with no stock and no movement in the period are skipped.
        """
        period = resolve_period(period)
        rows = []
        for product in self.snapshot.products:
            ledger = self.ledgers.inventory_ledger(product.id, period)
            totals = ledger.totals
            if (
                ledger.opening_balance.quantity == 0
                and totals.receipt_quantity == 0
                and totals.issue_quantity == 0
                and ledger.closing_balance.quantity == 0
            ):
                continue
            rows.append(
                InventorySummaryRow(
                    product_id=product.id,
                    name=product.name,
                    unit=product.unit,
                    opening=ledger.opening_balance,
                    receipt=StockBalance(totals.receipt_quantity, totals.receipt_value),
                    issue=StockBalance(totals.issue_quantity, totals.issue_value),
                    closing=ledger.closing_balance,
                )
            )
        return rows

    def dashboard(self, period: PeriodLike) -> DashboardSummary:
        """Headline figures: period income and expense, current debts."""
        report = self.profit_and_loss(period)
        return DashboardSummary(
            period=report.period,
            total_income=report.total_income,
            total_expense=report.total_expense,
            receivable=self.debts.total_receivable(),
            payable=self.debts.total_payable(),
        )
