"""Ledger projection engine.

Every ledger follows the same skeleton:

1. split the snapshot into transactions before the period and inside it
   (calendar dates only),
2. replay the ledger's own balance rule over the earlier transactions to get
   the opening balance,
3. turn the in-period transactions into rows in stable date order, carrying
   the running balance,
4. sum the row columns into totals; closing = opening + movement.

Projections are pure: the snapshot is never modified and running the same
projection twice gives equal results.
"""

import logging
from decimal import Decimal
from typing import Iterable, Optional, Union

from microbooks.domain.categories import (
    EXPENSE_LEDGER_EXCLUDED,
    PAYROLL_CATEGORIES,
    REVENUE_CATEGORIES,
    TAXABLE_CATEGORIES,
    TransactionCategory,
)
from microbooks.domain.entities import (
    DEFAULT_TAX_CATEGORY,
    REVENUE_BUCKETS,
    ZERO,
    CashLedger,
    CashLedgerRow,
    ExpenseBucket,
    ExpenseLedger,
    ExpenseLedgerRow,
    IncomeExpense,
    InventoryLedger,
    InventoryLedgerRow,
    InventoryTotals,
    LedgerKind,
    PayablePaid,
    PayrollColumn,
    PayrollLedger,
    PayrollLedgerRow,
    PayrollTotals,
    RevenueLedger,
    RevenueLedgerRow,
    SettlementChannel,
    Snapshot,
    StockBalance,
    TaxCategory,
    TaxLedger,
    TaxLedgerRow,
    Transaction,
    TransactionKind,
)
from microbooks.domain.errors import ValidationError
from microbooks.domain.periods import ReportingPeriod, sort_by_date
from microbooks.domain.rates import RateTable, load_rate_table
from microbooks.domain.stock import StockService, movement_sign

logger = logging.getLogger(__name__)

EXPENSE_BUCKET_BY_CATEGORY = {
    TransactionCategory.ELECTRICITY: ExpenseBucket.ELECTRICITY,
    TransactionCategory.WATER: ExpenseBucket.WATER,
    TransactionCategory.TELECOM: ExpenseBucket.TELECOM,
    TransactionCategory.RENT: ExpenseBucket.RENT,
    TransactionCategory.MANAGEMENT: ExpenseBucket.MANAGEMENT,
}

PAYROLL_REMITTANCE_COLUMN = {
    TransactionCategory.SALARY_PAYMENT: PayrollColumn.SALARY,
    TransactionCategory.SOCIAL_INSURANCE_PAYMENT: PayrollColumn.SOCIAL_INSURANCE,
    TransactionCategory.HEALTH_INSURANCE_PAYMENT: PayrollColumn.HEALTH_INSURANCE,
    TransactionCategory.UNEMPLOYMENT_INSURANCE_PAYMENT: PayrollColumn.UNEMPLOYMENT_INSURANCE,
    TransactionCategory.UNION_FEE_PAYMENT: PayrollColumn.UNION_FEE,
}

PeriodLike = Union[ReportingPeriod, int]


def resolve_period(period: PeriodLike) -> ReportingPeriod:
    """Accept a ReportingPeriod or a calendar year.

    Raises:
        InvalidPeriodError: If the year is out of range
    """
    if isinstance(period, ReportingPeriod):
        return period
    return ReportingPeriod.for_year(period)


def zero_columns(keys: Iterable) -> dict:
    return {key: ZERO for key in keys}


def add_columns(target: dict, source: dict) -> None:
    for key, value in source.items():
        target[key] = target.get(key, ZERO) + value


class LedgerService:
    """Service for projecting the seven ledgers from a snapshot."""

    def __init__(self, snapshot: Snapshot, rates: Optional[RateTable] = None):
        """Initialize ledger service.

        Args:
            snapshot: Read-only snapshot of transactions and catalogs
            rates: Tax and payroll rates; loads the configured table if None
        """
        self.snapshot = snapshot
        self.rates = rates if rates is not None else load_rate_table()
        self.products = snapshot.product_index()
        self.stock = StockService(snapshot)

    def project(
        self, kind: LedgerKind, period: PeriodLike, product_id: Optional[int] = None
    ):
        """Project a ledger by kind.

        Raises:
            InvalidPeriodError: If the period is out of range
            ValidationError: If an inventory ledger is requested without a product
        """
        kind = LedgerKind(kind)
        if kind == LedgerKind.INVENTORY:
            if product_id is None:
                raise ValidationError("Inventory ledger requires a product")
            return self.inventory_ledger(product_id, period)
        projections = {
            LedgerKind.REVENUE: self.revenue_ledger,
            LedgerKind.EXPENSE: self.expense_ledger,
            LedgerKind.TAX: self.tax_ledger,
            LedgerKind.PAYROLL: self.payroll_ledger,
            LedgerKind.CASH: self.cash_ledger,
            LedgerKind.BANK: self.bank_ledger,
        }
        return projections[kind](period)

    def tax_category_for(self, product_id: int) -> TaxCategory:
        """Tax category of a product, defaulting for unknown products."""
        product = self.products.get(product_id)
        if product is None:
            logger.debug("Line item references unknown product %s", product_id)
            return DEFAULT_TAX_CATEGORY
        return product.tax_category or DEFAULT_TAX_CATEGORY

    # Revenue ledger

    def is_revenue(self, txn: Transaction) -> bool:
        return (
            txn.kind == TransactionKind.INCOME
            and txn.category in REVENUE_CATEGORIES
            and bool(txn.line_items)
        )

    def revenue_columns(self, txn: Transaction) -> dict[TaxCategory, Decimal]:
        columns = zero_columns(REVENUE_BUCKETS)
        for item in txn.line_items:
            category = self.tax_category_for(item.product_id)
            bucket = category if category in REVENUE_BUCKETS else TaxCategory.OTHER
            columns[bucket] += item.value
        return columns

    def revenue_ledger(self, period: PeriodLike) -> RevenueLedger:
        """Sales and service revenue by tax category.

        Opening and closing balances are cumulative revenue to date.
        """
        period = resolve_period(period)
        before, inside = period.partition(
            t for t in self.snapshot.transactions if self.is_revenue(t)
        )

        opening = ZERO
        for txn in before:
            opening += sum(self.revenue_columns(txn).values(), ZERO)

        rows = []
        totals = zero_columns(REVENUE_BUCKETS)
        balance = opening
        for txn in sort_by_date(inside):
            columns = self.revenue_columns(txn)
            row_total = sum(columns.values(), ZERO)
            balance += row_total
            add_columns(totals, columns)
            rows.append(
                RevenueLedgerRow(
                    transaction_id=txn.id,
                    date=txn.date,
                    document_number=txn.document_number,
                    description=txn.description,
                    revenue=columns,
                    total=row_total,
                    balance=balance,
                )
            )

        logger.debug("Revenue ledger %s: %d rows", period.label, len(rows))
        return RevenueLedger(
            period=period,
            opening_balance=opening,
            rows=tuple(rows),
            totals=totals,
            closing_balance=opening + sum(totals.values(), ZERO),
        )

    # Expense ledger

    def is_operating_expense(self, txn: Transaction) -> bool:
        return (
            txn.kind == TransactionKind.EXPENSE
            and txn.category not in EXPENSE_LEDGER_EXCLUDED
        )

    def expense_ledger(self, period: PeriodLike) -> ExpenseLedger:
        """Operating expenses, each in exactly one cost column.

        Purchases, returns, materials, supplier payments, tax and payroll have
        their own ledgers and are left out.
        """
        period = resolve_period(period)
        before, inside = period.partition(
            t for t in self.snapshot.transactions if self.is_operating_expense(t)
        )
        opening = sum((t.amount for t in before), ZERO)

        rows = []
        totals = zero_columns(ExpenseBucket)
        balance = opening
        for txn in sort_by_date(inside):
            bucket = EXPENSE_BUCKET_BY_CATEGORY.get(txn.category, ExpenseBucket.OTHER)
            costs = zero_columns(ExpenseBucket)
            costs[bucket] = txn.amount
            totals[bucket] += txn.amount
            balance += txn.amount
            rows.append(
                ExpenseLedgerRow(
                    transaction_id=txn.id,
                    date=txn.date,
                    document_number=txn.document_number,
                    description=txn.description,
                    amount=txn.amount,
                    costs=costs,
                    balance=balance,
                )
            )

        logger.debug("Expense ledger %s: %d rows", period.label, len(rows))
        return ExpenseLedger(
            period=period,
            opening_balance=opening,
            rows=tuple(rows),
            totals=totals,
            closing_balance=opening + sum(totals.values(), ZERO),
        )

    # Inventory ledger

    def inventory_ledger(self, product_id: int, period: PeriodLike) -> InventoryLedger:
        """Stock card for one product.

        Receipts are valued at the transaction price, issues and balances at
        the product's current weighted-average cost. Unknown products give
        an empty ledger valued at zero.
        """
        period = resolve_period(period)
        product = self.products.get(product_id)
        if product is None:
            logger.debug("Inventory ledger for unknown product %s", product_id)
            return InventoryLedger(
                period=period,
                product_id=product_id,
                product=None,
                unit_cost=ZERO,
                opening_balance=StockBalance(),
                rows=(),
                totals=InventoryTotals(),
                closing_balance=StockBalance(),
            )

        unit_cost = product.cost_price
        opening_qty = self.stock.current_stock(product_id, as_of=period.start)
        _, inside = period.partition(self.snapshot.transactions)

        rows = []
        quantity = opening_qty
        receipt_qty = receipt_value = issue_qty = issue_value = ZERO
        for txn in sort_by_date(inside):
            sign = movement_sign(txn.category)
            if sign == 0:
                continue
            for item in txn.line_items_for(product_id):
                row_receipt_qty = row_receipt_value = row_issue_qty = row_issue_value = ZERO
                if sign > 0:
                    row_receipt_qty = item.quantity
                    row_receipt_value = item.value
                    quantity += item.quantity
                else:
                    row_issue_qty = item.quantity
                    row_issue_value = item.quantity * unit_cost
                    quantity -= item.quantity
                receipt_qty += row_receipt_qty
                receipt_value += row_receipt_value
                issue_qty += row_issue_qty
                issue_value += row_issue_value
                rows.append(
                    InventoryLedgerRow(
                        transaction_id=txn.id,
                        date=txn.date,
                        document_number=txn.document_number,
                        description=txn.description,
                        unit_price=item.unit_price,
                        receipt_quantity=row_receipt_qty,
                        receipt_value=row_receipt_value,
                        issue_quantity=row_issue_qty,
                        issue_value=row_issue_value,
                        balance=StockBalance(quantity, quantity * unit_cost),
                    )
                )

        logger.debug(
            "Inventory ledger %s for product %s: %d rows", period.label, product_id, len(rows)
        )
        return InventoryLedger(
            period=period,
            product_id=product_id,
            product=product,
            unit_cost=unit_cost,
            opening_balance=StockBalance(opening_qty, opening_qty * unit_cost),
            rows=tuple(rows),
            totals=InventoryTotals(
                receipt_quantity=receipt_qty,
                receipt_value=receipt_value,
                issue_quantity=issue_qty,
                issue_value=issue_value,
            ),
            closing_balance=StockBalance(quantity, quantity * unit_cost),
        )

    # Tax ledger

    def is_taxable(self, txn: Transaction) -> bool:
        return (
            txn.kind == TransactionKind.INCOME
            and txn.category in TAXABLE_CATEGORIES
            and bool(txn.line_items)
        )

    def accrued_tax(self, transactions: Iterable[Transaction]) -> Decimal:
        """VAT plus PIT owed on the taxable revenue of the given transactions."""
        total = ZERO
        for txn in transactions:
            if not self.is_taxable(txn):
                continue
            for item in txn.line_items:
                rate = self.rates.tax_rate(self.tax_category_for(item.product_id))
                total += item.value * rate.combined
        return total

    def tax_ledger(self, period: PeriodLike) -> TaxLedger:
        """Computed quarterly tax accruals against recorded tax payments.

        Each calendar quarter overlapping the period becomes one computed row
        dated at the quarter's end (clipped to the period). Payments are
        taken from tax payment transactions. Rows with nothing payable and
        nothing paid are left out.
        """
        period = resolve_period(period)
        before, inside = period.partition(self.snapshot.transactions)

        paid_before = sum(
            (t.amount for t in before if t.category == TransactionCategory.TAX_PAYMENT), ZERO
        )
        opening = self.accrued_tax(before) - paid_before

        # (date, order, row); computed rows sort ahead of payments on the same day
        entries = []
        for year, quarter, clipped in period.quarters():
            payable = self.accrued_tax(t for t in inside if clipped.contains(t.date))
            entries.append(
                (
                    clipped.end,
                    0,
                    TaxLedgerRow(
                        transaction_id=None,
                        date=clipped.end,
                        document_number="",
                        description=f"Tax payable Q{quarter}/{year}",
                        payable=payable,
                        paid=ZERO,
                        balance=ZERO,
                    ),
                )
            )
        for txn in inside:
            if txn.category == TransactionCategory.TAX_PAYMENT:
                entries.append(
                    (
                        txn.date,
                        1,
                        TaxLedgerRow(
                            transaction_id=txn.id,
                            date=txn.date,
                            document_number=txn.document_number,
                            description=txn.description,
                            payable=ZERO,
                            paid=txn.amount,
                            balance=ZERO,
                        ),
                    )
                )
        entries.sort(key=lambda entry: (entry[0], entry[1]))

        rows = []
        payable_total = paid_total = ZERO
        balance = opening
        for _, _, row in entries:
            if row.payable <= 0 and row.paid <= 0:
                continue
            balance += row.payable - row.paid
            payable_total += row.payable
            paid_total += row.paid
            rows.append(
                TaxLedgerRow(
                    transaction_id=row.transaction_id,
                    date=row.date,
                    document_number=row.document_number,
                    description=row.description,
                    payable=row.payable,
                    paid=row.paid,
                    balance=balance,
                )
            )

        logger.debug("Tax ledger %s: %d rows", period.label, len(rows))
        return TaxLedger(
            period=period,
            opening_balance=opening,
            rows=tuple(rows),
            totals=PayablePaid(payable=payable_total, paid=paid_total),
            closing_balance=opening + payable_total - paid_total,
        )

    # Payroll ledger

    def payroll_movement(
        self, txn: Transaction
    ) -> tuple[dict[PayrollColumn, Decimal], dict[PayrollColumn, Decimal]]:
        """(payable, paid) columns produced by one payroll transaction."""
        payable = zero_columns(PayrollColumn)
        paid = zero_columns(PayrollColumn)
        if txn.category == TransactionCategory.LABOR_COST:
            payable.update(self.rates.payroll.accrual(txn.amount))
        elif txn.category in PAYROLL_REMITTANCE_COLUMN:
            paid[PAYROLL_REMITTANCE_COLUMN[txn.category]] = txn.amount
        return payable, paid

    def payroll_ledger(self, period: PeriodLike) -> PayrollLedger:
        """Salary and statutory contributions owed against remittances.

        A labor cost transaction accrues the salary plus every contribution
        rate in one row; each remittance category pays down its own column.
        """
        period = resolve_period(period)
        before, inside = period.partition(
            t for t in self.snapshot.transactions if t.category in PAYROLL_CATEGORIES
        )

        opening = zero_columns(PayrollColumn)
        for txn in before:
            payable, paid = self.payroll_movement(txn)
            for column in PayrollColumn:
                opening[column] += payable[column] - paid[column]

        rows = []
        payable_totals = zero_columns(PayrollColumn)
        paid_totals = zero_columns(PayrollColumn)
        balance = dict(opening)
        for txn in sort_by_date(inside):
            payable, paid = self.payroll_movement(txn)
            for column in PayrollColumn:
                balance[column] += payable[column] - paid[column]
            add_columns(payable_totals, payable)
            add_columns(paid_totals, paid)
            rows.append(
                PayrollLedgerRow(
                    transaction_id=txn.id,
                    date=txn.date,
                    document_number=txn.document_number,
                    description=txn.description,
                    payable=payable,
                    paid=paid,
                    balance=dict(balance),
                )
            )

        closing = {
            column: opening[column] + payable_totals[column] - paid_totals[column]
            for column in PayrollColumn
        }
        logger.debug("Payroll ledger %s: %d rows", period.label, len(rows))
        return PayrollLedger(
            period=period,
            opening_balance=opening,
            rows=tuple(rows),
            totals=PayrollTotals(payable=payable_totals, paid=paid_totals),
            closing_balance=closing,
        )

    # Cash and bank ledgers

    def cash_ledger(self, period: PeriodLike) -> CashLedger:
        """Cash-on-hand book; transactions without a channel count as cash."""
        return self.channel_ledger(period, SettlementChannel.CASH)

    def bank_ledger(self, period: PeriodLike) -> CashLedger:
        """Bank-deposit book."""
        return self.channel_ledger(period, SettlementChannel.BANK)

    def channel_ledger(self, period: PeriodLike, channel: SettlementChannel) -> CashLedger:
        period = resolve_period(period)
        before, inside = period.partition(
            t for t in self.snapshot.transactions if t.channel == channel
        )

        opening = ZERO
        for txn in before:
            opening += txn.amount if txn.is_income else -txn.amount

        rows = []
        income_total = expense_total = ZERO
        balance = opening
        for txn in sort_by_date(inside):
            income = txn.amount if txn.is_income else ZERO
            expense = ZERO if txn.is_income else txn.amount
            balance += income - expense
            income_total += income
            expense_total += expense
            rows.append(
                CashLedgerRow(
                    transaction_id=txn.id,
                    date=txn.date,
                    document_number=txn.document_number,
                    description=txn.description,
                    income=income,
                    expense=expense,
                    balance=balance,
                )
            )

        logger.debug("%s ledger %s: %d rows", channel.value.title(), period.label, len(rows))
        return CashLedger(
            period=period,
            channel=channel,
            opening_balance=opening,
            rows=tuple(rows),
            totals=IncomeExpense(income=income_total, expense=expense_total),
            closing_balance=opening + income_total - expense_total,
        )
