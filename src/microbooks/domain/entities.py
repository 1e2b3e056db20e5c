"""Domain model entities for microbooks.

These are pure data classes representing business concepts, independent of
database schema. Ledger rows and reports are view-models derived from a
:class:`Snapshot`; they are never persisted.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Optional

from microbooks.domain.categories import TransactionCategory
from microbooks.domain.periods import ReportingPeriod

ZERO = Decimal("0")


class TransactionKind(str, Enum):
    """Direction of a transaction's cash flow."""

    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class SettlementChannel(str, Enum):
    """Where the money moved."""

    CASH = "CASH"
    BANK = "BANK"


class TaxCategory(str, Enum):
    """Business-activity group used for presumptive VAT/PIT rates."""

    DISTRIBUTION_GOODS = "Distribution and supply of goods"
    SERVICES_NO_MATERIALS = "Services, construction without materials"
    RENTAL_PROPERTY = "Property rental"
    AGENCY_INSURANCE_MLM = "Lottery, insurance and multi-level sales agency"
    PRODUCTION_TRANSPORT_WITH_GOODS = (
        "Production, transport, goods-related services, construction with materials"
    )
    OTHER = "Other business activities"


DEFAULT_TAX_CATEGORY = TaxCategory.DISTRIBUTION_GOODS

# Revenue ledger columns; any other tax category is reported under OTHER.
REVENUE_BUCKETS = (
    TaxCategory.DISTRIBUTION_GOODS,
    TaxCategory.SERVICES_NO_MATERIALS,
    TaxCategory.PRODUCTION_TRANSPORT_WITH_GOODS,
    TaxCategory.OTHER,
)


class ExpenseBucket(str, Enum):
    """Expense ledger cost columns."""

    ELECTRICITY = "electricity"
    WATER = "water"
    TELECOM = "telecom"
    RENT = "rent"
    MANAGEMENT = "management"
    OTHER = "other"


class PayrollColumn(str, Enum):
    """Payroll ledger columns: salary plus statutory contributions."""

    SALARY = "salary"
    SOCIAL_INSURANCE = "social_insurance"
    HEALTH_INSURANCE = "health_insurance"
    UNEMPLOYMENT_INSURANCE = "unemployment_insurance"
    UNION_FEE = "union_fee"


class PartyRole(str, Enum):
    """Counterparty role."""

    CUSTOMER = "customer"
    SUPPLIER = "supplier"


class LedgerKind(str, Enum):
    """The seven derived ledgers."""

    REVENUE = "revenue"
    EXPENSE = "expense"
    INVENTORY = "inventory"
    TAX = "tax"
    PAYROLL = "payroll"
    CASH = "cash"
    BANK = "bank"


@dataclass(frozen=True)
class LineItem:
    """Product line on a transaction, priced at transaction time."""

    product_id: int
    quantity: Decimal
    unit_price: Decimal

    @property
    def value(self) -> Decimal:
        return self.quantity * self.unit_price


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is never negative; ``kind`` gives the direction. A missing
    ``settlement_channel`` is treated as cash.
    """

    id: int
    date: date
    description: str
    amount: Decimal
    kind: TransactionKind
    category: TransactionCategory
    customer_id: Optional[int] = None
    supplier_id: Optional[int] = None
    line_items: tuple[LineItem, ...] = ()
    settlement_channel: Optional[SettlementChannel] = None

    @property
    def channel(self) -> SettlementChannel:
        return self.settlement_channel or SettlementChannel.CASH

    @property
    def is_income(self) -> bool:
        return self.kind == TransactionKind.INCOME

    @property
    def document_number(self) -> str:
        return f"{self.id:06d}"

    def line_items_for(self, product_id: int) -> tuple[LineItem, ...]:
        return tuple(item for item in self.line_items if item.product_id == product_id)


@dataclass(frozen=True)
class Product:
    """Product domain entity.

    ``cost_price`` is the weighted-average unit cost and only changes through
    the costing module.
    """

    id: int
    name: str
    sale_price: Decimal
    cost_price: Decimal
    opening_stock: Decimal
    unit: str
    tax_category: Optional[TaxCategory] = None
    vat_percent: Optional[Decimal] = None
    sku: Optional[str] = None


@dataclass(frozen=True)
class Party:
    """Customer or supplier. Balances are always derived, never stored."""

    id: int
    name: str
    role: PartyRole
    classification: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    tax_id: Optional[str] = None
    bank_name: Optional[str] = None
    bank_account_number: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    """Read-only view of everything the projections need."""

    transactions: tuple[Transaction, ...] = ()
    products: tuple[Product, ...] = ()
    customers: tuple[Party, ...] = ()
    suppliers: tuple[Party, ...] = ()

    def product_index(self) -> dict[int, Product]:
        return {product.id: product for product in self.products}

    def get_product(self, product_id: int) -> Optional[Product]:
        for product in self.products:
            if product.id == product_id:
                return product
        return None

    def parties(self, role: PartyRole) -> tuple[Party, ...]:
        return self.customers if role == PartyRole.CUSTOMER else self.suppliers


@dataclass(frozen=True)
class StockMovement:
    """Signed stock change produced by one line item."""

    transaction_id: int
    date: date
    category: TransactionCategory
    quantity: Decimal
    unit_price: Decimal


# Ledger view-models


@dataclass(frozen=True)
class RevenueLedgerRow:
    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    revenue: dict[TaxCategory, Decimal]
    total: Decimal
    balance: Decimal


@dataclass(frozen=True)
class RevenueLedger:
    """Sales and service revenue bucketed by tax category."""

    period: ReportingPeriod
    opening_balance: Decimal
    rows: tuple[RevenueLedgerRow, ...]
    totals: dict[TaxCategory, Decimal]
    closing_balance: Decimal

    @property
    def total(self) -> Decimal:
        return sum(self.totals.values(), ZERO)


@dataclass(frozen=True)
class ExpenseLedgerRow:
    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    amount: Decimal
    costs: dict[ExpenseBucket, Decimal]
    balance: Decimal


@dataclass(frozen=True)
class ExpenseLedger:
    """Operating expenses bucketed into fixed cost columns."""

    period: ReportingPeriod
    opening_balance: Decimal
    rows: tuple[ExpenseLedgerRow, ...]
    totals: dict[ExpenseBucket, Decimal]
    closing_balance: Decimal

    @property
    def total(self) -> Decimal:
        return sum(self.totals.values(), ZERO)


@dataclass(frozen=True)
class StockBalance:
    quantity: Decimal = ZERO
    value: Decimal = ZERO


@dataclass(frozen=True)
class InventoryTotals:
    receipt_quantity: Decimal = ZERO
    receipt_value: Decimal = ZERO
    issue_quantity: Decimal = ZERO
    issue_value: Decimal = ZERO


@dataclass(frozen=True)
class InventoryLedgerRow:
    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    unit_price: Decimal
    receipt_quantity: Decimal
    receipt_value: Decimal
    issue_quantity: Decimal
    issue_value: Decimal
    balance: StockBalance


@dataclass(frozen=True)
class InventoryLedger:
    """Stock card for one product.

    ``product`` is None when the product was deleted from the catalog; the
    ledger is then valued at zero.
    """

    period: ReportingPeriod
    product_id: int
    product: Optional[Product]
    unit_cost: Decimal
    opening_balance: StockBalance
    rows: tuple[InventoryLedgerRow, ...]
    totals: InventoryTotals
    closing_balance: StockBalance


@dataclass(frozen=True)
class PayablePaid:
    payable: Decimal = ZERO
    paid: Decimal = ZERO


@dataclass(frozen=True)
class TaxLedgerRow:
    """``transaction_id`` is None for computed quarterly accrual rows."""

    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    payable: Decimal
    paid: Decimal
    balance: Decimal


@dataclass(frozen=True)
class TaxLedger:
    period: ReportingPeriod
    opening_balance: Decimal
    rows: tuple[TaxLedgerRow, ...]
    totals: PayablePaid
    closing_balance: Decimal


@dataclass(frozen=True)
class PayrollTotals:
    payable: dict[PayrollColumn, Decimal]
    paid: dict[PayrollColumn, Decimal]


@dataclass(frozen=True)
class PayrollLedgerRow:
    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    payable: dict[PayrollColumn, Decimal]
    paid: dict[PayrollColumn, Decimal]
    balance: dict[PayrollColumn, Decimal]


@dataclass(frozen=True)
class PayrollLedger:
    """Salary and contribution accruals against remittances, per column."""

    period: ReportingPeriod
    opening_balance: dict[PayrollColumn, Decimal]
    rows: tuple[PayrollLedgerRow, ...]
    totals: PayrollTotals
    closing_balance: dict[PayrollColumn, Decimal]


@dataclass(frozen=True)
class IncomeExpense:
    income: Decimal = ZERO
    expense: Decimal = ZERO


@dataclass(frozen=True)
class CashLedgerRow:
    transaction_id: Optional[int]
    date: date
    document_number: str
    description: str
    income: Decimal
    expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class CashLedger:
    """Cash-on-hand or bank-deposit book, depending on ``channel``."""

    period: ReportingPeriod
    channel: SettlementChannel
    opening_balance: Decimal
    rows: tuple[CashLedgerRow, ...]
    totals: IncomeExpense
    closing_balance: Decimal


# Debt and report view-models


@dataclass(frozen=True)
class DebtInfo:
    """Outstanding balance; ``aging_days`` is None when nothing is owed."""

    amount: Decimal
    aging_days: Optional[int] = None


@dataclass(frozen=True)
class PartyDebt:
    party: Party
    debt: DebtInfo


@dataclass(frozen=True)
class ProfitLossReport:
    period: ReportingPeriod
    total_income: Decimal
    total_expense: Decimal

    @property
    def profit(self) -> Decimal:
        return self.total_income - self.total_expense


@dataclass(frozen=True)
class ProductSales:
    product_id: int
    name: str
    quantity: Decimal
    unit_price: Decimal
    total: Decimal


@dataclass(frozen=True)
class TaxDeclarationLine:
    tax_category: TaxCategory
    revenue: Decimal
    vat_amount: Decimal
    pit_amount: Decimal


@dataclass(frozen=True)
class ExpenseDeclarationLine:
    category: TransactionCategory
    amount: Decimal


@dataclass(frozen=True)
class TaxDeclaration:
    period: ReportingPeriod
    lines: tuple[TaxDeclarationLine, ...]
    expense_lines: tuple[ExpenseDeclarationLine, ...]
    sales_by_product: tuple[ProductSales, ...] = field(default_factory=tuple)

    @property
    def total_revenue(self) -> Decimal:
        return sum((line.revenue for line in self.lines), ZERO)

    @property
    def total_vat(self) -> Decimal:
        return sum((line.vat_amount for line in self.lines), ZERO)

    @property
    def total_pit(self) -> Decimal:
        return sum((line.pit_amount for line in self.lines), ZERO)

    @property
    def total_expense(self) -> Decimal:
        return sum((line.amount for line in self.expense_lines), ZERO)


@dataclass(frozen=True)
class InventorySummaryRow:
    product_id: int
    name: str
    unit: str
    opening: StockBalance
    receipt: StockBalance
    issue: StockBalance
    closing: StockBalance


@dataclass(frozen=True)
class DashboardSummary:
    period: ReportingPeriod
    total_income: Decimal
    total_expense: Decimal
    receivable: Decimal
    payable: Decimal

    @property
    def profit(self) -> Decimal:
        return self.total_income - self.total_expense
