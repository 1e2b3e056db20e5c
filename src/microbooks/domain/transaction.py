"""Transaction domain service."""

import logging
from dataclasses import replace
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Optional, Sequence, Union

from microbooks.domain.categories import INCOME_CATEGORIES, TransactionCategory, parse_category
from microbooks.domain.costing import COST_PRECISION, CostingService, validate_line_item
from microbooks.domain.entities import (
    LineItem,
    PartyRole,
    SettlementChannel,
    Transaction as TransactionEntity,
    TransactionKind,
)
from microbooks.domain.errors import (
    NotFoundError,
    ValidationError,
    customer_not_found,
    product_not_found,
    supplier_not_found,
    transaction_not_found,
)
from microbooks.domain.periods import normalize_date

if TYPE_CHECKING:
    from microbooks.database.base import Database

logger = logging.getLogger(__name__)


def default_kind(category: TransactionCategory) -> TransactionKind:
    """Direction a category is recorded with when none is given."""
    if category in INCOME_CATEGORIES:
        return TransactionKind.INCOME
    return TransactionKind.EXPENSE


def parse_kind(value: Union[str, TransactionKind]) -> TransactionKind:
    if isinstance(value, TransactionKind):
        return value
    try:
        return TransactionKind(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Transaction kind must be INCOME or EXPENSE, got '{value}'") from None


def parse_channel(
    value: Union[str, SettlementChannel, None],
) -> Optional[SettlementChannel]:
    if value is None or isinstance(value, SettlementChannel):
        return value
    try:
        return SettlementChannel(value.strip().upper())
    except ValueError:
        raise ValidationError(f"Settlement channel must be CASH or BANK, got '{value}'") from None


def parse_amount(value) -> Decimal:
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"Invalid amount: {value!r}") from None
    if not amount.is_finite() or amount < 0:
        raise ValidationError(f"Amount must be a non-negative number, got {value}")
    return amount


class TransactionService:
    """Service for recording and editing transactions.

    Recording a purchase is the one place where a product's cost changes:
    the received lines are blended into the weighted-average cost and the
    new costs are stored together with the transaction.
    """

    def __init__(self, db: "Database"):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def _check_parties(self, customer_id: Optional[int], supplier_id: Optional[int]) -> None:
        if customer_id is not None and self.db.get_party(PartyRole.CUSTOMER, customer_id) is None:
            raise NotFoundError(customer_not_found(customer_id))
        if supplier_id is not None and self.db.get_party(PartyRole.SUPPLIER, supplier_id) is None:
            raise NotFoundError(supplier_not_found(supplier_id))

    def _check_line_items(self, line_items: Sequence[LineItem]) -> list[LineItem]:
        items = [validate_line_item(item) for item in line_items]
        for item in items:
            if self.db.get_product(item.product_id) is None:
                raise NotFoundError(product_not_found(item.product_id))
        return items

    def _line_total(self, category: TransactionCategory, items: Sequence[LineItem]) -> Decimal:
        """Total the line items, adding each product's VAT on sales."""
        total = Decimal("0")
        for item in items:
            value = item.value
            if category == TransactionCategory.SALE:
                vat_percent = self.db.get_product(item.product_id).vat_percent
                if vat_percent:
                    value += value * vat_percent / 100
            total += value
        return total

    def create_transaction(
        self,
        date: date,
        category: Union[str, TransactionCategory],
        amount: Optional[Decimal] = None,
        description: str = "",
        kind: Union[str, TransactionKind, None] = None,
        customer_id: Optional[int] = None,
        supplier_id: Optional[int] = None,
        line_items: Sequence[LineItem] = (),
        settlement_channel: Union[str, SettlementChannel, None] = None,
    ) -> int:
        """Record a transaction.

        Args:
            date: Transaction date
            category: Category or category label
            amount: Transaction amount, kept to 4 decimal places; defaults to
                the total of the line items plus product VAT on sales
            description: Free-text description
            kind: INCOME or EXPENSE; defaults from the category
            customer_id: Optional customer ID
            supplier_id: Optional supplier ID
            line_items: Product lines
            settlement_channel: CASH or BANK; None is treated as cash

        Returns:
            Transaction ID

        Raises:
            ValidationError: If the amount, kind or channel is invalid
            InconsistentLineItemError: If a line has a bad quantity or price
            NotFoundError: If a party or product doesn't exist
        """
        category = parse_category(category)
        kind = parse_kind(kind) if kind is not None else default_kind(category)
        channel = parse_channel(settlement_channel)
        items = self._check_line_items(line_items)

        if amount is None:
            if not items:
                raise ValidationError("Amount is required for transactions without line items")
            amount = self._line_total(category, items)
        else:
            amount = parse_amount(amount)
        amount = amount.quantize(COST_PRECISION, rounding=ROUND_HALF_UP)

        self._check_parties(customer_id, supplier_id)

        txn_date = normalize_date(date)
        updated_products = []
        if category == TransactionCategory.PURCHASE and items:
            # Blend against the stock held at the end of the purchase date.
            # Receipts recorded later are not re-blended.
            costing = CostingService(self.db.load_snapshot())
            receipts = costing.apply_receipts(items, as_of=txn_date + timedelta(days=1))
            updated_products = list(receipts.values())

        transaction_id = self.db.create_transaction(
            date=txn_date,
            description=description,
            amount=amount,
            kind=kind,
            category=category,
            customer_id=customer_id,
            supplier_id=supplier_id,
            line_items=items,
            settlement_channel=channel,
            updated_products=updated_products,
        )
        logger.info(
            "Recorded %s transaction %s for %s", category.name, transaction_id, amount
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def replace_transaction(
        self,
        transaction_id: int,
        date: Optional[date] = None,
        category: Union[str, TransactionCategory, None] = None,
        amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        kind: Union[str, TransactionKind, None] = None,
        customer_id: Optional[int] = None,
        supplier_id: Optional[int] = None,
        line_items: Optional[Sequence[LineItem]] = None,
        settlement_channel: Union[str, SettlementChannel, None] = None,
    ) -> None:
        """Replace a transaction with an edited version.

        Fields left as None keep their current value. Product costs are not
        re-blended: an edited purchase keeps the cost it produced when it
        was first recorded.

        Raises:
            NotFoundError: If the transaction, a party or a product doesn't exist
            ValidationError: If an edited field is invalid
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        changes = {}
        if date is not None:
            changes["date"] = normalize_date(date)
        if category is not None:
            changes["category"] = parse_category(category)
        if amount is not None:
            changes["amount"] = parse_amount(amount).quantize(COST_PRECISION, rounding=ROUND_HALF_UP)
        if description is not None:
            changes["description"] = description
        if kind is not None:
            changes["kind"] = parse_kind(kind)
        if customer_id is not None:
            changes["customer_id"] = customer_id
        if supplier_id is not None:
            changes["supplier_id"] = supplier_id
        if line_items is not None:
            changes["line_items"] = tuple(self._check_line_items(line_items))
        if settlement_channel is not None:
            changes["settlement_channel"] = parse_channel(settlement_channel)

        self._check_parties(customer_id, supplier_id)
        self.db.replace_transaction(replace(txn, **changes))

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Args:
            transaction_id: Transaction ID to delete

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        self.db.delete_transaction(transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Union[str, TransactionCategory, None] = None,
        customer_id: Optional[int] = None,
        supplier_id: Optional[int] = None,
    ) -> list[TransactionEntity]:
        """List transactions with filters, newest first.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            category: Optional category or category label
            customer_id: Optional customer ID filter
            supplier_id: Optional supplier ID filter

        Returns:
            List of transaction entities
        """
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            category=parse_category(category) if category is not None else None,
            customer_id=customer_id,
            supplier_id=supplier_id,
        )
