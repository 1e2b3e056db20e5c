"""Stock replay: quantity on hand derived from the transaction history."""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from microbooks.domain.categories import (
    ISSUE_CATEGORIES,
    RECEIPT_CATEGORIES,
    TransactionCategory,
)
from microbooks.domain.entities import Snapshot, StockMovement, Transaction, ZERO
from microbooks.domain.periods import normalize_date, sort_by_date

logger = logging.getLogger(__name__)


def movement_sign(category: TransactionCategory) -> int:
    """+1 for receipts, -1 for issues, 0 for categories that do not move stock."""
    if category in RECEIPT_CATEGORIES:
        return 1
    if category in ISSUE_CATEGORIES:
        return -1
    return 0


def replay_quantity(
    transactions: Iterable[Transaction], product_id: int, opening: Decimal = ZERO
) -> Decimal:
    """Apply every receipt and issue of a product to an opening quantity."""
    quantity = opening
    for txn in transactions:
        sign = movement_sign(txn.category)
        if sign == 0:
            continue
        for item in txn.line_items:
            if item.product_id == product_id:
                quantity += sign * item.quantity
    return quantity


class StockService:
    """Service for deriving quantities on hand.

    Nothing is cached: the history may be edited or deleted retroactively,
    so every call replays the snapshot.
    """

    def __init__(self, snapshot: Snapshot):
        """Initialize stock service.

        Args:
            snapshot: Read-only snapshot of transactions and products
        """
        self.snapshot = snapshot

    def current_stock(self, product_id: int, as_of: Optional[date] = None) -> Decimal:
        """Quantity on hand for a product.

        Args:
            product_id: Product ID
            as_of: If given, only transactions dated strictly before it count

        Returns:
            Opening stock plus receipts minus issues; 0 for unknown products
        """
        product = self.snapshot.get_product(product_id)
        if product is None:
            logger.debug("Stock requested for unknown product %s", product_id)
            return ZERO

        transactions: Iterable[Transaction] = self.snapshot.transactions
        if as_of is not None:
            cutoff = normalize_date(as_of)
            transactions = (t for t in transactions if normalize_date(t.date) < cutoff)
        return replay_quantity(transactions, product_id, opening=product.opening_stock)

    def movements(self, product_id: int) -> list[StockMovement]:
        """Signed per-line stock changes for a product, in date order."""
        result = []
        for txn in sort_by_date(self.snapshot.transactions):
            sign = movement_sign(txn.category)
            if sign == 0:
                continue
            for item in txn.line_items_for(product_id):
                result.append(
                    StockMovement(
                        transaction_id=txn.id,
                        date=txn.date,
                        category=txn.category,
                        quantity=sign * item.quantity,
                        unit_price=item.unit_price,
                    )
                )
        return result

    def stock_levels(self, as_of: Optional[date] = None) -> dict[int, Decimal]:
        """Quantity on hand for every catalog product."""
        return {
            product.id: self.current_stock(product.id, as_of=as_of)
            for product in self.snapshot.products
        }
