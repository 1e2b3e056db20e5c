"""Weighted-average costing."""

import logging
from dataclasses import replace
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Optional, Sequence

from microbooks.domain.entities import LineItem, Product, Snapshot
from microbooks.domain.errors import (
    InconsistentLineItemError,
    InvalidQuantityError,
    NotFoundError,
    invalid_line_item,
    invalid_receipt_quantity,
    product_not_found,
)
from microbooks.domain.stock import StockService

logger = logging.getLogger(__name__)

COST_PRECISION = Decimal("0.0001")


def to_decimal(value: Any, product_id: int, field: str) -> Decimal:
    """Coerce a line-item number to Decimal.

    Raises:
        InconsistentLineItemError: If the value is not a finite number
    """
    if isinstance(value, bool):
        raise InconsistentLineItemError(invalid_line_item(product_id, field, value))
    if isinstance(value, Decimal):
        number = value
    elif isinstance(value, (int, str)):
        try:
            number = Decimal(value)
        except InvalidOperation:
            raise InconsistentLineItemError(
                invalid_line_item(product_id, field, value)
            ) from None
    elif isinstance(value, float):
        number = Decimal(str(value))
    else:
        raise InconsistentLineItemError(invalid_line_item(product_id, field, value))
    if not number.is_finite():
        raise InconsistentLineItemError(invalid_line_item(product_id, field, value))
    return number


def validate_line_item(item: LineItem) -> LineItem:
    """Check a line item has a positive quantity and a non-negative price.

    Returns:
        The line item with Decimal quantity and price

    Raises:
        InconsistentLineItemError: If quantity or price is malformed or out of range
    """
    quantity = to_decimal(item.quantity, item.product_id, "quantity")
    unit_price = to_decimal(item.unit_price, item.product_id, "unit_price")
    if quantity <= 0:
        raise InconsistentLineItemError(invalid_line_item(item.product_id, "quantity", quantity))
    if unit_price < 0:
        raise InconsistentLineItemError(
            invalid_line_item(item.product_id, "unit_price", unit_price)
        )
    return LineItem(product_id=item.product_id, quantity=quantity, unit_price=unit_price)


def blend(
    current_stock: Decimal,
    current_cost: Decimal,
    receipt_qty: Decimal,
    receipt_unit_price: Decimal,
) -> Decimal:
    """Blend a receipt into the weighted-average unit cost.

    With no stock on hand (zero or negative) the receipt price becomes the
    new cost outright.

    Args:
        current_stock: Quantity on hand before the receipt
        current_cost: Current weighted-average unit cost
        receipt_qty: Quantity received, must be positive
        receipt_unit_price: Unit price paid for the receipt

    Returns:
        New unit cost, rounded to 4 decimal places

    Raises:
        InvalidQuantityError: If receipt_qty is not positive
        InconsistentLineItemError: If receipt_unit_price is negative
    """
    if receipt_qty <= 0:
        raise InvalidQuantityError(invalid_receipt_quantity(receipt_qty))
    if receipt_unit_price < 0:
        raise InconsistentLineItemError(f"Receipt unit price must not be negative, got {receipt_unit_price}")

    if current_stock <= 0:
        new_cost = Decimal(receipt_unit_price)
    else:
        total_value = current_stock * current_cost + receipt_qty * receipt_unit_price
        new_cost = total_value / (current_stock + receipt_qty)
    return new_cost.quantize(COST_PRECISION, rounding=ROUND_HALF_UP)


class CostingService:
    """Service for applying receipts to product costs.

    Products are never modified in place; callers receive new Product values
    and are responsible for persisting them, one receipt at a time and in
    date order per product.
    """

    def __init__(self, snapshot: Snapshot):
        """Initialize costing service.

        Args:
            snapshot: Read-only snapshot the current stock is replayed from
        """
        self.snapshot = snapshot
        self.stock = StockService(snapshot)

    def apply_receipt(
        self,
        product_id: int,
        quantity: Decimal,
        unit_price: Decimal,
        as_of: Optional[date] = None,
    ) -> Product:
        """Blend one receipt into a product's cost.

        Args:
            product_id: Product ID
            quantity: Quantity received
            unit_price: Unit price paid
            as_of: Replay stock only from transactions before this date

        Returns:
            New Product value with the blended cost_price

        Raises:
            NotFoundError: If the product does not exist
            InvalidQuantityError: If quantity is not positive
            InconsistentLineItemError: If price is malformed or negative
        """
        quantity = to_decimal(quantity, product_id, "quantity")
        unit_price = to_decimal(unit_price, product_id, "unit_price")

        product = self.snapshot.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))

        stock = self.stock.current_stock(product_id, as_of=as_of)
        new_cost = blend(stock, product.cost_price, quantity, unit_price)
        logger.info(
            "Product %s cost %s -> %s (stock %s, received %s @ %s)",
            product_id,
            product.cost_price,
            new_cost,
            stock,
            quantity,
            unit_price,
        )
        return replace(product, cost_price=new_cost)

    def apply_receipts(
        self, line_items: Sequence[LineItem], as_of: Optional[date] = None
    ) -> dict[int, Product]:
        """Blend several receipt lines in order.

        Each line sees the stock and cost left by the previous ones, so a
        product listed twice is blended twice. All lines are validated before
        any blending happens.

        Returns:
            Updated products keyed by product ID, in first-seen order

        Raises:
            NotFoundError: If any product does not exist
            InvalidQuantityError: If any quantity is not positive
            InconsistentLineItemError: If any price is malformed or negative
        """
        prepared = []
        for item in line_items:
            quantity = to_decimal(item.quantity, item.product_id, "quantity")
            unit_price = to_decimal(item.unit_price, item.product_id, "unit_price")
            if quantity <= 0:
                raise InvalidQuantityError(invalid_receipt_quantity(quantity))
            if unit_price < 0:
                raise InconsistentLineItemError(
                    invalid_line_item(item.product_id, "unit_price", unit_price)
                )
            if self.snapshot.get_product(item.product_id) is None:
                raise NotFoundError(product_not_found(item.product_id))
            prepared.append((item.product_id, quantity, unit_price))

        updated: dict[int, Product] = {}
        stock_on_hand: dict[int, Decimal] = {}
        for product_id, quantity, unit_price in prepared:
            product = updated.get(product_id) or self.snapshot.get_product(product_id)
            if product_id not in stock_on_hand:
                stock_on_hand[product_id] = self.stock.current_stock(product_id, as_of=as_of)
            new_cost = blend(stock_on_hand[product_id], product.cost_price, quantity, unit_price)
            updated[product_id] = replace(product, cost_price=new_cost)
            stock_on_hand[product_id] += quantity

        logger.info("Applied %d receipt line(s) to %d product(s)", len(prepared), len(updated))
        return updated
