"""Product domain service."""

from dataclasses import replace
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from microbooks.domain.entities import ZERO, Product, TaxCategory
from microbooks.domain.errors import NotFoundError, ValidationError, product_not_found

if TYPE_CHECKING:
    from microbooks.database.base import Database


def _non_negative(value, field: str) -> Decimal:
    number = Decimal(value)
    if number < 0:
        raise ValidationError(f"Product {field} must not be negative, got {number}")
    return number


def parse_tax_category(value) -> Optional[TaxCategory]:
    """Resolve a tax category given as a member or a member name.

    Raises:
        ValidationError: If the name is not a known tax category
    """
    if value is None or isinstance(value, TaxCategory):
        return value
    try:
        return TaxCategory[value.strip().upper().replace("-", "_")]
    except KeyError:
        raise ValidationError(f"Unknown tax category '{value}'") from None


class ProductService:
    """Service for managing the product catalog."""

    def __init__(self, db: "Database"):
        """Initialize product service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_product(
        self,
        name: str,
        sale_price: Decimal = ZERO,
        cost_price: Decimal = ZERO,
        opening_stock: Decimal = ZERO,
        unit: str = "",
        tax_category: Optional[TaxCategory] = None,
        vat_percent: Optional[Decimal] = None,
        sku: Optional[str] = None,
    ) -> int:
        """Create a new product.

        Args:
            name: Product name
            sale_price: Default selling price
            cost_price: Starting unit cost; later changed only by purchases
            opening_stock: Quantity on hand before the first transaction
            unit: Unit of measure
            tax_category: Tax category; None means distribution of goods
            vat_percent: Optional VAT percentage added to sale totals
            sku: Optional stock keeping unit

        Returns:
            Product ID

        Raises:
            ValidationError: If the name is empty or a number is negative
        """
        if not name or not name.strip():
            raise ValidationError("Product name must not be empty")

        return self.db.create_product(
            name=name.strip(),
            sale_price=_non_negative(sale_price, "sale price"),
            cost_price=_non_negative(cost_price, "cost price"),
            opening_stock=_non_negative(opening_stock, "opening stock"),
            unit=unit,
            tax_category=parse_tax_category(tax_category),
            vat_percent=vat_percent,
            sku=sku,
        )

    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID.

        Args:
            product_id: Product ID

        Returns:
            Product entity or None if not found
        """
        return self.db.get_product(product_id)

    def list_products(self) -> list[Product]:
        """List all products.

        Returns:
            List of product entities
        """
        return self.db.list_products()

    def update_product(
        self,
        product_id: int,
        name: Optional[str] = None,
        sale_price: Optional[Decimal] = None,
        unit: Optional[str] = None,
        tax_category: Optional[TaxCategory] = None,
        sku: Optional[str] = None,
    ) -> None:
        """Update catalog fields of a product.

        The cost price is not editable here; it moves only when stock is
        received.

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If the new name is empty or the price is negative
        """
        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))

        changes = {}
        if name is not None:
            if not name.strip():
                raise ValidationError("Product name must not be empty")
            changes["name"] = name.strip()
        if sale_price is not None:
            changes["sale_price"] = _non_negative(sale_price, "sale price")
        if unit is not None:
            changes["unit"] = unit
        if tax_category is not None:
            changes["tax_category"] = parse_tax_category(tax_category)
        if sku is not None:
            changes["sku"] = sku

        self.db.update_product(replace(product, **changes))

    def delete_product(self, product_id: int) -> None:
        """Delete a product from the catalog.

        Transactions that reference it are kept and keep projecting; the
        product then counts as unknown.

        Raises:
            NotFoundError: If product doesn't exist
        """
        product = self.db.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))

        self.db.delete_product(product_id)
