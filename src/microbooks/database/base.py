"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from microbooks.domain.categories import TransactionCategory
from microbooks.domain.entities import (
    LineItem,
    Party,
    PartyRole,
    Product,
    SettlementChannel,
    Snapshot,
    TaxCategory,
    Transaction,
    TransactionKind,
)


class Database(ABC):
    """Abstract database interface for microbooks."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Product operations
    @abstractmethod
    def create_product(
        self,
        name: str,
        sale_price: Decimal,
        cost_price: Decimal,
        opening_stock: Decimal,
        unit: str,
        tax_category: Optional[TaxCategory] = None,
        vat_percent: Optional[Decimal] = None,
        sku: Optional[str] = None,
    ) -> int:
        """Create a product. Returns product ID."""
        pass

    @abstractmethod
    def get_product(self, product_id: int) -> Optional[Product]:
        """Get product by ID."""
        pass

    @abstractmethod
    def list_products(self) -> list[Product]:
        """List all products."""
        pass

    @abstractmethod
    def update_product(self, product: Product) -> None:
        """Overwrite a stored product with the given value."""
        pass

    @abstractmethod
    def delete_product(self, product_id: int) -> None:
        """Delete a product. Line items referencing it are kept."""
        pass

    # Party operations
    @abstractmethod
    def create_party(
        self,
        role: PartyRole,
        name: str,
        classification: Optional[str] = None,
        phone: Optional[str] = None,
        address: Optional[str] = None,
        tax_id: Optional[str] = None,
        bank_name: Optional[str] = None,
        bank_account_number: Optional[str] = None,
    ) -> int:
        """Create a customer or supplier. Returns party ID."""
        pass

    @abstractmethod
    def get_party(self, role: PartyRole, party_id: int) -> Optional[Party]:
        """Get customer or supplier by ID."""
        pass

    @abstractmethod
    def get_party_by_name(self, role: PartyRole, name: str) -> Optional[Party]:
        """Get customer or supplier by name."""
        pass

    @abstractmethod
    def list_parties(self, role: PartyRole) -> list[Party]:
        """List customers or suppliers."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        date: date,
        description: str,
        amount: Decimal,
        kind: TransactionKind,
        category: TransactionCategory,
        customer_id: Optional[int] = None,
        supplier_id: Optional[int] = None,
        line_items: Sequence[LineItem] = (),
        settlement_channel: Optional[SettlementChannel] = None,
        updated_products: Sequence[Product] = (),
    ) -> int:
        """Create a transaction. Returns transaction ID.

        Products in updated_products are written in the same commit, so a
        purchase and the cost changes it causes are stored together.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def replace_transaction(self, transaction: Transaction) -> None:
        """Overwrite a stored transaction, line items included."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category: Optional[TransactionCategory] = None,
        customer_id: Optional[int] = None,
        supplier_id: Optional[int] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            category: Optional category filter
            customer_id: Optional customer filter
            supplier_id: Optional supplier filter
        """
        pass

    @abstractmethod
    def load_snapshot(self) -> Snapshot:
        """Read every transaction, product, customer and supplier.

        Transactions are returned in date order, ties broken by ID.
        """
        pass
