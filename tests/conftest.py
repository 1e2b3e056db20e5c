"""Shared pytest fixtures for microbooks tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from microbooks.database.factories import create_sqlite_database
from microbooks.domain.categories import TransactionCategory
from microbooks.domain.entities import (
    LineItem,
    Party,
    PartyRole,
    Product,
    SettlementChannel,
    Snapshot,
    Transaction,
    TransactionKind,
)
from microbooks.domain.party import PartyService
from microbooks.domain.product import ProductService
from microbooks.domain.rates import load_rate_table
from microbooks.domain.transaction import TransactionService, default_kind


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def product_service(temp_db):
    """Create a ProductService with a temporary database."""
    return ProductService(temp_db)


@pytest.fixture
def party_service(temp_db):
    """Create a PartyService with a temporary database."""
    return PartyService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def rates():
    """The packaged default rate table."""
    return load_rate_table()


@pytest.fixture
def make_product():
    """Build Product entities with sensible defaults."""

    def build(id=1, name=None, cost_price="0", opening_stock="0", sale_price="0", tax_category=None):
        return Product(
            id=id,
            name=name or f"Product {id}",
            sale_price=Decimal(sale_price),
            cost_price=Decimal(cost_price),
            opening_stock=Decimal(opening_stock),
            unit="pcs",
            tax_category=tax_category,
        )

    return build


@pytest.fixture
def make_txn():
    """Build Transaction entities.

    Amount defaults to the line item total; kind defaults from the category.
    Line items are (product_id, quantity, unit_price) tuples.
    """

    def build(
        id,
        on,
        category,
        amount=None,
        items=(),
        kind=None,
        customer_id=None,
        supplier_id=None,
        channel=None,
        description="",
    ):
        line_items = tuple(
            LineItem(product_id, Decimal(str(qty)), Decimal(str(price)))
            for product_id, qty, price in items
        )
        if amount is None:
            amount = sum((item.value for item in line_items), Decimal("0"))
        return Transaction(
            id=id,
            date=on,
            description=description or f"{TransactionCategory(category).value} {id}",
            amount=Decimal(str(amount)),
            kind=kind or default_kind(category),
            category=category,
            customer_id=customer_id,
            supplier_id=supplier_id,
            line_items=line_items,
            settlement_channel=SettlementChannel(channel) if channel else None,
        )

    return build


@pytest.fixture
def customer():
    return Party(id=1, name="Ms. Lan", role=PartyRole.CUSTOMER)


@pytest.fixture
def supplier():
    return Party(id=1, name="Minh Phat Wholesale", role=PartyRole.SUPPLIER)


@pytest.fixture
def sample_snapshot(make_product, make_txn, customer, supplier):
    """A small shop's year: opening stock, purchases, sales, costs and payments."""
    C = TransactionCategory
    products = (
        make_product(1, "Rice 5kg", cost_price="100", opening_stock="10", sale_price="150"),
        make_product(2, "Cooking oil", cost_price="40", opening_stock="0", sale_price="60"),
    )
    transactions = (
        make_txn(1, date(2023, 12, 20), C.SALE, items=[(1, 2, 150)], customer_id=1),
        make_txn(2, date(2024, 1, 5), C.PURCHASE, items=[(1, 10, 200)], supplier_id=1),
        make_txn(3, date(2024, 2, 10), C.SALE, items=[(1, 4, 150), (2, 1, 60)], customer_id=1),
        make_txn(4, date(2024, 3, 31), C.ELECTRICITY, amount=500),
        make_txn(5, date(2024, 4, 2), C.CUSTOMER_DEBT_COLLECTION, amount=300, customer_id=1),
        make_txn(6, date(2024, 4, 15), C.TAX_PAYMENT, amount=5),
        make_txn(7, date(2024, 5, 1), C.LABOR_COST, amount=1000),
        make_txn(8, date(2024, 5, 5), C.SALARY_PAYMENT, amount=1000, channel="BANK"),
        make_txn(9, date(2024, 6, 30), C.SUPPLIER_DEBT_PAYMENT, amount=1000, supplier_id=1),
    )
    return Snapshot(
        transactions=transactions,
        products=products,
        customers=(customer,),
        suppliers=(supplier,),
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
