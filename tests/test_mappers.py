"""Tests for database mappers."""

from datetime import date
from decimal import Decimal

from microbooks.database.mappers import (
    enum_name,
    line_items_to_orm,
    party_to_domain,
    product_to_domain,
    transaction_to_domain,
)
from microbooks.database.models import (
    LineItem as ORMLineItem,
    Party as ORMParty,
    Product as ORMProduct,
    Transaction as ORMTransaction,
)
from microbooks.domain.categories import TransactionCategory
from microbooks.domain.entities import (
    LineItem,
    Party,
    PartyRole,
    Product,
    SettlementChannel,
    TaxCategory,
    Transaction,
    TransactionKind,
)


class TestProductMapper:
    """Tests for Product mapper."""

    def test_product_to_domain(self):
        """Test converting ORM Product to domain Product."""
        orm_product = ORMProduct(
            id=1,
            name="Rice 5kg",
            sku="RICE-5",
            unit="bag",
            sale_price=Decimal("150"),
            cost_price=Decimal("100.5000"),
            opening_stock=Decimal("10"),
            tax_category="SERVICES_NO_MATERIALS",
        )
        product = product_to_domain(orm_product)

        assert isinstance(product, Product)
        assert product.id == 1
        assert product.cost_price == Decimal("100.5")
        assert product.tax_category == TaxCategory.SERVICES_NO_MATERIALS
        assert product.sku == "RICE-5"

    def test_product_without_tax_category(self):
        """Test a missing tax category stays None."""
        orm_product = ORMProduct(
            id=2,
            name="Soap",
            unit=None,
            sale_price=1,
            cost_price=0,
            opening_stock=0,
            tax_category=None,
        )
        product = product_to_domain(orm_product)

        assert product.tax_category is None
        assert product.unit == ""
        assert product.sale_price == Decimal("1")


class TestPartyMapper:
    """Tests for Party mapper."""

    def test_party_to_domain(self):
        """Test converting ORM Party to domain Party."""
        orm_party = ORMParty(id=3, role="supplier", name="Minh Phat", phone="0901")
        party = party_to_domain(orm_party)

        assert isinstance(party, Party)
        assert party.role == PartyRole.SUPPLIER
        assert party.phone == "0901"
        assert party.tax_id is None


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_transaction_to_domain(self):
        """Test converting ORM Transaction with line items."""
        orm_transaction = ORMTransaction(
            id=7,
            date=date(2024, 1, 15),
            description="Sold rice",
            amount=Decimal("300.00"),
            kind="INCOME",
            category="SALE",
            customer_id=2,
            settlement_channel="BANK",
            line_items=[
                ORMLineItem(position=0, product_id=1, quantity=Decimal("2"), unit_price=Decimal("150")),
            ],
        )
        txn = transaction_to_domain(orm_transaction)

        assert isinstance(txn, Transaction)
        assert txn.kind == TransactionKind.INCOME
        assert txn.category == TransactionCategory.SALE
        assert txn.settlement_channel == SettlementChannel.BANK
        assert txn.line_items == (LineItem(1, Decimal("2"), Decimal("150")),)
        assert txn.supplier_id is None

    def test_legacy_category_label(self):
        """Test rows stored with a free-text label still resolve."""
        orm_transaction = ORMTransaction(
            id=8,
            date=date(2024, 1, 15),
            description=None,
            amount=Decimal("50"),
            kind="EXPENSE",
            category="Chi phí điện",
        )
        txn = transaction_to_domain(orm_transaction)

        assert txn.category == TransactionCategory.ELECTRICITY
        assert txn.description == ""
        assert txn.settlement_channel is None
        assert txn.channel == SettlementChannel.CASH

    def test_unknown_category_label(self):
        orm_transaction = ORMTransaction(
            id=9, date=date(2024, 1, 15), amount=1, kind="EXPENSE", category="Gifts"
        )
        assert transaction_to_domain(orm_transaction).category == TransactionCategory.OTHER


class TestToORM:
    def test_line_items_keep_position(self):
        rows = line_items_to_orm(
            [LineItem(5, Decimal("1"), Decimal("2")), LineItem(3, Decimal("4"), Decimal("5"))]
        )
        assert [(row.position, row.product_id) for row in rows] == [(0, 5), (1, 3)]

    def test_enum_name(self):
        assert enum_name(TransactionCategory.SUPPLIER_RETURN) == "SUPPLIER_RETURN"
        assert enum_name(None) is None
