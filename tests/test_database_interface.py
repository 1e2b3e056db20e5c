"""Tests for Database interface returning domain models."""

from dataclasses import replace
from datetime import date
from decimal import Decimal

import pytest

from microbooks.domain import entities
from microbooks.domain.categories import TransactionCategory
from microbooks.domain.entities import LineItem, PartyRole, SettlementChannel, TransactionKind
from microbooks.domain.errors import NotFoundError


def add_sale(db, on, amount="100", items=(), customer_id=None):
    return db.create_transaction(
        date=on,
        description="Sale",
        amount=Decimal(amount),
        kind=TransactionKind.INCOME,
        category=TransactionCategory.SALE,
        customer_id=customer_id,
        line_items=items,
    )


class TestDatabaseInterface:
    """Tests to verify Database interface returns domain models."""

    def test_get_product_returns_domain_model(self, temp_db):
        """Test that get_product returns a domain Product entity."""
        product_id = temp_db.create_product(
            name="Rice 5kg",
            sale_price=Decimal("150"),
            cost_price=Decimal("100"),
            opening_stock=Decimal("10"),
            unit="bag",
            tax_category=entities.TaxCategory.DISTRIBUTION_GOODS,
        )

        product = temp_db.get_product(product_id)

        assert isinstance(product, entities.Product)
        assert product.id == product_id
        assert product.name == "Rice 5kg"
        assert product.cost_price == Decimal("100")
        assert product.opening_stock == Decimal("10")
        assert product.tax_category == entities.TaxCategory.DISTRIBUTION_GOODS

    def test_get_missing_product_returns_none(self, temp_db):
        assert temp_db.get_product(999) is None

    def test_update_product_keeps_four_decimal_cost(self, temp_db):
        """Test blended costs survive a round trip through the database."""
        product_id = temp_db.create_product(name="Oil", cost_price=Decimal("1"))
        product = temp_db.get_product(product_id)

        temp_db.update_product(
            replace(product, cost_price=Decimal("155.5556"))
        )

        assert temp_db.get_product(product_id).cost_price == Decimal("155.5556")

    def test_delete_missing_product_raises(self, temp_db):
        with pytest.raises(NotFoundError):
            temp_db.delete_product(999)

    def test_parties_are_separated_by_role(self, temp_db):
        """Test customers and suppliers live in separate lists."""
        customer_id = temp_db.create_party(role=PartyRole.CUSTOMER, name="Lan")
        temp_db.create_party(role=PartyRole.SUPPLIER, name="Lan")

        customers = temp_db.list_parties(PartyRole.CUSTOMER)
        suppliers = temp_db.list_parties(PartyRole.SUPPLIER)

        assert [p.role for p in customers] == [PartyRole.CUSTOMER]
        assert [p.role for p in suppliers] == [PartyRole.SUPPLIER]
        assert temp_db.get_party(PartyRole.SUPPLIER, customer_id) is None
        assert temp_db.get_party_by_name(PartyRole.CUSTOMER, "Lan").id == customer_id

    def test_get_transaction_returns_domain_model(self, temp_db):
        """Test that get_transaction returns a domain Transaction with line items."""
        txn_id = add_sale(
            temp_db,
            date(2024, 1, 15),
            amount="310",
            items=[LineItem(2, Decimal("2"), Decimal("150")), LineItem(1, Decimal("1"), Decimal("10"))],
            customer_id=4,
        )

        txn = temp_db.get_transaction(txn_id)

        assert isinstance(txn, entities.Transaction)
        assert txn.date == date(2024, 1, 15)
        assert txn.amount == Decimal("310")
        assert txn.category == TransactionCategory.SALE
        assert txn.customer_id == 4
        assert [item.product_id for item in txn.line_items] == [2, 1]

    def test_create_transaction_with_updated_products(self, temp_db):
        """Test product cost updates are stored with the transaction."""
        product_id = temp_db.create_product(name="Rice", cost_price=Decimal("100"))
        product = temp_db.get_product(product_id)
        updated = replace(product, cost_price=Decimal("150"))

        temp_db.create_transaction(
            date=date(2024, 1, 1),
            description="Restock",
            amount=Decimal("200"),
            kind=TransactionKind.EXPENSE,
            category=TransactionCategory.PURCHASE,
            line_items=[LineItem(product_id, Decimal("1"), Decimal("200"))],
            updated_products=[updated],
        )

        assert temp_db.get_product(product_id).cost_price == Decimal("150")

    def test_create_transaction_rolls_back_on_missing_product(self, temp_db):
        """Test nothing is stored when a product update fails."""
        ghost = entities.Product(
            id=42,
            name="Ghost",
            sale_price=Decimal("0"),
            cost_price=Decimal("1"),
            opening_stock=Decimal("0"),
            unit="",
        )
        with pytest.raises(NotFoundError):
            temp_db.create_transaction(
                date=date(2024, 1, 1),
                description="Restock",
                amount=Decimal("1"),
                kind=TransactionKind.EXPENSE,
                category=TransactionCategory.PURCHASE,
                updated_products=[ghost],
            )

        assert temp_db.list_transactions() == []

    def test_replace_transaction(self, temp_db):
        txn_id = add_sale(temp_db, date(2024, 1, 15), items=[LineItem(1, Decimal("1"), Decimal("100"))])
        txn = temp_db.get_transaction(txn_id)

        temp_db.replace_transaction(
            replace(
                txn,
                amount=Decimal("50"),
                line_items=(),
                settlement_channel=SettlementChannel.BANK,
            )
        )

        stored = temp_db.get_transaction(txn_id)
        assert stored.amount == Decimal("50")
        assert stored.line_items == ()
        assert stored.settlement_channel == SettlementChannel.BANK

    def test_delete_transaction(self, temp_db):
        txn_id = add_sale(temp_db, date(2024, 1, 15))
        temp_db.delete_transaction(txn_id)
        assert temp_db.get_transaction(txn_id) is None
        with pytest.raises(NotFoundError):
            temp_db.delete_transaction(txn_id)

    def test_list_transactions_filters_newest_first(self, temp_db):
        """Test list_transactions applies filters and sorts newest first."""
        first = add_sale(temp_db, date(2024, 1, 1), customer_id=1)
        second = add_sale(temp_db, date(2024, 2, 1), customer_id=2)
        third = add_sale(temp_db, date(2024, 3, 1), customer_id=1)

        assert [t.id for t in temp_db.list_transactions()] == [third, second, first]
        assert [t.id for t in temp_db.list_transactions(customer_id=1)] == [third, first]
        assert [
            t.id
            for t in temp_db.list_transactions(
                start_date=date(2024, 1, 15), end_date=date(2024, 2, 29)
            )
        ] == [second]
        assert temp_db.list_transactions(category=TransactionCategory.PURCHASE) == []

    def test_load_snapshot(self, temp_db):
        """Test load_snapshot returns everything in date order."""
        later = add_sale(temp_db, date(2024, 3, 1))
        earlier = add_sale(temp_db, date(2024, 1, 1))
        temp_db.create_product(name="Rice")
        temp_db.create_party(role=PartyRole.CUSTOMER, name="Lan")

        snapshot = temp_db.load_snapshot()

        assert isinstance(snapshot, entities.Snapshot)
        assert [t.id for t in snapshot.transactions] == [earlier, later]
        assert len(snapshot.products) == 1
        assert len(snapshot.customers) == 1
        assert snapshot.suppliers == ()
