"""Mapper functions to convert between domain models and SQLAlchemy models.

Enums are stored by member name. Categories go through the label parser so
rows written by older versions with free-text labels still load.
"""

from decimal import Decimal
from typing import Optional

from microbooks.domain import entities as domain
from microbooks.domain.categories import parse_category
from microbooks.database.models import (
    LineItem as ORMLineItem,
    Party as ORMParty,
    Product as ORMProduct,
    Transaction as ORMTransaction,
)


def _decimal(value) -> Decimal:
    if value is None:
        return domain.ZERO
    return value if isinstance(value, Decimal) else Decimal(str(value))


def enum_name(value) -> Optional[str]:
    """Storage form of an optional enum member."""
    return value.name if value is not None else None


def product_to_domain(orm_product: ORMProduct) -> domain.Product:
    """Convert SQLAlchemy Product model to domain Product entity."""
    tax_category = None
    if orm_product.tax_category:
        tax_category = domain.TaxCategory[orm_product.tax_category]
    return domain.Product(
        id=orm_product.id,
        name=orm_product.name,
        sale_price=_decimal(orm_product.sale_price),
        cost_price=_decimal(orm_product.cost_price),
        opening_stock=_decimal(orm_product.opening_stock),
        unit=orm_product.unit or "",
        tax_category=tax_category,
        vat_percent=orm_product.vat_percent,
        sku=orm_product.sku,
    )


def party_to_domain(orm_party: ORMParty) -> domain.Party:
    """Convert SQLAlchemy Party model to domain Party entity."""
    return domain.Party(
        id=orm_party.id,
        name=orm_party.name,
        role=domain.PartyRole(orm_party.role),
        classification=orm_party.classification,
        phone=orm_party.phone,
        address=orm_party.address,
        tax_id=orm_party.tax_id,
        bank_name=orm_party.bank_name,
        bank_account_number=orm_party.bank_account_number,
    )


def line_item_to_domain(orm_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    return domain.LineItem(
        product_id=orm_item.product_id,
        quantity=_decimal(orm_item.quantity),
        unit_price=_decimal(orm_item.unit_price),
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    channel = None
    if orm_transaction.settlement_channel:
        channel = domain.SettlementChannel[orm_transaction.settlement_channel]
    return domain.Transaction(
        id=orm_transaction.id,
        date=orm_transaction.date,
        description=orm_transaction.description or "",
        amount=_decimal(orm_transaction.amount),
        kind=domain.TransactionKind[orm_transaction.kind],
        category=parse_category(orm_transaction.category),
        customer_id=orm_transaction.customer_id,
        supplier_id=orm_transaction.supplier_id,
        line_items=tuple(line_item_to_domain(item) for item in orm_transaction.line_items),
        settlement_channel=channel,
    )


def line_items_to_orm(line_items) -> list[ORMLineItem]:
    """Build ORM line items from domain line items, keeping their order."""
    return [
        ORMLineItem(
            position=position,
            product_id=item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
        )
        for position, item in enumerate(line_items)
    ]
