"""SQLAlchemy models for microbooks database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()

# Quantities, unit prices and amounts carry the 4 decimal places of a blended cost.
Quantity = Numeric(18, 4)
Money = Numeric(18, 4)


class Product(Base):
    """Catalog product model."""

    __tablename__ = "products"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False)
    sku = Column(String, nullable=True)
    unit = Column(String, nullable=False, default="")
    sale_price = Column(Quantity, nullable=False, default=0)
    cost_price = Column(Quantity, nullable=False, default=0)
    opening_stock = Column(Quantity, nullable=False, default=0)
    tax_category = Column(String, nullable=True)
    vat_percent = Column(Numeric(5, 2), nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class Party(Base):
    """Customer or supplier model."""

    __tablename__ = "parties"

    id = Column(Integer, primary_key=True)
    role = Column(String, nullable=False)
    name = Column(String, nullable=False)
    classification = Column(String, nullable=True)
    phone = Column(String, nullable=True)
    address = Column(String, nullable=True)
    tax_id = Column(String, nullable=True)
    bank_name = Column(String, nullable=True)
    bank_account_number = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("role", "name", name="uq_party_role_name"),)


class Transaction(Base):
    """Transaction model.

    Party and product references are plain integers: deleting a catalog
    entry must leave the history readable.
    """

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False)
    description = Column(String, nullable=False, default="")
    amount = Column(Money, nullable=False)
    kind = Column(String, nullable=False)
    category = Column(String, nullable=False)
    customer_id = Column(Integer, nullable=True)
    supplier_id = Column(Integer, nullable=True)
    settlement_channel = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    line_items = relationship(
        "LineItem",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="LineItem.position",
    )


class LineItem(Base):
    """Product line of a transaction."""

    __tablename__ = "line_items"

    id = Column(Integer, primary_key=True)
    transaction_id = Column(Integer, ForeignKey("transactions.id"), nullable=False)
    position = Column(Integer, nullable=False)
    product_id = Column(Integer, nullable=False)
    quantity = Column(Quantity, nullable=False)
    unit_price = Column(Quantity, nullable=False)

    # Relationships
    transaction = relationship("Transaction", back_populates="line_items")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
