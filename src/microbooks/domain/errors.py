"""Shared domain error messages and error types."""

from enum import Enum


class ErrorKind(str, Enum):
    """Machine-readable error categories."""

    VALIDATION = "Validation"
    NOT_FOUND = "NotFound"
    CONFLICT = "Conflict"
    INVALID_QUANTITY = "InvalidQuantity"
    INVALID_PERIOD = "InvalidPeriod"
    INCONSISTENT_LINE_ITEM = "InconsistentLineItem"


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """

    kind = ErrorKind.VALIDATION


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""

    kind = ErrorKind.NOT_FOUND


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""

    kind = ErrorKind.CONFLICT


class InvalidQuantityError(ValidationError):
    """Receipt quantity is zero or negative."""

    kind = ErrorKind.INVALID_QUANTITY


class InvalidPeriodError(ValidationError):
    """Reporting year or date range is out of bounds."""

    kind = ErrorKind.INVALID_PERIOD


class InconsistentLineItemError(ValidationError):
    """Line item price or quantity is non-numeric or negative."""

    kind = ErrorKind.INCONSISTENT_LINE_ITEM


def product_not_found(product_id: int) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def customer_not_found(customer_id: int) -> str:
    """Return message for missing customer."""
    return f"Customer {customer_id} not found"


def supplier_not_found(supplier_id: int) -> str:
    """Return message for missing supplier."""
    return f"Supplier {supplier_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def invalid_receipt_quantity(quantity) -> str:
    """Return message for a non-positive receipt quantity."""
    return f"Receipt quantity must be positive, got {quantity}"


def invalid_year(year: int) -> str:
    """Return message for a reporting year outside the supported range."""
    return f"Reporting year {year} is out of range (1901-2099)"


def invalid_line_item(product_id: int, field: str, value) -> str:
    """Return message for a malformed line item."""
    return f"Line item for product {product_id} has invalid {field}: {value!r}"


def duplicate_party_name(role: str, name: str) -> str:
    """Return message for duplicate customer or supplier names."""
    return f"{role.capitalize()} with name '{name}' already exists"
