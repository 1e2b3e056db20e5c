"""Customer and supplier domain service."""

from typing import TYPE_CHECKING, Optional

from microbooks.domain.entities import Party, PartyRole
from microbooks.domain.errors import ConflictError, ValidationError, duplicate_party_name

if TYPE_CHECKING:
    from microbooks.database.base import Database


class PartyService:
    """Service for managing customers and suppliers.

    Parties carry contact details only. What they owe or are owed is
    always derived from transactions by the debt module.
    """

    def __init__(self, db: "Database"):
        """Initialize party service.

        Args:
            db: Database instance
        """
        self.db = db

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
        """Create a customer or supplier.

        Returns:
            Party ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If a party with the same role and name exists
        """
        role = PartyRole(role)
        if not name or not name.strip():
            raise ValidationError(f"{role.value.capitalize()} name must not be empty")
        name = name.strip()

        if self.db.get_party_by_name(role, name) is not None:
            raise ConflictError(duplicate_party_name(role.value, name))

        return self.db.create_party(
            role=role,
            name=name,
            classification=classification,
            phone=phone,
            address=address,
            tax_id=tax_id,
            bank_name=bank_name,
            bank_account_number=bank_account_number,
        )

    def create_customer(self, name: str, **details) -> int:
        """Create a customer. Accepts the same details as create_party."""
        return self.create_party(PartyRole.CUSTOMER, name, **details)

    def create_supplier(self, name: str, **details) -> int:
        """Create a supplier. Accepts the same details as create_party."""
        return self.create_party(PartyRole.SUPPLIER, name, **details)

    def get_party(self, role: PartyRole, party_id: int) -> Optional[Party]:
        return self.db.get_party(PartyRole(role), party_id)

    def list_customers(self) -> list[Party]:
        return self.db.list_parties(PartyRole.CUSTOMER)

    def list_suppliers(self) -> list[Party]:
        return self.db.list_parties(PartyRole.SUPPLIER)
