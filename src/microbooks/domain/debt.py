"""Receivable and payable balances derived from the transaction history."""

import logging
from datetime import date
from decimal import Decimal
from typing import Optional

from microbooks.domain.categories import (
    CUSTOMER_CHARGE_CATEGORIES,
    CUSTOMER_CREDIT_CATEGORIES,
    SUPPLIER_CREDIT_CATEGORIES,
)
from microbooks.domain.entities import (
    ZERO,
    DebtInfo,
    PartyDebt,
    PartyRole,
    Snapshot,
    Transaction,
)
from microbooks.domain.periods import normalize_date, sort_by_date

logger = logging.getLogger(__name__)


def debt_effect(txn: Transaction, role: PartyRole) -> int:
    """+1 if the transaction adds to what the party owes (or is owed), -1 if
    it settles it, 0 if it does not touch the balance."""
    if role == PartyRole.CUSTOMER:
        if txn.category in CUSTOMER_CHARGE_CATEGORIES:
            return 1
        if txn.category in CUSTOMER_CREDIT_CATEGORIES:
            return -1
        return 0
    if txn.category in SUPPLIER_CREDIT_CATEGORIES:
        return -1
    return 1


def party_id_of(txn: Transaction, role: PartyRole) -> Optional[int]:
    return txn.customer_id if role == PartyRole.CUSTOMER else txn.supplier_id


class DebtService:
    """Service for outstanding balances per customer and supplier.

    Debt is a point-in-time figure, so the whole history is scanned rather
    than a reporting period.
    """

    def __init__(self, snapshot: Snapshot):
        """Initialize debt service.

        Args:
            snapshot: Read-only snapshot of transactions and parties
        """
        self.snapshot = snapshot

    def outstanding(
        self, party_id: int, role: PartyRole, today: Optional[date] = None
    ) -> DebtInfo:
        """Outstanding balance for one party and how long it has been unpaid.

        Args:
            party_id: Customer or supplier ID
            role: Whether party_id refers to a customer or a supplier
            today: Reference date for aging; defaults to the current date

        Returns:
            DebtInfo with the balance and the whole days since the balance
            last went from zero (or credit) to owing. A balance of zero or
            less is reported as amount 0 with no aging.
        """
        role = PartyRole(role)
        today = normalize_date(today) if today is not None else date.today()

        balance = ZERO
        debt_start: Optional[date] = None
        for txn in sort_by_date(self.snapshot.transactions):
            if party_id_of(txn, role) != party_id:
                continue
            effect = debt_effect(txn, role)
            if effect == 0:
                continue
            previous = balance
            balance += effect * txn.amount
            if previous <= 0 < balance:
                debt_start = normalize_date(txn.date)

        if balance <= 0:
            return DebtInfo(amount=ZERO, aging_days=None)

        aging_days = None
        if debt_start is not None:
            aging_days = max((today - debt_start).days, 0)
        return DebtInfo(amount=balance, aging_days=aging_days)

    def party_debts(self, role: PartyRole, today: Optional[date] = None) -> list[PartyDebt]:
        """Catalog parties with a positive balance, largest first."""
        result = []
        for party in self.snapshot.parties(PartyRole(role)):
            debt = self.outstanding(party.id, role, today=today)
            if debt.amount > 0:
                result.append(PartyDebt(party=party, debt=debt))
        result.sort(key=lambda entry: entry.debt.amount, reverse=True)
        logger.debug("%d %s(s) with outstanding debt", len(result), PartyRole(role).value)
        return result

    def customer_debts(self, today: Optional[date] = None) -> list[PartyDebt]:
        return self.party_debts(PartyRole.CUSTOMER, today=today)

    def supplier_debts(self, today: Optional[date] = None) -> list[PartyDebt]:
        return self.party_debts(PartyRole.SUPPLIER, today=today)

    def total_receivable(self) -> Decimal:
        """Total owed by customers."""
        return sum((entry.debt.amount for entry in self.customer_debts()), ZERO)

    def total_payable(self) -> Decimal:
        """Total owed to suppliers."""
        return sum((entry.debt.amount for entry in self.supplier_debts()), ZERO)
