"""Domain layer for microbooks application."""

from microbooks.domain.costing import CostingService
from microbooks.domain.debt import DebtService
from microbooks.domain.ledger import LedgerService
from microbooks.domain.party import PartyService
from microbooks.domain.product import ProductService
from microbooks.domain.reports import ReportService
from microbooks.domain.stock import StockService
from microbooks.domain.transaction import TransactionService

__all__ = [
    "CostingService",
    "DebtService",
    "LedgerService",
    "PartyService",
    "ProductService",
    "ReportService",
    "StockService",
    "TransactionService",
]
