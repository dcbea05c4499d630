"""Domain layer for tillbook application."""

from tillbook.domain.catalog import CatalogService
from tillbook.domain.customer import CustomerService
from tillbook.domain.ledger import LedgerEngine
from tillbook.domain.settlement import SettlementTracker
from tillbook.domain.report import ReportService

__all__ = [
    "CatalogService",
    "CustomerService",
    "LedgerEngine",
    "SettlementTracker",
    "ReportService",
]
