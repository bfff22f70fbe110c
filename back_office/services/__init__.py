"""Business logic services."""

from back_office.services.ledger_service import LedgerService
from back_office.services.activity_service import ActivityService
from back_office.services.catalog_service import CatalogService
from back_office.services.sale_service import SaleService
from back_office.services.payment_service import PaymentService
from back_office.services.production_service import ProductionService
from back_office.services.sales_return_service import SalesReturnService
from back_office.services.expense_service import ExpenseService
from back_office.services.user_service import UserService
from back_office.services.report_service import ReportService

__all__ = [
    "LedgerService",
    "ActivityService",
    "CatalogService",
    "SaleService",
    "PaymentService",
    "ProductionService",
    "SalesReturnService",
    "ExpenseService",
    "UserService",
    "ReportService",
]
