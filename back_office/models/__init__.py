"""
Database models package.

All models must be imported here so that Alembic can discover
them through Base.metadata when generating migrations.
"""

from back_office.models.base import Base
from back_office.models.enums import UserRole, ActivityEvent
from back_office.models.audit_log import AuditLog
from back_office.models.user import User
from back_office.models.customer import Customer
from back_office.models.product import Product
from back_office.models.payment import Payment, PaymentType
from back_office.models.sale import Sale, SaleItem
from back_office.models.production import Production
from back_office.models.sales_return import SalesReturn, SalesReturnItem
from back_office.models.expense import Expense, ExpenseCategory

__all__ = [
    "Base",
    "UserRole",
    "ActivityEvent",
    "AuditLog",
    "User",
    "Customer",
    "Product",
    "Payment",
    "PaymentType",
    "Sale",
    "SaleItem",
    "Production",
    "SalesReturn",
    "SalesReturnItem",
    "Expense",
    "ExpenseCategory",
]
