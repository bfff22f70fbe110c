"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored.
"""

import enum


class UserRole(str, enum.Enum):
    """Roles a back-office user can hold."""
    ADMIN = "ADMIN"
    MANAGER = "MANAGER"
    STAFF = "STAFF"


class ActivityEvent(str, enum.Enum):
    """Event types recorded in the activity log."""
    CUSTOMER_CREATED = "customer.created"
    CUSTOMER_UPDATED = "customer.updated"
    PRODUCT_CREATED = "product.created"
    PRODUCT_UPDATED = "product.updated"
    PAYMENT_TYPE_CREATED = "payment_type.created"
    SALE_CREATED = "sale.created"
    SALE_UPDATED = "sale.updated"
    SALE_DELETED = "sale.deleted"
    PAYMENT_CREATED = "payment.created"
    PAYMENT_UPDATED = "payment.updated"
    PAYMENT_DELETED = "payment.deleted"
    PRODUCTION_CREATED = "production.created"
    PRODUCTION_UPDATED = "production.updated"
    PRODUCTION_DELETED = "production.deleted"
    SALES_RETURN_CREATED = "sales_return.created"
    SALES_RETURN_UPDATED = "sales_return.updated"
    SALES_RETURN_DELETED = "sales_return.deleted"
    EXPENSE_CATEGORY_CREATED = "expense_category.created"
    EXPENSE_CREATED = "expense.created"
    EXPENSE_UPDATED = "expense.updated"
    EXPENSE_DELETED = "expense.deleted"
    USER_CREATED = "user.created"
    USER_UPDATED = "user.updated"
