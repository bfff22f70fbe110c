"""
Back-office user model.

Permissions are granted per role. The map below is the source
of truth; the API layer checks it before calling any service.
"""

from datetime import datetime

from sqlalchemy import String, Boolean, DateTime, Enum as SAEnum
from sqlalchemy.orm import Mapped, mapped_column

from back_office.models.base import Base
from back_office.models.enums import UserRole


STAFF_PERMISSIONS: set[str] = {
    "customers.view",
    "products.view",
    "sales.view",
    "sales.create",
    "payments.view",
    "payments.create",
    "productions.view",
    "productions.create",
    "sales_returns.view",
    "sales_returns.create",
    "expenses.view",
    "expenses.create",
    "reports.view",
}

MANAGER_PERMISSIONS: set[str] = STAFF_PERMISSIONS | {
    "customers.manage",
    "products.manage",
    "sales.edit",
    "sales.delete",
    "payments.edit",
    "payments.delete",
    "productions.edit",
    "productions.delete",
    "sales_returns.edit",
    "sales_returns.delete",
    "expenses.manage",
    "activities.view",
}

ROLE_PERMISSIONS: dict[UserRole, set[str]] = {
    UserRole.STAFF: STAFF_PERMISSIONS,
    UserRole.MANAGER: MANAGER_PERMISSIONS,
    UserRole.ADMIN: MANAGER_PERMISSIONS | {"users.manage"},
}


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    role: Mapped[UserRole] = mapped_column(
        SAEnum(UserRole, name="user_role_enum", create_constraint=True),
        nullable=False,
        default=UserRole.STAFF,
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    def can(self, permission: str) -> bool:
        """Check whether this user's role grants a permission."""
        return self.is_active and permission in ROLE_PERMISSIONS.get(
            self.role, set()
        )

    def __repr__(self) -> str:
        return f"<User {self.email} ({self.role.value})>"
