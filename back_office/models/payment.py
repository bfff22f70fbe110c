"""
Payment and payment type models.

A payment always reduces its customer's total_due. It may also
be applied to one specific sale, in which case that sale's
paid/due split moves too.
"""

from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Boolean, Date, DateTime, Numeric, Text, ForeignKey,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from back_office.models.base import Base


class PaymentType(Base):
    """Catalog entry such as Cash, Bank Transfer or Cheque."""

    __tablename__ = "payment_types"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True
    )

    def __repr__(self) -> str:
        return f"<PaymentType {self.name}>"


class Payment(Base):
    __tablename__ = "payments"

    id: Mapped[int] = mapped_column(primary_key=True)
    customer_id: Mapped[int] = mapped_column(
        ForeignKey("customers.id"), nullable=False, index=True
    )
    sale_id: Mapped[int | None] = mapped_column(
        ForeignKey("sales.id", ondelete="SET NULL"), nullable=True, index=True
    )
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    payment_type_id: Mapped[int | None] = mapped_column(
        ForeignKey("payment_types.id"), nullable=True
    )
    payment_ref: Mapped[str | None] = mapped_column(String(100), nullable=True)
    payment_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_by: Mapped[int | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    customer: Mapped["Customer"] = relationship(back_populates="payments")
    sale: Mapped["Sale | None"] = relationship()
    payment_type: Mapped["PaymentType | None"] = relationship()

    def __repr__(self) -> str:
        return f"<Payment {self.amount} customer={self.customer_id}>"
