"""
Pydantic schemas for payments.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from back_office.schemas.common import Command, PositiveMoney


class PaymentCreate(Command):
    """
    Money received from a customer.

    When sale_id is given the payment is applied to that bill
    as well as to the customer's running balance.
    """
    customer_id: int
    sale_id: int | None = None
    amount: PositiveMoney
    payment_type_id: int | None = None
    payment_ref: str | None = Field(default=None, max_length=100)
    payment_date: date = Field(default_factory=date.today)
    note: str | None = Field(default=None, max_length=1000)


class PaymentUpdate(PaymentCreate):
    """Full replacement. Customer and linked sale may both change."""


class PaymentResponse(BaseModel):
    id: int
    customer_id: int
    sale_id: int | None
    amount: Decimal
    payment_type_id: int | None
    payment_ref: str | None
    payment_date: date
    note: str | None
    created_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
