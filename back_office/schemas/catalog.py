"""
Pydantic schemas for customers, products and payment types.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from back_office.schemas.common import Command, Money


# --- Customer Schemas ---

class CustomerCreate(Command):
    name: str = Field(min_length=1, max_length=255)
    phone: str | None = Field(default=None, max_length=20)
    address: str | None = Field(default=None, max_length=500)
    opening_balance: Money = Decimal("0")
    opening_date: date | None = None
    credit_limit: Money = Decimal("0")
    is_active: bool = True


class CustomerUpdate(CustomerCreate):
    """
    Full replacement of a customer's editable fields.

    total_due is not editable. Changing opening_balance moves
    total_due by the difference.
    """


class CustomerResponse(BaseModel):
    id: int
    name: str
    phone: str | None
    address: str | None
    opening_balance: Decimal
    opening_date: date | None
    total_due: Decimal
    credit_limit: Decimal
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Product Schemas ---

class ProductCreate(Command):
    name: str = Field(min_length=1, max_length=255)
    size: str | None = Field(default=None, max_length=50)
    pieces_per_bundle: int = Field(default=1, ge=1)
    rate_per_kg: Money = Decimal("0")
    opening_stock: int = Field(default=0, ge=0)
    min_stock_alert: int = Field(default=0, ge=0)
    is_active: bool = True


class ProductUpdate(ProductCreate):
    """
    Full replacement of a product's editable fields.

    stock_pieces is not editable. Changing opening_stock moves
    stock_pieces by the difference.
    """


class ProductResponse(BaseModel):
    id: int
    name: str
    size: str | None
    display_name: str
    pieces_per_bundle: int
    rate_per_kg: Decimal
    opening_stock: int
    stock_pieces: int
    formatted_stock: str
    min_stock_alert: int
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


# --- Payment Type Schemas ---

class PaymentTypeCreate(Command):
    name: str = Field(min_length=1, max_length=100)
    is_active: bool = True


class PaymentTypeResponse(BaseModel):
    id: int
    name: str
    is_active: bool

    model_config = {"from_attributes": True}
