"""
Pydantic schemas for sales and sales returns.

These are the commands the ledger service accepts. Header
totals (pieces, weight, amount) are derived from the items by
the service, so the client cannot send totals that disagree
with the lines.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from back_office.schemas.common import Command, Money


# --- Sale Schemas ---

class SaleItemCreate(Command):
    """One product line on a sale."""
    product_id: int
    bundles: int = Field(default=0, ge=0)
    extra_pieces: int = Field(default=0, ge=0)
    total_pieces: int = Field(ge=1)
    weight_kg: Money = Decimal("0")
    rate_per_kg: Money = Decimal("0")
    amount: Money


class SaleUpdate(Command):
    """
    Replace a sale's header and all of its items.

    due_amount is what the sale charges to the customer's
    total_due. When omitted it is net_amount - paid_amount,
    floored at zero.
    """
    customer_id: int
    sale_date: date = Field(default_factory=date.today)
    discount: Money = Decimal("0")
    paid_amount: Money = Decimal("0")
    due_amount: Money | None = None
    payment_type_id: int | None = None
    payment_ref: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=1000)
    items: list[SaleItemCreate] = Field(min_length=1)

    @property
    def total_amount(self) -> Decimal:
        return sum((item.amount for item in self.items), Decimal("0"))

    @property
    def net_amount(self) -> Decimal:
        return self.total_amount - self.discount

    @model_validator(mode="after")
    def check_amounts(self):
        if self.discount > self.total_amount:
            raise ValueError("discount cannot exceed the items total")
        if self.due_amount is None:
            self.due_amount = max(Decimal("0"), self.net_amount - self.paid_amount)
        return self


class SaleCreate(SaleUpdate):
    """A new sale. bill_no is generated when not supplied."""
    bill_no: str | None = Field(default=None, min_length=1, max_length=50)


class SaleItemResponse(BaseModel):
    id: int
    product_id: int
    bundles: int
    extra_pieces: int
    total_pieces: int
    weight_kg: Decimal
    rate_per_kg: Decimal
    amount: Decimal

    model_config = {"from_attributes": True}


class SaleResponse(BaseModel):
    id: int
    bill_no: str
    customer_id: int
    sale_date: date
    total_pieces: int
    total_weight_kg: Decimal
    total_amount: Decimal
    discount: Decimal
    net_amount: Decimal
    paid_amount: Decimal
    due_amount: Decimal
    posted_due: Decimal
    payment_type_id: int | None
    payment_ref: str | None
    notes: str | None
    created_by: int | None
    created_at: datetime
    items: list[SaleItemResponse]

    model_config = {"from_attributes": True}


# --- Sales Return Schemas ---

class SalesReturnItemCreate(Command):
    """One product line coming back into stock."""
    product_id: int
    bundles: int = Field(default=0, ge=0)
    extra_pieces: int = Field(default=0, ge=0)
    total_pieces: int = Field(ge=1)
    weight_kg: Money = Decimal("0")
    rate_per_kg: Money = Decimal("0")
    sub_total: Money


class SalesReturnUpdate(Command):
    """
    Replace a return's header and all of its items.

    grand_total is what the return credits to the customer.
    When omitted it is the items' sub_total less discount.
    """
    customer_id: int
    sale_id: int | None = None
    return_date: date = Field(default_factory=date.today)
    discount: Money = Decimal("0")
    grand_total: Money | None = None
    note: str | None = Field(default=None, max_length=1000)
    items: list[SalesReturnItemCreate] = Field(min_length=1)

    @property
    def sub_total(self) -> Decimal:
        return sum((item.sub_total for item in self.items), Decimal("0"))

    @model_validator(mode="after")
    def check_amounts(self):
        if self.discount > self.sub_total:
            raise ValueError("discount cannot exceed the items sub total")
        if self.grand_total is None:
            self.grand_total = self.sub_total - self.discount
        return self


class SalesReturnCreate(SalesReturnUpdate):
    """A new return. return_no is generated when not supplied."""
    return_no: str | None = Field(default=None, min_length=1, max_length=50)


class SalesReturnItemResponse(BaseModel):
    id: int
    product_id: int
    bundles: int
    extra_pieces: int
    total_pieces: int
    weight_kg: Decimal
    rate_per_kg: Decimal
    sub_total: Decimal

    model_config = {"from_attributes": True}


class SalesReturnResponse(BaseModel):
    id: int
    return_no: str
    customer_id: int
    sale_id: int | None
    return_date: date
    total_weight: Decimal
    sub_total: Decimal
    discount: Decimal
    grand_total: Decimal
    note: str | None
    created_by: int | None
    created_at: datetime
    items: list[SalesReturnItemResponse]

    model_config = {"from_attributes": True}
