"""
Pydantic schemas for expenses and expense categories.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from back_office.schemas.common import Command, PositiveMoney


class ExpenseCategoryCreate(Command):
    name: str = Field(min_length=1, max_length=100)
    is_active: bool = True


class ExpenseCategoryResponse(BaseModel):
    id: int
    name: str
    is_active: bool

    model_config = {"from_attributes": True}


class ExpenseCreate(Command):
    expense_category_id: int
    amount: PositiveMoney
    expense_date: date = Field(default_factory=date.today)
    description: str | None = Field(default=None, max_length=1000)


class ExpenseUpdate(ExpenseCreate):
    pass


class ExpenseResponse(BaseModel):
    id: int
    expense_category_id: int
    amount: Decimal
    expense_date: date
    description: str | None
    created_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
