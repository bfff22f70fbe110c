"""
Schema pieces shared by every resource.
"""

from decimal import Decimal
from typing import Annotated, Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")

# Money as it crosses the API boundary: never negative, cents precision.
Money = Annotated[Decimal, Field(ge=0, max_digits=12, decimal_places=2)]
PositiveMoney = Annotated[Decimal, Field(gt=0, max_digits=12, decimal_places=2)]


class Command(BaseModel):
    """Base for request bodies. Unknown keys are rejected."""

    model_config = {"extra": "forbid"}


class Page(BaseModel, Generic[T]):
    """One page of a list endpoint."""
    items: list[T]
    total: int
    page: int
    per_page: int
