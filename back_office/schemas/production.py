"""
Pydantic schemas for production runs.
"""

from datetime import date, datetime

from pydantic import BaseModel, Field

from back_office.schemas.common import Command


class ProductionCreate(Command):
    product_id: int
    pieces_produced: int = Field(ge=1)
    production_date: date = Field(default_factory=date.today)
    note: str | None = Field(default=None, max_length=1000)


class ProductionUpdate(Command):
    """The product of a run is fixed; only the count and notes change."""
    pieces_produced: int = Field(ge=1)
    production_date: date | None = None
    note: str | None = Field(default=None, max_length=1000)


class ProductionResponse(BaseModel):
    id: int
    product_id: int
    pieces_produced: int
    production_date: date
    note: str | None
    created_by: int | None
    created_at: datetime

    model_config = {"from_attributes": True}
