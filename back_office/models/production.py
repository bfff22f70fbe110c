"""
Production run model. Each run adds finished pieces to stock.
"""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, Text, ForeignKey
from sqlalchemy.orm import Mapped, mapped_column, relationship

from back_office.models.base import Base


class Production(Base):
    __tablename__ = "productions"

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(
        ForeignKey("products.id"), nullable=False, index=True
    )
    pieces_produced: Mapped[int] = mapped_column(Integer, nullable=False)
    production_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
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

    product: Mapped["Product"] = relationship()

    def __repr__(self) -> str:
        return (
            f"<Production product={self.product_id} "
            f"pieces={self.pieces_produced}>"
        )
