"""
Product model.

stock_pieces is the running count of sellable pieces. Like a
customer's total_due it only moves through the ledger service.
Bundles are a display convenience, not a separate stock unit.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import String, Boolean, DateTime, Integer, Numeric
from sqlalchemy.orm import Mapped, mapped_column

from back_office.models.base import Base


def format_pieces(pieces: int, pieces_per_bundle: int) -> str:
    """Render a piece count as bundles plus loose pieces."""
    if pieces_per_bundle <= 0:
        return f"{pieces} pcs"
    bundles, remaining = divmod(abs(pieces), pieces_per_bundle)
    sign = "-" if pieces < 0 else ""
    if bundles and remaining:
        return f"{sign}{bundles} bdl + {remaining} pcs"
    if bundles:
        return f"{sign}{bundles} bdl"
    return f"{pieces} pcs"


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    size: Mapped[str | None] = mapped_column(String(50), nullable=True)
    pieces_per_bundle: Mapped[int] = mapped_column(
        Integer, nullable=False, default=1
    )
    rate_per_kg: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0")
    )
    opening_stock: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    stock_pieces: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    min_stock_alert: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
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

    @property
    def display_name(self) -> str:
        return f"{self.name} ({self.size})" if self.size else self.name

    @property
    def formatted_stock(self) -> str:
        return format_pieces(self.stock_pieces, self.pieces_per_bundle)

    def is_low_stock(self) -> bool:
        """True when stock has reached the alert level (if one is set)."""
        return (
            self.min_stock_alert > 0
            and self.stock_pieces <= self.min_stock_alert
        )

    def __repr__(self) -> str:
        return f"<Product {self.display_name} stock={self.stock_pieces}>"
