"""
Production service.

A production run only ever touches stock. Edits apply the
difference between the new and old piece counts as a single
delta rather than reversing and reapplying.
"""

import logging
from datetime import date

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from back_office.errors import NotFoundError
from back_office.models import ActivityEvent, Product, Production
from back_office.models.base import transaction
from back_office.schemas.production import ProductionCreate, ProductionUpdate
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import LedgerService
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.productions")


class ProductionService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.activity = ActivityService(db)

    def _lock_production(self, production_id: int) -> Production:
        production = self.db.execute(
            select(Production).where(Production.id == production_id).with_for_update()
        ).scalar_one_or_none()
        if not production:
            raise NotFoundError(f"Production {production_id} not found")
        return production

    def create_production(
        self, request: ProductionCreate, user_id: int | None = None
    ) -> Production:
        """Record a production run: stock_pieces += pieces_produced."""
        with transaction(self.db):
            self.ledger.get_products({request.product_id})

            production = Production(
                product_id=request.product_id,
                pieces_produced=request.pieces_produced,
                production_date=request.production_date,
                note=request.note,
                created_by=user_id,
            )
            self.db.add(production)
            self.ledger.adjust_stock(request.product_id, request.pieces_produced)

            self.db.flush()
            self.activity.record(
                ActivityEvent.PRODUCTION_CREATED, "production", production.id, user_id,
                product_id=request.product_id,
                pieces_produced=request.pieces_produced,
            )

        logger.info(
            "Production of %s pieces recorded for product %s",
            request.pieces_produced, request.product_id,
        )
        return production

    def update_production(
        self, production_id: int, request: ProductionUpdate, user_id: int | None = None
    ) -> Production:
        """Change a run's piece count: stock_pieces += new - old."""
        with transaction(self.db):
            production = self._lock_production(production_id)
            old_pieces = production.pieces_produced
            difference = request.pieces_produced - old_pieces

            self.ledger.adjust_stock(production.product_id, difference)

            production.pieces_produced = request.pieces_produced
            if request.production_date is not None:
                production.production_date = request.production_date
            production.note = request.note

            self.activity.record(
                ActivityEvent.PRODUCTION_UPDATED, "production", production.id, user_id,
                product_id=production.product_id,
                old_pieces=old_pieces,
                pieces_produced=request.pieces_produced,
            )

        logger.info(
            "Production %s updated: %s -> %s pieces (%+d)",
            production_id, old_pieces, request.pieces_produced, difference,
        )
        return production

    def delete_production(self, production_id: int, user_id: int | None = None) -> None:
        """Remove a run: stock_pieces -= pieces_produced."""
        with transaction(self.db):
            production = self._lock_production(production_id)
            product_id = production.product_id
            pieces = production.pieces_produced

            self.ledger.adjust_stock(product_id, -pieces)
            self.db.delete(production)

            self.activity.record(
                ActivityEvent.PRODUCTION_DELETED, "production", production_id, user_id,
                product_id=product_id,
                pieces_produced=pieces,
            )

        logger.info("Production %s deleted: product %s stock -%s", production_id, product_id, pieces)

    def get_production(self, production_id: int) -> Production:
        production = self.db.get(Production, production_id)
        if not production:
            raise NotFoundError(f"Production {production_id} not found")
        return production

    def list_productions(
        self,
        search: str | None = None,
        product_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Production], int]:
        query = select(Production).join(Product, Production.product_id == Product.id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Product.name.ilike(pattern),
                Product.size.ilike(pattern),
            ))
        if product_id is not None:
            query = query.where(Production.product_id == product_id)
        if from_date:
            query = query.where(Production.production_date >= from_date)
        if to_date:
            query = query.where(Production.production_date <= to_date)

        return paginate(
            self.db,
            query.order_by(Production.production_date.desc(), Production.id.desc()),
            page,
            per_page,
        )
