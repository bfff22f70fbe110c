"""
Sales return service.

A return is the mirror image of a sale: its items go back into
stock and its grand_total comes off the customer's total_due.
Edits reverse the old version completely before applying the
new one, exactly as sale edits do.
"""

import logging
from datetime import date

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from back_office.errors import ConflictError, NotFoundError, ValidationError
from back_office.models import (
    ActivityEvent,
    Customer,
    Sale,
    SalesReturn,
    SalesReturnItem,
)
from back_office.models.base import transaction
from back_office.schemas.sale import (
    SalesReturnCreate,
    SalesReturnUpdate,
    SalesReturnItemCreate,
)
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import (
    LedgerService,
    money,
    next_document_no,
)
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.sales_returns")

RETURN_PREFIX = "SR"


class SalesReturnService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.activity = ActivityService(db)

    def _lock_return(self, return_id: int) -> SalesReturn:
        sales_return = self.db.execute(
            select(SalesReturn).where(SalesReturn.id == return_id).with_for_update()
        ).scalar_one_or_none()
        if not sales_return:
            raise NotFoundError(f"Sales return {return_id} not found")
        return sales_return

    def _check_sale(self, sale_id: int | None, customer_id: int) -> None:
        """A referenced sale must exist and belong to the same customer."""
        if sale_id is None:
            return
        sale = self.db.get(Sale, sale_id)
        if not sale:
            raise ValidationError(f"Sale {sale_id} not found")
        if sale.customer_id != customer_id:
            raise ValidationError(
                f"Sale {sale.bill_no} does not belong to customer {customer_id}"
            )

    def _set_header(self, sales_return: SalesReturn, request: SalesReturnUpdate) -> None:
        sales_return.customer_id = request.customer_id
        sales_return.sale_id = request.sale_id
        sales_return.return_date = request.return_date
        sales_return.total_weight = money(sum(i.weight_kg for i in request.items))
        sales_return.sub_total = money(request.sub_total)
        sales_return.discount = money(request.discount)
        sales_return.grand_total = money(request.grand_total)
        sales_return.note = request.note

    @staticmethod
    def _build_items(items: list[SalesReturnItemCreate]) -> list[SalesReturnItem]:
        return [
            SalesReturnItem(
                product_id=item.product_id,
                bundles=item.bundles,
                extra_pieces=item.extra_pieces,
                total_pieces=item.total_pieces,
                weight_kg=money(item.weight_kg),
                rate_per_kg=money(item.rate_per_kg),
                sub_total=money(item.sub_total),
            )
            for item in items
        ]

    def next_return_no(self) -> str:
        return next_document_no(self.db, SalesReturn.return_no, RETURN_PREFIX)

    def create_return(
        self, request: SalesReturnCreate, user_id: int | None = None
    ) -> SalesReturn:
        """
        Record goods coming back from a customer.

        Ledger effects:
            stock_pieces += item.total_pieces   (each item)
            total_due    -= grand_total         (customer)
        """
        with transaction(self.db):
            customer = self.ledger.get_customer(request.customer_id)
            self.ledger.get_products({i.product_id for i in request.items})
            self._check_sale(request.sale_id, customer.id)

            return_no = request.return_no or self.next_return_no()
            taken = self.db.execute(
                select(SalesReturn.id).where(SalesReturn.return_no == return_no)
            ).scalar_one_or_none()
            if taken:
                raise ConflictError(f"Return number '{return_no}' already exists")

            sales_return = SalesReturn(return_no=return_no, created_by=user_id)
            self._set_header(sales_return, request)
            sales_return.items = self._build_items(request.items)
            self.db.add(sales_return)

            for item in request.items:
                self.ledger.adjust_stock(item.product_id, item.total_pieces)
            self.ledger.adjust_due(customer.id, -sales_return.grand_total)

            self.db.flush()
            self.activity.record(
                ActivityEvent.SALES_RETURN_CREATED, "sales_return", sales_return.id, user_id,
                return_no=return_no,
                customer_id=customer.id,
                sale_id=request.sale_id,
                grand_total=sales_return.grand_total,
            )

        logger.info(
            "Sales return %s created for customer %s: credit=%s",
            return_no, request.customer_id, request.grand_total,
        )
        return sales_return

    def update_return(
        self, return_id: int, request: SalesReturnUpdate, user_id: int | None = None
    ) -> SalesReturn:
        """Replace a return, reversing the old version first."""
        with transaction(self.db):
            sales_return = self._lock_return(return_id)
            old_customer_id = sales_return.customer_id
            old_total = sales_return.grand_total
            old_product_ids = {i.product_id for i in sales_return.items}

            customer = self.ledger.get_customer(
                request.customer_id, current_id=old_customer_id
            )
            self.ledger.get_products(
                {i.product_id for i in request.items},
                already_linked=old_product_ids,
            )
            self._check_sale(request.sale_id, customer.id)

            # Reverse the old version
            for item in sales_return.items:
                self.ledger.adjust_stock(item.product_id, -item.total_pieces)
            self.ledger.adjust_due(old_customer_id, old_total)

            self._set_header(sales_return, request)
            sales_return.items.clear()
            sales_return.items.extend(self._build_items(request.items))

            # Apply the new version
            for item in request.items:
                self.ledger.adjust_stock(item.product_id, item.total_pieces)
            self.ledger.adjust_due(customer.id, -sales_return.grand_total)

            self.activity.record(
                ActivityEvent.SALES_RETURN_UPDATED, "sales_return", sales_return.id, user_id,
                return_no=sales_return.return_no,
                old_customer_id=old_customer_id,
                customer_id=customer.id,
                old_grand_total=old_total,
                grand_total=sales_return.grand_total,
            )

        logger.info(
            "Sales return %s updated: credit %s -> %s",
            return_id, old_total, request.grand_total,
        )
        return sales_return

    def delete_return(self, return_id: int, user_id: int | None = None) -> None:
        """Delete a return: its pieces leave stock, its credit is withdrawn."""
        with transaction(self.db):
            sales_return = self._lock_return(return_id)
            return_no = sales_return.return_no
            customer_id = sales_return.customer_id
            grand_total = sales_return.grand_total

            for item in sales_return.items:
                self.ledger.adjust_stock(item.product_id, -item.total_pieces)
            self.ledger.adjust_due(customer_id, grand_total)
            self.db.delete(sales_return)

            self.activity.record(
                ActivityEvent.SALES_RETURN_DELETED, "sales_return", return_id, user_id,
                return_no=return_no,
                customer_id=customer_id,
                grand_total=grand_total,
            )

        logger.info("Sales return %s deleted: customer %s due +%s", return_no, customer_id, grand_total)

    def get_return(self, return_id: int) -> SalesReturn:
        sales_return = self.db.get(SalesReturn, return_id)
        if not sales_return:
            raise NotFoundError(f"Sales return {return_id} not found")
        return sales_return

    def list_returns(
        self,
        search: str | None = None,
        customer_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[SalesReturn], int]:
        query = select(SalesReturn).join(
            Customer, SalesReturn.customer_id == Customer.id
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                SalesReturn.return_no.ilike(pattern),
                Customer.name.ilike(pattern),
            ))
        if customer_id is not None:
            query = query.where(SalesReturn.customer_id == customer_id)
        if from_date:
            query = query.where(SalesReturn.return_date >= from_date)
        if to_date:
            query = query.where(SalesReturn.return_date <= to_date)

        return paginate(
            self.db,
            query.order_by(SalesReturn.return_date.desc(), SalesReturn.id.desc()),
            page,
            per_page,
        )
