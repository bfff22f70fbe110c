"""
Sale service — sale entry, edit and deletion.

Each operation runs as one transaction:
1. Validates the customer, products and payment type
2. Reverses the effects of the old version (edit, delete)
3. Writes the sale and its items
4. Applies the new effects: stock out, customer due in
5. Appends an activity log entry

Reversal always completes before anything new is applied.
"""

import logging
from datetime import date

from sqlalchemy import select, update, or_
from sqlalchemy.orm import Session

from back_office.errors import ConflictError, NotFoundError, ValidationError
from back_office.models import (
    ActivityEvent,
    Customer,
    Payment,
    Product,
    Sale,
    SaleItem,
    SalesReturn,
)
from back_office.models.base import transaction
from back_office.models.product import format_pieces
from back_office.schemas.sale import SaleCreate, SaleUpdate, SaleItemCreate
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import (
    LedgerService,
    ZERO,
    money,
    next_document_no,
)
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.sales")

BILL_PREFIX = "FS"


class SaleService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.activity = ActivityService(db)

    def _lock_sale(self, sale_id: int) -> Sale:
        sale = self.db.execute(
            select(Sale).where(Sale.id == sale_id).with_for_update()
        ).scalar_one_or_none()
        if not sale:
            raise NotFoundError(f"Sale {sale_id} not found")
        return sale

    def _set_header(self, sale: Sale, request: SaleUpdate) -> None:
        """Copy header fields and derive totals from the items."""
        sale.customer_id = request.customer_id
        sale.sale_date = request.sale_date
        sale.total_pieces = sum(i.total_pieces for i in request.items)
        sale.total_weight_kg = money(sum(i.weight_kg for i in request.items))
        sale.total_amount = money(request.total_amount)
        sale.discount = money(request.discount)
        sale.net_amount = money(request.net_amount)
        sale.payment_type_id = request.payment_type_id
        sale.payment_ref = request.payment_ref
        sale.notes = request.notes

    @staticmethod
    def _build_items(items: list[SaleItemCreate]) -> list[SaleItem]:
        return [
            SaleItem(
                product_id=item.product_id,
                bundles=item.bundles,
                extra_pieces=item.extra_pieces,
                total_pieces=item.total_pieces,
                weight_kg=money(item.weight_kg),
                rate_per_kg=money(item.rate_per_kg),
                amount=money(item.amount),
            )
            for item in items
        ]

    def next_bill_no(self) -> str:
        return next_document_no(self.db, Sale.bill_no, BILL_PREFIX)

    def check_stock_availability(
        self, items: list[SaleItemCreate], sale_id: int | None = None
    ) -> None:
        """
        Refuse a sale that asks for more pieces than are on hand.

        Pieces are totalled per product, since the same product
        may appear on several lines. When editing, the pieces
        already held by the old version of the sale count as
        available. The ledger never calls this; the entry
        endpoint does unless negative stock is allowed.
        """
        requested: dict[int, int] = {}
        for item in items:
            requested[item.product_id] = (
                requested.get(item.product_id, 0) + item.total_pieces
            )

        held: dict[int, int] = {}
        if sale_id is not None:
            for item in self.get_sale(sale_id).items:
                held[item.product_id] = (
                    held.get(item.product_id, 0) + item.total_pieces
                )

        products = self.db.execute(
            select(Product).where(Product.id.in_(requested))
        ).scalars().all()

        shortages = []
        for product in products:
            available = product.stock_pieces + held.get(product.id, 0)
            wanted = requested[product.id]
            if wanted > available:
                shortages.append(
                    f"Insufficient stock for {product.display_name}. "
                    f"Available: {format_pieces(available, product.pieces_per_bundle)}, "
                    f"Requested: {format_pieces(wanted, product.pieces_per_bundle)}"
                )
        if shortages:
            raise ValidationError("; ".join(shortages))

    def create_sale(self, request: SaleCreate, user_id: int | None = None) -> Sale:
        """
        Enter a new sale.

        Ledger effects:
            stock_pieces -= item.total_pieces   (each item)
            total_due    += due_amount          (customer)
        """
        with transaction(self.db):
            customer = self.ledger.get_customer(request.customer_id)
            self.ledger.get_products({i.product_id for i in request.items})
            self.ledger.check_payment_type(request.payment_type_id)

            bill_no = request.bill_no or self.next_bill_no()
            taken = self.db.execute(
                select(Sale.id).where(Sale.bill_no == bill_no)
            ).scalar_one_or_none()
            if taken:
                raise ConflictError(f"Bill number '{bill_no}' already exists")

            due = money(request.due_amount)
            sale = Sale(bill_no=bill_no, created_by=user_id)
            self._set_header(sale, request)
            sale.paid_amount = money(request.paid_amount)
            sale.due_amount = due
            sale.posted_due = due
            sale.items = self._build_items(request.items)
            self.db.add(sale)

            for item in request.items:
                self.ledger.adjust_stock(item.product_id, -item.total_pieces)
            self.ledger.adjust_due(customer.id, due)

            self.db.flush()
            self.activity.record(
                ActivityEvent.SALE_CREATED, "sale", sale.id, user_id,
                bill_no=bill_no,
                customer_id=customer.id,
                net_amount=sale.net_amount,
                due_amount=due,
                total_pieces=sale.total_pieces,
            )

        logger.info(
            "Sale %s created for customer %s: due=%s pieces=%s",
            bill_no, request.customer_id, due, sum(i.total_pieces for i in request.items),
        )
        return sale

    def update_sale(
        self, sale_id: int, request: SaleUpdate, user_id: int | None = None
    ) -> Sale:
        """
        Replace a sale's header and items.

        The old version's effects are reversed in full (stock
        back in, posted due out of the old customer) before the
        new version's effects are applied. Payments already
        applied to the bill stay applied.
        """
        with transaction(self.db):
            sale = self._lock_sale(sale_id)
            old_customer_id = sale.customer_id
            old_posted_due = sale.posted_due
            old_product_ids = {i.product_id for i in sale.items}

            customer = self.ledger.get_customer(
                request.customer_id, current_id=old_customer_id
            )
            self.ledger.get_products(
                {i.product_id for i in request.items},
                already_linked=old_product_ids,
            )
            self.ledger.check_payment_type(request.payment_type_id)

            linked = self.ledger.linked_payments_total(sale.id)
            if linked and customer.id != old_customer_id:
                raise ValidationError(
                    "Cannot move a sale with applied payments to another customer"
                )

            # Reverse the old version
            for item in sale.items:
                self.ledger.adjust_stock(item.product_id, item.total_pieces)
            self.ledger.adjust_due(old_customer_id, -old_posted_due)

            # Replace header and items
            due = money(request.due_amount)
            self._set_header(sale, request)
            sale.paid_amount = money(request.paid_amount + linked)
            sale.due_amount = max(ZERO, money(due - linked))
            sale.posted_due = due
            sale.items.clear()
            sale.items.extend(self._build_items(request.items))

            # Apply the new version
            for item in request.items:
                self.ledger.adjust_stock(item.product_id, -item.total_pieces)
            self.ledger.adjust_due(customer.id, due)

            self.activity.record(
                ActivityEvent.SALE_UPDATED, "sale", sale.id, user_id,
                bill_no=sale.bill_no,
                old_customer_id=old_customer_id,
                customer_id=customer.id,
                old_due=old_posted_due,
                due_amount=due,
            )

        logger.info(
            "Sale %s updated: due %s -> %s", sale_id, old_posted_due, due
        )
        return sale

    def delete_sale(self, sale_id: int, user_id: int | None = None) -> None:
        """
        Delete a sale and undo its ledger effects.

        Payments and returns that referenced the sale are kept
        and unlinked; they still count against the customer.
        """
        with transaction(self.db):
            sale = self._lock_sale(sale_id)
            bill_no = sale.bill_no
            customer_id = sale.customer_id
            posted_due = sale.posted_due

            for item in sale.items:
                self.ledger.adjust_stock(item.product_id, item.total_pieces)
            self.ledger.adjust_due(customer_id, -posted_due)

            self.db.execute(
                update(Payment)
                .where(Payment.sale_id == sale_id)
                .values(sale_id=None)
                .execution_options(synchronize_session=False)
            )
            self.db.execute(
                update(SalesReturn)
                .where(SalesReturn.sale_id == sale_id)
                .values(sale_id=None)
                .execution_options(synchronize_session=False)
            )
            self.db.delete(sale)

            self.activity.record(
                ActivityEvent.SALE_DELETED, "sale", sale_id, user_id,
                bill_no=bill_no,
                customer_id=customer_id,
                due_amount=posted_due,
            )

        logger.info("Sale %s deleted: customer %s due -%s", bill_no, customer_id, posted_due)

    def get_sale(self, sale_id: int) -> Sale:
        sale = self.db.get(Sale, sale_id)
        if not sale:
            raise NotFoundError(f"Sale {sale_id} not found")
        return sale

    def list_sales(
        self,
        search: str | None = None,
        customer_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Sale], int]:
        """Sales newest first, filtered by bill number or customer name."""
        query = select(Sale).join(Customer, Sale.customer_id == Customer.id)
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Sale.bill_no.ilike(pattern),
                Customer.name.ilike(pattern),
            ))
        if customer_id is not None:
            query = query.where(Sale.customer_id == customer_id)
        if from_date:
            query = query.where(Sale.sale_date >= from_date)
        if to_date:
            query = query.where(Sale.sale_date <= to_date)

        return paginate(
            self.db,
            query.order_by(Sale.sale_date.desc(), Sale.id.desc()),
            page,
            per_page,
        )
