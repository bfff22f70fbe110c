"""
Payment service — money received from customers.

A payment has up to two effects:
    total_due   -= amount                       (always)
    paid_amount += amount, due_amount recomputed (when applied to a sale)

Editing reverses both effects of the old version, then applies
both effects of the new one. The old and new customer (and the
old and new sale) may differ; each is adjusted on its own.
"""

import logging
from datetime import date

from sqlalchemy import select, or_
from sqlalchemy.orm import Session

from back_office.errors import NotFoundError, ValidationError
from back_office.models import ActivityEvent, Customer, Payment, Sale
from back_office.models.base import transaction
from back_office.schemas.payment import PaymentCreate, PaymentUpdate
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import LedgerService, money
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.payments")


class PaymentService:

    def __init__(self, db: Session):
        self.db = db
        self.ledger = LedgerService(db)
        self.activity = ActivityService(db)

    def _check_sale(self, sale_id: int | None, customer_id: int) -> None:
        """A payment can only be applied to one of its customer's sales."""
        if sale_id is None:
            return
        sale = self.db.get(Sale, sale_id)
        if not sale:
            raise ValidationError(f"Sale {sale_id} not found")
        if sale.customer_id != customer_id:
            raise ValidationError(
                f"Sale {sale.bill_no} does not belong to customer {customer_id}"
            )

    def _lock_payment(self, payment_id: int) -> Payment:
        payment = self.db.execute(
            select(Payment).where(Payment.id == payment_id).with_for_update()
        ).scalar_one_or_none()
        if not payment:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    def create_payment(
        self, request: PaymentCreate, user_id: int | None = None
    ) -> Payment:
        """Record a payment and apply it to the customer (and sale)."""
        with transaction(self.db):
            customer = self.ledger.get_customer(request.customer_id)
            self._check_sale(request.sale_id, customer.id)
            self.ledger.check_payment_type(request.payment_type_id)

            amount = money(request.amount)
            payment = Payment(
                customer_id=customer.id,
                sale_id=request.sale_id,
                amount=amount,
                payment_type_id=request.payment_type_id,
                payment_ref=request.payment_ref,
                payment_date=request.payment_date,
                note=request.note,
                created_by=user_id,
            )
            self.db.add(payment)

            self.ledger.adjust_due(customer.id, -amount)
            if request.sale_id is not None:
                self.ledger.apply_sale_payment(request.sale_id, amount)

            self.db.flush()
            self.activity.record(
                ActivityEvent.PAYMENT_CREATED, "payment", payment.id, user_id,
                customer_id=customer.id,
                sale_id=request.sale_id,
                amount=amount,
            )

        logger.info(
            "Payment %s from customer %s (sale %s)",
            amount, request.customer_id, request.sale_id,
        )
        return payment

    def update_payment(
        self, payment_id: int, request: PaymentUpdate, user_id: int | None = None
    ) -> Payment:
        with transaction(self.db):
            payment = self._lock_payment(payment_id)
            old_customer_id = payment.customer_id
            old_sale_id = payment.sale_id
            old_amount = payment.amount

            customer = self.ledger.get_customer(
                request.customer_id, current_id=old_customer_id
            )
            self._check_sale(request.sale_id, customer.id)
            self.ledger.check_payment_type(request.payment_type_id)

            # Reverse the old version
            self.ledger.adjust_due(old_customer_id, old_amount)
            if old_sale_id is not None:
                self.ledger.apply_sale_payment(old_sale_id, -old_amount)

            amount = money(request.amount)
            payment.customer_id = customer.id
            payment.sale_id = request.sale_id
            payment.amount = amount
            payment.payment_type_id = request.payment_type_id
            payment.payment_ref = request.payment_ref
            payment.payment_date = request.payment_date
            payment.note = request.note

            # Apply the new version
            self.ledger.adjust_due(customer.id, -amount)
            if request.sale_id is not None:
                self.ledger.apply_sale_payment(request.sale_id, amount)

            self.activity.record(
                ActivityEvent.PAYMENT_UPDATED, "payment", payment.id, user_id,
                old_customer_id=old_customer_id,
                customer_id=customer.id,
                old_sale_id=old_sale_id,
                sale_id=request.sale_id,
                old_amount=old_amount,
                amount=amount,
            )

        logger.info(
            "Payment %s updated: %s -> %s", payment_id, old_amount, amount
        )
        return payment

    def delete_payment(self, payment_id: int, user_id: int | None = None) -> None:
        with transaction(self.db):
            payment = self._lock_payment(payment_id)
            customer_id = payment.customer_id
            sale_id = payment.sale_id
            amount = payment.amount

            self.ledger.adjust_due(customer_id, amount)
            if sale_id is not None:
                self.ledger.apply_sale_payment(sale_id, -amount)
            self.db.delete(payment)

            self.activity.record(
                ActivityEvent.PAYMENT_DELETED, "payment", payment_id, user_id,
                customer_id=customer_id,
                sale_id=sale_id,
                amount=amount,
            )

        logger.info("Payment %s deleted: customer %s due +%s", payment_id, customer_id, amount)

    def get_payment(self, payment_id: int) -> Payment:
        payment = self.db.get(Payment, payment_id)
        if not payment:
            raise NotFoundError(f"Payment {payment_id} not found")
        return payment

    def list_payments(
        self,
        search: str | None = None,
        customer_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Payment], int]:
        """Payments newest first, searchable by reference, customer or bill."""
        query = (
            select(Payment)
            .join(Customer, Payment.customer_id == Customer.id)
            .outerjoin(Sale, Payment.sale_id == Sale.id)
        )
        if search:
            pattern = f"%{search.strip()}%"
            query = query.where(or_(
                Payment.payment_ref.ilike(pattern),
                Customer.name.ilike(pattern),
                Sale.bill_no.ilike(pattern),
            ))
        if customer_id is not None:
            query = query.where(Payment.customer_id == customer_id)
        if from_date:
            query = query.where(Payment.payment_date >= from_date)
        if to_date:
            query = query.where(Payment.payment_date <= to_date)

        return paginate(
            self.db,
            query.order_by(Payment.payment_date.desc(), Payment.id.desc()),
            page,
            per_page,
        )
