"""
Ledger service — the only writer of running balances.

Two aggregates are kept in step with the records that feed them:
1. customer.total_due   = opening_balance + posted sale dues
                          - payments - sales returns
2. product.stock_pieces = opening_stock + production + returned
                          pieces - sold pieces

Every change goes through adjust_due() / adjust_stock(), which
issue a single atomic UPDATE ... SET col = col + :delta. Nothing
reads an aggregate into Python and writes it back, so two
concurrent requests cannot lose each other's update.

The service never commits. Callers wrap each operation in
transaction() so the record and its adjustments land together.
"""

import logging
from datetime import date
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy import select, update, func
from sqlalchemy.orm import Session

from back_office.errors import NotFoundError, ValidationError
from back_office.models import (
    Customer,
    Product,
    PaymentType,
    Sale,
    SaleItem,
    Payment,
    Production,
    SalesReturn,
    SalesReturnItem,
)
from back_office.schemas.report import ReconciliationResponse

logger = logging.getLogger("back_office.ledger")

CENT = Decimal("0.01")
ZERO = Decimal("0")


def money(value) -> Decimal:
    """Coerce to a Decimal rounded to cents."""
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


def next_document_no(db: Session, column, prefix: str, today: date | None = None) -> str:
    """
    Next sequential document number for the current year.

    Format is PREFIX-YYYY-NNNN, continuing from the highest
    number already issued this year.
    """
    year = (today or date.today()).year
    issued = db.execute(
        select(column).where(column.like(f"{prefix}-{year}-%"))
    ).scalars().all()

    highest = 0
    for number in issued:
        suffix = number.rsplit("-", 1)[-1]
        if suffix.isdigit():
            highest = max(highest, int(suffix))

    return f"{prefix}-{year}-{highest + 1:04d}"


class LedgerService:
    """
    Aggregate adjustments and the lookups that guard them.

    Takes a database session as a constructor argument. The
    caller controls the transaction boundary.
    """

    def __init__(self, db: Session):
        self.db = db

    # --- Lookups ---

    def get_customer(self, customer_id: int, current_id: int | None = None) -> Customer:
        """
        Return a customer that may receive new ledger records.

        An inactive customer is only accepted when the record
        being edited already belongs to them (current_id).
        """
        customer = self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")
        if not customer.is_active and customer_id != current_id:
            raise ValidationError(f"Customer {customer.name} is not active")
        return customer

    def get_products(
        self, product_ids: set[int], already_linked: set[int] | None = None
    ) -> dict[int, Product]:
        """
        Return the referenced products keyed by id.

        Unknown or inactive products make the whole command
        invalid. Products already on the record being edited
        stay usable after deactivation.
        """
        already_linked = already_linked or set()
        products = self.db.execute(
            select(Product).where(Product.id.in_(product_ids))
        ).scalars().all()
        by_id = {p.id: p for p in products}

        missing = product_ids - set(by_id)
        if missing:
            raise ValidationError(f"Products not found: {sorted(missing)}")

        for product_id, product in by_id.items():
            if not product.is_active and product_id not in already_linked:
                raise ValidationError(
                    f"Product {product.display_name} is not active"
                )
        return by_id

    def check_payment_type(self, payment_type_id: int | None) -> None:
        if payment_type_id is None:
            return
        payment_type = self.db.get(PaymentType, payment_type_id)
        if not payment_type or not payment_type.is_active:
            raise ValidationError(
                f"Payment type {payment_type_id} is not available"
            )

    # --- Aggregate adjustments ---

    def adjust_due(self, customer_id: int, delta: Decimal) -> None:
        """Atomically add delta (may be negative) to a customer's total_due."""
        delta = money(delta)
        if delta == ZERO:
            return
        result = self.db.execute(
            update(Customer)
            .where(Customer.id == customer_id)
            .values(total_due=Customer.total_due + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"Customer {customer_id} not found")
        logger.debug("customer %s total_due %+s", customer_id, delta)

    def adjust_stock(self, product_id: int, delta: int) -> None:
        """
        Atomically add delta (may be negative) to a product's stock.

        Stock is allowed to go below zero; whether to refuse an
        oversell is the caller's decision.
        """
        if delta == 0:
            return
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock_pieces=Product.stock_pieces + delta)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount == 0:
            raise NotFoundError(f"Product {product_id} not found")
        logger.debug("product %s stock_pieces %+d", product_id, delta)

    def apply_sale_payment(self, sale_id: int, amount: Decimal) -> Sale:
        """
        Move a sale's paid/due split by amount.

        A positive amount applies a payment, a negative one
        reverses it. due_amount is recomputed from net_amount
        and floored at zero. The sale row is locked for the rest
        of the transaction.
        """
        sale = self.db.execute(
            select(Sale).where(Sale.id == sale_id).with_for_update()
        ).scalar_one_or_none()
        if not sale:
            raise NotFoundError(f"Sale {sale_id} not found")

        sale.paid_amount = money(sale.paid_amount + amount)
        sale.due_amount = max(ZERO, money(sale.net_amount - sale.paid_amount))
        return sale

    def linked_payments_total(self, sale_id: int) -> Decimal:
        """Sum of payments currently applied to a sale."""
        total = self.db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.sale_id == sale_id)
        ).scalar()
        return money(total)

    # --- Reconciliation ---

    def expected_total_due(self, customer_id: int) -> Decimal:
        """Recompute a customer's total_due from the ledger records."""
        customer = self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")

        sales = self.db.execute(
            select(func.coalesce(func.sum(Sale.posted_due), 0))
            .where(Sale.customer_id == customer_id)
        ).scalar()
        payments = self.db.execute(
            select(func.coalesce(func.sum(Payment.amount), 0))
            .where(Payment.customer_id == customer_id)
        ).scalar()
        returns = self.db.execute(
            select(func.coalesce(func.sum(SalesReturn.grand_total), 0))
            .where(SalesReturn.customer_id == customer_id)
        ).scalar()

        return money(
            money(customer.opening_balance)
            + money(sales) - money(payments) - money(returns)
        )

    def expected_stock(self, product_id: int) -> int:
        """Recompute a product's stock_pieces from the ledger records."""
        product = self.db.get(Product, product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")

        produced = self.db.execute(
            select(func.coalesce(func.sum(Production.pieces_produced), 0))
            .where(Production.product_id == product_id)
        ).scalar()
        returned = self.db.execute(
            select(func.coalesce(func.sum(SalesReturnItem.total_pieces), 0))
            .where(SalesReturnItem.product_id == product_id)
        ).scalar()
        sold = self.db.execute(
            select(func.coalesce(func.sum(SaleItem.total_pieces), 0))
            .where(SaleItem.product_id == product_id)
        ).scalar()

        return product.opening_stock + int(produced) + int(returned) - int(sold)

    def reconcile_customer(self, customer_id: int) -> ReconciliationResponse:
        expected = self.expected_total_due(customer_id)
        # Read the column straight from the store; a loaded
        # Customer may predate the last atomic UPDATE.
        actual = money(self.db.execute(
            select(Customer.total_due).where(Customer.id == customer_id)
        ).scalar_one())
        return self._report("customer", customer_id, "total_due", expected, actual)

    def reconcile_product(self, product_id: int) -> ReconciliationResponse:
        expected = self.expected_stock(product_id)
        actual = self.db.execute(
            select(Product.stock_pieces).where(Product.id == product_id)
        ).scalar_one()
        return self._report(
            "product", product_id, "stock_pieces",
            Decimal(expected), Decimal(actual),
        )

    @staticmethod
    def _report(subject_type, subject_id, field, expected, actual):
        difference = actual - expected
        if difference:
            logger.warning(
                "%s %s %s drifted: expected=%s actual=%s",
                subject_type, subject_id, field, expected, actual,
            )
        return ReconciliationResponse(
            subject_type=subject_type,
            subject_id=subject_id,
            field=field,
            expected=expected,
            actual=actual,
            difference=difference,
            is_consistent=difference == 0,
        )
