"""
Tests for the LedgerService: aggregate adjustments,
reconciliation and the ledger invariants across mixed activity.
"""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import update

from back_office.errors import NotFoundError
from back_office.models import Customer, Product, Sale
from back_office.schemas.catalog import CustomerCreate
from back_office.schemas.payment import PaymentCreate, PaymentUpdate
from back_office.schemas.production import ProductionCreate, ProductionUpdate
from back_office.schemas.sale import (
    SaleCreate,
    SaleUpdate,
    SaleItemCreate,
    SalesReturnCreate,
    SalesReturnItemCreate,
)
from back_office.services.catalog_service import CatalogService
from back_office.services.ledger_service import LedgerService, money, next_document_no
from back_office.services.payment_service import PaymentService
from back_office.services.production_service import ProductionService
from back_office.services.sale_service import SaleService
from back_office.services.sales_return_service import SalesReturnService


def snapshot(customer, product):
    return customer.total_due, product.stock_pieces


class TestMoney:

    def test_rounds_half_up_to_cents(self):
        assert money("10.005") == Decimal("10.01")
        assert money(Decimal("2.344")) == Decimal("2.34")

    def test_float_input_uses_its_repr(self):
        assert money(0.1 + 0.2) == Decimal("0.30")


class TestDocumentNumbers:

    def test_first_number_of_year(self, db_session):
        assert next_document_no(
            db_session, Sale.bill_no, "FS", today=date(2026, 1, 1)
        ) == "FS-2026-0001"

    def test_other_years_are_ignored(self, db_session, customer, product):
        SaleService(db_session).create_sale(SaleCreate(
            customer_id=customer.id,
            bill_no="FS-2025-0099",
            items=[SaleItemCreate(product_id=product.id, total_pieces=1, amount=Decimal("1"))],
        ))

        assert next_document_no(
            db_session, Sale.bill_no, "FS", today=date(2026, 6, 1)
        ) == "FS-2026-0001"
        assert next_document_no(
            db_session, Sale.bill_no, "FS", today=date(2025, 6, 1)
        ) == "FS-2025-0100"


class TestAdjustments:

    def test_adjust_due_is_additive(self, db_session, customer):
        ledger = LedgerService(db_session)

        ledger.adjust_due(customer.id, Decimal("10.50"))
        ledger.adjust_due(customer.id, Decimal("-0.25"))
        db_session.commit()

        assert customer.total_due == Decimal("10.25")

    def test_adjust_stock_is_additive(self, db_session, product):
        ledger = LedgerService(db_session)

        ledger.adjust_stock(product.id, -130)
        ledger.adjust_stock(product.id, 5)
        db_session.commit()

        assert product.stock_pieces == -25

    def test_unknown_rows_raise(self, db_session):
        ledger = LedgerService(db_session)

        with pytest.raises(NotFoundError):
            ledger.adjust_due(9999, Decimal("1"))
        with pytest.raises(NotFoundError):
            ledger.adjust_stock(9999, 1)

    def test_zero_delta_is_a_no_op(self, db_session):
        ledger = LedgerService(db_session)

        ledger.adjust_due(9999, Decimal("0"))
        ledger.adjust_stock(9999, 0)


class TestReconciliation:

    def test_detects_drift(self, db_session, customer, product):
        db_session.execute(
            update(Customer).where(Customer.id == customer.id).values(total_due=Decimal("12.00"))
        )
        db_session.execute(
            update(Product).where(Product.id == product.id).values(stock_pieces=97)
        )
        db_session.commit()
        ledger = LedgerService(db_session)

        due = ledger.reconcile_customer(customer.id)
        stock = ledger.reconcile_product(product.id)

        assert not due.is_consistent
        assert due.expected == Decimal("0.00")
        assert due.difference == Decimal("12.00")
        assert not stock.is_consistent
        assert stock.expected == 100
        assert stock.difference == -3

    def test_unknown_subject(self, db_session):
        with pytest.raises(NotFoundError):
            LedgerService(db_session).reconcile_customer(9999)
        with pytest.raises(NotFoundError):
            LedgerService(db_session).reconcile_product(9999)


class TestIdempotentReversal:
    """Creating a record and deleting it leaves every aggregate exactly as it was."""

    def test_sale(self, db_session, customer, product):
        before = snapshot(customer, product)
        service = SaleService(db_session)

        sale = service.create_sale(SaleCreate(
            customer_id=customer.id,
            paid_amount=Decimal("12.34"),
            items=[SaleItemCreate(product_id=product.id, total_pieces=7, amount=Decimal("77.77"))],
        ))
        service.delete_sale(sale.id)

        assert snapshot(customer, product) == before

    def test_payment(self, db_session, customer, product):
        before = snapshot(customer, product)
        service = PaymentService(db_session)

        payment = service.create_payment(PaymentCreate(
            customer_id=customer.id, amount=Decimal("33.33"),
        ))
        service.delete_payment(payment.id)

        assert snapshot(customer, product) == before

    def test_production(self, db_session, customer, product):
        before = snapshot(customer, product)
        service = ProductionService(db_session)

        production = service.create_production(ProductionCreate(
            product_id=product.id, pieces_produced=17,
        ))
        service.delete_production(production.id)

        assert snapshot(customer, product) == before

    def test_sales_return(self, db_session, customer, product):
        before = snapshot(customer, product)
        service = SalesReturnService(db_session)

        sales_return = service.create_return(SalesReturnCreate(
            customer_id=customer.id,
            items=[SalesReturnItemCreate(
                product_id=product.id, total_pieces=3, sub_total=Decimal("19.99"),
            )],
        ))
        service.delete_return(sales_return.id)

        assert snapshot(customer, product) == before


class TestInvariants:

    def test_mixed_activity_stays_consistent(self, db_session, product):
        """Both running totals equal their ledger sums after a busy day."""
        catalog = CatalogService(db_session)
        alice = catalog.create_customer(CustomerCreate(
            name="Alice Hardware", opening_balance=Decimal("150.00"),
        ))
        bob = catalog.create_customer(CustomerCreate(name="Bob Builders"))
        sales = SaleService(db_session)
        payments = PaymentService(db_session)
        productions = ProductionService(db_session)
        returns = SalesReturnService(db_session)

        s1 = sales.create_sale(SaleCreate(
            customer_id=alice.id,
            items=[SaleItemCreate(product_id=product.id, total_pieces=30, amount=Decimal("300.00"))],
        ))
        s2 = sales.create_sale(SaleCreate(
            customer_id=bob.id,
            paid_amount=Decimal("50.00"),
            items=[SaleItemCreate(product_id=product.id, total_pieces=12, amount=Decimal("120.00"))],
        ))
        p1 = payments.create_payment(PaymentCreate(
            customer_id=alice.id, sale_id=s1.id, amount=Decimal("100.00"),
        ))
        payments.update_payment(p1.id, PaymentUpdate(
            customer_id=alice.id, sale_id=s1.id, amount=Decimal("120.00"),
        ))
        run = productions.create_production(ProductionCreate(
            product_id=product.id, pieces_produced=40,
        ))
        productions.update_production(run.id, ProductionUpdate(pieces_produced=35))
        returns.create_return(SalesReturnCreate(
            customer_id=bob.id,
            sale_id=s2.id,
            items=[SalesReturnItemCreate(
                product_id=product.id, total_pieces=2, sub_total=Decimal("20.00"),
            )],
        ))
        sales.update_sale(s1.id, SaleUpdate(
            customer_id=alice.id,
            items=[SaleItemCreate(product_id=product.id, total_pieces=25, amount=Decimal("250.00"))],
        ))
        sales.delete_sale(s2.id)

        ledger = LedgerService(db_session)
        for customer_id in (alice.id, bob.id):
            result = ledger.reconcile_customer(customer_id)
            assert result.is_consistent, result
        assert ledger.reconcile_product(product.id).is_consistent

        assert alice.total_due == Decimal("280.00")
        assert bob.total_due == Decimal("-20.00")
        assert product.stock_pieces == 100 - 25 + 35 + 2
        assert s1.paid_amount == Decimal("120.00")
        assert s1.due_amount == Decimal("130.00")
