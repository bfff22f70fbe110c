"""
Tests for the ReportService: stock report, customer statement and dashboard.
"""

from datetime import date
from decimal import Decimal

import pytest

from back_office.errors import NotFoundError, ValidationError
from back_office.schemas.catalog import CustomerCreate, ProductCreate
from back_office.schemas.expense import ExpenseCategoryCreate, ExpenseCreate
from back_office.schemas.payment import PaymentCreate
from back_office.schemas.production import ProductionCreate
from back_office.schemas.sale import (
    SaleCreate,
    SaleItemCreate,
    SalesReturnCreate,
    SalesReturnItemCreate,
)
from back_office.services.catalog_service import CatalogService
from back_office.services.expense_service import ExpenseService
from back_office.services.payment_service import PaymentService
from back_office.services.production_service import ProductionService
from back_office.services.report_service import ReportService
from back_office.services.sale_service import SaleService
from back_office.services.sales_return_service import SalesReturnService


class TestStockReport:

    def setup_products(self, db_session):
        service = CatalogService(db_session)
        service.create_product(ProductCreate(name="Plenty", opening_stock=50, min_stock_alert=10))
        service.create_product(ProductCreate(name="Running Low", opening_stock=8, min_stock_alert=10))
        service.create_product(ProductCreate(name="Sold Out", opening_stock=0, min_stock_alert=10))
        service.create_product(ProductCreate(name="Retired", opening_stock=99, is_active=False))

    def test_stats_cover_active_products(self, db_session):
        self.setup_products(db_session)

        report = ReportService(db_session).stock_report()

        assert [p.name for p in report.products] == ["Plenty", "Running Low", "Sold Out"]
        assert report.stats.total_products == 3
        assert report.stats.low_stock_count == 2
        assert report.stats.out_of_stock_count == 1
        assert report.stats.total_stock_pieces == 58

    def test_filters(self, db_session):
        self.setup_products(db_session)
        service = ReportService(db_session)

        low = service.stock_report(stock_filter="low")
        out = service.stock_report(stock_filter="out")
        searched = service.stock_report(search="plen")

        assert [p.name for p in low.products] == ["Running Low", "Sold Out"]
        assert [p.name for p in out.products] == ["Sold Out"]
        assert [p.name for p in searched.products] == ["Plenty"]
        assert searched.stats.total_products == 3

    def test_unknown_filter(self, db_session):
        with pytest.raises(ValidationError):
            ReportService(db_session).stock_report(stock_filter="weird")


class TestCustomerStatement:

    def test_running_balance(self, db_session, product):
        customer = CatalogService(db_session).create_customer(CustomerCreate(
            name="Statement Co", opening_balance=Decimal("100.00"),
        ))
        sales = SaleService(db_session)
        sales.create_sale(SaleCreate(
            customer_id=customer.id,
            sale_date=date(2026, 1, 20),
            items=[SaleItemCreate(product_id=product.id, total_pieces=5, amount=Decimal("50.00"))],
        ))
        in_range = sales.create_sale(SaleCreate(
            customer_id=customer.id,
            sale_date=date(2026, 2, 3),
            items=[SaleItemCreate(product_id=product.id, total_pieces=20, amount=Decimal("200.00"))],
        ))
        PaymentService(db_session).create_payment(PaymentCreate(
            customer_id=customer.id,
            sale_id=in_range.id,
            amount=Decimal("120.00"),
            payment_date=date(2026, 2, 10),
        ))
        SalesReturnService(db_session).create_return(SalesReturnCreate(
            customer_id=customer.id,
            return_date=date(2026, 2, 15),
            items=[SalesReturnItemCreate(
                product_id=product.id, total_pieces=2, sub_total=Decimal("20.00"),
            )],
        ))

        statement = ReportService(db_session).customer_statement(
            customer.id, date(2026, 2, 1), date(2026, 2, 28),
        )

        assert statement.opening_balance == Decimal("150.00")
        assert [line.type for line in statement.lines] == ["sale", "payment", "return"]
        assert [line.balance for line in statement.lines] == [
            Decimal("350.00"), Decimal("230.00"), Decimal("210.00"),
        ]
        assert statement.lines[1].description == f"Payment against {in_range.bill_no}"
        assert statement.total_debit == Decimal("200.00")
        assert statement.total_credit == Decimal("140.00")
        assert statement.closing_balance == Decimal("210.00")
        assert statement.closing_balance == customer.total_due

    def test_defaults_to_current_month(self, db_session, customer):
        statement = ReportService(db_session).customer_statement(customer.id)

        assert statement.from_date == date.today().replace(day=1)
        assert statement.to_date == date.today()
        assert statement.lines == []

    def test_invalid_range(self, db_session, customer):
        with pytest.raises(ValidationError):
            ReportService(db_session).customer_statement(
                customer.id, date(2026, 3, 1), date(2026, 2, 1),
            )

    def test_unknown_customer(self, db_session):
        with pytest.raises(NotFoundError):
            ReportService(db_session).customer_statement(9999)


class TestDashboard:

    def test_figures_as_of_day(self, db_session, customer, product):
        """Tuesday 10 March 2026, with one February sale and expense to leave out of the month."""
        sales = SaleService(db_session)
        for sale_date, pieces, amount in (
            (date(2026, 2, 25), 10, "100.00"),
            (date(2026, 3, 4), 20, "200.00"),
            (date(2026, 3, 10), 5, "50.00"),
        ):
            sales.create_sale(SaleCreate(
                customer_id=customer.id,
                sale_date=sale_date,
                items=[SaleItemCreate(
                    product_id=product.id, total_pieces=pieces, amount=Decimal(amount),
                )],
            ))
        PaymentService(db_session).create_payment(PaymentCreate(
            customer_id=customer.id, amount=Decimal("80.00"), payment_date=date(2026, 3, 9),
        ))
        productions = ProductionService(db_session)
        productions.create_production(ProductionCreate(
            product_id=product.id, pieces_produced=5, production_date=date(2026, 2, 1),
        ))
        productions.create_production(ProductionCreate(
            product_id=product.id, pieces_produced=20, production_date=date(2026, 3, 10),
        ))
        expenses = ExpenseService(db_session)
        transport = expenses.create_category(ExpenseCategoryCreate(name="Transport"))
        office = expenses.create_category(ExpenseCategoryCreate(name="Office"))
        for category, amount, expense_date in (
            (transport, "500.00", date(2026, 2, 20)),
            (office, "30.00", date(2026, 3, 2)),
            (transport, "120.00", date(2026, 3, 10)),
        ):
            expenses.create_expense(ExpenseCreate(
                expense_category_id=category.id,
                amount=Decimal(amount),
                expense_date=expense_date,
            ))

        dashboard = ReportService(db_session).dashboard(today=date(2026, 3, 10))

        assert dashboard.sales.total_count == 3
        assert dashboard.sales.today_count == 1
        assert dashboard.sales.today_amount == Decimal("50.00")
        assert dashboard.sales.month_amount == Decimal("250.00")
        assert dashboard.payments.today_count == 0
        assert dashboard.payments.month_amount == Decimal("80.00")
        assert dashboard.expenses.today_amount == Decimal("120.00")
        assert dashboard.expenses.month_amount == Decimal("150.00")
        assert dashboard.production.total_count == 2
        assert dashboard.production.today_pieces == 20
        assert dashboard.production.month_pieces == 20

        assert dashboard.stock.total_stock_pieces == 90
        assert dashboard.customers.customers_with_dues == 1
        assert dashboard.customers.total_outstanding == Decimal("270.00")
        assert dashboard.customers.total_outstanding == customer.total_due

        assert [s.sale_date for s in dashboard.recent_sales] == [
            date(2026, 3, 10), date(2026, 3, 4), date(2026, 2, 25),
        ]
        assert dashboard.recent_sales[0].customer_name == "Rahim Traders"
        assert dashboard.recent_expenses[0].category_name == "Transport"

        week = dashboard.last_seven_days
        assert [d.day for d in week] == [date(2026, 3, d) for d in range(4, 11)]
        assert week[-1].weekday == "Tue"
        assert week[0].sales == Decimal("200.00")
        assert week[5].payments == Decimal("80.00")
        assert week[-1].sales == Decimal("50.00")

        assert [(e.category_name, e.total) for e in dashboard.expense_breakdown] == [
            ("Transport", Decimal("120.00")), ("Office", Decimal("30.00")),
        ]

    def test_empty_books(self, db_session):
        dashboard = ReportService(db_session).dashboard(today=date(2026, 3, 10))

        assert dashboard.sales.total_count == 0
        assert dashboard.sales.month_amount == Decimal("0.00")
        assert dashboard.customers.total_outstanding == Decimal("0.00")
        assert dashboard.recent_sales == []
        assert len(dashboard.last_seven_days) == 7
        assert all(d.sales == Decimal("0.00") for d in dashboard.last_seven_days)
        assert dashboard.expense_breakdown == []
