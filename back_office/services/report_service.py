"""
Report service — read-only views over the ledger.

None of the reports writes anything. The customer statement
is built from the same records that feed total_due, so its
closing balance for an open-ended range equals the running
total_due of a consistent customer.
"""

from datetime import date, timedelta
from decimal import Decimal

from sqlalchemy import case, select, func
from sqlalchemy.orm import Session

from back_office.errors import NotFoundError, ValidationError
from back_office.models import (
    Customer,
    Expense,
    ExpenseCategory,
    Payment,
    Product,
    Production,
    Sale,
    SalesReturn,
)
from back_office.schemas.catalog import ProductResponse
from back_office.schemas.report import (
    CustomerSummary,
    DailyTotals,
    DashboardResponse,
    ExpenseShare,
    PeriodStats,
    ProductionStats,
    RecentExpense,
    RecentPayment,
    RecentSale,
    StatementLine,
    StatementResponse,
    StockReportResponse,
    StockStats,
)
from back_office.services.ledger_service import ZERO, money

STOCK_FILTERS = ("all", "low", "out")


class ReportService:

    def __init__(self, db: Session):
        self.db = db

    # --- Stock ---

    def stock_report(
        self, search: str | None = None, stock_filter: str = "all"
    ) -> StockReportResponse:
        """
        Active products with their current stock.

        stock_filter narrows the list: "low" keeps products at or
        under their alert level, "out" keeps those with no pieces
        left. The stats always describe every active product.
        """
        if stock_filter not in STOCK_FILTERS:
            raise ValidationError(
                f"Unknown stock filter '{stock_filter}'. Use one of {', '.join(STOCK_FILTERS)}"
            )

        active = self._active_products()
        stats = self._stock_stats(active)

        products = active
        if search:
            needle = search.strip().lower()
            products = [
                p for p in products
                if needle in p.name.lower() or needle in (p.size or "").lower()
            ]
        if stock_filter == "low":
            products = [p for p in products if p.is_low_stock()]
        elif stock_filter == "out":
            products = [p for p in products if p.stock_pieces <= 0]

        return StockReportResponse(
            products=[ProductResponse.model_validate(p) for p in products],
            stats=stats,
        )

    def _active_products(self) -> list[Product]:
        return list(self.db.execute(
            select(Product).where(Product.is_active.is_(True)).order_by(Product.name)
        ).scalars().all())

    @staticmethod
    def _stock_stats(active: list[Product]) -> StockStats:
        return StockStats(
            total_products=len(active),
            low_stock_count=sum(1 for p in active if p.is_low_stock()),
            out_of_stock_count=sum(1 for p in active if p.stock_pieces <= 0),
            total_stock_pieces=sum(p.stock_pieces for p in active),
        )

    # --- Dashboard ---

    def dashboard(self, today: date | None = None) -> DashboardResponse:
        """
        Business at a glance as of today.

        Sales, payment, expense and production figures for all
        time, today and the month so far; stock and customer
        summaries; the five latest sales, payments and expenses;
        daily sales against payments for the last seven days; and
        this month's six largest expense categories.
        """
        today = today or date.today()
        month_start = today.replace(day=1)

        production = self._period_row(
            Production.id, Production.production_date, Production.pieces_produced,
            today, month_start,
        )
        customers = self.db.execute(
            select(
                func.count(Customer.id),
                func.count(case((Customer.total_due > 0, 1))),
                func.coalesce(
                    func.sum(case((Customer.total_due > 0, Customer.total_due), else_=0)), 0
                ),
            )
        ).one()

        return DashboardResponse(
            as_of=today,
            sales=self._period_stats(
                Sale.id, Sale.sale_date, Sale.net_amount, today, month_start
            ),
            payments=self._period_stats(
                Payment.id, Payment.payment_date, Payment.amount, today, month_start
            ),
            expenses=self._period_stats(
                Expense.id, Expense.expense_date, Expense.amount, today, month_start
            ),
            production=ProductionStats(
                total_count=production[0],
                today_count=production[1],
                today_pieces=int(production[2]),
                month_pieces=int(production[3]),
            ),
            stock=self._stock_stats(self._active_products()),
            customers=CustomerSummary(
                total_customers=customers[0],
                customers_with_dues=customers[1],
                total_outstanding=money(customers[2]),
            ),
            recent_sales=[
                RecentSale(
                    id=s.id,
                    bill_no=s.bill_no,
                    customer_name=s.customer.name,
                    sale_date=s.sale_date,
                    net_amount=money(s.net_amount),
                )
                for s in self._latest(Sale, Sale.sale_date)
            ],
            recent_payments=[
                RecentPayment(
                    id=p.id,
                    customer_name=p.customer.name,
                    payment_date=p.payment_date,
                    amount=money(p.amount),
                )
                for p in self._latest(Payment, Payment.payment_date)
            ],
            recent_expenses=[
                RecentExpense(
                    id=e.id,
                    category_name=e.category.name,
                    expense_date=e.expense_date,
                    amount=money(e.amount),
                    description=e.description,
                )
                for e in self._latest(Expense, Expense.expense_date)
            ],
            last_seven_days=self._last_seven_days(today),
            expense_breakdown=self._expense_breakdown(month_start),
        )

    def _period_row(self, id_col, date_col, amount_col, today: date, month_start: date):
        return self.db.execute(
            select(
                func.count(id_col),
                func.count(case((date_col == today, 1))),
                func.coalesce(func.sum(case((date_col == today, amount_col), else_=0)), 0),
                func.coalesce(func.sum(case((date_col >= month_start, amount_col), else_=0)), 0),
            )
        ).one()

    def _period_stats(self, id_col, date_col, amount_col, today: date, month_start: date) -> PeriodStats:
        row = self._period_row(id_col, date_col, amount_col, today, month_start)
        return PeriodStats(
            total_count=row[0],
            today_count=row[1],
            today_amount=money(row[2]),
            month_amount=money(row[3]),
        )

    def _latest(self, model, date_col, limit: int = 5):
        return self.db.execute(
            select(model).order_by(date_col.desc(), model.id.desc()).limit(limit)
        ).scalars().all()

    def _daily_totals(self, amount_col, date_col, start: date, end: date) -> dict[date, Decimal]:
        rows = self.db.execute(
            select(date_col, func.sum(amount_col))
            .where(date_col >= start, date_col <= end)
            .group_by(date_col)
        ).all()
        return {day: money(total) for day, total in rows}

    def _last_seven_days(self, today: date) -> list[DailyTotals]:
        start = today - timedelta(days=6)
        sales = self._daily_totals(Sale.net_amount, Sale.sale_date, start, today)
        payments = self._daily_totals(Payment.amount, Payment.payment_date, start, today)

        days = []
        for offset in range(7):
            day = start + timedelta(days=offset)
            days.append(DailyTotals(
                day=day,
                weekday=day.strftime("%a"),
                sales=sales.get(day, money(ZERO)),
                payments=payments.get(day, money(ZERO)),
            ))
        return days

    def _expense_breakdown(self, month_start: date, limit: int = 6) -> list[ExpenseShare]:
        total = func.sum(Expense.amount).label("total")
        rows = self.db.execute(
            select(ExpenseCategory.name, total)
            .join(Expense, Expense.expense_category_id == ExpenseCategory.id)
            .where(Expense.expense_date >= month_start)
            .group_by(ExpenseCategory.id, ExpenseCategory.name)
            .order_by(total.desc(), ExpenseCategory.name)
            .limit(limit)
        ).all()
        return [ExpenseShare(category_name=name, total=money(amount)) for name, amount in rows]

    # --- Customer statement ---

    def customer_statement(
        self,
        customer_id: int,
        from_date: date | None = None,
        to_date: date | None = None,
    ) -> StatementResponse:
        """
        Dated debit/credit lines for one customer with a running balance.

        Sales are debits (their posted due); payments and sales
        returns are credits. The opening balance folds in the
        customer's opening figure and everything dated before
        from_date. Defaults to the current month.
        """
        customer = self.db.get(Customer, customer_id)
        if not customer:
            raise NotFoundError(f"Customer {customer_id} not found")

        today = date.today()
        from_date = from_date or today.replace(day=1)
        to_date = to_date or today
        if from_date > to_date:
            raise ValidationError("from_date must not be after to_date")

        opening = money(
            money(customer.opening_balance)
            + self._sum(Sale.posted_due, Sale.customer_id, Sale.sale_date, customer_id, from_date)
            - self._sum(Payment.amount, Payment.customer_id, Payment.payment_date, customer_id, from_date)
            - self._sum(
                SalesReturn.grand_total, SalesReturn.customer_id,
                SalesReturn.return_date, customer_id, from_date,
            )
        )

        entries = []
        for sale in self._between(Sale, Sale.sale_date, customer_id, from_date, to_date):
            entries.append((
                sale.sale_date, 0, sale.id, "sale", sale.bill_no,
                f"Sale of {sale.total_pieces} pieces, net {money(sale.net_amount)}",
                money(sale.posted_due), ZERO,
            ))
        for payment in self._between(Payment, Payment.payment_date, customer_id, from_date, to_date):
            reference = payment.payment_ref or f"PAY-{payment.id}"
            description = "Payment received"
            if payment.sale is not None:
                description = f"Payment against {payment.sale.bill_no}"
            entries.append((
                payment.payment_date, 1, payment.id, "payment", reference,
                description, ZERO, money(payment.amount),
            ))
        for sales_return in self._between(
            SalesReturn, SalesReturn.return_date, customer_id, from_date, to_date
        ):
            entries.append((
                sales_return.return_date, 2, sales_return.id, "return", sales_return.return_no,
                "Sales return", ZERO, money(sales_return.grand_total),
            ))
        entries.sort(key=lambda e: (e[0], e[1], e[2]))

        balance = opening
        total_debit = ZERO
        total_credit = ZERO
        lines = []
        for entry_date, _, _, entry_type, reference, description, debit, credit in entries:
            balance = balance + debit - credit
            total_debit += debit
            total_credit += credit
            lines.append(StatementLine(
                entry_date=entry_date,
                type=entry_type,
                reference=reference,
                description=description,
                debit=debit,
                credit=credit,
                balance=balance,
            ))

        return StatementResponse(
            customer_id=customer.id,
            customer_name=customer.name,
            from_date=from_date,
            to_date=to_date,
            opening_balance=opening,
            lines=lines,
            total_debit=total_debit,
            total_credit=total_credit,
            closing_balance=balance,
        )

    def _sum(self, amount_col, customer_col, date_col, customer_id: int, before: date) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(amount_col), 0))
            .where(customer_col == customer_id, date_col < before)
        ).scalar()
        return money(total)

    def _between(self, model, date_col, customer_id: int, from_date: date, to_date: date):
        return self.db.execute(
            select(model)
            .where(
                model.customer_id == customer_id,
                date_col >= from_date,
                date_col <= to_date,
            )
            .order_by(date_col, model.id)
        ).scalars().all()
