"""
Pydantic schemas for read-only views: reconciliation, stock
report, customer statement, dashboard and the activity log.
"""

from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel

from back_office.schemas.catalog import ProductResponse


class ReconciliationResponse(BaseModel):
    """
    Running aggregate compared against the sum of its records.

    difference = actual - expected. Anything other than zero
    means the aggregate has drifted from the ledger.
    """
    subject_type: str
    subject_id: int
    field: str
    expected: Decimal
    actual: Decimal
    difference: Decimal
    is_consistent: bool


class StockStats(BaseModel):
    total_products: int
    low_stock_count: int
    out_of_stock_count: int
    total_stock_pieces: int


class StockReportResponse(BaseModel):
    products: list[ProductResponse]
    stats: StockStats


class StatementLine(BaseModel):
    entry_date: date
    type: str
    reference: str
    description: str
    debit: Decimal
    credit: Decimal
    balance: Decimal


class StatementResponse(BaseModel):
    customer_id: int
    customer_name: str
    from_date: date
    to_date: date
    opening_balance: Decimal
    lines: list[StatementLine]
    total_debit: Decimal
    total_credit: Decimal
    closing_balance: Decimal


# --- Dashboard ---

class PeriodStats(BaseModel):
    """Document count and amount totals: all time, today, this month."""
    total_count: int
    today_count: int
    today_amount: Decimal
    month_amount: Decimal


class ProductionStats(BaseModel):
    total_count: int
    today_count: int
    today_pieces: int
    month_pieces: int


class CustomerSummary(BaseModel):
    total_customers: int
    customers_with_dues: int
    total_outstanding: Decimal


class RecentSale(BaseModel):
    id: int
    bill_no: str
    customer_name: str
    sale_date: date
    net_amount: Decimal


class RecentPayment(BaseModel):
    id: int
    customer_name: str
    payment_date: date
    amount: Decimal


class RecentExpense(BaseModel):
    id: int
    category_name: str
    expense_date: date
    amount: Decimal
    description: str | None


class DailyTotals(BaseModel):
    day: date
    weekday: str
    sales: Decimal
    payments: Decimal


class ExpenseShare(BaseModel):
    category_name: str
    total: Decimal


class DashboardResponse(BaseModel):
    as_of: date
    sales: PeriodStats
    payments: PeriodStats
    expenses: PeriodStats
    production: ProductionStats
    stock: StockStats
    customers: CustomerSummary
    recent_sales: list[RecentSale]
    recent_payments: list[RecentPayment]
    recent_expenses: list[RecentExpense]
    last_seven_days: list[DailyTotals]
    expense_breakdown: list[ExpenseShare]


class ActivityResponse(BaseModel):
    id: int
    event_type: str
    subject_type: str
    subject_id: int | None
    user_id: int | None
    details: str
    created_at: datetime

    model_config = {"from_attributes": True}
