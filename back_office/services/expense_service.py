"""
Expense service. Expenses are simple records; they do not
touch customer dues or stock.
"""

import logging
from datetime import date
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from back_office.errors import ConflictError, NotFoundError, ValidationError
from back_office.models import ActivityEvent, Expense, ExpenseCategory
from back_office.models.base import transaction
from back_office.schemas.expense import (
    ExpenseCategoryCreate,
    ExpenseCreate,
    ExpenseUpdate,
)
from back_office.services.activity_service import ActivityService
from back_office.services.ledger_service import money
from back_office.services.pagination import paginate

logger = logging.getLogger("back_office.expenses")


class ExpenseService:

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityService(db)

    def _check_category(self, category_id: int) -> ExpenseCategory:
        category = self.db.get(ExpenseCategory, category_id)
        if not category:
            raise ValidationError(f"Expense category {category_id} not found")
        if not category.is_active:
            raise ValidationError(f"Expense category {category.name} is not active")
        return category

    def create_category(
        self, request: ExpenseCategoryCreate, user_id: int | None = None
    ) -> ExpenseCategory:
        with transaction(self.db):
            existing = self.db.execute(
                select(ExpenseCategory).where(ExpenseCategory.name == request.name)
            ).scalar_one_or_none()
            if existing:
                raise ConflictError(f"Expense category '{request.name}' already exists")

            category = ExpenseCategory(name=request.name, is_active=request.is_active)
            self.db.add(category)
            self.db.flush()
            self.activity.record(
                ActivityEvent.EXPENSE_CATEGORY_CREATED, "expense_category", category.id, user_id,
                name=category.name,
            )
        return category

    def list_categories(self) -> list[ExpenseCategory]:
        return list(self.db.execute(
            select(ExpenseCategory).order_by(ExpenseCategory.name)
        ).scalars().all())

    def create_expense(
        self, request: ExpenseCreate, user_id: int | None = None
    ) -> Expense:
        with transaction(self.db):
            self._check_category(request.expense_category_id)
            expense = Expense(
                expense_category_id=request.expense_category_id,
                amount=money(request.amount),
                expense_date=request.expense_date,
                description=request.description,
                created_by=user_id,
            )
            self.db.add(expense)
            self.db.flush()
            self.activity.record(
                ActivityEvent.EXPENSE_CREATED, "expense", expense.id, user_id,
                category_id=request.expense_category_id,
                amount=expense.amount,
            )
        logger.info("Expense %s recorded: %s", expense.id, expense.amount)
        return expense

    def update_expense(
        self, expense_id: int, request: ExpenseUpdate, user_id: int | None = None
    ) -> Expense:
        with transaction(self.db):
            expense = self.get_expense(expense_id)
            if request.expense_category_id != expense.expense_category_id:
                self._check_category(request.expense_category_id)
            old_amount = expense.amount

            expense.expense_category_id = request.expense_category_id
            expense.amount = money(request.amount)
            expense.expense_date = request.expense_date
            expense.description = request.description

            self.activity.record(
                ActivityEvent.EXPENSE_UPDATED, "expense", expense_id, user_id,
                old_amount=old_amount,
                amount=expense.amount,
            )
        return expense

    def delete_expense(self, expense_id: int, user_id: int | None = None) -> None:
        with transaction(self.db):
            expense = self.get_expense(expense_id)
            amount = expense.amount
            self.db.delete(expense)
            self.activity.record(
                ActivityEvent.EXPENSE_DELETED, "expense", expense_id, user_id,
                amount=amount,
            )

    def get_expense(self, expense_id: int) -> Expense:
        expense = self.db.get(Expense, expense_id)
        if not expense:
            raise NotFoundError(f"Expense {expense_id} not found")
        return expense

    def list_expenses(
        self,
        category_id: int | None = None,
        from_date: date | None = None,
        to_date: date | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[Expense], int]:
        query = select(Expense)
        if category_id is not None:
            query = query.where(Expense.expense_category_id == category_id)
        if from_date:
            query = query.where(Expense.expense_date >= from_date)
        if to_date:
            query = query.where(Expense.expense_date <= to_date)
        return paginate(
            self.db,
            query.order_by(Expense.expense_date.desc(), Expense.id.desc()),
            page,
            per_page,
        )

    def total_for_period(self, from_date: date, to_date: date) -> Decimal:
        total = self.db.execute(
            select(func.coalesce(func.sum(Expense.amount), 0)).where(
                Expense.expense_date >= from_date,
                Expense.expense_date <= to_date,
            )
        ).scalar()
        return money(total)
