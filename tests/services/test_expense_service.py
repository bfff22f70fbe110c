"""
Tests for the ExpenseService and UserService.
"""

from datetime import date
from decimal import Decimal

import pytest

from back_office.errors import ConflictError, NotFoundError, ValidationError
from back_office.models import UserRole
from back_office.schemas.expense import ExpenseCategoryCreate, ExpenseCreate, ExpenseUpdate
from back_office.schemas.user import UserCreate, UserUpdate
from back_office.services.activity_service import ActivityService
from back_office.services.expense_service import ExpenseService
from back_office.services.user_service import UserService


@pytest.fixture
def category(db_session):
    return ExpenseService(db_session).create_category(ExpenseCategoryCreate(name="Transport"))


class TestExpenses:

    def test_create_update_delete(self, db_session, category, customer):
        service = ExpenseService(db_session)

        expense = service.create_expense(ExpenseCreate(
            expense_category_id=category.id,
            amount=Decimal("250.00"),
            expense_date=date(2026, 5, 2),
            description="Truck hire",
        ))
        service.update_expense(expense.id, ExpenseUpdate(
            expense_category_id=category.id,
            amount=Decimal("275.00"),
            expense_date=date(2026, 5, 2),
        ))

        assert expense.amount == Decimal("275.00")
        assert service.total_for_period(date(2026, 5, 1), date(2026, 5, 31)) == Decimal("275.00")
        assert customer.total_due == Decimal("0.00")

        service.delete_expense(expense.id)
        assert service.list_expenses()[1] == 0

    def test_inactive_category_rejected(self, db_session):
        service = ExpenseService(db_session)
        retired = service.create_category(ExpenseCategoryCreate(name="Old", is_active=False))

        with pytest.raises(ValidationError):
            service.create_expense(ExpenseCreate(
                expense_category_id=retired.id, amount=Decimal("1.00"),
            ))

    def test_duplicate_category_conflicts(self, db_session, category):
        with pytest.raises(ConflictError):
            ExpenseService(db_session).create_category(ExpenseCategoryCreate(name="Transport"))

    def test_list_filters(self, db_session, category):
        service = ExpenseService(db_session)
        office = service.create_category(ExpenseCategoryCreate(name="Office"))
        for category_id, day in ((category.id, 1), (category.id, 20), (office.id, 21)):
            service.create_expense(ExpenseCreate(
                expense_category_id=category_id,
                amount=Decimal("10.00"),
                expense_date=date(2026, 4, day),
            ))

        assert service.list_expenses(category_id=category.id)[1] == 2
        assert service.list_expenses(from_date=date(2026, 4, 15))[1] == 2

    def test_missing_expense(self, db_session):
        with pytest.raises(NotFoundError):
            ExpenseService(db_session).get_expense(9999)


class TestUsers:

    def test_create_and_change_role(self, db_session, admin_user):
        service = UserService(db_session)

        user = service.create_user(
            UserCreate(name="Shop Hand", email="hand@example.com"),
            user_id=admin_user.id,
        )
        assert user.role == UserRole.STAFF
        assert not user.can("sales.delete")

        service.update_user(user.id, UserUpdate(name="Shop Hand", role=UserRole.MANAGER))
        assert user.can("sales.delete")
        assert not user.can("users.manage")

        rows, total = ActivityService(db_session).list_activities(subject_type="user")
        assert total == 2
        assert rows[0].event_type == "user.updated"

    def test_inactive_user_has_no_permissions(self, db_session, admin_user):
        UserService(db_session).update_user(
            admin_user.id, UserUpdate(name="Admin", role=UserRole.ADMIN, is_active=False),
        )

        assert not admin_user.can("sales.view")

    def test_duplicate_email_conflicts(self, db_session, admin_user):
        with pytest.raises(ConflictError):
            UserService(db_session).create_user(
                UserCreate(name="Again", email="admin@example.com")
            )
