"""
Expense and expense category API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.expense import (
    ExpenseCategoryCreate,
    ExpenseCategoryResponse,
    ExpenseCreate,
    ExpenseUpdate,
    ExpenseResponse,
)
from back_office.services.expense_service import ExpenseService

router = APIRouter(tags=["Expenses"])


# --- Category Endpoints ---

@router.get("/expense-categories", response_model=list[ExpenseCategoryResponse])
def list_categories(
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.view")),
):
    return ExpenseService(db).list_categories()


@router.post(
    "/expense-categories",
    response_model=ExpenseCategoryResponse,
    status_code=201,
)
def create_category(
    request: ExpenseCategoryCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.manage")),
):
    service = ExpenseService(db)
    try:
        return service.create_category(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


# --- Expense Endpoints ---

@router.get("/expenses", response_model=Page[ExpenseResponse])
def list_expenses(
    category_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.view")),
):
    page, per_page = paging
    rows, total = ExpenseService(db).list_expenses(
        category_id=category_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("/expenses", response_model=ExpenseResponse, status_code=201)
def create_expense(
    request: ExpenseCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.create")),
):
    service = ExpenseService(db)
    try:
        return service.create_expense(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/expenses/{expense_id}", response_model=ExpenseResponse)
def get_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.view")),
):
    service = ExpenseService(db)
    try:
        return service.get_expense(expense_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/expenses/{expense_id}", response_model=ExpenseResponse)
def update_expense(
    expense_id: int,
    request: ExpenseUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.manage")),
):
    service = ExpenseService(db)
    try:
        return service.update_expense(expense_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.delete("/expenses/{expense_id}", status_code=204)
def delete_expense(
    expense_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("expenses.manage")),
):
    service = ExpenseService(db)
    try:
        service.delete_expense(expense_id, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
    return Response(status_code=204)
