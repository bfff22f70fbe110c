"""
Customer API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.catalog import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
)
from back_office.schemas.common import Page
from back_office.schemas.report import ReconciliationResponse, StatementResponse
from back_office.services.catalog_service import CatalogService
from back_office.services.ledger_service import LedgerService
from back_office.services.report_service import ReportService

router = APIRouter(prefix="/customers", tags=["Customers"])


@router.get("", response_model=Page[CustomerResponse])
def list_customers(
    search: str | None = None,
    with_due: bool = False,
    active_only: bool = False,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.view")),
):
    """List customers, optionally only those who owe money."""
    page, per_page = paging
    rows, total = CatalogService(db).list_customers(
        search=search,
        with_due=with_due,
        active_only=active_only,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("", response_model=CustomerResponse, status_code=201)
def create_customer(
    request: CustomerCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.manage")),
):
    """Create a customer. total_due starts at the opening balance."""
    service = CatalogService(db)
    try:
        return service.create_customer(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{customer_id}", response_model=CustomerResponse)
def get_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.view")),
):
    service = CatalogService(db)
    try:
        return service.get_customer(customer_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/{customer_id}", response_model=CustomerResponse)
def update_customer(
    customer_id: int,
    request: CustomerUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.manage")),
):
    """
    Update a customer.

    A changed opening balance moves total_due by the difference.
    """
    service = CatalogService(db)
    try:
        return service.update_customer(customer_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{customer_id}/statement", response_model=StatementResponse)
def get_statement(
    customer_id: int,
    from_date: date | None = None,
    to_date: date | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.view")),
):
    """Dated sales, payments and returns with a running balance."""
    service = ReportService(db)
    try:
        return service.customer_statement(customer_id, from_date, to_date)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{customer_id}/reconcile", response_model=ReconciliationResponse)
def reconcile_customer(
    customer_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("reports.view")),
):
    """Compare total_due with the sum of the customer's records."""
    service = LedgerService(db)
    try:
        return service.reconcile_customer(customer_id)
    except LedgerError as e:
        raise to_http(e)
