"""
Sales return API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.sale import (
    SalesReturnCreate,
    SalesReturnUpdate,
    SalesReturnResponse,
)
from back_office.services.sales_return_service import SalesReturnService

router = APIRouter(prefix="/sales-returns", tags=["Sales Returns"])


@router.get("", response_model=Page[SalesReturnResponse])
def list_returns(
    search: str | None = None,
    customer_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales_returns.view")),
):
    page, per_page = paging
    rows, total = SalesReturnService(db).list_returns(
        search=search,
        customer_id=customer_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("", response_model=SalesReturnResponse, status_code=201)
def create_return(
    request: SalesReturnCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales_returns.create")),
):
    """Record a return. Pieces go back into stock; the customer is credited."""
    service = SalesReturnService(db)
    try:
        return service.create_return(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{return_id}", response_model=SalesReturnResponse)
def get_return(
    return_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales_returns.view")),
):
    service = SalesReturnService(db)
    try:
        return service.get_return(return_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/{return_id}", response_model=SalesReturnResponse)
def update_return(
    return_id: int,
    request: SalesReturnUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales_returns.edit")),
):
    service = SalesReturnService(db)
    try:
        return service.update_return(return_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.delete("/{return_id}", status_code=204)
def delete_return(
    return_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales_returns.delete")),
):
    service = SalesReturnService(db)
    try:
        service.delete_return(return_id, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
    return Response(status_code=204)
