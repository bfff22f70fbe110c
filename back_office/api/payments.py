"""
Payment API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.payment import PaymentCreate, PaymentUpdate, PaymentResponse
from back_office.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["Payments"])


@router.get("", response_model=Page[PaymentResponse])
def list_payments(
    search: str | None = None,
    customer_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.view")),
):
    page, per_page = paging
    rows, total = PaymentService(db).list_payments(
        search=search,
        customer_id=customer_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("", response_model=PaymentResponse, status_code=201)
def create_payment(
    request: PaymentCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.create")),
):
    """Record a payment against a customer and, optionally, one of their sales."""
    service = PaymentService(db)
    try:
        return service.create_payment(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{payment_id}", response_model=PaymentResponse)
def get_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.view")),
):
    service = PaymentService(db)
    try:
        return service.get_payment(payment_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/{payment_id}", response_model=PaymentResponse)
def update_payment(
    payment_id: int,
    request: PaymentUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.edit")),
):
    service = PaymentService(db)
    try:
        return service.update_payment(payment_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.delete("/{payment_id}", status_code=204)
def delete_payment(
    payment_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.delete")),
):
    service = PaymentService(db)
    try:
        service.delete_payment(payment_id, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
    return Response(status_code=204)
