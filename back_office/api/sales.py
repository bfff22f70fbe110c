"""
Sale API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.config import get_settings
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.sale import SaleCreate, SaleUpdate, SaleResponse
from back_office.services.sale_service import SaleService

router = APIRouter(prefix="/sales", tags=["Sales"])


@router.get("", response_model=Page[SaleResponse])
def list_sales(
    search: str | None = None,
    customer_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.view")),
):
    """List sales newest first. search matches bill number or customer name."""
    page, per_page = paging
    rows, total = SaleService(db).list_sales(
        search=search,
        customer_id=customer_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.get("/next-bill-no")
def next_bill_no(
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.create")),
):
    """Preview the bill number the next sale will receive."""
    return {"bill_no": SaleService(db).next_bill_no()}


@router.post("", response_model=SaleResponse, status_code=201)
def create_sale(
    request: SaleCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.create")),
):
    """
    Enter a sale.

    Stock goes out and the sale's due is added to the customer.
    Unless negative stock is allowed, a sale asking for more
    pieces than are on hand is refused.
    """
    service = SaleService(db)
    try:
        if not get_settings().ALLOW_NEGATIVE_STOCK:
            service.check_stock_availability(request.items)
        return service.create_sale(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{sale_id}", response_model=SaleResponse)
def get_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.view")),
):
    service = SaleService(db)
    try:
        return service.get_sale(sale_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/{sale_id}", response_model=SaleResponse)
def update_sale(
    sale_id: int,
    request: SaleUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.edit")),
):
    """
    Replace a sale's header and items.

    The old version is reversed before the new one is applied.
    """
    service = SaleService(db)
    try:
        if not get_settings().ALLOW_NEGATIVE_STOCK:
            service.check_stock_availability(request.items, sale_id=sale_id)
        return service.update_sale(sale_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.delete("/{sale_id}", status_code=204)
def delete_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("sales.delete")),
):
    """Delete a sale, returning its stock and removing its due."""
    service = SaleService(db)
    try:
        service.delete_sale(sale_id, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
    return Response(status_code=204)
