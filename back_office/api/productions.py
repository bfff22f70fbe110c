"""
Production API endpoints.
"""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.production import (
    ProductionCreate,
    ProductionUpdate,
    ProductionResponse,
)
from back_office.services.production_service import ProductionService

router = APIRouter(prefix="/productions", tags=["Productions"])


@router.get("", response_model=Page[ProductionResponse])
def list_productions(
    search: str | None = None,
    product_id: int | None = None,
    from_date: date | None = None,
    to_date: date | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("productions.view")),
):
    page, per_page = paging
    rows, total = ProductionService(db).list_productions(
        search=search,
        product_id=product_id,
        from_date=from_date,
        to_date=to_date,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("", response_model=ProductionResponse, status_code=201)
def create_production(
    request: ProductionCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("productions.create")),
):
    """Record a production run. The pieces go into stock."""
    service = ProductionService(db)
    try:
        return service.create_production(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/{production_id}", response_model=ProductionResponse)
def get_production(
    production_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("productions.view")),
):
    service = ProductionService(db)
    try:
        return service.get_production(production_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/{production_id}", response_model=ProductionResponse)
def update_production(
    production_id: int,
    request: ProductionUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("productions.edit")),
):
    service = ProductionService(db)
    try:
        return service.update_production(production_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.delete("/{production_id}", status_code=204)
def delete_production(
    production_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("productions.delete")),
):
    service = ProductionService(db)
    try:
        service.delete_production(production_id, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
    return Response(status_code=204)
