"""
Product and payment type API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.catalog import (
    ProductCreate,
    ProductUpdate,
    ProductResponse,
    PaymentTypeCreate,
    PaymentTypeResponse,
)
from back_office.schemas.common import Page
from back_office.schemas.report import ReconciliationResponse
from back_office.services.catalog_service import CatalogService
from back_office.services.ledger_service import LedgerService

router = APIRouter(tags=["Products"])


# --- Product Endpoints ---

@router.get("/products", response_model=Page[ProductResponse])
def list_products(
    search: str | None = None,
    active_only: bool = False,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("products.view")),
):
    page, per_page = paging
    rows, total = CatalogService(db).list_products(
        search=search, active_only=active_only, page=page, per_page=per_page
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.post("/products", response_model=ProductResponse, status_code=201)
def create_product(
    request: ProductCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("products.manage")),
):
    """Create a product. stock_pieces starts at the opening stock."""
    service = CatalogService(db)
    try:
        return service.create_product(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/products/{product_id}", response_model=ProductResponse)
def get_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("products.view")),
):
    service = CatalogService(db)
    try:
        return service.get_product(product_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/products/{product_id}", response_model=ProductResponse)
def update_product(
    product_id: int,
    request: ProductUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("products.manage")),
):
    """
    Update a product.

    A changed opening stock moves stock_pieces by the difference.
    """
    service = CatalogService(db)
    try:
        return service.update_product(product_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/products/{product_id}/reconcile", response_model=ReconciliationResponse)
def reconcile_product(
    product_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("reports.view")),
):
    """Compare stock_pieces with the sum of the product's movements."""
    service = LedgerService(db)
    try:
        return service.reconcile_product(product_id)
    except LedgerError as e:
        raise to_http(e)


# --- Payment Type Endpoints ---

@router.get("/payment-types", response_model=list[PaymentTypeResponse])
def list_payment_types(
    active_only: bool = True,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("payments.view")),
):
    return CatalogService(db).list_payment_types(active_only=active_only)


@router.post("/payment-types", response_model=PaymentTypeResponse, status_code=201)
def create_payment_type(
    request: PaymentTypeCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("customers.manage")),
):
    service = CatalogService(db)
    try:
        return service.create_payment_type(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)
