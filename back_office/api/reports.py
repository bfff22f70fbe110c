"""
Report API endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from back_office.api.deps import require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.report import DashboardResponse, StockReportResponse
from back_office.services.report_service import ReportService

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.get("/stock", response_model=StockReportResponse)
def stock_report(
    search: str | None = None,
    stock_filter: str = Query(default="all", alias="filter"),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("reports.view")),
):
    """
    Current stock of active products.

    ?filter=low keeps products at or below their alert level,
    ?filter=out keeps those with nothing left.
    """
    service = ReportService(db)
    try:
        return service.stock_report(search=search, stock_filter=stock_filter)
    except LedgerError as e:
        raise to_http(e)


@router.get("/dashboard", response_model=DashboardResponse)
def dashboard(
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("reports.view")),
):
    """Today's and this month's figures, latest documents and the weekly trend."""
    service = ReportService(db)
    return service.dashboard()
