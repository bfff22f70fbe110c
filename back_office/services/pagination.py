"""Offset pagination shared by the list methods of every service."""

from sqlalchemy import Select, select, func
from sqlalchemy.orm import Session


def paginate(db: Session, query: Select, page: int, per_page: int) -> tuple[list, int]:
    """
    Run an ordered select for one page.

    Returns the page's rows and the total row count across
    all pages.
    """
    page = max(page, 1)
    total = db.execute(
        select(func.count()).select_from(query.order_by(None).subquery())
    ).scalar_one()
    rows = db.execute(
        query.offset((page - 1) * per_page).limit(per_page)
    ).scalars().all()
    return list(rows), total
