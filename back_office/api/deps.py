"""
Shared request dependencies: the acting user, permission
checks, pagination and error translation.
"""

from fastapi import Depends, Header, HTTPException, Query
from sqlalchemy.orm import Session

from back_office.config import get_settings
from back_office.errors import (
    LedgerError,
    ValidationError,
    NotFoundError,
    ConflictError,
    PersistenceError,
)
from back_office.models import User
from back_office.models.base import get_db

settings = get_settings()

ERROR_STATUS = {
    ValidationError: 400,
    NotFoundError: 404,
    ConflictError: 409,
    PersistenceError: 500,
}


def to_http(error: LedgerError) -> HTTPException:
    """Translate a service error into the matching HTTP error."""
    for error_type, status_code in ERROR_STATUS.items():
        if isinstance(error, error_type):
            return HTTPException(status_code=status_code, detail=str(error))
    return HTTPException(status_code=500, detail=str(error))


def get_current_user(
    x_user_id: int | None = Header(default=None),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the X-User-Id header to an active user.

    Authentication itself happens upstream; this layer only
    trusts the id it is handed.
    """
    if x_user_id is None:
        raise HTTPException(status_code=401, detail="Missing X-User-Id header")
    user = db.get(User, x_user_id)
    if not user or not user.is_active:
        raise HTTPException(status_code=401, detail="Unknown or inactive user")
    return user


def require_permission(permission: str):
    """Dependency factory: the current user must hold a permission."""

    def checker(user: User = Depends(get_current_user)) -> User:
        if not user.can(permission):
            raise HTTPException(
                status_code=403,
                detail=f"Permission '{permission}' required",
            )
        return user

    return checker


def page_params(
    page: int = Query(default=1, ge=1),
    per_page: int = Query(default=settings.PAGE_SIZE, ge=1, le=100),
) -> tuple[int, int]:
    return page, per_page
