"""
User and activity log API endpoints.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from back_office.api.deps import page_params, require_permission, to_http
from back_office.errors import LedgerError
from back_office.models import User
from back_office.models.base import get_db
from back_office.schemas.common import Page
from back_office.schemas.report import ActivityResponse
from back_office.schemas.user import UserCreate, UserUpdate, UserResponse
from back_office.services.activity_service import ActivityService
from back_office.services.user_service import UserService

router = APIRouter(tags=["Users"])


# --- User Endpoints ---

@router.get("/users", response_model=list[UserResponse])
def list_users(
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.manage")),
):
    return UserService(db).list_users()


@router.post("/users", response_model=UserResponse, status_code=201)
def create_user(
    request: UserCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.manage")),
):
    service = UserService(db)
    try:
        return service.create_user(request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


@router.get("/users/{target_id}", response_model=UserResponse)
def get_user(
    target_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.manage")),
):
    service = UserService(db)
    try:
        return service.get_user(target_id)
    except LedgerError as e:
        raise to_http(e)


@router.put("/users/{target_id}", response_model=UserResponse)
def update_user(
    target_id: int,
    request: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("users.manage")),
):
    """Change a user's name, role or active flag."""
    service = UserService(db)
    try:
        return service.update_user(target_id, request, user_id=user.id)
    except LedgerError as e:
        raise to_http(e)


# --- Activity Endpoints ---

@router.get("/activities", response_model=Page[ActivityResponse])
def list_activities(
    event_type: str | None = None,
    subject_type: str | None = None,
    user_id: int | None = None,
    paging: tuple[int, int] = Depends(page_params),
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("activities.view")),
):
    """Audit trail, newest first."""
    page, per_page = paging
    rows, total = ActivityService(db).list_activities(
        event_type=event_type,
        subject_type=subject_type,
        user_id=user_id,
        page=page,
        per_page=per_page,
    )
    return {"items": rows, "total": total, "page": page, "per_page": per_page}


@router.get("/activities/{activity_id}", response_model=ActivityResponse)
def get_activity(
    activity_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_permission("activities.view")),
):
    service = ActivityService(db)
    try:
        return service.get_activity(activity_id)
    except LedgerError as e:
        raise to_http(e)
