"""
User service — back-office accounts and their roles.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from back_office.errors import ConflictError, NotFoundError
from back_office.models import ActivityEvent, User
from back_office.models.base import transaction
from back_office.schemas.user import UserCreate, UserUpdate
from back_office.services.activity_service import ActivityService


class UserService:

    def __init__(self, db: Session):
        self.db = db
        self.activity = ActivityService(db)

    def create_user(self, request: UserCreate, user_id: int | None = None) -> User:
        """Create a user. Raises ConflictError if the email is taken."""
        with transaction(self.db):
            existing = self.db.execute(
                select(User).where(User.email == request.email)
            ).scalar_one_or_none()
            if existing:
                raise ConflictError(f"User with email '{request.email}' already exists")

            user = User(name=request.name, email=request.email, role=request.role)
            self.db.add(user)
            self.db.flush()
            self.activity.record(
                ActivityEvent.USER_CREATED, "user", user.id, user_id,
                email=user.email,
                role=user.role.value,
            )
        return user

    def update_user(
        self, target_id: int, request: UserUpdate, user_id: int | None = None
    ) -> User:
        with transaction(self.db):
            user = self.get_user(target_id)
            old_role = user.role
            user.name = request.name
            user.role = request.role
            user.is_active = request.is_active
            self.activity.record(
                ActivityEvent.USER_UPDATED, "user", target_id, user_id,
                old_role=old_role.value,
                role=request.role.value,
                is_active=request.is_active,
            )
        return user

    def get_user(self, target_id: int) -> User:
        user = self.db.get(User, target_id)
        if not user:
            raise NotFoundError(f"User {target_id} not found")
        return user

    def list_users(self) -> list[User]:
        return list(self.db.execute(select(User).order_by(User.name)).scalars().all())
