"""
Activity service — append-only audit trail.

record() adds a log row to the current session, so the entry
commits or rolls back together with the change it describes.
"""

import json

from sqlalchemy import select
from sqlalchemy.orm import Session

from back_office.errors import NotFoundError
from back_office.models import AuditLog, ActivityEvent
from back_office.services.pagination import paginate


class ActivityService:

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        event: ActivityEvent,
        subject_type: str,
        subject_id: int | None,
        user_id: int | None = None,
        **details,
    ) -> AuditLog:
        """Append one audit entry. Details are stored as JSON."""
        entry = AuditLog(
            event_type=event.value,
            subject_type=subject_type,
            subject_id=subject_id,
            user_id=user_id,
            details=json.dumps(details, default=str, sort_keys=True),
        )
        self.db.add(entry)
        return entry

    def list_activities(
        self,
        event_type: str | None = None,
        subject_type: str | None = None,
        user_id: int | None = None,
        page: int = 1,
        per_page: int = 15,
    ) -> tuple[list[AuditLog], int]:
        """Return one page of entries, newest first, and the total count."""
        query = select(AuditLog)
        if event_type:
            query = query.where(AuditLog.event_type == event_type)
        if subject_type:
            query = query.where(AuditLog.subject_type == subject_type)
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)

        return paginate(
            self.db, query.order_by(AuditLog.id.desc()), page, per_page
        )

    def get_activity(self, activity_id: int) -> AuditLog:
        entry = self.db.get(AuditLog, activity_id)
        if not entry:
            raise NotFoundError(f"Activity {activity_id} not found")
        return entry
