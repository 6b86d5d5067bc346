"""
Audit log repository.

Append-only: entries have no update path. Deletion exists only
for the student cascade.
"""

from typing import List, Optional, Sequence

from sqlalchemy import and_, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from hostel_occupancy.models.audit_log import AuditLog
from hostel_occupancy.repositories.base.base_repository import BaseRepository, escape_like


class AuditLogRepository(BaseRepository[AuditLog]):
    def __init__(self, db: Session):
        super().__init__(AuditLog, db)

    def update(self, entity, data):
        raise NotImplementedError("Audit log entries are immutable")

    def list_recent(
        self,
        username: Optional[str] = None,
        subject_id: Optional[str] = None,
        skip: int = 0,
        limit: Optional[int] = None,
    ) -> List[AuditLog]:
        try:
            query = self.db.query(AuditLog)
            if username:
                query = query.filter(AuditLog.username == username)
            if subject_id:
                query = query.filter(AuditLog.subject_id == subject_id)
            query = query.order_by(AuditLog.created_at.desc()).offset(skip)
            if limit is not None:
                query = query.limit(limit)
            return query.all()
        except SQLAlchemyError as e:
            self._unavailable("list_recent", e)

    def delete_for_subjects(
        self,
        subject_ids: Sequence[str],
        legacy_terms: Sequence[str] = (),
    ) -> int:
        """
        Delete entries describing the given subjects.

        Entries carrying a `subject_id` are matched by id only. Entries written
        without one are matched by a literal, case-insensitive substring of
        their description against `legacy_terms`.
        """
        conditions = []
        if subject_ids:
            conditions.append(AuditLog.subject_id.in_(list(subject_ids)))
        terms = [t for t in legacy_terms if t and t.strip()]
        if terms:
            conditions.append(
                and_(
                    AuditLog.subject_id.is_(None),
                    or_(
                        *[
                            AuditLog.description.ilike(f"%{escape_like(t.strip())}%", escape="\\")
                            for t in terms
                        ]
                    ),
                )
            )
        if not conditions:
            return 0
        try:
            deleted = (
                self.db.query(AuditLog)
                .filter(or_(*conditions))
                .delete(synchronize_session=False)
            )
            self.db.flush()
            return deleted
        except SQLAlchemyError as e:
            self._unavailable("delete_for_subjects", e)
