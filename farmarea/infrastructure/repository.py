"""
Infrastructure layer: persistence of farm entities.

The repository speaks in table records and returns ``None`` for missing
rows; turning that into ``NotFoundError`` is the service layer's job.
Every read and write of an area or one of its children is scoped to the
owning user.
"""
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from farmarea.infrastructure.tables import (
    AreaRecord,
    FarmSettingsRecord,
    NoteRecord,
    TaskRecord,
    UserRecord,
)

logger = logging.getLogger(__name__)


class FarmRepository:
    """SQLAlchemy-backed storage for users, settings, areas, tasks and notes."""

    def __init__(self, db: Session, default_farm_name: str = "FarmArea"):
        self.db = db
        self.default_farm_name = default_farm_name

    def _save(self, record):
        self.db.add(record)
        self.db.commit()
        self.db.refresh(record)
        return record

    @staticmethod
    def _apply(record, changes: Dict[str, Any]):
        for field, value in changes.items():
            setattr(record, field, value)
        return record

    # ------------------------------------------------------------
    # Users
    # ------------------------------------------------------------

    def get_user(self, user_id: str) -> Optional[UserRecord]:
        return self.db.get(UserRecord, user_id)

    def get_user_by_email(self, email: str) -> Optional[UserRecord]:
        return self.db.scalars(select(UserRecord).where(UserRecord.email == email)).first()

    def create_user(self, **fields: Any) -> UserRecord:
        """Create a user together with its default farm settings."""
        user = UserRecord(**fields)
        user.farm_settings = FarmSettingsRecord(name=self.default_farm_name)
        self._save(user)
        logger.info(f"Created user {user.id} <{user.email}>")
        return user

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Optional[UserRecord]:
        user = self.get_user(user_id)
        if user is None:
            return None
        return self._save(self._apply(user, changes))

    # ------------------------------------------------------------
    # Farm settings
    # ------------------------------------------------------------

    def get_farm_settings(self, user_id: str) -> Optional[FarmSettingsRecord]:
        return self.db.scalars(
            select(FarmSettingsRecord).where(FarmSettingsRecord.user_id == user_id)
        ).first()

    def upsert_farm_settings(self, user_id: str, changes: Dict[str, Any]) -> FarmSettingsRecord:
        settings = self.get_farm_settings(user_id)
        if settings is None:
            settings = FarmSettingsRecord(user_id=user_id, name=self.default_farm_name)
        return self._save(self._apply(settings, changes))

    # ------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------

    def list_areas(self, user_id: str) -> List[AreaRecord]:
        stmt = (
            select(AreaRecord)
            .where(AreaRecord.user_id == user_id)
            .order_by(AreaRecord.created_at.asc())
        )
        return list(self.db.scalars(stmt))

    def get_area(self, user_id: str, area_id: str) -> Optional[AreaRecord]:
        stmt = select(AreaRecord).where(AreaRecord.id == area_id, AreaRecord.user_id == user_id)
        return self.db.scalars(stmt).first()

    def create_area(self, user_id: str, fields: Dict[str, Any]) -> AreaRecord:
        area = self._save(AreaRecord(user_id=user_id, **fields))
        logger.info(f"Created area {area.id} '{area.name}' for user {user_id}")
        return area

    def update_area(self, user_id: str, area_id: str, changes: Dict[str, Any]) -> Optional[AreaRecord]:
        area = self.get_area(user_id, area_id)
        if area is None:
            return None
        return self._save(self._apply(area, changes))

    def delete_area(self, user_id: str, area_id: str) -> bool:
        area = self.get_area(user_id, area_id)
        if area is None:
            return False
        self.db.delete(area)
        self.db.commit()
        logger.info(f"Deleted area {area_id} with its tasks and notes")
        return True

    # ------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------

    def list_tasks(self, user_id: str, area_id: str) -> List[TaskRecord]:
        stmt = (
            select(TaskRecord)
            .join(AreaRecord, TaskRecord.area_id == AreaRecord.id)
            .where(TaskRecord.area_id == area_id, AreaRecord.user_id == user_id)
            .order_by(TaskRecord.created_at.asc())
        )
        return list(self.db.scalars(stmt))

    def get_task(self, user_id: str, task_id: str) -> Optional[TaskRecord]:
        stmt = (
            select(TaskRecord)
            .join(AreaRecord, TaskRecord.area_id == AreaRecord.id)
            .where(TaskRecord.id == task_id, AreaRecord.user_id == user_id)
        )
        return self.db.scalars(stmt).first()

    def create_task(self, area_id: str, fields: Dict[str, Any]) -> TaskRecord:
        return self._save(TaskRecord(area_id=area_id, **fields))

    def update_task(self, user_id: str, task_id: str, changes: Dict[str, Any]) -> Optional[TaskRecord]:
        task = self.get_task(user_id, task_id)
        if task is None:
            return None
        return self._save(self._apply(task, changes))

    def delete_task(self, user_id: str, task_id: str) -> bool:
        task = self.get_task(user_id, task_id)
        if task is None:
            return False
        self.db.delete(task)
        self.db.commit()
        return True

    # ------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------

    def list_notes(self, user_id: str, area_id: str) -> List[NoteRecord]:
        stmt = (
            select(NoteRecord)
            .join(AreaRecord, NoteRecord.area_id == AreaRecord.id)
            .where(NoteRecord.area_id == area_id, AreaRecord.user_id == user_id)
            .order_by(NoteRecord.created_at.asc())
        )
        return list(self.db.scalars(stmt))

    def get_note(self, user_id: str, note_id: str) -> Optional[NoteRecord]:
        stmt = (
            select(NoteRecord)
            .join(AreaRecord, NoteRecord.area_id == AreaRecord.id)
            .where(NoteRecord.id == note_id, AreaRecord.user_id == user_id)
        )
        return self.db.scalars(stmt).first()

    def create_note(self, area_id: str, fields: Dict[str, Any]) -> NoteRecord:
        return self._save(NoteRecord(area_id=area_id, **fields))

    def delete_note(self, user_id: str, note_id: str) -> bool:
        note = self.get_note(user_id, note_id)
        if note is None:
            return False
        self.db.delete(note)
        self.db.commit()
        return True
