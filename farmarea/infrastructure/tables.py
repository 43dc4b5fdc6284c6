"""
Relational schema: users, farm_settings, areas, tasks, notes.

Children reference their parent with ``ON DELETE CASCADE`` and the ORM
relationships mirror that, so deleting an area removes its tasks and notes
whichever path performs the delete.
"""
import uuid
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, DateTime, Float, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from farmarea.infrastructure.database import Base


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class UserRecord(Base):
    __tablename__ = "users"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(Text, nullable=False, unique=True)
    role: Mapped[str] = mapped_column(Text, nullable=False, default="Member")
    avatar: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    bio: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    farm_settings: Mapped[Optional["FarmSettingsRecord"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )
    areas: Mapped[List["AreaRecord"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class FarmSettingsRecord(Base):
    __tablename__ = "farm_settings"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False, default="FarmArea")
    user_id: Mapped[str] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False, unique=True
    )

    user: Mapped[UserRecord] = relationship(back_populates="farm_settings")


class AreaRecord(Base):
    __tablename__ = "areas"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    hectares: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    crop_type: Mapped[str] = mapped_column(Text, nullable=False, default="Unassigned")
    color: Mapped[str] = mapped_column(Text, nullable=False, default="#3b82f6")
    points: Mapped[list] = mapped_column(JSON, nullable=False)  # [{"x": .., "y": ..}, ...]
    user_id: Mapped[str] = mapped_column(ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    user: Mapped[UserRecord] = relationship(back_populates="areas")
    tasks: Mapped[List["TaskRecord"]] = relationship(
        back_populates="area", cascade="all, delete-orphan", passive_deletes=True
    )
    notes: Mapped[List["NoteRecord"]] = relationship(
        back_populates="area", cascade="all, delete-orphan", passive_deletes=True
    )


class TaskRecord(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    title: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(16), nullable=False, default="pending")
    assignee: Mapped[str] = mapped_column(Text, nullable=False)
    due_date: Mapped[str] = mapped_column(Text, nullable=False)
    area_id: Mapped[str] = mapped_column(ForeignKey("areas.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    area: Mapped[AreaRecord] = relationship(back_populates="tasks")


class NoteRecord(Base):
    __tablename__ = "notes"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_id)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    author: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[str] = mapped_column(Text, nullable=False)
    area_id: Mapped[str] = mapped_column(ForeignKey("areas.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=_utcnow)

    area: Mapped[AreaRecord] = relationship(back_populates="notes")
