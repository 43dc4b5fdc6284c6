"""
Domain models for users, farm settings, areas, tasks and notes.

These models represent the core domain entities and should be independent
of any infrastructure concerns (HTTP, databases, etc.). Field names are
snake_case in Python and camelCase on the wire.
"""
from datetime import datetime
from enum import Enum
from typing import List, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator
from pydantic.alias_generators import to_camel


POLYGON_VERTEX_COUNT = 4
"""Number of points in a committed area polygon."""

DEFAULT_AREA_COLOR = "#3b82f6"
DEFAULT_CROP_TYPE = "Unassigned"
HEX_COLOR_PATTERN = r"^#(?:[0-9a-fA-F]{3}){1,2}$"


class CamelModel(BaseModel):
    """Base model serialized with camelCase keys."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class InputModel(CamelModel):
    """Base model for request bodies; unknown keys are rejected."""

    class Config:
        extra = "forbid"


def _reject_null(value):
    """Explicit null is only allowed where the stored column is nullable."""
    if value is None:
        raise ValueError("Field may be omitted but not null")
    return value


class Point(BaseModel):
    """A position in the 0-100 percentage coordinate space of the base image."""
    x: float = Field(description="Percent of image width")
    y: float = Field(description="Percent of image height")

    class Config:
        extra = "forbid"
        frozen = True


# ============================================================
# Users and farm settings
# ============================================================

class User(CamelModel):
    """Farm user profile."""
    id: str
    name: str
    email: str
    role: str
    avatar: Optional[str] = None
    bio: Optional[str] = None
    created_at: datetime


class UserUpdate(InputModel):
    """Partial update of the user profile."""
    name: Optional[str] = Field(default=None, min_length=1)
    email: Optional[EmailStr] = None
    role: Optional[str] = None
    avatar: Optional[str] = None
    bio: Optional[str] = None

    required_not_null = field_validator("name", "email", "role", mode="before")(_reject_null)


class FarmSettings(CamelModel):
    """Farm display settings. ``id`` is unset for the default record."""
    id: Optional[str] = None
    name: str
    user_id: Optional[str] = None


class FarmSettingsUpdate(InputModel):
    name: str = Field(min_length=1)


# ============================================================
# Areas
# ============================================================

class AreaCreate(InputModel):
    """Body of ``POST /areas``: an area without id, owner or timestamp."""
    name: str = Field(min_length=1)
    description: str = ""
    hectares: float = Field(default=0.0, ge=0)
    crop_type: str = DEFAULT_CROP_TYPE
    color: str = Field(default=DEFAULT_AREA_COLOR, pattern=HEX_COLOR_PATTERN)
    points: List[Point] = Field(
        min_length=POLYGON_VERTEX_COUNT,
        max_length=POLYGON_VERTEX_COUNT,
        description="Polygon corners in click order",
    )


class AreaUpdate(InputModel):
    """Body of ``PATCH /areas/{id}``; only the supplied fields change."""
    name: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    hectares: Optional[float] = Field(default=None, ge=0)
    crop_type: Optional[str] = None
    color: Optional[str] = Field(default=None, pattern=HEX_COLOR_PATTERN)
    points: Optional[List[Point]] = Field(
        default=None,
        min_length=POLYGON_VERTEX_COUNT,
        max_length=POLYGON_VERTEX_COUNT,
    )

    fields_not_null = field_validator("*", mode="before")(_reject_null)


class Area(CamelModel):
    """A user-defined quadrilateral region of farmland."""
    id: str
    name: str
    description: str
    hectares: float
    crop_type: str
    color: str
    points: List[Point]
    user_id: str
    created_at: datetime


# ============================================================
# Tasks
# ============================================================

class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    def can_transition_to(self, target: "TaskStatus") -> bool:
        return target in _TASK_TRANSITIONS[self]


_TASK_TRANSITIONS = {
    TaskStatus.PENDING: {TaskStatus.IN_PROGRESS, TaskStatus.COMPLETED},
    TaskStatus.IN_PROGRESS: {TaskStatus.PENDING, TaskStatus.COMPLETED},
    # Reopening a finished task starts it over
    TaskStatus.COMPLETED: {TaskStatus.PENDING},
}


class TaskCreate(InputModel):
    title: str = Field(min_length=1)
    status: TaskStatus = TaskStatus.PENDING
    assignee: str
    due_date: str = Field(description="Due date as entered, e.g. 2025-03-15")


class TaskUpdate(InputModel):
    title: Optional[str] = Field(default=None, min_length=1)
    status: Optional[TaskStatus] = None
    assignee: Optional[str] = None
    due_date: Optional[str] = None

    fields_not_null = field_validator("*", mode="before")(_reject_null)


class TaskTransition(InputModel):
    status: TaskStatus


class Task(CamelModel):
    id: str
    title: str
    status: TaskStatus
    assignee: str
    due_date: str
    area_id: str
    created_at: datetime


# ============================================================
# Notes
# ============================================================

class NoteCreate(InputModel):
    content: str = Field(min_length=1)
    author: str
    date: str


class Note(CamelModel):
    id: str
    content: str
    author: str
    date: str
    area_id: str
    created_at: datetime
