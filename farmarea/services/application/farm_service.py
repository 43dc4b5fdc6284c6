"""
Application service: Orchestration layer for farm operations.
"""
import logging
from typing import List

from farmarea.domain.errors import NotFoundError, ValidationError
from farmarea.domain.models import (
    Area,
    AreaCreate,
    AreaUpdate,
    FarmSettings,
    FarmSettingsUpdate,
    Note,
    NoteCreate,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    User,
    UserUpdate,
)
from farmarea.infrastructure.repository import FarmRepository

logger = logging.getLogger(__name__)


def _changes(payload) -> dict:
    """Fields the client actually supplied, in Python attribute names."""
    return payload.model_dump(exclude_unset=True, mode="json")


class FarmService:
    """
    Application service for farm-related operations.

    Coordinates the repository and converts its records into domain models.
    The acting user id is passed explicitly into every call; nothing here
    keeps session state between calls.
    """

    def __init__(self, repository: FarmRepository):
        """
        Initialize the service with dependencies.

        Args:
            repository: Storage for farm entities
        """
        self.repository = repository

    # ------------------------------------------------------------
    # Users and settings
    # ------------------------------------------------------------

    def get_user(self, user_id: str) -> User:
        user = self.repository.get_user(user_id)
        if user is None:
            raise NotFoundError("User", user_id)
        return User.model_validate(user)

    def update_user(self, user_id: str, payload: UserUpdate) -> User:
        user = self.repository.update_user(user_id, _changes(payload))
        if user is None:
            raise NotFoundError("User", user_id)
        return User.model_validate(user)

    def get_farm_settings(self, user_id: str) -> FarmSettings:
        """Return the stored settings, or the unsaved default record."""
        settings = self.repository.get_farm_settings(user_id)
        if settings is None:
            return FarmSettings(name=self.repository.default_farm_name)
        return FarmSettings.model_validate(settings)

    def update_farm_settings(self, user_id: str, payload: FarmSettingsUpdate) -> FarmSettings:
        settings = self.repository.upsert_farm_settings(user_id, _changes(payload))
        logger.info(f"Farm renamed to '{settings.name}' for user {user_id}")
        return FarmSettings.model_validate(settings)

    # ------------------------------------------------------------
    # Areas
    # ------------------------------------------------------------

    def list_areas(self, user_id: str) -> List[Area]:
        return [Area.model_validate(a) for a in self.repository.list_areas(user_id)]

    def get_area(self, user_id: str, area_id: str) -> Area:
        area = self.repository.get_area(user_id, area_id)
        if area is None:
            raise NotFoundError("Area", area_id)
        return Area.model_validate(area)

    def create_area(self, user_id: str, payload: AreaCreate) -> Area:
        area = self.repository.create_area(user_id, payload.model_dump(mode="json"))
        return Area.model_validate(area)

    def update_area(self, user_id: str, area_id: str, payload: AreaUpdate) -> Area:
        area = self.repository.update_area(user_id, area_id, _changes(payload))
        if area is None:
            raise NotFoundError("Area", area_id)
        return Area.model_validate(area)

    def delete_area(self, user_id: str, area_id: str) -> None:
        """Delete an area and its tasks and notes. Unknown ids are a no-op."""
        if not self.repository.delete_area(user_id, area_id):
            logger.debug(f"Delete of unknown area {area_id} ignored")

    def _require_area(self, user_id: str, area_id: str) -> None:
        if self.repository.get_area(user_id, area_id) is None:
            raise NotFoundError("Area", area_id)

    # ------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------

    def list_tasks(self, user_id: str, area_id: str) -> List[Task]:
        return [Task.model_validate(t) for t in self.repository.list_tasks(user_id, area_id)]

    def create_task(self, user_id: str, area_id: str, payload: TaskCreate) -> Task:
        self._require_area(user_id, area_id)
        task = self.repository.create_task(area_id, payload.model_dump(mode="json"))
        return Task.model_validate(task)

    def update_task(self, user_id: str, task_id: str, payload: TaskUpdate) -> Task:
        task = self.repository.update_task(user_id, task_id, _changes(payload))
        if task is None:
            raise NotFoundError("Task", task_id)
        return Task.model_validate(task)

    def transition_task(self, user_id: str, task_id: str, target: TaskStatus) -> Task:
        """
        Move a task to a new status along an allowed transition.

        Args:
            user_id: Acting user
            task_id: Task to update
            target: Requested status

        Returns:
            The updated task

        Raises:
            NotFoundError: If the task does not exist for this user
            ValidationError: If the transition is not allowed
        """
        task = self.repository.get_task(user_id, task_id)
        if task is None:
            raise NotFoundError("Task", task_id)

        current = TaskStatus(task.status)
        if not current.can_transition_to(target):
            raise ValidationError(
                f"Task cannot move from '{current.value}' to '{target.value}'"
            )

        updated = self.repository.update_task(user_id, task_id, {"status": target.value})
        logger.info(f"Task {task_id}: {current.value} -> {target.value}")
        return Task.model_validate(updated)

    def delete_task(self, user_id: str, task_id: str) -> None:
        self.repository.delete_task(user_id, task_id)

    # ------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------

    def list_notes(self, user_id: str, area_id: str) -> List[Note]:
        return [Note.model_validate(n) for n in self.repository.list_notes(user_id, area_id)]

    def create_note(self, user_id: str, area_id: str, payload: NoteCreate) -> Note:
        self._require_area(user_id, area_id)
        note = self.repository.create_note(area_id, payload.model_dump(mode="json"))
        return Note.model_validate(note)

    def delete_note(self, user_id: str, note_id: str) -> None:
        self.repository.delete_note(user_id, note_id)
