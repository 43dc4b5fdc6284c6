"""
Application service: the area detail view (overview, tasks and notes tabs).
"""
import asyncio
import logging
from dataclasses import asdict, dataclass
from datetime import date, timedelta
from typing import Callable, List, Optional

from farmarea.domain.models import Area, AreaUpdate, Note, NoteCreate, Task, TaskCreate, TaskStatus
from farmarea.infrastructure.farm_api_client import FarmAPIClient, FarmAPIError
from farmarea.services.application.view_support import Notification, RequestCancelled, RequestScope

logger = logging.getLogger(__name__)

QUICK_ADD_ASSIGNEE = "You"
QUICK_ADD_DUE_DAYS = 7


@dataclass
class AreaEditForm:
    """Editable copy of an area's metadata."""
    name: str
    description: str
    crop_type: str
    hectares: float


class AreaDetailController:
    """
    Controller for one area's detail page.

    Args:
        client: FarmArea API client
        area_id: Area shown by this view
        today: Date provider for quick-add defaults
    """

    def __init__(
        self,
        client: FarmAPIClient,
        area_id: str,
        today: Callable[[], date] = date.today,
    ):
        self.client = client
        self.area_id = area_id
        self.today = today
        self.scope = RequestScope()

        self.area: Optional[Area] = None
        self.tasks: List[Task] = []
        self.notes: List[Note] = []
        self.edit_form: Optional[AreaEditForm] = None
        self.deleted = False
        self.notifications: List[Notification] = []

    @property
    def is_editing(self) -> bool:
        return self.edit_form is not None

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    async def _run(self, key: str, request, failure: str):
        """Run a request in the view scope; None if it failed or went stale."""
        try:
            return await self.scope.run(key, request)
        except RequestCancelled:
            return None
        except FarmAPIError as e:
            self.notify(Notification.error(failure, e.message))
            return None

    # ------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------

    async def load(self) -> None:
        await asyncio.gather(self.refresh_area(), self.refresh_tasks(), self.refresh_notes())

    async def refresh_area(self) -> None:
        area = await self._run("area", self.client.get_area(self.area_id), "Could not load area")
        if area is not None:
            self.area = area

    async def refresh_tasks(self) -> None:
        tasks = await self._run("tasks", self.client.list_tasks(self.area_id), "Could not load tasks")
        if tasks is not None:
            self.tasks = tasks

    async def refresh_notes(self) -> None:
        notes = await self._run("notes", self.client.list_notes(self.area_id), "Could not load notes")
        if notes is not None:
            self.notes = notes

    # ------------------------------------------------------------
    # Editing
    # ------------------------------------------------------------

    def start_editing(self) -> None:
        if self.area is None:
            return
        self.edit_form = AreaEditForm(
            name=self.area.name,
            description=self.area.description,
            crop_type=self.area.crop_type,
            hectares=self.area.hectares,
        )

    def update_form(self, **changes) -> None:
        if self.edit_form is None:
            raise RuntimeError("Not editing")
        for field, value in changes.items():
            if not hasattr(self.edit_form, field):
                raise AttributeError(f"Unknown form field '{field}'")
            setattr(self.edit_form, field, value)

    def cancel_edit(self) -> None:
        self.edit_form = None

    async def save_edit(self) -> Optional[Area]:
        """Send the edit form as a partial update and reload the area."""
        if self.edit_form is None:
            return None
        form = self.edit_form
        self.edit_form = None

        try:
            payload = AreaUpdate(**asdict(form))
        except ValueError as e:
            self.notify(Notification.error("Invalid area details", str(e)))
            return None

        updated = await self._run("update_area", self.client.update_area(self.area_id, payload), "Could not update area")
        if updated is None:
            return None
        self.notify(Notification("Area Updated", "Changes saved successfully."))
        await self.refresh_area()
        return updated

    async def delete_area(self) -> bool:
        """Delete the area; its tasks and notes go with it."""
        try:
            await self.scope.run("delete_area", self.client.delete_area(self.area_id))
        except RequestCancelled:
            return False
        except FarmAPIError as e:
            self.notify(Notification.error("Could not delete area", e.message))
            return False
        self.deleted = True
        self.area = None
        self.tasks = []
        self.notes = []
        logger.info(f"Area {self.area_id} deleted")
        return True

    # ------------------------------------------------------------
    # Tasks
    # ------------------------------------------------------------

    async def add_task(self, title: str) -> Optional[Task]:
        """Quick-add a pending task assigned to the current user, due in a week."""
        if not title.strip():
            return None
        payload = TaskCreate(
            title=title,
            status=TaskStatus.PENDING,
            assignee=QUICK_ADD_ASSIGNEE,
            due_date=(self.today() + timedelta(days=QUICK_ADD_DUE_DAYS)).isoformat(),
        )
        task = await self._run("create_task", self.client.create_task(self.area_id, payload), "Could not add task")
        if task is not None:
            await self.refresh_tasks()
        return task

    async def toggle_task(self, task_id: str) -> Optional[Task]:
        """Mark a task completed, or reopen a completed one."""
        task = next((t for t in self.tasks if t.id == task_id), None)
        if task is None:
            return None
        target = TaskStatus.PENDING if task.status == TaskStatus.COMPLETED else TaskStatus.COMPLETED
        updated = await self._run("transition_task", self.client.transition_task(task_id, target), "Could not update task")
        if updated is not None:
            await self.refresh_tasks()
        return updated

    async def delete_task(self, task_id: str) -> None:
        await self._run("delete_task", self.client.delete_task(task_id), "Could not delete task")
        await self.refresh_tasks()

    # ------------------------------------------------------------
    # Notes
    # ------------------------------------------------------------

    async def add_note(self, content: str) -> Optional[Note]:
        if not content.strip():
            return None
        payload = NoteCreate(content=content, author=QUICK_ADD_ASSIGNEE, date=self.today().isoformat())
        note = await self._run("create_note", self.client.create_note(self.area_id, payload), "Could not add note")
        if note is not None:
            await self.refresh_notes()
        return note

    async def delete_note(self, note_id: str) -> None:
        await self._run("delete_note", self.client.delete_note(note_id), "Could not delete note")
        await self.refresh_notes()

    def close(self) -> None:
        self.scope.close()
