"""
Application service: the home map view.

Composes the polygon draft, the overlay and the API client, and owns the
view's transient state: loaded data, create mode, the naming dialog for a
new area and pending notifications. Every successful write is followed by a
re-fetch of the affected collection rather than a local patch.
"""
import asyncio
import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from farmarea.domain.models import (
    DEFAULT_AREA_COLOR,
    DEFAULT_CROP_TYPE,
    Area,
    AreaCreate,
    FarmSettings,
    Point,
    User,
)
from farmarea.infrastructure.farm_api_client import FarmAPIClient, FarmAPIError
from farmarea.services.application.view_support import Notification, RequestCancelled, RequestScope
from farmarea.services.domain.area_overlay import AreaOverlayRenderer, OverlayInteraction
from farmarea.services.domain.polygon_draft import PolygonDraft
from farmarea.utils.coordinates import ViewportRect, to_percent_point

logger = logging.getLogger(__name__)

DEFAULT_AREA_NAME = "New Area"
DEFAULT_FARM_NAME = "FarmArea"


@dataclass
class NewAreaDialog:
    """The "Name New Area" dialog opened after a draft is confirmed."""
    points: Tuple[Point, ...]
    name: str = ""


class MapViewController:
    """
    Controller for the home page map.

    Args:
        client: FarmArea API client
        renderer: Overlay renderer (default styling if omitted)
    """

    def __init__(self, client: FarmAPIClient, renderer: Optional[AreaOverlayRenderer] = None):
        self.client = client
        self.renderer = renderer or AreaOverlayRenderer()
        self.draft = PolygonDraft(on_ready=self._on_draft_ready)
        self.interaction = OverlayInteraction(self.renderer, self.draft, on_select=self._on_area_selected)
        self.scope = RequestScope()

        self.user: Optional[User] = None
        self.farm_settings: Optional[FarmSettings] = None
        self.areas: List[Area] = []
        self.new_area_dialog: Optional[NewAreaDialog] = None
        self.selected_area_id: Optional[str] = None
        self.notifications: List[Notification] = []

    # ------------------------------------------------------------
    # State accessors
    # ------------------------------------------------------------

    @property
    def is_creating(self) -> bool:
        return self.draft.is_active

    @property
    def farm_name(self) -> str:
        if self.farm_settings is None:
            return DEFAULT_FARM_NAME
        return self.farm_settings.name

    @property
    def hovered_area_id(self) -> Optional[str]:
        return self.interaction.hovered_area_id

    def notify(self, notification: Notification) -> None:
        self.notifications.append(notification)

    def _on_draft_ready(self, points: Tuple[Point, ...]) -> None:
        self.notify(Notification("Area Defined", "Confirm to create this area."))

    def _on_area_selected(self, area_id: str) -> None:
        self.selected_area_id = area_id

    # ------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------

    async def load(self) -> None:
        """Fetch the user, farm settings and areas concurrently."""
        await asyncio.gather(self.refresh_user(), self.refresh_settings(), self.refresh_areas())

    async def refresh_user(self) -> None:
        try:
            self.user = await self.scope.run("user", self.client.get_user())
        except RequestCancelled:
            return
        except FarmAPIError as e:
            self.notify(Notification.error("Could not load profile", e.message))

    async def refresh_settings(self) -> None:
        try:
            self.farm_settings = await self.scope.run("farm_settings", self.client.get_farm_settings())
        except RequestCancelled:
            return
        except FarmAPIError as e:
            self.notify(Notification.error("Could not load farm settings", e.message))

    async def refresh_areas(self) -> None:
        try:
            self.areas = await self.scope.run("areas", self.client.list_areas())
        except RequestCancelled:
            return
        except FarmAPIError as e:
            self.notify(Notification.error("Could not load areas", e.message))

    # ------------------------------------------------------------
    # Create mode
    # ------------------------------------------------------------

    def toggle_create_mode(self) -> None:
        """Enter create mode, or leave it discarding any placed points."""
        if self.draft.is_active:
            self.draft.cancel()
        else:
            self.draft.begin()
            self.interaction.pointer_leave()

    def cancel_create(self) -> None:
        self.draft.cancel()

    def confirm_draft(self) -> NewAreaDialog:
        """
        Confirm the draft and open the naming dialog.

        Raises:
            DraftNotReadyError: If fewer than four points are placed
        """
        points = self.draft.confirm()
        self.new_area_dialog = NewAreaDialog(points=points)
        return self.new_area_dialog

    def dismiss_new_area_dialog(self) -> None:
        self.new_area_dialog = None

    async def save_new_area(self, name: Optional[str] = None) -> Optional[Area]:
        """
        Create the area from the open naming dialog and reload the area list.

        Args:
            name: Area name; blank falls back to "New Area"

        Returns:
            The created area, or None if nothing was saved
        """
        dialog = self.new_area_dialog
        if dialog is None:
            return None
        if name is not None:
            dialog.name = name
        self.new_area_dialog = None

        payload = AreaCreate(
            name=dialog.name.strip() or DEFAULT_AREA_NAME,
            description="",
            hectares=0.0,
            crop_type=DEFAULT_CROP_TYPE,
            color=DEFAULT_AREA_COLOR,
            points=list(dialog.points),
        )
        try:
            area = await self.scope.run("create_area", self.client.create_area(payload))
        except RequestCancelled:
            return None
        except FarmAPIError as e:
            self.notify(Notification.error("Could not create area", e.message))
            return None

        self.notify(Notification("Area Created", "Your new area has been added to the map."))
        await self.refresh_areas()
        return area

    # ------------------------------------------------------------
    # Pointer input
    # ------------------------------------------------------------

    def click(self, client_x: float, client_y: float, rect: ViewportRect) -> Optional[str]:
        """
        Handle a click on the map.

        In create mode the click places a corner. Otherwise it selects the
        area under the pointer.

        Returns:
            Id of the selected area, if any
        """
        if self.draft.is_active:
            self.draft.add_click(client_x, client_y, rect)
            return None
        return self.interaction.click(to_percent_point(client_x, client_y, rect), self.areas)

    def pointer_move(self, client_x: float, client_y: float, rect: ViewportRect) -> Optional[str]:
        return self.interaction.pointer_move(to_percent_point(client_x, client_y, rect), self.areas)

    def pointer_leave(self) -> None:
        self.interaction.pointer_leave()

    def hover_area(self, area_id: Optional[str]) -> None:
        """Hover from the area list next to the map."""
        self.interaction.set_hovered(area_id)

    # ------------------------------------------------------------
    # Farm name
    # ------------------------------------------------------------

    async def rename_farm(self, name: str) -> None:
        """Save a new farm name if it changed, then reload the settings."""
        name = name.strip()
        if not name or name == self.farm_name:
            return
        try:
            await self.scope.run("rename_farm", self.client.update_farm_settings(name))
        except RequestCancelled:
            return
        except FarmAPIError as e:
            self.notify(Notification.error("Could not rename farm", e.message))
            return
        await self.refresh_settings()

    # ------------------------------------------------------------
    # Output
    # ------------------------------------------------------------

    def render(self) -> str:
        draft_points = self.draft.points if self.draft.is_active else ()
        return self.renderer.render(self.areas, self.hovered_area_id, draft_points)

    def close(self) -> None:
        """Leave the view: drop the draft and cancel outstanding requests."""
        self.draft.cancel()
        self.scope.close()
