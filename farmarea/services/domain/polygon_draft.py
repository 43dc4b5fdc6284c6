"""
Domain service: building an area polygon from successive map clicks.

A draft moves through four states:

    IDLE --begin()--> COLLECTING --4th point--> READY --confirm()--> COMMITTED
      ^                                                                  |
      +--------------------------- cancel() (from any state) ------------+

READY is a hard ceiling: further clicks are ignored until the draft is
confirmed or cancelled, and reaching it never commits on its own.
"""
import logging
from enum import Enum
from typing import Callable, Optional, Tuple

from farmarea.domain.errors import DraftNotReadyError
from farmarea.domain.models import POLYGON_VERTEX_COUNT, Point
from farmarea.utils.coordinates import ViewportRect, is_within_bounds, to_percent_point

logger = logging.getLogger(__name__)


class DraftState(str, Enum):
    IDLE = "idle"
    COLLECTING = "collecting"
    READY = "ready"
    COMMITTED = "committed"


ReadyCallback = Callable[[Tuple[Point, ...]], None]


class PolygonDraft:
    """
    Collects the corners of a new area in click order.

    Args:
        on_ready: Called once with the points when the last corner is placed
    """

    def __init__(self, on_ready: Optional[ReadyCallback] = None):
        self.on_ready = on_ready
        self._state = DraftState.IDLE
        self._points: list[Point] = []

    @property
    def state(self) -> DraftState:
        return self._state

    @property
    def points(self) -> Tuple[Point, ...]:
        return tuple(self._points)

    @property
    def point_count(self) -> int:
        return len(self._points)

    @property
    def is_active(self) -> bool:
        """True while in create mode (collecting or ready)."""
        return self._state in (DraftState.COLLECTING, DraftState.READY)

    @property
    def is_ready(self) -> bool:
        return self._state == DraftState.READY

    @property
    def progress_label(self) -> str:
        return f"{self.point_count}/{POLYGON_VERTEX_COUNT} Pins Placed"

    def begin(self) -> None:
        """Enter create mode with no points."""
        self._points = []
        self._state = DraftState.COLLECTING
        logger.debug("Draft started")

    def add_point(self, point: Point) -> bool:
        """
        Append a corner.

        Args:
            point: Corner in percentage coordinates

        Returns:
            True if the point was taken, False if the draft is not collecting
        """
        if self._state != DraftState.COLLECTING:
            return False

        self._points.append(point)
        logger.debug(f"Draft point {self.point_count}/{POLYGON_VERTEX_COUNT}: ({point.x:.2f}, {point.y:.2f})")

        if self.point_count == POLYGON_VERTEX_COUNT:
            self._state = DraftState.READY
            logger.info("Draft ready for confirmation")
            if self.on_ready is not None:
                self.on_ready(self.points)
        return True

    def add_click(self, client_x: float, client_y: float, rect: ViewportRect) -> bool:
        """
        Append the corner under a pointer click.

        Clicks that land outside the base image are ignored.

        Args:
            client_x: Pointer x in client pixels
            client_y: Pointer y in client pixels
            rect: Current bounding rectangle of the map container

        Returns:
            True if a point was added
        """
        if self._state != DraftState.COLLECTING:
            return False
        point = to_percent_point(client_x, client_y, rect)
        if not is_within_bounds(point):
            logger.debug(f"Ignoring click outside the image at ({point.x:.2f}, {point.y:.2f})")
            return False
        return self.add_point(point)

    def confirm(self) -> Tuple[Point, ...]:
        """
        Commit the draft and leave create mode.

        Returns:
            The corners exactly as placed, in click order

        Raises:
            DraftNotReadyError: If not all corners have been placed
        """
        if self._state != DraftState.READY:
            raise DraftNotReadyError(
                f"Draft needs {POLYGON_VERTEX_COUNT} points before confirming, has {self.point_count}"
            )
        points = self.points
        self._points = []
        self._state = DraftState.COMMITTED
        logger.info("Draft committed")
        return points

    def cancel(self) -> None:
        """Discard all points and return to idle."""
        if self._points:
            logger.debug(f"Draft cancelled with {self.point_count} point(s)")
        self._points = []
        self._state = DraftState.IDLE
