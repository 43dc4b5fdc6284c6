"""
Spatial helper functions for area polygons.

Provides utilities for:
- Polygon shape validation
- Bounding boxes
- Point-in-polygon hit testing
"""
from dataclasses import dataclass
from typing import Optional, Sequence
import numpy as np
from shapely.geometry import Point as ShapelyPoint, Polygon
from shapely.validation import make_valid
import logging

from farmarea.domain.models import POLYGON_VERTEX_COUNT, Point

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundingBox:
    """Axis-aligned bounding box of a polygon."""
    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    @property
    def center(self) -> tuple[float, float]:
        return (self.min_x + self.width / 2, self.min_y + self.height / 2)


def is_complete_polygon(points: Optional[Sequence[Point]]) -> bool:
    """
    Check whether a point list forms a committed area polygon.

    Args:
        points: Polygon corners, possibly partial or missing

    Returns:
        True if there are exactly as many points as a committed area needs
    """
    return points is not None and len(points) == POLYGON_VERTEX_COUNT


def points_to_array(points: Sequence[Point]) -> np.ndarray:
    """
    Convert points to an (N, 2) array of x, y values.

    Args:
        points: Sequence of points

    Returns:
        Array of shape (N, 2)
    """
    return np.array([(p.x, p.y) for p in points], dtype=float).reshape(-1, 2)


def bounding_box(points: Sequence[Point]) -> BoundingBox:
    """
    Compute the axis-aligned bounding box of a polygon.

    Args:
        points: Polygon corners (at least one)

    Returns:
        BoundingBox instance

    Raises:
        ValueError: If no points are given
    """
    if not points:
        raise ValueError("Cannot compute a bounding box without points")
    coords = points_to_array(points)
    min_x, min_y = coords.min(axis=0)
    max_x, max_y = coords.max(axis=0)
    return BoundingBox(float(min_x), float(min_y), float(max_x), float(max_y))


def build_polygon(points: Sequence[Point]) -> Polygon:
    """
    Build a shapely polygon; the closing edge back to the first point is implied.

    Args:
        points: Polygon corners in drawing order

    Returns:
        Polygon instance
    """
    return Polygon([(p.x, p.y) for p in points])


def point_in_polygon(point: Point, points: Sequence[Point]) -> bool:
    """
    Check if a point is inside (or on the boundary of) a polygon.

    Corners are clicked by hand, so a self-intersecting quadrilateral is
    possible; those are split into their valid parts before testing.

    Args:
        point: Point to test
        points: Polygon corners

    Returns:
        True if point is inside polygon, False otherwise
    """
    polygon = build_polygon(points)
    if not polygon.is_valid:
        logger.debug("Repairing self-intersecting polygon before hit test")
        polygon = make_valid(polygon)
    return polygon.intersects(ShapelyPoint(point.x, point.y))
