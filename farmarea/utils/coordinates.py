"""
Percentage coordinate utilities for the map canvas.

Polygon points are stored as percentages (0-100) of the base image's width
and height, so they stay aligned however the viewport is zoomed, panned or
resized. The mapping is only undistorted while the viewport keeps the
image's aspect ratio.
"""
from dataclasses import dataclass
from typing import Iterable, Tuple

from farmarea.domain.models import Point


COORDINATE_SPACE = 100.0
"""Extent of both axes of the percentage coordinate space."""


@dataclass(frozen=True)
class ViewportRect:
    """On-screen bounding rectangle of the map container, in client pixels."""
    left: float
    top: float
    width: float
    height: float

    @classmethod
    def from_size(cls, width: float, height: float) -> "ViewportRect":
        return cls(left=0.0, top=0.0, width=width, height=height)


def _check_rect(rect: ViewportRect) -> None:
    if rect.width <= 0 or rect.height <= 0:
        raise ValueError(
            f"Viewport must have a positive size, got {rect.width}x{rect.height}"
        )


def to_percent_point(client_x: float, client_y: float, rect: ViewportRect) -> Point:
    """
    Convert a pointer position to a percentage point.

    Args:
        client_x: Pointer x in client pixels
        client_y: Pointer y in client pixels
        rect: Current bounding rectangle of the map container

    Returns:
        Point in the 0-100 space (not clamped)

    Raises:
        ValueError: If the rectangle has no area
    """
    _check_rect(rect)
    x = (client_x - rect.left) / rect.width * COORDINATE_SPACE
    y = (client_y - rect.top) / rect.height * COORDINATE_SPACE
    return Point(x=x, y=y)


def to_client_position(point: Point, rect: ViewportRect) -> Tuple[float, float]:
    """
    Convert a percentage point back to client pixels.

    Args:
        point: Point in the 0-100 space
        rect: Current bounding rectangle of the map container

    Returns:
        (client_x, client_y) tuple
    """
    _check_rect(rect)
    return (
        rect.left + point.x / COORDINATE_SPACE * rect.width,
        rect.top + point.y / COORDINATE_SPACE * rect.height,
    )


def is_within_bounds(point: Point) -> bool:
    """True if the point lies on the base image (edges included)."""
    return 0.0 <= point.x <= COORDINATE_SPACE and 0.0 <= point.y <= COORDINATE_SPACE


def format_svg_points(points: Iterable[Point]) -> str:
    """Format points for an SVG ``points`` attribute: ``"x1,y1 x2,y2 ..."``."""
    return " ".join(f"{format_number(p.x)},{format_number(p.y)}" for p in points)


def format_number(value: float) -> str:
    """Format a coordinate or measurement compactly: 12.5, 0, 3.3333."""
    # Four decimals, trailing zeros dropped
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
