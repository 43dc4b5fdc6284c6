"""
Domain service: rendering area polygons over the aerial map.

All shapes share the 0-100 percentage coordinate space, so the overlay is an
SVG with ``viewBox="0 0 100 100"`` stretched over the base image.

Hover rules:
- at most one area is hovered at a time
- the hovered area is emphasised, every other area is dimmed
- with nothing hovered, all areas share a neutral baseline
- only the hovered area shows its name and hectare label

Labels are fitted into each polygon's bounding box with a width heuristic
rather than real text measurement, erring on the side of not overflowing.
"""
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple
from xml.sax.saxutils import escape, quoteattr
import logging
import math

from farmarea.domain.models import Area, Point
from farmarea.services.domain.polygon_draft import PolygonDraft
from farmarea.utils.coordinates import COORDINATE_SPACE, format_number, format_svg_points
from farmarea.utils.spatial_helpers import bounding_box, is_complete_polygon, point_in_polygon

logger = logging.getLogger(__name__)


@dataclass
class OverlayConfig:
    """Styling constants for the overlay."""

    hovered_fill_opacity: float = 0.65
    dimmed_fill_opacity: float = 0.10
    neutral_fill_opacity: float = 0.30

    hovered_stroke_width: float = 0.5
    dimmed_stroke_width: float = 0.1
    neutral_stroke_width: float = 0.2

    highlight_color: str = "white"
    highlight_stroke_width: float = 0.8
    highlight_stroke_opacity: float = 0.7

    label_width_ratio: float = 0.8
    """Share of the bounding box width the name may fill"""

    glyph_width_factor: float = 0.7
    """Assumed average glyph width as a multiple of the font size"""

    label_height_ratio: float = 0.3
    """Largest font size as a share of the bounding box height"""

    max_font_size: float = 3.0
    """Absolute font size cap, in percent of the coordinate space"""

    secondary_font_ratio: float = 0.6
    secondary_offset_ratio: float = 1.2

    draft_color: str = "#facc15"
    draft_stroke_width: float = 0.3
    draft_dash: str = "1"
    draft_fill_opacity: float = 0.2

    thumbnail_fill_opacity: float = 0.8
    thumbnail_stroke_width: float = 1.0


@dataclass(frozen=True)
class AreaStyle:
    fill_opacity: float
    stroke_width: float
    highlight_stroke_width: float
    label_visible: bool


@dataclass(frozen=True)
class LabelLayout:
    """Position and sizes of an area's two-line label."""
    x: float
    y: float
    font_size: float
    secondary_font_size: float
    secondary_offset: float


@dataclass(frozen=True)
class AreaShape:
    """Everything needed to draw one committed area."""
    area_id: str
    name: str
    hectares: float
    color: str
    points: Tuple[Point, ...]
    style: AreaStyle
    label: LabelLayout


@dataclass(frozen=True)
class DraftShape:
    """An in-progress polygon. ``closed`` once every corner is placed."""
    points: Tuple[Point, ...]
    closed: bool


class AreaOverlayRenderer:
    """
    Lays out and renders committed areas plus an optional draft.

    Layout is pure: the same areas, hovered id and draft points always give
    the same shapes. ``render`` serialises the layout to SVG markup.
    """

    def __init__(self, config: Optional[OverlayConfig] = None):
        self.config = config or OverlayConfig()

    # ------------------------------------------------------------
    # Styling
    # ------------------------------------------------------------

    def fill_opacity(self, area_id: str, hovered_id: Optional[str]) -> float:
        if hovered_id is None:
            return self.config.neutral_fill_opacity
        if area_id == hovered_id:
            return self.config.hovered_fill_opacity
        return self.config.dimmed_fill_opacity

    def stroke_width(self, area_id: str, hovered_id: Optional[str]) -> float:
        if hovered_id is None:
            return self.config.neutral_stroke_width
        if area_id == hovered_id:
            return self.config.hovered_stroke_width
        return self.config.dimmed_stroke_width

    def style_for(self, area_id: str, hovered_id: Optional[str]) -> AreaStyle:
        is_hovered = hovered_id is not None and area_id == hovered_id
        return AreaStyle(
            fill_opacity=self.fill_opacity(area_id, hovered_id),
            stroke_width=self.stroke_width(area_id, hovered_id),
            highlight_stroke_width=self.config.highlight_stroke_width if is_hovered else 0.0,
            label_visible=is_hovered,
        )

    # ------------------------------------------------------------
    # Label fitting
    # ------------------------------------------------------------

    def fit_label(self, points: Sequence[Point], name: str) -> LabelLayout:
        """
        Centre a label in the polygon's bounding box and pick its font size.

        The font size is the smallest of: the size at which the name fills
        ``label_width_ratio`` of the box width, ``label_height_ratio`` of the
        box height, and ``max_font_size``.

        Args:
            points: Polygon corners
            name: Area name shown on the first line

        Returns:
            LabelLayout for the name and the hectare line below it
        """
        box = bounding_box(points)
        cfg = self.config

        if name:
            by_width = box.width * cfg.label_width_ratio / (len(name) * cfg.glyph_width_factor)
        else:
            by_width = math.inf
        by_height = box.height * cfg.label_height_ratio
        font_size = min(by_width, by_height, cfg.max_font_size)

        center_x, center_y = box.center
        return LabelLayout(
            x=center_x,
            y=center_y,
            font_size=font_size,
            secondary_font_size=font_size * cfg.secondary_font_ratio,
            secondary_offset=font_size * cfg.secondary_offset_ratio,
        )

    # ------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------

    def layout_area(self, area: Area, hovered_id: Optional[str]) -> Optional[AreaShape]:
        """
        Lay out one area, or return None if its polygon is incomplete.
        """
        if not is_complete_polygon(area.points):
            logger.warning(
                f"Skipping area {area.id}: expected a complete polygon, "
                f"got {len(area.points or [])} point(s)"
            )
            return None
        return AreaShape(
            area_id=area.id,
            name=area.name,
            hectares=area.hectares,
            color=area.color,
            points=tuple(area.points),
            style=self.style_for(area.id, hovered_id),
            label=self.fit_label(area.points, area.name),
        )

    def layout_areas(self, areas: Sequence[Area], hovered_id: Optional[str] = None) -> list[AreaShape]:
        shapes = []
        for area in areas:
            shape = self.layout_area(area, hovered_id)
            if shape is not None:
                shapes.append(shape)
        return shapes

    @staticmethod
    def layout_draft(points: Sequence[Point]) -> Optional[DraftShape]:
        if not points:
            return None
        return DraftShape(points=tuple(points), closed=is_complete_polygon(points))

    # ------------------------------------------------------------
    # Hit testing
    # ------------------------------------------------------------

    def hit_test(self, point: Point, areas: Sequence[Area]) -> Optional[str]:
        """
        Find the area under a point.

        Areas later in the list are drawn on top, so they win where polygons
        overlap. Incomplete polygons are never hit.

        Args:
            point: Pointer position in percentage coordinates
            areas: Areas in rendering order

        Returns:
            Id of the topmost area containing the point, or None
        """
        for area in reversed(areas):
            if is_complete_polygon(area.points) and point_in_polygon(point, area.points):
                return area.id
        return None

    # ------------------------------------------------------------
    # SVG output
    # ------------------------------------------------------------

    def render(
        self,
        areas: Sequence[Area],
        hovered_id: Optional[str] = None,
        draft_points: Sequence[Point] = (),
    ) -> str:
        """
        Render the full overlay as an SVG document.

        Args:
            areas: Committed areas in rendering order
            hovered_id: Id of the hovered area, if any
            draft_points: Corners of the in-progress draft, if any

        Returns:
            SVG markup
        """
        parts = [self._svg_open()]
        for shape in self.layout_areas(areas, hovered_id):
            parts.append(self._render_area(shape))
        draft = self.layout_draft(draft_points)
        if draft is not None:
            parts.append(self._render_draft(draft))
        parts.append("</svg>")
        return "\n".join(parts)

    def render_thumbnail(self, area: Area) -> str:
        """
        Render a single area on its own, as shown on area cards.

        An incomplete polygon gives an empty SVG.
        """
        cfg = self.config
        parts = [self._svg_open()]
        if is_complete_polygon(area.points):
            parts.append(
                f'<polygon points="{format_svg_points(area.points)}" fill={quoteattr(area.color)} '
                f'fill-opacity="{format_number(cfg.thumbnail_fill_opacity)}" stroke={quoteattr(area.color)} '
                f'stroke-width="{format_number(cfg.thumbnail_stroke_width)}"/>'
            )
        parts.append("</svg>")
        return "\n".join(parts)

    @staticmethod
    def _svg_open() -> str:
        extent = format_number(COORDINATE_SPACE)
        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {extent} {extent}" '
            f'preserveAspectRatio="none">'
        )

    def _render_area(self, shape: AreaShape) -> str:
        cfg = self.config
        style = shape.style
        label = shape.label
        points = format_svg_points(shape.points)
        color = quoteattr(shape.color)
        return "\n".join([
            f'<g class="area" data-area-id={quoteattr(shape.area_id)}>',
            f'<polygon points="{points}" fill="none" stroke="{cfg.highlight_color}" '
            f'stroke-width="{format_number(style.highlight_stroke_width)}" '
            f'stroke-opacity="{format_number(cfg.highlight_stroke_opacity)}" '
            f'vector-effect="non-scaling-stroke"/>',
            f'<polygon points="{points}" fill={color} '
            f'fill-opacity="{format_number(style.fill_opacity)}" stroke={color} '
            f'stroke-width="{format_number(style.stroke_width)}" vector-effect="non-scaling-stroke"/>',
            f'<g class="area-label" opacity="{1 if style.label_visible else 0}">',
            f'<text x="{format_number(label.x)}" y="{format_number(label.y)}" text-anchor="middle" '
            f'dominant-baseline="middle" fill="white" font-weight="bold" '
            f'font-size="{format_number(label.font_size)}">{escape(shape.name)}</text>',
            f'<text x="{format_number(label.x)}" y="{format_number(label.y)}" '
            f'dy="{format_number(label.secondary_offset)}" text-anchor="middle" '
            f'dominant-baseline="middle" fill="white" fill-opacity="0.9" '
            f'font-size="{format_number(label.secondary_font_size)}">'
            f'{format_number(shape.hectares)} ha</text>',
            "</g>",
            "</g>",
        ])

    def _render_draft(self, draft: DraftShape) -> str:
        cfg = self.config
        color = cfg.draft_color
        stroke = (
            f'stroke="{color}" stroke-width="{format_number(cfg.draft_stroke_width)}" '
            f'stroke-dasharray="{cfg.draft_dash}" vector-effect="non-scaling-stroke"'
        )
        parts = [
            '<g class="draft">',
            f'<polyline points="{format_svg_points(draft.points)}" fill="none" {stroke}/>',
        ]
        if draft.closed:
            first, last = draft.points[0], draft.points[-1]
            parts.append(
                f'<line x1="{format_number(last.x)}" y1="{format_number(last.y)}" '
                f'x2="{format_number(first.x)}" y2="{format_number(first.y)}" {stroke}/>'
            )
            parts.append(
                f'<polygon points="{format_svg_points(draft.points)}" fill="{color}" '
                f'fill-opacity="{format_number(cfg.draft_fill_opacity)}" stroke="none"/>'
            )
        parts.append("</g>")
        return "\n".join(parts)


class OverlayInteraction:
    """
    Routes pointer events on the overlay to the shared hover and selection state.

    While a draft is in progress it has exclusive use of the pointer: hover
    is cleared and clicks select nothing.

    Args:
        renderer: Renderer used for hit testing
        draft: The map's polygon draft
        on_select: Called with the id of a clicked area
    """

    def __init__(
        self,
        renderer: AreaOverlayRenderer,
        draft: PolygonDraft,
        on_select: Optional[Callable[[str], None]] = None,
    ):
        self.renderer = renderer
        self.draft = draft
        self.on_select = on_select
        self._hovered_id: Optional[str] = None

    @property
    def hovered_area_id(self) -> Optional[str]:
        return self._hovered_id

    def set_hovered(self, area_id: Optional[str]) -> None:
        """Set the hovered area directly (e.g. from the area list beside the map)."""
        if self.draft.is_active:
            area_id = None
        self._hovered_id = area_id

    def pointer_move(self, point: Point, areas: Sequence[Area]) -> Optional[str]:
        if self.draft.is_active:
            self._hovered_id = None
            return None
        self._hovered_id = self.renderer.hit_test(point, areas)
        return self._hovered_id

    def pointer_leave(self) -> None:
        self._hovered_id = None

    def click(self, point: Point, areas: Sequence[Area]) -> Optional[str]:
        if self.draft.is_active:
            return None
        area_id = self.renderer.hit_test(point, areas)
        if area_id is not None and self.on_select is not None:
            self.on_select(area_id)
        return area_id
