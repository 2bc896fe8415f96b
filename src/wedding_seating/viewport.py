"""Zoom and pan geometry for the seating canvas.

Screen coordinates relate to canvas coordinates by
``screen = canvas * zoom + pan``.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional, Tuple

from .models import Table

MIN_ZOOM = 0.25
MAX_ZOOM = 2.0
ZOOM_STEP = 0.1
TABLE_RADIUS = 50
FIT_PADDING = 100
FIT_MARGIN = 0.9
FOCUS_ZOOM = 1.5


def clamp_zoom(zoom: float) -> float:
    return max(MIN_ZOOM, min(MAX_ZOOM, zoom))


@dataclass(frozen=True)
class Viewport:
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def screen_to_canvas(self, x: float, y: float) -> Tuple[float, float]:
        return ((x - self.pan_x) / self.zoom, (y - self.pan_y) / self.zoom)

    def canvas_to_screen(self, x: float, y: float) -> Tuple[float, float]:
        return (x * self.zoom + self.pan_x, y * self.zoom + self.pan_y)


@dataclass(frozen=True)
class BoundingBox:
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
    def center(self) -> Tuple[float, float]:
        return ((self.min_x + self.max_x) / 2, (self.min_y + self.max_y) / 2)


def zoom_at(viewport: Viewport, delta: float, focal_x: float, focal_y: float) -> Viewport:
    """Change zoom by ``delta`` keeping the canvas point under the focal point fixed."""
    new_zoom = clamp_zoom(viewport.zoom + delta)
    if new_zoom == viewport.zoom:
        return viewport
    cx, cy = viewport.screen_to_canvas(focal_x, focal_y)
    return Viewport(zoom=new_zoom, pan_x=focal_x - cx * new_zoom, pan_y=focal_y - cy * new_zoom)


def pan(viewport: Viewport, dx: float, dy: float) -> Viewport:
    return replace(viewport, pan_x=viewport.pan_x + dx, pan_y=viewport.pan_y + dy)


def reset_zoom() -> Viewport:
    return Viewport()


def reset_pan(viewport: Viewport) -> Viewport:
    return replace(viewport, pan_x=0.0, pan_y=0.0)


def tables_bounding_box(
    tables: Iterable[Table], table_radius: float = TABLE_RADIUS, padding: float = FIT_PADDING
) -> Optional[BoundingBox]:
    """Box around every table centre, grown by the table radius and padding."""
    tables = list(tables)
    if not tables:
        return None
    reach = table_radius + padding
    return BoundingBox(
        min_x=min(t.x for t in tables) - reach,
        min_y=min(t.y for t in tables) - reach,
        max_x=max(t.x for t in tables) + reach,
        max_y=max(t.y for t in tables) + reach,
    )


def fit_all_tables(tables: Iterable[Table], viewport_width: float, viewport_height: float) -> Optional[Viewport]:
    """Viewport that shows every table, or ``None`` when there are none."""
    box = tables_bounding_box(tables)
    if box is None:
        return None
    zoom = clamp_zoom(min(viewport_width / box.width, viewport_height / box.height) * FIT_MARGIN)
    cx, cy = box.center
    return Viewport(zoom=zoom, pan_x=viewport_width / 2 - cx * zoom, pan_y=viewport_height / 2 - cy * zoom)


def zoom_to_table(table: Table, viewport_width: float, viewport_height: float, zoom: float = FOCUS_ZOOM) -> Viewport:
    zoom = clamp_zoom(zoom)
    return Viewport(
        zoom=zoom,
        pan_x=viewport_width / 2 - table.x * zoom,
        pan_y=viewport_height / 2 - table.y * zoom,
    )
