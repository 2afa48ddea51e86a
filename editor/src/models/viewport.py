"""Viewport state for the layout canvas: zoom level and pan offset."""
from dataclasses import dataclass

from constants import MIN_ZOOM, MAX_ZOOM
from utils.coordinate_transforms import (
    world_to_screen, screen_to_world, clamp_zoom, pan_for_anchored_zoom
)


@dataclass
class ViewportState:
    """Zoom scalar plus pan offset mapping world space onto the screen.

    Invariant: MIN_ZOOM <= zoom <= MAX_ZOOM. Pan is unconstrained so content
    may be dragged entirely off-canvas.
    """
    zoom: float = 1.0
    pan_x: float = 0.0
    pan_y: float = 0.0

    def world_to_screen(self, x, y):
        """World point -> screen pixels."""
        return world_to_screen(x, y, self.zoom, self.pan_x, self.pan_y)

    def screen_to_world(self, x, y):
        """Screen pixels -> world point."""
        return screen_to_world(x, y, self.zoom, self.pan_x, self.pan_y)

    def set_zoom(self, new_zoom, anchor_x, anchor_y):
        """Zoom toward a screen anchor (cursor or viewport centre).

        The requested zoom is clamped first, then the pan is recomputed so
        the world point under the anchor stays under it.

        Args:
            new_zoom: Requested zoom level (any value, clamped)
            anchor_x, anchor_y: Screen-space anchor point
        """
        clamped = clamp_zoom(new_zoom)
        self.pan_x, self.pan_y = pan_for_anchored_zoom(
            anchor_x, anchor_y, self.pan_x, self.pan_y, self.zoom, clamped
        )
        self.zoom = clamped

    def pan_by(self, dx, dy):
        """Shift the pan offset by a screen-space delta (no zoom scaling)."""
        self.pan_x += dx
        self.pan_y += dy

    def fit_rect(self, min_x, min_y, max_x, max_y, view_width, view_height, padding):
        """Choose zoom and pan so a world rectangle is centred in the view.

        zoom = min(scale_x, scale_y, MAX_ZOOM), then raised to MIN_ZOOM if
        needed. Degenerate content (zero width or height) is ignored.
        """
        content_width = max_x - min_x
        content_height = max_y - min_y
        if content_width <= 0 or content_height <= 0:
            return

        scale_x = (view_width - padding * 2) / content_width
        scale_y = (view_height - padding * 2) / content_height
        zoom = min(scale_x, scale_y, MAX_ZOOM)
        self.zoom = max(zoom, MIN_ZOOM)

        self.pan_x = view_width / 2 - (min_x + content_width / 2) * self.zoom
        self.pan_y = view_height / 2 - (min_y + content_height / 2) * self.zoom
