"""Mixin for handling zoom and pan in the layout canvas.

Provides viewport navigation including:
- Zoom in/out about the canvas centre, wheel zoom about the cursor
- Fit-all to frame every scene rectangle
- Keyboard zoom (Ctrl+Plus, Ctrl+Minus) and fit (F)
- Pan with middle button or Ctrl + left drag
"""

from PyQt5.QtCore import Qt

from components.canvas_widgets.drag_context import DragContext
from utils.geometry import bounding_box
from constants import ZOOM_STEP, FIT_PADDING


class CanvasZoomPanMixin:
    """Mixin providing zoom and pan functionality for the layout canvas."""

    # Expected state variables (initialized in main class):
    # - viewport: ViewportState
    # - scenes: list of PlacedEntry
    # - drag: DragContext or None
    # - layout_changed: pyqtSignal

    def zoom_in(self):
        """Zoom in one step about the canvas centre."""
        self.set_zoom(self.viewport.zoom + ZOOM_STEP, self.width() / 2, self.height() / 2)

    def zoom_out(self):
        """Zoom out one step about the canvas centre."""
        self.set_zoom(self.viewport.zoom - ZOOM_STEP, self.width() / 2, self.height() / 2)

    def set_zoom(self, zoom, anchor_x, anchor_y):
        """Set zoom (clamped) keeping the world point under the anchor fixed."""
        if not self.scenes:
            return
        self.viewport.set_zoom(zoom, anchor_x, anchor_y)
        self.update()
        self.layout_changed.emit()

    def get_zoom_percent(self):
        """Get current zoom percentage."""
        return int(round(self.viewport.zoom * 100))

    def fit_all(self):
        """Zoom and pan so every scene is visible and centred."""
        bounds = bounding_box(self.scenes)
        if bounds is None:
            return
        self.viewport.fit_rect(*bounds, self.width(), self.height(), FIT_PADDING)
        self.update()
        self.layout_changed.emit()

    def wheel(self, delta, x, y):
        """Zoom one step per notch about a screen point.

        Args:
            delta: Wheel delta; positive zooms in, negative zooms out
            x, y: Cursor position in screen pixels
        """
        if delta > 0:
            self.set_zoom(self.viewport.zoom + ZOOM_STEP, x, y)
        elif delta < 0:
            self.set_zoom(self.viewport.zoom - ZOOM_STEP, x, y)

    # ========================================
    # Input Event Handlers
    # ========================================

    def wheelEvent(self, event):
        """Handle mouse wheel for zoom."""
        pos = event.pos()
        self.wheel(event.angleDelta().y(), pos.x(), pos.y())
        event.accept()

    def keyPressEvent(self, event):
        """Ctrl+Plus/Ctrl+Minus zoom about the centre, F fits all"""
        key = event.key()
        ctrl = bool(event.modifiers() & Qt.ControlModifier)
        if ctrl and key in (Qt.Key_Plus, Qt.Key_Equal):
            self.zoom_in()
        elif ctrl and key == Qt.Key_Minus:
            self.zoom_out()
        elif key == Qt.Key_F and not event.modifiers():
            self.fit_all()
        else:
            super().keyPressEvent(event)
            return
        event.accept()

    def _begin_pan(self, x, y, modifiers):
        self.drag = DragContext('pan', start_screen=(x, y), modifiers=set(modifiers))
        self.setCursor(Qt.ClosedHandCursor)

    def _continue_pan(self, x, y):
        last_x, last_y = self.drag.start_screen
        self.viewport.pan_by(x - last_x, y - last_y)
        self.drag.start_screen = (x, y)
        self.update()
