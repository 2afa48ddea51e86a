"""Interactive layout canvas - arrange scene rectangles before merging.

MODEL side: the list of PlacedEntry (list order is z-order, last on top)
and a ViewportState. VIEW side: QPainter rendering in
CanvasRenderingMixin. Pointer, zoom and pan handling live in the other
mixins; every handler mutates this single state synchronously and
requests a repaint.
"""

import logging

from PyQt5.QtWidgets import QWidget, QSizePolicy
from PyQt5.QtCore import Qt, pyqtSignal

from components.canvas_widgets.canvas_zoom_pan_mixin import CanvasZoomPanMixin
from components.canvas_widgets.canvas_interaction_mixin import CanvasInteractionMixin
from components.canvas_widgets.canvas_rendering_mixin import CanvasRenderingMixin
from components.scene_tooltip import SceneTooltip
from models.scene import PlacedEntry
from models.viewport import ViewportState
from services.media_loader import MediaLoader
from services.snap_engine import next_snap_flags
from constants import INITIAL_LAYOUT_GAP

logger = logging.getLogger(__name__)


class LayoutCanvas(CanvasInteractionMixin, CanvasZoomPanMixin, CanvasRenderingMixin, QWidget):
    """Drag-and-drop canvas positioning scenes in a shared world space."""

    # Fired after a drag ends, after zoom changes and after fit-all
    layout_changed = pyqtSignal()

    def __init__(self, parent=None, media_base_dir=None):
        super().__init__(parent)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(320, 240)

        # Layout state
        self.scenes = []
        self.viewport = ViewportState()
        self.snap_x = True
        self.snap_y = True

        # Interaction state
        self.drag = None
        self.hovered_index = -1
        self.selected_index = -1
        self.snap_guides = []

        self.tooltip = SceneTooltip()
        self.media = MediaLoader(base_dir=media_base_dir, parent=self)
        self.media.loaded.connect(self._on_media_loaded)
        self._alive = True

    # ========================================
    # Layout
    # ========================================

    def set_scenes(self, scene_refs):
        """Replace the arrangement with scenes laid out in a row.

        The first scene sits at (gap, gap), each next one to the right of
        the previous with the same gap. Media loads are queued and the view
        is fitted to the result.
        """
        self.scenes = []
        x = INITIAL_LAYOUT_GAP
        for ref in scene_refs:
            self.scenes.append(PlacedEntry.from_scene_ref(ref, x, INITIAL_LAYOUT_GAP))
            x += ref.width + INITIAL_LAYOUT_GAP

        self.drag = None
        self.hovered_index = -1
        self.selected_index = -1
        self.snap_guides = []

        for entry in self.scenes:
            self.media.request(self.media.preview_source(entry))

        logger.debug("Layout canvas holds %d scene(s)", len(self.scenes))
        self.fit_all()
        self.update()

    def get_layout(self):
        """Current positions as LayoutEntry list, in z-order."""
        return [entry.to_layout() for entry in self.scenes]

    def set_snap(self, mode):
        """Apply a snap command: 'x', 'y', 'both' or 'none'."""
        self.snap_x, self.snap_y = next_snap_flags(mode, self.snap_x, self.snap_y)

    def layer_up(self):
        """Move the selected scene one step towards the top of the stack."""
        index = self.selected_index
        if index < 0 or index >= len(self.scenes) - 1:
            return
        self._swap(index, index + 1)
        self.selected_index = index + 1

    def layer_down(self):
        """Move the selected scene one step towards the bottom of the stack."""
        index = self.selected_index
        if index <= 0 or index >= len(self.scenes):
            return
        self._swap(index, index - 1)
        self.selected_index = index - 1

    def _swap(self, a, b):
        self.scenes[a], self.scenes[b] = self.scenes[b], self.scenes[a]
        self.hovered_index = -1
        self.update()
        self.layout_changed.emit()

    # ========================================
    # Lifecycle
    # ========================================

    def _on_media_loaded(self, src):
        if self._alive:
            self.update()

    def teardown(self):
        """Detach everything; late media callbacks become no-ops."""
        if not self._alive:
            return
        self._alive = False
        self.media.loaded.disconnect(self._on_media_loaded)
        self.media.shutdown()
        self.tooltip.hide()
        self.tooltip.deleteLater()
        # With no scenes every pointer and zoom handler is a no-op
        self.scenes = []
        self.drag = None
        self.hovered_index = -1
        self.selected_index = -1
        self.snap_guides = []
        self.setMouseTracking(False)

    @property
    def is_alive(self):
        return self._alive

    def resizeEvent(self, event):
        super().resizeEvent(event)
        self.update()
