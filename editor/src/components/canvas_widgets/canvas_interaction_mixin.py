"""Pointer interaction mixin for the layout canvas.

Pointer handlers take plain arguments (screen x/y, button name, modifier
names) so tests and the Qt event overrides drive the same code path:

    button:    'left', 'middle' or 'right'
    modifiers: iterable of 'ctrl' / 'shift'

State is a single DragContext (or None when idle):
- middle button, or left + Ctrl: pan the view
- left on a scene: drag it, snapping to neighbours unless Shift is held
- otherwise: hover highlight and preview popup
"""

from PyQt5.QtCore import Qt, QPoint

from components.canvas_widgets.drag_context import DragContext
from services.snap_engine import compute_snap
from utils.geometry import hit_test


def modifier_names(qt_modifiers):
    """Qt keyboard modifiers -> {'ctrl', 'shift'} subset."""
    names = set()
    if qt_modifiers & Qt.ControlModifier:
        names.add('ctrl')
    if qt_modifiers & Qt.ShiftModifier:
        names.add('shift')
    return names


def button_name(qt_button):
    if qt_button == Qt.LeftButton:
        return 'left'
    if qt_button == Qt.MiddleButton:
        return 'middle'
    return 'right'


class CanvasInteractionMixin:
    """Mixin providing drag, hover and pointer handling.

    Requires from the main class:
    - self.scenes, self.viewport, self.drag, self.snap_guides
    - self.hovered_index, self.selected_index, self.snap_x, self.snap_y
    - self.tooltip, self.media, self.layout_changed
    - self._begin_pan / self._continue_pan (CanvasZoomPanMixin)
    """

    def hit_test(self, x, y):
        """Index of the topmost scene under a screen point, or -1."""
        world_x, world_y = self.viewport.screen_to_world(x, y)
        return hit_test(self.scenes, world_x, world_y)

    @property
    def is_dragging(self):
        return self.drag is not None and self.drag.is_drag

    @property
    def is_panning(self):
        return self.drag is not None and self.drag.is_pan

    # ========================================
    # Pointer API
    # ========================================

    def pointer_down(self, x, y, button='left', modifiers=()):
        if not self.scenes or self.drag is not None:
            return
        modifiers = set(modifiers)

        if button == 'middle' or (button == 'left' and 'ctrl' in modifiers):
            self._begin_pan(x, y, modifiers)
            return
        if button != 'left':
            return

        index = self.hit_test(x, y)
        if index < 0:
            return

        entry = self.scenes[index]
        self.drag = DragContext(
            'drag',
            index=index,
            start_world=self.viewport.screen_to_world(x, y),
            origin=(entry.x, entry.y),
            modifiers=modifiers,
        )
        self.selected_index = index
        self.tooltip.hide()
        self.setCursor(Qt.ClosedHandCursor)
        self.update()

    def pointer_move(self, x, y, modifiers=()):
        if not self.scenes:
            return

        if self.is_panning:
            self._continue_pan(x, y)
            return

        if self.is_dragging:
            self._continue_drag(x, y, set(modifiers))
            return

        self._update_hover(x, y)

    def pointer_up(self):
        if not self.scenes:
            return
        was_dragging = self.is_dragging
        self.drag = None
        self.snap_guides = []
        self.setCursor(Qt.ArrowCursor)
        self.update()
        if was_dragging:
            self.layout_changed.emit()

    def pointer_leave(self):
        if not self.scenes:
            return
        self.hovered_index = -1
        self.tooltip.hide()
        self.pointer_up()

    # ========================================
    # Internals
    # ========================================

    def _continue_drag(self, x, y, modifiers):
        world_x, world_y = self.viewport.screen_to_world(x, y)
        start_x, start_y = self.drag.start_world
        origin_x, origin_y = self.drag.origin

        new_x, new_y, guides = compute_snap(
            self.drag.index,
            origin_x + world_x - start_x,
            origin_y + world_y - start_y,
            self.scenes,
            self.viewport.zoom,
            suppress='shift' in modifiers,
            snap_x=self.snap_x,
            snap_y=self.snap_y,
        )
        entry = self.scenes[self.drag.index]
        entry.x = new_x
        entry.y = new_y
        self.snap_guides = guides
        self.update()

    def _update_hover(self, x, y):
        index = self.hit_test(x, y)
        if index != self.hovered_index:
            self.hovered_index = index
            self.update()

        if index >= 0:
            entry = self.scenes[index]
            image = self.media.get(self.media.preview_source(entry))
            self.tooltip.show_for(entry, image, self.mapToGlobal(QPoint(int(x), int(y))))
            self.setCursor(Qt.OpenHandCursor)
        else:
            self.tooltip.hide()
            self.setCursor(Qt.ArrowCursor)

    # ========================================
    # Qt event overrides
    # ========================================

    def mousePressEvent(self, event):
        pos = event.pos()
        self.pointer_down(pos.x(), pos.y(), button_name(event.button()),
                          modifier_names(event.modifiers()))

    def mouseMoveEvent(self, event):
        pos = event.pos()
        self.pointer_move(pos.x(), pos.y(), modifier_names(event.modifiers()))

    def mouseReleaseEvent(self, event):
        self.pointer_up()

    def leaveEvent(self, event):
        self.pointer_leave()
        super().leaveEvent(event)
