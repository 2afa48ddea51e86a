"""Canvas rendering mixin - QPainter drawing of the scene arrangement.

Draw order, back to front:
- Screen-space background fill and world grid
- Dashed bounding box around all scenes (2+ scenes)
- Snap guides for the active drag
- Scene rectangles in list order (later ones on top)

World-space items are drawn under a zoom/pan transform with cosmetic pens,
so line widths stay in screen pixels at every zoom level.
"""

from PyQt5.QtCore import Qt, QRectF, QLineF
from PyQt5.QtGui import QPainter, QPen, QColor, QFont, QFontMetricsF, QImage

from services.media_loader import MediaLoader
from utils.geometry import bounding_box, fit_within
from constants import (
    BACKGROUND_GRID_STEP, BACKGROUND_GRID_MIN_SCREEN_STEP, PREVIEW_MAX_SIZE,
    CANVAS_BACKGROUND_COLOR, CANVAS_GRID_COLOR, BOUNDING_BOX_COLOR, SNAP_GUIDE_COLOR,
    SCENE_FILL_IDLE, SCENE_FILL_HOVER, SCENE_FILL_DRAG,
    SCENE_BORDER_IDLE, SCENE_BORDER_HOVER, SCENE_BORDER_DRAG, SCENE_BORDER_SELECTED,
    LABEL_BACKGROUND_COLOR, LABEL_TEXT_COLOR, LABEL_MIN_FONT_SIZE, LABEL_BASE_FONT_SIZE
)

# Guides are drawn "infinitely" long in world space
GUIDE_EXTENT = 100000


def _pen(rgba, width=1.0, style=Qt.SolidLine):
    pen = QPen(QColor(*rgba), width, style)
    pen.setCosmetic(True)
    return pen


class CanvasRenderingMixin:
    """Mixin painting the layout canvas and offscreen previews.

    Requires from the main class:
    - self.scenes, self.viewport, self.snap_guides
    - self.hovered_index, self.selected_index, self.drag
    - self.media: MediaLoader
    """

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)

        painter.fillRect(self.rect(), QColor(*CANVAS_BACKGROUND_COLOR))
        self._draw_background_grid(painter, self.width(), self.height())

        painter.save()
        painter.translate(self.viewport.pan_x, self.viewport.pan_y)
        painter.scale(self.viewport.zoom, self.viewport.zoom)
        self._draw_bounding_box(painter)
        self._draw_snap_guides(painter)
        self._draw_scenes(painter, self.viewport.zoom, interactive=True)
        painter.restore()

        painter.end()

    # ========================================
    # Layers
    # ========================================

    def _draw_background_grid(self, painter, width, height):
        step = BACKGROUND_GRID_STEP * self.viewport.zoom
        if step < BACKGROUND_GRID_MIN_SCREEN_STEP:
            return

        painter.setPen(QPen(QColor(*CANVAS_GRID_COLOR), 1))
        x = self.viewport.pan_x % step
        while x < width:
            painter.drawLine(QLineF(x, 0, x, height))
            x += step
        y = self.viewport.pan_y % step
        while y < height:
            painter.drawLine(QLineF(0, y, width, y))
            y += step

    def _draw_bounding_box(self, painter):
        if len(self.scenes) < 2:
            return
        min_x, min_y, max_x, max_y = bounding_box(self.scenes)
        pen = _pen(BOUNDING_BOX_COLOR, 2, Qt.CustomDashLine)
        pen.setDashPattern([4, 2])
        painter.setPen(pen)
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(QRectF(min_x, min_y, max_x - min_x, max_y - min_y))

    def _draw_snap_guides(self, painter):
        if not self.snap_guides:
            return
        pen = _pen(SNAP_GUIDE_COLOR, 1, Qt.CustomDashLine)
        pen.setDashPattern([4, 4])
        painter.setPen(pen)
        for guide in self.snap_guides:
            if guide.axis == 'x':
                painter.drawLine(QLineF(guide.value, -GUIDE_EXTENT, guide.value, GUIDE_EXTENT))
            else:
                painter.drawLine(QLineF(-GUIDE_EXTENT, guide.value, GUIDE_EXTENT, guide.value))

    def _draw_scenes(self, painter, zoom, interactive):
        for index, entry in enumerate(self.scenes):
            self._draw_scene(painter, index, entry, zoom, interactive)

    def _draw_scene(self, painter, index, entry, zoom, interactive):
        is_dragging = interactive and self.drag is not None and self.drag.is_drag and self.drag.index == index
        is_hovered = interactive and index == self.hovered_index
        is_selected = interactive and index == self.selected_index

        rect = QRectF(entry.x, entry.y, entry.width, entry.height)

        if is_dragging:
            fill, border, width = SCENE_FILL_DRAG, SCENE_BORDER_DRAG, 3
        elif is_hovered:
            fill, border, width = SCENE_FILL_HOVER, SCENE_BORDER_HOVER, 2
        else:
            fill, border, width = SCENE_FILL_IDLE, SCENE_BORDER_IDLE, 1
        if is_selected and not is_dragging:
            border = SCENE_BORDER_SELECTED

        painter.fillRect(rect, QColor(*fill))

        image = self.media.get(MediaLoader.preview_source(entry))
        if image is not None and not image.isNull():
            painter.drawImage(rect, image)

        painter.setPen(_pen(border, width))
        painter.setBrush(Qt.NoBrush)
        painter.drawRect(rect)

        self._draw_label(painter, entry, zoom)

    def _draw_label(self, painter, entry, zoom):
        # World-space size; never smaller than LABEL_BASE_FONT_SIZE on screen
        font_size = max(LABEL_MIN_FONT_SIZE, LABEL_BASE_FONT_SIZE / zoom)
        font = QFont()
        font.setPixelSize(max(1, int(round(font_size))))
        painter.setFont(font)

        metrics = QFontMetricsF(font)
        pad = 4 / zoom
        label_w = metrics.horizontalAdvance(entry.name) + pad * 2
        label_h = font.pixelSize() + pad * 2
        painter.fillRect(QRectF(entry.x, entry.y, label_w, label_h), QColor(*LABEL_BACKGROUND_COLOR))

        painter.setPen(QColor(*LABEL_TEXT_COLOR))
        painter.drawText(QRectF(entry.x + pad, entry.y + pad, label_w, label_h),
                         Qt.AlignLeft | Qt.AlignTop, entry.name)

    # ========================================
    # Offscreen preview
    # ========================================

    def generate_preview(self, max_size=PREVIEW_MAX_SIZE):
        """Render the whole arrangement to an image.

        The image covers the bounding box of all scenes, scaled so its
        longest side is max_size. Hover, selection and guides are omitted.

        Returns:
            QImage, or None when there are no scenes
        """
        bounds = bounding_box(self.scenes)
        if bounds is None:
            return None
        min_x, min_y, max_x, max_y = bounds
        scale, width, height = fit_within(max_x - min_x, max_y - min_y, max_size)
        if scale <= 0:
            return None

        image = QImage(width, height, QImage.Format_ARGB32)
        image.fill(QColor(*CANVAS_BACKGROUND_COLOR))

        painter = QPainter(image)
        painter.setRenderHint(QPainter.Antialiasing)
        painter.setRenderHint(QPainter.SmoothPixmapTransform)
        painter.scale(scale, scale)
        painter.translate(-min_x, -min_y)
        self._draw_scenes(painter, scale, interactive=False)
        painter.end()
        return image
