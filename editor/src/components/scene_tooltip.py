"""Hover popup showing a scene's preview image, name and pixel size."""

from PyQt5.QtWidgets import QApplication, QFrame, QLabel, QVBoxLayout
from PyQt5.QtCore import Qt, QPoint
from PyQt5.QtGui import QPixmap

# Popup sits this far below/right of the cursor
CURSOR_OFFSET = 16
PREVIEW_WIDTH = 240


class SceneTooltip(QFrame):
    """Frameless popup that follows the cursor over the layout canvas."""

    def __init__(self, parent=None):
        super().__init__(parent, Qt.ToolTip | Qt.FramelessWindowHint)
        self.setAttribute(Qt.WA_ShowWithoutActivating)
        self.setStyleSheet(
            "QFrame { background-color: #1e1e32; border: 1px solid #4fd1c5; border-radius: 4px; }"
            "QLabel { border: none; color: #e0e0e0; }"
        )

        layout = QVBoxLayout(self)
        layout.setContentsMargins(6, 6, 6, 6)
        layout.setSpacing(4)

        self.image_label = QLabel()
        self.image_label.setAlignment(Qt.AlignCenter)
        layout.addWidget(self.image_label)

        self.name_label = QLabel()
        self.name_label.setStyleSheet("font-weight: bold;")
        layout.addWidget(self.name_label)

        self.info_label = QLabel()
        layout.addWidget(self.info_label)

        self._shown_key = None

    def show_for(self, entry, image, global_pos):
        """Fill the popup for a scene and place it next to global_pos."""
        key = (entry.scene_id, image is not None)
        if key != self._shown_key:
            self._shown_key = key
            self._fill(entry, image)
        self._place(global_pos)
        self.show()

    def _fill(self, entry, image):
        if image is not None and not image.isNull():
            pixmap = QPixmap.fromImage(image).scaledToWidth(PREVIEW_WIDTH, Qt.SmoothTransformation)
            self.image_label.setPixmap(pixmap)
        else:
            self.image_label.clear()
            self.image_label.setText("No preview")

        self.name_label.setText(entry.name)
        info = f"{int(entry.width)} x {int(entry.height)} px"
        if entry.is_video:
            info += "\nVideo background"
        self.info_label.setText(info)
        self.adjustSize()

    def _place(self, global_pos):
        pos = global_pos + QPoint(CURSOR_OFFSET, CURSOR_OFFSET)
        screen = QApplication.screenAt(global_pos)
        if screen is not None:
            # Flip to the other side of the cursor near screen edges
            bounds = screen.availableGeometry()
            if pos.x() + self.width() > bounds.right():
                pos.setX(global_pos.x() - self.width() - 8)
            if pos.y() + self.height() > bounds.bottom():
                pos.setY(global_pos.y() - self.height() - 8)
        self.move(pos)

    def hideEvent(self, event):
        self._shown_key = None
        super().hideEvent(event)
