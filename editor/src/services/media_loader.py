"""Deferred thumbnail loading for the layout canvas.

Images are decoded with Pillow, reduced to THUMBNAIL_MAX_SIZE and handed to
Qt as QImage. Loads are queued on the event loop with QTimer.singleShot so
set_scenes() returns immediately; each successful load emits `loaded` and
the canvas repaints. Failed loads are cached as misses and never retried.
"""

import logging
import os

import numpy as np
from PIL import Image
from PyQt5.QtCore import QObject, QTimer, pyqtSignal
from PyQt5.QtGui import QImage

from models.scene import is_video_source
from constants import THUMBNAIL_MAX_SIZE

logger = logging.getLogger(__name__)


def pil_to_qimage(img):
    """Convert a PIL image to a QImage that owns its pixel buffer."""
    rgba = np.ascontiguousarray(np.array(img.convert('RGBA'), dtype=np.uint8))
    height, width = rgba.shape[:2]
    image = QImage(rgba.tobytes(), width, height, width * 4, QImage.Format_RGBA8888)
    return image.copy()


class MediaLoader(QObject):
    """Cache of scene preview images keyed by media path."""

    loaded = pyqtSignal(str)  # media path that just finished loading

    def __init__(self, base_dir=None, max_size=THUMBNAIL_MAX_SIZE, parent=None):
        super().__init__(parent)
        self.base_dir = base_dir
        self.max_size = max_size
        self._cache = {}      # path -> QImage, or None for a failed load
        self._pending = set()
        self._alive = True

    @staticmethod
    def preview_source(entry):
        """Path to show for a scene: thumbnail first, else a still background.

        Video backgrounds are never decoded; without a thumbnail they get none.
        """
        if entry.thumbnail:
            return entry.thumbnail
        if entry.background_src and not is_video_source(entry.background_src):
            return entry.background_src
        return None

    def resolve(self, src):
        if os.path.isabs(src) or not self.base_dir:
            return src
        return os.path.join(self.base_dir, src)

    def get(self, src):
        """Cached image for a path, or None if not (successfully) loaded."""
        if not src:
            return None
        return self._cache.get(src)

    def request(self, src):
        """Queue a load; repeated or already-answered requests are ignored."""
        if not self._alive or not src or src in self._cache or src in self._pending:
            return
        if is_video_source(src):
            return
        self._pending.add(src)
        QTimer.singleShot(0, lambda: self._load(src))

    def _load(self, src):
        if not self._alive:
            return
        self._pending.discard(src)
        try:
            with Image.open(self.resolve(src)) as img:
                img.thumbnail((self.max_size, self.max_size))
                self._cache[src] = pil_to_qimage(img)
        except Exception as e:
            # Missing media just renders as an untextured placeholder
            logger.debug("Could not load media %s: %s", src, e)
            self._cache[src] = None
            return
        self.loaded.emit(src)

    def clear(self):
        self._cache.clear()
        self._pending.clear()

    def shutdown(self):
        """Stop delivering results; callbacks already queued become no-ops."""
        self._alive = False
        self.clear()

    @property
    def is_alive(self):
        return self._alive
