"""Scene Stitcher main window - two-step wizard.

Step 1 (select): pick two or more scenes from the open world.
Step 2 (layout): arrange them on the layout canvas, preview, then merge.

StitcherSession owns at most one window: opening again while a window is
visible brings that window to the front instead of creating another.
"""

import logging
import os

from PyQt5.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QStackedWidget, QPushButton,
    QMessageBox, QFileDialog, QInputDialog, QDialog, QLabel, QScrollArea, QAction
)
from PyQt5.QtCore import Qt, pyqtSignal
from PyQt5.QtGui import QPixmap

from components.config_mixin import ConfigMixin
from components.layout_canvas import LayoutCanvas
from components.scene_selector import SceneSelector
from components.zoom_toolbar import ZoomToolbar
from services.merge_engine import merge_scenes, get_scene_info, MergeError
from services.scene_store import JsonSceneStore, StoreError
from constants import MIN_SCENES_TO_MERGE, PREVIEW_MAX_SIZE, DEFAULT_MERGED_SCENE_NAME

logger = logging.getLogger(__name__)

STEP_SELECT = 0
STEP_LAYOUT = 1


class StitcherWindow(ConfigMixin, QMainWindow):
    """Wizard window bound to one scene store."""

    closed = pyqtSignal()
    merged = pyqtSignal(dict)  # the newly created scene document

    def __init__(self, store=None, world_path=None, config_dir=None):
        super().__init__()
        self.setWindowTitle("Scene Stitcher")
        self.resize(1280, 800)

        self.store = store
        self.world_path = world_path
        self.canvas = None
        self.toolbar = None

        self._init_config(config_dir)
        self._create_menu_bar()
        self._setup_ui()
        self.statusBar()

        if store is not None:
            self._load_scene_list()

    # ============= UI Setup =============

    def _create_menu_bar(self):
        file_menu = self.menuBar().addMenu("&File")

        open_action = QAction("&Open World...", self)
        open_action.setShortcut("Ctrl+O")
        open_action.triggered.connect(self._prompt_open_world)
        file_menu.addAction(open_action)

        self.recent_menu = file_menu.addMenu("Recent Worlds")
        self._update_recent_worlds_menu()

        file_menu.addSeparator()
        quit_action = QAction("&Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _setup_ui(self):
        self.stack = QStackedWidget()
        self.setCentralWidget(self.stack)

        self.selector = SceneSelector()
        self.selector.next_requested.connect(self.go_to_layout)
        self.stack.addWidget(self.selector)

        self.layout_page = QWidget()
        page_layout = QVBoxLayout(self.layout_page)
        page_layout.setContentsMargins(4, 4, 4, 4)

        self.canvas_host = QVBoxLayout()
        page_layout.addLayout(self.canvas_host, 1)

        footer = QHBoxLayout()
        self.back_btn = QPushButton("← Back")
        self.back_btn.clicked.connect(self.go_to_select)
        footer.addWidget(self.back_btn)
        footer.addStretch()
        self.preview_btn = QPushButton("Preview")
        self.preview_btn.clicked.connect(self.show_preview)
        footer.addWidget(self.preview_btn)
        self.merge_btn = QPushButton("Merge Scenes")
        self.merge_btn.clicked.connect(self.merge)
        footer.addWidget(self.merge_btn)
        page_layout.addLayout(footer)

        self.stack.addWidget(self.layout_page)

    # ============= World loading =============

    def _prompt_open_world(self):
        path, _ = QFileDialog.getOpenFileName(self, "Open World", "", "World files (*.json);;All files (*)")
        if path:
            self._open_world(path)

    def _open_world(self, path):
        """Replace the current store with a world file; errors are reported, not raised."""
        try:
            store = JsonSceneStore(path)
        except StoreError as e:
            logger.error("Could not open world %s: %s", path, e)
            QMessageBox.critical(self, "Open World", str(e))
            return False

        self.go_to_select()
        self.store = store
        self.world_path = path
        self._add_to_recent_worlds(path)
        self._load_scene_list()
        return True

    def _load_scene_list(self):
        refs = [get_scene_info(scene) for scene in self.store.list_scenes()]
        self.selector.set_scenes(refs)
        name = os.path.basename(self.world_path) if self.world_path else "untitled"
        self.setWindowTitle(f"Scene Stitcher - {name}")
        self.statusBar().showMessage(f"{len(refs)} scene(s) available")

    # ============= Wizard steps =============

    def go_to_layout(self):
        refs = self.selector.selected_refs()
        if len(refs) < MIN_SCENES_TO_MERGE:
            QMessageBox.warning(self, "Scene Stitcher", "Select at least two scenes to merge.")
            return False

        self._dispose_canvas()
        media_dir = os.path.dirname(os.path.abspath(self.world_path)) if self.world_path else None
        self.canvas = LayoutCanvas(media_base_dir=media_dir)
        self.canvas.snap_x = self.snap_x
        self.canvas.snap_y = self.snap_y
        self.canvas.layout_changed.connect(self._on_layout_changed)

        self.toolbar = ZoomToolbar(self.canvas)
        self.toolbar.snap_changed.connect(self._set_snap_preference)
        self.canvas_host.addWidget(self.toolbar)
        self.canvas_host.addWidget(self.canvas, 1)

        self.stack.setCurrentIndex(STEP_LAYOUT)
        self.canvas.set_scenes(refs)
        return True

    def go_to_select(self):
        self._dispose_canvas()
        self.stack.setCurrentIndex(STEP_SELECT)

    def _dispose_canvas(self):
        if self.canvas is None:
            return
        self.canvas.teardown()
        for widget in (self.toolbar, self.canvas):
            self.canvas_host.removeWidget(widget)
            widget.deleteLater()
        self.canvas = None
        self.toolbar = None

    def _on_layout_changed(self):
        if self.canvas is None:
            return
        index = self.canvas.selected_index
        if 0 <= index < len(self.canvas.scenes):
            entry = self.canvas.scenes[index]
            self.statusBar().showMessage(
                f"{entry.name}: ({entry.x:.0f}, {entry.y:.0f})  zoom {self.canvas.get_zoom_percent()}%"
            )

    # ============= Preview & merge =============

    def show_preview(self):
        image = self.canvas.generate_preview(PREVIEW_MAX_SIZE) if self.canvas else None
        if image is None:
            QMessageBox.warning(self, "Preview", "No scenes to preview.")
            return None

        dialog = QDialog(self)
        dialog.setWindowTitle("Merge Preview")
        dialog.resize(700, 550)
        layout = QVBoxLayout(dialog)
        scroll = QScrollArea()
        scroll.setAlignment(Qt.AlignCenter)
        label = QLabel()
        label.setPixmap(QPixmap.fromImage(image))
        scroll.setWidget(label)
        layout.addWidget(scroll)
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(dialog.accept)
        layout.addWidget(close_btn)
        dialog.show()
        return dialog

    def merge(self):
        """Confirm, merge the current arrangement and save the world."""
        if self.canvas is None:
            return None
        layout = self.canvas.get_layout()
        if len(layout) < MIN_SCENES_TO_MERGE:
            QMessageBox.warning(self, "Scene Stitcher", "Select at least two scenes to merge.")
            return None

        name, ok = QInputDialog.getText(
            self, "Merge Scenes",
            f"Merge {len(layout)} scenes into a new scene named:",
            text=DEFAULT_MERGED_SCENE_NAME,
        )
        if not ok:
            return None
        return self.run_merge(layout, name.strip() or DEFAULT_MERGED_SCENE_NAME)

    def run_merge(self, layout, name):
        self.statusBar().showMessage("Merging scenes...")
        try:
            outcome = merge_scenes(layout, self.store, name=name)
            self.store.save()
        except (MergeError, StoreError, OSError) as e:
            logger.exception("Merge failed")
            QMessageBox.critical(self, "Merge Failed", f"Merge failed: {e}")
            return None

        for warning in outcome.warnings:
            logger.warning(warning)
        if outcome.warnings:
            QMessageBox.warning(self, "Scene Stitcher", "\n".join(outcome.warnings))

        self.statusBar().showMessage(f'Created merged scene "{outcome.merged_scene.get("name")}"')
        self.merged.emit(outcome.merged_scene)
        self.go_to_select()
        self._load_scene_list()
        return outcome

    # ============= Lifecycle =============

    def closeEvent(self, event):
        self._dispose_canvas()
        self.closed.emit()
        super().closeEvent(event)


class StitcherSession:
    """Explicit owner of the (single) stitcher window."""

    def __init__(self, config_dir=None):
        self.config_dir = config_dir
        self.window = None

    def open(self, store=None, world_path=None):
        """Show the stitcher, reusing the open window if there is one."""
        if self.window is not None and self.window.isVisible():
            self.window.raise_()
            self.window.activateWindow()
            return self.window

        self.window = StitcherWindow(store, world_path, config_dir=self.config_dir)
        if world_path:
            self.window._add_to_recent_worlds(world_path)
        self.window.closed.connect(self._on_closed)
        self.window.show()
        return self.window

    def _on_closed(self):
        self.window = None
