"""Scene selection step - pick which scenes go onto the layout canvas."""

from PyQt5.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QLineEdit, QListWidget, QListWidgetItem,
    QPushButton, QLabel
)
from PyQt5.QtCore import Qt, pyqtSignal

from constants import MIN_SCENES_TO_MERGE


def filter_and_sort(scene_refs, selected_ids, query):
    """Scenes matching a case-insensitive name query.

    Selected scenes come first, then everything alphabetically by name.
    """
    query = (query or '').strip().lower()
    matches = [s for s in scene_refs if not query or query in s.name.lower()]
    return sorted(matches, key=lambda s: (s.scene_id not in selected_ids, s.name.lower()))


class SceneSelector(QWidget):
    """Searchable checklist of every scene in the world."""

    next_requested = pyqtSignal()
    selection_changed = pyqtSignal(int)  # number of selected scenes

    def __init__(self, parent=None):
        super().__init__(parent)
        self.scene_refs = []
        self.selected_ids = set()

        layout = QVBoxLayout(self)

        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search scenes...")
        self.search_edit.setClearButtonEnabled(True)
        self.search_edit.textChanged.connect(self._rebuild_list)
        layout.addWidget(self.search_edit)

        buttons = QHBoxLayout()
        self.select_all_btn = QPushButton("Select All")
        self.select_all_btn.clicked.connect(self.select_all)
        buttons.addWidget(self.select_all_btn)
        self.deselect_all_btn = QPushButton("Deselect All")
        self.deselect_all_btn.clicked.connect(self.deselect_all)
        buttons.addWidget(self.deselect_all_btn)
        buttons.addStretch()
        layout.addLayout(buttons)

        self.list_widget = QListWidget()
        self.list_widget.itemChanged.connect(self._on_item_changed)
        layout.addWidget(self.list_widget)

        footer = QHBoxLayout()
        self.count_label = QLabel()
        footer.addWidget(self.count_label)
        footer.addStretch()
        self.next_btn = QPushButton("Arrange Scenes →")
        self.next_btn.clicked.connect(self.next_requested)
        footer.addWidget(self.next_btn)
        layout.addLayout(footer)

        self._rebuild_list()

    def set_scenes(self, scene_refs):
        self.scene_refs = list(scene_refs)
        known = {s.scene_id for s in self.scene_refs}
        self.selected_ids &= known
        self._rebuild_list()

    def selected_refs(self):
        """Selected scenes in world order."""
        return [s for s in self.scene_refs if s.scene_id in self.selected_ids]

    def set_selected(self, scene_id, selected):
        if selected:
            self.selected_ids.add(scene_id)
        else:
            self.selected_ids.discard(scene_id)
        self._rebuild_list()

    def select_all(self):
        self.selected_ids = {s.scene_id for s in self.scene_refs}
        self._rebuild_list()

    def deselect_all(self):
        self.selected_ids.clear()
        self._rebuild_list()

    def _rebuild_list(self):
        self.list_widget.blockSignals(True)
        self.list_widget.clear()
        for ref in filter_and_sort(self.scene_refs, self.selected_ids, self.search_edit.text()):
            text = f"{ref.name}  ({int(ref.width)} x {int(ref.height)} px)"
            if ref.is_video:
                text += "  [video]"
            item = QListWidgetItem(text)
            item.setData(Qt.UserRole, ref.scene_id)
            item.setFlags(item.flags() | Qt.ItemIsUserCheckable)
            item.setCheckState(Qt.Checked if ref.scene_id in self.selected_ids else Qt.Unchecked)
            self.list_widget.addItem(item)
        self.list_widget.blockSignals(False)
        self._update_count()

    def _on_item_changed(self, item):
        # Items are re-sorted on the next rebuild, not while Qt is emitting for one
        scene_id = item.data(Qt.UserRole)
        if item.checkState() == Qt.Checked:
            self.selected_ids.add(scene_id)
        else:
            self.selected_ids.discard(scene_id)
        self._update_count()

    def _update_count(self):
        count = len(self.selected_ids)
        self.count_label.setText(f"{count} selected")
        self.next_btn.setEnabled(count >= MIN_SCENES_TO_MERGE)
        self.selection_changed.emit(count)
