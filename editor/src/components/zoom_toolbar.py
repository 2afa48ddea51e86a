"""Layout toolbar widget with zoom, fit, snap and layer controls."""

from PyQt5.QtWidgets import QWidget, QHBoxLayout, QToolButton, QLabel, QFrame
from PyQt5.QtCore import pyqtSignal

from constants import SNAP_MODE_X, SNAP_MODE_Y, SNAP_MODE_BOTH


class ZoomToolbar(QWidget):
	"""Toolbar driving a LayoutCanvas: zoom in/out, fit, snap toggles, z-order"""

	snap_changed = pyqtSignal(bool, bool)  # Emits (snap_x, snap_y) after a toggle

	def __init__(self, canvas, parent=None):
		super().__init__(parent)
		self.canvas = canvas

		layout = QHBoxLayout()
		layout.setContentsMargins(0, 0, 0, 0)
		layout.setSpacing(4)

		# Zoom out button
		self.zoom_out_btn = self._make_button("−", "Zoom Out (Ctrl+-)", self._on_zoom_out)
		layout.addWidget(self.zoom_out_btn)

		# Zoom level readout
		self.zoom_label = QLabel()
		self.zoom_label.setMinimumWidth(50)
		layout.addWidget(self.zoom_label)

		# Zoom in button
		self.zoom_in_btn = self._make_button("+", "Zoom In (Ctrl++)", self._on_zoom_in)
		layout.addWidget(self.zoom_in_btn)

		self.fit_btn = self._make_button("Fit", "Fit All (F)", self._on_fit)
		layout.addWidget(self.fit_btn)

		layout.addWidget(self._separator())

		# Snap toggles
		self.snap_x_btn = self._make_button("Snap X", "Toggle horizontal edge snapping", lambda: self._on_snap(SNAP_MODE_X))
		self.snap_x_btn.setCheckable(True)
		layout.addWidget(self.snap_x_btn)

		self.snap_y_btn = self._make_button("Snap Y", "Toggle vertical edge snapping", lambda: self._on_snap(SNAP_MODE_Y))
		self.snap_y_btn.setCheckable(True)
		layout.addWidget(self.snap_y_btn)

		self.snap_both_btn = self._make_button("Snap All", "Toggle snapping on both axes (hold Shift while dragging to bypass)", lambda: self._on_snap(SNAP_MODE_BOTH))
		layout.addWidget(self.snap_both_btn)

		layout.addWidget(self._separator())

		# Z-order
		self.layer_down_btn = self._make_button("Send Back", "Move the selected scene down one layer", self._on_layer_down)
		layout.addWidget(self.layer_down_btn)
		self.layer_up_btn = self._make_button("Bring Forward", "Move the selected scene up one layer", self._on_layer_up)
		layout.addWidget(self.layer_up_btn)

		layout.addStretch()
		self.setLayout(layout)

		self.canvas.layout_changed.connect(self.refresh)
		self.refresh()

	def _make_button(self, text, tooltip, slot):
		btn = QToolButton()
		btn.setText(text)
		btn.setToolTip(tooltip)
		btn.clicked.connect(slot)
		return btn

	def _separator(self):
		line = QFrame()
		line.setFrameShape(QFrame.VLine)
		line.setFrameShadow(QFrame.Sunken)
		return line

	def _on_zoom_in(self):
		"""Handle zoom in button click"""
		self.canvas.zoom_in()

	def _on_zoom_out(self):
		"""Handle zoom out button click"""
		self.canvas.zoom_out()

	def _on_fit(self):
		self.canvas.fit_all()

	def _on_snap(self, mode):
		"""Forward a snap command and report the resulting flags"""
		self.canvas.set_snap(mode)
		self.refresh()
		self.snap_changed.emit(self.canvas.snap_x, self.canvas.snap_y)

	def _on_layer_up(self):
		self.canvas.layer_up()

	def _on_layer_down(self):
		self.canvas.layer_down()

	def refresh(self):
		"""Sync the readout and toggle states with the canvas"""
		self.zoom_label.setText(f"🔍 {self.canvas.get_zoom_percent()}%")

		# Block signals to prevent recursive updates
		for btn, checked in ((self.snap_x_btn, self.canvas.snap_x), (self.snap_y_btn, self.canvas.snap_y)):
			btn.blockSignals(True)
			btn.setChecked(checked)
			btn.blockSignals(False)
