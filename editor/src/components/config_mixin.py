"""Configuration management for Scene Stitcher"""

import os
import json
from utils.logger import loggerRaise
from constants import CONFIG_DIR_NAME, CONFIG_FILE_NAME, MAX_RECENT_WORLDS


class ConfigMixin:
	"""Snap preferences and recent world files, persisted as JSON

	Expects on the host:
	- self.config_dir, self.config_file (set by _init_config)
	- self.recent_menu (optional QMenu)
	- self._open_world(path)
	"""

	def _init_config(self, config_dir=None):
		"""Set config paths and defaults, then load whatever is on disk"""
		self.config_dir = config_dir or os.path.join(os.path.expanduser("~"), CONFIG_DIR_NAME)
		self.config_file = os.path.join(self.config_dir, CONFIG_FILE_NAME)
		self.recent_worlds = []
		self.snap_x = True
		self.snap_y = True
		self._load_config()

	def _load_config(self):
		"""Load recent worlds and snap settings from config file"""
		try:
			if os.path.exists(self.config_file):
				with open(self.config_file, 'r', encoding='utf-8') as f:
					config = json.load(f)
				self.snap_x = bool(config.get('snap_x', True))
				self.snap_y = bool(config.get('snap_y', True))
				# Filter out worlds that no longer exist
				self.recent_worlds = [p for p in config.get('recent_worlds', []) if os.path.exists(p)]
				self.recent_worlds = self.recent_worlds[:MAX_RECENT_WORLDS]
		except Exception as e:
			loggerRaise(e, "Error loading config")

	def _save_config(self):
		"""Save recent worlds and snap settings to config file"""
		try:
			os.makedirs(self.config_dir, exist_ok=True)

			config = {
				'snap_x': self.snap_x,
				'snap_y': self.snap_y,
				'recent_worlds': self.recent_worlds[:MAX_RECENT_WORLDS],
			}

			with open(self.config_file, 'w', encoding='utf-8') as f:
				json.dump(config, f, indent=2)
		except Exception as e:
			loggerRaise(e, "Error saving config")

	def _add_to_recent_worlds(self, path):
		"""Move a world file to the front of the recent list"""
		path = os.path.abspath(path)
		if path in self.recent_worlds:
			self.recent_worlds.remove(path)
		self.recent_worlds.insert(0, path)
		self.recent_worlds = self.recent_worlds[:MAX_RECENT_WORLDS]

		if hasattr(self, 'recent_menu'):
			self._update_recent_worlds_menu()
		self._save_config()

	def _set_snap_preference(self, snap_x, snap_y):
		self.snap_x = snap_x
		self.snap_y = snap_y
		self._save_config()

	def _update_recent_worlds_menu(self):
		"""Update the Recent Worlds submenu"""
		self.recent_menu.clear()

		if not self.recent_worlds:
			no_recent = self.recent_menu.addAction("No recent worlds")
			no_recent.setEnabled(False)
			return

		for path in self.recent_worlds:
			action = self.recent_menu.addAction(os.path.basename(path))
			action.setToolTip(path)
			# Use lambda with default argument to capture path
			action.triggered.connect(lambda checked, p=path: self._open_world(p))

		self.recent_menu.addSeparator()
		clear_action = self.recent_menu.addAction("Clear Recent Worlds")
		clear_action.triggered.connect(self._clear_recent_worlds)

	def _clear_recent_worlds(self):
		self.recent_worlds = []
		self._update_recent_worlds_menu()
		self._save_config()
