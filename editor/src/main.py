"""Scene Stitcher - GUI entry point.

Usage:
    python editor/src/main.py [WORLD_FILE] [-v]
"""

import sys
import os
import argparse
import logging

# Add editor/src to path so imports work when running directly
if __name__ == "__main__":
    current_dir = os.path.dirname(os.path.abspath(__file__))
    if current_dir not in sys.path:
        sys.path.insert(0, current_dir)

# PyQt5 import/s
from PyQt5 import QtWidgets
from PyQt5.QtCore import Qt
from PyQt5.QtGui import QPalette, QColor

from components.stitcher_window import StitcherSession
from services.scene_store import JsonSceneStore
from utils.logger import configure_logging, loggerRaise, set_main_window
from constants import CANVAS_BACKGROUND_COLOR, BOUNDING_BOX_COLOR, SNAP_GUIDE_COLOR

logger = logging.getLogger(__name__)


def build_parser():
    parser = argparse.ArgumentParser(
        description='Arrange scenes on a canvas and merge them into one scene.',
    )
    parser.add_argument(
        'world',
        nargs='?',
        help='World JSON file to open ({"scenes": [...]}).',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    return parser


def apply_dark_palette(app):
    """Fusion style, tinted to match the layout canvas"""
    app.setStyle("Fusion")

    panel = QColor(38, 38, 58)
    base = QColor(*CANVAS_BACKGROUND_COLOR)
    accent = QColor(*BOUNDING_BOX_COLOR[:3])

    palette = QPalette()
    for role, color in (
        (QPalette.Window, panel),
        (QPalette.Button, panel),
        (QPalette.AlternateBase, panel),
        (QPalette.ToolTipBase, panel),
        (QPalette.Base, base),
        (QPalette.Link, accent),
        (QPalette.Highlight, accent),
    ):
        palette.setColor(role, color)
    for role in (QPalette.WindowText, QPalette.Text, QPalette.ButtonText, QPalette.ToolTipText):
        palette.setColor(role, Qt.white)
    palette.setColor(QPalette.HighlightedText, Qt.black)
    palette.setColor(QPalette.BrightText, QColor(*SNAP_GUIDE_COLOR[:3]))

    app.setPalette(palette)


def main():
    """Main entry point for the Scene Stitcher application"""
    args = build_parser().parse_args()
    configure_logging(args.verbose)

    app = QtWidgets.QApplication(sys.argv[:1])
    apply_dark_palette(app)

    store = None
    world_path = None
    if args.world:
        world_path = os.path.abspath(args.world)
        try:
            store = JsonSceneStore(world_path)
        except Exception as e:
            loggerRaise(e, f"Could not open world file:\n{world_path}", "Open World")

    session = StitcherSession()
    window = session.open(store, world_path)
    set_main_window(window)
    sys.exit(app.exec_())


if __name__ == "__main__":
    main()
