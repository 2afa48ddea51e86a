"""UI components for Scene Stitcher

This package contains the Qt widgets of the stitcher window:
- canvas_widgets: mixins and drag state for the layout canvas
- layout_canvas: the interactive arrangement canvas
- scene_selector / zoom_toolbar / scene_tooltip: wizard controls

Direct imports for convenience:
"""

from .layout_canvas import LayoutCanvas
from .scene_selector import SceneSelector
from .scene_tooltip import SceneTooltip
from .zoom_toolbar import ZoomToolbar

__all__ = [
    'LayoutCanvas',
    'SceneSelector',
    'SceneTooltip',
    'ZoomToolbar',
]
