"""
Scene Stitcher - Constants and Configuration

This module contains all constant values used throughout the application:
- Viewport zoom limits and step sizes
- Snap-to-edge thresholds
- Initial layout and fit-all spacing
- Merge defaults (grid, naming, background stacking)
- Rendering colours for the layout canvas
"""

# ======================================================================
# VIEWPORT
# ======================================================================

MIN_ZOOM = 0.1
MAX_ZOOM = 4.0
ZOOM_STEP = 0.1  # Per wheel notch / toolbar click

# Padding (screen px) kept around content when fitting all scenes
FIT_PADDING = 40

# ======================================================================
# SNAPPING
# ======================================================================

# Snap distance in screen pixels (divided by zoom to get world distance)
SNAP_THRESHOLD = 12

SNAP_MODE_X = 'x'
SNAP_MODE_Y = 'y'
SNAP_MODE_BOTH = 'both'
SNAP_MODE_NONE = 'none'

# ======================================================================
# LAYOUT
# ======================================================================

# Gap (world px) between scenes in the initial row layout
INITIAL_LAYOUT_GAP = 20

# Background grid spacing in world px, hidden when smaller than the minimum on screen
BACKGROUND_GRID_STEP = 40
BACKGROUND_GRID_MIN_SCREEN_STEP = 8

# Longest side of the generated merge preview image
PREVIEW_MAX_SIZE = 1200

# Longest side of cached thumbnails
THUMBNAIL_MAX_SIZE = 512

# Minimum number of scenes for a merge
MIN_SCENES_TO_MERGE = 2

# Backgrounds that cannot be drawn on the canvas (thumbnail is used instead)
VIDEO_EXTENSIONS = ('.mp4', '.webm', '.ogg')

# ======================================================================
# MERGE DEFAULTS
# ======================================================================

FLAG_SCOPE = 'scene-stitcher'
DEFAULT_MERGED_SCENE_NAME = 'Merged Scene'
DEFAULT_GRID_SIZE = 100
DEFAULT_GRID_TYPE = 1

# Stacking order for background tiles (beneath all other content)
BACKGROUND_TILE_SORT = -1000

# ======================================================================
# CANVAS COLOURS (r, g, b, a)
# ======================================================================

CANVAS_BACKGROUND_COLOR = (26, 26, 46, 255)
CANVAS_GRID_COLOR = (255, 255, 255, 10)
BOUNDING_BOX_COLOR = (79, 209, 197, 128)
SNAP_GUIDE_COLOR = (255, 193, 7, 178)

SCENE_FILL_IDLE = (255, 255, 255, 13)
SCENE_FILL_HOVER = (79, 209, 197, 20)
SCENE_FILL_DRAG = (79, 209, 197, 38)

SCENE_BORDER_IDLE = (255, 255, 255, 77)
SCENE_BORDER_HOVER = (99, 179, 237, 255)
SCENE_BORDER_DRAG = (79, 209, 197, 255)
SCENE_BORDER_SELECTED = (255, 193, 7, 255)

LABEL_BACKGROUND_COLOR = (0, 0, 0, 178)
LABEL_TEXT_COLOR = (255, 255, 255, 230)
LABEL_MIN_FONT_SIZE = 14
LABEL_BASE_FONT_SIZE = 16

# ======================================================================
# CONFIG
# ======================================================================

CONFIG_DIR_NAME = '.scene_stitcher'
CONFIG_FILE_NAME = 'config.json'
MAX_RECENT_WORLDS = 10
