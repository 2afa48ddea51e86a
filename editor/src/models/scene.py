"""Scene data structures shared by the layout canvas and the merge engine."""
from dataclasses import dataclass
from typing import Optional

from constants import VIDEO_EXTENSIONS, DEFAULT_GRID_SIZE, DEFAULT_GRID_TYPE


def is_video_source(src):
    """True if a media path points at a video (by extension)."""
    return bool(src) and src.lower().endswith(VIDEO_EXTENSIONS)


def _number(value):
    """Keep integer coordinates integral; anything else goes through float()."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return float(value)


@dataclass(frozen=True)
class SceneRef:
    """Read-only snapshot of a source scene taken when a layout session starts.

    width/height are in scene pixels.
    """
    scene_id: str
    name: str
    width: float
    height: float
    background_src: Optional[str] = None
    thumbnail: Optional[str] = None
    grid_size: int = DEFAULT_GRID_SIZE
    grid_type: int = DEFAULT_GRID_TYPE

    @property
    def is_video(self):
        return is_video_source(self.background_src)


@dataclass(frozen=True)
class LayoutEntry:
    """Position of one scene in the arrangement, as consumed by the merge engine."""
    scene_id: str
    x: float
    y: float
    width: float
    height: float

    def to_dict(self):
        return {'sceneId': self.scene_id, 'x': self.x, 'y': self.y,
                'width': self.width, 'height': self.height}

    @classmethod
    def from_dict(cls, data):
        """Build from a saved layout entry ({sceneId, x, y, width, height})."""
        scene_id = data['sceneId']
        if scene_id is None or scene_id == '':
            raise ValueError("layout entry has no sceneId")
        return cls(
            scene_id=str(scene_id),
            x=_number(data['x']),
            y=_number(data['y']),
            width=_number(data['width']),
            height=_number(data['height']),
        )


@dataclass
class PlacedEntry:
    """A scene rectangle on the layout canvas.

    Only x/y change during a session (drag or layout commands); the size is
    the source scene's pixel size and stays fixed.
    """
    scene_id: str
    name: str
    width: float
    height: float
    background_src: Optional[str] = None
    thumbnail: Optional[str] = None
    x: float = 0.0
    y: float = 0.0

    @classmethod
    def from_scene_ref(cls, ref, x=0.0, y=0.0):
        return cls(
            scene_id=ref.scene_id,
            name=ref.name,
            width=ref.width,
            height=ref.height,
            background_src=ref.background_src,
            thumbnail=ref.thumbnail,
            x=x,
            y=y,
        )

    @property
    def right(self):
        return self.x + self.width

    @property
    def bottom(self):
        return self.y + self.height

    @property
    def is_video(self):
        return is_video_source(self.background_src)

    def contains(self, x, y):
        """Inclusive point-in-rectangle test in world space."""
        return self.x <= x <= self.right and self.y <= y <= self.bottom

    def to_layout(self):
        return LayoutEntry(self.scene_id, self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class SnapGuide:
    """Rendering hint: a full-length guide line at a world coordinate.

    axis 'x' is a vertical line at x=value, axis 'y' a horizontal line at y=value.
    """
    axis: str
    value: float
