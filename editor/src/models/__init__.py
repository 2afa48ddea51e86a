"""
Scene Stitcher - Data Models

Plain dataclasses shared between the layout canvas (MODEL side of the
widget) and the merge engine. None of these classes touch Qt.
"""

from .scene import SceneRef, PlacedEntry, LayoutEntry, SnapGuide, is_video_source
from .viewport import ViewportState
from .merge import EmbeddedTypeRule, NormalisedLayout, MergeResult, MergeOutcome

__all__ = [
    'SceneRef', 'PlacedEntry', 'LayoutEntry', 'SnapGuide', 'is_video_source',
    'ViewportState',
    'EmbeddedTypeRule', 'NormalisedLayout', 'MergeResult', 'MergeOutcome',
]
