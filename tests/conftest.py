"""
Shared fixtures for Scene Stitcher tests.

Provides sample scene documents, in-memory and file-backed stores, and a
layout canvas widget fixture.
"""
import sys
import os
import copy
import json
import pytest

# Widgets are created without a display
os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

# Ensure editor/src is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'editor', 'src'))

from models.scene import LayoutEntry, PlacedEntry
from services.scene_store import MemorySceneStore, StoreError


# ── Sample scene documents ──────────────────────────────────────────────

CELLAR_ID = 'cellar0000000001'
KEEP_ID = 'keep000000000002'

CELLAR = {
    '_id': CELLAR_ID,
    'name': 'Cellar',
    'width': 20,
    'height': 15,
    'grid': {'size': 100, 'type': 1},
    'background': {'src': 'maps/cellar.webp'},
    'thumb': None,
    'tokenVision': False,
    'fogExploration': True,
    'globalLight': True,
    'globalLightThreshold': 0.5,
    'walls': [{'_id': 'wall0001', 'c': [100, 100, 500, 100], 'move': 20}],
    'lights': [{'_id': 'light001', 'x': 300, 'y': 400, 'config': {'dim': 30}}],
    'tokens': [{
        '_id': 'token001', 'name': 'Goblin', 'x': 50, 'y': 60,
        'flags': {'scene-stitcher': {'note': 'keep me'}, 'other-module': {'hp': 7}},
    }],
    'drawings': [{'_id': 'draw0001', 'x': 10, 'y': 20,
                  'shape': {'type': 'p', 'points': [0, 0, 50, 50]}}],
    'notes': [{'_id': 'note0001', 'text': 'no anchor'}],
    'regions': [{
        '_id': 'region01',
        'shapes': [
            {'type': 'polygon', 'points': [0, 0, 100, 0, 100, 100]},
            {'type': 'rectangle', 'x': 5, 'y': 6, 'width': 10, 'height': 10},
        ],
    }],
}

KEEP = {
    '_id': KEEP_ID,
    'name': 'Keep',
    'width': 99,  # ignored, dimensions win
    'height': 99,
    'dimensions': {'sceneWidth': 1000, 'sceneHeight': 1000},
    'grid': {'size': 50, 'type': 1},
    'background': {'src': None},
    'thumb': 'thumbs/keep.png',
    'sounds': [{'_id': 'sound001', 'x': 10, 'y': 10, 'path': 'rain.ogg'}],
    'tiles': [{'_id': 'tile0001', 'x': 0, 'y': 0, 'width': 100, 'height': 100}],
}

# Cellar at (100, 300), Keep at (2100, 50):
# bounding box (100, 50)-(3100, 1800), Cellar offset (0, 250), Keep offset (2000, 0)
SAMPLE_LAYOUT = [
    LayoutEntry(CELLAR_ID, 100, 300, 2000, 1500),
    LayoutEntry(KEEP_ID, 2100, 50, 1000, 1000),
]


class FailingStore(MemorySceneStore):
    """Store whose batches for the given record types always fail."""

    def __init__(self, scenes, failing_types):
        super().__init__(scenes)
        self.failing_types = set(failing_types)
        self.batches = []

    def create_embedded_documents(self, scene_id, document_name, records):
        self.batches.append(document_name)
        if document_name in self.failing_types:
            raise StoreError(f"Rejected {document_name}")
        return super().create_embedded_documents(scene_id, document_name, records)


@pytest.fixture
def cellar_scene():
    return copy.deepcopy(CELLAR)


@pytest.fixture
def keep_scene():
    return copy.deepcopy(KEEP)


@pytest.fixture
def sample_layout():
    return list(SAMPLE_LAYOUT)


@pytest.fixture
def memory_store():
    return MemorySceneStore([CELLAR, KEEP])


@pytest.fixture
def world_file(tmp_path):
    """World file on disk holding both sample scenes."""
    path = tmp_path / 'world.json'
    path.write_text(json.dumps({'scenes': [CELLAR, KEEP]}), encoding='utf-8')
    return path


@pytest.fixture
def layout_file(tmp_path):
    path = tmp_path / 'layout.json'
    path.write_text(json.dumps([l.to_dict() for l in SAMPLE_LAYOUT]), encoding='utf-8')
    return path


def make_entries(*rects):
    """PlacedEntry list from (x, y, width, height) tuples."""
    return [
        PlacedEntry(f'scene{i}', f'Scene {i}', w, h, x=x, y=y)
        for i, (x, y, w, h) in enumerate(rects)
    ]


@pytest.fixture
def canvas(qtbot):
    """1000x800 layout canvas with an identity viewport and no scenes."""
    from components.layout_canvas import LayoutCanvas

    widget = LayoutCanvas()
    qtbot.addWidget(widget)
    widget.resize(1000, 800)
    yield widget
    widget.teardown()
