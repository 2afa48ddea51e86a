"""
Scene Stitcher - Merge Engine

Takes the scene layout from the layout canvas and produces one merged scene:
- Background tiles referencing each source scene's original background file
- Every embedded record (walls, lights, sounds, tokens, tiles, drawings,
  notes, templates, regions) with coordinates offset into the merged space

Each step is a plain function over dicts; only merge_scenes() talks to the
scene store.
"""

import copy
import logging
import math
import time

from models.scene import SceneRef, LayoutEntry
from models.merge import EmbeddedTypeRule, NormalisedLayout, MergeResult, MergeOutcome
from utils.geometry import bounding_box, translate_flat_points
from constants import (
    FLAG_SCOPE, DEFAULT_MERGED_SCENE_NAME, DEFAULT_GRID_SIZE, DEFAULT_GRID_TYPE,
    BACKGROUND_TILE_SORT
)

logger = logging.getLogger(__name__)


class MergeError(Exception):
    """Fatal merge failure; nothing has been created when this is raised."""


class SceneNotFoundError(MergeError):
    """One or more layout entries reference scenes the store does not have."""

    def __init__(self, scene_ids):
        self.scene_ids = list(scene_ids)
        super().__init__(f"Could not find scenes: {', '.join(map(str, self.scene_ids))}")


# ======================================================================
# Offset rules
# ======================================================================

def offset_segment(record, dx, dy):
    """Wall: endpoints stored as c = [x1, y1, x2, y2]."""
    out = dict(record)
    c = record.get('c')
    if c:
        out['c'] = [c[0] + dx, c[1] + dy, c[2] + dx, c[3] + dy]
    return out


def offset_anchor(record, dx, dy):
    """Single anchor point in x/y (missing fields count as 0)."""
    out = dict(record)
    out['x'] = (record.get('x') or 0) + dx
    out['y'] = (record.get('y') or 0) + dy
    return out


def offset_anchored_shape(record, dx, dy):
    """Drawing: anchor x/y plus shape.points relative to the anchor.

    Only the anchor moves; the point list is left as-is.
    """
    return offset_anchor(record, dx, dy)


def offset_region(record, dx, dy):
    """Region: shapes with absolute interleaved point lists and optional x/y."""
    out = dict(record)
    shapes = record.get('shapes')
    if shapes:
        moved = []
        for shape in shapes:
            s = copy.deepcopy(shape)
            if s.get('points'):
                s['points'] = translate_flat_points(s['points'], dx, dy)
            if s.get('x') is not None:
                s['x'] += dx
            if s.get('y') is not None:
                s['y'] += dy
            moved.append(s)
        out['shapes'] = moved
    return out


EMBEDDED_TYPES = [
    EmbeddedTypeRule('walls', 'Wall', offset_segment),
    EmbeddedTypeRule('lights', 'AmbientLight', offset_anchor),
    EmbeddedTypeRule('sounds', 'AmbientSound', offset_anchor),
    EmbeddedTypeRule('tokens', 'Token', offset_anchor),
    EmbeddedTypeRule('tiles', 'Tile', offset_anchor),
    EmbeddedTypeRule('drawings', 'Drawing', offset_anchored_shape),
    EmbeddedTypeRule('notes', 'Note', offset_anchor),
    EmbeddedTypeRule('templates', 'MeasuredTemplate', offset_anchor),
    EmbeddedTypeRule('regions', 'Region', offset_region),
]

EMBEDDED_TYPES_BY_NAME = {rule.document_name: rule for rule in EMBEDDED_TYPES}


def collection_for_document(document_name):
    """Collection key for a record type name, or None if unknown."""
    rule = EMBEDDED_TYPES_BY_NAME.get(document_name)
    return rule.collection if rule else None


# ======================================================================
# Scene helpers
# ======================================================================

def get_scene_pixel_dimensions(scene):
    """Pixel size of a scene document.

    Prefers precomputed dimensions.sceneWidth/sceneHeight, otherwise
    width/height multiplied by the grid size.

    Returns:
        (scene_width, scene_height)
    """
    dims = scene.get('dimensions')
    if dims and dims.get('sceneWidth') is not None:
        return dims['sceneWidth'], dims['sceneHeight']
    grid_size = (scene.get('grid') or {}).get('size') or DEFAULT_GRID_SIZE
    return scene.get('width', 0) * grid_size, scene.get('height', 0) * grid_size


def get_scene_info(scene):
    """Snapshot a scene document for the selection list and layout canvas."""
    width, height = get_scene_pixel_dimensions(scene)
    grid = scene.get('grid') or {}
    return SceneRef(
        scene_id=scene['_id'],
        name=scene.get('name', ''),
        width=width,
        height=height,
        background_src=(scene.get('background') or {}).get('src'),
        thumbnail=scene.get('thumb'),
        grid_size=grid.get('size', DEFAULT_GRID_SIZE),
        grid_type=grid.get('type', DEFAULT_GRID_TYPE),
    )


def _provenance(record_flags, scene, extra=None):
    """Merge source-scene tags into a record's flags under our scope."""
    flags = dict(record_flags or {})
    scoped = dict(flags.get(FLAG_SCOPE) or {})
    if extra:
        scoped.update(extra)
    scoped['sourceSceneId'] = scene['_id']
    scoped['sourceSceneName'] = scene.get('name')
    flags[FLAG_SCOPE] = scoped
    return flags


# ======================================================================
# Merge steps
# ======================================================================

def compute_bounding_box(layouts):
    """Shift layouts so the top-left of their bounding box is at (0, 0).

    Args:
        layouts: List of LayoutEntry

    Returns:
        NormalisedLayout with the shifted entries and total pixel span
    """
    bounds = bounding_box(layouts)
    if bounds is None:
        return NormalisedLayout([], 0, 0)
    min_x, min_y, max_x, max_y = bounds

    normalised = [
        LayoutEntry(l.scene_id, l.x - min_x, l.y - min_y, l.width, l.height)
        for l in layouts
    ]
    return NormalisedLayout(normalised, max_x - min_x, max_y - min_y)


def validate_grid_compatibility(scenes):
    """Compare every scene's grid against the first one.

    Mismatches do not block the merge; they are returned as warnings.

    Returns:
        List of warning strings
    """
    warnings = []
    if len(scenes) < 2:
        return warnings

    first = scenes[0]
    ref_grid = first.get('grid') or {}
    ref_size = ref_grid.get('size')
    ref_type = ref_grid.get('type')

    for scene in scenes[1:]:
        grid = scene.get('grid') or {}
        if grid.get('size') != ref_size:
            warnings.append(
                f'Grid size mismatch: "{first.get("name")}" uses {ref_size}px, '
                f'"{scene.get("name")}" uses {grid.get("size")}px.'
            )
        if grid.get('type') != ref_type:
            warnings.append(
                f'Grid type mismatch: "{first.get("name")}" uses type {ref_type}, '
                f'"{scene.get("name")}" uses type {grid.get("type")}.'
            )
    return warnings


def create_background_tile_data(scene, offset_x, offset_y):
    """Locked, bottom-most tile showing a source scene's background.

    Returns:
        Tile record dict, or None if the scene has no background
    """
    bg_src = (scene.get('background') or {}).get('src')
    if not bg_src:
        return None

    width, height = get_scene_pixel_dimensions(scene)
    return {
        'texture': {'src': bg_src},
        'x': offset_x,
        'y': offset_y,
        'width': width,
        'height': height,
        'overhead': False,
        'sort': BACKGROUND_TILE_SORT,
        'hidden': False,
        'locked': True,
        'flags': _provenance(None, scene, {'isBackground': True}),
    }


def collect_embedded_documents(scene, offset_x, offset_y):
    """Copy, offset and tag every embedded record of a source scene.

    Source ids are dropped so the store assigns new ones.

    Returns:
        Dict of document name -> list of record dicts (types with no
        records are omitted)
    """
    result = {}
    for rule in EMBEDDED_TYPES:
        collection = scene.get(rule.collection) or []
        docs = []
        for record in collection:
            data = copy.deepcopy(record)
            data.pop('_id', None)
            data = rule.offset_fn(data, offset_x, offset_y)
            data['flags'] = _provenance(data.get('flags'), scene)
            docs.append(data)
        if docs:
            result[rule.document_name] = docs
    return result


def build_merge_result(scenes, normalised):
    """Assemble background tiles and per-type record lists for all scenes.

    Args:
        scenes: Scene documents, aligned with normalised.layouts
        normalised: NormalisedLayout from compute_bounding_box

    Returns:
        MergeResult; within each type records keep source-scene order
    """
    result = MergeResult()
    for layout, scene in zip(normalised.layouts, scenes):
        bg_tile = create_background_tile_data(scene, layout.x, layout.y)
        if bg_tile:
            result.background_records.append(bg_tile)

        embedded = collect_embedded_documents(scene, layout.x, layout.y)
        for doc_name, docs in embedded.items():
            result.embedded_records.setdefault(doc_name, []).extend(docs)
    return result


def build_scene_data(scenes, layouts, normalised, name=None):
    """Structural fields for the new scene (no background; tiles carry it)."""
    first = scenes[0]
    grid = copy.deepcopy(first.get('grid') or {'size': DEFAULT_GRID_SIZE, 'type': DEFAULT_GRID_TYPE})
    grid_size = grid.get('size') or DEFAULT_GRID_SIZE

    return {
        'name': name or DEFAULT_MERGED_SCENE_NAME,
        'width': math.ceil(normalised.total_width / grid_size),
        'height': math.ceil(normalised.total_height / grid_size),
        'padding': 0,
        'grid': grid,
        'tokenVision': first.get('tokenVision', True),
        'fogExploration': first.get('fogExploration', True),
        'globalLight': first.get('globalLight', False),
        'globalLightThreshold': first.get('globalLightThreshold'),
        'flags': {
            FLAG_SCOPE: {
                'merged': True,
                'sourceScenes': [l.scene_id for l in layouts],
                'mergedAt': int(time.time() * 1000),
            },
        },
    }


def resolve_scenes(layouts, store):
    """Look up every layout entry's scene, failing before any write.

    Raises:
        SceneNotFoundError: Listing every id that could not be found
    """
    scenes = [store.get_scene(l.scene_id) for l in layouts]
    missing = [l.scene_id for l, s in zip(layouts, scenes) if s is None]
    if missing:
        raise SceneNotFoundError(missing)
    return scenes


def _create_batch(store, scene_id, document_name, records, warnings):
    """Persist one batch; a failure becomes a warning instead of an error."""
    try:
        store.create_embedded_documents(scene_id, document_name, records)
        logger.debug("Created %d %s record(s)", len(records), document_name)
    except Exception as e:
        logger.error("Error creating %s documents: %s", document_name, e)
        warnings.append(f"Some {document_name} documents could not be created: {e}")


def merge_scenes(layouts, store, name=None):
    """Merge the scenes in a layout into one new scene.

    Backgrounds are created first so they sit beneath everything, then
    each embedded type in EMBEDDED_TYPES order. A failing type is reported
    in the warnings and the remaining types are still attempted.

    Args:
        layouts: Ordered list of LayoutEntry (caller ensures 2+ entries)
        store: SceneStore used to resolve and create documents
        name: Name for the merged scene (default "Merged Scene")

    Returns:
        MergeOutcome(merged_scene, warnings)

    Raises:
        SceneNotFoundError: If any scene cannot be resolved (nothing created)
    """
    scenes = resolve_scenes(layouts, store)

    normalised = compute_bounding_box(layouts)
    warnings = validate_grid_compatibility(scenes)
    result = build_merge_result(scenes, normalised)

    merged_scene = store.create_scene(build_scene_data(scenes, layouts, normalised, name))
    scene_id = merged_scene['_id']
    logger.info("Merging %d scene(s) into %s (%s x %s px)",
                len(scenes), merged_scene.get('name'),
                normalised.total_width, normalised.total_height)

    if result.background_records:
        _create_batch(store, scene_id, 'Tile', result.background_records, warnings)

    for rule in EMBEDDED_TYPES:
        docs = result.embedded_records.get(rule.document_name)
        if docs:
            _create_batch(store, scene_id, rule.document_name, docs, warnings)

    return MergeOutcome(merged_scene, warnings)
