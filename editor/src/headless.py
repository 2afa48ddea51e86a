"""Headless Scene Stitcher - CLI entry point.

Merges scenes from a world file using a saved layout, without opening the
layout canvas. The layout file is a JSON list of entries:

    [{"sceneId": "...", "x": 0, "y": 0, "width": 2000, "height": 1500}, ...]

Usage:
    python -m editor.src.headless <world_file> <layout_file> [-n NAME] [-o OUTPUT]

Examples:
    python -m editor.src.headless world.json layout.json
    python -m editor.src.headless world.json layout.json -n "Keep" -o merged_world.json
"""

import sys
import os
import argparse
import json
import logging

# Add editor/src to path so imports work
_src_dir = os.path.dirname(os.path.abspath(__file__))
if _src_dir not in sys.path:
    sys.path.insert(0, _src_dir)

from constants import MIN_SCENES_TO_MERGE, DEFAULT_MERGED_SCENE_NAME
from models.scene import LayoutEntry
from utils.logger import configure_logging

logger = logging.getLogger(__name__)


def load_layout(file_path: str) -> list:
    """Read a layout file into LayoutEntry objects.

    Args:
        file_path: Path to a JSON list of layout entries.

    Returns:
        List of LayoutEntry in file order.

    Raises:
        ValueError: If the file is not a list of complete entries.
    """
    with open(file_path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, list):
        raise ValueError("Layout file must contain a JSON list of entries")
    try:
        return [LayoutEntry.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as e:
        raise ValueError(f"Invalid layout entry: {e}") from e


def run(world_path, layout_path, name=None, output=None):
    """Merge scenes and write the world.

    Returns:
        (exit_code, MergeOutcome or None)
    """
    from services.scene_store import JsonSceneStore, StoreError
    from services.merge_engine import merge_scenes, MergeError

    try:
        store = JsonSceneStore(world_path)
        layouts = load_layout(layout_path)
    except (StoreError, OSError, ValueError) as e:
        print(f"Error: {e}")
        return 1, None

    if len(layouts) < MIN_SCENES_TO_MERGE:
        print(f"Error: At least {MIN_SCENES_TO_MERGE} scenes are needed to merge (got {len(layouts)}).")
        return 1, None

    try:
        outcome = merge_scenes(layouts, store, name=name)
        store.save(output)
    except (MergeError, StoreError, OSError) as e:
        print(f"Error: {e}")
        return 1, None

    for warning in outcome.warnings:
        print(f"Warning: {warning}")

    merged = outcome.merged_scene
    print(f'Created "{merged.get("name")}" ({merged["_id"]}) from {len(layouts)} scene(s) '
          f'-> {os.path.abspath(output or world_path)}')
    return 0, outcome


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='Merge scenes from a world file using a saved layout (headless).',
    )
    parser.add_argument(
        'world',
        help='World JSON file ({"scenes": [...]}).',
    )
    parser.add_argument(
        'layout',
        help='Layout JSON file (list of {sceneId, x, y, width, height}).',
    )
    parser.add_argument(
        '-n', '--name',
        default=DEFAULT_MERGED_SCENE_NAME,
        help=f'Name of the merged scene (default: "{DEFAULT_MERGED_SCENE_NAME}").',
    )
    parser.add_argument(
        '-o', '--output',
        default=None,
        help='Write the updated world here instead of overwriting the input.',
    )
    parser.add_argument(
        '-v', '--verbose',
        action='store_true',
        help='Enable verbose logging.',
    )
    args = parser.parse_args(argv)

    configure_logging(args.verbose)

    code, _ = run(os.path.abspath(args.world), os.path.abspath(args.layout),
                  name=args.name, output=args.output)
    sys.exit(code)


if __name__ == "__main__":
    main()
