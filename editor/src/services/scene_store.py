"""
Scene Stitcher - Scene Store

Persistence collaborator for the merge engine. Scenes are plain dicts
shaped like exported map documents:

    {
        "_id": "a1b2c3d4e5f6a7b8",
        "name": "Cellar",
        "width": 2000, "height": 1500,           # pixels
        "grid": {"size": 100, "type": 1},
        "background": {"src": "maps/cellar.webp"},
        "thumb": "thumbs/cellar.png",
        "walls": [...], "lights": [...], ...      # embedded collections
    }

SceneStore defines the interface; MemorySceneStore keeps everything in
memory and JsonSceneStore adds loading/saving a world file.
"""

import copy
import json
import logging
import os
import uuid
from abc import ABC, abstractmethod
from typing import List, Optional

from services.merge_engine import collection_for_document

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Raised when the store cannot read, find or write a document."""


def new_document_id():
    """Fresh 16-character identifier for a created document."""
    return uuid.uuid4().hex[:16]


class SceneStore(ABC):
    """Interface the merge engine and UI use to read and create scenes."""

    @abstractmethod
    def list_scenes(self) -> List[dict]:
        """All scene documents, in storage order."""
        pass

    @abstractmethod
    def get_scene(self, scene_id) -> Optional[dict]:
        """Scene document by id, or None if it does not exist."""
        pass

    @abstractmethod
    def create_scene(self, data) -> dict:
        """Create a scene from structural fields and return the stored document."""
        pass

    @abstractmethod
    def create_embedded_documents(self, scene_id, document_name, records) -> List[dict]:
        """Create a batch of records of one type under a scene.

        Raises:
            StoreError: If the batch cannot be created
        """
        pass

    def save(self, path=None):
        """Flush pending changes (no-op for stores without backing files)."""
        pass


class MemorySceneStore(SceneStore):
    """In-memory store; documents are deep-copied on the way in."""

    def __init__(self, scenes=None):
        self._scenes = [copy.deepcopy(s) for s in (scenes or [])]

    def list_scenes(self):
        return list(self._scenes)

    def get_scene(self, scene_id):
        for scene in self._scenes:
            if scene.get('_id') == scene_id:
                return scene
        return None

    def create_scene(self, data):
        scene = copy.deepcopy(data)
        scene['_id'] = new_document_id()
        self._scenes.append(scene)
        logger.info("Created scene %s (%s)", scene['_id'], scene.get('name'))
        return scene

    def create_embedded_documents(self, scene_id, document_name, records):
        scene = self.get_scene(scene_id)
        if scene is None:
            raise StoreError(f"Scene not found: {scene_id}")
        collection = collection_for_document(document_name)
        if collection is None:
            raise StoreError(f"Unknown document type: {document_name}")

        created = []
        for record in records:
            doc = copy.deepcopy(record)
            doc['_id'] = new_document_id()
            created.append(doc)
        scene.setdefault(collection, []).extend(created)
        logger.debug("Created %d %s document(s) in %s", len(created), document_name, scene_id)
        return created


class JsonSceneStore(MemorySceneStore):
    """Store backed by a JSON world file of the form {"scenes": [...]}."""

    def __init__(self, path):
        self.path = path
        super().__init__(self._load(path))

    @staticmethod
    def _load(path):
        if not os.path.isfile(path):
            raise StoreError(f"World file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Could not read world file {path}: {e}") from e

        scenes = data.get('scenes') if isinstance(data, dict) else None
        if not isinstance(scenes, list):
            raise StoreError(f"World file {path} has no 'scenes' list")
        return scenes

    def save(self, path=None):
        """Write all scenes back to the world file (or to another path)."""
        target = path or self.path
        directory = os.path.dirname(os.path.abspath(target))
        try:
            os.makedirs(directory, exist_ok=True)
            with open(target, 'w', encoding='utf-8') as f:
                json.dump({'scenes': self._scenes}, f, indent=2)
        except OSError as e:
            raise StoreError(f"Could not write world file {target}: {e}") from e
        logger.info("World saved to %s", target)
