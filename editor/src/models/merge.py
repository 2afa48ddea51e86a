"""Merge data structures: normalised layouts, record batches and outcomes."""
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from models.scene import LayoutEntry


@dataclass(frozen=True)
class EmbeddedTypeRule:
    """How one kind of embedded record is moved into the merged scene.

    collection: attribute/key holding the records on a source scene
    document_name: record type name used when creating the records
    offset_fn: pure function (record, dx, dy) -> translated copy
    """
    collection: str
    document_name: str
    offset_fn: Callable[[dict, float, float], dict]


@dataclass
class NormalisedLayout:
    """Layout shifted so the top-left of its bounding box sits at (0, 0)."""
    layouts: List[LayoutEntry]
    total_width: float
    total_height: float


@dataclass
class MergeResult:
    """Everything to be created in the merged scene, grouped for persistence."""
    background_records: List[dict] = field(default_factory=list)
    embedded_records: Dict[str, List[dict]] = field(default_factory=dict)

    def record_count(self, document_name):
        return len(self.embedded_records.get(document_name, []))


@dataclass
class MergeOutcome:
    """Result handed back to the caller of merge_scenes.

    warnings is always a list; degraded conditions never raise.
    """
    merged_scene: Optional[dict]
    warnings: List[str] = field(default_factory=list)
