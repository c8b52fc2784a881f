"""
Normalized hierarchy path index.

Each rig root gets an index mapping the normalized path of every descendant
(one canonical key per segment, slash-joined) to that descendant. Paths that
normalize identically for two different nodes are ambiguous: they are removed
from the map and never resolve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Optional, Sequence, Set

from rigretarget.paths import relative_path, split_path
from rigretarget.processing.registry import get_registry
from rigretarget.rig import RigNode

logger = logging.getLogger(__name__)


def normalize_path_key(segments: Sequence[str]) -> str:
    """
    Builds the normalized key for a path.

    Returns an empty string if any segment fails to normalize, in which case
    the path is not indexable.
    """
    if not segments:
        return ""
    registry = get_registry()
    keys = []
    for segment in segments:
        key = registry.segment_key(segment)
        if not key:
            return ""
        keys.append(key)
    return "/".join(keys)


@dataclass
class HierarchyPathIndex:
    entries: Dict[str, RigNode] = field(default_factory=dict)
    ambiguous: Set[str] = field(default_factory=set)

    def add(self, key: str, node: RigNode) -> None:
        if key in self.ambiguous:
            return
        existing = self.entries.get(key)
        if existing is None:
            self.entries[key] = node
        elif existing is not node:
            del self.entries[key]
            self.ambiguous.add(key)

    def lookup(self, key: str) -> Optional[RigNode]:
        if not key or key in self.ambiguous:
            return None
        return self.entries.get(key)

    @classmethod
    def build(cls, root: RigNode) -> "HierarchyPathIndex":
        index = cls()
        for node in root.iter_descendants(include_self=False):
            key = normalize_path_key(split_path(relative_path(root, node)))
            if key:
                index.add(key, node)
        logger.debug(
            f"Indexed '{root.name}': {len(index.entries)} paths, "
            f"{len(index.ambiguous)} ambiguous."
        )
        return index


class PathIndexCache:
    """
    Per-rig cache of `HierarchyPathIndex`, keyed by the rig root's handle.

    Entries are never invalidated automatically. A caller that restructures a
    rig after it was indexed must call `rebuild` or `invalidate`.
    """

    def __init__(self):
        self._indices: Dict[str, HierarchyPathIndex] = {}

    def __contains__(self, root: RigNode) -> bool:
        return root.handle in self._indices

    def __len__(self) -> int:
        return len(self._indices)

    def get(self, root: RigNode) -> HierarchyPathIndex:
        index = self._indices.get(root.handle)
        if index is None:
            index = self.rebuild(root)
        return index

    def rebuild(self, root: RigNode) -> HierarchyPathIndex:
        index = HierarchyPathIndex.build(root)
        self._indices[root.handle] = index
        return index

    def invalidate(self, root: RigNode) -> None:
        self._indices.pop(root.handle, None)

    def clear(self) -> None:
        self._indices.clear()

    def lookup(self, root: RigNode, path: Optional[str]) -> Optional[RigNode]:
        """Resolves a path under `root` through its normalized index."""
        key = normalize_path_key(split_path(path))
        if not key:
            return None
        return self.get(root).lookup(key)
