"""
Lookup strategies for resolving a recorded reference on a destination rig.

Every strategy is a plain function with the same signature,
`strategy(context, reference) -> Optional[RigNode]`, and no side effects other
than filling the shared path index cache. The pipeline runs them in
`STRATEGY_ORDER` and stops at the first hit.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional

from rigretarget.paths import find_by_segments, names_equal, relative_path, split_path
from rigretarget.processing.path_index import PathIndexCache
from rigretarget.processing.registry import get_registry
from rigretarget.processing.tokenizer import canonical_key_from_name
from rigretarget.rig import RigNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reference:
    """A node reference recorded on the source rig."""

    name: str = ""
    path: str = ""
    slot: Optional[str] = None


@dataclass
class ResolutionContext:
    armature_root: RigNode
    path_cache: PathIndexCache = field(default_factory=PathIndexCache)


Strategy = Callable[[ResolutionContext, Reference], Optional[RigNode]]


def by_canonical_slot(context: ResolutionContext, reference: Reference) -> Optional[RigNode]:
    """
    Resolves through the destination rig's own humanoid slot mapping.

    Only applies when the armature root (or an ancestor) exposes a humanoid map.
    The slot is the reference's own, else the one mapped from the name's alias
    or re-tokenized canonical key. The mapped bone must lie under the armature
    root.
    """
    humanoid = context.armature_root.nearest_humanoid()
    if humanoid is None:
        return None

    slot = reference.slot
    if not slot:
        if not reference.name:
            return None
        registry = get_registry()
        canonical = registry.canonical_of(reference.name) or canonical_key_from_name(
            reference.name
        )
        slot = registry.slot_of(canonical)
    if not slot:
        return None

    node = humanoid.node_for(slot)
    if node is None or not node.is_descendant_of(context.armature_root):
        return None
    return node


def by_flat_name(context: ResolutionContext, reference: Reference) -> Optional[RigNode]:
    """
    Resolves by name alone, anywhere under the armature root.

    Both the reference name and each destination name are expanded to their
    normalized name, alias-mapped canonical key and re-tokenized canonical key;
    the first node sharing any key with the reference wins.
    """
    if not reference.name:
        return None
    registry = get_registry()
    wanted = registry.lookup_keys(reference.name)
    if not wanted:
        return None

    for node in context.armature_root.iter_descendants():
        if wanted & registry.lookup_keys(node.name):
            return node
    return None


def by_exact_path(context: ResolutionContext, reference: Reference) -> Optional[RigNode]:
    """Walks the recorded path child by child, ignoring case."""
    segments = split_path(reference.path)
    if not segments:
        return None
    return find_by_segments(context.armature_root, segments)


def by_normalized_path(
    context: ResolutionContext, reference: Reference
) -> Optional[RigNode]:
    """Looks the recorded path up in the normalized hierarchy path index."""
    if not reference.path:
        return None
    return context.path_cache.lookup(context.armature_root, reference.path)


def by_path_suffix(context: ResolutionContext, reference: Reference) -> Optional[RigNode]:
    """
    Accepts the first node whose trailing path segments equal the recorded path.

    Useful when the destination skeleton has extra levels above the recorded
    joints (for example an additional root bone).
    """
    wanted = split_path(reference.path)
    if not wanted:
        return None

    root = context.armature_root
    for node in root.iter_descendants(include_self=False):
        segments = split_path(relative_path(root, node))
        if len(segments) < len(wanted):
            continue
        tail = segments[len(segments) - len(wanted) :]
        if all(names_equal(a, b) for a, b in zip(tail, wanted)):
            return node
    return None


STRATEGIES: Dict[str, Strategy] = {
    "canonical_slot": by_canonical_slot,
    "flat_name": by_flat_name,
    "exact_path": by_exact_path,
    "normalized_path": by_normalized_path,
    "suffix_path": by_path_suffix,
}

STRATEGY_ORDER = list(STRATEGIES)

# Strategies that consult the recorded path rather than the name.
PATH_STRATEGIES = ("exact_path", "normalized_path", "suffix_path")
