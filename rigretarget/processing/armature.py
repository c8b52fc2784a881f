"""
Armature root detection.

A destination object may hold several skeletons (for instance an avatar rig with
an outfit rig nested inside it). Every node that drives a skeleton is turned into
a root candidate: its broad humanoid slots are resolved, and the lowest common
ancestor of those bones, bounded by the search root, is taken as the armature
root. Candidates are scored on the core slots they resolve.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from rigretarget.constants import BROAD_ROOT_SLOTS, CORE_SCORING_SLOTS
from rigretarget.paths import relative_path
from rigretarget.rig import HumanoidMap, RigNode

logger = logging.getLogger(__name__)

SHALLOW_POLICIES = ("warn", "deepest", "skip")


@dataclass(frozen=True)
class RootCandidate:
    """A possible armature root found under a search root."""

    rig: RigNode
    root: RigNode
    score: int
    label: str
    humanoid: bool = True


@dataclass
class RootDetection:
    """Outcome of a root search: candidates best-first, or a failure reason."""

    candidates: List[RootCandidate] = field(default_factory=list)
    reason: str = ""

    def __bool__(self) -> bool:
        return bool(self.candidates)

    @property
    def best(self) -> Optional[RootCandidate]:
        return self.candidates[0] if self.candidates else None


def find_lowest_common_ancestor(
    nodes: Iterable[Optional[RigNode]], boundary: Optional[RigNode]
) -> Optional[RigNode]:
    """
    Finds the deepest node that is an ancestor of (or equal to) every node.

    The search never climbs above `boundary`. If any node lies outside the
    boundary the search fails instead of guessing.

    Args:
        nodes: The nodes to join. `None` entries are ignored.
        boundary: The highest node the result may be, or None for no limit.

    Returns:
        The lowest common ancestor, or None.
    """
    chains: List[List[RigNode]] = []
    for node in nodes:
        if node is None:
            continue
        if boundary is not None and not node.is_descendant_of(boundary):
            return None

        chain = []
        for ancestor in node.iter_ancestors(include_self=True):
            chain.append(ancestor)
            if ancestor is boundary:
                break
        chain.reverse()
        chains.append(chain)

    if not chains:
        return None

    last = None
    for depth in range(min(len(c) for c in chains)):
        candidate = chains[0][depth]
        if any(c[depth] is not candidate for c in chains[1:]):
            break
        last = candidate
    return last


def resolve_slots(humanoid: Optional[HumanoidMap], slots: Sequence[str]) -> List[RigNode]:
    """Resolves each slot to a node, skipping unmapped slots."""
    if humanoid is None:
        return []
    nodes = []
    for slot in slots:
        node = humanoid.node_for(slot)
        if node is not None:
            nodes.append(node)
    return nodes


def score_humanoid(humanoid: Optional[HumanoidMap]) -> int:
    """Number of core slots the map resolves."""
    return len(resolve_slots(humanoid, CORE_SCORING_SLOTS))


def detect_root(rig: RigNode, boundary: Optional[RigNode]) -> Optional[RigNode]:
    """
    Locates the skeleton root driven by `rig` without leaving `boundary`.

    Returns None if the rig exposes no humanoid map, none of its broad slots
    resolve, or any resolved bone lies outside the boundary.
    """
    bones = resolve_slots(rig.humanoid, BROAD_ROOT_SLOTS)
    if not bones:
        return None
    return find_lowest_common_ancestor(bones, boundary)


def detect_roots(search_root: Optional[RigNode], include_fallback: bool = True) -> RootDetection:
    """
    Enumerates and scores every armature root under `search_root`.

    Nodes carrying a humanoid map are resolved through their slots. Nodes flagged
    as animators without a map are offered as-is with a score of 0 when
    `include_fallback` is set, so path and name lookups can still run against
    them. Duplicate roots keep their highest score.

    Args:
        search_root: The destination object to search.
        include_fallback: Whether to offer animator nodes without a map.

    Returns:
        A `RootDetection` whose candidates are sorted best-first.
    """
    if search_root is None:
        return RootDetection(reason="root is null")

    drivers = [n for n in search_root.iter_descendants() if n.humanoid or n.animator]
    if not drivers:
        return RootDetection(reason="No rig driver (humanoid map or animator) found")

    found: List[RootCandidate] = []
    for driver in drivers:
        if driver.humanoid is not None and len(driver.humanoid):
            root = detect_root(driver, search_root)
            if root is None:
                logger.debug(f"No bounded skeleton root for '{driver.name}'.")
                continue
            found.append(
                RootCandidate(
                    rig=driver,
                    root=root,
                    score=score_humanoid(driver.humanoid),
                    label=relative_path(search_root, root, include_root=True),
                )
            )
        elif include_fallback:
            found.append(
                RootCandidate(
                    rig=driver,
                    root=driver,
                    score=0,
                    label=relative_path(search_root, driver, include_root=True),
                    humanoid=False,
                )
            )

    best_by_root: Dict[str, RootCandidate] = {}
    for candidate in found:
        existing = best_by_root.get(candidate.root.handle)
        if existing is None or candidate.score > existing.score:
            best_by_root[candidate.root.handle] = candidate

    candidates = sorted(best_by_root.values(), key=lambda c: c.score, reverse=True)
    if not candidates:
        return RootDetection(
            reason=f"Humanoid bones are not resolvable under '{search_root.name}'"
        )
    return RootDetection(candidates=candidates)


def choose_candidate(
    candidates: Sequence[RootCandidate],
    search_root: RigNode,
    selected_index: int = 0,
    policy: str = "warn",
) -> Optional[int]:
    """
    Confirms the candidate to build against.

    When two or more candidates exist and the selected one is the shallowest
    (nearest to the search root), it is most likely the outer avatar skeleton
    rather than the nested outfit skeleton. Depending on `policy` this logs a
    warning and keeps the selection (`warn`), switches to the deepest candidate
    (`deepest`), or rejects the destination (`skip`).

    Returns:
        The index to use, or None to skip the destination.
    """
    if policy not in SHALLOW_POLICIES:
        raise ValueError(f"Unknown shallow armature policy: {policy}")
    if not candidates:
        return None
    selected_index = max(0, min(selected_index, len(candidates) - 1))
    if len(candidates) < 2:
        return selected_index

    depths = []
    for candidate in candidates:
        depth = candidate.root.depth_below(search_root)
        depths.append(depth if depth is not None else float("inf"))
    shallowest = depths.index(min(depths))
    deepest = depths.index(max(depths))

    if selected_index != shallowest:
        return selected_index

    selected = candidates[selected_index]
    alternative = candidates[deepest]
    logger.warning(
        f"Selected armature '{selected.root.name}' ({selected.label}) is the "
        f"shallowest of {len(candidates)} candidates under '{search_root.name}' and "
        f"may belong to the avatar rather than the outfit. "
        f"Deepest candidate: '{alternative.root.name}' ({alternative.label})."
    )
    if policy == "deepest":
        return deepest
    if policy == "skip":
        return None
    return selected_index
