"""
Remap engine.

Rewrites a destination constraint's target and source bindings from recorded
references. Source entries are updated in place by index so that per-source
component data (`ConstraintSource.extras`) survives on every retained index.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from rigretarget.components import ConstraintComponent, ConstraintSource
from rigretarget.resolution.pipeline import ResolutionPipeline
from rigretarget.resolution.strategies import Reference
from rigretarget.rig import RigNode
from rigretarget.schema import SourceBinding

logger = logging.getLogger(__name__)


@dataclass
class RemapReport:
    """What a single remap call managed to bind."""

    resolved_sources: int = 0
    unresolved_sources: List[str] = field(default_factory=list)
    target_resolved: Optional[bool] = None
    strategies: List[str] = field(default_factory=list)

    @property
    def unresolved_count(self) -> int:
        return len(self.unresolved_sources)


def resize_sources(sources: List[ConstraintSource], count: int) -> None:
    """
    Makes `sources` exactly `count` long without touching retained entries.

    Extra entries are trimmed from the tail and missing ones are appended as
    empty zero-weight placeholders.
    """
    if count < 0:
        raise ValueError(f"Source count must be non-negative, got {count}")
    del sources[count:]
    while len(sources) < count:
        sources.append(ConstraintSource(node=None, weight=0.0))


def remap(
    component: ConstraintComponent,
    desired_sources: Sequence[SourceBinding],
    desired_target: Optional[Reference],
    armature_root: Optional[RigNode],
    pipeline: Optional[ResolutionPipeline] = None,
) -> RemapReport:
    """
    Rebinds a constraint component onto the destination rig, in place.

    Args:
        component: The destination component to rewrite.
        desired_sources: Recorded source bindings, in order.
        desired_target: Recorded target reference, or None to leave the target
                        untouched. An empty reference clears the target.
        armature_root: The destination skeleton root that references resolve
                       under. With no root every reference is unresolved.
        pipeline: The resolution cascade. A default pipeline is used if None.

    Returns:
        A `RemapReport` describing resolved and unresolved references.
    """
    pipeline = pipeline or ResolutionPipeline()
    report = RemapReport()

    if desired_target is not None:
        resolution = None
        if desired_target.name or desired_target.path:
            resolution = pipeline.resolve(armature_root, desired_target)
            report.target_resolved = resolution is not None
            if resolution is None:
                logger.warning(
                    f"Target not found: name='{desired_target.name}' "
                    f"path='{desired_target.path}'"
                )
        component.target = resolution.node if resolution else None

    resize_sources(component.sources, len(desired_sources))

    for i, binding in enumerate(desired_sources):
        entry = component.sources[i]
        resolution = pipeline.resolve(
            armature_root, Reference(name=binding.name, path=binding.path)
        )
        if resolution is None:
            entry.node = None
            entry.weight = 0.0
            report.unresolved_sources.append(binding.name or binding.path)
            logger.warning(
                f"Source {i} not found: name='{binding.name}' path='{binding.path}'"
            )
            continue
        entry.node = resolution.node
        entry.weight = binding.weight
        report.resolved_sources += 1
        report.strategies.append(resolution.strategy)

    return report
