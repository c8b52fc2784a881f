"""
Diagnostics for built rigs: run counters, binding dumps and bulk activation.
"""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from rigretarget.components import Activator, activate
from rigretarget.paths import full_path
from rigretarget.rig import RigNode

logger = logging.getLogger(__name__)


@dataclass
class BuildReport:
    """Counters for one build run against one destination."""

    destination: str = ""
    armature_root: str = ""
    skipped: bool = False
    reason: str = ""
    constraints_built: int = 0
    nodes_created: int = 0
    resolved_sources: int = 0
    unresolved_sources: int = 0
    resolved_targets: int = 0
    unresolved_targets: int = 0
    failed_activations: int = 0
    unresolved: List[str] = field(default_factory=list)
    # Strategy name -> number of sources it resolved.
    source_strategies: Dict[str, int] = field(default_factory=dict)

    @property
    def resolved_references(self) -> int:
        return self.resolved_sources + self.resolved_targets

    @property
    def unresolved_references(self) -> int:
        return self.unresolved_sources + self.unresolved_targets

    def summary(self) -> str:
        if self.skipped:
            return f"'{self.destination}': skipped ({self.reason})"
        return (
            f"'{self.destination}': {self.constraints_built} constraints on "
            f"'{self.armature_root}', {self.resolved_references} resolved / "
            f"{self.unresolved_references} unresolved references, "
            f"{self.nodes_created} nodes created, "
            f"{self.failed_activations} failed activations"
        )


@dataclass(frozen=True)
class ActivateReport:
    total: int = 0
    succeeded: int = 0
    failed: int = 0
    failed_types: str = ""


def dump_bindings(root: Optional[RigNode]) -> List[str]:
    """Describes every constraint under `root`, one line per component."""
    if root is None:
        return []
    lines = []
    for node in root.iter_descendants():
        for component in node.components:
            sources = " | ".join(
                f"{i}:{full_path(s.node)} (w={s.weight})"
                for i, s in enumerate(component.sources)
            )
            lines.append(
                f"{component.type_name} active={component.is_active} "
                f"self={full_path(node)} target={full_path(component.target)} "
                f"sources=[{sources}]"
            )
    logger.info(f"Constraint bindings under '{root.name}': {len(lines)}")
    for line in lines:
        logger.info(line)
    return lines


def set_all_active(root: Optional[RigNode], active: bool) -> int:
    """Sets the active flag on every constraint. Returns how many were changed."""
    if root is None:
        return 0
    changed = 0
    for node in root.iter_descendants():
        for component in node.components:
            component.is_active = active
            changed += 1
    logger.info(f"Set constraints active={active}: {changed} components under '{root.name}'")
    return changed


def activate_all(root: Optional[RigNode], activator: Activator = activate) -> ActivateReport:
    """Runs the activation routine on every constraint under `root`."""
    if root is None:
        return ActivateReport()

    total = 0
    succeeded = 0
    failed_types: Counter = Counter()
    for node in root.iter_descendants():
        for component in node.components:
            total += 1
            try:
                ok = activator(component)
            except Exception as e:
                logger.warning(f"Activate raised for '{full_path(node)}': {e}")
                ok = False
            if ok:
                succeeded += 1
                continue
            failed_types[component.type_name] += 1
            logger.warning(
                f"Activate failed: type={component.type_name} self={full_path(node)}"
            )

    summary = ", ".join(f"{name}x{count}" for name, count in failed_types.items())
    report = ActivateReport(
        total=total,
        succeeded=succeeded,
        failed=total - succeeded,
        failed_types=summary,
    )
    logger.info(
        f"Activated constraints: {succeeded}/{total} under '{root.name}' "
        f"(failed={report.failed}{f' types=[{summary}]' if summary else ''})"
    )
    return report
