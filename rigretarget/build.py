"""
Rebuilds captured constraints on destination rigs.

For each record the builder recreates the constrained node under the
destination (reusing what already exists), restores the component payload, and
rebinds target and sources onto the destination skeleton through the
resolution pipeline. Components are built inactive and only switched on by the
activation routine once their bindings are in place.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from tqdm import tqdm

from rigretarget.components import (
    Activator,
    ConstraintComponent,
    activate,
    find_component,
)
from rigretarget.config import BuildOptions
from rigretarget.diagnostics import BuildReport
from rigretarget.paths import (
    ensure_path,
    find_by_name,
    find_by_segments,
    full_path,
    relative_path,
    split_path,
    strip_leading,
)
from rigretarget.processing.armature import choose_candidate, detect_roots
from rigretarget.processing.path_index import PathIndexCache
from rigretarget.remap import remap
from rigretarget.resolution.pipeline import ResolutionPipeline
from rigretarget.resolution.strategies import Reference
from rigretarget.rig import RigNode, clone_rig
from rigretarget.schema import ConstraintRecord

logger = logging.getLogger(__name__)


def resolve_record_armature(
    destination_root: Optional[RigNode],
    armature_root: Optional[RigNode],
    record: ConstraintRecord,
) -> Optional[RigNode]:
    """The given armature root, else the recorded path, else the recorded name."""
    if armature_root is not None:
        return armature_root
    if destination_root is None:
        return None
    segments = split_path(record.armature_root_path)
    if segments:
        found = find_by_segments(destination_root, segments)
        if found is not None:
            return found
    return find_by_name(destination_root, record.armature_root_name)


def resolve_armature_in_clone(
    original_root: RigNode, original_armature: Optional[RigNode], clone_root: RigNode
) -> Optional[RigNode]:
    """Finds the node in `clone_root` at the same relative path as `original_armature`."""
    if original_armature is None or not original_armature.is_descendant_of(original_root):
        return None
    if original_armature is original_root:
        return clone_root
    segments = split_path(relative_path(original_root, original_armature))
    return find_by_segments(clone_root, segments)


class ConstraintBuilder:
    """
    Applies constraint records onto destination rigs.

    A builder holds the resolution pipeline and the path index cache it feeds,
    so reuse one builder across a batch to share indices between records.
    """

    def __init__(
        self,
        options: Optional[BuildOptions] = None,
        activator: Optional[Activator] = None,
        path_cache: Optional[PathIndexCache] = None,
    ):
        self.options = options or BuildOptions()
        self.activator = activator or activate
        self.path_cache = path_cache if path_cache is not None else PathIndexCache()
        self.pipeline = ResolutionPipeline(self.options.strategies, self.path_cache)

    def select_armature(self, destination_root: RigNode) -> Tuple[Optional[RigNode], str]:
        """
        Detects the armature root to build against.

        Returns:
            The chosen root and an empty reason, or None and the reason
            detection failed.
        """
        detection = detect_roots(destination_root)
        if not detection:
            return None, detection.reason
        index = choose_candidate(
            detection.candidates,
            destination_root,
            policy=self.options.shallow_armature_policy,
        )
        if index is None:
            return None, "Selected armature is the shallowest candidate"
        return detection.candidates[index].root, ""

    def _resolve_parent(
        self, destination_root: RigNode, record: ConstraintRecord, created: List[RigNode]
    ) -> RigNode:
        segments = strip_leading(split_path(record.parent_path), destination_root.name)
        if not segments:
            return destination_root

        found = find_by_segments(destination_root, segments)
        if found is not None:
            return found
        for group in self.options.strip_leading_segments:
            stripped = strip_leading(segments, group)
            if len(stripped) == len(segments):
                continue
            found = find_by_segments(destination_root, stripped)
            if found is not None:
                return found
        return ensure_path(destination_root, segments, created)

    def _activate(self, component: ConstraintComponent) -> bool:
        try:
            return bool(self.activator(component))
        except Exception as e:
            logger.warning(f"Activation raised for type='{component.type_name}': {e}")
            return False

    def build_record(
        self,
        destination_root: RigNode,
        record: ConstraintRecord,
        armature_root: Optional[RigNode] = None,
        report: Optional[BuildReport] = None,
    ) -> ConstraintComponent:
        """
        Rebuilds one constraint on the destination.

        Args:
            destination_root: The destination object that receives the node.
            record: The captured constraint.
            armature_root: The destination skeleton root. If None it is looked
                           up from the record's armature path and name.
            report: Counters to update. A fresh report is used if None.

        Returns:
            The created or reused constraint component.
        """
        if report is None:
            report = BuildReport(destination=destination_root.name)

        if not record.verified_root:
            logger.warning(
                f"Record '{record.empty_name}' has an armature root guessed from the "
                f"constrained node ('{record.armature_root_name}'); bindings may be wrong."
            )

        armature = resolve_record_armature(destination_root, armature_root, record)
        if armature is None:
            logger.warning(
                f"No armature root for '{record.empty_name}'; "
                f"all references will be unresolved."
            )

        created: List[RigNode] = []
        parent = self._resolve_parent(destination_root, record, created)
        node = parent.find_child(record.empty_name)
        if node is None:
            node = parent.add_child(record.empty_name)
            created.append(node)
        report.nodes_created += len(created)

        component = find_component(node.components, record.component_type)
        if component is None:
            component = ConstraintComponent(type_name=record.component_type)
            node.components.append(component)

        component.payload = record.payload
        component.is_active = False

        remapped = remap(
            component,
            record.sources,
            Reference(name=record.target_name, path=record.target_path),
            armature,
            self.pipeline,
        )
        report.resolved_sources += remapped.resolved_sources
        report.unresolved_sources += remapped.unresolved_count
        report.unresolved.extend(remapped.unresolved_sources)
        for strategy in remapped.strategies:
            report.source_strategies[strategy] = report.source_strategies.get(strategy, 0) + 1
        if remapped.target_resolved is True:
            report.resolved_targets += 1
        elif remapped.target_resolved is False:
            report.unresolved_targets += 1
            report.unresolved.append(record.target_name or record.target_path)

        if not self._activate(component):
            component.is_active = False
            report.failed_activations += 1
            logger.warning(
                f"Activate failed for '{record.empty_name}' "
                f"type='{component.type_name}'. Keeping it inactive."
            )
        elif self.options.keep_disabled_after_build:
            component.is_active = False

        report.constraints_built += 1
        target_name = component.target.name if component.target is not None else "(null)"
        logger.info(
            f"Completed constraint '{record.empty_name}' type='{record.component_type}' "
            f"node='{full_path(node)}' target='{target_name}'"
        )
        return component

    def build(
        self,
        destination_root: Optional[RigNode],
        records: Sequence[ConstraintRecord],
        armature_root: Optional[RigNode] = None,
    ) -> BuildReport:
        """
        Rebuilds every record on one destination.

        Args:
            destination_root: The destination object.
            records: The captured constraints, applied in order.
            armature_root: The destination skeleton root. Detected if None.

        Returns:
            The run's `BuildReport`. The destination is marked skipped if no
            armature root could be found.
        """
        if destination_root is None:
            return BuildReport(destination="(null)", skipped=True, reason="root is null")

        report = BuildReport(destination=destination_root.name)
        if armature_root is None:
            armature_root, reason = self.select_armature(destination_root)
            if armature_root is None:
                logger.error(
                    f"Humanoid armature not found under '{destination_root.name}'. {reason}"
                )
                report.skipped = True
                report.reason = reason
                return report

        report.armature_root = armature_root.name
        # Nodes may have been added since this rig was last indexed.
        self.path_cache.invalidate(armature_root)

        logger.info(
            f"Build start: destination='{destination_root.name}', "
            f"armature='{armature_root.name}', count={len(records)}"
        )
        for record in records:
            self.build_record(destination_root, record, armature_root, report)
        logger.info(f"Build complete: {report.summary()}")
        return report

    def build_many(
        self,
        destinations: Sequence[RigNode],
        records: Sequence[ConstraintRecord],
        armature_path: str = "",
    ) -> List[BuildReport]:
        """
        Builds onto each destination in turn; one failure never stops the batch.

        Args:
            destinations: The destination objects.
            records: The captured constraints.
            armature_path: Optional armature root path inside every destination.
                           The root is detected per destination if empty.

        Returns:
            One report per destination, in order.
        """
        reports = []
        for destination in tqdm(destinations, desc="Building Destinations"):
            armature = None
            if armature_path:
                armature = find_by_segments(destination, split_path(armature_path))
                if armature is None:
                    reason = f"Armature '{armature_path}' not found"
                    logger.error(f"{reason} under '{destination.name}'.")
                    reports.append(
                        BuildReport(destination=destination.name, skipped=True, reason=reason)
                    )
                    continue
            try:
                reports.append(self.build(destination, records, armature))
            except Exception as e:
                logger.exception(f"Build failed for '{destination.name}': {e}")
                reports.append(
                    BuildReport(destination=destination.name, skipped=True, reason=str(e))
                )
        return reports

    def preview(
        self,
        destination_root: RigNode,
        records: Sequence[ConstraintRecord],
        armature_root: Optional[RigNode] = None,
    ) -> Tuple[RigNode, BuildReport]:
        """
        Builds onto a copy of the destination, leaving the original untouched.

        Returns:
            The preview copy and its build report.
        """
        preview_root, _ = clone_rig(destination_root)
        preview_root.name = f"{destination_root.name}_Preview"

        preview_armature = resolve_armature_in_clone(
            destination_root, armature_root, preview_root
        )
        if armature_root is not None and preview_armature is None:
            logger.warning(
                f"Preview: armature '{armature_root.name}' is not under "
                f"'{destination_root.name}'; detecting instead."
            )
        report = self.build(preview_root, records, preview_armature)
        return preview_root, report
