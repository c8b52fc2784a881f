"""
Capture of constraint records from a source rig.

Only names, paths and weights are captured for node references, so that they
can be re-resolved against a different skeleton later. The component payload is
copied through as-is.
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Tuple

from rigretarget.components import ConstraintComponent
from rigretarget.paths import relative_path
from rigretarget.rig import RigNode
from rigretarget.schema import ConstraintRecord, SourceBinding

logger = logging.getLogger(__name__)


def find_top_under_root(root: Optional[RigNode], node: Optional[RigNode]) -> Optional[RigNode]:
    """Returns the ancestor of `node` that sits directly below `root`."""
    if root is None or node is None or node is root:
        return None
    if not node.is_descendant_of(root):
        return None
    current = node
    while current.parent is not None and current.parent is not root:
        current = current.parent
    return current


def _bound_nodes(component: ConstraintComponent) -> List[RigNode]:
    nodes = []
    if component.target is not None:
        nodes.append(component.target)
    nodes.extend(s.node for s in component.sources if s.node is not None)
    return nodes


def _verify_override(
    import_root: RigNode,
    owner: RigNode,
    component: ConstraintComponent,
    override: Optional[RigNode],
) -> bool:
    if override is None or not override.is_descendant_of(import_root):
        return False
    if any(n.is_descendant_of(override) for n in _bound_nodes(component)):
        return True
    # The constrained node itself is accepted as a last resort.
    return owner.is_descendant_of(override)


def resolve_armature_root(
    import_root: RigNode,
    owner: RigNode,
    component: ConstraintComponent,
    override: Optional[RigNode] = None,
) -> Tuple[Optional[RigNode], str]:
    """
    Picks the source armature root for one constraint.

    Returns:
        The root and its origin: "override", "binding" or "self". The root is
        None (origin "") if nothing lies under `import_root`.
    """
    if _verify_override(import_root, owner, component, override):
        return override, "override"

    for node in _bound_nodes(component):
        top = find_top_under_root(import_root, node)
        if top is not None:
            return top, "binding"

    top = find_top_under_root(import_root, owner)
    if top is not None:
        return top, "self"
    return None, ""


def iter_constraints(root: RigNode) -> Iterable[Tuple[RigNode, ConstraintComponent]]:
    for node in root.iter_descendants():
        for component in node.components:
            yield node, component


def capture_constraint(
    import_root: RigNode,
    owner: RigNode,
    component: ConstraintComponent,
    armature_override: Optional[RigNode] = None,
) -> ConstraintRecord:
    armature_root, origin = resolve_armature_root(
        import_root, owner, component, armature_override
    )
    if origin == "self":
        logger.warning(
            f"Armature root for '{owner.name}' was guessed from the constrained node "
            f"itself ('{armature_root.name}'); no target or source lies under "
            f"'{import_root.name}'."
        )

    sources = []
    for i, source in enumerate(component.sources):
        if source.node is None:
            continue
        if source.weight < 0:
            logger.warning(
                f"Skipping source {i} ('{source.node.name}') of '{owner.name}': "
                f"negative weight {source.weight}"
            )
            continue
        sources.append(
            SourceBinding(
                name=source.node.name,
                weight=float(source.weight),
                path=relative_path(armature_root, source.node),
            )
        )

    parent = owner.parent
    return ConstraintRecord(
        empty_name=owner.name,
        parent_path=relative_path(import_root, parent) if parent is not None else "",
        constraint_path=relative_path(armature_root, owner),
        component_type=component.type_name,
        payload=component.payload,
        target_name=component.target.name if component.target is not None else "",
        target_path=relative_path(armature_root, component.target),
        sources=tuple(sources),
        armature_root_name=armature_root.name if armature_root is not None else "",
        armature_root_path=relative_path(import_root, armature_root),
        armature_root_origin=origin,
    )


def capture_constraints(
    import_root: Optional[RigNode], armature_override: Optional[RigNode] = None
) -> List[ConstraintRecord]:
    """
    Captures every constraint component under `import_root`.

    Args:
        import_root: The container the constraints are recorded relative to.
        armature_override: A preferred source armature root. It is only used
                           for constraints that bind something beneath it.

    Returns:
        One record per component, in traversal order.
    """
    if import_root is None:
        return []
    records = [
        capture_constraint(import_root, owner, component, armature_override)
        for owner, component in iter_constraints(import_root)
    ]
    logger.info(f"Captured {len(records)} constraints from '{import_root.name}'")
    return records
