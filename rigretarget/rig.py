"""
In-memory rig model.

A rig is a tree of `RigNode`s. Ownership is top-down: a node owns its children,
and holds only a weak back-reference to its parent. Nodes may carry a
`HumanoidMap` (the host's humanoid avatar, mapping skeletal slots to nodes) and
any number of constraint components.
"""

from __future__ import annotations

import uuid
import weakref
from typing import Dict, Iterator, List, Optional, Tuple

from rigretarget.components import ConstraintComponent, ConstraintSource
from rigretarget.paths import names_equal


class HumanoidMap:
    """Slot -> node mapping exposed by a humanoid-tagged rig."""

    def __init__(self, slots: Optional[Dict[str, "RigNode"]] = None):
        self.slots: Dict[str, RigNode] = dict(slots or {})

    def node_for(self, slot: Optional[str]) -> Optional["RigNode"]:
        if not slot:
            return None
        return self.slots.get(slot)

    def __len__(self) -> int:
        return len(self.slots)


class RigNode:
    """A single node of a rig hierarchy."""

    def __init__(self, name: str, parent: Optional[RigNode] = None):
        self.name = name
        self.children: List[RigNode] = []
        self.components: List[ConstraintComponent] = []
        self.humanoid: Optional[HumanoidMap] = None
        self.animator = False
        self.handle = str(uuid.uuid4())
        self._parent: Optional[weakref.ReferenceType] = None
        if parent is not None:
            parent._attach(self)

    def __repr__(self) -> str:
        return f"RigNode({self.name!r})"

    @property
    def parent(self) -> Optional[RigNode]:
        return self._parent() if self._parent is not None else None

    def _attach(self, child: RigNode) -> None:
        old = child.parent
        if old is not None:
            old.children.remove(child)
        child._parent = weakref.ref(self)
        self.children.append(child)

    def add_child(self, name: str) -> RigNode:
        return RigNode(name, parent=self)

    def set_parent(self, parent: Optional[RigNode]) -> None:
        if parent is None:
            old = self.parent
            if old is not None:
                old.children.remove(self)
            self._parent = None
            return
        parent._attach(self)

    def find_child(self, name: Optional[str]) -> Optional[RigNode]:
        """Returns the first direct child whose name matches, ignoring case."""
        if not name:
            return None
        for child in self.children:
            if names_equal(child.name, name):
                return child
        return None

    def iter_descendants(self, include_self: bool = True) -> Iterator[RigNode]:
        """Yields nodes depth-first in pre-order."""
        stack = [self] if include_self else list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def iter_ancestors(self, include_self: bool = False) -> Iterator[RigNode]:
        node = self if include_self else self.parent
        while node is not None:
            yield node
            node = node.parent

    def is_descendant_of(self, other: Optional[RigNode]) -> bool:
        """True if this node is `other` or lies anywhere below it."""
        if other is None:
            return False
        return any(n is other for n in self.iter_ancestors(include_self=True))

    def depth_below(self, root: RigNode) -> Optional[int]:
        """Number of parent hops from this node up to `root`, or None."""
        depth = 0
        for node in self.iter_ancestors(include_self=True):
            if node is root:
                return depth
            depth += 1
        return None

    def nearest_humanoid(self) -> Optional[HumanoidMap]:
        """The humanoid map on this node or its closest ancestor that has one."""
        for node in self.iter_ancestors(include_self=True):
            if node.humanoid is not None:
                return node.humanoid
        return None


def clone_rig(root: RigNode) -> Tuple[RigNode, Dict[str, RigNode]]:
    """
    Deep-copies a rig, including humanoid maps and constraint components.

    References inside the rig are rewired to the copy; references to nodes
    outside the copied tree are kept as they are.

    Returns:
        The copied root and a mapping from original node handle to copied node.
    """
    mapping: Dict[str, RigNode] = {}

    def _copy(node: RigNode, parent: Optional[RigNode]) -> RigNode:
        dup = RigNode(node.name, parent=parent)
        dup.animator = node.animator
        mapping[node.handle] = dup
        for child in node.children:
            _copy(child, dup)
        return dup

    copied_root = _copy(root, None)

    def _rewire(node: Optional[RigNode]) -> Optional[RigNode]:
        if node is None:
            return None
        return mapping.get(node.handle, node)

    for original in root.iter_descendants():
        dup = mapping[original.handle]
        if original.humanoid is not None:
            dup.humanoid = HumanoidMap(
                {slot: _rewire(n) for slot, n in original.humanoid.slots.items()}
            )
        for component in original.components:
            dup.components.append(
                ConstraintComponent(
                    type_name=component.type_name,
                    target=_rewire(component.target),
                    sources=[
                        ConstraintSource(
                            node=_rewire(s.node), weight=s.weight, extras=dict(s.extras)
                        )
                        for s in component.sources
                    ],
                    payload=component.payload,
                    is_active=component.is_active,
                )
            )

    return copied_root, mapping
