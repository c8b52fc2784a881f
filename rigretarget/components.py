"""
Constraint components attached to rig nodes.

These stand in for the host engine's constraint component model. The core only
reads and writes node references and weights; every other field is owned by the
component and passes through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional

if TYPE_CHECKING:
    from rigretarget.rig import RigNode


@dataclass
class ConstraintSource:
    node: Optional[RigNode] = None
    weight: float = 0.0
    # Per-source component data (e.g. parent position/rotation offsets).
    extras: Dict[str, Any] = field(default_factory=dict)


@dataclass
class ConstraintComponent:
    type_name: str
    target: Optional[RigNode] = None
    sources: List[ConstraintSource] = field(default_factory=list)
    payload: str = ""
    is_active: bool = True


Activator = Callable[[ConstraintComponent], bool]


def activate(component: ConstraintComponent) -> bool:
    """
    Default activation routine.

    Turns the component on if at least one source is bound. Hosts with their
    own activation step (e.g. one that bakes rest offsets) pass it to the
    builder instead.

    Returns:
        True if the component was activated.
    """
    if not any(source.node is not None for source in component.sources):
        return False
    component.is_active = True
    return True


def find_component(
    components: List[ConstraintComponent], type_name: str
) -> Optional[ConstraintComponent]:
    """Returns the first component of the given type, ignoring case."""
    for component in components:
        if component.type_name.lower() == type_name.lower():
            return component
    return None
