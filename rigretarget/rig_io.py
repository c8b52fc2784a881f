"""
YAML rig files.

A rig file is a nested mapping of nodes:

    name: Outfit
    children:
      - name: Armature
        animator: true
        humanoid:               # slot -> path relative to this node
          hips: Hips
        children:
          - name: Hips
      - name: Constraints
        children:
          - name: Follow
            constraints:
              - type: RotationConstraint
                target: Armature/Hips   # paths relative to the file's root
                active: true
                payload: {freeze_x: false}
                sources:
                  - node: Armature/Hips
                    weight: 1.0
                    offset: [0, 0, 0]   # extra keys are kept per source

Component payloads are held in memory as JSON text and written back as a
mapping when they parse as one.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from rigretarget.components import ConstraintComponent, ConstraintSource
from rigretarget.constants import HUMANOID_SLOTS
from rigretarget.paths import find_by_segments, relative_path, split_path
from rigretarget.rig import HumanoidMap, RigNode

logger = logging.getLogger(__name__)

_SOURCE_KEYS = ("node", "weight")


class RigFormatError(ValueError):
    """Raised when a rig file does not describe a valid rig."""

    pass


def _require_mapping(data: Any, where: str) -> Dict[str, Any]:
    if not isinstance(data, dict):
        raise RigFormatError(f"Expected a mapping at {where}, got {type(data).__name__}")
    return data


def _require_list(data: Any, where: str) -> List[Any]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise RigFormatError(f"Expected a list at {where}, got {type(data).__name__}")
    return data


def _lookup(root: RigNode, base: RigNode, path: Optional[str], where: str) -> Optional[RigNode]:
    if not path:
        return None
    node = find_by_segments(base, split_path(path))
    if node is None:
        raise RigFormatError(f"{where}: path '{path}' not found under '{root.name}'")
    return node


def _weight(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise RigFormatError(f"{where}: weight must be a number, got {value!r}")
    if value < 0:
        raise RigFormatError(f"{where}: weight must be non-negative, got {value}")
    return float(value)


def _payload_to_text(payload: Any) -> str:
    if payload is None:
        return ""
    if isinstance(payload, str):
        return payload
    return json.dumps(payload, sort_keys=True)


def _payload_from_text(text: str) -> Any:
    if not text:
        return None
    try:
        value = json.loads(text)
    except ValueError:
        return text
    return value if isinstance(value, dict) else text


def rig_from_dict(data: Dict[str, Any]) -> RigNode:
    """
    Builds a rig from its mapping form.

    Raises:
        RigFormatError: On missing names, malformed sections, unknown humanoid
                        slots, non-numeric or negative source weights, or
                        references to nodes that do not exist.
    """
    pending: List[Tuple[RigNode, Dict[str, Any], str]] = []

    def _build(entry: Any, parent: Optional[RigNode], where: str) -> RigNode:
        entry = _require_mapping(entry, where)
        name = entry.get("name")
        if not name or not isinstance(name, str):
            raise RigFormatError(f"Node at {where} has no name")
        node = RigNode(name, parent=parent)
        node.animator = bool(entry.get("animator", False))
        here = f"{where}/{name}" if where else name
        pending.append((node, entry, here))
        for child in _require_list(entry.get("children"), f"{here}.children"):
            _build(child, node, here)
        return node

    root = _build(data, None, "")

    # References are resolved once the whole tree exists.
    for node, entry, where in pending:
        humanoid = entry.get("humanoid")
        if humanoid is not None:
            slots = {}
            for slot, path in _require_mapping(humanoid, f"{where}.humanoid").items():
                if slot not in HUMANOID_SLOTS:
                    raise RigFormatError(f"{where}.humanoid: unknown slot '{slot}'")
                slots[slot] = _lookup(root, node, path, f"{where}.humanoid.{slot}")
            node.humanoid = HumanoidMap(slots)

        for i, raw in enumerate(_require_list(entry.get("constraints"), f"{where}.constraints")):
            here = f"{where}.constraints[{i}]"
            raw = _require_mapping(raw, here)
            if not raw.get("type"):
                raise RigFormatError(f"{here}: missing 'type'")
            sources = []
            for j, src in enumerate(_require_list(raw.get("sources"), f"{here}.sources")):
                src = _require_mapping(src, f"{here}.sources[{j}]")
                sources.append(
                    ConstraintSource(
                        node=_lookup(root, root, src.get("node"), f"{here}.sources[{j}]"),
                        weight=_weight(src.get("weight", 0.0), f"{here}.sources[{j}]"),
                        extras={k: v for k, v in src.items() if k not in _SOURCE_KEYS},
                    )
                )
            node.components.append(
                ConstraintComponent(
                    type_name=str(raw["type"]),
                    target=_lookup(root, root, raw.get("target"), f"{here}.target"),
                    sources=sources,
                    payload=_payload_to_text(raw.get("payload")),
                    is_active=bool(raw.get("active", True)),
                )
            )

    return root


def rig_to_dict(root: RigNode) -> Dict[str, Any]:
    """Inverse of `rig_from_dict`. Node references outside `root` are dropped."""

    def _ref(node: Optional[RigNode]) -> Optional[str]:
        if node is None or not node.is_descendant_of(root):
            return None
        return relative_path(root, node) or None

    def _node(node: RigNode) -> Dict[str, Any]:
        entry: Dict[str, Any] = {"name": node.name}
        if node.animator:
            entry["animator"] = True
        if node.humanoid is not None:
            entry["humanoid"] = {
                slot: relative_path(node, bone)
                for slot, bone in node.humanoid.slots.items()
                if bone is not None and bone.is_descendant_of(node)
            }
        if node.components:
            constraints = []
            for component in node.components:
                item: Dict[str, Any] = {"type": component.type_name}
                target = _ref(component.target)
                if target:
                    item["target"] = target
                item["active"] = component.is_active
                payload = _payload_from_text(component.payload)
                if payload is not None:
                    item["payload"] = payload
                item["sources"] = [
                    dict({"node": _ref(s.node), "weight": float(s.weight)}, **s.extras)
                    for s in component.sources
                ]
                constraints.append(item)
            entry["constraints"] = constraints
        if node.children:
            entry["children"] = [_node(child) for child in node.children]
        return entry

    return _node(root)


def load_rig(path: Union[str, Path]) -> RigNode:
    """Loads a rig from a YAML file."""
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logger.error(f"Error parsing YAML file {path}: {e}")
            raise
    if data is None:
        raise RigFormatError(f"Rig file {path} is empty")
    root = rig_from_dict(data)
    logger.info(f"Loaded rig '{root.name}' from {path}")
    return root


def save_rig(root: RigNode, path: Union[str, Path]) -> None:
    """Writes a rig to a YAML file."""
    Path(path).parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        yaml.safe_dump(rig_to_dict(root), f, sort_keys=False)
    logger.info(f"Saved rig '{root.name}' to {path}")
