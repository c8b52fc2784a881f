"""
Path and hierarchy helpers shared by capture, resolution and build.

Paths are slash-joined node names. Name comparison is case-insensitive and
ignores trailing dots, which some exporters append to duplicated names.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from rigretarget.rig import RigNode


def normalize_name(name: Optional[str]) -> str:
    return name.rstrip(".") if name else ""


def names_equal(a: Optional[str], b: Optional[str]) -> bool:
    if a is None or b is None:
        return False
    return normalize_name(a).lower() == normalize_name(b).lower()


def split_path(path: Optional[str]) -> List[str]:
    if not path:
        return []
    return [segment for segment in path.split("/") if segment]


def join_path(segments: Sequence[str]) -> str:
    return "/".join(segments)


def strip_leading(segments: Sequence[str], leading: Optional[str]) -> List[str]:
    """Drops the first segment if it matches `leading`."""
    if not segments or not leading:
        return list(segments)
    if names_equal(segments[0], leading):
        return list(segments[1:])
    return list(segments)


def full_path(node: Optional[RigNode]) -> str:
    """Absolute path of a node, from the top of its tree."""
    if node is None:
        return "(null)"
    names = [n.name for n in node.iter_ancestors(include_self=True)]
    return join_path(list(reversed(names)))


def relative_path(
    root: Optional[RigNode],
    node: Optional[RigNode],
    include_self: bool = True,
    include_root: bool = False,
) -> str:
    """
    Path of `node` relative to `root`.

    Args:
        root: The node the path is relative to.
        node: The node to describe.
        include_self: Whether the node's own name ends the path.
        include_root: Whether the root's name starts the path.

    Returns:
        The slash-joined path, or an empty string if `node` is not under `root`.
    """
    if root is None or node is None:
        return ""
    if node is root:
        return root.name if include_root else ""
    if not node.is_descendant_of(root):
        return ""

    names = []
    current = node if include_self else node.parent
    while current is not None and current is not root:
        names.append(current.name)
        current = current.parent
    if include_root:
        names.append(root.name)
    return join_path(list(reversed(names)))


def _start_index(segments: Sequence[str], root_name: Optional[str]) -> int:
    if not segments or not root_name:
        return 0
    return 1 if names_equal(segments[0], root_name) else 0


def find_by_name(root: Optional[RigNode], name: Optional[str]) -> Optional[RigNode]:
    if root is None or not name:
        return None
    for node in root.iter_descendants():
        if names_equal(node.name, name):
            return node
    return None


def find_by_segments(
    root: Optional[RigNode], segments: Sequence[str]
) -> Optional[RigNode]:
    """
    Walks `segments` down from `root`, matching child names case-insensitively.

    A leading segment equal to the root's own name is skipped.
    """
    if root is None or not segments:
        return None
    current: Optional[RigNode] = root
    for segment in segments[_start_index(segments, root.name) :]:
        current = current.find_child(segment)
        if current is None:
            return None
    return current


def ensure_path(
    root: RigNode, segments: Sequence[str], created: Optional[List[RigNode]] = None
) -> RigNode:
    """
    Like `find_by_segments`, but creates missing nodes along the way.

    Newly created nodes are appended to `created` if a list is given.
    """
    current = root
    for segment in segments[_start_index(segments, root.name) :]:
        child = current.find_child(segment)
        if child is None:
            child = current.add_child(segment)
            if created is not None:
                created.append(child)
        current = child
    return current
