from .armature import (
    RootCandidate,
    RootDetection,
    choose_candidate,
    detect_root,
    detect_roots,
    find_lowest_common_ancestor,
)
from .path_index import HierarchyPathIndex, PathIndexCache, normalize_path_key
from .registry import CanonicalRegistry, canonical_of, get_registry, normalize_key, slot_of
from .tokenizer import canonical_key_from_name, tokenize

__all__ = [
    "CanonicalRegistry",
    "get_registry",
    "normalize_key",
    "canonical_of",
    "slot_of",
    "tokenize",
    "canonical_key_from_name",
    "HierarchyPathIndex",
    "PathIndexCache",
    "normalize_path_key",
    "RootCandidate",
    "RootDetection",
    "detect_root",
    "detect_roots",
    "choose_candidate",
    "find_lowest_common_ancestor",
]
