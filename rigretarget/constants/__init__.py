# rigretarget/constants/__init__.py
"""
This module centralizes the static bone tables used in the rigretarget project,
making them easily accessible from a single, organized location.
"""
from .canonical_bones import (
    BROAD_ROOT_SLOTS,
    CANONICAL_ALIASES,
    CANONICAL_TO_SLOT,
    CORE_SCORING_SLOTS,
    EXTRA_TIP_KEYS,
    HUMANOID_SLOTS,
)

__all__ = [
    "HUMANOID_SLOTS",
    "BROAD_ROOT_SLOTS",
    "CORE_SCORING_SLOTS",
    "CANONICAL_TO_SLOT",
    "CANONICAL_ALIASES",
    "EXTRA_TIP_KEYS",
]
