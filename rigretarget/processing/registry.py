"""
Process-wide registry of canonical bone keys.

The registry holds two read-only tables built once, on first use:

- the alias table, mapping a normalized spelling to its canonical key;
- the slot table, mapping a canonical key to its humanoid slot.

Callers never build the tables themselves; they go through `get_registry()`.
"""

from __future__ import annotations

import functools
import logging
from types import MappingProxyType
from typing import Mapping, Optional

from rigretarget.constants import CANONICAL_ALIASES, CANONICAL_TO_SLOT
from rigretarget.processing.tokenizer import canonical_key_from_name

logger = logging.getLogger(__name__)


def normalize_key(raw: Optional[str]) -> str:
    """
    Lower-cases a name and strips spaces, underscores and dots.

    The result is idempotent: `normalize_key(normalize_key(x)) == normalize_key(x)`.
    """
    if not raw:
        return ""
    return raw.strip().lower().replace(" ", "").replace("_", "").replace(".", "")


class CanonicalRegistry:
    """Immutable alias and slot tables for the canonical bone vocabulary."""

    def __init__(self):
        aliases = {}
        for canonical, spellings in CANONICAL_ALIASES.items():
            for spelling in spellings:
                aliases.setdefault(normalize_key(spelling), canonical)
            aliases.setdefault(normalize_key(canonical), canonical)

        slots = {normalize_key(k): slot for k, slot in CANONICAL_TO_SLOT.items()}

        self._aliases: Mapping[str, str] = MappingProxyType(aliases)
        self._slots: Mapping[str, str] = MappingProxyType(slots)
        logger.debug(
            f"Canonical registry built: {len(self._aliases)} aliases, "
            f"{len(self._slots)} slots."
        )

    @property
    def aliases(self) -> Mapping[str, str]:
        return self._aliases

    @property
    def slots(self) -> Mapping[str, str]:
        return self._slots

    def canonical_of(self, alias_or_canonical: Optional[str]) -> Optional[str]:
        """Returns the canonical key for any registered spelling, or None."""
        if not alias_or_canonical:
            return None
        return self._aliases.get(normalize_key(alias_or_canonical))

    def slot_of(self, canonical_key: Optional[str]) -> Optional[str]:
        """Returns the humanoid slot for a canonical key, or None."""
        if not canonical_key:
            return None
        return self._slots.get(normalize_key(canonical_key))

    def lookup_keys(self, name: Optional[str]) -> set[str]:
        """
        Returns every normalized key a joint name can be matched under.

        The set holds the normalized name itself, the normalized canonical key
        from the alias table and the normalized canonical key rebuilt by the
        tokenizer, whichever of those exist.
        """
        key = normalize_key(name)
        if not key:
            return set()

        keys = {key}
        canonical = self.canonical_of(key)
        if canonical:
            keys.add(normalize_key(canonical))
        by_tokens = canonical_key_from_name(name)
        if by_tokens:
            keys.add(normalize_key(by_tokens))
        return keys

    def segment_key(self, segment: Optional[str]) -> str:
        """
        Normalizes one path segment for the hierarchy path index.

        The alias table wins, then the tokenizer, then the plain normalized name.
        """
        if not segment:
            return ""
        normalized = normalize_key(segment)
        canonical = self.canonical_of(normalized)
        if canonical:
            return normalize_key(canonical)
        by_tokens = canonical_key_from_name(segment)
        if by_tokens:
            return normalize_key(by_tokens)
        return normalized


@functools.lru_cache(maxsize=1)
def get_registry() -> CanonicalRegistry:
    """Returns the process-wide registry, building it on first call."""
    return CanonicalRegistry()


def canonical_of(alias_or_canonical: Optional[str]) -> Optional[str]:
    return get_registry().canonical_of(alias_or_canonical)


def slot_of(canonical_key: Optional[str]) -> Optional[str]:
    return get_registry().slot_of(canonical_key)
