from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, List, Optional

from rigretarget.processing.path_index import PathIndexCache
from rigretarget.resolution.strategies import (
    PATH_STRATEGIES,
    STRATEGIES,
    STRATEGY_ORDER,
    Reference,
    ResolutionContext,
)
from rigretarget.rig import RigNode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    node: RigNode
    strategy: str


class ResolutionPipeline:
    """
    Resolves references on a destination rig through an ordered strategy cascade.

    The cascade always runs in `STRATEGY_ORDER` (canonical slot, flat name,
    exact path, normalized path, path suffix); `strategies` only selects which
    of them are enabled, which is how lookups are switched off for diagnostics.
    """

    def __init__(
        self,
        strategies: Optional[Iterable[str]] = None,
        path_cache: Optional[PathIndexCache] = None,
    ):
        """
        Initializes the ResolutionPipeline.

        Args:
            strategies: Names of the enabled strategies. All are enabled if None.
            path_cache: Shared cache of normalized path indices. A private cache
                        is created if None.
        """
        enabled = set(STRATEGY_ORDER if strategies is None else strategies)
        unknown = enabled - set(STRATEGIES)
        if unknown:
            raise ValueError(f"Unknown resolution strategies: {sorted(unknown)}")

        self.strategies: List[str] = [s for s in STRATEGY_ORDER if s in enabled]
        self.path_cache = path_cache if path_cache is not None else PathIndexCache()

    @classmethod
    def with_toggles(
        cls,
        skip_humanoid: bool = False,
        skip_full_path: bool = False,
        path_cache: Optional[PathIndexCache] = None,
    ) -> "ResolutionPipeline":
        """Builds a pipeline with the humanoid or path lookups switched off."""
        disabled = set()
        if skip_humanoid:
            disabled.add("canonical_slot")
        if skip_full_path:
            disabled.update(PATH_STRATEGIES)
        return cls([s for s in STRATEGY_ORDER if s not in disabled], path_cache)

    def resolve(
        self, armature_root: Optional[RigNode], reference: Reference
    ) -> Optional[Resolution]:
        """
        Runs the enabled strategies in order and returns the first hit.

        Args:
            armature_root: The detected skeleton root of the destination rig.
            reference: The recorded name, path and optional slot.

        Returns:
            The resolved node and the name of the strategy that found it, or
            None if the reference is unresolved.
        """
        if armature_root is None:
            return None
        context = ResolutionContext(armature_root, self.path_cache)
        for name in self.strategies:
            node = STRATEGIES[name](context, reference)
            if node is not None:
                logger.debug(
                    f"Resolved name='{reference.name}' path='{reference.path}' "
                    f"-> '{node.name}' via {name}"
                )
                return Resolution(node, name)
        return None

    def __call__(
        self, armature_root: Optional[RigNode], reference: Reference
    ) -> Optional[RigNode]:
        resolution = self.resolve(armature_root, reference)
        return resolution.node if resolution else None


def resolve_reference(
    armature_root: Optional[RigNode],
    path: str = "",
    name: str = "",
    strategies: Optional[Iterable[str]] = None,
    slot: Optional[str] = None,
    path_cache: Optional[PathIndexCache] = None,
) -> Optional[RigNode]:
    """Resolves a single reference with a one-off pipeline."""
    pipeline = ResolutionPipeline(strategies, path_cache)
    return pipeline(armature_root, Reference(name=name, path=path, slot=slot))
