from .pipeline import Resolution, ResolutionPipeline, resolve_reference
from .strategies import STRATEGIES, STRATEGY_ORDER, Reference, ResolutionContext

__all__ = [
    "Reference",
    "Resolution",
    "ResolutionContext",
    "ResolutionPipeline",
    "resolve_reference",
    "STRATEGIES",
    "STRATEGY_ORDER",
]
