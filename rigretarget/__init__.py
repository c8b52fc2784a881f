"""
rigretarget: retargets rig constraints captured on one skeleton onto another.
"""

from rigretarget.build import ConstraintBuilder
from rigretarget.capture import capture_constraints
from rigretarget.config import BuildOptions, load_config
from rigretarget.processing.armature import detect_roots
from rigretarget.remap import remap
from rigretarget.resolution.pipeline import ResolutionPipeline, resolve_reference

__all__ = [
    "BuildOptions",
    "ConstraintBuilder",
    "ResolutionPipeline",
    "capture_constraints",
    "detect_roots",
    "load_config",
    "remap",
    "resolve_reference",
]
