import pytest

from rigretarget.processing.path_index import PathIndexCache
from rigretarget.resolution.pipeline import ResolutionPipeline, resolve_reference
from rigretarget.resolution.strategies import (
    STRATEGY_ORDER,
    Reference,
    ResolutionContext,
    by_canonical_slot,
    by_exact_path,
    by_flat_name,
    by_normalized_path,
    by_path_suffix,
)
from rigretarget.rig import HumanoidMap, RigNode

from conftest import HUMANOID_LAYOUT, node_at


@pytest.fixture
def dotted_armature(dotted_rig):
    return dotted_rig.find_child("Armature")


def _context(root):
    return ResolutionContext(root, PathIndexCache())


class TestStrategies:
    """Test each lookup strategy on its own."""

    def test_canonical_slot_by_name(self, humanoid_rig):
        hips = node_at(humanoid_rig, "Armature/Hips")
        node = by_canonical_slot(_context(hips), Reference(name="LeftUpperArm"))
        assert node is node_at(humanoid_rig, HUMANOID_LAYOUT["left_upper_arm"])

    def test_canonical_slot_explicit(self, humanoid_rig):
        hips = node_at(humanoid_rig, "Armature/Hips")
        node = by_canonical_slot(_context(hips), Reference(slot="right_foot"))
        assert node is node_at(humanoid_rig, HUMANOID_LAYOUT["right_foot"])

    def test_canonical_slot_rejects_node_outside_root(self, humanoid_rig):
        chest = node_at(humanoid_rig, HUMANOID_LAYOUT["chest"])
        assert by_canonical_slot(_context(chest), Reference(name="Hips")) is None

    def test_canonical_slot_needs_humanoid(self, dotted_armature):
        assert by_canonical_slot(_context(dotted_armature), Reference(name="Hips")) is None

    def test_flat_name(self, dotted_armature):
        node = by_flat_name(_context(dotted_armature), Reference(name="Hand_L"))
        assert node.name == "hand.l"
        node = by_flat_name(_context(dotted_armature), Reference(name="LeftLowerArm"))
        assert node.name == "forearm.l"
        assert by_flat_name(_context(dotted_armature), Reference(name="Tail")) is None
        assert by_flat_name(_context(dotted_armature), Reference()) is None

    def test_exact_path(self, dotted_armature):
        ref = Reference(path="HIPS/Spine/chest/shoulder.r")
        assert by_exact_path(_context(dotted_armature), ref).name == "shoulder.r"
        assert by_exact_path(_context(dotted_armature), Reference(path="Hips/Nope")) is None

    def test_normalized_path(self, dotted_armature):
        ref = Reference(path="Hips/Spine/Chest/Shoulder_L/UpperArm_L")
        assert by_normalized_path(_context(dotted_armature), ref).name == "upper_arm.l"

    def test_suffix_path(self, dotted_armature):
        ref = Reference(path="shoulder.l/upper_arm.l")
        assert by_path_suffix(_context(dotted_armature), ref).name == "upper_arm.l"
        assert by_path_suffix(_context(dotted_armature), Reference(path="x/upper_arm.l")) is None
        assert by_path_suffix(_context(dotted_armature), Reference(path="")) is None

    def test_suffix_path_handles_extra_root_level(self):
        root = RigNode("Armature")
        root.add_child("Root").add_child("Hips").add_child("Tail_01")
        node = by_path_suffix(_context(root), Reference(path="Hips/Tail_01"))
        assert node.name == "Tail_01"


class TestResolutionPipeline:
    """Test the ordered strategy cascade."""

    def test_order_and_first_hit(self, humanoid_rig):
        hips = node_at(humanoid_rig, "Armature/Hips")
        resolution = ResolutionPipeline().resolve(
            hips, Reference(name="Hand_L", path="Spine/Chest/Shoulder_L")
        )
        assert resolution.strategy == "canonical_slot"
        assert resolution.node.name == "Hand_L"

    def test_disabled_strategy_is_skipped(self, humanoid_rig):
        hips = node_at(humanoid_rig, "Armature/Hips")
        pipeline = ResolutionPipeline.with_toggles(skip_humanoid=True)
        resolution = pipeline.resolve(hips, Reference(name="Hand_L"))
        assert resolution.strategy == "flat_name"

    def test_path_only(self, dotted_armature):
        pipeline = ResolutionPipeline(["exact_path", "normalized_path", "suffix_path"])
        resolution = pipeline.resolve(
            dotted_armature, Reference(name="", path="Hips/Spine/Chest/Shoulder_L")
        )
        assert resolution.strategy == "normalized_path"
        assert resolution.node.name == "shoulder.l"

    def test_skip_full_path(self, dotted_armature):
        pipeline = ResolutionPipeline.with_toggles(skip_full_path=True)
        assert pipeline.strategies == ["canonical_slot", "flat_name"]
        assert pipeline(dotted_armature, Reference(path="hips/spine")) is None

    def test_strategies_always_run_in_fixed_order(self):
        pipeline = ResolutionPipeline(["suffix_path", "flat_name"])
        assert pipeline.strategies == ["flat_name", "suffix_path"]

    def test_unknown_strategy(self):
        with pytest.raises(ValueError):
            ResolutionPipeline(["guess"])

    def test_unresolved_and_missing_root(self, dotted_armature):
        pipeline = ResolutionPipeline()
        assert pipeline.resolve(dotted_armature, Reference(name="Tail", path="Tail")) is None
        assert pipeline.resolve(None, Reference(name="Hand_L")) is None

    def test_ambiguous_path_is_unresolved(self):
        root = RigNode("Armature")
        hips = root.add_child("Hips")
        hips.add_child("Skirt.001")
        hips.add_child("skirt_001")
        pipeline = ResolutionPipeline(["normalized_path"])
        assert pipeline(root, Reference(path="Hips/Skirt001")) is None

    def test_shared_cache(self, dotted_armature):
        cache = PathIndexCache()
        pipeline = ResolutionPipeline(path_cache=cache)
        pipeline(dotted_armature, Reference(path="Hips/Spine/Chest/Shoulder_L/Missing"))
        assert dotted_armature in cache

    def test_resolve_reference(self, humanoid_rig):
        hips = node_at(humanoid_rig, "Armature/Hips")
        node = resolve_reference(hips, path="Spine/Chest/Neck", name="", strategies=STRATEGY_ORDER)
        assert node.name == "Neck"

    def test_slot_from_humanoid_on_ancestor(self, humanoid_rig):
        # A map on an ancestor of the armature root still counts.
        hips = node_at(humanoid_rig, "Armature/Hips")
        humanoid_rig.humanoid = HumanoidMap(
            {"head": node_at(humanoid_rig, HUMANOID_LAYOUT["head"])}
        )
        node = resolve_reference(hips, name="Kopf", slot="head", strategies=["canonical_slot"])
        assert node.name == "Head"
