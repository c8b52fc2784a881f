import pytest

from rigretarget.components import ConstraintComponent, ConstraintSource
from rigretarget.paths import ensure_path, find_by_segments, split_path
from rigretarget.rig import HumanoidMap, RigNode

# Slot -> path (relative to the rig root) of a small but complete humanoid body.
HUMANOID_LAYOUT = {
    "hips": "Armature/Hips",
    "spine": "Armature/Hips/Spine",
    "chest": "Armature/Hips/Spine/Chest",
    "neck": "Armature/Hips/Spine/Chest/Neck",
    "head": "Armature/Hips/Spine/Chest/Neck/Head",
    "left_shoulder": "Armature/Hips/Spine/Chest/Shoulder_L",
    "left_upper_arm": "Armature/Hips/Spine/Chest/Shoulder_L/UpperArm_L",
    "left_lower_arm": "Armature/Hips/Spine/Chest/Shoulder_L/UpperArm_L/LowerArm_L",
    "left_hand": "Armature/Hips/Spine/Chest/Shoulder_L/UpperArm_L/LowerArm_L/Hand_L",
    "right_shoulder": "Armature/Hips/Spine/Chest/Shoulder_R",
    "right_upper_arm": "Armature/Hips/Spine/Chest/Shoulder_R/UpperArm_R",
    "right_lower_arm": "Armature/Hips/Spine/Chest/Shoulder_R/UpperArm_R/LowerArm_R",
    "right_hand": "Armature/Hips/Spine/Chest/Shoulder_R/UpperArm_R/LowerArm_R/Hand_R",
    "left_upper_leg": "Armature/Hips/UpperLeg_L",
    "left_lower_leg": "Armature/Hips/UpperLeg_L/LowerLeg_L",
    "left_foot": "Armature/Hips/UpperLeg_L/LowerLeg_L/Foot_L",
    "right_upper_leg": "Armature/Hips/UpperLeg_R",
    "right_lower_leg": "Armature/Hips/UpperLeg_R/LowerLeg_R",
    "right_foot": "Armature/Hips/UpperLeg_R/LowerLeg_R/Foot_R",
}


def node_at(root, path):
    """Looks a node up by its path below `root` (root name excluded)."""
    node = find_by_segments(root, split_path(path))
    assert node is not None, f"{path} not found under {root.name}"
    return node


@pytest.fixture
def rig_factory():
    """
    A pytest fixture that returns a factory function for creating humanoid rigs.

    Usage:
        def test_something(rig_factory):
            rig = rig_factory("Avatar")
            rig_without_map = rig_factory("Outfit", humanoid=False)
    """

    def _create_rig(name="Avatar", layout=None, humanoid=True, parent=None):
        root = RigNode(name, parent=parent)
        slots = {
            slot: ensure_path(root, split_path(path))
            for slot, path in (layout or HUMANOID_LAYOUT).items()
        }
        root.animator = True
        if humanoid:
            root.humanoid = HumanoidMap(slots)
        return root

    return _create_rig


@pytest.fixture
def humanoid_rig(rig_factory):
    return rig_factory("Avatar")


@pytest.fixture
def dotted_rig():
    """An outfit rig with Blender-style lower-case dotted names and no humanoid map."""
    root = RigNode("Outfit")
    armature = root.add_child("Armature")
    armature.animator = True
    hips = armature.add_child("hips")
    spine = hips.add_child("spine")
    chest = spine.add_child("chest")
    for side in ("l", "r"):
        shoulder = chest.add_child(f"shoulder.{side}")
        upper = shoulder.add_child(f"upper_arm.{side}")
        lower = upper.add_child(f"forearm.{side}")
        lower.add_child(f"hand.{side}")
    return root


@pytest.fixture
def constrained_rig(rig_factory):
    """
    An avatar rig with one constraint node outside the armature.

    The constraint follows both hands with weights 0.7 / 0.3 and targets the
    chest.
    """
    root = rig_factory("Source")
    holder = ensure_path(root, ["Constraints", "HandFollow"])
    component = ConstraintComponent(
        type_name="ParentConstraint",
        target=node_at(root, HUMANOID_LAYOUT["chest"]),
        sources=[
            ConstraintSource(
                node=node_at(root, HUMANOID_LAYOUT["left_hand"]),
                weight=0.7,
                extras={"offset": [0.0, 0.1, 0.0]},
            ),
            ConstraintSource(
                node=node_at(root, HUMANOID_LAYOUT["right_hand"]),
                weight=0.3,
                extras={"offset": [0.0, -0.1, 0.0]},
            ),
        ],
        payload='{"freeze_x": false, "lock": true}',
        is_active=True,
    )
    holder.components.append(component)
    return root
