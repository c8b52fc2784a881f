# rigretarget/constants/canonical_bones.py
"""
This file contains the static tables of the canonical bone vocabulary.
"""

# --- Humanoid Slot Definition ---
# The following constants define the generic skeletal slots a humanoid-tagged rig
# can expose. The list mirrors the standard 55-bone humanoid avatar layout used by
# most game engines, so a destination rig that carries a slot mapping can be
# queried directly without any name matching.
#
# Slot identifiers are stable snake_case strings. Canonical bone keys (below) map
# onto these slots through `CANONICAL_TO_SLOT`.

HUMANOID_SLOTS: list[str] = [
    # Torso
    "hips",
    "spine",
    "chest",
    "upper_chest",
    "neck",
    "head",
    "jaw",
    "left_eye",
    "right_eye",
    # Left Arm
    "left_shoulder",
    "left_upper_arm",
    "left_lower_arm",
    "left_hand",
    # Right Arm
    "right_shoulder",
    "right_upper_arm",
    "right_lower_arm",
    "right_hand",
    # Left Leg
    "left_upper_leg",
    "left_lower_leg",
    "left_foot",
    "left_toes",
    # Right Leg
    "right_upper_leg",
    "right_lower_leg",
    "right_foot",
    "right_toes",
    # Left Hand Fingers
    "left_thumb_proximal",
    "left_thumb_intermediate",
    "left_thumb_distal",
    "left_index_proximal",
    "left_index_intermediate",
    "left_index_distal",
    "left_middle_proximal",
    "left_middle_intermediate",
    "left_middle_distal",
    "left_ring_proximal",
    "left_ring_intermediate",
    "left_ring_distal",
    "left_little_proximal",
    "left_little_intermediate",
    "left_little_distal",
    # Right Hand Fingers
    "right_thumb_proximal",
    "right_thumb_intermediate",
    "right_thumb_distal",
    "right_index_proximal",
    "right_index_intermediate",
    "right_index_distal",
    "right_middle_proximal",
    "right_middle_intermediate",
    "right_middle_distal",
    "right_ring_proximal",
    "right_ring_intermediate",
    "right_ring_distal",
    "right_little_proximal",
    "right_little_intermediate",
    "right_little_distal",
]

# Slots used to locate the skeleton root. The set is deliberately wider than the
# scoring set so the lowest common ancestor lands on the real skeleton root rather
# than on a limb root.
BROAD_ROOT_SLOTS: list[str] = [
    "hips",
    "spine",
    "chest",
    "upper_chest",
    "neck",
    "head",
    "left_shoulder",
    "left_upper_arm",
    "left_lower_arm",
    "left_hand",
    "right_shoulder",
    "right_upper_arm",
    "right_lower_arm",
    "right_hand",
    "left_upper_leg",
    "left_lower_leg",
    "left_foot",
    "right_upper_leg",
    "right_lower_leg",
    "right_foot",
]

# Slots used only to score competing root candidates.
CORE_SCORING_SLOTS: list[str] = [
    "hips",
    "spine",
    "chest",
    "head",
    "left_upper_arm",
    "right_upper_arm",
    "left_upper_leg",
    "right_upper_leg",
]

# Maps each canonical bone key onto its humanoid slot.
CANONICAL_TO_SLOT: dict[str, str] = {
    # Torso
    "hips": "hips",
    "spine": "spine",
    "chest": "chest",
    "upper_chest": "upper_chest",
    "neck": "neck",
    "head": "head",
    "left_eye": "left_eye",
    "right_eye": "right_eye",
    # Arms
    "left_shoulder": "left_shoulder",
    "left_arm": "left_upper_arm",
    "left_forearm": "left_lower_arm",
    "left_hand": "left_hand",
    "right_shoulder": "right_shoulder",
    "right_arm": "right_upper_arm",
    "right_forearm": "right_lower_arm",
    "right_hand": "right_hand",
    # Legs
    "left_thigh": "left_upper_leg",
    "left_calf": "left_lower_leg",
    "left_foot": "left_foot",
    "left_toe": "left_toes",
    "right_thigh": "right_upper_leg",
    "right_calf": "right_lower_leg",
    "right_foot": "right_foot",
    "right_toe": "right_toes",
    # Left Hand Fingers
    "left_thumb_proximal": "left_thumb_proximal",
    "left_thumb_intermediate": "left_thumb_intermediate",
    "left_thumb_distal": "left_thumb_distal",
    "left_index_proximal": "left_index_proximal",
    "left_index_intermediate": "left_index_intermediate",
    "left_index_distal": "left_index_distal",
    "left_middle_proximal": "left_middle_proximal",
    "left_middle_intermediate": "left_middle_intermediate",
    "left_middle_distal": "left_middle_distal",
    "left_ring_proximal": "left_ring_proximal",
    "left_ring_intermediate": "left_ring_intermediate",
    "left_ring_distal": "left_ring_distal",
    "left_pinky_proximal": "left_little_proximal",
    "left_pinky_intermediate": "left_little_intermediate",
    "left_pinky_distal": "left_little_distal",
    # Right Hand Fingers
    "right_thumb_proximal": "right_thumb_proximal",
    "right_thumb_intermediate": "right_thumb_intermediate",
    "right_thumb_distal": "right_thumb_distal",
    "right_index_proximal": "right_index_proximal",
    "right_index_intermediate": "right_index_intermediate",
    "right_index_distal": "right_index_distal",
    "right_middle_proximal": "right_middle_proximal",
    "right_middle_intermediate": "right_middle_intermediate",
    "right_middle_distal": "right_middle_distal",
    "right_ring_proximal": "right_ring_proximal",
    "right_ring_intermediate": "right_ring_intermediate",
    "right_ring_distal": "right_ring_distal",
    "right_pinky_proximal": "right_little_proximal",
    "right_pinky_intermediate": "right_little_intermediate",
    "right_pinky_distal": "right_little_distal",
}

# Canonical keys that have spellings worth matching but no humanoid slot.
EXTRA_TIP_KEYS: list[str] = [
    "left_eye_end",
    "right_eye_end",
    "left_toe_end",
    "right_toe_end",
]

# Real-world spellings seen on outfit and avatar rigs, per canonical key.
# Every entry is matched case- and punctuation-insensitively, and the canonical
# key itself is always registered as its own alias.
CANONICAL_ALIASES: dict[str, tuple[str, ...]] = {
    # Torso
    "hips": ("Hips", "hips"),
    "spine": ("Spine", "spine"),
    "chest": ("Chest", "chest"),
    "upper_chest": ("UpperChest", "Upper Chest", "upperchest"),
    "neck": ("Neck", "neck"),
    "head": ("Head", "head"),
    "left_eye": ("LeftEye", "Eye_L", "Eye.L", "eye.L", "eye_L"),
    "right_eye": ("RightEye", "Eye_R", "Eye.R", "eye.R", "eye_R"),
    # Left Arm
    "left_shoulder": (
        "Shoulder_L",
        "Shoulder.L",
        "shoulder.L",
        "sholder_L",
        "Shoulder.l",
    ),
    "left_arm": (
        "UpperArm_L",
        "Upper_arm.L",
        "Upperarm_L",
        "upper_arm.L",
        "UpperArm.l",
        "Upper_Arm_L",
    ),
    "left_forearm": (
        "LowerArm_L",
        "Lower_arm.L",
        "Lowerarm_L",
        "lower_arm.L",
        "LowerArm.l",
        "Lower_Arm_L",
    ),
    "left_hand": ("Hand_L", "Hand.L", "Left Hand", "hand.L", "Hand.l"),
    # Right Arm
    "right_shoulder": (
        "Shoulder_R",
        "Shoulder.R",
        "shoulder.R",
        "sholder_R",
        "Shoulder.r",
    ),
    "right_arm": (
        "UpperArm_R",
        "Upper_arm.R",
        "Upperarm_R",
        "upper_arm.R",
        "UpperArm.r",
        "Upper_Arm_R",
    ),
    "right_forearm": (
        "LowerArm_R",
        "Lower_arm.R",
        "Lowerarm_R",
        "lower_arm.R",
        "LowerArm.r",
        "Lower_Arm_R",
    ),
    "right_hand": ("Hand_R", "Hand.R", "Right Hand", "hand.R", "Hand.r"),
    # Left Leg
    "left_thigh": (
        "UpperLeg_L",
        "Upper_leg.L",
        "Upperleg_L",
        "upper_leg.L",
        "UpperLeg.l",
        "Upper_Leg_L",
        "UpperLeg.L",
    ),
    "left_calf": (
        "LowerLeg_L",
        "Lower_leg.L",
        "Lowerleg_L",
        "lower_leg.L",
        "LowerLeg.l",
        "Lower_Leg_L",
        "LowerLeg.L",
    ),
    "left_foot": ("Foot_L", "Foot.L", "foot.L", "Foot.l"),
    "left_toe": ("Toe_L", "Toe.L", "Toes.L", "toe.L", "Toes_L"),
    # Right Leg
    "right_thigh": (
        "UpperLeg_R",
        "Upper_leg.R",
        "Upperleg_R",
        "upper_leg.R",
        "UpperLeg.r",
        "Upper_Leg_R",
        "UpperLeg.R",
    ),
    "right_calf": (
        "LowerLeg_R",
        "Lower_leg.R",
        "Lowerleg_R",
        "lower_leg.R",
        "LowerLeg.r",
        "Lower_Leg_R",
        "LowerLeg.R",
    ),
    "right_foot": ("Foot_R", "Foot.R", "foot.R", "Foot.r"),
    "right_toe": ("Toe_R", "Toe.R", "Toes.R", "toe.R", "Toes_R"),
    # Left Hand Fingers
    "left_thumb_proximal": (
        "Thumb1_L",
        "Thumb Proximal.L",
        "Thumb.proximal.L",
        "Thumb Proximal_L",
        "ThumbProximal_L",
        "Thumb1.l",
    ),
    "left_thumb_intermediate": (
        "Thumb2_L",
        "Thumb Intermediate.L",
        "Thumb.intermediate.L",
        "Thumb Intermediate_L",
        "ThumbIntermediate_L",
        "Thumb2.l",
    ),
    "left_thumb_distal": (
        "Thumb3_L",
        "Thumb Distal.L",
        "Thumb.distal.L",
        "Thumb Distal_L",
        "ThumbDistal_L",
        "Thumb3.l",
    ),
    "left_index_proximal": (
        "Index1_L",
        "Index Proximal.L",
        "Index.proximal.L",
        "Index Proximal_L",
        "IndexProximal_L",
        "Index1.l",
    ),
    "left_index_intermediate": (
        "Index2_L",
        "Index Intermediate.L",
        "Index.intermediate.L",
        "Index Intermediate_L",
        "IndexIntermediate_L",
        "Index2.l",
    ),
    "left_index_distal": (
        "Index3_L",
        "Index Distal.L",
        "Index.distal.L",
        "Index Distal_L",
        "IndexDistal_L",
        "Index3.l",
    ),
    "left_middle_proximal": (
        "Middle1_L",
        "Middle Proximal.L",
        "Middle.proximal.L",
        "Middle Proximal_L",
        "MiddleProximal_L",
        "Middle1.l",
    ),
    "left_middle_intermediate": (
        "Middle2_L",
        "Middle Intermediate.L",
        "Middle.intermediate.L",
        "Middle Intermediate_L",
        "MiddleIntermediate_L",
        "Middle2.l",
    ),
    "left_middle_distal": (
        "Middle3_L",
        "Middle Distal.L",
        "Middle.distal.L",
        "Middle Distal_L",
        "MiddleDistal_L",
        "Middle3.l",
    ),
    "left_ring_proximal": (
        "Ring1_L",
        "Ring Proximal.L",
        "Ring.proximal.L",
        "Ring Proximal_L",
        "RingProximal_L",
        "Ring1.l",
    ),
    "left_ring_intermediate": (
        "Ring2_L",
        "Ring Intermediate.L",
        "Ring.intermediate.L",
        "Ring Intermediate_L",
        "RingIntermediate_L",
        "Ring2.l",
    ),
    "left_ring_distal": (
        "Ring3_L",
        "Ring Distal.L",
        "Ring.distal.L",
        "Ring Distal_L",
        "RingDistal_L",
        "Ring3.l",
    ),
    "left_pinky_proximal": (
        "Pinky1_L",
        "Little Proximal.L",
        "Little.proximal.L",
        "Little Proximal_L",
        "LittleProximal_L",
        "Little1.l",
    ),
    "left_pinky_intermediate": (
        "Pinky2_L",
        "Little Intermediate.L",
        "Little.intermediate.L",
        "Little Intermediate_L",
        "LittleIntermediate_L",
        "Little2.l",
    ),
    "left_pinky_distal": (
        "Pinky3_L",
        "Little Distal.L",
        "Little.distal.L",
        "Little Distal_L",
        "LittleDistal_L",
        "Little3.l",
    ),
    # Right Hand Fingers
    "right_thumb_proximal": (
        "Thumb1_R",
        "Thumb Proximal.R",
        "Thumb.proximal.R",
        "Thumb Proximal_R",
        "ThumbProximal_R",
        "Thumb1.r",
    ),
    "right_thumb_intermediate": (
        "Thumb2_R",
        "Thumb Intermediate.R",
        "Thumb.intermediate.R",
        "Thumb Intermediate_R",
        "ThumbIntermediate_R",
        "Thumb2.r",
    ),
    "right_thumb_distal": (
        "Thumb3_R",
        "Thumb Distal.R",
        "Thumb.distal.R",
        "Thumb Distal_R",
        "ThumbDistal_R",
        "Thumb3.r",
    ),
    "right_index_proximal": (
        "Index1_R",
        "Index Proximal.R",
        "Index.proximal.R",
        "Index Proximal_R",
        "IndexProximal_R",
        "Index1.r",
    ),
    "right_index_intermediate": (
        "Index2_R",
        "Index Intermediate.R",
        "Index.intermediate.R",
        "Index Intermediate_R",
        "IndexIntermediate_R",
        "Index2.r",
    ),
    "right_index_distal": (
        "Index3_R",
        "Index Distal.R",
        "Index.distal.R",
        "Index Distal_R",
        "IndexDistal_R",
        "Index3.r",
    ),
    "right_middle_proximal": (
        "Middle1_R",
        "Middle Proximal.R",
        "Middle.proximal.R",
        "Middle Proximal_R",
        "MiddleProximal_R",
        "Middle1.r",
    ),
    "right_middle_intermediate": (
        "Middle2_R",
        "Middle Intermediate.R",
        "Middle.intermediate.R",
        "Middle Intermediate_R",
        "MiddleIntermediate_R",
        "Middle2.r",
    ),
    "right_middle_distal": (
        "Middle3_R",
        "Middle Distal.R",
        "Middle.distal.R",
        "Middle Distal_R",
        "MiddleDistal_R",
        "Middle3.r",
    ),
    "right_ring_proximal": (
        "Ring1_R",
        "Ring Proximal.R",
        "Ring.proximal.R",
        "Ring Proximal_R",
        "RingProximal_R",
        "Ring1.r",
    ),
    "right_ring_intermediate": (
        "Ring2_R",
        "Ring Intermediate.R",
        "Ring.intermediate.R",
        "Ring Intermediate_R",
        "RingIntermediate_R",
        "Ring2.r",
    ),
    "right_ring_distal": (
        "Ring3_R",
        "Ring Distal.R",
        "Ring.distal.R",
        "Ring Distal_R",
        "RingDistal_R",
        "Ring3.r",
    ),
    "right_pinky_proximal": (
        "Pinky1_R",
        "Little Proximal.R",
        "Little.proximal.R",
        "Little Proximal_R",
        "LittleProximal_R",
        "Little1.r",
    ),
    "right_pinky_intermediate": (
        "Pinky2_R",
        "Little Intermediate.R",
        "Little.intermediate.R",
        "Little Intermediate_R",
        "LittleIntermediate_R",
        "Little2.r",
    ),
    "right_pinky_distal": (
        "Pinky3_R",
        "Little Distal.R",
        "Little.distal.R",
        "Little Distal_R",
        "LittleDistal_R",
        "Little3.r",
    ),
    # Tips without a humanoid slot
    "left_eye_end": ("Eye.L_end", "eye.L_end", "LeftEye_end"),
    "right_eye_end": ("Eye.R_end", "eye.R_end", "RightEye_end"),
    "left_toe_end": ("Toes.L_end", "Toe.L_end", "Toes_END"),
    "right_toe_end": ("Toes.R_end", "Toe.R_end", "Toes_END.001"),
}
