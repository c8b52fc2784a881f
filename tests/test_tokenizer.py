import pytest

from rigretarget.processing.tokenizer import (
    canonical_key_from_name,
    detect_base,
    extract_segment,
    extract_side,
    tokenize,
)


class TestTokenize:
    """Test splitting raw joint names into tokens."""

    def test_camel_case_and_compound(self):
        """Camel case splits, and compound words become two tokens."""
        assert tokenize("LeftUpperArm") == ["left", "upper", "arm"]
        assert tokenize("upperarm_L") == ["upper", "arm", "l"]

    def test_separators(self):
        """Underscores, dots and dashes all separate tokens."""
        assert tokenize("upper_arm.L") == ["upper", "arm", "l"]
        assert tokenize("Hand-R") == ["hand", "r"]

    def test_digit_boundaries(self):
        """Letter/digit boundaries split in both directions."""
        assert tokenize("Thumb2_R") == ["thumb", "2", "r"]
        assert tokenize("Index1Left") == ["index", "1", "left"]

    def test_single_tokens_pass_through(self):
        """Dedicated base tokens are not split."""
        assert tokenize("Forearm") == ["forearm"]
        assert tokenize("Thigh") == ["thigh"]
        assert tokenize("Calf") == ["calf"]

    @pytest.mark.parametrize("raw", ["", None])
    def test_empty_input(self, raw):
        """Empty or missing names yield no tokens."""
        assert tokenize(raw) == []


class TestExtraction:
    """Test side, segment and base extraction."""

    def test_side_rightmost_wins(self):
        """The rightmost side qualifier is taken and removed."""
        tokens = ["left", "hand", "r"]
        assert extract_side(tokens) == "right"
        assert tokens == ["left", "hand"]

    def test_side_absent(self):
        tokens = ["hips"]
        assert extract_side(tokens) is None
        assert tokens == ["hips"]

    @pytest.mark.parametrize(
        "token, expected",
        [
            ("1", "proximal"),
            ("2", "intermediate"),
            ("3", "distal"),
            ("prox", "proximal"),
            ("proxima", "proximal"),
            ("inter", "intermediate"),
            ("distal", "distal"),
            ("tip", "end"),
            ("end", "end"),
        ],
    )
    def test_segment_tokens(self, token, expected):
        tokens = ["index", token]
        assert extract_segment(tokens) == expected
        assert tokens == ["index"]

    def test_base_priority(self):
        """More specific bases are checked first."""
        assert detect_base(["upper", "chest"]) == "upper_chest"
        assert detect_base(["chest"]) == "chest"
        assert detect_base(["upper", "arm"]) == "arm"
        assert detect_base(["lower", "arm"]) == "forearm"
        assert detect_base(["upper", "leg"]) == "thigh"
        assert detect_base(["lower", "leg"]) == "calf"
        assert detect_base(["little"]) == "pinky"
        assert detect_base(["sholder"]) == "shoulder"
        assert detect_base(["toes"]) == "toe"

    def test_base_not_found(self):
        assert detect_base(["armature"]) is None
        assert detect_base([]) is None


class TestCanonicalKey:
    """Test building canonical keys from raw names."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("LeftUpperArm", "left_arm"),
            ("Thumb2_R", "right_thumb_intermediate"),
            ("Hips", "hips"),
            ("hand.l", "left_hand"),
            ("Hand_R", "right_hand"),
            ("UpperChest", "upper_chest"),
            ("LittleFinger3_L", "left_pinky_distal"),
            ("Toe_End.R", "right_toe_end"),
            ("lower_leg.R", "right_calf"),
        ],
    )
    def test_canonical_key(self, raw, expected):
        assert canonical_key_from_name(raw) == expected

    @pytest.mark.parametrize("raw", ["", None, "Armature", "Skirt_01"])
    def test_unresolvable(self, raw):
        """Names without a body part produce no key."""
        assert canonical_key_from_name(raw) is None
