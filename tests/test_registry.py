import pytest

from rigretarget.constants import (
    CANONICAL_ALIASES,
    CANONICAL_TO_SLOT,
    EXTRA_TIP_KEYS,
    HUMANOID_SLOTS,
)
from rigretarget.processing.registry import (
    CanonicalRegistry,
    canonical_of,
    get_registry,
    normalize_key,
    slot_of,
)


class TestNormalizeKey:
    """Test name normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Upper_Arm.L", "upperarml"),
            ("  Left Hand ", "lefthand"),
            ("HIPS", "hips"),
            ("", ""),
            (None, ""),
        ],
    )
    def test_normalize(self, raw, expected):
        assert normalize_key(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["Upper_Arm.L", "Thumb Proximal_L", "Toes_END.001", " a.b_c d "]
    )
    def test_idempotent(self, raw):
        once = normalize_key(raw)
        assert normalize_key(once) == once


class TestCanonicalRegistry:
    """Test the alias and slot tables."""

    def test_every_alias_round_trips(self):
        """Each registered spelling maps back to its own canonical key."""
        registry = get_registry()
        for canonical, spellings in CANONICAL_ALIASES.items():
            for spelling in spellings:
                assert registry.canonical_of(normalize_key(spelling)) == canonical
            assert registry.canonical_of(canonical) == canonical

    def test_lookup_is_case_and_punctuation_insensitive(self):
        assert canonical_of("UPPER_ARM.l") == "left_arm"
        assert canonical_of("upperarm_l") == "left_arm"
        assert canonical_of("Lower Leg R") == "right_calf"

    def test_unknown_alias(self):
        assert canonical_of("Skirt_01") is None
        assert canonical_of("") is None

    def test_slots(self):
        assert slot_of("left_arm") == "left_upper_arm"
        assert slot_of("right_pinky_distal") == "right_little_distal"
        assert slot_of("hips") == "hips"

    def test_every_slot_is_a_humanoid_slot(self):
        assert set(CANONICAL_TO_SLOT.values()) <= set(HUMANOID_SLOTS)
        assert len(HUMANOID_SLOTS) == 55
        assert len(set(HUMANOID_SLOTS)) == 55

    def test_extra_tips_have_aliases_but_no_slot(self):
        for key in EXTRA_TIP_KEYS:
            assert canonical_of(key) == key
            assert slot_of(key) is None

    def test_tables_are_read_only(self):
        registry = CanonicalRegistry()
        with pytest.raises(TypeError):
            registry.aliases["new"] = "hips"  # type: ignore[index]
        with pytest.raises(TypeError):
            registry.slots["new"] = "hips"  # type: ignore[index]

    def test_registry_is_shared(self):
        assert get_registry() is get_registry()

    def test_lookup_keys(self):
        """Names expand to their normalized, alias and tokenized keys."""
        registry = get_registry()
        assert registry.lookup_keys("Hand_L") == {"handl", "lefthand"}
        assert registry.lookup_keys("hand.l") == {"handl", "lefthand"}
        assert registry.lookup_keys("Armature") == {"armature"}
        assert registry.lookup_keys("") == set()

    def test_segment_key(self):
        registry = get_registry()
        assert registry.segment_key("UpperArm_L") == "leftarm"
        assert registry.segment_key("upper_arm.L") == "leftarm"
        assert registry.segment_key("Armature") == "armature"
        assert registry.segment_key("") == ""
