"""
Lexical analysis of raw joint names.

Joint names on real rigs mix camel case, digits, punctuation and abbreviations
(`LeftUpperArm`, `Thumb2_R`, `upper_arm.L`). This module splits such names into
lower-case tokens and rebuilds a canonical bone key of the form
`{side}_{base}_{segment}` from them.
"""

from typing import List, Optional

# Compound words that must become two tokens.
COMPOUND_TOKENS = {
    "upperarm": ("upper", "arm"),
    "lowerarm": ("lower", "arm"),
    "upperleg": ("upper", "leg"),
    "lowerleg": ("lower", "leg"),
    "upperchest": ("upper", "chest"),
}

# Spelling variants folded onto the vocabulary used by base/segment detection.
TOKEN_SYNONYMS = {
    "sholder": "shoulder",
    "toes": "toe",
    "fingers": "finger",
    "proxima": "proximal",
    "little": "pinky",
}

SIDE_TOKENS = {
    "left": "left",
    "l": "left",
    "right": "right",
    "r": "right",
}

SEGMENT_TOKENS = {
    "1": "proximal",
    "2": "intermediate",
    "3": "distal",
    "proximal": "proximal",
    "prox": "proximal",
    "intermediate": "intermediate",
    "inter": "intermediate",
    "distal": "distal",
    "end": "end",
    "tip": "end",
}


def _split_words(raw: str) -> List[str]:
    """Splits on separators and on lower/upper and letter/digit boundaries."""
    text = raw.replace("_", " ").replace(".", " ").replace("-", " ")
    chars: List[str] = []
    prev = ""
    for c in text:
        if c.isspace():
            chars.append(" ")
            prev = c
            continue
        if prev and (
            (prev.islower() and c.isupper())
            or (prev.isalpha() and c.isdigit())
            or (prev.isdigit() and c.isalpha())
        ):
            chars.append(" ")
        chars.append(c)
        prev = c
    return "".join(chars).split()


def tokenize(raw: Optional[str]) -> List[str]:
    """
    Splits a raw joint name into an ordered list of lower-case tokens.

    Args:
        raw: The joint name as it appears on the rig.

    Returns:
        The token list. Empty for an empty or missing name.
    """
    if not raw:
        return []

    tokens: List[str] = []
    for word in _split_words(raw):
        lower = word.lower()
        if lower in COMPOUND_TOKENS:
            tokens.extend(COMPOUND_TOKENS[lower])
        else:
            tokens.append(lower)
    return tokens


def normalize_token(token: str) -> str:
    return TOKEN_SYNONYMS.get(token, token)


def extract_side(tokens: List[str]) -> Optional[str]:
    """
    Removes the rightmost side qualifier from `tokens` and returns it.

    The list is modified in place.
    """
    for i in range(len(tokens) - 1, -1, -1):
        side = SIDE_TOKENS.get(tokens[i])
        if side is not None:
            del tokens[i]
            return side
    return None


def extract_segment(tokens: List[str]) -> Optional[str]:
    """
    Removes the rightmost segment qualifier from `tokens` and returns it.

    The list is modified in place.
    """
    for i in range(len(tokens) - 1, -1, -1):
        segment = SEGMENT_TOKENS.get(normalize_token(tokens[i]))
        if segment is not None:
            del tokens[i]
            return segment
    return None


def detect_base(tokens: List[str]) -> Optional[str]:
    """
    Detects the body part named by the remaining tokens.

    Checks run most specific first and the first match wins, so `upper` +
    `chest` beats `chest` and `upper` + `arm` beats `hand`.
    """
    if not tokens:
        return None
    found = {normalize_token(t) for t in tokens}

    if "hips" in found:
        return "hips"
    if "spine" in found:
        return "spine"
    if "upper" in found and "chest" in found:
        return "upper_chest"
    if "chest" in found:
        return "chest"
    if "neck" in found:
        return "neck"
    if "head" in found:
        return "head"
    if "eye" in found:
        return "eye"
    if "shoulder" in found:
        return "shoulder"

    if "upper" in found and "arm" in found:
        return "arm"
    if ("lower" in found and "arm" in found) or "forearm" in found:
        return "forearm"
    if "hand" in found:
        return "hand"

    for finger in ("thumb", "index", "middle", "ring", "pinky"):
        if finger in found:
            return finger

    if ("upper" in found and "leg" in found) or "thigh" in found:
        return "thigh"
    if ("lower" in found and "leg" in found) or "calf" in found:
        return "calf"
    if "foot" in found:
        return "foot"
    if "toe" in found:
        return "toe"

    return None


def canonical_key_from_name(raw: Optional[str]) -> Optional[str]:
    """
    Rebuilds a canonical bone key from a raw joint name.

    Examples:
        `LeftUpperArm` -> `left_arm`, `Thumb2_R` -> `right_thumb_intermediate`,
        `Hips` -> `hips`.

    Args:
        raw: The joint name as it appears on the rig.

    Returns:
        The canonical key, or None when no body part could be detected.
    """
    tokens = tokenize(raw)
    if not tokens:
        return None

    side = extract_side(tokens)
    segment = extract_segment(tokens)
    base = detect_base(tokens)
    if not base:
        return None

    parts = [p for p in (side, base, segment) if p]
    return "_".join(parts)
