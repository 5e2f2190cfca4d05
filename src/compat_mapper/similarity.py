"""
String similarity for cleaned model identifiers.

Uses rapidfuzz's Levenshtein distance (unit cost insert/delete/substitute) on
lowercased strings and turns it into a ratio against the longer string:

    similarity = (max_len - distance) / max_len

Examples:
    'p3245lve' vs 'p3245-lve'  -> 8/9  = 0.889
    'abcde'    vs 'abcxy'      -> 3/5  = 0.6
    ''         vs ''           -> 1.0
"""

from rapidfuzz.distance import Levenshtein


def levenshtein_distance(a: str, b: str) -> int:
    """Case-insensitive edit distance between two strings."""
    return Levenshtein.distance(_as_text(a).lower(), _as_text(b).lower())


def string_similarity(a: str, b: str) -> float:
    """Normalized edit-distance similarity in [0, 1]; two empty strings score 1.0."""
    # lower() can lengthen a string ('\u0130' -> 'i\u0307'), so measure the lowered forms
    a = _as_text(a).lower()
    b = _as_text(b).lower()
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - Levenshtein.distance(a, b)) / longest


def _as_text(value) -> str:
    return value if isinstance(value, str) else ''
