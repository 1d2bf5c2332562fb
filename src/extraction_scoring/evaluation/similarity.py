"""Name normalization and Levenshtein similarity.

These helpers are shared by every matching mode: `normalize_name` produces
the canonical form used for exact comparison, and `calculate_similarity`
is the single numeric measure of how close two labels are.
"""

import re
from typing import Any

_WHITESPACE = re.compile(r"\s+")
_LEADING_ARTICLE = re.compile(r"^(?:the|a|an)\s+", re.IGNORECASE)
_NON_WORD = re.compile(r"[^\w\s]")


def normalize_name(name: Any) -> str:
    """Normalize a label for comparison.

    Lowercases, collapses whitespace, strips one leading article
    ("the", "a", "an") and removes punctuation. Non-string input
    normalizes to an empty string.

    Example:
        ```python
        assert normalize_name("  The  Finance-Team ") == "financeteam"
        assert normalize_name(None) == ""
        ```
    """
    if not isinstance(name, str) or not name:
        return ""

    normalized = _WHITESPACE.sub(" ", name.lower().strip())
    normalized = _LEADING_ARTICLE.sub("", normalized)
    return _NON_WORD.sub("", normalized)


def levenshtein_distance(s1: str, s2: str) -> int:
    """Compute the edit distance between two strings.

    Classic insertion/deletion/substitution dynamic program, keeping only
    two rows of the table (sized by the shorter string).
    """
    if s1 == s2:
        return 0
    if len(s1) < len(s2):
        s1, s2 = s2, s1
    if not s2:
        return len(s1)

    previous = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1, start=1):
        current = [i] + [0] * len(s2)
        for j, c2 in enumerate(s2, start=1):
            cost = 0 if c1 == c2 else 1
            current[j] = min(
                previous[j] + 1,  # deletion
                current[j - 1] + 1,  # insertion
                previous[j - 1] + cost,  # substitution
            )
        previous = current

    return previous[-1]


def calculate_similarity(s1: Any, s2: Any) -> float:
    """Calculate normalized Levenshtein similarity (0.0-1.0) between two labels.

    Returns 0.0 if either label is empty or missing, 1.0 when both labels
    normalize to the same string.

    Example:
        ```python
        assert calculate_similarity("The Acme Corp", "acme corp") == 1.0
        assert calculate_similarity("Purchase Order", "Purchase Orders") > 0.9
        assert calculate_similarity("", "Acme") == 0.0
        ```
    """
    if not s1 or not s2:
        return 0.0

    norm1 = normalize_name(s1)
    norm2 = normalize_name(s2)

    if norm1 == norm2:
        return 1.0

    distance = levenshtein_distance(norm1, norm2)
    return 1.0 - distance / max(len(norm1), len(norm2))
