"""
Edit-distance based name similarity.

Scores are whole percentages: 100 means the normalized names are identical,
0 means nothing in common at all.
"""

import math
from typing import Optional

import jellyfish

from .string import normalize_name


def levenshtein_distance(s1: str, s2: str) -> int:
    """Minimum number of single-character inserts, deletes and substitutions"""
    return jellyfish.levenshtein_distance(s1 or "", s2 or "")


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def similarity(name1: Optional[str], name2: Optional[str]) -> int:
    """Percentage similarity (0-100) between two names.

    Both names are normalized first, so case, punctuation and repeated
    whitespace never count as differences.
    """
    normalized1 = normalize_name(name1)
    normalized2 = normalize_name(name2)

    if normalized1 == normalized2:
        return 100

    max_len = max(len(normalized1), len(normalized2))
    if max_len == 0:
        return 0

    distance = levenshtein_distance(normalized1, normalized2)
    return round_half_up((max_len - distance) / max_len * 100)
