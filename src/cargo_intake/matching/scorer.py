#!/usr/bin/env python3
"""
Name Similarity Scoring

Bounded edit-distance similarity between two customer names, on top of
rapidfuzz's Levenshtein distance (unit cost insert/delete/substitute).
"""

from rapidfuzz.distance import Levenshtein

from .normalizer import normalize_name


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance with unit cost insert/delete/substitute."""
    return Levenshtein.distance(a, b)


def calculate_similarity(name_a: str | None, name_b: str | None) -> float:
    """
    Similarity of two names in [0, 1].

    Both names are normalized first. Equal forms score 1, a single empty form
    scores 0, anything else scores (maxLen - editDistance) / maxLen.

    Example:
        calculate_similarity("Lee Hanna(SiemReap)", "Lee Han-na") -> 1.0
    """
    a = normalize_name(name_a)
    b = normalize_name(name_b)

    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    max_len = max(len(a), len(b))
    return (max_len - edit_distance(a, b)) / max_len
