"""
Customer Matching Package

Normalization, name similarity, multi-factor matching of parsed rows to the
customer master, and duplicate-phone grouping within a batch.
"""

from .grouper import detect_duplicate_groups
from .matcher import MultiFactorMatcher, match_customer
from .models import (
    ConfidenceThresholds,
    DuplicateGroup,
    MatchFactor,
    MatchResult,
    MatchStatus,
    SimilarCandidate,
)
from .normalizer import (
    MIN_PHONE_DIGITS,
    is_valid_phone,
    normalize_name,
    normalize_phone,
    normalize_region,
    phones_match,
    regions_match,
    tidy_name,
)
from .scorer import calculate_similarity, edit_distance

__all__ = [
    # Models
    "ConfidenceThresholds",
    "DuplicateGroup",
    "MatchFactor",
    "MatchResult",
    "MatchStatus",
    "SimilarCandidate",
    # Normalization
    "MIN_PHONE_DIGITS",
    "is_valid_phone",
    "normalize_name",
    "normalize_phone",
    "normalize_region",
    "phones_match",
    "regions_match",
    "tidy_name",
    # Scoring and matching
    "calculate_similarity",
    "edit_distance",
    "MultiFactorMatcher",
    "match_customer",
    "detect_duplicate_groups",
]
