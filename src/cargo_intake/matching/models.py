#!/usr/bin/env python3
"""
Customer Matching Domain Models

Results of matching parsed packing-list rows to the customer master.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..customers.models import Customer
from ..packing.models import ParsedItem


class MatchStatus(Enum):
    """Matcher outcome, derived purely from the confidence score."""

    VERIFIED = "verified"  # >= 0.95
    SIMILAR = "similar"  # 0.70 - 0.95
    NEW_CUSTOMER = "new_customer"  # < 0.70

    @classmethod
    def from_confidence(cls, confidence: float) -> "MatchStatus":
        if confidence >= ConfidenceThresholds.VERIFIED:
            return cls.VERIFIED
        if confidence >= ConfidenceThresholds.SIMILAR:
            return cls.SIMILAR
        return cls.NEW_CUSTOMER


class MatchFactor(Enum):
    """Signals that contributed to a match score."""

    PHONE_MATCH = "phone_match"
    EXACT_NAME = "exact_name"
    FUZZY_NAME = "fuzzy_name"
    REGION_MATCH = "region_match"


class ConfidenceThresholds:
    """Score floors and status thresholds for multi-factor matching"""

    VERIFIED = 0.95
    SIMILAR = 0.70

    PHONE_FLOOR = 0.95
    EXACT_NAME_FLOOR = 1.0
    FUZZY_NAME_MIN = 0.70
    FUZZY_NAME_WEIGHT = 0.9
    REGION_NAME_MIN = 0.5
    REGION_BONUS = 0.1

    # Similar candidates are only offered below this similarity
    CANDIDATE_MAX = 0.95
    MAX_CANDIDATES = 3


@dataclass(frozen=True)
class SimilarCandidate:
    """A customer offered for one-click linking during review."""

    customer: Customer
    similarity: float
    reason: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "customer_id": self.customer.id,
            "customer_name": self.customer.name,
            "similarity": round(self.similarity, 4),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class MatchResult:
    """
    Outcome of matching one parsed row.

    NEW_CUSTOMER is a normal outcome, not an error. matched_customer may be
    set even for NEW_CUSTOMER when a weak signal existed; status decides.
    """

    item: ParsedItem
    status: MatchStatus
    matched_customer: Customer | None
    confidence: float
    factors: tuple[MatchFactor, ...] = ()
    similar_candidates: tuple[SimilarCandidate, ...] = ()

    @property
    def is_verified(self) -> bool:
        return self.status == MatchStatus.VERIFIED

    @property
    def explanation(self) -> str:
        """Factors as a comma-separated string for display."""
        return ", ".join(f.name for f in self.factors)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "row_index": self.item.row_index,
            "status": self.status.value,
            "matched_customer_id": self.matched_customer.id if self.matched_customer else None,
            "matched_customer_name": self.matched_customer.name if self.matched_customer else None,
            "confidence": round(self.confidence, 4),
            "factors": [f.name for f in self.factors],
            "similar_candidates": [c.to_dict() for c in self.similar_candidates],
        }


@dataclass(frozen=True)
class DuplicateGroup:
    """
    Rows sharing one normalized phone number.

    Usually the same shipment entered twice with the name spelled differently.
    """

    phone: str
    items: tuple[ParsedItem, ...] = field(default_factory=tuple)

    @property
    def primary_row_index(self) -> int:
        return self.items[0].row_index

    @property
    def member_row_indices(self) -> tuple[int, ...]:
        return tuple(item.row_index for item in self.items)

    @property
    def merged_quantity(self) -> int:
        return sum(item.quantity for item in self.items)

    def to_dict(self) -> dict[str, Any]:
        return {
            "phone": self.phone,
            "primary_row_index": self.primary_row_index,
            "member_row_indices": list(self.member_row_indices),
            "merged_quantity": self.merged_quantity,
        }
