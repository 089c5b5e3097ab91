#!/usr/bin/env python3
"""
Multi-Factor Customer Matcher

Scores one parsed row against every active customer using four independent
signals and keeps the single best-scoring customer.

Signals and score floors:
- phone:  normalized phones contain one another        -> 0.95
- name:   exact normalized name                        -> 1.0
          similarity >= 0.7                            -> similarity * 0.9
- region: regions agree and similarity >= 0.5          -> (similarity + 0.1) * 0.9

A customer's score is the max of the floors it triggers, never a sum. A phone
match therefore links rows whose names drifted apart ("Lee Hanna" vs
"Rev. Lee Han-na"), and overrides weak or absent name evidence.

Status comes from the best score alone:
- VERIFIED:     >= 0.95
- SIMILAR:      >= 0.70
- NEW_CUSTOMER: otherwise
"""

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from ..customers.models import Customer
from ..packing.models import ParsedItem
from .models import (
    ConfidenceThresholds,
    MatchFactor,
    MatchResult,
    MatchStatus,
    SimilarCandidate,
)
from .normalizer import phones_match, regions_match
from .scorer import calculate_similarity

logger = logging.getLogger(__name__)


@dataclass
class _CustomerScore:
    """Signals collected for one customer."""

    score: float = 0.0
    factors: list[MatchFactor] = field(default_factory=list)

    def raise_floor(self, floor: float) -> None:
        self.score = max(self.score, floor)


class MultiFactorMatcher:
    """
    Pure matcher of parsed rows against a customer snapshot.

    Holds no state between calls; the same (item, customers) pair always
    produces the same result.
    """

    def __init__(self, thresholds: type[ConfidenceThresholds] = ConfidenceThresholds):
        """
        Initialize the matcher.

        Args:
            thresholds: Score floors and status cut-offs
        """
        self.thresholds = thresholds

    def match(self, item: ParsedItem, customers: Iterable[Customer]) -> MatchResult:
        """
        Find the best customer for one parsed row.

        Args:
            item: Parsed packing-list row
            customers: Customer snapshot; inactive customers are ignored

        Returns:
            MatchResult (NEW_CUSTOMER when nothing scores high enough)
        """
        best_customer: Customer | None = None
        best_score = 0.0
        best_factors: list[MatchFactor] = []
        candidates: list[SimilarCandidate] = []

        for customer in customers:
            if not customer.is_active:
                continue

            scored, similarity = self._score_customer(item, customer)

            if (
                MatchFactor.FUZZY_NAME in scored.factors
                and MatchFactor.PHONE_MATCH not in scored.factors
                and similarity < self.thresholds.CANDIDATE_MAX
            ):
                candidates.append(
                    SimilarCandidate(
                        customer=customer,
                        similarity=similarity,
                        reason=f"name similarity {round(similarity * 100)}%",
                    )
                )

            # Strictly greater: the first customer found keeps ties
            if scored.score > best_score:
                best_customer = customer
                best_score = scored.score
                best_factors = scored.factors

        candidates.sort(key=lambda c: c.similarity, reverse=True)
        status = MatchStatus.from_confidence(best_score)

        logger.debug(
            "Row %d '%s' -> %s (%.3f, %s)",
            item.row_index,
            item.name,
            status.name,
            best_score,
            best_customer.id if best_customer else "no customer",
        )

        return MatchResult(
            item=item,
            status=status,
            matched_customer=best_customer,
            confidence=best_score,
            factors=tuple(best_factors),
            similar_candidates=tuple(candidates[: self.thresholds.MAX_CANDIDATES]),
        )

    def match_batch(
        self, items: Sequence[ParsedItem], customers: Iterable[Customer]
    ) -> list[MatchResult]:
        """
        Match every row of a batch against the same customer snapshot.

        Returns:
            One MatchResult per item, in item order
        """
        snapshot = [c for c in customers if c.is_active]
        results = [self.match(item, snapshot) for item in items]

        verified = sum(1 for r in results if r.status == MatchStatus.VERIFIED)
        similar = sum(1 for r in results if r.status == MatchStatus.SIMILAR)
        logger.info(
            "Matched %d rows against %d customers: %d verified, %d similar, %d new",
            len(results),
            len(snapshot),
            verified,
            similar,
            len(results) - verified - similar,
        )
        return results

    def _score_customer(self, item: ParsedItem, customer: Customer) -> tuple[_CustomerScore, float]:
        """Collect every signal for one customer; returns (score, name similarity)."""
        t = self.thresholds
        scored = _CustomerScore()

        if phones_match(item.phone, customer.phone):
            scored.factors.append(MatchFactor.PHONE_MATCH)
            scored.raise_floor(t.PHONE_FLOOR)

        similarity = calculate_similarity(item.name, customer.name)
        if similarity == 1.0:
            scored.factors.append(MatchFactor.EXACT_NAME)
            scored.raise_floor(t.EXACT_NAME_FLOOR)
        elif similarity >= t.FUZZY_NAME_MIN:
            scored.factors.append(MatchFactor.FUZZY_NAME)
            scored.raise_floor(similarity * t.FUZZY_NAME_WEIGHT)

        if regions_match(item.region, customer.region):
            scored.factors.append(MatchFactor.REGION_MATCH)
            if similarity >= t.REGION_NAME_MIN:
                scored.raise_floor((similarity + t.REGION_BONUS) * t.FUZZY_NAME_WEIGHT)

        return scored, similarity


def match_customer(item: ParsedItem, customers: Iterable[Customer]) -> MatchResult:
    """Match one row with the default thresholds."""
    return MultiFactorMatcher().match(item, customers)
