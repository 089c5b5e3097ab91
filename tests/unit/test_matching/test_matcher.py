#!/usr/bin/env python3
"""Tests for the multi-factor customer matcher."""

import pytest

from cargo_intake.customers.models import Customer
from cargo_intake.matching.matcher import MultiFactorMatcher, match_customer
from cargo_intake.matching.models import MatchFactor, MatchStatus
from cargo_intake.packing.models import ParsedItem


def make_item(name: str, phone: str | None = None, region: str | None = None, row_index: int = 1) -> ParsedItem:
    """Helper to create a ParsedItem with minimal fields."""
    return ParsedItem(row_index=row_index, raw_cells=(name,), name=name, phone=phone, region=region)


@pytest.mark.matching
class TestMultiFactorMatcher:
    @pytest.fixture
    def matcher(self):
        return MultiFactorMatcher()

    def test_phone_overrides_divergent_name(self, matcher, lee_customer):
        """Same phone, very different names: still the same customer."""
        item = make_item("Hanna Missionary Cambodia", phone="01099998888")

        result = matcher.match(item, [lee_customer])

        assert result.status == MatchStatus.VERIFIED
        assert result.matched_customer == lee_customer
        assert result.confidence >= 0.95
        assert MatchFactor.PHONE_MATCH in result.factors

    def test_exact_name(self, matcher, sample_customers):
        result = matcher.match(make_item("김철수"), sample_customers)

        assert result.status == MatchStatus.VERIFIED
        assert result.matched_customer.id == "cust-002"
        assert result.confidence == 1.0
        assert result.factors == (MatchFactor.EXACT_NAME,)

    def test_fuzzy_name_is_similar(self, matcher, lee_customer):
        result = matcher.match(make_item("Lee Han-na"), [lee_customer])

        # 8/11 similarity -> 0.727 * 0.9 = 0.654, below SIMILAR without region
        assert result.status == MatchStatus.NEW_CUSTOMER
        assert result.factors == (MatchFactor.FUZZY_NAME,)
        assert result.matched_customer == lee_customer
        assert result.confidence == pytest.approx(8 / 11 * 0.9)

    def test_region_bumps_fuzzy_name(self, matcher, lee_customer):
        result = matcher.match(make_item("Lee Han-na", region="SiemReap"), [lee_customer])

        assert result.status == MatchStatus.SIMILAR
        assert result.factors == (MatchFactor.FUZZY_NAME, MatchFactor.REGION_MATCH)
        assert result.confidence == pytest.approx((8 / 11 + 0.1) * 0.9)

    def test_similar_candidates(self, matcher):
        customers = [
            Customer(id="a", name="Kim Minjun"),
            Customer(id="b", name="Kim Minjoon"),
            Customer(id="c", name="Kim Minju"),
            Customer(id="d", name="Kim Minjae"),
            Customer(id="e", name="Somebody Else"),
        ]

        result = matcher.match(make_item("Kim Minjun2"), customers)

        sims = [c.similarity for c in result.similar_candidates]
        assert len(result.similar_candidates) == 3
        assert sims == sorted(sims, reverse=True)
        assert result.similar_candidates[0].customer.id == "a"
        assert result.similar_candidates[0].reason == "name similarity 90%"

    def test_phone_matched_customer_is_not_a_candidate(self, matcher, lee_customer):
        item = make_item("Lee Han-na", phone="010-9999-8888")

        result = matcher.match(item, [lee_customer])

        assert result.similar_candidates == ()

    def test_inactive_customers_are_skipped(self, matcher):
        inactive = Customer(id="old", name="김철수", is_active=False)

        result = matcher.match(make_item("김철수"), [inactive])

        assert result.status == MatchStatus.NEW_CUSTOMER
        assert result.matched_customer is None
        assert result.confidence == 0.0

    def test_ties_keep_first_customer(self, matcher):
        first = Customer(id="1", name="김철수")
        second = Customer(id="2", name="김 철수")

        result = matcher.match(make_item("김철수"), [first, second])

        assert result.matched_customer.id == "1"

    def test_no_customers(self, matcher):
        result = matcher.match(make_item("김철수"), [])

        assert result.status == MatchStatus.NEW_CUSTOMER
        assert result.factors == ()

    def test_pure(self, matcher, sample_customers):
        item = make_item("Lee Han-na", phone="010-9999-8888")
        assert matcher.match(item, sample_customers) == matcher.match(item, sample_customers)

    def test_match_batch(self, matcher, sample_customers):
        items = [make_item("김철수", row_index=1), make_item("Nobody Here", row_index=2)]

        results = matcher.match_batch(items, sample_customers)

        assert [r.item.row_index for r in results] == [1, 2]
        assert [r.status for r in results] == [MatchStatus.VERIFIED, MatchStatus.NEW_CUSTOMER]

    def test_match_customer_helper(self, sample_customers):
        assert match_customer(make_item("김철수"), sample_customers).is_verified


@pytest.mark.matching
class TestMatchStatusThresholds:
    @pytest.mark.parametrize(
        "confidence,status",
        [
            (1.0, MatchStatus.VERIFIED),
            (0.95, MatchStatus.VERIFIED),
            (0.9499, MatchStatus.SIMILAR),
            (0.7, MatchStatus.SIMILAR),
            (0.6999, MatchStatus.NEW_CUSTOMER),
            (0.0, MatchStatus.NEW_CUSTOMER),
        ],
    )
    def test_from_confidence(self, confidence, status):
        assert MatchStatus.from_confidence(confidence) == status
