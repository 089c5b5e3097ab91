#!/usr/bin/env python3
"""Tests for duplicate phone grouping."""

import pytest

from cargo_intake.matching.grouper import detect_duplicate_groups
from cargo_intake.packing.models import ParsedItem


def make_item(row_index: int, name: str, phone: str | None, quantity: int = 1) -> ParsedItem:
    return ParsedItem(row_index=row_index, raw_cells=(name,), name=name, phone=phone, quantity=quantity)


@pytest.mark.matching
class TestDetectDuplicateGroups:
    def test_punctuation_differences_group_together(self):
        items = [
            make_item(1, "Lee Hanna", "010-9999-8888", quantity=10),
            make_item(2, "김철수", "010-1234-5678"),
            make_item(3, "Lee Han-na", "01099998888", quantity=5),
        ]

        groups = detect_duplicate_groups(items)

        assert len(groups) == 1
        group = groups[0]
        assert group.phone == "01099998888"
        assert group.primary_row_index == 1
        assert group.member_row_indices == (1, 3)
        assert group.merged_quantity == 15

    def test_missing_or_short_phones_never_group(self):
        items = [
            make_item(1, "A", None),
            make_item(2, "B", None),
            make_item(3, "C", "123-4567"),
            make_item(4, "D", "123-4567"),
        ]

        assert detect_duplicate_groups(items) == []

    def test_groups_in_first_appearance_order(self):
        items = [
            make_item(1, "A", "010-2222-3333"),
            make_item(2, "B", "010-1111-1111"),
            make_item(3, "C", "010-1111-1111"),
            make_item(4, "D", "010-2222-3333"),
            make_item(5, "E", "010-2222-3333"),
        ]

        groups = detect_duplicate_groups(items)

        assert [g.phone for g in groups] == ["01022223333", "01011111111"]
        assert groups[0].member_row_indices == (1, 4, 5)

    def test_to_dict(self):
        items = [make_item(1, "A", "010-2222-3333"), make_item(2, "B", "010 2222 3333")]

        data = detect_duplicate_groups(items)[0].to_dict()

        assert data == {
            "phone": "01022223333",
            "primary_row_index": 1,
            "member_row_indices": [1, 2],
            "merged_quantity": 2,
        }
