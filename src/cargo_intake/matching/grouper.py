#!/usr/bin/env python3
"""
Duplicate Row Grouper

Finds rows of one pasted batch that share a phone number. These are usually
the same shipment entered twice with the name spelled differently, so the
review step offers to link them together.

Works on the finished batch only; the customer directory is not consulted.
"""

import logging
from collections.abc import Iterable

from ..packing.models import ParsedItem
from .models import DuplicateGroup
from .normalizer import is_valid_phone, normalize_phone

logger = logging.getLogger(__name__)


def detect_duplicate_groups(items: Iterable[ParsedItem]) -> list[DuplicateGroup]:
    """
    Group rows by normalized phone.

    Rows without a phone, or with fewer than 8 digits, never join a group.

    Args:
        items: Parsed rows in input order

    Returns:
        Groups with 2+ members, ordered by first appearance
    """
    by_phone: dict[str, list[ParsedItem]] = {}
    for item in items:
        if not is_valid_phone(item.phone):
            continue
        by_phone.setdefault(normalize_phone(item.phone), []).append(item)

    groups = [
        DuplicateGroup(phone=phone, items=tuple(members))
        for phone, members in by_phone.items()
        if len(members) >= 2
    ]

    for group in groups:
        logger.debug("Duplicate phone %s on rows %s", group.phone, group.member_row_indices)
    if groups:
        logger.info("Found %d duplicate phone groups", len(groups))

    return groups
