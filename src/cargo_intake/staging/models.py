#!/usr/bin/env python3
"""
Staging Domain Models

Rows under review for one import batch, their grid status and warning flags,
the running counters, and the records written out on commit.
"""

from dataclasses import dataclass, field, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any

from ..customers.models import Customer, CustomerSnapshot
from ..matching.models import MatchResult, MatchStatus
from ..packing.models import ParsedItem
from ..pricing.calculator import ShipmentPricing
from ..pricing.models import PricingLayer


class SessionState(Enum):
    """Lifecycle of a staging session."""

    EMPTY = "empty"
    PARSED = "parsed"
    REVIEWED = "reviewed"
    COMMITTED = "committed"  # terminal
    ABANDONED = "abandoned"  # terminal

    @property
    def is_terminal(self) -> bool:
        return self in (SessionState.COMMITTED, SessionState.ABANDONED)


class GridStatus(Enum):
    """Status shown for a row in the review grid."""

    VERIFIED = "verified"
    SIMILAR = "similar"
    NEW = "new"
    WARNING = "warning"  # Verified, but something disagrees (e.g. phone)
    UNTRACKED = "untracked"  # Agency cargo, not tied to a customer


class WarningFlag(Enum):
    """Non-blocking problems surfaced on a row."""

    PHONE_MISMATCH = "phone_mismatch"
    DUPLICATE_PHONE = "duplicate_phone"


# Matcher status -> grid status. Every MatchStatus must appear here.
MATCH_TO_GRID: dict[MatchStatus, GridStatus] = {
    MatchStatus.VERIFIED: GridStatus.VERIFIED,
    MatchStatus.SIMILAR: GridStatus.SIMILAR,
    MatchStatus.NEW_CUSTOMER: GridStatus.NEW,
}


@dataclass
class StagingRow:
    """
    One parsed row inside a staging session.

    The parsed item is never changed; user corrections live in the edited_*
    fields and the linked customer.
    """

    item: ParsedItem
    edited_name: str
    edited_phone: str | None
    edited_quantity: int
    match: MatchResult | None = None
    linked_customer: Customer | None = None
    warning_flags: list[WarningFlag] = field(default_factory=list)
    duplicate_phone: str | None = None
    is_resolved: bool = False  # User linked the customer explicitly
    is_untracked: bool = False
    is_archived: bool = False
    pricing: ShipmentPricing | None = None

    @classmethod
    def from_item(cls, item: ParsedItem) -> "StagingRow":
        return cls(
            item=item,
            edited_name=item.name,
            edited_phone=item.phone,
            edited_quantity=item.quantity,
        )

    @property
    def row_index(self) -> int:
        return self.item.row_index

    @property
    def is_edited(self) -> bool:
        return (
            self.edited_name != self.item.name
            or self.edited_phone != self.item.phone
            or self.edited_quantity != self.item.quantity
        )

    @property
    def status(self) -> GridStatus | None:
        """
        Grid status derived from the row state; None until matched.

        A user-resolved link always shows VERIFIED. A verified match with a
        phone mismatch shows WARNING.
        """
        if self.is_untracked:
            return GridStatus.UNTRACKED
        if self.is_resolved and self.linked_customer is not None:
            return GridStatus.VERIFIED
        if self.match is None:
            return None

        status = MATCH_TO_GRID[self.match.status]
        if status == GridStatus.VERIFIED and WarningFlag.PHONE_MISMATCH in self.warning_flags:
            return GridStatus.WARNING
        return status

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        status = self.status
        return {
            "row_index": self.row_index,
            "parsed": self.item.to_dict(),
            "edited": {
                "name": self.edited_name,
                "phone": self.edited_phone,
                "quantity": self.edited_quantity,
            },
            "status": status.value if status else None,
            "match": self.match.to_dict() if self.match else None,
            "linked_customer_id": self.linked_customer.id if self.linked_customer else None,
            "warning_flags": [flag.value for flag in self.warning_flags],
            "duplicate_phone": self.duplicate_phone,
            "is_edited": self.is_edited,
            "is_resolved": self.is_resolved,
            "is_archived": self.is_archived,
        }


@dataclass
class StagingStats:
    """Counters for the review grid, maintained as rows change."""

    total: int = 0
    verified: int = 0
    similar: int = 0
    new_customer: int = 0
    warning: int = 0
    untracked: int = 0
    archived: int = 0

    @staticmethod
    def counter_for(row: StagingRow) -> str | None:
        """Name of the counter a row currently contributes to."""
        if row.is_archived:
            return "archived"
        status = row.status
        if status is None:
            return None
        return {
            GridStatus.VERIFIED: "verified",
            GridStatus.SIMILAR: "similar",
            GridStatus.NEW: "new_customer",
            GridStatus.WARNING: "warning",
            GridStatus.UNTRACKED: "untracked",
        }[status]

    def shift(self, old: str | None, new: str | None) -> None:
        """Move one row from counter old to counter new."""
        if old == new:
            return
        if old is not None:
            setattr(self, old, getattr(self, old) - 1)
        if new is not None:
            setattr(self, new, getattr(self, new) + 1)

    @classmethod
    def from_rows(cls, rows: list[StagingRow]) -> "StagingStats":
        """Count from scratch."""
        stats = cls(total=len(rows))
        for row in rows:
            stats.shift(None, cls.counter_for(row))
        return stats

    def to_dict(self) -> dict[str, int]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


@dataclass(frozen=True)
class ShipmentRecord:
    """
    One committed shipment.

    customer is a snapshot taken at commit; the record never follows later
    edits to the customer master.
    """

    id: str
    session_id: str
    row_index: int
    customer_id: str | None
    customer: CustomerSnapshot | None
    name: str
    phone: str | None
    quantity: int
    weight: Decimal | None
    courier: str | None
    remainder: str | None
    status: GridStatus
    warning_flags: tuple[WarningFlag, ...]
    original_raw_row: str
    pricing: PricingLayer
    created_by: str
    created_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "session_id": self.session_id,
            "row_index": self.row_index,
            "customer_id": self.customer_id,
            "customer": self.customer.to_dict() if self.customer else None,
            "name": self.name,
            "phone": self.phone,
            "quantity": self.quantity,
            "weight": str(self.weight) if self.weight is not None else None,
            "courier": self.courier,
            "remainder": self.remainder,
            "status": self.status.value,
            "warning_flags": [flag.value for flag in self.warning_flags],
            "original_raw_row": self.original_raw_row,
            "pricing": self.pricing.to_dict(),
            "created_by": self.created_by,
            "created_at": self.created_at.isoformat(),
        }


@dataclass(frozen=True)
class ShipmentBatch:
    """Everything a session hands to the store on commit."""

    session_id: str
    records: tuple[ShipmentRecord, ...]
    created_by: str
    source_text: str
    committed_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "session_id": self.session_id,
            "committed_at": self.committed_at.isoformat(),
            "created_by": self.created_by,
            "record_count": len(self.records),
            "records": [record.to_dict() for record in self.records],
            "source_text": self.source_text,
        }
