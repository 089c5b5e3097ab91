#!/usr/bin/env python3
"""
Packing List Domain Models

Type-safe models for rows pasted from a spreadsheet packing list.
"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Any


class RowFormat(Enum):
    """How cells are delimited in the pasted text."""

    TAB = "tab"  # Copied from a spreadsheet grid
    SPACE = "space"  # Typed or copied from plain text (runs of 2+ spaces)


@dataclass(frozen=True)
class TokenizedRow:
    """One non-ghost row split into trimmed, non-empty cells."""

    row_index: int  # 1-based position among the non-ghost lines
    cells: tuple[str, ...]

    @property
    def text(self) -> str:
        """All cells joined with single spaces."""
        return " ".join(self.cells)


@dataclass(frozen=True)
class ParseWarning:
    """Non-fatal problem with one row; the batch continues."""

    row_index: int | None
    message: str

    def __str__(self) -> str:
        if self.row_index is None:
            return self.message
        return f"Row {self.row_index}: {self.message}"


@dataclass(frozen=True)
class ParsedItem:
    """
    One reconciled packing-list row.

    Created by the field extractor and never mutated afterwards; corrections
    made during review live on the staging row instead.
    """

    row_index: int
    raw_cells: tuple[str, ...]
    name: str
    phone: str | None = None
    region: str | None = None
    courier: str | None = None
    quantity: int = 1
    weight: Decimal | None = None
    remainder: str | None = None

    @property
    def raw_text(self) -> str:
        """Original row as tab-joined cells (kept for audit)."""
        return "\t".join(self.raw_cells)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "row_index": self.row_index,
            "raw_cells": list(self.raw_cells),
            "name": self.name,
            "phone": self.phone,
            "region": self.region,
            "courier": self.courier,
            "quantity": self.quantity,
            "weight": str(self.weight) if self.weight is not None else None,
            "remainder": self.remainder,
        }


@dataclass
class ParseResult:
    """
    Outcome of parsing one pasted batch.

    success is False only when nothing survived ghost-row filtering. A batch
    whose rows were all dropped is still a success, with one warning per row.
    """

    success: bool
    items: list[ParsedItem] = field(default_factory=list)
    detected_format: RowFormat = RowFormat.TAB
    has_header: bool = False
    headers: tuple[str, ...] | None = None
    warnings: list[ParseWarning] = field(default_factory=list)
    rows_attempted: int = 0
    cancelled: bool = False

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def dropped_count(self) -> int:
        """Rows attempted but dropped for lack of a name."""
        return self.rows_attempted - len(self.items)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "items": [item.to_dict() for item in self.items],
            "detected_format": self.detected_format.value,
            "has_header": self.has_header,
            "headers": list(self.headers) if self.headers else None,
            "warnings": [str(w) for w in self.warnings],
            "rows_attempted": self.rows_attempted,
            "cancelled": self.cancelled,
        }
