#!/usr/bin/env python3
"""
Field Extractor

Classifies the cells of one packing-list row into semantic fields.

Cells are visited left to right and the first rule that accepts a cell
consumes it:

1. courier   - courier dictionary hit (first one only)
2. quantity  - integer in [min_quantity, max_quantity] (first one only)
3. weight    - decimal in (0, max_weight) (first one only)
4. phone     - any phone-shaped substring (first one kept, later ones consumed)
5. name      - first cell that looks like a person; "(Region)" suffix -> region
6. remainder - everything after the name, space-joined

Typical rows look like "[courier] [qty] [name] [weight] [phone]" but no
column order is assumed.
"""

import logging
import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation

from ..core.rules import IntakeRules
from .models import ParsedItem, TokenizedRow

logger = logging.getLogger(__name__)

QUANTITY_PATTERN = re.compile(r"^\d+$")
NUMERIC_PATTERN = re.compile(r"^\d+\.?\d*$")
REGION_PATTERN = re.compile(r"\(([^)]+)\)")


@dataclass
class _RowFields:
    """Working state while classifying one row."""

    courier: str | None = None
    quantity: int = 1
    quantity_set: bool = False
    weight: Decimal | None = None
    phone: str | None = None
    name: str | None = None
    region: str | None = None
    remainder: list[str] = field(default_factory=list)


def is_numeric(cell: str) -> bool:
    """Check for a plain number such as "12" or "150.0"."""
    return NUMERIC_PATTERN.match(cell) is not None


class FieldExtractor:
    """Pattern-based cell classifier for packing-list rows."""

    def __init__(self, rules: IntakeRules):
        """
        Initialize the extractor.

        Args:
            rules: Courier names, phone patterns and name heuristics to apply
        """
        self.rules = rules

    def extract(self, row: TokenizedRow) -> ParsedItem | None:
        """
        Classify every cell of a row.

        Args:
            row: Tokenized data row

        Returns:
            ParsedItem, or None when no cell can serve as a name
        """
        fields = _RowFields()

        for cell in row.cells:
            self._classify_cell(cell, fields)

        if fields.name is None:
            fields.name = self._fallback_name(row.cells)

        if fields.phone is None:
            # A phone number may have been split across two cells
            fields.phone = self.rules.extract_phone(row.text)

        if not fields.name:
            logger.debug("Row %d: no name among cells %s", row.row_index, row.cells)
            return None

        return ParsedItem(
            row_index=row.row_index,
            raw_cells=row.cells,
            name=fields.name,
            phone=fields.phone,
            region=fields.region,
            courier=fields.courier,
            quantity=fields.quantity,
            weight=fields.weight,
            remainder=" ".join(fields.remainder) or None,
        )

    def _classify_cell(self, cell: str, fields: _RowFields) -> None:
        """Apply the precedence rules to one cell."""
        if fields.courier is None and self.rules.is_courier(cell):
            fields.courier = cell
            return

        if not fields.quantity_set and QUANTITY_PATTERN.match(cell):
            quantity = int(cell)
            if self.rules.min_quantity <= quantity <= self.rules.max_quantity:
                fields.quantity = quantity
                fields.quantity_set = True
                return

        if fields.weight is None and is_numeric(cell):
            weight = _parse_weight(cell)
            if weight is not None and Decimal(0) < weight < self.rules.max_weight:
                fields.weight = weight
                return

        phone = self.rules.extract_phone(cell)
        if phone:
            # Only the first phone is kept, but every phone cell is consumed
            if fields.phone is None:
                fields.phone = phone
            elif fields.name is not None:
                fields.remainder.append(cell)
            return

        if fields.name is None and self._looks_like_name(cell):
            fields.name = cell
            region = REGION_PATTERN.search(cell)
            if region:
                fields.region = region.group(1).strip()
            return

        if fields.name is not None:
            fields.remainder.append(cell)

    def _looks_like_name(self, cell: str) -> bool:
        if len(cell) < 2 or is_numeric(cell) or self.rules.is_courier(cell):
            return False
        return self.rules.looks_like_name_script(cell) or len(cell) >= 3

    def _fallback_name(self, cells: tuple[str, ...]) -> str | None:
        """First non-numeric, non-courier, non-phone cell."""
        for cell in cells:
            if (
                cell
                and not is_numeric(cell)
                and not self.rules.is_courier(cell)
                and self.rules.extract_phone(cell) is None
            ):
                return cell
        return None


def _parse_weight(cell: str) -> Decimal | None:
    try:
        return Decimal(cell)
    except InvalidOperation:
        return None
