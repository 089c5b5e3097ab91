#!/usr/bin/env python3
"""
Row Tokenizer

Splits pasted spreadsheet text into rows and cells.

- Ghost rows (blank, or only spaces/commas/tabs) are dropped silently
- Tab-delimited text is detected; otherwise cells are split on 2+ spaces
- The first row is a header when any cell mentions a header keyword
"""

import re
from collections.abc import Iterator
from dataclasses import dataclass, field

from ..core.rules import IntakeRules
from .models import ParseWarning, RowFormat, TokenizedRow

GHOST_ROW_PATTERN = re.compile(r"^[\s,\t]*$")
MULTI_SPACE_PATTERN = re.compile(r"\s{2,}")


def is_ghost_row(line: str) -> bool:
    """Check whether a line carries no data (empty, or only whitespace/commas/tabs)."""
    return GHOST_ROW_PATTERN.match(line) is not None


def split_cells(line: str) -> tuple[str, ...]:
    """
    Split one row into trimmed, non-empty cells.

    Rows containing a tab are split on tabs; any other row is split on runs
    of two or more whitespace characters, so "Lee Han-na" stays one cell.
    """
    if "\t" in line:
        parts = line.split("\t")
    else:
        parts = MULTI_SPACE_PATTERN.split(line)
    return tuple(part.strip() for part in parts if part.strip())


@dataclass
class TokenizedText:
    """
    Pasted text after ghost-row filtering and header detection.

    Data rows are split lazily by iter_rows() so the parse loop can yield
    between batches without paying for the whole paste up front.
    """

    lines: list[str]
    detected_format: RowFormat
    has_header: bool
    headers: tuple[str, ...] | None
    warnings: list[ParseWarning] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        """True when nothing survived ghost-row filtering."""
        return not self.lines

    @property
    def data_start(self) -> int:
        """Index into lines of the first data row."""
        return 1 if self.has_header else 0

    @property
    def data_row_count(self) -> int:
        return max(0, len(self.lines) - self.data_start)

    def iter_rows(self, start: int = 0) -> Iterator[TokenizedRow]:
        """
        Yield data rows in input order.

        Args:
            start: Number of data rows to skip (resume point)
        """
        for i in range(self.data_start + start, len(self.lines)):
            yield TokenizedRow(row_index=i + 1, cells=split_cells(self.lines[i]))


def tokenize(raw_text: str, rules: IntakeRules) -> TokenizedText:
    """
    Filter ghost rows and detect format and header.

    Never raises: empty input and header-only input come back with a warning.

    Args:
        raw_text: Text pasted from a spreadsheet
        rules: Intake rules providing the header keywords

    Returns:
        TokenizedText ready for field extraction
    """
    lines = [line.strip() for line in raw_text.strip().splitlines()]
    lines = [line for line in lines if not is_ghost_row(line)]

    detected_format = RowFormat.TAB if "\t" in raw_text else RowFormat.SPACE

    if not lines:
        return TokenizedText(
            lines=[],
            detected_format=detected_format,
            has_header=False,
            headers=None,
            warnings=[ParseWarning(None, "No data: input is empty after removing blank rows")],
        )

    first_row = split_cells(lines[0])
    has_header = any(rules.is_header_cell(cell) for cell in first_row)

    tokenized = TokenizedText(
        lines=lines,
        detected_format=detected_format,
        has_header=has_header,
        headers=first_row if has_header else None,
    )

    if tokenized.data_row_count == 0:
        tokenized.warnings.append(ParseWarning(None, "No data rows below the header"))

    return tokenized
