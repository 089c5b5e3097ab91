#!/usr/bin/env python3
"""
Packing List Parser

Runs tokenizer + field extractor over a pasted batch as a resumable task.

Large pastes are processed in batches (50 rows by default). After each batch
control returns to the caller, who can render progress, keep stepping, or
stop. Rows are always processed strictly in input order, and everything parsed
before a cancellation remains valid.

Example:
    >>> task = ParseTask(raw_text, DEFAULT_RULES)
    >>> for progress in task:
    ...     print(f"{progress.processed}/{progress.total}")
    >>> result = task.result()
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass

from ..core.rules import IntakeRules
from .extractor import FieldExtractor
from .models import ParsedItem, ParseResult, ParseWarning, TokenizedRow
from .tokenizer import tokenize

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 50


@dataclass(frozen=True)
class ParseProgress:
    """Checkpoint reported after each batch."""

    processed: int
    total: int
    parsed: int
    dropped: int

    @property
    def done(self) -> bool:
        return self.processed >= self.total


class ParseTask:
    """
    Cooperative, cancellable parse of one pasted batch.

    Output lists only ever grow; nothing already appended is revised.
    """

    def __init__(self, raw_text: str, rules: IntakeRules, batch_size: int = DEFAULT_BATCH_SIZE):
        """
        Initialize the task.

        Args:
            raw_text: Text pasted from a spreadsheet
            rules: Intake rules for tokenizing and extraction
            batch_size: Rows processed per step before yielding
        """
        if batch_size <= 0:
            raise ValueError(f"batch_size must be positive, got {batch_size}")

        self.batch_size = batch_size
        self._tokenized = tokenize(raw_text, rules)
        self._extractor = FieldExtractor(rules)
        self._rows: Iterator[TokenizedRow] = self._tokenized.iter_rows()

        self._items: list[ParsedItem] = []
        self._warnings: list[ParseWarning] = list(self._tokenized.warnings)
        self._processed = 0
        self._cancelled = False

    @property
    def total(self) -> int:
        """Number of data rows in the batch."""
        return self._tokenized.data_row_count

    @property
    def is_done(self) -> bool:
        return self._cancelled or self._processed >= self.total

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def step(self) -> ParseProgress:
        """
        Process up to batch_size rows.

        Returns:
            Progress after this step (a finished task returns its final progress)
        """
        if not self.is_done:
            for _ in range(self.batch_size):
                row = next(self._rows, None)
                if row is None:
                    break
                self._process_row(row)

        return self._progress()

    def cancel(self) -> None:
        """Stop before the next batch. Rows already parsed stay in the result."""
        if not self.is_done:
            logger.info("Parse cancelled after %d of %d rows", self._processed, self.total)
        self._cancelled = True

    def run(self) -> ParseResult:
        """Step until finished and return the result."""
        while not self.is_done:
            self.step()
        return self.result()

    def __iter__(self) -> Iterator[ParseProgress]:
        """Yield progress after each batch until done or cancelled."""
        while not self.is_done:
            yield self.step()

    def result(self) -> ParseResult:
        """
        Current result; partial when the task is cancelled or still running.

        Only empty input (nothing left after ghost-row filtering) is reported
        as unsuccessful.
        """
        return ParseResult(
            success=not self._tokenized.is_empty,
            items=list(self._items),
            detected_format=self._tokenized.detected_format,
            has_header=self._tokenized.has_header,
            headers=self._tokenized.headers,
            warnings=list(self._warnings),
            rows_attempted=self._processed,
            cancelled=self._cancelled and self._processed < self.total,
        )

    def _process_row(self, row: TokenizedRow) -> None:
        self._processed += 1
        item = self._extractor.extract(row)
        if item is None:
            logger.warning("Row %d dropped: no recognizable name", row.row_index)
            self._warnings.append(ParseWarning(row.row_index, "no recognizable name"))
            return
        self._items.append(item)

    def _progress(self) -> ParseProgress:
        return ParseProgress(
            processed=self._processed,
            total=self.total,
            parsed=len(self._items),
            dropped=self._processed - len(self._items),
        )


def parse_packing_list(
    raw_text: str, rules: IntakeRules, batch_size: int = DEFAULT_BATCH_SIZE
) -> ParseResult:
    """
    Parse a pasted packing list to completion.

    Args:
        raw_text: Text pasted from a spreadsheet
        rules: Intake rules for tokenizing and extraction
        batch_size: Rows per cooperative step

    Returns:
        ParseResult with items in input order
    """
    result = ParseTask(raw_text, rules, batch_size=batch_size).run()
    logger.info(
        "Parsed %d of %d rows (%s format, header=%s, %d warnings)",
        len(result.items),
        result.rows_attempted,
        result.detected_format.value,
        result.has_header,
        len(result.warnings),
    )
    return result
