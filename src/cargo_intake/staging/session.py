#!/usr/bin/env python3
"""
Staging Session

Review-before-commit workflow for one pasted packing list.

    EMPTY --parse--> PARSED --mark_reviewed--> REVIEWED --commit--> COMMITTED
      \\                \\                         \\
       +----------------+-------------------------+--abandon--> ABANDONED

Rows are matched and edited while PARSED. A failed commit leaves the session
REVIEWED so it can be retried. Counters are adjusted per row change rather
than recounted.
"""

import logging
import uuid
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..core.money import Money
from ..core.rules import DEFAULT_RULES, IntakeRules
from ..customers.models import Customer, CustomerSnapshot
from ..matching.grouper import detect_duplicate_groups
from ..matching.matcher import MultiFactorMatcher
from ..matching.models import DuplicateGroup, MatchResult, MatchStatus
from ..matching.normalizer import is_valid_phone, phones_match, tidy_name
from ..packing.models import ParsedItem, ParseResult, ParseWarning
from ..packing.parser import DEFAULT_BATCH_SIZE, ParseTask
from ..pricing.calculator import (
    DEFAULT_UNIT_PRICE,
    ShipmentPricing,
    build_pricing_layer,
    extract_master_discount,
)
from .models import (
    SessionState,
    ShipmentBatch,
    ShipmentRecord,
    StagingRow,
    StagingStats,
    WarningFlag,
)
from .store import ShipmentStore

logger = logging.getLogger(__name__)


class SessionStateError(Exception):
    """Raised when an operation isn't allowed in the session's current state"""

    pass


class UnknownRowError(KeyError):
    """Raised when a row index doesn't exist in the session"""

    pass


class StagingSession:
    """
    One import batch under review.

    Example:
        >>> session = StagingSession()
        >>> session.load_text(pasted)
        >>> session.match(directory.list_active_customers())
        >>> session.mark_reviewed()
        >>> batch = session.commit(store, created_by="admin")
    """

    def __init__(
        self,
        rules: IntakeRules = DEFAULT_RULES,
        unit_price: Money = DEFAULT_UNIT_PRICE,
        batch_size: int = DEFAULT_BATCH_SIZE,
        matcher: MultiFactorMatcher | None = None,
        session_id: str | None = None,
    ):
        """
        Initialize an empty session.

        Args:
            rules: Intake rules for parsing and discount lookup
            unit_price: Price per CBM for row pricing
            batch_size: Rows per cooperative parse step
            matcher: Customer matcher (default thresholds if None)
            session_id: Fixed id (a random one if None)
        """
        self.id = session_id or f"stg-{uuid.uuid4().hex[:12]}"
        self.rules = rules
        self.unit_price = unit_price
        self.batch_size = batch_size
        self.matcher = matcher or MultiFactorMatcher()

        self.state = SessionState.EMPTY
        self.raw_text = ""
        self.rows: list[StagingRow] = []
        self.stats = StagingStats()
        self.duplicate_groups: list[DuplicateGroup] = []
        self.warnings: list[ParseWarning] = []
        self.parse_result: ParseResult | None = None

        self.created_at = datetime.now()
        self.updated_at = self.created_at

        self._task: ParseTask | None = None
        self._by_index: dict[int, StagingRow] = {}
        self._customers: list[Customer] = []

    # Parsing

    def begin_parse(self, raw_text: str) -> ParseTask:
        """
        Start parsing pasted text without blocking.

        Step or iterate the returned task, then call finish_parse(). Cancelling
        the task and finishing keeps the rows parsed so far.
        """
        self._require(SessionState.EMPTY)
        self.raw_text = raw_text
        self._task = ParseTask(raw_text, self.rules, batch_size=self.batch_size)
        return self._task

    def finish_parse(self) -> ParseResult:
        """
        Build staging rows from the parse task and enter PARSED.

        Empty input leaves the session EMPTY, so another paste can be loaded.
        """
        self._require(SessionState.EMPTY)
        if self._task is None:
            raise SessionStateError("finish_parse() called before begin_parse()")

        result = self._task.result()
        self._task = None
        self.parse_result = result
        self.warnings = list(result.warnings)

        if not result.success:
            logger.warning("Session %s: nothing to stage (%s)", self.id, "; ".join(map(str, result.warnings)))
            self.raw_text = ""
            return result

        self.rows = [StagingRow.from_item(item) for item in result.items]
        self._by_index = {row.row_index: row for row in self.rows}
        self.stats = StagingStats(total=len(self.rows))

        self._apply_groups(detect_duplicate_groups(result.items))

        self._transition(SessionState.PARSED)
        logger.info(
            "Session %s parsed %d rows (%d dropped, %d duplicate groups)",
            self.id,
            len(self.rows),
            result.dropped_count,
            len(self.duplicate_groups),
        )
        return result

    def load_text(self, raw_text: str) -> ParseResult:
        """Parse pasted text to completion."""
        task = self.begin_parse(raw_text)
        for _ in task:
            pass
        return self.finish_parse()

    # Matching and review edits

    def match(self, customers: Iterable[Customer]) -> list[MatchResult]:
        """
        Match every row against a customer snapshot.

        The snapshot is kept so edited rows can be re-matched.
        """
        self._require(SessionState.PARSED)
        self._customers = [c for c in customers if c.is_active]

        results = []
        for row in self.rows:
            results.append(self._match_row(row))

        self._touch()
        logger.info("Session %s matched: %s", self.id, self.stats.to_dict())
        return results

    def edit_row(
        self,
        row_index: int,
        name: str | None = None,
        phone: str | None = None,
        quantity: int | None = None,
    ) -> StagingRow:
        """
        Correct a row's name, phone or quantity.

        An edit drops any manual link; matched sessions re-match the row.
        A phone edit regroups duplicate phones from the edited values.
        """
        self._require(SessionState.PARSED)
        row = self.get_row(row_index)
        if quantity is not None and not self.rules.min_quantity <= quantity <= self.rules.max_quantity:
            raise ValueError(
                f"Quantity {quantity} outside [{self.rules.min_quantity}, {self.rules.max_quantity}]"
            )

        def apply() -> None:
            if name is not None:
                row.edited_name = name
            if phone is not None:
                row.edited_phone = phone or None
            if quantity is not None:
                row.edited_quantity = quantity
            row.is_resolved = False

        self._update(row, apply)
        if phone is not None:
            self._apply_groups(detect_duplicate_groups([_with_edits(r) for r in self.rows]))
        if row.match is not None:
            self._match_row(row)

        self._touch()
        return row

    def link_customer(
        self, row_index: int, customer: Customer, apply_to_group: bool = False
    ) -> list[StagingRow]:
        """
        Link a row to a customer chosen by the user.

        Args:
            row_index: Row to link
            customer: Chosen customer (typically a similar candidate)
            apply_to_group: Also link every row sharing this row's phone

        Returns:
            Rows that were linked
        """
        self._require(SessionState.PARSED)
        row = self.get_row(row_index)

        targets = [row]
        group = self.group_for(row_index) if apply_to_group else None
        if group is not None:
            targets = [self._by_index[i] for i in group.member_row_indices]

        for target in targets:
            self._link(target, customer, resolved=True)

        logger.info(
            "Session %s: linked rows %s to customer %s",
            self.id,
            [t.row_index for t in targets],
            customer.id,
        )
        self._touch()
        return targets

    def mark_untracked(self, row_index: int, untracked: bool = True) -> StagingRow:
        """Flag a row as agency cargo (or clear the flag). Untracked rows get no discount."""
        self._require(SessionState.PARSED)
        row = self.get_row(row_index)

        def apply() -> None:
            row.is_untracked = untracked

        self._update(row, apply)
        self._sync_pricing(row)
        self._touch()
        return row

    def archive_row(self, row_index: int, archived: bool = True) -> StagingRow:
        """Hide a row from the commit (or bring it back)."""
        self._require(SessionState.PARSED)
        row = self.get_row(row_index)

        def apply() -> None:
            row.is_archived = archived

        self._update(row, apply)
        self._touch()
        return row

    def pricing_for(self, row_index: int) -> ShipmentPricing:
        """
        Price holder for a row, created on first use.

        Only available before commit; committed prices change through the
        shipment store.
        """
        self._require(SessionState.PARSED, SessionState.REVIEWED)
        row = self.get_row(row_index)
        if row.pricing is None:
            row.pricing = ShipmentPricing(
                _pricing_customer(row),
                unit_price=self.unit_price,
                rules=self.rules,
            )
        return row.pricing

    def mark_reviewed(self) -> None:
        """
        Finish review.

        Raises:
            SessionStateError: If any row still lacks a match result
        """
        self._require(SessionState.PARSED)
        unmatched = [row.row_index for row in self.rows if row.match is None and not row.is_untracked]
        if unmatched:
            raise SessionStateError(f"Rows not matched yet: {unmatched}")
        self._transition(SessionState.REVIEWED)

    # Commit

    def commit(self, store: ShipmentStore, created_by: str = "system") -> ShipmentBatch:
        """
        Hand the reviewed batch to the store.

        Archived rows are left out. If the store raises, the session stays
        REVIEWED and the error propagates.
        """
        self._require(SessionState.REVIEWED)
        batch = self.build_batch(created_by)

        try:
            store.save_batch(batch)
        except Exception:
            logger.warning("Session %s: store rejected batch, staying %s", self.id, self.state.name)
            raise

        self._transition(SessionState.COMMITTED)
        logger.info("Session %s committed %d shipments", self.id, len(batch.records))
        return batch

    def build_batch(self, created_by: str = "system") -> ShipmentBatch:
        """Build shipment records, capturing customer snapshots now."""
        records = tuple(
            self._build_record(row, created_by) for row in self.rows if not row.is_archived
        )
        return ShipmentBatch(
            session_id=self.id,
            records=records,
            created_by=created_by,
            source_text=self.raw_text,
        )

    def abandon(self) -> None:
        """Discard the batch. Allowed from any non-terminal state."""
        if self.state.is_terminal:
            raise SessionStateError(f"Cannot abandon a {self.state.name} session")
        self._transition(SessionState.ABANDONED)

    # Lookup

    def get_row(self, row_index: int) -> StagingRow:
        try:
            return self._by_index[row_index]
        except KeyError:
            raise UnknownRowError(row_index) from None

    def group_for(self, row_index: int) -> DuplicateGroup | None:
        """Duplicate group containing a row, if any."""
        row = self.get_row(row_index)
        for group in self.duplicate_groups:
            if group.phone == row.duplicate_phone:
                return group
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "state": self.state.value,
            "stats": self.stats.to_dict(),
            "rows": [row.to_dict() for row in self.rows],
            "duplicate_groups": [group.to_dict() for group in self.duplicate_groups],
            "warnings": [str(w) for w in self.warnings],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    # Internals

    def _match_row(self, row: StagingRow) -> MatchResult:
        item = row.item
        if row.is_edited:
            item = _with_edits(row)
        result = self.matcher.match(item, self._customers)

        def apply() -> None:
            row.match = result
            row.is_resolved = False
            row.linked_customer = (
                result.matched_customer if result.status == MatchStatus.VERIFIED else None
            )
            self._refresh_flags(row)

        self._update(row, apply)
        self._sync_pricing(row)
        return result

    def _link(self, row: StagingRow, customer: Customer, resolved: bool) -> None:
        def apply() -> None:
            row.linked_customer = customer
            row.is_resolved = resolved
            self._refresh_flags(row)

        self._update(row, apply)
        self._sync_pricing(row)

    def _sync_pricing(self, row: StagingRow) -> None:
        if row.pricing is not None:
            row.pricing.change_customer(_pricing_customer(row))

    def _apply_groups(self, groups: list[DuplicateGroup]) -> None:
        """Replace duplicate group membership and DUPLICATE_PHONE flags."""
        self.duplicate_groups = groups
        for row in self.rows:
            row.duplicate_phone = None
            row.warning_flags = [f for f in row.warning_flags if f != WarningFlag.DUPLICATE_PHONE]

        for group in groups:
            for row_index in group.member_row_indices:
                row = self._by_index[row_index]
                row.duplicate_phone = group.phone
                row.warning_flags.append(WarningFlag.DUPLICATE_PHONE)

    def _refresh_flags(self, row: StagingRow) -> None:
        flags = [f for f in row.warning_flags if f != WarningFlag.PHONE_MISMATCH]
        customer = row.linked_customer
        if (
            customer is not None
            and is_valid_phone(row.edited_phone)
            and is_valid_phone(customer.phone)
            and not phones_match(row.edited_phone, customer.phone)
        ):
            flags.insert(0, WarningFlag.PHONE_MISMATCH)
        row.warning_flags = flags

    def _update(self, row: StagingRow, apply: Callable[[], None]) -> None:
        """Apply a change to a row and move it between counters."""
        before = StagingStats.counter_for(row)
        apply()
        self.stats.shift(before, StagingStats.counter_for(row))

    def _build_record(self, row: StagingRow, created_by: str) -> ShipmentRecord:
        customer = _pricing_customer(row)
        rate, _ = extract_master_discount(customer, self.rules)
        snapshot = CustomerSnapshot.capture(customer, rate) if customer else None

        if row.pricing is not None:
            # The record owns copies of the adjustment and history lists
            layer = row.pricing.pricing
            pricing = replace(
                layer,
                manual_adjustments=list(layer.manual_adjustments),
                price_history=list(layer.price_history),
            )
        else:
            pricing = build_pricing_layer(0, self.unit_price, customer, [], rules=self.rules)

        status = row.status
        if status is None:
            raise SessionStateError(f"Row {row.row_index} has no status")

        return ShipmentRecord(
            id=f"shp-{uuid.uuid4().hex[:12]}",
            session_id=self.id,
            row_index=row.row_index,
            customer_id=customer.id if customer else None,
            customer=snapshot,
            name=snapshot.name if snapshot else tidy_name(row.edited_name),
            phone=row.edited_phone,
            quantity=row.edited_quantity,
            weight=row.item.weight,
            courier=row.item.courier,
            remainder=row.item.remainder,
            status=status,
            warning_flags=tuple(row.warning_flags),
            original_raw_row=row.item.raw_text,
            pricing=pricing,
            created_by=created_by,
        )

    def _require(self, *states: SessionState) -> None:
        if self.state not in states:
            allowed = ", ".join(s.name for s in states)
            raise SessionStateError(f"Session is {self.state.name}; expected {allowed}")

    def _transition(self, state: SessionState) -> None:
        logger.debug("Session %s: %s -> %s", self.id, self.state.name, state.name)
        self.state = state
        self._touch()

    def _touch(self) -> None:
        self.updated_at = datetime.now()


def _pricing_customer(row: StagingRow) -> Customer | None:
    """Customer whose discount prices the row; untracked rows have none."""
    return None if row.is_untracked else row.linked_customer


def _with_edits(row: StagingRow) -> ParsedItem:
    """Parsed item with the row's corrections applied, for re-matching."""
    return replace(
        row.item,
        name=row.edited_name,
        phone=row.edited_phone,
        quantity=row.edited_quantity,
    )
