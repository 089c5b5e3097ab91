"""
Staging Package

Review-before-commit workflow for pasted packing lists.

This package provides:
- StagingSession: parse -> match -> review -> commit lifecycle
- Grid statuses, warning flags and incremental counters
- Shipment records with customer snapshots captured at commit
- ShipmentStore protocol and a JSON-file implementation
"""

from .models import (
    MATCH_TO_GRID,
    GridStatus,
    SessionState,
    ShipmentBatch,
    ShipmentRecord,
    StagingRow,
    StagingStats,
    WarningFlag,
)
from .session import SessionStateError, StagingSession, UnknownRowError
from .store import JsonShipmentStore, ShipmentStore

__all__ = [
    # Models
    "MATCH_TO_GRID",
    "GridStatus",
    "SessionState",
    "ShipmentBatch",
    "ShipmentRecord",
    "StagingRow",
    "StagingStats",
    "WarningFlag",
    # Session
    "SessionStateError",
    "StagingSession",
    "UnknownRowError",
    # Persistence
    "JsonShipmentStore",
    "ShipmentStore",
]
