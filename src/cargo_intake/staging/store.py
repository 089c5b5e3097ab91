#!/usr/bin/env python3
"""
Shipment Store

Persistence for committed batches and later adjustment edits.

ShipmentStore is the protocol the staging session commits through;
JsonShipmentStore keeps one pretty-printed JSON file per committed batch:

    <data_dir>/shipments/<session_id>.json
"""

import logging
from pathlib import Path
from typing import Any, Protocol

from ..core.json_utils import read_json, write_json
from ..core.money import Money
from ..pricing.calculator import AdjustmentNotFoundError, calculate_pricing
from ..pricing.models import ManualAdjustment
from .models import ShipmentBatch

logger = logging.getLogger(__name__)


class ShipmentStore(Protocol):
    """
    Protocol for shipment persistence.

    Implementations raise on failure; callers must not assume partial writes.
    """

    def save_batch(self, batch: ShipmentBatch) -> None:
        """
        Persist a committed batch.

        Args:
            batch: Records with customer snapshots and final pricing
        """
        ...

    def add_adjustment(self, shipment_id: str, adjustment: ManualAdjustment) -> None:
        """
        Attach a manual adjustment to a stored shipment.

        Raises:
            KeyError: If the shipment doesn't exist
        """
        ...

    def remove_adjustment(self, shipment_id: str, adjustment_id: str) -> None:
        """
        Remove one manual adjustment from a stored shipment.

        Raises:
            KeyError: If the shipment or adjustment doesn't exist
        """
        ...


class JsonShipmentStore:
    """
    JSON-file implementation of ShipmentStore.

    Totals are re-derived from the stored volume, unit price and discount
    rate whenever the adjustment list changes.
    """

    def __init__(self, shipments_dir: Path):
        """
        Initialize the store.

        Args:
            shipments_dir: Directory holding one JSON file per batch
        """
        self.shipments_dir = shipments_dir

    def batch_path(self, session_id: str) -> Path:
        return self.shipments_dir / f"{session_id}.json"

    def exists(self, session_id: str) -> bool:
        return self.batch_path(session_id).exists()

    def save_batch(self, batch: ShipmentBatch) -> None:
        path = self.batch_path(batch.session_id)
        if path.exists():
            raise FileExistsError(f"Batch already committed: {path}")

        write_json(path, batch.to_dict())
        logger.info("Saved %d shipments to %s", len(batch.records), path)

    def load_batch(self, session_id: str) -> dict[str, Any]:
        """
        Load a stored batch as a dict.

        Raises:
            FileNotFoundError: If the batch doesn't exist
        """
        path = self.batch_path(session_id)
        if not path.exists():
            raise FileNotFoundError(f"Shipment batch not found: {path}")

        data = read_json(path)
        if not isinstance(data, dict):
            raise ValueError(f"Invalid batch format in {path}: expected dict, got {type(data).__name__}")
        return data

    def list_batches(self) -> list[str]:
        """Session ids of all stored batches, oldest file name first."""
        if not self.shipments_dir.exists():
            return []
        return sorted(path.stem for path in self.shipments_dir.glob("*.json"))

    def add_adjustment(self, shipment_id: str, adjustment: ManualAdjustment) -> None:
        session_id, data, record = self._find_shipment(shipment_id)
        record["pricing"]["manual_adjustments"].append(adjustment.to_dict())
        _reprice(record["pricing"])

        write_json(self.batch_path(session_id), data)
        logger.info("Shipment %s: added adjustment %s (%s)", shipment_id, adjustment.id, adjustment.amount)

    def remove_adjustment(self, shipment_id: str, adjustment_id: str) -> None:
        session_id, data, record = self._find_shipment(shipment_id)
        adjustments = record["pricing"]["manual_adjustments"]

        remaining = [a for a in adjustments if a["id"] != adjustment_id]
        if len(remaining) == len(adjustments):
            raise AdjustmentNotFoundError(adjustment_id)

        record["pricing"]["manual_adjustments"] = remaining
        _reprice(record["pricing"])

        write_json(self.batch_path(session_id), data)
        logger.info("Shipment %s: removed adjustment %s", shipment_id, adjustment_id)

    def _find_shipment(self, shipment_id: str) -> tuple[str, dict[str, Any], dict[str, Any]]:
        """Locate a shipment record; returns (session id, batch data, record)."""
        for session_id in self.list_batches():
            data = self.load_batch(session_id)
            for record in data.get("records", []):
                if record.get("id") == shipment_id:
                    return session_id, data, record

        raise KeyError(f"Shipment not found: {shipment_id}")


def _reprice(pricing: dict[str, Any]) -> None:
    """Refresh the stored totals from the stored inputs and adjustments."""
    adjustments = [ManualAdjustment.from_dict(a) for a in pricing["manual_adjustments"]]
    breakdown = calculate_pricing(
        pricing["base_volume"],
        Money.from_cents(int(pricing["unit_price_cents"])),
        pricing["master_discount_rate"],
        adjustments,
    )
    pricing["base_amount_cents"] = breakdown.base_amount.to_cents()
    pricing["master_discount_amount_cents"] = breakdown.master_discount_amount.to_cents()
    pricing["auto_total_cents"] = breakdown.auto_total.to_cents()
    pricing["manual_total_cents"] = breakdown.manual_total.to_cents()
    pricing["final_total_cents"] = breakdown.final_total.to_cents()
