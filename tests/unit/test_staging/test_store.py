#!/usr/bin/env python3
"""Tests for the JSON shipment store."""

import pytest

from cargo_intake.core.money import Money
from cargo_intake.pricing.calculator import AdjustmentNotFoundError
from cargo_intake.pricing.models import AdjustmentType, ManualAdjustment
from cargo_intake.staging.session import StagingSession
from cargo_intake.staging.store import JsonShipmentStore


@pytest.fixture
def store(temp_dir):
    return JsonShipmentStore(temp_dir / "shipments")


@pytest.fixture
def committed(store, scenario_paste, lee_customer):
    """A committed scenario batch; row 1 priced at 1.8 CBM."""
    session = StagingSession(session_id="stg-store")
    session.load_text(scenario_paste)
    session.match([lee_customer])
    session.pricing_for(1).update_volume("1.8")
    session.mark_reviewed()
    return session.commit(store, created_by="admin")


def record_pricing(store, session_id, row_index):
    data = store.load_batch(session_id)
    record = next(r for r in data["records"] if r["row_index"] == row_index)
    return record["pricing"]


@pytest.mark.staging
class TestJsonShipmentStore:
    def test_save_and_load(self, store, committed):
        assert store.exists("stg-store")
        assert store.list_batches() == ["stg-store"]

        data = store.load_batch("stg-store")

        assert data["session_id"] == "stg-store"
        assert data["record_count"] == 2
        assert data["created_by"] == "admin"
        first = data["records"][0]
        assert first["customer_id"] == "cust-001"
        assert first["customer"]["pod_code"] == 101
        assert first["pricing"]["final_total_cents"] == 16200
        assert first["warning_flags"] == ["duplicate_phone"]

    def test_duplicate_save_rejected(self, store, committed):
        with pytest.raises(FileExistsError):
            store.save_batch(committed)

    def test_load_missing(self, store):
        with pytest.raises(FileNotFoundError):
            store.load_batch("stg-nope")
        assert store.list_batches() == []

    def test_invalid_batch_file(self, store):
        store.shipments_dir.mkdir(parents=True)
        store.batch_path("stg-bad").write_text("[1, 2]", encoding="utf-8")

        with pytest.raises(ValueError, match="expected dict"):
            store.load_batch("stg-bad")

    def test_add_and_remove_adjustment(self, store, committed):
        shipment_id = committed.records[0].id
        adjustment = ManualAdjustment.create(
            AdjustmentType.DAMAGE_DISCOUNT, Money.from_dollars(-50), "Crushed box", "admin"
        )

        store.add_adjustment(shipment_id, adjustment)

        pricing = record_pricing(store, "stg-store", 1)
        assert pricing["auto_total_cents"] == 16200
        assert pricing["manual_total_cents"] == -5000
        assert pricing["final_total_cents"] == 11200
        assert pricing["manual_adjustments"][0]["id"] == adjustment.id

        store.remove_adjustment(shipment_id, adjustment.id)

        pricing = record_pricing(store, "stg-store", 1)
        assert pricing["manual_adjustments"] == []
        assert pricing["final_total_cents"] == 16200

    def test_other_records_untouched(self, store, committed):
        adjustment = ManualAdjustment.create(AdjustmentType.SPECIAL_FEE, Money.from_dollars(10), "Stairs")

        store.add_adjustment(committed.records[0].id, adjustment)

        assert record_pricing(store, "stg-store", 2)["manual_adjustments"] == []

    def test_unknown_shipment(self, store, committed):
        adjustment = ManualAdjustment.create(AdjustmentType.OTHER, Money.from_dollars(-1), "x")

        with pytest.raises(KeyError):
            store.add_adjustment("shp-missing", adjustment)

    def test_unknown_adjustment(self, store, committed):
        with pytest.raises(AdjustmentNotFoundError):
            store.remove_adjustment(committed.records[0].id, "adj-missing")
