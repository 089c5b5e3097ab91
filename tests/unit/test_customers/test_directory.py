#!/usr/bin/env python3
"""Tests for customer models and directories."""

from decimal import Decimal

import pytest

from cargo_intake.customers.directory import CsvCustomerDirectory, InMemoryCustomerDirectory
from cargo_intake.customers.models import Customer, CustomerSnapshot


@pytest.mark.unit
class TestCustomerFromDict:
    def test_full_row(self):
        customer = Customer.from_dict(
            {
                "id": "cust-9",
                "name": " 김철수 ",
                "phone": "010-1234-5678",
                "region": "Phnom Penh",
                "is_active": "yes",
                "discount_percent": "7.5",
                "discount_info": "long term",
                "pod_code": "12.0",
            }
        )

        assert customer.name == "김철수"
        assert customer.is_active
        assert customer.discount_percent == Decimal("7.5")
        assert customer.pod_code == 12

    def test_blank_values_become_none(self):
        customer = Customer.from_dict({"id": 3, "name": "Park", "phone": " ", "discount_percent": ""})

        assert customer.id == "3"
        assert customer.phone is None
        assert customer.discount_percent is None
        assert customer.is_active

    @pytest.mark.parametrize("value,expected", [("false", False), ("0", False), ("", True), ("TRUE", True)])
    def test_is_active_parsing(self, value, expected):
        assert Customer.from_dict({"id": "1", "name": "A", "is_active": value}).is_active is expected


@pytest.mark.unit
class TestCustomerSnapshot:
    def test_capture_copies_identity(self, lee_customer):
        snapshot = CustomerSnapshot.capture(lee_customer, Decimal("0.1"))

        assert snapshot.id == "cust-001"
        assert snapshot.name == "Rev. Lee Han-na (Siem Reap)"
        assert snapshot.pod_code == 101
        assert snapshot.address == "Street 63, Siem Reap"
        assert snapshot.discount_rate == Decimal("0.1")
        assert snapshot.to_dict()["discount_rate"] == "0.1"

    def test_address_falls_back_to_region(self):
        customer = Customer(id="c", name="A", region="Kampot")
        assert CustomerSnapshot.capture(customer, Decimal(0)).address == "Kampot"


@pytest.mark.unit
class TestDirectories:
    def test_in_memory_filters_inactive(self, sample_customers):
        directory = InMemoryCustomerDirectory(sample_customers)

        ids = [c.id for c in directory.list_active_customers()]

        assert ids == ["cust-001", "cust-002", "cust-003"]

    def test_csv_directory(self, customers_csv):
        directory = CsvCustomerDirectory(customers_csv)

        all_customers = directory.load()
        active = directory.list_active_customers()

        assert len(all_customers) == 3
        assert [c.id for c in active] == ["cust-001", "cust-002"]
        assert active[0].discount_percent == Decimal("10")
        assert active[0].pod_code == 101
        assert active[1].discount_percent is None

    def test_csv_missing_file(self, temp_dir):
        with pytest.raises(FileNotFoundError):
            CsvCustomerDirectory(temp_dir / "nope.csv").load()

    def test_csv_missing_columns(self, temp_dir):
        path = temp_dir / "bad.csv"
        path.write_text("name,phone\nA,010-1111-2222\n", encoding="utf-8")

        with pytest.raises(ValueError, match="missing columns: id"):
            CsvCustomerDirectory(path).load()

    def test_csv_skips_rows_without_name(self, temp_dir):
        path = temp_dir / "partial.csv"
        path.write_text("id,name\n1,Kim\n2,\n", encoding="utf-8")

        assert [c.id for c in CsvCustomerDirectory(path).load()] == ["1"]
