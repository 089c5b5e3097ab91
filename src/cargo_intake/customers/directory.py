#!/usr/bin/env python3
"""
Customer Directory

Read-only access to the customer master ledger. The intake engine only ever
asks for the list of active customers; it never writes back.
"""

import logging
from pathlib import Path
from typing import Protocol

import pandas as pd

from .models import Customer

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("id", "name")


class CustomerDirectory(Protocol):
    """Protocol for customer master lookups."""

    def list_active_customers(self) -> list[Customer]:
        """
        Return every active customer, in a stable order.

        Returns:
            List of Customer records with phone, region and discount fields populated
        """
        ...


class InMemoryCustomerDirectory:
    """Customer directory backed by a list held in memory."""

    def __init__(self, customers: list[Customer]):
        self._customers = list(customers)

    def list_active_customers(self) -> list[Customer]:
        return [c for c in self._customers if c.is_active]


class CsvCustomerDirectory:
    """
    Customer directory loaded from a ledger CSV export.

    Expected columns: id, name, and optionally phone, region, is_active,
    discount_percent, discount_info, name_en, pod_code, address.
    """

    def __init__(self, csv_path: str | Path):
        """
        Initialize the directory.

        Args:
            csv_path: Path to the customer ledger CSV
        """
        self.csv_path = Path(csv_path)
        self._customers: list[Customer] | None = None

    def load(self) -> list[Customer]:
        """
        Load every customer row from the CSV.

        Raises:
            FileNotFoundError: If the CSV doesn't exist
            ValueError: If required columns are missing
        """
        if not self.csv_path.exists():
            raise FileNotFoundError(f"Customer ledger not found: {self.csv_path}")

        df = pd.read_csv(self.csv_path, dtype=str, keep_default_na=False, encoding="utf-8")

        missing = [col for col in REQUIRED_COLUMNS if col not in df.columns]
        if missing:
            raise ValueError(f"Customer ledger {self.csv_path} is missing columns: {', '.join(missing)}")

        customers = []
        for row in df.to_dict(orient="records"):
            if not str(row["id"]).strip() or not str(row["name"]).strip():
                logger.warning("Skipping ledger row without id or name: %s", row)
                continue
            customers.append(Customer.from_dict(row))

        logger.info("Loaded %d customers from %s", len(customers), self.csv_path)
        return customers

    def list_active_customers(self) -> list[Customer]:
        if self._customers is None:
            self._customers = self.load()
        return [c for c in self._customers if c.is_active]
