#!/usr/bin/env python3
"""
Customer Domain Models

Read-only view of the customer master ledger plus the immutable snapshot
that is copied into committed shipment records.
"""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Any

from ..core.currency import to_decimal


@dataclass(frozen=True)
class Customer:
    """
    One customer master record.

    Owned by the customer directory; the intake engine never modifies it.
    """

    id: str
    name: str
    phone: str | None = None
    region: str | None = None
    is_active: bool = True

    # Discount fields: an explicit percentage wins over free-text info
    discount_percent: Decimal | None = None
    discount_info: str | None = None

    # Ledger extras
    name_en: str | None = None
    pod_code: int | None = None
    address: str | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Customer":
        """
        Create Customer from a ledger row dict.

        Blank strings are treated as missing values.
        """

        def text(key: str) -> str | None:
            value = data.get(key)
            if value is None:
                return None
            value = str(value).strip()
            return value or None

        discount = text("discount_percent")
        pod_code = text("pod_code")

        return cls(
            id=str(data["id"]),
            name=str(data["name"]).strip(),
            phone=text("phone"),
            region=text("region"),
            is_active=_parse_bool(data.get("is_active", True)),
            discount_percent=to_decimal(discount) if discount else None,
            discount_info=text("discount_info"),
            name_en=text("name_en"),
            pod_code=int(float(pod_code)) if pod_code else None,
            address=text("address"),
        )


@dataclass(frozen=True)
class CustomerSnapshot:
    """
    Customer identity captured at commit time.

    Committed shipments keep this copy, so later edits to the master ledger
    don't rewrite history.
    """

    id: str
    name: str
    pod_code: int | None
    phone: str | None
    region: str | None
    address: str | None
    discount_rate: Decimal
    captured_at: datetime = field(default_factory=datetime.now)

    @classmethod
    def capture(cls, customer: Customer, discount_rate: Decimal) -> "CustomerSnapshot":
        """Capture the current state of a customer record."""
        return cls(
            id=customer.id,
            name=customer.name,
            pod_code=customer.pod_code,
            phone=customer.phone,
            region=customer.region,
            address=customer.address or customer.region,
            discount_rate=discount_rate,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "pod_code": self.pod_code,
            "phone": self.phone,
            "region": self.region,
            "address": self.address,
            "discount_rate": str(self.discount_rate),
            "captured_at": self.captured_at.isoformat(),
        }


def _parse_bool(value: Any) -> bool:
    """Read spreadsheet-style booleans ("true", "1", "yes", "")."""
    if isinstance(value, bool):
        return value
    if value is None:
        return True
    text = str(value).strip().lower()
    if not text:
        return True
    return text in ("true", "1", "yes", "y", "active")
