"""
Pricing Package

Split pricing for shipments: an auto part recomputed from volume and the
customer's standing discount, plus manual adjustments that persist until a
user removes them.
"""

from .calculator import (
    DEFAULT_UNIT_PRICE,
    AdjustmentNotFoundError,
    ShipmentPricing,
    build_pricing_layer,
    calculate_pricing,
    extract_master_discount,
    prepare_pricing_update,
)
from .models import (
    AdjustmentType,
    ManualAdjustment,
    PriceBreakdown,
    PriceChange,
    PricingLayer,
    PricingUpdate,
)

__all__ = [
    # Models
    "AdjustmentType",
    "ManualAdjustment",
    "PriceBreakdown",
    "PriceChange",
    "PricingLayer",
    "PricingUpdate",
    # Calculation
    "DEFAULT_UNIT_PRICE",
    "AdjustmentNotFoundError",
    "ShipmentPricing",
    "build_pricing_layer",
    "calculate_pricing",
    "extract_master_discount",
    "prepare_pricing_update",
]
