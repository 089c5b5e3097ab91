"""
Cargo Intake - Packing List Staging and Pricing

Turns packing lists pasted from spreadsheets into reviewed, priced shipment
records for the Korea-Cambodia cargo desk.

Key Features:
- Tolerant parsing of tab or space separated pastes (ghost rows, headers)
- Multi-factor customer matching (phone, exact/fuzzy name, region)
- Duplicate phone detection within a batch
- Split pricing with manual adjustments that survive volume changes
- Review-before-commit staging sessions with customer snapshots

Domain Packages:
- core: Money, intake rules, configuration
- packing: Tokenizer, field extractor and resumable parser
- customers: Customer master models and directories
- matching: Normalization, similarity scoring, matcher and grouper
- pricing: Pricing engine and shipment price state
- staging: Staging session, shipment records and store
- cli: Command-line interface

Example Usage:
    from cargo_intake.packing import parse_packing_list
    from cargo_intake.matching import MultiFactorMatcher
    from cargo_intake.pricing import ShipmentPricing
    from cargo_intake.staging import StagingSession
"""

__version__ = "0.1.0"
__author__ = "Cargo Intake Developers"

from .core.config import Environment, get_config
from .core.money import Money
from .matching.matcher import MultiFactorMatcher
from .packing.parser import parse_packing_list
from .pricing.calculator import ShipmentPricing, calculate_pricing
from .staging.session import StagingSession

__all__ = [
    # Configuration
    "get_config",
    "Environment",
    # Core types
    "Money",
    # Workflow
    "parse_packing_list",
    "MultiFactorMatcher",
    "calculate_pricing",
    "ShipmentPricing",
    "StagingSession",
]
