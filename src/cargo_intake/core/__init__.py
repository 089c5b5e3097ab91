"""
Core Utilities Package

Shared primitives used across intake, matching, pricing and staging.

This package provides:
- Money handling with integer cents for precision
- Intake rules (courier names, phone patterns, discount keywords)
- Configuration management for environment-specific settings
"""

from .config import Config, Environment, IntakeConfig, get_config, reload_config
from .currency import cents_to_dollars_str, format_cents, format_rate, to_decimal
from .money import Money, sum_money
from .rules import DEFAULT_RULES, DiscountKeyword, IntakeRules

__all__ = [
    # Configuration
    "Config",
    "DEFAULT_RULES",
    "DiscountKeyword",
    "Environment",
    "IntakeConfig",
    "IntakeRules",
    # Money
    "Money",
    "cents_to_dollars_str",
    "format_cents",
    "format_rate",
    "get_config",
    "reload_config",
    "sum_money",
    "to_decimal",
]
