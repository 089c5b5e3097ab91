#!/usr/bin/env python3
"""
Intake Rules

Immutable lookup tables used by the packing-list parser and the pricing engine:
courier names, phone-shape patterns, header keywords, name heuristics and the
discount keyword table.

An IntakeRules instance is passed to every component at construction, so two
batches (or two tests) can run side by side with different dictionaries.
DEFAULT_RULES mirrors the dictionaries used by the Korea/Cambodia shipping desk.
"""

import logging
import re
from dataclasses import dataclass, field, replace
from decimal import Decimal
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DiscountKeyword:
    """One row of the discount keyword table."""

    key: str
    keywords: tuple[str, ...]
    rate: Decimal
    reason: str

    def matches(self, info: str) -> bool:
        """Check whether lower-cased discount info mentions any keyword."""
        return any(keyword in info for keyword in self.keywords)


DEFAULT_COURIER_NAMES: tuple[str, ...] = (
    # Korean couriers
    "로젠", "CJ", "씨제이", "한진", "우체국", "롯데", "쿠팡",
    "경동", "대신", "합동", "건영", "천일", "용차", "직배",
    # Latin spellings
    "LOGEN", "HANJIN", "COUPANG", "POST", "YongCha", "Unknown",
    # Generic delivery words
    "택배", "배송", "퀵", "화물",
)

# Order matters: the first pattern that matches anywhere in a cell wins.
DEFAULT_PHONE_PATTERNS: tuple[str, ...] = (
    r"01[0-9]-?\d{3,4}-?\d{4}",  # Korean mobile (010, 011, 017...)
    r"02-?\d{3,4}-?\d{4}",  # Seoul landline
    r"0[3-6][1-9]-?\d{3,4}-?\d{4}",  # Regional landline (031, 041...)
    r"070-?\d{3,4}-?\d{4}",  # VOIP
    r"050[0-9]-?\d{3,4}-?\d{4}",  # Anonymized (safe) numbers
    r"0[1-9]{2}\s?\d{3}\s?\d{3,4}",  # Cambodian local (012, 070...)
    r"\+855\s?\d{2,3}\s?\d{3}\s?\d{3,4}",  # Cambodian international
    r"\+82\s?\d{1,2}\s?\d{3,4}\s?\d{4}",  # Korean international
    r"\d{10,11}",  # Bare digits fallback
)

DEFAULT_HEADER_KEYWORDS: tuple[str, ...] = (
    "이름", "name",
    "수량", "qty", "quantity",
    "택배", "courier",
    "중량", "weight",
    "비고", "memo",
    "송장", "invoice",
    "특징", "feature",
)

DEFAULT_NAME_PATTERNS: tuple[str, ...] = (
    r"[가-힣]",  # Hangul anywhere
    r"^(Mr|Ms|Mrs|Miss)?\.?\s*[A-Z][a-z]+",  # Capitalized Latin name, optional title
)

DEFAULT_DISCOUNT_KEYWORDS: tuple[DiscountKeyword, ...] = (
    DiscountKeyword("MISSIONARY", ("선교", "missionary"), Decimal("0.10"), "Missionary discount 10%"),
    DiscountKeyword("VIP", ("vip",), Decimal("0.05"), "VIP discount 5%"),
    DiscountKeyword("BULK", ("대량", "bulk"), Decimal("0.15"), "Bulk discount 15%"),
)


@dataclass(frozen=True)
class IntakeRules:
    """
    Dictionaries and patterns that drive parsing and discount lookup.

    Patterns are stored as source strings and compiled once in __post_init__.
    """

    courier_names: tuple[str, ...] = DEFAULT_COURIER_NAMES
    phone_patterns: tuple[str, ...] = DEFAULT_PHONE_PATTERNS
    header_keywords: tuple[str, ...] = DEFAULT_HEADER_KEYWORDS
    name_patterns: tuple[str, ...] = DEFAULT_NAME_PATTERNS
    discount_keywords: tuple[DiscountKeyword, ...] = DEFAULT_DISCOUNT_KEYWORDS
    min_quantity: int = 1
    max_quantity: int = 999
    max_weight: Decimal = Decimal("10000")

    _compiled_phones: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _compiled_names: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _upper_couriers: tuple[str, ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "_compiled_phones", tuple(re.compile(p) for p in self.phone_patterns))
        object.__setattr__(self, "_compiled_names", tuple(re.compile(p) for p in self.name_patterns))
        object.__setattr__(self, "_upper_couriers", tuple(c.upper() for c in self.courier_names))

    def is_courier(self, text: str) -> bool:
        """
        Check if a cell names a courier.

        Matches when the cell contains a courier name or is contained in one,
        case-insensitively ("cj대한통운" and "Han" both count).
        """
        upper = text.upper()
        if not upper:
            return False
        return any(courier in upper or upper in courier for courier in self._upper_couriers)

    def extract_phone(self, text: str) -> str | None:
        """Return the first phone-shaped substring, trying patterns in order."""
        for pattern in self._compiled_phones:
            match = pattern.search(text)
            if match:
                return match.group(0)
        return None

    def looks_like_name_script(self, text: str) -> bool:
        """Check the script heuristics (Hangul, or a capitalized Latin word)."""
        return any(pattern.search(text) for pattern in self._compiled_names)

    def is_header_cell(self, cell: str) -> bool:
        """Check whether a cell contains any header keyword."""
        lower = cell.lower()
        return any(keyword in lower for keyword in self.header_keywords)

    def with_overrides(self, **overrides: Any) -> "IntakeRules":
        """Return a copy with some dictionaries replaced."""
        return replace(self, **overrides)

    @classmethod
    def from_yaml(cls, path: str | Path) -> "IntakeRules":
        """
        Load rules from a YAML file, falling back to defaults for missing keys.

        Expected layout:

            courier_names: [CJ, 한진, ...]
            phone_patterns: ['01[0-9]-?\\d{3,4}-?\\d{4}', ...]
            header_keywords: [name, qty, ...]
            discount_keywords:
              - key: MISSIONARY
                keywords: [선교, missionary]
                rate: "0.10"
                reason: Missionary discount 10%

        Raises:
            FileNotFoundError: If the file doesn't exist
            ValueError: If a section has the wrong shape
        """
        path = Path(path)
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Rules file must contain a mapping: {path}")

        overrides: dict[str, Any] = {}
        for key in ("courier_names", "phone_patterns", "header_keywords", "name_patterns"):
            if key in data:
                values = data[key]
                if not isinstance(values, list) or not all(isinstance(v, str) for v in values):
                    raise ValueError(f"'{key}' must be a list of strings in {path}")
                overrides[key] = tuple(values)

        if "discount_keywords" in data:
            entries = data["discount_keywords"]
            if not isinstance(entries, list):
                raise ValueError(f"'discount_keywords' must be a list in {path}")
            overrides["discount_keywords"] = tuple(
                DiscountKeyword(
                    key=str(entry["key"]),
                    keywords=tuple(str(k).lower() for k in entry["keywords"]),
                    rate=Decimal(str(entry["rate"])),
                    reason=str(entry.get("reason", entry["key"])),
                )
                for entry in entries
            )

        for key in ("min_quantity", "max_quantity"):
            if key in data:
                overrides[key] = int(data[key])
        if "max_weight" in data:
            overrides["max_weight"] = Decimal(str(data["max_weight"]))

        logger.info("Loaded intake rules from %s (%d overrides)", path, len(overrides))
        return cls(**overrides)


DEFAULT_RULES = IntakeRules()
