#!/usr/bin/env python3
"""
Name and Phone Normalization

Canonical forms used for comparison only; display values are never rewritten
with these.

Phone contract (used by matcher, duplicate grouper and warning flags alike):
digits only, and at least 8 digits before a number is considered at all.
"""

import re

MIN_PHONE_DIGITS = 8

_NON_DIGIT = re.compile(r"[^0-9]")
_WHITESPACE = re.compile(r"\s+")
_PARENTHETICAL = re.compile(r"\([^)]*\)")
_NAME_PUNCTUATION = re.compile(r"[-_.,]")


def normalize_phone(phone: str | None) -> str:
    """Strip every non-digit ("010-9999-8888" -> "01099998888")."""
    if not phone:
        return ""
    return _NON_DIGIT.sub("", phone)


def is_valid_phone(phone: str | None) -> bool:
    """Check the phone has enough digits to be compared."""
    return len(normalize_phone(phone)) >= MIN_PHONE_DIGITS


def phones_match(a: str | None, b: str | None) -> bool:
    """
    Check whether two phones identify the same line.

    Both must be valid; one normalized form must contain the other, so a
    number with a country prefix still matches its local form.
    """
    left = normalize_phone(a)
    right = normalize_phone(b)
    if len(left) < MIN_PHONE_DIGITS or len(right) < MIN_PHONE_DIGITS:
        return False
    return left in right or right in left


def normalize_name(name: str | None) -> str:
    """
    Canonical name for comparison.

    Lower-cases, drops whitespace, parenthetical regions and - _ . , so
    "Rev. Lee Han-na (Siem Reap)" -> "revleehanna".
    """
    if not name:
        return ""
    result = name.lower()
    result = _WHITESPACE.sub("", result)
    result = _PARENTHETICAL.sub("", result)
    return _NAME_PUNCTUATION.sub("", result)


def normalize_region(region: str | None) -> str:
    """Lower-case and drop whitespace ("Siem Reap" -> "siemreap")."""
    if not region:
        return ""
    return _WHITESPACE.sub("", region.lower())


def regions_match(a: str | None, b: str | None) -> bool:
    """Whitespace-insensitive equality or containment; both must be present."""
    left = normalize_region(a)
    right = normalize_region(b)
    if not left or not right:
        return False
    return left == right or left in right or right in left


def tidy_name(name: str) -> str:
    """
    Tidy a name for display without changing its content.

    Collapses repeated whitespace and removes spaces around parentheses:
    "Lee  Hanna ( Siem Reap )" -> "Lee Hanna(Siem Reap)".
    """
    result = _WHITESPACE.sub(" ", name.strip())
    result = re.sub(r"\s*\(\s*", "(", result)
    return re.sub(r"\s*\)\s*", ")", result).strip()
