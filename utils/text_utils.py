"""
Text utilities for label comparison and field-name handling.

Labels keep their original case in storage; comparisons go through
normalize_label().
"""

import re
from typing import Any, Optional

_FIRST_CAP = re.compile(r"(.)([A-Z][a-z]+)")
_ALL_CAP = re.compile(r"([a-z0-9])([A-Z])")


def is_blank(value: Any) -> bool:
    """
    True for values that mean "not applicable".

    None, empty strings and whitespace-only strings are blank; anything
    else (including 0 and False) is a real value.
    """
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


def normalize_label(value: Any) -> str:
    """
    Normalize a label for comparison only.

    - "  On Track " → "on track"
    - "STRASSE" and "Straße" compare equal (casefold)

    Args:
        value: Raw label or submitted value

    Returns:
        Trimmed, case-folded string ("" for None)
    """
    if value is None:
        return ""
    return str(value).strip().casefold()


def clean_label(value: Optional[str]) -> Optional[str]:
    """Strip a label for storage; None for blank input."""
    if value is None:
        return None
    value = value.strip()
    return value or None


def to_snake_case(name: str) -> str:
    """
    Convert a camelCase field name to snake_case.

    - "productArea" → "product_area"
    - "estimatedGTMType" → "estimated_gtm_type"
    - "team" → "team"
    """
    name = _FIRST_CAP.sub(r"\1_\2", name)
    return _ALL_CAP.sub(r"\1_\2", name).lower()
