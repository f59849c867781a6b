"""CSV column normalization — handles BOM, trailing spaces, spreadsheet quirks."""

from __future__ import annotations

import re

from caseflow.domain.value_objects.enums import ProductType

_KNOWN_PRODUCT_TYPES = {pt.value.lower(): pt.value for pt in ProductType}

_TRUE_VALUES = {"1", "true", "yes", "y", "active"}
_FALSE_VALUES = {"0", "false", "no", "n", "inactive"}


def normalize_column_name(name: str) -> str:
    """Normalize a CSV column name.

    - Removes BOM characters (\\ufeff)
    - Strips leading/trailing whitespace
    - Replaces runs of spaces / non-breaking spaces with a single underscore
    - Lowercases
    - Strips non-alphanumeric characters (except underscore)
    """
    name = name.replace("\ufeff", "")
    name = name.strip()
    name = re.sub(r"[\s\u00a0]+", "_", name)
    name = name.lower()
    name = re.sub(r"[^\w]", "", name, flags=re.UNICODE)
    return name


def clean_string(value: str | None) -> str | None:
    """Strip whitespace and return None for empty strings."""
    if value is None:
        return None
    value = value.strip()
    return value if value else None


def normalize_product_type(raw: str | None) -> str | None:
    """Map spellings like 'sme', ' Digital  loans ' to the canonical tag.

    Unknown product types are kept (whitespace-collapsed) rather than dropped,
    so a new product line shows up as a specialization gap instead of vanishing.
    """
    value = clean_string(raw)
    if value is None:
        return None
    collapsed = re.sub(r"[\s\u00a0_]+", " ", value)
    return _KNOWN_PRODUCT_TYPES.get(collapsed.lower(), collapsed)


def parse_bool(raw: str | None, default: bool = True) -> bool:
    value = clean_string(raw)
    if value is None:
        return default
    lowered = value.lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default
