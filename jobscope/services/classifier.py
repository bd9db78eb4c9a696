"""
services/classifier.py
──────────────────────────────────────────────────────────────────────────────
Code classifier: NOC occupation codes → category, NAICS industry codes →
sector.

Both public functions are *pure* and *total*: deterministic, no I/O, and they
never raise.  A missing, empty or unmatched code degrades to "Other".

Only the first two characters of a code (the major group / sector) are used.
Lookup walks the ordered range table from config/classification.py and
compares as strings, so "2171" → "21" falls inside "21-22" while a code such
as "7" → "7" falls inside no two-character range.
"""
from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from jobscope.config.classification import NAICS_TABLE, NOC_TABLE, OTHER, CodeRange


def classify_occupation(code: Optional[Any]) -> str:
    """Map a NOC code to its occupation category name.

    Examples:
        >>> classify_occupation("2171")
        'Professional occupations in natural and applied sciences'
        >>> classify_occupation(None)
        'Other'
    """
    return _lookup(NOC_TABLE, code)


def classify_sector(code: Optional[Any]) -> str:
    """Map a NAICS code to its industry sector name.

    Examples:
        >>> classify_sector("541510")
        'Professional, scientific and technical services'
        >>> classify_sector("99")
        'Other'
    """
    return _lookup(NAICS_TABLE, code)


def noc_categories() -> Mapping[str, str]:
    """Read-only view of the NOC table as range label → category."""
    return _as_mapping(NOC_TABLE)


def naics_sectors() -> Mapping[str, str]:
    """Read-only view of the NAICS table as range label → sector."""
    return _as_mapping(NAICS_TABLE)


def major_group(code: Optional[Any]) -> Optional[str]:
    """First two characters of a code, or None when there is no code."""
    if code is None:
        return None
    text = str(code).strip()
    return text[:2] or None


# ── Helpers ────────────────────────────────────────────────────────────────

def _lookup(table: tuple[CodeRange, ...], code: Optional[Any]) -> str:
    group = major_group(code)
    if group is None:
        return OTHER
    for entry in table:
        if entry.contains(group):
            return entry.name
    return OTHER


def _as_mapping(table: tuple[CodeRange, ...]) -> Mapping[str, str]:
    return MappingProxyType({entry.label: entry.name for entry in table})
