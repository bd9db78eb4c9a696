"""
services/metadata.py
──────────────────────────────────────────────────────────────────────────────
Category metadata provider.

Per category name: five typical skills, an approximate salary range, a median
salary and a description mentioning the sector.  Every function answers for
any input, known or not, so the read path never has to handle missing
metadata for a category that exists in the store but not in the tables.
"""
from __future__ import annotations

from typing import Optional

from jobscope.config.classification import (
    CATEGORY_DESCRIPTIONS,
    CATEGORY_MEDIAN_SALARIES,
    CATEGORY_SALARY_RANGES,
    CATEGORY_SKILLS,
    DEFAULT_DESCRIPTION,
    DEFAULT_MEDIAN_SALARY,
    DEFAULT_SALARY_RANGE,
    DEFAULT_SKILLS,
    OTHER,
)
from jobscope.domain.models import CategoryMetadata


def skills_for(category: Optional[str]) -> list[str]:
    """Five typical skills for a category (a fresh list on every call)."""
    return list(CATEGORY_SKILLS.get(category or "", DEFAULT_SKILLS))


def salary_range_for(category: Optional[str]) -> str:
    """Display salary range, e.g. ``"$70,000 - $140,000"``."""
    return CATEGORY_SALARY_RANGES.get(category or "", DEFAULT_SALARY_RANGE)


def median_salary_for(category: Optional[str]) -> int:
    return CATEGORY_MEDIAN_SALARIES.get(category or "", DEFAULT_MEDIAN_SALARY)


def description_for(category: Optional[str], sector: Optional[str]) -> str:
    """Category description with the sector name filled in."""
    sector_name = sector or OTHER
    template = CATEGORY_DESCRIPTIONS.get(category or "")
    if template is None:
        return DEFAULT_DESCRIPTION.format(category=category or OTHER, sector=sector_name)
    return template.format(sector=sector_name)


def metadata_for(category: Optional[str], sector: Optional[str]) -> CategoryMetadata:
    return CategoryMetadata(
        skills=skills_for(category),
        salary=salary_range_for(category),
        median_salary=median_salary_for(category),
        description=description_for(category, sector),
    )
