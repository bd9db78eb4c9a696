"""
tests/unit/test_category_metadata.py
──────────────────────────────────────────────────────────────────────────────
Unit tests for the category metadata provider.

Every accessor must answer for every input, so most tests here feed unknown,
empty and None categories and check the documented fallbacks.
"""
from __future__ import annotations

import pytest

from jobscope.config.classification import (
    CATEGORY_DESCRIPTIONS,
    CATEGORY_MEDIAN_SALARIES,
    CATEGORY_NAMES,
    CATEGORY_SALARY_RANGES,
    CATEGORY_SKILLS,
    DEFAULT_MEDIAN_SALARY,
    DEFAULT_SALARY_RANGE,
    DEFAULT_SKILLS,
)
from jobscope.services.metadata import (
    description_for,
    median_salary_for,
    metadata_for,
    salary_range_for,
    skills_for,
)

SCIENCES = "Professional occupations in natural and applied sciences"
TECH_SERVICES = "Professional, scientific and technical services"


class TestKnownCategories:
    def test_skills(self):
        assert skills_for(SCIENCES) == [
            "Research",
            "Technical Analysis",
            "Problem Solving",
            "Project Management",
            "Technical Documentation",
        ]

    def test_salary_range(self):
        assert salary_range_for(SCIENCES) == "$70,000 - $140,000"

    def test_median_salary(self):
        assert median_salary_for(SCIENCES) == 105000

    def test_description_mentions_sector(self):
        text = description_for(SCIENCES, TECH_SERVICES)
        assert TECH_SERVICES in text
        assert "{sector}" not in text

    def test_other_has_default_skills(self):
        assert skills_for("Other") == list(DEFAULT_SKILLS)


class TestFallbacks:
    @pytest.mark.parametrize("category", ["Astronaut", "", None])
    def test_skills_default(self, category):
        assert skills_for(category) == list(DEFAULT_SKILLS)

    @pytest.mark.parametrize("category", ["Astronaut", "", None])
    def test_salary_default(self, category):
        assert salary_range_for(category) == DEFAULT_SALARY_RANGE == "$40,000 - $80,000"

    @pytest.mark.parametrize("category", ["Astronaut", "", None])
    def test_median_default(self, category):
        assert median_salary_for(category) == DEFAULT_MEDIAN_SALARY == 60000

    def test_description_default_names_category_and_sector(self):
        text = description_for("Astronaut", "Space")
        assert text.startswith("Astronaut professionals work in the Space sector.")

    def test_description_with_no_sector_uses_other(self):
        assert "in the Other sector" in description_for(SCIENCES, None)

    def test_description_with_no_category(self):
        assert description_for(None, None).startswith("Other professionals work in the Other sector.")


class TestContract:
    def test_skills_returns_a_fresh_list(self):
        first = skills_for(SCIENCES)
        first.append("Juggling")
        assert "Juggling" not in skills_for(SCIENCES)

    def test_every_category_has_full_metadata(self):
        for name in CATEGORY_NAMES:
            assert len(CATEGORY_SKILLS[name]) == 5
            assert name in CATEGORY_SALARY_RANGES
            assert CATEGORY_MEDIAN_SALARIES[name] > 0
            assert "{sector}" in CATEGORY_DESCRIPTIONS[name]

    def test_tables_are_read_only(self):
        with pytest.raises(TypeError):
            CATEGORY_SALARY_RANGES["Astronaut"] = "$1"  # type: ignore[index]

    def test_metadata_for_bundles_everything(self):
        meta = metadata_for(SCIENCES, TECH_SERVICES)
        assert meta.skills == skills_for(SCIENCES)
        assert meta.salary == "$70,000 - $140,000"
        assert meta.median_salary == 105000
        assert TECH_SERVICES in meta.description

    def test_metadata_never_empty(self):
        meta = metadata_for(None, None)
        assert meta.skills and meta.salary and meta.median_salary and meta.description
