# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Shared test configuration and fixtures."""

try:
    import clipcat  # noqa: F401
except ImportError:
    raise ImportError("clipcat is not installed. Run: pip install -e '.[dev]'") from None

import pytest

from clipcat.rules import RuleTables
from clipcat.taxonomy import Category


@pytest.fixture
def tiny_tables() -> RuleTables:
    """Small hand-written tables for tests that must not depend on packaged data."""
    return RuleTables.from_mappings(
        {
            Category.HOME: ["table", "high_chair"],
            Category.FASHION: ["dress", "wedding dress"],
            Category.FOOD: ["pizza", "hot_dog"],
            Category.ANIMALS: ["dog", "cat"],
            Category.ART: ["painting"],
        },
        {
            Category.MEDIA: ["news.example"],
            Category.TRAVEL: ["trips.example"],
            Category.HOME: ["furniture.example"],
            Category.KIDS: ["toys.example"],
        },
        ["structure", "material"],
    )
