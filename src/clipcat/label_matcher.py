# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Vision label -> category lookup.

A label matches a category when, after normalisation, it equals one of the
category's keywords or contains one as a whole-token run ("golden_retriever"
contains "retriever", "sunflower" does not contain "sun"). Categories are
tried in ``LABEL_PRIORITY`` order and the first hit wins; there is no
"best" match across categories.

Generic labels ("structure", "material", ...) never produce a category.
"""

from __future__ import annotations

import functools

from clipcat.rules import RuleTables, default_rule_tables, normalize_label, token_runs
from clipcat.taxonomy import Category


class LabelMatcher:
    """Stateless matcher over one immutable ``RuleTables``."""

    __slots__ = ("_rules", "_generic")

    def __init__(self, tables: RuleTables | None = None) -> None:
        if tables is None:
            tables = default_rule_tables()
        # Empty rules can never hit; drop them once instead of per call.
        self._rules = tuple(rule for rule in tables.label_rules if rule.keywords)
        self._generic = tables.generic_labels

    def is_generic(self, label: str) -> bool:
        """True for labels too broad to say anything about the content."""
        return normalize_label(label) in self._generic

    def match(self, label: str) -> Category | None:
        """Category of the first rule hit by *label*, or None."""
        normalized = normalize_label(label)
        if not normalized or normalized in self._generic:
            return None
        runs = token_runs(normalized)
        for rule in self._rules:
            if not runs.isdisjoint(rule.keywords):
                return rule.category
        return None


@functools.lru_cache(maxsize=1)
def default_label_matcher() -> LabelMatcher:
    return LabelMatcher()


def match_label(label: str) -> Category | None:
    """Match one label against the packaged rule table."""
    return default_label_matcher().match(label)


def is_generic_label(label: str) -> bool:
    return default_label_matcher().is_generic(label)
