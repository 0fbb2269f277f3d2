# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Source URL -> category lookup over curated domain substrings.

Deliberately loose: the lower-cased full URL (scheme, host, path, query) is
searched for each substring, so ``"amazon.fr/maison"`` can pick out one
section of a larger site. Rules are tried in ``DOMAIN_PRIORITY`` order.
"""

from __future__ import annotations

import functools
from dataclasses import dataclass

from clipcat.rules import RuleTables, default_rule_tables
from clipcat.taxonomy import Category


@dataclass(frozen=True, slots=True)
class DomainHit:
    """Which rule decided a URL, and on which substring."""

    category: Category
    domain: str


class UrlMatcher:
    """Stateless matcher over one immutable ``RuleTables``."""

    __slots__ = ("_rules",)

    def __init__(self, tables: RuleTables | None = None) -> None:
        if tables is None:
            tables = default_rule_tables()
        # Sorted so the reported substring is stable across runs.
        self._rules = tuple(
            (rule.category, tuple(sorted(rule.domains))) for rule in tables.domain_rules if rule.domains
        )

    def find(self, url: str | None) -> DomainHit | None:
        """First matching rule for *url*; None for empty input or no match."""
        if not url:
            return None
        url_lower = url.strip().lower()
        if not url_lower:
            return None
        for category, domains in self._rules:
            for domain in domains:
                if domain in url_lower:
                    return DomainHit(category, domain)
        return None

    def match(self, url: str | None) -> Category | None:
        hit = self.find(url)
        return hit.category if hit else None


@functools.lru_cache(maxsize=1)
def default_url_matcher() -> UrlMatcher:
    return UrlMatcher()


def match_url(url: str | None) -> Category | None:
    """Match one URL against the packaged domain table."""
    return default_url_matcher().match(url)
