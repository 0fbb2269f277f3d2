# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Rule tables: loading, normalisation and static validation.

The two lookup tables (vision label keywords and URL domain substrings) ship
as YAML package data under ``clipcat/data``. They are parsed once, checked
against a pydantic schema, normalised, and frozen into a ``RuleTables``
value that the matchers share read-only.

Data flow:
    YAML -> pydantic file model -> RuleTables.from_mappings -> matchers

``validate_rules()`` is the startup/CI check for ambiguous taxonomy data:
the matchers resolve overlaps by priority order, which would otherwise hide
a keyword listed under two categories.
"""

from __future__ import annotations

import functools
import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from clipcat.errors import AmbiguousRuleError, RuleTableError
from clipcat.taxonomy import DOMAIN_PRIORITY, LABEL_PRIORITY, Category

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).parent / "data"
LABEL_RULES_PATH = DATA_DIR / "label_rules.yaml"
DOMAIN_RULES_PATH = DATA_DIR / "domain_rules.yaml"

# Vision labels use "_" between words, free text uses spaces or dashes.
_SEPARATOR_RE = re.compile(r"[\s_\-]+")


def normalize_label(text: str) -> str:
    """Lower-case and collapse ``_``/``-``/whitespace runs into single spaces."""
    return _SEPARATOR_RE.sub(" ", text.lower()).strip()


def token_runs(normalized: str) -> frozenset[str]:
    """All contiguous whole-token runs of a normalised label, itself included.

    "golden retriever puppy" -> {"golden", "retriever", "puppy",
    "golden retriever", "retriever puppy", "golden retriever puppy"}
    """
    tokens = normalized.split()
    return frozenset(
        " ".join(tokens[start:end]) for start in range(len(tokens)) for end in range(start + 1, len(tokens) + 1)
    )


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LabelRule:
    """Normalised vision-label keywords for one category."""

    category: Category
    keywords: frozenset[str]


@dataclass(frozen=True, slots=True)
class DomainRule:
    """Lower-cased URL substrings for one category."""

    category: Category
    domains: frozenset[str]


@dataclass(frozen=True, slots=True)
class RuleTables:
    """Both rule tables, already in evaluation order."""

    label_rules: tuple[LabelRule, ...]
    domain_rules: tuple[DomainRule, ...]
    generic_labels: frozenset[str]

    @classmethod
    def from_mappings(
        cls,
        label_keywords: Mapping[Category, Iterable[str]],
        domain_substrings: Mapping[Category, Iterable[str]],
        generic_labels: Iterable[str] = (),
        *,
        source: str = "",
    ) -> RuleTables:
        """Build tables from plain category -> strings mappings.

        Keywords are normalised, domains lower-cased. Categories absent from
        a mapping get an empty rule so the priority tuple stays complete.

        Raises:
            RuleTableError: a rule for ``misc``, or for a category that has
                no slot in the matcher's priority order.
        """
        _check_categories(label_keywords, LABEL_PRIORITY, "label", source)
        _check_categories(domain_substrings, DOMAIN_PRIORITY, "domain", source)

        label_rules = tuple(
            LabelRule(
                category,
                frozenset(k for k in (normalize_label(raw) for raw in label_keywords.get(category, ())) if k),
            )
            for category in LABEL_PRIORITY
        )
        domain_rules = tuple(
            DomainRule(
                category,
                frozenset(d for d in (raw.strip().lower() for raw in domain_substrings.get(category, ())) if d),
            )
            for category in DOMAIN_PRIORITY
        )
        generic = frozenset(g for g in (normalize_label(raw) for raw in generic_labels) if g)
        return cls(label_rules=label_rules, domain_rules=domain_rules, generic_labels=generic)

    def keyword_count(self) -> int:
        return sum(len(rule.keywords) for rule in self.label_rules)

    def domain_count(self) -> int:
        return sum(len(rule.domains) for rule in self.domain_rules)


def _check_categories(
    mapping: Mapping[Category, Iterable[str]],
    priority: tuple[Category, ...],
    kind: str,
    source: str,
) -> None:
    for category in mapping:
        if category == Category.MISC:
            raise RuleTableError(f"'misc' is the fallback and cannot carry {kind} rules", source=source)
        if category not in priority:
            raise RuleTableError(
                f"{kind} rules for '{category}' have no slot in the {kind} priority order", source=source
            )


# ---------------------------------------------------------------------------
# YAML loading
# ---------------------------------------------------------------------------


class LabelRuleFile(BaseModel):
    """Schema of ``label_rules.yaml``."""

    model_config = ConfigDict(extra="forbid")

    generic_labels: list[str] = Field(default_factory=list)
    categories: dict[Category, list[str]]


class DomainRuleFile(BaseModel):
    """Schema of ``domain_rules.yaml``."""

    model_config = ConfigDict(extra="forbid")

    categories: dict[Category, list[str]]


def _read_yaml(path: Path, model: type[BaseModel]) -> BaseModel:
    try:
        with open(path, encoding="utf-8") as f:
            raw = yaml.safe_load(f)
    except OSError as e:
        raise RuleTableError(f"cannot read rule file: {e}", source=str(path)) from e
    except yaml.YAMLError as e:
        raise RuleTableError(f"invalid YAML: {e}", source=str(path)) from e

    try:
        return model.model_validate(raw)
    except ValidationError as e:
        raise RuleTableError(f"schema mismatch: {e}", source=str(path)) from e


def load_rule_tables(
    label_path: Path = LABEL_RULES_PATH,
    domain_path: Path = DOMAIN_RULES_PATH,
) -> RuleTables:
    """Parse both YAML rule files into ``RuleTables``.

    Raises:
        RuleTableError: unreadable file, bad YAML, or schema violation.
    """
    label_file = _read_yaml(Path(label_path), LabelRuleFile)
    domain_file = _read_yaml(Path(domain_path), DomainRuleFile)
    assert isinstance(label_file, LabelRuleFile)
    assert isinstance(domain_file, DomainRuleFile)

    tables = RuleTables.from_mappings(
        label_file.categories,
        domain_file.categories,
        label_file.generic_labels,
        source=f"{label_path}, {domain_path}",
    )
    logger.debug(
        "loaded rule tables: %d label keywords, %d domains, %d generic labels",
        tables.keyword_count(),
        tables.domain_count(),
        len(tables.generic_labels),
    )
    return tables


@functools.lru_cache(maxsize=1)
def default_rule_tables() -> RuleTables:
    """The packaged rule tables, parsed once per process."""
    return load_rule_tables()


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


class IssueKind(StrEnum):
    """Kinds of rule data defects."""

    DUPLICATE_KEYWORD = "duplicate-keyword"
    DUPLICATE_DOMAIN = "duplicate-domain"
    GENERIC_KEYWORD = "generic-keyword"
    SHADOWED_KEYWORD = "shadowed-keyword"
    SHADOWED_DOMAIN = "shadowed-domain"
    EMPTY_CATEGORY = "empty-category"


@dataclass(frozen=True, slots=True)
class RuleIssue:
    """One defect found by ``validate_rules``."""

    kind: IssueKind
    entry: str
    category: Category
    other: Category | None = None
    detail: str = ""

    def __str__(self) -> str:
        where = f"{self.category} / {self.other}" if self.other else str(self.category)
        text = f"{self.kind}: '{self.entry}' ({where})"
        return f"{text}: {self.detail}" if self.detail else text


def _duplicates(rules: Iterable[tuple[Category, frozenset[str]]], kind: IssueKind) -> list[RuleIssue]:
    owners: dict[str, list[Category]] = {}
    for category, entries in rules:
        for entry in entries:
            owners.setdefault(entry, []).append(category)
    return [
        RuleIssue(kind, entry, cats[0], cats[1], f"listed under {', '.join(cats)}")
        for entry, cats in sorted(owners.items())
        if len(cats) > 1
    ]


def _shadowed_keywords(label_rules: tuple[LabelRule, ...]) -> list[RuleIssue]:
    """Multi-word keywords that contain an earlier category's keyword.

    The matcher stops at the earlier category, so the longer keyword can
    never decide anything.
    """
    issues: list[RuleIssue] = []
    for index, rule in enumerate(label_rules):
        earlier = label_rules[:index]
        for keyword in sorted(rule.keywords):
            runs = token_runs(keyword) - {keyword}
            for prior in earlier:
                if prior.category is rule.category:
                    continue
                hit = next((run for run in sorted(runs) if run in prior.keywords), None)
                if hit is not None:
                    issues.append(
                        RuleIssue(
                            IssueKind.SHADOWED_KEYWORD,
                            keyword,
                            rule.category,
                            prior.category,
                            f"'{hit}' matches first",
                        )
                    )
                    break
    return issues


def _shadowed_domains(domain_rules: tuple[DomainRule, ...]) -> list[RuleIssue]:
    issues: list[RuleIssue] = []
    for index, rule in enumerate(domain_rules):
        for domain in sorted(rule.domains):
            for prior in domain_rules[:index]:
                if prior.category is rule.category:
                    continue
                hit = next((d for d in sorted(prior.domains) if d != domain and d in domain), None)
                if hit is not None:
                    issues.append(
                        RuleIssue(
                            IssueKind.SHADOWED_DOMAIN,
                            domain,
                            rule.category,
                            prior.category,
                            f"'{hit}' matches first",
                        )
                    )
                    break
    return issues


def validate_rules(tables: RuleTables) -> list[RuleIssue]:
    """Static checks for ambiguous or dead rule data.

    Returns an empty list for well-formed tables.
    """
    issues: list[RuleIssue] = []
    issues += _duplicates(((r.category, r.keywords) for r in tables.label_rules), IssueKind.DUPLICATE_KEYWORD)
    issues += _duplicates(((r.category, r.domains) for r in tables.domain_rules), IssueKind.DUPLICATE_DOMAIN)

    for rule in tables.label_rules:
        for keyword in sorted(rule.keywords & tables.generic_labels):
            issues.append(
                RuleIssue(IssueKind.GENERIC_KEYWORD, keyword, rule.category, detail="generic labels never classify")
            )

    issues += _shadowed_keywords(tables.label_rules)
    issues += _shadowed_domains(tables.domain_rules)

    covered = {r.category for r in tables.label_rules if r.keywords}
    covered |= {r.category for r in tables.domain_rules if r.domains}
    for category in Category:
        if category is not Category.MISC and category not in covered:
            issues.append(
                RuleIssue(IssueKind.EMPTY_CATEGORY, str(category), category, detail="no label or domain rule")
            )

    return issues


def assert_valid_rules(tables: RuleTables) -> None:
    """Raise ``AmbiguousRuleError`` when ``validate_rules`` finds anything."""
    issues = validate_rules(tables)
    if issues:
        raise AmbiguousRuleError(issues)
