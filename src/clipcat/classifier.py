# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Classification orchestrator: URL evidence first, then weighted labels.

Decision order (each step runs only if the previous one did not decide):
  1. URL: a domain rule hit is returned as is, labels are ignored
  2. Filter: generic labels dropped (kept if that would drop them all)
  3. Strong: first label at >= 0.85 confidence that maps to a category
  4. Weighted: labels at >= 0.3 (or all, if none are), weight = conf²,
     summed per category, highest total wins
  5. Fallback: misc

Confidences are sanitised on entry: NaN, infinities and negatives count as
0.0, values above 1.0 as 1.0. Zero-weight categories never win.
"""

from __future__ import annotations

import functools
import logging
import math
from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from clipcat import LabelObservation
from clipcat.errors import ConfigError
from clipcat.label_matcher import LabelMatcher
from clipcat.rules import RuleTables, default_rule_tables
from clipcat.taxonomy import Category
from clipcat.url_matcher import UrlMatcher

logger = logging.getLogger(__name__)

LabelInput = LabelObservation | tuple[str, float]


# ---------------------------------------------------------------------------
# Data classes
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ClassifierConfig:
    """Decision thresholds. Defaults reproduce the app's shipped behaviour."""

    high_confidence_threshold: float = 0.85
    reliable_confidence_floor: float = 0.3
    weight_exponent: float = 2.0  # quadratic: 0.9 weighs 9x a 0.3, not 3x

    def __post_init__(self) -> None:
        for name in ("high_confidence_threshold", "reliable_confidence_floor"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{name} must be within [0, 1], got {value!r}")
        if self.reliable_confidence_floor > self.high_confidence_threshold:
            raise ConfigError(
                f"reliable_confidence_floor ({self.reliable_confidence_floor}) is above "
                f"high_confidence_threshold ({self.high_confidence_threshold})"
            )
        if not (math.isfinite(self.weight_exponent) and self.weight_exponent > 0.0):
            raise ConfigError(f"weight_exponent must be a positive number, got {self.weight_exponent!r}")


class DecisionSource(StrEnum):
    """Which step of the decision order produced the category."""

    URL = "url"
    HIGH_CONFIDENCE = "high_confidence"
    WEIGHTED = "weighted"
    FALLBACK = "fallback"


@dataclass(frozen=True, slots=True)
class ClassificationResult:
    """Category plus the evidence that selected it."""

    category: Category
    decided_by: DecisionSource
    scores: tuple[tuple[Category, float], ...] = ()  # weighted step only, best first
    matched_labels: tuple[tuple[str, Category], ...] = ()  # labels that contributed
    url_domain: str | None = None  # substring that decided a URL match
    runner_up: Category | None = None

    def to_dict(self) -> dict:
        return {
            "category": str(self.category),
            "decided_by": str(self.decided_by),
            "scores": {str(c): round(s, 6) for c, s in self.scores},
            "matched_labels": [[label, str(c)] for label, c in self.matched_labels],
            "url_domain": self.url_domain,
            "runner_up": str(self.runner_up) if self.runner_up else None,
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def sanitize_confidence(value: object) -> float:
    """Clamp a model confidence into [0, 1]; anything unusable becomes 0.0."""
    try:
        confidence = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(confidence) or confidence < 0.0:
        return 0.0
    return min(confidence, 1.0)


def _coerce(item: LabelInput) -> LabelObservation:
    if isinstance(item, LabelObservation):
        label, raw = item.label, item.confidence
    else:
        label, raw = item
    confidence = sanitize_confidence(raw)
    if confidence != raw:
        logger.warning("confidence %r for label %r sanitised to %s", raw, label, confidence)
    return LabelObservation(str(label), confidence)


# ---------------------------------------------------------------------------
# Core classifier
# ---------------------------------------------------------------------------


class Classifier:
    """URL + vision-label category classifier.

    Holds only immutable state; one instance can serve any number of threads.
    """

    __slots__ = ("config", "_labels", "_urls")

    def __init__(self, tables: RuleTables | None = None, config: ClassifierConfig | None = None) -> None:
        if tables is None:
            tables = default_rule_tables()
        self.config = config or ClassifierConfig()
        self._labels = LabelMatcher(tables)
        self._urls = UrlMatcher(tables)

    def classify(self, url: str | None = None, labels: Iterable[LabelInput] = ()) -> Category:
        """Single category for an item; ``misc`` when nothing matches."""
        return self.explain(url, labels).category

    def explain(self, url: str | None = None, labels: Iterable[LabelInput] = ()) -> ClassificationResult:
        """Like ``classify`` but also returns the deciding evidence."""
        hit = self._urls.find(url)
        if hit is not None:
            logger.debug("url %s matched %r -> %s", url, hit.domain, hit.category)
            return ClassificationResult(hit.category, DecisionSource.URL, url_domain=hit.domain)

        observations = [_coerce(item) for item in labels or ()]
        if not observations:
            return self._fallback()

        candidates = [obs for obs in observations if not self._labels.is_generic(obs.label)] or observations

        strong = self._strong_label(candidates)
        if strong is not None:
            label, category = strong
            logger.debug("label %s short-circuited -> %s", label, category)
            return ClassificationResult(category, DecisionSource.HIGH_CONFIDENCE, matched_labels=(strong,))

        return self._weighted(candidates)

    # -- steps --------------------------------------------------------------

    def _strong_label(self, candidates: list[LabelObservation]) -> tuple[str, Category] | None:
        """First label, in input order, that is confident enough and maps somewhere."""
        threshold = self.config.high_confidence_threshold
        for obs in candidates:
            if obs.confidence < threshold:
                continue
            category = self._labels.match(obs.label)
            if category is not None:
                return obs.label, category
        return None

    def _weighted(self, candidates: list[LabelObservation]) -> ClassificationResult:
        floor = self.config.reliable_confidence_floor
        reliable = [obs for obs in candidates if obs.confidence >= floor] or candidates

        weights: dict[Category, list[float]] = {}
        matched: list[tuple[str, Category]] = []
        for obs in reliable:
            category = self._labels.match(obs.label)
            if category is None:
                continue
            weight = obs.confidence**self.config.weight_exponent
            if weight <= 0.0:
                continue
            weights.setdefault(category, []).append(weight)
            matched.append((obs.label, category))

        if not weights:
            return self._fallback()

        # fsum is exactly rounded, so totals do not depend on label order.
        # Equal totals go to the alphabetically first category name.
        ranked = sorted(
            ((category, math.fsum(values)) for category, values in weights.items()),
            key=lambda item: (-item[1], item[0].value),
        )
        winner = ranked[0][0]
        runner_up = ranked[1][0] if len(ranked) > 1 else None
        logger.debug("weighted scores %s -> %s", {str(c): round(s, 4) for c, s in ranked}, winner)
        return ClassificationResult(
            winner,
            DecisionSource.WEIGHTED,
            scores=tuple(ranked),
            matched_labels=tuple(sorted(matched)),
            runner_up=runner_up,
        )

    @staticmethod
    def _fallback() -> ClassificationResult:
        return ClassificationResult(Category.MISC, DecisionSource.FALLBACK)


@functools.lru_cache(maxsize=1)
def default_classifier() -> Classifier:
    """Classifier over the packaged rule tables with default thresholds."""
    return Classifier()


def classify(url: str | None = None, labels: Iterable[LabelInput] = ()) -> Category:
    """Classify one clipped item with the packaged rules."""
    return default_classifier().classify(url, labels)


def explain(url: str | None = None, labels: Iterable[LabelInput] = ()) -> ClassificationResult:
    return default_classifier().explain(url, labels)
