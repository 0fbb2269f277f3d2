# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""clipcat: automatic category suggestion for clipped content.

Assigns one built-in taxonomy category to a clipped item from two signals:
- source URL: curated domain table, treated as ground truth
- image labels: (label, confidence) detections from a vision model,
  weighted by confidence squared
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class LabelObservation:
    """One detection emitted by an image-classification model."""

    label: str  # raw model label, e.g. "golden_retriever"
    confidence: float  # expected in [0, 1]; sanitised before use

    def __str__(self) -> str:
        return f"{self.label}:{self.confidence:.2f}"
