# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Rebuild label observations from an item's stored metadata.

The share extension stores image analysis as flat string metadata:
``detected_labels`` holds the top label names joined by commas and
``main_object_label`` the label of a centre crop. Confidences are not kept,
so every recovered label gets the same caller-chosen confidence.
"""

from __future__ import annotations

from collections.abc import Mapping

from clipcat import LabelObservation

DETECTED_LABELS_KEY = "detected_labels"
MAIN_OBJECT_KEY = "main_object_label"


def observations_from_metadata(
    metadata: Mapping[str, str],
    *,
    default_confidence: float = 0.5,
) -> list[LabelObservation]:
    """Labels found in *metadata*, de-duplicated, in stored order.

    The default confidence sits between the reliable floor and the
    high-confidence threshold: stored labels are weighted, never trusted
    outright.
    """
    names = [name.strip() for name in (metadata.get(DETECTED_LABELS_KEY) or "").split(",")]
    main = (metadata.get(MAIN_OBJECT_KEY) or "").strip()
    if main:
        names.append(main)

    seen: set[str] = set()
    observations: list[LabelObservation] = []
    for name in names:
        if not name or name in seen:
            continue
        seen.add(name)
        observations.append(LabelObservation(name, default_confidence))
    return observations
