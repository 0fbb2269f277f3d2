# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Closed category taxonomy and the fixed evaluation orders of both matchers.

Leaf module. The priority tuples are the single source of truth for
"first match wins": rule tables are always walked in these orders, never in
mapping iteration order.
"""

from __future__ import annotations

from enum import StrEnum


class Category(StrEnum):
    """Built-in content categories a clipped item can be assigned to."""

    FASHION = "fashion"
    FOOD = "food"
    TECH = "tech"
    HOME = "home"
    BEAUTY = "beauty"
    BOOKS = "books"
    MUSIC = "music"
    SHOW = "show"
    SPORTS = "sports"
    OUTDOOR = "outdoor"
    ANIMALS = "animals"
    CARS = "cars"
    ART = "art"
    MEDIA = "media"
    TRAVEL = "travel"
    KIDS = "kids"
    MISC = "misc"  # fallback only, never matched by a rule


# Vision label rules. Earlier categories win when a label could fit several
# (a "high chair" is furniture before it is anything else).
LABEL_PRIORITY: tuple[Category, ...] = (
    Category.HOME,
    Category.FASHION,
    Category.FOOD,
    Category.TECH,
    Category.BEAUTY,
    Category.BOOKS,
    Category.MUSIC,
    Category.SHOW,
    Category.SPORTS,
    Category.OUTDOOR,
    Category.ANIMALS,
    Category.CARS,
    Category.ART,
)

# URL domain rules. Parks and wildlife sites are OUTDOOR; SHOW, MUSIC and BOOKS
# streaming and reading platforms come last.
DOMAIN_PRIORITY: tuple[Category, ...] = (
    Category.MEDIA,
    Category.TRAVEL,
    Category.TECH,
    Category.FASHION,
    Category.HOME,
    Category.FOOD,
    Category.BEAUTY,
    Category.SPORTS,
    Category.CARS,
    Category.ART,
    Category.OUTDOOR,
    Category.KIDS,
    Category.SHOW,
    Category.MUSIC,
    Category.BOOKS,
)
