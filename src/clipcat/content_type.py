# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Content type of a shared URL (social post, video, product page, ...).

Independent of the category taxonomy: a YouTube link is a ``video`` whatever
its category. First-match waterfall in this order:

    social -> show -> video -> music -> podcast -> book -> app -> image
    -> product -> webpage

Social hosts are compared exactly (``x.com`` must not match ``box.com``);
every other check is a substring or suffix test on the lower-cased URL.
"""

from __future__ import annotations

from enum import StrEnum
from urllib.parse import urlparse


class ContentType(StrEnum):
    SOCIAL = "social"
    SHOW = "show"
    VIDEO = "video"
    MUSIC = "music"
    PODCAST = "podcast"
    BOOK = "book"
    APP = "app"
    IMAGE = "image"
    PRODUCT = "product"
    WEBPAGE = "webpage"


# ---------------------------------------------------------------------------
# Detection terms
# ---------------------------------------------------------------------------

SOCIAL_HOSTS: frozenset[str] = frozenset(
    {
        "twitter.com",
        "x.com",
        "instagram.com",
        "pinterest.com",
        "pin.it",
        "tiktok.com",
        "threads.net",
        "threads.com",
    }
)

SHOW_PLATFORMS: tuple[str, ...] = (
    "netflix.com",
    "disneyplus.com",
    "hulu.com",
    "hbomax.com",
    "max.com",
    "paramountplus.com",
    "peacocktv.com",
    "apple.com/tv",
    "tv.apple.com",
    "amazon.com/prime/video",
    "amazon.com/gp/video",
    "primevideo.com",
    "crunchyroll.com",
    "funimation.com",
    "showtime.com",
    "starz.com",
    "epix.com",
    "discovery.com",
    "discoveryplus.com",
    "pluto.tv",
    "canal-plus.com",
    "canalplus.com",
    "france.tv",
    "arte.tv",
    "ocs.fr",
    "molotov.tv",
    "salto.fr",
    "tf1.fr",
    "m6.fr",
    "mycan.al",
)

# Only trusted on the two stores that also sell non-video goods.
SHOW_PATHS: tuple[str, ...] = ("/series/", "/show/", "/episode/", "/season/", "/tv/", "/watch/", "/stream/", "/movie/")

VIDEO_HOSTS: tuple[str, ...] = ("youtube.com", "youtu.be")
VIDEO_EXTENSIONS: tuple[str, ...] = (".mp4", ".mov", ".avi", ".mkv")

MUSIC_PLATFORMS: tuple[str, ...] = (
    "spotify.com",
    "music.apple.com",
    "soundcloud.com",
    "deezer.com",
    "tidal.com",
    "bandcamp.com",
)

PODCAST_PLATFORMS: tuple[str, ...] = (
    "podcasts.apple.com",
    "spotify.com/show",
    "spotify.com/episode",
    "anchor.fm",
    "buzzsprout.com",
    "podbean.com",
    "castbox.fm",
    "overcast.fm",
    "pocketcasts.com",
    "stitcher.com",
    "tunein.com",
    "iheart.com",
    "audible.com",
    "podcast.google.com",
)
PODCAST_PATHS: tuple[str, ...] = ("/podcast/", "/show/", "/episode/", "/listen/")

BOOK_PLATFORMS: tuple[str, ...] = (
    "books.apple.com",
    "goodreads.com",
    "google.com/books",
    "audible.com",
    "scribd.com",
    "kindle.amazon.com",
    "kobo.com",
    "librarything.com",
    "bookbub.com",
    "overdrive.com",
    "hoopla.com",
    "blinkist.com",
    "storytel.com",
    "bookmate.com",
)
BOOK_PATHS: tuple[str, ...] = ("/book/", "/books/", "/ebook/", "/audiobook/")
# Kindle ASINs start with B0; the node ids are the Books and Kindle Store browse nodes.
AMAZON_BOOK_MARKERS: tuple[str, ...] = (
    "/dp/b0",
    "/books/",
    "/kindle-ebooks/",
    "/audible/",
    "node=283155",
    "node=154606011",
)

APP_STORES: tuple[str, ...] = ("apps.apple.com", "play.google.com")

IMAGE_EXTENSIONS: tuple[str, ...] = (".jpg", ".jpeg", ".png", ".gif", ".webp", ".svg")

ECOMMERCE_HOSTS: tuple[str, ...] = (
    # marketplaces
    "amazon.",
    "amzn.",
    "ebay.",
    "etsy.",
    "alibaba.",
    "aliexpress.",
    # department stores
    "walmart.",
    "target.",
    "bestbuy.",
    "homedepot.",
    "lowes.",
    "ikea.",
    "wayfair.",
    "overstock.",
    "costco.",
    "samsclub.",
    # fashion
    "macys.",
    "nordstrom.",
    "zappos.",
    "asos.",
    "hm.com",
    "zara.",
    "uniqlo.",
    "gap.",
    "oldnavy.",
    "bananarepublic.",
    "nike.",
    "adidas.",
    "puma.",
    "underarmour.",
    "lululemon.",
    # beauty
    "sephora.",
    "ulta.",
    "cvs.",
    "walgreens.",
    "rite-aid.",
    # tech
    "apple.com/",
    "microsoft.com/",
    "samsung.com/",
    "sony.com/",
    # shop platforms
    "shopify.com",
    "myshopify.com",
    "bigcommerce.com",
    "woocommerce.com",
)

PRODUCT_PATHS: tuple[str, ...] = (
    "/product/",
    "/products/",
    "/item/",
    "/items/",
    "/p/",
    "/dp/",
    "/pd/",
    "/sku/",
    "/buy/",
    "/shop/",
    "/store/",
    "/collections/",
    "/category/",
    "/categories/",
    "/catalog/",
    "/boutique/",
    "/marketplace/",
)


# ---------------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------------


def _split(url_lower: str) -> tuple[str, str]:
    """(host without "www.", path); empty strings for unparsable input."""
    try:
        parts = urlparse(url_lower)
        host = parts.hostname or ""
    except ValueError:
        return "", ""
    return host.removeprefix("www."), parts.path


def _host(url_lower: str) -> str:
    return _split(url_lower)[0]


def _path(url_lower: str) -> str:
    return _split(url_lower)[1]


def _contains_any(url_lower: str, terms: tuple[str, ...]) -> bool:
    return any(term in url_lower for term in terms)


def _is_show(u: str) -> bool:
    if _contains_any(u, SHOW_PLATFORMS):
        return True
    if "amazon.com" in u or "apple.com" in u:
        return _contains_any(u, SHOW_PATHS)
    return False


def _is_video(u: str) -> bool:
    return _contains_any(u, VIDEO_HOSTS) or _path(u).endswith(VIDEO_EXTENSIONS)


def _is_podcast(u: str) -> bool:
    return _contains_any(u, PODCAST_PLATFORMS) or _contains_any(u, PODCAST_PATHS)


def _is_book(u: str) -> bool:
    if "amazon.com" in u:
        return _contains_any(u, AMAZON_BOOK_MARKERS)
    return _contains_any(u, BOOK_PLATFORMS) or _contains_any(u, BOOK_PATHS)


def detect_content_type(url: str | None) -> ContentType:
    """Classify a shared URL into a ``ContentType``; ``webpage`` by default."""
    if not url:
        return ContentType.WEBPAGE
    u = url.strip().lower()

    if _host(u) in SOCIAL_HOSTS:
        return ContentType.SOCIAL
    if _is_show(u):
        return ContentType.SHOW
    if _is_video(u):
        return ContentType.VIDEO
    if _contains_any(u, MUSIC_PLATFORMS):
        return ContentType.MUSIC
    if _is_podcast(u):
        return ContentType.PODCAST
    if _is_book(u):
        return ContentType.BOOK
    if _contains_any(u, APP_STORES):
        return ContentType.APP
    if _path(u).endswith(IMAGE_EXTENSIONS):
        return ContentType.IMAGE
    if _contains_any(u, ECOMMERCE_HOSTS) or _contains_any(u, PRODUCT_PATHS):
        return ContentType.PRODUCT
    return ContentType.WEBPAGE
