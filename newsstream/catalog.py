from __future__ import annotations

import re
from typing import Dict, Mapping, Optional, Tuple

from .models import CategoryInfo, Source, UserPreferences


Catalog = Mapping[str, Tuple[Source, ...]]

_WS_RE = re.compile(r"\s+")


def category_key(name: str) -> str:
    """Normalize a category name into its key: whitespace removed, lowercased."""
    return _WS_RE.sub("", name or "").lower()


def _builtin(id: str, name: str, url: str) -> Source:
    return Source(id=id, name=name, url=url, verified=True, is_custom=False)


DEFAULT_CATALOG: Dict[str, Tuple[Source, ...]] = {
    "breaking": (
        _builtin("foxnews-breaking", "Fox News", "https://moxie.foxnews.com/google-publisher/latest.xml"),
        _builtin("ndtv", "NDTV", "https://feeds.feedburner.com/ndtvnews-india-news"),
        _builtin("bbc-breaking", "BBC News", "https://feeds.bbci.co.uk/news/rss.xml"),
        _builtin("sky-breaking", "Sky News", "https://feeds.skynews.com/feeds/rss/world.xml"),
    ),
    "world": (
        _builtin("bbc-world", "BBC World", "https://feeds.bbci.co.uk/news/world/rss.xml"),
        _builtin("foxnews-world", "Fox News", "https://moxie.foxnews.com/google-publisher/world.xml"),
        _builtin("guardian-world", "The Guardian", "https://www.theguardian.com/world/rss"),
    ),
    "politics": (
        _builtin("foxnews-politics", "Fox News Politics", "https://moxie.foxnews.com/google-publisher/politics.xml"),
        _builtin("npr-politics", "NPR Politics", "https://feeds.npr.org/1014/rss.xml"),
        _builtin("hill-politics", "The Hill", "https://thehill.com/rss/syndicator/19109"),
    ),
    "business": (
        _builtin("yahoo-finance", "Yahoo Finance", "https://news.yahoo.com/rss/finance"),
        _builtin("marketwatch", "MarketWatch", "https://feeds.marketwatch.com/marketwatch/topstories/"),
        _builtin("cnbc-business", "CNBC", "https://www.cnbc.com/id/100003114/device/rss/rss.html"),
    ),
    "technology": (
        _builtin("theverge", "The Verge", "https://www.theverge.com/rss/index.xml"),
        _builtin("wired", "Wired", "https://www.wired.com/feed/rss"),
        _builtin("arstechnica", "Ars Technica", "https://feeds.arstechnica.com/arstechnica/index"),
    ),
    "sports": (
        _builtin("espn", "ESPN", "https://www.espn.com/espn/rss/news"),
        _builtin("bbc-sport", "BBC Sport", "https://feeds.bbci.co.uk/sport/rss.xml"),
        _builtin("cbs-sports", "CBS Sports", "https://www.cbssports.com/rss/headlines/"),
    ),
}

CATEGORY_METADATA: Dict[str, CategoryInfo] = {
    "breaking": CategoryInfo("breaking", "Breaking News", "exclamation-circle", "danger"),
    "world": CategoryInfo("world", "World", "globe-alt", "primary"),
    "politics": CategoryInfo("politics", "Politics", "library", "secondary"),
    "business": CategoryInfo("business", "Business", "briefcase", "success"),
    "technology": CategoryInfo("technology", "Technology", "desktop-computer", "primary"),
    "sports": CategoryInfo("sports", "Sports", "lightning-bolt", "warning"),
}

CUSTOM_CATEGORY_ICON = "newspaper"
CUSTOM_CATEGORY_COLOR = "secondary"


def category_info(key: str, prefs: Optional[UserPreferences] = None) -> CategoryInfo:
    """
    Metadata for a category key.

    Built-in categories return their fixed metadata. Custom categories get the
    user's display name with a synthesized icon and color; unknown keys fall
    back to the capitalized key.
    """
    meta = CATEGORY_METADATA.get(key)
    if meta is not None:
        return meta
    if prefs is not None:
        for name in prefs.custom_categories:
            if category_key(name) == key:
                return CategoryInfo(key, name, CUSTOM_CATEGORY_ICON, CUSTOM_CATEGORY_COLOR, is_custom=True)
    return CategoryInfo(key, key[:1].upper() + key[1:], CUSTOM_CATEGORY_ICON, CUSTOM_CATEGORY_COLOR, is_custom=True)
