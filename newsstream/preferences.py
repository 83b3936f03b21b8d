"""
Preference document handling.

Loading and saving merely move a JSON object in and out of a file; the
interesting part is the mutation helpers, which are the only place the
selection limits are enforced. Each helper returns a new UserPreferences.
"""
from __future__ import annotations

import json
import logging
import time
from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from .catalog import category_key
from .config import (
    MAX_CATEGORIES,
    MAX_CUSTOM_CATEGORIES,
    MAX_SOURCES_PER_CATEGORY,
)
from .exceptions import PreferenceError
from .models import Source, UserPreferences

logger = logging.getLogger(__name__)


DEFAULT_PREFERENCES: Dict[str, Any] = {
    "categories": ["breaking", "world", "business", "technology"],
    "sources": {
        "breaking": ["foxnews-breaking", "ap-breaking"],
        "world": ["bbc-world", "foxnews-world"],
        "business": ["yahoo-finance", "businessnewsstandard-business"],
        "technology": ["techcrunch", "theverge"],
    },
    "customCategories": [],
    "customSources": {},
}


def _unique(values: Iterable[str]) -> Tuple[str, ...]:
    seen = set()
    out = []
    for v in values:
        if v in seen:
            continue
        seen.add(v)
        out.append(v)
    return tuple(out)


def _custom_source(raw: Mapping[str, Any]) -> Source:
    return Source(
        id=str(raw.get("id") or ""),
        name=str(raw.get("name") or ""),
        url=str(raw.get("url") or ""),
        verified=False,
        is_custom=True,
    )


def from_dict(data: Optional[Mapping[str, Any]]) -> UserPreferences:
    """
    Build preferences from a JSON-shaped object, top-level keys falling back to
    the defaults when absent.
    """
    merged = dict(DEFAULT_PREFERENCES)
    for key, default in DEFAULT_PREFERENCES.items():
        value = (data or {}).get(key)
        if value is None:
            continue
        if isinstance(value, type(default)):
            merged[key] = value
        else:
            logger.warning("Ignoring preference %r: expected %s", key, type(default).__name__)

    def _strings(values: Any) -> List[str]:
        if not isinstance(values, list):
            return []
        return [v for v in values if isinstance(v, str)]

    categories = _unique(k for k in (category_key(c) for c in _strings(merged["categories"])) if k)
    sources = {
        category_key(k): _unique(_strings(v))
        for k, v in merged["sources"].items()
        if isinstance(k, str)
    }
    custom_categories = _unique(c.strip() for c in _strings(merged["customCategories"]) if c.strip())
    custom_sources = {
        category_key(k): tuple(_custom_source(s) for s in v if isinstance(s, Mapping))
        for k, v in merged["customSources"].items()
        if isinstance(k, str) and isinstance(v, list)
    }
    return UserPreferences(
        categories=categories,
        sources=sources,
        custom_categories=custom_categories,
        custom_sources=custom_sources,
    )


def default_preferences() -> UserPreferences:
    return from_dict(None)


class PreferenceStore:
    """JSON file persistence for UserPreferences."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> UserPreferences:
        if not self.path.exists():
            return default_preferences()
        try:
            with self.path.open("r", encoding="utf-8") as fh:
                data = json.load(fh)
        except (OSError, ValueError) as e:
            logger.warning("Failed to load preferences from %s: %s", self.path, e)
            return default_preferences()
        if not isinstance(data, dict):
            logger.warning("Ignoring preferences in %s: expected a JSON object", self.path)
            return default_preferences()
        return from_dict(data)

    def save(self, prefs: UserPreferences) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        with tmp.open("w", encoding="utf-8") as fh:
            json.dump(prefs.to_dict(), fh, indent=2)
        tmp.replace(self.path)
        logger.debug("Preferences saved to %s", self.path)

    def reset(self) -> UserPreferences:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
        return default_preferences()


def select_categories(prefs: UserPreferences, keys: Iterable[str]) -> UserPreferences:
    categories = _unique(category_key(k) for k in keys if category_key(k))
    if not categories:
        raise PreferenceError("At least 1 category must be selected")
    if len(categories) > MAX_CATEGORIES:
        raise PreferenceError(f"Maximum {MAX_CATEGORIES} categories allowed")
    return replace(prefs, categories=categories)


def select_sources(prefs: UserPreferences, category: str, source_ids: Iterable[str]) -> UserPreferences:
    key = category_key(category)
    ids = _unique(source_ids)
    if len(ids) > MAX_SOURCES_PER_CATEGORY:
        raise PreferenceError(f"Maximum {MAX_SOURCES_PER_CATEGORY} sources per category")
    sources = dict(prefs.sources)
    if ids:
        sources[key] = ids
    else:
        sources.pop(key, None)
    return replace(prefs, sources=sources)


def add_custom_category(prefs: UserPreferences, name: str) -> UserPreferences:
    name = (name or "").strip()
    if not name:
        raise PreferenceError("Please enter a category name")
    if len(prefs.custom_categories) >= MAX_CUSTOM_CATEGORIES:
        raise PreferenceError(f"Maximum {MAX_CUSTOM_CATEGORIES} custom categories allowed")
    if name in prefs.custom_categories:
        raise PreferenceError("Category already exists")
    return replace(prefs, custom_categories=prefs.custom_categories + (name,))


def remove_custom_category(prefs: UserPreferences, name: str) -> UserPreferences:
    if name not in prefs.custom_categories:
        raise PreferenceError(f"Unknown custom category: {name}")
    key = category_key(name)
    custom_sources = dict(prefs.custom_sources)
    custom_sources.pop(key, None)
    return replace(
        prefs,
        custom_categories=tuple(c for c in prefs.custom_categories if c != name),
        categories=tuple(c for c in prefs.categories if c != key),
        custom_sources=custom_sources,
    )


def add_custom_source(
    prefs: UserPreferences,
    category: str,
    name: str,
    url: str,
    source_id: Optional[str] = None,
) -> UserPreferences:
    name = (name or "").strip()
    url = (url or "").strip()
    key = category_key(category)
    if not name or not url or not key:
        raise PreferenceError("Please fill all fields")
    if not url.startswith("https://"):
        raise PreferenceError("RSS URL must use HTTPS")

    existing = prefs.custom_sources.get(key, ())
    if len(existing) >= MAX_SOURCES_PER_CATEGORY:
        raise PreferenceError(f"Maximum {MAX_SOURCES_PER_CATEGORY} custom sources per category")
    if any(s.name == name or s.url == url for s in existing):
        raise PreferenceError("Source already exists")

    source = Source(
        id=source_id or f"custom-{int(time.time() * 1000)}",
        name=name,
        url=url,
        verified=False,
        is_custom=True,
    )
    custom_sources = dict(prefs.custom_sources)
    custom_sources[key] = existing + (source,)
    return replace(prefs, custom_sources=custom_sources)


def remove_custom_source(prefs: UserPreferences, category: str, source_id: str) -> UserPreferences:
    key = category_key(category)
    existing = prefs.custom_sources.get(key, ())
    remaining = tuple(s for s in existing if s.id != source_id)
    if len(remaining) == len(existing):
        raise PreferenceError(f"Unknown custom source: {source_id}")
    custom_sources = dict(prefs.custom_sources)
    if remaining:
        custom_sources[key] = remaining
    else:
        del custom_sources[key]
    return replace(prefs, custom_sources=custom_sources)
