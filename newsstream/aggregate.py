from __future__ import annotations

import re
from typing import Iterable, List, Set

from .config import MAX_ARTICLES
from .models import ALL_CATEGORIES, AggregationResult, Article


DEDUP_KEY_LENGTH = 50

_NON_WORD_RE = re.compile(r"[^\w\s]")
_WS_RE = re.compile(r"\s+")


def dedup_key(title: str) -> str:
    """Lowercased title without punctuation, whitespace collapsed, first 50 characters."""
    key = _NON_WORD_RE.sub("", title.lower())
    return _WS_RE.sub(" ", key).strip()[:DEDUP_KEY_LENGTH]


def deduplicate(articles: Iterable[Article]) -> List[Article]:
    """
    Drop articles whose normalized title was already seen.
    Keeps the first occurrence and preserves input order.
    """
    seen: Set[str] = set()
    out: List[Article] = []
    for a in articles:
        key = dedup_key(a.title)
        if key in seen:
            continue
        seen.add(key)
        out.append(a)
    return out


def aggregate(raw_articles: Iterable[Article], cap: int = MAX_ARTICLES) -> AggregationResult:
    """
    Deduplicate, sort newest first and cap one refresh's articles.

    The sort is stable, so articles with equal timestamps keep the order they
    arrived in.
    """
    raw = list(raw_articles)
    unique = deduplicate(raw)
    ordered = sorted(unique, key=lambda a: a.published_at, reverse=True)
    capped = tuple(ordered[: max(cap, 0)])

    present = {ALL_CATEGORIES}
    present.update(a.category for a in capped)
    return AggregationResult(
        articles=capped,
        present_categories=frozenset(present),
        total_raw=len(raw),
        unique_count=len(unique),
    )


def filter_articles(result: AggregationResult, category: str) -> List[Article]:
    if category == ALL_CATEGORIES:
        return list(result.articles)
    return [a for a in result.articles if a.category == category]
