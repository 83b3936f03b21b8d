"""
newsstream

Aggregates short news items from many independently operated RSS feeds into
one deduplicated, newest-first, capped list driven by the user's category and
source selection.

Core ideas:
- Input: UserPreferences + a static catalog of built-in sources per category
- Process: resolve → fetch through a relay (concurrent, staggered) → parse →
  deduplicate → sort (newest first) → cap
- Output: AggregationResult

A failing source never affects the others; the only errors a caller sees are
RateLimited and AlreadyInProgress.

Example
-------
from newsstream import NewsStream, PreferenceStore, Settings

settings = Settings.from_env()
stream = NewsStream(settings, preferences=PreferenceStore(settings.preferences_path).load())

result = stream.refresh()
for article in stream.switch_category("technology"):
    print(article.published_at, article.source.name, article.title)
"""
from .aggregate import aggregate, filter_articles
from .config import Settings
from .core import NewsStream
from .exceptions import (
    AlreadyInProgress,
    FeedParseFailed,
    ItemExtractionSkipped,
    NewsStreamError,
    PreferenceError,
    RateLimited,
    SourceFetchFailed,
)
from .models import ActiveSource, AggregationResult, Article, Source, UserPreferences
from .parser import parse
from .preferences import PreferenceStore
from .resolver import resolve
from .scheduler import FetchScheduler

__all__ = [
    "ActiveSource",
    "AggregationResult",
    "AlreadyInProgress",
    "Article",
    "FeedParseFailed",
    "FetchScheduler",
    "ItemExtractionSkipped",
    "NewsStream",
    "NewsStreamError",
    "PreferenceError",
    "PreferenceStore",
    "RateLimited",
    "Settings",
    "Source",
    "SourceFetchFailed",
    "UserPreferences",
    "aggregate",
    "filter_articles",
    "parse",
    "resolve",
]
