from __future__ import annotations

import logging
from typing import List, Optional

from .aggregate import aggregate, filter_articles
from .catalog import DEFAULT_CATALOG, Catalog, category_info
from .config import Settings
from .fetcher import RelayClient
from .models import ALL_CATEGORIES, AggregationResult, Article, CategoryInfo, UserPreferences
from .preferences import default_preferences
from .resolver import resolve
from .scheduler import FetchScheduler, ProgressCallback

logger = logging.getLogger(__name__)


class NewsStream:
    """
    High-level API: one object per user session.

    Refresh cycle: resolve preferences → fetch and parse every active source →
    deduplicate, sort (newest first) and cap. Each refresh replaces the previous
    result wholesale.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        catalog: Catalog = DEFAULT_CATALOG,
        preferences: Optional[UserPreferences] = None,
        client: Optional[RelayClient] = None,
        scheduler: Optional[FetchScheduler] = None,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.settings = settings or Settings()
        self.catalog = catalog
        self.preferences = preferences or default_preferences()
        self._owned_client: Optional[RelayClient] = None
        if scheduler is None:
            if client is None:
                client = self._owned_client = RelayClient(
                    self.settings.relay_url, timeout=self.settings.request_timeout
                )
            scheduler = FetchScheduler(
                client,
                min_interval=self.settings.min_refresh_interval,
                stagger_delay=self.settings.stagger_delay,
                max_workers=self.settings.max_workers,
                max_items=self.settings.max_items_considered,
                max_articles_per_source=self.settings.max_articles_per_source,
                loading_budget=self.settings.loading_budget,
                on_progress=on_progress,
            )
        self.scheduler = scheduler
        self.current_category = ALL_CATEGORIES
        self.result = AggregationResult()

    def close(self) -> None:
        """Release the HTTP session, if this stream created it."""
        if self._owned_client is not None:
            self._owned_client.close()
            self._owned_client = None

    def __enter__(self) -> "NewsStream":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def refresh(self, now: Optional[float] = None) -> AggregationResult:
        """
        Run one refresh cycle and return its result.

        RateLimited and AlreadyInProgress propagate from the scheduler; per-source
        failures never do.
        """
        active = resolve(self.preferences, self.catalog)
        raw = self.scheduler.refresh(active, now=now)
        result = aggregate(raw, cap=self.settings.max_articles)
        logger.info(
            "Processed %d unique articles from %d total", len(result.articles), result.total_raw
        )
        self.result = result
        return result

    def update_preferences(self, preferences: UserPreferences) -> None:
        self.preferences = preferences

    def switch_category(self, category: str) -> List[Article]:
        self.current_category = category
        return self.articles()

    def articles(self) -> List[Article]:
        return filter_articles(self.result, self.current_category)

    @property
    def progress(self) -> float:
        return self.scheduler.progress

    def categories(self) -> List[CategoryInfo]:
        """Metadata for the categories present in the current result, in preference order."""
        present = self.result.present_categories
        ordered = [c for c in self.preferences.categories if c in present]
        ordered += sorted(c for c in present if c not in ordered and c != ALL_CATEGORIES)
        return [category_info(c, self.preferences) for c in ordered]
