"""
Concurrent retrieval of every active source for one refresh.

Each source is fetched and parsed on its own worker; the calling thread
collects results as they complete, so the article accumulator and progress
counter are only ever touched from one thread. A source that fails in any
way contributes nothing and never affects its siblings.
"""
from __future__ import annotations

import concurrent.futures as _fut
import logging
import threading
import time
from typing import Callable, List, Optional, Sequence

from .config import (
    LOADING_BUDGET,
    MAX_ARTICLES_PER_SOURCE,
    MAX_ITEMS_CONSIDERED,
    MIN_REFRESH_INTERVAL,
    STAGGER_DELAY,
)
from .exceptions import AlreadyInProgress, FeedParseFailed, RateLimited, SourceFetchFailed
from .fetcher import RelayClient
from .models import ActiveSource, Article
from .parser import parse_feed

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]


class FetchScheduler:
    def __init__(
        self,
        client: RelayClient,
        *,
        min_interval: float = MIN_REFRESH_INTERVAL,
        stagger_delay: float = STAGGER_DELAY,
        max_workers: Optional[int] = None,
        max_items: int = MAX_ITEMS_CONSIDERED,
        max_articles_per_source: int = MAX_ARTICLES_PER_SOURCE,
        loading_budget: float = LOADING_BUDGET,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
        on_progress: Optional[ProgressCallback] = None,
    ) -> None:
        self.client = client
        self.min_interval = min_interval
        self.stagger_delay = stagger_delay
        self.max_workers = max_workers
        self.max_items = max_items
        self.max_articles_per_source = max_articles_per_source
        self.loading_budget = loading_budget
        self.on_progress = on_progress
        self._clock = clock
        self._sleep = sleep

        self._lock = threading.Lock()
        self._in_flight = False
        self.last_refresh_at: Optional[float] = None
        self._completed = 0
        self._total = 0
        self.failed_sources: List[str] = []

    @property
    def in_flight(self) -> bool:
        with self._lock:
            return self._in_flight

    @property
    def progress(self) -> float:
        """Fraction of the current (or last) refresh's sources that have settled."""
        with self._lock:
            if self._total == 0:
                return 1.0 if self.last_refresh_at is not None else 0.0
            return self._completed / self._total

    def _admit(self, count: int, now: float) -> None:
        with self._lock:
            if self._in_flight:
                raise AlreadyInProgress("A refresh is already in progress")
            if self.last_refresh_at is not None:
                elapsed = now - self.last_refresh_at
                if elapsed < self.min_interval:
                    raise RateLimited(self.min_interval - elapsed)
            self._in_flight = True
            self.last_refresh_at = now
            self._completed = 0
            self._total = count

    def refresh(self, active_sources: Sequence[ActiveSource], now: Optional[float] = None) -> List[Article]:
        """
        Fetch and parse every active source, waiting for all of them to settle.

        Raises AlreadyInProgress if another refresh is running and RateLimited if
        the previous one started less than `min_interval` seconds before `now`;
        nothing is fetched in either case. The returned list is the concatenation
        of each source's articles in completion order.
        """
        now = self._clock() if now is None else now
        try:
            self._admit(len(active_sources), now)
        except (AlreadyInProgress, RateLimited) as e:
            logger.info("Refresh rejected: %s", e)
            raise

        try:
            return self._run(list(active_sources))
        finally:
            with self._lock:
                self._in_flight = False

    def _load_source(self, index: int, source: ActiveSource, dispatched: float) -> List[Article]:
        # Offset from dispatch, so queueing behind a small pool does not add to it
        delay = index * self.stagger_delay - (self._clock() - dispatched)
        if delay > 0:
            self._sleep(delay)
        raw = self.client.fetch(source)
        return parse_feed(
            raw,
            source,
            max_items=self.max_items,
            max_articles=self.max_articles_per_source,
        )

    def _settle(self) -> None:
        with self._lock:
            self._completed += 1
            completed, total = self._completed, self._total
        if self.on_progress:
            self.on_progress(completed, total)

    def _run(self, sources: List[ActiveSource]) -> List[Article]:
        self.failed_sources = []
        if not sources:
            logger.info("No active sources configured")
            return []

        started = self._clock()
        logger.info("Loading news from %d sources", len(sources))
        articles: List[Article] = []
        workers = min(self.max_workers or len(sources), len(sources))

        with _fut.ThreadPoolExecutor(max_workers=workers, thread_name_prefix="newsstream-fetch") as ex:
            futures = {ex.submit(self._load_source, i, s, started): s for i, s in enumerate(sources)}
            for fu in _fut.as_completed(futures):
                source = futures[fu]
                try:
                    loaded = fu.result()
                except (SourceFetchFailed, FeedParseFailed) as e:
                    logger.warning("Failed to load %s: %s", source.name, e)
                    self.failed_sources.append(source.id)
                    loaded = []
                except Exception:
                    logger.exception("Unexpected error loading %s (%s)", source.name, source.url)
                    self.failed_sources.append(source.id)
                    loaded = []
                else:
                    logger.debug("Loaded %d articles from %s", len(loaded), source.name)
                articles.extend(loaded)
                self._settle()

        duration = self._clock() - started
        if duration > self.loading_budget:
            logger.warning(
                "Refresh took %.2fs, over the %.1fs loading budget", duration, self.loading_budget
            )
        logger.info(
            "Loaded %d articles from %d sources (%d failed) in %.2fs",
            len(articles), len(sources), len(self.failed_sources), duration,
        )
        return articles
