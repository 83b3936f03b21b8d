from __future__ import annotations

import io
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Iterator, List, Optional, Union

import feedparser
from dateutil import parser as dateutil_parser

from .config import MAX_ARTICLES_PER_SOURCE, MAX_ITEMS_CONSIDERED
from .exceptions import FeedParseFailed, ItemExtractionSkipped
from .models import ActiveSource, Article
from .sanitize import (
    article_id,
    first_img_src,
    is_valid_image_url,
    sanitize_text,
    sanitize_url,
    summarize_title,
)

logger = logging.getLogger(__name__)

# Bozo conditions that do not make the document unusable
_TOLERATED_BOZO = (feedparser.CharacterEncodingOverride, feedparser.NonXMLContentType)

# Dates outside [epoch, now + slack] are feed errors, not real publication times
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_FUTURE_SLACK = timedelta(days=1)


def _text(entry: Dict[str, Any], key: str) -> str:
    value = entry.get(key)
    return value.strip() if isinstance(value, str) else ""


def _to_datetime(entry: Dict[str, Any], now: datetime) -> Optional[datetime]:
    """
    Timezone-aware UTC datetime for the entry's date.
    Priority: published_parsed -> updated_parsed -> dateutil on the raw string -> None.
    Candidates before 1970 or more than a day after `now` are ignored.
    """
    for dt in _date_candidates(entry):
        if _EPOCH <= dt <= now + _FUTURE_SLACK:
            return dt
        logger.debug("Ignoring implausible date %s", dt.isoformat())
    return None


def _date_candidates(entry: Dict[str, Any]) -> Iterator[datetime]:
    for key in ("published_parsed", "updated_parsed"):
        val = entry.get(key)
        if val:
            try:
                yield datetime(*val[:6], tzinfo=timezone.utc)
            except (TypeError, ValueError):
                continue
    for key in ("published", "updated"):
        s = _text(entry, key)
        if not s:
            continue
        try:
            dt = dateutil_parser.parse(s)
            dt = dt.replace(tzinfo=timezone.utc) if dt.tzinfo is None else dt.astimezone(timezone.utc)
        except (ValueError, OverflowError):
            continue
        yield dt


def _image_url(entry: Dict[str, Any], description: str) -> Optional[str]:
    # media:content / media:thumbnail
    for key in ("media_content", "media_thumbnail"):
        media = entry.get(key)
        if media:
            url = media[0].get("url")
            if url and is_valid_image_url(url):
                return url
            break

    enclosures = entry.get("enclosures") or []
    if enclosures:
        enc = enclosures[0]
        if (enc.get("type") or "").startswith("image/"):
            url = enc.get("href") or enc.get("url")
            if url and is_valid_image_url(url):
                return url

    src = first_img_src(description)
    if src and is_valid_image_url(src):
        return src
    return None


def extract_article(entry: Dict[str, Any], source: ActiveSource, now: datetime) -> Article:
    """
    Build an Article from one parsed feed entry.

    Raises ItemExtractionSkipped when the title or a usable link is missing.
    """
    raw_title = _text(entry, "title")
    raw_link = _text(entry, "link") or _text(entry, "id") or _text(entry, "guid")
    if not raw_title or not raw_link:
        raise ItemExtractionSkipped("entry has no title or link")

    title = sanitize_text(raw_title)
    if not title:
        raise ItemExtractionSkipped("title is empty after sanitization")

    url = sanitize_url(raw_link)
    if url is None:
        raise ItemExtractionSkipped(f"unusable link: {raw_link!r}")

    description = entry.get("summary") or entry.get("description") or ""
    summary = sanitize_text(description) or summarize_title(title)

    return Article(
        id=article_id(raw_title, raw_link),
        title=title,
        summary=summary,
        url=url,
        image_url=_image_url(entry, description),
        published_at=_to_datetime(entry, now) or now,
        source=source.ref(),
        category=source.category,
        loaded_at=now,
    )


def parse_feed(
    raw: Union[str, bytes],
    source: ActiveSource,
    *,
    now: Optional[datetime] = None,
    max_items: int = MAX_ITEMS_CONSIDERED,
    max_articles: int = MAX_ARTICLES_PER_SOURCE,
) -> List[Article]:
    """
    Parse one feed document into at most `max_articles` Articles.

    Only the first `max_items` entries are looked at; entries that cannot be
    turned into an Article are skipped before the final slice is taken.
    Raises FeedParseFailed when the document is not a well-formed feed.
    """
    if isinstance(raw, str):
        raw = raw.encode("utf-8")
    if not raw or not raw.strip():
        raise FeedParseFailed(f"Empty feed document from {source.name}")

    # Wrapped in a stream so feedparser never treats the payload as a URL or path
    feed = feedparser.parse(io.BytesIO(raw))
    if getattr(feed, "bozo", 0):
        exc = getattr(feed, "bozo_exception", None)
        if not isinstance(exc, _TOLERATED_BOZO):
            msg = f"Invalid RSS/Atom feed from {source.name}"
            if exc:
                msg += f" ({exc})"
            raise FeedParseFailed(msg)

    now = now or datetime.now(timezone.utc)
    articles: List[Article] = []
    for entry in feed.entries[:max_items]:
        try:
            articles.append(extract_article(entry, source, now))
        except ItemExtractionSkipped as e:
            logger.debug("Skipping item from %s: %s", source.name, e)
    return articles[:max_articles]


def parse(raw: Union[str, bytes], source: ActiveSource, **kwargs: Any) -> List[Article]:
    """Like parse_feed, but a malformed document yields an empty list."""
    try:
        return parse_feed(raw, source, **kwargs)
    except FeedParseFailed as e:
        logger.warning("%s", e)
        return []
