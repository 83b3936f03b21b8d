"""Builders shared by the test modules."""
from datetime import datetime, timedelta, timezone

from newsstream.models import ActiveSource, Article, Source, SourceRef


BASE_TIME = datetime(2025, 6, 10, 12, 0, tzinfo=timezone.utc)


def make_source(id="bbc-world", name="BBC World", url="https://feeds.bbci.co.uk/news/world/rss.xml",
                category="world", verified=True, is_custom=False):
    return ActiveSource(
        source=Source(id=id, name=name, url=url, verified=verified, is_custom=is_custom),
        category=category,
    )


def make_article(title, minutes_ago=0, category="world", source_id="bbc-world", url=None):
    return Article(
        id=title.lower().replace(" ", "-"),
        title=title,
        summary=title,
        url=url or f"https://example.com/{title.lower().replace(' ', '-')}",
        published_at=BASE_TIME - timedelta(minutes=minutes_ago),
        source=SourceRef(id=source_id, name=source_id, verified=True, is_custom=False),
        category=category,
        loaded_at=BASE_TIME,
    )


def rss_item(title="Storm hits coast", link="https://example.com/storm", description=None,
             pub_date="Tue, 10 Jun 2025 04:00:00 GMT", guid=None, extra=""):
    parts = ["<item>"]
    if title is not None:
        parts.append(f"<title>{title}</title>")
    if link is not None:
        parts.append(f"<link>{link}</link>")
    if guid is not None:
        parts.append(f"<guid>{guid}</guid>")
    if description is not None:
        parts.append(f"<description><![CDATA[{description}]]></description>")
    if pub_date is not None:
        parts.append(f"<pubDate>{pub_date}</pubDate>")
    parts.append(extra)
    parts.append("</item>")
    return "".join(parts)


def rss_document(*items):
    return (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<rss version="2.0" xmlns:media="http://search.yahoo.com/mrss/">'
        "<channel><title>Test feed</title><link>https://example.com/</link>"
        "<description>Test</description>"
        + "".join(items)
        + "</channel></rss>"
    )
