"""Tests for turning feed documents into Articles."""
import unittest
from datetime import datetime, timezone

from newsstream.exceptions import FeedParseFailed
from newsstream.parser import parse, parse_feed
from newsstream.sanitize import article_id

from helpers import make_source, rss_document, rss_item


NOW = datetime(2025, 6, 11, 9, 30, tzinfo=timezone.utc)


class TestParseFeed(unittest.TestCase):
    def setUp(self):
        self.source = make_source()

    def test_basic_item(self):
        doc = rss_document(rss_item(
            title="Storm hits coast",
            link="https://example.com/storm",
            description="<p>Heavy <b>rain</b> expected</p>",
        ))
        articles = parse_feed(doc, self.source, now=NOW)

        self.assertEqual(len(articles), 1)
        a = articles[0]
        self.assertEqual(a.title, "Storm hits coast")
        self.assertEqual(a.summary, "Heavy rain expected")
        self.assertEqual(a.url, "https://example.com/storm")
        self.assertEqual(a.id, article_id("Storm hits coast", "https://example.com/storm"))
        self.assertEqual(a.published_at, datetime(2025, 6, 10, 4, 0, tzinfo=timezone.utc))
        self.assertEqual(a.loaded_at, NOW)
        self.assertEqual(a.category, "world")
        self.assertEqual(a.source.id, "bbc-world")
        self.assertTrue(a.source.verified)
        self.assertFalse(a.source.is_custom)
        self.assertIsNone(a.image_url)

    def test_accepts_str_and_bytes(self):
        doc = rss_document(rss_item())
        self.assertEqual(
            [a.id for a in parse_feed(doc, self.source, now=NOW)],
            [a.id for a in parse_feed(doc.encode("utf-8"), self.source, now=NOW)],
        )

    def test_ten_considered_five_kept(self):
        items = []
        for i in range(1, 13):
            # Item 2 has no title and is dropped during extraction
            title = None if i == 2 else f"Item {i}"
            items.append(rss_item(title=title, link=f"https://example.com/{i}"))
        articles = parse_feed(rss_document(*items), self.source, now=NOW)

        self.assertEqual([a.title for a in articles], ["Item 1", "Item 3", "Item 4", "Item 5", "Item 6"])

    def test_only_first_ten_items_considered(self):
        items = [rss_item(title=None, link=f"https://example.com/{i}") for i in range(10)]
        items += [rss_item(title="Late item", link="https://example.com/late")]
        self.assertEqual(parse_feed(rss_document(*items), self.source, now=NOW), [])

    def test_guid_used_when_link_missing(self):
        doc = rss_document(rss_item(link=None, guid="https://example.com/guid-link"))
        articles = parse_feed(doc, self.source, now=NOW)
        self.assertEqual(articles[0].url, "https://example.com/guid-link")

    def test_item_without_link_or_guid_dropped(self):
        doc = rss_document(rss_item(link=None), rss_item(title="Kept", link="https://example.com/kept"))
        self.assertEqual([a.title for a in parse_feed(doc, self.source, now=NOW)], ["Kept"])

    def test_item_with_unusable_link_dropped(self):
        doc = rss_document(rss_item(link="ftp://example.com/file"))
        self.assertEqual(parse_feed(doc, self.source, now=NOW), [])

    def test_summary_falls_back_to_title(self):
        long_title = "A" * 120
        doc = rss_document(
            rss_item(title="Short title", link="https://example.com/1"),
            rss_item(title=long_title, link="https://example.com/2", description="<br/>"),
        )
        articles = parse_feed(doc, self.source, now=NOW)
        self.assertEqual(articles[0].summary, "Short title")
        self.assertEqual(articles[1].summary, "A" * 100 + "...")

    def test_missing_or_bad_date_is_now(self):
        doc = rss_document(
            rss_item(title="Undated", link="https://example.com/1", pub_date=None),
            rss_item(title="Garbage date", link="https://example.com/2", pub_date="not a date"),
        )
        articles = parse_feed(doc, self.source, now=NOW)
        self.assertEqual([a.published_at for a in articles], [NOW, NOW])

    def test_implausible_dates_are_now(self):
        doc = rss_document(
            rss_item(title="Far future", link="https://example.com/1", pub_date="Fri, 01 Jan 9999 00:00:00 GMT"),
            rss_item(title="Long ago", link="https://example.com/2", pub_date="Tue, 01 Jan 1901 00:00:00 GMT"),
            rss_item(title="Next week", link="https://example.com/3", pub_date="Wed, 18 Jun 2025 09:30:00 GMT"),
        )
        articles = parse_feed(doc, self.source, now=NOW)
        self.assertEqual([a.published_at for a in articles], [NOW, NOW, NOW])

    def test_slightly_future_date_kept(self):
        doc = rss_document(rss_item(pub_date="Wed, 11 Jun 2025 12:00:00 GMT"))
        articles = parse_feed(doc, self.source, now=NOW)
        self.assertEqual(articles[0].published_at, datetime(2025, 6, 11, 12, 0, tzinfo=timezone.utc))

    def test_media_content_image(self):
        extra = '<media:content url="https://cdn.example.com/photo.png" medium="image"/>'
        articles = parse_feed(rss_document(rss_item(extra=extra)), self.source, now=NOW)
        self.assertEqual(articles[0].image_url, "https://cdn.example.com/photo.png")

    def test_media_thumbnail_image(self):
        extra = '<media:thumbnail url="https://cdn.example.com/thumb.jpg"/>'
        articles = parse_feed(rss_document(rss_item(extra=extra)), self.source, now=NOW)
        self.assertEqual(articles[0].image_url, "https://cdn.example.com/thumb.jpg")

    def test_enclosure_image(self):
        extra = '<enclosure url="https://cdn.example.com/e.webp" type="image/webp" length="100"/>'
        articles = parse_feed(rss_document(rss_item(extra=extra)), self.source, now=NOW)
        self.assertEqual(articles[0].image_url, "https://cdn.example.com/e.webp")

    def test_enclosure_that_is_not_an_image_ignored(self):
        extra = '<enclosure url="https://cdn.example.com/episode.mp3" type="audio/mpeg" length="100"/>'
        articles = parse_feed(rss_document(rss_item(extra=extra)), self.source, now=NOW)
        self.assertIsNone(articles[0].image_url)

    def test_image_from_description(self):
        desc = '<p>Text</p><img src="https://cdn.example.com/inline.gif" />'
        articles = parse_feed(rss_document(rss_item(description=desc)), self.source, now=NOW)
        self.assertEqual(articles[0].image_url, "https://cdn.example.com/inline.gif")
        self.assertEqual(articles[0].summary, "Text")

    def test_insecure_image_rejected(self):
        desc = '<img src="http://cdn.example.com/inline.jpg" />'
        articles = parse_feed(rss_document(rss_item(description=desc)), self.source, now=NOW)
        self.assertIsNone(articles[0].image_url)

    def test_custom_source_metadata_copied(self):
        source = make_source(id="custom-1", name="My Blog", category="gardening", verified=False, is_custom=True)
        articles = parse_feed(rss_document(rss_item()), source, now=NOW)
        self.assertEqual(articles[0].category, "gardening")
        self.assertTrue(articles[0].source.is_custom)
        self.assertFalse(articles[0].source.verified)

    def test_malformed_document_raises(self):
        with self.assertRaises(FeedParseFailed):
            parse_feed("<rss><channel><item><title>x</title></channel></rss>", self.source, now=NOW)
        with self.assertRaises(FeedParseFailed):
            parse_feed("", self.source, now=NOW)


class TestParse(unittest.TestCase):
    def test_malformed_document_yields_empty_list(self):
        self.assertEqual(parse("this is not xml <<<", make_source(), now=NOW), [])

    def test_same_item_same_id(self):
        doc = rss_document(rss_item())
        first = parse(doc, make_source(), now=NOW)
        second = parse(doc, make_source(id="other", category="breaking"), now=NOW)
        self.assertEqual(first[0].id, second[0].id)


if __name__ == "__main__":
    unittest.main()
