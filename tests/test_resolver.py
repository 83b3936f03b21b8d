"""Tests for resolving preferences into active sources."""
import unittest

from newsstream.catalog import DEFAULT_CATALOG
from newsstream.models import Source, UserPreferences
from newsstream.resolver import resolve


def _custom(id, name="Custom", url="https://custom.example.com/rss"):
    return Source(id=id, name=name, url=url, verified=False, is_custom=True)


class TestResolve(unittest.TestCase):
    def test_category_major_catalog_order_custom_last(self):
        prefs = UserPreferences(
            categories=("technology", "world"),
            sources={
                # Selection order differs from catalog order
                "technology": ("arstechnica", "theverge"),
                "world": ("guardian-world",),
            },
            custom_sources={"technology": (_custom("custom-1"),)},
        )
        active = resolve(prefs, DEFAULT_CATALOG)
        self.assertEqual(
            [(a.category, a.id) for a in active],
            [
                ("technology", "theverge"),
                ("technology", "arstechnica"),
                ("technology", "custom-1"),
                ("world", "guardian-world"),
            ],
        )

    def test_unselected_and_unknown_ids_ignored(self):
        prefs = UserPreferences(categories=("business",), sources={"business": ("yahoo-finance", "no-such-id")})
        self.assertEqual([a.id for a in resolve(prefs, DEFAULT_CATALOG)], ["yahoo-finance"])

    def test_category_not_in_preferences_is_not_resolved(self):
        prefs = UserPreferences(categories=("world",), sources={"sports": ("espn",)})
        self.assertEqual(resolve(prefs, DEFAULT_CATALOG), [])

    def test_unknown_category_with_custom_sources(self):
        prefs = UserPreferences(
            categories=("gardening",),
            custom_categories=("Gardening",),
            custom_sources={"gardening": (_custom("custom-9", "Garden Weekly"),)},
        )
        active = resolve(prefs, DEFAULT_CATALOG)
        self.assertEqual(len(active), 1)
        self.assertEqual(active[0].category, "gardening")
        self.assertTrue(active[0].source.is_custom)
        self.assertFalse(active[0].source.verified)

    def test_custom_sources_forced_unverified(self):
        trusted = Source(id="custom-2", name="X", url="https://x.example.com/rss", verified=True, is_custom=True)
        prefs = UserPreferences(categories=("world",), custom_sources={"world": (trusted,)})
        active = resolve(prefs, DEFAULT_CATALOG)
        self.assertFalse(active[0].source.verified)

    def test_category_keys_normalized(self):
        prefs = UserPreferences(categories=("Technology ",), sources={"technology": ("wired",)})
        self.assertEqual([(a.category, a.id) for a in resolve(prefs, DEFAULT_CATALOG)], [("technology", "wired")])

    def test_empty_preferences(self):
        self.assertEqual(resolve(UserPreferences(), DEFAULT_CATALOG), [])


if __name__ == "__main__":
    unittest.main()
