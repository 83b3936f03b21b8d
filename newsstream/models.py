from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, FrozenSet, List, Optional, Tuple


ALL_CATEGORIES = "all"


@dataclass(frozen=True)
class Source:
    """A feed source, either from the built-in catalog or added by the user."""
    id: str
    name: str
    url: str
    verified: bool = False
    is_custom: bool = False

    def to_dict(self) -> Dict[str, object]:
        return {
            "id": self.id,
            "name": self.name,
            "url": self.url,
            "verified": self.verified,
            "isCustom": self.is_custom,
        }


@dataclass(frozen=True)
class SourceRef:
    """The part of a Source that travels with every Article."""
    id: str
    name: str
    verified: bool
    is_custom: bool


@dataclass(frozen=True)
class ActiveSource:
    """A Source bound to the category it is fetched for during one refresh."""
    source: Source
    category: str

    @property
    def id(self) -> str:
        return self.source.id

    @property
    def name(self) -> str:
        return self.source.name

    @property
    def url(self) -> str:
        return self.source.url

    def ref(self) -> SourceRef:
        return SourceRef(
            id=self.source.id,
            name=self.source.name,
            verified=self.source.verified,
            is_custom=self.source.is_custom,
        )


@dataclass(frozen=True)
class Article:
    """
    Normalized news item produced by the feed parser.

    WARNING: Do not change fields lightly. This is the contract handed to the
    presentation layer.
    """
    id: str
    title: str
    summary: str
    url: str
    published_at: datetime
    source: SourceRef
    category: str
    loaded_at: datetime
    image_url: Optional[str] = None


@dataclass(frozen=True)
class CategoryInfo:
    key: str
    name: str
    icon: str
    color: str
    is_custom: bool = False


@dataclass(frozen=True)
class UserPreferences:
    """
    User's category and source selection.

    Limits are enforced by the mutation helpers in `newsstream.preferences`,
    never when resolving.
    """
    categories: Tuple[str, ...] = ()
    sources: Dict[str, Tuple[str, ...]] = field(default_factory=dict)
    custom_categories: Tuple[str, ...] = ()
    custom_sources: Dict[str, Tuple[Source, ...]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, object]:
        return {
            "categories": list(self.categories),
            "sources": {k: list(v) for k, v in self.sources.items()},
            "customCategories": list(self.custom_categories),
            "customSources": {
                k: [s.to_dict() for s in v] for k, v in self.custom_sources.items()
            },
        }


@dataclass(frozen=True)
class AggregationResult:
    articles: Tuple[Article, ...] = ()
    present_categories: FrozenSet[str] = frozenset({ALL_CATEGORIES})
    total_raw: int = 0
    unique_count: int = 0

    def to_dict(self) -> Dict[str, object]:
        items: List[Dict[str, object]] = []
        for a in self.articles:
            items.append({
                "id": a.id,
                "title": a.title,
                "summary": a.summary,
                "url": a.url,
                "imageUrl": a.image_url,
                "publishedAt": a.published_at.isoformat(),
                "source": {
                    "id": a.source.id,
                    "name": a.source.name,
                    "verified": a.source.verified,
                    "isCustom": a.source.is_custom,
                },
                "category": a.category,
                "loadedAt": a.loaded_at.isoformat(),
            })
        return {
            "articles": items,
            "presentCategories": sorted(self.present_categories),
            "totalRaw": self.total_raw,
            "uniqueCount": self.unique_count,
        }
