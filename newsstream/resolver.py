from __future__ import annotations

from typing import List

from .catalog import Catalog, category_key
from .models import ActiveSource, Source, UserPreferences


def resolve(prefs: UserPreferences, catalog: Catalog) -> List[ActiveSource]:
    """
    Turn the user's selection into the ordered list of sources to fetch.

    Order is category-major; within a category built-in sources keep catalog
    order and custom sources come last. Keys are not validated here, an unknown
    category simply contributes whatever custom sources it has.
    """
    active: List[ActiveSource] = []
    for category in prefs.categories:
        key = category_key(category)

        selected = set(prefs.sources.get(key, ()))
        for source in catalog.get(key, ()):
            if source.id in selected:
                active.append(ActiveSource(source=source, category=key))

        for custom in prefs.custom_sources.get(key, ()):
            # Custom sources are selected as soon as they exist
            if not custom.is_custom or custom.verified:
                custom = Source(id=custom.id, name=custom.name, url=custom.url, verified=False, is_custom=True)
            active.append(ActiveSource(source=custom, category=key))
    return active
