"""In-process memo of rendered documents, keyed by slug.

Entries live for the lifetime of the cache: there is no eviction, expiry or
invalidation, so edits to a document after its first render are not seen.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger("mdblog.cache")


class ContentCache:
    """Thread-safe get-or-render cache.

    `get` holds one lock across the lookup, the render and the store, so two
    concurrent misses for the same slug never render twice. A render that
    raises stores nothing.
    """

    def __init__(self, render: Callable[[str], str]) -> None:
        self._render = render
        self._entries: dict[str, str] = {}
        self._lock = threading.Lock()

    def get(self, slug: str) -> str:
        with self._lock:
            cached = self._entries.get(slug)
            if cached is not None:
                logger.debug("Cache hit: %s", slug)
                return cached

            logger.debug("Cache miss: %s", slug)
            markup = self._render(slug)
            self._entries[slug] = markup
            return markup

    def __contains__(self, slug: object) -> bool:
        with self._lock:
            return slug in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
