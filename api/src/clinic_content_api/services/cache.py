"""Per-locale cache of resolved Dictionaries, owned by the application."""

from __future__ import annotations

import logging
from typing import Dict, Optional

from clinic_models import Locale

from clinic_content_api.services.changes import ContentChange
from clinic_content_api.services.resolver import ContentSource, DictionaryResolver, ResolvedDictionary

logger = logging.getLogger(__name__)

# Only store content is kept; anything served while the store is failing is re-resolved per request.
CACHEABLE_SOURCES = frozenset({ContentSource.REMOTE})


class DictionaryCache:
    def __init__(self) -> None:
        self._entries: Dict[Locale, ResolvedDictionary] = {}

    def __contains__(self, locale: object) -> bool:
        return locale in self._entries

    def get(self, locale: Locale) -> Optional[ResolvedDictionary]:
        return self._entries.get(Locale(locale))

    def put(self, resolved: ResolvedDictionary) -> None:
        if resolved.source in CACHEABLE_SOURCES:
            self._entries[resolved.locale] = resolved

    def invalidate(self, locale: Optional[Locale] = None) -> None:
        if locale is None:
            self._entries.clear()
        else:
            self._entries.pop(Locale(locale), None)

    def on_change(self, change: ContentChange) -> None:
        # Any locale may be serving another locale's content, so drop everything
        logger.info(
            "Content changed, clearing Dictionary cache",
            extra={"event": change.event, "locale": change.locale, "section": change.section},
        )
        self.invalidate()

    async def load(self, locale: Locale, resolver: DictionaryResolver) -> ResolvedDictionary:
        cached = self.get(locale)
        if cached is not None:
            return cached
        resolved = await resolver.resolve(locale)
        self.put(resolved)
        return resolved
