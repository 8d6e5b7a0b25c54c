"""Dictionary loading with an ordered fallback chain.

Stages, each tried once:

1. the content store, assembled into a Dictionary;
2. the local ``{locale}.json`` file;
3. the whole chain again for English, when the locale is not English;
4. the built-in default Dictionary.

A stage whose result is not a well-formed Dictionary counts as failed.
:meth:`DictionaryResolver.resolve` never raises.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional

from clinic_models import DEFAULT_LOCALE, Locale

from clinic_content_api.services.assembler import assemble, ensure_well_formed
from clinic_content_api.services.defaults import default_dictionary
from clinic_content_api.services.local_source import LocalContentSource
from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)


class ContentSource(str, Enum):
    REMOTE = "remote"
    LOCAL = "local"
    FALLBACK_LOCALE = "fallback_locale"
    DEFAULT = "default"


@dataclass(frozen=True)
class ResolvedDictionary:
    locale: Locale
    source: ContentSource
    dictionary: Dict[str, Any]


class DictionaryResolver:
    def __init__(self, store: Optional[ContentStore], local: Optional[LocalContentSource]) -> None:
        self.store = store
        self.local = local

    async def load_remote(self, locale: Locale) -> Dict[str, Any]:
        if self.store is None:
            raise LookupError("No content store configured")
        rows = await self.store.get(locale)
        return ensure_well_formed(assemble(rows))

    def load_local(self, locale: Locale) -> Dict[str, Any]:
        if self.local is None:
            raise LookupError("No local content directory configured")
        return ensure_well_formed(self.local.load(locale))

    async def resolve(self, locale: Locale) -> ResolvedDictionary:
        locale = Locale(locale)
        try:
            document = await self.load_remote(locale)
            logger.info("Dictionary loaded", extra={"locale": locale.value, "source": ContentSource.REMOTE.value})
            return ResolvedDictionary(locale, ContentSource.REMOTE, document)
        except Exception as exc:  # noqa: BLE001 - any failure moves to the next stage
            logger.warning(
                "Remote content unavailable, trying local file",
                extra={"locale": locale.value, "exception_type": type(exc).__name__, "exception_message": str(exc)},
            )

        try:
            document = self.load_local(locale)
            logger.info("Dictionary loaded", extra={"locale": locale.value, "source": ContentSource.LOCAL.value})
            return ResolvedDictionary(locale, ContentSource.LOCAL, document)
        except Exception as exc:  # noqa: BLE001
            logger.warning(
                "Local content unavailable",
                extra={"locale": locale.value, "exception_type": type(exc).__name__, "exception_message": str(exc)},
            )

        if locale != DEFAULT_LOCALE:
            fallback = await self.resolve(DEFAULT_LOCALE)
            source = ContentSource.DEFAULT if fallback.source == ContentSource.DEFAULT else ContentSource.FALLBACK_LOCALE
            logger.info(
                "Dictionary served from fallback locale",
                extra={"locale": locale.value, "fallback_locale": DEFAULT_LOCALE.value, "source": source.value},
            )
            return ResolvedDictionary(locale, source, fallback.dictionary)

        logger.error("All content sources failed, serving built-in Dictionary", extra={"locale": locale.value})
        return ResolvedDictionary(locale, ContentSource.DEFAULT, default_dictionary())
