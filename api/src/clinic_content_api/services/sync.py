"""Write an edited Dictionary back to the store as one row per section.

All section writes of a batch run concurrently. If any of them fails the
caller gets a single :class:`SyncError`; writes that already went through
stay in place, so the store can be left partially updated.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, List, Mapping

from clinic_models import Locale

from clinic_content_api.errors import SyncError
from clinic_content_api.services.assembler import decompose
from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SectionWrite:
    locale: Locale
    section: str
    data: Any


@dataclass
class SyncReport:
    locales: List[Locale]
    writes: List[SectionWrite]
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def sections(self) -> int:
        return len(self.writes)


def plan_sync(documents: Mapping[Locale, Any]) -> List[SectionWrite]:
    writes: List[SectionWrite] = []
    for locale, document in documents.items():
        locale = Locale(locale)
        writes.extend(SectionWrite(locale, section, data) for section, data in decompose(document))
    return writes


async def sync_dictionaries(store: ContentStore, documents: Mapping[Locale, Any]) -> SyncReport:
    writes = plan_sync(documents)
    results = await asyncio.gather(
        *(store.upsert(w.locale, w.section, w.data) for w in writes),
        return_exceptions=True,
    )
    failures = [(w, r) for w, r in zip(writes, results) if isinstance(r, BaseException)]
    if failures:
        for write, exc in failures:
            logger.error(
                "Section write failed",
                extra={
                    "locale": write.locale.value,
                    "section": write.section,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                },
            )
        raise SyncError(failed=len(failures), total=len(writes))

    report = SyncReport(locales=[Locale(loc) for loc in documents], writes=writes)
    logger.info(
        "Content synced",
        extra={"locales": [loc.value for loc in report.locales], "sections": report.sections},
    )
    return report


async def sync_dictionary(store: ContentStore, locale: Locale, document: Any) -> SyncReport:
    return await sync_dictionaries(store, {Locale(locale): document})
