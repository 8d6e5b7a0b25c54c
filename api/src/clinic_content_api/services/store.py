"""Contract shared by the content store backends."""

from __future__ import annotations

import abc
from datetime import datetime
from typing import Any, List, Optional

from clinic_models import ContentRow, GalleryImageRow, ImageType, Locale

from clinic_content_api.config import Settings
from clinic_content_api.services.changes import ChangeCallback, ContentChange, ContentChangeFeed, Subscription


class ContentStore(abc.ABC):
    """Row-level access to the ``content`` and ``gallery_images`` tables.

    Every write goes straight to the backing store; nothing is cached here.
    Failures surface as :class:`~clinic_content_api.errors.StoreError`.
    """

    def __init__(self, feed: Optional[ContentChangeFeed] = None) -> None:
        self.feed = feed or ContentChangeFeed()

    @abc.abstractmethod
    async def get(self, locale: Locale, section: Optional[str] = None) -> List[ContentRow]:
        """Rows for a locale, newest first, optionally narrowed to one section."""

    @abc.abstractmethod
    async def upsert(
        self,
        locale: Locale,
        section: str,
        data: Any,
        expected_version: Optional[int] = None,
    ) -> ContentRow:
        """Insert or replace the row keyed by ``(locale, section)``.

        With ``expected_version`` the write only happens if the stored row is at
        that version (``0`` meaning "no row yet"); otherwise
        :class:`~clinic_content_api.errors.VersionConflictError` is raised.
        """

    @abc.abstractmethod
    async def get_gallery_images(self, case_id: int) -> List[GalleryImageRow]:
        ...

    @abc.abstractmethod
    async def upsert_gallery_image(
        self,
        case_id: int,
        image_type: ImageType,
        image_number: int,
        description: str,
        locale: Locale,
        image_url: Optional[str] = None,
    ) -> GalleryImageRow:
        ...

    @abc.abstractmethod
    async def delete_gallery_images(
        self,
        case_id: int,
        image_type: Optional[ImageType] = None,
        image_number: Optional[int] = None,
    ) -> int:
        """Remove a whole case, or one slot when type and number are given. Returns the row count."""

    @abc.abstractmethod
    async def latest_change(self) -> Optional[datetime]:
        ...

    def subscribe(self, callback: ChangeCallback) -> Subscription:
        return self.feed.subscribe(callback)

    def _notify(self, locale: Locale, section: str) -> None:
        self.feed.publish(ContentChange(event="upsert", locale=Locale(locale).value, section=section))


def build_store(settings: Settings, feed: Optional[ContentChangeFeed] = None) -> ContentStore:
    if settings.store_backend == "sql":
        from clinic_content_api.db import get_engine
        from clinic_content_api.services.sql_store import SqlContentStore

        return SqlContentStore(get_engine(), feed=feed)
    if settings.store_backend == "rest":
        from clinic_content_api.services.rest_store import RestContentStore

        return RestContentStore(
            base_url=settings.store_url,
            api_key=settings.store_key,
            timeout=settings.store_timeout,
            feed=feed,
        )
    raise ValueError(f"Unknown content store backend: {settings.store_backend!r}")
