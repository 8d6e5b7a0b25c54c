"""In-memory stand-ins for the content store used by service-level tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional, Tuple

from clinic_content_api.errors import StoreError, VersionConflictError
from clinic_content_api.services.store import ContentStore
from clinic_models import ContentRow, GalleryImageRow, ImageType, Locale


class InMemoryContentStore(ContentStore):
    def __init__(self, rows: Optional[List[Tuple[str, str, Any]]] = None, feed=None) -> None:
        super().__init__(feed)
        self.content: Dict[Tuple[str, str], ContentRow] = {}
        self.gallery: Dict[Tuple[int, str, int, str], GalleryImageRow] = {}
        self.upserts: List[Tuple[str, str, Any]] = []
        self.get_calls: List[str] = []
        self._clock = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._next_id = 1
        for locale, section, data in rows or []:
            self._put(Locale(locale), section, data)

    def _tick(self) -> datetime:
        self._clock += timedelta(seconds=1)
        return self._clock

    def _put(self, locale: Locale, section: str, data: Any) -> ContentRow:
        key = (locale.value, section)
        existing = self.content.get(key)
        row = ContentRow(
            id=existing.id if existing else self._next_id,
            locale=locale,
            section=section,
            data=data,
            version=(existing.version + 1) if existing else 1,
            updated_at=self._tick(),
        )
        if existing is None:
            self._next_id += 1
        self.content[key] = row
        return row

    async def get(self, locale, section=None):
        locale = Locale(locale)
        self.get_calls.append(locale.value)
        rows = [r for (loc, sec), r in self.content.items() if loc == locale.value and (section is None or sec == section)]
        return sorted(rows, key=lambda r: r.updated_at, reverse=True)

    async def upsert(self, locale, section, data, expected_version=None):
        locale = Locale(locale)
        existing = self.content.get((locale.value, section))
        current = existing.version if existing else 0
        if expected_version is not None and expected_version != current:
            raise VersionConflictError(locale.value, section, expected_version, current or None)
        self.upserts.append((locale.value, section, data))
        row = self._put(locale, section, data)
        self._notify(locale, section)
        return row

    async def get_gallery_images(self, case_id):
        rows = [r for key, r in self.gallery.items() if key[0] == case_id]
        return sorted(rows, key=lambda r: r.image_number)

    async def upsert_gallery_image(self, case_id, image_type, image_number, description, locale, image_url=None):
        key = (case_id, ImageType(image_type).value, image_number, Locale(locale).value)
        row = GalleryImageRow(
            id=len(self.gallery) + 1,
            case_id=case_id,
            image_type=ImageType(image_type),
            image_number=image_number,
            description=description,
            locale=Locale(locale),
            image_url=image_url,
        )
        self.gallery[key] = row
        return row

    async def delete_gallery_images(self, case_id, image_type=None, image_number=None):
        doomed = [
            key
            for key in self.gallery
            if key[0] == case_id
            and (image_type is None or key[1] == ImageType(image_type).value)
            and (image_number is None or key[2] == image_number)
        ]
        for key in doomed:
            del self.gallery[key]
        return len(doomed)

    async def latest_change(self):
        if not self.content:
            return None
        return max(r.updated_at for r in self.content.values())


class FailingContentStore(InMemoryContentStore):
    """Every call fails the way an unreachable store does."""

    def __init__(self, fail_sections: Optional[set] = None) -> None:
        super().__init__()
        # None means every call fails; otherwise only upserts of these sections
        self.fail_sections = fail_sections

    async def get(self, locale, section=None):
        if self.fail_sections is None:
            self.get_calls.append(Locale(locale).value)
            raise StoreError("store unreachable")
        return await super().get(locale, section)

    async def upsert(self, locale, section, data, expected_version=None):
        if self.fail_sections is None or section in self.fail_sections:
            raise StoreError(f"write of {section} rejected")
        return await super().upsert(locale, section, data, expected_version)
