"""Content store on a database the service owns, through SQLModel sessions."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import delete, func
from sqlalchemy.engine import Engine
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlmodel import Session, select

from clinic_models import ContentRow, GalleryImageRow, ImageType, Locale

from clinic_content_api.errors import StoreError, VersionConflictError
from clinic_content_api.services.changes import ContentChangeFeed
from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)


class SqlContentStore(ContentStore):
    """Same contract as the hosted store; blocking session work runs in the thread pool."""

    def __init__(self, engine: Engine, feed: Optional[ContentChangeFeed] = None) -> None:
        super().__init__(feed)
        self._engine = engine

    async def _run(self, fn, *args):
        try:
            return await run_in_threadpool(fn, *args)
        except SQLAlchemyError as exc:
            logger.exception("Database call failed", extra={"operation": fn.__name__})
            raise StoreError(f"{fn.__name__} failed: {exc}") from exc

    async def get(self, locale: Locale, section: Optional[str] = None) -> List[ContentRow]:
        return await self._run(self._get, Locale(locale), section)

    def _get(self, locale: Locale, section: Optional[str]) -> List[ContentRow]:
        with Session(self._engine) as session:
            stmt = select(ContentRow).where(ContentRow.locale == locale)
            if section:
                stmt = stmt.where(ContentRow.section == section)
            stmt = stmt.order_by(ContentRow.updated_at.desc(), ContentRow.id.desc())
            return list(session.exec(stmt).all())

    async def upsert(
        self,
        locale: Locale,
        section: str,
        data: Any,
        expected_version: Optional[int] = None,
    ) -> ContentRow:
        locale = Locale(locale)
        row = await self._run(self._upsert, locale, section, data, expected_version)
        self._notify(locale, section)
        logger.info(
            "Content section upserted",
            extra={"locale": locale.value, "section": section, "version": row.version},
        )
        return row

    def _upsert(self, locale: Locale, section: str, data: Any, expected_version: Optional[int]) -> ContentRow:
        with Session(self._engine) as session:
            try:
                return self._write_row(session, locale, section, data, expected_version)
            except IntegrityError:
                # Lost the insert race to a concurrent writer; the row exists now
                session.rollback()
                return self._write_row(session, locale, section, data, expected_version)

    @staticmethod
    def _write_row(
        session: Session, locale: Locale, section: str, data: Any, expected_version: Optional[int]
    ) -> ContentRow:
        existing = session.exec(
            select(ContentRow).where(ContentRow.locale == locale, ContentRow.section == section)
        ).first()
        current_version = existing.version if existing is not None else 0
        if expected_version is not None and expected_version != current_version:
            raise VersionConflictError(locale.value, section, expected_version, current_version or None)

        now = datetime.now(timezone.utc)
        if existing is None:
            existing = ContentRow(locale=locale, section=section, data=data, version=1, updated_at=now)
        else:
            existing.data = data
            existing.version = current_version + 1
            existing.updated_at = now
        session.add(existing)
        session.commit()
        session.refresh(existing)
        return existing

    async def get_gallery_images(self, case_id: int) -> List[GalleryImageRow]:
        return await self._run(self._get_gallery_images, case_id)

    def _get_gallery_images(self, case_id: int) -> List[GalleryImageRow]:
        with Session(self._engine) as session:
            stmt = (
                select(GalleryImageRow)
                .where(GalleryImageRow.case_id == case_id)
                .order_by(GalleryImageRow.image_number, GalleryImageRow.image_type, GalleryImageRow.locale)
            )
            return list(session.exec(stmt).all())

    async def upsert_gallery_image(
        self,
        case_id: int,
        image_type: ImageType,
        image_number: int,
        description: str,
        locale: Locale,
        image_url: Optional[str] = None,
    ) -> GalleryImageRow:
        row = await self._run(
            self._upsert_gallery_image,
            case_id,
            ImageType(image_type),
            image_number,
            description,
            Locale(locale),
            image_url,
        )
        logger.info(
            "Gallery image upserted",
            extra={"case_id": case_id, "image_type": row.image_type, "image_number": image_number},
        )
        return row

    def _upsert_gallery_image(
        self,
        case_id: int,
        image_type: ImageType,
        image_number: int,
        description: str,
        locale: Locale,
        image_url: Optional[str],
    ) -> GalleryImageRow:
        with Session(self._engine) as session:
            existing = session.exec(
                select(GalleryImageRow).where(
                    GalleryImageRow.case_id == case_id,
                    GalleryImageRow.image_type == image_type,
                    GalleryImageRow.image_number == image_number,
                    GalleryImageRow.locale == locale,
                )
            ).first()
            if existing is None:
                existing = GalleryImageRow(
                    case_id=case_id,
                    image_type=image_type,
                    image_number=image_number,
                    locale=locale,
                )
            existing.description = description
            existing.image_url = image_url
            session.add(existing)
            session.commit()
            session.refresh(existing)
            return existing

    async def delete_gallery_images(
        self,
        case_id: int,
        image_type: Optional[ImageType] = None,
        image_number: Optional[int] = None,
    ) -> int:
        count = await self._run(
            self._delete_gallery_images,
            case_id,
            ImageType(image_type) if image_type is not None else None,
            image_number,
        )
        logger.info("Gallery images deleted", extra={"case_id": case_id, "count": count})
        return count

    def _delete_gallery_images(
        self, case_id: int, image_type: Optional[ImageType], image_number: Optional[int]
    ) -> int:
        with Session(self._engine) as session:
            stmt = delete(GalleryImageRow).where(GalleryImageRow.case_id == case_id)
            if image_type is not None:
                stmt = stmt.where(GalleryImageRow.image_type == image_type)
            if image_number is not None:
                stmt = stmt.where(GalleryImageRow.image_number == image_number)
            result = session.exec(stmt)
            session.commit()
            return result.rowcount or 0

    async def latest_change(self) -> Optional[datetime]:
        return await self._run(self._latest_change)

    def _latest_change(self) -> Optional[datetime]:
        with Session(self._engine) as session:
            return session.exec(select(func.max(ContentRow.updated_at))).one()
