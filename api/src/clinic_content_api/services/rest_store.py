"""Content store backed by the hosted database's REST interface (PostgREST dialect)."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError

from clinic_models import ContentRow, GalleryImageRow, ImageType, Locale

from clinic_content_api.errors import StoreError, VersionConflictError
from clinic_content_api.services.changes import ContentChangeFeed
from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)

CONTENT_TABLE = "content"
GALLERY_TABLE = "gallery_images"


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RestContentStore(ContentStore):
    """Talks to ``{base_url}/rest/v1/<table>`` with the project's access key.

    Without a URL or key the store is a placeholder: every call raises
    :class:`StoreError` without touching the network.
    """

    def __init__(
        self,
        base_url: Optional[str],
        api_key: Optional[str],
        timeout: float = 10.0,
        feed: Optional[ContentChangeFeed] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(feed)
        self.base_url = (base_url or "").rstrip("/")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self._api_key)

    def _headers(self, prefer: Optional[str] = None) -> Dict[str, str]:
        headers = {
            "apikey": self._api_key or "",
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        if prefer:
            headers["Prefer"] = prefer
        return headers

    async def _request(
        self,
        method: str,
        table: str,
        params: Optional[Dict[str, Any]] = None,
        json: Any = None,
        prefer: Optional[str] = None,
    ) -> List[Dict[str, Any]]:
        if not self.configured:
            raise StoreError("Content store is not configured (CONTENT_STORE_URL / CONTENT_STORE_KEY)")

        url = f"{self.base_url}/rest/v1/{table}"
        logger.debug("Store request", extra={"method": method, "url": url})
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                resp = await client.request(method, url, params=params, json=json, headers=self._headers(prefer))
        except httpx.HTTPError as exc:
            logger.error("Store request failed", extra={"method": method, "url": url, "error": str(exc)})
            raise StoreError(f"{method} {table} failed: {exc}") from exc

        try:
            resp.raise_for_status()
        except httpx.HTTPStatusError as exc:
            # Log response body to aid debugging (auth errors, constraint violations)
            logger.error(
                "Store error response",
                extra={"method": method, "url": url, "status_code": resp.status_code, "response_body": resp.text},
            )
            raise StoreError(f"{method} {table} returned {resp.status_code}", status_code=resp.status_code) from exc

        if not resp.content:
            return []
        try:
            body = resp.json()
        except ValueError as exc:
            raise StoreError(f"{method} {table} returned a non-JSON body") from exc
        if not isinstance(body, list):
            raise StoreError(f"{method} {table} returned {type(body).__name__}, expected a list")
        return body

    @staticmethod
    def _content_rows(items: List[Dict[str, Any]]) -> List[ContentRow]:
        try:
            return [ContentRow.model_validate(item) for item in items]
        except ValidationError as exc:
            raise StoreError(f"Malformed content row: {exc}") from exc

    @staticmethod
    def _gallery_rows(items: List[Dict[str, Any]]) -> List[GalleryImageRow]:
        try:
            return [GalleryImageRow.model_validate(item) for item in items]
        except ValidationError as exc:
            raise StoreError(f"Malformed gallery row: {exc}") from exc

    async def get(self, locale: Locale, section: Optional[str] = None) -> List[ContentRow]:
        params = {"select": "*", "locale": f"eq.{Locale(locale).value}", "order": "updated_at.desc"}
        if section:
            params["section"] = f"eq.{section}"
        return self._content_rows(await self._request("GET", CONTENT_TABLE, params=params))

    async def upsert(
        self,
        locale: Locale,
        section: str,
        data: Any,
        expected_version: Optional[int] = None,
    ) -> ContentRow:
        locale = Locale(locale)
        current = await self.get(locale, section)
        current_version = current[0].version if current else 0

        if expected_version is not None:
            if expected_version != current_version:
                raise VersionConflictError(locale.value, section, expected_version, current_version or None)
            if current:
                # Conditional update: only matches while the row is still at the expected version
                items = await self._request(
                    "PATCH",
                    CONTENT_TABLE,
                    params={
                        "locale": f"eq.{locale.value}",
                        "section": f"eq.{section}",
                        "version": f"eq.{expected_version}",
                    },
                    json={"data": data, "version": expected_version + 1, "updated_at": _now_iso()},
                    prefer="return=representation",
                )
                if not items:
                    raise VersionConflictError(locale.value, section, expected_version, None)
                row = self._content_rows(items)[0]
                self._notify(locale, section)
                logger.info(
                    "Content section updated",
                    extra={"locale": locale.value, "section": section, "version": row.version},
                )
                return row

        items = await self._request(
            "POST",
            CONTENT_TABLE,
            params={"on_conflict": "locale,section"},
            json={
                "locale": locale.value,
                "section": section,
                "data": data,
                "version": current_version + 1,
                "updated_at": _now_iso(),
            },
            prefer="resolution=merge-duplicates,return=representation",
        )
        rows = self._content_rows(items)
        if not rows:
            raise StoreError(f"Upsert of {locale.value}/{section} returned no row")
        self._notify(locale, section)
        logger.info(
            "Content section upserted",
            extra={"locale": locale.value, "section": section, "version": rows[0].version},
        )
        return rows[0]

    async def get_gallery_images(self, case_id: int) -> List[GalleryImageRow]:
        params = {"select": "*", "case_id": f"eq.{case_id}", "order": "image_number.asc"}
        return self._gallery_rows(await self._request("GET", GALLERY_TABLE, params=params))

    async def upsert_gallery_image(
        self,
        case_id: int,
        image_type: ImageType,
        image_number: int,
        description: str,
        locale: Locale,
        image_url: Optional[str] = None,
    ) -> GalleryImageRow:
        items = await self._request(
            "POST",
            GALLERY_TABLE,
            params={"on_conflict": "case_id,image_type,image_number,locale"},
            json={
                "case_id": case_id,
                "image_type": ImageType(image_type).value,
                "image_number": image_number,
                "description": description,
                "locale": Locale(locale).value,
                "image_url": image_url,
            },
            prefer="resolution=merge-duplicates,return=representation",
        )
        rows = self._gallery_rows(items)
        if not rows:
            raise StoreError(f"Upsert of gallery case {case_id} returned no row")
        logger.info(
            "Gallery image upserted",
            extra={"case_id": case_id, "image_type": ImageType(image_type).value, "image_number": image_number},
        )
        return rows[0]

    async def delete_gallery_images(
        self,
        case_id: int,
        image_type: Optional[ImageType] = None,
        image_number: Optional[int] = None,
    ) -> int:
        params = {"case_id": f"eq.{case_id}"}
        if image_type is not None:
            params["image_type"] = f"eq.{ImageType(image_type).value}"
        if image_number is not None:
            params["image_number"] = f"eq.{image_number}"
        items = await self._request("DELETE", GALLERY_TABLE, params=params, prefer="return=representation")
        logger.info("Gallery images deleted", extra={"case_id": case_id, "count": len(items)})
        return len(items)

    async def latest_change(self) -> Optional[datetime]:
        items = await self._request(
            "GET",
            CONTENT_TABLE,
            params={"select": "updated_at", "order": "updated_at.desc", "limit": 1},
        )
        if not items or not items[0].get("updated_at"):
            return None
        try:
            return datetime.fromisoformat(str(items[0]["updated_at"]).replace("Z", "+00:00"))
        except ValueError as exc:
            raise StoreError("Malformed updated_at in content table") from exc
