from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Depends, HTTPException, status
from pydantic import BaseModel

from clinic_models import ContentRow

from clinic_content_api.dependencies import get_local_source, get_store, require_admin
from clinic_content_api.errors import MalformedDictionaryError, StoreError, SyncError, VersionConflictError
from clinic_content_api.routers.content import logger, parse_locale, router
from clinic_content_api.services.local_source import LocalContentSource
from clinic_content_api.services.store import ContentStore
from clinic_content_api.services.sync import sync_dictionaries


class ContentSectionWrite(BaseModel):
    locale: Optional[str] = None
    section: Optional[str] = None
    data: Any = None
    expected_version: Optional[int] = None


class ContentDocumentWrite(BaseModel):
    locale: Optional[str] = None
    data: Any = None
    mirror_local: bool = False


class ContentDocumentsWrite(BaseModel):
    documents: Dict[str, Any]
    mirror_local: bool = False


def _require_document(data: Any) -> Dict[str, Any]:
    if data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing data parameter")
    if not isinstance(data, dict):
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Dictionary must be a JSON object")
    return data


async def _sync(documents, store: ContentStore, local: LocalContentSource, mirror_local: bool) -> dict:
    try:
        report = await sync_dictionaries(store, documents)
    except MalformedDictionaryError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    except SyncError as exc:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"Failed to save content to database: {exc}")

    backups = {}
    if mirror_local:
        # Secondary copy; a failure here fails the request even though the store was updated
        try:
            for locale, document in documents.items():
                backup = local.save(locale, document)
                backups[locale.value] = str(backup) if backup else None
        except OSError as exc:
            logger.exception("Failed to mirror content to local files")
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"Content saved to database but local copy failed: {exc}",
            )

    body = {
        "success": True,
        "message": f"Full content updated for {', '.join(loc.value for loc in report.locales)}",
        "timestamp": report.timestamp.isoformat(),
        "sections": report.sections,
    }
    if mirror_local:
        body["backups"] = backups
    return body


@router.put("", dependencies=[Depends(require_admin)])
async def save_document(
    body: ContentDocumentWrite,
    store: ContentStore = Depends(get_store),  # noqa: B008
    local: LocalContentSource = Depends(get_local_source),  # noqa: B008
) -> dict:
    locale = parse_locale(body.locale)
    document = _require_document(body.data)
    return await _sync({locale: document}, store, local, body.mirror_local)


@router.put("/all", dependencies=[Depends(require_admin)])
async def save_documents(
    body: ContentDocumentsWrite,
    store: ContentStore = Depends(get_store),  # noqa: B008
    local: LocalContentSource = Depends(get_local_source),  # noqa: B008
) -> dict:
    if not body.documents:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing documents parameter")
    documents = {parse_locale(key): _require_document(value) for key, value in body.documents.items()}
    return await _sync(documents, store, local, body.mirror_local)


@router.post("", dependencies=[Depends(require_admin)])
async def save_section(
    body: ContentSectionWrite,
    store: ContentStore = Depends(get_store),  # noqa: B008
) -> dict:
    locale = parse_locale(body.locale)
    if not body.section:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing section parameter")
    if body.data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing data parameter")

    try:
        row: ContentRow = await store.upsert(locale, body.section, body.data, expected_version=body.expected_version)
    except VersionConflictError as exc:
        logger.warning(
            "Content section version conflict",
            extra={"locale": locale.value, "section": body.section, "expected": exc.expected, "actual": exc.actual},
        )
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))
    except StoreError as exc:
        logger.error(
            "Failed to write content to store",
            extra={"locale": locale.value, "section": body.section, "exception_message": str(exc)},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to write content to database")

    return {
        "success": True,
        "message": f"Content updated for {locale.value} {body.section}",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "data": row.model_dump(mode="json"),
    }
