from typing import Any, Optional

from fastapi import Depends, HTTPException, status
from pydantic import BaseModel

from clinic_content_api.dependencies import get_feed, get_local_source, require_admin
from clinic_content_api.errors import ContentNotFoundError, ContentParseError
from clinic_content_api.routers.content import logger, parse_locale, router
from clinic_content_api.services.changes import ContentChange, ContentChangeFeed
from clinic_content_api.services.local_source import LocalContentSource


class LocalDocumentWrite(BaseModel):
    locale: Optional[str] = None
    data: Any = None


@router.get("/local")
def read_local_content(
    locale: Optional[str] = None,
    local: LocalContentSource = Depends(get_local_source),  # noqa: B008
) -> Any:
    requested = parse_locale(locale)
    try:
        return local.load(requested)
    except ContentNotFoundError as exc:
        logger.warning("Local content file missing", extra={"locale": requested.value})
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    except ContentParseError as exc:
        logger.error("Local content file malformed", extra={"locale": requested.value, "exception_message": str(exc)})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Failed to read content")


@router.post("/local", dependencies=[Depends(require_admin)])
def write_local_content(
    body: LocalDocumentWrite,
    local: LocalContentSource = Depends(get_local_source),  # noqa: B008
    feed: ContentChangeFeed = Depends(get_feed),  # noqa: B008
) -> dict:
    requested = parse_locale(body.locale)
    if body.data is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Missing data parameter")
    try:
        backup = local.save(requested, body.data)
    except OSError as exc:
        logger.exception("Failed to write local content", extra={"locale": requested.value})
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Failed to write content: {exc}")
    feed.publish(ContentChange(event="local_save", locale=requested.value))
    return {
        "success": True,
        "message": f"Content updated for locale: {requested.value}",
        "backup": str(backup) if backup else None,
    }
