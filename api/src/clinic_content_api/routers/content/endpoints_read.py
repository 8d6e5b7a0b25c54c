from typing import Any, Optional

from fastapi import Depends, HTTPException, status

from clinic_content_api.dependencies import get_store
from clinic_content_api.errors import StoreError
from clinic_content_api.routers.content import logger, parse_locale, router
from clinic_content_api.services.assembler import assemble
from clinic_content_api.services.store import ContentStore


@router.get("")
async def read_content(
    locale: Optional[str] = None,
    section: Optional[str] = None,
    store: ContentStore = Depends(get_store),  # noqa: B008
) -> Any:
    """Assembled Dictionary for a locale, or the data of a single section (null when absent)."""
    requested = parse_locale(locale)
    try:
        if section:
            rows = await store.get(requested, section)
            data = rows[0].data if rows else None
        else:
            data = assemble(await store.get(requested))
    except StoreError as exc:
        logger.error(
            "Failed to read content from store",
            extra={"locale": requested.value, "section": section, "exception_message": str(exc)},
        )
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to read content from database")
    logger.info("Content read", extra={"locale": requested.value, "section": section})
    return data
