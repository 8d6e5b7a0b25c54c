import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, status
from pydantic import BaseModel, Field

from clinic_models import ImageType, Locale

from clinic_content_api.dependencies import get_store, require_admin
from clinic_content_api.errors import StoreError
from clinic_content_api.services.gallery import resolve_image_url
from clinic_content_api.services.store import ContentStore

router = APIRouter(prefix="/gallery", tags=["gallery"])
logger = logging.getLogger(__name__)


class GalleryImageWrite(BaseModel):
    image_type: ImageType
    image_number: int = Field(ge=1)
    description: str = ""
    locale: Locale
    image_url: Optional[str] = None


def _store_failure(exc: StoreError, case_id: int) -> HTTPException:
    logger.error("Gallery store call failed", extra={"case_id": case_id, "exception_message": str(exc)})
    return HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to access gallery images")


@router.get("/{case_id}")
async def list_case_images(
    case_id: int = Path(ge=1),
    store: ContentStore = Depends(get_store),  # noqa: B008
) -> List[dict]:
    try:
        rows = await store.get_gallery_images(case_id)
    except StoreError as exc:
        raise _store_failure(exc, case_id)
    logger.info("Gallery images listed", extra={"case_id": case_id, "count": len(rows)})
    return [{**row.model_dump(mode="json"), "resolved_url": resolve_image_url(row)} for row in rows]


@router.put("/{case_id}/images", dependencies=[Depends(require_admin)])
async def upsert_case_image(
    body: GalleryImageWrite,
    case_id: int = Path(ge=1),
    store: ContentStore = Depends(get_store),  # noqa: B008
) -> dict:
    try:
        row = await store.upsert_gallery_image(
            case_id,
            body.image_type,
            body.image_number,
            body.description,
            body.locale,
            image_url=body.image_url,
        )
    except StoreError as exc:
        raise _store_failure(exc, case_id)
    return {**row.model_dump(mode="json"), "resolved_url": resolve_image_url(row)}


@router.delete("/{case_id}", dependencies=[Depends(require_admin)])
async def delete_case_images(
    case_id: int = Path(ge=1),
    image_type: Optional[ImageType] = None,
    image_number: Optional[int] = None,
    store: ContentStore = Depends(get_store),  # noqa: B008
) -> dict:
    if image_number is not None and image_type is None:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="image_number requires image_type")
    try:
        deleted = await store.delete_gallery_images(case_id, image_type=image_type, image_number=image_number)
    except StoreError as exc:
        raise _store_failure(exc, case_id)
    return {"case_id": case_id, "deleted": deleted}
