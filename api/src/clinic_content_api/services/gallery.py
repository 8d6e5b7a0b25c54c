"""Gallery case helpers.

The case list lives in ``pages.gallery.cases`` of each Dictionary::

    {"id": 3, "title": "...", "photos": [{"before": "...", "after": "...", "description": "..."}]}

Per-photo, per-locale metadata is kept in ``gallery_images`` rows. A row
without ``image_url`` points at the conventional asset path below.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterator, List, Optional

from clinic_models import GalleryImageRow, ImageType, Locale

GALLERY_IMAGE_ROOT = "/images/gallery"

# Words that mark a photo description as an "after" shot, per locale.
AFTER_MARKERS = ("after", "بعد")


def gallery_image_path(case_id: int, image_type: ImageType, image_number: int) -> str:
    return f"{GALLERY_IMAGE_ROOT}/case{case_id}/{ImageType(image_type).value}-{image_number}.jpg"


def resolve_image_url(row: GalleryImageRow) -> str:
    return row.image_url or gallery_image_path(row.case_id, ImageType(row.image_type), row.image_number)


def gallery_cases(document: Any) -> List[Dict[str, Any]]:
    pages = document.get("pages") if isinstance(document, dict) else None
    gallery = pages.get("gallery") if isinstance(pages, dict) else None
    cases = gallery.get("cases") if isinstance(gallery, dict) else None
    return [case for case in cases if isinstance(case, dict)] if isinstance(cases, list) else []


def guess_image_type(description: str) -> ImageType:
    text = (description or "").lower()
    return ImageType.AFTER if any(marker in text for marker in AFTER_MARKERS) else ImageType.BEFORE


@dataclass(frozen=True)
class GalleryPhotoRecord:
    case_id: int
    image_type: ImageType
    image_number: int
    description: str
    locale: Locale
    image_url: Optional[str] = None


def photo_records(en_document: Any, ar_document: Any) -> Iterator[GalleryPhotoRecord]:
    """Derive per-photo rows from the English case list, paired with Arabic photos by position.

    The slot type is taken from the English description and shared by both locales.
    """
    ar_cases = {case.get("id"): case for case in gallery_cases(ar_document)}
    for case in gallery_cases(en_document):
        case_id = case.get("id")
        if not isinstance(case_id, int):
            continue
        ar_photos = (ar_cases.get(case_id) or {}).get("photos") or []
        for index, photo in enumerate(case.get("photos") or []):
            if not isinstance(photo, dict):
                continue
            description = str(photo.get("description") or "")
            image_type = guess_image_type(description)
            image_number = index + 1
            image_url = photo.get(image_type.value) or None
            yield GalleryPhotoRecord(case_id, image_type, image_number, description, Locale.EN, image_url)
            if index < len(ar_photos) and isinstance(ar_photos[index], dict):
                yield GalleryPhotoRecord(
                    case_id,
                    image_type,
                    image_number,
                    str(ar_photos[index].get("description") or ""),
                    Locale.AR,
                    image_url,
                )
