"""Shared SQLModel models package.

Row models for the clinic site content tables, reused by the API service,
the Alembic environment and the operator tooling.
"""

from .base import BaseModel
from .content_row import ContentRow
from .enums import DEFAULT_LOCALE, ImageType, Locale
from .gallery_image import GalleryImageRow

__all__ = [
    "BaseModel",
    "ContentRow",
    "GalleryImageRow",
    "Locale",
    "ImageType",
    "DEFAULT_LOCALE",
]
