from typing import Optional

from sqlalchemy import UniqueConstraint
from sqlalchemy.dialects.postgresql import TEXT
from sqlmodel import Field

from .base import BaseModel, enum_column
from .enums import ImageType, Locale


class GalleryImageRow(BaseModel, table=True):
    """Per-locale metadata for one before/after photo of a treatment case."""

    __tablename__ = "gallery_images"
    __table_args__ = (
        UniqueConstraint(
            "case_id", "image_type", "image_number", "locale", name="uq_gallery_image_slot_locale"
        ),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    case_id: int = Field(index=True)
    image_type: ImageType = Field(sa_type=enum_column(ImageType))
    image_number: int = Field(ge=1)
    # Null means the asset lives at the conventional /images/gallery path.
    image_url: Optional[str] = Field(default=None)
    description: str = Field(default="", sa_type=TEXT)
    locale: Locale = Field(sa_type=enum_column(Locale), index=True)
