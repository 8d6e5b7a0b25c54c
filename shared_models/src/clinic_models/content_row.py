from typing import Any, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field

from .base import BaseModel, JSONDocument, enum_column
from .enums import Locale


class ContentRow(BaseModel, table=True):
    """One section of site copy for one locale."""

    __tablename__ = "content"
    __table_args__ = (
        UniqueConstraint("locale", "section", name="uq_content_locale_section"),
    )

    id: Optional[int] = Field(default=None, primary_key=True)

    locale: Locale = Field(sa_type=enum_column(Locale), index=True)
    section: str = Field(index=True)
    data: Any = Field(default=None, sa_type=JSONDocument)

    # Incremented on every write; callers may pass it back as an optimistic token.
    version: int = Field(default=1)
