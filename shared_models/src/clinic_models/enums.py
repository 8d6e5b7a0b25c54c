from enum import Enum


class Locale(str, Enum):
    EN = "en"
    AR = "ar"


class ImageType(str, Enum):
    BEFORE = "before"
    AFTER = "after"


DEFAULT_LOCALE = Locale.EN

# Sections stored at the top level of a Dictionary; every other section lives under "pages".
TOP_LEVEL_SECTIONS = ("seo", "navbar")


__all__ = [
    "Locale",
    "ImageType",
    "DEFAULT_LOCALE",
    "TOP_LEVEL_SECTIONS",
]
