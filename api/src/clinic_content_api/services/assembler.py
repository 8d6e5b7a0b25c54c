"""Conversion between flat ``(locale, section)`` rows and the nested Dictionary.

``seo`` and ``navbar`` are top-level keys of a Dictionary; every other
section lives under ``pages``.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Tuple, Union

from clinic_models import ContentRow
from clinic_models.enums import TOP_LEVEL_SECTIONS

from clinic_content_api.errors import MalformedDictionaryError

RowLike = Union[ContentRow, Mapping[str, Any]]


def _section_and_data(row: RowLike) -> Tuple[str, Any]:
    if isinstance(row, Mapping):
        return str(row["section"]), row.get("data")
    return row.section, row.data


def assemble(rows: Iterable[RowLike]) -> Dict[str, Any]:
    """Build a Dictionary from rows. A repeated section keeps its last occurrence."""
    document: Dict[str, Any] = {}
    for row in rows:
        section, data = _section_and_data(row)
        if section in TOP_LEVEL_SECTIONS:
            document[section] = data
        else:
            document.setdefault("pages", {})[section] = data
    return document


def is_well_formed(document: Any) -> bool:
    return (
        isinstance(document, dict)
        and isinstance(document.get("pages"), dict)
        and isinstance(document.get("navbar"), dict)
    )


def ensure_well_formed(document: Any) -> Dict[str, Any]:
    if not is_well_formed(document):
        source = document if isinstance(document, dict) else {}
        missing = [key for key in ("pages", "navbar") if not isinstance(source.get(key), dict)]
        raise MalformedDictionaryError(f"Dictionary lacks {', '.join(missing)}")
    return document


def decompose(document: Any) -> List[Tuple[str, Any]]:
    """Split a Dictionary into ``(section, data)`` pairs, one per row to write."""
    if not isinstance(document, dict):
        raise MalformedDictionaryError("Dictionary must be a JSON object")

    sections: List[Tuple[str, Any]] = []
    for key in TOP_LEVEL_SECTIONS:
        if document.get(key) is not None:
            sections.append((key, document[key]))

    pages = document.get("pages")
    if pages is None:
        return sections
    if not isinstance(pages, dict):
        raise MalformedDictionaryError("Dictionary 'pages' must be a JSON object")
    sections.extend(pages.items())
    return sections
