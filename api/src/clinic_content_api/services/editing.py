"""Edits applied to an English and an Arabic Dictionary in step.

List-shaped copy (FAQ questions, services, gallery cases) is index-aligned
between the two locales, so additions and deletions always touch both.
Functions mutate the documents they are given.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

PLACEHOLDER_FAQ = {
    "en": {"question": "New Question", "answer": "New Answer"},
    "ar": {"question": "سؤال جديد", "answer": "جواب جديد"},
}
PLACEHOLDER_SERVICE = {
    "en": ("New Service", "Service description"),
    "ar": ("خدمة جديدة", "وصف الخدمة"),
}
PLACEHOLDER_CASE_TITLE = {"en": "New Case", "ar": "حالة جديدة"}


def _page(document: Dict[str, Any], name: str) -> Dict[str, Any]:
    pages = document.setdefault("pages", {})
    return pages.setdefault(name, {})


def _list(container: Dict[str, Any], key: str) -> List[Any]:
    value = container.get(key)
    if not isinstance(value, list):
        value = []
        container[key] = value
    return value


def faq_questions(document: Dict[str, Any]) -> List[Dict[str, Any]]:
    faq = (document.get("pages") or {}).get("faq") or {}
    questions = faq.get("questions")
    return questions if isinstance(questions, list) else []


def add_faq(
    en: Dict[str, Any],
    ar: Dict[str, Any],
    en_entry: Optional[Dict[str, str]] = None,
    ar_entry: Optional[Dict[str, str]] = None,
) -> int:
    """Append a question to both locales; returns its index."""
    _list(_page(en, "faq"), "questions").append(dict(en_entry or PLACEHOLDER_FAQ["en"]))
    _list(_page(ar, "faq"), "questions").append(dict(ar_entry or PLACEHOLDER_FAQ["ar"]))
    return len(faq_questions(en)) - 1


def update_faq(document: Dict[str, Any], index: int, field: str, value: str) -> None:
    if field not in ("question", "answer"):
        raise ValueError(f"Unknown FAQ field: {field}")
    questions = _list(_page(document, "faq"), "questions")
    if not 0 <= index < len(questions):
        raise IndexError(f"FAQ index out of range: {index}")
    questions[index] = {**questions[index], field: value}


def delete_faq(en: Dict[str, Any], ar: Dict[str, Any], index: int) -> Dict[str, Any]:
    """Remove the question at ``index`` from both locales; returns the removed English entry."""
    en_questions = _list(_page(en, "faq"), "questions")
    if not 0 <= index < len(en_questions):
        raise IndexError(f"FAQ index out of range: {index}")
    removed = en_questions.pop(index)
    ar_questions = _list(_page(ar, "faq"), "questions")
    if index < len(ar_questions):
        ar_questions.pop(index)
    return removed


def add_service(en: Dict[str, Any], ar: Dict[str, Any]) -> int:
    for locale, document in (("en", en), ("ar", ar)):
        title, description = PLACEHOLDER_SERVICE[locale]
        services = _page(document, "services")
        _list(services, "services_list").append(title)
        _list(services, "descriptions").append(description)
    return len(_page(en, "services")["services_list"]) - 1


def delete_service(en: Dict[str, Any], ar: Dict[str, Any], index: int) -> None:
    for document in (en, ar):
        services = _page(document, "services")
        for key in ("services_list", "descriptions"):
            items = _list(services, key)
            if 0 <= index < len(items):
                items.pop(index)


def add_gallery_case(en: Dict[str, Any], ar: Dict[str, Any]) -> int:
    """Append an empty case to both locales under the next free id."""
    cases = _list(_page(en, "gallery"), "cases")
    new_id = max([c.get("id", 0) for c in cases if isinstance(c, dict)] + [0]) + 1
    for locale, document in (("en", en), ("ar", ar)):
        _list(_page(document, "gallery"), "cases").append(
            {"id": new_id, "title": PLACEHOLDER_CASE_TITLE[locale], "photos": []}
        )
    return new_id


def _find_case(document: Dict[str, Any], case_id: int) -> Optional[Dict[str, Any]]:
    for case in _list(_page(document, "gallery"), "cases"):
        if isinstance(case, dict) and case.get("id") == case_id:
            return case
    return None


def delete_gallery_case(en: Dict[str, Any], ar: Dict[str, Any], case_id: int) -> None:
    for document in (en, ar):
        gallery = _page(document, "gallery")
        gallery["cases"] = [c for c in _list(gallery, "cases") if not (isinstance(c, dict) and c.get("id") == case_id)]


def add_photo_to_case(en: Dict[str, Any], ar: Dict[str, Any], case_id: int) -> int:
    """Append an empty photo slot to the case in both locales; returns its index."""
    index = -1
    for document in (en, ar):
        case = _find_case(document, case_id)
        if case is None:
            raise KeyError(f"Gallery case not found: {case_id}")
        photos = _list(case, "photos")
        photos.append({"before": "", "after": "", "description": ""})
        index = len(photos) - 1
    return index


def delete_photo_from_case(en: Dict[str, Any], ar: Dict[str, Any], case_id: int, photo_index: int) -> None:
    for document in (en, ar):
        case = _find_case(document, case_id)
        if case is None:
            continue
        photos = _list(case, "photos")
        if 0 <= photo_index < len(photos):
            photos.pop(photo_index)
