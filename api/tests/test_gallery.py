from clinic_content_api.services.gallery import (
    gallery_cases,
    gallery_image_path,
    guess_image_type,
    photo_records,
    resolve_image_url,
)
from clinic_models import GalleryImageRow, ImageType, Locale

EN = {
    "pages": {
        "gallery": {
            "cases": [
                {
                    "id": 1,
                    "title": "Crowding",
                    "photos": [
                        {"before": "/img/1b.jpg", "after": "", "description": "Before treatment"},
                        {"before": "", "after": "/img/1a.jpg", "description": "After 18 months"},
                    ],
                },
                {"id": "broken", "photos": [{"description": "skipped"}]},
            ]
        }
    }
}
AR = {
    "pages": {
        "gallery": {
            "cases": [
                {"id": 1, "photos": [{"description": "قبل العلاج"}, {"description": "بعد ١٨ شهرا"}]},
            ]
        }
    }
}


def test_conventional_image_path() -> None:
    assert gallery_image_path(4, ImageType.AFTER, 2) == "/images/gallery/case4/after-2.jpg"


def test_explicit_url_wins_over_conventional_path() -> None:
    row = GalleryImageRow(case_id=1, image_type=ImageType.BEFORE, image_number=1, locale=Locale.EN)
    assert resolve_image_url(row) == "/images/gallery/case1/before-1.jpg"
    row.image_url = "https://cdn.example/x.jpg"
    assert resolve_image_url(row) == "https://cdn.example/x.jpg"


def test_image_type_is_guessed_from_description() -> None:
    assert guess_image_type("After treatment") == ImageType.AFTER
    assert guess_image_type("صورة بعد العلاج") == ImageType.AFTER
    assert guess_image_type("Initial scan") == ImageType.BEFORE
    assert guess_image_type("") == ImageType.BEFORE


def test_gallery_cases_tolerates_missing_structure() -> None:
    assert gallery_cases({}) == []
    assert gallery_cases({"pages": {"gallery": {"cases": "none"}}}) == []
    assert len(gallery_cases(EN)) == 2


def test_photo_records_pair_locales_by_position() -> None:
    records = list(photo_records(EN, AR))

    assert [(r.image_number, r.locale, r.image_type) for r in records] == [
        (1, Locale.EN, ImageType.BEFORE),
        (1, Locale.AR, ImageType.BEFORE),
        (2, Locale.EN, ImageType.AFTER),
        (2, Locale.AR, ImageType.AFTER),
    ]
    assert records[0].image_url == "/img/1b.jpg"
    assert records[2].image_url == "/img/1a.jpg"
    assert records[1].description == "قبل العلاج"
    assert all(r.case_id == 1 for r in records)


def test_photo_without_arabic_counterpart_only_yields_english() -> None:
    records = list(photo_records(EN, {}))
    assert {r.locale for r in records} == {Locale.EN}
