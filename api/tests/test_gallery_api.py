from http import HTTPStatus

from fakes import FailingContentStore

from clinic_content_api.dependencies import get_store
from clinic_content_api.errors import StoreError
from clinic_content_api.main import app


def _put(client, admin_headers, case_id: int, **payload):
    body = {"image_type": "before", "image_number": 1, "description": "", "locale": "en", **payload}
    return client.put(f"/gallery/{case_id}/images", json=body, headers=admin_headers)


def test_upsert_and_list_case_images(client, admin_headers) -> None:
    r = _put(client, admin_headers, 3, description="Before treatment")
    assert r.status_code == HTTPStatus.OK
    assert r.json()["resolved_url"] == "/images/gallery/case3/before-1.jpg"

    _put(client, admin_headers, 3, description="قبل العلاج", locale="ar")
    _put(client, admin_headers, 3, image_type="after", description="After", image_url="https://cdn.example/a.jpg")

    r = client.get("/gallery/3")
    assert r.status_code == HTTPStatus.OK
    rows = r.json()
    assert len(rows) == 3
    urls = {(row["image_type"], row["locale"]): row["resolved_url"] for row in rows}
    assert urls[("after", "en")] == "https://cdn.example/a.jpg"
    assert urls[("before", "ar")] == "/images/gallery/case3/before-1.jpg"


def test_same_slot_and_locale_is_updated_in_place(client, admin_headers) -> None:
    _put(client, admin_headers, 1, description="first")
    _put(client, admin_headers, 1, description="second")

    rows = client.get("/gallery/1").json()
    assert [row["description"] for row in rows] == ["second"]


def test_delete_single_slot_or_whole_case(client, admin_headers) -> None:
    _put(client, admin_headers, 2, image_number=1)
    _put(client, admin_headers, 2, image_number=2)
    _put(client, admin_headers, 2, image_number=2, image_type="after")

    r = client.delete("/gallery/2", params={"image_type": "before", "image_number": 2}, headers=admin_headers)
    assert r.status_code == HTTPStatus.OK
    assert r.json() == {"case_id": 2, "deleted": 1}

    r = client.delete("/gallery/2", headers=admin_headers)
    assert r.json()["deleted"] == 2
    assert client.get("/gallery/2").json() == []


def test_delete_number_without_type_is_rejected(client, admin_headers) -> None:
    r = client.delete("/gallery/2", params={"image_number": 1}, headers=admin_headers)
    assert r.status_code == HTTPStatus.BAD_REQUEST


def test_invalid_slot_values_are_rejected(client, admin_headers) -> None:
    assert _put(client, admin_headers, 1, image_number=0).status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert _put(client, admin_headers, 1, image_type="during").status_code == HTTPStatus.UNPROCESSABLE_ENTITY
    assert _put(client, admin_headers, 1, locale="fr").status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_gallery_writes_require_admin_token(client) -> None:
    r = client.put("/gallery/1/images", json={"image_type": "before", "image_number": 1, "locale": "en"})
    assert r.status_code == HTTPStatus.UNAUTHORIZED


def test_gallery_store_failure_is_bad_gateway(client) -> None:
    class BrokenGallery(FailingContentStore):
        async def get_gallery_images(self, case_id):
            raise StoreError("gallery unreachable")

    app.dependency_overrides[get_store] = lambda: BrokenGallery()
    assert client.get("/gallery/1").status_code == HTTPStatus.BAD_GATEWAY
