import json
from http import HTTPStatus

import pytest
from fakes import FailingContentStore
from fastapi import HTTPException
from sqlmodel import Session, select

from clinic_content_api.db import get_engine
from clinic_content_api.dependencies import check_admin_token, get_store
from clinic_content_api.main import app
from clinic_models import ContentRow


def test_put_then_get_round_trips_dictionary(client, admin_headers, sample_dictionary) -> None:
    r = client.put("/content", json={"locale": "en", "data": sample_dictionary}, headers=admin_headers)
    assert r.status_code == HTTPStatus.OK
    body = r.json()
    assert body["success"] is True
    assert body["sections"] == 4
    assert body["timestamp"]

    r = client.get("/content", params={"locale": "en"})
    assert r.status_code == HTTPStatus.OK
    assert r.json() == sample_dictionary


def test_locales_do_not_share_rows(client, admin_headers, sample_dictionary) -> None:
    client.put("/content", json={"locale": "en", "data": sample_dictionary}, headers=admin_headers)

    r = client.get("/content", params={"locale": "ar"})
    assert r.status_code == HTTPStatus.OK
    assert r.json() == {}


def test_resaving_keeps_one_row_per_section(client, admin_headers, sample_dictionary) -> None:
    client.put("/content", json={"locale": "en", "data": sample_dictionary}, headers=admin_headers)
    sample_dictionary["navbar"]["home"] = "Start"
    client.put("/content", json={"locale": "en", "data": sample_dictionary}, headers=admin_headers)

    r = client.get("/content", params={"locale": "en", "section": "navbar"})
    assert r.status_code == HTTPStatus.OK
    assert r.json() == {"home": "Start", "faq": "FAQ"}
    with Session(get_engine()) as session:
        rows = session.exec(select(ContentRow).where(ContentRow.locale == "en", ContentRow.section == "navbar")).all()
    assert len(rows) == 1
    assert rows[0].version == 2


def test_single_section_absent_reads_as_null(client) -> None:
    r = client.get("/content", params={"locale": "en", "section": "faq"})
    assert r.status_code == HTTPStatus.OK
    assert r.json() is None


@pytest.mark.parametrize("params", [{}, {"locale": "fr"}, {"locale": ""}])
def test_invalid_or_missing_locale_is_rejected(client, params) -> None:
    r = client.get("/content", params=params)
    assert r.status_code == HTTPStatus.BAD_REQUEST
    assert r.json()["detail"] == "Invalid or missing locale parameter"


@pytest.mark.parametrize("locale", ["AR", " en ", "En"])
def test_locale_must_match_exactly(client, locale) -> None:
    assert client.get("/content", params={"locale": locale}).status_code == HTTPStatus.BAD_REQUEST
    assert client.get("/content/local", params={"locale": locale}).status_code == HTTPStatus.BAD_REQUEST


def test_put_all_rejects_variant_locale_keys(client, admin_headers, sample_dictionary) -> None:
    r = client.put(
        "/content/all",
        json={"documents": {"en": sample_dictionary, "EN": sample_dictionary}},
        headers=admin_headers,
    )
    assert r.status_code == HTTPStatus.BAD_REQUEST
    assert client.get("/content", params={"locale": "en"}).json() == {}


def test_post_section_creates_and_versions_row(client, admin_headers) -> None:
    payload = {"locale": "ar", "section": "faq", "data": {"questions": []}}
    r = client.post("/content", json=payload, headers=admin_headers)
    assert r.status_code == HTTPStatus.OK
    first = r.json()["data"]
    assert first["version"] == 1
    assert first["locale"] == "ar"

    r = client.post("/content", json={**payload, "data": {"questions": [{"question": "?"}]}}, headers=admin_headers)
    assert r.json()["data"]["version"] == 2

    r = client.get("/content", params={"locale": "ar", "section": "faq"})
    assert r.json() == {"questions": [{"question": "?"}]}


def test_post_section_with_stale_version_conflicts(client, admin_headers) -> None:
    payload = {"locale": "en", "section": "about", "data": {"title": "About"}}
    client.post("/content", json={**payload, "expected_version": 0}, headers=admin_headers)
    client.post("/content", json={**payload, "expected_version": 1}, headers=admin_headers)

    r = client.post("/content", json={**payload, "expected_version": 1}, headers=admin_headers)
    assert r.status_code == HTTPStatus.CONFLICT

    r = client.post("/content", json={**payload, "expected_version": 0}, headers=admin_headers)
    assert r.status_code == HTTPStatus.CONFLICT


@pytest.mark.parametrize(
    "payload,detail",
    [
        ({"locale": "en", "data": {}}, "Missing section parameter"),
        ({"locale": "en", "section": "faq"}, "Missing data parameter"),
    ],
)
def test_post_section_requires_section_and_data(client, admin_headers, payload, detail) -> None:
    r = client.post("/content", json=payload, headers=admin_headers)
    assert r.status_code == HTTPStatus.BAD_REQUEST
    assert r.json()["detail"] == detail


def test_put_rejects_non_object_document(client, admin_headers) -> None:
    r = client.put("/content", json={"locale": "en", "data": ["faq"]}, headers=admin_headers)
    assert r.status_code == HTTPStatus.UNPROCESSABLE_ENTITY


def test_put_all_syncs_both_locales(client, admin_headers, sample_dictionary) -> None:
    ar = {"navbar": {"home": "الرئيسية"}, "pages": {"faq": {"questions": []}}}
    r = client.put(
        "/content/all",
        json={"documents": {"en": sample_dictionary, "ar": ar}},
        headers=admin_headers,
    )
    assert r.status_code == HTTPStatus.OK
    assert r.json()["sections"] == 6
    assert client.get("/content", params={"locale": "ar"}).json() == ar


def test_put_can_mirror_to_local_file(client, admin_headers, local_dir, sample_dictionary) -> None:
    (local_dir / "en.json").write_text(json.dumps({"navbar": {}, "pages": {}}), encoding="utf-8")

    r = client.put(
        "/content",
        json={"locale": "en", "data": sample_dictionary, "mirror_local": True},
        headers=admin_headers,
    )
    assert r.status_code == HTTPStatus.OK
    assert r.json()["backups"]["en"]
    assert json.loads((local_dir / "en.json").read_text(encoding="utf-8")) == sample_dictionary


def test_store_failures_map_to_bad_gateway(client, admin_headers, sample_dictionary) -> None:
    app.dependency_overrides[get_store] = lambda: FailingContentStore()

    assert client.get("/content", params={"locale": "en"}).status_code == HTTPStatus.BAD_GATEWAY
    r = client.put("/content", json={"locale": "en", "data": sample_dictionary}, headers=admin_headers)
    assert r.status_code == HTTPStatus.BAD_GATEWAY
    assert "partially saved" in r.json()["detail"]
    r = client.post("/content", json={"locale": "en", "section": "faq", "data": {}}, headers=admin_headers)
    assert r.status_code == HTTPStatus.BAD_GATEWAY


@pytest.mark.parametrize(
    "headers,expected",
    [
        ({}, HTTPStatus.UNAUTHORIZED),
        ({"Authorization": "Bearer wrong"}, HTTPStatus.UNAUTHORIZED),
        ({"Authorization": "Token dev"}, HTTPStatus.UNAUTHORIZED),
    ],
)
def test_writes_require_admin_token(client, headers, expected) -> None:
    r = client.post("/content", json={"locale": "en", "section": "faq", "data": {}}, headers=headers)
    assert r.status_code == expected
    r = client.post("/content/local", json={"locale": "en", "data": {}}, headers=headers)
    assert r.status_code == expected


def test_local_file_read_and_write(client, admin_headers, sample_dictionary) -> None:
    r = client.get("/content/local", params={"locale": "ar"})
    assert r.status_code == HTTPStatus.NOT_FOUND

    r = client.post("/content/local", json={"locale": "ar", "data": sample_dictionary}, headers=admin_headers)
    assert r.status_code == HTTPStatus.OK
    assert r.json()["backup"] is None

    r = client.post("/content/local", json={"locale": "ar", "data": {"navbar": {}}}, headers=admin_headers)
    assert r.json()["backup"].endswith(".json")

    r = client.get("/content/local", params={"locale": "ar"})
    assert r.status_code == HTTPStatus.OK
    assert r.json() == {"navbar": {}}


def test_malformed_local_file_is_a_server_error(client, local_dir) -> None:
    (local_dir / "en.json").write_text("{nope", encoding="utf-8")
    r = client.get("/content/local", params={"locale": "en"})
    assert r.status_code == HTTPStatus.INTERNAL_SERVER_ERROR


def test_local_write_requires_data(client, admin_headers) -> None:
    r = client.post("/content/local", json={"locale": "en"}, headers=admin_headers)
    assert r.status_code == HTTPStatus.BAD_REQUEST


def test_admin_routes_are_closed_without_configured_token() -> None:
    with pytest.raises(HTTPException) as excinfo:
        check_admin_token("Bearer dev", None)
    assert excinfo.value.status_code == HTTPStatus.FORBIDDEN
