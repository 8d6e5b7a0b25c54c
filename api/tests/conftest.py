"""Common pytest fixtures for API tests.

Tests run against a throwaway SQLite database and locale directory created
under a temp dir; the environment is set up BEFORE the app is imported.
"""

import os
import shutil
import tempfile
from collections.abc import Iterator
from pathlib import Path

_TMP_ROOT = Path(tempfile.mkdtemp(prefix="clinic-content-tests-"))

os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TMP_ROOT / 'content.db'}")
os.environ.setdefault("CONTENT_STORE_BACKEND", "sql")
os.environ.setdefault("LOCAL_CONTENT_DIR", str(_TMP_ROOT / "locales"))
os.environ.setdefault("ADMIN_ENABLED", "true")
os.environ.setdefault("ADMIN_TOKEN", "dev")
os.environ.setdefault("LOG_JSON", "false")

import pytest
from clinic_content_api.db import get_engine
from clinic_content_api.main import app
from fastapi.testclient import TestClient
from sqlalchemy import delete
from sqlmodel import Session, SQLModel

from clinic_models import ContentRow, GalleryImageRow

SQLModel.metadata.create_all(get_engine())


@pytest.fixture(scope="session")
def client() -> Iterator[TestClient]:
    with TestClient(app) as c:
        yield c


@pytest.fixture(autouse=True)
def _clean_state() -> Iterator[None]:
    # Ensure a clean state before each test to avoid cross-test interference
    with Session(get_engine()) as session:
        session.exec(delete(GalleryImageRow))
        session.exec(delete(ContentRow))
        session.commit()
    shutil.rmtree(os.environ["LOCAL_CONTENT_DIR"], ignore_errors=True)
    cache = getattr(app.state, "cache", None)
    if cache is not None:
        cache.invalidate()
    yield
    app.dependency_overrides.clear()


@pytest.fixture
def local_dir() -> Path:
    path = Path(os.environ["LOCAL_CONTENT_DIR"])
    path.mkdir(parents=True, exist_ok=True)
    return path


@pytest.fixture
def admin_headers() -> dict:
    return {"Authorization": "Bearer dev"}


@pytest.fixture
def sample_dictionary() -> dict:
    return {
        "seo": {"title": "Clinic", "description": "Orthodontics", "keywords": "braces"},
        "navbar": {"home": "Home", "faq": "FAQ"},
        "pages": {
            "faq": {"title": "FAQ", "questions": [{"question": "Does it hurt?", "answer": "Rarely."}]},
            "services": {"title": "Services", "services_list": ["Braces"], "descriptions": ["Metal braces"]},
        },
    }
