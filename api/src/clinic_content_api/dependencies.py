"""Request-scoped accessors for the objects the application builds at startup."""

import logging
from typing import Optional

from fastapi import Depends, Header, HTTPException, Request, status

from clinic_content_api.config import Settings
from clinic_content_api.services.cache import DictionaryCache
from clinic_content_api.services.changes import ContentChangeFeed
from clinic_content_api.services.local_source import LocalContentSource
from clinic_content_api.services.resolver import DictionaryResolver
from clinic_content_api.services.store import ContentStore

logger = logging.getLogger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_store(request: Request) -> ContentStore:
    return request.app.state.store


def get_local_source(request: Request) -> LocalContentSource:
    return request.app.state.local_source


def get_cache(request: Request) -> DictionaryCache:
    return request.app.state.cache


def get_feed(request: Request) -> ContentChangeFeed:
    return request.app.state.feed


def get_resolver(
    store: ContentStore = Depends(get_store),  # noqa: B008
    local: LocalContentSource = Depends(get_local_source),  # noqa: B008
) -> DictionaryResolver:
    return DictionaryResolver(store, local)


def check_admin_token(authorization: Optional[str], required: Optional[str]) -> None:
    if not required:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin is not configured")
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing Bearer token")
    token = authorization.split(" ", 1)[1]
    if token != required:
        logger.warning("Admin token rejected")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")


def require_admin(
    authorization: Optional[str] = Header(default=None),
    settings: Settings = Depends(get_settings),  # noqa: B008
) -> None:
    check_admin_token(authorization, settings.admin_token)
