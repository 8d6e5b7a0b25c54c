import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, Response
from fastapi.responses import RedirectResponse

from clinic_models import DEFAULT_LOCALE, Locale

from clinic_content_api.dependencies import get_cache, get_resolver
from clinic_content_api.services.cache import DictionaryCache
from clinic_content_api.services.resolver import DictionaryResolver

router = APIRouter(tags=["site"])
logger = logging.getLogger(__name__)


@router.get("/", include_in_schema=False)
def root_redirect() -> RedirectResponse:
    return RedirectResponse(url=f"/site/{DEFAULT_LOCALE.value}")


@router.get("/site/{locale}", response_model=Dict[str, Any])
async def site_dictionary(
    locale: Locale,
    response: Response,
    resolver: DictionaryResolver = Depends(get_resolver),  # noqa: B008
    cache: DictionaryCache = Depends(get_cache),  # noqa: B008
) -> Dict[str, Any]:
    """Dictionary for the public pages. Always answers, falling back as far as the built-in copy."""
    resolved = await cache.load(locale, resolver)
    response.headers["Content-Language"] = locale.value
    response.headers["X-Content-Source"] = resolved.source.value
    return resolved.dictionary
