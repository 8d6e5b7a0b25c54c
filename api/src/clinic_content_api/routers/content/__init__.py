import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException, status

from clinic_models import Locale

router = APIRouter(prefix="/content", tags=["content"])
logger = logging.getLogger(__name__)


def parse_locale(value: Optional[Any]) -> Locale:
    if isinstance(value, str):
        try:
            return Locale(value)
        except ValueError:
            pass
    raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or missing locale parameter")


# Import submodules to register routes on the shared router.
# Static /local routes go first so they are not shadowed.
from . import endpoints_local  # noqa: E402,F401
from . import endpoints_read  # noqa: E402,F401
from . import endpoints_mutations  # noqa: E402,F401

__all__ = ["router", "parse_locale"]
