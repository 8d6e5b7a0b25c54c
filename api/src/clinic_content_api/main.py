import asyncio
import logging
import os
import time
import traceback
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI, HTTPException, Request
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from clinic_content_api.config import load_settings
from clinic_content_api.dependencies import check_admin_token
from clinic_content_api.logging_config import configure_logging
from clinic_content_api.routers.content import router as content_router
from clinic_content_api.routers.gallery import router as gallery_router
from clinic_content_api.routers.site import router as site_router
from clinic_content_api.services.cache import DictionaryCache
from clinic_content_api.services.changes import ContentChangeFeed, poll_for_changes
from clinic_content_api.services.local_source import LocalContentSource
from clinic_content_api.services.store import build_store

configure_logging(
    service_name=os.getenv("LOG_SERVICE_NAME", "content-api"),
)
logger = logging.getLogger(__name__)

settings = load_settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    feed = ContentChangeFeed()
    app.state.settings = settings
    app.state.feed = feed
    app.state.store = build_store(settings, feed)
    app.state.local_source = LocalContentSource(settings.local_content_dir)
    app.state.cache = DictionaryCache()
    logger.info(
        "Content service starting",
        extra={"store_backend": settings.store_backend, "local_content_dir": settings.local_content_dir},
    )

    poller = None
    # The cache listens for as long as the application runs
    with feed.subscribe(app.state.cache.on_change):
        if settings.change_poll_seconds:
            poller = asyncio.create_task(poll_for_changes(app.state.store, feed, settings.change_poll_seconds))
        try:
            yield
        finally:
            if poller is not None:
                poller.cancel()
                with suppress(asyncio.CancelledError):
                    await poller
    logger.info("Content service stopped")


app = FastAPI(title="Clinic Content API", lifespan=lifespan)


class ErrorLoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):  # type: ignore[override]
        start = time.perf_counter()
        try:
            response = await call_next(request)
            # Log 5xx responses too (even if handled downstream)
            if 500 <= response.status_code < 600:
                duration_ms = int((time.perf_counter() - start) * 1000)
                logger.error(
                    "HTTP 5xx response",
                    extra={
                        "method": request.method,
                        "path": request.url.path,
                        "status_code": response.status_code,
                        "client": request.client.host if request.client else None,
                        "duration_ms": duration_ms,
                    },
                )
            return response
        except Exception as exc:  # noqa: BLE001 - we want to log all unhandled exceptions
            duration_ms = int((time.perf_counter() - start) * 1000)
            logger.error(
                "Unhandled exception during request",
                extra={
                    "method": request.method,
                    "path": request.url.path,
                    "client": request.client.host if request.client else None,
                    "duration_ms": duration_ms,
                    "exception_type": type(exc).__name__,
                    "exception_message": str(exc),
                    "traceback": traceback.format_exc(),
                },
            )
            raise


app.add_middleware(ErrorLoggingMiddleware)


@app.get("/health")
def healthcheck() -> dict:
    return {"status": "ok"}


app.include_router(content_router)
app.include_router(gallery_router)
app.include_router(site_router)


# --- SQLAdmin: row editor for the SQL backend, gated by ADMIN_ENABLED and a Bearer token ---
if settings.admin_enabled and settings.store_backend == "sql":
    from sqladmin import Admin, ModelView

    from clinic_content_api.db import get_engine
    from clinic_models import ContentRow, GalleryImageRow

    admin = Admin(app=app, engine=get_engine())

    class ContentRowAdmin(ModelView, model=ContentRow):
        name = "Content"
        can_create = True
        can_edit = True
        can_delete = False
        column_list = [ContentRow.locale, ContentRow.section, ContentRow.version, ContentRow.updated_at]
        column_default_sort = [(ContentRow.section, False), (ContentRow.locale, False)]
        column_searchable_list = [ContentRow.section]
        form_excluded_columns = [ContentRow.id, ContentRow.created_at, ContentRow.updated_at]

    class GalleryImageAdmin(ModelView, model=GalleryImageRow):
        name = "Gallery Images"
        column_list = [
            GalleryImageRow.case_id,
            GalleryImageRow.image_type,
            GalleryImageRow.image_number,
            GalleryImageRow.locale,
            GalleryImageRow.description,
        ]
        column_default_sort = [(GalleryImageRow.case_id, False), (GalleryImageRow.image_number, False)]
        form_excluded_columns = [GalleryImageRow.id, GalleryImageRow.created_at, GalleryImageRow.updated_at]

    @app.middleware("http")
    async def admin_auth_middleware(request: Request, call_next):  # type: ignore[override]
        if request.url.path.startswith("/admin"):
            try:
                check_admin_token(request.headers.get("Authorization"), settings.admin_token)
            except HTTPException as exc:
                return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})
        return await call_next(request)

    admin.add_view(ContentRowAdmin)
    admin.add_view(GalleryImageAdmin)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("clinic_content_api.main:app", host="0.0.0.0", port=8000, log_config=None)
