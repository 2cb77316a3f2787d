"""FastAPI application for the note store.

``app`` is built at import time for ``uvicorn app.main:app``; tests call
``create_application`` with their own NoteService instead.
"""

import time
import uuid
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.core.events import create_start_handler, create_stop_handler
from app.core.exceptions import register_exception_handlers
from app.routes.v1.router import api_router
from domains.core import bind_request_context, clear_request_context, configure_logging, get_logger, get_settings
from domains.note_hub.services.note_service import NoteService

configure_logging(service_name="notepad-api")
logger = get_logger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Log one ``http_request`` event per API call, tagged with a request id."""

    SKIP_PREFIXES = ("/health", "/docs", "/redoc", "/favicon.ico")

    async def dispatch(self, request: Request, call_next) -> Response:
        path = request.url.path
        if path.startswith(self.SKIP_PREFIXES) or path.endswith("/openapi.json"):
            return await call_next(request)

        request_id = request.headers.get("X-Request-ID") or uuid.uuid4().hex[:8]
        bind_request_context(request_id)
        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as e:
            logger.error(
                "http_request_error",
                method=request.method,
                path=path,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
                error_type=type(e).__name__,
                error=str(e),
            )
            raise
        else:
            logger.info(
                "http_request",
                method=request.method,
                path=path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 2),
            )
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_request_context()


def create_application(note_service: Optional[NoteService] = None) -> FastAPI:
    """
    Build the API.

    Args:
        note_service: 预先构建的笔记服务；None 则启动时按 NOTEPAD_* 配置创建
    """
    settings = get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await create_start_handler(app)()
        try:
            yield
        finally:
            await create_stop_handler(app)()

    app = FastAPI(
        title=settings.project_name,
        description="笔记存储 REST API",
        version=settings.version,
        openapi_url=f"{settings.api_prefix}/openapi.json",
        lifespan=lifespan,
    )
    if note_service is not None:
        app.state.note_service = note_service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    # 后添加的中间件先执行
    app.add_middleware(RequestLoggingMiddleware)

    app.include_router(api_router, prefix=settings.api_prefix)
    register_exception_handlers(app)

    @app.get("/health")
    async def health_check():
        service = getattr(app.state, "note_service", None)
        return {
            "status": "healthy",
            "version": settings.version,
            "notes": service.store.count() if service else 0,
        }

    return app


app = create_application()


def run() -> None:
    """``notepad-api`` / ``notepad serve`` entry point."""
    import uvicorn

    settings = get_settings()
    logger.info("api_serving", host=settings.host, port=settings.port, storage=settings.storage_backend)
    uvicorn.run(
        "app.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    run()
