"""Translate domain errors into JSON error responses.

ApplicationError.category decides the status code (400 / 404 / 409 / 502 / 500);
the body is always an ErrorResponse.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.schemas.common import ErrorResponse
from domains.core import ApplicationError, PersistenceError

logger = logging.getLogger(__name__)


def _respond(status_code: int, body: ErrorResponse) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))


def register_exception_handlers(app: FastAPI) -> None:
    """
    注册异常处理器

    持久化失败记为 error，其余业务异常记为 warning，
    未预期的异常记录堆栈并返回 500。
    """

    @app.exception_handler(ApplicationError)
    async def application_error_handler(request: Request, exc: ApplicationError) -> JSONResponse:
        level = logging.ERROR if isinstance(exc, PersistenceError) else logging.WARNING
        logger.log(
            level,
            f"request_failed: {request.method} {request.url.path} -> {exc}",
            extra={"details": exc.details},
        )
        return _respond(
            exc.http_status_code,
            ErrorResponse(error=exc.message, code=exc.code, details=exc.details),
        )

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"request_crashed: {request.method} {request.url.path}: {type(exc).__name__}")
        return _respond(
            500,
            ErrorResponse(error=f"Internal server error: {type(exc).__name__}", details={"detail": str(exc)}),
        )


__all__ = ["register_exception_handlers"]
